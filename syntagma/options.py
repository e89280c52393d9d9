r"""
Syntagma leaf options.

Overview
- Option[_T]: leaf node consuming exactly one token and converting it through
  a host-supplied converter ('type').
- NumberOption: base-10 numbers (int when integral in form, float otherwise).
- StringOption: any present token, taken verbatim.

Matching
- Conversion runs eagerly during validation and its payload is stored on the
  outcome; parse() only exposes it. Validating the same option against many
  alternatives therefore never commits to a value.
- A converter raising ValueError or TypeError means "no match": the outcome is
  invalid and nothing is consumed. Any other exception propagates.
- When 'choices' is given, the converted value must be one of them.

Metadata (sanitized on construction)
- name: Unset | str. Leaves never match a name token; the name only keys the
  value in the parent action (positional leaves are keyed by index).
- type: Callable[[str], _T].
- choices: Iterable; duplicates rejected unless a Set.

Quick example:
    >>> from syntagma import NumberOption
    >>> count = NumberOption("count")
    >>> outcome = count.validate(["42"])
    >>> outcome.valid, outcome.consumed, count.parse(outcome)
    (True, 1, 42)
"""
import builtins
import decimal
import logging
import re
from collections.abc import Iterable, Set

from .nodes import Node
from .outcomes import Outcome
from .utils import Unset

logger = logging.getLogger(__name__)

_NUMBER = re.compile(r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?)", re.IGNORECASE | re.ASCII)
_INTEGER = re.compile(r"[+-]?\d+", re.ASCII)


def _number(token, /):
    """
    Convert a base-10 numeric token. Surrounding whitespace is ignored; NaN,
    hexadecimal, digit separators and non-ASCII digits are rejected.

    Integral forms become int regardless of length, everything else float.
    """
    if not _NUMBER.fullmatch(token := token.strip()):
        raise ValueError(f"not a base-10 number: {token!r}")
    if _INTEGER.fullmatch(token):
        # int(str) is capped by sys.get_int_max_str_digits(); Decimal is not.
        return int(decimal.Decimal(token))
    return float(token)


def _sanitize_choices(cls, choices, /):
    """
    Internal: validate 'choices' and normalize it for membership checks.

    - Sets are frozen as-is.
    - Other iterables must not contain duplicates and become a tuple.
    """
    if not isinstance(choices, Iterable) or isinstance(choices, str):
        raise TypeError(f"{cls.__typename__} 'choices' must be iterable")
    if isinstance(choices, Set):
        return frozenset(choices)
    sanitized = []
    for choice in choices:
        if choice in sanitized:
            raise ValueError(f"{cls.__typename__} 'choices' cannot contain duplicates")
        sanitized.append(choice)
    return tuple(sanitized)


class Option[_T](Node):
    """
    Leaf option converting one token with a host-supplied converter.

    Parameters
    - name: Unset | str
      Key of the value in the parent action's mapping.
    - type: Callable[[str], _T]
      Converter; ValueError/TypeError mean the token does not match.
    - choices: Iterable[_T]
      Accepted converted values (empty = anything).
    """

    __introspectable__ = (
        "names",
        "type",
        "choices",
    )

    def __init__(self, name=Unset, /, type=str, *, choices=()):
        super().__init__(*(() if name is Unset else (name,)))
        if not callable(type):
            raise TypeError(f"{builtins.type(self).__typename__} 'type' must be callable")
        self._type = type
        self._choices = _sanitize_choices(builtins.type(self), choices)

    @property
    def name(self):
        """
        The option's name, or None for a positional option.
        """
        return self._names[0] if self._names else None

    def convert(self, token, /):
        """
        Convert a raw token; raise ValueError/TypeError when it does not fit.
        """
        return self._type(token)

    def _validation(self, tokens, /):
        if not tokens:
            return Outcome.reject(self, tokens)
        try:
            value = self.convert(tokens[0])
        except (ValueError, TypeError) as exception:
            logger.debug("%r rejected %r: %s", self, tokens[0], exception)
            return Outcome.reject(self, tokens)
        if self._choices and value not in self._choices:
            logger.debug("%r rejected %r: not among the choices", self, tokens[0])
            return Outcome.reject(self, tokens)
        return Outcome.accept(self, tokens, 1, payload=value)

    def _parser(self, outcome, /):
        return outcome.payload

    def _execution(self, outcome, value, /):
        return value


class NumberOption(Option[int | float]):
    """
    Leaf option accepting base-10 numbers.

        >>> NumberOption("n").validate(["abc"]).valid
        False
    """
    __displayable__ = ("names", "choices")

    def __init__(self, name=Unset, /, *, choices=()):
        super().__init__(name, _number, choices=choices)


class StringOption(Option[str]):
    """
    Leaf option accepting any token verbatim.
    """
    __displayable__ = ("names", "choices")

    def __init__(self, name=Unset, /, *, choices=()):
        super().__init__(name, str, choices=choices)


__all__ = (
    "Option",
    "NumberOption",
    "StringOption",
)
