r"""
Syntagma grammar nodes: the shared capability set.

Overview
- Node: abstract base for every declared unit of a command grammar. Concrete
  kinds form a closed hierarchy:
  • Option[_T] (leaf, consumes exactly one token), see syntagma.options.
  • Action[_T] (composite, ordered children), see syntagma.actions.
  • ActionSelector[_T] (composite of alternative actions), see
    syntagma.selection.

- Protocol shared by all nodes
  • validate(tokens) -> Outcome: match a token slice; never raises on a
    grammar mismatch and never mutates the node.
  • parse(outcome) -> value: build the node's value from a valid outcome.
  • execute(outcome, value) -> result: run the node's computation.
  • run(prompt) -> result | None: validate, parse and execute in one call.

- NodeType metaclass
  • __typename__ derived from the class name (Action -> "action",
    ActionSelector -> "action-selector") and used in diagnostics.
  • Read-only properties for every name listed in __introspectable__.
  • Stable __repr__/__rich_repr__.

Static trees
- Nodes are configured once at construction and never written afterwards
  (handler binding through decorators happens at declaration time). All
  per-call state lives in Outcome and Invocation objects, so one tree can
  serve any number of invocations, including concurrent ones.

Preconditions
- parse/execute require a valid outcome produced by the same node; anything
  else raises IllegalStateError or ForeignOutcomeError (see syntagma.faults).
"""
import functools
import logging
import operator
import re
from collections.abc import Iterable

from .faults import IllegalStateError, ForeignOutcomeError
from .invocation import Invocation, normalize
from .outcomes import Outcome
from .utils import *

logger = logging.getLogger(__name__)


class NodeType(type):
    """
    Metaclass giving nodes a typename, read-only introspectable properties and
    stable representations.

    Conventions
    - __introspectable__ lists the public, read-only fields; each one mirrors a
      private "_{name}" attribute set by __init__.
    - __displayable__ (if set) narrows what __rich_repr__ shows.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Concise representation, e.g. action(names=('push', 'p'), ...).
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_names(cls, names, /):
    """
    Internal: validate alias names and return them as an ordered tuple.

    - Each name must be a string that is not empty after trimming.
    - Names are trimmed; duplicates are rejected.
    - The first name is the declared name used to key values when the node was
      not matched by name.
    """
    sanitized = []
    for name in names:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif name in sanitized:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        sanitized.append(name)
    return tuple(sanitized)


def _sanitize_tokens(tokens, /):
    """
    Internal: freeze a token slice into a tuple of strings.
    """
    if isinstance(tokens, str) or not isinstance(tokens, Iterable):
        raise TypeError("validate() argument must be a sequence of strings")
    tokens = tuple(tokens)
    if not all(isinstance(token, str) for token in tokens):
        raise TypeError("validate() argument must be a sequence of strings")
    return tokens


class Node(metaclass=NodeType):
    """
    Abstract grammar node.

    Subclasses implement _validation(tokens) -> Outcome, _parser(outcome) and
    _execution(outcome, value). The public methods add the argument checks and
    preconditions shared by every node kind.
    """

    __introspectable__ = ("names",)

    def __init__(self, *names):
        self._names = _sanitize_names(type(self), names)

    def key(self, outcome, index, /):
        """
        Key under which a parent action stores this node's value.

        The alias that matched the name token wins, then the declared (first)
        name, then the node's position among its siblings.
        """
        if outcome.alias is not None:
            return outcome.alias
        if self._names:
            return self._names[0]
        return index

    def _keys(self):
        """
        Every string key this node can be stored under in a parent mapping.
        """
        return frozenset(self._names)

    def validate(self, tokens, /, *, exhaustive=False):
        """
        Match a token slice against this node.

        Parameters
        - tokens: sequence of strings; only the front of the slice is matched.
        - exhaustive: when True, a match leaving trailing tokens unconsumed is
          reported as invalid.

        Returns
        - Outcome: always a fresh record; a mismatch is an invalid outcome.
        """
        tokens = _sanitize_tokens(tokens)
        outcome = self._validation(tokens)
        if exhaustive and outcome.valid and outcome.consumed < len(tokens):
            logger.debug("%r left %d token(s) unconsumed", self, len(tokens) - outcome.consumed)
            outcome = Outcome.reject(self, tokens, alias=outcome.alias, children=outcome.children)
        return outcome

    def _validation(self, tokens, /):
        raise NotImplementedError

    def _ensure(self, outcome, operation, /):
        if not isinstance(outcome, Outcome):
            raise TypeError(f"{operation}() argument must be an outcome")
        if outcome.node is not self:
            raise ForeignOutcomeError(
                f"{operation}() received an outcome produced by {outcome.node!r}",
                hint=f"pass the outcome returned by this {type(self).__typename__}'s validate()",
            )
        if not outcome.valid:
            raise IllegalStateError(
                f"{operation}() requires a valid outcome",
                hint="check 'valid' on the outcome before parsing or executing",
            )

    def parse(self, outcome, /):
        """
        Build this node's value from a valid outcome of this node.

        Raises
        - IllegalStateError: the outcome is invalid.
        - ForeignOutcomeError: the outcome belongs to another node.
        """
        self._ensure(outcome, "parse")
        return self._parser(outcome)

    def _parser(self, outcome, /):
        raise NotImplementedError

    def execute(self, outcome, value=Unset, /):
        """
        Run this node's computation and return its result.

        value is the parsed value of the outcome; it is computed with parse()
        when omitted.
        """
        self._ensure(outcome, "execute")
        if value is Unset:
            value = self._parser(outcome)
        return self._execution(outcome, value)

    def _execution(self, outcome, value, /):
        raise NotImplementedError

    def __invoke__(self, prompt=Unset, /, *, exhaustive=False, shell=False):
        """
        Validate a prompt and return the Invocation tracking it.

        prompt follows syntagma.invocation.normalize: Unset reads sys.argv[1:],
        a string is tokenized, an iterable of strings is used as-is.
        """
        return Invocation(self, shell=shell).validate(normalize(prompt), exhaustive=exhaustive)

    def run(self, prompt=Unset, /, *, exhaustive=False):
        """
        Validate, parse and execute; return the result, or None on mismatch.
        """
        return Invocation(self).run(normalize(prompt), exhaustive=exhaustive)


__all__ = (
    "Node",
)

# Keep the metaclass out of star-imports; it is not part of the public API.
del NodeType
