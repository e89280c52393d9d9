r"""
Syntagma composite actions.

Overview
- Action[_T]: grammar node owning an ordered tuple of child nodes (leaf
  options, nested actions or selectors), optionally introduced by a name
  token matching one of its aliases.
- @action(...): build an Action and bind a host computation to it.

Validation
1. Name match: when the action has names and 'named' is true, the first token
   must equal one of the aliases (exact string equality). A mismatch, or an
   empty slice, is invalid with nothing consumed. A match consumes one token
   and records the alias.
2. Children are validated in order against the remaining slice, each one
   starting where the previous one stopped. The first invalid child makes the
   whole action invalid; later siblings are never validated.
3. Consumption = name token (0 or 1) + the sum of the children's consumption,
   never more than the slice length. Trailing tokens are left for the caller.

Parsing
- Children are parsed recursively into a dict. Nested actions contribute their
  full mapping, leaves their converted value. Keys come from Node.key(): the
  matched alias, else the declared name, else the child's position.

Execution
- The host computation receives the parsed mapping and its return value is
  the action's result. Bind it with @action(...) or override execution() in a
  subclass. An action without a computation executes to None.

Quick example:
    >>> from syntagma import action, StringOption
    >>> @action("push", "p", options=[StringOption("remote")])
    ... def push(values):
    ...     return f"pushing to {values['remote']}"
    ...
    >>> push.run("p origin")
    'pushing to origin'
"""
import logging

from .nodes import Node
from .outcomes import Outcome
from .utils import Unset, rename

logger = logging.getLogger(__name__)


def _sanitize_options(cls, options, /):
    """
    Internal: children must be grammar nodes; returned as a tuple.

    - Names are unique across siblings; they key the parsed mapping.
    """
    options = tuple(options)
    names = set()
    for option in options:
        if not isinstance(option, Node):
            raise TypeError(f"{cls.__typename__} options must be grammar nodes")
        if shared := names & option._keys():
            raise ValueError(f"{cls.__typename__} options cannot share the name {min(shared)!r}")
        names |= option._keys()
    return options


class Action[_T](Node):
    """
    Composite grammar node.

    Parameters
    - names: zero or more aliases. Without names the action is positional.
    - options: Iterable[Node], the ordered children.
    - named: when False the aliases are not matched against the input; the
      first alias then only keys the action's value in its parent.
    """

    __introspectable__ = (
        "names",
        "options",
        "named",
    )

    def __init__(self, *names, options=(), named=True):
        super().__init__(*names)
        self._options = _sanitize_options(type(self), options)
        self._named = bool(named)
        self._callback = Unset

    def _match_name(self, tokens, /):
        """
        Return (alias, offset) when the name check passes, None otherwise.
        """
        if not (self._named and self._names):
            return None, 0
        if not tokens or tokens[0] not in self._names:
            logger.debug("%r: no alias matches %r", self, tokens[0] if tokens else None)
            return None
        return tokens[0], 1

    def _validation(self, tokens, /):
        if (match := self._match_name(tokens)) is None:
            return Outcome.reject(self, tokens)
        alias, offset = match

        children = []
        for option in self._options:
            outcome = option.validate(tokens[offset:])
            children.append(outcome)
            if not outcome.valid:
                logger.debug("%r: child %r failed at token %d", self, option, offset)
                return Outcome.reject(self, tokens, alias=alias, children=children)
            offset += outcome.consumed

        if offset > len(tokens):
            return Outcome.reject(self, tokens, alias=alias, children=children)
        return Outcome.accept(self, tokens, offset, alias=alias, children=children)

    def _parser(self, outcome, /):
        values = {}
        for index, (option, child) in enumerate(zip(self._options, outcome.children)):
            values[option.key(child, index)] = option.parse(child)
        return values

    def execution(self, values, /):
        """
        The action's computation: receives the parsed mapping, returns the
        result. Defaults to the callback bound by @action(...), or None.
        """
        if self._callback is Unset:
            return None
        return self._callback(values)

    def _execution(self, outcome, value, /):
        return self.execution(value)


def action(*names, options=(), named=True):
    """
    Decorator/factory binding a host computation to a new Action.

    Usage
        @action("push", "p", options=[StringOption("remote")])
        def push(values): ...

    The decorated function receives the parsed value mapping; the decorator
    returns the configured Action.
    """
    action = Action(*names, options=options, named=named)

    @rename("action")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@action() must be applied to a callable")
        if action._callback is not Unset:
            raise TypeError("@action() must be applied only once")
        action._callback = callback
        return action

    return wrapper


__all__ = (
    "Action",
    "action",
)
