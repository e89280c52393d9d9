r"""
Syntagma action selectors.

Overview
- ActionSelector[_T]: composite whose children are alternative Actions. After
  its own optional name token, every alternative is validated against the
  same remaining slice (the slice is not partitioned) and exactly one valid
  alternative is selected.
- SelectionMode: the policy picking that alternative.

Selection modes
- FIRST: alternatives in declared order, the first valid one wins; the rest
  are not validated.
- LAST: every alternative is validated, the last valid one wins.
- BEST_MATCH_FIRST: every alternative is validated, the one consuming the
  most tokens wins; on a tie the earliest declared wins.
- BEST_MATCH_LAST: same, but a tie goes to the latest declared.

Results
- valid iff some alternative was selected; consumption = own name token (0 or
  1) + the selected alternative's consumption.
- The selected alternative is recorded as an index (Outcome.selected) into the
  selector's options, which is also its position in Outcome.children.
- parse() returns the selected alternative's mapping unchanged: selectors add
  no naming level of their own. An unnamed selector nested in an action is
  keyed by its selected alternative.
- execute() runs the selected alternative and adopts its result.

Quick example:
    >>> from syntagma import Action, ActionSelector, SelectionMode, StringOption
    >>> short = Action("get", options=[StringOption("key")])
    >>> long = Action("get", options=[StringOption("key"), StringOption("default")])
    >>> selector = ActionSelector(actions=[short, long], select=SelectionMode.BEST_MATCH_FIRST)
    >>> selector.validate(["get", "a", "b"]).selected
    1
"""
import logging
from enum import IntEnum

from .actions import Action
from .outcomes import Outcome

logger = logging.getLogger(__name__)


class SelectionMode(IntEnum):
    FIRST            = 0
    LAST             = 1
    BEST_MATCH_FIRST = 2
    BEST_MATCH_LAST  = 3


def _sanitize_actions(cls, actions, /):
    """
    Internal: alternatives must be Actions; at least one is required.
    """
    actions = tuple(actions)
    if not actions:
        raise ValueError(f"{cls.__typename__} must specify at least one action")
    for action in actions:
        if not isinstance(action, Action):
            raise TypeError(f"{cls.__typename__} alternatives must be actions")
    return actions


class ActionSelector[_T](Action[_T]):
    """
    Composite choosing one alternative Action per the selection mode.

    Parameters
    - names: zero or more aliases matched before the alternatives.
    - actions: Iterable[Action], the alternatives in declared order.
    - named: whether the aliases are matched against the input.
    - select: SelectionMode (or its integer value).
    """

    __introspectable__ = (
        "names",
        "options",
        "named",
        "select",
    )

    def __init__(self, *names, actions=(), named=True, select=SelectionMode.FIRST):
        actions = _sanitize_actions(type(self), actions)
        try:
            select = SelectionMode(select)
        except ValueError:
            raise ValueError(f"{type(self).__typename__} 'select' must be a selection mode") from None
        super().__init__(*names, named=named)
        # Alternatives may share names; only one of them is ever parsed.
        self._options = actions
        self._select = select

    @property
    def actions(self):
        return self.options

    def key(self, outcome, index, /):
        if outcome.alias is None and not self._names and outcome.valid:
            return self._options[outcome.selected].key(outcome.chosen, index)
        return super().key(outcome, index)

    def _keys(self):
        if self._names:
            return super()._keys()
        return frozenset().union(*(action._keys() for action in self._options))

    def _choose(self, tokens, /):
        """
        Validate alternatives per the selection mode.

        Returns (children, selected) where selected is an index or None.
        """
        children = []
        selected = None
        best = -1

        for index, action in enumerate(self._options):
            outcome = action.validate(tokens)
            children.append(outcome)
            if not outcome.valid:
                continue
            match self._select:
                case SelectionMode.FIRST:
                    return children, index
                case SelectionMode.LAST:
                    selected = index
                case SelectionMode.BEST_MATCH_FIRST:
                    if outcome.consumed > best:
                        selected, best = index, outcome.consumed
                case SelectionMode.BEST_MATCH_LAST:
                    if outcome.consumed >= best:
                        selected, best = index, outcome.consumed

        return children, selected

    def _validation(self, tokens, /):
        if (match := self._match_name(tokens)) is None:
            return Outcome.reject(self, tokens)
        alias, offset = match

        children, selected = self._choose(tokens[offset:])
        if selected is None:
            logger.debug("%r: no alternative matched", self)
            return Outcome.reject(self, tokens, alias=alias, children=children)

        logger.debug("%r selected alternative %d (%s)", self, selected, self._select.name)
        return Outcome.accept(
            self,
            tokens,
            offset + children[selected].consumed,
            alias=alias,
            children=children,
            selected=selected,
        )

    def _parser(self, outcome, /):
        return self._options[outcome.selected].parse(outcome.chosen)

    def _execution(self, outcome, value, /):
        return self._options[outcome.selected].execute(outcome.chosen, value)


__all__ = (
    "ActionSelector",
    "SelectionMode",
)
