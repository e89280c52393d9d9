"""
Validation outcomes.

Node.validate() never mutates the grammar tree. It returns an Outcome, an
immutable record of what happened on that call:

- valid: whether the slice matched the node's grammar.
- consumed: how many tokens the match used (defined only when valid).
- alias: which alias matched the name token, if a name was required.
- payload: the eagerly converted value of a leaf option (exposed to callers
  only through Node.parse).
- children: outcomes of the child nodes that were validated, in order. For an
  invalid composite this stops at the first failing child.
- selected: for selectors, the index of the chosen alternative in both the
  selector's option tuple and in children.

Outcomes compare equal when they record the same data for the same node, so
validating the same slice twice yields equal outcomes.
"""
from typing import final

from rich.text import Text
from rich.tree import Tree

from .faults import UndefinedReadError
from .utils import Unset


@final
class Outcome:
    """
    Immutable result of validating one node against one token slice.
    """
    __slots__ = (
        "_node",
        "_tokens",
        "_valid",
        "_consumed",
        "_alias",
        "_payload",
        "_children",
        "_selected",
    )

    def __init__(
            self,
            node,
            tokens,
            /,
            *,
            valid,
            consumed=Unset,
            alias=None,
            payload=Unset,
            children=(),
            selected=None
    ):
        tokens = tuple(tokens)
        if valid and not isinstance(consumed, int):
            raise TypeError("valid outcome must specify the consumed token count")
        if valid and not 0 <= consumed <= len(tokens):
            raise ValueError("consumed token count exceeds the validated slice")
        # Slots are written once here; __setattr__ below seals the record.
        for name, value in (
                ("node", node),
                ("tokens", tokens),
                ("valid", bool(valid)),
                ("consumed", consumed if valid else Unset),
                ("alias", alias),
                ("payload", payload),
                ("children", tuple(children)),
                ("selected", selected),
        ):
            super().__setattr__("_" + name, value)

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__name__!r} object is read-only")

    def __delattr__(self, name, /):
        raise AttributeError(f"{type(self).__name__!r} object is read-only")

    @classmethod
    def accept(cls, node, tokens, consumed, /, **fields):
        """
        Build a valid outcome consuming the given number of tokens.
        """
        return cls(node, tokens, valid=True, consumed=consumed, **fields)

    @classmethod
    def reject(cls, node, tokens, /, **fields):
        """
        Build an invalid outcome; consumed stays undefined.
        """
        fields.pop("consumed", None)
        fields.pop("selected", None)
        fields.pop("payload", None)
        return cls(node, tokens, valid=False, **fields)

    @property
    def node(self):
        return self._node

    @property
    def tokens(self):
        return self._tokens

    @property
    def valid(self):
        return self._valid

    @property
    def consumed(self):
        """
        Number of tokens used by the match.

        Raises
        - UndefinedReadError: when the outcome is invalid.
        """
        if not self._valid:
            raise UndefinedReadError(
                "token consumption is only defined for a valid outcome",
                hint="check 'valid' before reading 'consumed'",
            )
        return self._consumed

    @property
    def matched(self):
        """
        The tokens consumed by the match (empty when invalid).
        """
        return self._tokens[:self._consumed] if self._valid else ()

    @property
    def alias(self):
        return self._alias

    @property
    def payload(self):
        return self._payload

    @property
    def children(self):
        return self._children

    @property
    def selected(self):
        return self._selected

    @property
    def chosen(self):
        """
        Outcome of the selected alternative, or None when nothing was selected.
        """
        return self._children[self._selected] if self._selected is not None else None

    def __eq__(self, other, /):
        if not isinstance(other, Outcome):
            return NotImplemented
        return (
            self._node is other._node and
            self._tokens == other._tokens and
            self._valid == other._valid and
            self._consumed == other._consumed and
            self._alias == other._alias and
            self._payload == other._payload and
            self._children == other._children and
            self._selected == other._selected
        )

    __hash__ = None

    def __repr__(self):
        state = f"consumed={self._consumed!r}" if self._valid else "invalid"
        return f"outcome({self._node!r}, {state})"

    def __rich__(self):
        """
        Render the outcome as a tree: one line per validated node with its
        consumption (or a cross when it failed) and the selected alternative.
        """
        def label(outcome):
            node = outcome._node
            title = outcome._alias or (node.names[0] if node.names else "<positional>")
            if outcome._valid:
                state = Text(f"✓ {outcome._consumed} token(s)", "green")
            else:
                state = Text("✗", "bold red")
            return Text.assemble((type(node).__typename__, "dim"), " ", (title, "bold"), " ", state)

        def grow(tree, outcome):
            for index, child in enumerate(outcome._children):
                branch = tree.add(label(child), style="" if index == outcome._selected or outcome._selected is None else "dim")
                grow(branch, child)
            return tree

        return grow(Tree(label(self)), self)


__all__ = (
    "Outcome",
)
