"""
Syntagma faults (caller-contract errors) and rendering.

Scope
- FaultCode: stable numeric identifiers for every fault the engine raises.
- GrammarException: base type carrying a message and read-only options that
  knows how to render itself through rich.
- trigger(): central entry point to surface a fault, honoring shell mode.

What is NOT a fault
- A token sequence that does not match the grammar (including a token that
  fails conversion inside a leaf option). That is an expected outcome and is
  reported only through Outcome.valid / Invocation.is_valid.
- A badly declared grammar. Construction raises TypeError/ValueError directly,
  like any other misuse of a Python API.

Integration
- Nodes and invocations raise IllegalStateError / ForeignOutcomeError when a
  precondition of parse/execute (or of a read) does not hold.
- In shell mode the fault is printed on the stderr console and the process
  exits with status 1; otherwise the exception is raised.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - lifecycle (211xx): operations invoked out of order or reads of state
      that is not defined yet.
    - ownership (212xx): outcomes handed to a node that did not produce them.
    """
    # --- lifecycle errors (211xx) ---
    ILLEGAL_STATE   = 21101
    UNDEFINED_READ  = 21102

    # --- ownership errors (212xx) ---
    FOREIGN_OUTCOME = 21201

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class GrammarException(Exception):
    """
    base fault: message + options (code, title, hint, shell, colorful, fancy).

    subclasses pick their defaults through __code__ and __title__.
    """
    __code__ = FaultCode.ILLEGAL_STATE
    __title__ = "illegal state"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType({
            "code": type(self).__code__,
            "title": type(self).__title__,
            "hint": None,
            "shell": False,
            "colorful": True,
            "fancy": False,
        } | options)
        super().__init__(message if message is not Unset else self.options["title"])

    @property
    def code(self):
        return self.options["code"]

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",

            # body
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if self.options["colorful"] else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", "syntagma"), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(self.options["code"].normalize(), styler("code")),
            " | ",
            text(self.options["title"].title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        renders = [message]
        if self.options["hint"]:
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(self.options["hint"], styler("hint"))))

        if self.options["fancy"]:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options["shell"]:
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class IllegalStateError(GrammarException):
    __code__ = FaultCode.ILLEGAL_STATE
    __title__ = "illegal state"


class UndefinedReadError(IllegalStateError):
    __code__ = FaultCode.UNDEFINED_READ
    __title__ = "undefined read"


class ForeignOutcomeError(GrammarException):
    __code__ = FaultCode.FOREIGN_OUTCOME
    __title__ = "foreign outcome"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods.
    - options are merged into the fault via copy.replace before triggering.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "GrammarException",
    "IllegalStateError",
    "UndefinedReadError",
    "ForeignOutcomeError",
    "trigger",
)
