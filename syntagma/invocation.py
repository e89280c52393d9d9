"""
Invocation lifecycle: validate -> parse -> execute.

An Invocation tracks one call against one grammar node. The node itself stays
read-only; every piece of per-call state (outcome, value, result) lives here
and is discarded when the invocation is validated again.

Stages
- UNVALIDATED: nothing has been matched yet.
- INVALID: the last validate() did not match (terminal for that input).
- VALID: the last validate() matched; tokens_used is defined.
- PARSED: value is defined.
- EXECUTED: result is defined.

Each transition is driven by an explicit call. run() chains the three calls
and stops at the first invalid state. Calling an operation out of order, or
reading state the current stage does not define, is a caller contract
violation surfaced through syntagma.faults.trigger().

Entry points
- invoke(node, prompt): validate a prompt and return the Invocation.
- run(node, prompt): validate, parse and execute; return the result or None.

Prompt normalization (see normalize)
- Unset: read tokens from sys.argv[1:].
- str: split with syntagma.tokens.tokenize.
- Iterable[str]: tokens used exactly as given (empty strings included, since a
  quoted "" is a legitimate token).
"""
import logging
import sys
from collections.abc import Iterable
from enum import IntEnum

from .faults import IllegalStateError, UndefinedReadError, trigger
from .tokens import tokenize
from .utils import Unset

logger = logging.getLogger(__name__)


class Stage(IntEnum):
    UNVALIDATED = 0
    INVALID     = 1
    VALID       = 2
    PARSED      = 3
    EXECUTED    = 4


def normalize(prompt=Unset, /):
    """
    Turn a prompt into a list of tokens.

    Raises
    - TypeError: when prompt is not Unset/str/Iterable[str], or when an
      iterable contains a non-string element.
    """
    if prompt is Unset:
        return sys.argv[1:]
    if isinstance(prompt, str):
        return tokenize(prompt)
    if isinstance(prompt, Iterable):
        tokens = list(prompt)
        if all(isinstance(token, str) for token in tokens):
            return tokens
    raise TypeError("prompt must be a string or an iterable of strings")


class Invocation:
    """
    Per-call state of a grammar node.

    Read surface
    - stage, is_valid: always defined.
    - outcome: defined once validated.
    - tokens_used: defined when valid.
    - value: defined once parsed.
    - result: defined once executed.

    Parameters
    - node: any object implementing validate/parse/execute (a grammar Node).
    - shell: when True, contract violations are printed on the stderr console
      and the process exits with status 1 instead of raising.
    """

    def __init__(self, node, /, *, shell=False):
        self._node = node
        self._shell = bool(shell)
        self._reset()

    def _reset(self):
        self._stage = Stage.UNVALIDATED
        self._outcome = Unset
        self._value = Unset
        self._result = Unset

    def _fault(self, fault, /):
        trigger(fault, shell=self._shell)

    @property
    def node(self):
        return self._node

    @property
    def stage(self):
        return self._stage

    @property
    def is_valid(self):
        return self._stage >= Stage.VALID

    @property
    def outcome(self):
        if self._outcome is Unset:
            self._fault(UndefinedReadError("no outcome before validate()", hint="call validate() or run() first"))
        return self._outcome

    @property
    def tokens_used(self):
        if not self.is_valid:
            self._fault(UndefinedReadError(
                f"tokens_used is undefined in stage {self._stage.name.lower()}",
                hint="check is_valid before reading tokens_used",
            ))
        return self._outcome.consumed

    @property
    def value(self):
        if self._stage < Stage.PARSED:
            self._fault(UndefinedReadError(
                f"value is undefined in stage {self._stage.name.lower()}",
                hint="call parse() on a valid invocation first",
            ))
        return self._value

    @property
    def result(self):
        if self._stage < Stage.EXECUTED:
            self._fault(UndefinedReadError(
                f"result is undefined in stage {self._stage.name.lower()}",
                hint="call execute() after parse() first",
            ))
        return self._result

    def validate(self, tokens, /, *, exhaustive=False):
        """
        Match tokens against the node, discarding any previous state.

        Returns the invocation itself so calls can be chained.
        """
        self._reset()
        self._outcome = self._node.validate(tokens, exhaustive=exhaustive)
        self._stage = Stage.VALID if self._outcome.valid else Stage.INVALID
        logger.debug("%r validated: %s", self._node, self._stage.name)
        return self

    def parse(self):
        """
        Build the node's value. Requires a valid invocation.
        """
        if not self.is_valid:
            self._fault(IllegalStateError(
                f"parse() is not allowed in stage {self._stage.name.lower()}",
                hint="only a valid invocation can be parsed",
            ))
        self._value = self._node.parse(self._outcome)
        self._result = Unset
        self._stage = Stage.PARSED
        return self._value

    def execute(self):
        """
        Run the node's computation on the parsed value. Requires parse().
        """
        if self._stage < Stage.PARSED:
            self._fault(IllegalStateError(
                f"execute() is not allowed in stage {self._stage.name.lower()}",
                hint="call parse() on a valid invocation first",
            ))
        self._result = self._node.execute(self._outcome, self._value)
        self._stage = Stage.EXECUTED
        return self._result

    def run(self, tokens=Unset, /, *, exhaustive=False):
        """
        Validate (when tokens are given), parse and execute.

        Returns
        - the execution result, or None when the input does not match.
        """
        if tokens is not Unset:
            self.validate(tokens, exhaustive=exhaustive)
        elif self._stage is Stage.UNVALIDATED:
            self._fault(IllegalStateError(
                "run() without tokens requires a validated invocation",
                hint="pass tokens to run() or call validate() first",
            ))
        if not self.is_valid:
            return None
        self.parse()
        return self.execute()

    def __repr__(self):
        return f"invocation({self._node!r}, stage={self._stage.name.lower()})"


def invoke(object, prompt=Unset, /, **options):
    """
    Validate a prompt against a grammar node and return its Invocation.

    Parameters
    - object: an instance providing __invoke__(prompt, **options).
    - prompt: see normalize().
    - options: exhaustive, shell.

    Raises
    - TypeError: when object does not implement __invoke__.
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(prompt, **options)
    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method") from None


def run(object, prompt=Unset, /, **options):
    """
    Validate, parse and execute a prompt; return the result or None.
    """
    return invoke(object, prompt, **options).run()


__all__ = (
    "Stage",
    "Invocation",
    "normalize",
    "invoke",
    "run",
)
