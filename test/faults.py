"""
Faults module behavioral tests (codes, rendering, triggering).

Scope
- FaultCode normalization, including host remapping via __main__.__codes__.
- GrammarException options, copy.replace support and rich rendering.
- trigger() in raising and shell modes.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import contextlib
import copy
import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

from syntagma import (
    FaultCode,
    GrammarException,
    IllegalStateError,
    UndefinedReadError,
    ForeignOutcomeError,
    trigger,
)


def _render(renderable):
    console = Console(file=io.StringIO(), width=100, color_system=None)
    console.print(renderable)
    return console.file.getvalue()


class TestFaultCode(TestCase):
    """Stable identifiers and host remapping."""

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.ILLEGAL_STATE.normalize(), "21101")

    def testNormalizeUsesHostCodes(self):
        main = sys.modules["__main__"]
        with mock.patch.object(main, "__codes__", {FaultCode.FOREIGN_OUTCOME: "E-FOREIGN"}, create=True):
            self.assertEqual(FaultCode.FOREIGN_OUTCOME.normalize(), "E-FOREIGN")
            self.assertEqual(FaultCode.UNDEFINED_READ.normalize(), "21102")


class TestGrammarException(TestCase):
    """Options, hierarchy and rendering."""

    def testDefaultsFromSubclass(self):
        fault = ForeignOutcomeError("wrong node")
        self.assertIs(fault.code, FaultCode.FOREIGN_OUTCOME)
        self.assertEqual(fault.options["title"], "foreign outcome")
        self.assertFalse(fault.options["shell"])
        self.assertEqual(str(fault), "wrong node")

    def testHierarchy(self):
        self.assertTrue(issubclass(UndefinedReadError, IllegalStateError))
        self.assertTrue(issubclass(ForeignOutcomeError, GrammarException))
        self.assertIs(UndefinedReadError().code, FaultCode.UNDEFINED_READ)

    def testMessageDefaultsToTitle(self):
        self.assertEqual(str(IllegalStateError()), "illegal state")

    def testOptionsAreReadOnly(self):
        fault = IllegalStateError("x")
        with self.assertRaises(TypeError):
            fault.options["shell"] = True  # type: ignore[index]

    def testReplaceMergesOptions(self):
        fault = IllegalStateError("bad order", hint="validate first")
        replaced = copy.replace(fault, shell=True)
        self.assertIsInstance(replaced, IllegalStateError)
        self.assertEqual(replaced.message, "bad order")
        self.assertTrue(replaced.options["shell"])
        self.assertEqual(replaced.options["hint"], "validate first")

    def testPlainRendering(self):
        output = _render(IllegalStateError("parse() requires a valid outcome", hint="check 'valid'", colorful=False))
        self.assertIn("21101", output)
        self.assertIn("Illegal State", output)
        self.assertIn("parse() requires a valid outcome", output)
        self.assertIn("check 'valid'", output)

    def testFancyRendering(self):
        output = _render(UndefinedReadError("no outcome", fancy=True))
        self.assertIn("Undefined Read", output)
        self.assertIn("no outcome", output)
        self.assertIn("╭", output)


class TestTrigger(TestCase):
    """trigger() raises, or prints and exits in shell mode."""

    def testRaisesOutsideShell(self):
        with self.assertRaises(IllegalStateError) as context:
            trigger(IllegalStateError("boom"), hint="try again")
        self.assertEqual(context.exception.options["hint"], "try again")

    def testShellPrintsAndExits(self):
        with contextlib.redirect_stderr(io.StringIO()) as stderr:
            with self.assertRaises(SystemExit) as context:
                trigger(IllegalStateError("boom"), shell=True, colorful=False)
        self.assertEqual(context.exception.code, 1)
        self.assertIn("boom", stderr.getvalue())

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))


if __name__ == "__main__":
    unittest.main()
