# python
"""
Leaf option behavioral tests.

Scope
- NumberOption/StringOption matching and conversion.
- Generic Option converters and choices.
- Construction constraints (names, type, choices).
- Preconditions of parse/execute.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API only.
"""

from __future__ import annotations

import math
import unittest
from unittest import TestCase

from syntagma import (
    Option,
    NumberOption,
    StringOption,
    IllegalStateError,
    ForeignOutcomeError,
    UndefinedReadError,
)


class TestNumberOption(TestCase):
    """Behavioral tests for NumberOption."""

    def testIntegerToken(self):
        option = NumberOption("count")
        outcome = option.validate(["42"])
        self.assertTrue(outcome.valid)
        self.assertEqual(outcome.consumed, 1)
        self.assertEqual(option.parse(outcome), 42)
        self.assertIsInstance(option.parse(outcome), int)

    def testDecimalAndExponentTokens(self):
        option = NumberOption("n")
        self.assertEqual(option.parse(option.validate(["-3.5"])), -3.5)
        self.assertEqual(option.parse(option.validate(["1e3"])), 1000.0)
        self.assertEqual(option.parse(option.validate([".5"])), 0.5)
        self.assertEqual(option.parse(option.validate(["+7"])), 7)

    def testInfinityAccepted(self):
        option = NumberOption("n")
        self.assertTrue(math.isinf(option.parse(option.validate(["inf"]))))
        self.assertTrue(math.isinf(option.parse(option.validate(["-Infinity"]))))

    def testNonNumericTokenIsInvalid(self):
        option = NumberOption("n")
        outcome = option.validate(["abc"])
        self.assertFalse(outcome.valid)
        self.assertEqual(outcome.matched, ())
        with self.assertRaises(UndefinedReadError):
            outcome.consumed

    def testNonDecimalFormsRejected(self):
        option = NumberOption("n")
        for token in ("nan", "0x10", "1_000", "", "1.2.3", "12abc", "٣٤", "１２", "1.５"):
            with self.subTest(token=token):
                self.assertFalse(option.validate([token]).valid)

    def testLongIntegralTokenStaysInteger(self):
        option = NumberOption("n")
        value = option.parse(option.validate(["1" + "0" * 5000]))
        self.assertIsInstance(value, int)
        self.assertTrue(value == 10 ** 5000)

    def testOnlyFirstTokenConsumed(self):
        outcome = NumberOption("n").validate(["1", "2", "3"])
        self.assertEqual(outcome.consumed, 1)
        self.assertEqual(outcome.matched, ("1",))

    def testEmptySliceIsInvalid(self):
        self.assertFalse(NumberOption("n").validate([]).valid)

    def testChoices(self):
        option = NumberOption("level", choices=(1, 2, 3))
        self.assertTrue(option.validate(["2"]).valid)
        self.assertFalse(option.validate(["5"]).valid)


class TestStringOption(TestCase):
    """Behavioral tests for StringOption."""

    def testAnyTokenAccepted(self):
        option = StringOption("remote")
        outcome = option.validate(["hello world"])
        self.assertTrue(outcome.valid)
        self.assertEqual(option.parse(outcome), "hello world")

    def testEmptyTokenIsStillAToken(self):
        option = StringOption("value")
        self.assertEqual(option.parse(option.validate([""])), "")

    def testMissingTokenIsInvalid(self):
        self.assertFalse(StringOption("remote").validate([]).valid)

    def testChoices(self):
        option = StringOption("mode", choices={"fast", "safe"})
        self.assertEqual(option.choices, frozenset({"fast", "safe"}))
        self.assertTrue(option.validate(["safe"]).valid)
        self.assertFalse(option.validate(["slow"]).valid)

    def testRepr(self):
        self.assertEqual(repr(StringOption("remote")), "string-option(names=('remote',), choices=())")


class TestOption(TestCase):
    """Behavioral tests for generic Option converters and constraints."""

    def testCustomConverter(self):
        def switch(token):
            match token.lower():
                case "on":
                    return True
                case "off":
                    return False
            raise ValueError(token)

        option = Option("flag", switch)
        self.assertIs(option.parse(option.validate(["ON"])), True)
        self.assertIs(option.parse(option.validate(["off"])), False)
        self.assertFalse(option.validate(["maybe"]).valid)

    def testConverterTypeErrorMeansMismatch(self):
        def strict(token):
            raise TypeError("nope")

        self.assertFalse(Option("x", strict).validate(["a"]).valid)

    def testOtherConverterErrorsPropagate(self):
        def broken(token):
            raise KeyError(token)

        with self.assertRaises(KeyError):
            Option("x", broken).validate(["a"])

    def testPositionalOptionHasNoName(self):
        option = Option()
        self.assertIsNone(option.name)
        self.assertEqual(option.names, ())

    def testNamedOption(self):
        option = Option("remote")
        self.assertEqual(option.name, "remote")
        self.assertEqual(option.names, ("remote",))
        self.assertIs(option.type, str)

    def testTypeMustBeCallable(self):
        with self.assertRaises(TypeError):
            Option("x", 42)  # type: ignore[arg-type]

    def testNameMustBeNonEmptyString(self):
        with self.assertRaises(ValueError):
            Option("  ")
        with self.assertRaises(TypeError):
            Option(5)  # type: ignore[arg-type]

    def testChoicesDuplicatesRejectedForGenericIterable(self):
        with self.assertRaises(ValueError):
            Option("mode", choices=["fast", "safe", "fast"])

    def testChoicesMustBeIterable(self):
        with self.assertRaises(TypeError):
            Option("mode", choices=3)  # type: ignore[arg-type]

    def testTokensMustBeStrings(self):
        with self.assertRaises(TypeError):
            StringOption("x").validate("abc")
        with self.assertRaises(TypeError):
            StringOption("x").validate([1])  # type: ignore[list-item]

    def testExecuteReturnsParsedValue(self):
        option = NumberOption("n")
        outcome = option.validate(["8"])
        self.assertEqual(option.execute(outcome), 8)

    def testTokensUsedDefinedExactlyWhenValid(self):
        option = NumberOption("n")
        for tokens in (["1"], ["x"], [], ["2", "3"]):
            with self.subTest(tokens=tokens):
                outcome = option.validate(tokens)
                if outcome.valid:
                    self.assertEqual(outcome.consumed, 1)
                else:
                    with self.assertRaises(UndefinedReadError):
                        outcome.consumed


class TestOptionPreconditions(TestCase):
    """parse/execute require a valid outcome of the same node."""

    def testParseInvalidOutcomeRaises(self):
        option = NumberOption("n")
        with self.assertRaises(IllegalStateError):
            option.parse(option.validate(["abc"]))

    def testExecuteInvalidOutcomeRaises(self):
        option = NumberOption("n")
        with self.assertRaises(IllegalStateError):
            option.execute(option.validate([]))

    def testForeignOutcomeRaises(self):
        first, second = StringOption("a"), StringOption("b")
        with self.assertRaises(ForeignOutcomeError):
            second.parse(first.validate(["x"]))

    def testNonOutcomeRejected(self):
        with self.assertRaises(TypeError):
            StringOption("a").parse({"a": "x"})  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
