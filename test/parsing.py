"""
Parser core behavioral tests (token walk over hand-built token sequences).

Scope
- Opening/closing options against the following token, sentinel recording.
- Saturation tie-break: an open option under its maximum always takes the next argument.
- Marker handling, positional parameters, error context.
- Fresh outcomes: option specs are never written to.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from switchyard import (
    Option, Arity, Integer, Token, Parser, SENTINEL, IGNORE_CASE, flag, parse,
    UnregisteredSwitchError, RequiredArgumentMissingError, ArgumentValidityError, FaultCode,
)

O = Token.option
A = Token.argument
M = Token.marker


class TestParser(TestCase):

    def setUp(self):
        self.verbose = flag("-v", "--verbose")
        self.output = Option("-o", "--output", arity=1)
        self.exclude = Option("-e", arity="*")
        self.pair = Option("--pair", arity=2)
        self.level = Option("--level", arity="?")
        self.jobs = Option("-j", type=Integer())
        self.parser = Parser((self.verbose, self.output, self.exclude, self.pair, self.level, self.jobs))

    def testFlagRecordsSentinel(self):
        outcome = self.parser.parse((O("v"),))
        self.assertEqual(outcome.bindings[self.verbose], (SENTINEL,))
        self.assertEqual(outcome.matches, (self.verbose,))

    def testFlagThenParameter(self):
        outcome = self.parser.parse((O("v"), A("file")))
        self.assertEqual(outcome.bindings[self.verbose], (True,))
        self.assertEqual(outcome.parameters, ("file",))

    def testSingleValueThenParameter(self):
        outcome = self.parser.parse((O("v"), O("o"), A("out.txt"), A("file1")))
        self.assertEqual(outcome.bindings[self.output], ("out.txt",))
        self.assertEqual(outcome.parameters, ("file1",))
        self.assertEqual(outcome.matches, (self.verbose, self.output))

    def testMissingValueAtEnd(self):
        with self.assertRaises(RequiredArgumentMissingError) as context:
            self.parser.parse((O("o"),))
        self.assertEqual(context.exception.code, FaultCode.REQUIRED_ARGUMENT_MISSING)
        self.assertIs(context.exception.option, self.output)
        self.assertEqual(context.exception.index, 0)

    def testMissingValueBeforeOption(self):
        with self.assertRaises(RequiredArgumentMissingError):
            self.parser.parse((O("o"), O("v")))

    def testMissingValueBeforeMarker(self):
        with self.assertRaises(RequiredArgumentMissingError):
            self.parser.parse((O("o"), M(), A("x")))

    def testPartialMinimum(self):
        with self.assertRaises(RequiredArgumentMissingError) as context:
            self.parser.parse((O("pair"), A("a"), O("v")))
        self.assertIn("expects at least 2", context.exception.message)

    def testFixedArityThenParameters(self):
        outcome = self.parser.parse((O("pair"), A("a"), A("b"), A("c")))
        self.assertEqual(outcome.bindings[self.pair], ("a", "b"))
        self.assertEqual(outcome.parameters, ("c",))

    def testUnboundedTakesEveryArgument(self):
        outcome = self.parser.parse((O("e"), A("a"), A("b"), A("c"), O("v")))
        self.assertEqual(outcome.bindings[self.exclude], ("a", "b", "c"))
        self.assertEqual(outcome.parameters, ())

    def testUnboundedWithoutValues(self):
        outcome = self.parser.parse((O("e"), O("v")))
        self.assertEqual(outcome.bindings[self.exclude], (SENTINEL,))

    def testOptionalValuePreferredOverParameter(self):
        outcome = self.parser.parse((O("level"), A("3"), A("file")))
        self.assertEqual(outcome.bindings[self.level], ("3",))
        self.assertEqual(outcome.parameters, ("file",))

    def testOptionalValueAbsent(self):
        outcome = self.parser.parse((O("level"),))
        self.assertEqual(outcome.bindings[self.level], (SENTINEL,))

    def testMarkerClosesAndCopiesTail(self):
        outcome = self.parser.parse((O("e"), A("a"), M(), A("-v"), A("--"), A("x")))
        self.assertEqual(outcome.bindings[self.exclude], ("a",))
        self.assertEqual(outcome.parameters, ("-v", "--", "x"))

    def testMarkerNotAParameter(self):
        outcome = self.parser.parse((A("x"), M()))
        self.assertEqual(outcome.parameters, ("x",))

    def testInvalidValue(self):
        with self.assertRaises(ArgumentValidityError) as context:
            self.parser.parse((O("j"), A("many")))
        self.assertEqual(context.exception.value, "many")
        self.assertIn("second position", context.exception.message)

    def testUnregisteredSwitch(self):
        with self.assertRaises(UnregisteredSwitchError) as context:
            self.parser.parse((A("x"), O("x")))
        self.assertEqual(context.exception.switch, "x")
        self.assertIn("'-x' at second position", context.exception.message)

    def testCountsAreCumulativePerPass(self):
        outcome = self.parser.parse((O("o"), A("a"), O("o"), A("b")))
        self.assertEqual(outcome.bindings[self.output], ("a", SENTINEL))
        self.assertEqual(outcome.parameters, ("b",))
        self.assertEqual(outcome.matches, (self.output, self.output))

    def testRepeatedUnboundedAccumulates(self):
        outcome = self.parser.parse((O("e"), A("a"), O("v"), O("e"), A("b")))
        self.assertEqual(outcome.bindings[self.exclude], ("a", "b"))

    def testOutcomesAreFresh(self):
        first = self.parser.parse((O("o"), A("a")))
        second = self.parser.parse((O("o"), A("b")))
        self.assertEqual(first.bindings[self.output], ("a",))
        self.assertEqual(second.bindings[self.output], ("b",))

    def testBindingsReadOnly(self):
        outcome = self.parser.parse((O("v"),))
        with self.assertRaises(TypeError):
            outcome.bindings[self.output] = ("x",)  # type: ignore[index]

    def testEmpty(self):
        outcome = self.parser.parse(())
        self.assertEqual((dict(outcome.bindings), outcome.matches, outcome.parameters), ({}, (), ()))


class TestResolve(TestCase):

    def testLongAndShort(self):
        output = Option("-o", "--output", arity=1)
        parser = Parser((output,))
        self.assertIs(parser.resolve("o"), output)
        self.assertIs(parser.resolve("output"), output)

    def testIgnoreCase(self):
        output = Option("-o", "--output", arity=1)
        parser = Parser((output,), comparer=IGNORE_CASE)
        self.assertIs(parser.resolve("OUTPUT"), output)

    def testFunctionalShortcut(self):
        verbose = flag("-v")
        self.assertEqual(parse((O("v"),), (verbose,)).matches, (verbose,))

    def testOptionsKept(self):
        verbose = flag("-v")
        self.assertEqual(Parser([verbose]).options, (verbose,))

    def testArityUntouched(self):
        output = Option("-o", arity=Arity(1, 2))
        Parser((output,)).parse((O("o"), A("a"), A("b")))
        self.assertEqual(output.arity, Arity(1, 2))


if __name__ == "__main__":
    unittest.main()
