"""
Faults module behavioral tests (codes, context, rendering, triggering).

Conventions
- Test method names follow CamelCase per project convention.
- Rich output is captured with color disabled for deterministic comparison.
"""

from __future__ import annotations

import copy
import io
import pickle
import sys
import unittest
from contextlib import redirect_stderr
from types import SimpleNamespace
from unittest import TestCase, mock

from rich.console import Console

from switchyard.faults import (
    FaultCode,
    ParserException,
    ParserWarning,
    UnregisteredSwitchError,
    RequiredOptionMissingError,
    EmptyInlineValueWarning,
    trigger,
    getdoc,
)


def render(fault):
    console = Console(color_system=None, force_terminal=False, width=120)
    with console.capture() as capture:
        console.print(fault)
    return capture.get()


class TestFaultCode(TestCase):

    def testStableValues(self):
        self.assertEqual(FaultCode.UNREGISTERED_SWITCH, 21111)
        self.assertEqual(FaultCode.EMPTY_INLINE_VALUE, 22111)

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.DUPLICATE_SWITCH.normalize(), "21101")

    def testNormalizeUsesHostLabels(self):
        with mock.patch.object(
                sys.modules["__main__"], "__codes__", {FaultCode.DUPLICATE_SWITCH: "E-DUP"}, create=True
        ):
            self.assertEqual(FaultCode.DUPLICATE_SWITCH.normalize(), "E-DUP")


class TestParserException(TestCase):

    def setUp(self):
        self.fault = UnregisteredSwitchError(
            "switch '-x' is not registered for any option",
            title="unregistered switch",
            code=FaultCode.UNREGISTERED_SWITCH,
            hint="check the spelling",
            switch="x",
        )

    def testContextAsAttributes(self):
        self.assertEqual(self.fault.switch, "x")
        self.assertEqual(self.fault.code, FaultCode.UNREGISTERED_SWITCH)
        with self.assertRaises(AttributeError):
            self.fault.missing  # NOQA: B-018

    def testOptionsReadOnly(self):
        with self.assertRaises(TypeError):
            self.fault.options["switch"] = "y"  # type: ignore[index]

    def testStr(self):
        self.assertEqual(str(self.fault), "switch '-x' is not registered for any option")

    def testHierarchy(self):
        self.assertIsInstance(self.fault, ParserException)
        self.assertNotIsInstance(self.fault, RequiredOptionMissingError)

    def testReplaceMergesOptions(self):
        replaced = copy.replace(self.fault, shell=True)
        self.assertIsInstance(replaced, UnregisteredSwitchError)
        self.assertTrue(replaced.shell)
        self.assertEqual(replaced.switch, "x")
        self.assertFalse(hasattr(self.fault, "shell"))

    def testPickle(self):
        restored = pickle.loads(pickle.dumps(self.fault))
        self.assertIsInstance(restored, UnregisteredSwitchError)
        self.assertEqual(restored.message, self.fault.message)
        self.assertEqual(restored.switch, "x")

    def testRender(self):
        fault = copy.replace(self.fault, colorful=False, tool=SimpleNamespace(name="tool"))
        output = render(fault)
        self.assertIn("tool", output)
        self.assertIn("21111", output)
        self.assertIn("Unregistered Switch", output)
        self.assertIn("switch '-x' is not registered for any option", output)
        self.assertIn("→ check the spelling", output)

    def testFancyRender(self):
        fault = copy.replace(self.fault, colorful=False, fancy=True, tool=SimpleNamespace(name="tool"))
        output = render(fault)
        self.assertIn("Unregistered Switch", output)
        self.assertIn("check the spelling", output)


class TestTrigger(TestCase):

    def testRaisesOutsideShell(self):
        with self.assertRaises(UnregisteredSwitchError) as context:
            trigger(UnregisteredSwitchError("boom", switch="x"), hint="merged")
        self.assertEqual(context.exception.hint, "merged")

    def testExitsInShell(self):
        stream = io.StringIO()
        with redirect_stderr(stream), self.assertRaises(SystemExit) as context:
            trigger(UnregisteredSwitchError("boom"), shell=True, colorful=False)
        self.assertEqual(context.exception.code, 1)
        self.assertIn("boom", stream.getvalue())

    def testWarnsOutsideShell(self):
        with self.assertWarns(EmptyInlineValueWarning):
            trigger(EmptyInlineValueWarning("empty inline value"))

    def testWarningPrintedInShell(self):
        stream = io.StringIO()
        with redirect_stderr(stream):
            trigger(EmptyInlineValueWarning("empty inline value"), shell=True, colorful=False)
        self.assertIn("empty inline value", stream.getvalue())

    def testWarningBase(self):
        self.assertTrue(issubclass(EmptyInlineValueWarning, ParserWarning))
        self.assertTrue(issubclass(EmptyInlineValueWarning, Warning))

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))


class TestGetdoc(TestCase):

    def testMissing(self):
        self.assertIsNone(getdoc(FaultCode.OPTION_NOT_FOUND))

    def testHostDocs(self):
        with mock.patch.object(
                sys.modules["__main__"], "__docs__", {FaultCode.OPTION_NOT_FOUND: "see --help"}, create=True
        ):
            self.assertEqual(getdoc(FaultCode.OPTION_NOT_FOUND), "see --help")

    def testRejectsNonCodes(self):
        with self.assertRaises(TypeError):
            getdoc(21131)


if __name__ == "__main__":
    unittest.main()
