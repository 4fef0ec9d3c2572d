"""
Faults module behavioral tests (hierarchy, rendering, trigger).

Scope
- Validate the ParseError/DeclarationError families.
- Validate rich rendering (header, message, hint) and host overrides.
- Validate trigger(): raise outside shell mode, render and exit inside it.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import io
import unittest
from unittest import TestCase

from rich.console import Console

from commandeer.faults import (
    CommandException,
    ParseError,
    DeclarationError,
    UnknownFlagError,
    MissingRequiredError,
    MissingRequiredFlagError,
    ConflictingGrammarError,
    FaultCode,
    trigger,
    getdoc,
)


def console():
    return Console(file=io.StringIO(), width=100, color_system=None)


class TestHierarchy(TestCase):
    """Fault families."""

    def testFamilies(self):
        self.assertTrue(issubclass(UnknownFlagError, ParseError))
        self.assertTrue(issubclass(MissingRequiredFlagError, MissingRequiredError))
        self.assertTrue(issubclass(ConflictingGrammarError, DeclarationError))
        self.assertTrue(issubclass(ParseError, CommandException))

    def testMessageAndOptions(self):
        fault = UnknownFlagError("unknown long flag '--x'", input="--x")
        self.assertEqual(str(fault), "unknown long flag '--x'")
        self.assertEqual(fault.options["input"], "--x")
        with self.assertRaises(TypeError):
            fault.options["input"] = "--y"

    def testReplaceKeepsCause(self):
        cause = ValueError("bad")
        fault = UnknownFlagError("boom", input="--x")
        fault.__cause__ = cause
        replaced = copy.replace(fault, shell=False)
        self.assertIsInstance(replaced, UnknownFlagError)
        self.assertIs(replaced.__cause__, cause)
        self.assertEqual(replaced.options["input"], "--x")
        self.assertFalse(replaced.options["shell"])

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.UNKNOWN_FLAG.normalize(), "11111")

    def testGetdocRejectsNonCode(self):
        with self.assertRaises(TypeError):
            getdoc(11111)
        self.assertIsNone(getdoc(FaultCode.UNKNOWN_FLAG))


class TestTrigger(TestCase):
    """trigger() across shell and library modes."""

    def testRaisesOutsideShell(self):
        fault = UnknownFlagError("unknown short flag '-x'", code=FaultCode.UNKNOWN_FLAG)
        with self.assertRaises(UnknownFlagError) as context:
            trigger(fault, shell=False)
        self.assertIsNot(context.exception, fault)
        self.assertFalse(context.exception.options["shell"])

    def testRendersAndExitsInShell(self):
        out = console()
        calls = []
        fault = UnknownFlagError(
            "unknown short flag '-x'",
            title="unknown flag",
            code=FaultCode.UNKNOWN_FLAG,
            hint="run 'prog --help' to see all flags",
        )
        with self.assertRaises(SystemExit) as context:
            trigger(fault, shell=True, console=out, usage=lambda: calls.append("usage"))
        self.assertEqual(context.exception.code, 1)
        self.assertEqual(calls, ["usage"])
        output = out.file.getvalue()
        self.assertIn("11111", output)
        self.assertIn("Unknown Flag", output)
        self.assertIn("unknown short flag '-x'", output)
        self.assertIn("run 'prog --help' to see all flags", output)

    def testFancyRendering(self):
        out = console()
        fault = ConflictingGrammarError("can't mix", code=FaultCode.CONFLICTING_GRAMMAR)
        with self.assertRaises(SystemExit):
            trigger(fault, shell=True, fancy=True, console=out)
        self.assertIn("can't mix", out.file.getvalue())

    def testRejectsNonFault(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("x"))


if __name__ == "__main__":
    unittest.main()
