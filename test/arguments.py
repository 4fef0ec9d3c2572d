"""
Arguments module behavioral tests (positional declaration and resolution).

Scope
- Validate ArgGroup ordering invariants (required prefix, variadic last,
  unique names) at initialization rather than at parse time.
- Validate positional resolution: required/optional, variadic accumulation,
  literal flag tokens, conversion, defaults and dispatch.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from commandeer import ArgClause, ArgGroup, tokenize
from commandeer.faults import (
    ArgumentOrderError,
    ConversionError,
    DuplicateNameError,
    MissingRequiredArgumentError,
    RequiredDefaultError,
    SealedGroupError,
)


def group(*declarations):
    args = ArgGroup(("prog",))
    clauses = [args.arg(name, **options) for name, options in declarations]
    args.init()
    return args, clauses


class TestArgClause(TestCase):
    """Behavioral tests for ArgClause metadata."""

    def testDefaults(self):
        arg = ArgClause("nick", "nickname for user")
        self.assertEqual(arg.name, "nick")
        self.assertEqual(arg.descr, "nickname for user")
        self.assertFalse(arg.required)
        self.assertFalse(arg.variadic)
        self.assertIsNone(arg.value)

    def testVariadicZeroIsEmptyList(self):
        self.assertEqual(ArgClause("files", variadic=True).value, [])

    def testReprUsesTypename(self):
        self.assertTrue(repr(ArgClause("nick")).startswith("argument("))


class TestArgGroupInit(TestCase):
    """Behavioral tests for declaration-order invariants."""

    def testRequiredAfterOptionalRejected(self):
        args = ArgGroup()
        args.arg("first")
        args.arg("second", required=True)
        with self.assertRaises(ArgumentOrderError):
            args.init()

    def testArgumentAfterVariadicRejected(self):
        args = ArgGroup()
        args.arg("files", variadic=True)
        args.arg("target")
        with self.assertRaises(ArgumentOrderError):
            args.init()

    def testDuplicateNameRejected(self):
        args = ArgGroup()
        args.arg("nick")
        with self.assertRaises(DuplicateNameError):
            args.arg("nick")

    def testRequiredWithDefaultRejected(self):
        args = ArgGroup()
        args.arg("nick", required=True, default="bob")
        with self.assertRaises(RequiredDefaultError):
            args.init()

    def testSealedAfterInit(self):
        args, _ = group(("nick", {}))
        with self.assertRaises(SealedGroupError):
            args.arg("other")

    def testValidShapeAccepted(self):
        args, _ = group(("source", {"required": True}), ("target", {}), ("rest", {"variadic": True}))
        self.assertEqual([arg.name for arg in args.order], ["source", "target", "rest"])


class TestArgGroupParse(TestCase):
    """Behavioral tests for ArgGroup.parse."""

    def testBindsInOrder(self):
        args, (source, target) = group(("source", {"required": True}), ("target", {"required": True}))
        rest = args.parse(tokenize(["a.txt", "b.txt"]))
        self.assertEqual((source.value, target.value), ("a.txt", "b.txt"))
        self.assertFalse(rest)

    def testMissingRequired(self):
        args, _ = group(("source", {"required": True}), ("target", {"required": True}))
        with self.assertRaises(MissingRequiredArgumentError) as context:
            args.parse(tokenize(["a.txt"]))
        self.assertEqual(str(context.exception), "required argument <target> not provided")

    def testOptionalLeftUnbound(self):
        args, (source, target) = group(("source", {"required": True}), ("target", {}))
        args.parse(tokenize(["a.txt"]))
        self.assertTrue(source.bound)
        self.assertFalse(target.bound)
        self.assertIsNone(target.value)

    def testOptionalDefault(self):
        args, (count,) = group(("count", {"type": int, "default": "7"}))
        args.parse(tokenize([]))
        self.assertEqual(count.value, 7)

    def testFlagTokensTakenLiterally(self):
        args, (value,) = group(("value", {"required": True}))
        args.parse(tokenize(["--"]))
        self.assertEqual(value.value, "--")
        args, (value,) = group(("value", {"required": True}))
        args.parse(tokenize(["-x"]))
        self.assertEqual(value.value, "-x")

    def testVariadicAbsorbsRemaining(self):
        args, (command, rest) = group(("command", {"required": True}), ("rest", {"variadic": True}))
        remaining = args.parse(tokenize(["ls", "-la", "/tmp"]))
        self.assertEqual(command.value, "ls")
        self.assertEqual(rest.value, ["-l", "-a", "/tmp"])
        self.assertFalse(remaining)

    def testVariadicConvertsEach(self):
        args, (numbers,) = group(("numbers", {"variadic": True, "type": int}))
        args.parse(tokenize(["1", "2", "3"]))
        self.assertEqual(numbers.value, [1, 2, 3])

    def testRequiredVariadicNeedsOneToken(self):
        args, _ = group(("files", {"variadic": True, "required": True}))
        with self.assertRaises(MissingRequiredArgumentError):
            args.parse(tokenize([]))

    def testVariadicDefault(self):
        args, (files,) = group(("files", {"variadic": True, "default": ["a", "b"]}))
        args.parse(tokenize([]))
        self.assertEqual(files.value, ["a", "b"])

    def testConversionFailure(self):
        args, _ = group(("count", {"type": int}))
        with self.assertRaises(ConversionError) as context:
            args.parse(tokenize(["many"]))
        self.assertIn("<count>", str(context.exception))

    def testLeavesExtraTokens(self):
        args, _ = group(("nick", {"required": True}))
        rest = args.parse(tokenize(["alice", "bob"]))
        self.assertEqual([str(token) for token in rest], ["bob"])

    def testDispatchAfterBinding(self):
        seen = []
        args, (nick, files) = group(
            ("nick", {"required": True, "dispatch": lambda value: seen.append(("nick", value))}),
            ("files", {"variadic": True, "dispatch": lambda value: seen.append(("files", value))}),
        )
        args.parse(tokenize(["alice", "a", "b"]))
        self.assertEqual(seen, [("nick", "alice"), ("files", ["a", "b"])])


if __name__ == "__main__":
    unittest.main()
