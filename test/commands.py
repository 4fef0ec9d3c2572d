"""
Commands module behavioral tests (declaration, grammar, recursive resolution).

Scope
- Validate CommandGroup naming rules, ordering and promotion.
- Validate CommandClause grammar conflicts and recursive initialization.
- Validate resolution: own flags, own arguments, nested subcommands, paths,
  dispatch ordering, missing and unknown commands.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from commandeer import CommandClause, CommandGroup, tokenize
from commandeer.faults import (
    ConflictingGrammarError,
    DuplicateNameError,
    MissingCommandError,
    SealedGroupError,
    UnknownCommandError,
    FaultCode,
)


def initialized(commands):
    commands.init()
    for command in commands:
        command.init()
    return commands


class TestCommandClause(TestCase):
    """Behavioral tests for CommandClause declarations."""

    def testRouteAndPath(self):
        commands = CommandGroup(("prog",))
        deploy = commands.command("deploy")
        staging = deploy.command("staging")
        self.assertEqual(deploy.route, ("prog", "deploy"))
        self.assertEqual(staging.path, ("deploy", "staging"))

    def testArgsAndCommandsConflict(self):
        commands = CommandGroup(("prog",))
        deploy = commands.command("deploy")
        deploy.arg("target")
        deploy.command("staging")
        with self.assertRaises(ConflictingGrammarError):
            initialized(commands)

    def testNestedInitializationReachesLeaves(self):
        commands = CommandGroup(("prog",))
        leaf = commands.command("deploy").command("staging")
        leaf.arg("first")
        leaf.arg("second", required=True)
        with self.assertRaisesRegex(Exception, "follows optional"):
            initialized(commands)

    def testDispatchDecorator(self):
        command = CommandClause("post")

        @command.dispatch
        def onPost():
            pass

        self.assertIs(command.callback, onPost)
        with self.assertRaises(TypeError):
            command.dispatch(onPost)


class TestCommandGroup(TestCase):
    """Behavioral tests for CommandGroup bookkeeping."""

    def testDuplicateNameRejected(self):
        commands = CommandGroup()
        commands.command("post")
        with self.assertRaises(DuplicateNameError):
            commands.command("post")

    def testPromoteMovesToFront(self):
        commands = CommandGroup()
        commands.command("post")
        commands.command("help")
        commands.promote("help")
        self.assertEqual([command.name for command in commands], ["help", "post"])

    def testSealedAfterInit(self):
        commands = initialized(CommandGroup())
        with self.assertRaises(SealedGroupError):
            commands.command("late")


class TestCommandParse(TestCase):
    """Behavioral tests for recursive command resolution."""

    def setUp(self):
        self.calls = []
        self.commands = CommandGroup(("chat",))
        register = self.commands.command("register", "register a new user", dispatch=lambda: self.calls.append("register"))
        self.nick = register.arg("nick", required=True)
        post = self.commands.command("post", dispatch=lambda: self.calls.append("post"))
        self.channel = post.flag("channel", short="a", required=True, dispatch=lambda value: self.calls.append("channel"))
        deploy = self.commands.command("deploy", dispatch=lambda: self.calls.append("deploy"))
        deploy.command("staging", dispatch=lambda: self.calls.append("staging"))
        self.force = deploy.flag("force", type=bool)
        initialized(self.commands)

    def testEmptyGroupYieldsEmptyPath(self):
        path, rest = CommandGroup().parse(tokenize(["x"]))
        self.assertEqual(path, ())
        self.assertEqual(len(rest), 1)

    def testCommandWithArgument(self):
        path, rest = self.commands.parse(tokenize(["register", "alice"]))
        self.assertEqual(path, ("register",))
        self.assertEqual(self.nick.value, "alice")
        self.assertFalse(rest)

    def testCommandWithFlagLeavesTrailingTokens(self):
        path, rest = self.commands.parse(tokenize(["post", "-a", "general", "hello"]))
        self.assertEqual(path, ("post",))
        self.assertEqual(self.channel.value, "general")
        self.assertEqual([str(token) for token in rest], ["hello"])

    def testNestedPath(self):
        path, rest = self.commands.parse(tokenize(["deploy", "--force", "staging"]))
        self.assertEqual(path, ("deploy", "staging"))
        self.assertTrue(self.force.value)

    def testDispatchOrderChildrenFirst(self):
        self.commands.parse(tokenize(["deploy", "staging"]))
        self.assertEqual(self.calls, ["staging", "deploy"])

    def testFlagHookBeforeCommandHook(self):
        self.commands.parse(tokenize(["post", "--channel=x"]))
        self.assertEqual(self.calls, ["channel", "post"])

    def testMissingCommand(self):
        with self.assertRaises(MissingCommandError) as context:
            self.commands.parse(tokenize([]))
        self.assertEqual(str(context.exception), "expected command but got '<EOF>'")
        self.assertEqual(context.exception.options["code"], FaultCode.MISSING_COMMAND)

    def testFlagWhereCommandExpected(self):
        with self.assertRaises(MissingCommandError):
            self.commands.parse(tokenize(["--force"]))

    def testUnknownCommandSuggests(self):
        with self.assertRaises(UnknownCommandError) as context:
            self.commands.parse(tokenize(["regster"]))
        self.assertEqual(str(context.exception), "unknown command 'regster'")
        self.assertIn("register", context.exception.options["suggestions"])

    def testMissingSubcommand(self):
        with self.assertRaises(MissingCommandError):
            self.commands.parse(tokenize(["deploy"]))


if __name__ == "__main__":
    unittest.main()
