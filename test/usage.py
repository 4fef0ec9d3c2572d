"""
Usage module behavioral tests (summaries and rich rendering).

Conventions
- Test method names follow CamelCase per project convention.
- Rendering goes to rich consoles writing to io.StringIO.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from rich.console import Console

from commandeer import Application, FlagClause, ArgClause, FlagGroup, ArgGroup
from commandeer.usage import format_flag, flag_summary, arg_summary, usage_line, render


def console():
    return Console(file=io.StringIO(), width=100, color_system=None)


class TestSummaries(TestCase):
    """Plain-text helpers used by usage lines and hints."""

    def testFormatFlag(self):
        self.assertEqual(format_flag(FlagClause("channel", short="a")), "-a, --channel=CHANNEL")
        self.assertEqual(format_flag(FlagClause("debug", type=bool)), "--debug")
        self.assertEqual(format_flag(FlagClause("count", type=int)), "--count=INT")

    def testFlagSummary(self):
        flags = FlagGroup()
        flags.flag("name", required=True)
        flags.flag("debug", type=bool)
        flags.flag("secret", hidden=True)
        self.assertEqual(flag_summary(flags), "--name=NAME [<flags>]")

    def testFlagSummaryWithoutOptional(self):
        flags = FlagGroup()
        flags.flag("force", type=bool, required=True)
        self.assertEqual(flag_summary(flags), "--force")

    def testArgSummaryNestsBrackets(self):
        args = ArgGroup()
        args.arg("source", required=True)
        args.arg("target")
        args.arg("rest", variadic=True)
        self.assertEqual(arg_summary(args), "<source> [<target> [<rest>...]]")

    def testArgSummaryEmpty(self):
        self.assertEqual(arg_summary(ArgGroup()), "")

    def testUsageLine(self):
        app = Application("prog")
        app.flag("name", required=True)
        deploy = app.command("deploy")
        deploy.command("staging")
        app.initialize()
        self.assertEqual(usage_line(app), "prog --name=NAME [<flags>] <command> [<args> ...]")
        self.assertEqual(
            usage_line(app, app.lookup("deploy")),
            "prog --name=NAME [<flags>] deploy [<flags>] <command> [<args> ...]",
        )

    def testUsageLineCarriesRequiredRootFlags(self):
        app = Application("chat")
        app.flag("token", required=True)
        post = app.command("post")
        post.flag("channel", required=True)
        post.arg("text")
        app.initialize()
        self.assertEqual(
            usage_line(app, app.lookup("post")),
            "chat --token=TOKEN [<flags>] post --channel=CHANNEL [<flags>] [<text>]",
        )


class TestRender(TestCase):
    """Full help rendering."""

    def setUp(self):
        self.app = Application("chat", "An example chat client.")
        self.app.flag("server", "Server address.", default="127.0.0.1")
        register = self.app.command("register", "Register a new user.")
        register.arg("nick", "Nickname for user.", required=True)
        self.app.command("secret", hidden=True)
        self.app.initialize()

    def testApplicationSections(self):
        out = console()
        render(self.app, console=out)
        output = out.file.getvalue()
        self.assertIn("usage: chat [<flags>] <command> [<args> ...]", output)
        self.assertIn("Flags:", output)
        self.assertIn("--server=127.0.0.1", output)
        self.assertIn("Server address.", output)
        self.assertIn("register <nick>", output)
        self.assertIn("help <command>...", output)
        self.assertNotIn("secret", output)

    def testCommandSections(self):
        out = console()
        render(self.app, self.app.lookup("register"), console=out)
        output = out.file.getvalue()
        self.assertIn("usage: chat [<flags>] register [<flags>] <nick>", output)
        self.assertIn("Args:", output)
        self.assertIn("<nick>", output)
        # root flags apply to commands too
        self.assertIn("--server", output)

    def testCompactPrintsUsageLineOnly(self):
        out = console()
        render(self.app, console=out, compact=True)
        self.assertEqual(out.file.getvalue().strip(), "usage: chat [<flags>] <command> [<args> ...]")

    def testFancyPanel(self):
        app = Application("tool", fancy=True)
        app.initialize()
        out = console()
        render(app, console=out)
        self.assertIn("TOOL HELP", out.file.getvalue())


if __name__ == "__main__":
    unittest.main()
