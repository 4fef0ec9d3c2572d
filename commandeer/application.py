"""
Commandeer application: the root aggregate and its glue.

An Application owns one root FlagGroup, one root ArgGroup and one root
CommandGroup. It is built once at program start (builder methods), initialized
once (validation latch, synthetic help command, per-command --help flags), then
parsed. There is no process-wide default instance: create one in your entry
point and pass it around.

Conventions
- --help is pre-registered on every application and, at initialization, on
  every command that does not declare its own. It renders the matching usage
  to stderr and exits with status 0.
- version(text) registers --version (prints text to stdout, exits 0).
- When commands are declared, a "help <command>..." command is synthesized
  (unless one was declared) and listed first.

Quick example
    >>> app = Application("chat", "an example chat client")
    >>> debug = app.flag("debug", "enable debug mode", type=bool)
    >>> register = app.command("register", "register a new user")
    >>> nick = register.arg("nick", "nickname for user", required=True)
    >>> app.parse(["--debug", "register", "alice"])
    'register'
    >>> debug.value, nick.value
    (True, 'alice')

Shell usage
    if __name__ == "__main__":
        match app.run():
            case "register": ...
"""
import os.path
import shlex
import sys

from rich.console import Console
from rich.text import Text

from . import usage as _usage
from .arguments import ArgGroup
from .clauses import ClauseType
from .commands import CommandGroup
from .faults import *
from .flags import FlagGroup
from .lexer import tokenize
from .utils import *


class Application(metaclass=ClauseType):
    """
    Root of a command-line vocabulary: flags, arguments or commands, plus the
    presentation options used by help rendering and run().

    Options
    - shell: in run(), render faults (plus a usage line) and exit 1 instead of
      raising them.
    - colorful: style help and fault output with the palette (see usage.render
      and CommandException.__rich__).
    - fancy: wrap help and fault output in a rich panel.
    - console: rich Console used for help, version and fault output; defaults
      to a stderr console for help and faults and a stdout console for version.
    """
    __typename__ = "application"

    __introspectable__ = (
        "name",
        "descr",
        "flags",
        "args",
        "commands",
        "shell",
        "colorful",
        "fancy",
        "console",
        "initialized",
    )

    __displayable__ = (
        "name",
        "descr",
        "flags",
        "args",
        "commands",
    )

    def __init__(
            self,
            name=Unset,
            descr=Unset,
            /,
            *,
            shell=True,
            colorful=False,
            fancy=False,
            console=Unset,
    ):
        name = coalesce(name, os.path.basename(sys.argv[0]) or "prog")
        if not isinstance(name, str):
            raise TypeError("application name must be a string")
        if not (name := name.strip()):
            raise ValueError("application name cannot be empty")
        if not isinstance(console, Console | Unset):
            raise TypeError("application 'console' must be a rich console")
        self._name = name
        self._descr = describe("application", descr)
        self._shell = bool(shell)
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        self._console = coalesce(console)
        self._version = Unset
        self._initialized = False
        self._flags = FlagGroup((name,))
        self._args = ArgGroup((name,))
        self._commands = CommandGroup((name,))
        self._flags.flag("help", "Show context-sensitive help.", type=bool, dispatch=self._on_help)

    # declaration

    def flag(self, name, descr=Unset, /, **options):
        """
        Declare a root flag; see FlagClause for the keyword options.
        """
        return self._flags.flag(name, descr, **options)

    def arg(self, name, descr=Unset, /, **options):
        """
        Declare a root positional argument; see ArgClause for the keyword options.
        """
        return self._args.arg(name, descr, **options)

    def command(self, name, descr=Unset, /, **options):
        """
        Declare a top-level command; see CommandClause for the keyword options.
        """
        return self._commands.command(name, descr, **options)

    def version(self, text, /):
        """
        Register --version, printing text and exiting 0. Returns the application.
        """
        if not isinstance(text, str):
            raise TypeError("application version must be a string")
        self._flags.flag("version", "Show application version.", type=bool, dispatch=self._on_version)
        self._version = text
        return self

    # initialization

    def initialize(self):
        """
        Validate the whole vocabulary once; later calls return immediately.

        Order
        - root grammar conflict (arguments and commands both declared);
        - synthetic help command (when commands exist), moved to the front;
        - --help on every command lacking one;
        - root flags, root commands, root arguments, then every command
          recursively (own flags, grammar conflict, own args, subcommands).

        Raises
        - the first DeclarationError found. The latch stays open on failure.
        """
        if self._initialized:
            return self
        if self._args.have() and self._commands.have():
            raise ConflictingGrammarError(
                "can't mix top-level arguments and commands",
                title="conflicting grammar",
                code=FaultCode.CONFLICTING_GRAMMAR,
                input=self._name,
                hint="move the top-level arguments of %s into its commands" % self._name,
            )
        if self._commands.have() and "help" not in self._commands:
            help = self._commands.command("help", "Show help.")
            help.arg("command", "Show help on command.", required=True, variadic=True, dispatch=self._on_command_help)
            self._commands.promote("help")
        self._install_help(self._commands)

        self._flags.init()
        self._commands.init()
        self._args.init()
        for command in self._commands:
            command.init()
        self._initialized = True
        logger.debug("application %r initialized", self._name)
        return self

    def _install_help(self, group, /):
        for command in group:
            if "help" not in command.flags:
                command.flag("help", "Show help for this command.", type=bool, dispatch=self._command_help_hook(command.path))
            self._install_help(command.commands)

    # resolution

    def _reset(self):
        self._flags._reset()
        self._args._reset()
        self._commands._reset()

    def parse(self, args, /):
        """
        Resolve raw arguments (program name excluded) against the vocabulary.

        Returns
        - the selected command path joined by spaces ("" without commands).

        Raises
        - DeclarationError subclasses on the first (initializing) call.
        - ParseError subclasses for malformed input, including
          TrailingArgumentsError when tokens are left over.
        """
        self.initialize()
        self._reset()
        cursor = tokenize(args)
        help = cursor.peek().text == "help"
        if help:
            logger.debug("help requested, required flags are not enforced")

        cursor = self._flags.parse(cursor, help=help)
        path = ()
        if self._args.have():
            cursor = self._args.parse(cursor)
        elif self._commands.have():
            path, cursor = self._commands.parse(cursor, help=help)

        if cursor:
            leftover = tuple(map(str, cursor))
            if len(leftover) == 1:
                message = "unexpected argument '%s'" % leftover[0]
            else:
                message = "unexpected arguments '%s'" % cursor
            raise TrailingArgumentsError(
                message,
                title="unexpected arguments",
                code=FaultCode.TRAILING_ARGUMENTS,
                input=leftover[0],
                leftover=leftover,
                hint="run '%s --help' to see what %s accepts" % (
                    " ".join((self._name,) + path), " ".join(path) or self._name
                ),
                docs=getdoc(FaultCode.TRAILING_ARGUMENTS),
            )
        logger.debug("resolved command path %r", " ".join(path))
        return " ".join(path)

    def run(self, args=Unset, /):
        """
        Parse sys.argv[1:] (or args: a sequence, or a shell-like string split with
        shlex) and surface faults through trigger().

        In shell mode a fault is rendered with a usage line and the process exits
        with status 1; otherwise the fault is raised with the presentation options
        merged in.
        """
        if args is Unset:
            args = sys.argv[1:]
        elif isinstance(args, str):
            args = shlex.split(args)
        try:
            return self.parse(args)
        except CommandException as fault:
            trigger(
                fault,
                application=self,
                shell=self._shell,
                colorful=self._colorful,
                fancy=self._fancy,
                console=self._stderr(),
                usage=lambda: _usage.render(self, console=self._stderr(), compact=True),
            )

    # lookup and glue

    def lookup(self, path, /):
        """
        Return the command at path ("deploy staging" or ("deploy", "staging")).

        Raises UnknownCommandError for the first name that does not match.
        """
        if isinstance(path, str):
            path = path.split()
        group = self._commands
        command = None
        for name in path:
            command = group.lookup(name)
            group = command.commands
        if command is None:
            raise ValueError("lookup() argument must name at least one command")
        return command

    def usage(self, *, console=Unset):
        """
        Render the application help (to stderr unless console is given).
        """
        self.initialize()
        _usage.render(self, console=console or self._stderr())

    def command_usage(self, path, /, *, console=Unset):
        """
        Render the help of the command at path.
        """
        self.initialize()
        _usage.render(self, self.lookup(path), console=console or self._stderr())

    def errorf(self, message, /, *args):
        """
        Print "<name>: error: <message>" (printf-style args) to the error console.
        """
        self._stderr().print(Text(f"{self._name}: error: {message % args if args else message}"))

    def usage_error(self, message, /, *args):
        """
        Print an error followed by the application help, then exit with status 1.
        """
        self.errorf(message, *args)
        self.usage()
        sys.exit(1)

    def fatal_if_error(self, error, /, prefix=Unset):
        """
        Print error (optionally prefixed) and exit with status 1 when error is set.
        """
        if error is None or error is Unset:
            return
        self.errorf("%s: %s" % (prefix, error) if prefix else "%s" % error)
        sys.exit(1)

    def _stdout(self):
        return self._console or Console()

    def _stderr(self):
        return self._console or Console(stderr=True)

    # hooks

    def _on_help(self, value):
        self.usage()
        sys.exit(0)

    def _on_version(self, value):
        self._stdout().print(Text(self._version))
        sys.exit(0)

    def _on_command_help(self, path):
        self.command_usage(path)
        sys.exit(0)

    def _command_help_hook(self, path, /):
        @rename("on_help")
        def on_help(value):
            self.command_usage(path)
            sys.exit(0)
        return on_help


__all__ = (
    "Application",
)
