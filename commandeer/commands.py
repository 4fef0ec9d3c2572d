"""
Commandeer commands: named subcommands and their recursive resolution.

Ownership
- A CommandGroup exclusively owns its CommandClauses; each CommandClause owns
  its own FlagGroup, ArgGroup and (child) CommandGroup. Nothing points back to
  a parent: every clause knows its route (tuple of names from the program name
  down to itself) and uses it only for messages.

Grammar
- A command declares either positional arguments or subcommands, never both.
- Resolution: the command's own flags first, then its arguments or, recursively,
  its subcommands; the command's dispatch hook fires once all of that resolved.

Quick example
    >>> app = Application("chat")
    >>> post = app.command("post", "post a message to a channel")
    >>> channel = post.flag("channel", short="a", required=True)
    >>> app.parse(["post", "-a", "general"])
    'post'
"""
from .arguments import ArgGroup
from .clauses import ClauseType, fire, hook
from .faults import *
from .flags import FlagGroup
from .utils import *


class CommandClause(metaclass=ClauseType):
    """
    A named subcommand with its own flags, arguments and subcommands.

    Builder methods (flag, arg, command) mirror those of Application and
    return the clause they declare.
    """
    __typename__ = "command"

    __introspectable__ = (
        "name",
        "descr",
        "route",
        "hidden",
        "flags",
        "args",
        "commands",
        "callback",
    )

    __displayable__ = (
        "name",
        "descr",
        "hidden",
        "flags",
        "args",
        "commands",
    )

    def __init__(self, name, descr=Unset, /, *, route=(), hidden=False, dispatch=Unset):
        self._name = shellname("command", name)
        self._descr = describe("command", descr)
        self._route = tuple(route) + (self._name,)
        self._hidden = bool(hidden)
        self._callback = hook("command", dispatch)
        self._flags = FlagGroup(self._route)
        self._args = ArgGroup(self._route)
        self._commands = CommandGroup(self._route)

    @property
    def path(self):
        """
        Command names from the first subcommand down to this one (program name excluded).
        """
        return self._route[1:]

    def flag(self, name, descr=Unset, /, **options):
        return self._flags.flag(name, descr, **options)

    def arg(self, name, descr=Unset, /, **options):
        return self._args.arg(name, descr, **options)

    def command(self, name, descr=Unset, /, **options):
        return self._commands.command(name, descr, **options)

    def dispatch(self, callback, /):
        """
        Bind the dispatch hook (decorator form). The hook is called without
        arguments once the command's flags, arguments and subcommands resolved.
        """
        if not callable(callback):
            raise TypeError("@dispatch() must be applied to a callable")
        if self._callback is not None:
            raise TypeError(f"command {self._name!r} already has a dispatch hook")
        self._callback = callback
        return callback

    def init(self):
        """
        Validate this command's own groups, then every subcommand, depth first.
        """
        self._flags.init()
        if self._args.have() and self._commands.have():
            raise ConflictingGrammarError(
                "command %r declares both positional arguments and subcommands" % " ".join(self.path),
                title="conflicting grammar",
                code=FaultCode.CONFLICTING_GRAMMAR,
                input=self._name,
                clause=self,
                hint="move the positional arguments of %r into its subcommands" % self._name,
            )
        self._args.init()
        self._commands.init()
        for command in self._commands:
            command.init()
        logger.debug("command %r initialized", " ".join(self.path))

    def _reset(self):
        self._flags._reset()
        self._args._reset()
        self._commands._reset()

    def parse(self, cursor, /, help=False):
        """
        Resolve this command's flags, then its arguments or subcommands.

        Returns
        - (path, cursor): the selected path starting with this command's name.
        """
        cursor = self._flags.parse(cursor, help=help)
        path = (self._name,)
        if self._args.have():
            cursor = self._args.parse(cursor)
        elif self._commands.have():
            selected, cursor = self._commands.parse(cursor, help=help)
            path += selected
        fire(self, input=" ".join(self.path))
        return path, cursor


class CommandGroup(metaclass=ClauseType):
    """
    Subcommands of one level, keyed by name and kept in declaration order.
    """
    __introspectable__ = (
        "commands",
        "order",
    )

    __displayable__ = (
        "order",
    )

    def __init__(self, route=(), /):
        self._route = tuple(route)
        self._commands = {}
        self._order = []
        self._sealed = False

    def command(self, name, descr=Unset, /, **options):
        """
        Declare and register a subcommand; returns its clause.

        Keyword options are those of CommandClause: hidden, dispatch.
        """
        clause = CommandClause(name, descr, route=self._route, **options)
        if self._sealed:
            raise SealedGroupError(
                "cannot declare command %r after initialization" % clause.name,
                title="group sealed",
                code=FaultCode.SEALED_GROUP,
                clause=clause,
                hint="declare every command before the first parse",
            )
        if self._commands.setdefault(clause.name, clause) is not clause:
            raise DuplicateNameError(
                "command %r is already declared" % clause.name,
                title="duplicate command",
                code=FaultCode.DUPLICATE_NAME,
                input=clause.name,
                clause=clause,
                hint="give every command of %s a distinct name" % (" ".join(self._route) or "this level"),
            )
        self._order.append(clause)
        return clause

    def have(self):
        return len(self._order) > 0

    def __contains__(self, name):
        return name in self._commands

    def __getitem__(self, name):
        return self._commands[name]

    def __iter__(self):
        return iter(self._order)

    def __len__(self):
        return len(self._order)

    def promote(self, name, /):
        """
        Move the named command to the front of the order (listing and priority).
        """
        clause = self._commands[name]
        self._order.remove(clause)
        self._order.insert(0, clause)

    def init(self):
        """
        Seal the group. Names are already unique (checked at declaration);
        subcommands are initialized by their owner.
        """
        self._sealed = True

    def _reset(self):
        for command in self._order:
            command._reset()

    def lookup(self, name, /):
        """
        Return the command named name, or raise UnknownCommandError with close
        matches as suggestions.
        """
        try:
            return self._commands[name]
        except KeyError:
            pass
        suggestions = suggest(name, (command.name for command in self._order if not command.hidden))
        route = " ".join(self._route)
        try:
            hint = "did you mean %r? you can also run '%s help' to see all commands" % (suggestions[0], route)
        except IndexError:
            hint = "run '%s --help' to see all commands" % route
        raise UnknownCommandError(
            "unknown command '%s'" % name,
            title="unknown command",
            code=FaultCode.UNKNOWN_COMMAND,
            input=name,
            suggestions=suggestions,
            hint=hint,
            docs=getdoc(FaultCode.UNKNOWN_COMMAND),
        )

    def parse(self, cursor, /, help=False):
        """
        Select a command by the next token and resolve it recursively.

        Returns
        - (path, cursor): path is () when the group declares no commands.

        Raises
        - MissingCommandError: the next token is not a value (or is <EOF>).
        - UnknownCommandError: no command carries that name.
        - anything the selected command's resolution raises.
        """
        if not self._order:
            return (), cursor
        token, cursor = cursor.next()
        if not token.is_value():
            raise MissingCommandError(
                "expected command but got '%s'" % token,
                title="missing command",
                code=FaultCode.MISSING_COMMAND,
                input=str(token),
                choices=tuple(command.name for command in self._order if not command.hidden),
                hint="pick one of: %s" % ", ".join(command.name for command in self._order if not command.hidden),
                docs=getdoc(FaultCode.MISSING_COMMAND),
            )
        command = self.lookup(token.text)
        logger.debug("command %r selected", " ".join(command.path))
        return command.parse(cursor, help=help)


__all__ = (
    "CommandClause",
    "CommandGroup",
)
