"""
Commandeer flags: named clauses and their resolution.

Overview
- FlagClause: one declared flag. A long name ("--channel"), an optional
  single-character short alias ("-a"), help text, required/default metadata,
  an optional dispatch hook, and a value converter.
- FlagGroup: the flags declared at one level (application or command). It
  owns the long-name map, the short-alias map (built at initialization) and
  the declaration order used for usage rendering and default gathering.

Resolution (FlagGroup.parse)
- Consumes flag tokens while they appear contiguously at the cursor.
- Boolean flags bind "true" without consuming a value; every other flag
  consumes exactly one following token, whatever its kind ("--offset -5").
- Dispatch hooks fire immediately after each binding, left to right.
- Required flags are enforced after the scan unless help was requested;
  defaults are bound last, for flags the input did not mention.

Quick example
    >>> group = FlagGroup()
    >>> channel = group.flag("channel", "channel to post to", short="a", required=True)
    >>> debug = group.flag("debug", "enable debug mode", type=bool)
    >>> group.init()
    >>> group.parse(tokenize(["-a", "general", "--debug"]))
    Tokens{}
    >>> channel.value, debug.value
    ('general', True)
"""
from .clauses import ClauseType, Slot, fire, hook
from .faults import *
from .lexer import Token, TokenKind
from .utils import *
from .values import converter as _converter


class FlagClause(Slot, metaclass=ClauseType):
    """
    Named flag specification plus its bound-value slot.

    Properties
    - name: long name without dashes.
    - short: single-character alias or None.
    - descr: help text ("" when not given).
    - required: the flag must appear on the command line (unless help is requested).
    - default: Unset, or the default bound when the flag does not appear. Text
      defaults go through the converter; other objects are bound as-is.
    - converter: the value converter (see commandeer.values).
    - metavar: placeholder override for usage, or None.
    - hidden: suppressed from usage.
    - callback: dispatch hook called with the bound value, or None.
    - value / bound: see Slot.
    """
    __typename__ = "flag"

    __introspectable__ = (
        "name",
        "short",
        "descr",
        "required",
        "default",
        "converter",
        "metavar",
        "hidden",
        "callback",
    )

    __displayable__ = (
        "name",
        "short",
        "descr",
        "required",
        "default",
        "converter",
        "hidden",
    )

    def __init__(
            self,
            name,
            descr=Unset,
            /,
            *,
            short=Unset,
            required=False,
            default=Unset,
            type=str,
            metavar=Unset,
            hidden=False,
            dispatch=Unset,
    ):
        """
        Declare a flag. Prefer FlagGroup.flag() (or Application.flag(),
        CommandClause.flag()), which also registers it.

        Raises
        - TypeError/ValueError on malformed metadata (name shape, non-callable
          type or dispatch, non-string metavar).
        """
        typename = "flag"
        self._name = shellname(typename, name)
        self._short = None if short is Unset or short is None else shellname(typename, short, short=True)
        self._descr = describe(typename, descr)
        self._required = bool(required)
        self._default = default
        self._converter = _converter(type)
        if not isinstance(metavar, str | Unset):
            raise TypeError(f"{typename} 'metavar' must be a string")
        elif isinstance(metavar, str) and not (metavar := metavar.strip()):
            raise ValueError(f"{typename} 'metavar' cannot be empty")
        self._metavar = coalesce(metavar)
        self._hidden = bool(hidden)
        self._callback = hook(typename, dispatch)
        self._value = Unset

    def dispatch(self, callback, /):
        """
        Bind the dispatch hook (decorator form); a flag takes a single hook.

            @verbose.dispatch
            def on_verbose(value): ...
        """
        if not callable(callback):
            raise TypeError("@dispatch() must be applied to a callable")
        if self._callback is not None:
            raise TypeError(f"flag --{self._name} already has a dispatch hook")
        self._callback = callback
        return callback

    @property
    def boolean(self):
        """
        True when the flag binds without consuming a value token.
        """
        return self._converter.is_boolean_flag()

    @property
    def placeholder(self):
        """
        Value label for usage: metavar, then a textual default, then the
        converter's own placeholder, then the upper-cased name.
        """
        if self._metavar:
            return self._metavar
        if isinstance(self._default, str) and self._default:
            return self._default
        if (text := self._converter.placeholder_text()) and text != "STRING":
            return text
        return self._name.upper()

    def _label(self):
        return "--" + self._name


class FlagGroup(metaclass=ClauseType):
    """
    Flags declared at one level, keyed by long name and short alias.

    Invariants (after init)
    - long names are unique (enforced at declaration).
    - short aliases are unique and each maps to a clause reachable by long name.
    - a required flag never carries a default.
    """
    __introspectable__ = (
        "long",
        "short",
        "order",
    )

    __displayable__ = (
        "order",
    )

    def __init__(self, route=(), /):
        self._route = tuple(route)
        self._long = {}
        self._short = {}
        self._order = []
        self._sealed = False

    def flag(self, name, descr=Unset, /, **options):
        """
        Declare and register a flag; returns its clause (the value handle).

        Keyword options are those of FlagClause: short, required, default, type,
        metavar, hidden, dispatch.
        """
        clause = FlagClause(name, descr, **options)
        self.add(clause)
        return clause

    def add(self, clause, /):
        """
        Register an already built FlagClause.
        """
        if not isinstance(clause, FlagClause):
            raise TypeError("flag group members must be flag clauses")
        if self._sealed:
            raise SealedGroupError(
                "cannot declare flag --%s after initialization" % clause.name,
                title="group sealed",
                code=FaultCode.SEALED_GROUP,
                clause=clause,
                hint="declare every flag before the first parse",
            )
        if self._long.setdefault(clause.name, clause) is not clause:
            raise DuplicateNameError(
                "flag --%s is already declared" % clause.name,
                title="duplicate flag",
                code=FaultCode.DUPLICATE_NAME,
                input=clause.name,
                clause=clause,
                hint="give every flag of %s a distinct long name" % (" ".join(self._route) or "this level"),
            )
        self._order.append(clause)
        return clause

    def have(self):
        return len(self._long) > 0

    def __contains__(self, name):
        return name in self._long

    def __getitem__(self, name):
        return self._long[name]

    def __iter__(self):
        return iter(self._order)

    def __len__(self):
        return len(self._order)

    def init(self):
        """
        Validate the declared shape and build the short-alias map, then seal.

        Raises
        - RequiredDefaultError: a required flag declares a default.
        - DefaultConversionError: a textual default the converter rejects.
        - DuplicateNameError: two flags share a short alias.
        """
        if self._sealed:
            return
        for clause in self._order:
            if clause.required and clause.default is not Unset:
                raise RequiredDefaultError(
                    "required flag --%s declares a default that would never be used" % clause.name,
                    title="required flag with default",
                    code=FaultCode.REQUIRED_DEFAULT,
                    input=clause.name,
                    clause=clause,
                    hint="drop either required=True or the default of --%s" % clause.name,
                )
            clause._check_default("--" + clause.name)
            if clause.short is None:
                continue
            if self._short.setdefault(clause.short, clause) is not clause:
                raise DuplicateNameError(
                    "short flag -%s is used by both --%s and --%s" % (
                        clause.short, self._short[clause.short].name, clause.name
                    ),
                    title="duplicate short flag",
                    code=FaultCode.DUPLICATE_NAME,
                    input=clause.short,
                    clause=clause,
                    hint="give every flag of %s a distinct short alias" % (" ".join(self._route) or "this level"),
                )
        self._sealed = True

    def _reset(self):
        for clause in self._order:
            clause._reset()

    def _lookup(self, token):
        if token.kind is TokenKind.LONG:
            table, kind = self._long, "long"
        else:
            table, kind = self._short, "short"
        try:
            return table[token.text]
        except KeyError:
            pass

        names = [str(Token(token.kind, name)) for name in table]
        suggestions = suggest(str(token), names)
        route = " ".join(self._route)
        try:
            hint = "did you mean %r? you can also run '%s --help' to see all flags" % (suggestions[0], route)
        except IndexError:
            hint = "run '%s --help' to see all flags" % route
        raise UnknownFlagError(
            "unknown %s flag '%s'" % (kind, token),
            title="unknown flag",
            code=FaultCode.UNKNOWN_FLAG,
            input=str(token),
            suggestions=suggestions,
            hint=hint,
            docs=getdoc(FaultCode.UNKNOWN_FLAG),
        )

    def parse(self, cursor, /, help=False):
        """
        Resolve the contiguous run of flag tokens at the cursor.

        Parameters
        - cursor: Cursor positioned at this level's input.
        - help: when True, required flags are not enforced (help resolution).

        Returns
        - the remaining Cursor (positioned at the first non-flag token).

        Raises
        - UnknownFlagError, MissingValueError, ConversionError,
          MissingRequiredFlagError, DispatchError.
        """
        seen = set()
        while cursor.peek().is_flag():
            token, cursor = cursor.next()
            clause = self._lookup(token)
            if clause.boolean:
                value = clause._convert("true", input=str(token))
            else:
                raw, cursor = cursor.next()
                if raw.is_eof():
                    raise MissingValueError(
                        "expected argument for flag '%s'" % token,
                        title="missing value",
                        code=FaultCode.MISSING_VALUE,
                        input=str(token),
                        clause=clause,
                        hint="pass a value after %s (for example: --%s=%s)" % (token, clause.name, clause.placeholder),
                        docs=getdoc(FaultCode.MISSING_VALUE),
                    )
                value = clause._convert(str(raw), input=str(token))
            clause._bind(value)
            seen.add(clause)
            logger.debug("flag %s bound to %r", token, value)
            fire(clause, value, input=str(token))

        if not help:
            for clause in self._order:
                if clause.required and clause not in seen:
                    raise MissingRequiredFlagError(
                        "required flag --%s not provided" % clause.name,
                        title="missing required flag",
                        code=FaultCode.MISSING_REQUIRED_FLAG,
                        input="--" + clause.name,
                        clause=clause,
                        hint="add --%s=%s" % (clause.name, clause.placeholder) if not clause.boolean else "add --%s" % clause.name,
                        docs=getdoc(FaultCode.MISSING_REQUIRED_FLAG),
                    )

        for clause in self._order:
            if clause not in seen:
                clause._apply_default()
        return cursor


__all__ = (
    "FlagClause",
    "FlagGroup",
)
