"""
Commandeer positional arguments.

- ArgClause: one declared positional parameter (name, help text, required,
  variadic, default, dispatch hook, converter).
- ArgGroup: the ordered arguments of one level. Required arguments form a
  strict prefix; at most one argument is variadic and it comes last.

Resolution takes tokens positionally and literally: a flag token met here is
bound as its typed text ("-x"). Interleaving flags with positionals is the
flag group's business and happens before this phase.
"""
from collections.abc import Iterable

from .clauses import ClauseType, Slot, fire, hook
from .faults import *
from .utils import *
from .values import converter as _converter


class ArgClause(Slot, metaclass=ClauseType):
    """
    Positional argument specification plus its bound-value slot.

    A variadic clause binds a list of converted values; its zero value is an
    empty list and its default may be a single object or an iterable of them.
    """
    __typename__ = "argument"

    __introspectable__ = (
        "name",
        "descr",
        "required",
        "variadic",
        "default",
        "converter",
        "hidden",
        "callback",
    )

    __displayable__ = (
        "name",
        "descr",
        "required",
        "variadic",
        "default",
        "converter",
    )

    def __init__(
            self,
            name,
            descr=Unset,
            /,
            *,
            required=False,
            variadic=False,
            default=Unset,
            type=str,
            hidden=False,
            dispatch=Unset,
    ):
        self._name = shellname("argument", name)
        self._descr = describe("argument", descr)
        self._required = bool(required)
        self._variadic = bool(variadic)
        self._default = default
        self._converter = _converter(type)
        self._hidden = bool(hidden)
        self._callback = hook("argument", dispatch)
        self._value = Unset

    def dispatch(self, callback, /):
        """
        Bind the dispatch hook (decorator form); an argument takes a single hook.
        """
        if not callable(callback):
            raise TypeError("@dispatch() must be applied to a callable")
        if self._callback is not None:
            raise TypeError(f"argument <{self._name}> already has a dispatch hook")
        self._callback = callback
        return callback

    @property
    def placeholder(self):
        return self._name

    def _zero(self):
        return [] if self._variadic else self._converter.zero

    def _resolve_default(self):
        if not self._variadic:
            return super()._resolve_default()
        if isinstance(self._default, str) or not isinstance(self._default, Iterable):
            defaults = [self._default]
        else:
            defaults = list(self._default)
        return [
            self._converter.from_text(default) if isinstance(default, str) else default for default in defaults
        ]

    def _label(self):
        return f"<{self._name}>"


class ArgGroup(metaclass=ClauseType):
    """
    Ordered positional arguments of one level.
    """
    __introspectable__ = (
        "order",
    )

    def __init__(self, route=(), /):
        self._route = tuple(route)
        self._order = []
        self._names = {}
        self._sealed = False

    def arg(self, name, descr=Unset, /, **options):
        """
        Declare and register a positional argument; returns its clause.

        Keyword options are those of ArgClause: required, variadic, default,
        type, hidden, dispatch.
        """
        clause = ArgClause(name, descr, **options)
        self.add(clause)
        return clause

    def add(self, clause, /):
        if not isinstance(clause, ArgClause):
            raise TypeError("argument group members must be argument clauses")
        if self._sealed:
            raise SealedGroupError(
                "cannot declare argument <%s> after initialization" % clause.name,
                title="group sealed",
                code=FaultCode.SEALED_GROUP,
                clause=clause,
                hint="declare every argument before the first parse",
            )
        if self._names.setdefault(clause.name, clause) is not clause:
            raise DuplicateNameError(
                "argument <%s> is already declared" % clause.name,
                title="duplicate argument",
                code=FaultCode.DUPLICATE_NAME,
                input=clause.name,
                clause=clause,
                hint="give every argument of %s a distinct name" % (" ".join(self._route) or "this level"),
            )
        self._order.append(clause)
        return clause

    def have(self):
        return len(self._order) > 0

    def __iter__(self):
        return iter(self._order)

    def __len__(self):
        return len(self._order)

    def init(self):
        """
        Validate ordering invariants and defaults, then seal the group.

        Raises
        - ArgumentOrderError: a required argument follows an optional one, or an
          argument follows a variadic one.
        - RequiredDefaultError, DefaultConversionError: as for flags.
        """
        if self._sealed:
            return
        optional = variadic = None
        for clause in self._order:
            if variadic is not None:
                raise ArgumentOrderError(
                    "argument <%s> follows variadic argument <%s>" % (clause.name, variadic.name),
                    title="variadic argument not last",
                    code=FaultCode.ARGUMENT_ORDER,
                    input=clause.name,
                    clause=clause,
                    hint="a variadic argument absorbs every remaining token, declare it last",
                )
            if clause.required and optional is not None:
                raise ArgumentOrderError(
                    "required argument <%s> follows optional argument <%s>" % (clause.name, optional.name),
                    title="required after optional",
                    code=FaultCode.ARGUMENT_ORDER,
                    input=clause.name,
                    clause=clause,
                    hint="declare required arguments before optional ones",
                )
            if clause.required and clause.default is not Unset:
                raise RequiredDefaultError(
                    "required argument <%s> declares a default that would never be used" % clause.name,
                    title="required argument with default",
                    code=FaultCode.REQUIRED_DEFAULT,
                    input=clause.name,
                    clause=clause,
                    hint="drop either required=True or the default of <%s>" % clause.name,
                )
            clause._check_default(f"<{clause.name}>")
            if not clause.required:
                optional = clause
            if clause.variadic:
                variadic = clause
        self._sealed = True

    def _reset(self):
        for clause in self._order:
            clause._reset()

    def _missing(self, clause):
        return MissingRequiredArgumentError(
            "required argument <%s> not provided" % clause.name,
            title="missing required argument",
            code=FaultCode.MISSING_REQUIRED_ARGUMENT,
            input=clause.name,
            clause=clause,
            hint="add a value for <%s> after %s" % (clause.name, " ".join(self._route) or "the program name"),
            docs=getdoc(FaultCode.MISSING_REQUIRED_ARGUMENT),
        )

    def parse(self, cursor, /):
        """
        Bind declared arguments from the cursor, in order.

        Returns
        - the remaining Cursor (empty after a variadic argument).

        Raises
        - MissingRequiredArgumentError, ConversionError, DispatchError.
        """
        for clause in self._order:
            if clause.variadic:
                values = []
                while not (token := cursor.peek()).is_eof():
                    _, cursor = cursor.next()
                    values.append(clause._convert(str(token), input=f"<{clause.name}>"))
                if not values:
                    if clause.required:
                        raise self._missing(clause)
                    break
                clause._bind(values)
                logger.debug("argument <%s> bound to %r", clause.name, values)
                fire(clause, values, input=f"<{clause.name}>")
                break

            token, cursor = cursor.next()
            if token.is_eof():
                if clause.required:
                    raise self._missing(clause)
                break
            value = clause._convert(str(token), input=f"<{clause.name}>")
            clause._bind(value)
            logger.debug("argument <%s> bound to %r", clause.name, value)
            fire(clause, value, input=f"<{clause.name}>")

        for clause in self._order:
            clause._apply_default()
        return cursor


__all__ = (
    "ArgClause",
    "ArgGroup",
)
