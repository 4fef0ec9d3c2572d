"""
Commandeer clause plumbing shared by flags, arguments and commands.

- ClauseType: metaclass giving every clause/group class a stable typename,
  read-only mirrored properties for the names in __introspectable__, and
  compact __repr__/__rich_repr__ implementations.
- Slot: the bound-value slot every bindable clause owns (reset per parse).
- fire(): invoke a dispatch hook synchronously, wrapping foreign failures.
"""
import functools
import operator
import re

from .faults import CommandException, DispatchError, DefaultConversionError, ConversionError, FaultCode, getdoc
from .utils import Unset, coalesce, mirror, rename, logger


class ClauseType(type):
    """
    Metaclass that turns clause declarations into introspectable objects.

    Responsibilities
    - __typename__: explicit in the class body, or derived from the class name
      (camel-case split with hyphens, lowercased). Used in messages.
    - Read-only properties for every name in __introspectable__, backed by the
      private "_{name}" fields set at construction.
    - __repr__/__rich_repr__ over __displayable__ (falls back to
      __introspectable__). Dispatch hooks are kept out of __displayable__ since
      bound methods would recurse back into their owners.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": namespace.get(
                    "__typename__", re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower()
                ),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class Slot:
    """
    Bound-value slot of a flag or argument clause.

    The slot starts unbound (Unset) and is written by resolution: once by the
    user's input (or once per repetition of a flag) and once by the default pass
    for clauses left unbound. reset() returns it to Unset before each parse.
    """

    def _bind(self, value, /):
        self._value = value

    def _reset(self):
        self._value = Unset

    @property
    def bound(self):
        """
        True once resolution wrote a value (input or default) during the last parse.
        """
        return self._value is not Unset

    @property
    def value(self):
        """
        The bound value, or the converter's zero value when nothing was bound.
        """
        return coalesce(self._value, self._zero())

    def _zero(self):
        return self._converter.zero

    def _convert(self, raw, /, *, input):
        """
        Convert raw text through the clause's converter, as a parse fault on failure.
        """
        try:
            return self._converter.from_text(raw)
        except (ValueError, TypeError) as exception:
            raise ConversionError(
                "invalid value %r for %s %s: %s" % (raw, type(self).__typename__, input, exception),
                title="invalid value",
                code=FaultCode.CONVERSION_FAILED,
                input=input,
                value=raw,
                clause=self,
                hint="pass a value accepted by %s (%s)" % (input, self._converter.placeholder_text() or "true/false"),
                docs=getdoc(FaultCode.CONVERSION_FAILED),
            ) from exception

    def _resolve_default(self):
        """
        Materialize the declared default: text goes through the converter, any
        other object is used as-is.
        """
        if isinstance(self._default, str):
            return self._converter.from_text(self._default)
        return self._default

    def _check_default(self, label, /):
        if self._default is Unset:
            return
        try:
            self._resolve_default()
        except (ValueError, TypeError) as exception:
            raise DefaultConversionError(
                "default %r of %s %s cannot be converted: %s" % (self._default, type(self).__typename__, label, exception),
                title="invalid default",
                code=FaultCode.DEFAULT_CONVERSION,
                clause=self,
                hint="declare a default the %s converter accepts" % type(self).__typename__,
            ) from exception

    def _apply_default(self):
        if self._value is Unset and self._default is not Unset:
            self._bind(self._resolve_default())
            logger.debug("%s %s bound to its default %r", type(self).__typename__, self._label(), self._value)


def fire(clause, /, *args, input=Unset):
    """
    Invoke the dispatch hook of a clause, if any, right after it was bound.

    - CommandException raised by the hook propagates unchanged (a hook may reject
      input with a proper fault).
    - SystemExit (help/version hooks) is never intercepted.
    - Any other Exception is wrapped in DispatchError, chained with "from".
    """
    if (callback := clause.callback) is None:
        return
    label = coalesce(input, clause.name)
    logger.debug("dispatching %s %s", type(clause).__typename__, label)
    try:
        callback(*args)
    except CommandException:
        raise
    except Exception as exception:
        raise DispatchError(
            "dispatch of %s %s failed: %s" % (type(clause).__typename__, label, exception),
            title="dispatch failed",
            code=FaultCode.DISPATCH_FAILED,
            input=label,
            clause=clause,
            exception=exception,
            hint="check the handler bound to %s" % label,
            docs=getdoc(FaultCode.DISPATCH_FAILED),
        ) from exception


def hook(typename, callback, /):
    """
    Validate a dispatch hook given at declaration time (Unset/None mean no hook).
    """
    if callback is Unset or callback is None:
        return None
    if not callable(callback):
        raise TypeError(f"{typename} 'dispatch' must be callable")
    return callback


__all__ = (
    "ClauseType",
    "Slot",
    "fire",
    "hook",
)
