"""
Commandeer value converters (the capability every bindable clause uses).

A converter turns raw text into the clause's internal value, says whether its
flag takes no argument ("boolean" flag), and renders a placeholder for help.

Protocol (Converter)
- from_text(raw) -> value      raise ValueError/TypeError to reject the text
- is_boolean_flag() -> bool    True: the flag binds without consuming a value
- placeholder_text() -> str    label shown in usage ("NAME", "{fast,safe}")
- zero                         value of a slot that was never bound

Built-ins
- String: identity.
- Boolean: presence flag; from_text accepts true/false, yes/no, on/off, 1/0.
- Typed: adapter for any Python callable (int, float, pathlib.Path, ...).
- Choice: restricts text to a fixed set of choices.

converter(x) coerces what declarations accept for 'type=': a Converter
instance is used as-is, str/bool map to String/Boolean, other callables are
wrapped in Typed.
"""
import abc
import builtins
from collections.abc import Iterable, Set

from .utils import Unset, coalesce


class Converter(abc.ABC):
    """
    base class of value converters.

    subclasses implement from_text(); the other operations have defaults that fit
    value-bearing converters.
    """
    zero = None

    @abc.abstractmethod
    def from_text(self, raw, /):
        """
        Convert raw text to a value; raise ValueError or TypeError to reject it.
        """

    def is_boolean_flag(self):
        return False

    def placeholder_text(self):
        return type(self).__name__.upper()

    def __repr__(self):
        return f"{type(self).__name__.lower()}()"


class String(Converter):
    """
    identity converter (the default for every clause).
    """

    def from_text(self, raw, /):
        if not isinstance(raw, str):
            raise TypeError("string value must be text")
        return raw


class Boolean(Converter):
    """
    presence-only converter: a flag using it never consumes a value token.
    """
    zero = False

    truthy = frozenset({"true", "t", "yes", "y", "on", "1"})
    falsy = frozenset({"false", "f", "no", "n", "off", "0"})

    def from_text(self, raw, /):
        if not isinstance(raw, str):
            raise TypeError("boolean value must be text")
        if (lowered := raw.strip().lower()) in self.truthy:
            return True
        if lowered in self.falsy:
            return False
        raise ValueError(f"expected a boolean but got {raw!r}")

    def is_boolean_flag(self):
        return True

    def placeholder_text(self):
        return ""


class Typed(Converter):
    """
    adapter that turns any callable taking a string into a converter.

    the callable's own ValueError/TypeError messages are kept; they end up inside
    the ConversionError raised by resolution.
    """

    def __init__(self, type, /, metavar=Unset):
        if not callable(type):
            raise TypeError("typed converter 'type' must be callable")
        if not isinstance(metavar, str | Unset):
            raise TypeError("typed converter 'metavar' must be a string")
        self.type = type
        self.metavar = coalesce(metavar, getattr(type, "__name__", "value").upper())

    def from_text(self, raw, /):
        return self.type(raw)

    def placeholder_text(self):
        return self.metavar

    def __repr__(self):
        return f"typed({getattr(self.type, '__qualname__', self.type)!r})"


class Choice(Converter):
    """
    restrict raw text to one of a fixed set of choices (case-sensitive).

    duplicates are rejected unless the choices are given as a set; order is kept
    for display.
    """

    def __init__(self, choices, /):
        if isinstance(choices, str) or not isinstance(choices, Iterable):
            raise TypeError("choice converter 'choices' must be an iterable of strings")
        sanitized = []
        for choice in choices:
            if not isinstance(choice, str):
                raise TypeError("choice converter 'choices' must be an iterable of strings")
            if choice in sanitized:
                if isinstance(choices, Set):
                    continue
                raise ValueError("choice converter 'choices' cannot contain duplicates")
            sanitized.append(choice)
        if not sanitized:
            raise ValueError("choice converter needs at least one choice")
        self.choices = tuple(sanitized)

    def from_text(self, raw, /):
        if raw not in self.choices:
            raise ValueError("%r is not one of %s" % (raw, ", ".join(map(repr, self.choices))))
        return raw

    def placeholder_text(self):
        return "{" + ",".join(self.choices) + "}"

    def __repr__(self):
        return f"choice({self.choices!r})"


def converter(type, /):
    """
    Coerce a declaration's 'type=' into a Converter.

    - Converter instance → itself
    - str (the builtin) → String()
    - bool (the builtin) → Boolean()
    - any other callable → Typed(callable)
    """
    if isinstance(type, Converter):
        return type
    if type is str:
        return String()
    if type is bool:
        return Boolean()
    if isinstance(type, builtins.type) and issubclass(type, Converter):
        return type()
    if callable(type):
        return Typed(type)
    raise TypeError("'type' must be a converter or a callable")


__all__ = (
    "Converter",
    "String",
    "Boolean",
    "Typed",
    "Choice",
    "converter",
)
