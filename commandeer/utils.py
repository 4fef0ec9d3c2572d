"""
Commandeer shared helpers.

Scope
- Unset: process-wide sentinel for "not provided" (distinct from None).
- coalesce(): materialize a concrete default for Unset values.
- rename(): give generated callables (hooks, properties) stable names.
- mirror(): read-only property over a private "_{name}" backing field.
- shellname()/describe(): clause-name and help-text validation.
- suggest(): close-match suggestions for unknown flags/commands.
- logger: the package logger ("commandeer").
"""
import builtins
import difflib
import functools
import logging
import re
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final

logger = logging.getLogger("commandeer")


@final
class UnsetType:
    """
    internal singleton sentinel representing an "unset" value.

    intent
    - used by the declaration API to distinguish "not provided" from a user
      supplied value (including None, "" or other falsy values). a flag declared
      with default="" has a default; a flag declared without one does not.

    behavior
    - truthiness: bool(Unset) is False.
    - identity: Unset is a process-wide singleton (see __new__).
    - display: repr(Unset) -> "Unset".
    - final: subclassing is forbidden to preserve semantics.
    """

    def __or__(self, other, /):
        """
        support UnsetType | T in isinstance checks and annotations.
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        support T | UnsetType in isinstance checks and annotations.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsy values like None, 0, "" or [] are preserved as-is; only Unset is
    replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable (renamed in place)
    - @rename(name)          -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _freeze(object):
    """
    Shallow read-only view for container values (tuple / MappingProxyType / frozenset).
    """
    if isinstance(object, Sequence) and not isinstance(object, (str, bytes, bytearray)):
        return tuple(object)
    elif isinstance(object, Mapping):
        return MappingProxyType(object)
    elif isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors the private field "_{name}".

    Containers are exposed through read-only views so declarations cannot be
    mutated from the outside once a group is sealed. Bound values are *not*
    mirrored through this helper (variadic values are plain lists owned by the
    caller once parsing finished).
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


_LONG = re.compile(r"[^\W\d_](-?[^\W_]+)*")


def shellname(typename, name, /, *, short=False):
    """
    Validate and normalize a clause name.

    Rules
    - long names (flags and commands): r"[^\\W\\d_](-?[^\\W_]+)*", e.g. "dry-run",
      "v2", "no-color". Unicode letters are allowed, underscores are not.
    - short aliases: exactly one character that is neither "-" nor "=" nor
      whitespace.

    Returns the stripped name; raises TypeError/ValueError with the clause
    typename in the message.
    """
    if not isinstance(name, str):
        raise TypeError(f"{typename} name must be a string")
    if short:
        if len(name) != 1 or name in "-=" or name.isspace():
            raise ValueError(f"{typename} short alias must be a single character other than '-' or '='")
        return name
    if not (name := name.strip()):
        raise ValueError(f"{typename} name cannot be empty")
    if not _LONG.fullmatch(name):
        raise ValueError(f"{typename} name {name!r} must be a valid shell-style name (unicodes are allowed)")
    return name


def describe(typename, descr, /):
    """
    Normalize a help text: Unset/None become "", strings are trimmed.
    """
    if descr is Unset or descr is None:
        return ""
    if not isinstance(descr, str):
        raise TypeError(f"{typename} 'descr' must be a string")
    return descr.strip()


def suggest(word, candidates, /):
    """
    Return up to five close matches for word among candidates (best first).
    """
    return difflib.get_close_matches(word, list(candidates), 5)


Unset = UnsetType()
"""
Internal sentinel for "not provided".

Use Unset as a parameter default when None is a meaningful user value.
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "shellname",
    "describe",
    "suggest",

    # Types
    "UnsetType",

    # Constants
    "Unset",
    "logger",
)
