"""
Commandeer faults (parse and declaration errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing fault.
  Codes are grouped by domain so messages stay consistent and log searches stay
  predictable.
- CommandException: base type carrying a message plus read-only options, able
  to render itself through rich in a short, lowercased, actionable form.
- ParseError / DeclarationError: the two families. Parse errors are raised by
  resolution (bad input); declaration errors are raised by initialization (bad
  program vocabulary).
- trigger(): central entry point to surface a fault (raise it, or render it and
  exit when running in shell mode).
- getdoc(): optional description lookup for a code from the host application.

Options commonly carried by a fault
- code, title, hint: rendering header/footer.
- input: the offending token text or name.
- clause: the flag/argument/command clause involved, when there is one.
- suggestions, leftover: close matches, unconsumed tokens.
- application, shell, colorful, fancy, console, usage: merged in by trigger()
  at the presentation boundary (Application.run()).
"""
import copy
import os.path
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - routing (1110x): UNKNOWN_COMMAND, MISSING_COMMAND
    - flags (1111x): UNKNOWN_FLAG, MISSING_VALUE, MISSING_REQUIRED_FLAG
    - positionals (1112x): MISSING_REQUIRED_ARGUMENT
    - values (1113x): CONVERSION_FAILED
    - dispatch (1114x): DISPATCH_FAILED
    - leftovers (1115x): TRAILING_ARGUMENTS
    - declarations (13xxx): CONFLICTING_GRAMMAR, DUPLICATE_NAME, ARGUMENT_ORDER,
      REQUIRED_DEFAULT, DEFAULT_CONVERSION, SEALED_GROUP

    normalize() allows host remapping to custom labels while keeping the
    numeric codes stable.
    """
    # --- routing errors ---
    UNKNOWN_COMMAND             = 11101
    MISSING_COMMAND             = 11102

    # --- flag errors ---
    UNKNOWN_FLAG                = 11111
    MISSING_VALUE               = 11112
    MISSING_REQUIRED_FLAG       = 11113

    # --- positional errors ---
    MISSING_REQUIRED_ARGUMENT   = 11121

    # --- value errors ---
    CONVERSION_FAILED           = 11131

    # --- delegated errors ---
    DISPATCH_FAILED             = 11141

    # --- leftovers ---
    TRAILING_ARGUMENTS          = 11151

    # --- declaration errors ---
    CONFLICTING_GRAMMAR         = 13101
    DUPLICATE_NAME              = 13102
    ARGUMENT_ORDER              = 13111
    REQUIRED_DEFAULT            = 13112
    DEFAULT_CONVERSION          = 13113
    SEALED_GROUP                = 13121

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        override numeric ids with friendlier labels. when no mapping is present,
        the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    base class of every commandeer fault.

    a fault is an ordinary exception (raise/except as usual) that also knows how
    to render itself (__rich__) and how to surface itself (__trigger__).
    __replace__ makes it usable with copy.replace() so presentation options can be
    merged in without mutating the original.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message) if self.message is not Unset else ""

    def __rich__(self):
        main = __import__("__main__")
        options = defaultdict(lambda: None, self.options)
        colorful = bool(options["colorful"])

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
            "docs": "#737373",
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        if options["application"] is not None:
            name = options["application"].name
        else:
            name = os.path.basename(sys.argv[0]) or "prog"
        prog = text(getattr(main, "__prog__", name), styler("prog-name"))

        title = options["title"] or type(self).__name__
        header = Text.assemble("[ ", prog)
        if isinstance(options["code"], FaultCode):
            header.append(" — ").append(text(options["code"].normalize(), styler("code")))
        header.append(" | ").append(text(title.title(), styler("error-title"))).append(" ]")

        renders = [text(self, styler("error-message"))]
        if options["hint"]:
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(options["hint"], styler("hint"))))
        if isinstance(options["code"], FaultCode) and (docs := getdoc(options["code"])):
            renders.append(text(docs, styler("docs")))

        if options["fancy"]:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self
        console = self.options.get("console") or Console(stderr=True)
        console.print(self)
        if callable(usage := self.options.get("usage")):
            usage()
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        fault = type(self)(self.message, **{**self.options, **overrides})
        fault.__cause__ = self.__cause__
        return fault


class ParseError(CommandException): ...
class UnknownFlagError(ParseError): ...
class UnknownCommandError(ParseError): ...
class MissingCommandError(ParseError): ...
class MissingValueError(ParseError): ...
class ConversionError(ParseError): ...
class MissingRequiredError(ParseError): ...
class MissingRequiredFlagError(MissingRequiredError): ...
class MissingRequiredArgumentError(MissingRequiredError): ...
class TrailingArgumentsError(ParseError): ...
class DispatchError(ParseError): ...


class DeclarationError(CommandException): ...
class ConflictingGrammarError(DeclarationError): ...
class DuplicateNameError(DeclarationError): ...
class ArgumentOrderError(DeclarationError): ...
class RequiredDefaultError(DeclarationError): ...
class DefaultConversionError(DeclarationError): ...
class SealedGroupError(DeclarationError): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into a copy of the fault via copy.replace() before triggering.
    - outside shell mode the fault is raised; in shell mode it is rendered via rich,
      the optional 'usage' callable runs, and the process exits with status 1.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys are
    FaultCode instances and values are short documentation strings. returns None
    when nothing is registered.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "CommandException",
    "ParseError",
    "UnknownFlagError",
    "UnknownCommandError",
    "MissingCommandError",
    "MissingValueError",
    "ConversionError",
    "MissingRequiredError",
    "MissingRequiredFlagError",
    "MissingRequiredArgumentError",
    "TrailingArgumentsError",
    "DispatchError",
    "DeclarationError",
    "ConflictingGrammarError",
    "DuplicateNameError",
    "ArgumentOrderError",
    "RequiredDefaultError",
    "DefaultConversionError",
    "SealedGroupError",
    "trigger",
    "getdoc",
)
