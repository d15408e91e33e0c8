"""
Argot faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every issue the parser
  can surface (registration refusals, parse errors, validation errors, accessor
  errors). Codes are grouped by domain to keep searches predictable.
- ArgumentException / ArgumentWarning: base types that carry a message plus a
  read-only options mapping and know how to render themselves with rich.
- trigger(): central entry point to surface any fault (raise or warn).
- getdoc(): optional description lookup for a code from the host application.

Contract
- The library never terminates the process. Errors are raised to the host,
  warnings go through the warnings module. Printing an error (and choosing an
  exit code) is the host's decision:

    >>> try:
    ...     parser.load_arguments(sys.argv)
    ... except ArgumentException as error:
    ...     Console(stderr=True).print(error)
    ...     sys.exit(2)
"""
import copy
import inspect
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, UnsetType


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping
    - parsing (1111x)
      • PRECEDING_POSITIONAL, UNKNOWN_OPTION, AMBIGUOUS_OPTION, UNEXPECTED_POSITIONAL
    - validation (1112x)
      • MISSING_REQUIRED, CONFLICTING_OPTIONS, MISSING_POSITIONALS
    - accessors (1113x)
      • UNCONVERTIBLE_VALUE, POSITIONAL_OUT_OF_RANGE
    - registration refusals, reported as warnings (1210x)
      • EMPTY_KEY, MALFORMED_NAME, ORPHAN_INHERITANCE, UNKNOWN_GROUP,
        DUPLICATED_OPTION, DUPLICATED_GROUP, ALREADY_GROUPED, UNREGISTERED_OPTION
    - lenient parsing, reported as warnings (1211x)
      • SKIPPED_OPTION, SKIPPED_POSITIONAL
    """
    # --- parse errors (111xx) ---
    PRECEDING_POSITIONAL        = 11111
    UNKNOWN_OPTION              = 11112
    AMBIGUOUS_OPTION            = 11113
    UNEXPECTED_POSITIONAL       = 11114

    # --- validation errors (111xx) ---
    MISSING_REQUIRED            = 11121
    CONFLICTING_OPTIONS         = 11122
    MISSING_POSITIONALS         = 11123

    # --- accessor errors (111xx) ---
    UNCONVERTIBLE_VALUE         = 11131
    POSITIONAL_OUT_OF_RANGE     = 11132

    # --- registration warnings (121xx) ---
    EMPTY_KEY                   = 12101
    MALFORMED_NAME              = 12102
    ORPHAN_INHERITANCE          = 12103
    UNKNOWN_GROUP               = 12104
    DUPLICATED_OPTION           = 12105
    DUPLICATED_GROUP            = 12106
    ALREADY_GROUPED             = 12107
    UNREGISTERED_OPTION         = 12108

    # --- lenient parsing warnings (121xx) ---
    SKIPPED_OPTION              = 12111
    SKIPPED_POSITIONAL          = 12112

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(self, palette, kind):
    """
    shared rich rendering for exceptions and warnings.

    layout
    - header: [ prog — code | title ]
    - body: the message, then an arrow and the hint (when present).
    - fancy: the same content inside a Panel titled with the header.
    """
    main = __import__("__main__")

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    colorful = self.options.get("colorful", False)

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

    prog = text(getattr(main, "__prog__", self.options.get("prog") or "argot"), styler("prog-name"))

    code = self.options.get("code")
    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "?", styler("code")),
        " | ",
        text(str(self.options.get("title", kind)).title(), styler(kind + "-title")),
        " ]"
    )
    message = text(self.message, styler(kind + "-message"))
    parts = [message]
    if hint := self.options.get("hint"):
        parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

    if self.options.get("fancy", False):
        return Panel(Group(*parts), title=header, title_align="left")

    return Group(header, *parts)


class ArgumentException(Exception):
    """
    base of every error raised by the parser.

    - message: human-readable text (also what str(error) returns).
    - options: read-only mapping with structured context (code, title, hint
      and fault specific fields such as missing, groups, value, index).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | UnsetType)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if isinstance(self.message, str) else ""

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        }, "error")

    def __trigger__(self) -> None:
        raise self from None

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ParseError(ArgumentException): ...
class UnknownOptionError(ParseError): ...
class UnexpectedPositionalError(ParseError): ...
class ValidationError(ArgumentException): ...
class MissingRequiredError(ValidationError): ...
class ConflictingOptionsError(ValidationError): ...
class MissingPositionalError(ArgumentException): ...
class ConversionError(ArgumentException): ...
class PositionalIndexError(ArgumentException, IndexError): ...


class ArgumentWarning(ABC, Warning):
    """
    base of every warning emitted by the parser (registration refusals and
    lenient parsing skips).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | UnsetType)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if isinstance(self.message, str) else ""

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "warning-title": "bold #FFC2E0",
            "warning-message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        }, "warning")

    def __trigger__(self) -> None:
        warnings.warn(self, stacklevel=len(inspect.stack()))

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class RegistrationWarning(ArgumentWarning): ...
class UnknownOptionWarning(ArgumentWarning): ...
class UnexpectedPositionalWarning(ArgumentWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace() before triggering.
    - errors are raised, warnings are emitted through the warnings module.
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

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ArgumentException",
    "ParseError",
    "UnknownOptionError",
    "UnexpectedPositionalError",
    "ValidationError",
    "MissingRequiredError",
    "ConflictingOptionsError",
    "MissingPositionalError",
    "ConversionError",
    "PositionalIndexError",
    "ArgumentWarning",
    "RegistrationWarning",
    "UnknownOptionWarning",
    "UnexpectedPositionalWarning",
    "trigger",
    "getdoc",
)
