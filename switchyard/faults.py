"""
Switchyard faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue
  (errors and warnings), grouped by the stage that raises them.
- ParserException / ParserWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Propagation
- Every error aborts the current parse pass immediately; nothing is retried.
- In non-shell mode errors are raised and warnings go through warnings.warn.
- In shell mode both are rendered with rich on stderr and errors exit with status 1.

Integration
- The tokenizer never fails. The parser core raises faults directly; the
  OptionParser façade routes them through trigger() with its runtime options
  (tool, shell, fancy, colorful) merged in via copy.replace.
"""
import copy
import inspect
import os.path
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - registration (2110x): DUPLICATE_SWITCH
    - switches (2111x): UNREGISTERED_SWITCH, DUPLICATED_OPTION, REQUIRED_OPTION_MISSING
    - arguments (2112x): REQUIRED_ARGUMENT_MISSING, ARGUMENT_VALIDITY, CONVERSION_FAILURE
    - queries (2113x): OPTION_NOT_FOUND
    - warnings (2211x): EMPTY_INLINE_VALUE

    normalize() allows host remapping to custom labels while keeping codes stable.
    """
    # --- registration errors ---
    DUPLICATE_SWITCH            = 21101

    # --- switch errors ---
    UNREGISTERED_SWITCH         = 21111
    DUPLICATED_OPTION           = 21112
    REQUIRED_OPTION_MISSING     = 21113

    # --- argument errors ---
    REQUIRED_ARGUMENT_MISSING   = 21121
    ARGUMENT_VALIDITY           = 21122
    CONVERSION_FAILURE          = 21123

    # --- query errors ---
    OPTION_NOT_FOUND            = 21131

    # --- warnings ---
    EMPTY_INLINE_VALUE          = 22111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _prog(options):
    main = __import__("__main__")
    try:
        return getattr(main, "__prog__")
    except AttributeError:
        pass
    tool = options.get("tool")
    if tool is not None and getattr(tool, "name", None):
        return tool.name
    return os.path.basename(sys.argv[0]) or "switchyard"


def _render(fault, palette, title, kind):
    """
    Build the rich renderable shared by exceptions and warnings.

    palette keys: prog-name, code, <kind>-title, <kind>-message, hint-arrow, hint.
    """
    options = fault.options
    colorful = options.get("colorful", True)
    fancy = options.get("fancy", False)

    styles = defaultdict(str, palette | getattr(__import__("__main__"), "__styles__", {}))

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

    code = options.get("code")
    header = Text.assemble(
        "[ ",
        text(_prog(options), styler("prog-name")),
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "?", styler("code")),
        " | ",
        text(str(options.get("title", title)).title(), styler(kind + "-title")),
        " ]"
    )
    message = text(fault.message, styler(kind + "-message"))
    renders = [message]
    if hint := options.get("hint"):
        renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

    if fancy:
        return Panel(Group(*renders), title=header, title_align="left")
    return Group(header, *renders)


class ParserException(Exception):
    """
    base of every error raised by switchyard.

    carries a lowercase, position-first message and keyword context
    (title, code, hint, switch, index, value, ...). options are read-only.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __getattr__(self, name):
        # context keys are reachable as attributes (fault.switch, fault.code, ...)
        try:
            return self.__dict__["options"][name]
        except KeyError:
            raise AttributeError(name) from None

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        }, "error", "error")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})

    def __reduce__(self):
        return _restore, (type(self), self.message, dict(self.options))


def _restore(cls, message, options):
    return cls(message, **options)


class DuplicateSwitchError(ParserException): ...
class UnregisteredSwitchError(ParserException): ...
class DuplicatedOptionError(ParserException): ...
class RequiredOptionMissingError(ParserException): ...
class RequiredArgumentMissingError(ParserException): ...
class ArgumentValidityError(ParserException): ...
class ConversionError(ParserException): ...
class OptionNotFoundError(ParserException): ...


class ParserWarning(ABC, Warning):
    """
    base of every warning emitted by switchyard (same context contract as ParserException).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "warning-title": "bold #FFC2E0",
            "warning-message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        }, "warning", "warning")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class EmptyInlineValueWarning(ParserWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace before triggering.
    - in shell mode, rendering happens via the rich console; otherwise errors
      are raised and warnings emitted.

    typical options
    - tool, shell, fancy, colorful, title, code, hint, and any context the
      renderer may want to show (switch/index/value).
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
    "ParserException",
    "DuplicateSwitchError",
    "UnregisteredSwitchError",
    "DuplicatedOptionError",
    "RequiredOptionMissingError",
    "RequiredArgumentMissingError",
    "ArgumentValidityError",
    "ConversionError",
    "OptionNotFoundError",
    "ParserWarning",
    "EmptyInlineValueWarning",
    "trigger",
    "getdoc",
)
