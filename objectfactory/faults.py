"""
objectfactory faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every failure the engine can
  surface. Codes are grouped by domain to keep messages and log searches predictable.
- FactoryException / FactoryWarning: base types that carry message + options and
  know how to render themselves through rich.
- trigger(): central entry point to surface any fault (raise or warn).
- getdoc(): optional description lookup for a code from the host application.

Message style
- Short titles, one-sentence bodies naming the class involved, a single clear hint.

Integration
- Every layer builds a fault and calls trigger(fault, **context). Errors are raised
  (never retried, never cached); warnings go through warnings.warn.
- Hosts can restyle the rendering with a __styles__ mapping in __main__ and remap
  codes with a __codes__ mapping.
"""
import copy
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, typename


class FaultCode(IntEnum):
    """
    canonical fault codes used across the engine (stable identifiers).

    grouping
    - resolution (2110x): NO_MATCHING_INITIALIZER, NO_DEFAULT_INITIALIZER
    - visibility (2111x): NONPUBLIC_INITIALIZER
    - signature (2112x): INCOMPATIBLE_RESULT_TYPE, UNSUPPORTED_PARAMETER_MODE
    - state (2113x): ACTIVATOR_STATE
    - warnings (22xxx): DEFAULT_ACTIVATOR

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- resolution errors ---
    NO_MATCHING_INITIALIZER    = 21101
    NO_DEFAULT_INITIALIZER     = 21102

    # --- visibility errors ---
    NONPUBLIC_INITIALIZER      = 21111

    # --- signature errors ---
    INCOMPATIBLE_RESULT_TYPE   = 21121
    UNSUPPORTED_PARAMETER_MODE = 21122

    # --- state errors ---
    ACTIVATOR_STATE            = 21131

    # --- warnings ---
    DEFAULT_ACTIVATOR          = 22101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette):
    """
    shared rich renderer for exceptions and warnings: a "[ code | title ]"
    header, the message, and a hinted footer.
    """
    main = __import__("__main__")
    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    options = fault.options

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style])

    code = options.get("code", fault.__faultcode__)
    header = Text.assemble(
        "[ ",
        text(code.normalize() if isinstance(code, FaultCode) else "-", "code"),
        " | ",
        text(options.get("title", fault.__title__).title(), "title"),
        " ]"
    )
    body = [text(fault.message, "message")]
    if hint := options.get("hint"):
        body.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))
    if options.get("fancy", False):
        return Panel(Group(*body), title=header, title_align="left")
    return Group(header, *body)


class FactoryException(Exception):
    """
    base error for every failure surfaced by the engine.

    carries
    - message: one-sentence description (str or rich Text).
    - options: read-only mapping of context (code, title, hint, type, ...).

    protocol
    - __replace__: copy.replace(fault, **options) merges extra context.
    - __trigger__: raises the fault.
    - __rich__: renders header, message and hint.
    """
    __faultcode__ = Unset
    __title__ = "factory error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Text | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "code": "bold #00E5FF",
            "title": "bold #FF4DA6",
            "message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

    def __trigger__(self) -> None:
        raise self from None

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})

    @property
    def type(self):
        """
        the class the failed request was about (None when not recorded).
        """
        return self.options.get("type")


class NoMatchingInitializerError(FactoryException):
    __faultcode__ = FaultCode.NO_MATCHING_INITIALIZER
    __title__ = "no matching initializer"


class NoDefaultInitializerError(NoMatchingInitializerError):
    __faultcode__ = FaultCode.NO_DEFAULT_INITIALIZER
    __title__ = "no default initializer"


class NonPublicInitializerError(FactoryException):
    __faultcode__ = FaultCode.NONPUBLIC_INITIALIZER
    __title__ = "non-public initializer"


class IncompatibleResultTypeError(FactoryException):
    __faultcode__ = FaultCode.INCOMPATIBLE_RESULT_TYPE
    __title__ = "incompatible result type"


class UnsupportedParameterModeError(FactoryException):
    __faultcode__ = FaultCode.UNSUPPORTED_PARAMETER_MODE
    __title__ = "unsupported parameter mode"


class ActivatorStateError(FactoryException):
    __faultcode__ = FaultCode.ACTIVATOR_STATE
    __title__ = "activator not initialized"


class FactoryWarning(ABC, Warning):
    """
    base for soft faults: same shape as FactoryException, surfaced via warnings.warn.
    """
    __faultcode__ = Unset
    __title__ = "factory warning"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Text | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, {
            "code": "bold #FFB400",
            "title": "bold #FFC2E0",
            "message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })

    def __trigger__(self) -> None:
        warnings.warn(self, stacklevel=self.options.get("stacklevel", 2))

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DefaultActivatorWarning(FactoryWarning):
    __faultcode__ = FaultCode.DEFAULT_ACTIVATOR
    __title__ = "default activator unavailable"


def trigger(fault, /, **options):
    """
    surface a fault with the given context options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace before triggering.
    - exceptions are raised; warnings are emitted through warnings.warn.

    typical options
    - type, hint, signature, initializer, stacklevel, fancy.
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
    are FaultCode members and values are short documentation strings.
    returns None when not found.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


def describe_type(cls, /):
    """
    quoted class name for fault messages.
    """
    return repr(typename(cls))


__all__ = (
    "FactoryException",
    "NoMatchingInitializerError",
    "NoDefaultInitializerError",
    "NonPublicInitializerError",
    "IncompatibleResultTypeError",
    "UnsupportedParameterModeError",
    "ActivatorStateError",
    "FactoryWarning",
    "DefaultActivatorWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
