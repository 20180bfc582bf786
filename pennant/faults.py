"""
Pennant faults (declaration errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every declaration fault.
- OptionError: base type that carries message + options and knows how to render
  itself in a friendly, lowercased, and actionable way.
- InvalidValueError / ConflictingFlagsError / InvalidDefaultValueError: the three
  ways an option declaration can be rejected.

Declaration faults are programmer errors: they are raised synchronously where the
declaration is made and never recovered internally. A host that wants a friendlier
report can print the exception with rich, which uses __rich__ below.

Host configuration (attributes on __main__)
- __prog__: program label shown in the header (defaults to "pennant").
- __styles__: mapping of style overrides merged over the defaults.
- __codes__: mapping of FaultCode -> label used by FaultCode.normalize().
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.text import Text


class FaultCode(IntEnum):
    """
    canonical fault codes for option declarations (stable identifiers).

    grouping
    - malformed arguments (1310x)
      • INVALID_VALUE, INVALID_NAME, INVALID_DESCRIPTION
    - flag combinations (1311x)
      • CONFLICTING_FLAGS
    - defaults (1312x)
      • INVALID_DEFAULT_VALUE
    """
    # --- malformed declaration arguments (13xxx) ---
    INVALID_VALUE               = 13101
    INVALID_NAME                = 13102
    INVALID_DESCRIPTION         = 13103

    # --- flag combinations (13xxx) ---
    CONFLICTING_FLAGS           = 13111

    # --- default values (13xxx) ---
    INVALID_DEFAULT_VALUE       = 13121

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class OptionError(Exception):
    """
    Base class of every fault raised while declaring an option.

    Subclasses set __code__, __title__ and __hint__; any of them can be
    overridden per instance through the matching keyword option.
    """
    __code__ = FaultCode.INVALID_VALUE
    __title__ = "invalid declaration"
    __hint__ = "fix the option declaration"

    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType({
            "code": type(self).__code__,
            "title": type(self).__title__,
            "hint": type(self).__hint__,
            "colorful": True,
        } | options)

    @property
    def code(self):
        return self.options["code"]

    @property
    def hint(self):
        return self.options["hint"]

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if self.options["colorful"] else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not self.options["colorful"]:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", "pennant"), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(self.options["code"].normalize(), styler("code")),
            " | ",
            text(self.options["title"].title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.options["hint"], styler("hint")))

        return Group(header, message, hint)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class InvalidValueError(OptionError, ValueError):
    __code__ = FaultCode.INVALID_VALUE
    __title__ = "invalid value"
    __hint__ = "check the types and contents passed to the option"


class ConflictingFlagsError(OptionError, ValueError):
    __code__ = FaultCode.CONFLICTING_FLAGS
    __title__ = "conflicting flags"
    __hint__ = "pick a single value arity and a single preferred name"


class InvalidDefaultValueError(OptionError, ValueError):
    __code__ = FaultCode.INVALID_DEFAULT_VALUE
    __title__ = "invalid default value"
    __hint__ = "match the default to the option arity"


__all__ = (
    "OptionError",
    "InvalidValueError",
    "ConflictingFlagsError",
    "InvalidDefaultValueError",
    "FaultCode",
)
