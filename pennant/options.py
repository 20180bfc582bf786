r"""
Pennant option descriptors.

Overview
- OptionFlag: bitmask constants selecting the value arity and the preferred name.
- ValueArity: the effective arity of an option as a tagged variant
  (NONE, REQUIRED, OPTIONAL, MULTI).
- Option: named option descriptor (e.g., --format/-f) with arity, default
  value and value placeholder.

Options are passed after the command name(s). Each option has a long name used
with two dashes ("--verbose") and optionally a short name used with one dash
("-v"). Leading dashes may be included when declaring; they are stripped:

    >>> Option("verbose", "v")
    >>> Option("--format", "-f", OptionFlag.REQUIRED, value_name="FORMAT")

Arity (exactly one is active after construction)
- NONE: presence-only, no value, no default. Assumed when no arity flag is given.
- REQUIRED: a value must always be passed.
- OPTIONAL: a value may be passed; otherwise the default is used.
- MULTI: the option may be repeated; values are collected in a list and each
  occurrence requires a value, so MULTI always carries REQUIRED too.

Validation highlights
- NONE cannot be combined with REQUIRED, OPTIONAL or MULTI.
- OPTIONAL cannot be combined with MULTI.
- PREFER_LONG_NAME cannot be combined with PREFER_SHORT_NAME.
- Long names match r"[A-Za-z][A-Za-z0-9-]+", short names are a single letter.
- Defaults: forbidden for NONE, a sequence (or None, meaning empty) for MULTI,
  anything for REQUIRED/OPTIONAL.

Public API
- Classes: Option, OptionFlag, ValueArity
"""
import re
from collections.abc import Sequence
from enum import Enum, IntFlag

from rich.text import Text

from .faults import *
from .logger import get_logger
from .utils import *

logger = get_logger(__name__)


class OptionFlag(IntFlag):
    """
    Bitmask constants accepted by Option(flags=...).

    Values are stable and may be combined with bitwise OR.
    """
    PREFER_LONG_NAME = 1
    PREFER_SHORT_NAME = 2
    NONE = 4
    REQUIRED = 8
    OPTIONAL = 16
    MULTI = 32


_ARITY_FLAGS = OptionFlag.NONE | OptionFlag.REQUIRED | OptionFlag.OPTIONAL | OptionFlag.MULTI
_PREFERENCE_FLAGS = OptionFlag.PREFER_LONG_NAME | OptionFlag.PREFER_SHORT_NAME
_KNOWN_FLAGS = int(_ARITY_FLAGS | _PREFERENCE_FLAGS)


class ValueArity(Enum):
    """
    How many values an option accepts.

    Each member's value is the OptionFlag selecting it, so a ValueArity can be
    passed wherever flags are expected.
    """
    NONE = OptionFlag.NONE
    REQUIRED = OptionFlag.REQUIRED
    OPTIONAL = OptionFlag.OPTIONAL
    MULTI = OptionFlag.MULTI

    @property
    def flags(self):
        # MULTI is always effective together with REQUIRED.
        if self is ValueArity.MULTI:
            return OptionFlag.MULTI | OptionFlag.REQUIRED
        return self.value


class OptionType(type):
    """
    Metaclass that turns descriptor classes into introspectable, read-only records.

    Responsibilities
    - Expose the fields listed in __introspectable__ as read-only properties via mirror().
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages and representations.
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = None

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                field: mirror(field) for field in namespace.get("__introspectable__", ())
            },
            **options,
        )

        @rename("__repr__")
        def __repr__(self):
            fields = ", ".join("%s=%r" % pair for pair in self.__rich_repr__())
            return f"{type(self).__typename__}({fields})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers such as rich.pretty.
            """
            for field in type(self).__displayable__ or type(self).__introspectable__:
                yield field, getattr(self, field)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_value_name(cls, metadata, /):
    if not isinstance(value_name := metadata["value_name"], str):
        raise InvalidValueError(f"{cls.__typename__} value name must be a string, got: {type(value_name).__name__}")
    elif not value_name:
        raise InvalidValueError(f"{cls.__typename__} value name cannot be empty")


def _sanitize_flags(cls, metadata, /):
    """
    Internal: validate the flag bitmask and add the implied arity bits.

    Responsibilities
    - flags: a ValueArity member or an integer (booleans rejected) whose bits
      are all known OptionFlag members.
    - Rejects NONE combined with any value arity and OPTIONAL combined with MULTI.
    - No arity bit → NONE; MULTI without REQUIRED → REQUIRED is added.
    - Rejects PREFER_LONG_NAME combined with PREFER_SHORT_NAME.

    Side effects
    - Mutates metadata["flags"] into an OptionFlag.
    """
    if isinstance(flags := metadata["flags"], ValueArity):
        flags = flags.flags
    if isinstance(flags, bool) or not isinstance(flags, int):
        raise InvalidValueError(f"{cls.__typename__} flags must be an integer, got: {type(flags).__name__}")
    flags = int(flags)
    if flags < 0 or flags & ~_KNOWN_FLAGS:
        raise InvalidValueError(f"{cls.__typename__} flags contain unknown bits: {flags:#x}")
    flags = OptionFlag(flags)

    if flags & OptionFlag.NONE:
        for other in (OptionFlag.REQUIRED, OptionFlag.OPTIONAL, OptionFlag.MULTI):
            if flags & other:
                raise ConflictingFlagsError(f"the {cls.__typename__} flags NONE and {other.name} cannot be combined")

    if flags & OptionFlag.OPTIONAL and flags & OptionFlag.MULTI:
        raise ConflictingFlagsError(f"the {cls.__typename__} flags OPTIONAL and MULTI cannot be combined")

    if flags & _PREFERENCE_FLAGS == _PREFERENCE_FLAGS:
        raise ConflictingFlagsError(
            f"the {cls.__typename__} flags PREFER_LONG_NAME and PREFER_SHORT_NAME cannot be combined"
        )

    if not flags & _ARITY_FLAGS:
        flags |= OptionFlag.NONE

    if flags & OptionFlag.MULTI:
        flags |= OptionFlag.REQUIRED

    metadata["flags"] = flags


def _sanitize_names(cls, metadata, /):
    r"""
    Internal: validate the long and short names and settle the preferred name.

    Responsibilities
    - long_name: one leading "--" is stripped. What remains must have at least
      two characters, start with a letter and contain letters, digits and
      hyphens only (r"[A-Za-z][A-Za-z0-9-]+").
    - short_name: optional; one leading "-" is stripped. What remains must be a
      single letter.
    - PREFER_SHORT_NAME requires a short name.
    - No preference given → PREFER_SHORT_NAME when a short name exists,
      PREFER_LONG_NAME otherwise.

    Must run after _sanitize_flags (expects metadata["flags"] as an OptionFlag).
    """
    if not isinstance(long_name := metadata["long_name"], str):
        raise InvalidValueError(
            f"{cls.__typename__} long name must be a string, got: {type(long_name).__name__}",
            code=FaultCode.INVALID_NAME,
        )
    long_name = long_name.removeprefix("--")
    if not long_name:
        raise InvalidValueError(f"{cls.__typename__} long name cannot be empty", code=FaultCode.INVALID_NAME)
    elif len(long_name) < 2:
        raise InvalidValueError(
            f"{cls.__typename__} long name must contain more than one character, got: {long_name!r}",
            code=FaultCode.INVALID_NAME,
        )
    elif not re.fullmatch(r"[A-Za-z]", long_name[0]):
        raise InvalidValueError(
            f"{cls.__typename__} long name must start with a letter, got: {long_name!r}",
            code=FaultCode.INVALID_NAME,
        )
    elif not re.fullmatch(r"[A-Za-z0-9-]+", long_name):
        raise InvalidValueError(
            f"{cls.__typename__} long name must contain letters, digits and hyphens only, got: {long_name!r}",
            code=FaultCode.INVALID_NAME,
        )
    metadata["long_name"] = long_name

    if (short_name := metadata["short_name"]) is not None:
        if not isinstance(short_name, str):
            raise InvalidValueError(
                f"{cls.__typename__} short name must be a string, got: {type(short_name).__name__}",
                code=FaultCode.INVALID_NAME,
            )
        short_name = short_name.removeprefix("-")
        if not re.fullmatch(r"[A-Za-z]", short_name):
            raise InvalidValueError(
                f"{cls.__typename__} short name must be exactly one letter, got: {short_name!r}",
                code=FaultCode.INVALID_NAME,
            )
        metadata["short_name"] = short_name

    flags = metadata["flags"]
    if flags & OptionFlag.PREFER_SHORT_NAME and short_name is None:
        raise InvalidValueError(
            f"{cls.__typename__} short name must be given if the flag PREFER_SHORT_NAME is selected",
            code=FaultCode.INVALID_NAME,
        )
    if not flags & _PREFERENCE_FLAGS:
        flags |= OptionFlag.PREFER_SHORT_NAME if short_name is not None else OptionFlag.PREFER_LONG_NAME
    metadata["flags"] = flags


def _sanitize_description(cls, metadata, /):
    if (description := metadata["description"]) is None:
        return
    if not isinstance(description, str | Text):
        raise InvalidValueError(
            f"{cls.__typename__} description must be a string, got: {type(description).__name__}",
            code=FaultCode.INVALID_DESCRIPTION,
        )
    elif isinstance(description, str) and not (description := description.strip()):
        raise InvalidValueError(
            f"{cls.__typename__} description cannot be empty",
            code=FaultCode.INVALID_DESCRIPTION,
        )
    elif isinstance(description, Text):
        description = description.copy()
    metadata["description"] = description


class Option(metaclass=OptionType):
    """
    Named option descriptor.

    Option declares one named option of a command: its long and short names,
    how many values it accepts, the default used when no value is passed and
    the placeholder shown for the value in usage examples. It is constructed
    once per declared option; apart from the default, its state is read-only.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes,
      mirroring the sanitized metadata values.
    - default returns the stored value as-is, except that MULTI defaults come
      back as a fresh list; description returns a copy of a rich Text.
    - arity reports the effective ValueArity; preferred_name the dashed name a
      renderer should show first.
    """

    __introspectable__ = (
        "long_name",
        "short_name",
        "flags",
        "value_name",
    )

    __displayable__ = (
        "long_name",
        "short_name",
        "arity",
        "default",
        "value_name",
        "description",
    )

    def __init__(
            self,
            long_name,
            short_name=None,
            flags=0,
            description=None,
            default=None,
            value_name="...",
    ):
        """
        Construct an Option with the provided metadata.

        Parameters
        - long_name: str
          Long name, with or without the leading "--".
        - short_name: str | None
          Single-letter short name, with or without the leading "-".
        - flags: int | ValueArity
          Bitwise combination of OptionFlag members, or a ValueArity.
        - description: str | Text | None
          Human-readable description for help output.
        - default: Any
          Default value. Must be None for NONE options, a sequence or None for
          MULTI options.
        - value_name: str
          Placeholder of the value in usage examples.

        Raises
        - InvalidValueError: malformed value name, flags, names or description.
          Flag bits outside OptionFlag (and negative flags) are rejected here
          rather than ignored.
        - ConflictingFlagsError: mutually exclusive flags requested.
        - InvalidDefaultValueError: default incompatible with the arity.
        """
        metadata = {
            "long_name": long_name,
            "short_name": short_name,
            "flags": flags,
            "description": description,
            "value_name": value_name,
        }
        cls = type(self)
        _sanitize_value_name(cls, metadata)
        _sanitize_flags(cls, metadata)
        _sanitize_names(cls, metadata)
        _sanitize_description(cls, metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        self._default = None
        if self.accepts_value() or default is not None:
            self.set_default_value(default)

        logger.debug("declared %r", self)

    @property
    def default(self):
        # MULTI defaults are lists owned by the option; anything else is returned as stored.
        if self.is_multi_valued():
            return list(self._default)
        return self._default

    @property
    def description(self):
        if isinstance(self._description, Text):
            return self._description.copy()
        return self._description

    @property
    def arity(self):
        for arity in (ValueArity.MULTI, ValueArity.OPTIONAL, ValueArity.REQUIRED, ValueArity.NONE):
            if self._flags & arity.value:
                return arity

    @property
    def preferred_name(self):
        if self.is_short_name_preferred():
            return "-" + self._short_name
        return "--" + self._long_name

    def is_long_name_preferred(self):
        return bool(self._flags & OptionFlag.PREFER_LONG_NAME)

    def is_short_name_preferred(self):
        return bool(self._flags & OptionFlag.PREFER_SHORT_NAME)

    def accepts_value(self):
        """
        Return True unless the option is presence-only (NONE).
        """
        return not self._flags & OptionFlag.NONE

    def is_value_required(self):
        return bool(self._flags & OptionFlag.REQUIRED)

    def is_value_optional(self):
        return bool(self._flags & OptionFlag.OPTIONAL)

    def is_multi_valued(self):
        return bool(self._flags & OptionFlag.MULTI)

    def set_default_value(self, default=None):
        """
        Replace the default value of the option.

        Rules
        - NONE options do not accept a default at all.
        - MULTI options take a sequence (stored as a list) or None, which
          becomes an empty list. Strings and bytes are not sequences here.
        - Any other option stores the value as-is, None included.

        Raises
        - InvalidDefaultValueError: the value does not fit the option arity.
        """
        if not self.accepts_value():
            raise InvalidDefaultValueError(
                f"cannot set a default value of {type(self).__typename__} --{self._long_name} "
                f"when using the flag NONE"
            )

        if self.is_multi_valued():
            if default is None:
                default = []
            elif not isinstance(default, Sequence) or isinstance(default, str | bytes | bytearray):
                raise InvalidDefaultValueError(
                    f"the default value of a multi-valued {type(self).__typename__} must be a sequence, "
                    f"got: {type(default).__name__}"
                )
            else:
                default = list(default)

        self._default = default
        logger.debug("default of --%s set to %r", self._long_name, default)

    def get_default_value(self):
        return self.default

    def get_value_name(self):
        return self._value_name


__all__ = (
    # Classes (declarations)
    "Option",

    # Constants and arity
    "OptionFlag",
    "ValueArity",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del OptionType
