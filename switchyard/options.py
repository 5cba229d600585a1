r"""
Switchyard option specifications.

Overview
- Option: static description of one declared option: its switches, arity,
  mode (optional/required), default value and value type.
- flag(...): shortcut for a presence-only option (arity (0, 0), Boolean, default False).
- Mode: OPTIONAL / REQUIRED.

Options are read-only once built. The parser never writes into them: bound
values are produced fresh by every parse pass and handed back in a result.

Metadata (sanitized on construction)
- names: one or more prefixed switches.
  • short: "-x" (exactly one character after a single dash)
  • long:  "--name", "--long-name" (unicode letters allowed)
  Duplicates are rejected. The bare forms ("x", "name") are exposed as `switches`.
- arity: Arity | "?" | "*" | "+" | int (see Arity.coerce).
- mode: Mode.
- default: any value (not validated).
- type: ValueType or plain callable (wrapped in Converter).
- descr / metavar: optional, non-empty strings after trimming.
- hidden: bool (suppresses from help).

Defaults
- no type and no arity → flag: NO_ARGUMENT, Boolean, default False.
- type but no arity   → ONE_ARGUMENT.
- arity but no type   → String.

Quick example:
    >>> from switchyard import Option, Arity, Mode, Integer, flag
    >>> verbose = flag("-v", "--verbose")
    >>> output = Option("-o", "--output", arity=Arity.ONE_ARGUMENT, mode=Mode.REQUIRED)
    >>> jobs = Option("-j", "--jobs", type=Integer(), default=1)
"""
import functools
import operator
import re
from enum import Enum

from rich.text import Text

from .tokens import Arity
from .utils import *
from .valuetypes import ValueType, String, Boolean, Converter


class Mode(Enum):
    OPTIONAL = "optional"
    REQUIRED = "required"


class OptionType(type):
    """
    Metaclass that turns specs into introspectable, read-only descriptors.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      mirroring the sanitized "_<name>" backing field.
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and help output.
    - Derive __typename__ from the class name for messages.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Example: option(names=('-v', '--verbose'), arity=arity(0, 0), ...)
            """
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


_SHORT = re.compile(r"-[^\s=-]")
_LONG = re.compile(r"--[^\W\d_](-?[^\W_]+)*")


def _sanitize_names(cls, metadata, /):
    """
    Internal: validate prefixed names and derive the bare switches.

    Raises
    - TypeError: when names are missing or contain non-string entries.
    - ValueError: when a name is empty, malformed or duplicated.
    """
    names = []
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif not (_SHORT.fullmatch(name) or _LONG.fullmatch(name)):
            raise ValueError(
                f"{cls.__typename__} names must be '-x' (one character) or '--name' style switches, got {name!r}"
            )
        elif name in names:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        names.append(name)

    metadata["names"] = tuple(names)
    metadata["switches"] = tuple(name.removeprefix("--") if name.startswith("--") else name[1:] for name in names)


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize arity/type/mode and the help fields.
    """
    arity, type = metadata["arity"], metadata["type"]

    if type is Unset and arity is Unset:
        # presence-only switch
        metadata["arity"] = Arity.NO_ARGUMENT
        metadata["type"] = Boolean()
        metadata["default"] = coalesce(metadata["default"], False)
    else:
        metadata["arity"] = Arity.ONE_ARGUMENT if arity is Unset else Arity.coerce(arity)
        if type is Unset:
            type = String()
        elif not isinstance(type, ValueType):
            if not callable(type):
                raise TypeError(f"{cls.__typename__} 'type' must be a value type or a callable")
            type = Converter(type)
        metadata["type"] = type
        metadata["default"] = coalesce(metadata["default"])

    if not isinstance(metadata["mode"], Mode):
        raise TypeError(f"{cls.__typename__} 'mode' must be a Mode")

    for field in ("descr", "metavar"):
        if not isinstance(value := metadata[field], str | Text | Unset):
            raise TypeError(f"{cls.__typename__} {field!r} must be a string")
        elif isinstance(value, str) and not (value := value.strip()):
            raise ValueError(f"{cls.__typename__} {field!r} cannot be empty")
        metadata[field] = coalesce(value)


class Option(metaclass=OptionType):
    """
    Named option specification.

    Properties
    - names, switches, arity, mode, default, type, descr, metavar, hidden are
      read-only attributes mirroring the sanitized metadata.
    - required: shortcut for mode is Mode.REQUIRED.

    Identity
    - Options compare and hash by identity; two options sharing a switch cannot
      be registered on the same parser.
    """

    __introspectable__ = (
        "names",
        "switches",
        "arity",
        "mode",
        "default",
        "type",
        "descr",
        "metavar",
        "hidden",
    )
    __displayable__ = (
        "names",
        "arity",
        "mode",
        "default",
        "type",
    )

    def __new__(
            cls,
            *names,
            arity=Unset,
            mode=Mode.OPTIONAL,
            default=Unset,
            type=Unset,
            descr=Unset,
            metavar=Unset,
            hidden=False
    ):
        """
        Construct an Option with the provided metadata.

        Parameters
        - names: one or more str ("-x", "--name").
        - arity: Arity | "?" | "*" | "+" | int.
        - mode: Mode.OPTIONAL (default) or Mode.REQUIRED.
        - default: value returned when the option is absent.
        - type: ValueType | Callable[[str], Any].
        - descr: short description for help.
        - metavar: label for the value in help (defaults to the value type's).
        - hidden: suppress from help output.
        """
        metadata = {
            "names": names,
            "switches": (),
            "arity": arity,
            "mode": mode,
            "default": default,
            "type": type,
            "descr": descr,
            "metavar": metavar,
            "hidden": bool(hidden),
        }
        _sanitize_names(cls, metadata)
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def required(self):
        return self._mode is Mode.REQUIRED

    @property
    def flag(self):
        return self._arity == Arity.NO_ARGUMENT

    @property
    def label(self):
        """
        The name used in messages: the first long name, otherwise the first name.
        """
        return next((name for name in self._names if name.startswith("--")), self._names[0])


def flag(*names, **kwargs):
    """
    Build a presence-only option (arity (0, 0), Boolean, default False).

    Accepts the same keywords as Option except arity/type.
    """
    if "arity" in kwargs or "type" in kwargs:
        raise TypeError("flag() does not accept 'arity' or 'type'")
    return Option(*names, **kwargs)


__all__ = (
    "Mode",
    "Option",
    "flag",
)

# Not part of the public API.
del OptionType
