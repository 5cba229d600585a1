"""
Switchyard utilities shared by the option, fault and parser layers.

- Unset / UnsetType: "not provided" marker for keyword defaults where None is
  a legitimate value (option defaults, help paragraphs, the parse prompt).
- coalesce(value, default): resolve Unset to a concrete value.
- rename(...): give generated callables stable names for reprs and tracebacks.
- mirror(name): read-only property over a "_<name>" backing field.
- ordinal(n), display(switch): message helpers ("second position", "--name").
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker.

    Unset is falsy, prints as "Unset", is never equal to None and there is only
    ever one of it. It takes part in PEP 604 unions so that checks such as
    isinstance(value, str | Unset) read naturally.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    Return 'object' unless it is Unset, in which case return 'default'.

    coalesce(Unset, 1) -> 1, coalesce(None, 1) -> None, coalesce(0, 1) -> 0
    """
    return default if object is Unset else object


def rename(*parameters):
    """
    rename(callable, name) renames in place and returns the callable;
    rename(name) returns a decorator doing the same.
    """
    match parameters:
        case (str() as name,):
            def decorator(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)
            return rename(decorator, "rename")
        case (_,):
            raise TypeError("@rename() argument must be a string")
        case (callable, str() as name):
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            try:
                callable.__name__ = callable.__qualname__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case (_, _):
            raise TypeError("rename() second argument must be a string")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _freeze(object):
    # tuples for sequences, frozensets for sets, fresh dicts for mappings
    match object:
        case str():
            return object
        case Sequence():
            return tuple(map(_freeze, object))
        case Mapping():
            return {key: _freeze(value) for key, value in object.items()}
        case Set():
            return frozenset(object)
        case _:
            return object


def mirror(name, /):
    """
    Read-only property returning a frozen view of self._<name>.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")
    return property(rename(lambda self: _freeze(getattr(self, "_" + name)), name))


_WORDS = ("first", "second", "third", "fourth", "fifth", "sixth", "seventh", "eighth", "ninth", "tenth")


@functools.cache
def ordinal(number, /):
    """
    1-based position as an ordinal: "first" … "tenth", then "11th", "21st", "102nd", ...
    """
    if 1 <= number <= len(_WORDS):
        return _WORDS[number - 1]
    if number % 100 in (11, 12, 13):
        return "%dth" % number
    return "%d%s" % (number, {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th"))


def display(switch, /):
    """
    Render a bare switch the way a user types it: "-v" for one character, "--name" otherwise.
    """
    return ("-" if len(switch) == 1 else "--") + switch


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "ordinal",
    "display",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
