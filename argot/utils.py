"""
Small helpers shared by the schema entries and the parser.

- Unset: "no value given" marker. Option defaults need it because "" and
  None are both meaningful to a registrant.
- coalesce(): swap Unset for a fallback.
- rename(): give generated functions readable names in tracebacks.
- mirror(): read-only property over a "_name" attribute that hands out copies.
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker. Falsy, prints as "Unset", one instance per process.
    """

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
    object, or default when object is Unset. "" and None pass through.
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    rename(callable, name) sets __name__/__qualname__ and returns the callable;
    rename(name) returns a decorator doing the same.
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


def _detach(object):
    # Keys come back as Keys: named tuples rebuild through _make
    if isinstance(object, tuple):
        if hasattr(object, "_make"):
            return object._make(map(_detach, object))
        return tuple(map(_detach, object))
    if isinstance(object, Sequence) and not isinstance(object, str):
        return list(map(_detach, object))
    if isinstance(object, Mapping):
        return {key: _detach(value) for key, value in object.items()}
    if isinstance(object, Set):
        return set(map(_detach, object))
    return object


def mirror(name, /):
    """
    read-only property returning a detached copy of self._<name>.

    Group uses it for members, so appending to group.members never reaches
    the schema.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _detach(getattr(self, "_" + name))

    return property(getter)


Unset = UnsetType()


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "UnsetType",
    "Unset",
)
