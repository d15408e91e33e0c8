r"""
Argot schema entries.

Overview
- Enumerations
  • ValueType: BOOL, INT, HEX, FLT, STR. Drives the usage token and the accessor conversion.
  • Requirement: REQUIRED, OPTIONAL, INHERIT_GROUP. Decides required-set membership.

- Key
  • (short, long) pair identifying an option. Either name may be empty, not both.
    Names are stored without leading dashes: Key("h", "help") answers to -h/--help.

- Entries (schema descriptors)
  • Option: a registered option with its bound state (value, is_set) and metadata.
  • Positional: an ordered slot with a display name and its bound value.
  • Group: a mutually exclusive group of option keys with a mandatory marker.

Introspection & representation
- SchemaType metaclass provides stable __repr__/__rich_repr__ and exposes the fields listed
  in __introspectable__ as read-only properties (see utils.mirror). Binding state is mutated
  only through the underscored helpers used by the parser.

Quick example:
    >>> from argot.arguments import Key, Option, ValueType
    >>> entry = Option(Key("o", "output"), ValueType.STR, "output file", default="a.out")
    >>> entry.is_set, entry.value
    (True, 'a.out')
"""
import functools
import operator
import re
from enum import Enum
from typing import NamedTuple

from .utils import *


class SchemaType(type):
    """
    Metaclass that turns schema entries into introspectable descriptors.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    """
    __introspectable__ = ()

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
            Return a concise, stable representation with key metadata.

            Example
            - option(key=Key(short='v', long='verbose'), type=<ValueType.BOOL: 0>, ...)
            """
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers (e.g., rich).
            """
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class ValueType(Enum):
    """
    Declared value type of an option.

    The type never affects binding (values are captured as strings); it selects
    the usage token and the conversion applied by the typed accessors.
    """
    BOOL = 0
    INT = 1
    HEX = 2
    FLT = 3
    STR = 4

    @property
    def token(self):
        """
        Usage token appended after the option names (empty for BOOL).
        """
        return _TOKENS[self]


_TOKENS = {
    ValueType.BOOL: "",
    ValueType.INT: " <INT>",
    ValueType.HEX: " [0x]<HEX>",
    ValueType.FLT: " <FLOAT>",
    ValueType.STR: " <STRING>",
}


class Requirement(Enum):
    """
    Requirement of an option at registration time.

    - REQUIRED: the option must be set; it also turns its group mandatory.
    - OPTIONAL: the option may be omitted.
    - INHERIT_GROUP: the option is required iff its group is mandatory
      (only meaningful together with a group).
    """
    REQUIRED = "required"
    OPTIONAL = "optional"
    INHERIT_GROUP = "inherit-group"


class Key(NamedTuple):
    """
    Composite option identifier.

    Formatting helpers
    - str(key)      -> "-s/--long" (absent parts render as "-"), used in diagnostics.
    - key.column()  -> "-s, --long" (absent parts dropped), used in help.
    - key.synopsis()-> "-s | --long" (absent parts dropped), used in usage.
    """
    short: str = ""
    long: str = ""

    @property
    def empty(self):
        return not self.short and not self.long

    def names(self):
        return tuple(name for name in self if name)

    def column(self):
        return ", ".join(self._dashed())

    def synopsis(self):
        return " | ".join(self._dashed())

    def _dashed(self):
        if self.short:
            yield "-" + self.short
        if self.long:
            yield "--" + self.long

    def __str__(self):
        return ("-" + self.short if self.short else "-") + "/" + ("--" + self.long if self.long else "-")


def _sanitize_key(key, /):
    """
    Internal: coerce a key-like value into a Key.

    Accepts a Key, a (short, long) pair, or a single name (treated as long when
    longer than one character, short otherwise).

    Raises
    - TypeError: when the value is not key-like or names are not strings.
    """
    if isinstance(key, Key):
        pass
    elif isinstance(key, str):
        key = Key(long=key) if len(key) > 1 else Key(short=key)
    elif isinstance(key, tuple) and len(key) == 2:
        key = Key(*key)
    else:
        raise TypeError("option key must be a Key, a (short, long) pair, or a name")

    if not isinstance(key.short, str) or not isinstance(key.long, str):
        raise TypeError("option key names must be strings")
    return key


def _wellformed(name, /):
    """
    Internal: a name is reachable from the command line when it does not start with a
    dash (the binder strips every leading dash) and carries no whitespace or '='.
    """
    return not name or not (name.startswith("-") or re.search(r"[\s=]", name))


class Option(metaclass=SchemaType):
    """
    Registered option with its bound state.

    Fields (read-only properties)
    - key: Key identifying the option.
    - type: ValueType.
    - desc: help description; embedded line breaks are honoured by the renderer.
    - default: the registrant's default string, or None when there is none.
    - value: most recently bound raw string (the default until bound, else "").
    - is_set: True iff a default exists or the binder observed the option.
    - has_default: True iff a default was supplied.
    - group: name of the owning group, or None.
    """

    __introspectable__ = (
        "key",
        "type",
        "desc",
        "default",
        "value",
        "is_set",
        "has_default",
        "group",
    )

    def __init__(self, key, type=ValueType.STR, desc="", /, *, default=Unset, group=None):
        if not isinstance(type, ValueType):
            raise TypeError(f"{self.__typename__} 'type' must be a ValueType")
        if not isinstance(desc, str):
            raise TypeError(f"{self.__typename__} 'desc' must be a string")
        if not isinstance(default, str | UnsetType):
            default = str(default)

        self._key = _sanitize_key(key)
        self._type = type
        self._desc = desc
        self._default = coalesce(default)
        self._has_default = default is not Unset
        self._group = group
        self._reset()

    def _reset(self):
        # Binding state falls back to what registration established
        self._value = self._default if self._has_default else ""
        self._is_set = self._has_default

    def _mark(self):
        self._is_set = True

    def _bind(self, value, /):
        self._value = value

    @property
    def flag(self):
        """
        True for presence-only (BOOL) options, which never take a value token.
        """
        return self._type is ValueType.BOOL


class Positional(metaclass=SchemaType):
    """
    Positional slot, bound in declaration order.

    Fields (read-only properties)
    - index: zero-based position.
    - name: display name used in usage (defaults to "ARG_<index+1>").
    - value: bound token, "" until bound.
    """

    __introspectable__ = (
        "index",
        "name",
        "value",
    )

    def __init__(self, index, name=Unset, /):
        if not isinstance(name, str | UnsetType):
            raise TypeError(f"{self.__typename__} 'name' must be a string")
        self._index = index
        self._name = coalesce(name) or "ARG_%d" % (index + 1)
        self._value = ""

    def _reset(self):
        self._value = ""

    def _bind(self, value, /):
        self._value = value


class Group(metaclass=SchemaType):
    """
    Mutually exclusive group: at most one member may be set and, when mandatory,
    at least one must be.

    Fields (read-only properties)
    - name: unique group name.
    - mandatory: whether at least one member must be set.
    - members: keys of the member options in insertion order.
    """

    __introspectable__ = (
        "name",
        "mandatory",
        "members",
    )

    def __init__(self, name, mandatory=False, /):
        if not isinstance(name, str):
            raise TypeError(f"{self.__typename__} 'name' must be a string")
        self._name = name
        self._mandatory = bool(mandatory)
        self._members = []

    def __contains__(self, key):
        return key in self._members

    def __iter__(self):
        return iter(tuple(self._members))

    def __len__(self):
        return len(self._members)

    def _insert(self, key, /):
        self._members.append(key)

    def _make_mandatory(self):
        self._mandatory = True


__all__ = (
    # Enumerations
    "ValueType",
    "Requirement",

    # Identifiers
    "Key",

    # Schema entries
    "Option",
    "Positional",
    "Group",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del SchemaType
