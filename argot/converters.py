"""
Conversion policy of the typed accessors.

Every bound value is a raw string. The accessors turn it into the scalar the
caller asks for:

- BOOL options report their presence (is_set) coerced to the requested type.
- HEX options are read as base-16 integers, with or without a leading 0x.
- Everything else is read in the natural textual form of the requested type:
  decimal integers, textual floats, plain strings and boolean words.

Converters raise ValueError on bad input; the parser wraps that into a
ConversionError carrying the offending string.
"""
import builtins
import re

_TRUTHY = frozenset(("1", "true", "yes", "on"))
_FALSY = frozenset(("0", "false", "no", "off"))


def boolean(text, /):
    """
    read a boolean word (1/0, true/false, yes/no, on/off; case-insensitive).
    """
    if (word := text.strip().lower()) in _TRUTHY:
        return True
    if word in _FALSY:
        return False
    raise ValueError("invalid boolean literal: %r" % text)


def hexadecimal(text, /):
    """
    read a base-16 integer such as 'FF', '0xff' or '-0x1A'.
    """
    if not re.fullmatch(r"\s*[+-]?(0[xX])?[0-9a-fA-F]+(_?[0-9a-fA-F]+)*\s*", text):
        raise ValueError("invalid hexadecimal literal: %r" % text)
    return builtins.int(text, 16)


def integer(text, /):
    """
    read a decimal integer; a leading zero does not switch the base.
    """
    return builtins.int(text, 10)


# Natural textual readers keyed by the requested type
_READERS = {
    bool: boolean,
    int: integer,
    float: float,
    str: str,
}


def reader(type, /):
    """
    return the textual reader for a requested type.

    builtin scalars use the readers above; any other callable is trusted to
    accept a single string (e.g. decimal.Decimal, pathlib.Path).
    """
    if not callable(type):
        raise TypeError("conversion type must be callable")
    return _READERS.get(type, type)


def default(type, /):
    """
    default-constructed value of the requested type (0, 0.0, "", False, ...).
    """
    return type()


__all__ = (
    "boolean",
    "hexadecimal",
    "integer",
    "reader",
    "default",
)
