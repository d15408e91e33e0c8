"""
Argot parser: register a schema, bind an argument vector, validate, access.

What this module provides
- ArgumentParser: an embeddable command-line parser built around
  • a schema registry (options, positional slots, mutually exclusive groups),
  • a token binder that walks argv and captures raw strings,
  • a validator that enforces required options, required groups, in-group
    conflicts and the positional count, in a fixed order,
  • typed accessors with decimal, float, boolean and hexadecimal conversion,
  • a usage/help renderer (see argot.formatting).

Lifecycle
- register_* calls mutate the schema (append-only).
- load_arguments(argv) resets bound state, binds argv and validates.
- accessors and renderers are read-only and may be used afterwards.

Quick start
    from argot import ArgumentParser, Requirement, ValueType

    parser = ArgumentParser("Copy a file.")
    parser.register_option(("i", "input"), Requirement.REQUIRED, ValueType.STR, "Input file")
    parser.register_option(("n", "count"), Requirement.OPTIONAL, ValueType.INT, "Copies", default="1")
    parser.register_positional(1, ["DEST"])
    parser.load_arguments(["./copy", "--input", "a.txt", "-n", "3", "b.txt"])

    parser.parse_option("input")            # 'a.txt'
    parser.parse_option("count", int)       # 3
    parser[0]                               # 'b.txt'

Faults
- Registration refusals return False and emit a RegistrationWarning.
- Binding, validation and conversion failures raise ArgumentException
  subclasses (see argot.faults). Nothing here exits the process.
"""
import os
import shlex
import sys
from collections import defaultdict
from collections.abc import Iterable

from . import converters
from . import formatting
from .arguments import Group, Key, Option, Positional, Requirement, ValueType, _sanitize_key, _wellformed
from .faults import *
from .utils import *


class ArgumentParser:
    """
    Command-line argument parser with a pre-registered schema.

    Parameters
    - description: program description shown in help.
    - usage: caller-supplied usage string; replaces the synthesized usage.
    - strict: raise on unknown option names and surplus positional tokens
      instead of skipping them with a warning.
    - colorful / fancy: styling for print_usage()/print_help().
    - width: help name-column width.

    The help option -h/--help (BOOL) is registered implicitly.
    """

    HELP = Key("h", "help")

    def __init__(self, description="", usage="", *, strict=False, colorful=False, fancy=False, width=25):
        if not isinstance(description, str):
            raise TypeError("ArgumentParser 'description' must be a string")
        if not isinstance(usage, str):
            raise TypeError("ArgumentParser 'usage' must be a string")
        if not isinstance(width, int) or width < 1:
            raise ValueError("ArgumentParser 'width' must be a positive integer")

        self.description = description
        self.usage = usage
        self.strict = bool(strict)
        self.colorful = bool(colorful)
        self.fancy = bool(fancy)
        self.width = width

        self._exec_name = ""
        self._options = {}
        self._shorts = defaultdict(list)
        self._longs = defaultdict(list)
        self._required = {}
        self._groups = {}
        self._memberships = {}
        self._positionals = []
        self._cursor = 0

        self.register_option(self.HELP, Requirement.OPTIONAL, ValueType.BOOL, "Show help text and exit")
        self._help = self._options[self.HELP]

    # ------------------------------------------------------------------
    # read-only views
    # ------------------------------------------------------------------

    @property
    def exec_name(self):
        """executable name taken from argv[0] by the last load_arguments() call."""
        return self._exec_name

    @property
    def options(self):
        return tuple(self._options.values())

    @property
    def positionals(self):
        return tuple(self._positionals)

    @property
    def groups(self):
        return tuple(self._groups.values())

    @property
    def required(self):
        """keys that must be set after binding, directly or through a mandatory group."""
        return tuple(self._required)

    @property
    def positional_count(self):
        """number of positional tokens bound by the last load_arguments() call."""
        return self._cursor

    @property
    def help_requested(self):
        return self._help.is_set

    def set_usage_text(self, text, /):
        if not isinstance(text, str):
            raise TypeError("set_usage_text() argument must be a string")
        self.usage = text

    # ------------------------------------------------------------------
    # registry
    # ------------------------------------------------------------------

    def _refuse(self, message, code, **context):
        trigger(RegistrationWarning(message), code=code, title="registration refused", **context)
        return False

    def register_option(self, key, requirement=Requirement.OPTIONAL, type=ValueType.STR, desc="", group="", default=Unset):
        """
        register an option; return True on success, False (no state change) otherwise.

        parameters
        - key: Key, (short, long) pair, or a single name. Names carry no dashes.
        - requirement: Requirement.REQUIRED | OPTIONAL | INHERIT_GROUP.
        - type: ValueType of the option.
        - desc: help description (may contain line breaks).
        - group: name of an existing mutually exclusive group, or "".
        - default: default value string; when given the option starts out set.

        refusals
        - both names empty, or a name that cannot be spelled on a command line;
        - INHERIT_GROUP without a group;
        - a group that was never added;
        - a key that is already registered.
        """
        key = _sanitize_key(key)
        if not isinstance(requirement, Requirement):
            raise TypeError("register_option() 'requirement' must be a Requirement")
        if not isinstance(group, str):
            raise TypeError("register_option() 'group' must be a string")

        if key.empty:
            return self._refuse("option key cannot be empty on both names", FaultCode.EMPTY_KEY, key=key)
        if not all(map(_wellformed, key)):
            return self._refuse(
                "option %s has a name that cannot be spelled on a command line" % (key,),
                FaultCode.MALFORMED_NAME,
                key=key,
                hint="register names without leading dashes, whitespace or '='",
            )
        if requirement is Requirement.INHERIT_GROUP and not group:
            return self._refuse(
                "option %s cannot inherit its requirement from no group" % (key,),
                FaultCode.ORPHAN_INHERITANCE,
                key=key,
                hint="pass the group name or use Requirement.OPTIONAL",
            )
        if group and group not in self._groups:
            return self._refuse(
                "option %s refers to unknown group %r" % (key, group),
                FaultCode.UNKNOWN_GROUP,
                key=key,
                group=group,
                hint="call add_mutually_exclusive_group(%r) first" % group,
            )
        if key in self._options:
            return self._refuse("option %s is already registered" % (key,), FaultCode.DUPLICATED_OPTION, key=key)

        option = Option(key, type, desc, default=default)
        self._options[key] = option
        if key.short:
            self._shorts[key.short].append(option)
        if key.long:
            self._longs[key.long].append(option)

        if requirement is Requirement.REQUIRED:
            self._required[key] = None

        if group:
            if requirement is Requirement.REQUIRED:
                self._make_mandatory(self._groups[group])
            self._attach(self._groups[group], key)

        return True

    def register_positional(self, count, names=()):
        """
        append `count` positional slots; slot i is named names[i] or "ARG_<i+1>".
        """
        if not isinstance(count, int) or count < 0:
            raise ValueError("register_positional() 'count' must be a non-negative integer")
        names = list(names or ())
        for index in range(count):
            self._positionals.append(Positional(len(self._positionals), names[index] if index < len(names) else Unset))

    def add_mutually_exclusive_group(self, name, required=False):
        """
        create an empty group; return False when a group of this name exists.
        """
        if not isinstance(name, str):
            raise TypeError("add_mutually_exclusive_group() 'name' must be a string")
        if name in self._groups:
            return self._refuse("group %r already exists" % name, FaultCode.DUPLICATED_GROUP, group=name)
        self._groups[name] = Group(name, required)
        return True

    def insert_into_group(self, name, key):
        """
        add a registered option key to a group; return False when the group does
        not exist, the key is not registered or it already belongs to a group.
        """
        key = _sanitize_key(key)
        try:
            group = self._groups[name]
        except KeyError:
            return self._refuse("group %r does not exist" % name, FaultCode.UNKNOWN_GROUP, group=name)
        if key not in self._options:
            return self._refuse("option %s is not registered" % (key,), FaultCode.UNREGISTERED_OPTION, key=key, group=name)
        if key in self._memberships:
            return self._refuse(
                "option %s already belongs to group %r" % (key, self._memberships[key]),
                FaultCode.ALREADY_GROUPED,
                key=key,
                group=name,
            )
        self._attach(group, key)
        return True

    def _attach(self, group, key):
        group._insert(key)
        self._memberships[key] = group.name
        self._options[key]._group = group.name
        if group.mandatory:
            self._required[key] = None

    def _make_mandatory(self, group):
        group._make_mandatory()
        for member in group:
            self._required[member] = None

    def find_option(self, name):
        """
        resolve a name against both short and long names; return the option when
        exactly one matches, otherwise None.
        """
        if not isinstance(name, str) or not name:
            return None
        candidates = {id(option): option for option in self._shorts.get(name, []) + self._longs.get(name, [])}
        if len(candidates) != 1:
            return None
        return next(iter(candidates.values()))

    def has_option(self, name):
        return self.find_option(name) is not None

    def option_is_set(self, name):
        return (option := self.find_option(name)) is not None and option.is_set

    # ------------------------------------------------------------------
    # binder
    # ------------------------------------------------------------------

    def _reset(self):
        for option in self._options.values():
            option._reset()
        for positional in self._positionals:
            positional._reset()
        self._cursor = 0

    def _tokens(self, argv):
        if argv is Unset:
            return list(sys.argv)
        if isinstance(argv, str):
            return shlex.split(argv)
        if isinstance(argv, Iterable):
            tokens = list(argv)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("load_arguments() argument must be a string or an iterable of strings")
            return tokens
        raise TypeError("load_arguments() argument must be a string or an iterable of strings")

    def _skip(self, message, error, warning, *, codes, **context):
        # strict parsers raise, lenient ones warn and carry on
        if self.strict:
            trigger(error(message), code=codes[0], prog=self._exec_name, **context)
        else:
            trigger(warning(message), code=codes[1], prog=self._exec_name, **context)

    def _bind(self, tokens):
        pending = None
        ended = False

        for index, token in enumerate(tokens, start=1):
            if token == "--" and not ended:
                ended = True
                pending = None
                continue

            if token.startswith("-") and token != "-" and not ended:
                if self._cursor:
                    trigger(
                        ParseError("Positional arguments cannot precede options."),
                        code=FaultCode.PRECEDING_POSITIONAL,
                        title="positional before option",
                        hint="move %r in front of the positional arguments" % token,
                        token=token,
                        index=index,
                        prog=self._exec_name,
                    )
                name = token.lstrip("-")
                if (option := self.find_option(name)) is None:
                    pending = None
                    ambiguous = bool(name) and len(self._shorts.get(name, []) + self._longs.get(name, [])) > 1
                    self._skip(
                        ("ambiguous option %r" if ambiguous else "unknown option %r") % token,
                        UnknownOptionError,
                        UnknownOptionWarning,
                        codes=(FaultCode.AMBIGUOUS_OPTION if ambiguous else FaultCode.UNKNOWN_OPTION, FaultCode.SKIPPED_OPTION),
                        title="ambiguous option" if ambiguous else "unknown option",
                        hint="try '%s --help' to see all available options" % (self._exec_name or "prog"),
                        token=token,
                        index=index,
                    )
                    continue
                option._mark()
                pending = None if option.flag else option
                continue

            if pending is not None:
                pending._bind(token)
                pending = None
            elif self._cursor < len(self._positionals):
                self._positionals[self._cursor]._bind(token)
                self._cursor += 1
            else:
                self._skip(
                    "unexpected positional argument %r" % token,
                    UnexpectedPositionalError,
                    UnexpectedPositionalWarning,
                    codes=(FaultCode.UNEXPECTED_POSITIONAL, FaultCode.SKIPPED_POSITIONAL),
                    title="unexpected positional argument",
                    hint="at most %d positional argument(s) are accepted" % len(self._positionals),
                    token=token,
                    index=index,
                )

    # ------------------------------------------------------------------
    # validator
    # ------------------------------------------------------------------

    def _missing_options(self):
        return [key for key in self._required if key not in self._memberships and not self._options[key].is_set]

    def _missing_groups(self):
        return [
            group for group in self._groups.values()
            if group.mandatory and not any(self._options[key].is_set for key in group)
        ]

    def _conflicts(self):
        return [
            group for group in self._groups.values()
            if sum(self._options[key].is_set for key in group) > 1
        ]

    def _validate(self):
        missing = self._missing_options()
        groups = self._missing_groups()

        message = ""
        if missing:
            message += "Missing required options:\n"
            message += "".join("%s\n" % (key,) for key in missing)
        if groups:
            message += "At least one option from these groups must be set:\n"
            for group in groups:
                message += "%s\n" % group.name
                message += "".join("\t%s\n" % (key,) for key in group)
        if message:
            trigger(
                MissingRequiredError(message),
                code=FaultCode.MISSING_REQUIRED,
                title="missing required options",
                hint="try '%s --help' to see the program usage" % (self._exec_name or "prog"),
                missing=tuple(missing),
                groups=tuple(group.name for group in groups),
                prog=self._exec_name,
            )

        if conflicts := self._conflicts():
            message = "Conflicting options used in these groups:\n"
            for group in conflicts:
                message += "%s\n" % group.name
                message += "".join("\t%s\n" % (key,) for key in group if self._options[key].is_set)
            trigger(
                ConflictingOptionsError(message),
                code=FaultCode.CONFLICTING_OPTIONS,
                title="conflicting options",
                hint="use at most one option from each listed group",
                groups=tuple(group.name for group in conflicts),
                prog=self._exec_name,
            )

        if self._cursor < len(self._positionals):
            trigger(
                MissingPositionalError("Missing positional arguments. Check program usage "),
                code=FaultCode.MISSING_POSITIONALS,
                title="missing positional arguments",
                hint="expected %d positional argument(s), got %d" % (len(self._positionals), self._cursor),
                missing=tuple(positional.name for positional in self._positionals[self._cursor:]),
                prog=self._exec_name,
            )

    def load_arguments(self, argv=Unset, /):
        """
        bind an argument vector and validate it.

        parameters
        - argv: sequence of strings with the program path first, a shell-like
          string (split with shlex), or Unset to read sys.argv.

        raises
        - ParseError when an option follows a positional argument (and, in strict
          mode, on unknown options or surplus positionals).
        - MissingRequiredError, ConflictingOptionsError, MissingPositionalError
          from validation. Validation is skipped entirely when help is requested.
        """
        tokens = self._tokens(argv)
        self._reset()
        self._exec_name = tokens[0].rpartition(os.sep)[2] if tokens else ""
        self._bind(tokens[1:])

        if not self._help.is_set:
            self._validate()

    # ------------------------------------------------------------------
    # accessors
    # ------------------------------------------------------------------

    def raw_by_name(self, name, /):
        """stored value string of an option, or "" when no option matches."""
        return option.value if (option := self.find_option(name)) is not None else ""

    def raw_by_index(self, index, /):
        """stored value string of a positional slot."""
        return self._slot(index).value

    def __getitem__(self, item):
        if isinstance(item, str):
            return self.raw_by_name(item)
        if isinstance(item, int):
            return self.raw_by_index(item)
        raise TypeError("ArgumentParser indices must be option names or positional indexes")

    def _slot(self, index):
        if not isinstance(index, int):
            raise TypeError("positional index must be an integer")
        if not 0 <= index < len(self._positionals):
            trigger(
                PositionalIndexError("Positional argument index out of range."),
                code=FaultCode.POSITIONAL_OUT_OF_RANGE,
                title="positional index out of range",
                index=index,
                prog=self._exec_name,
            )
        return self._positionals[index]

    def parse_option(self, name, /, type=str):
        """
        convert an option's stored value to `type`.

        rules
        - unknown or unset option: type() (0, 0.0, "", False, ...).
        - BOOL option: type(is_set).
        - HEX option: base-16 integer (0x prefix optional), then type(...);
          a str request returns the bound text unchanged.
        - otherwise: the natural textual form of `type`.

        raises
        - ConversionError carrying the offending string.
        """
        return self._parse(name, type, hexadecimal=False)

    def _parse(self, name, type, *, hexadecimal):
        reader = converters.reader(type)
        if (option := self.find_option(name)) is None or not option.is_set:
            return converters.default(type)
        try:
            if option.type is ValueType.BOOL:
                return type(option.is_set)
            if hexadecimal or (option.type is ValueType.HEX and type is not str):
                return type(converters.hexadecimal(option.value))
            return reader(option.value)
        except (ValueError, TypeError, ArithmeticError) as error:
            trigger(
                ConversionError("Cannot convert option to given type. (%s)" % option.value),
                code=FaultCode.UNCONVERTIBLE_VALUE,
                title="unconvertible option value",
                hint="%s expects %s" % (option.key, getattr(type, "__name__", "a different value")),
                name=name,
                value=option.value,
                cause=error,
                prog=self._exec_name,
            )

    def parse_positional(self, index, /, type=str):
        """
        convert a positional slot's value to `type` (natural textual form).

        raises
        - PositionalIndexError for an out-of-range index.
        - ConversionError carrying the index and the offending string.
        """
        reader = converters.reader(type)
        positional = self._slot(index)
        try:
            return reader(positional.value)
        except (ValueError, TypeError, ArithmeticError) as error:
            trigger(
                ConversionError("Cannot convert positional %d to given type. (%s)" % (index, positional.value)),
                code=FaultCode.UNCONVERTIBLE_VALUE,
                title="unconvertible positional value",
                hint="%s expects %s" % (positional.name, getattr(type, "__name__", "a different value")),
                index=index,
                value=positional.value,
                cause=error,
                prog=self._exec_name,
            )

    def parse_option_int(self, name, /):
        return self.parse_option(name, int)

    def parse_option_float(self, name, /):
        return self.parse_option(name, float)

    def parse_option_string(self, name, /):
        return self.parse_option(name, str)

    def parse_option_bool(self, name, /):
        return self.parse_option(name, bool)

    def parse_option_hex(self, name, /):
        """
        read an option as a base-16 integer whatever its declared type.
        """
        return self._parse(name, int, hexadecimal=True)

    def parse_positional_int(self, index, /):
        return self.parse_positional(index, int)

    def parse_positional_float(self, index, /):
        return self.parse_positional(index, float)

    # ------------------------------------------------------------------
    # renderer
    # ------------------------------------------------------------------

    def format_usage(self):
        return formatting.render_usage(self).plain

    def format_help(self):
        return formatting.render_help(self, width=self.width).plain

    def print_usage(self, file=None):
        formatting.output(
            formatting.render_usage(self, colorful=self.colorful),
            file=file,
            colorful=self.colorful,
            fancy=self.fancy,
            title="%s usage" % self._exec_name,
        )

    def print_help(self, file=None):
        formatting.output(
            formatting.render_help(self, colorful=self.colorful, width=self.width),
            file=file,
            colorful=self.colorful,
            fancy=self.fancy,
            title="%s help" % self._exec_name,
        )

    print_help_text = print_help

    def __repr__(self):
        return "argument-parser(exec_name=%r, options=%d, positionals=%d, groups=%d)" % (
            self._exec_name, len(self._options), len(self._positionals), len(self._groups)
        )


__all__ = (
    "ArgumentParser",
)
