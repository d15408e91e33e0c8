import copy
import sys

from rich.console import Console

from argot import *


__prog__ = "convert"


def main(argv):
    parser = ArgumentParser("Convert a raw dump into a readable listing.", colorful=True)
    parser.add_mutually_exclusive_group("format", True)
    parser.register_option(("i", "input"), Requirement.REQUIRED, ValueType.STR, "Input file")
    parser.register_option(("b", "base"), Requirement.OPTIONAL, ValueType.HEX, "Base address", default="0x0")
    parser.register_option(("", "text"), Requirement.INHERIT_GROUP, ValueType.BOOL, "Plain text listing", "format")
    parser.register_option(("", "json"), Requirement.INHERIT_GROUP, ValueType.BOOL, "JSON listing\n(one object per line)", "format")
    parser.register_positional(1, ["OUTPUT"])

    try:
        parser.load_arguments(argv)
    except ArgumentException as error:
        Console(stderr=True).print(copy.replace(error, colorful=True))
        return 2

    if parser.help_requested:
        parser.print_help()
        return 0

    Console().print({
        "input": parser.parse_option("input"),
        "base": parser.parse_option("base", int),
        "format": "json" if parser.option_is_set("json") else "text",
        "output": parser[0],
    })
    return 0


if __name__ == '__main__':
    sys.exit(main(sys.argv))
