"""
Usage and help rendering.

The renderer works on a read-only view of an ArgumentParser and produces
rich Text objects. The plain projection (Text.plain) is the exact textual
contract; styles are only applied when colorful rendering is requested.

Usage line
    Usage: <exec_name> <usage>
  where <usage> is either the caller-supplied usage string or a synthesized
  list: required options, then [ optional ] options, then positional names.
  The implicit help option is never synthesized.

Help body
    <usage line>
    <description>

    Available options:
    -h, --help               Show help text and exit

    -o, --output             Output file
                             Default value: a.out

Palette keys
- usage-label, program-name, usage-section, description-section
- group-label, option-name, metavar, positional
- argument-description, default-label, default-value
- panel-title

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
"""
from collections import defaultdict

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

_PALETTE = {
    # === Head sections ===
    "usage-label": "bold #00E6FF",
    "program-name": "bold #FF4D94",
    "usage-section": "bold #36C5F0",
    "description-section": "italic #A3A3A3",

    # === Options ===
    "group-label": "bold #FFFFFF",
    "option-name": "bold #00E6FF",
    "metavar": "bold #FFD600",
    "positional": "bold #22C55E",
    "argument-description": "#9CA3AF",
    "default-label": "#737373",
    "default-value": "bold #FFD600",

    # === Fancy panel ===
    "panel-title": "bold #FF4D94",
}


class _Styler:
    """
    resolve palette entries and build Text fragments honouring colorful mode.
    """

    def __init__(self, colorful):
        self.colorful = colorful
        self.styles = defaultdict(str, _PALETTE | getattr(__import__("__main__"), "__styles__", {}))

    def __call__(self, style):
        return self.styles[style] if self.colorful else ""

    def text(self, fragment, style=""):
        if not self.colorful:
            return Text(str(fragment))
        return Text(str(fragment), self(style))


def _synopsis(parser, styler):
    """
    synthesized usage items: required options, optional options, positionals.
    """
    required = []
    optional = []

    for option in parser.options:
        if option.key == parser.HELP:
            continue
        item = Text.assemble(
            styler.text(option.key.synopsis(), "option-name"),
            styler.text(option.type.token, "metavar"),
        )
        if option.key in parser.required:
            required.append(item)
        else:
            optional.append(Text.assemble("[ ", item, " ]"))

    positionals = [styler.text(positional.name, "positional") for positional in parser.positionals]
    return required + optional + positionals


def render_usage(parser, *, colorful=False):
    """
    build the usage line as a single Text.
    """
    styler = _Styler(colorful)

    usage = Text()
    usage.append(styler.text("Usage", "usage-label")).append(": ")
    usage.append(styler.text(parser.exec_name, "program-name"))
    usage.append(" ")

    if parser.usage:
        usage.append(styler.text(parser.usage, "usage-section"))
    else:
        usage.append(Text(" ").join(_synopsis(parser, styler)))
        usage.rstrip()

    return usage


def _entry(option, width, styler):
    """
    help entry for one option: name column, description lines, default value.
    """
    name = styler.text(option.key.column(), "option-name")
    lines = option.desc.split("\n")
    rendered = []

    # A name column that does not fit pushes the description to the next line
    if len(name) > width and any(lines):
        rendered.append(name)
        name = Text("")

    for index, line in enumerate(lines):
        head = name if index == 0 else Text("")
        if line:
            rendered.append(Text.assemble(head, " " * (width - len(head)), styler.text(line, "argument-description")))
        else:
            rendered.append(head)

    if option.has_default:
        rendered.append(Text.assemble(
            " " * width,
            styler.text("Default value: ", "default-label"),
            styler.text(option.default, "default-value"),
        ))

    return rendered


def render_help(parser, *, colorful=False, width=25):
    """
    build the complete help text as a single Text.
    """
    styler = _Styler(colorful)

    lines = [render_usage(parser, colorful=colorful)]
    lines.append(styler.text(parser.description, "description-section"))
    lines.append(Text(""))
    lines.append(styler.text("Available options:", "group-label"))

    for index, option in enumerate(parser.options):
        if index:
            lines.append(Text(""))
        lines.extend(_entry(option, width, styler))

    return Text("\n").join(lines)


def output(renderable, *, file=None, colorful=False, fancy=False, title=""):
    """
    print a renderable to the host's text sink (stdout when file is None).
    """
    console = Console(file=file, highlight=False, soft_wrap=True, no_color=not colorful)
    if fancy:
        styler = _Styler(colorful)
        renderable = Panel(
            Group(renderable),
            title=Text.assemble("[", " ", title.upper(), " ", "]", style=styler("panel-title")),
            title_align="left",
        )
    console.print(renderable)


__all__ = (
    "render_usage",
    "render_help",
    "output",
)
