"""
Help rendering.

render() turns the parser's declarations into a rich renderable:

    usage: prog [-h | --help] -s VALUE [ -n N ] PATH [ FILES... ]

    options:
      -s, --string VALUE
                   a string to print
      -n, --number N number of times to print the string

    positional arguments:
      PATH         where to look

Palette keys
- usage-label, program-name, key-name, metavar, section-label, argument-description,
  panel-title

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry, and
  __prog__ to override the program name.
"""
from collections import defaultdict

from rich.console import Console, Group
from rich.containers import Lines
from rich.panel import Panel
from rich.text import Text

console = Console()


def render(prog, helpkeys, store, *, colorful=False, fancy=False, width=None):
    """
    Build the help renderable.

    Parameters
    - prog: program name (overridden by __main__.__prog__ when present).
    - helpkeys: keys recognized as help requests, listed first in the usage line.
    - store: the declaration store (keyed slots then positional slots).
    - colorful / fancy: styling and panel chrome.
    - width: wrapping width (defaults to the stdout console width).
    """
    main = __import__("__main__")
    styles = defaultdict(str, {
        "usage-label": "bold #00E6FF",  # CYAN → signature info color
        "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "key-name": "bold #22C55E",  # GREEN for keys
        "metavar": "bold #FFD600",  # AMBER for parameters
        "section-label": "bold #FFFFFF",  # Pure white headers
        "argument-description": "#9CA3AF",  # Muted gray
        "panel-title": "bold #FF4D94",
    } | getattr(main, "__styles__", {}))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style])

    prog = getattr(main, "__prog__", prog)
    width = (width or console.width) - 4 * fancy

    # Usage line: help keys, keyed declarations, then positionals (in registration order)
    usage = Text()
    usage.append(text("usage", "usage-label")).append(": ")
    usage.append(text(prog, "program-name"))
    offset = len(usage) + 1

    inputs = []
    if helpkeys:
        inputs.append(Text.assemble("[", Text(" | ").join(text(key, "key-name") for key in helpkeys), "]"))
    for slot in store.keyed:
        segment = text(slot.keys[0], "key-name")
        if slot.parametric:
            segment = Text.assemble(segment, " ", text(slot.metavar, "metavar"))
        if slot.multi:
            segment = Text.assemble(segment, "...")
        inputs.append(segment if slot.required else Text.assemble("[ ", segment, " ]"))
    for slot in store.cardinals:
        segment = text(slot.metavar, "metavar")
        if slot.multi:
            segment = Text.assemble(segment, "...")
        inputs.append(segment if slot.required else Text.assemble("[ ", segment, " ]"))

    lines = Lines()
    for input in inputs:
        if lines and len(lines[-1]) + 1 + len(input) <= width - offset:
            lines[-1].append(Text(" ") + input)
        else:
            lines.append(input.copy())
    for index, line in enumerate(lines):
        usage.append("\n" + " " * offset if index else " ").append(line)

    renders = [usage]

    indent = 15  # Column for description wrap/hanging indent
    padding = 2

    def section(title, rows):
        block = Text()
        block.append(text(title, "section-label")).append(":")
        for names, descr in rows:
            block.append("\n").append(" " * padding).append(names)
            if not descr:
                continue
            if len(names) + padding >= indent:
                block.append("\n").append(" " * indent)
            else:
                block.append(" " * (indent - padding - len(names)))
            wrapped = text(descr, "argument-description").wrap(console, max(width - indent, 1))
            for index, line in enumerate(wrapped):
                block.append("\n" + " " * indent if index else "").append(line)
        return block

    if store.keyed:
        rows = []
        for slot in store.keyed:
            names = Text(", ").join(text(key, "key-name") for key in slot.keys)
            if slot.parametric:
                names = Text.assemble(names, " ", text(slot.metavar, "metavar"))
            rows.append((names, slot.descr))
        renders.append(Text("\n").append(section("options", rows)))

    if store.cardinals:
        rows = [(text(slot.metavar, "metavar"), slot.descr) for slot in store.cardinals]
        renders.append(Text("\n").append(section("positional arguments", rows)))

    renderable = Group(*renders)

    if fancy:
        renderable = Panel(
            renderable,
            title=Text.assemble("[", " ", f"{prog} HELP".upper(), " ", "]", style=styles["panel-title"] if colorful else ""),
            title_align="left",
        )

    return renderable


__all__ = (
    "render",
)
