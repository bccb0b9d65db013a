"""
Argosy faults (parse diagnostics) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every diagnostic kind.
- ParseFault: base type of the five diagnostic kinds. Faults are exceptions used as
  values: the engine appends them to a list during a pass and never raises them.
- ParseExit: exception group bundling every fault of a failed pass; raised at the
  boundary (non-shell mode) or printed followed by usage (shell mode).
- trigger(): central entry point to surface a fault with runtime options.

Diagnostic kinds (closed set)
- InvalidValueGiven            a value was rejected by the declaration's reader
- RequiredOptionNotSet         a required option/positional got nothing after the pass
- RequiredOptionValueNotGiven  an argument-bearing key was the last token
- UnexpectedArgument           a token matched no key, pack or pending positional
- UnexpectedOptionValueGiven   key=value aimed at a key taking no value

UX goals
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import *

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - keys (1111x)
      • UNEXPECTED_OPTION_VALUE, REQUIRED_OPTION_VALUE
    - positionals and leftovers (1112x)
      • UNEXPECTED_ARGUMENT, REQUIRED_OPTION_NOT_SET
    - readers (1113x)
      • INVALID_VALUE

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- key errors (1111x) ---
    UNEXPECTED_OPTION_VALUE     = 11113
    REQUIRED_OPTION_VALUE       = 11117

    # --- positional/leftover errors (1112x) ---
    UNEXPECTED_ARGUMENT         = 11121
    REQUIRED_OPTION_NOT_SET     = 11125

    # --- reader errors (1113x) ---
    INVALID_VALUE               = 11131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _styles(defaults, /):
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


def _text(fragment, style, colorful, /):
    if not fragment:
        return Text("")
    if not colorful:
        return Text(str(fragment))
    if isinstance(fragment, Text):
        return fragment
    return Text(str(fragment), style)


class ParseFault(Exception):
    """
    base diagnostic.

    subclasses declare
    - code: FaultCode
    - title: short, lowercased headline
    - fields: names of the positional payload (also the exception args)
    - template: %-format producing the one-line message from the fields

    runtime options (prog, helpkey, colorful, fancy, ratio) only affect rendering
    and are merged through copy.replace(fault, **options).
    """
    code = None
    title = None
    fields = ()
    template = None
    hint = None

    def __init__(self, *payload, **options):
        if len(payload) != len(self.fields):
            raise TypeError("%s() takes %d positional arguments but %d were given" % (
                type(self).__name__, len(self.fields), len(payload)
            ))
        super().__init__(*payload)
        for name, object in zip(self.fields, payload):
            setattr(self, name, object)
        self.options = MappingProxyType(options)

    @property
    def message(self):
        return self.template % self.args

    @property
    def advice(self):
        """
        the hint, pointing at the help key when the parser recognizes one.

        option "helpkey" names that key ("--help" when absent); None drops the pointer.
        """
        if (helpkey := self.options.get("helpkey", "--help")) is None:
            return self.hint
        return "%s; run '%s %s' to see the expected usage" % (self.hint, self.options.get("prog", "<program>"), helpkey)

    def __str__(self):
        return self.message

    def __eq__(self, other):
        if not isinstance(other, ParseFault):
            return NotImplemented
        return type(self) is type(other) and self.args == other.args

    def __hash__(self):
        return hash((type(self), self.args))

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, ", ".join(map(repr, self.args)))

    def __rich__(self):
        styles = _styles({
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })
        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

        def text(fragment, style=""):
            return _text(fragment, styles[style] if colorful else "", colorful)

        prog = text(getattr(__import__("__main__"), "__prog__", self.options.get("prog", "<program>")), "prog-name")

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(self.code.normalize(), "code"),
            " | ",
            text(self.title.title(), "error-title"),
            " ]"
        )
        message = text(self.message, "error-message")
        hint = Text.assemble(text(" → ", "hint-arrow"), text(self.advice, "hint"))

        if fancy:
            width = console.width - 4
            try:
                width = int(width * self.options["ratio"])
            except KeyError:
                width = None
            return Panel(Group(message, hint), title=header, title_align="left", width=width)

        return Group(header, message, hint)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(*self.args, **{**self.options, **overrides})


class InvalidValueGiven(ParseFault):
    code = FaultCode.INVALID_VALUE
    title = "invalid value"
    fields = ("keys", "value")
    template = "invalid value for option %s: %s"
    hint = "check the value format"


class RequiredOptionNotSet(ParseFault):
    code = FaultCode.REQUIRED_OPTION_NOT_SET
    title = "required option not set"
    fields = ("keys",)
    template = "required option (%s) is not set"
    hint = "provide it"


class RequiredOptionValueNotGiven(ParseFault):
    code = FaultCode.REQUIRED_OPTION_VALUE
    title = "missing option value"
    fields = ("key",)
    template = "option %s requires a value, but it was not provided"
    hint = "add a value after the key"


class UnexpectedArgument(ParseFault):
    code = FaultCode.UNEXPECTED_ARGUMENT
    title = "unexpected argument"
    fields = ("argument",)
    template = "unexpected argument: %s"
    hint = "remove this extra value"


class UnexpectedOptionValueGiven(ParseFault):
    code = FaultCode.UNEXPECTED_OPTION_VALUE
    title = "option takes no value"
    fields = ("key", "value")
    template = "option %s does not require a value, but %s was provided"
    hint = "remove everything from the separator"


class ParseExit(ExceptionGroup[ParseFault]):
    """
    every fault of a failed pass, in emission order.
    """
    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "bad exit", tuple(exceptions))

    def __init__(self, exceptions, **options):
        super().__init__("bad exit", tuple(exceptions))
        self.options = MappingProxyType(options)

    def __rich__(self):
        styles = _styles({
            "prog-name": "bold #E6E6F0",  # near-white program name
            "title": "bold #FF4DA6",  # friendly pinky group title
        })
        colorful = self.options.get("colorful", False)

        def text(fragment, style=""):
            return _text(fragment, styles[style] if colorful else "", colorful)

        prog = text(getattr(__import__("__main__"), "__prog__", self.options.get("prog", "<program>")), "prog-name")
        header = Text.assemble("[ ", prog, " — ", text(pluralize("error", len(self.exceptions)), "title"), " ]")

        renders = [copy.replace(exception, **self.options, ratio=2/3) for exception in self.exceptions]

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if (usage := self.options.get("usage")) is not None:
            console.print(usage)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})

    def derive(self, exceptions):
        return type(self)(exceptions, **self.options)


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ParseExit).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via the rich console; otherwise, exceptions are raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "ParseFault",
    "InvalidValueGiven",
    "RequiredOptionNotSet",
    "RequiredOptionValueNotGiven",
    "UnexpectedArgument",
    "UnexpectedOptionValueGiven",
    "ParseExit",
    "trigger",
)
