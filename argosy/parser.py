"""
Argosy parsing engine: registration, the token pass, finalization and the process
boundary.

What this module provides
- Parser: holds the declaration store, the configuration and the help keys; runs a
  pass over a token sequence and decides the outcome.
- Outcome / Report: the result of a pass (no I/O involved).
- Module-level default parser and its free functions (flag, option, cardinal, ...,
  help_keys, parse) for scripts that only need one parser.

The pass
- every token is classified (see argosy.classifier) and dispatched:
    help        → remember that help was requested, keep scanning
    key         → raise the flag, or read the value from the next token
    key=value   → write the embedded value (a diagnostic for argument-less keys)
    pack        → raise every key but the last, then treat the last like a key
    positional  → write into the pending positional, advance the cursor if single
    leftover    → collect, or report as unexpected
- diagnostics are appended to a list in emission order; none of them stops the pass.
- finalization adds a RequiredOptionNotSet for every required declaration left unset,
  unless help was requested.

Outcome (evaluated in this order)
1. any diagnostic → FAILURE
2. help requested → HELP
3. otherwise      → SUCCESS

Quick start
    from argosy import Parser, Flag, Option, Cardinal

    parser = Parser(shell=True)
    parser.help_keys("-h", "--help")
    verbose = parser.attach(Flag("-v", "--verbose", descr="talk more"))
    count = parser.attach(Option("-n", "--number", type=int, default=3, metavar="N"))
    source = parser.attach(Cardinal("PATH", required=True))
    parser.parse()

    for _ in range(count.value):
        print(source.value)
"""
import logging
import os.path
import shlex
import sys
from collections.abc import Iterable
from enum import Enum
from typing import NamedTuple

from . import helper
from .adapters import adapt
from .arguments import Flag, MultiFlag, Option, MultiOption, Cardinal, MultiCardinal, Declaration
from .classifier import Help, Key, KeyValue, Pack, Positional, Leftover, classify
from .config import Config
from .faults import *
from .store import Store
from .utils import *

logger = logging.getLogger(__name__)


class Outcome(Enum):
    SUCCESS = "success"
    HELP = "help"
    FAILURE = "failure"


class Report(NamedTuple):
    """
    Result of one pass.

    - outcome: Outcome decided by the finalizer.
    - faults: every diagnostic, in emission order (finalization ones last).
    - leftovers: tokens collected when unspecified arguments are allowed.
    - help: whether a help key was seen.
    """
    outcome: Outcome
    faults: tuple
    leftovers: tuple
    help: bool


class Parser:
    """
    Declarative command-line parser.

    Parameters
    - prog: program name shown in usage/diagnostics (defaults to basename of argv[0]).
    - config: Config instance (defaults to Config()).
    - shell: when True, parse() renders faults/help and exits the process; when False,
      failures raise ParseExit and help returns Outcome.HELP after printing.
    - fancy / colorful: rich panel chrome and styling for rendered output.

    Lifecycle
    - register declarations (attach() or the kind-specific helpers) before a pass;
    - run scan() (no I/O) or parse() (process boundary);
    - read the values from the declaration handles.
    """

    def __init__(self, prog=Unset, /, *, config=Unset, shell=False, fancy=False, colorful=False):
        if not isinstance(prog, str | Unset):
            raise TypeError("parser 'prog' must be a string")
        elif isinstance(prog, str) and not (prog := prog.strip()):
            raise ValueError("parser 'prog' cannot be empty")
        if not isinstance(config, Config | Unset):
            raise TypeError("parser 'config' must be a config")

        self._prog = coalesce(prog, os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "<program>")
        self._config = coalesce(config, Config())
        self._store = Store()
        self._helpkeys = ("-h", "--help")
        self._leftovers = []
        self._scanning = False
        self.shell = bool(shell)
        self.fancy = bool(fancy)
        self.colorful = bool(colorful)

    @property
    def prog(self):
        return self._prog

    @property
    def config(self):
        return self._config

    @config.setter
    def config(self, config):
        if not isinstance(config, Config):
            raise TypeError("parser 'config' must be a config")
        self._guard("config")
        self._config = config

    @property
    def leftovers(self):
        """Tokens collected by the last pass (only when config.unspecified is on)."""
        return tuple(self._leftovers)

    @property
    def declarations(self):
        """Registered declarations: keyed ones first, then positionals, each in registration order."""
        return tuple(slot.declaration for slot in self._store)

    def _guard(self, what, /):
        if self._scanning:
            raise RuntimeError("cannot change %s while a pass is running" % what)

    # ── registration ───────────────────────────────────────────────────────────

    def attach(self, declaration, /):
        """
        Register a declaration and return it (the handle to read values from).

        Reusing a key of an earlier declaration is legal: the later one wins.
        """
        if not isinstance(declaration, Declaration):
            raise TypeError("attach() argument must be a declaration")
        self._guard("declarations")
        if any(slot.declaration is declaration for slot in self._store):
            raise ValueError("attach() argument is already attached")
        self._store.add(adapt(declaration))
        return declaration

    def flag(self, *keys, **metadata):
        return self.attach(Flag(*keys, **metadata))

    def multi_flag(self, *keys, **metadata):
        return self.attach(MultiFlag(*keys, **metadata))

    def option(self, *keys, **metadata):
        return self.attach(Option(*keys, **metadata))

    def multi_option(self, *keys, **metadata):
        return self.attach(MultiOption(*keys, **metadata))

    def cardinal(self, *metavar, **metadata):
        return self.attach(Cardinal(*metavar, **metadata))

    def multi_cardinal(self, *metavar, **metadata):
        return self.attach(MultiCardinal(*metavar, **metadata))

    def help_keys(self, *keys):
        """
        Replace the keys recognized as help requests (default: -h, --help).

        Calling it without keys disables help recognition.
        """
        for key in keys:
            if not isinstance(key, str):
                raise TypeError("help_keys() arguments must be strings")
            elif not key:
                raise ValueError("help_keys() arguments cannot be empty-strings")
        self._guard("help keys")
        self._helpkeys = tuple(dict.fromkeys(keys))

    # ── the pass ───────────────────────────────────────────────────────────────

    def _consume(self, slot, key, label, tokens, index, faults, /):
        """
        Read the value of an argument-bearing key from the token at index.

        A missing value is reported under the key as typed, a rejected one under
        label. Returns the index of the first token not consumed.
        """
        if index >= len(tokens):
            faults.append(fault := RequiredOptionValueNotGiven(key))
            logger.debug("fault: %s", fault)
            return index
        if not slot.accept(tokens[index]):
            faults.append(fault := InvalidValueGiven(label, tokens[index]))
            logger.debug("fault: %s", fault)
        return index + 1

    def scan(self, tokens, /):
        """
        Run one pass over tokens and return its Report; nothing is printed.

        Every declaration starts the pass from its default; values are written
        straight into the declarations' cells. Every diagnostic is collected, the
        pass never stops early.
        """
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError("scan() argument must be an iterable of strings")
        tokens = list(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("scan() argument must be an iterable of strings")
        if self._scanning:
            raise RuntimeError("scan() cannot be re-entered")

        self._scanning = True
        try:
            faults = []
            helped = False
            self._leftovers.clear()
            self._store.rewind()
            for slot in self._store:
                slot.reset()

            index = 0
            while index < len(tokens):
                match classify(tokens[index], self._store, self._config, self._helpkeys):
                    case Help():
                        helped = True
                        index += 1

                    case Key(token, slot) if slot.parametric:
                        index = self._consume(slot, token, slot.label, tokens, index + 1, faults)

                    case Key(token, slot):
                        slot.raise_()
                        index += 1

                    case KeyValue(token, key, value, slot):
                        if not slot.parametric:
                            faults.append(fault := UnexpectedOptionValueGiven(key, value))
                            logger.debug("fault: %s", fault)
                        elif not slot.accept(value):
                            faults.append(fault := InvalidValueGiven(key, value))
                            logger.debug("fault: %s", fault)
                        index += 1

                    case Pack(token, keys, slots, tail):
                        for slot in slots[:-1]:
                            slot.raise_()
                        index += 1
                        if not slots:
                            continue
                        if not slots[-1].parametric:
                            slots[-1].raise_()
                        elif tail is not None:
                            if not slots[-1].accept(tail):
                                faults.append(fault := InvalidValueGiven(keys[-1], tail))
                                logger.debug("fault: %s", fault)
                        else:
                            index = self._consume(slots[-1], keys[-1], keys[-1], tokens, index, faults)

                    case Positional(token, slot):
                        if not slot.accept(token):
                            faults.append(fault := InvalidValueGiven(slot.metavar, token))
                            logger.debug("fault: %s", fault)
                        self._store.advance()
                        index += 1

                    case Leftover(token):
                        if self._config.unspecified:
                            self._leftovers.append(token)
                        else:
                            faults.append(fault := UnexpectedArgument(token))
                            logger.debug("fault: %s", fault)
                        index += 1

            faults.extend(self._finalize(helped))
        finally:
            self._scanning = False

        if faults:
            outcome = Outcome.FAILURE
        elif helped:
            outcome = Outcome.HELP
        else:
            outcome = Outcome.SUCCESS
        logger.debug("pass finished: %s with %s", outcome.value, pluralize("fault", len(faults)))
        return Report(outcome, tuple(faults), tuple(self._leftovers), helped)

    def _finalize(self, helped, /):
        """
        Post-pass validation: every required declaration without a value yields a
        RequiredOptionNotSet (keyed by its keys, or its metavar for positionals).
        Skipped entirely when help was requested.
        """
        if helped:
            return []
        faults = []
        for slot in self._store:
            if slot.required and not slot.isset:
                faults.append(fault := RequiredOptionNotSet(slot.label))
                logger.debug("fault: %s", fault)
        return faults

    # ── process boundary ───────────────────────────────────────────────────────

    def render(self, *, width=None):
        """Build the help renderable for this parser."""
        return helper.render(
            self._prog, self._helpkeys, self._store, colorful=self.colorful, fancy=self.fancy, width=width
        )

    def parse(self, prompt=Unset, /):
        """
        Parse a prompt and act on the outcome.

        Parameters
        - prompt:
          • Unset: read sys.argv; argv[0] names the program and is not parsed.
          • str: shell-like string; split via shlex.split.
          • Iterable[str]: pre-tokenized sequence, used as-is.

        Behavior
        - FAILURE: shell mode prints every fault then the help text to stderr and
          exits with status 1; otherwise raises ParseExit carrying every fault.
        - HELP: prints the help text to stdout; shell mode exits with status 0,
          otherwise returns Outcome.HELP.
        - SUCCESS: returns Outcome.SUCCESS, nothing is printed.
        """
        if prompt is Unset:
            if sys.argv and sys.argv[0]:
                self._prog = os.path.basename(sys.argv[0])
            tokens = sys.argv[1:]
        elif isinstance(prompt, str):
            tokens = shlex.split(prompt)
        elif isinstance(prompt, Iterable):
            tokens = list(prompt)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("parse() argument must be a string or an iterable of strings")
        else:
            raise TypeError("parse() argument must be a string or an iterable of strings")

        report = self.scan(tokens)

        match report.outcome:
            case Outcome.FAILURE:
                trigger(
                    ParseExit(report.faults),
                    prog=self._prog,
                    shell=self.shell,
                    fancy=self.fancy,
                    colorful=self.colorful,
                    helpkey=self._helpkeys[0] if self._helpkeys else None,
                    usage=self.render(),
                )
            case Outcome.HELP:
                helper.console.print(self.render())
                if self.shell:
                    sys.exit(0)
        return report.outcome

    def __repr__(self):
        return "parser(prog=%r, config=%r, declarations=%d)" % (self._prog, self._config, len(self._store))


_parser = Parser(shell=True)


def flag(*keys, **metadata):
    """Register a Flag on the default parser."""
    return _parser.flag(*keys, **metadata)


def multi_flag(*keys, **metadata):
    """Register a MultiFlag on the default parser."""
    return _parser.multi_flag(*keys, **metadata)


def option(*keys, **metadata):
    """Register an Option on the default parser."""
    return _parser.option(*keys, **metadata)


def multi_option(*keys, **metadata):
    """Register a MultiOption on the default parser."""
    return _parser.multi_option(*keys, **metadata)


def cardinal(*metavar, **metadata):
    """Register a Cardinal on the default parser."""
    return _parser.cardinal(*metavar, **metadata)


def multi_cardinal(*metavar, **metadata):
    """Register a MultiCardinal on the default parser."""
    return _parser.multi_cardinal(*metavar, **metadata)


def help_keys(*keys):
    """Replace the help keys of the default parser."""
    _parser.help_keys(*keys)


def parse(prompt=Unset, /):
    """Parse with the default parser (shell mode: faults and help end the process)."""
    return _parser.parse(prompt)


__all__ = (
    "Outcome",
    "Report",
    "Parser",
    "flag",
    "multi_flag",
    "option",
    "multi_option",
    "cardinal",
    "multi_cardinal",
    "help_keys",
    "parse",
)
