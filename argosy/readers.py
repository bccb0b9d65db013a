"""
Value readers: turn one raw substring into a typed value.

A reader is any callable taking the raw text and returning the converted value.
Raising an exception means the text was not acceptable for the declared type;
the engine only cares about success or failure, see attempt().

Built-ins
- str     → whole token, trailing content included (no stripping).
- int     → Python int() semantics: surrounding whitespace, underscores and any
            Unicode decimal digits are accepted.
- float   → Python float() semantics (same leniency, plus inf/nan).
- integer → strict ASCII integer literal: optional sign, digits 0-9 only.
- real    → strict ASCII floating point literal: optional sign, digits 0-9, one
            optional dot, optional exponent.
- boolean → 1/0, true/false, yes/no, on/off (case-insensitive).
- path    → pathlib.Path, rejects empty text.

Any other callable (enum types, datetime.fromisoformat, custom parsers) is accepted
as-is.
"""
import logging
import pathlib
import re
from typing import NamedTuple
from warnings import catch_warnings, simplefilter

logger = logging.getLogger(__name__)

_TRUTHS = frozenset({"1", "true", "yes", "on"})
_FALSITIES = frozenset({"0", "false", "no", "off"})
_INTEGER = re.compile(r"[+-]?[0-9]+", re.ASCII)
_REAL = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?", re.ASCII)


class Conversion(NamedTuple):
    """
    Outcome of a single conversion attempt.

    - success: True when the reader accepted the text.
    - value: the converted value (None when the attempt failed).
    - exception: the reader's exception on failure (None on success).
    """
    success: bool
    value: object = None
    exception: BaseException | None = None


def boolean(raw, /):
    """
    Read a boolean switch value.

    >>> boolean("Yes"), boolean("0")
    (True, False)
    """
    if (folded := raw.strip().lower()) in _TRUTHS:
        return True
    if folded in _FALSITIES:
        return False
    raise ValueError("invalid boolean literal: %r" % raw)


def integer(raw, /):
    """
    Read a plain ASCII integer.

    >>> integer("-42")
    -42
    """
    if not _INTEGER.fullmatch(raw):
        raise ValueError("invalid integer literal: %r" % raw)
    return int(raw)


def real(raw, /):
    """
    Read a plain ASCII floating point number.
    """
    if not _REAL.fullmatch(raw):
        raise ValueError("invalid real literal: %r" % raw)
    return float(raw)


def path(raw, /):
    """
    Read a filesystem path; the path is not required to exist.
    """
    if not raw:
        raise ValueError("path cannot be empty")
    return pathlib.Path(raw)


def attempt(reader, raw, /):
    """
    Run a reader against raw text and report success or failure.

    Warnings emitted by the reader are captured and logged; they never become
    parse diagnostics.
    """
    if not isinstance(raw, str):
        raise TypeError("attempt() second argument must be a string")
    try:
        with catch_warnings(record=True) as warnings:
            simplefilter("always")
            value = reader(raw)
    except Exception as exception:
        logger.debug("reader %s rejected %r: %s", getattr(reader, "__name__", reader), raw, exception)
        return Conversion(False, exception=exception)
    for warning in warnings:
        logger.warning("reader %s warned on %r: %s", getattr(reader, "__name__", reader), raw, warning.message)
    return Conversion(True, value)


__all__ = (
    "Conversion",
    "boolean",
    "integer",
    "real",
    "path",
    "attempt",
)
