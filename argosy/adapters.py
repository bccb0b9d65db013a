"""
Engine-facing slots: one per registered declaration.

A Slot is the small capability surface the engine works against:
- predicates: keyed, parametric, multi, required, isset, matches(key)
- writers: raise_() for argument-less keys, accept(raw) for value-bearing ones

Slots are resolved once, at registration, from the closed set of declaration
kinds (Kind). A slot shares its declaration's Cell; it never copies it, so the
handle returned to the caller observes every write made during a pass.
"""
import logging
from enum import IntEnum

from .arguments import Flag, MultiFlag, Option, MultiOption, Cardinal, MultiCardinal
from .readers import attempt

logger = logging.getLogger(__name__)


class Kind(IntEnum):
    """
    closed set of declaration kinds the engine knows how to drive.
    """
    FLAG = 1
    MULTI_FLAG = 2
    OPTION = 3
    MULTI_OPTION = 4
    CARDINAL = 5
    MULTI_CARDINAL = 6

    @property
    def keyed(self):
        return self <= Kind.MULTI_OPTION

    @property
    def parametric(self):
        return self >= Kind.OPTION

    @property
    def multi(self):
        return self in (Kind.MULTI_FLAG, Kind.MULTI_OPTION, Kind.MULTI_CARDINAL)


class Slot:
    """
    Engine adapter over one declaration.

    The engine is the single writer of the shared cell during a pass; everything
    else only reads through the declaration handle.
    """
    __slots__ = ("kind", "declaration", "_cell")

    def __init__(self, kind, declaration, /):
        self.kind = kind
        self.declaration = declaration
        self._cell = declaration._cell

    @property
    def keyed(self):
        return self.kind.keyed

    @property
    def parametric(self):
        return self.kind.parametric

    @property
    def multi(self):
        return self.kind.multi

    @property
    def required(self):
        return self.declaration.required

    @property
    def isset(self):
        return self._cell.isset

    @property
    def keys(self):
        return self.declaration.keys if self.keyed else ()

    @property
    def metavar(self):
        return self.declaration.metavar

    @property
    def descr(self):
        return self.declaration.descr

    @property
    def label(self):
        """Display name used in diagnostics: every key joined, or the metavar for positionals."""
        return ", ".join(self.keys) if self.keyed else self.metavar

    def matches(self, key, /):
        return self.keyed and key in self.declaration.keys

    def reset(self):
        """Restore the declaration to its default before a new pass."""
        self._cell.reset()

    def raise_(self):
        """Record one occurrence of an argument-less key."""
        match self.kind:
            case Kind.FLAG:
                self._cell.store(True)
            case Kind.MULTI_FLAG:
                self._cell.increment()
            case _:
                raise RuntimeError("%s slot cannot be raised" % self.kind.name.lower())

    def accept(self, raw, /):
        """
        Convert raw text with the declaration's reader and write it on success.

        Returns True when the value was written, False when the reader rejected it
        (the cell is left untouched in that case).
        """
        if not self.parametric:
            raise RuntimeError("%s slot cannot accept values" % self.kind.name.lower())
        conversion = attempt(self.declaration.type, raw)
        if not conversion.success:
            return False
        if self.multi:
            self._cell.append(conversion.value)
        else:
            self._cell.store(conversion.value)
        return True

    def __repr__(self):
        return "slot(kind=%s, label=%r)" % (self.kind.name.lower(), self.label)


def adapt(declaration, /):
    """
    Resolve a declaration into its slot.

    Raises TypeError for anything outside the closed set of declaration kinds.
    """
    match declaration:
        case Flag():
            kind = Kind.FLAG
        case MultiFlag():
            kind = Kind.MULTI_FLAG
        case Option():
            kind = Kind.OPTION
        case MultiOption():
            kind = Kind.MULTI_OPTION
        case Cardinal():
            kind = Kind.CARDINAL
        case MultiCardinal():
            kind = Kind.MULTI_CARDINAL
        case _:
            raise TypeError("adapt() argument must be a declaration, not %r" % type(declaration).__name__)
    logger.debug("adapted %r as %s", declaration, kind.name)
    return Slot(kind, declaration)


__all__ = (
    "Kind",
    "Slot",
    "adapt",
)
