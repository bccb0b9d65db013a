"""
Declaration store: the ordered keyed slots, the ordered positional slots, and the
positional cursor.

Lookup rules
- keyed slots are searched last-registered-first, so a later registration reusing
  a key shadows the earlier one for every subsequent lookup.
- positional slots are consumed strictly in registration order through a cursor that
  only moves forward, and only past single-valued positionals.
"""
import logging

logger = logging.getLogger(__name__)


class Store:
    __slots__ = ("_keyed", "_cardinals", "_position")

    def __init__(self):
        self._keyed = []
        self._cardinals = []
        self._position = 0

    @property
    def keyed(self):
        return tuple(self._keyed)

    @property
    def cardinals(self):
        return tuple(self._cardinals)

    @property
    def position(self):
        return self._position

    def add(self, slot, /):
        (self._keyed if slot.keyed else self._cardinals).append(slot)

    def find(self, key, /):
        """Return the most recently registered slot owning key, or None."""
        for slot in reversed(self._keyed):
            if slot.matches(key):
                return slot
        return None

    def pending(self):
        """Return the positional slot under the cursor, or None once exhausted."""
        if self._position < len(self._cardinals):
            return self._cardinals[self._position]
        return None

    def advance(self):
        """Move the cursor past the current positional unless it is multi-valued."""
        slot = self._cardinals[self._position]
        if not slot.multi:
            self._position += 1
            logger.debug("positional cursor advanced to %d", self._position)

    def rewind(self):
        self._position = 0

    def __iter__(self):
        yield from self._keyed
        yield from self._cardinals

    def __len__(self):
        return len(self._keyed) + len(self._cardinals)


__all__ = (
    "Store",
)
