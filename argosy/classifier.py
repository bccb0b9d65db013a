"""
Token classification.

classify() decides, for one raw token, which single interpretation applies. The
rules are tried in a fixed order and the first applicable one wins:

1. help key                  → Help
2. whole token is a key      → Key          (value, if any, is the next token)
3. key<separator>value       → KeyValue     (only when the left part is a key)
4. pack of one-char keys     → Pack         (a failed pack is not an error)
5. pending positional        → Positional
6. anything else             → Leftover

The classifier only reads the store and the config; writing values and emitting
diagnostics is the engine's business.
"""
import logging
from typing import NamedTuple

logger = logging.getLogger(__name__)


class Help(NamedTuple):
    token: str


class Key(NamedTuple):
    token: str
    slot: object


class KeyValue(NamedTuple):
    token: str
    key: str
    value: str
    slot: object


class Pack(NamedTuple):
    """
    Resolved pack.

    - keys: the one-char keys in token order (prefix included), possibly empty.
    - slots: the slot of each key.
    - tail: inline value for the last key when it takes an argument and characters
      remained after it; None when the value (if needed) comes from the next token.
    """
    token: str
    keys: tuple
    slots: tuple
    tail: str | None = None


class Positional(NamedTuple):
    token: str
    slot: object


class Leftover(NamedTuple):
    token: str


def split(token, separator, /):
    """
    Split token at the first occurrence of separator.

    Returns (key, value) or None when the separator is absent. The value may be
    empty ("-n=" → ("-n", "")).
    """
    key, found, value = token.partition(separator)
    if not found:
        return None
    return key, value


def resolve(token, store, prefix, /):
    """
    Decompose "<prefix><c1><c2>...<cn>[tail]" into one-char keys.

    - every character must resolve to a declared "<prefix><char>" key, otherwise the
      whole token is rejected (None) and no key is applied;
    - argument-less keys continue the pack;
    - an argument-bearing key with characters after it takes them as its inline
      value and ends the pack;
    - an argument-bearing key in last position takes its value from the next token.

    A token made only of the prefix resolves to an empty pack.
    """
    if not token.startswith(prefix):
        return None

    keys = []
    slots = []
    body = token[len(prefix):]
    for index, char in enumerate(body):
        if (slot := store.find(key := prefix + char)) is None:
            logger.debug("pack %r rejected at %r", token, key)
            return None
        keys.append(key)
        slots.append(slot)
        if slot.parametric and index + 1 < len(body):
            return Pack(token, tuple(keys), tuple(slots), body[index + 1:])
    return Pack(token, tuple(keys), tuple(slots))


def classify(token, store, config, helpkeys, /):
    """
    Return exactly one interpretation (Help, Key, KeyValue, Pack, Positional or
    Leftover) for token.
    """
    if token in helpkeys:
        verdict = Help(token)
    elif (slot := store.find(token)) is not None:
        verdict = Key(token, slot)
    elif config.key_value and (pair := split(token, config.separator)) and (slot := store.find(pair[0])) is not None:
        verdict = KeyValue(token, *pair, slot)
    elif config.packing and (pack := resolve(token, store, config.pack_prefix)) is not None:
        verdict = pack
    elif (slot := store.pending()) is not None:
        verdict = Positional(token, slot)
    else:
        verdict = Leftover(token)
    logger.debug("classified %r as %s", token, type(verdict).__name__.lower())
    return verdict


__all__ = (
    "Help",
    "Key",
    "KeyValue",
    "Pack",
    "Positional",
    "Leftover",
    "split",
    "resolve",
    "classify",
)
