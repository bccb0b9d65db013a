r"""
Argosy declarations: the caller-facing handles registered on a parser.

Overview
- Keyed declarations (matched by literal keys such as -v, --value or /n)
  • Flag: presence-only switch; reads as True once raised.
  • MultiFlag: repeatable switch; counts its occurrences (-vvv → 3).
  • Option[_T]: takes one value; the last occurrence wins.
  • MultiOption[_T]: takes one value per occurrence and accumulates them.
- Positional declarations (matched by position, consumed in registration order)
  • Cardinal[_T]: takes exactly one token.
  • MultiCardinal[_T]: absorbs every remaining unmatched token.

Storage
- Every declaration owns a Cell. The very same Cell is handed to the engine-facing
  slot at registration time (see argosy.adapters), so whatever the engine writes
  during a pass is visible through the handle afterwards. Reading the handle before
  a pass yields the default, never an error.

Metadata (sanitized on construction)
- keys: one or more non-empty strings without whitespace; duplicates within one
  declaration are rejected (reuse across declarations is legal: the last
  registration shadows earlier ones).
- metavar: display name for the value in help (default "VALUE").
- descr: help text (default None); must be non-empty when provided.
- type: reader callable (default str), see argosy.readers.
- required: Option/MultiOption/Cardinal/MultiCardinal only; flags are never required.

The six kinds form a closed set: they are sealed against subclassing.

Quick example:
    >>> from argosy import Parser, Flag, Option, Cardinal
    >>> parser = Parser()
    >>> verbose = parser.attach(Flag("-v", "--verbose"))
    >>> count = parser.attach(Option("-n", "--number", type=int, default=3))
    >>> source = parser.attach(Cardinal("PATH", required=True))
"""
import builtins
import functools
import operator
import re

from rich.text import Text

from .utils import *


class Cell:
    """
    Shared value storage of one declaration.

    One writer (the engine, through the declaration's slot, during a pass) and any
    number of readers (the declaration handle, renderers, tests). The cell outlives
    the parser: handles keep it alive after the engine is gone.
    """
    __slots__ = ("_default", "_value", "_isset")

    def __init__(self, default=None, /):
        self._default = default
        self._value = default
        self._isset = False

    @property
    def value(self):
        return self._value

    @property
    def isset(self):
        return self._isset

    def store(self, value, /):
        """Overwrite the scalar value."""
        self._value = value
        self._isset = True

    def append(self, value, /):
        """Accumulate one more value; the first one replaces the default."""
        if not self._isset:
            self._value = []
        self._value.append(value)
        self._isset = True

    def increment(self):
        """Count one more occurrence; the first one starts from zero."""
        self._value = (self._value if self._isset else 0) + 1
        self._isset = True

    def reset(self):
        """Forget every write: back to the default, unset."""
        self._value = self._default
        self._isset = False

    def __repr__(self):
        return "cell(value=%r, isset=%r)" % (self._value, self._isset)


class ArgumentType(type):
    """
    Metaclass for declaration kinds.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens), used
      in validation messages and representations.
    - Expose every name listed in __introspectable__ as a read-only property backed
      by "_{name}" (see mirror()).
    - Provide stable __repr__/__rich_repr__ implementations.
    - Seal concrete kinds (class option sealed=True) against subclassing.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - option(keys=('-n', '--number'), metavar='N', ..., value=3)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
            yield "value", self.value
        self.__rich_repr__ = __rich_repr__

        if options.get("sealed", False):
            @rename("__init_subclass__")
            def __init_subclass__(cls, **options):  # NOQA: F-841
                raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
            self.__init_subclass__ = classmethod(__init_subclass__)

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate metadata shared by every declaration.

    - metavar: Unset | str, non-empty after trimming; defaults to "VALUE".
    - descr: Unset | str | Text, non-empty after trimming; defaults to None.

    Mutates the metadata dict in place.
    """
    if not isinstance(metavar := metadata["metavar"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
    elif isinstance(metavar, str) and not (metavar := metavar.strip()):
        raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")
    metadata["metavar"] = coalesce(metavar, "VALUE")

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


def _sanitize_keyed_metadata(cls, metadata, /):
    """
    Internal: validate the keys of a keyed declaration.

    Keys are kept in declaration order (the first one leads in usage lines).
    Any prefix is accepted ("-x", "--long", "/x", "+x"), only whitespace is
    forbidden since a key must match a whole shell token.
    """
    if not metadata["keys"]:
        raise TypeError(f"{cls.__typename__} must specify at least one key")

    keys = []
    for key in metadata["keys"]:
        if not isinstance(key, str):
            raise TypeError(f"{cls.__typename__} keys must be strings")
        elif not key:
            raise ValueError(f"{cls.__typename__} keys cannot be empty-strings")
        elif re.search(r"\s", key):
            raise ValueError(f"{cls.__typename__} keys cannot contain whitespace")
        elif key in keys:
            raise ValueError(f"{cls.__typename__} keys cannot contain duplicates")
        keys.append(key)
    metadata["keys"] = tuple(keys)


def _sanitize_parametric_metadata(cls, metadata, /):
    """
    Internal: validate the reader and the requirement marker of value-bearing kinds.

    The default is intentionally not validated: it may be any Python value.
    """
    if not callable(metadata["type"]):
        raise TypeError(f"{cls.__typename__} 'type' must be callable")
    if not isinstance(metadata["required"], bool):
        raise TypeError(f"{cls.__typename__} 'required' must be a boolean")


class Declaration(metaclass=ArgumentType):
    """
    Common surface of every declaration kind.

    Subclasses set the class-level markers:
    - keyed: matched by key (True) or by position (False).
    - parametric: whether a key requires a value (keyed kinds only).
    - multi: repeated occurrences accumulate instead of overwriting.
    """
    keyed = False
    parametric = True
    multi = False

    def __new__(cls, *args, **kwargs):
        if cls is Declaration:
            raise TypeError("type 'Declaration' cannot be instantiated directly")
        return super().__new__(cls)

    def _build(self, metadata, default, /):
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._cell = Cell(default)

    @property
    def value(self):
        """The stored value (the default until the engine writes one)."""
        return self._cell.value

    @property
    def isset(self):
        """Whether a pass wrote into this declaration."""
        return self._cell.isset

    @property
    def required(self):
        return getattr(self, "_required", False)


class Flag(Declaration, sealed=True):
    """
    Named, presence-only switch.

    Reads as False until one of its keys is seen, True afterwards. A key=value
    token targeting a flag is a diagnostic, never a value.
    """
    keyed = True
    parametric = False

    __introspectable__ = ("keys", "descr")

    def __init__(self, *keys, descr=Unset):
        metadata = {"keys": keys, "metavar": Unset, "descr": descr}
        _sanitize_metadata(type(self), metadata)
        _sanitize_keyed_metadata(type(self), metadata)
        del metadata["metavar"]
        self._build(metadata, False)

    @property
    def metavar(self):
        return ""

    def __bool__(self):
        return bool(self._cell.value)


class MultiFlag(Declaration, sealed=True):
    """
    Named, repeatable switch counting its occurrences (e.g. -v -v or -vv → 2).
    """
    keyed = True
    parametric = False
    multi = True

    __introspectable__ = ("keys", "descr")

    def __init__(self, *keys, descr=Unset):
        metadata = {"keys": keys, "metavar": Unset, "descr": descr}
        _sanitize_metadata(type(self), metadata)
        _sanitize_keyed_metadata(type(self), metadata)
        del metadata["metavar"]
        self._build(metadata, 0)

    @property
    def metavar(self):
        return ""

    def __int__(self):
        return self._cell.value

    __index__ = __int__

    def __bool__(self):
        return self._cell.value > 0


class Option[_T](Declaration, sealed=True):
    """
    Named option taking exactly one value per occurrence; the last occurrence wins.

    The value comes from the next token (-n 5), from the tail of a key=value token
    (-n=5), or from the tail of a pack (-n5, -vn5).
    """
    keyed = True

    __introspectable__ = ("keys", "metavar", "type", "default", "required", "descr")

    def __init__(self, *keys, type=str, metavar=Unset, default=None, required=False, descr=Unset):
        metadata = {
            "keys": keys,
            "metavar": metavar,
            "type": type,
            "default": default,
            "required": required,
            "descr": descr,
        }
        _sanitize_metadata(builtins.type(self), metadata)
        _sanitize_keyed_metadata(builtins.type(self), metadata)
        _sanitize_parametric_metadata(builtins.type(self), metadata)
        self._build(metadata, default)


class MultiOption[_T](Declaration, sealed=True):
    """
    Named option accumulating one value per occurrence (--tag a --tag b → ("a", "b")).

    The default (an empty tuple unless given) is replaced, not extended, by the
    first value a pass writes.
    """
    keyed = True
    multi = True

    __introspectable__ = ("keys", "metavar", "type", "default", "required", "descr")

    def __init__(self, *keys, type=str, metavar=Unset, default=(), required=False, descr=Unset):
        metadata = {
            "keys": keys,
            "metavar": metavar,
            "type": type,
            "default": tuple(default),
            "required": required,
            "descr": descr,
        }
        _sanitize_metadata(builtins.type(self), metadata)
        _sanitize_keyed_metadata(builtins.type(self), metadata)
        _sanitize_parametric_metadata(builtins.type(self), metadata)
        self._build(metadata, metadata["default"])

    @property
    def value(self):
        return tuple(self._cell.value)

    values = value

    def __iter__(self):
        return iter(self.value)

    def __len__(self):
        return len(self._cell.value)


class Cardinal[_T](Declaration, sealed=True):
    """
    Positional argument taking exactly one token, in registration order.
    """

    __introspectable__ = ("metavar", "type", "default", "required", "descr")

    def __init__(self, metavar=Unset, /, type=str, default=None, required=False, descr=Unset):
        metadata = {
            "metavar": metavar,
            "type": type,
            "default": default,
            "required": required,
            "descr": descr,
        }
        _sanitize_metadata(builtins.type(self), metadata)
        _sanitize_parametric_metadata(builtins.type(self), metadata)
        self._build(metadata, default)


class MultiCardinal[_T](Declaration, sealed=True):
    """
    Positional argument absorbing every unmatched token from its position onwards.

    The positional cursor never moves past a multi cardinal, so any cardinal
    registered after it is unreachable.
    """
    multi = True

    __introspectable__ = ("metavar", "type", "default", "required", "descr")

    def __init__(self, metavar=Unset, /, type=str, default=(), required=False, descr=Unset):
        metadata = {
            "metavar": metavar,
            "type": type,
            "default": tuple(default),
            "required": required,
            "descr": descr,
        }
        _sanitize_metadata(builtins.type(self), metadata)
        _sanitize_parametric_metadata(builtins.type(self), metadata)
        self._build(metadata, metadata["default"])

    @property
    def value(self):
        return tuple(self._cell.value)

    values = value

    def __iter__(self):
        return iter(self.value)

    def __len__(self):
        return len(self._cell.value)


__all__ = (
    "Cell",
    "Declaration",
    "Flag",
    "MultiFlag",
    "Option",
    "MultiOption",
    "Cardinal",
    "MultiCardinal",
)
