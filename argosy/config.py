"""
Parser configuration.

Config is immutable: build a new one (or use copy.replace) and assign it to the
parser before a pass. The engine only ever reads it.

Fields
- key_value: recognize "<key><separator><value>" tokens.
- separator: string splitting key from value (first occurrence wins), "=" by default.
- packing: recognize packed short keys such as "-abc".
- pack_prefix: prefix shared by packed keys, "-" by default ("/" for DOS-style switches).
- unspecified: collect tokens matching no rule as leftovers instead of reporting them.
"""
from .utils import *


def _sanitize_config(cls, metadata, /):
    for name in ("key_value", "packing", "unspecified"):
        if not isinstance(metadata[name], bool):
            raise TypeError(f"{cls.__name__.lower()} {name!r} must be a boolean")
    for name in ("separator", "pack_prefix"):
        if not isinstance(metadata[name], str):
            raise TypeError(f"{cls.__name__.lower()} {name!r} must be a string")
        elif not metadata[name]:
            raise ValueError(f"{cls.__name__.lower()} {name!r} cannot be empty")


class Config:
    __introspectable__ = ("key_value", "separator", "packing", "pack_prefix", "unspecified")

    key_value = mirror("key_value")
    separator = mirror("separator")
    packing = mirror("packing")
    pack_prefix = mirror("pack_prefix")
    unspecified = mirror("unspecified")

    def __init__(self, *, key_value=True, separator="=", packing=True, pack_prefix="-", unspecified=False):
        metadata = {
            "key_value": key_value,
            "separator": separator,
            "packing": packing,
            "pack_prefix": pack_prefix,
            "unspecified": unspecified,
        }
        _sanitize_config(type(self), metadata)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(**{name: getattr(self, name) for name in self.__introspectable__} | overrides)

    def __eq__(self, other):
        if not isinstance(other, Config):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self.__introspectable__)

    def __hash__(self):
        return hash(tuple(getattr(self, name) for name in self.__introspectable__))

    def __repr__(self):
        return "config(%s)" % ", ".join("%s=%r" % (name, getattr(self, name)) for name in self.__introspectable__)

    def __rich_repr__(self):
        for name in self.__introspectable__:
            yield name, getattr(self, name)


__all__ = (
    "Config",
)
