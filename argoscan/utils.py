"""
Argoscan internal helpers.

- Unset: "not provided" marker for keyword defaults where None already means
  something (an optional option value that was not given is None).
- coalesce(value, default): resolve Unset to a default, keep everything else.
- rename(...): give generated wrappers a stable __name__/__qualname__.
- mirror(name): read-only property over a private "_name" field, used by the
  descriptor metaclass.

    >>> coalesce(Unset, "tool")
    'tool'
    >>> coalesce("", "tool")
    ''
"""
import builtins
import functools
from typing import final


@final
class UnsetType:
    """
    type of the Unset marker.

    one instance per process, always falsy, prints as "Unset" and refuses
    subclasses. it can appear on either side of '|' so that isinstance checks
    such as isinstance(prog, str | Unset) read naturally.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    object, or default when object is Unset.
    """
    return default if object is Unset else object


def rename(*parameters):
    """
    rename(callable, name) updates callable in place and returns it;
    rename(name) returns a decorator doing the same.
    """
    match parameters:
        case (target, str() as name):
            if not builtins.callable(target):
                raise TypeError("rename() first argument must be callable")
            try:
                target.__name__ = target.__qualname__ = name
            except (AttributeError, TypeError):
                raise TypeError(f"rename() cannot rename {type(target).__name__!r} objects") from None
            return target
        case (str() as name,):
            def decorator(target):
                if not builtins.callable(target):
                    raise TypeError("@rename() must decorate a callable")
                return rename(target, name)

            return rename(decorator, "rename")
        case (_, _) | (_,):
            raise TypeError("rename() name must be a string")
        case _:
            raise TypeError(f"rename() takes 1 or 2 arguments ({len(parameters)} given)")


def mirror(name, /):
    """
    read-only property returning self._<name>; lists come back as tuples.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        value = getattr(self, f"_{name}")
        return tuple(value) if isinstance(value, list) else value

    return property(getter)


Unset = UnsetType()


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "UnsetType",
    "Unset",
)
