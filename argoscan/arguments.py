r"""
Argoscan option descriptors, argument policies and decorators.

Overview
- Policies (closed union, exactly one per descriptor)
  • NoArgument(callback): presence-only; invoked as callback().
  • OptionalArgument(callback): invoked as callback(value) with value str | None.
  • RequiredArgument(callback): invoked as callback(value) with a str.
  The union is sealed once the three variants are defined; subclassing any of
  them (or the base) raises TypeError.

- Descriptor
  • Option(name, argument): name is a single character for short tables or a
    (long name, equivalent character) pair for long tables.

- Decorators
  • @flag(name), @optional(name), @required(name): wrap a handler and return a
    ready Option bound to the matching policy.

Validation highlights
- Option characters must be one printable, non-space character other than
  '-', ':', '?' and '=' (those carry meaning in the scanner step contract).
- Long names must match r"[^\s=-][^\s=]*" (no leading dash, no '=' or spaces).
- The argument must be one of the three policy instances.

Quick example:
    >>> from argoscan.arguments import flag, required
    >>> @flag(("verbose", "v"))
    ... def on_verbose(): ...
    ...
    >>> @required("o")
    ... def on_output(path): ...
    ...
"""
import functools
import operator
import re

from .utils import *


class ArgumentType(type):
    """
    Metaclass giving descriptors and policies a stable, introspectable surface.

    Responsibilities
    - Expose the names listed in __introspectable__ as read-only properties
      backed by "_{name}" fields (see mirror()).
    - Provide __repr__/__rich_repr__ built from those properties.
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used in validation messages.
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
            **options
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


# Flipped once the three policy variants exist; seals the union.
_sealed = False


class Argument(metaclass=ArgumentType):
    """
    Base of the argument-policy union. Not instantiable on its own.

    Every variant holds exactly one callback and forwards to it when called,
    with the arity its policy implies.
    """
    __introspectable__ = ("callback",)

    def __new__(cls, callback, /):
        if cls is Argument:
            raise TypeError("argument policy must be NoArgument, OptionalArgument or RequiredArgument")
        if not callable(callback):
            raise TypeError(f"{cls.__typename__} 'callback' must be callable")
        self = super().__new__(cls)
        self._callback = callback
        return self

    def __init_subclass__(cls, **options):
        if _sealed:
            raise TypeError(f"type {cls.__base__.__name__!r} is not an acceptable base type")
        super().__init_subclass__(**options)


class NoArgument(Argument):
    """
    Presence-only policy: the option never takes a value.
    """

    def __call__(self, /):
        return self._callback()


class OptionalArgument(Argument):
    """
    The option may carry a value; None is passed when it does not.
    """

    def __call__(self, value=None, /):
        return self._callback(value)


class RequiredArgument(Argument):
    """
    The option always carries a value; its absence is a MissingArgumentError.
    """

    def __call__(self, value, /):
        return self._callback(value)


_sealed = True


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize an Option's name and argument policy.

    Mutates metadata in place, splitting 'name' into 'long' (str | None) and
    'char' (str).

    Raises
    - TypeError: wrong shapes or types (name not a str/pair, argument not a policy).
    - ValueError: a char or long name that breaks the spelling rules.
    """
    name = metadata["name"]
    if isinstance(name, tuple):
        if len(name) != 2:
            raise TypeError(f"{cls.__typename__} 'name' pair must hold a long name and a character")
        long, char = name
        if not isinstance(long, str):
            raise TypeError(f"{cls.__typename__} long name must be a string")
        elif not re.fullmatch(r"[^\s=-][^\s=]*", long):
            raise ValueError(f"{cls.__typename__} long name must be non-empty, without '=', spaces or a leading '-'")
    elif isinstance(name, str):
        long, char = None, name
    else:
        raise TypeError(f"{cls.__typename__} 'name' must be a character or a (long name, character) pair")

    if not isinstance(char, str):
        raise TypeError(f"{cls.__typename__} character must be a string")
    elif len(char) != 1 or not char.isprintable() or char.isspace() or char in "-:?=":
        raise ValueError(f"{cls.__typename__} character must be a single printable character other than '-', ':', '?' and '='")

    if not isinstance(metadata["argument"], Argument):
        raise TypeError(f"{cls.__typename__} 'argument' must be NoArgument, OptionalArgument or RequiredArgument")

    metadata["long"] = long
    metadata["char"] = char


class Option(metaclass=ArgumentType):
    """
    Declaration of one recognized option: its name(s) and argument policy.

    Properties
    - name: the name exactly as declared (char or (long, char) pair).
    - argument: the policy instance (holds the callback).
    - char: the short / equivalent character.
    - long: the long name, or None in short tables.
    - takes_argument: False only for NoArgument.

    Calling an Option forwards to its policy, e.g. option() or option("value").
    """

    __introspectable__ = (
        "name",
        "argument",
    )

    def __new__(cls, name, argument, /):
        metadata = {
            "name": name,
            "argument": argument,
        }
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def char(self):
        return self._char

    @property
    def long(self):
        return self._long

    @property
    def takes_argument(self):
        return not isinstance(self._argument, NoArgument)

    def __call__(self, *args):
        return self._argument(*args)


def _decorator(label, policy, name, /):
    """
    Build the @flag/@optional/@required wrapper for a given policy variant.
    """

    @rename(label)
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError(f"@{label}() must be applied to a callable")
        return Option(name, policy(callback))

    return wrapper


def flag(name, /):
    """
    Decorator: declare a presence-only option handled by the decorated function.

        @flag(("verbose", "v"))
        def on_verbose(): ...
    """
    return _decorator("flag", NoArgument, name)


def optional(name, /):
    """
    Decorator: declare an option with an optional value (None when absent).

        @optional(("level", "l"))
        def on_level(level): ...
    """
    return _decorator("optional", OptionalArgument, name)


def required(name, /):
    """
    Decorator: declare an option that must carry a value.

        @required("o")
        def on_output(path): ...
    """
    return _decorator("required", RequiredArgument, name)


__all__ = (
    # Policies (closed union)
    "Argument",
    "NoArgument",
    "OptionalArgument",
    "RequiredArgument",

    # Descriptor
    "Option",

    # Decorators
    "flag",
    "optional",
    "required",
)

# Not part of the public API.
del ArgumentType
