"""
Argoscan faults (parse failures) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every parse failure.
- OptionException: base type carrying the offending option, a message and
  rendering options; knows how to render itself with rich.
- UnknownOptionError / MissingArgumentError: the two failure families a parse
  can end with. Unknown options are refined by AmbiguousOptionError and
  UnexpectedArgumentError for long-option spellings.
- trigger(): central entry point to surface a fault (raise, or print and exit).

Integration
- The parser captures the offending option from the scanner side channel right
  after the failing step and calls trigger(fault, **runtime options).
- In non-shell mode faults are raised; in shell mode they are rendered via rich
  on stderr and the process exits with status 1.
- Callbacks dispatched before the failure keep their side effects.
"""
import copy
import os.path
import sys
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used by the parser (stable identifiers).

    grouping
    - options (1111x)
      • UNKNOWN_OPTION, AMBIGUOUS_OPTION, UNEXPECTED_ARGUMENT, MISSING_ARGUMENT

    normalize() lets the host remap codes to custom labels while the numeric
    values stay stable.
    """
    UNKNOWN_OPTION      = 11112
    AMBIGUOUS_OPTION    = 11113
    UNEXPECTED_ARGUMENT = 11114
    MISSING_ARGUMENT    = 11117

    def normalize(self):
        """
        label shown for this code: __main__.__codes__[self] when the host
        defines it, else the number.
        """
        labels = getattr(__import__("__main__"), "__codes__", {})
        return str(labels.get(self, self.value))


class OptionException(Exception):
    """
    base type of every parse failure.

    attributes
    - option: the offending option. a single character for short options and
      for long options with a known equivalent char; otherwise the long spelling
      as typed (e.g. '--bogus').
    - message: one-sentence, lowercased description.
    - options: read-only rendering options (code, title, hint, shell, fancy,
      colorful, prog, ...).
    """
    code = Unset
    title = "option error"
    template = "bad option %r"
    hint = "check the spelling of the option"

    def __init__(self, option, /, message=Unset, **options):
        if not isinstance(option, str):
            raise TypeError(f"{type(self).__name__}() option must be a string")
        self.option = option
        self.message = coalesce(message, self.template % option)
        self.options = MappingProxyType({
            "code": self.code,
            "title": self.title,
            "hint": self.hint,
            "shell": False,
            "fancy": False,
            "colorful": True,
        } | options)
        super().__init__(self.message)

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, self.option)

    def __rich__(self):
        main = __import__("__main__")

        palette = {
            "prog": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "title": "bold #FF4DA6",
            "message": "#C8C8D0",
            "option": "bold #FFD166",
            "hint": "italic #9CE19C",
        } | getattr(main, "__styles__", {})
        if not self.options["colorful"]:
            palette = dict.fromkeys(palette, "")

        prog = self.options.get("prog") or getattr(main, "__prog__", os.path.basename(sys.argv[0]))
        code = self.options["code"]

        header = Text.assemble(
            "[ ",
            (prog, palette["prog"]),
            " — ",
            (code.normalize() if isinstance(code, FaultCode) else "", palette["code"]),
            " | ",
            (self.options["title"].title(), palette["title"]),
            " ]",
        )
        message = Text(self.message, palette["message"])
        if self.options["colorful"]:
            # the quoted option inside the sentence
            message.highlight_words([repr(self.option)], palette["option"])
        hint = Text.assemble(" → ", (self.options["hint"], palette["hint"]))

        if self.options["fancy"]:
            return Panel(Group(message, hint), title=header, title_align="left")
        return Group(header, message, hint)

    def __trigger__(self) -> None:
        if self.options["shell"]:
            console.print(self)
            sys.exit(1)
        raise self from None

    def __replace__(self, *unused, **overrides):
        assert not unused, "copy.replace() takes keyword arguments only"
        return type(self)(self.option, self.message, **(dict(self.options) | overrides))


class UnknownOptionError(OptionException):
    code = FaultCode.UNKNOWN_OPTION
    title = "unknown option"
    template = "unknown option %r"
    hint = "remove it or check the spelling against the accepted options"


class AmbiguousOptionError(UnknownOptionError):
    """
    a long-option prefix matched more than one long name.

    the matching names are exposed through .candidates (in table order).
    """
    code = FaultCode.AMBIGUOUS_OPTION
    title = "ambiguous option"
    template = "ambiguous option %r"

    def __init__(self, option, /, message=Unset, **options):
        candidates = tuple(options.pop("candidates", ()))
        if message is Unset and candidates:
            # candidates take the dashes the option was typed with ("-ver" or "--ver")
            dashes = "-" if option.startswith("-") and not option.startswith("--") else "--"
            message = "ambiguous option %r (could be %s)" % (option, ", ".join(dashes + name for name in candidates))
        super().__init__(option, message, **{
            "hint": "type more of the name; matches are %s" % ", ".join(candidates) if candidates else self.hint,
        } | options, candidates=candidates)

    @property
    def candidates(self):
        return self.options["candidates"]


class UnexpectedArgumentError(UnknownOptionError):
    code = FaultCode.UNEXPECTED_ARGUMENT
    title = "unexpected argument"
    template = "option %r does not take an argument"
    hint = "remove everything from '=' onwards"


class MissingArgumentError(OptionException):
    code = FaultCode.MISSING_ARGUMENT
    title = "missing argument"
    template = "missing argument for option %r"
    hint = "pass a value right after the option (attached or as the next argument)"


def trigger(fault, /, **options):
    """
    copy the fault with options merged in (copy.replace), then let the copy
    raise itself or, with shell=True, print itself and exit(1).

    fault must implement __trigger__ and __replace__ (every OptionException does).
    """
    if not all(callable(getattr(fault, name, None)) for name in ("__trigger__", "__replace__")):
        raise TypeError("trigger() argument must implement __trigger__ and __replace__")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "OptionException",
    "UnknownOptionError",
    "AmbiguousOptionError",
    "UnexpectedArgumentError",
    "MissingArgumentError",
    "trigger",
)
