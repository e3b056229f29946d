"""
Argoscan option parser: tokenise argv against a flat option table.

What this module provides
- OptionParser: scans an argument vector left to right, dispatches every
  recognized option occurrence to its descriptor's callback (in argv order)
  and returns the leftover positional arguments.
  • parse_short(argv, options): short clusters ("-a", "-abc", "-ofile", "-o file").
  • parse_long(argv, options): "--name", "--name=value", "--name value" plus the
    short forms of the equivalent characters.
  • parse_long_only(argv, options): as parse_long, but "-name" works too and
    unambiguous prefixes of long names are accepted.
- shortopts(options) / longopts(options): encode a table into the getopt spec
  string and long-option table the scanners understand.
- parse_short / parse_long / parse_long_only: module-level shortcuts on a
  default OptionParser().

Dispatch
- NoArgument → callback()
- OptionalArgument → callback(value), or callback(None) when no value was found
- RequiredArgument → callback(value); no value is a MissingArgumentError

Remainder
- scanning stops at the first positional argument (or after "--"); the
  remainder is the contiguous tail from there. OptionParser(permute=True)
  collects interleaved positionals instead (pure scanner only).

Failures
- every failure aborts the parse; callbacks already invoked are not undone.

Quick start
    from argoscan import OptionParser, flag, required

    @flag(("verbose", "v"))
    def verbose(): ...

    @required(("output", "o"))
    def output(path): ...

    rest = OptionParser().parse_long(sys.argv, [verbose, output])
"""
import logging

from .arguments import Option, NoArgument, OptionalArgument, RequiredArgument
from .faults import *
from .scanner import END, UNKNOWN, MISSING, Mode, HasArg, LongSpec, Scanner
from .utils import *

logger = logging.getLogger(__name__)


def shortopts(options, /):
    """
    encode a table into a getopt spec string.

    the string starts with ':' (report missing values with MISSING rather than
    UNKNOWN) and lists each option character, followed by ':' when it takes a
    value. optional and required values are both marked ':'; the parser tells
    them apart once a character has matched.

    example
    - [a: none, o: required, l: optional] → ":ao:l:"
    """
    return ":" + "".join(option.char + ":" * option.takes_argument for option in options)


def longopts(options, /):
    """
    encode a long table into LongSpec entries (name, has_arg, equivalent char).

    short-table entries (no long name) are skipped.
    """
    specs = []
    for option in options:
        if option.long is None:
            continue
        match option.argument:
            case NoArgument():
                has_arg = HasArg.NONE
            case OptionalArgument():
                has_arg = HasArg.OPTIONAL
            case RequiredArgument():
                has_arg = HasArg.REQUIRED
        specs.append(LongSpec(option.long, has_arg, option.char))
    return tuple(specs)


def _check_table(options, /):
    """
    materialise a table and reject non-descriptors or duplicated names.
    """
    options = tuple(options)
    chars = set()
    names = set()
    for option in options:
        if not isinstance(option, Option):
            raise TypeError("option table entries must be Option instances")
        if option.char in chars:
            raise ValueError(f"option table cannot contain duplicate characters ({option.char!r})")
        chars.add(option.char)
        if option.long is not None:
            if option.long in names:
                raise ValueError(f"option table cannot contain duplicate long names ({option.long!r})")
            names.add(option.long)
    return options


class OptionParser:
    """
    flat-table option parser.

    parameters (all keyword-only)
    - backend: scanner class; argoscan.scanner.Scanner (default, self-contained)
      or argoscan.native.NativeScanner (libc, serialised process-wide).
    - permute: collect positionals interleaved with options instead of stopping
      at the first one.
    - shell: render faults with rich on stderr and exit(1) instead of raising.
    - fancy: render faults inside a panel (shell mode).
    - colorful: colour the rendering (shell mode).
    - prog: program name shown in rendered faults (defaults to __main__.__prog__
      or the basename of sys.argv[0]).

    the parser holds no per-call state: every parse builds a fresh scanner, so
    calls never observe each other's cursor.
    """

    def __init__(self, *, backend=Scanner, permute=False, shell=False, fancy=False, colorful=True, prog=Unset):
        if not callable(backend):
            raise TypeError("option parser 'backend' must be a scanner class")
        if not isinstance(prog, str | Unset):
            raise TypeError("option parser 'prog' must be a string")
        self.backend = backend
        self.permute = bool(permute)
        self.shell = bool(shell)
        self.fancy = bool(fancy)
        self.colorful = bool(colorful)
        self.prog = coalesce(prog)

    def __repr__(self):
        return "option-parser(backend=%s, permute=%r, shell=%r, fancy=%r, colorful=%r)" % (
            self.backend.__name__, self.permute, self.shell, self.fancy, self.colorful
        )

    def trigger(self, fault, /, **options):
        """
        surface a fault with this parser's runtime options merged in.
        """
        options |= {
            "shell": self.shell,
            "fancy": self.fancy,
            "colorful": self.colorful,
        }
        if self.prog is not None:
            options["prog"] = self.prog
        trigger(fault, **options)

    def parse_short(self, argv, options, /):
        """
        parse short options only; returns the remainder.

        raises UnknownOptionError / MissingArgumentError (unless shell=True).
        """
        return self._parse(argv, options, Mode.SHORT)

    def parse_long(self, argv, options, /):
        """
        parse "--name" long options (exact names) and short clusters of the
        equivalent characters; returns the remainder.

        optional values are only taken from "--name=value", never from the
        following argument.
        """
        return self._parse(argv, options, Mode.LONG)

    def parse_long_only(self, argv, options, /):
        """
        like parse_long, but long options may be spelled "-name" and any
        unambiguous prefix of a long name is accepted.

        single-dash tokens that match no long name fall back to short clusters.
        """
        return self._parse(argv, options, Mode.LONG_ONLY)

    def _parse(self, argv, options, mode, /):
        options = _check_table(options)
        if isinstance(argv, str):
            raise TypeError("argv must be a sequence of strings, not a string")
        table = {option.char: option for option in options}

        scanner = self.backend(
            argv,
            shortopts(options),
            longopts(options) if mode is not Mode.SHORT else (),
            mode=mode,
            permute=self.permute,
        )
        with scanner:
            while (code := scanner.step()) != END:
                self._apply(scanner, code, self._resolve(scanner, code, table))
            remainder = scanner.remainder()

        logger.debug("%s finished, remainder %r", mode.value, remainder)
        return remainder

    def _resolve(self, scanner, code, table, /):
        """
        classify one step result and return the matched descriptor.

        the offending option is read from the scanner's side channel here,
        before the scanner is stepped again.
        """
        if code == UNKNOWN:
            match scanner.fault:
                case FaultCode.AMBIGUOUS_OPTION:
                    fault = AmbiguousOptionError(scanner.optopt, candidates=scanner.candidates)
                case FaultCode.UNEXPECTED_ARGUMENT:
                    fault = UnexpectedArgumentError(scanner.optopt)
                case FaultCode.MISSING_ARGUMENT:
                    fault = MissingArgumentError(scanner.optopt)
                case _:
                    fault = UnknownOptionError(scanner.optopt)
            return self.trigger(fault)

        char = scanner.optopt if code == MISSING else code
        try:
            option = table[char]
        except KeyError:
            # only reachable when a backend reports a char missing from its option string
            return self.trigger(UnknownOptionError(char))

        if code == MISSING:
            match option.argument:
                case NoArgument():
                    raise RuntimeError(f"scanner reported a missing value for no-argument option {char!r}")
                case RequiredArgument():
                    return self.trigger(MissingArgumentError(char))
        return option

    def _apply(self, scanner, code, option, /):
        match option.argument:
            case NoArgument():
                logger.debug("dispatching %r", option.char)
                option.argument()
            case OptionalArgument():
                value = None if code == MISSING else scanner.optarg
                logger.debug("dispatching %r with %r", option.char, value)
                option.argument(value)
            case RequiredArgument():
                logger.debug("dispatching %r with %r", option.char, scanner.optarg)
                option.argument(scanner.optarg)


_default = OptionParser()


def parse_short(argv, options, /):
    """
    OptionParser().parse_short(argv, options)
    """
    return _default.parse_short(argv, options)


def parse_long(argv, options, /):
    """
    OptionParser().parse_long(argv, options)
    """
    return _default.parse_long(argv, options)


def parse_long_only(argv, options, /):
    """
    OptionParser().parse_long_only(argv, options)
    """
    return _default.parse_long_only(argv, options)


__all__ = (
    "OptionParser",
    "shortopts",
    "longopts",
    "parse_short",
    "parse_long",
    "parse_long_only",
)
