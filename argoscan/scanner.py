"""
Argoscan scanner: a self-contained getopt-style tokenizer.

What this module provides
- Scanner: walks an argument vector one option at a time, following the
  classic getopt/getopt_long/getopt_long_only step contract, but with all of
  its cursor and diagnostic state held per instance.
- Mode / HasArg / LongSpec: the vocabulary shared with the native scanner.
- END / UNKNOWN / MISSING: step result codes.

Step contract
- step() returns one of
  • END (-1): no more options; remainder() holds the leftover arguments.
  • UNKNOWN ("?"): an unrecognized (or ambiguous, or wrongly valued) option;
    optopt holds the offending option and fault the diagnosis.
  • MISSING (":"): an option needing a value had none (colon mode only);
    optopt holds the option character.
  • the matched option character; optarg holds its value or None.
- the side channel (optarg/optopt/fault/candidates) is overwritten on every
  step, so callers must read it before stepping again.

Token rules
- argv[0] is the program placeholder and is never scanned.
- "--" ends scanning and is consumed.
- "-" and tokens not starting with '-' end scanning, unless permute=True, in
  which case they are set aside (in order) and returned ahead of the tail.
- short clusters: "-abc" is a, b, c; a value-taking char consumes the rest of
  its cluster ("-ofile") or the next token ("-o file").
- long options: "--name=value" or, for required values, "--name value";
  optional values only ever come from "=value".
"""
from collections import namedtuple
from enum import Enum, IntEnum

from .faults import FaultCode

END = -1
UNKNOWN = "?"
MISSING = ":"


class Mode(Enum):
    """
    which getopt flavour a scanner follows.

    - SHORT: short clusters only.
    - LONG: "--name" long options (exact names) plus short clusters.
    - LONG_ONLY: long options may also start with a single '-', and unambiguous
      prefixes of long names are accepted.
    """
    SHORT = "getopt"
    LONG = "getopt_long"
    LONG_ONLY = "getopt_long_only"


class HasArg(IntEnum):
    """
    value requirements of a long option (same numbering as <getopt.h>).
    """
    NONE = 0
    REQUIRED = 1
    OPTIONAL = 2


LongSpec = namedtuple("LongSpec", ("name", "has_arg", "val"))
LongSpec.__doc__ = """
one entry of a long-option table: the long name, its HasArg and the
equivalent character returned by step() when it matches.
"""


def _parse_shortopts(shortopts):
    """
    split a getopt spec string into (colon mode, {char: takes value}).

    a leading '+' (posix ordering request) is accepted and ignored; a leading
    ':' selects colon mode.
    """
    if not isinstance(shortopts, str):
        raise TypeError("scanner 'shortopts' must be a string")
    shortopts = shortopts.removeprefix("+")
    colon = shortopts.startswith(":")
    table = {}
    index = int(colon)
    while index < len(shortopts):
        char = shortopts[index]
        index += 1
        table[char] = index < len(shortopts) and shortopts[index] == ":"
        if table[char]:
            index += 1
    return colon, table


def _nonoption(token):
    return not token.startswith("-") or token == "-"


class Scanner:
    """
    per-call option scanner.

    parameters
    - argv: Sequence[str], including the program placeholder at index 0.
    - shortopts: getopt spec string (e.g. ":ab:c:").
    - longopts: Iterable[LongSpec] (ignored in Mode.SHORT).
    - mode: Mode (default Mode.SHORT).
    - permute: collect interleaved positionals instead of stopping at them.

    the scanner never prints diagnostics; everything is reported through the
    step codes and side-channel attributes.
    """

    def __init__(self, argv, shortopts, longopts=(), /, *, mode=Mode.SHORT, permute=False):
        if not isinstance(mode, Mode):
            raise TypeError("scanner 'mode' must be a Mode")
        self.argv = tuple(argv)
        if not all(isinstance(token, str) for token in self.argv):
            raise TypeError("scanner 'argv' must contain only strings")
        self.mode = mode
        self.permute = bool(permute)
        self._colon, self._table = _parse_shortopts(shortopts)
        self._longopts = tuple(
            LongSpec(name, HasArg(has_arg), val) for name, has_arg, val in longopts
        ) if mode is not Mode.SHORT else ()
        self.reset()

    def reset(self):
        """
        rewind to the first argument after the program placeholder.
        """
        self.optind = 1
        self.optarg = None
        self.optopt = ""
        self.longind = None
        self.fault = None
        self.candidates = ()
        self._nextchar = ""
        self._skipped = []

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return None

    def __iter__(self):
        while (code := self.step()) != END:
            yield code

    def remainder(self):
        """
        the leftover arguments: set-aside positionals, then the unscanned tail.
        """
        return self._skipped + list(self.argv[min(self.optind, len(self.argv)):])

    def step(self):
        self.optarg = None
        self.longind = None
        self.fault = None
        self.candidates = ()

        if not self._nextchar:
            if self.permute:
                while self.optind < len(self.argv) and _nonoption(self.argv[self.optind]):
                    self._skipped.append(self.argv[self.optind])
                    self.optind += 1

            if self.optind >= len(self.argv):
                return END

            token = self.argv[self.optind]
            if token == "--":
                self.optind += 1
                return END
            if _nonoption(token):
                return END

            if self.mode is not Mode.SHORT and (
                    token.startswith("--") or
                    (self.mode is Mode.LONG_ONLY and (len(token) > 2 or token[1] not in self._table))
            ):
                code = self._step_long(token)
                if code is not None:
                    return code

            self._nextchar = token[1:]

        return self._step_short()

    def _step_short(self):
        char, self._nextchar = self._nextchar[0], self._nextchar[1:]
        if not self._nextchar:
            self.optind += 1

        if char not in self._table:
            self.optopt = char
            self.fault = FaultCode.UNKNOWN_OPTION
            return UNKNOWN

        if self._table[char]:
            if self._nextchar:
                self.optarg = self._nextchar
                self._nextchar = ""
                self.optind += 1
            elif self.optind < len(self.argv):
                self.optarg = self.argv[self.optind]
                self.optind += 1
            else:
                self.optopt = char
                self.fault = FaultCode.MISSING_ARGUMENT
                return MISSING if self._colon else UNKNOWN

        return char

    def _step_long(self, token):
        """
        match one long-option token; None means "retry as a short cluster".
        """
        dashes = 2 if token.startswith("--") else 1
        name, assigned, value = token[dashes:].partition("=")

        matches = [index for index, spec in enumerate(self._longopts) if spec.name == name]
        if not matches and self.mode is Mode.LONG_ONLY:
            matches = [index for index, spec in enumerate(self._longopts) if spec.name.startswith(name)]
            # prefixes naming the same option through different aliases are not ambiguous
            if len({self._longopts[index][1:] for index in matches}) > 1:
                self.optind += 1
                self.optopt = token.partition("=")[0]
                self.fault = FaultCode.AMBIGUOUS_OPTION
                self.candidates = tuple(self._longopts[index].name for index in matches)
                return UNKNOWN

        if not matches:
            if dashes == 1 and token[1] in self._table:
                return None
            self.optind += 1
            self.optopt = token.partition("=")[0]
            self.fault = FaultCode.UNKNOWN_OPTION
            return UNKNOWN

        self.longind = matches[0]
        spec = self._longopts[self.longind]
        self.optind += 1

        if assigned:
            if spec.has_arg is HasArg.NONE:
                self.optopt = spec.val
                self.fault = FaultCode.UNEXPECTED_ARGUMENT
                return UNKNOWN
            self.optarg = value
        elif spec.has_arg is HasArg.REQUIRED:
            if self.optind < len(self.argv):
                self.optarg = self.argv[self.optind]
                self.optind += 1
            else:
                self.optopt = spec.val
                self.fault = FaultCode.MISSING_ARGUMENT
                return MISSING if self._colon else UNKNOWN

        return spec.val


__all__ = (
    "END",
    "UNKNOWN",
    "MISSING",
    "Mode",
    "HasArg",
    "LongSpec",
    "Scanner",
)
