"""
Argoscan native scanner: drive the C library's getopt family through ctypes.

What this module provides
- NativeScanner: same constructor, step contract and side channel as
  argoscan.scanner.Scanner, backed by getopt(3), getopt_long(3) and
  getopt_long_only(3).
- available: whether a C library exposing getopt could be loaded.

Process-wide state
- libc keeps optind/optarg/optopt/opterr (and its own cluster cursor) in
  globals shared by the whole process. This module therefore
  • turns libc's own diagnostics off once at import (opterr = 0),
  • resolves the reset operation once at import:
      - BSD family (exports optreset): optreset = 1, optind = 1
      - GNU (no optreset): optind = 0, which forces a full reinitialisation
  • holds a module lock from __enter__ to __exit__, so at most one native
    parse runs at a time. Always use the scanner as a context manager.

Ordering
- GNU getopt and the getopt_long family on both GNU and BSD permute argv by
  default. Those calls get a leading '+' in the option string, so scanning
  stops at the first positional argument like every other backend. (BSD plain
  getopt never permutes and would read '+' as an option.) permute=True is
  rejected.
- Long-name abbreviation follows whatever libc implements.
"""
import ctypes
import ctypes.util
import os
import threading

from .faults import FaultCode
from .scanner import END, UNKNOWN, MISSING, Mode, HasArg, LongSpec, _parse_shortopts


class _LongOption(ctypes.Structure):
    """
    struct option from <getopt.h>.
    """
    _fields_ = (
        ("name", ctypes.c_char_p),
        ("has_arg", ctypes.c_int),
        ("flag", ctypes.POINTER(ctypes.c_int)),
        ("val", ctypes.c_int),
    )


def _load():
    try:
        libc = ctypes.CDLL(ctypes.util.find_library("c"))
        for name in ("getopt", "getopt_long", "getopt_long_only"):
            getattr(libc, name).restype = ctypes.c_int
    except (OSError, TypeError, AttributeError):
        return None

    libc.getopt.argtypes = (ctypes.c_int, ctypes.POINTER(ctypes.c_char_p), ctypes.c_char_p)
    for function in (libc.getopt_long, libc.getopt_long_only):
        function.argtypes = (
            ctypes.c_int,
            ctypes.POINTER(ctypes.c_char_p),
            ctypes.c_char_p,
            ctypes.POINTER(_LongOption),
            ctypes.POINTER(ctypes.c_int),
        )
    return libc


_libc = _load()
_lock = threading.Lock()

available = _libc is not None

if available:
    _optind = ctypes.c_int.in_dll(_libc, "optind")
    _opterr = ctypes.c_int.in_dll(_libc, "opterr")
    _optopt = ctypes.c_int.in_dll(_libc, "optopt")
    _optarg = ctypes.c_char_p.in_dll(_libc, "optarg")
    try:
        _optreset = ctypes.c_int.in_dll(_libc, "optreset")
    except ValueError:
        _optreset = None

    _opterr.value = 0

    if _optreset is not None:
        def _reset():
            _optreset.value = 1
            _optind.value = 1
    else:
        def _reset():
            _optind.value = 0


class NativeScanner:
    """
    libc-backed option scanner.

    parameters are those of argoscan.scanner.Scanner. step() may only be called
    inside the scanner's 'with' block, which holds the process-wide lock.
    """

    def __init__(self, argv, shortopts, longopts=(), /, *, mode=Mode.SHORT, permute=False):
        if not available:
            raise RuntimeError("native scanner needs a C library exposing getopt")
        if not isinstance(mode, Mode):
            raise TypeError("scanner 'mode' must be a Mode")
        if permute:
            raise ValueError("native scanner does not support permute mode")
        self.argv = tuple(argv)
        if not all(isinstance(token, str) for token in self.argv):
            raise TypeError("scanner 'argv' must contain only strings")
        self.mode = mode
        self.permute = False

        _parse_shortopts(shortopts)
        # BSD getopt_long and every GNU function permute unless told otherwise
        if (mode is not Mode.SHORT or _optreset is None) and not shortopts.startswith("+"):
            shortopts = "+" + shortopts
        self._shortopts = os.fsencode(shortopts)

        # ctypes keeps only raw pointers; the encoded buffers must outlive the parse.
        self._encoded = [os.fsencode(token) for token in self.argv]
        self._argv = (ctypes.c_char_p * (len(self._encoded) + 1))(*self._encoded, None)

        self._specs = tuple(LongSpec(name, HasArg(has_arg), val) for name, has_arg, val in longopts)
        self._names = [os.fsencode(spec.name) for spec in self._specs]
        self._longopts = (_LongOption * (len(self._specs) + 1))(*(
            _LongOption(name, spec.has_arg, None, ord(spec.val))
            for name, spec in zip(self._names, self._specs)
        ))
        self._longindex = ctypes.c_int(-1)
        self._locked = False

        self.optind = 1
        self.optarg = None
        self.optopt = ""
        self.longind = None
        self.fault = None
        self.candidates = ()

    def __enter__(self):
        _lock.acquire()
        self._locked = True
        self.reset()
        return self

    def __exit__(self, *exc_info):
        self._locked = False
        _lock.release()
        return None

    def reset(self):
        """
        rewind libc's cursor (variant chosen once at import) and our mirror of it.
        """
        _reset()
        self.optind = 1
        self.optarg = None
        self.optopt = ""
        self.longind = None
        self.fault = None

    def remainder(self):
        return list(self.argv[min(self.optind, len(self.argv)):])

    def step(self):
        if not self._locked:
            raise RuntimeError("native scanner must be stepped inside its 'with' block")

        self._longindex.value = -1
        match self.mode:
            case Mode.SHORT:
                code = _libc.getopt(len(self.argv), self._argv, self._shortopts)
            case Mode.LONG:
                code = _libc.getopt_long(
                    len(self.argv), self._argv, self._shortopts, self._longopts, ctypes.byref(self._longindex)
                )
            case Mode.LONG_ONLY:
                code = _libc.getopt_long_only(
                    len(self.argv), self._argv, self._shortopts, self._longopts, ctypes.byref(self._longindex)
                )

        # capture the side channel now; the next libc call overwrites it
        self.optind = _optind.value
        self.optarg = None if _optarg.value is None else os.fsdecode(_optarg.value)
        self.longind = self._longindex.value if self._longindex.value >= 0 else None
        self.fault = None

        if code == -1:
            return END

        char = chr(code)
        if char == UNKNOWN:
            self.fault = FaultCode.UNKNOWN_OPTION
            if _optopt.value:
                self.optopt = chr(_optopt.value)
                if self._assigned_to_flag(self.optopt):
                    self.fault = FaultCode.UNEXPECTED_ARGUMENT
            else:
                # unknown long option: libc has already stepped past it
                self.optopt = self.argv[min(self.optind, len(self.argv)) - 1].partition("=")[0]
        elif char == MISSING:
            self.optopt = chr(_optopt.value)
            self.fault = FaultCode.MISSING_ARGUMENT
        return char

    def _assigned_to_flag(self, char):
        """
        whether the token just consumed was '--name=value' for a no-argument long option.
        """
        token = self.argv[min(self.optind, len(self.argv)) - 1]
        if not token.startswith("--") or "=" not in token:
            return False
        name = token[2:].partition("=")[0]
        return any(
            spec.val == char and spec.has_arg is HasArg.NONE and spec.name.startswith(name)
            for spec in self._specs
        )


__all__ = (
    "available",
    "NativeScanner",
)
