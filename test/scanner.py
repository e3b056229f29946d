# python
"""
Scanner behavioral tests.

Scope
- Validate the step contract of the self-contained Scanner: result codes,
  side channel (optarg/optopt/fault/candidates) and the remainder.
- Cover short clusters, long options in both long modes, permute mode and reset.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argoscan import END, UNKNOWN, MISSING, FaultCode, HasArg, LongSpec, Mode, Scanner

LONGOPTS = (
    LongSpec("level", HasArg.OPTIONAL, "l"),
    LongSpec("verbose", HasArg.NONE, "v"),
    LongSpec("version", HasArg.NONE, "V"),
    LongSpec("out", HasArg.REQUIRED, "o"),
)


class TestShortScanning(TestCase):
    """Step contract in Mode.SHORT."""

    def testNoOptions(self):
        scanner = Scanner(["prog", "a", "b"], ":ab")
        self.assertEqual(scanner.step(), END)
        self.assertEqual(scanner.remainder(), ["a", "b"])

    def testEmptyArgv(self):
        scanner = Scanner(["prog"], ":a")
        self.assertEqual(scanner.step(), END)
        self.assertEqual(scanner.remainder(), [])

    def testClusterAndSeparateValue(self):
        scanner = Scanner(["prog", "-ab", "-c", "val", "rest"], ":abc:")
        self.assertEqual(list(scanner), ["a", "b", "c"])
        self.assertEqual(scanner.remainder(), ["rest"])

    def testAttachedValue(self):
        scanner = Scanner(["prog", "-ofile"], ":o:")
        self.assertEqual(scanner.step(), "o")
        self.assertEqual(scanner.optarg, "file")
        self.assertEqual(scanner.step(), END)
        self.assertEqual(scanner.remainder(), [])

    def testValueEndsCluster(self):
        scanner = Scanner(["prog", "-aofile", "-b"], ":abo:")
        self.assertEqual(scanner.step(), "a")
        self.assertEqual(scanner.step(), "o")
        self.assertEqual(scanner.optarg, "file")
        self.assertEqual(scanner.step(), "b")
        self.assertIsNone(scanner.optarg)

    def testMissingValueInColonMode(self):
        scanner = Scanner(["prog", "-o"], ":o:")
        self.assertEqual(scanner.step(), MISSING)
        self.assertEqual(scanner.optopt, "o")
        self.assertIs(scanner.fault, FaultCode.MISSING_ARGUMENT)

    def testMissingValueWithoutColonMode(self):
        scanner = Scanner(["prog", "-o"], "o:")
        self.assertEqual(scanner.step(), UNKNOWN)
        self.assertEqual(scanner.optopt, "o")
        self.assertIs(scanner.fault, FaultCode.MISSING_ARGUMENT)

    def testUnknownOption(self):
        scanner = Scanner(["prog", "-z"], ":a")
        self.assertEqual(scanner.step(), UNKNOWN)
        self.assertEqual(scanner.optopt, "z")
        self.assertIs(scanner.fault, FaultCode.UNKNOWN_OPTION)

    def testDoubleDashIsConsumed(self):
        scanner = Scanner(["prog", "-a", "--", "-b"], ":ab")
        self.assertEqual(scanner.step(), "a")
        self.assertEqual(scanner.step(), END)
        self.assertEqual(scanner.remainder(), ["-b"])

    def testLoneDashIsPositional(self):
        scanner = Scanner(["prog", "-", "-a"], ":a")
        self.assertEqual(scanner.step(), END)
        self.assertEqual(scanner.remainder(), ["-", "-a"])

    def testStopsAtFirstPositional(self):
        scanner = Scanner(["prog", "-a", "pos", "-b"], ":ab")
        self.assertEqual(list(scanner), ["a"])
        self.assertEqual(scanner.remainder(), ["pos", "-b"])

    def testPlusPrefixIsIgnored(self):
        scanner = Scanner(["prog", "-a"], "+:a")
        self.assertEqual(list(scanner), ["a"])

    def testRemainderClampsCursor(self):
        scanner = Scanner(["prog"], ":a")
        scanner.optind = 5
        self.assertEqual(scanner.remainder(), [])

    def testResetRewinds(self):
        scanner = Scanner(["prog", "-ab", "-c", "x", "tail"], ":abc:")
        first = list(scanner)
        scanner.reset()
        self.assertEqual(scanner.optind, 1)
        self.assertEqual(list(scanner), first)
        self.assertEqual(scanner.remainder(), ["tail"])

    def testLongOptionsIgnoredInShortMode(self):
        scanner = Scanner(["prog", "--verbose"], ":v", LONGOPTS)
        self.assertEqual(scanner.step(), UNKNOWN)
        self.assertEqual(scanner.optopt, "-")
        self.assertIsNone(scanner.longind)

    def testRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            Scanner(["prog", 5], ":a")
        with self.assertRaises(TypeError):
            Scanner(["prog"], ":a", mode="getopt")
        with self.assertRaises(TypeError):
            Scanner(["prog"], None)


class TestPermutedScanning(TestCase):
    """Step contract with permute=True."""

    def testCollectsInterleavedPositionals(self):
        scanner = Scanner(["prog", "x", "-a", "y", "-b", "z"], ":ab", permute=True)
        self.assertEqual(list(scanner), ["a", "b"])
        self.assertEqual(scanner.remainder(), ["x", "y", "z"])

    def testDoubleDashStillEndsScanning(self):
        scanner = Scanner(["prog", "x", "-a", "--", "-b", "y"], ":ab", permute=True)
        self.assertEqual(list(scanner), ["a"])
        self.assertEqual(scanner.remainder(), ["x", "-b", "y"])

    def testResetForgetsSetAside(self):
        scanner = Scanner(["prog", "x", "-a"], ":a", permute=True)
        list(scanner)
        scanner.reset()
        list(scanner)
        self.assertEqual(scanner.remainder(), ["x"])


class TestLongScanning(TestCase):
    """Step contract in Mode.LONG."""

    def scanner(self, *argv):
        return Scanner(["prog", *argv], ":l:vVo:", LONGOPTS, mode=Mode.LONG)

    def testLongForms(self):
        scanner = self.scanner("--level=5", "--verbose", "--out", "f", "rest")
        self.assertEqual(scanner.step(), "l")
        self.assertEqual(scanner.optarg, "5")
        self.assertEqual(scanner.longind, 0)
        self.assertEqual(scanner.step(), "v")
        self.assertIsNone(scanner.optarg)
        self.assertEqual(scanner.step(), "o")
        self.assertEqual(scanner.optarg, "f")
        self.assertEqual(scanner.step(), END)
        self.assertEqual(scanner.remainder(), ["rest"])

    def testAssignedRequiredValue(self):
        scanner = self.scanner("--out=a=b")
        self.assertEqual(scanner.step(), "o")
        self.assertEqual(scanner.optarg, "a=b")

    def testEmptyAssignedValue(self):
        scanner = self.scanner("--level=")
        self.assertEqual(scanner.step(), "l")
        self.assertEqual(scanner.optarg, "")

    def testOptionalValueNeverTakesNextToken(self):
        scanner = self.scanner("--level", "5")
        self.assertEqual(scanner.step(), "l")
        self.assertIsNone(scanner.optarg)
        self.assertEqual(scanner.step(), END)
        self.assertEqual(scanner.remainder(), ["5"])

    def testMissingRequiredValue(self):
        scanner = self.scanner("--out")
        self.assertEqual(scanner.step(), MISSING)
        self.assertEqual(scanner.optopt, "o")
        self.assertIs(scanner.fault, FaultCode.MISSING_ARGUMENT)

    def testExactNamesOnly(self):
        scanner = self.scanner("--verb")
        self.assertEqual(scanner.step(), UNKNOWN)
        self.assertEqual(scanner.optopt, "--verb")
        self.assertIs(scanner.fault, FaultCode.UNKNOWN_OPTION)
        self.assertEqual(scanner.optind, 2)

    def testUnknownSpellingDropsValue(self):
        scanner = self.scanner("--bogus=1")
        self.assertEqual(scanner.step(), UNKNOWN)
        self.assertEqual(scanner.optopt, "--bogus")

    def testUnexpectedArgument(self):
        scanner = self.scanner("--verbose=1")
        self.assertEqual(scanner.step(), UNKNOWN)
        self.assertEqual(scanner.optopt, "v")
        self.assertIs(scanner.fault, FaultCode.UNEXPECTED_ARGUMENT)

    def testShortFormsStillWork(self):
        scanner = self.scanner("-vofile", "-l")
        self.assertEqual(scanner.step(), "v")
        self.assertEqual(scanner.step(), "o")
        self.assertEqual(scanner.optarg, "file")
        self.assertEqual(scanner.step(), MISSING)
        self.assertEqual(scanner.optopt, "l")

    def testAcceptsPlainTuples(self):
        scanner = Scanner(["prog", "--level=3"], ":l:", [("level", 2, "l")], mode=Mode.LONG)
        self.assertEqual(scanner.step(), "l")
        self.assertEqual(scanner.optarg, "3")

    def testDoubleDashTokenWithoutLongTable(self):
        scanner = Scanner(["prog", "--help"], ":a", mode=Mode.LONG)
        self.assertEqual(scanner.step(), UNKNOWN)
        self.assertEqual(scanner.optopt, "--help")
        self.assertIs(scanner.fault, FaultCode.UNKNOWN_OPTION)
        self.assertEqual(scanner.remainder(), [])

class TestLongOnlyScanning(TestCase):
    """Step contract in Mode.LONG_ONLY."""

    def scanner(self, *argv, shortopts=":l:vVo:"):
        return Scanner(["prog", *argv], shortopts, LONGOPTS, mode=Mode.LONG_ONLY)

    def testSingleDashLongName(self):
        scanner = self.scanner("-verbose", "-out=f")
        self.assertEqual(scanner.step(), "v")
        self.assertEqual(scanner.step(), "o")
        self.assertEqual(scanner.optarg, "f")

    def testUniquePrefix(self):
        scanner = self.scanner("--verb", "-lev=2")
        self.assertEqual(scanner.step(), "v")
        self.assertEqual(scanner.step(), "l")
        self.assertEqual(scanner.optarg, "2")

    def testAmbiguousPrefix(self):
        scanner = self.scanner("--ver", "-a")
        self.assertEqual(scanner.step(), UNKNOWN)
        self.assertEqual(scanner.optopt, "--ver")
        self.assertIs(scanner.fault, FaultCode.AMBIGUOUS_OPTION)
        self.assertEqual(scanner.candidates, ("verbose", "version"))
        self.assertEqual(scanner.optind, 2)

    def testAliasesAreNotAmbiguous(self):
        longopts = (LongSpec("color", HasArg.NONE, "c"), LongSpec("colour", HasArg.NONE, "c"))
        scanner = Scanner(["prog", "-col"], ":c", longopts, mode=Mode.LONG_ONLY)
        self.assertEqual(scanner.step(), "c")

    def testFallsBackToShortCluster(self):
        scanner = self.scanner("-vV", shortopts=":vV")
        self.assertEqual(list(scanner), ["v", "V"])

    def testShortCharWins(self):
        scanner = self.scanner("-v")
        self.assertEqual(scanner.step(), "v")
        self.assertIsNone(scanner.longind)

    def testUnknownSingleDashName(self):
        scanner = self.scanner("-bogus")
        self.assertEqual(scanner.step(), UNKNOWN)
        self.assertEqual(scanner.optopt, "-bogus")
        self.assertIs(scanner.fault, FaultCode.UNKNOWN_OPTION)


if __name__ == "__main__":
    unittest.main()
