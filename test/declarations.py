"""
Declarations module behavioral tests (construction, sanitization, storage cells).

Scope
- Validate the six declaration kinds: defaults, metadata normalization, sealing.
- Validate metadata constraints (keys, metavar, descr, type, required).
- Validate the shared Cell semantics seen through the handles.
- Validate the built-in readers and attempt().

Conventions
- Test method names follow CamelCase per project convention.
- Never pass explicit None for any parameter; omit instead.
"""

from __future__ import annotations

import pathlib
import unittest
import warnings
from unittest import TestCase

from argosy import Flag, MultiFlag, Option, MultiOption, Cardinal, MultiCardinal
from argosy import Conversion, attempt, boolean, integer, real, path
from argosy.arguments import Cell, Declaration


class TestFlag(TestCase):
    """Behavioral tests for Flag and MultiFlag declarations."""

    def testFlagDefaultsToFalse(self):
        f = Flag("-v", "--verbose")
        self.assertIs(f.value, False)
        self.assertFalse(f)
        self.assertFalse(f.isset)

    def testFlagKeysKeepOrder(self):
        f = Flag("--verbose", "-v")
        self.assertEqual(f.keys, ("--verbose", "-v"))

    def testFlagRequiresAtLeastOneKey(self):
        with self.assertRaises(TypeError):
            Flag()

    def testFlagKeyMustBeString(self):
        with self.assertRaises(TypeError):
            Flag(1)

    def testFlagKeyCannotBeEmpty(self):
        with self.assertRaises(ValueError):
            Flag("")

    def testFlagKeyCannotContainWhitespace(self):
        with self.assertRaises(ValueError):
            Flag("--dry run")

    def testFlagDuplicateKeysRejected(self):
        with self.assertRaises(ValueError):
            Flag("-v", "-v")

    def testFlagIsNeverRequired(self):
        self.assertFalse(Flag("-v").required)
        with self.assertRaises(TypeError):
            Flag("-v", required=True)

    def testFlagHasNoMetavar(self):
        self.assertEqual(Flag("-v").metavar, "")

    def testFlagDescrDefaultsToNone(self):
        self.assertIsNone(Flag("-v").descr)

    def testFlagDescrExplicitNoneRejected(self):
        with self.assertRaises(TypeError):
            Flag("-v", descr=None)

    def testFlagDescrIsTrimmed(self):
        self.assertEqual(Flag("-v", descr="  talk more  ").descr, "talk more")

    def testFlagDescrBlankRejected(self):
        with self.assertRaises(ValueError):
            Flag("-v", descr="   ")

    def testMultiFlagDefaultsToZero(self):
        m = MultiFlag("-v")
        self.assertEqual(int(m), 0)
        self.assertFalse(m)

    def testMultiFlagSupportsIndex(self):
        m = MultiFlag("-v")
        self.assertEqual(["a", "b"][m], "a")


class TestOption(TestCase):
    """Behavioral tests for Option and MultiOption declarations."""

    def testOptionDefaults(self):
        o = Option("-n", "--number")
        self.assertIsNone(o.value)
        self.assertEqual(o.metavar, "VALUE")
        self.assertIs(o.type, str)
        self.assertFalse(o.required)

    def testOptionCustomMetadata(self):
        o = Option("-n", type=int, metavar="N", default=3, required=True, descr="how many")
        self.assertEqual(o.value, 3)
        self.assertEqual(o.metavar, "N")
        self.assertIs(o.type, int)
        self.assertTrue(o.required)
        self.assertEqual(o.descr, "how many")

    def testOptionMetavarIsTrimmed(self):
        self.assertEqual(Option("-n", metavar=" N ").metavar, "N")

    def testOptionMetavarCannotBeEmpty(self):
        with self.assertRaises(ValueError):
            Option("-n", metavar=" ")

    def testOptionTypeMustBeCallable(self):
        with self.assertRaises(TypeError):
            Option("-n", type="int")

    def testOptionRequiredMustBeBoolean(self):
        with self.assertRaises(TypeError):
            Option("-n", required="yes")

    def testOptionKeysAreImmutableSnapshot(self):
        o = Option("-n", "--number")
        self.assertIsInstance(o.keys, tuple)

    def testMultiOptionDefaultsToEmptyTuple(self):
        m = MultiOption("-t", "--tag")
        self.assertEqual(m.value, ())
        self.assertEqual(m.values, ())
        self.assertEqual(len(m), 0)

    def testMultiOptionDefaultIsTuple(self):
        m = MultiOption("-t", default=["a", "b"])
        self.assertEqual(m.value, ("a", "b"))
        self.assertEqual(list(m), ["a", "b"])


class TestCardinal(TestCase):
    """Behavioral tests for Cardinal and MultiCardinal declarations."""

    def testCardinalDefaults(self):
        c = Cardinal()
        self.assertEqual(c.metavar, "VALUE")
        self.assertIsNone(c.value)
        self.assertFalse(c.required)

    def testCardinalMetavarIsPositional(self):
        c = Cardinal("PATH", type=path, required=True)
        self.assertEqual(c.metavar, "PATH")
        self.assertTrue(c.required)

    def testCardinalMetavarMustBeNonEmpty(self):
        with self.assertRaises(ValueError):
            Cardinal("")

    def testCardinalHasNoKeys(self):
        self.assertFalse(hasattr(Cardinal("PATH"), "keys"))

    def testMultiCardinalDefaultsToEmptyTuple(self):
        m = MultiCardinal("FILES")
        self.assertEqual(m.values, ())
        self.assertTrue(m.multi)


class TestDeclarationKinds(TestCase):
    """Behavioral tests for the closed set of declaration kinds."""

    def testDeclarationCannotBeInstantiated(self):
        with self.assertRaises(TypeError):
            Declaration()

    def testKindsAreSealed(self):
        for kind in (Flag, MultiFlag, Option, MultiOption, Cardinal, MultiCardinal):
            with self.subTest(kind=kind.__name__):
                with self.assertRaises(TypeError):
                    type("Custom", (kind,), {})

    def testKindMarkers(self):
        self.assertEqual((Flag.keyed, Flag.parametric, Flag.multi), (True, False, False))
        self.assertEqual((MultiFlag.keyed, MultiFlag.parametric, MultiFlag.multi), (True, False, True))
        self.assertEqual((Option.keyed, Option.parametric, Option.multi), (True, True, False))
        self.assertEqual((MultiOption.keyed, MultiOption.parametric, MultiOption.multi), (True, True, True))
        self.assertEqual((Cardinal.keyed, Cardinal.multi), (False, False))
        self.assertEqual((MultiCardinal.keyed, MultiCardinal.multi), (False, True))

    def testTypenameIsHyphenated(self):
        self.assertEqual(MultiOption.__typename__, "multi-option")
        self.assertEqual(Flag.__typename__, "flag")

    def testReprShowsMetadataAndValue(self):
        text = repr(Option("-n", type=int, default=3))
        self.assertTrue(text.startswith("option(keys=('-n',)"))
        self.assertIn("value=3", text)


class TestCell(TestCase):
    """Behavioral tests for the shared storage cell."""

    def testStoreOverwrites(self):
        c = Cell(1)
        c.store(2)
        c.store(3)
        self.assertEqual(c.value, 3)
        self.assertTrue(c.isset)

    def testFirstAppendReplacesDefault(self):
        c = Cell(("x",))
        c.append("a")
        c.append("b")
        self.assertEqual(c.value, ["a", "b"])

    def testIncrementStartsFromZero(self):
        c = Cell(0)
        c.increment()
        c.increment()
        self.assertEqual(c.value, 2)

    def testResetRestoresDefault(self):
        c = Cell(("x",))
        c.append("a")
        c.reset()
        self.assertEqual(c.value, ("x",))
        self.assertFalse(c.isset)
        c.append("b")
        self.assertEqual(c.value, ["b"])

    def testHandleObservesCellWrites(self):
        o = Option("-n", type=int, default=3)
        o._cell.store(5)
        self.assertEqual(o.value, 5)
        self.assertTrue(o.isset)


class TestReaders(TestCase):
    """Behavioral tests for the built-in readers and attempt()."""

    def testAttemptSuccess(self):
        self.assertEqual(attempt(int, "42"), Conversion(True, 42))

    def testAttemptFailureKeepsException(self):
        conversion = attempt(int, "4x")
        self.assertFalse(conversion.success)
        self.assertIsNone(conversion.value)
        self.assertIsInstance(conversion.exception, ValueError)

    def testAttemptRejectsNonString(self):
        with self.assertRaises(TypeError):
            attempt(int, 42)

    def testStringReaderKeepsTrailingContent(self):
        self.assertEqual(attempt(str, "a b ").value, "a b ")

    def testFloatReader(self):
        self.assertEqual(attempt(float, "2.5").value, 2.5)

    def testBooleanReader(self):
        self.assertIs(boolean("Yes"), True)
        self.assertIs(boolean("off"), False)
        with self.assertRaises(ValueError):
            boolean("maybe")

    def testIntegerReaderIsAsciiOnly(self):
        self.assertEqual(integer("-42"), -42)
        self.assertEqual(integer("+7"), 7)
        for raw in ("\u0663", "1_000", " 5", "5 ", "", "0x10", "1.0"):
            with self.subTest(raw=raw):
                with self.assertRaises(ValueError):
                    integer(raw)

    def testIntReaderKeepsPythonLiteralRules(self):
        self.assertEqual(attempt(int, "1_000").value, 1000)
        self.assertEqual(attempt(int, "\u0663").value, 3)

    def testRealReaderIsAsciiOnly(self):
        self.assertEqual(real("2.5"), 2.5)
        self.assertEqual(real("-.5e2"), -50.0)
        self.assertEqual(real("3."), 3.0)
        for raw in ("\u0663.5", "1_0.5", "inf", "nan", ".", "1e", ""):
            with self.subTest(raw=raw):
                with self.assertRaises(ValueError):
                    real(raw)

    def testPathReader(self):
        self.assertEqual(path("a/b"), pathlib.Path("a/b"))
        with self.assertRaises(ValueError):
            path("")

    def testReaderWarningsAreLoggedNotFailures(self):
        def noisy(raw):
            warnings.warn("deprecated literal", DeprecationWarning)
            return raw.upper()

        with self.assertLogs("argosy.readers", level="WARNING") as logs:
            conversion = attempt(noisy, "abc")
        self.assertEqual(conversion, Conversion(True, "ABC"))
        self.assertIn("deprecated literal", logs.output[0])


if __name__ == "__main__":
    unittest.main()
