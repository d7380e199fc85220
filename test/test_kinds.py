# python
"""
Kinds module behavioral tests.

Scope
- Validate token parsing per kind: boolean words, range-checked integers,
  floats, strings, durations and custom values.
- Validate rendering: format() output is read back by parse() unchanged.
- Validate the duration grammar (units, fractions, signs, overflow) and its
  rendering.
- Validate resolve() on members, string values and unknown kinds.

Conventions
- Test method names follow CamelCase per project convention.
- Custom values are declared at module level so annotations resolve.
"""

import datetime
import unittest
from unittest import TestCase

from subcmd import ConfigurationError, Kind, Value, format_duration, parse_duration, resolve


class Celsius(Value):
    def __init__(self, degrees=0.0):
        self.degrees = degrees

    def set(self, text, /):
        if not text.endswith("C"):
            raise ValueError("want degrees like 21.5C")
        self.degrees = float(text[:-1])

    def __str__(self):
        return "%sC" % self.degrees


class TestKindParse(TestCase):
    """Token parsing for every kind."""

    def testBoolAcceptsGoWords(self):
        for text in ("1", "t", "T", "TRUE", "true", "True"):
            self.assertIs(Kind.BOOL.parse(text), True)
        for text in ("0", "f", "F", "FALSE", "false", "False"):
            self.assertIs(Kind.BOOL.parse(text), False)

    def testBoolRejectsOtherWords(self):
        for text in ("yes", "no", "", "tRuE"):
            with self.assertRaises(ValueError):
                Kind.BOOL.parse(text)

    def testInt32Bounds(self):
        self.assertEqual(Kind.INT32.parse("2147483647"), 2**31 - 1)
        self.assertEqual(Kind.INT32.parse("-2147483648"), -2**31)
        with self.assertRaises(ValueError):
            Kind.INT32.parse("2147483648")

    def testInt64AcceptsSign(self):
        self.assertEqual(Kind.INT64.parse("+42"), 42)
        self.assertEqual(Kind.INT64.parse("-42"), -42)

    def testIntegerRejectsNonDecimal(self):
        for text in ("abc", "0x10", "1_000", " 1", "1.0", ""):
            with self.assertRaises(ValueError):
                Kind.INT64.parse(text)

    def testPrefixedIntegers(self):
        for text, value in (("0x1F", 31), ("0X_ff", 255), ("0b101", 5), ("0o17", 15), ("017", 15),
                            ("0", 0), ("-0x10", -16), ("+1_000", 1000)):
            with self.subTest(text=text):
                self.assertEqual(Kind.INT64.parse(text, prefixed=True), value)
        for text in ("0x", "08", "1__0", "_1", "1_", "0x1g", " 1", ""):
            with self.subTest(text=text), self.assertRaises(ValueError):
                Kind.INT64.parse(text, prefixed=True)
        self.assertEqual(Kind.UINT32.parse("0xffffffff", prefixed=True), (1 << 32) - 1)
        with self.assertRaises(ValueError):
            Kind.UINT32.parse("0x100000000", prefixed=True)
        with self.assertRaises(ValueError):
            Kind.UINT32.parse("-0x1", prefixed=True)

    def testUnsignedRejectsSign(self):
        with self.assertRaises(ValueError):
            Kind.UINT32.parse("-1")
        with self.assertRaises(ValueError):
            Kind.UINT64.parse("+1")

    def testUint64Bounds(self):
        self.assertEqual(Kind.UINT64.parse("18446744073709551615"), 2**64 - 1)
        with self.assertRaises(ValueError):
            Kind.UINT64.parse("18446744073709551616")

    def testStringIsIdentity(self):
        self.assertEqual(Kind.STRING.parse(" spaced "), " spaced ")

    def testFloat64(self):
        self.assertEqual(Kind.FLOAT64.parse("2.5"), 2.5)
        self.assertEqual(Kind.FLOAT64.parse("1e3"), 1000.0)
        with self.assertRaises(ValueError):
            Kind.FLOAT64.parse(" 2.5")
        with self.assertRaises(ValueError):
            Kind.FLOAT64.parse("two")

    def testDuration(self):
        self.assertEqual(Kind.DURATION.parse("1m30s"), datetime.timedelta(seconds=90))

    def testValueMutatesTheGivenObject(self):
        into = Celsius()
        result = Kind.VALUE.parse("21.5C", into=into)
        self.assertIs(result, into)
        self.assertEqual(into.degrees, 21.5)

    def testValueWithoutTargetIsConfigurationError(self):
        with self.assertRaises(ConfigurationError):
            Kind.VALUE.parse("21.5C")


class TestKindRoundTrip(TestCase):
    """format() then parse() gives the value back."""

    def testEveryScalarKind(self):
        samples = {
            Kind.BOOL: [True, False],
            Kind.INT32: [0, -7, 2**31 - 1],
            Kind.INT64: [-2**63, 2**63 - 1],
            Kind.UINT32: [0, 2**32 - 1],
            Kind.UINT64: [2**64 - 1],
            Kind.STRING: ["", "hello world"],
            Kind.FLOAT64: [0.1, -2.5, 1e300],
            Kind.DURATION: [
                datetime.timedelta(0),
                datetime.timedelta(hours=1),
                datetime.timedelta(seconds=90),
                datetime.timedelta(milliseconds=1500),
                datetime.timedelta(microseconds=250),
                datetime.timedelta(days=3, microseconds=7),
                -datetime.timedelta(minutes=5, microseconds=1),
            ],
        }
        for kind, values in samples.items():
            for value in values:
                with self.subTest(kind=kind, value=value):
                    self.assertEqual(kind.parse(kind.format(value)), value)

    def testValue(self):
        original = Celsius(-3.25)
        clone = Kind.VALUE.parse(Kind.VALUE.format(original), into=Celsius())
        self.assertEqual(clone.degrees, original.degrees)


class TestDuration(TestCase):
    """Duration grammar and rendering."""

    def testUnits(self):
        self.assertEqual(parse_duration("1h"), datetime.timedelta(hours=1))
        self.assertEqual(parse_duration("2m"), datetime.timedelta(minutes=2))
        self.assertEqual(parse_duration("300ms"), datetime.timedelta(milliseconds=300))
        self.assertEqual(parse_duration("5us"), datetime.timedelta(microseconds=5))
        self.assertEqual(parse_duration("5µs"), datetime.timedelta(microseconds=5))
        self.assertEqual(parse_duration("5μs"), datetime.timedelta(microseconds=5))
        self.assertEqual(parse_duration("4000ns"), datetime.timedelta(microseconds=4))

    def testFractionsAndSigns(self):
        self.assertEqual(parse_duration("-1.5h"), -datetime.timedelta(minutes=90))
        self.assertEqual(parse_duration("+.5s"), datetime.timedelta(milliseconds=500))
        self.assertEqual(parse_duration("1.s"), datetime.timedelta(seconds=1))
        self.assertEqual(parse_duration("2h45m"), datetime.timedelta(hours=2, minutes=45))

    def testZero(self):
        self.assertEqual(parse_duration("0"), datetime.timedelta(0))
        self.assertEqual(parse_duration("-0"), datetime.timedelta(0))

    def testSubMicrosecondTruncatesTowardZero(self):
        self.assertEqual(parse_duration("1500ns"), datetime.timedelta(microseconds=1))
        self.assertEqual(parse_duration("-1500ns"), -datetime.timedelta(microseconds=1))

    def testMalformed(self):
        for text in ("", "-", "5", "s", ".s", "1x", "1h-2m", "7 s", "1..5s"):
            with self.subTest(text=text), self.assertRaises(ValueError):
                parse_duration(text)

    def testOverflow(self):
        with self.assertRaises(ValueError):
            parse_duration("2562048h")

    def testFormat(self):
        self.assertEqual(format_duration(datetime.timedelta(0)), "0s")
        self.assertEqual(format_duration(datetime.timedelta(hours=1)), "1h0m0s")
        self.assertEqual(format_duration(datetime.timedelta(seconds=90)), "1m30s")
        self.assertEqual(format_duration(datetime.timedelta(milliseconds=1500)), "1.5s")
        self.assertEqual(format_duration(datetime.timedelta(milliseconds=500)), "500ms")
        self.assertEqual(format_duration(datetime.timedelta(microseconds=250)), "250µs")
        self.assertEqual(format_duration(-datetime.timedelta(seconds=7)), "-7s")


class TestKindMetadata(TestCase):
    """Labels, storage types and resolve()."""

    def testLabels(self):
        self.assertEqual(Kind.BOOL.label, "")
        self.assertEqual(Kind.INT32.label, "int")
        self.assertEqual(Kind.UINT64.label, "uint")
        self.assertEqual(Kind.FLOAT64.label, "float")
        self.assertEqual(Kind.STRING.label, "string")
        self.assertEqual(Kind.DURATION.label, "duration")
        self.assertEqual(Kind.VALUE.label, "value")

    def testStorage(self):
        self.assertIs(Kind.BOOL.storage, bool)
        self.assertIs(Kind.UINT32.storage, int)
        self.assertIs(Kind.DURATION.storage, datetime.timedelta)
        self.assertIs(Kind.VALUE.storage, Value)

    def testResolve(self):
        self.assertIs(resolve(Kind.INT64), Kind.INT64)
        self.assertIs(resolve("duration"), Kind.DURATION)
        for kind in ("int", 3, None):
            with self.subTest(kind=kind), self.assertRaises(ConfigurationError):
                resolve(kind)

    def testValueCopyIsIndependent(self):
        original = Celsius(10.0)
        clone = original.copy()
        clone.set("20C")
        self.assertEqual(original.degrees, 10.0)


if __name__ == "__main__":
    unittest.main()
