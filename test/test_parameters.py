# python
"""
Parameter model behavioral tests.

Scope
- Validate Param: naming conventions (flag prefix, optional suffix), kind
  resolution, read-only metadata, representation.
- Validate Subcmd: handler/params/description sanitizing, immutability.
- Validate the params()/commands() convenience constructors and partition().

Conventions
- Test method names follow CamelCase per project convention.
"""

import unittest
from unittest import TestCase

from subcmd import ConfigurationError, Kind, Param, Subcmd, commands, params, partition


def handler(ctx, rest):
    pass


class TestParam(TestCase):
    """Param declarations."""

    def testFlagNaming(self):
        param = Param("--verbose", Kind.BOOL)
        self.assertTrue(param.is_flag)
        self.assertTrue(param.is_optional)
        self.assertEqual(param.flag_name, "verbose")
        self.assertEqual(param.display_name, "verbose")

    def testPositionalNaming(self):
        required = Param("file", Kind.STRING)
        optional = Param("count?", Kind.INT32, 7)
        self.assertFalse(required.is_flag)
        self.assertFalse(required.is_optional)
        self.assertTrue(optional.is_optional)
        self.assertEqual(optional.display_name, "count")
        with self.assertRaises(ConfigurationError):
            required.flag_name

    def testKindResolvedFromString(self):
        self.assertIs(Param("n", "uint64").kind, Kind.UINT64)

    def testUnknownKindRejected(self):
        with self.assertRaises(ConfigurationError):
            Param("n", 42)

    def testNameValidation(self):
        with self.assertRaises(ValueError):
            Param("", Kind.STRING)
        with self.assertRaises(TypeError):
            Param(3, Kind.STRING)
        with self.assertRaises(TypeError):
            Param("x", Kind.STRING, "", doc=None)

    def testReadOnly(self):
        param = Param("x", Kind.STRING)
        with self.assertRaises(AttributeError):
            param.name = "y"

    def testDefaultsToNoneAndEmptyDoc(self):
        param = Param("x", Kind.STRING)
        self.assertIsNone(param.default)
        self.assertEqual(param.doc, "")

    def testEquality(self):
        self.assertEqual(Param("x", Kind.INT32, 1, "doc"), Param("x", "int32", 1, "doc"))
        self.assertNotEqual(Param("x", Kind.INT32, 1), Param("x", Kind.INT32, 2))

    def testRepr(self):
        self.assertEqual(repr(Param("-n", Kind.INT32, 3, "count")),
                         "param(name='-n', kind=<Kind.INT32: 'int32'>, default=3, doc='count')")

    def testSealed(self):
        with self.assertRaises(TypeError):
            class Sub(Param):
                pass


class TestSubcmd(TestCase):
    """Subcmd declarations."""

    def testStoresParamsAsTuple(self):
        subcmd = Subcmd(handler, [Param("x", Kind.STRING)], "desc")
        self.assertIsInstance(subcmd.params, tuple)
        self.assertEqual(subcmd.desc, "desc")
        self.assertIs(subcmd.handler, handler)

    def testRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            Subcmd("handler")

    def testRejectsNonParams(self):
        with self.assertRaises(TypeError):
            Subcmd(handler, [("x", Kind.STRING, None, "")])
        with self.assertRaises(TypeError):
            Subcmd(handler, "x")

    def testRejectsNonStringDescription(self):
        with self.assertRaises(TypeError):
            Subcmd(handler, (), None)


class TestConstructors(TestCase):
    """params(), commands() and partition()."""

    def testParams(self):
        result = params(
            ("-v", Kind.BOOL, False, "verbose"),
            ("file", Kind.STRING, None, "input"),
        )
        self.assertEqual(len(result), 2)
        self.assertEqual(result[0], Param("-v", Kind.BOOL, False, "verbose"))

    def testParamsArity(self):
        with self.assertRaises(ValueError):
            params(("-v", Kind.BOOL, False))
        with self.assertRaises(TypeError):
            params("-v", Kind.BOOL, False, "verbose")

    def testCommandsPairsAndQuadruples(self):
        ready = Subcmd(handler, (), "ready")
        result = commands(
            ("a", ready),
            ("b", handler, "built", None),
            ("c", handler, "with params", params(("x", Kind.STRING, None, ""))),
        )
        self.assertEqual(sorted(result), ["a", "b", "c"])
        self.assertIs(result["a"], ready)
        self.assertEqual(result["b"].params, ())
        self.assertEqual(result["b"].desc, "built")
        self.assertEqual(len(result["c"].params), 1)

    def testCommandsRejectsBadGroups(self):
        with self.assertRaises(ValueError):
            commands(("a",))
        with self.assertRaises(ValueError):
            commands(("a", handler, "desc"))
        with self.assertRaises(TypeError):
            commands(("a", handler))
        with self.assertRaises(TypeError):
            commands((1, Subcmd(handler)))
        with self.assertRaises(TypeError):
            commands("a")

    def testCommandsRejectsDuplicates(self):
        with self.assertRaises(ValueError):
            commands(("a", Subcmd(handler)), ("a", Subcmd(handler)))

    def testPartition(self):
        flags, positionals = partition(params(
            ("-a", Kind.BOOL, False, ""),
            ("--b", Kind.INT32, 0, ""),
            ("c", Kind.STRING, None, ""),
            ("d?", Kind.STRING, None, ""),
        ))
        self.assertEqual([param.name for param in flags], ["-a", "--b"])
        self.assertEqual([param.name for param in positionals], ["c", "d?"])


if __name__ == "__main__":
    unittest.main()
