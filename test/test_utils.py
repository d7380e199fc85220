# python
"""
Tests for the internal helpers.

This module verifies the guarantees the rest of the package leans on:
- The Unset sentinel: singleton identity, falsy semantics, copying and
  pickling and finality.
- coalesce() only replaces Unset.
- rename() in both call forms.
- mirror() copies containers on every read.
- pluralize() and ordinal() wording.
"""
import copy
import pickle
import unittest
from threading import Lock, Thread
from unittest import TestCase

from subcmd.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` sentinel.
    """

    def testSingleton(self) -> None:
        """
        The constructor returns the exported instance on every call.
        """
        self.assertIs(UnsetType(), Unset)

    def testFalsyButDistinct(self) -> None:
        """
        Unset is falsy without being equal to None or False.
        """
        self.assertFalse(Unset)
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, False)  # noqa: E712

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")
        self.assertEqual(str(Unset), "Unset")

    def testCopyAndPickle(self) -> None:
        """
        copy(), deepcopy() and pickle round trips preserve identity.
        """
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testThreadSafety(self) -> None:
        results: list[UnsetType] = []
        lock: Lock = Lock()

        def worker():
            instance = UnsetType()
            with lock:
                results.append(instance)

        threads: list[Thread] = [Thread(target=worker) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(results), 16)
        for instance in results:
            self.assertIs(instance, Unset)

    def testFinalClass(self) -> None:
        """
        The class is final: attempts to subclass must fail with TypeError.
        """
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class HelperTest(TestCase):
    """
    coalesce(), rename(), mirror(), pluralize() and ordinal().
    """

    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        for value in (None, 0, "", []):
            self.assertIs(coalesce(value, "fallback"), value)

    def testRenameDirect(self) -> None:
        def function():
            pass

        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testRenameDecorator(self) -> None:
        @rename("decorated")
        def function():
            pass

        self.assertEqual(function.__name__, "decorated")

    def testRenameRejectsBadArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename("not callable", "name")
        with self.assertRaises(TypeError):
            rename(len, "builtin")
        with self.assertRaises(TypeError):
            rename(1)
        with self.assertRaises(TypeError):
            rename()

    def testMirrorCopiesContainers(self) -> None:
        """
        Mutating what a mirrored property returns leaves the backing field alone.
        """
        class Holder:
            items = mirror("items")
            table = mirror("table")

            def __init__(self):
                self._items = [1, [2]]
                self._table = {"k": {"nested"}}

        holder = Holder()
        holder.items[1].append(3)
        holder.table["k"].add("other")
        self.assertEqual(holder.items, [1, [2]])
        self.assertEqual(holder.table, {"k": {"nested"}})
        with self.assertRaises(AttributeError):
            holder.items = []

    def testPluralize(self) -> None:
        self.assertEqual(pluralize("parameter", 1), "parameter")
        self.assertEqual(pluralize("parameter", 0), "parameters")
        self.assertEqual(pluralize("flag"), "flags")
        self.assertEqual(pluralize("match", 2), "matches")
        self.assertEqual(pluralize("entry", 3), "entries")
        self.assertEqual(pluralize("key", 3), "keys")

    def testOrdinal(self) -> None:
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(112), "112th")
        self.assertEqual(ordinal(23), "23rd")


if __name__ == '__main__':
    unittest.main()
