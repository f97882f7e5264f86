"""
Tests for the internal helpers.

This module verifies semantic guarantees of:
- the `Unset` sentinel (singleton identity, falsy semantics, representation,
  copying and pickling, finality).
- `coalesce`, `rename` and `mirror`.
"""
import copy
import pickle
import unittest
from types import MappingProxyType
from unittest import TestCase

from hashparse.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `UnsetType` singleton.
    """

    def testSingleton(self) -> None:
        self.assertIs(Unset, UnsetType())
        self.assertIsInstance(Unset, UnsetType)

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")
        self.assertEqual(str(Unset), "Unset")

    def testFalsely(self) -> None:
        self.assertFalse(bool(Unset))

    def testNotEqualToNoneOrFalse(self) -> None:
        # Falsy does not imply equality with other falsy values.
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, False)  # noqa: E712

    def testUnionWithTypes(self) -> None:
        self.assertIsInstance("calc", str | Unset)
        self.assertIsInstance(Unset, str | Unset)
        self.assertNotIsInstance(None, str | Unset)

    def testCopyDeepcopyPreserveSingleton(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testPickleRoundTrip(self) -> None:
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFinalClass(self) -> None:
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class CoalesceTest(TestCase):

    def testUnsetResolvesToDefault(self) -> None:
        self.assertEqual(coalesce(Unset, "calc"), "calc")
        self.assertIsNone(coalesce(Unset))

    def testFalseyValuesArePreserved(self) -> None:
        self.assertIsNone(coalesce(None, "calc"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertEqual(coalesce("", "calc"), "")


class RenameTest(TestCase):

    def testRenameInPlace(self) -> None:
        def function():
            pass

        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testRenameDecorator(self) -> None:
        @rename("renamed")
        def function():
            pass

        self.assertEqual(function.__name__, "renamed")

    def testRenameRejectsBadArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename("not callable", "name")
        with self.assertRaises(TypeError):
            rename(print, 1)
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename("name")("not callable")


class MirrorTest(TestCase):

    class Holder:
        items = mirror("items")
        table = mirror("table")
        tags = mirror("tags")
        name = mirror("name")

        def __init__(self):
            self._items = ["a", "b"]
            self._table = {"a": 1}
            self._tags = {"x"}
            self._name = "calc"

    def testContainersAreFrozen(self) -> None:
        holder = self.Holder()
        self.assertEqual(holder.items, ("a", "b"))
        self.assertIsInstance(holder.table, MappingProxyType)
        self.assertEqual(holder.tags, frozenset({"x"}))
        self.assertEqual(holder.name, "calc")

    def testPropertyIsReadOnly(self) -> None:
        with self.assertRaises(AttributeError):
            self.Holder().name = "other"

    def testGetterIsNamed(self) -> None:
        self.assertEqual(self.Holder.items.fget.__name__, "items")

    def testRejectsNonString(self) -> None:
        with self.assertRaises(TypeError):
            mirror(1)


if __name__ == '__main__':
    unittest.main()
