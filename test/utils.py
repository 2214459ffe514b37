"""
Tests for the shared helpers.

Scope
- Unset sentinel: singleton identity, falsiness, representation, finality.
- coalesce(): only Unset is replaced.
- mirror(): read-only properties handing out copies.
- ordinal(): word forms and numeric suffixes.
- mglob(): literal module names pass through.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from sprig.utils import *


class TestUnset(TestCase):
    def testSingleton(self) -> None:
        self.assertIs(UnsetType(), Unset)
        self.assertIs(UnsetType(), UnsetType())

    def testFalsyButNotNone(self) -> None:
        self.assertFalse(Unset)
        self.assertIsNotNone(Unset)
        self.assertNotEqual(Unset, 0)

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testCannotSubclass(self) -> None:
        with self.assertRaises(TypeError):
            class Other(UnsetType):  # NOQA: F-841
                pass


class TestCoalesce(TestCase):
    def testUnsetIsReplaced(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testFalsyValuesArePreserved(self) -> None:
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce("", "fallback"), "")
        self.assertEqual(coalesce(0, 1), 0)


class TestMirror(TestCase):
    def testMirrorReturnsCopies(self) -> None:
        class Box:
            items = mirror("items")

            def __init__(self):
                self._items = [1, [2, 3]]

        box = Box()
        items = box.items
        items[1].append(4)
        self.assertEqual(box.items, [1, [2, 3]])

    def testMirrorIsReadOnly(self) -> None:
        class Box:
            name = mirror("name")
            _name = "box"

        with self.assertRaises(AttributeError):
            Box().name = "other"


class TestOrdinal(TestCase):
    def testWords(self) -> None:
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(3), "third")
        self.assertEqual(ordinal(10), "tenth")

    def testSuffixes(self) -> None:
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(12), "12th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(103), "103rd")


class TestSpecType(TestCase):
    def testDisplayableDefaultsToUnset(self) -> None:
        import sprig.utils

        self.assertIs(SpecType.__displayable__, Unset)
        self.assertIs(sprig.utils.Unset, UnsetType())

    def testTypenameAndRepr(self) -> None:
        class SampleThing(metaclass=SpecType):
            __introspectable__ = ("name",)

            def __init__(self, name):
                self._name = name

        thing = SampleThing("x")
        self.assertEqual(SampleThing.__typename__, "sample-thing")
        self.assertEqual(thing.name, "x")
        self.assertEqual(repr(thing), "sample-thing(name='x')")


class TestModuleGlob(TestCase):
    def testLiteralNamePassesThrough(self) -> None:
        self.assertEqual(mglob("sprig.commands"), ["sprig.commands"])

    def testWildcardExpandsChildren(self) -> None:
        modules = mglob("sprig.*")
        self.assertIn("sprig.commands", modules)
        self.assertIn("sprig.prompts", modules)
        self.assertEqual(modules, sorted(modules))

    def testWildcardPrefixRejected(self) -> None:
        with self.assertRaises(ValueError):
            mglob("*.commands")

    def testEmptyRejected(self) -> None:
        with self.assertRaises(ValueError):
            mglob("   ")


if __name__ == "__main__":
    unittest.main()
