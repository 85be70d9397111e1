"""
Utility helpers tests (sentinel, coalesce, pluralize, edit distance, globbing).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from sprout.utils import Unset, UnsetType, coalesce, rename, mirror, pluralize, levenshtein, closest, mglob


class TestUnset(TestCase):

    def testUnsetIsSingletonAndFalsey(self):
        self.assertIs(UnsetType(), Unset)
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testUnsetCannotBeSubclassed(self):
        with self.assertRaises(TypeError):
            type("Other", (UnsetType,), {})

    def testUnsetUnionWorksInIsinstance(self):
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertTrue(isinstance("x", str | Unset))
        self.assertFalse(isinstance(1, str | Unset))

    def testCoalesceKeepsFalseyValues(self):
        self.assertEqual(coalesce(Unset, "x"), "x")
        self.assertIsNone(coalesce(None, "x"))
        self.assertEqual(coalesce(0, 5), 0)


class TestHelpers(TestCase):

    def testRenameBothForms(self):
        def f():
            pass
        self.assertEqual(rename(f, "g").__name__, "g")

        @rename("h")
        def k():
            pass
        self.assertEqual(k.__name__, "h")
        self.assertEqual(k.__qualname__, "h")

    def testMirrorReturnsCopies(self):
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = [1, 2]

        holder = Holder()
        holder.items.append(3)
        self.assertEqual(holder.items, [1, 2])

    def testPluralize(self):
        self.assertEqual(pluralize("argument"), "arguments")
        self.assertEqual(pluralize("box"), "boxes")
        self.assertEqual(pluralize("dependency"), "dependencies")
        self.assertEqual(pluralize("key"), "keys")
        self.assertEqual(pluralize("FLAG"), "FLAGS")

    def testLevenshtein(self):
        self.assertEqual(levenshtein("deploy", "deploy"), 0)
        self.assertEqual(levenshtein("deploy", "depoly"), 2)
        self.assertEqual(levenshtein("", "abc"), 3)
        self.assertEqual(levenshtein("kitten", "sitting"), 3)

    def testClosestIsCaseInsensitiveAndBounded(self):
        self.assertEqual(closest("STAGIN", ("production", "staging")), "staging")
        self.assertIsNone(closest("zzzzzzzz", ("production", "staging")))
        self.assertEqual(closest("3", (1, 2, 3)), 3)

    def testMglobLiteralAndMissingPackage(self):
        self.assertEqual(mglob("json"), ["json"])
        self.assertEqual(mglob("definitely_not_a_package_xyz.*"), [])

    def testMglobDirectChildren(self):
        names = mglob("json.*")
        self.assertIn("json.decoder", names)
        self.assertNotIn("json", names)
        self.assertEqual(names, sorted(names))


if __name__ == "__main__":
    unittest.main()
