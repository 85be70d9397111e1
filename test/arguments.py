"""
Arguments module unit tests (Argument, Flag).

Scope
- Value types and their derived properties (numeric, array, boolean).
- Metadata sanitation: descr, choices, validate, alias.
- Immutability of declarations.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (Argument, Flag).
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from sprout import Argument, Flag
from sprout.utils import Unset


class TestArgument(TestCase):
    """Unit tests for Argument declarations."""

    def testArgumentDefaults(self):
        argument = Argument()
        self.assertEqual(argument.type, "string")
        self.assertFalse(argument.required)
        self.assertEqual(argument.choices, ())
        self.assertIs(argument.default, Unset)
        self.assertIsNone(argument.descr)
        self.assertIsNone(argument.validate)

    def testArgumentRejectsArrayAndBooleanTypes(self):
        for type in ("boolean", "string[]", "number[]", "integer"):
            with self.subTest(type=type), self.assertRaises(ValueError):
                Argument(type)

    def testArgumentTypeMustBeString(self):
        with self.assertRaises(TypeError):
            Argument(int)

    def testArgumentNumericProperty(self):
        self.assertTrue(Argument("number").numeric)
        self.assertFalse(Argument("string").numeric)
        self.assertFalse(Argument("number").array)

    def testArgumentDescrIsStripped(self):
        self.assertEqual(Argument(descr="  target  ").descr, "target")

    def testArgumentEmptyDescrRejected(self):
        with self.assertRaises(ValueError):
            Argument(descr="   ")

    def testArgumentChoicesNormalizedToTuple(self):
        self.assertEqual(Argument(choices=["a", "b"]).choices, ("a", "b"))

    def testArgumentChoicesRejectStringAndDuplicates(self):
        with self.assertRaises(TypeError):
            Argument(choices="ab")
        with self.assertRaises(ValueError):
            Argument(choices=("a", "a"))
        with self.assertRaises(TypeError):
            Argument(choices=(True, False))

    def testArgumentValidateMustBeCallable(self):
        with self.assertRaises(TypeError):
            Argument(validate="nope")

    def testArgumentNoneDefaultIsKept(self):
        self.assertIsNone(Argument(default=None).default)

    def testArgumentIsReadOnly(self):
        argument = Argument()
        with self.assertRaises(AttributeError):
            argument.required = True  # type: ignore[misc]

    def testArgumentRepr(self):
        self.assertTrue(repr(Argument("number")).startswith("argument(type='number'"))


class TestFlag(TestCase):
    """Unit tests for Flag declarations."""

    def testFlagDefaultsToBoolean(self):
        flag = Flag()
        self.assertTrue(flag.boolean)
        self.assertIsNone(flag.alias)
        self.assertFalse(flag.hidden)

    def testFlagArrayTypes(self):
        self.assertTrue(Flag("string[]").array)
        self.assertTrue(Flag("number[]").array)
        self.assertTrue(Flag("number[]").numeric)

    def testFlagAliasMustBeSingleCharacter(self):
        self.assertEqual(Flag(alias="f").alias, "f")
        self.assertEqual(Flag(alias="9").alias, "9")
        with self.assertRaises(ValueError):
            Flag(alias="ff")
        with self.assertRaises(ValueError):
            Flag(alias="-")
        with self.assertRaises(TypeError):
            Flag(alias=1)

    def testBooleanFlagCannotHaveChoices(self):
        with self.assertRaises(TypeError):
            Flag("boolean", choices=("a",))

    def testFlagChoicesMayBeNumbers(self):
        self.assertEqual(Flag("number", choices=(1, 2.5)).choices, (1, 2.5))

    def testFlagHiddenIsCoercedToBool(self):
        self.assertIs(Flag(hidden=1).hidden, True)


if __name__ == "__main__":
    unittest.main()
