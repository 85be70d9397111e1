"""
Extensions tests (declaration and topological ordering).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from sprout import Extension, extension, toposort
from sprout.faults import ExtensionCycleError, PluginValidationError


def setup(context):
    pass


def names(extensions):
    return [extension.name for extension in extensions]


class TestExtension(TestCase):

    def testDeclaration(self):
        ext = Extension("cache", setup, dependencies=("db", "db"), descr="Cache")
        self.assertEqual(ext.name, "cache")
        self.assertIs(ext.setup, setup)
        self.assertIsNone(ext.teardown)
        self.assertEqual(ext.dependencies, ("db",))
        self.assertEqual(ext.descr, "Cache")

    def testInvalidDeclarations(self):
        with self.assertRaises(ValueError):
            Extension("  ", setup)
        with self.assertRaises(TypeError):
            Extension("cache", "setup")
        with self.assertRaises(TypeError):
            Extension("cache", setup, teardown=1)
        with self.assertRaises(TypeError):
            Extension("cache", setup, dependencies="db")

    def testDecorator(self):
        @extension(dependencies=("database",))
        async def http_client(context):
            pass

        self.assertEqual(http_client.name, "http-client")
        self.assertEqual(http_client.dependencies, ("database",))


class TestToposort(TestCase):

    def testEmpty(self):
        self.assertEqual(toposort([]), [])

    def testDependenciesComeFirst(self):
        database = Extension("database", setup)
        cache = Extension("cache", setup, dependencies=("database",))
        api = Extension("api", setup, dependencies=("cache", "database"))
        self.assertEqual(names(toposort([api, cache, database])), ["database", "cache", "api"])

    def testTiesKeepDeclarationOrder(self):
        extensions = [Extension(name, setup) for name in ("c", "a", "b")]
        self.assertEqual(names(toposort(extensions)), ["c", "a", "b"])

    def testMissingDependenciesAreIgnored(self):
        self.assertEqual(names(toposort([Extension("a", setup, dependencies=("ghost",))])), ["a"])

    def testCycleNamesEveryStuckExtension(self):
        extensions = [
            Extension("free", setup),
            Extension("a", setup, dependencies=("b",)),
            Extension("b", setup, dependencies=("a",)),
        ]
        with self.assertRaises(ExtensionCycleError) as context:
            toposort(extensions)
        self.assertEqual(context.exception.extensions, ("a", "b"))
        self.assertEqual(context.exception.message, "Circular dependency detected among extensions: a, b")

    def testSelfDependencyIsACycle(self):
        with self.assertRaises(ExtensionCycleError):
            toposort([Extension("a", setup, dependencies=("a",))])

    def testDuplicateNamesRejected(self):
        with self.assertRaises(PluginValidationError):
            toposort([Extension("a", setup), Extension("a", setup)])


if __name__ == "__main__":
    unittest.main()
