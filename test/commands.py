"""
Commands module unit tests (declaration rules and the command factory).

Scope
- Name, alias and mapping validation.
- Sibling uniqueness, flag alias uniqueness.
- EmptyCommandWarning for commands that can never do anything.
- @command naming and metadata forwarding.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from sprout import Command, command, Argument, Flag
from sprout.faults import EmptyCommandWarning


def noop(context):
    pass


class TestCommandDeclaration(TestCase):

    def testMinimalCommand(self):
        cmd = Command("deploy", noop)
        self.assertEqual(cmd.name, "deploy")
        self.assertIs(cmd.handler, noop)
        self.assertEqual(cmd.aliases, ())
        self.assertEqual(cmd.args, {})
        self.assertEqual(cmd.flags, {})
        self.assertEqual(cmd.subcommands, ())
        self.assertEqual(cmd.names, ("deploy",))

    def testInvalidNamesRejected(self):
        for name in ("Deploy", "-deploy", "de ploy", "", "de_ploy"):
            with self.subTest(name=name), self.assertRaises(ValueError):
                Command(name, noop)
        with self.assertRaises(TypeError):
            Command(3, noop)

    def testAliasesMustBeUniqueAndDistinct(self):
        with self.assertRaises(ValueError):
            Command("deploy", noop, aliases=("d", "d"))
        with self.assertRaises(ValueError):
            Command("deploy", noop, aliases=("deploy",))
        with self.assertRaises(TypeError):
            Command("deploy", noop, aliases="d")
        self.assertEqual(Command("deploy", noop, aliases=["d"]).names, ("deploy", "d"))

    def testArgsAndFlagsMustHoldDeclarations(self):
        with self.assertRaises(TypeError):
            Command("deploy", noop, args={"env": "string"})
        with self.assertRaises(TypeError):
            Command("deploy", noop, flags={"force": True})
        with self.assertRaises(TypeError):
            Command("deploy", noop, args=[Argument()])

    def testArgsKeepDeclarationOrder(self):
        cmd = Command("copy", noop, args={"source": Argument(), "target": Argument()})
        self.assertEqual(list(cmd.args), ["source", "target"])

    def testFlagAliasesMustBeUnique(self):
        with self.assertRaises(ValueError):
            Command("deploy", noop, flags={"force": Flag(alias="f"), "fast": Flag(alias="f")})

    def testSiblingSubcommandsCannotCollide(self):
        up = Command("up", noop, aliases=("u",))
        with self.assertRaises(ValueError):
            Command("db", subcommands=(up, Command("upgrade", noop, aliases=("u",))))
        with self.assertRaises(ValueError):
            Command("db", subcommands=(up, Command("up", noop)))

    def testHandlerAndMiddlewareMustBeCallable(self):
        with self.assertRaises(TypeError):
            Command("deploy", "handler")
        with self.assertRaises(TypeError):
            Command("deploy", noop, middleware=("nope",))

    def testEmptyCommandWarns(self):
        with self.assertWarns(EmptyCommandWarning):
            Command("nothing")

    def testContainerDoesNotWarn(self):
        import warnings
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            Command("db", subcommands=(Command("up", noop),))

    def testDeclarationsAreImmutable(self):
        cmd = Command("deploy", noop, flags={"force": Flag()})
        cmd.flags["other"] = Flag()
        self.assertEqual(list(cmd.flags), ["force"])
        with self.assertRaises(AttributeError):
            cmd.name = "other"  # type: ignore[misc]


class TestCommandFactory(TestCase):

    def testBareDecoratorNamesFromFunction(self):
        @command
        def dry_run(context):
            pass

        self.assertIsInstance(dry_run, Command)
        self.assertEqual(dry_run.name, "dry-run")

    def testDecoratorWithMetadata(self):
        @command(name="db-migrate", descr="Run migrations", aliases=("m",))
        def migrate(context):
            pass

        self.assertEqual(migrate.name, "db-migrate")
        self.assertEqual(migrate.descr, "Run migrations")
        self.assertEqual(migrate.aliases, ("m",))

    def testDirectCall(self):
        cmd = command(noop, descr="Nothing")
        self.assertEqual(cmd.name, "noop")
        self.assertIs(cmd.handler, noop)

    def testDecoratorRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            command()(42)


if __name__ == "__main__":
    unittest.main()
