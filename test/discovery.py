"""
Discovery tests (command/extension packages and plugin directories).

Each test writes a throwaway application package into a temporary
directory, puts it on sys.path and removes every imported module after.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import importlib
import os
import sys
import tempfile
import textwrap
import unittest
from unittest import TestCase

from sprout import discover, scan_plugin_dir
from sprout.faults import DiscoveryWarning

FILES = {
    "__init__.py": "",
    "commands/__init__.py": "",
    "commands/deploy.py": """
        from sprout import command

        @command(descr="Deploy")
        def deploy(context):
            pass
    """,
    "commands/_helpers.py": "VALUE = 1\n",
    "commands/empty.py": "VALUE = 1\n",
    "commands/db/__init__.py": """
        from sprout import Command

        db = Command("db", descr="Database tools", subcommands=())
    """,
    "commands/db/migrate.py": """
        from sprout import command

        @command
        def migrate(context):
            pass
    """,
    "commands/user_admin/__init__.py": "",
    "commands/user_admin/add.py": """
        from sprout import Command, command

        @command
        def add(context):
            pass

        @command
        def child(context):
            pass

        parent = Command("bulk-add", subcommands=(child,))
    """,
    "extensions/__init__.py": "",
    "extensions/database.py": """
        from sprout import Extension

        database = Extension("database", lambda context: None)
        _private = Extension("private", lambda context: None)
    """,
    "extensions/nothing.py": "",
}


class TestDiscover(TestCase):

    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()
        self.package = "sprout_discovery_app"
        root = os.path.join(self.directory.name, self.package)
        for path, content in FILES.items():
            os.makedirs(os.path.dirname(os.path.join(root, path)), exist_ok=True)
            with open(os.path.join(root, path), "w") as file:
                file.write(textwrap.dedent(content))
        sys.path.insert(0, self.directory.name)
        importlib.invalidate_caches()

    def tearDown(self):
        sys.path.remove(self.directory.name)
        for name in [name for name in sys.modules if name.startswith(self.package)]:
            del sys.modules[name]
        self.directory.cleanup()

    def discover(self):
        with self.assertWarns(DiscoveryWarning) as context:
            result = discover(self.package)
        return result, context

    def testCommandsAreDiscoveredInModuleOrder(self):
        result, _ = self.discover()
        self.assertEqual([command.name for command in result.commands], ["db", "deploy", "user-admin"])

    def testPackageInitDefinesParent(self):
        result, _ = self.discover()
        db = result.commands[0]
        self.assertEqual(db.descr, "Database tools")
        self.assertEqual([command.name for command in db.subcommands], ["migrate"])

    def testPackageWithoutParentBecomesContainer(self):
        result, _ = self.discover()
        container = result.commands[2]
        self.assertIsNone(container.handler)
        self.assertEqual([command.name for command in container.subcommands], ["add", "bulk-add"])

    def testExtensionsSkipPrivateMembers(self):
        result, _ = self.discover()
        self.assertEqual([extension.name for extension in result.extensions], ["database"])

    def testEmptyModulesWarn(self):
        _, context = self.discover()
        messages = [str(warning.message) for warning in context.warnings]
        self.assertTrue(any("commands.empty" in message for message in messages))

    def testMissingPackageRaises(self):
        with self.assertRaises(ImportError):
            discover("sprout_no_such_application")

    def testMissingSubpackagesYieldNothing(self):
        with tempfile.TemporaryDirectory() as directory:
            os.mkdir(os.path.join(directory, "sprout_bare_app"))
            open(os.path.join(directory, "sprout_bare_app", "__init__.py"), "w").close()
            sys.path.insert(0, directory)
            importlib.invalidate_caches()
            try:
                self.assertEqual(discover("sprout_bare_app"), ([], []))
            finally:
                sys.path.remove(directory)
                sys.modules.pop("sprout_bare_app", None)


class TestScanPluginDir(TestCase):

    def testListsSortedDirectories(self):
        with tempfile.TemporaryDirectory() as directory:
            for name in ("sprout-plugin-b", "sprout-plugin-a", "other", ".hidden", "__pycache__"):
                os.mkdir(os.path.join(directory, name))
            open(os.path.join(directory, "file.txt"), "w").close()

            found = [os.path.basename(path) for path in scan_plugin_dir(directory)]
            self.assertEqual(found, ["other", "sprout-plugin-a", "sprout-plugin-b"])

            found = [os.path.basename(path) for path in scan_plugin_dir(directory, "sprout-plugin-*")]
            self.assertEqual(found, ["sprout-plugin-a", "sprout-plugin-b"])

    @unittest.skipUnless(hasattr(os, "symlink") and os.name == "posix", "symlinks required")
    def testFollowsDirectorySymlinks(self):
        with tempfile.TemporaryDirectory() as target, tempfile.TemporaryDirectory() as directory:
            os.symlink(target, os.path.join(directory, "linked"))
            found = [os.path.basename(path) for path in scan_plugin_dir(directory)]
            self.assertEqual(found, ["linked"])

    def testMissingDirectory(self):
        self.assertEqual(scan_plugin_dir("/definitely/not/here"), [])


if __name__ == "__main__":
    unittest.main()
