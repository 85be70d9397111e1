"""
Plugin system tests (validation, registry, loader).

Scope
- Plugin declaration checks and semver handling.
- Framework and peer compatibility.
- Registry deduplication, conflicts and aggregated validation.
- Loader sources, resolvers and aggregated failures.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import os
import sys
import tempfile
import unittest
import warnings
from unittest import TestCase

from sprout import (
    Command,
    Extension,
    Plugin,
    PluginRegistry,
    ImportResolver,
    StaticResolver,
    load_plugin,
    load_plugins,
    validate_plugin,
    validate_framework_version,
    validate_peers,
    peer_violations,
)
from sprout.faults import (
    PluginValidationError,
    PluginLoadError,
    PluginDependencyError,
    PluginVersionWarning,
)


def noop(context):
    pass


class TestPlugin(TestCase):

    def testDeclaration(self):
        plugin = Plugin("deploy-tools", "1.4.0", commands=[Command("ship", noop)], peers={"auth": "^2.0.0"})
        self.assertEqual(plugin.name, "deploy-tools")
        self.assertEqual(plugin.version, "1.4.0")
        self.assertEqual(plugin.peers, {"auth": "^2.0.0"})
        self.assertEqual(len(plugin.commands), 1)
        self.assertEqual(plugin.extensions, ())
        self.assertIsNone(plugin.framework)

    def testInvalidNames(self):
        for name in ("", "Deploy", "-x", "a b"):
            with self.subTest(name=name), self.assertRaises(PluginValidationError):
                Plugin(name, "1.0.0")

    def testInvalidVersion(self):
        for version in ("1.0", "latest", "v1..0", 1):
            with self.subTest(version=version), self.assertRaises(PluginValidationError) as context:
                Plugin("tools", version)
            self.assertEqual(context.exception.plugin, "tools")

    def testPrereleaseVersionIsValid(self):
        self.assertEqual(Plugin("tools", "2.0.0-beta.1").version, "2.0.0-beta.1")

    def testCommandsAndExtensionsMustBeDeclarations(self):
        with self.assertRaises(PluginValidationError):
            Plugin("tools", "1.0.0", commands=[noop])
        with self.assertRaises(PluginValidationError):
            Plugin("tools", "1.0.0", extensions=[Command("x", noop)])
        with self.assertRaises(PluginValidationError):
            Plugin("tools", "1.0.0", peers={"auth": 2})

    def testValidatePluginRejectsOtherObjects(self):
        with self.assertRaises(PluginValidationError):
            validate_plugin({"name": "tools", "version": "1.0.0"})
        validate_plugin(Plugin("tools", "1.0.0"))


class TestCompatibility(TestCase):

    def testFrameworkRange(self):
        plugin = Plugin("tools", "1.0.0", framework=">=1.2.0 <2.0.0")
        validate_framework_version(plugin, "1.5.0")
        with self.assertRaises(PluginValidationError):
            validate_framework_version(plugin, "2.0.0")
        validate_framework_version(Plugin("free", "1.0.0"), "0.0.0")

    def testPeers(self):
        auth = Plugin("auth", "2.3.0")
        plugin = Plugin("tools", "1.0.0", peers={"auth": "^2.0.0"})
        validate_peers(plugin, {"auth": auth})

        with self.assertRaises(PluginDependencyError) as context:
            validate_peers(plugin, {})
        self.assertEqual(context.exception.dependency, "auth")
        self.assertIn("not installed", context.exception.message)

        with self.assertRaises(PluginDependencyError) as context:
            validate_peers(plugin, {"auth": Plugin("auth", "3.0.0")})
        self.assertIn("version 3.0.0 is installed", context.exception.message)


class TestRegistry(TestCase):

    def testRegisterAndQuery(self):
        registry = PluginRegistry()
        cache = Extension("cache", noop)
        registry.register(Plugin("tools", "1.0.0", commands=[Command("ship", noop, aliases=("s",))], extensions=[cache]))
        self.assertEqual(len(registry), 1)
        self.assertTrue(registry.has("tools"))
        self.assertIn("tools", registry)
        self.assertEqual(registry.get("tools").version, "1.0.0")
        self.assertIsNone(registry.get("other"))
        self.assertEqual([command.name for command in registry.commands()], ["ship"])
        self.assertEqual(registry.extensions(), [cache])
        self.assertEqual(registry.find_plugin_by_command("s"), "tools")
        self.assertEqual(registry.find_plugin_by_extension("cache"), "tools")
        self.assertIsNone(registry.find_plugin_by_command("nope"))

    def testDuplicateNameIsNoOpWithVersionWarning(self):
        registry = PluginRegistry()
        registry.register(Plugin("tools", "1.0.0"))
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            registry.register(Plugin("tools", "1.0.0"))
        with self.assertWarns(PluginVersionWarning):
            registry.register(Plugin("tools", "2.0.0"))
        self.assertEqual(registry.get("tools").version, "1.0.0")
        self.assertEqual(len(registry), 1)

    def testCommandConflictsIncludeAliases(self):
        registry = PluginRegistry()
        registry.register(Plugin("a", "1.0.0", commands=[Command("ship", noop, aliases=("s",))]))
        with self.assertRaises(PluginValidationError) as context:
            registry.register(Plugin("b", "1.0.0", commands=[Command("send", noop, aliases=("s",))]))
        self.assertEqual(
            context.exception.message,
            'Command name conflict: Both "a" and "b" define a command named "s".',
        )

    def testExtensionConflicts(self):
        registry = PluginRegistry()
        registry.register(Plugin("a", "1.0.0", extensions=[Extension("cache", noop)]))
        with self.assertRaises(PluginValidationError):
            registry.register(Plugin("b", "1.0.0", extensions=[Extension("cache", noop)]))

    def testValidateAllAggregates(self):
        registry = PluginRegistry()
        registry.register(Plugin("a", "1.0.0", peers={"x": "*"}))
        with self.assertRaises(PluginDependencyError) as context:
            registry.validate_all()
        self.assertEqual(context.exception.dependency, "x")

        registry.register(Plugin("b", "1.0.0", peers={"y": "*"}))
        with self.assertRaises(PluginDependencyError) as context:
            registry.validate_all()
        self.assertEqual(context.exception.plugin, "multiple")
        self.assertTrue(context.exception.message.startswith("Multiple plugin validation errors:"))
        self.assertEqual(len(context.exception.options["errors"]), 2)

    def testValidateAllReportsEveryPeerOfOnePlugin(self):
        registry = PluginRegistry()
        registry.register(Plugin("beta", "2.0.0"))
        registry.register(Plugin("alpha", "1.0.0", peers={"beta": "^1.0.0", "gamma": "^1.0.0"}))
        with self.assertRaises(PluginDependencyError) as context:
            registry.validate_all()
        self.assertEqual(context.exception.plugin, "multiple")
        self.assertEqual(
            [error.dependency for error in context.exception.options["errors"]],
            ["beta", "gamma"],
        )
        self.assertIn('requires peer plugin "beta" ^1.0.0, but version 2.0.0 is installed.', context.exception.message)
        self.assertIn('requires peer plugin "gamma" (^1.0.0), but it is not installed.', context.exception.message)

    def testPeerViolationsListsEveryPeer(self):
        plugin = Plugin("alpha", "1.0.0", peers={"beta": "^1.0.0", "gamma": "^1.0.0"})
        self.assertEqual([error.dependency for error in peer_violations(plugin, {})], ["beta", "gamma"])
        self.assertEqual(list(peer_violations(plugin, {"beta": Plugin("beta", "1.2.0"), "gamma": Plugin("gamma", "1.0.0")})), [])


class TestLoader(TestCase):

    def testPluginPassesThrough(self):
        plugin = Plugin("tools", "1.0.0")
        self.assertIs(load_plugin(plugin), plugin)

    def testStaticResolver(self):
        plugin = Plugin("tools", "1.0.0")
        self.assertIs(load_plugin("tools", StaticResolver(tools=plugin)), plugin)

    def testUnresolvableSource(self):
        with self.assertRaises(PluginLoadError) as context:
            load_plugin("ghost", StaticResolver())
        self.assertEqual(context.exception.message, 'Plugin "ghost" not found or failed to load.')
        self.assertIn("pip install ghost", context.exception.hint)
        self.assertIsInstance(context.exception.__cause__, ModuleNotFoundError)

    def testNonPluginExport(self):
        with self.assertRaises(PluginLoadError) as context:
            load_plugin("json", ImportResolver())
        self.assertIn("does not export a valid plugin", context.exception.message)

    def testWrongSourceType(self):
        with self.assertRaises(PluginLoadError):
            load_plugin(42)

    def testLoadPluginsAggregates(self):
        resolver = StaticResolver(tools=Plugin("tools", "1.0.0"))
        self.assertEqual(len(load_plugins(["tools"], resolver)), 1)
        with self.assertRaises(PluginLoadError) as context:
            load_plugins(["ghost"], resolver)
        self.assertEqual(context.exception.plugin, "ghost")
        with self.assertRaises(PluginLoadError) as context:
            load_plugins(["ghost", "phantom", "tools"], resolver)
        self.assertEqual(context.exception.plugin, "multiple")
        self.assertIn("Failed to load 2 plugins", context.exception.message)

    def testImportResolverLoadsDirectories(self):
        with tempfile.TemporaryDirectory() as directory:
            root = os.path.join(directory, "demo-plugin")
            os.mkdir(root)
            with open(os.path.join(root, "__init__.py"), "w") as file:
                file.write('from sprout import Plugin\nplugin = Plugin("demo", "0.1.0")\n')
            try:
                plugin = load_plugin(root)
                self.assertEqual(plugin.name, "demo")
            finally:
                sys.modules.pop("sprout_plugin_demo_plugin", None)


if __name__ == "__main__":
    unittest.main()
