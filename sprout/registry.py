"""
Sprout plugin registry: the aggregated set of loaded plugins.

Behavior
- register(plugin) validates first, then:
  • a name already registered is a no-op (PluginVersionWarning when the
    versions differ; the first loaded version stays);
  • every command name and alias of the incoming plugin is checked against
    every aggregated command name and alias, in both directions;
  • every extension name is checked against the aggregated extensions;
  • conflicts raise PluginValidationError naming both plugins.
- validate_all() checks peers across every registered plugin and reports all
  failures together (one failure is re-raised as-is).

The registry is mutated only while the runtime initializes; afterwards it is
only read.
"""
import logging
import warnings

from .faults import PluginValidationError, PluginDependencyError, PluginVersionWarning
from .plugins import peer_violations, validate_plugin

logger = logging.getLogger(__name__)


class PluginRegistry:
    """
    Plugins keyed by name, in registration order.
    """

    def __init__(self):
        self._plugins = {}

    def __len__(self):
        return len(self._plugins)

    def __contains__(self, name):
        return name in self._plugins

    def __iter__(self):
        return iter(self._plugins.values())

    def __repr__(self):
        return f"plugin-registry({', '.join(self._plugins)})"

    def register(self, plugin, /):
        validate_plugin(plugin)

        if (existing := self._plugins.get(plugin.name)) is not None:
            if existing.version != plugin.version:
                warnings.warn(PluginVersionWarning(
                    f'Plugin "{plugin.name}" is loaded twice with different versions '
                    f"({existing.version} and {plugin.version}). Using the first loaded version.",
                    plugin=plugin.name,
                ), stacklevel=2)
            logger.debug("plugin %s already registered, skipping", plugin.name)
            return

        owners = {}
        for owner in self._plugins.values():
            for command in owner.commands:
                for name in command.names:
                    owners[name] = owner.name
        for command in plugin.commands:
            for name in command.names:
                if name in owners:
                    raise PluginValidationError(
                        f'Command name conflict: Both "{owners[name]}" and "{plugin.name}" '
                        f'define a command named "{name}".',
                        plugin=plugin.name,
                        hint="rename one of the commands or drop the conflicting alias",
                    )

        extensions = {
            extension.name: owner.name for owner in self._plugins.values() for extension in owner.extensions
        }
        for extension in plugin.extensions:
            if extension.name in extensions:
                raise PluginValidationError(
                    f'Extension name conflict: Both "{extensions[extension.name]}" and "{plugin.name}" '
                    f'define an extension named "{extension.name}".',
                    plugin=plugin.name,
                    hint="rename one of the extensions",
                )

        self._plugins[plugin.name] = plugin
        logger.debug("registered plugin %s@%s", plugin.name, plugin.version)

    def get(self, name, /):
        return self._plugins.get(name)

    def has(self, name, /):
        return name in self._plugins

    def all(self):
        return list(self._plugins.values())

    def commands(self):
        return [command for plugin in self._plugins.values() for command in plugin.commands]

    def extensions(self):
        return [extension for plugin in self._plugins.values() for extension in plugin.extensions]

    def find_plugin_by_command(self, name, /):
        """
        Name of the plugin providing a command (by name or alias), or None.
        """
        for plugin in self._plugins.values():
            if any(name in command.names for command in plugin.commands):
                return plugin.name
        return None

    def find_plugin_by_extension(self, name, /):
        for plugin in self._plugins.values():
            if any(extension.name == name for extension in plugin.extensions):
                return plugin.name
        return None

    def validate_all(self):
        """
        Check peers of every registered plugin.

        Raises
        - the single PluginDependencyError when exactly one check fails;
        - a combined PluginDependencyError ("Multiple plugin validation
          errors: ...") when several fail.
        """
        errors = [error for plugin in self._plugins.values() for error in peer_violations(plugin, self._plugins)]

        if len(errors) == 1:
            raise errors[0]
        if errors:
            raise PluginDependencyError(
                "Multiple plugin validation errors:\n\n" + "\n\n".join(error.message for error in errors),
                plugin="multiple",
                dependency="multiple",
                errors=tuple(errors),
            )


__all__ = (
    "PluginRegistry",
)
