"""
Sprout plugins: named, versioned bundles of commands and extensions.

Overview
- Plugin: name (slug), version (semver), optional framework range (the sprout
  versions the plugin supports), optional peers (plugin name → semver range),
  commands, extensions, descr.
- validate_plugin(object): shape check usable on anything a resolver returned.
- validate_framework_version(plugin, version): framework range check.
- validate_peers(plugin, registered): peer presence and range check.

Versions and ranges follow npm semantics (`^1.2.0`, `~1.2`, `>=1 <2`, ...)
through node-semver.

Example
    Plugin(
        "deploy-tools",
        "1.4.0",
        framework=">=0.1.0",
        peers={"auth": "^2.0.0"},
        commands=[deploy],
        extensions=[cloud],
    )
"""
import logging
from collections.abc import Iterable, Mapping

import nodesemver

from .commands import NAME_PATTERN, Command
from .extensions import Extension
from .faults import PluginValidationError, PluginDependencyError
from .utils import *

logger = logging.getLogger(__name__)

_GUIDANCE = 'declare plugins with sprout.Plugin("my-plugin", "1.0.0", commands=[...], extensions=[...])'


def _process_metadata(cls, metadata):
    """
    Validate and normalize plugin metadata (mutates metadata in place).

    Raises
    - PluginValidationError with guidance on the expected shape. The plugin
      is named in the error when the name itself is usable.
    """
    name = metadata["name"]
    label = name if isinstance(name, str) and name else "unknown"

    def fail(message):
        return PluginValidationError(message, plugin=label, hint=_GUIDANCE)

    if not isinstance(name, str) or not name.strip():
        raise fail(f"{cls.__typename__} 'name' must be a non-empty string")
    if not NAME_PATTERN.fullmatch(name):
        raise fail(
            f'{cls.__typename__} name "{name}" is invalid: use lowercase letters, '
            f"digits and hyphens, starting with a letter or digit"
        )

    if not isinstance(version := metadata["version"], str) or not nodesemver.valid(version, False):
        raise fail(f'{cls.__typename__} "{name}" has an invalid version {version!r}: expected semver such as "1.0.0"')

    if not isinstance(framework := metadata["framework"], str | Unset | None):
        raise fail(f'{cls.__typename__} "{name}" framework range must be a string')
    metadata["framework"] = coalesce(framework) or None

    if not isinstance(peers := coalesce(metadata["peers"], {}), Mapping):
        raise fail(f'{cls.__typename__} "{name}" peers must be a mapping of plugin names to version ranges')
    for peer, constraint in peers.items():
        if not isinstance(peer, str) or not isinstance(constraint, str):
            raise fail(f'{cls.__typename__} "{name}" peers must be a mapping of plugin names to version ranges')
    metadata["peers"] = dict(peers)

    for field, kind in (("commands", Command), ("extensions", Extension)):
        if isinstance(items := metadata[field], str | Mapping) or not isinstance(items, Iterable):
            raise fail(f'{cls.__typename__} "{name}" {field} must be a list')
        items = tuple(items)
        if not all(isinstance(item, kind) for item in items):
            raise fail(f'{cls.__typename__} "{name}" {field} must contain only {kind.__typename__} declarations')
        metadata[field] = items

    if not isinstance(descr := metadata["descr"], str | Unset | None):
        raise fail(f'{cls.__typename__} "{name}" descr must be a string')
    metadata["descr"] = coalesce(descr)


class Plugin(metaclass=DeclarationType):
    """
    Immutable plugin declaration (PluginConfig).
    """

    __introspectable__ = (
        "name",
        "version",
        "framework",
        "peers",
        "commands",
        "extensions",
        "descr",
    )

    def __new__(
            cls,
            name,
            version,
            /,
            *,
            commands=(),
            extensions=(),
            peers=Unset,
            framework=Unset,
            descr=Unset,
    ):
        metadata = {
            "name": name,
            "version": version,
            "framework": framework,
            "peers": peers,
            "commands": commands,
            "extensions": extensions,
            "descr": descr,
        }
        _process_metadata(cls, metadata)

        self = super().__new__(cls)
        for field, object in metadata.items():
            setattr(self, "_" + field, object)
        return self


def validate_plugin(plugin, /):
    """
    Check that an object is a well-formed plugin.

    Anything a resolver hands back goes through here before registration, so
    the check does not trust the object's type.

    Raises
    - PluginValidationError on any shape violation.
    """
    if not isinstance(plugin, Plugin):
        raise PluginValidationError(
            f"Invalid plugin: expected a Plugin, got {type(plugin).__name__}",
            plugin=getattr(plugin, "name", None) if isinstance(getattr(plugin, "name", None), str) else "unknown",
            hint=_GUIDANCE,
        )
    _process_metadata(Plugin, {field: getattr(plugin, field) for field in Plugin.__introspectable__})


def validate_framework_version(plugin, version, /):
    """
    Ensure the running sprout version satisfies the plugin's framework range.

    Plugins without a framework range are compatible with every version.
    """
    if not plugin.framework:
        return
    if not nodesemver.satisfies(version, plugin.framework, False):
        raise PluginValidationError(
            f'Plugin "{plugin.name}" requires sprout {plugin.framework}, but the running version is {version}.',
            plugin=plugin.name,
            hint="update sprout or install a plugin version that supports it",
        )


def peer_violations(plugin, registered, /):
    """
    Yield a PluginDependencyError for every declared peer that is missing or
    out of range, in declaration order.

    Parameters
    - plugin: the plugin whose peers are checked.
    - registered: Mapping[str, Plugin] of everything registered so far.
    """
    for name, constraint in plugin.peers.items():
        if (peer := registered.get(name)) is None:
            yield PluginDependencyError(
                f'Plugin "{plugin.name}" requires peer plugin "{name}" ({constraint}), but it is not installed.',
                plugin=plugin.name,
                dependency=name,
                hint=f"install it with: pip install {name}",
            )
        elif not nodesemver.satisfies(peer.version, constraint, False):
            yield PluginDependencyError(
                f'Plugin "{plugin.name}" requires peer plugin "{name}" {constraint}, '
                f"but version {peer.version} is installed.",
                plugin=plugin.name,
                dependency=name,
                hint=f'upgrade "{name}" to a version matching {constraint}',
            )
        else:
            logger.debug("peer %s@%s satisfies %s for %s", name, peer.version, constraint, plugin.name)


def validate_peers(plugin, registered, /):
    """
    Ensure every declared peer is registered within its range.

    Raises
    - PluginDependencyError for the first missing or incompatible peer.
    """
    for error in peer_violations(plugin, registered):
        raise error


__all__ = (
    "Plugin",
    "validate_plugin",
    "validate_framework_version",
    "validate_peers",
    "peer_violations",
)
