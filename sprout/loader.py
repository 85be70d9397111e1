"""
Sprout plugin loader: plugin sources → Plugin objects.

Sources
- A Plugin passes through unchanged (the registry validates it later).
- A string is handed to a resolver, a callable mapping a name to an object.

Resolvers
- ImportResolver (production):
  • "package.module"            → the module's `plugin` attribute
  • "package.module:attribute"  → that attribute
  • "/path/to/plugin" or "x.py" → a package directory or a source file,
    loaded with importlib.util.spec_from_file_location
  A module without the attribute resolves to the module itself, which the
  loader then rejects with export guidance.
- StaticResolver (tests and frozen builds): a fixed name → object mapping.

Failures
- A resolver error becomes PluginLoadError with install guidance; the
  original exception is chained as __cause__.
- load_plugins() attempts every source. One failure is re-raised as-is;
  several are combined into PluginLoadError(plugin="multiple").
"""
import importlib
import importlib.util
import logging
import os
import re
import sys
from pathlib import Path

from .faults import PluginLoadError
from .plugins import Plugin

logger = logging.getLogger(__name__)


class ImportResolver:
    """
    Resolve plugin references through the import system.
    """

    def __init__(self, attribute="plugin"):
        if not isinstance(attribute, str) or not attribute.isidentifier():
            raise TypeError("ImportResolver() attribute must be an identifier")
        self.attribute = attribute

    def __repr__(self):
        return f"import-resolver(attribute={self.attribute!r})"

    def __call__(self, name, /):
        reference, _, attribute = name.partition(":") if not os.path.isabs(name) else (name, "", "")
        if os.sep in reference or reference.endswith(".py") or os.path.isdir(reference):
            module = self._load_path(Path(reference))
        else:
            module = importlib.import_module(reference)
        return getattr(module, attribute or self.attribute, module)

    @staticmethod
    def _load_path(path):
        """
        Execute a plugin package directory or a single source file as a module.
        """
        if path.is_dir():
            location, search = path / "__init__.py", [str(path)]
        else:
            location, search = path, None
        if not location.is_file():
            raise ModuleNotFoundError(f"no importable plugin at {str(path)!r}")

        name = "sprout_plugin_" + re.sub(r"\W", "_", path.stem if location is path else path.name)
        if name in sys.modules:
            return sys.modules[name]

        spec = importlib.util.spec_from_file_location(name, location, submodule_search_locations=search)
        if spec is None or spec.loader is None:
            raise ImportError(f"cannot build an import spec for {str(path)!r}")
        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            del sys.modules[name]
            raise
        return module


class StaticResolver:
    """
    Resolve plugin references from a fixed mapping.
    """

    def __init__(self, mapping=(), /, **entries):
        self._entries = dict(mapping, **entries)

    def __repr__(self):
        return f"static-resolver({', '.join(self._entries)})"

    def __call__(self, name, /):
        try:
            return self._entries[name]
        except KeyError:
            raise ModuleNotFoundError(f"No plugin named {name!r}") from None


def load_plugin(source, resolver=None, /):
    """
    Turn one plugin source into a Plugin.

    Raises
    - PluginLoadError when the source has the wrong type, cannot be resolved,
      or resolves to something that is not a Plugin.
    """
    if isinstance(source, Plugin):
        return source
    if not isinstance(source, str):
        raise PluginLoadError(
            f"Invalid plugin source: expected a Plugin or a string, got {type(source).__name__}",
            plugin="unknown",
            hint="pass a Plugin(...) object or an importable reference such as 'my_plugin'",
        )

    resolver = resolver if resolver is not None else ImportResolver()
    try:
        object = resolver(source)
    except Exception as error:
        raise PluginLoadError(
            f'Plugin "{source}" not found or failed to load.',
            plugin=source,
            hint=f"Make sure it's installed: pip install {source}\nOriginal error: {error}",
        ) from error

    if not isinstance(object, Plugin):
        raise PluginLoadError(
            f'Plugin "{source}" does not export a valid plugin.',
            plugin=source,
            hint="expose a sprout.Plugin(...) as the module's `plugin` attribute, "
                 "or reference it explicitly as 'module:attribute'",
        )

    logger.debug("loaded plugin %s@%s from %r", object.name, object.version, source)
    return object


def load_plugins(sources, resolver=None, /):
    """
    Load every source, collecting failures instead of stopping at the first.

    Returns
    - list[Plugin] in source order when everything loads.

    Raises
    - the single PluginLoadError when exactly one source fails;
    - PluginLoadError(plugin="multiple") joining every message otherwise.
    """
    plugins = []
    errors = []
    for source in sources:
        try:
            plugins.append(load_plugin(source, resolver))
        except PluginLoadError as error:
            errors.append(error)

    if len(errors) == 1:
        raise errors[0]
    if errors:
        raise PluginLoadError(
            f"Failed to load {len(errors)} plugins:\n\n" + "\n\n".join(error.message for error in errors),
            plugin="multiple",
            errors=tuple(errors),
        )
    return plugins


__all__ = (
    "ImportResolver",
    "StaticResolver",
    "load_plugin",
    "load_plugins",
)
