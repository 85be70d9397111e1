"""
Sprout auto-discovery: commands and extensions laid out as modules.

Layout (for src="myapp")
    myapp/
      commands/
        deploy.py          → module-level Command members become commands
        db/
          __init__.py      → defines the parent command (optional)
          migrate.py       → subcommands of "db"
      extensions/
        database.py        → module-level Extension members

Rules
- Modules and members whose names start with "_" are skipped.
- A command package without a Command in its __init__ becomes a container
  named after the package (underscores → hyphens).
- Commands that are already subcommands of another member of the same
  module are not promoted to the top level.
- Modules with nothing usable are skipped with DiscoveryWarning.

Plugin directories
- scan_plugin_dir(directory, matching) lists plugin package directories
  (symlinks to directories included), optionally filtered by an fnmatch
  pattern. A missing directory yields nothing.
"""
import fnmatch
import importlib
import inspect
import logging
import warnings
from collections import namedtuple
from pathlib import Path

from .commands import Command
from .extensions import Extension
from .faults import DiscoveryWarning
from .utils import Unset, mglob

logger = logging.getLogger(__name__)

Discovery = namedtuple("Discovery", ("commands", "extensions"))


def _members(module, kind):
    """
    Public module-level members of a given declaration kind, without
    duplicates (first binding wins).
    """
    found = {}
    for name, object in inspect.getmembers(module, lambda object: isinstance(object, kind)):
        if not name.startswith("_"):
            found.setdefault(id(object), object)
    return list(found.values())


def _roots(commands):
    nested = {id(child) for command in commands for child in command.subcommands}
    return [command for command in commands if id(command) not in nested]


def _adopt(parent, children):
    """
    Rebuild an immutable parent command with extra subcommands appended.
    """
    if not children:
        return parent
    return Command(
        parent.name,
        parent.handler,
        descr=parent.descr if parent.descr is not None else Unset,
        aliases=parent.aliases,
        hidden=parent.hidden,
        args=parent.args,
        flags=parent.flags,
        subcommands=(*parent.subcommands, *children),
        middleware=parent.middleware,
    )


def _discover_commands(package):
    commands = []
    for name in mglob(f"{package}.*"):
        if (leaf := name.rpartition(".")[2]).startswith("_"):
            continue
        module = importlib.import_module(name)

        if hasattr(module, "__path__"):
            children = _discover_commands(name)
            if parents := _roots(_members(module, Command)):
                commands.append(_adopt(parents[0], children))
            elif children:
                commands.append(Command(leaf.replace("_", "-"), subcommands=children))
            else:
                warnings.warn(DiscoveryWarning(
                    f'command package "{name}" defines no command and has no subcommands; skipped',
                    hint="define a sprout.Command in its __init__ or add command modules to it",
                ), stacklevel=2)
            continue

        if found := _roots(_members(module, Command)):
            commands.extend(found)
        else:
            warnings.warn(DiscoveryWarning(
                f'module "{name}" defines no command; skipped',
                hint="declare a module-level sprout.Command (or prefix the module with '_')",
            ), stacklevel=2)
    return commands


def discover(package, /):
    """
    Discover commands and extensions below an importable package.

    Parameters
    - package: str, dotted name of the application package.

    Returns
    - Discovery(commands, extensions), both lists in module-name order.

    Raises
    - ImportError (from importing the package itself or one of its modules).
    """
    if not isinstance(package, str) or not package.strip():
        raise TypeError("discover() argument must be a non-empty string")
    importlib.import_module(package := package.strip())

    commands = _discover_commands(f"{package}.commands")

    extensions = []
    for name in mglob(f"{package}.extensions.*"):
        if name.rpartition(".")[2].startswith("_"):
            continue
        if found := _members(importlib.import_module(name), Extension):
            extensions.extend(found)
        else:
            warnings.warn(DiscoveryWarning(
                f'module "{name}" defines no extension; skipped',
                hint="declare a module-level sprout.Extension with a setup function",
            ), stacklevel=2)

    logger.debug("discovered %d commands and %d extensions in %s", len(commands), len(extensions), package)
    return Discovery(commands, extensions)


def scan_plugin_dir(directory, matching=None, /):
    """
    List plugin directories inside a directory, sorted by name.

    Hidden entries and __pycache__ are ignored; `matching` is an fnmatch
    pattern tested against the entry name.
    """
    root = Path(directory).expanduser().resolve()
    try:
        entries = sorted(root.iterdir())
    except FileNotFoundError:
        return []

    found = []
    for entry in entries:
        if entry.name.startswith(".") or entry.name == "__pycache__" or not entry.is_dir():
            continue
        if matching is not None and not fnmatch.fnmatchcase(entry.name, matching):
            continue
        found.append(str(entry))
    return found


__all__ = (
    "Discovery",
    "discover",
    "scan_plugin_dir",
)
