"""
Sprout command layer: declare commands and their subcommand trees.

What this module provides
- Command: an immutable declaration of one CLI command:
  • name (slug `^[a-z0-9][a-z0-9-]*$`), descr, aliases, hidden
  • args: ordered mapping name → Argument (positional order)
  • flags: mapping long-name → Flag
  • subcommands: nested Commands
  • middleware: per-command middleware, run after the global chain
  • handler: callable(context), sync or async
- command(...): decorator/factory that builds a Command around a handler.

Quick start
    from sprout import command, Argument, Flag

    @command(
        descr="Deploy the application",
        args={"env": Argument(required=True, choices=("staging", "production"))},
        flags={"force": Flag("boolean", alias="f")},
    )
    async def deploy(context):
        context.print.success(f"deploying to {context.args['env']}")

Rules enforced at declaration time
- Aliases are unique and distinct from the command name.
- Flag aliases are unique within the command.
- Sibling subcommands cannot share a name or alias.
- A command with neither handler nor subcommands emits EmptyCommandWarning
  (it is legal, but it can never do anything).
"""
import re
import warnings
from collections.abc import Iterable, Mapping

from .arguments import Argument, Flag
from .faults import EmptyCommandWarning
from .utils import *

NAME_PATTERN = re.compile(r"[a-z0-9][a-z0-9-]*")


def _process_strings(cls, metadata):
    """
    Validate name and descr.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not NAME_PATTERN.fullmatch(name):
        raise ValueError(
            f"{cls.__typename__} 'name' must be lowercase letters, digits and hyphens, "
            f"starting with a letter or digit (got {name!r})"
        )

    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


def _process_aliases(cls, metadata):
    """
    Normalize aliases to a tuple of unique, non-empty strings.
    """
    if isinstance(aliases := metadata["aliases"], str) or not isinstance(aliases, Iterable):
        raise TypeError(f"{cls.__typename__} 'aliases' must be an iterable of strings")
    aliases = tuple(aliases)
    for alias in aliases:
        if not isinstance(alias, str):
            raise TypeError(f"{cls.__typename__} 'aliases' must be an iterable of strings")
        if not alias or alias != alias.strip():
            raise ValueError(f"{cls.__typename__} 'aliases' cannot contain blank names")
        if alias == metadata["name"]:
            raise ValueError(f"{cls.__typename__} alias {alias!r} repeats the command name")
    if len(set(aliases)) != len(aliases):
        raise ValueError(f"{cls.__typename__} 'aliases' cannot contain duplicates")
    metadata["aliases"] = aliases


def _process_arguments(cls, metadata):
    """
    Validate the args/flags mappings and copy them into plain dicts.
    """
    if not isinstance(args := coalesce(metadata["args"], {}), Mapping):
        raise TypeError(f"{cls.__typename__} 'args' must be a mapping of names to arguments")
    for name, argument in args.items():
        if not isinstance(name, str) or not re.fullmatch(r"[A-Za-z_][\w-]*", name):
            raise ValueError(f"{cls.__typename__} argument name {name!r} is not a valid identifier")
        if not isinstance(argument, Argument):
            raise TypeError(f"{cls.__typename__} argument {name!r} must be an Argument")
    metadata["args"] = dict(args)

    if not isinstance(flags := coalesce(metadata["flags"], {}), Mapping):
        raise TypeError(f"{cls.__typename__} 'flags' must be a mapping of names to flags")
    seen = {}
    for name, flag in flags.items():
        if not isinstance(name, str) or not re.fullmatch(r"[A-Za-z0-9][\w-]*", name):
            raise ValueError(f"{cls.__typename__} flag name {name!r} is not a valid identifier")
        if not isinstance(flag, Flag):
            raise TypeError(f"{cls.__typename__} flag {name!r} must be a Flag")
        if flag.alias is not None:
            if flag.alias in seen:
                raise ValueError(
                    f"{cls.__typename__} flags {seen[flag.alias]!r} and {name!r} share the alias {flag.alias!r}"
                )
            seen[flag.alias] = name
    metadata["flags"] = dict(flags)


def _process_children(cls, metadata):
    """
    Validate subcommands, middleware and handler.
    """
    if isinstance(subcommands := metadata["subcommands"], str) or not isinstance(subcommands, Iterable):
        raise TypeError(f"{cls.__typename__} 'subcommands' must be an iterable of commands")
    subcommands = tuple(subcommands)
    owners = {}
    for subcommand in subcommands:
        if not isinstance(subcommand, Command):
            raise TypeError(f"{cls.__typename__} 'subcommands' must contain only commands")
        for name in (subcommand.name, *subcommand.aliases):
            if name in owners:
                raise ValueError(
                    f"{cls.__typename__} subcommands {owners[name]!r} and {subcommand.name!r} both answer to {name!r}"
                )
            owners[name] = subcommand.name
    metadata["subcommands"] = subcommands

    if isinstance(middleware := metadata["middleware"], str) or not isinstance(middleware, Iterable):
        raise TypeError(f"{cls.__typename__} 'middleware' must be an iterable of callables")
    middleware = tuple(middleware)
    if not all(map(callable, middleware)):
        raise TypeError(f"{cls.__typename__} 'middleware' must contain only callables")
    metadata["middleware"] = middleware

    if (handler := metadata["handler"]) is not None and not callable(handler):
        raise TypeError(f"{cls.__typename__} 'handler' must be callable")


class Command(metaclass=DeclarationType):
    """
    Immutable command declaration.

    Properties
    - Every name in __introspectable__ is a read-only attribute; containers
      come back as copies, so a declared command cannot be altered in place.
    """

    __introspectable__ = (
        "name",
        "descr",
        "aliases",
        "hidden",
        "args",
        "flags",
        "subcommands",
        "middleware",
        "handler",
    )
    __displayable__ = (
        "name",
        "descr",
        "aliases",
        "hidden",
        "args",
        "flags",
        "subcommands",
    )

    def __new__(
            cls,
            name,
            /,
            handler=None,
            *,
            descr=Unset,
            aliases=(),
            hidden=False,
            args=Unset,
            flags=Unset,
            subcommands=(),
            middleware=(),
    ):
        """
        Construct a Command.

        Parameters
        - name: str, slug used on the command line.
        - handler: callable(context) | None. Commands without a handler are
          containers; they show their help when invoked directly.
        - descr, aliases, hidden: help/routing metadata.
        - args: Mapping[str, Argument], in positional order.
        - flags: Mapping[str, Flag], keyed by long name.
        - subcommands: Iterable[Command].
        - middleware: Iterable[callable(context, next)].
        """
        metadata = {
            "name": name,
            "handler": handler,
            "descr": descr,
            "aliases": aliases,
            "hidden": bool(hidden),
            "args": args,
            "flags": flags,
            "subcommands": subcommands,
            "middleware": middleware,
        }
        _process_strings(cls, metadata)
        _process_aliases(cls, metadata)
        _process_arguments(cls, metadata)
        _process_children(cls, metadata)

        self = super().__new__(cls)
        for field, object in metadata.items():
            setattr(self, "_" + field, object)

        if self._handler is None and not self._subcommands:
            warnings.warn(EmptyCommandWarning(
                f'command "{self._name}" has no handler and no subcommands',
                hint="pass a handler or at least one subcommand",
            ), stacklevel=2)

        return self

    @property
    def names(self):
        """
        The name followed by every alias.
        """
        return (self._name, *self._aliases)


def command(source=Unset, /, **metadata):
    """
    Create a Command around a handler, or return a decorator that does.

    Invocation modes
    - Bare decorator:
        @command
        def deploy(context): ...
    - Decorator with metadata:
        @command(name="db-migrate", descr="Run migrations")
        def migrate(context): ...
    - Direct:
        deploy = command(handler, descr="...")

    Naming
    - Without an explicit name, the handler's __name__ is used with
      underscores turned into hyphens (`dry_run` → "dry-run").
    """
    @rename("command")
    def wrapper(handler, /):
        if not callable(handler):
            raise TypeError("@command() must be applied to a callable")
        options = dict(metadata)
        name = options.pop("name", Unset)
        if name is Unset:
            name = getattr(handler, "__name__", "").strip("_").replace("_", "-").lower()
        return Command(name, handler, **options)

    return wrapper(source) if source is not Unset else wrapper


__all__ = (
    "Command",
    "command",
)
