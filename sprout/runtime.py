"""
Sprout runtime: the builder and the per-invocation orchestrator.

Quick start
    from sprout import build, command

    @command(descr="Say hello")
    def hello(context):
        context.print.success("hello")

    runtime = build("greet").command(hello).help().version("1.0.0").create()
    raise SystemExit(runtime.invoke())

Lifecycle of one invocation (Runtime.run)
    Idle → PluginsInitialized → Routed → ContextAssembled →
    ExtensionsSettingUp → Executing → ExtensionsTearingDown → Done
    (Errored from anywhere)

1) Reserved tokens: with .debug(), `--debug`/`--verbose` before `--` are
   stripped and mark the invocation as debug (so does SPROUT_DEBUG=1).
2) Short-circuits: `--version`/`-v` alone, `--help`/`-h`, empty argv.
3) Plugin initialization: lazy, once per runtime, retried after a failure
   from the declared snapshots (see _initialize).
4) Routing; on no match, the default command, else suggestions.
5) Execution: parse → context → on_ready → extension setup (topological,
   awaitables raced against the timeout) → middleware chain → handler →
   teardown in reverse (always).

Errors
- ParseError: rendered to stderr, status 1.
- Anything else: on_error(error, context) when configured (a non-zero int
  it returns becomes the status), otherwise
  rendered; status 1. A failing on_error is reported next to the original.
- CommandWarnings raised during the run are rendered to stderr after it;
  other warnings are re-emitted untouched.
"""
import asyncio
import enum
import importlib.metadata
import inspect
import logging
import os
import shlex
import signal
import sys
import threading
import warnings
from collections.abc import Iterable, Mapping

from rich.console import Console
from rich.logging import RichHandler
from rich.traceback import Traceback

from .commands import Command
from .context import Capabilities, Context, Meta, Parameters
from .discovery import discover, scan_plugin_dir
from .extensions import Extension, toposort
from .faults import CommandException, CommandWarning, ExtensionSetupError, ParseError, PluginValidationError, trigger
from .help import HelpOptions, render_command_help, render_global_help
from .loader import load_plugins
from .parser import parse
from .plugins import validate_framework_version
from .printer import Printer
from .registry import PluginRegistry
from .router import flatten_commands, route, suggest
from .utils import *

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
SHELLS = ("bash", "zsh", "fish", "powershell")


class State(enum.Enum):
    IDLE = "idle"
    PLUGINS_INITIALIZED = "plugins-initialized"
    ROUTED = "routed"
    CONTEXT_ASSEMBLED = "context-assembled"
    EXTENSIONS_SETTING_UP = "extensions-setting-up"
    EXECUTING = "executing"
    EXTENSIONS_TEARING_DOWN = "extensions-tearing-down"
    DONE = "done"
    ERRORED = "errored"


async def _call(function, /, *args):
    """
    Call a sync or async callable and return its (awaited) result.
    """
    result = function(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


def _strip_debug(tokens):
    """
    Drop --debug/--verbose before the `--` boundary; report whether any was found.
    """
    boundary = tokens.index("--") if "--" in tokens else len(tokens)
    head = [token for token in tokens[:boundary] if token not in ("--debug", "--verbose")]
    return head + tokens[boundary:], len(head) != boundary


def _abandoned(name):
    def done(task):
        if not task.cancelled() and (error := task.exception()) is not None:
            logger.debug('abandoned setup of extension "%s" failed later: %s', name, error)
    return done


class _Continuation:
    """
    What a middleware's `next()` returns: the rest of the chain, already
    scheduled as a task.

    `awaited` tells whether the middleware awaited it; the chain awaits it
    otherwise, so a failure further down always reaches the caller.
    """

    def __init__(self, coroutine):
        self.task = asyncio.ensure_future(coroutine)
        self.awaited = False

    def __await__(self):
        self.awaited = True
        return self.task.__await__()


class Builder:
    """
    Fluent configuration for a Runtime. Every method returns the builder.
    """

    def __init__(self, brand, /):
        if not isinstance(brand, str):
            raise TypeError("build() brand must be a string")
        elif not (brand := brand.strip()):
            raise ValueError("build() brand cannot be empty")

        self._config = {
            "brand": brand,
            "version": None,
            "commands": [],
            "default_command": None,
            "middleware": [],
            "extensions": [],
            "plugins": [],
            "plugin_dirs": [],
            "src": None,
            "exclude": frozenset(),
            "capabilities": {},
            "resolver": None,
            "help": HelpOptions(),
            "help_enabled": False,
            "version_enabled": False,
            "completions": False,
            "debug": False,
            "timeout": DEFAULT_TIMEOUT,
            "on_ready": None,
            "on_error": None,
        }

    def __repr__(self):
        return f"builder({self._config['brand']!r})"

    def command(self, command, /):
        if not isinstance(command, Command):
            raise TypeError("command() argument must be a Command")
        self._config["commands"].append(command)
        return self

    def commands(self, commands, /):
        for command in commands:
            self.command(command)
        return self

    def default_command(self, command, /):
        if not isinstance(command, Command):
            raise TypeError("default_command() argument must be a Command")
        self._config["default_command"] = command
        return self

    def middleware(self, function, /):
        if not callable(function):
            raise TypeError("middleware() argument must be callable")
        self._config["middleware"].append(function)
        return self

    def extension(self, extension, /):
        if not isinstance(extension, Extension):
            raise TypeError("extension() argument must be an Extension")
        self._config["extensions"].append(extension)
        return self

    def plugin(self, source, /):
        """
        Add a plugin source (a Plugin or a resolver reference), or a list of them.
        """
        if isinstance(source, list | tuple):
            self._config["plugins"].extend(source)
        else:
            self._config["plugins"].append(source)
        return self

    def plugins(self, directory, /, matching=None):
        """
        Load every plugin directory found inside `directory`, optionally
        filtered by an fnmatch pattern.
        """
        self._config["plugin_dirs"].append((os.fspath(directory), matching))
        return self

    def src(self, package, /):
        if not isinstance(package, str) or not package.strip():
            raise TypeError("src() argument must be a dotted package name")
        self._config["src"] = package.strip()
        return self

    def exclude(self, names, /):
        if isinstance(names, str) or not isinstance(names, Iterable):
            raise TypeError("exclude() argument must be an iterable of capability names")
        self._config["exclude"] = frozenset(names)
        return self

    def capability(self, name, value, /):
        self._config["capabilities"][name] = value
        return self

    def resolver(self, resolver, /):
        if not callable(resolver):
            raise TypeError("resolver() argument must be callable")
        self._config["resolver"] = resolver
        return self

    def help(self, options=None, /):
        if isinstance(options, Mapping):
            options = HelpOptions(**options)
        elif options is not None and not isinstance(options, HelpOptions):
            raise TypeError("help() argument must be HelpOptions or a mapping")
        self._config["help_enabled"] = True
        self._config["help"] = options if options is not None else HelpOptions()
        return self

    def version(self, version=None, /):
        self._config["version_enabled"] = True
        if version:
            self._config["version"] = str(version)
        return self

    def completions(self):
        self._config["completions"] = True
        return self

    def debug(self):
        self._config["debug"] = True
        return self

    def timeout(self, seconds, /):
        if isinstance(seconds, bool) or not isinstance(seconds, int | float) or seconds <= 0:
            raise ValueError("timeout() argument must be a positive number of seconds")
        self._config["timeout"] = float(seconds)
        return self

    def on_ready(self, function, /):
        if not callable(function):
            raise TypeError("on_ready() argument must be callable")
        self._config["on_ready"] = function
        return self

    def on_error(self, function, /):
        if not callable(function):
            raise TypeError("on_error() argument must be callable")
        self._config["on_error"] = function
        return self

    def create(self, *, stdout=None, stderr=None):
        """
        Snapshot the configuration into a Runtime.

        stdout/stderr are rich Consoles; tests inject ones writing to StringIO.
        """
        config = {
            key: list(value) if isinstance(value, list) else dict(value) if isinstance(value, dict) else value
            for key, value in self._config.items()
        }
        return Runtime(config, stdout=stdout, stderr=stderr)


def build(brand, /):
    """
    Start configuring a CLI named `brand`.
    """
    return Builder(brand)


class Runtime:
    """
    A configured CLI. Reusable: run() may be awaited any number of times.

    Attributes
    - status: exit status of the last run (None before the first).
    - state: State of the last run.
    - commands / extensions: effective sets after plugin initialization.
    - capabilities: the per-runtime capability cache.
    """

    def __init__(self, config, /, *, stdout=None, stderr=None):
        self._config = config
        self.stdout = stdout if stdout is not None else Console()
        self.stderr = stderr if stderr is not None else Console(stderr=True)

        self.status = None
        self.state = State.IDLE
        self.registry = PluginRegistry()
        self.commands = list(config["commands"])
        self.extensions = list(config["extensions"])
        self._initialized = False
        self._context = None

        self.capabilities = Capabilities(exclude=config["exclude"])
        for name, value in config["capabilities"].items():
            self.capabilities.substitute(name, value)

        self._printer = None
        if "print" not in config["capabilities"] and "print" not in config["exclude"]:
            self._printer = Printer(self.stdout, self.stderr)
            self.capabilities.substitute("print", self._printer)

    def __repr__(self):
        return f"runtime({self.brand!r}, state={self.state.value})"

    @property
    def brand(self):
        return self._config["brand"]

    @property
    def version(self):
        return self._resolve_version() or "0.0.0"

    def _resolve_version(self):
        """
        The configured version, else the installed distribution version of the
        `src` package (looked up once).
        """
        if self._config["version"] is None and (package := self._config["src"]) is not None:
            top = package.partition(".")[0]
            distribution = next(iter(importlib.metadata.packages_distributions().get(top, ())), top)
            try:
                self._config["version"] = importlib.metadata.version(distribution)
            except importlib.metadata.PackageNotFoundError:
                logger.debug("no distribution metadata for %s; version unknown", package)
                self._config["version"] = ""
        return self._config["version"] or None

    # --- initialization ---

    def _initialize(self):
        """
        Discover, load, validate and merge plugins (memoized).

        Every attempt starts again from the declared commands, extensions and
        plugin sources, so a retry after a failure cannot duplicate anything.
        """
        if self._initialized:
            return

        self.commands = list(self._config["commands"])
        self.extensions = list(self._config["extensions"])
        self.registry = PluginRegistry()
        sources = list(self._config["plugins"])

        if (package := self._config["src"]) is not None:
            discovered = discover(package)
            self.commands.extend(discovered.commands)
            self.extensions.extend(discovered.extensions)

        for directory, matching in self._config["plugin_dirs"]:
            sources.extend(scan_plugin_dir(directory, matching))

        if sources:
            plugins = load_plugins(sources, self._config["resolver"])

            framework = __import__(__package__).__version__
            for plugin in plugins:
                validate_framework_version(plugin, framework)
            for plugin in plugins:
                self.registry.register(plugin)
            self.registry.validate_all()
            self._merge()

        if self._config["completions"]:
            self.commands.append(self._completions_command())
        self._ensure_unique(self.commands)

        self._initialized = True
        self.state = State.PLUGINS_INITIALIZED
        logger.debug(
            "initialized %s: %d commands, %d extensions, %d plugins",
            self.brand, len(self.commands), len(self.extensions), len(self.registry),
        )

    def _merge(self):
        host = {name: command.name for command in self.commands for name in command.names}
        for command in self.registry.commands():
            if clash := next((name for name in command.names if name in host), None):
                owner = self.registry.find_plugin_by_command(command.name) or "unknown"
                raise PluginValidationError(
                    f'Command name conflict: Plugin "{owner}" defines a command "{command.name}" '
                    f'that conflicts with host command "{host[clash]}".',
                    plugin=owner,
                    hint="rename the command or use an alias to resolve the conflict",
                )
        self.commands.extend(self.registry.commands())

        host = {extension.name for extension in self.extensions}
        for extension in self.registry.extensions():
            if extension.name in host:
                owner = self.registry.find_plugin_by_extension(extension.name) or "unknown"
                raise PluginValidationError(
                    f'Extension name conflict: Plugin "{owner}" defines an extension "{extension.name}" '
                    f"that conflicts with an existing extension.",
                    plugin=owner,
                    hint="rename the extension to resolve the conflict",
                )
        self.extensions.extend(self.registry.extensions())

    @staticmethod
    def _ensure_unique(commands):
        """
        Reject top-level commands answering to the same name or alias.
        """
        owners = {}
        for command in commands:
            for name in command.names:
                if (owner := owners.setdefault(name, command)) is not command:
                    raise PluginValidationError(
                        f'Command name conflict: "{name}" is claimed by both command "{owner.name}" '
                        f'and command "{command.name}".',
                        plugin="host",
                        hint="rename one of the commands or drop the conflicting alias",
                    )

    # --- entry points ---

    async def run(self, argv=None, /):
        """
        Run one invocation and return its exit status (also kept in .status).

        argv defaults to sys.argv[1:].
        """
        tokens = list(sys.argv[1:] if argv is None else argv)
        debug = False
        if self._config["debug"]:
            tokens, debug = _strip_debug(tokens)
            debug = debug or os.environ.get("SPROUT_DEBUG") == "1"

        self.state = State.IDLE
        self._context = None
        handler = self._attach_logging() if debug else None
        previous = self._install_signals()
        try:
            with warnings.catch_warnings(record=True) as captured:
                warnings.simplefilter("always")
                try:
                    self.status = await self._dispatch(tokens, debug)
                except Exception as error:
                    self.state = State.ERRORED
                    self.status = await self._fail(error, tokens, debug)
            self._report(captured)
        finally:
            self._restore_signals(previous)
            if handler is not None:
                self._detach_logging(handler)
        return self.status

    def invoke(self, prompt=Unset, /):
        """
        Synchronous entry point.

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string, split with shlex.split.
          • Iterable[str]: pre-tokenized sequence.

        Returns
        - the exit status.
        """
        if prompt is Unset:
            tokens = sys.argv[1:]
        elif isinstance(prompt, str):
            tokens = shlex.split(prompt)
        elif isinstance(prompt, Iterable):
            tokens = list(prompt)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("invoke() argument must be a string or an iterable of strings")
        else:
            raise TypeError("invoke() argument must be a string or an iterable of strings")
        return asyncio.run(self.run(tokens))

    # --- dispatch ---

    async def _dispatch(self, tokens, debug):
        config = self._config

        if config["version_enabled"] and len(tokens) == 1 and tokens[0] in ("--version", "-v"):
            self._say(f"{self.brand} v{self.version}")
            return 0

        if config["help_enabled"]:
            head = tokens[:tokens.index("--")] if "--" in tokens else tokens
            if not tokens:
                self._initialize()
                self._print_global_help()
                return 0
            if "--help" in head or "-h" in head:
                self._initialize()
                rest = [token for token in head if token not in ("--help", "-h")]
                if rest and (result := route(rest, self.commands)).command is not None:
                    self._print_command_help(result.command, self._lineage(rest[:len(rest) - len(result.argv)]))
                else:
                    self._print_global_help()
                return 0

        self._initialize()
        result = route(tokens, self.commands)
        self.state = State.ROUTED

        if result.command is None:
            if (default := config["default_command"]) is not None:
                return await self._execute(default, tokens, tokens, debug, default.name)

            token = tokens[0] if tokens else ""
            if result.suggestions:
                self._complain(
                    f'Command "{token}" not found.\n\nDid you mean?\n{self._rows(result.suggestions)}\n\n'
                    f"Run `{self.brand} --help` for a list of available commands."
                )
            elif config["help_enabled"]:
                self._print_global_help()
            elif token:
                self._complain(f'Command "{token}" not found.')
            else:
                self._complain(f"No command given. Run `{self.brand} <command>`.")
            return 1

        consumed = tokens[:len(tokens) - len(result.argv)]
        return await self._execute(result.command, result.argv, tokens, debug, self._lineage(consumed))

    def _lineage(self, tokens):
        """
        Canonical space-joined path of routed tokens (aliases resolved).
        """
        path = []
        commands = self.commands
        for token in tokens:
            if (found := route([token], commands).command) is None:
                break
            path.append(found.name)
            commands = found.subcommands
        return " ".join(path)

    @staticmethod
    def _rows(suggestions):
        return "\n".join(f"  {suggestion.name}    {suggestion.descr or ''}".rstrip() for suggestion in suggestions)

    # --- execution ---

    async def _execute(self, command, argv, raw, debug, path):
        if command.handler is None and command.subcommands and argv and not argv[0].startswith("-"):
            return self._missing_subcommand(command, argv[0], path)

        parsed = parse(argv, command)
        context = self._context = self._assemble(parsed, raw, debug)
        self.state = State.CONTEXT_ASSEMBLED

        if (hook := self._config["on_ready"]) is not None:
            await _call(hook, context)

        ordered = toposort(self.extensions)
        completed = []
        try:
            self.state = State.EXTENSIONS_SETTING_UP
            for extension in ordered:
                await self._setup(extension, context)
                completed.append(extension)

            self.state = State.EXECUTING
            await self._chain(command, context, path)
        finally:
            self.state = State.EXTENSIONS_TEARING_DOWN
            for extension in reversed(completed):
                if extension.teardown is None:
                    continue
                try:
                    await _call(extension.teardown, context)
                except Exception as error:
                    logger.warning('Extension "%s" teardown failed: %s', extension.name, error)

        self.state = State.DONE
        return 0

    def _missing_subcommand(self, command, token, path):
        parent = f"{self.brand} {path}"
        if suggestions := suggest(token, command.subcommands):
            self._complain(
                f'Subcommand "{token}" not found for "{parent}".\n\nDid you mean?\n{self._rows(suggestions)}\n\n'
                f"Run `{parent} --help` for a list of available subcommands."
            )
        else:
            self._complain(f'Subcommand "{token}" not found for "{parent}".')
            if self._config["help_enabled"]:
                self._print_command_help(command, path)
        return 1

    def _assemble(self, parsed, raw, debug):
        if self._printer is not None:
            self._printer.debug_enabled = debug
        return Context(
            parsed.args,
            parsed.flags,
            Parameters(list(raw), list(parsed.argv), parsed.command),
            Meta(self.version, parsed.command, self.brand, debug),
            self.capabilities,
        )

    async def _setup(self, extension, context):
        """
        Run one extension setup.

        Awaitable setups are raced against the timeout with asyncio.wait; on
        timeout the task is abandoned, not cancelled.
        """
        try:
            result = extension.setup(context)
        except Exception as error:
            raise ExtensionSetupError(
                f'Extension "{extension.name}" setup failed: {error}', extension=extension.name,
            ) from error
        if not inspect.isawaitable(result):
            return

        timeout = self._config["timeout"]
        task = asyncio.ensure_future(result)
        done, _ = await asyncio.wait({task}, timeout=timeout)
        if not done:
            task.add_done_callback(_abandoned(extension.name))
            raise ExtensionSetupError(
                f'Extension "{extension.name}" setup timed out after {timeout:g}s',
                extension=extension.name,
                hint="make the setup faster or raise the limit with .timeout(seconds)",
            )
        try:
            task.result()
        except Exception as error:
            raise ExtensionSetupError(
                f'Extension "{extension.name}" setup failed: {error}', extension=extension.name,
            ) from error

    async def _chain(self, command, context, path):
        """
        Run global then per-command middleware around the handler.

        Each middleware receives its own `next`; calling it more than once
        returns the same pending continuation, and the handler runs at most
        once per invocation.
        """
        middleware = (*self._config["middleware"], *command.middleware)
        executed = False

        async def final():
            if command.handler is not None:
                await _call(command.handler, context)
            elif command.subcommands and self._config["help_enabled"]:
                self._print_command_help(command, path)

        async def dispatch(position):
            nonlocal executed
            if position == len(middleware):
                if not executed:
                    executed = True
                    await final()
                return

            pending = []

            def next():
                if not pending:
                    pending.append(_Continuation(dispatch(position + 1)))
                return pending[0]

            await _call(middleware[position], context, next)
            if pending and not pending[0].awaited:
                await pending[0]

        await dispatch(0)

    # --- errors and warnings ---

    @staticmethod
    def _fault(error):
        if isinstance(error, CommandException):
            return error
        fault = CommandException(str(error) or type(error).__name__)
        fault.__cause__ = error
        return fault

    async def _fail(self, error, tokens, debug):
        logger.debug("invocation failed", exc_info=error)
        if debug and not isinstance(error, CommandException):
            self.stderr.print(Traceback.from_exception(type(error), error, error.__traceback__))

        if isinstance(error, ParseError) or (hook := self._config["on_error"]) is None:
            trigger(self._fault(error), console=self.stderr, brand=self.brand)
            return 1

        context = self._context
        if context is None:
            command = tokens[0] if tokens else ""
            context = Context(
                {}, {},
                Parameters(list(tokens), [], command),
                Meta(self.version, command, self.brand, debug),
                self.capabilities,
            )
        try:
            status = await _call(hook, error, context)
        except Exception as secondary:
            trigger(self._fault(error), console=self.stderr, brand=self.brand)
            self._complain(f"Additionally, the error handler threw: {secondary}")
            return 1
        # a non-zero int returned by the hook becomes the exit status
        if isinstance(status, int) and not isinstance(status, bool) and status != 0:
            return status
        return 1

    def _report(self, captured):
        for record in captured:
            if isinstance(record.message, CommandWarning):
                trigger(record.message, console=self.stderr, brand=self.brand)
            else:
                warnings.warn_explicit(record.message, record.category, record.filename, record.lineno)

    # --- output ---

    def _say(self, message):
        self.stdout.print(message, markup=False, highlight=False, soft_wrap=True)

    def _complain(self, message):
        self.stderr.print(message, markup=False, highlight=False, soft_wrap=True)

    def _print_global_help(self):
        self.stdout.print(render_global_help(self.commands, self.brand, self._resolve_version(), self._config["help"]))

    def _print_command_help(self, command, path):
        self.stdout.print(render_command_help(command, self.brand, self._config["help"], path=path))

    # --- process integration ---

    def _interrupt(self, signum, frame):
        self.stdout.file.write("\x1b[?25h")
        self.stdout.file.flush()
        raise SystemExit(130)

    def _install_signals(self):
        if threading.current_thread() is not threading.main_thread():
            return {}
        return {signum: signal.signal(signum, self._interrupt) for signum in (signal.SIGINT, signal.SIGTERM)}

    @staticmethod
    def _restore_signals(previous):
        for signum, handler in previous.items():
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)

    def _attach_logging(self):
        root = logging.getLogger(__package__)
        handler = RichHandler(console=self.stderr, level=logging.DEBUG, show_path=False)
        handler.previous = root.level
        root.addHandler(handler)
        root.setLevel(logging.DEBUG)
        return handler

    @staticmethod
    def _detach_logging(handler):
        root = logging.getLogger(__package__)
        root.removeHandler(handler)
        root.setLevel(handler.previous)

    # --- completions ---

    def _completion_info(self):
        def describe(command):
            return {
                "name": command.name,
                "descr": command.descr,
                "aliases": list(command.aliases),
                "flags": [
                    {"name": name, "alias": flag.alias, "descr": flag.descr, "type": flag.type, "choices": list(flag.choices)}
                    for name, flag in command.flags.items() if not flag.hidden
                ],
                "args": [
                    {"name": name, "descr": argument.descr, "choices": list(argument.choices)}
                    for name, argument in command.args.items()
                ],
                "subcommands": [describe(child) for child in command.subcommands if not child.hidden],
            }

        visible = [command for command in self.commands if command.name != "completions" and not command.hidden]
        return {
            "brand": self.brand,
            "commands": [describe(command) for command in visible],
            "routes": [name for name, command in flatten_commands(visible) if not command.hidden],
        }

    def _completions_command(self):
        def provider(context):
            try:
                return context.capabilities["completions"]
            except KeyError:
                raise CommandException(
                    'The "completions" capability is not installed.',
                    hint="install it with: pip install sprout-completions",
                ) from None

        def script(shell):
            @rename(shell)
            async def handler(context):
                self._say(await _call(getattr(provider(context), shell), self._completion_info()))
            return Command(shell, handler, descr=f"Print {shell} completion script")

        async def install(context):
            result = await _call(provider(context).install, self._completion_info())
            shell, path = (result["shell"], result["path"]) if isinstance(result, Mapping) else (result.shell, result.path)
            self._say(f"Installed {shell} completions to {path}")

        return Command(
            "completions",
            descr="Generate shell completion scripts",
            subcommands=(
                Command("install", install, descr="Auto-detect shell and install completions"),
                *map(script, SHELLS),
            ),
        )


def run(name, /, version=None, commands=(), default_command=None):
    """
    Quick start: build a CLI with help and version enabled, run it on
    sys.argv and exit with its status.
    """
    builder = build(name).commands(commands).help().version(version)
    if default_command is not None:
        builder.default_command(default_command)
    sys.exit(builder.create().invoke())


__all__ = (
    "State",
    "Builder",
    "Runtime",
    "build",
    "run",
)
