"""
Sprout argument parser: tokens + command declaration → typed values.

Contract
- parse(tokens, command) -> ParseResult(args, flags, command, argv, raw)
- Raises a ParseError subclass on malformed input; never prints.

Token grammar (strict)
- `--` ends flag parsing; everything after it is positional, verbatim.
- `--name` / `--name=value` / `--name value` for declared flags.
- `-a` for a declared alias; boolean aliases group (`-vf`); a value-taking
  alias takes the rest of the group (`-ofile`, `-o=file`) or the next token.
- `--no-<name>` negates a declared boolean flag. An explicit `--<name>`
  (before `--`) wins regardless of order.
- A lone `-`, and negative numbers that are not aliases, are positionals.
- Scalar flags given twice keep the last value; array flags accumulate.

Values
- number fields must parse to a finite int/float.
- choices compare numerically for number fields, textually otherwise;
  array values are checked element by element.
- validators returning False or a reason string reject the value.
- defaults apply only when the value is absent; absent optional values are None.

Warnings
- Positionals beyond the declared args are kept in `argv` and reported with
  ExtraPositionalsWarning.
"""
import logging
import math
import re
import warnings
from collections import deque, namedtuple

from .faults import *
from .utils import *

logger = logging.getLogger(__name__)

ParseResult = namedtuple("ParseResult", ("args", "flags", "command", "argv", "raw"))

_NUMERIC = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


def _looks_like_flag(token):
    return token.startswith("-") and token != "-" and not _NUMERIC.fullmatch(token)


def _take_value(name, flag, inline, queue):
    """
    Resolve the raw value of one flag occurrence.

    inline is the text glued to the flag (`--name=value`, `-ovalue`) or Unset.
    """
    if flag.boolean:
        if inline is not Unset:
            raise MalformedFlagError(
                f'Flag "--{name}" does not take a value',
                hint=f"use --{name} to enable it or --no-{name} to disable it",
            )
        return True
    if inline is not Unset:
        return inline
    if queue and queue[0] != "--" and not _looks_like_flag(queue[0]):
        return queue.popleft()
    metavar = "n" if flag.numeric else "value"
    raise MalformedFlagError(f'Flag "--{name}" requires a value', hint=f"Usage: --{name} <{metavar}>")


def _store(values, name, flag, value):
    if flag.array:
        values.setdefault(name, []).append(value)
    else:
        values[name] = value


def _scan(tokens, command):
    """
    Split tokens into positionals and raw flag values.

    Returns (positionals, values) where values maps long flag names to the
    raw string (or list of strings, or True/False for booleans).
    """
    flags = command.flags
    aliases = {flag.alias: name for name, flag in flags.items() if flag.alias}

    positionals = []
    values = {}
    negated = []
    queue = deque(tokens)

    while queue:
        token = queue.popleft()

        if token == "--":
            positionals.extend(queue)
            break

        if token.startswith("--"):
            name, separator, inline = token[2:].partition("=")
            inline = inline if separator else Unset
            if (flag := flags.get(name)) is not None:
                _store(values, name, flag, _take_value(name, flag, inline, queue))
                continue
            if inline is Unset and name.startswith("no-") and getattr(flags.get(name[3:]), "boolean", False):
                negated.append(name[3:])
                continue
            hint = f"run '{command.name} --help' to see the available flags"
            if suggestion := closest(name, flags):
                hint = f'Did you mean "--{suggestion}"?'
            raise UnknownFlagError(f'Unknown flag "{token.partition("=")[0]}"', hint=hint)

        if not token.startswith("-") or token == "-" or (_NUMERIC.fullmatch(token) and token[1:2] not in aliases):
            positionals.append(token)
            continue

        body = token[1:]
        for index, letter in enumerate(body):
            if (name := aliases.get(letter)) is None:
                raise UnknownFlagError(
                    f'Unknown flag "-{letter}"',
                    hint=f"run '{command.name} --help' to see the available flags",
                )
            if (flag := flags[name]).boolean:
                _store(values, name, flag, True)
                continue
            rest = body[index + 1:]
            inline = rest.removeprefix("=") if rest else Unset
            _store(values, name, flag, _take_value(name, flag, inline, queue))
            break

    for name in negated:
        # explicit --name wins regardless of order
        values.setdefault(name, False)

    return positionals, values


def _number(noun, label, token, array):
    if "_" not in token and (token := token.strip()):
        try:
            value = int(token) if re.fullmatch(r"[-+]?\d+", token) else float(token)
        except ValueError:
            pass
        else:
            if math.isfinite(value):
                return value
    expected = "number[]" if array else "number"
    received = "Received item" if array else "Received"
    raise InvalidNumberError(
        f'Invalid value for {noun} "{label}"',
        hint=f'Expected: {expected}\n{received}: "{token}"',
        argument=label,
    )


def _matches(declaration, value, choice):
    if declaration.numeric:
        try:
            return float(choice) == value
        except (TypeError, ValueError):
            return False
    return str(value) == str(choice)


def _resolve(noun, label, declaration, raw):
    """
    Coerce, choice-check and validate one present value.
    """
    items = raw if declaration.array else [raw]

    if declaration.numeric:
        items = [_number(noun, label, item, declaration.array) for item in items]

    if choices := declaration.choices:
        for item in items:
            if any(_matches(declaration, item, choice) for choice in choices):
                continue
            hint = f"Expected one of: {', '.join(f'"{choice}"' for choice in choices)}\nReceived: \"{item}\""
            if (suggestion := closest(item, choices)) is not None:
                hint += f'\n\nDid you mean "{suggestion}"?'
            raise InvalidChoiceError(f'Invalid value for {noun} "{label}"', hint=hint, argument=label)

    value = items if declaration.array else items[0]

    if declaration.validate is not None:
        result = declaration.validate(value)
        if result is False:
            raise ValidationFailedError(f'Validation failed for {noun} "{label}"', argument=label)
        if isinstance(result, str):
            raise ValidationFailedError(f'Validation failed for {noun} "{label}": {result}', argument=label)

    return value


def _missing_argument(command, name, argument):
    lines = []
    if argument.descr:
        lines.append(argument.descr)
    if argument.choices:
        lines.append("Expected one of: " + ", ".join(map(str, argument.choices)))
    lines.append(f"Usage: {command.name} <{name}>")
    return MissingArgumentError(f'Missing required argument "{name}"', hint="\n".join(lines), argument=name)


def _missing_flag(name, flag):
    lines = []
    if flag.descr:
        lines.append(flag.descr)
    if flag.choices:
        lines.append("Expected one of: " + ", ".join(map(str, flag.choices)))
    metavar = "n" if flag.numeric else "value"
    lines.append(f"Usage: --{name}" + ("" if flag.boolean else f" <{metavar}>"))
    return MissingFlagError(f'Missing required flag "--{name}"', hint="\n".join(lines), argument=f"--{name}")


def parse(tokens, command, /):
    """
    Parse tokens against a command's declared args and flags.

    Parameters
    - tokens: Iterable[str], the argv remaining after routing.
    - command: Command whose args/flags describe the accepted input.

    Returns
    - ParseResult(args, flags, command, argv, raw) where:
      • args / flags are dicts of typed values (None when absent),
      • command is the command name,
      • argv lists every positional token (declared and extra),
      • raw is the token list as received.

    Raises
    - UnknownFlagError, MalformedFlagError, InvalidNumberError,
      InvalidChoiceError, ValidationFailedError, MissingArgumentError,
      MissingFlagError (all ParseError).
    """
    raw = list(tokens)
    positionals, values = _scan(raw, command)

    args = {}
    declared = command.args
    for index, (name, argument) in enumerate(declared.items()):
        if index < len(positionals):
            args[name] = _resolve("argument", name, argument, positionals[index])
        elif argument.default is not Unset:
            args[name] = argument.default
        elif argument.required:
            raise _missing_argument(command, name, argument)
        else:
            args[name] = None

    if len(positionals) > len(declared):
        extra = positionals[len(declared):]
        received, defined = len(positionals), len(declared)
        warnings.warn(ExtraPositionalsWarning(
            f'command "{command.name}" received {received} positional '
            f'{"argument" if received == 1 else pluralize("argument")} but only {defined} '
            f'{"is" if defined == 1 else "are"} defined. Extra arguments ignored: {", ".join(extra)}',
            command=command.name,
            extra=tuple(extra),
        ), stacklevel=2)

    flags = {}
    for name, flag in command.flags.items():
        if name in values:
            flags[name] = _resolve("flag", f"--{name}", flag, values[name])
        elif flag.default is not Unset:
            flags[name] = flag.default
        elif flag.required:
            raise _missing_flag(name, flag)
        else:
            flags[name] = None

    logger.debug("parsed %r for %s: args=%r flags=%r", raw, command.name, args, flags)
    return ParseResult(args, flags, command.name, positionals, raw)


__all__ = (
    "ParseResult",
    "parse",
)
