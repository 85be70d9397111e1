"""
Sprout argument declarations: positional arguments and named flags.

Overview
- Argument: a positional value declared on a command. Position comes from the
  order of the command's `args` mapping; the mapping key is its name.
- Flag: a named value (`--name`, optionally `-a`). The key in the command's
  `flags` mapping is the long name.

Value types
- Argument: "string" | "number"
- Flag:     "boolean" | "string" | "number" | "string[]" | "number[]"

Shared metadata
- required: bool. Missing required values without a default are parse errors.
- choices: closed set of accepted values, kept as a tuple for stable display.
  Number fields compare choices numerically ("1.0" matches 1).
- default: any value, used only when the value is absent from the input.
  Left as Unset when not provided (None is a legitimate default).
- descr: short description for help.
- validate: callable(value) returning False (generic failure), a string
  (failure reason) or anything else (success).

Flag-only metadata
- alias: one character, usable as `-a` and groupable for booleans (`-abc`).
- hidden: omit from help.

Examples
    >>> Argument("string", required=True, descr="Target environment")
    >>> Flag("number", alias="r", default=1, choices=(1, 2, 3))
    >>> Flag("boolean", alias="f", descr="Skip confirmation")
"""
import re
from collections.abc import Iterable

from .utils import *


def _sanitize_metadata(cls, metadata, types, /):
    """
    Internal: validate and normalize the fields shared by Argument and Flag.

    Mutates metadata in place.

    Raises
    - TypeError when a field has the wrong type.
    - ValueError when a field has the right type but an unusable value
      (unknown value type, empty description, duplicated choice, ...).
    """
    if not isinstance(type := metadata["type"], str):
        raise TypeError(f"{cls.__typename__} 'type' must be a string")
    elif type not in types:
        raise ValueError(f"{cls.__typename__} 'type' must be one of {', '.join(map(repr, types))}")

    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)

    if isinstance(choices := metadata["choices"], str) or not isinstance(choices, Iterable):
        raise TypeError(f"{cls.__typename__} 'choices' must be an iterable of values")
    choices = tuple(choices)
    for choice in choices:
        if isinstance(choice, bool) or not isinstance(choice, str | int | float):
            raise TypeError(f"{cls.__typename__} 'choices' must contain only strings or numbers")
    if len(set(map(str, choices))) != len(choices):
        raise ValueError(f"{cls.__typename__} 'choices' cannot contain duplicates")
    if choices and type == "boolean":
        raise TypeError(f"boolean {cls.__typename__} cannot have 'choices'")
    metadata["choices"] = choices

    if not callable(validate := metadata["validate"]) and validate is not Unset:
        raise TypeError(f"{cls.__typename__} 'validate' must be callable")
    metadata["validate"] = coalesce(validate)


class _Declaration(metaclass=DeclarationType):
    """
    Common read-only surface of Argument and Flag.
    """

    @property
    def numeric(self):
        """
        True for "number" and "number[]" values.
        """
        return self._type in ("number", "number[]")

    @property
    def array(self):
        """
        True for repeatable values ("string[]", "number[]").
        """
        return self._type.endswith("[]")

    @property
    def boolean(self):
        return self._type == "boolean"


class Argument(_Declaration):
    """
    Positional argument declaration (ArgDef).

    Properties
    - The names listed in __introspectable__ are exposed as read-only
      attributes mirroring the sanitized metadata.
    """

    __introspectable__ = (
        "type",
        "required",
        "choices",
        "default",
        "descr",
        "validate",
    )

    def __new__(
            cls,
            type="string",
            /,
            *,
            required=False,
            choices=(),
            default=Unset,
            descr=Unset,
            validate=Unset,
    ):
        metadata = {
            "type": type,
            "required": bool(required),
            "choices": choices,
            "default": default,
            "descr": descr,
            "validate": validate,
        }
        _sanitize_metadata(cls, metadata, ("string", "number"))

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self


class Flag(_Declaration):
    """
    Named flag declaration (FlagDef).

    Notes
    - Boolean flags take no value; `--no-<name>` negates them on the command line.
    - Array flags ("string[]", "number[]") accumulate every occurrence.
    - alias is a single character; it must be unique within the command
      (enforced by Command).
    """

    __introspectable__ = (
        "type",
        "alias",
        "required",
        "choices",
        "default",
        "descr",
        "validate",
        "hidden",
    )

    def __new__(
            cls,
            type="boolean",
            /,
            *,
            alias=Unset,
            required=False,
            choices=(),
            default=Unset,
            descr=Unset,
            validate=Unset,
            hidden=False,
    ):
        metadata = {
            "type": type,
            "alias": alias,
            "required": bool(required),
            "choices": choices,
            "default": default,
            "descr": descr,
            "validate": validate,
            "hidden": bool(hidden),
        }
        _sanitize_metadata(cls, metadata, ("boolean", "string", "number", "string[]", "number[]"))

        if not isinstance(alias, str | Unset):
            raise TypeError(f"{cls.__typename__} 'alias' must be a string")
        elif isinstance(alias, str) and not re.fullmatch(r"[A-Za-z0-9]", alias):
            raise ValueError(f"{cls.__typename__} 'alias' must be a single letter or digit")
        metadata["alias"] = coalesce(alias)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self


__all__ = (
    "Argument",
    "Flag",
)
