"""
Sprout faults (errors and warnings) and rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing fault, grouped
  by domain so logs and docs stay searchable.
- CommandException / CommandWarning: base types carrying a message plus
  read-only options (hint, brand, and whatever context the raiser attaches).
  Both know how to render themselves with rich.
- trigger(): print a fault to a console after merging runtime options into it.

Families
- ParseError (user input, exit 1): UnknownFlagError, MalformedFlagError,
  InvalidNumberError, InvalidChoiceError, ValidationFailedError,
  MissingArgumentError, MissingFlagError.
- PluginError (startup): PluginValidationError, PluginLoadError,
  PluginDependencyError.
- ExtensionCycleError, ExtensionSetupError (extension lifecycle).
- CapabilityExcludedError (context access to an excluded capability).
- CommandWarning: ExtraPositionalsWarning, PluginVersionWarning,
  EmptyCommandWarning, DiscoveryWarning.

Conventions
- str(fault) is the message, followed by the hint on its own paragraph.
- Causes are chained with `raise ... from cause`; __replace__ keeps them.
- Host applications may override colors through __styles__ and code labels
  through __codes__ in __main__.
"""
import copy
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - routing and parsing (111xx)
    - warnings (121xx)
    - plugins and capabilities (131xx)
    - extensions (141xx)
    - delegated, i.e. raised by user code (119xx)
    """
    # --- routing and parsing errors (111xx) ---
    UNKNOWN_COMMAND             = 11101
    UNKNOWN_FLAG                = 11111
    MALFORMED_FLAG              = 11112
    INVALID_NUMBER              = 11121
    INVALID_CHOICE              = 11122
    VALIDATION_FAILED           = 11123
    MISSING_ARGUMENT            = 11131
    MISSING_FLAG                = 11132

    # --- delegated errors (119xx) ---
    DELEGATED_ERROR             = 11901

    # --- warnings (121xx) ---
    EXTRA_POSITIONALS           = 12101
    PLUGIN_VERSION_MISMATCH     = 12111
    EMPTY_COMMAND               = 12121
    DISCOVERY_SKIPPED           = 12131

    # --- plugin and capability errors (131xx) ---
    PLUGIN_VALIDATION           = 13101
    PLUGIN_LOAD                 = 13111
    PLUGIN_DEPENDENCY           = 13121
    CAPABILITY_EXCLUDED         = 13131

    # --- extension errors (141xx) ---
    EXTENSION_CYCLE             = 14101
    EXTENSION_SETUP             = 14111

    def normalize(self):
        """
        return the host label for this code.

        a __codes__ mapping in __main__ may remap codes to friendlier labels;
        otherwise the numeric value is used.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, kind, palette):
    """
    Build the rich renderable shared by exceptions and warnings.

    Layout
        [ brand — code | title ]
        KIND: message
         → hint
    """
    main = __import__("__main__")
    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    brand = fault.options.get("brand") or getattr(main, "__prog__", "sprout")

    header = Text.assemble(
        "[ ",
        (brand, styles["prog-name"]),
        " — ",
        (type(fault).__code__.normalize(), styles["code"]),
        " | ",
        (type(fault).__title__, styles["title"]),
        " ]",
    )
    message = Text.assemble((f"{kind}: ", styles["label"]), (fault.message, styles["message"]))

    if not (hint := fault.options.get("hint")):
        return Group(header, message)
    return Group(header, message, Text.assemble((" → ", styles["hint-arrow"]), (hint, styles["hint"])))


class CommandException(Exception):
    __code__ = FaultCode.DELEGATED_ERROR
    __title__ = "command error"

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__}() message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def hint(self):
        return self.options.get("hint")

    def __str__(self):
        if self.hint:
            return f"{self.message}\n\n{self.hint}"
        return self.message

    def __rich__(self):
        return _render(self, "ERROR", {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "title": "bold #FF4DA6",  # pinky title
            "label": "bold #FF4D4D",
            "message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        replaced = type(self)(self.message, **{**self.options, **overrides})
        replaced.__cause__ = self.__cause__
        return replaced


# --- parsing ---

class ParseError(CommandException):
    __title__ = "invalid input"

class UnknownFlagError(ParseError):
    __code__ = FaultCode.UNKNOWN_FLAG
    __title__ = "unknown flag"

class MalformedFlagError(ParseError):
    __code__ = FaultCode.MALFORMED_FLAG
    __title__ = "malformed flag"

class InvalidNumberError(ParseError):
    __code__ = FaultCode.INVALID_NUMBER
    __title__ = "invalid number"

class InvalidChoiceError(ParseError):
    __code__ = FaultCode.INVALID_CHOICE
    __title__ = "invalid choice"

class ValidationFailedError(ParseError):
    __code__ = FaultCode.VALIDATION_FAILED
    __title__ = "validation failed"

class MissingArgumentError(ParseError):
    __code__ = FaultCode.MISSING_ARGUMENT
    __title__ = "missing argument"

class MissingFlagError(ParseError):
    __code__ = FaultCode.MISSING_FLAG
    __title__ = "missing flag"


# --- plugins ---

class PluginError(CommandException):
    """
    Base for plugin faults; `plugin` names the offending plugin.
    """
    __title__ = "plugin error"

    def __init__(self, message, /, plugin=Unset, **options):
        super().__init__(message, plugin=plugin, **options)

    @property
    def plugin(self):
        return self.options["plugin"]


class PluginValidationError(PluginError):
    __code__ = FaultCode.PLUGIN_VALIDATION
    __title__ = "invalid plugin"

class PluginLoadError(PluginError):
    __code__ = FaultCode.PLUGIN_LOAD
    __title__ = "plugin not loaded"


class PluginDependencyError(PluginError):
    __code__ = FaultCode.PLUGIN_DEPENDENCY
    __title__ = "unmet peer plugin"

    def __init__(self, message, /, plugin=Unset, dependency=Unset, **options):
        super().__init__(message, plugin=plugin, dependency=dependency, **options)

    @property
    def dependency(self):
        return self.options["dependency"]


class CapabilityExcludedError(CommandException):
    __code__ = FaultCode.CAPABILITY_EXCLUDED
    __title__ = "excluded capability"

    @property
    def capability(self):
        return self.options.get("capability")


# --- extensions ---

class ExtensionCycleError(CommandException):
    __code__ = FaultCode.EXTENSION_CYCLE
    __title__ = "extension cycle"

    def __init__(self, message=Unset, /, extensions=(), **options):
        extensions = tuple(extensions)
        if message is Unset:
            message = "Circular dependency detected among extensions: " + ", ".join(extensions)
        super().__init__(message, extensions=extensions, **options)

    @property
    def extensions(self):
        return self.options["extensions"]


class ExtensionSetupError(CommandException):
    __code__ = FaultCode.EXTENSION_SETUP
    __title__ = "extension setup failed"

    @property
    def extension(self):
        return self.options.get("extension")


class CommandWarning(Warning):
    __code__ = FaultCode.DELEGATED_ERROR
    __title__ = "warning"

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__}() message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message

    def __rich__(self):
        return _render(self, "WARNING", {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",  # amber fault code for warnings
            "title": "bold #FFC2E0",
            "label": "bold #FFB400",
            "message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ExtraPositionalsWarning(CommandWarning):
    __code__ = FaultCode.EXTRA_POSITIONALS
    __title__ = "extra arguments"

class PluginVersionWarning(CommandWarning):
    __code__ = FaultCode.PLUGIN_VERSION_MISMATCH
    __title__ = "duplicate plugin"

class EmptyCommandWarning(CommandWarning):
    __code__ = FaultCode.EMPTY_COMMAND
    __title__ = "empty command"

class DiscoveryWarning(CommandWarning):
    __code__ = FaultCode.DISCOVERY_SKIPPED
    __title__ = "discovery skipped"


def trigger(fault, /, *, console=console, **options):
    """
    print a fault to a console with the given runtime options.

    contract
    - fault must provide __rich__ and __replace__ (see the base classes).
    - options (brand, hint, ...) are merged into the fault via copy.replace
      before rendering, so the original fault is left untouched.
    """
    if (
        not hasattr(fault, "__rich__") or
        not callable(fault.__rich__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __rich__ and __replace__ methods")
    console.print(copy.replace(fault, **options))


__all__ = (
    "FaultCode",
    "CommandException",
    "ParseError",
    "UnknownFlagError",
    "MalformedFlagError",
    "InvalidNumberError",
    "InvalidChoiceError",
    "ValidationFailedError",
    "MissingArgumentError",
    "MissingFlagError",
    "PluginError",
    "PluginValidationError",
    "PluginLoadError",
    "PluginDependencyError",
    "CapabilityExcludedError",
    "ExtensionCycleError",
    "ExtensionSetupError",
    "CommandWarning",
    "ExtraPositionalsWarning",
    "PluginVersionWarning",
    "EmptyCommandWarning",
    "DiscoveryWarning",
    "trigger",
)
