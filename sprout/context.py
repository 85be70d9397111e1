"""
Sprout context: what handlers, middleware and extensions receive.

Context
- args, flags: parsed values (dicts).
- parameters: Parameters(raw, argv, command); raw is the full token list,
  argv the extra positionals the command did not declare.
- meta: Meta(version, command, brand, debug).
- capabilities: Capabilities; any other attribute falls through to it, so
  `context.print.info("hi")` reaches the "print" capability.

Capabilities
- A mutable mapping resolved lazily by name through a resolver
  (callable name → object). The default resolver imports `sprout_<name>`.
- Resolved values are cached for the owner's lifetime (one per Runtime).
- ImportError from the resolver means "not installed": the name is absent
  and lookups raise KeyError (AttributeError through Context).
- Excluded names raise CapabilityExcludedError on access and cannot be set.
- substitute(name, value) pre-seeds a value (tests, embedded services).
"""
import importlib
import logging
from collections import namedtuple
from collections.abc import MutableMapping

from .faults import CapabilityExcludedError

logger = logging.getLogger(__name__)

Parameters = namedtuple("Parameters", ("raw", "argv", "command"))
Meta = namedtuple("Meta", ("version", "command", "brand", "debug"))


def resolve_capability(name, /):
    """
    Import the `sprout_<name>` module and return its `capability` attribute,
    or the module itself when it has none.
    """
    module = importlib.import_module("sprout_" + name.replace("-", "_"))
    return getattr(module, "capability", module)


class Capabilities(MutableMapping):

    def __init__(self, resolver=None, /, *, exclude=()):
        self._resolver = resolver if resolver is not None else resolve_capability
        self._excluded = frozenset(exclude)
        self._cache = {}
        self._absent = set()

    def __repr__(self):
        return f"capabilities({', '.join(self._cache)})"

    @property
    def excluded(self):
        return self._excluded

    def _refuse(self, name):
        return CapabilityExcludedError(
            f'The "{name}" capability was excluded from this CLI.',
            capability=name,
            hint=f'to use it, remove "{name}" from the .exclude() call in your CLI builder',
        )

    def __getitem__(self, name):
        if name in self._excluded:
            raise self._refuse(name)
        if name in self._cache:
            return self._cache[name]
        if name in self._absent:
            raise KeyError(name)

        try:
            value = self._resolver(name)
        except ImportError as error:
            logger.debug("capability %s unavailable: %s", name, error)
            self._absent.add(name)
            raise KeyError(name) from None

        self._cache[name] = value
        return value

    def __setitem__(self, name, value):
        if name in self._excluded:
            raise self._refuse(name)
        self._cache[name] = value
        self._absent.discard(name)

    def __delitem__(self, name):
        del self._cache[name]

    def __contains__(self, name):
        try:
            self[name]
        except (KeyError, CapabilityExcludedError):
            return False
        return True

    def __iter__(self):
        """
        Iterate over resolved capabilities only.
        """
        return iter(list(self._cache))

    def __len__(self):
        return len(self._cache)

    def substitute(self, name, value, /):
        self._cache[name] = value
        self._absent.discard(name)
        return self


class Context:
    """
    Per-invocation state handed to handlers, middleware, extensions and hooks.
    """

    def __init__(self, args, flags, parameters, meta, capabilities):
        self.args = args
        self.flags = flags
        self.parameters = parameters
        self.meta = meta
        self.capabilities = capabilities

    def __repr__(self):
        return f"context(command={self.meta.command!r}, args={self.args!r}, flags={self.flags!r})"

    def __getattr__(self, name):
        if name.startswith("_") or (capabilities := self.__dict__.get("capabilities")) is None:
            raise AttributeError(name)
        try:
            return capabilities[name]
        except KeyError:
            raise AttributeError(f"context has no attribute or capability {name!r}") from None


__all__ = (
    "Parameters",
    "Meta",
    "Capabilities",
    "Context",
    "resolve_capability",
)
