"""
Sprout utilities (small helpers shared by every layer)

Scope
- Building blocks used by the declaration, parsing, routing and runtime layers.
- Exposed through __all__, but designed first for the package itself.

Overview
- UnsetType / Unset
  • Singleton sentinel meaning “not provided”, distinct from None.
  • Falsey, printable as "Unset", sealed against subclassing.

- coalesce(value, default=None)
  • Replace Unset with a default; None/0/""/[] are kept as given.

- rename(callable, name) / @rename("name")
  • Stable __name__/__qualname__ for generated callables (tracebacks, reprs).

- mirror("attr")
  • Read-only property over a private "_attr" field that hands out copies of
    containers, so declarations stay immutable from the outside.

- pluralize(word)
  • Tiny English pluralizer for diagnostics ("argument" → "arguments").

- mglob(pattern)
  • Module globbing ("pkg.commands.**") resolved through pkgutil.walk_packages.

- levenshtein(a, b) / closest(value, candidates, threshold=3)
  • Edit distance and nearest-candidate lookup used by suggestions.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> levenshtein("deploy", "depoly")
    2
    >>> closest("stagin", ("production", "staging"))
    'staging'
"""
import builtins
import functools
import importlib
import pkgutil
import re
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Sentinel type for values that were not provided.

    Declarations accept None as a meaningful value (a default of None is a
    real default), so "absent" needs its own marker. There is exactly one
    instance, Unset.
    """

    def __or__(self, other, /):
        """
        Allow `str | Unset` in isinstance checks and annotations.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return object unless it is Unset, in which case return default.

    Falsey values are preserved:
    - coalesce(None, "x") -> None
    - coalesce(Unset, "x") -> "x"
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Give a callable a stable __name__/__qualname__.

    Forms
    - rename(callable, name) -> callable (renamed in place)
    - rename(name) -> decorator

    Raises
    - TypeError on a wrong arity, a non-callable target, a non-string name,
      or a callable whose names cannot be updated (most built-ins).
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _immortalize(object):
    """
    Copy containers recursively so callers cannot mutate declaration state.

    Tuples stay tuples (they are already immutable and carry positional
    meaning, e.g. aliases); lists become fresh lists; mappings become fresh
    dicts in the same key order; sets become fresh sets.
    """
    if isinstance(object, tuple):
        return tuple(map(_immortalize, object))
    elif isinstance(object, Sequence) and not isinstance(object, str):
        return list(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return {key: _immortalize(value) for key, value in object.items()}
    elif isinstance(object, Set):
        return set(map(_immortalize, object))
    return object


def mirror(name, /):
    """
    Build a read-only property reading self._{name} through _immortalize.

    Example
    - With self._aliases set, `aliases = mirror("aliases")` exposes it.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def pluralize(word, /):
    """
    Pluralize a single lowercase English word for messages.

    Only the regular rules diagnostics need are covered (s/sh/ch/x/z → +es,
    consonant+y → -ies, otherwise +s). Uppercase words keep their casing.
    """
    if not isinstance(word, str):
        raise TypeError("pluralize() argument must be a string")
    if not word:
        return word

    lower = word.lower()
    if lower.endswith(("s", "sh", "ch", "x", "z")):
        plural = lower + "es"
    elif lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        plural = lower[:-1] + "ies"
    else:
        plural = lower + "s"

    return plural.upper() if word.isupper() else plural


@functools.cache
def _resolve_segment(segment):
    """
    translate one dot-free pattern segment into a regex fragment.
      *       → zero or more non-dot chars
      ?       → one non-dot char
      [...]   → character class, [!...] negated
      \\x      → literal x
    """
    length = len(segment)
    index = 0
    parts = []
    while index < length:
        char = segment[index]
        if char == '\\' and index + 1 < length:
            parts.append(re.escape(segment[index + 1]))
            index += 2
            continue
        if char == '*':
            parts.append(r'[^.]*')
        elif char == '?':
            parts.append(r'[^.]')
        elif char == '[':
            start = index + 1
            negated = ''
            if start < length and segment[start] in ('!', '^'):
                negated = '^'
                start += 1
            end = segment.find(']', start)
            if end == -1:
                parts.append(r'\[')
            else:
                parts.append(f'[{negated}{segment[start:end]}]')
                index = end
        else:
            parts.append(re.escape(char))
        index += 1
    return ''.join(parts)


@functools.cache
def _compile_regex(pattern):
    """
    compile a module glob; '**' spans zero or more whole segments.
    """
    head, *tail = pattern.split('.')
    body = _resolve_segment(head)
    for segment in tail:
        if segment == '**':
            body += r'(?:\.[A-Za-z_]\w*)*'
        else:
            body += r'\.' + _resolve_segment(segment)
    return re.compile(body)


def mglob(source, /):
    """
    expand a dotted module glob into importable module names.

    rules
    - the pattern must start with a concrete package (e.g. "app.commands.**").
    - a pattern without wildcards is returned as-is.
    - the concrete prefix is imported; when it cannot be, nothing matches.
    - results are sorted; the prefix itself is included when it matches.

    examples
    - "app.commands.*"   → direct children of app.commands
    - "app.commands.**"  → app.commands and everything below it
    """
    if not isinstance(source, str):
        raise TypeError("mglob() argument must be a string")
    elif not (source := source.strip()):
        raise ValueError("mglob() argument must be a non-empty string")

    if re.fullmatch(r"(?!\d)\w+(\.(?!\d)\w+)*", source):
        return [source]

    prefixes = []
    for segment in source.split('.'):
        if not re.fullmatch(r"(?!\d)\w+", segment):
            break
        prefixes.append(segment)

    if not prefixes:
        raise ValueError("mglob() pattern must start with a concrete package segment")

    try:
        package = importlib.import_module(prefix := ".".join(prefixes))
    except ImportError:
        return []

    matches = set()
    if (pattern := _compile_regex(source)).fullmatch(prefix):
        matches.add(prefix)

    if hasattr(package, "__path__"):
        for metadata in pkgutil.walk_packages(package.__path__, prefix + '.'):
            if pattern.fullmatch(name := metadata.name):
                matches.add(name)

    return sorted(matches)


def levenshtein(source, target, /):
    """
    Classic edit distance (insertions, deletions, substitutions cost 1).

    Uses two rolling rows, so memory is linear in the shorter string.
    """
    if len(source) < len(target):
        source, target = target, source
    if not target:
        return len(source)

    previous = list(range(len(target) + 1))
    for row, left in enumerate(source, 1):
        current = [row]
        for column, right in enumerate(target, 1):
            current.append(min(
                previous[column] + 1,
                current[column - 1] + 1,
                previous[column - 1] + (left != right),
            ))
        previous = current
    return previous[-1]


def closest(value, candidates, /, threshold=3):
    """
    Return the candidate nearest to value, or None past the threshold.

    Comparison is case-insensitive; the first candidate wins ties. The
    returned object is the candidate itself, not its string form.
    """
    best, distance = None, threshold + 1
    lower = str(value).lower()
    for candidate in candidates:
        if (current := levenshtein(lower, str(candidate).lower())) < distance:
            best, distance = candidate, current
    return best


Unset = UnsetType()
"""
The single “not provided” marker. Compare by identity (`x is Unset`) and
materialize with coalesce().
"""


class DeclarationType(type):
    """
    Metaclass shared by every declaration (arguments, commands, extensions,
    plugins).

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used as the subject of declaration errors ("flag 'alias' must be ...").
    - Publish every name in __introspectable__ as a read-only mirror() property.
    - Provide __repr__/__rich_repr__ over __displayable__ (or __introspectable__).
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join("%s=%r" % pair for pair in self.__rich_repr__())
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "pluralize",
    "mglob",
    "levenshtein",
    "closest",

    # Types
    "UnsetType",
    "DeclarationType",

    # Constants
    "Unset",
)
