"""
Sprout command router: tokens → command, or ranked suggestions.

Resolution
- The first token is matched exactly (case-sensitive) against each command's
  name, then against its aliases. Hidden commands resolve like any other.
- On a match with subcommands and more tokens, routing recurses; when no
  subcommand matches, the parent is returned with the tail as argv so the
  parent decides what to do with it.

Suggestions (no match at all)
- Candidates are visible commands whose name or any alias is within edit
  distance 3 of the token, or that the token prefixes (case-insensitive).
- A command's distance is its best over name and aliases.
- Ranking is by ascending distance; equal distances keep declaration order.
"""
from collections import namedtuple

from .utils import levenshtein

RouteResult = namedtuple("RouteResult", ("command", "argv", "suggestions"))
Suggestion = namedtuple("Suggestion", ("name", "descr", "distance"))

THRESHOLD = 3


def _find(token, commands):
    for command in commands:
        if command.name == token:
            return command
    for command in commands:
        if token in command.aliases:
            return command
    return None


def suggest(token, commands, /):
    """
    Rank visible commands that look like token.

    Returns
    - list[Suggestion], closest first; ties keep declaration order
      (sorted() is stable).
    """
    lower = token.lower()
    suggestions = []
    for command in commands:
        if command.hidden:
            continue
        names = [name.lower() for name in command.names]
        distance = min(levenshtein(lower, name) for name in names)
        if distance <= THRESHOLD or any(name.startswith(lower) for name in names):
            suggestions.append(Suggestion(command.name, command.descr, distance))
    return sorted(suggestions, key=lambda suggestion: suggestion.distance)


def route(tokens, commands, /):
    """
    Resolve tokens against a command set.

    Returns
    - RouteResult(command, argv, suggestions):
      • matched: (command, remaining tokens, [])
      • unmatched: (None, tokens, ranked suggestions)
      • empty input: (None, [], [])
    """
    tokens = list(tokens)
    if not tokens:
        return RouteResult(None, [], [])

    token, *rest = tokens
    if (matched := _find(token, commands)) is None:
        return RouteResult(None, tokens, suggest(token, commands))

    if rest and (subcommands := matched.subcommands):
        if (nested := route(rest, subcommands)).command is not None:
            return nested

    return RouteResult(matched, rest, [])


def flatten_commands(commands, prefix="", /):
    """
    Depth-first (full name, command) pairs for a command tree.

    Full names are space-joined paths ("db migrate"). Hidden commands are
    included; callers filter as they see fit.
    """
    result = []
    for command in commands:
        name = f"{prefix} {command.name}" if prefix else command.name
        result.append((name, command))
        result.extend(flatten_commands(command.subcommands, name))
    return result


__all__ = (
    "RouteResult",
    "Suggestion",
    "route",
    "suggest",
    "flatten_commands",
)
