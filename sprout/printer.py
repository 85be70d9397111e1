"""
Sprout print capability: styled terminal output for handlers and extensions.

Every runtime seeds a Printer under the "print" capability, bound to the
runtime's consoles, so handlers write `context.print.success("done")` and
tests capture output by injecting consoles backed by io.StringIO.

Methods
- info, success (✔), warning (⚠), highlight, muted: stdout.
- error (✖): stderr.
- debug (●): stdout, only when the invocation runs in debug mode.
- newline(count), divider(title), box(text, title), key_value(pairs),
  table(rows, headers), tree(root), spin(message).

Colors follow the fault palette; __styles__ in __main__ overrides them
(keys "print-success", "print-warning", ...).
"""
from collections import defaultdict
from collections.abc import Mapping

from rich.box import ROUNDED
from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text
from rich.tree import Tree


class Printer:
    """
    Output helpers bound to a pair of consoles.
    """

    def __init__(self, stdout=None, stderr=None, *, debug=False):
        self.stdout = stdout if stdout is not None else Console()
        self.stderr = stderr if stderr is not None else Console(stderr=True)
        self.debug_enabled = bool(debug)

    def __repr__(self):
        return f"printer(debug={self.debug_enabled})"

    @property
    def styles(self):
        return defaultdict(str, {
            "print-success": "bold #22C55E",
            "print-warning": "bold #FFB400",
            "print-error": "bold #FF4D4D",
            "print-debug": "#9CA3AF",
            "print-highlight": "bold #36C5F0",
            "print-muted": "#9CA3AF",
            "print-key": "bold",
            "print-border": "#4B5563",
        } | getattr(__import__("__main__"), "__styles__", {}))

    def info(self, message):
        self.stdout.print(Text(str(message)))

    def success(self, message):
        self.stdout.print(Text(f"✔ {message}", self.styles["print-success"]))

    def warning(self, message):
        self.stdout.print(Text(f"⚠ {message}", self.styles["print-warning"]))

    def error(self, message):
        self.stderr.print(Text(f"✖ {message}", self.styles["print-error"]))

    def debug(self, message):
        if self.debug_enabled:
            self.stdout.print(Text(f"● {message}", self.styles["print-debug"]))

    def highlight(self, message):
        self.stdout.print(Text(str(message), self.styles["print-highlight"]))

    def muted(self, message):
        self.stdout.print(Text(str(message), self.styles["print-muted"]))

    def newline(self, count=1):
        for _ in range(count):
            self.stdout.print()

    def divider(self, title=""):
        self.stdout.print(Rule(title, style=self.styles["print-border"]))

    def box(self, text, title=None):
        self.stdout.print(Panel(Text(str(text)), title=title, box=ROUNDED, border_style=self.styles["print-border"]))

    def key_value(self, pairs):
        """
        Aligned "key: value" lines from a mapping or (key, value) pairs.
        """
        pairs = list(pairs.items() if isinstance(pairs, Mapping) else pairs)
        if not pairs:
            return
        width = max(len(str(key)) for key, _ in pairs)
        for key, value in pairs:
            self.stdout.print(Text.assemble((str(key).ljust(width), self.styles["print-key"]), ": ", str(value)))

    def table(self, rows, headers=None):
        """
        Print rows (sequences of cells) as a rounded table.
        """
        table = Table(box=ROUNDED, show_header=headers is not None, border_style=self.styles["print-border"])
        rows = [[str(cell) for cell in row] for row in rows]
        for header in headers if headers is not None else range(max((len(row) for row in rows), default=0)):
            table.add_column(str(header) if headers is not None else "")
        for row in rows:
            table.add_row(*row)
        self.stdout.print(table)

    def tree(self, root):
        """
        Print a nested mapping as a tree; leaves are rendered with str().

            print.tree({"src": {"main.py": None, "utils": {"io.py": None}}})
        """
        def attach(node, children):
            for label, child in children.items():
                branch = node.add(str(label))
                if isinstance(child, Mapping):
                    attach(branch, child)

        if isinstance(root, Mapping) and len(root) == 1:
            (label, children), = root.items()
            tree = Tree(str(label))
            if isinstance(children, Mapping):
                attach(tree, children)
        else:
            tree = Tree(".")
            attach(tree, root)
        self.stdout.print(tree)

    def spin(self, message):
        """
        Context manager showing a spinner while the block runs.
        """
        return self.stdout.status(str(message))


__all__ = (
    "Printer",
)
