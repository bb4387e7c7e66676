"""Shared utility functions for the scaffold engine.

Provides Rich-based console reporting and the identifier-casing helpers used
both for the project directory name and as Jinja2 filters inside templates.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from rich.console import Console
from rich.rule import Rule
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------

_SEPARATORS = re.compile(r"[\W_]+")


def split_words(value: str) -> list[str]:
    """Split an identifier-ish string into its words.

    Words are separated by any non-alphanumeric run and by case changes:
    ``lower|Upper``, ``digit|Upper`` and ``UPPER|Upperlower``.

    Examples::

        split_words("MyProject")      -> ["My", "Project"]
        split_words("HTTPServer v2")  -> ["HTTP", "Server", "v2"]
        split_words("some_thing-else") -> ["some", "thing", "else"]
    """
    words: list[str] = []
    for chunk in _SEPARATORS.split(str(value)):
        if not chunk:
            continue
        start = 0
        for i in range(1, len(chunk)):
            prev, cur = chunk[i - 1], chunk[i]
            nxt = chunk[i + 1] if i + 1 < len(chunk) else ""
            if cur.isupper() and (prev.islower() or prev.isdigit()):
                words.append(chunk[start:i])
                start = i
            elif prev.isupper() and cur.isupper() and nxt.islower():
                words.append(chunk[start:i])
                start = i
        words.append(chunk[start:])
    return words


def kebab_case(value: str) -> str:
    """``MyProject`` -> ``my-project``."""
    return "-".join(word.lower() for word in split_words(value))


def snake_case(value: str) -> str:
    """``MyProject`` -> ``my_project``."""
    return "_".join(word.lower() for word in split_words(value))


def shouty_snake_case(value: str) -> str:
    """``MyProject`` -> ``MY_PROJECT``."""
    return "_".join(word.upper() for word in split_words(value))


def pascal_case(value: str) -> str:
    """``my-project`` -> ``MyProject``."""
    return "".join(word[:1].upper() + word[1:].lower() for word in split_words(value))


def camel_case(value: str) -> str:
    """``my-project`` -> ``myProject``."""
    pascal = pascal_case(value)
    if pascal:
        return pascal[0].lower() + pascal[1:]
    return ""


def slugify(value: str) -> str:
    """Convert a string to a URL/filename-safe slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", str(value).lower().strip())
    return slug.strip("-")


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_step(message: str) -> None:
    """Print a cyan progress line (one per engine stage)."""
    console.print(f"[cyan]{message}[/cyan]")


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


def print_notes(notes: str) -> None:
    """Print post-generation notes between two yellow rules.

    Notes are template output, so Rich markup inside them is not interpreted.
    """
    console.print()
    console.print(Rule(style="yellow"))
    console.print(notes, markup=False, highlight=False)
    console.print(Rule(style="yellow"))
    console.print()


def print_summary_table(data: Mapping[str, object], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()
