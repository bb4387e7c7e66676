"""Shared pytest fixtures for the scaffold test suite.

Provides reusable fixtures for:
- Writing template trees (files, directories, descriptor) into ``tmp_path``
- A scripted prompter that replays canned answers and records every call
- Sealed parameter sets for renderer tests
- Snapshotting a directory tree to compare before/after a run
"""

from __future__ import annotations

import textwrap
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any, Optional

import pytest

from scaffold.resolver.parameters import ParameterSetBuilder, ResolvedParameters


# ---------------------------------------------------------------------------
# Template trees
# ---------------------------------------------------------------------------

def write_tree(root: Path, files: dict[str, str | bytes | None]) -> Path:
    """Create *files* under *root*.

    Keys are POSIX relative paths.  A ``None`` value creates an empty
    directory; ``bytes`` are written verbatim; strings are dedented.
    """
    root.mkdir(parents=True, exist_ok=True)
    for relative, content in files.items():
        path = root / relative
        if content is None:
            path.mkdir(parents=True, exist_ok=True)
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(textwrap.dedent(content), encoding="utf-8")
    return root


@pytest.fixture
def make_template(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a template tree with a ``.scaffold.toml`` descriptor.

    Usage:
        def test_x(make_template):
            root = make_template({"a.txt": "hi"}, descriptor='exclude = ["*.tmp"]')
    """
    def factory(
        files: dict[str, str | bytes | None],
        descriptor: str = "",
        name: str = "template",
    ) -> Path:
        root = tmp_path / name
        write_tree(root, files)
        (root / ".scaffold.toml").write_text(textwrap.dedent(descriptor), encoding="utf-8")
        return root

    return factory


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Empty base directory for generated projects."""
    out = tmp_path / "output"
    out.mkdir()
    return out


def snapshot(root: Path) -> dict[str, bytes | None]:
    """Map every path below *root* to its bytes (``None`` for directories)."""
    result: dict[str, bytes | None] = {}
    for path in sorted(root.rglob("*")):
        key = path.relative_to(root).as_posix()
        result[key] = None if path.is_dir() else path.read_bytes()
    return result


@pytest.fixture
def tree_snapshot() -> Callable[[Path], dict[str, bytes | None]]:
    return snapshot


# ---------------------------------------------------------------------------
# Prompter double
# ---------------------------------------------------------------------------

class ScriptedPrompter:
    """Replays canned answers in order and records each prompt.

    ``calls`` holds ``(method, message, extra)`` tuples so tests can assert
    on what was asked and in which order.
    """

    def __init__(self, answers: Sequence[Any] = ()) -> None:
        self.answers = list(answers)
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def _next(self, method: str, message: str, **extra: Any) -> Any:
        self.calls.append((method, message, extra))
        if not self.answers:
            raise AssertionError(f"unexpected prompt {method}: {message}")
        return self.answers.pop(0)

    def prompt_text(
        self, message: str, default: Optional[str] = None, allow_empty: bool = True
    ) -> str:
        return self._next("text", message, default=default, allow_empty=allow_empty)

    def prompt_integer(self, message: str, default: Optional[int] = None) -> int:
        return self._next("integer", message, default=default)

    def prompt_float(self, message: str, default: Optional[float] = None) -> float:
        return self._next("float", message, default=default)

    def prompt_bool(self, message: str, default: Optional[bool] = None) -> bool:
        return self._next("bool", message, default=default)

    def prompt_select(self, message: str, choices: Sequence[Any], default_index: int = 0) -> int:
        return self._next("select", message, choices=list(choices), default_index=default_index)

    def prompt_multiselect(
        self, message: str, choices: Sequence[Any], defaults: Sequence[int] = ()
    ) -> list[int]:
        return self._next("multiselect", message, choices=list(choices), defaults=list(defaults))


@pytest.fixture
def scripted_prompter() -> Callable[..., ScriptedPrompter]:
    """Factory: ``scripted_prompter("Widget", 1)`` answers two prompts."""
    def factory(*answers: Any) -> ScriptedPrompter:
        return ScriptedPrompter(answers)

    return factory


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------

@pytest.fixture
def sealed_params() -> Callable[..., ResolvedParameters]:
    """Factory building a sealed parameter set with the reserved keys filled."""
    def factory(**values: Any) -> ResolvedParameters:
        builder = ParameterSetBuilder()
        builder.set("name", values.pop("name", "Widget"))
        builder.set("target_dir", values.pop("target_dir", "/tmp/widget"))
        for key, value in values.items():
            builder.set(key, value)
        return builder.seal()

    return factory
