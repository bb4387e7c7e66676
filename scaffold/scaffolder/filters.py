"""Exclusion filter applied while walking a template tree.

User patterns are shell-style globs (``fnmatch`` semantics, so ``*`` also
crosses ``/``) extended with ``{a,b}`` alternation.  They are matched against
the entry's path relative to the template root, in POSIX form.  Two exclusions
are structural and always active: any path component naming a version-control
directory, and the descriptor file at the template root.
"""

from __future__ import annotations

import fnmatch
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import PurePath, PurePosixPath

from scaffold.config import DESCRIPTOR_FILENAME
from scaffold.errors import BadPatternError

DEFAULT_VCS_DIRS: tuple[str, ...] = (".git",)


@dataclass(frozen=True)
class _CompiledPattern:
    source: str
    regex: re.Pattern[str]
    dir_only: bool


class ExclusionMatcher:
    """Decides whether a template entry is skipped."""

    def __init__(
        self,
        patterns: Iterable[_CompiledPattern] = (),
        descriptor_filename: str = DESCRIPTOR_FILENAME,
        vcs_dirs: Iterable[str] = DEFAULT_VCS_DIRS,
    ) -> None:
        self._patterns = tuple(patterns)
        self.descriptor_filename = descriptor_filename
        self.vcs_dirs = frozenset(vcs_dirs)

    @property
    def patterns(self) -> tuple[str, ...]:
        return tuple(dict.fromkeys(p.source for p in self._patterns))

    def excludes(self, relative_path: str | PurePath, is_dir: bool = False) -> bool:
        """Return ``True`` when the entry at *relative_path* must be skipped.

        Args:
            relative_path: Path relative to the template root.
            is_dir: Whether the entry is a directory; patterns written with a
                trailing ``/`` only apply to directories.
        """
        if isinstance(relative_path, PurePath):
            path = PurePosixPath(relative_path.as_posix())
        else:
            path = PurePosixPath(relative_path)
        if any(part in self.vcs_dirs for part in path.parts):
            return True
        text = str(path)
        if text == self.descriptor_filename:
            return True

        for pattern in self._patterns:
            if pattern.dir_only and not is_dir:
                continue
            if pattern.regex.match(text):
                return True
        return False


def compile_excludes(
    patterns: Iterable[str],
    descriptor_filename: str = DESCRIPTOR_FILENAME,
    vcs_dirs: Iterable[str] = DEFAULT_VCS_DIRS,
) -> ExclusionMatcher:
    """Compile glob *patterns* into one :class:`ExclusionMatcher`.

    Raises:
        BadPatternError: For an empty pattern, a trailing backslash, an
            unclosed ``[`` or ``{``, a reversed character range such as
            ``[z-a]``, or a pattern the regex engine rejects.
    """
    compiled: list[_CompiledPattern] = []
    for raw in patterns:
        _validate(raw)
        source = raw[2:] if raw.startswith("./") else raw
        dir_only = source.endswith("/")
        body = source.rstrip("/")
        if not body:
            raise BadPatternError(f"invalid exclude pattern {raw!r}: matches nothing", pattern=raw)
        for alternative in _expand_braces(body):
            try:
                regex = re.compile(fnmatch.translate(alternative))
            except re.error as exc:
                raise BadPatternError(
                    f"invalid exclude pattern {raw!r}: {exc}", pattern=raw
                ) from exc
            compiled.append(_CompiledPattern(raw, regex, dir_only))
    return ExclusionMatcher(compiled, descriptor_filename, vcs_dirs)


# ---------------------------------------------------------------------------
# Pattern validation & brace expansion
# ---------------------------------------------------------------------------


def _validate(pattern: str) -> None:
    if not isinstance(pattern, str) or not pattern.strip():
        raise BadPatternError(f"invalid exclude pattern {pattern!r}: empty", pattern=str(pattern))
    if (len(pattern) - len(pattern.rstrip("\\"))) % 2:
        raise BadPatternError(
            f"invalid exclude pattern {pattern!r}: dangling escape", pattern=pattern
        )

    depth = 0
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "[":
            end = pattern.find("]", i + 2 if pattern[i + 1:i + 2] in ("!", "]") else i + 1)
            if end == -1:
                raise BadPatternError(
                    f"invalid exclude pattern {pattern!r}: unclosed character class",
                    pattern=pattern,
                )
            _check_ranges(pattern, pattern[i + 1:end])
            i = end
        elif char == "{":
            depth += 1
        elif char == "}":
            if depth == 0:
                raise BadPatternError(
                    f"invalid exclude pattern {pattern!r}: unopened alternate group",
                    pattern=pattern,
                )
            depth -= 1
        i += 1
    if depth:
        raise BadPatternError(
            f"invalid exclude pattern {pattern!r}: unclosed alternate group",
            pattern=pattern,
        )


def _check_ranges(pattern: str, klass: str) -> None:
    body = klass[1:] if klass.startswith("!") else klass
    for match in re.finditer(r"(.)-(.)", body):
        low, high = match.groups()
        if low > high:
            raise BadPatternError(
                f"invalid exclude pattern {pattern!r}: invalid range {low}-{high}",
                pattern=pattern,
            )


def _expand_braces(pattern: str) -> list[str]:
    """``"src/{a,b}.py"`` -> ``["src/a.py", "src/b.py"]`` (nested groups allowed)."""
    start = pattern.find("{")
    if start == -1:
        return [pattern]

    depth = 0
    options: list[str] = []
    current = start + 1
    for i in range(start, len(pattern)):
        char = pattern[i]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                options.append(pattern[current:i])
                head, tail = pattern[:start], pattern[i + 1:]
                expanded: list[str] = []
                for option in options:
                    expanded.extend(_expand_braces(head + option + tail))
                return expanded
        elif char == "," and depth == 1:
            options.append(pattern[current:i])
            current = i + 1
    return [pattern]
