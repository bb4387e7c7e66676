"""Depth-first traversal of a template tree.

Yields one :class:`TemplateEntry` per directory and file, a directory always
before its contents.  Excluded directories are pruned: their subtree is never
listed.  Names are visited in sorted order so runs are reproducible.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath

from scaffold.errors import TemplateIOError
from scaffold.scaffolder.filters import ExclusionMatcher


class EntryKind(str, Enum):
    DIRECTORY = "directory"
    FILE = "file"


@dataclass(frozen=True)
class TemplateEntry:
    """A single node of the template tree."""

    kind: EntryKind
    relative_path: PurePosixPath
    source_path: Path

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


def walk_template(root: str | Path, matcher: ExclusionMatcher) -> Iterator[TemplateEntry]:
    """Lazily yield every non-excluded entry below *root* (never *root* itself).

    Symlinks are not followed into: a link is reported as a file and its
    target's content is read when rendered.

    Raises:
        TemplateIOError: If a directory cannot be listed.
    """
    yield from _walk(Path(root), PurePosixPath(), matcher)


def _walk(
    directory: Path, relative: PurePosixPath, matcher: ExclusionMatcher
) -> Iterator[TemplateEntry]:
    try:
        with os.scandir(directory) as it:
            children = sorted(it, key=lambda e: e.name)
    except OSError as exc:
        raise TemplateIOError(f"cannot read entry {directory}: {exc}", path=directory) from exc

    for child in children:
        child_relative = relative / child.name
        is_dir = child.is_dir(follow_symlinks=False)
        if matcher.excludes(child_relative, is_dir=is_dir):
            continue
        child_path = Path(child.path)
        if is_dir:
            yield TemplateEntry(EntryKind.DIRECTORY, child_relative, child_path)
            yield from _walk(child_path, child_relative, matcher)
        else:
            yield TemplateEntry(EntryKind.FILE, child_relative, child_path)
