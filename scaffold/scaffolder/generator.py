"""Materialization orchestrator.

Takes a local template root, its descriptor and a resolved parameter set, and
writes the rendered tree beneath a target directory.  Every directory and file
is visited once, depth-first; paths and contents both go through the
:class:`~scaffold.scaffolder.templates.TemplateRenderer`.
"""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Optional

from scaffold.config import ScaffoldConfig
from scaffold.descriptor.models import TemplateDescriptor
from scaffold.errors import ConflictError, InvalidValueError, TemplateIOError
from scaffold.resolver.parameters import ParameterSetBuilder, ResolvedParameters
from scaffold.scaffolder.filters import ExclusionMatcher, compile_excludes
from scaffold.scaffolder.templates import TemplateRenderer
from scaffold.scaffolder.walker import TemplateEntry, walk_template
from scaffold.utils import console, kebab_case, print_step, print_warning


@dataclass
class MaterializeResult:
    """What a run produced."""

    target_dir: Path
    parameters: ResolvedParameters
    directories: list[Path] = field(default_factory=list)
    files: list[Path] = field(default_factory=list)
    notes: Optional[str] = None


class Materializer:
    """Renders a template tree into a target directory.

    Conflict policy:
    - create (default): write into ``<base>/<kebab-cased name>``, failing with
      :class:`ConflictError` if it exists, unless ``force`` wipes it first.
    - append: write straight into ``<base>``, which must already exist.
    """

    def __init__(
        self,
        template_root: str | Path,
        descriptor: TemplateDescriptor,
        renderer: TemplateRenderer | None = None,
        matcher: ExclusionMatcher | None = None,
        config: ScaffoldConfig | None = None,
        verbose: bool = False,
    ) -> None:
        self.config = config or ScaffoldConfig()
        self.template_root = Path(template_root)
        self.descriptor = descriptor
        self.renderer = renderer or TemplateRenderer(self.config.render)
        self.matcher = matcher or compile_excludes(
            descriptor.exclude,
            descriptor_filename=self.config.descriptor_filename,
            vcs_dirs=self.config.vcs_dirs,
        )
        self.verbose = verbose

    # -- Public API --------------------------------------------------------

    def prepare_target(
        self,
        name: str,
        base_dir: str | Path | None = None,
        force: bool = False,
        append: bool = False,
    ) -> Path:
        """Create (or reuse, in append mode) the output directory.

        Returns:
            The canonical absolute path of the directory.

        Raises:
            ConflictError: Create mode, directory exists, ``force`` not set.
            InvalidValueError: Create mode and *name* kebab-cases to nothing,
                which would make the base directory itself the target.
            TemplateIOError: The directory cannot be removed, created or
                canonicalized.
        """
        dir_path = Path(base_dir) if base_dir is not None else Path.cwd()

        if append:
            print_step(f"Append to directory {dir_path}...")
        else:
            dir_name = kebab_case(name)
            if not dir_name:
                raise InvalidValueError(
                    f"project name {name!r} has no letters or digits to name a directory",
                    parameter="name",
                )
            dir_path = dir_path / dir_name
            if dir_path.exists() or dir_path.is_symlink():
                if not force:
                    raise ConflictError(
                        f"cannot create {dir_path} because it already exists",
                        path=dir_path,
                    )
                print_warning(f"Override directory {dir_path}...")
                _remove(dir_path)
            try:
                dir_path.mkdir(parents=True)
            except OSError as exc:
                raise TemplateIOError(f"cannot create directory {dir_path}: {exc}", path=dir_path) from exc

        try:
            return dir_path.resolve(strict=True)
        except OSError as exc:
            raise TemplateIOError(f"cannot canonicalize path {dir_path}: {exc}", path=dir_path) from exc

    def materialize(
        self,
        builder: ParameterSetBuilder,
        base_dir: str | Path | None = None,
        force: bool = False,
        append: bool = False,
    ) -> MaterializeResult:
        """Prepare the target, seal the parameters and render every entry.

        Args:
            builder: Resolved parameters, still open, holding ``name``.
            base_dir: Parent of the project directory (cwd when ``None``).
            force: Replace an existing project directory.
            append: Write directly into *base_dir*.

        Raises:
            ConflictError: Before anything is written.
            RenderError: A file content, path or the notes failed to render.
            TemplateIOError: Any filesystem failure; the run stops there and
                already written entries are left in place.
        """
        target = self.prepare_target(str(builder.get("name")), base_dir, force, append)
        builder.set("target_dir", str(target))
        parameters = builder.seal()

        result = MaterializeResult(target_dir=target, parameters=parameters)
        print_step("Templating files...")
        for entry in walk_template(self.template_root, self.matcher):
            if entry.is_dir:
                result.directories.append(self._create_directory(entry, target, parameters, append))
            else:
                result.files.append(self._write_file(entry, target, parameters))

        if self.descriptor.notes:
            result.notes = self.renderer.render(self.descriptor.notes, parameters, source="notes")
        return result

    # -- Entries -----------------------------------------------------------

    def _create_directory(
        self,
        entry: TemplateEntry,
        target: Path,
        parameters: ResolvedParameters,
        append: bool,
    ) -> Path:
        destination = self._destination(entry, target, parameters)
        try:
            destination.mkdir(exist_ok=append)
        except OSError as exc:
            raise TemplateIOError(f"cannot create dir {destination}: {exc}", path=destination) from exc
        if self.verbose:
            console.print(f"  [dim]dir[/dim]  {destination}")
        return destination

    def _write_file(
        self, entry: TemplateEntry, target: Path, parameters: ResolvedParameters
    ) -> Path:
        encoding = self.config.encoding
        try:
            with open(entry.source_path, encoding=encoding, newline="") as handle:
                content = handle.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise TemplateIOError(
                f"cannot read file {entry.source_path}: {exc}", path=entry.source_path
            ) from exc

        rendered = self.renderer.render(content, parameters, source=entry.relative_path)
        destination = self._destination(entry, target, parameters)
        try:
            with open(destination, "w", encoding=encoding, newline="") as handle:
                handle.write(rendered)
            shutil.copymode(entry.source_path, destination)
        except OSError as exc:
            raise TemplateIOError(f"cannot create file {destination}: {exc}", path=destination) from exc
        if self.verbose:
            console.print(f"  [dim]file[/dim] {destination}")
        return destination

    def _destination(
        self, entry: TemplateEntry, target: Path, parameters: ResolvedParameters
    ) -> Path:
        """Render the entry's relative path and place it under *target*."""
        rendered = self.renderer.render(
            entry.relative_path.as_posix(),
            parameters,
            source=f"path of {entry.relative_path}",
        )
        relative = PurePosixPath(rendered)
        if not rendered.strip() or relative.is_absolute() or ".." in relative.parts:
            raise TemplateIOError(
                f"rendered path {rendered!r} for {entry.relative_path} escapes {target}",
                path=entry.source_path,
            )
        return target.joinpath(*relative.parts)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _remove(path: Path) -> None:
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            os.remove(path)
    except OSError as exc:
        raise TemplateIOError(f"cannot remove directory {path}: {exc}", path=path) from exc
