"""Scaffold engine configuration.

Centralised, typed configuration for a materialization run.  All settings use
Pydantic v2 models so they can be validated at construction time and
serialised to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

DESCRIPTOR_FILENAME = ".scaffold.toml"


class RenderConfig(BaseModel):
    """Options forwarded to the Jinja2 environment."""

    trim_blocks: bool = Field(default=True)
    lstrip_blocks: bool = Field(default=True)
    keep_trailing_newline: bool = Field(default=True)
    strict_undefined: bool = Field(
        default=False,
        description="Fail rendering on undefined variables instead of rendering them empty",
    )


class FetchConfig(BaseModel):
    """Settings for fetching remote templates."""

    cache_dir: Path = Field(default_factory=lambda: Path(tempfile.gettempdir()))
    clone_timeout: int = Field(default=300, ge=1, description="git clone timeout in seconds")
    clone_depth: int = Field(default=1, ge=0, description="0 clones the full history")


class ScaffoldConfig(BaseModel):
    """Global scaffold configuration.

    Instances are typically created once by the CLI entry point and passed
    through the rest of the system.
    """

    descriptor_filename: str = Field(default=DESCRIPTOR_FILENAME)
    vcs_dirs: list[str] = Field(default_factory=lambda: [".git"])
    encoding: str = Field(default="utf-8")
    render: RenderConfig = Field(default_factory=RenderConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)

    @field_validator("descriptor_filename")
    @classmethod
    def _plain_filename(cls, value: str) -> str:
        if not value or "/" in value or "\\" in value:
            raise ValueError("descriptor_filename must be a bare file name")
        return value

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file and return its path."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return path

    @classmethod
    def load(cls, path: Path) -> "ScaffoldConfig":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "ScaffoldConfig":
        """Build a ``ScaffoldConfig`` from environment variables.

        Recognised variables (all optional):
            SCAFFOLD_CACHE_DIR, SCAFFOLD_CLONE_TIMEOUT, SCAFFOLD_STRICT_UNDEFINED.
        """
        fetch_kwargs: dict[str, object] = {}
        if os.environ.get("SCAFFOLD_CACHE_DIR"):
            fetch_kwargs["cache_dir"] = Path(os.environ["SCAFFOLD_CACHE_DIR"])
        if os.environ.get("SCAFFOLD_CLONE_TIMEOUT"):
            fetch_kwargs["clone_timeout"] = int(os.environ["SCAFFOLD_CLONE_TIMEOUT"])

        render_kwargs: dict[str, object] = {}
        strict = os.environ.get("SCAFFOLD_STRICT_UNDEFINED", "")
        if strict:
            render_kwargs["strict_undefined"] = strict.strip().lower() in ("1", "true", "yes")

        return cls(
            render=RenderConfig(**render_kwargs),
            fetch=FetchConfig(**fetch_kwargs),
        )
