"""Exception hierarchy for the scaffold engine.

Every failure is fatal to a run.  Each exception carries the context that
produced it (a path, a parameter name, a glob pattern, a command) so the CLI
can report a single human-readable line.
"""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for every error raised by the engine."""


# ---------------------------------------------------------------------------
# Pre-flight errors
# ---------------------------------------------------------------------------


class DescriptorError(ScaffoldError):
    """Raised when the template descriptor cannot be loaded."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class DescriptorNotFoundError(DescriptorError):
    """No descriptor file exists at the template root."""


class DescriptorMalformedError(DescriptorError):
    """The descriptor file is not valid TOML or does not match the schema."""


class ResolverError(ScaffoldError):
    """Raised when a declared parameter cannot be resolved."""

    def __init__(self, message: str, parameter: str = "") -> None:
        self.parameter = parameter
        super().__init__(message)


class EmptyChoicesError(ResolverError):
    """A select or multiselect parameter declares no values."""


class InvalidValueError(ResolverError):
    """A supplied value does not fit the declared parameter type."""


class FilterError(ScaffoldError):
    """Raised when the exclusion patterns cannot be compiled."""


class BadPatternError(FilterError):
    def __init__(self, message: str, pattern: str = "") -> None:
        self.pattern = pattern
        super().__init__(message)


class ConflictError(ScaffoldError):
    """The target directory already exists and ``force`` was not given."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__(message)


# ---------------------------------------------------------------------------
# Mid-run errors
# ---------------------------------------------------------------------------


class RenderError(ScaffoldError):
    """A template string failed to render (syntax error, unknown filter...)."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class TemplateIOError(ScaffoldError):
    """Reading, writing, creating or removing a path failed."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__(message)


# ---------------------------------------------------------------------------
# Collaborator errors
# ---------------------------------------------------------------------------


class FetchError(ScaffoldError):
    """Raised when a template location cannot be turned into a local path."""

    def __init__(self, message: str, command: str = "", stderr: str = "") -> None:
        self.command = command
        self.stderr = stderr
        super().__init__(message)


class PromptError(ScaffoldError):
    """Raised when the interactive prompt cannot obtain an answer."""
