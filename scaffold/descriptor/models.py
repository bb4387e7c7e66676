"""Pydantic v2 models for the template descriptor (``.scaffold.toml``).

Defines the typed representation of a template's declared parameters and its
metadata (exclusions and post-generation notes).  Pure data: no I/O happens
here, see :mod:`scaffold.descriptor.loader` for reading the file.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Names injected by the engine itself; templates may not declare them.
RESERVED_PARAMETERS: frozenset[str] = frozenset({"name", "target_dir"})

ParameterValue = Union[str, int, float, bool, list["ParameterValue"]]


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class ParameterKind(str, Enum):
    """Declared type of a template parameter (the ``type`` key)."""
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    SELECT = "select"
    MULTISELECT = "multiselect"

    @property
    def has_choices(self) -> bool:
        return self in (ParameterKind.SELECT, ParameterKind.MULTISELECT)


# ---------------------------------------------------------------------------
# Parameter & descriptor models
# ---------------------------------------------------------------------------

class ParameterSpec(BaseModel):
    """One ``[parameters.<name>]`` table."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    message: str = Field(..., description="Prompt text shown to the user")
    required: bool = Field(default=False)
    kind: ParameterKind = Field(..., alias="type")
    default: Optional[Any] = Field(default=None)
    choices: tuple[Any, ...] = Field(
        default=(),
        alias="values",
        description="Allowed values for select and multiselect parameters",
    )

    @model_validator(mode="before")
    @classmethod
    def _coerce_default(cls, data: Any) -> Any:
        """Parse a scalar ``default`` into the declared type, or reject it."""
        if not isinstance(data, dict) or data.get("default") is None:
            return data
        try:
            kind = ParameterKind(data.get("type", data.get("kind")))
        except ValueError:
            # Reported by the ``kind`` field itself.
            return data
        if kind.has_choices:
            return data
        try:
            default = coerce_scalar(kind, data["default"])
        except ValueError as exc:
            raise ValueError(f"invalid default for a {kind.value} parameter: {exc}") from exc
        return {**data, "default": default}


class TemplateDescriptor(BaseModel):
    """Everything a template declares about itself.

    Accepts both the sectioned layout::

        [template]
        exclude = ["*.tmp"]
        notes = "cd {{ target_dir }}"

        [parameters.lang]
        type = "select"
        message = "Language?"
        values = ["go", "rust"]

    and ``exclude`` / ``notes`` as top-level keys.  Unknown keys are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    exclude: tuple[str, ...] = Field(default=())
    notes: Optional[str] = Field(default=None)
    parameters: dict[str, ParameterSpec] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _flatten_template_table(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        section = data.get("template")
        if not isinstance(section, dict):
            return data
        merged = {k: v for k, v in data.items() if k != "template"}
        for key in ("exclude", "notes"):
            if key in section:
                merged[key] = section[key]
        return merged

    @model_validator(mode="after")
    def _no_reserved_names(self) -> "TemplateDescriptor":
        clashes = sorted(RESERVED_PARAMETERS.intersection(self.parameters))
        if clashes:
            raise ValueError(
                f"parameter name(s) {', '.join(clashes)} are reserved by the engine"
            )
        return self

    def parameter_items(self) -> list[tuple[str, ParameterSpec]]:
        """Parameters in declaration order."""
        return list(self.parameters.items())


# ---------------------------------------------------------------------------
# Value coercion
# ---------------------------------------------------------------------------

_TRUE_WORDS = {"true", "yes", "y", "1", "on"}
_FALSE_WORDS = {"false", "no", "n", "0", "off"}


def coerce_scalar(kind: ParameterKind, raw: Any) -> ParameterValue:
    """Convert *raw* into the Python type for a scalar *kind*.

    Strings (as typed on a command line) are parsed; values already of the
    right type pass through.  Raises ``ValueError`` when the value does not fit.
    Select kinds are returned unchanged; matching them against the declared
    choices is the resolver's job.
    """
    if kind is ParameterKind.STRING:
        if isinstance(raw, (list, dict)):
            raise ValueError(f"expected a string, got {raw!r}")
        return str(raw)
    if kind is ParameterKind.INTEGER:
        if isinstance(raw, bool):
            raise ValueError(f"expected an integer, got {raw!r}")
        if isinstance(raw, int):
            return raw
        if isinstance(raw, str):
            return int(raw.strip())
        raise ValueError(f"expected an integer, got {raw!r}")
    if kind is ParameterKind.FLOAT:
        if isinstance(raw, bool):
            raise ValueError(f"expected a number, got {raw!r}")
        if isinstance(raw, (int, float)):
            return float(raw)
        if isinstance(raw, str):
            return float(raw.strip())
        raise ValueError(f"expected a number, got {raw!r}")
    if kind is ParameterKind.BOOLEAN:
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, str):
            word = raw.strip().lower()
            if word in _TRUE_WORDS:
                return True
            if word in _FALSE_WORDS:
                return False
        raise ValueError(f"expected a boolean, got {raw!r}")
    if kind in (ParameterKind.SELECT, ParameterKind.MULTISELECT):
        return raw
    raise ValueError(f"unsupported parameter kind: {kind!r}")
