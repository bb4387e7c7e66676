"""Read and validate the descriptor file at a template root."""

from __future__ import annotations

from pathlib import Path

import toml
from pydantic import ValidationError

from scaffold.config import DESCRIPTOR_FILENAME
from scaffold.descriptor.models import TemplateDescriptor
from scaffold.errors import DescriptorMalformedError, DescriptorNotFoundError


def parse_descriptor(text: str, source: str | Path | None = None) -> TemplateDescriptor:
    """Parse descriptor TOML *text* into a ``TemplateDescriptor``.

    Raises:
        DescriptorMalformedError: On a TOML syntax error or a schema mismatch.
    """
    label = str(source) if source is not None else "<string>"
    try:
        data = toml.loads(text)
    except toml.TomlDecodeError as exc:
        raise DescriptorMalformedError(
            f"cannot parse {label}: {exc}", path=source
        ) from exc

    try:
        return TemplateDescriptor.model_validate(data)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in exc.errors()
        )
        raise DescriptorMalformedError(
            f"invalid descriptor {label}: {problems}", path=source
        ) from exc


def load_descriptor(
    template_root: str | Path,
    filename: str = DESCRIPTOR_FILENAME,
) -> TemplateDescriptor:
    """Load the descriptor found at *template_root*.

    Args:
        template_root: Local directory holding the template.
        filename: Descriptor file name, ``.scaffold.toml`` by default.

    Returns:
        The parsed, immutable descriptor.

    Raises:
        DescriptorNotFoundError: If the file does not exist.
        DescriptorMalformedError: If it cannot be read or parsed.
    """
    path = Path(template_root) / filename
    if not path.is_file():
        raise DescriptorNotFoundError(
            f"cannot open {filename} in {template_root}", path=path
        )
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DescriptorMalformedError(f"cannot read {path}: {exc}", path=path) from exc
    return parse_descriptor(text, source=path)
