"""Template descriptor -- typed model of ``.scaffold.toml``.

Quick usage::

    from scaffold.descriptor import load_descriptor

    descriptor = load_descriptor("/path/to/template")
    for name, spec in descriptor.parameter_items():
        print(name, spec.kind, spec.message)
"""

from scaffold.descriptor.loader import load_descriptor, parse_descriptor
from scaffold.descriptor.models import (
    RESERVED_PARAMETERS,
    ParameterKind,
    ParameterSpec,
    ParameterValue,
    TemplateDescriptor,
    coerce_scalar,
)

__all__ = [
    "RESERVED_PARAMETERS",
    "ParameterKind",
    "ParameterSpec",
    "ParameterValue",
    "TemplateDescriptor",
    "coerce_scalar",
    "load_descriptor",
    "parse_descriptor",
]
