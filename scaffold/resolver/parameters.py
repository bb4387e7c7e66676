"""Two-phase parameter set: a mutable builder sealed into a read-only map.

Declared parameters and the project name are collected first; ``target_dir``
is only known once the materializer has prepared the output directory.  The
renderer only ever receives the sealed :class:`ResolvedParameters`.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from scaffold.descriptor.models import RESERVED_PARAMETERS, ParameterValue


class ResolvedParameters(Mapping[str, ParameterValue]):
    """Immutable mapping of parameter name to value, reserved keys included."""

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, ParameterValue]) -> None:
        self._values: dict[str, ParameterValue] = dict(values)

    def __getitem__(self, key: str) -> ParameterValue:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ResolvedParameters({self._values!r})"

    @property
    def name(self) -> str:
        return str(self._values["name"])

    @property
    def target_dir(self) -> str:
        return str(self._values["target_dir"])

    def as_context(self) -> dict[str, Any]:
        """Return a fresh dict suitable as a template context."""
        return dict(self._values)


class ParameterSetBuilder:
    """Collects values until :meth:`seal` is called exactly once."""

    def __init__(self) -> None:
        self._values: dict[str, ParameterValue] = {}
        self._sealed = False

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    @property
    def sealed(self) -> bool:
        return self._sealed

    def set(self, key: str, value: ParameterValue) -> "ParameterSetBuilder":
        if self._sealed:
            raise RuntimeError("parameter set is already sealed")
        self._values[key] = value
        return self

    def seal(self) -> ResolvedParameters:
        """Freeze the collected values.

        Raises:
            RuntimeError: If already sealed or a reserved key is missing.
        """
        if self._sealed:
            raise RuntimeError("parameter set is already sealed")
        missing = sorted(RESERVED_PARAMETERS.difference(self._values))
        if missing:
            raise RuntimeError(f"cannot seal parameters, missing: {', '.join(missing)}")
        self._sealed = True
        return ResolvedParameters(self._values)
