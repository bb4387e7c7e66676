"""Turn declared parameters into concrete values.

Parameters are resolved in declaration order.  A value is taken from the
pre-supplied map when present, otherwise the user is prompted.  The project
name is resolved last.  The returned builder is still open: the materializer
adds ``target_dir`` and seals it.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Optional

from scaffold.descriptor.models import (
    ParameterKind,
    ParameterSpec,
    ParameterValue,
    coerce_scalar,
)
from scaffold.errors import EmptyChoicesError, InvalidValueError
from scaffold.resolver.parameters import ParameterSetBuilder
from scaffold.resolver.prompter import Prompter
from scaffold.utils import kebab_case

NAME_PROMPT = "What is the name of your generated project ?"


class ParameterResolver:
    """Collects one value per declared parameter plus the project name."""

    def __init__(self, prompter: Prompter) -> None:
        self.prompter = prompter

    def resolve(
        self,
        specs: Iterable[tuple[str, ParameterSpec]],
        preset_name: Optional[str] = None,
        preset_values: Optional[Mapping[str, Any]] = None,
    ) -> ParameterSetBuilder:
        """Resolve every declared parameter, then the project name.

        Args:
            specs: ``(name, spec)`` pairs in declaration order.
            preset_name: Project name given up front; prompts when ``None``.
            preset_values: Values given up front (e.g. ``--param`` flags),
                keyed by parameter name.  Strings are parsed into the
                declared type.

        Returns:
            An unsealed builder holding every declared parameter and ``name``.

        Raises:
            EmptyChoicesError: A select/multiselect parameter has no values.
            InvalidValueError: A pre-supplied value does not fit its spec.
            PromptError: The prompter could not obtain an answer.
        """
        preset_values = preset_values or {}
        builder = ParameterSetBuilder()

        for name, spec in specs:
            if spec.kind.has_choices and not spec.choices:
                raise EmptyChoicesError(
                    f"cannot make a {spec.kind.value} parameter '{name}' with empty values",
                    parameter=name,
                )
            if name in preset_values:
                value = self._from_preset(name, spec, preset_values[name])
            else:
                value = self._prompt(spec)
            builder.set(name, value)

        builder.set("name", self._resolve_name(preset_name))
        return builder

    # -- Project name ------------------------------------------------------

    def _resolve_name(self, preset_name: Optional[str]) -> str:
        if preset_name is not None:
            name = preset_name
        else:
            name = self.prompter.prompt_text(NAME_PROMPT, allow_empty=False)
        if not name.strip():
            raise InvalidValueError("project name cannot be empty", parameter="name")
        if not kebab_case(name):
            raise InvalidValueError(
                f"project name {name!r} has no letters or digits to name a directory",
                parameter="name",
            )
        return name

    # -- Prompting ---------------------------------------------------------

    def _prompt(self, spec: ParameterSpec) -> ParameterValue:
        kind = spec.kind
        default = spec.default
        if kind is ParameterKind.STRING:
            return self.prompter.prompt_text(
                spec.message,
                default=None if default is None else str(default),
                allow_empty=not spec.required,
            )
        if kind is ParameterKind.INTEGER:
            return self.prompter.prompt_integer(spec.message, default=default)
        if kind is ParameterKind.FLOAT:
            return self.prompter.prompt_float(
                spec.message, default=None if default is None else float(default)
            )
        if kind is ParameterKind.BOOLEAN:
            return self.prompter.prompt_bool(spec.message, default=default)
        if kind is ParameterKind.SELECT:
            index = self.prompter.prompt_select(
                spec.message, spec.choices, default_index=_default_index(spec)
            )
            return spec.choices[index]
        if kind is ParameterKind.MULTISELECT:
            indexes = self.prompter.prompt_multiselect(
                spec.message, spec.choices, defaults=_default_indexes(spec)
            )
            return [spec.choices[i] for i in indexes]
        raise InvalidValueError(f"unsupported parameter type {kind!r}")

    # -- Pre-supplied values -----------------------------------------------

    def _from_preset(self, name: str, spec: ParameterSpec, raw: Any) -> ParameterValue:
        if spec.kind is ParameterKind.SELECT:
            return _match_choice(name, spec.choices, raw)
        if spec.kind is ParameterKind.MULTISELECT:
            items = raw.split(",") if isinstance(raw, str) else raw
            if not isinstance(items, (list, tuple)):
                raise InvalidValueError(
                    f"parameter '{name}' expects a list of values, got {raw!r}",
                    parameter=name,
                )
            return [
                _match_choice(name, spec.choices, item.strip() if isinstance(item, str) else item)
                for item in items
                if not (isinstance(item, str) and not item.strip())
            ]
        try:
            return coerce_scalar(spec.kind, raw)
        except ValueError as exc:
            raise InvalidValueError(
                f"invalid value for parameter '{name}': {exc}", parameter=name
            ) from exc


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _match_choice(name: str, choices: Sequence[Any], raw: Any) -> Any:
    """Return the declared choice equal to *raw* (or to its string form)."""
    for choice in choices:
        # True == 1 in Python; keep booleans and numbers apart.
        if choice == raw and isinstance(choice, bool) == isinstance(raw, bool):
            return choice
    if isinstance(raw, str):
        for choice in choices:
            if str(choice) == raw:
                return choice
    allowed = ", ".join(str(c) for c in choices)
    raise InvalidValueError(
        f"value {raw!r} for parameter '{name}' is not one of: {allowed}",
        parameter=name,
    )


def _default_index(spec: ParameterSpec) -> int:
    if spec.default is not None:
        for index, choice in enumerate(spec.choices):
            if choice == spec.default:
                return index
    return 0


def _default_indexes(spec: ParameterSpec) -> list[int]:
    if spec.default is None:
        return []
    wanted = spec.default if isinstance(spec.default, (list, tuple)) else [spec.default]
    return [i for i, choice in enumerate(spec.choices) if choice in wanted]
