"""Interactive prompting used to collect parameter values.

The resolver only depends on the :class:`Prompter` protocol; :class:`RichPrompter`
is the terminal implementation built on ``rich.prompt``.  Every method blocks
until the user answers and raises :class:`~scaffold.errors.PromptError` when
the input stream is closed.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Optional, Protocol, TextIO

from rich.console import Console
from rich.prompt import Confirm, FloatPrompt, IntPrompt, Prompt

from scaffold.errors import PromptError
from scaffold.utils import console as default_console


class Prompter(Protocol):
    """What the parameter resolver needs from an interactive front-end."""

    def prompt_text(
        self, message: str, default: Optional[str] = None, allow_empty: bool = True
    ) -> str: ...

    def prompt_integer(self, message: str, default: Optional[int] = None) -> int: ...

    def prompt_float(self, message: str, default: Optional[float] = None) -> float: ...

    def prompt_bool(self, message: str, default: Optional[bool] = None) -> bool: ...

    def prompt_select(
        self, message: str, choices: Sequence[Any], default_index: int = 0
    ) -> int: ...

    def prompt_multiselect(
        self,
        message: str,
        choices: Sequence[Any],
        defaults: Sequence[int] = (),
    ) -> list[int]: ...


class RichPrompter:
    """Terminal prompts rendered with Rich.

    Select prompts print a numbered list and return the zero-based index of the
    chosen item.  Multiselect prompts accept comma-separated numbers and return
    the indexes in the order they were typed.
    """

    def __init__(self, console: Console | None = None, stream: TextIO | None = None) -> None:
        self.console = console or default_console
        self.stream = _LineStream(stream) if stream is not None else None

    # -- Scalar prompts ----------------------------------------------------

    def prompt_text(
        self, message: str, default: Optional[str] = None, allow_empty: bool = True
    ) -> str:
        while True:
            answer = self._ask(Prompt, message, default)
            if answer or allow_empty:
                return answer
            self.console.print("[prompt.invalid]A value is required")

    def prompt_integer(self, message: str, default: Optional[int] = None) -> int:
        return self._ask(IntPrompt, message, default)

    def prompt_float(self, message: str, default: Optional[float] = None) -> float:
        return self._ask(FloatPrompt, message, default)

    def prompt_bool(self, message: str, default: Optional[bool] = None) -> bool:
        return self._ask(Confirm, message, default)

    # -- Choice prompts ----------------------------------------------------

    def prompt_select(
        self, message: str, choices: Sequence[Any], default_index: int = 0
    ) -> int:
        self._print_choices(message, choices)
        numbers = [str(i) for i in range(1, len(choices) + 1)]
        answer = self._ask(
            Prompt,
            "Choose one",
            str(default_index + 1),
            choices=numbers,
            show_choices=False,
        )
        return int(answer) - 1

    def prompt_multiselect(
        self,
        message: str,
        choices: Sequence[Any],
        defaults: Sequence[int] = (),
    ) -> list[int]:
        self._print_choices(message, choices)
        default = ",".join(str(i + 1) for i in defaults)
        while True:
            answer = self._ask(
                Prompt, "Choose any (comma-separated numbers, empty for none)", default
            )
            try:
                return _parse_indexes(answer, len(choices))
            except ValueError as exc:
                self.console.print(f"[prompt.invalid]{exc}")

    # -- Internals ---------------------------------------------------------

    def _print_choices(self, message: str, choices: Sequence[Any]) -> None:
        self.console.print(f"[prompt]{message}")
        for number, choice in enumerate(choices, start=1):
            self.console.print(f"  [prompt.choices]{number})[/prompt.choices] {choice}")

    def _ask(self, prompt_cls: Any, message: str, default: Any, **kwargs: Any) -> Any:
        if default is not None:
            kwargs["default"] = default
        try:
            return prompt_cls.ask(message, console=self.console, stream=self.stream, **kwargs)
        except EOFError as exc:
            raise PromptError(f"input closed while asking: {message}") from exc


class _LineStream:
    """Make a text stream answer like ``input()``.

    Rich reads ``stream.readline()`` verbatim; without this the trailing
    newline defeats default answers and end-of-input never stops a prompt.
    """

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    def readline(self) -> str:
        line = self._stream.readline()
        if not line:
            raise EOFError
        return line.rstrip("\r\n")


def _parse_indexes(answer: str, count: int) -> list[int]:
    """Parse ``"3, 1"`` into ``[2, 0]``, preserving order and dropping repeats."""
    indexes: list[int] = []
    for part in answer.split(","):
        part = part.strip()
        if not part:
            continue
        if not part.isdigit() or not 1 <= int(part) <= count:
            raise ValueError(f"Please enter numbers between 1 and {count}")
        index = int(part) - 1
        if index not in indexes:
            indexes.append(index)
    return indexes
