"""Interactive and scripted answers for command prompts."""

from __future__ import annotations

from typing import List, Mapping, Optional, Protocol, Sequence, TextIO, Tuple

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt


class Prompter(Protocol):
    """Questions the command flows may ask the user."""

    def confirm(self, message: str, *, default: bool) -> bool: ...

    def text(self, message: str, *, default: str) -> str: ...

    def select(self, message: str, groups: Mapping[str, Sequence[Tuple[str, str]]]) -> List[str]: ...


class ConsolePrompter:
    """Prompter backed by rich prompts on the terminal.

    ``stream`` replaces standard input, which keeps scripted sessions and
    tests independent of the real terminal.
    """

    def __init__(self, console: Console | None = None, stream: TextIO | None = None) -> None:
        self.console = console or Console()
        self._stream = stream

    def confirm(self, message: str, *, default: bool) -> bool:
        try:
            return Confirm.ask(escape(message), default=default, console=self.console, stream=self._stream)
        except EOFError:
            return default

    def text(self, message: str, *, default: str) -> str:
        try:
            answer = Prompt.ask(escape(message), default=default, console=self.console, stream=self._stream)
        except EOFError:
            return default
        return answer or default

    def select(self, message: str, groups: Mapping[str, Sequence[Tuple[str, str]]]) -> List[str]:
        """Show numbered choices grouped under headings; accept numbers or keys."""
        numbered: List[str] = []
        self.console.print(f"[bold]{escape(message)}[/bold]")
        for heading, choices in groups.items():
            self.console.rule(escape(heading), align="left")
            for key, label in choices:
                numbered.append(key)
                self.console.print(f"  {len(numbered):>3}. {escape(label)} [dim]({escape(key)})[/dim]")
        try:
            answer = Prompt.ask(
                "Enter numbers or keys separated by commas",
                default="",
                show_default=False,
                console=self.console,
                stream=self._stream,
            )
        except EOFError:
            return []
        return _parse_selection(answer, numbered)


def _parse_selection(answer: str, numbered: Sequence[str]) -> List[str]:
    selected: List[str] = []
    for token in answer.replace(" ", ",").split(","):
        token = token.strip()
        if not token:
            continue
        if token.isdigit() and 1 <= int(token) <= len(numbered):
            key = numbered[int(token) - 1]
        else:
            key = token
        if key not in selected:
            selected.append(key)
    return selected


class StaticPrompter:
    """Non-interactive prompter.

    Confirmations get ``answer`` when one is given, otherwise each question's
    own default, so unattended runs proceed but never overwrite files unasked.
    """

    def __init__(self, answer: Optional[bool] = None) -> None:
        self.answer = answer

    def confirm(self, message: str, *, default: bool) -> bool:
        return default if self.answer is None else self.answer

    def text(self, message: str, *, default: str) -> str:
        return default

    def select(self, message: str, groups: Mapping[str, Sequence[Tuple[str, str]]]) -> List[str]:
        return []


__all__ = ["ConsolePrompter", "Prompter", "StaticPrompter"]
