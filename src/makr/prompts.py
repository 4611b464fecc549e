"""Interactive input for commands, built on rich.prompt.

Ctrl-C or end-of-input at any prompt raises PromptCancelledError so a
command can abort before it has changed anything.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt
from rich.table import Table

from makr.exceptions import PromptCancelledError

# Returns an error message, or None when the value is acceptable.
Validator = Callable[[str], "str | None"]


@dataclass
class Choice:
    """One option of a single-select prompt."""

    value: str
    label: str
    hint: str = ""


class Prompter:
    """Scalar prompts: text, password, confirm, single-select."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def _ask(self, ask: Callable[[], object]):
        try:
            return ask()
        except (KeyboardInterrupt, EOFError):
            self.console.print()
            raise PromptCancelledError()

    def text(
        self,
        message: str,
        default: str | None = None,
        validate: Validator | None = None,
    ) -> str:
        """Ask for a line of text, re-asking until ``validate`` accepts it."""
        while True:
            value = self._ask(
                lambda: Prompt.ask(
                    f"[bold]{message}[/bold]",
                    console=self.console,
                    default=default if default is not None else "",
                    show_default=bool(default),
                )
            )
            value = (value or "").strip()
            problem = validate(value) if validate else None
            if problem is None:
                return value
            self.console.print(f"[red]{escape(problem)}[/red]")

    def password(self, message: str) -> str:
        value = self._ask(
            lambda: Prompt.ask(
                f"[bold]{message}[/bold]", console=self.console, password=True, default=""
            )
        )
        return (value or "").strip()

    def confirm(self, message: str, default: bool = False) -> bool:
        return bool(
            self._ask(
                lambda: Confirm.ask(
                    f"[bold]{message}[/bold]", console=self.console, default=default
                )
            )
        )

    def select(self, message: str, choices: Sequence[Choice]) -> str:
        """Show numbered choices and return the chosen ``Choice.value``."""
        if not choices:
            raise ValueError("select() needs at least one choice")

        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("Key", style="bold yellow", width=4)
        table.add_column("Option", style="bold white")
        table.add_column("Hint", style="dim")
        for i, choice in enumerate(choices, start=1):
            table.add_row(f"[{i}]", escape(choice.label), escape(choice.hint))
        self.console.print(f"[bold cyan]{message}[/bold cyan]")
        self.console.print(table)

        keys = [str(i) for i in range(1, len(choices) + 1)]
        picked = self._ask(
            lambda: Prompt.ask(
                "[bold yellow]Select an option[/bold yellow]",
                console=self.console,
                choices=keys,
                default="1",
            )
        )
        return choices[int(picked) - 1].value
