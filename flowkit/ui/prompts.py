"""Interactive prompts backed by rich."""

import asyncio
from typing import Optional, Sequence

from rich.console import Console
from rich.prompt import Confirm, IntPrompt, Prompt

from .display_utils import NORD_COLORS


class ConsolePrompter:
    """``Prompter`` that asks on the terminal.

    Blocking rich prompts run in the default executor so the event loop
    keeps serving refreshes while the user types.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    async def ask_text(
        self, prompt: str, default: Optional[str] = None, allow_empty: bool = False
    ) -> Optional[str]:
        loop = asyncio.get_event_loop()
        answer = await loop.run_in_executor(
            None,
            lambda: Prompt.ask(prompt, default=default or "", console=self.console),
        )
        answer = answer.strip()
        if not answer and not allow_empty:
            return None
        return answer

    async def choose(self, options: Sequence[str], prompt: str) -> Optional[str]:
        if not options:
            return None
        color = NORD_COLORS["nord8"]
        self.console.print(f"[bold]{prompt}[/bold]")
        for i, option in enumerate(options, 1):
            self.console.print(f"  [{color}]{i}.[/{color}] {option}")

        loop = asyncio.get_event_loop()
        choice = await loop.run_in_executor(
            None,
            lambda: IntPrompt.ask(
                "Choice",
                choices=[str(i) for i in range(0, len(options) + 1)],
                default=1,
                show_choices=False,
                console=self.console,
            ),
        )
        # 0 cancels
        if choice == 0:
            return None
        return options[choice - 1]

    async def confirm(self, message: str) -> bool:
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(
            None, lambda: Confirm.ask(message, default=False, console=self.console)
        )
