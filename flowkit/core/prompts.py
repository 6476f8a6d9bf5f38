"""Interface for asking the user things while an action runs."""

from typing import List, Optional, Protocol


class Prompter(Protocol):
    """Asynchronous user prompts. ``None`` means the user cancelled."""

    async def ask_text(
        self, prompt: str, default: Optional[str] = None, allow_empty: bool = False
    ) -> Optional[str]:
        """Ask for a line of text."""

    async def choose(self, options: List[str], prompt: str) -> Optional[str]:
        """Pick one of ``options``."""

    async def confirm(self, message: str) -> bool:
        """Yes/no question, defaulting to no."""
