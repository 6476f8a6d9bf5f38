"""Console output helpers shared by the CLI commands.

Everything flowkit prints outside of error panels goes through
``DisplayUtils`` so the Nord palette and panel sizing stay consistent.
"""

from typing import Optional, Union

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

# Nord color palette
NORD_COLORS = {
    "nord3": "#4c566a",  # Muted gray (dim text)
    "nord4": "#d8dee9",  # Light gray
    "nord7": "#8fbcbb",  # Teal - Info
    "nord8": "#88c0d0",  # Light blue - branch kinds
    "nord11": "#bf616a",  # Red - Errors
    "nord13": "#ebcb8b",  # Yellow - Warnings
    "nord14": "#a3be8c",  # Green - Success, current kind
    "nord15": "#5e81ac",  # Blue
}


class DisplayUtils:
    """Styled messages on one console."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def _calculate_panel_width(
        self,
        content: Union[str, Text],
        title: str = "",
        min_width: int = 40,
        max_width: int = 80,
    ) -> int:
        """Fit the panel to its longest line, within bounds."""
        plain = content.plain if isinstance(content, Text) else content
        longest = max((len(line) for line in plain.split("\n")), default=0)
        # Room for the title plus borders and padding
        return max(min_width, min(max(longest, len(title) + 4) + 6, max_width))

    def _panel(self, content: str, title: str, color: str, max_width: int = 70):
        self.console.print()
        self.console.print(
            Panel(
                content,
                title=f" {title}",
                title_align="left",
                border_style=color,
                padding=(1, 2),
                width=self._calculate_panel_width(content, title, max_width=max_width),
                expand=False,
            )
        )
        self.console.print()

    def warning(
        self,
        message: str,
        title: Optional[str] = None,
        context: Optional[str] = None,
        use_panel: bool = True,
    ) -> None:
        """Display a warning, with optional context such as a file path."""
        color = NORD_COLORS["nord13"]
        if use_panel:
            content = f"{message}\n\n{context}" if context else message
            self._panel(content, title or "⚠ Warning", color)
            return
        self.console.print(f"[{color}]⚠ {message}[/{color}]")
        if context:
            self.dim(f"  {context}")

    def info(
        self, message: str, title: Optional[str] = None, use_panel: bool = True
    ) -> None:
        color = NORD_COLORS["nord7"]
        if use_panel:
            self._panel(message, title or "◆ Info", color)
        else:
            self.console.print(f"[{color}]◆ {message}[/{color}]")

    def success(self, message: str) -> None:
        color = NORD_COLORS["nord14"]
        self.console.print(f"[{color}][OK] {message}[/{color}]")

    def dim(self, message: str) -> None:
        color = NORD_COLORS["nord3"]
        self.console.print(f"[{color}]{message}[/{color}]")

    def command_output(self, text: str) -> None:
        """Print workflow CLI output verbatim, without markup."""
        text = text.rstrip()
        if text:
            self.console.print(Text(text))
