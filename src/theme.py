"""
Shared rich consoles for secure-npm output
"""

from rich.console import Console
from rich.theme import Theme

dark_theme = Theme({
    "info": "bright_cyan",
    "warning": "bright_yellow",
    "danger": "bright_red bold",
    "success": "bright_green",
    "highlight": "bright_magenta",
    "path": "bright_blue",
    "title": "bold bright_white",
    "subtitle": "bright_cyan italic",
    "direct": "bright_red",
    "transitive": "bright_yellow",
})

console = Console(theme=dark_theme)
err_console = Console(theme=dark_theme, stderr=True)
