# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""Global console instances for Clapkit."""
from rich.console import Console
from rich.theme import Theme

clapkit_theme = Theme(
    {
        "error": "bold #BF616A",
        "warning": "#EBCB8B",
        "hint": "dim #88C0D0",
        "usage": "bold #81A1C1",
    }
)

console = Console(color_system="truecolor", theme=clapkit_theme)
error_console = Console(color_system="truecolor", theme=clapkit_theme, stderr=True)
