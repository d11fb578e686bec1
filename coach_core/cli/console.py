"""Rich Console singleton для CLI.

Attributes:
    console: Глобальный Rich Console.
"""

from rich.console import Console

console = Console()


__all__ = ["console"]
