"""Coach Core CLI - Command Line Interface.

Functions:
    main: Точка входа CLI.

Example:
    $ coach --help
    $ coach plan "dumbbells" beginner "build muscle"
    $ coach chat
"""

from coach_core.cli.app import app


def main() -> None:
    """Точка входа для CLI."""
    app()


__all__ = ["main", "app"]
