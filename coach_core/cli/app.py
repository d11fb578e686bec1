"""Typer приложение - главный CLI.

Определяет глобальные опции и монтирует команды.

Attributes:
    app: Главное Typer приложение.
"""

from typing import Optional

import typer

from coach_core.cli.context import CLIContext

app = typer.Typer(
    name="coach",
    help="🏋️ Coach Core CLI - фитнес-ассистент на Gemini в терминале.",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


_cli_context: Optional[CLIContext] = None


def get_cli_context() -> CLIContext:
    """Текущий CLI контекст (дефолтный, если команда вызвана напрямую)."""
    if _cli_context is None:
        return CLIContext()
    return _cli_context


def version_callback(value: bool) -> None:
    if value:
        from coach_core import __version__

        typer.echo(f"Coach Core CLI v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Уровень логирования: TRACE, DEBUG, INFO, WARNING, ERROR.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Вывод в формате JSON (для скриптов).",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Подробный вывод (эквивалент --log-level INFO).",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Показать версию и выйти.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """🏋️ Coach Core CLI - фитнес-ассистент на Gemini в терминале."""
    global _cli_context

    _cli_context = CLIContext(
        log_level=log_level,
        json_output=json_output,
        verbose=verbose,
    )
    ctx.obj = _cli_context


# === Монтирование команд ===

from coach_core.cli.commands import ask, chat, media, nutrition, plan  # noqa: E402

app.command("ask")(ask.ask)
app.command("quick")(ask.quick)
app.command("plan")(plan.plan)
app.command("lookup")(plan.lookup)
app.command("video")(media.video)
app.command("pose")(media.pose)
app.command("edit")(media.edit)
app.command("transcribe")(media.transcribe)
app.command("food")(nutrition.food)
app.command("chat")(chat.chat)


__all__ = ["app", "get_cli_context"]
