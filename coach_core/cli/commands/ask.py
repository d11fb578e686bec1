"""Команды ask и quick.

Usage:
    coach ask "How much protein do I need per day?"   # Ответ с источниками
    coach quick "Best stretch after running?"          # Короткий ответ lite-модели
    coach quick --persona "Hi!"                        # Короткий ответ персоны
"""

import typer
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table


def ask(
    question: str = typer.Argument(..., help="Вопрос о тренировках или питании"),
) -> None:
    """Ответ с источниками из Google Search."""
    from coach_core.cli.app import get_cli_context

    cli_ctx = get_cli_context()
    console = cli_ctx.console
    service = cli_ctx.require_service()

    with console.status("[cyan]Ищу ответ...[/cyan]"):
        answer = cli_ctx.run(service.get_grounded_answer(question))

    if cli_ctx.json_output:
        cli_ctx.print_json(answer)
        return

    console.print(Panel(Markdown(answer.text), title="💬 Ответ", border_style="green"))

    if answer.citations:
        table = Table(title="📚 Источники", show_header=True, header_style="bold cyan")
        table.add_column("#", style="dim", width=3)
        table.add_column("Title")
        table.add_column("URL", overflow="fold")
        for i, citation in enumerate(answer.citations, 1):
            table.add_row(str(i), citation.title or "-", citation.uri)
        console.print(table)


def quick(
    question: str = typer.Argument(..., help="Вопрос"),
    persona: bool = typer.Option(
        False,
        "--persona",
        "-p",
        help="Отвечать от имени персоны ассистента",
    ),
) -> None:
    """Быстрый короткий ответ. Пустой ответ при сбое."""
    from coach_core.cli.app import get_cli_context

    cli_ctx = get_cli_context()
    service = cli_ctx.require_service()

    if persona:
        text = cli_ctx.run(service.get_quick_chat_response(question))
    else:
        text = cli_ctx.run(service.get_quick_response(question))

    if cli_ctx.json_output:
        cli_ctx.print_json({"text": text})
        return

    if not text:
        cli_ctx.console.print("[dim]Нет ответа, попробуйте позже.[/dim]")
        return
    cli_ctx.console.print(Markdown(text))
