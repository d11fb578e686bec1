"""Команда chat: интерактивный стриминговый чат с ассистентом.

Весь REPL работает в одном event loop: SDK-чат привязан к циклу,
в котором открыт.

Usage:
    coach chat

Команды в чате:
    /history    Показать историю
    /quit       Выход
"""

import asyncio

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.text import Text

from coach_core.domain.errors import CoachAPIError, SessionBusyError
from coach_core.infrastructure.gemini.stream_session import ChatSession
from coach_core.services import CoachService

EXIT_COMMANDS = ("/quit", "/exit", "exit", "quit")


def chat() -> None:
    """Запустить интерактивный чат."""
    from coach_core.cli.app import get_cli_context

    cli_ctx = get_cli_context()
    console = cli_ctx.console
    service = cli_ctx.require_service()

    console.print(
        Panel(
            f"Chat with [bold]{service.config.assistant_name}[/bold]. "
            "Type [cyan]/quit[/cyan] to exit.",
            title="💬 Coach Chat",
            border_style="cyan",
        )
    )

    cli_ctx.run(_repl(console, service))
    console.print("[dim]Bye! 👋[/dim]")


async def _repl(console: Console, service: CoachService) -> None:
    assistant = service.config.assistant_name
    session = await service.open_chat()

    while True:
        try:
            message = await asyncio.to_thread(
                Prompt.ask, "[bold green]You[/bold green]", console=console
            )
        except (EOFError, KeyboardInterrupt):
            break

        message = message.strip()
        if not message:
            continue
        if message.lower() in EXIT_COMMANDS:
            break
        if message == "/history":
            _print_history(console, session, assistant)
            continue

        console.print(f"[bold cyan]{assistant}[/bold cyan]: ", end="")
        try:
            await _stream_reply(console, session, message)
        except (CoachAPIError, SessionBusyError) as e:
            console.print()
            console.print(Text(str(e), style="red"))


async def _stream_reply(console: Console, session: ChatSession, message: str) -> None:
    stream = await session.send(message)
    async for fragment in stream:
        console.print(fragment, end="", markup=False, highlight=False)
    console.print()


def _print_history(console: Console, session: ChatSession, assistant: str) -> None:
    for turn in session.history:
        speaker = "You" if turn.role == "user" else assistant
        console.print(Text(f"{speaker}: {turn.text}"))
