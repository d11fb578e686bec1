"""Команды для медиа: video, pose, edit, transcribe.

Файлы читаются и кодируются в base64 на стороне CLI.

Usage:
    coach video "Check my squat depth" frame1.jpg frame2.jpg frame3.jpg
    coach video "Check my squat depth" frame*.jpg --refine "focus on knees"
    coach pose "Is my back straight?" plank.png
    coach edit "Add a red headband" selfie.png -o edited.png
    coach transcribe voice_note.webm
"""

import base64
from pathlib import Path
from typing import Optional

import typer
from rich.markdown import Markdown
from rich.panel import Panel

from coach_core.utils.media import file_to_base64


def _read_file(path: Path) -> tuple[str, str]:
    if not path.is_file():
        raise typer.BadParameter(f"Файл не найден: {path}")
    return file_to_base64(path)


def video(
    prompt: str = typer.Argument(..., help="Что проверить в технике"),
    frames: list[Path] = typer.Argument(..., help="Кадры видео по порядку"),
    refine: Optional[str] = typer.Option(
        None,
        "--refine",
        "-r",
        help="Уточнение для повторного анализа",
    ),
) -> None:
    """Анализ техники упражнения по кадрам видео."""
    from coach_core.cli.app import get_cli_context

    cli_ctx = get_cli_context()
    service = cli_ctx.require_service()

    encoded = [_read_file(frame) for frame in frames]
    mime_type = encoded[0][1]

    analysis = cli_ctx.run(
        service.analyze_video_with_frames(
            prompt,
            [data for data, _ in encoded],
            on_progress=cli_ctx.on_retry,
            mime_type=mime_type,
            refinement=refine,
        )
    )

    if cli_ctx.json_output:
        cli_ctx.print_json({"analysis": analysis, "frames": len(frames)})
        return
    cli_ctx.console.print(Panel(Markdown(analysis), title="🎥 Анализ техники", border_style="green"))


def pose(
    question: str = typer.Argument(..., help="Вопрос о позе"),
    image: Path = typer.Argument(..., help="Фото"),
) -> None:
    """Анализ позы на фото."""
    from coach_core.cli.app import get_cli_context

    cli_ctx = get_cli_context()
    service = cli_ctx.require_service()

    data, mime_type = _read_file(image)
    analysis = cli_ctx.run(service.analyze_pose(question, data, mime_type))

    if cli_ctx.json_output:
        cli_ctx.print_json({"analysis": analysis})
        return
    cli_ctx.console.print(Panel(Markdown(analysis), title="🧘 Анализ позы", border_style="green"))


def edit(
    prompt: str = typer.Argument(..., help="Что изменить на изображении"),
    image: Path = typer.Argument(..., help="Исходное изображение"),
    output: Path = typer.Option(
        Path("edited.png"),
        "--output",
        "-o",
        help="Куда сохранить результат",
    ),
) -> None:
    """Редактирование изображения по текстовой инструкции."""
    from coach_core.cli.app import get_cli_context

    cli_ctx = get_cli_context()
    service = cli_ctx.require_service()

    data, mime_type = _read_file(image)
    edited = cli_ctx.run(service.edit_image(prompt, data, mime_type))

    output.write_bytes(base64.b64decode(edited.data))

    if cli_ctx.json_output:
        cli_ctx.print_json({"output": str(output), "mime_type": edited.mime_type})
        return
    cli_ctx.console.print(f"[green]✓[/green] Saved edited image to {output}")


def transcribe(
    audio: Path = typer.Argument(..., help="Аудиофайл"),
) -> None:
    """Транскрипция аудио."""
    from coach_core.cli.app import get_cli_context

    cli_ctx = get_cli_context()
    service = cli_ctx.require_service()

    data, mime_type = _read_file(audio)
    text = cli_ctx.run(service.transcribe_audio(data, mime_type))

    if cli_ctx.json_output:
        cli_ctx.print_json({"text": text})
        return
    cli_ctx.console.print(text)
