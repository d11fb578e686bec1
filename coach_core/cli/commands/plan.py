"""Команды plan и lookup.

Usage:
    coach plan "dumbbells, bench" beginner "build muscle"
    coach plan "bodyweight" intermediate "endurance" --regenerate
    coach lookup "bulgarian split squat"
"""

import typer
from rich.markup import escape
from rich.table import Table


def plan(
    equipment: str = typer.Argument(..., help="Доступный инвентарь"),
    level: str = typer.Argument(..., help="Уровень подготовки"),
    goal: str = typer.Argument(..., help="Цель тренировок"),
    regenerate: bool = typer.Option(
        False,
        "--regenerate",
        "-r",
        help="Попросить другой вариант плана",
    ),
) -> None:
    """Сгенерировать план тренировок."""
    from coach_core.cli.app import get_cli_context

    cli_ctx = get_cli_context()
    console = cli_ctx.console
    service = cli_ctx.require_service()

    workout_plan = cli_ctx.run(
        service.generate_workout_plan(
            equipment,
            level,
            goal,
            on_progress=cli_ctx.on_retry,
            is_regeneration=regenerate,
        )
    )

    if cli_ctx.json_output:
        cli_ctx.print_json(workout_plan)
        return

    for day in workout_plan:
        table = Table(title=f"🏋️ {day.day}", show_header=True, header_style="bold cyan")
        table.add_column("Exercise")
        table.add_column("Sets", justify="right")
        table.add_column("Reps", justify="right")
        for exercise in day.exercises:
            table.add_row(exercise.name, exercise.sets, exercise.reps)
        console.print(table)


def lookup(
    exercise_name: str = typer.Argument(..., help="Название упражнения"),
) -> None:
    """Найти видео с техникой упражнения на YouTube."""
    from coach_core.cli.app import get_cli_context

    cli_ctx = get_cli_context()
    service = cli_ctx.require_service()

    url = cli_ctx.run(service.find_youtube_video_for_exercise(exercise_name))

    if cli_ctx.json_output:
        cli_ctx.print_json({"exercise": exercise_name, "url": url})
        return

    if url is None:
        cli_ctx.console.print(f"[yellow]Видео для «{escape(exercise_name)}» не найдено.[/yellow]")
        return
    cli_ctx.console.print(f"▶️  {url}")
