"""Команда food: распознавание еды и оценка пищевой ценности.

Usage:
    coach food lunch.jpg               # Продукты на фото + пищевая ценность
    coach food lunch.jpg --no-nutrition
"""

from pathlib import Path

import typer
from rich.table import Table

from coach_core.utils.media import file_to_base64


def food(
    image: Path = typer.Argument(..., help="Фото еды"),
    nutrition: bool = typer.Option(
        True,
        "--nutrition/--no-nutrition",
        help="Оценить пищевую ценность распознанных продуктов",
    ),
) -> None:
    """Распознать продукты на фото и оценить пищевую ценность."""
    from coach_core.cli.app import get_cli_context

    cli_ctx = get_cli_context()
    console = cli_ctx.console
    service = cli_ctx.require_service()

    if not image.is_file():
        raise typer.BadParameter(f"Файл не найден: {image}")

    data, mime_type = file_to_base64(image)
    foods = cli_ctx.run(service.analyze_food_image(data, mime_type))

    info = None
    if nutrition and foods:
        info = cli_ctx.run(service.get_nutritional_analysis(foods))

    if cli_ctx.json_output:
        cli_ctx.print_json({"foods": foods, "nutrition": info})
        return

    if not foods:
        console.print("[yellow]Еда на фото не найдена.[/yellow]")
        return

    console.print("🍽️  " + ", ".join(foods))

    if info is None:
        return

    table = Table(title=f"Nutrition: {info.calories:.0f} kcal", header_style="bold cyan")
    table.add_column("Nutrient")
    table.add_column("Amount", justify="right")
    table.add_row("Protein", f"{info.macronutrients.protein:g} g")
    table.add_row("Carbohydrates", f"{info.macronutrients.carbohydrates:g} g")
    table.add_row("Fat", f"{info.macronutrients.fat:g} g")
    for item in [*info.vitamins, *info.minerals]:
        table.add_row(item.name, item.amount)
    console.print(table)
