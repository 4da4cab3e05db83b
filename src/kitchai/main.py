"""
KitchAI Discovery - CLI Entry Point.

Usage:
    kitchai feed USER_ID --fixture data.json      Show a feed page
    kitchai match USER_ID RECIPE_ID --fixture ... Pantry match for one recipe
    kitchai normalize "olive oil" 1 unit          Normalize one ingredient
    kitchai health                                Check configuration
    kitchai --help                                Show help

Without --fixture, data is read from Supabase.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

app = typer.Typer(
    name="kitchai",
    help="KitchAI Discovery - recipe feed ranking and pantry matching.",
    add_completion=False,
)
console = Console()


def _build_engine(fixture: Path | None):
    from kitchai.engine.feed import DiscoveryEngine

    if fixture is not None:
        from kitchai.db.memory import InMemoryDataSource
        return DiscoveryEngine(InMemoryDataSource.from_json(fixture))

    from kitchai.db.client import SupabaseDataSource
    return DiscoveryEngine(SupabaseDataSource())


def _fail(message: str) -> None:
    console.print(f"\n[red]❌ {message}[/red]")
    raise typer.Exit(1)


@app.command()
def feed(
    user_id: str = typer.Argument(..., help="User to build the feed for"),
    fixture: Path | None = typer.Option(None, "--fixture", "-f", help="JSON snapshot instead of Supabase"),
    context: str | None = typer.Option(None, "--context", "-c", help="morning, lunch, dinner or general"),
    seed: int | None = typer.Option(None, "--seed", "-s", help="Session seed for the jitter"),
    offset: int = typer.Option(0, "--offset", help="Page offset"),
    limit: int = typer.Option(20, "--limit", "-n", help="Page size"),
    pantry: bool = typer.Option(False, "--pantry", "-p", help="Pantry-aware scoring"),
) -> None:
    """Show one page of the discovery feed."""
    from kitchai.config import configure_logging
    from kitchai.engine.profile_builder import format_profile_summary
    from kitchai.errors import DiscoveryError

    configure_logging()

    try:
        engine = _build_engine(fixture)
        page = engine.get_feed_page(
            user_id,
            time_context=context,
            session_seed=seed,
            offset=offset,
            limit=limit,
            pantry_aware=pantry,
        )
    except DiscoveryError as e:
        _fail(str(e))

    weights = page.weights
    console.print(
        Panel.fit(
            f"{format_profile_summary(page.profile)}\n\n"
            f"Context: [bold]{page.time_context}[/bold]   Seed: {page.seed}\n"
            f"Weights: personalized={weights.personalized} trending={weights.trending} "
            f"discovery={weights.discovery}",
            title=f"Feed ({page.algorithm_version})",
            border_style="green",
        )
    )

    if not page.items:
        console.print("[dim]No eligible recipes.[/dim]")
        return

    table = Table(show_lines=False)
    table.add_column("#", justify="right")
    table.add_column("Recipe")
    table.add_column("Lane")
    table.add_column("Score", justify="right")
    if pantry:
        table.add_column("Pantry", justify="right")

    for item in page.items:
        row = [
            str(item.position + 1),
            item.recipe.title or item.recipe.id,
            item.breakdown.lane.value,
            f"{item.breakdown.composite_score:.1f}",
        ]
        if pantry:
            row.append(f"{item.match.match_percentage}%" if item.match else "-")
        table.add_row(*row)

    console.print(table)


@app.command()
def match(
    user_id: str = typer.Argument(..., help="Pantry owner"),
    recipe_id: str = typer.Argument(..., help="Recipe to match"),
    fixture: Path | None = typer.Option(None, "--fixture", "-f", help="JSON snapshot instead of Supabase"),
) -> None:
    """Show how much of a recipe the user's pantry covers."""
    from kitchai.config import configure_logging
    from kitchai.errors import DiscoveryError

    configure_logging()

    try:
        result = _build_engine(fixture).get_pantry_match(user_id, recipe_id)
    except DiscoveryError as e:
        _fail(str(e))

    console.print(f"\n[bold]Pantry match:[/bold] {result.match_percentage}%")
    if result.matched_ingredients:
        console.print(f"[green]Have:[/green] {', '.join(result.matched_ingredients)}")
    if result.missing_ingredients:
        console.print(f"[yellow]Missing:[/yellow] {', '.join(result.missing_ingredients)}")


@app.command()
def normalize(
    name: str = typer.Argument(..., help="Ingredient name, e.g. 'olive oil' or '2 cups flour'"),
    quantity: str | None = typer.Argument(None, help="Quantity, e.g. 1, 1/2, '1 1/2'"),
    unit: str | None = typer.Argument(None, help="Unit, e.g. ml, cups, unit"),
) -> None:
    """Normalize one ingredient and show the unit suggestion."""
    from kitchai.engine.normalizer import get_normalizer

    normalizer = get_normalizer()
    result = normalizer.normalize(name, quantity, unit)

    if result.is_unknown:
        console.print(f"❌ Unknown ingredient: {name!r}")
        raise typer.Exit(1)

    console.print(f"\n[bold]{result.token.canonical_name}[/bold] ({result.token.category.value})")
    console.print(f"   Quantity: {result.quantity} {result.unit}")
    console.print(f"   Match: {result.match_type} (confidence {result.confidence:.2f})")
    if result.unit_assumed:
        console.print(f"⚠️  Unit {unit!r} not recognized, assumed {result.unit}")
    if result.category_mismatch:
        console.print(
            f"⚠️  {result.unit_category.value} unit for a {result.token.category.value} ingredient"
        )

    suggestion = normalizer.suggest_unit(name, unit or result.unit)
    if suggestion.should_normalize:
        console.print(f"ℹ️  Suggest {suggestion.suggested_unit}: {suggestion.reason}")


@app.command()
def health() -> None:
    """Check configuration and policy tables."""
    from kitchai import ALGORITHM_VERSION, __version__
    from kitchai.config import get_settings
    from kitchai.engine.scoring import ScoringPolicy
    from kitchai.engine.weights import WeightPolicy
    from kitchai.reference import DEFAULT_TABLES

    console.print(f"\n[bold]KitchAI Discovery {__version__} Health Check[/bold]\n")

    try:
        settings = get_settings()
        console.print("✅ Configuration loaded")
        console.print(f"   Environment: {settings.kitchai_env}")
        console.print(f"   Log level: {settings.log_level}")

        ScoringPolicy.from_settings()
        WeightPolicy.from_settings()
        console.print(f"✅ Scoring and weight policies valid ({ALGORITHM_VERSION})")
        console.print(f"✅ Reference tables: {len(DEFAULT_TABLES)} ingredients (v{DEFAULT_TABLES.version})")

        if settings.supabase_url and settings.supabase_url.startswith("https://"):
            console.print("✅ Supabase URL configured")
        else:
            console.print("ℹ️  Supabase not configured (use --fixture)")

        console.print("\n[green]All checks passed![/green]")

    except Exception as e:
        console.print(f"\n[red]❌ Configuration error: {e}[/red]")
        console.print("[dim]Check your .env file.[/dim]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
