"""
CuraChef - CLI Entry Point.

Usage:
    curachef signup EMAIL                 Create an account
    curachef preferences show|set         View or save dietary preferences
    curachef generate FEATURE TEXT        Recipes, leftovers, nutrition, medical plan
    curachef identify IMAGE               Identify ingredients in a photo
    curachef plan --duration Weekly       Personalized meal plan
    curachef options                      Preference choices and medical conditions
    curachef health                       Check configuration
"""

import asyncio
import logging
import mimetypes
from pathlib import Path

import typer
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.spinner import Spinner
from rich.table import Table

from curachef.core.features import (
    ALLERGIES,
    BUDGET_LABELS,
    CONDITION_LABELS,
    CUISINE_CHOICES,
    DIETARY_RESTRICTIONS,
    HEALTH_GOALS,
    BudgetTier,
    Feature,
    MedicalCondition,
    PlanDuration,
    get_feature_info,
)
from curachef.core.schemas import DietaryPlan, NutritionInfo, PersonalizedPlan, Recipe, UserPreferences
from curachef.errors import CurachefError

app = typer.Typer(
    name="curachef",
    help="CuraChef - Your personal AI kitchen companion.",
    add_completion=False,
)
preferences_app = typer.Typer(help="View or update your dietary preferences.")
app.add_typer(preferences_app, name="preferences")

console = Console()

EmailOption = typer.Option(..., "--email", "-e", envvar="CURACHEF_EMAIL", help="Account email")
PasswordOption = typer.Option(
    ..., "--password", "-p", envvar="CURACHEF_PASSWORD", prompt=True, hide_input=True, help="Account password",
)


@app.callback()
def main(
    log_prompts: bool = typer.Option(False, "--log-prompts", "-l", help="Log all LLM prompts to prompt_logs/"),
) -> None:
    """Configure logging for every command."""
    from curachef.config import settings
    from curachef.llm.prompt_logger import enable_prompt_logging

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if log_prompts or settings.curachef_log_prompts:
        enable_prompt_logging(True, settings.curachef_prompt_log_dir)


# =============================================================================
# Helpers
# =============================================================================


def _load_image(path: Path):
    from curachef.llm.client import ImageData

    mime_type = mimetypes.guess_type(path.name)[0] or "image/jpeg"
    return ImageData(data=path.read_bytes(), mime_type=mime_type)


def _signed_in_session(email: str, password: str):
    """Sign in and return a session, or exit with the auth error."""
    from curachef.session import CurachefSession

    session = CurachefSession()
    try:
        asyncio.run(session.auth.sign_in(email, password))
    except CurachefError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)
    return session


def _exit_on_error(session) -> None:
    if session.state.error:
        console.print(Panel(session.state.error, title="An Error Occurred", border_style="red"))
        raise typer.Exit(1)


def render_recipe(recipe: Recipe) -> None:
    body = [
        f"[italic]{recipe.description}[/italic]",
        "",
        f"[bold]Prep:[/bold] {recipe.prep_time}  [bold]Cook:[/bold] {recipe.cook_time}  "
        f"[bold]Serves:[/bold] {recipe.servings}",
        "",
        "[bold]Ingredients[/bold]",
        *[f"  • {ingredient}" for ingredient in recipe.ingredients],
        "",
        "[bold]Instructions[/bold]",
        *[f"  {i}. {step}" for i, step in enumerate(recipe.instructions, 1)],
    ]
    console.print(Panel("\n".join(body), title=recipe.title, border_style="green"))


def render_nutrition(info: NutritionInfo) -> None:
    table = Table(title=info.meal_name, show_header=True, header_style="bold")
    table.add_column("Nutrient")
    table.add_column("Amount", justify="right")
    table.add_row("Calories (total)", f"{info.calories.total:g} kcal")
    table.add_row("Calories (per serving)", f"{info.calories.per_serving:g} kcal")
    table.add_row("Protein", info.macros.protein)
    table.add_row("Carbohydrates", info.macros.carbohydrates)
    table.add_row("Fat", info.macros.fat)
    for vitamin in info.vitamins:
        table.add_row(f"Vitamin: {vitamin.name}", vitamin.amount)
    for mineral in info.minerals:
        table.add_row(f"Mineral: {mineral.name}", mineral.amount)
    console.print(table)


def render_dietary_plan(plan: DietaryPlan) -> None:
    body = [
        f"[bold]Guidelines[/bold]\n{plan.guidelines}",
        "",
        "[bold green]Foods to Favor[/bold green]",
        *[f"  • {food}" for food in plan.foods_to_favor],
        "",
        "[bold red]Foods to Avoid[/bold red]",
        *[f"  • {food}" for food in plan.foods_to_avoid],
    ]
    console.print(Panel("\n".join(body), title=f"Dietary Plan: {plan.condition}", border_style="cyan"))


def render_personalized_plan(plan: PersonalizedPlan) -> None:
    console.print(Panel(plan.summary, title=plan.title, border_style="green"))
    for day in plan.days:
        table = Table(title=day.day, show_header=True, header_style="bold")
        table.add_column("Meal")
        table.add_column("Dish")
        table.add_column("Description")
        for meal in day.meals:
            table.add_row(meal.name, meal.recipe.title, meal.recipe.description)
        totals = day.daily_totals
        table.caption = (
            f"{totals.calories:g} kcal | protein {totals.protein} | carbs {totals.carbs} | fat {totals.fat}"
        )
        console.print(table)


# =============================================================================
# Account
# =============================================================================


@app.command()
def signup(
    email: str = typer.Argument(..., help="Account email"),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, confirmation_prompt=True, help="Account password",
    ),
) -> None:
    """Create a new account."""
    from curachef.auth import AuthService

    auth = AuthService()
    try:
        user = asyncio.run(auth.sign_up(email, password))
    except CurachefError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    console.print(f"✅ Account created for [bold]{user.email}[/bold]")


@preferences_app.command("show")
def preferences_show(email: str = EmailOption, password: str = PasswordOption) -> None:
    """Show saved preferences."""
    from curachef.prompts.preferences import format_preferences_for_prompt

    session = _signed_in_session(email, password)
    prefs = session.preferences

    table = Table(show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Dietary restrictions", ", ".join(prefs.dietary_restrictions) or "-")
    table.add_row("Allergies", ", ".join(prefs.allergies) or "-")
    table.add_row("Favorite cuisines", ", ".join(prefs.favorite_cuisines) or "-")
    table.add_row("Daily calorie goal", str(prefs.daily_calorie_goal or "-"))
    table.add_row("Health goals", ", ".join(prefs.health_goals) or "-")
    table.add_row("Other goals", prefs.other_health_goals or "-")
    table.add_row("Budget", prefs.budget.value if prefs.budget else "-")
    console.print(table)
    console.print(f"\n[dim]{format_preferences_for_prompt(prefs)}[/dim]")


@preferences_app.command("set")
def preferences_set(
    email: str = EmailOption,
    password: str = PasswordOption,
    restriction: list[str] = typer.Option([], "--restriction", "-r", help="Dietary restriction (repeatable)"),
    allergy: list[str] = typer.Option([], "--allergy", "-a", help="Allergy to avoid (repeatable)"),
    cuisine: list[str] = typer.Option([], "--cuisine", "-c", help="Favorite cuisine (repeatable)"),
    calories: int | None = typer.Option(None, "--calories", min=1, help="Daily calorie goal"),
    goal: list[str] = typer.Option([], "--goal", "-g", help="Health goal (repeatable)"),
    other_goals: str = typer.Option("", "--other-goals", help="Free-text health goals"),
    budget: BudgetTier | None = typer.Option(None, "--budget", help="Budget tier"),
) -> None:
    """Replace saved preferences."""
    session = _signed_in_session(email, password)
    prefs = UserPreferences(
        dietary_restrictions=restriction,
        allergies=allergy,
        favorite_cuisines=cuisine,
        daily_calorie_goal=calories,
        health_goals=goal,
        other_health_goals=other_goals,
        budget=budget,
    )
    asyncio.run(session.auth.save_preferences(prefs))
    console.print("✅ Preferences saved")


# =============================================================================
# Generation
# =============================================================================


@app.command()
def generate(
    feature: Feature = typer.Argument(..., help="Feature to run"),
    text: str = typer.Argument("", help="Ingredients or meal description"),
    condition: MedicalCondition = typer.Option(
        MedicalCondition.NONE, "--condition", help="Medical condition (medical-dietary-planner)",
    ),
    image: Path | None = typer.Option(
        None, "--image", "-i", exists=True, dir_okay=False, help="Photo: ingredients are identified from it",
    ),
    with_nutrition: bool = typer.Option(False, "--with-nutrition", "-n", help="Fetch nutrition for each recipe"),
    shopping_list: bool = typer.Option(
        False, "--shopping-list", "-s", help="Print only each recipe's ingredients, one per line",
    ),
    email: str = EmailOption,
    password: str = PasswordOption,
) -> None:
    """Generate content for a feature."""
    session = _signed_in_session(email, password)
    session.select_feature(feature)
    session.set_condition(condition)
    session.set_text_input(text)

    if image is not None:
        with Live(Spinner("dots", text="Identifying ingredients..."), console=console, transient=True):
            asyncio.run(session.attach_image(_load_image(image)))
        _exit_on_error(session)
        console.print(f"[green]Ingredients identified:[/green] {session.state.text_input}")

    title = get_feature_info(feature).title
    with Live(Spinner("dots", text=f"Generating {title}..."), console=console, transient=True):
        asyncio.run(session.submit())
    _exit_on_error(session)

    result = session.state.active_result
    if result.personalized_plan:
        render_personalized_plan(result.personalized_plan)
    if result.nutrition_info:
        render_nutrition(result.nutrition_info)
    if result.dietary_plan:
        render_dietary_plan(result.dietary_plan)
    if shopping_list:
        for recipe in result.all_recipes:
            typer.echo(recipe.ingredients_text())
        return

    for recipe in result.all_recipes:
        render_recipe(recipe)
        if with_nutrition:
            try:
                render_nutrition(asyncio.run(session.recipe_nutrition(recipe)))
            except CurachefError as e:
                console.print(f"[yellow]{e.message}[/yellow]")


@app.command()
def identify(
    image: Path = typer.Argument(..., exists=True, dir_okay=False, help="Photo of ingredients"),
) -> None:
    """Identify ingredients in a photo."""
    from curachef.generation import identify_ingredients

    try:
        with Live(Spinner("dots", text="Identifying ingredients..."), console=console, transient=True):
            ingredients = asyncio.run(identify_ingredients(_load_image(image)))
    except CurachefError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    console.print(ingredients)


@app.command()
def plan(
    duration: PlanDuration = typer.Option(PlanDuration.WEEKLY, "--duration", "-d", help="Plan length"),
    expand_day: int | None = typer.Option(
        None, "--expand-day", min=1, help="Fetch full recipes for every meal of this day (1-based)",
    ),
    email: str = EmailOption,
    password: str = PasswordOption,
) -> None:
    """Generate a personalized dietary plan from your preferences."""
    session = _signed_in_session(email, password)
    session.select_feature(Feature.PERSONALIZED_DIETARY_PLANNER)

    with Live(
        Spinner("dots", text="Crafting your personalized plan... This can take up to a minute."),
        console=console,
        transient=True,
    ):
        asyncio.run(session.generate_plan(duration))
    _exit_on_error(session)

    personalized = session.state.active_result.personalized_plan
    render_personalized_plan(personalized)

    if expand_day is not None:
        if expand_day > len(personalized.days):
            console.print(f"[red]The plan has only {len(personalized.days)} days.[/red]")
            raise typer.Exit(1)
        for meal in personalized.days[expand_day - 1].meals:
            try:
                render_recipe(asyncio.run(session.expand_meal(meal)))
            except CurachefError as e:
                console.print(f"[yellow]{meal.recipe.title}: {e.message}[/yellow]")


# =============================================================================
# Diagnostics
# =============================================================================


@app.command()
def features() -> None:
    """List available features."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Feature")
    table.add_column("Title")
    table.add_column("Description")
    for feature in Feature:
        info = get_feature_info(feature)
        table.add_row(feature.value, info.title, info.description)
    console.print(table)


@app.command()
def options() -> None:
    """List preference choices and medical conditions."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Option")
    table.add_column("Choices")
    table.add_row("--restriction", ", ".join(DIETARY_RESTRICTIONS))
    table.add_row("--allergy", ", ".join(ALLERGIES))
    table.add_row("--cuisine", ", ".join(CUISINE_CHOICES))
    table.add_row("--goal", ", ".join(HEALTH_GOALS))
    table.add_row("--budget", ", ".join(f"{tier.value} ({label})" for tier, label in BUDGET_LABELS.items()))
    table.add_row(
        "--condition",
        ", ".join(f"{c.value} ({label})" for c, label in CONDITION_LABELS.items() if c != MedicalCondition.NONE),
    )
    console.print(table)


@app.command()
def health() -> None:
    """Check configuration."""
    from curachef.config import get_settings

    console.print("\n[bold]CuraChef Health Check[/bold]\n")

    try:
        settings = get_settings()
    except Exception as e:
        console.print(f"\n[red]❌ Configuration error: {e}[/red]")
        console.print("[dim]Make sure you have a .env file with required variables.[/dim]")
        raise typer.Exit(1)

    console.print("✅ Configuration loaded")
    console.print(f"   Environment: {settings.curachef_env}")
    console.print(f"   Log level: {settings.log_level}")
    console.print(f"   Model: {settings.curachef_model}")

    if settings.openai_api_key:
        console.print("✅ OpenAI API key configured")
    else:
        console.print("❌ OpenAI API key missing (set OPENAI_API_KEY)")

    console.print(f"ℹ️  User store: {settings.curachef_user_store}")


@app.command()
def version() -> None:
    """Show version information."""
    from curachef import __version__

    console.print(f"CuraChef version {__version__}")


if __name__ == "__main__":
    app()
