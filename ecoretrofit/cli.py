"""
EcoRetrofit CLI.

Command-line interface for building energy estimates and retrofit analysis.

Examples:
    ecoretrofit estimate --area 120 --insulation average --select 1,4
    ecoretrofit estimate --input building.json --json
    ecoretrofit estimate --insulation good --explain
    ecoretrofit catalog --category envelope
    ecoretrofit shell
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .baseline.impact import driving_miles_equivalent
from .baseline.usage import round_half_up
from .core.config import settings
from .core.session import CalculatorSession
from .ecm.catalog import RetrofitCatalog, RetrofitCategory
from .roi.calculator import ROI_SAVINGS_YEARS
from .utils.logging_config import get_logger, setup_logging
from .utils.validation import (
    ValidationError,
    build_attributes,
    normalize_choice,
    parse_integer,
)

app = typer.Typer(
    name="ecoretrofit",
    help="EcoRetrofit - Building energy and retrofit calculator",
    add_completion=False,
)
console = Console()
logger = get_logger(__name__)


# =============================================================================
# OUTPUT HELPERS
# =============================================================================


def format_number(value: float) -> str:
    """Whole number with digit grouping, halves rounded up."""
    return f"{round_half_up(value):,}"


def format_currency(value: float, symbol: Optional[str] = None) -> str:
    symbol = settings.currency_symbol if symbol is None else symbol
    return f"{symbol}{format_number(value)}"


def format_payback(years: float) -> str:
    """Payback in years, or N/A when there are no savings."""
    if not math.isfinite(years):
        return "N/A"
    return f"{years:.1f} years"


def format_percent(value: float) -> str:
    if not math.isfinite(value):
        return "N/A"
    return f"{format_number(value)}%"


def print_success(text: str) -> None:
    console.print(f"[green]✓[/green] {text}")


def print_error(error: Exception) -> None:
    console.print(f"[red]✗[/red] {escape(str(error))}")
    for suggestion in getattr(error, "suggestions", []):
        console.print(f"  [dim]{escape(suggestion)}[/dim]")


def print_results(session: CalculatorSession) -> None:
    """Current energy profile."""
    r = session.results
    console.print(Panel.fit(
        f"[bold blue]Annual energy usage:[/bold blue] {format_number(r.annual_energy_usage_kwh)} kWh\n"
        f"[bold red]Annual CO₂ emissions:[/bold red] {format_number(r.annual_co2_kg)} kg\n"
        f"[bold green]Annual energy cost:[/bold green] {format_currency(r.annual_cost_units)}\n"
        f"[dim]CO₂ equivalent to driving {format_number(driving_miles_equivalent(r.annual_co2_kg))} "
        f"miles in an average car[/dim]",
        title="Current Energy Profile",
        border_style="green",
    ))


def print_retrofits(session: CalculatorSession) -> None:
    """Applicable retrofits with per-measure metrics, then excluded ones."""
    table = Table(title="Recommended Retrofits")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Sel", justify="center")
    table.add_column("Measure", style="white")
    table.add_column("Cost", justify="right")
    table.add_column("Savings/yr", justify="right")
    table.add_column("CO₂ kg/yr", justify="right")
    table.add_column("Payback", justify="right", style="yellow")
    table.add_column("Value +", justify="right")

    for r in session.evaluated_retrofits():
        table.add_row(
            str(r.id),
            "✓" if r.id in session.selection else "",
            r.name,
            format_currency(r.cost_units),
            format_currency(r.cost_savings_units),
            format_number(r.co2_savings_kg),
            format_payback(r.payback_years),
            format_currency(r.value_increase_units),
        )

    console.print(table)

    for definition, reasons in session.calculator.engine.get_excluded(session.attributes):
        reason = reasons[0][1] if reasons else "Not applicable"
        console.print(f"  [dim]✗ {definition.name}: {reason}[/dim]")


def print_totals(session: CalculatorSession) -> None:
    """Totals and projected figures for the selection."""
    totals = session.totals()
    if totals is None:
        console.print("\n[dim]No applicable retrofits selected.[/dim]")
        return

    after = session.calculator.project(session.results, totals)
    console.print(Panel.fit(
        f"Total investment: {format_currency(totals.total_cost_units)}\n"
        f"Energy savings: {format_number(totals.total_energy_savings_kwh)} kWh "
        f"({format_currency(totals.total_cost_savings_units)}/yr)\n"
        f"CO₂ reduction: {format_number(totals.total_co2_savings_kg)} kg/yr "
        f"({format_percent(totals.co2_reduction_percent)} of current emissions)\n"
        f"Average payback: {format_payback(totals.average_payback_years)}\n"
        f"Property value increase: {format_currency(totals.total_value_increase_units)}\n"
        f"Return on investment: {format_percent(totals.return_on_investment_percent)} "
        f"(value increase + {ROI_SAVINGS_YEARS} years of savings)\n"
        f"\n[bold]After retrofit:[/bold] "
        f"{format_number(after.annual_energy_usage_kwh)} kWh, "
        f"{format_number(after.annual_co2_kg)} kg CO₂, "
        f"{format_currency(after.annual_cost_units)}/yr",
        title="Selected Retrofits",
        border_style="blue",
    ))


def print_session(session: CalculatorSession) -> None:
    print_results(session)
    print_retrofits(session)
    print_totals(session)


def parse_selection(raw: str) -> list[int]:
    """Parse a comma-separated list of retrofit ids."""
    return [parse_integer(part, "select") for part in raw.split(",") if part.strip()]


def load_building_file(path: Path) -> dict:
    """Load building attributes from a JSON file."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValidationError(f"{path} must contain a JSON object", field="input")
    return data


# =============================================================================
# COMMANDS
# =============================================================================


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        settings.log_level, "--log-level", help="Console log level"
    ),
):
    """EcoRetrofit - Building energy and retrofit calculator."""
    setup_logging(level=log_level)


@app.command()
def estimate(
    input_file: Optional[Path] = typer.Option(
        None, "--input", "-i", exists=True, dir_okay=False, help="Building JSON file"
    ),
    area: Optional[str] = typer.Option(None, "--area", help="Floor area (m²)"),
    year_built: Optional[str] = typer.Option(None, "--year-built", help="Construction year"),
    floors: Optional[str] = typer.Option(None, "--floors", help="Number of floors"),
    insulation: Optional[str] = typer.Option(None, "--insulation", help="poor, average or good"),
    heating: Optional[str] = typer.Option(
        None, "--heating", help="gas, oil, electric or heat_pump"
    ),
    windows: Optional[str] = typer.Option(None, "--windows", help="single, double or triple"),
    occupants: Optional[str] = typer.Option(None, "--occupants", help="Number of occupants"),
    climate: Optional[str] = typer.Option(None, "--climate", help="cold, moderate or warm"),
    roof: Optional[str] = typer.Option(None, "--roof", help="pitched or flat"),
    wall: Optional[str] = typer.Option(None, "--wall", help="brick, concrete or wood"),
    select: Optional[str] = typer.Option(
        None, "--select", "-s", help="Comma-separated retrofit ids, e.g. 1,4"
    ),
    year: Optional[int] = typer.Option(
        None, "--year", help="Reference year for building age (default: this year)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of tables"),
    explain: bool = typer.Option(
        False, "--explain", help="Also explain why each retrofit applies or not"
    ),
):
    """
    Estimate annual energy, CO₂ and cost, and evaluate retrofits.

    Values from --input are applied first, then any field options.
    """
    options: dict[str, Any] = {
        "floor_area_sqm": area,
        "year_built": year_built,
        "floors": floors,
        "insulation_quality": insulation,
        "heating_system": heating,
        "window_type": windows,
        "occupant_count": occupants,
        "climate_zone": climate,
        "roof_type": roof,
        "wall_type": wall,
    }

    try:
        attrs = build_attributes(load_building_file(input_file)) if input_file else None
        attrs = build_attributes(
            {k: v for k, v in options.items() if v is not None},
            base=attrs,
        )
        session = CalculatorSession(
            attributes=attrs,
            current_year=year if year is not None else settings.current_year,
        )
        for retrofit_id in parse_selection(select or ""):
            if retrofit_id not in session.selection:
                session.toggle(retrofit_id)
    except (ValidationError, json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
        logger.debug(f"Rejected input: {e}", extra={"command": "estimate"})
        print_error(e)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(session.to_dict(), indent=2))
        return

    a = session.attributes
    console.print(Panel.fit(
        "[bold green]EcoRetrofit Calculator[/bold green]\n"
        "Building Energy & Retrofit Analysis",
        border_style="green"
    ))
    print_success(
        f"Building: {format_number(a.floor_area_sqm)} m², built {a.year_built}, "
        f"{a.floors} floors, {a.occupant_count} occupants"
    )
    print_success(
        f"Insulation {a.insulation_quality.value}, heating {a.heating_system.value}, "
        f"{a.window_type.value} glazing, {a.climate_zone.value} climate"
    )
    print_session(session)

    if explain:
        console.print()
        console.print(session.calculator.engine.explain(a), markup=False)


@app.command()
def catalog(
    category: Optional[str] = typer.Option(
        None, "--category", "-c", help="envelope, hvac or renewable"
    ),
):
    """List retrofit measures, optionally for one category."""
    measures = RetrofitCatalog()
    try:
        definitions = (
            measures.by_category(normalize_choice(RetrofitCategory, category, "category"))
            if category else measures.all()
        )
    except ValidationError as e:
        print_error(e)
        raise typer.Exit(code=1)

    table = Table(title="Retrofit Measures")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Name", style="white")
    table.add_column("Category", style="green")
    table.add_column("Cost", style="white")
    table.add_column("Energy", justify="right", style="yellow")
    table.add_column("CO₂", justify="right", style="yellow")
    table.add_column("Value +", style="white")
    table.add_column("Lifespan", justify="right")

    for d in definitions:
        table.add_row(
            str(d.id),
            d.name,
            d.category.value,
            d.cost.describe(),
            f"{d.energy_savings_percent:g}%",
            f"{d.co2_reduction_percent:g}%",
            d.value_increase.describe(),
            f"{d.lifespan_years} yr",
        )

    console.print(table)


SHELL_HELP = """Commands:
  set FIELD VALUE   change a building field (results update immediately)
  toggle ID         select/deselect a retrofit
  show              print results, retrofits and totals
  fields            list building fields and current values
  reset             restore defaults and clear the selection
  quit              leave the shell"""


@app.command()
def shell(
    year: Optional[int] = typer.Option(
        None, "--year", help="Reference year for building age (default: this year)"
    ),
):
    """
    Interactive calculator session.

    Results are recomputed after every change.
    """
    session = CalculatorSession(
        current_year=year if year is not None else settings.current_year
    )
    console.print(Panel.fit(
        "[bold green]EcoRetrofit Calculator[/bold green]\n" + SHELL_HELP,
        border_style="green",
    ))
    print_results(session)

    while True:
        try:
            line = console.input("[bold green]ecoretrofit>[/bold green] ").strip()
        except (EOFError, KeyboardInterrupt):
            break

        if not line:
            continue

        command, _, rest = line.partition(" ")
        command = command.lower()
        rest = rest.strip()

        try:
            if command in ("quit", "exit", "q"):
                break
            elif command == "help":
                console.print(SHELL_HELP)
            elif command == "set":
                name, _, value = rest.partition(" ")
                if not name or not value.strip():
                    console.print("[yellow]![/yellow] Usage: set FIELD VALUE")
                    continue
                session.set_field(name, value.strip())
                print_results(session)
            elif command == "toggle":
                retrofit_id = parse_integer(rest, "retrofit_id")
                selected = session.toggle(retrofit_id)
                print_success(f"Retrofit {retrofit_id} {'selected' if selected else 'deselected'}")
                print_totals(session)
            elif command == "show":
                print_session(session)
            elif command == "fields":
                for field, value in session.attributes.model_dump(mode="json").items():
                    console.print(f"  {field} = {value}")
            elif command == "reset":
                session.reset()
                print_success("Reset to defaults")
                print_results(session)
            else:
                console.print(f"[yellow]![/yellow] Unknown command '{command}' (try 'help')")
        except ValidationError as e:
            print_error(e)

    console.print("Bye.")


@app.command()
def version():
    """Show version information."""
    from . import __version__
    console.print(f"EcoRetrofit v{__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
