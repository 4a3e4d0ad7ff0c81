"""
Command line interface for the car cost of ownership calculator.

  car-cost add       Add a car model to the catalog
  car-cost search    Search the catalog
  car-cost simulate  Calculate cost of ownership
  car-cost import    Load car models from an Excel sheet
"""

import logging
import sys

import click
from rich.console import Console
from rich.table import Table
from rich import box

from .calculator import (
    DEFAULT_EXPECTED_LIFE,
    DEFAULT_LOAN_RATE,
    DEFAULT_LOAN_YEARS,
    CostCalculator,
    project,
)
from .catalog import VehicleCatalog
from .config import config, configure_logging
from .exceptions import CurveParseError, InvalidSettingsError, ModelNotFoundError
from .models import CarModel, OwnershipSettings, YearlyBreakdown, dump_curve, parse_curve
from .visualizer import CostVisualizer

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True, style="bold red")

CURVE_EXAMPLES = {
    'insurance': '--insurance "[[0, 14000], [5, 11000], [15, 6500]]"',
    'maintenance': '--maintenance "[[0, 1000], [5, 2000], [10, 3500], [15, 5000]]"',
}


def _fmt_money(amount) -> str:
    return f"${amount:,.0f}"


def _parse_curve_option(text, label):
    """Parse a JSON curve option, exiting with status 1 when malformed."""
    if text is None:
        return None
    try:
        return parse_curve(text)
    except CurveParseError:
        err_console.print(f"Error: {label.capitalize()} points must be a valid JSON array "
                          f"of [year, cost] pairs", markup=False)
        console.print(f"Example: {CURVE_EXAMPLES[label]}", markup=False)
        sys.exit(1)


@click.group()
@click.option('--db', 'db_path', default=None, help='Path to the car catalog database.')
@click.option('--log-level', default=None, help='Logging level (default: WARNING).')
@click.pass_context
def cli(ctx, db_path, log_level):
    """Car Cost of Ownership Calculator."""
    configure_logging(log_level)
    catalog = VehicleCatalog(db_path or config.DB_PATH)
    ctx.obj = catalog
    ctx.call_on_close(catalog.close)


@cli.command()
@click.option('--brand', required=True, help='Car manufacturer.')
@click.option('--name', required=True, help='Car model name.')
@click.option('--trim', required=True, help='Car trim/variant.')
@click.option('--cost', required=True, type=int, help='Car purchase price.')
@click.option('--permit-cost', type=int, default=None, help='Yearly permit/registration cost.')
@click.option('--insurance', default=None, help='JSON array of [year, cost] points for insurance.')
@click.option('--maintenance', default=None, help='JSON array of [year, cost] points for maintenance.')
@click.pass_obj
def add(catalog, brand, name, trim, cost, permit_cost, insurance, maintenance):
    """Add a new car model to the catalog, or update an existing one."""
    car = CarModel(
        brand=brand,
        name=name,
        trim=trim,
        cost=cost,
        yearly_permit_cost=permit_cost,
        insurance_points=dump_curve(_parse_curve_option(insurance, 'insurance')),
        maintenance_points=dump_curve(_parse_curve_option(maintenance, 'maintenance')),
    )
    model_id = catalog.open().add_model(car)
    console.print(f"[green]Car model added with ID: {model_id}[/green]")


@cli.command()
@click.argument('query', required=False)
@click.option('--query', 'query_option', default=None, help='Search term for car models.')
@click.option('--verbose', is_flag=True, help='Show detailed information including costs.')
@click.pass_obj
def search(catalog, query, query_option, verbose):
    """Search for car models by brand, name or trim."""
    query = query_option or query
    if not query:
        err_console.print("Error: Missing search query")
        console.print('Usage: car-cost search --query "RAV4" or car-cost search "RAV4" [--verbose]',
                      markup=False)
        sys.exit(1)

    models = catalog.open().find_models(query)
    if not models:
        console.print("[yellow]No car models found matching your search.[/yellow]")
        return

    console.print(f"[cyan]Found {len(models)} matching car models:[/cyan]")

    if verbose:
        for model in models:
            _print_model_details(model)
        return

    t = Table(box=box.SQUARE)
    for col in ("ID", "Brand", "Name", "Trim", "Cost"):
        t.add_column(col, justify="right" if col in ("ID", "Cost") else "left")
    for model in models:
        t.add_row(str(model.id), model.brand, model.name, model.trim,
                  f"[green]{_fmt_money(model.cost)}[/green]")
    console.print(t)
    console.print("[yellow]Tip: Use --verbose to see maintenance and insurance costs.[/yellow]")


def _print_model_details(model: CarModel):
    t = Table(title=f"Car Model #{model.id}", box=box.DOUBLE, show_header=False, padding=(0, 2))
    t.add_column("Field", style="white")
    t.add_column("Value")
    t.add_row("Brand", model.brand)
    t.add_row("Name", model.name)
    t.add_row("Trim", model.trim)
    t.add_row("Cost", f"[green]{_fmt_money(model.cost)}[/green]")
    if model.yearly_permit_cost:
        t.add_row("Yearly Permit Cost", f"[green]{_fmt_money(model.yearly_permit_cost)}[/green]")

    for label, text in (("Insurance Points", model.insurance_points),
                        ("Maintenance Points", model.maintenance_points)):
        if not text:
            continue
        try:
            points = parse_curve(text)
        except CurveParseError:
            t.add_row(label, "[red]Invalid format[/red]")
            continue
        t.add_row(label, "\n".join(
            f"[yellow]Year {p.year}:[/yellow] [green]{_fmt_money(p.cost)}[/green]" for p in points
        ))
    console.print(t)


@cli.command()
@click.option('--id', 'model_id', type=int, default=None, help='Car model from the catalog.')
@click.option('--cost', type=float, default=None, help='Car purchase price (if not using --id).')
@click.option('--name', default=None, help='Car name (if not using --id).')
@click.option('--down-payment', type=float, default=None, help='Down payment amount (default: 0).')
@click.option('--loan-rate', type=float, default=None,
              help=f'Loan interest rate as decimal (default: {DEFAULT_LOAN_RATE}).')
@click.option('--loan-years', type=int, default=None,
              help=f'Loan term in years (default: {DEFAULT_LOAN_YEARS}).')
@click.option('--expected-life', type=int, default=None,
              help=f'Expected lifetime of the car (default: {DEFAULT_EXPECTED_LIFE}).')
@click.option('--permit-cost', type=float, default=None,
              help='Yearly permit/registration cost (overrides model data).')
@click.option('--insurance', default=None, help='JSON array of [year, cost] points (overrides model data).')
@click.option('--maintenance', default=None, help='JSON array of [year, cost] points (overrides model data).')
@click.option('--plot', 'plot_path', type=click.Path(dir_okay=False), default=None,
              help='Save an overview chart to this file.')
@click.option('--plot-yearly', 'plot_yearly_path', type=click.Path(dir_okay=False), default=None,
              help='Save a chart of yearly costs by category to this file.')
@click.option('--export', 'export_path', type=click.Path(dir_okay=False), default=None,
              help='Write the yearly breakdown to an Excel file.')
@click.pass_obj
def simulate(catalog, model_id, cost, name, down_payment, loan_rate, loan_years, expected_life,
             permit_cost, insurance, maintenance, plot_path, plot_yearly_path, export_path):
    """Calculate cost of ownership for a catalog model or an ad hoc price."""
    overrides = dict(
        down_payment=down_payment,
        loan_rate=loan_rate,
        loan_years=loan_years,
        expected_life=expected_life,
        yearly_permit_cost=permit_cost,
        insurance_points=_parse_curve_option(insurance, 'insurance'),
        maintenance_points=_parse_curve_option(maintenance, 'maintenance'),
    )

    if model_id is not None:
        try:
            settings = CostCalculator(catalog.open()).model_settings(model_id, **overrides)
        except ModelNotFoundError as e:
            err_console.print(f"Error: {e}", markup=False)
            sys.exit(1)
    elif cost is not None:
        settings = OwnershipSettings(cost=cost, name=name or "Custom Car").with_overrides(**overrides)
    else:
        err_console.print("Error: Either a model ID or cost must be provided")
        console.print('Usage: car-cost simulate --id 1 or car-cost simulate --cost 209990 --name "Toyota RAV4"')
        sys.exit(1)

    try:
        breakdown = project(settings)
    except InvalidSettingsError as e:
        err_console.print(f"Error: {e}", markup=False)
        sys.exit(1)

    _print_breakdown(settings, breakdown)

    if export_path:
        breakdown.to_dataframe().to_excel(export_path, index=False)
        console.print(f"[green]Breakdown written to {export_path}[/green]")
    if plot_path:
        CostVisualizer.plot_overview(breakdown, show=False).savefig(plot_path)
        console.print(f"[green]Chart saved to {plot_path}[/green]")
    if plot_yearly_path:
        CostVisualizer.plot_yearly_costs(breakdown, show=False).savefig(plot_yearly_path)
        console.print(f"[green]Chart saved to {plot_yearly_path}[/green]")


def _print_breakdown(settings: OwnershipSettings, breakdown: YearlyBreakdown):
    """Print settings and results. `settings` is unresolved, to show data sources."""
    s = breakdown.settings

    t = Table(title=f"Car Cost of Ownership: {s.name}", box=box.SIMPLE,
              show_header=False, padding=(0, 2))
    t.add_column("Field", style="white")
    t.add_column("Value", justify="right")
    t.add_row("Purchase price", f"[green]{_fmt_money(s.cost)}[/green]")
    t.add_row("Down payment", f"[green]{_fmt_money(s.down_payment)}[/green]")
    t.add_row("Loan rate", f"[yellow]{s.loan_rate * 100:g}%[/yellow]")
    t.add_row("Loan term", f"[yellow]{s.loan_years}[/yellow] years")
    t.add_row("Expected lifetime", f"[yellow]{s.expected_life}[/yellow] years")

    if settings.model_id is not None:
        from_model = "[blue](from model)[/blue]"
        defaults = "[yellow](using defaults)[/yellow]"
        t.add_row("Permit cost", f"[green]{_fmt_money(s.yearly_permit_cost)}[/green] "
                  f"{from_model if settings.yearly_permit_cost is not None else ''}")
        t.add_row("Insurance", from_model if settings.insurance_points is not None else defaults)
        t.add_row("Maintenance", from_model if settings.maintenance_points is not None else defaults)
    console.print(t)

    years = Table(title="Yearly Breakdown", box=box.SIMPLE_HEAD)
    for col in ("Year", "Loan", "Insurance", "Maintenance", "Permit", "Total", "Monthly"):
        years.add_column(col, justify="right")
    for _, row in breakdown.to_dataframe().iterrows():
        years.add_row(
            str(int(row['Year'])),
            _fmt_money(row['Loan Payment']),
            _fmt_money(row['Insurance']),
            _fmt_money(row['Maintenance']),
            _fmt_money(row['Permit']),
            f"[green]{_fmt_money(row['Total Cost'])}[/green]",
            f"[green]{_fmt_money(row['Monthly Cost'])}[/green]",
        )
    console.print(years)

    if breakdown.upfront_cost:
        console.print(f"Upfront cost: [green]{_fmt_money(breakdown.upfront_cost)}[/green]")
    console.print(f"Average yearly cost: [green]{_fmt_money(breakdown.average_yearly_cost)}[/green] "
                  f"(Monthly: [green]{_fmt_money(breakdown.average_monthly_cost)}[/green])")
    console.print(f"Total lifetime cost: [bold red]{_fmt_money(breakdown.total)}[/bold red]")


@cli.command(name='import')
@click.argument('workbook', type=click.Path(exists=True, dir_okay=False))
@click.option('--sheet', default=None, help='Sheet name (default: first sheet).')
@click.pass_obj
def import_models(catalog, workbook, sheet):
    """Load car models from an Excel sheet into the catalog."""
    try:
        ids = catalog.open().import_excel(workbook, sheet_name=sheet if sheet else 0)
    except ValueError as e:
        err_console.print(f"Error: {e}", markup=False)
        sys.exit(1)
    console.print(f"[green]Imported {len(ids)} car models[/green]")


def main():
    cli()


if __name__ == "__main__":
    main()
