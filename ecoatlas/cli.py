"""
ecoatlas CLI - endemic species, GDP and population by country and continent

Every command loads live data from the Wikidata SPARQL endpoint.
"""
import sys

import click
from rich.console import Console
from rich.table import Table

from ecoatlas.aggregation.correlation import (
    choose_scale,
    format_number,
    linear_regression,
    scatter_points,
)
from ecoatlas.aggregation.models import Domain
from ecoatlas.geography.continents import members_by_continent
from ecoatlas.geography.topology import decode_countries, fetch_topology
from ecoatlas.panel import DomainStatus, Panel, country_panel
from ecoatlas.session import DataSession
from ecoatlas.settings import get_settings
from ecoatlas.sparql.client import FetchFailure, FetchOptions, SparqlClient
from ecoatlas.utils import get_logger, setup_logging

console = Console()
logger = get_logger(__name__)

_DOMAIN_TITLES = {
    Domain.endemic: "Endemic species",
    Domain.gdp: "GDP",
    Domain.population: "Population",
}


def _make_session() -> DataSession:
    cfg = get_settings()
    client = SparqlClient(cfg.sparql_endpoint, FetchOptions.from_settings(cfg))
    return DataSession(client=client)


def _load_geography(session: DataSession) -> None:
    with console.status("[bold green]Loading country boundaries..."):
        topology = fetch_topology(get_settings().topology_url)
    session.load_geography(decode_countries(topology))


def _format_values(domain: Domain, values: dict[str, float]) -> str:
    if domain is Domain.endemic:
        return (
            f"total {format_number(values['total'])}, "
            f"threatened {format_number(values['threatened'])} "
            f"(NT {format_number(values['near_threatened'])}, "
            f"VU {format_number(values['vulnerable'])}, "
            f"EN {format_number(values['endangered'])}, "
            f"CR {format_number(values['critically_endangered'])})"
        )
    if domain is Domain.gdp:
        return format_number(values["gdp_usd"], "usd")
    return format_number(values["population"], "pop")


def _print_panel(panel: Panel) -> None:
    console.print(f"\n[bold blue]{panel.title}[/bold blue] [dim]({panel.mode})[/dim]")

    table = Table()
    table.add_column("Domain", style="cyan")
    table.add_column("Value", style="magenta")
    table.add_column("Year")
    table.add_column("Status")

    for domain in Domain:
        view = panel.view(domain)
        if view.status is DomainStatus.ok:
            value = _format_values(domain, view.values)
        else:
            value = "—"
        status = f"[red]{view.message}[/red]" if view.status is DomainStatus.error else view.message
        table.add_row(_DOMAIN_TITLES[domain], value, view.year_note, status)

    console.print(table)
    if panel.context:
        console.print(f"[dim]{panel.context}[/dim]")


# ═══════════════════════════════════════════════════════════════════
# MAIN CLI GROUP
# ═══════════════════════════════════════════════════════════════════

@click.group()
@click.version_option(version='0.1.0')
@click.option('--log-level', default=None, help='Logging level (default from settings)')
def main(log_level):
    """
    ecoatlas - endemic species, GDP and population explorer

    Aggregates live Wikidata statistics per country and per continent.
    """
    cfg = get_settings()
    setup_logging(log_level or cfg.log_level, cfg.log_file)


# ═══════════════════════════════════════════════════════════════════
# MAP COMMANDS
# ═══════════════════════════════════════════════════════════════════

@main.command()
@click.argument('iso_num', type=int)
def country(iso_num):
    """Show the profile of one country by ISO 3166 numeric code"""
    session = _make_session()
    try:
        with console.status("[bold green]Querying Wikidata..."):
            lookup = session.lookup(iso_num)
    except FetchFailure as e:
        console.print(f"\n[red]✗ Error: {e}[/red]")
        sys.exit(1)

    _print_panel(country_panel(lookup))


@main.command()
@click.argument('name')
def continent(name):
    """Aggregate all countries of a continent"""
    session = _make_session()
    try:
        _load_geography(session)
    except ConnectionError as e:
        console.print(f"\n[red]✗ Error: {e}[/red]")
        sys.exit(1)

    with console.status("[bold green]Aggregating continent-wide data..."):
        panel = session.select_continent(name)

    _print_panel(panel)
    if session.failure is not None:
        sys.exit(1)


@main.command()
def continents():
    """List continents and how many countries each one holds"""
    session = _make_session()
    try:
        _load_geography(session)
    except ConnectionError as e:
        console.print(f"\n[red]✗ Error: {e}[/red]")
        sys.exit(1)

    table = Table(title="Continents")
    table.add_column("Continent", style="cyan")
    table.add_column("Countries", style="magenta")
    for name, keys in sorted(members_by_continent(session.membership).items()):
        table.add_row(name, str(len(keys)))
    console.print(table)


# ═══════════════════════════════════════════════════════════════════
# CORRELATION COMMANDS
# ═══════════════════════════════════════════════════════════════════

@main.command()
@click.option('--min-endemic', type=int, default=None,
              help='Minimum endemic species per country')
def correlate(min_endemic):
    """Fit threatened-endemic fraction against GDP and population"""
    if min_endemic is None:
        min_endemic = get_settings().min_endemic
    session = _make_session()
    try:
        with console.status("[bold green]Loading live data from QLever..."):
            rows = session.correlation_dataset(min_endemic)
    except FetchFailure as e:
        console.print(f"\n[red]✗ Error: {e}[/red]")
        sys.exit(1)

    if not rows:
        console.print("No countries meet the minimum endemic species threshold yet.")
        return
    console.print(
        f"\nLoaded [cyan]{len(rows)}[/cyan] countries (≥ {min_endemic} endemic species)."
    )

    table = Table(title="Linear regression (y = a·x + b)")
    table.add_column("x", style="cyan")
    table.add_column("n")
    table.add_column("a (slope)")
    table.add_column("b (intercept)")
    table.add_column("r")
    table.add_column("R²")

    for field, base_label in (("gdp_usd", "GDP (USD)"), ("population", "Population")):
        scale = choose_scale(max(getattr(r, field) for r in rows), base_label)
        fit = linear_regression(scatter_points(rows, field, scale))
        table.add_row(
            scale.label, str(fit.n), f"{fit.slope:.4f}", f"{fit.intercept:.4f}",
            f"{fit.r:.3f}", f"{fit.r2:.3f}",
        )
    console.print(table)


if __name__ == '__main__':
    main()
