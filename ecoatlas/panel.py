"""Side-panel view models handed to the rendering layer.

Each domain is reported in exactly one of three states:

* ``ok`` - at least one record contributed, ``values`` holds the figures
* ``empty`` - the data loaded but has nothing for this selection ("No data")
* ``error`` - the data could not be fetched ("Request failed")

The title is always set so navigation keeps working when every domain is
empty or failed.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from pydantic import BaseModel, Field

from ecoatlas.aggregation.models import Domain, EntityLookup, GroupSummary

NO_DATA = "No data"
REQUEST_FAILED = "Request failed"

CONTINENT_MODE = "Continent overview"
COUNTRY_MODE = "Country profile"

CONTINENT_FAILED = "Unable to load continent aggregates right now."
COUNTRY_FAILED = "Unable to load country figures right now."

_COUNT_LABELS = {
    Domain.endemic: "endemic",
    Domain.gdp: "GDP",
    Domain.population: "population",
}


class DomainStatus(str, Enum):
    ok = "ok"
    empty = "empty"
    error = "error"


class DomainView(BaseModel):
    status: DomainStatus
    values: dict[str, float] = Field(default_factory=dict)
    year_note: str = ""
    message: str = ""


class Panel(BaseModel):
    title: str
    mode: str
    context: str = ""
    endemic: DomainView
    gdp: DomainView
    population: DomainView

    def view(self, domain: Domain) -> DomainView:
        return getattr(self, domain.value)


def _empty() -> DomainView:
    return DomainView(status=DomainStatus.empty, message=NO_DATA)


def _error() -> DomainView:
    return DomainView(status=DomainStatus.error, message=REQUEST_FAILED)


def year_label(value: str) -> str:
    """``"2022"`` -> ``"Year: 2022"``; notes that already carry a label pass through."""
    if not value:
        return ""
    if value.lower().startswith("latest") or ":" in value:
        return value
    return f"Year: {value}"


def continent_panel(
    summary: GroupSummary, failed: Iterable[Domain] = ()
) -> Panel:
    """Panel for a continent; domains in ``failed`` are shown as request failures."""
    if not summary.total_members:
        panel = Panel(
            title=summary.name,
            mode=CONTINENT_MODE,
            context=summary.note,
            endemic=DomainView(status=DomainStatus.empty),
            gdp=DomainView(status=DomainStatus.empty),
            population=DomainView(status=DomainStatus.empty),
        )
        return _mark_failed(panel, failed, CONTINENT_FAILED)

    def counted(domain: Domain, view: DomainView) -> DomainView:
        count = getattr(summary, f"{domain.value}_count")
        view.message = f"Countries with {_COUNT_LABELS[domain]} data: {count}"
        return view

    if summary.has(Domain.endemic):
        endemic = counted(Domain.endemic, DomainView(
            status=DomainStatus.ok,
            values={
                "total": summary.total_endemic,
                "near_threatened": summary.near_threatened,
                "vulnerable": summary.vulnerable,
                "endangered": summary.endangered,
                "critically_endangered": summary.critically_endangered,
                "threatened": summary.threatened,
            },
        ))
    else:
        endemic = _empty()

    if summary.has(Domain.gdp):
        gdp = counted(Domain.gdp, DomainView(
            status=DomainStatus.ok,
            values={"gdp_usd": summary.gdp_usd},
            year_note=year_label(summary.gdp_year_note),
        ))
    else:
        gdp = _empty()

    if summary.has(Domain.population):
        population = counted(Domain.population, DomainView(
            status=DomainStatus.ok,
            values={"population": summary.population},
            year_note=year_label(summary.population_year_note),
        ))
    else:
        population = _empty()

    panel = Panel(
        title=summary.name,
        mode=CONTINENT_MODE,
        context=(
            f"{summary.note} Select a highlighted country within "
            f"{summary.name} to drill down."
        ),
        endemic=endemic,
        gdp=gdp,
        population=population,
    )
    return _mark_failed(panel, failed, CONTINENT_FAILED)


def country_panel(
    lookup: EntityLookup, fallback_name: str = "", failed: Iterable[Domain] = ()
) -> Panel:
    if lookup.endemic is not None:
        e = lookup.endemic
        endemic = DomainView(
            status=DomainStatus.ok,
            values={
                "total": e.total,
                "near_threatened": e.near_threatened,
                "vulnerable": e.vulnerable,
                "endangered": e.endangered,
                "critically_endangered": e.critically_endangered,
                "threatened": e.threatened,
            },
        )
    else:
        endemic = _empty()

    if lookup.gdp is not None:
        gdp = DomainView(
            status=DomainStatus.ok,
            values={"gdp_usd": lookup.gdp.gdp_usd},
            year_note=year_label(lookup.gdp.year),
        )
    else:
        gdp = _empty()

    if lookup.population is not None:
        population = DomainView(
            status=DomainStatus.ok,
            values={"population": lookup.population.population},
            year_note=year_label(lookup.population.year),
        )
    else:
        population = _empty()

    panel = Panel(
        title=lookup.label(fallback_name),
        mode=COUNTRY_MODE,
        context="Country-level figures pulled directly from cached Wikidata tables.",
        endemic=endemic,
        gdp=gdp,
        population=population,
    )
    return _mark_failed(panel, failed, COUNTRY_FAILED)


def _mark_failed(panel: Panel, failed: Iterable[Domain], context: str) -> Panel:
    failed = list(failed)
    for domain in failed:
        setattr(panel, domain.value, _error())
    if failed:
        panel.context = context
    return panel
