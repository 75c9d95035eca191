"""Convert SPARQL result envelopes into per-country lookup tables.

Each row of ``results.bindings`` is a flat mapping of variable name to
``{"value": "..."}``; any variable may be missing. Rows are keyed by their
ISO 3166 numeric code, which is the id used by the world-atlas topology.
Rows without a parseable code cannot be joined to a country and are
dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from ecoatlas.aggregation.models import (
    CountryRecord,
    Domain,
    EndemicRecord,
    GdpRecord,
    PopulationRecord,
)
from ecoatlas.utils import parse_int_key, parse_number

logger = logging.getLogger(__name__)

KEY_VARIABLE = "isoNum"

# SPARQL variable -> record field, shared by every domain
_COMMON_STRINGS = {
    "countryLabel": "country_label",
    "iso3": "iso3",
    "isoNum": "iso_num",
}


@dataclass(frozen=True)
class DomainSchema:
    """How one domain's SPARQL variables map onto its record model."""

    domain: Domain
    record_type: type[CountryRecord]
    numeric_fields: dict[str, str]
    string_fields: dict[str, str] = field(default_factory=dict)
    integer_fields: frozenset[str] = frozenset()

    def record_from_row(self, row: dict[str, Any]) -> CountryRecord:
        values: dict[str, Any] = {}
        for var, attr in {**_COMMON_STRINGS, **self.string_fields}.items():
            values[attr] = binding_value(row, var) or ""
        for var, attr in self.numeric_fields.items():
            number = parse_number(binding_value(row, var))
            if attr in self.integer_fields:
                values[attr] = max(int(number), 0)
            else:
                values[attr] = number
        return self.record_type(**values)


ENDEMIC_SCHEMA = DomainSchema(
    domain=Domain.endemic,
    record_type=EndemicRecord,
    numeric_fields={
        "totalEndemicSpecies": "total",
        "nearThreatenedEndemicSpecies": "near_threatened",
        "vulnerableEndemicSpecies": "vulnerable",
        "endangeredEndemicSpecies": "endangered",
        "criticallyEndangeredEndemicSpecies": "critically_endangered",
    },
    integer_fields=frozenset({
        "total", "near_threatened", "vulnerable", "endangered",
        "critically_endangered",
    }),
)

GDP_SCHEMA = DomainSchema(
    domain=Domain.gdp,
    record_type=GdpRecord,
    numeric_fields={"gdpUSD": "gdp_usd"},
    string_fields={"gdpYear": "year"},
)

POPULATION_SCHEMA = DomainSchema(
    domain=Domain.population,
    record_type=PopulationRecord,
    numeric_fields={"population": "population"},
    string_fields={"popYear": "year"},
)

SCHEMAS: dict[Domain, DomainSchema] = {
    s.domain: s for s in (ENDEMIC_SCHEMA, GDP_SCHEMA, POPULATION_SCHEMA)
}


def binding_value(row: dict[str, Any], var: str) -> str | None:
    """Return the string value of ``var`` in a SPARQL binding row."""
    cell = row.get(var)
    if isinstance(cell, dict):
        return cell.get("value")
    return None


def iter_bindings(raw: dict[str, Any] | list | None) -> list[dict[str, Any]]:
    """Extract the binding rows from a SPARQL envelope (or a bare row list)."""
    if raw is None:
        return []
    if isinstance(raw, list):
        rows = raw
    else:
        rows = (raw.get("results") or {}).get("bindings") or []
    return [r for r in rows if isinstance(r, dict)]


def build_table(
    raw: dict[str, Any] | list | None, schema: DomainSchema
) -> dict[int, CountryRecord]:
    """Build a ``{iso_numeric: record}`` table for one domain.

    Later rows for the same key replace earlier ones.
    """
    table: dict[int, CountryRecord] = {}
    dropped = 0
    for row in iter_bindings(raw):
        key = parse_int_key(binding_value(row, KEY_VARIABLE))
        if key is None:
            dropped += 1
            continue
        table[key] = schema.record_from_row(row)

    if dropped:
        logger.debug(
            "Dropped %d %s rows without an ISO numeric code",
            dropped, schema.domain.value,
        )
    logger.info("Built %s table with %d countries", schema.domain.value, len(table))
    return table
