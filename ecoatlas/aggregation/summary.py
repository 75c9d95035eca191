"""Continent summaries and single-country lookups over the domain tables.

Both functions are pure: they read the tables and the membership mapping
and build a fresh result on every call.
"""

from __future__ import annotations

from typing import Iterable, Mapping

from ecoatlas.aggregation.models import DomainTables, EntityLookup, GroupSummary


def sorted_years(years: Iterable[str | int]) -> list[str]:
    """Distinct non-blank years, in numeric order when every one is numeric."""
    distinct = {str(y).strip() for y in years if str(y).strip()}
    if all(y.isascii() and y.isdigit() for y in distinct):
        return sorted(distinct, key=int)
    return sorted(distinct)


def format_year_note(years: Iterable[str | int]) -> str:
    """Collapse a set of observation years into a short label.

    ``{}`` -> ``""``, ``{2020}`` -> ``"latest year: 2020"``,
    ``{2018, 2021, 2019}`` -> ``"latest years: 2018–2021"``.
    """
    distinct = sorted_years(years)
    if not distinct:
        return ""
    if len(distinct) == 1:
        return f"latest year: {distinct[0]}"
    return f"latest years: {distinct[0]}–{distinct[-1]}"


def members_of_group(name: str, membership: Mapping[int, str]) -> list[int]:
    """Entity keys assigned to continent ``name``, in ascending order."""
    return sorted(key for key, group in membership.items() if group == name)


def summarize_group(
    name: str,
    membership: Mapping[int, str],
    tables: DomainTables,
) -> GroupSummary:
    """Fold every member country's records into one continent summary."""
    members = members_of_group(name, membership)
    endemic = tables.endemic or {}
    gdp = tables.gdp or {}
    population = tables.population or {}

    endemic_count = gdp_count = population_count = 0
    total = nt = vu = en = cr = 0
    gdp_sum = 0.0
    population_sum = 0.0
    gdp_years: set[str] = set()
    population_years: set[str] = set()

    for key in members:
        e_row = endemic.get(key)
        if e_row is not None:
            endemic_count += 1
            total += e_row.total
            nt += e_row.near_threatened
            vu += e_row.vulnerable
            en += e_row.endangered
            cr += e_row.critically_endangered

        g_row = gdp.get(key)
        if g_row is not None:
            gdp_count += 1
            gdp_sum += g_row.gdp_usd
            if g_row.year:
                gdp_years.add(g_row.year)

        p_row = population.get(key)
        if p_row is not None:
            population_count += 1
            population_sum += p_row.population
            if p_row.year:
                population_years.add(p_row.year)

    if members:
        note = (
            f"Aggregated from {len(members)} countries "
            f"({endemic_count} with endemic data)."
        )
    else:
        note = "No linked countries found for this continent yet."

    has_endemic = endemic_count > 0
    return GroupSummary(
        name=name,
        total_members=len(members),
        endemic_count=endemic_count,
        gdp_count=gdp_count,
        population_count=population_count,
        total_endemic=total if has_endemic else None,
        near_threatened=nt if has_endemic else None,
        vulnerable=vu if has_endemic else None,
        endangered=en if has_endemic else None,
        critically_endangered=cr if has_endemic else None,
        threatened=(nt + vu + en + cr) if has_endemic else None,
        gdp_usd=gdp_sum if gdp_count else None,
        population=population_sum if population_count else None,
        gdp_years=sorted_years(gdp_years),
        population_years=sorted_years(population_years),
        gdp_year_note=format_year_note(gdp_years),
        population_year_note=format_year_note(population_years),
        note=note,
    )


def lookup_entity(key: int, tables: DomainTables) -> EntityLookup:
    """Probe each table for ``key`` without filling in missing domains."""
    return EntityLookup(
        iso_num=key,
        endemic=(tables.endemic or {}).get(key),
        gdp=(tables.gdp or {}).get(key),
        population=(tables.population or {}).get(key),
    )
