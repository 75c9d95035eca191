"""Data layer for the endemic-threat correlation page.

Joins the three domain tables into one row per country, then fits an
ordinary least squares line of threatened fraction (threatened / total
endemic species) against GDP or population.
"""

from __future__ import annotations

import math
from typing import Iterable

import numpy as np
from pydantic import BaseModel

from ecoatlas.aggregation.models import DomainTables

MIN_ENDEMIC = 50


class CorrelationRow(BaseModel):
    iso_num: int
    country_label: str
    total_endemic: int
    threatened_endemic: int
    fraction: float
    gdp_usd: float
    gdp_year: str = ""
    population: float
    population_year: str = ""


class Regression(BaseModel):
    slope: float = 0.0
    intercept: float = 0.0
    r: float = 0.0
    r2: float = 0.0
    n: int = 0


class AxisScale(BaseModel):
    factor: float = 1.0
    label: str = ""


def combine_dataset(
    tables: DomainTables, min_endemic: int = MIN_ENDEMIC
) -> list[CorrelationRow]:
    """Countries present in all three tables with at least ``min_endemic`` species."""
    endemic = tables.endemic or {}
    gdp = tables.gdp or {}
    population = tables.population or {}

    rows: list[CorrelationRow] = []
    for iso_num, e_row in endemic.items():
        g_row = gdp.get(iso_num)
        p_row = population.get(iso_num)
        if g_row is None or p_row is None:
            continue
        total = e_row.total
        if total <= 0 or total < min_endemic:
            continue
        label = (
            e_row.country_label
            or g_row.country_label
            or p_row.country_label
            or f"ISO {iso_num}"
        )
        rows.append(CorrelationRow(
            iso_num=iso_num,
            country_label=label,
            total_endemic=total,
            threatened_endemic=e_row.threatened,
            fraction=e_row.threatened / total,
            gdp_usd=g_row.gdp_usd,
            gdp_year=g_row.year,
            population=p_row.population,
            population_year=p_row.year,
        ))
    return rows


def linear_regression(points: Iterable[tuple[float, float]]) -> Regression:
    """Least squares fit ``y = slope * x + intercept`` with Pearson ``r``."""
    pts = list(points)
    n = len(pts)
    if not n:
        return Regression()
    xy = np.asarray(pts, dtype=float)
    x, y = xy[:, 0], xy[:, 1]

    sum_x, sum_y = x.sum(), y.sum()
    sum_xy = (x * y).sum()
    sum_xx = (x * x).sum()
    sum_yy = (y * y).sum()

    denom = n * sum_xx - sum_x * sum_x
    slope = (n * sum_xy - sum_x * sum_y) / denom if denom != 0 else 0.0
    intercept = (sum_y - slope * sum_x) / n
    # Guard against tiny negative products from rounding
    r_denom = math.sqrt(max(denom * (n * sum_yy - sum_y * sum_y), 0.0))
    r = (n * sum_xy - sum_x * sum_y) / r_denom if r_denom else 0.0
    return Regression(
        slope=float(slope),
        intercept=float(intercept),
        r=float(r),
        r2=float(r * r),
        n=n,
    )


def choose_scale(max_value: float, base_label: str) -> AxisScale:
    """Pick a readable unit for an axis whose largest value is ``max_value``."""
    if not max_value or max_value <= 0:
        return AxisScale(factor=1.0, label=base_label)
    if max_value >= 1e12:
        return AxisScale(factor=1e12, label=f"{base_label} (trillions)")
    if max_value >= 1e9:
        return AxisScale(factor=1e9, label=f"{base_label} (billions)")
    return AxisScale(factor=1e6, label=f"{base_label} (millions)")


def scatter_points(
    rows: list[CorrelationRow], field: str, scale: AxisScale | None = None
) -> list[tuple[float, float]]:
    """``(x, fraction)`` pairs for ``field``, scaled and limited to positive x."""
    factor = scale.factor if scale else 1.0
    points = []
    for row in rows:
        value = getattr(row, field)
        if math.isfinite(value) and value > 0:
            points.append((value / factor, row.fraction))
    return points


def format_number(value: float | None, kind: str = "") -> str:
    """Human-readable figure for tooltips and CLI output."""
    if value is None or not math.isfinite(value):
        return "—"
    if kind == "usd":
        if value >= 1e12:
            return f"{value / 1e12:.2f} T USD"
        if value >= 1e9:
            return f"{value / 1e9:.2f} B USD"
        return f"{round(value):,} USD"
    if kind == "pop":
        if value >= 1e9:
            return f"{value / 1e9:.2f} B people"
        if value >= 1e6:
            return f"{value / 1e6:.2f} M people"
        return f"{round(value):,} people"
    return f"{round(value):,}"
