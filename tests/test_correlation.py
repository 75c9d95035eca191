"""Tests for the correlation dataset, regression and axis helpers."""

import math

import pytest

from ecoatlas.aggregation.correlation import (
    MIN_ENDEMIC,
    CorrelationRow,
    choose_scale,
    combine_dataset,
    format_number,
    linear_regression,
    scatter_points,
)
from ecoatlas.aggregation.models import (
    DomainTables,
    EndemicRecord,
    GdpRecord,
    PopulationRecord,
)


def _row(iso_num=1, gdp_usd=1.0, population=1.0, fraction=0.5):
    return CorrelationRow(
        iso_num=iso_num, country_label=f"C{iso_num}", total_endemic=100,
        threatened_endemic=int(fraction * 100), fraction=fraction,
        gdp_usd=gdp_usd, population=population,
    )


class TestCombineDataset:
    def test_joins_countries_present_everywhere(self, sample_tables):
        rows = combine_dataset(sample_tables)
        by_key = {r.iso_num: r for r in rows}

        assert sorted(by_key) == [76, 450]
        assert by_key[76].fraction == pytest.approx(18 / 120)
        assert by_key[450].fraction == pytest.approx(90 / 300)
        assert by_key[450].population_year == "2020"
        assert by_key[76].country_label == "Brazil"

    def test_threshold_filters_small_counts(self, sample_tables):
        rows = combine_dataset(sample_tables, min_endemic=200)
        assert [r.iso_num for r in rows] == [450]

    def test_zero_total_is_excluded_even_without_threshold(self):
        tables = DomainTables(
            endemic={3: EndemicRecord(total=0)},
            gdp={3: GdpRecord(gdp_usd=10)},
            population={3: PopulationRecord(population=10)},
        )
        assert combine_dataset(tables, min_endemic=0) == []

    def test_default_threshold(self):
        assert MIN_ENDEMIC == 50

    def test_missing_tables(self):
        assert combine_dataset(DomainTables()) == []


class TestLinearRegression:
    def test_perfect_fit(self):
        fit = linear_regression([(1, 2), (2, 4), (3, 6)])
        assert fit.slope == pytest.approx(2.0)
        assert fit.intercept == pytest.approx(0.0)
        assert fit.r == pytest.approx(1.0)
        assert fit.r2 == pytest.approx(1.0)
        assert fit.n == 3

    def test_negative_correlation(self):
        fit = linear_regression([(0, 1.0), (1, 0.5), (2, 0.0)])
        assert fit.slope == pytest.approx(-0.5)
        assert fit.intercept == pytest.approx(1.0)
        assert fit.r == pytest.approx(-1.0)

    def test_empty_input(self):
        fit = linear_regression([])
        assert fit.n == 0
        assert fit.slope == 0.0

    def test_constant_x_has_zero_slope(self):
        fit = linear_regression([(2, 1.0), (2, 3.0)])
        assert fit.slope == 0.0
        assert fit.intercept == pytest.approx(2.0)
        assert fit.r == 0.0


class TestChooseScale:
    @pytest.mark.parametrize("value, factor, suffix", [
        (2.5e12, 1e12, "(trillions)"),
        (4.0e9, 1e9, "(billions)"),
        (3.0e6, 1e6, "(millions)"),
    ])
    def test_units(self, value, factor, suffix):
        scale = choose_scale(value, "GDP (USD)")
        assert scale.factor == factor
        assert scale.label == f"GDP (USD) {suffix}"

    def test_non_positive_keeps_base_unit(self):
        scale = choose_scale(0, "Population")
        assert scale.factor == 1.0
        assert scale.label == "Population"


class TestScatterPoints:
    def test_scales_and_skips_non_positive(self):
        rows = [_row(1, gdp_usd=2e12, fraction=0.2), _row(2, gdp_usd=0.0)]
        scale = choose_scale(2e12, "GDP (USD)")
        assert scatter_points(rows, "gdp_usd", scale) == [(2.0, 0.2)]

    def test_unscaled(self):
        rows = [_row(1, population=500.0, fraction=0.1)]
        assert scatter_points(rows, "population") == [(500.0, 0.1)]


class TestFormatNumber:
    def test_missing(self):
        assert format_number(None) == "—"
        assert format_number(math.inf, "usd") == "—"

    def test_usd(self):
        assert format_number(1.92e12, "usd") == "1.92 T USD"
        assert format_number(1.5e10, "usd") == "15.00 B USD"
        assert format_number(5000, "usd") == "5,000 USD"

    def test_population(self):
        assert format_number(1.4e9, "pop") == "1.40 B people"
        assert format_number(203062512, "pop") == "203.06 M people"
        assert format_number(98000, "pop") == "98,000 people"

    def test_plain(self):
        assert format_number(1234567) == "1,234,567"
