"""Tests for the side-panel view models."""

from ecoatlas.aggregation.models import Domain, EntityLookup, GdpRecord, GroupSummary
from ecoatlas.aggregation.summary import lookup_entity, summarize_group
from ecoatlas.panel import (
    CONTINENT_FAILED,
    CONTINENT_MODE,
    COUNTRY_FAILED,
    COUNTRY_MODE,
    NO_DATA,
    REQUEST_FAILED,
    DomainStatus,
    continent_panel,
    country_panel,
    year_label,
)


class TestYearLabel:
    def test_bare_year(self):
        assert year_label("2022") == "Year: 2022"

    def test_note_passes_through(self):
        assert year_label("latest years: 2018–2021") == "latest years: 2018–2021"
        assert year_label("Year: 2020") == "Year: 2020"

    def test_blank(self):
        assert year_label("") == ""


class TestContinentPanel:
    def test_populated_continent(self, sample_tables, sample_membership):
        summary = summarize_group("South America", sample_membership, sample_tables)
        panel = continent_panel(summary)

        assert panel.title == "South America"
        assert panel.mode == CONTINENT_MODE
        assert panel.endemic.status is DomainStatus.ok
        assert panel.endemic.values["total"] == 120
        assert panel.endemic.values["threatened"] == 18
        assert panel.endemic.message == "Countries with endemic data: 1"
        assert panel.gdp.message == "Countries with GDP data: 2"
        assert panel.gdp.year_note == "latest years: 2021–2022"
        assert panel.population.message == "Countries with population data: 2"
        assert panel.context == (
            "Aggregated from 2 countries (1 with endemic data). "
            "Select a highlighted country within South America to drill down."
        )

    def test_domain_without_contributors_shows_no_data(self):
        summary = GroupSummary(name="Freedonia", total_members=2, gdp_count=1, gdp_usd=5.0)
        panel = continent_panel(summary)
        assert panel.endemic.status is DomainStatus.empty
        assert panel.endemic.message == NO_DATA
        assert panel.gdp.status is DomainStatus.ok
        assert panel.population.message == NO_DATA

    def test_continent_without_members(self, sample_tables, sample_membership):
        summary = summarize_group("Antarctica", sample_membership, sample_tables)
        panel = continent_panel(summary)
        assert panel.title == "Antarctica"
        assert panel.context == "No linked countries found for this continent yet."
        for domain in Domain:
            assert panel.view(domain).status is DomainStatus.empty

    def test_failed_domains(self, sample_tables, sample_membership):
        summary = summarize_group("Africa", sample_membership, sample_tables)
        panel = continent_panel(summary, failed=[Domain.gdp])
        assert panel.gdp.status is DomainStatus.error
        assert panel.gdp.message == REQUEST_FAILED
        assert panel.endemic.status is DomainStatus.ok
        assert panel.context == CONTINENT_FAILED
        assert panel.title == "Africa"


class TestCountryPanel:
    def test_full_profile(self, sample_tables):
        panel = country_panel(lookup_entity(76, sample_tables), "Brasil")
        assert panel.title == "Brazil"
        assert panel.mode == COUNTRY_MODE
        assert panel.endemic.values["critically_endangered"] == 5
        assert panel.gdp.values["gdp_usd"] == 1.92e12
        assert panel.gdp.year_note == "Year: 2022"
        assert panel.population.year_note == "Year: 2022"

    def test_partial_profile_uses_fallback_name(self):
        lookup = EntityLookup(iso_num=32, gdp=GdpRecord(gdp_usd=6.31e11, year="2021"))
        panel = country_panel(lookup, "Argentina")
        assert panel.title == "Argentina"
        assert panel.endemic.message == NO_DATA
        assert panel.gdp.status is DomainStatus.ok

    def test_unknown_country(self, sample_tables):
        panel = country_panel(lookup_entity(999, sample_tables))
        assert panel.title == "ISO numeric 999"
        assert all(panel.view(d).status is DomainStatus.empty for d in Domain)

    def test_failed_domains(self, sample_tables):
        panel = country_panel(
            lookup_entity(76, sample_tables), failed=[Domain.endemic, Domain.population],
        )
        assert panel.endemic.status is DomainStatus.error
        assert panel.population.status is DomainStatus.error
        assert panel.gdp.status is DomainStatus.ok
        assert panel.context == COUNTRY_FAILED
