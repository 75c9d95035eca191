"""Shared test fixtures for the ecoatlas test suite."""

import json
import os

import pytest
from unittest.mock import MagicMock

# Keep tests independent of a developer's .env and fast on retries
os.environ.setdefault("ECOATLAS_BASE_DELAY_MS", "400")
os.environ.setdefault("ECOATLAS_LOG_LEVEL", "WARNING")

from ecoatlas.aggregation.tables import (  # noqa: E402
    ENDEMIC_SCHEMA,
    GDP_SCHEMA,
    POPULATION_SCHEMA,
    build_table,
)
from ecoatlas.aggregation.models import DomainTables  # noqa: E402


def binding(**fields):
    """One SPARQL result row: ``binding(isoNum="76")`` -> ``{"isoNum": {"value": "76"}}``."""
    return {
        name: {"type": "literal", "value": str(value)}
        for name, value in fields.items()
        if value is not None
    }


def envelope(*rows):
    """Wrap rows in the ``sparql-results+json`` envelope."""
    return {"head": {"vars": []}, "results": {"bindings": list(rows)}}


@pytest.fixture
def endemic_raw():
    """Brazil and Madagascar with tier counts, plus a row without an ISO code."""
    return envelope(
        binding(
            country="http://www.wikidata.org/entity/Q155",
            countryLabel="Brazil", iso3="BRA", isoNum="076",
            totalEndemicSpecies=120,
            nearThreatenedEndemicSpecies=4,
            vulnerableEndemicSpecies=6,
            endangeredEndemicSpecies=3,
            criticallyEndangeredEndemicSpecies=5,
        ),
        binding(
            country="http://www.wikidata.org/entity/Q1019",
            countryLabel="Madagascar", iso3="MDG", isoNum="450",
            totalEndemicSpecies=300,
            nearThreatenedEndemicSpecies=20,
            vulnerableEndemicSpecies=30,
            endangeredEndemicSpecies=25,
            criticallyEndangeredEndemicSpecies=15,
        ),
        binding(
            country="http://www.wikidata.org/entity/Q23681",
            countryLabel="Northern Cyprus",
            totalEndemicSpecies=9,
        ),
    )


@pytest.fixture
def gdp_raw():
    return envelope(
        binding(countryLabel="Brazil", iso3="BRA", isoNum="076",
                gdpUSD="1920000000000", gdpYear="2022"),
        binding(countryLabel="Argentina", iso3="ARG", isoNum="032",
                gdpUSD="631000000000", gdpYear="2021"),
        binding(countryLabel="Madagascar", iso3="MDG", isoNum="450",
                gdpUSD="15000000000", gdpYear="2022"),
    )


@pytest.fixture
def population_raw():
    return envelope(
        binding(countryLabel="Brazil", iso3="BRA", isoNum="076",
                population="203062512", popYear="2022"),
        binding(countryLabel="Argentina", iso3="ARG", isoNum="032",
                population="46044703", popYear="2022"),
        binding(countryLabel="Madagascar", iso3="MDG", isoNum="450",
                population="28915653", popYear="2020"),
    )


@pytest.fixture
def sample_tables(endemic_raw, gdp_raw, population_raw):
    return DomainTables(
        endemic=build_table(endemic_raw, ENDEMIC_SCHEMA),
        gdp=build_table(gdp_raw, GDP_SCHEMA),
        population=build_table(population_raw, POPULATION_SCHEMA),
    )


@pytest.fixture
def sample_membership():
    return {76: "South America", 32: "South America", 450: "Africa", 710: "Africa"}


def make_response(status_code=200, json_data=None, json_error=False, chunk_size=None):
    """Mock streamed ``httpx.Response`` usable as ``with httpx.stream(...) as resp``."""
    if json_error:
        body = b"<html><body>503 Service Unavailable</body></html>"
    else:
        body = json.dumps(json_data if json_data is not None else envelope()).encode()
    size = chunk_size or len(body) or 1
    resp = MagicMock()
    resp.status_code = status_code
    resp.__enter__.return_value = resp
    resp.__exit__.return_value = False
    resp.iter_bytes.side_effect = lambda: iter(
        [body[i:i + size] for i in range(0, len(body), size)]
    )
    return resp


def fake_client(responses):
    """Client whose ``fetch_with_retry`` answers (or raises) per query text."""
    client = MagicMock()

    def fetch(query, options=None):
        result = responses[query]
        if isinstance(result, Exception):
            raise result
        return result

    client.fetch_with_retry.side_effect = fetch
    return client
