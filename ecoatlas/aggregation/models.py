"""Pydantic v2 models for per-country tables and continent summaries."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class Domain(str, Enum):
    """The three independent metric categories tracked per country."""
    endemic = "endemic"
    gdp = "gdp"
    population = "population"


class CountryRecord(BaseModel):
    country_label: str = ""
    iso3: str = ""
    iso_num: str = ""


class EndemicRecord(CountryRecord):
    """Endemic species counts for one country.

    ``threatened`` is the sum of the four tracked IUCN tiers. It is not
    expected to match ``total``: species outside those tiers (LC, DD, NE)
    only show up in the total.
    """

    total: int = Field(default=0, ge=0)
    near_threatened: int = Field(default=0, ge=0)
    vulnerable: int = Field(default=0, ge=0)
    endangered: int = Field(default=0, ge=0)
    critically_endangered: int = Field(default=0, ge=0)

    @property
    def threatened(self) -> int:
        return (
            self.near_threatened
            + self.vulnerable
            + self.endangered
            + self.critically_endangered
        )


class GdpRecord(CountryRecord):
    gdp_usd: float = 0.0
    year: str = ""


class PopulationRecord(CountryRecord):
    population: float = 0.0
    year: str = ""


class DomainTables(BaseModel):
    """The three per-country tables. ``None`` means the domain never loaded."""

    endemic: dict[int, EndemicRecord] | None = None
    gdp: dict[int, GdpRecord] | None = None
    population: dict[int, PopulationRecord] | None = None

    def get(self, domain: Domain) -> dict | None:
        return getattr(self, domain.value)

    def missing(self) -> list[Domain]:
        return [d for d in Domain if self.get(d) is None]

    @property
    def complete(self) -> bool:
        return not self.missing()


class GroupSummary(BaseModel):
    """Continent-level fold of the three tables.

    A domain sum is ``None`` when no member country contributed a record,
    which is distinct from a genuine zero.
    """

    name: str
    total_members: int = 0

    endemic_count: int = 0
    gdp_count: int = 0
    population_count: int = 0

    total_endemic: int | None = None
    near_threatened: int | None = None
    vulnerable: int | None = None
    endangered: int | None = None
    critically_endangered: int | None = None
    threatened: int | None = None

    gdp_usd: float | None = None
    population: float | None = None

    gdp_years: list[str] = Field(default_factory=list)
    population_years: list[str] = Field(default_factory=list)
    gdp_year_note: str = ""
    population_year_note: str = ""

    note: str = ""

    def has(self, domain: Domain) -> bool:
        return getattr(self, f"{domain.value}_count") > 0


class EntityLookup(BaseModel):
    """Whichever of the three records exist for one country."""

    iso_num: int
    endemic: EndemicRecord | None = None
    gdp: GdpRecord | None = None
    population: PopulationRecord | None = None

    def has(self, domain: Domain) -> bool:
        return getattr(self, domain.value) is not None

    def label(self, fallback: str = "") -> str:
        """Best available country name, preferring the SPARQL labels."""
        for record in (self.endemic, self.gdp, self.population):
            if record is not None and record.country_label:
                return record.country_label
        return fallback or f"ISO numeric {self.iso_num}"
