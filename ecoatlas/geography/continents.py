"""Continent membership and biome classification for countries.

Classification is data-driven: explicit name overrides and biome lists live
in ``ecoatlas/data/geography.yaml``. Countries without an override fall back
to :func:`continent_from_centroid`, a set of coarse longitude/latitude
rules.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

import yaml

from ecoatlas.geography.topology import CountryFeature
from ecoatlas.settings import get_settings

logger = logging.getLogger(__name__)

UNASSIGNED = "Unassigned"


@dataclass
class GeographyRules:
    continent_overrides: dict[str, str] = field(default_factory=dict)
    biomes: list[tuple[str, frozenset[str]]] = field(default_factory=list)

    @classmethod
    def from_yaml(cls, yaml_path: str | Path | None = None) -> GeographyRules:
        """Load rules from YAML (defaults to the packaged table)."""
        yaml_path = Path(yaml_path) if yaml_path else get_settings().geography_rules_path
        with open(yaml_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(
            continent_overrides=dict(data.get("continent_overrides") or {}),
            biomes=[
                (entry["biome"], frozenset(entry.get("countries") or []))
                for entry in data.get("biomes") or []
            ],
        )


_default_rules: GeographyRules | None = None


def default_rules() -> GeographyRules:
    """Packaged rules, loaded on first use."""
    global _default_rules
    if _default_rules is None:
        _default_rules = GeographyRules.from_yaml()
    return _default_rules


def continent_from_centroid(lon: float, lat: float) -> str:
    """Coarse continent guess from a centroid in degrees."""
    if not (math.isfinite(lon) and math.isfinite(lat)):
        return UNASSIGNED
    if lat <= -50:
        return "Antarctica"
    if lon < -30:
        return "North America" if lat >= 15 else "South America"
    if -25 <= lon <= 60 and lat >= 35:
        return "Europe"
    if -20 <= lon <= 52 and -40 < lat < 35 and not (lon > 40 and lat > 20):
        return "Africa"
    if (lon >= 110 and lat <= -10) or lon >= 150:
        return "Oceania"
    if lon >= 95 and lat <= -15:
        return "Oceania"
    if lon >= 25:
        return "Asia"
    if lat >= 0:
        return "Europe"
    return "Africa"


def infer_continent(
    name: str,
    centroid: tuple[float, float] | None,
    rules: GeographyRules | None = None,
) -> str:
    rules = rules or default_rules()
    if name in rules.continent_overrides:
        return rules.continent_overrides[name]
    if centroid is None:
        return UNASSIGNED
    return continent_from_centroid(*centroid)


def classify_biome(name: str, rules: GeographyRules | None = None) -> str | None:
    """Biome used to tint a country, or None when the tables don't cover it."""
    rules = rules or default_rules()
    for biome, countries in rules.biomes:
        if name in countries:
            return biome
    return None


def build_membership(
    features: Iterable[CountryFeature], rules: GeographyRules | None = None
) -> dict[int, str]:
    """Map each country's ISO numeric key to its continent.

    Features without a numeric id and countries left ``Unassigned`` are
    skipped: they have nothing to join against.
    """
    rules = rules or default_rules()
    membership: dict[int, str] = {}
    skipped = 0
    for feature in features:
        key = feature.iso_num
        continent = infer_continent(feature.name, feature.centroid, rules)
        if key is None or continent == UNASSIGNED:
            skipped += 1
            continue
        membership[key] = continent
    if skipped:
        logger.debug("Skipped %d features without a key or continent", skipped)
    return membership


def members_by_continent(membership: dict[int, str]) -> dict[str, list[int]]:
    grouped: dict[str, list[int]] = defaultdict(list)
    for key, continent in sorted(membership.items()):
        grouped[continent].append(key)
    return dict(grouped)
