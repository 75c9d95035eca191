"""Country boundaries, continent membership and biome tables."""

from ecoatlas.geography.continents import (
    UNASSIGNED,
    GeographyRules,
    build_membership,
    classify_biome,
    continent_from_centroid,
    infer_continent,
    members_by_continent,
)
from ecoatlas.geography.topology import (
    CountryFeature,
    decode_countries,
    fetch_topology,
)

__all__ = [
    "CountryFeature",
    "GeographyRules",
    "UNASSIGNED",
    "build_membership",
    "classify_biome",
    "continent_from_centroid",
    "decode_countries",
    "fetch_topology",
    "infer_continent",
    "members_by_continent",
]
