"""
ecoatlas
Endemic species, GDP and population aggregation over live Wikidata
"""

__version__ = "0.1.0"

from ecoatlas.aggregation import (
    DomainTables,
    GroupSummary,
    build_table,
    lookup_entity,
    summarize_group,
)
from ecoatlas.session import DataSession, LoadState
from ecoatlas.settings import EcoAtlasSettings, get_settings
from ecoatlas.sparql import FetchFailure, FetchOptions, SparqlClient, fetch_with_retry

__all__ = [
    "DataSession",
    "DomainTables",
    "EcoAtlasSettings",
    "FetchFailure",
    "FetchOptions",
    "GroupSummary",
    "LoadState",
    "SparqlClient",
    "build_table",
    "fetch_with_retry",
    "get_settings",
    "lookup_entity",
    "summarize_group",
]
