"""Live access to the Wikidata SPARQL endpoint."""

from ecoatlas.sparql.client import (
    FailureKind,
    FetchFailure,
    FetchOptions,
    SparqlClient,
    fetch_with_retry,
)
from ecoatlas.sparql.queries import (
    DOMAIN_QUERIES,
    ENDEMIC_QUERY,
    GDP_QUERY,
    POPULATION_QUERY,
)

__all__ = [
    "DOMAIN_QUERIES",
    "ENDEMIC_QUERY",
    "FailureKind",
    "FetchFailure",
    "FetchOptions",
    "GDP_QUERY",
    "POPULATION_QUERY",
    "SparqlClient",
    "fetch_with_retry",
]
