"""Per-country tables, continent folds and correlation datasets."""

from ecoatlas.aggregation.models import (
    Domain,
    DomainTables,
    EndemicRecord,
    EntityLookup,
    GdpRecord,
    GroupSummary,
    PopulationRecord,
)
from ecoatlas.aggregation.summary import (
    format_year_note,
    lookup_entity,
    summarize_group,
)
from ecoatlas.aggregation.tables import (
    ENDEMIC_SCHEMA,
    GDP_SCHEMA,
    POPULATION_SCHEMA,
    SCHEMAS,
    DomainSchema,
    build_table,
)

__all__ = [
    "Domain",
    "DomainSchema",
    "DomainTables",
    "ENDEMIC_SCHEMA",
    "EndemicRecord",
    "EntityLookup",
    "GDP_SCHEMA",
    "GdpRecord",
    "GroupSummary",
    "POPULATION_SCHEMA",
    "PopulationRecord",
    "SCHEMAS",
    "build_table",
    "format_year_note",
    "lookup_entity",
    "summarize_group",
]
