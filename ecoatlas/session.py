"""Per-session store for the domain tables, membership and selection.

One :class:`DataSession` is created at application start and handed to the
rendering layer. It owns the three domain tables and the country->continent
membership; nothing else writes to them.

Load lifecycle
--------------
``unloaded -> loading -> ready | failed``. The three SPARQL queries run in
parallel and the load waits for all of them. A failed load is remembered:
further calls to :meth:`DataSession.ensure_ready` re-raise the same
:class:`FetchFailure` without touching the network until :meth:`retry` is
called, which re-fetches only the domains that are still missing.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping

from ecoatlas.aggregation.correlation import MIN_ENDEMIC, CorrelationRow, combine_dataset
from ecoatlas.aggregation.models import (
    Domain,
    DomainTables,
    EntityLookup,
    GroupSummary,
)
from ecoatlas.aggregation.summary import lookup_entity, summarize_group
from ecoatlas.aggregation.tables import SCHEMAS, build_table
from ecoatlas.geography.continents import GeographyRules, build_membership
from ecoatlas.geography.topology import CountryFeature
from ecoatlas.panel import Panel, continent_panel, country_panel
from ecoatlas.sparql.client import FetchFailure, SparqlClient
from ecoatlas.sparql.queries import DOMAIN_QUERIES

logger = logging.getLogger(__name__)


class LoadState(str, Enum):
    unloaded = "unloaded"
    loading = "loading"
    ready = "ready"
    failed = "failed"


@dataclass
class Selection:
    continent: str | None = None
    country: int | None = None


class DataSession:
    """Lazily loaded tables plus the user's current map selection."""

    def __init__(
        self,
        client: SparqlClient | None = None,
        queries: Mapping[str, str] | None = None,
    ) -> None:
        self.client = client or SparqlClient()
        self._queries = dict(queries or DOMAIN_QUERIES)
        self.tables = DomainTables()
        self.state = LoadState.unloaded
        self.failure: FetchFailure | None = None
        self.domain_failures: dict[Domain, FetchFailure] = {}
        self.membership: dict[int, str] = {}
        self.selection = Selection()
        self._geography_loaded = False
        self._load_lock = threading.Lock()
        self._in_flight = threading.Lock()

    # -- Geography -------------------------------------------------------------

    def load_geography(
        self,
        features: Iterable[CountryFeature],
        rules: GeographyRules | None = None,
    ) -> dict[int, str]:
        """Build the membership mapping once; later calls return it unchanged."""
        if self._geography_loaded:
            return self.membership
        self.membership = build_membership(features, rules)
        self._geography_loaded = True
        logger.info(
            "Assigned %d countries to %d continents",
            len(self.membership), len(set(self.membership.values())),
        )
        return self.membership

    # -- Loading ---------------------------------------------------------------

    def ensure_ready(self) -> DomainTables:
        """Load the three tables if needed and return them.

        Raises the remembered :class:`FetchFailure` while the session is in
        the ``failed`` state.
        """
        with self._load_lock:
            if self.state is LoadState.ready:
                return self.tables
            if self.state is LoadState.failed and self.failure is not None:
                raise self.failure
            try:
                self._load(self.tables.missing())
            except FetchFailure:
                # Stay failed so later calls re-raise without refetching
                raise
            except Exception:
                self.state = LoadState.unloaded
                raise
            return self.tables

    def retry(self) -> DomainTables:
        """Clear a remembered failure and fetch the domains still missing."""
        with self._load_lock:
            if self.state is LoadState.failed:
                logger.info(
                    "Retrying failed domains: %s",
                    ", ".join(d.value for d in self.tables.missing()),
                )
                self.failure = None
                self.domain_failures = {}
                self.state = LoadState.unloaded
        return self.ensure_ready()

    def _load(self, domains: list[Domain]) -> None:
        self.state = LoadState.loading
        failures: dict[Domain, FetchFailure] = {}

        if domains:
            logger.info("Loading %s tables", ", ".join(d.value for d in domains))
            with ThreadPoolExecutor(max_workers=len(domains)) as executor:
                futures = {
                    executor.submit(self.client.fetch_with_retry, self._queries[d.value]): d
                    for d in domains
                }
                for future in as_completed(futures):
                    domain = futures[future]
                    try:
                        raw = future.result()
                    except FetchFailure as exc:
                        logger.error("Loading %s data failed: %s", domain.value, exc)
                        failures[domain] = exc
                        continue
                    setattr(self.tables, domain.value, build_table(raw, SCHEMAS[domain]))

        if failures:
            self.domain_failures = failures
            # Report the first failed domain in a stable order
            self.failure = next(failures[d] for d in Domain if d in failures)
            self.state = LoadState.failed
            raise self.failure

        self.state = LoadState.ready

    # -- Queries ---------------------------------------------------------------

    def summarize(self, continent: str) -> GroupSummary:
        return summarize_group(continent, self.membership, self.ensure_ready())

    def lookup(self, iso_num: int) -> EntityLookup:
        return lookup_entity(iso_num, self.ensure_ready())

    def correlation_dataset(self, min_endemic: int = MIN_ENDEMIC) -> list[CorrelationRow]:
        return combine_dataset(self.ensure_ready(), min_endemic)

    # -- Selection -------------------------------------------------------------

    def select_continent(self, name: str) -> Panel | None:
        """Summarize ``name`` for the side panel.

        Returns None when another selection is still being processed.
        """
        if not self._in_flight.acquire(blocking=False):
            logger.debug("Ignoring continent selection while a request is in flight")
            return None
        try:
            self.selection = Selection(continent=name)
            try:
                summary = self.summarize(name)
            except FetchFailure:
                partial = summarize_group(name, self.membership, self.tables)
                return continent_panel(partial, failed=self.domain_failures)
            return continent_panel(summary)
        finally:
            self._in_flight.release()

    def select_country(self, iso_num: int, name: str = "") -> Panel | None:
        """Country profile for a country inside the selected continent.

        Returns None when no continent is selected, the country belongs to a
        different continent, or another selection is in flight.
        """
        continent = self.membership.get(iso_num)
        if self.selection.continent is None or continent != self.selection.continent:
            return None
        if not self._in_flight.acquire(blocking=False):
            logger.debug("Ignoring country selection while a request is in flight")
            return None
        try:
            self.selection.country = iso_num
            try:
                lookup = self.lookup(iso_num)
            except FetchFailure:
                partial = lookup_entity(iso_num, self.tables)
                return country_panel(partial, name, failed=self.domain_failures)
            return country_panel(lookup, name)
        finally:
            self._in_flight.release()

    def reset_selection(self) -> None:
        """Back to the world view."""
        self.selection = Selection()
