"""Resilient client for the public Wikidata SPARQL endpoint.

Each call issues a GET with the query as a URL parameter and bounds every
attempt by a single deadline. Transient failures (transport errors, timeouts,
HTTP 429/403/503) are retried with a capped linear backoff plus jitter. The
call either returns the parsed JSON envelope or raises a
single :class:`FetchFailure`. The client holds no state between calls and is
safe to use from several threads at once.
"""

from __future__ import annotations

import json
import logging
import random
import time
from enum import Enum
from typing import Any

import httpx
from pydantic import BaseModel, Field

from ecoatlas.settings import EcoAtlasSettings, get_settings

logger = logging.getLogger(__name__)

ACCEPT_HEADERS = {"Accept": "application/sparql-results+json"}

# Rate-limited, forbidden (QLever throttling), service unavailable
RETRYABLE_STATUS_CODES = frozenset({429, 403, 503})


class FailureKind(str, Enum):
    """Why a query ultimately failed."""
    timeout = "timeout"
    rate_limited = "rate_limited"
    network = "network"
    http = "http"
    invalid_response = "invalid_response"


class FetchFailure(ConnectionError):
    """Definitive failure of a SPARQL query after local recovery gave up."""

    def __init__(
        self,
        message: str,
        kind: FailureKind,
        attempts: int,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.attempts = attempts
        self.status_code = status_code

    @property
    def retries_exhausted(self) -> bool:
        return self.kind in (
            FailureKind.timeout, FailureKind.rate_limited, FailureKind.network,
        )


class FetchOptions(BaseModel):
    """Retry and timeout knobs for a single query."""

    max_retries: int = Field(default=3, ge=0)
    base_delay_ms: float = Field(default=400.0, gt=0)
    max_delay_ms: float = Field(default=800.0, gt=0)
    jitter_ms: float = Field(default=400.0, ge=0)
    timeout_ms: float | None = Field(default=15000.0, gt=0)

    @classmethod
    def from_settings(cls, cfg: EcoAtlasSettings | None = None) -> FetchOptions:
        cfg = cfg or get_settings()
        return cls(
            max_retries=cfg.max_retries,
            base_delay_ms=cfg.base_delay_ms,
            max_delay_ms=cfg.max_delay_ms,
            jitter_ms=cfg.jitter_ms,
            timeout_ms=cfg.timeout_ms or None,
        )

    @property
    def timeout_seconds(self) -> float | None:
        return self.timeout_ms / 1000.0 if self.timeout_ms else None


def backoff_delay(attempt: int, options: FetchOptions) -> float:
    """Seconds to wait before retry number ``attempt`` (1-based)."""
    capped = min(options.max_delay_ms, options.base_delay_ms * attempt)
    return (capped + random.uniform(0, options.jitter_ms)) / 1000.0


class SparqlClient:
    """GET-based SPARQL client with retry, backoff and timeout."""

    def __init__(
        self,
        endpoint: str | None = None,
        options: FetchOptions | None = None,
    ) -> None:
        self.endpoint = endpoint or get_settings().sparql_endpoint
        self.options = options or FetchOptions.from_settings()

    def fetch_with_retry(
        self, query: str, options: FetchOptions | None = None
    ) -> dict[str, Any]:
        """Run ``query`` and return the ``sparql-results+json`` envelope.

        Raises
        ------
        FetchFailure
            On a non-retryable HTTP status, an unparseable body, or once
            ``max_retries`` retries of a transient failure are used up.
        """
        opts = options or self.options
        retries = 0
        while True:
            attempts = retries + 1
            status_code: int | None = None
            try:
                status_code, body = self._get(query, opts)
            except httpx.TimeoutException as exc:
                kind, last_exc = FailureKind.timeout, exc
            except httpx.RequestError as exc:
                kind, last_exc = FailureKind.network, exc
            else:
                if status_code in RETRYABLE_STATUS_CODES:
                    kind, last_exc = FailureKind.rate_limited, None
                elif not 200 <= status_code < 300:
                    logger.error(
                        "SPARQL query failed with HTTP %d (attempt %d)",
                        status_code, attempts,
                    )
                    raise FetchFailure(
                        f"SPARQL endpoint returned HTTP {status_code}",
                        FailureKind.http, attempts, status_code,
                    )
                else:
                    return self._parse(body, status_code, attempts)

            if retries >= opts.max_retries:
                logger.error(
                    "SPARQL query gave up after %d attempts (%s)",
                    attempts, kind.value,
                )
                raise FetchFailure(
                    f"SPARQL query failed after {attempts} attempts: {kind.value}",
                    kind, attempts, status_code,
                ) from last_exc

            retries += 1
            wait = backoff_delay(retries, opts)
            logger.warning(
                "SPARQL request failed (attempt %d/%d, %s): retrying in %.2fs",
                attempts, opts.max_retries + 1,
                f"HTTP {status_code}" if status_code else kind.value, wait,
            )
            time.sleep(wait)

    def _get(self, query: str, opts: FetchOptions) -> tuple[int, bytes]:
        """One attempt: status code and body, read before ``timeout_ms`` runs out.

        ``httpx.Timeout`` bounds each connect/read/write step; the deadline
        bounds the whole attempt, so a server trickling bytes is still cut off.
        """
        limit = opts.timeout_seconds
        deadline = time.monotonic() + limit if limit else None
        with httpx.stream(
            "GET",
            self.endpoint,
            params={"query": query},
            headers=ACCEPT_HEADERS,
            timeout=httpx.Timeout(limit),
        ) as resp:
            if not 200 <= resp.status_code < 300:
                return resp.status_code, b""
            chunks = []
            for chunk in resp.iter_bytes():
                chunks.append(chunk)
                if deadline is not None and time.monotonic() > deadline:
                    raise httpx.ReadTimeout(
                        f"SPARQL response not complete after {limit:.1f}s"
                    )
            return resp.status_code, b"".join(chunks)

    @staticmethod
    def _parse(body: bytes, status_code: int, attempts: int) -> dict[str, Any]:
        try:
            data = json.loads(body)
        except ValueError as exc:
            raise FetchFailure(
                "SPARQL endpoint returned a non-JSON body",
                FailureKind.invalid_response, attempts, status_code,
            ) from exc
        if not isinstance(data, dict):
            raise FetchFailure(
                "SPARQL endpoint returned an unexpected JSON shape",
                FailureKind.invalid_response, attempts, status_code,
            )
        logger.debug("SPARQL query succeeded after %d attempt(s)", attempts)
        return data


def fetch_with_retry(
    query: str,
    options: FetchOptions | None = None,
    endpoint: str | None = None,
) -> dict[str, Any]:
    """Module-level shortcut for ``SparqlClient(endpoint).fetch_with_retry``."""
    return SparqlClient(endpoint=endpoint, options=options).fetch_with_retry(query)
