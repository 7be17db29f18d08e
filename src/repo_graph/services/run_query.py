"""Run-query use case — executes one query against the resolution adapter.

This is the single entry point for the interface layer.  It depends only on
the :class:`QueryEngine` port and the resolution adapter; the interface layer
injects concrete instances at runtime.
"""

from __future__ import annotations

import logging
from itertools import islice
from typing import Any, Iterator, Mapping

from repo_graph.domain.ports.query_engine import QueryEngine
from repo_graph.services.adapter import RepositoryGraphAdapter

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 10


class RunQueryUseCase:
    """Runs queries and caps the number of rows pulled from the engine.

    Rows are pulled lazily, so stopping at the cap also stops the remote
    calls that further rows would have needed.

    Parameters
    ----------
    engine:
        Query engine that parses the query and drives the adapter.
    adapter:
        Resolution adapter bound to a remote client.
    max_results:
        Hard ceiling on rows per query; a per-call ``limit`` can only lower it.
    """

    def __init__(
        self,
        engine: QueryEngine,
        adapter: RepositoryGraphAdapter,
        max_results: int = DEFAULT_MAX_RESULTS,
    ) -> None:
        self._engine = engine
        self._adapter = adapter
        self._max_results = max_results

    def stream(
        self,
        query: str,
        arguments: Mapping[str, Any] | None = None,
        limit: int | None = None,
    ) -> Iterator[dict[str, Any]]:
        """Yield at most ``min(limit, max_results)`` rows as the engine produces them."""
        cap = self._max_results if limit is None else min(limit, self._max_results)
        logger.info("Executing query (limit=%d)", cap)

        rows = self._engine.execute(self._adapter, query, dict(arguments or {}))
        count = 0
        for row in islice(rows, max(cap, 0)):
            count += 1
            yield row

        logger.info("Query returned %d row(s)", count)

    def execute(
        self,
        query: str,
        arguments: Mapping[str, Any] | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Run *query* and return the capped rows as a list."""
        return list(self.stream(query, arguments, limit))
