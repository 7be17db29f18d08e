"""Port: the generic query engine that drives the resolution adapter."""

from __future__ import annotations

from typing import Any, Iterator, Mapping, Protocol

from repo_graph.domain.entities import Vertex


class TraversalContext(Protocol):
    """Per-result engine state carrying at most one active vertex."""

    @property
    def active_vertex(self) -> Vertex | None: ...


class QueryEngine(Protocol):
    """Parses, plans and executes a query against an adapter."""

    def execute(
        self, adapter: Any, query: str, arguments: Mapping[str, Any]
    ) -> Iterator[dict[str, Any]]:
        """Yield one output row per query result, lazily."""
        ...
