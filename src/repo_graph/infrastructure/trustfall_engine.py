"""Trustfall query engine — implements the QueryEngine port."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Iterator, Mapping, TypeVar

from trustfall import Adapter, Schema, execute_query

from repo_graph.domain.exceptions import (
    QueryDocumentError,
    RepoGraphError,
    SchemaMismatchError,
)
from repo_graph.domain.schema import SCHEMA_TEXT
from repo_graph.services.adapter import RepositoryGraphAdapter

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _TrustfallBridge(Adapter):
    """Presents a :class:`RepositoryGraphAdapter` through trustfall's adapter API.

    trustfall turns a Python exception raised inside an adapter call into a
    ``PanicException``, which derives from ``BaseException``.  The bridge keeps
    the first domain error it sees in ``error`` so the engine can raise it in
    place of the panic.
    """

    def __init__(self, adapter: RepositoryGraphAdapter) -> None:
        self._adapter = adapter
        self.error: RepoGraphError | None = None

    def _record(self, exc: RepoGraphError) -> None:
        if self.error is None:
            self.error = exc

    def _call(self, resolve: Callable[..., T], *args: Any) -> T:
        try:
            return resolve(*args)
        except RepoGraphError as exc:
            self._record(exc)
            raise

    def _watch(self, items: Iterable[T]) -> Iterator[T]:
        try:
            yield from items
        except RepoGraphError as exc:
            self._record(exc)
            raise

    def resolve_starting_vertices(
        self, edge: str, parameters: Mapping[str, Any], *args: Any, **kwargs: Any
    ) -> Iterable[Any]:
        return self._watch(
            self._call(self._adapter.resolve_starting_vertices, edge, parameters)
        )

    def resolve_property(
        self,
        contexts: Iterable[Any],
        type_name: str,
        property_name: str,
        *args: Any,
        **kwargs: Any,
    ) -> Iterable[tuple[Any, Any]]:
        return self._watch(
            self._call(self._adapter.resolve_property, contexts, type_name, property_name)
        )

    def resolve_neighbors(
        self,
        contexts: Iterable[Any],
        type_name: str,
        edge_name: str,
        parameters: Mapping[str, Any],
        *args: Any,
        **kwargs: Any,
    ) -> Iterable[tuple[Any, Iterable[Any]]]:
        resolved = self._call(
            self._adapter.resolve_neighbors, contexts, type_name, edge_name, parameters
        )
        return (
            (ctx, self._watch(neighbors)) for ctx, neighbors in self._watch(resolved)
        )

    def resolve_coercion(
        self,
        contexts: Iterable[Any],
        type_name: str,
        coerce_to_type: str,
        *args: Any,
        **kwargs: Any,
    ) -> Iterable[tuple[Any, bool]]:
        exc = SchemaMismatchError(
            f"Type coercion from '{type_name}' to '{coerce_to_type}' is not supported"
        )
        self._record(exc)
        raise exc


class TrustfallEngine:
    """Concrete QueryEngine backed by the ``trustfall`` interpreter."""

    def __init__(self, schema_text: str = SCHEMA_TEXT) -> None:
        self._schema = Schema(schema_text)

    def execute(
        self,
        adapter: RepositoryGraphAdapter,
        query: str,
        arguments: Mapping[str, Any],
    ) -> Iterator[dict[str, Any]]:
        """Parse *query* now; resolve rows lazily as the caller iterates."""
        logger.debug("Executing query with arguments %s", dict(arguments))
        bridge = _TrustfallBridge(adapter)
        try:
            rows = execute_query(bridge, self._schema, query, dict(arguments))
        except BaseException as exc:
            if bridge.error is not None:
                raise bridge.error from None
            if isinstance(exc, Exception):
                raise QueryDocumentError(f"Query could not be executed: {exc}") from exc
            raise
        return self._rows(bridge, rows)

    @staticmethod
    def _rows(bridge: _TrustfallBridge, rows: Iterable[dict[str, Any]]) -> Iterator[dict[str, Any]]:
        try:
            yield from rows
        except BaseException:
            if bridge.error is not None:
                raise bridge.error from None
            raise
