"""Resolution adapter — answers the query engine's three resolution calls.

The adapter owns no state beyond its injected :class:`RemoteClient` and its
paging limits.  Every operation validates its names eagerly and then returns
a lazy iterator, so remote calls happen only as the engine pulls results.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Iterator, Mapping

from repo_graph.domain.entities import (
    File,
    Repository,
    RootRepositories,
    Vertex,
    as_file,
    as_repository,
    typename,
)
from repo_graph.domain.exceptions import SchemaMismatchError
from repo_graph.domain.ports.query_engine import TraversalContext
from repo_graph.domain.ports.remote_client import RemoteClient
from repo_graph.domain.schema import FILES_EDGE, ROOT_EDGE, TYPENAME_PROPERTY
from repo_graph.domain.value_objects import FileListingOptions, RepositoryFilters
from repo_graph.services.remote_fetch import (
    DEFAULT_BLOB_FETCH_WORKERS,
    DEFAULT_REPOSITORY_PAGE_LIMIT,
    DEFAULT_TREE_PAGE_LIMIT,
    list_files,
    list_repositories,
)

logger = logging.getLogger(__name__)

_Narrow = Callable[[Vertex], Any]
_Getter = Callable[[Any], Any]

# (type name, property name) -> (narrowing accessor, getter)
_PROPERTIES: dict[tuple[str, str], tuple[_Narrow, _Getter]] = {
    (Repository.typename, "id"): (as_repository, lambda repo: repo.id),
    (Repository.typename, "url"): (as_repository, lambda repo: repo.url),
    (Repository.typename, "name"): (as_repository, lambda repo: repo.name),
    (Repository.typename, "description"): (as_repository, lambda repo: repo.description),
    (File.typename, "path"): (as_file, lambda file: file.path),
    (File.typename, "content"): (as_file, lambda file: file.content),
}


class RepositoryGraphAdapter:
    """Resolves the repository graph against a remote source-control service.

    Parameters
    ----------
    client:
        Remote service capability, constructed once by the caller.
    repository_page_limit:
        Maximum number of repository pages fetched per starting-vertex call.
    tree_page_limit:
        Maximum number of tree pages fetched per ``files`` expansion.
    blob_fetch_workers:
        Size of the thread pool fetching blob contents within one expansion.
    skip_missing_blobs:
        Leave out files whose content cannot be fetched instead of failing
        the whole expansion.
    """

    def __init__(
        self,
        client: RemoteClient,
        *,
        repository_page_limit: int = DEFAULT_REPOSITORY_PAGE_LIMIT,
        tree_page_limit: int = DEFAULT_TREE_PAGE_LIMIT,
        blob_fetch_workers: int = DEFAULT_BLOB_FETCH_WORKERS,
        skip_missing_blobs: bool = False,
    ) -> None:
        self._client = client
        self._repository_page_limit = repository_page_limit
        self._tree_page_limit = tree_page_limit
        self._blob_fetch_workers = blob_fetch_workers
        self._skip_missing_blobs = skip_missing_blobs

    # ── Starting vertices ───────────────────────────────────────────────

    def resolve_starting_vertices(
        self, edge_name: str, parameters: Mapping[str, Any]
    ) -> Iterator[Vertex]:
        if edge_name != ROOT_EDGE:
            raise SchemaMismatchError(f"Unknown starting edge: '{edge_name}'")
        root = RootRepositories(filters=RepositoryFilters.from_parameters(parameters))
        return self._iter_repositories(root)

    def _iter_repositories(self, root: RootRepositories) -> Iterator[Vertex]:
        yield from list_repositories(
            self._client, root.filters, page_limit=self._repository_page_limit
        )

    # ── Properties ──────────────────────────────────────────────────────

    def resolve_property(
        self,
        contexts: Iterable[TraversalContext],
        type_name: str,
        property_name: str,
    ) -> Iterator[tuple[TraversalContext, Any]]:
        if property_name == TYPENAME_PROPERTY:
            return (
                (ctx, None if ctx.active_vertex is None else typename(ctx.active_vertex))
                for ctx in contexts
            )

        try:
            narrow, getter = _PROPERTIES[(type_name, property_name)]
        except KeyError:
            raise SchemaMismatchError(
                f"Unknown property '{property_name}' on type '{type_name}'"
            ) from None

        def _resolve(vertex: Vertex | None) -> Any:
            if vertex is None:
                return None
            narrowed = narrow(vertex)
            if narrowed is None:
                raise SchemaMismatchError(
                    f"Expected a {type_name} vertex for property '{property_name}', "
                    f"got {typename(vertex)}"
                )
            return getter(narrowed)

        return ((ctx, _resolve(ctx.active_vertex)) for ctx in contexts)

    # ── Neighbors ───────────────────────────────────────────────────────

    def resolve_neighbors(
        self,
        contexts: Iterable[TraversalContext],
        type_name: str,
        edge_name: str,
        parameters: Mapping[str, Any],
    ) -> Iterator[tuple[TraversalContext, Iterator[Vertex]]]:
        if (type_name, edge_name) != (Repository.typename, FILES_EDGE):
            raise SchemaMismatchError(f"Unknown edge '{edge_name}' on type '{type_name}'")

        # Parameters come from the query, not the data: parse once per batch.
        options = FileListingOptions.from_parameters(parameters)
        logger.debug("Expanding %s.%s with %s", type_name, edge_name, options)

        return ((ctx, self._files_of(ctx.active_vertex, options)) for ctx in contexts)

    def _files_of(self, vertex: Vertex | None, options: FileListingOptions) -> Iterator[Vertex]:
        if vertex is None:
            return iter(())
        repository = as_repository(vertex)
        if repository is None:
            raise SchemaMismatchError(
                f"Expected a Repository vertex for edge '{FILES_EDGE}', got {typename(vertex)}"
            )
        return list_files(
            self._client,
            repository.id,
            options,
            page_limit=self._tree_page_limit,
            workers=self._blob_fetch_workers,
            skip_missing_blobs=self._skip_missing_blobs,
        )
