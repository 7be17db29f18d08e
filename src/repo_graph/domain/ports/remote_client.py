"""Port: remote source-control service — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol

from repo_graph.domain.entities import Page, Repository, TreeEntry
from repo_graph.domain.value_objects import RepositoryFilters


class RemoteClient(Protocol):
    """Abstract contract for paginated reads from the remote service.

    ``page_token`` is ``None`` for the first page; a page whose
    ``next_page`` is ``None`` is the last one.
    """

    def list_repositories(
        self, filters: RepositoryFilters, page_token: str | None = None
    ) -> Page[Repository]:
        """Return one page of repositories matching *filters*."""
        ...

    def list_tree(
        self,
        repository_id: str,
        ref: str | None = None,
        path: str | None = None,
        page_token: str | None = None,
    ) -> Page[TreeEntry]:
        """Return one page of the recursive tree below *path* at *ref*."""
        ...

    def fetch_blob(self, repository_id: str, path: str, ref: str | None = None) -> bytes:
        """Return the raw bytes of one file; raises ``RemoteNotFoundError`` if absent."""
        ...
