"""Value objects — typed request options built from query parameters."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

from repo_graph.domain.parameters import (
    extract_bool,
    extract_datetime,
    extract_string,
)


@dataclass(frozen=True, slots=True)
class RepositoryFilters:
    """Constraints for listing repositories.  ``None`` means "no constraint".

    ``last_activity_after`` is inclusive, ``last_activity_before`` exclusive.
    """

    language: str | None = None
    membership: bool | None = None
    query: str | None = None
    search_namespaces: bool | None = None
    last_activity_after: datetime | None = None
    last_activity_before: datetime | None = None

    @classmethod
    def from_parameters(cls, params: Mapping[str, Any]) -> RepositoryFilters:
        return cls(
            language=extract_string(params, "language"),
            membership=extract_bool(params, "membership"),
            query=extract_string(params, "query"),
            search_namespaces=extract_bool(params, "search_namespaces"),
            last_activity_after=extract_datetime(params, "last_activity_after"),
            last_activity_before=extract_datetime(params, "last_activity_before"),
        )


@dataclass(frozen=True, slots=True)
class FileListingOptions:
    """Where to read a repository's files from.

    ``ref`` defaults to the repository's default branch; ``path`` restricts
    the listing to a subtree.
    """

    ref: str | None = None
    path: str | None = None

    @classmethod
    def from_parameters(cls, params: Mapping[str, Any]) -> FileListingOptions:
        return cls(
            ref=extract_string(params, "ref"),
            path=extract_string(params, "path"),
        )
