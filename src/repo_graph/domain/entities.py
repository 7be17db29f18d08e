"""Domain entities — the vertices of the repository graph.

``Vertex`` is a closed union of three frozen dataclasses.  Dispatch happens
through :func:`typename` and the ``as_*`` narrowing accessors, which return
``None`` on a mismatch instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Generic, TypeVar, Union

from repo_graph.domain.value_objects import RepositoryFilters

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class RootRepositories:
    """Synthetic root: the repositories visible to the configured credential."""

    typename: ClassVar[str] = "RootRepositories"

    filters: RepositoryFilters = field(default_factory=RepositoryFilters)


@dataclass(frozen=True, slots=True)
class Repository:
    """A remote project.  Files are reached through the ``files`` edge only."""

    typename: ClassVar[str] = "Repository"

    id: str
    url: str
    name: str
    description: str = ""


@dataclass(frozen=True, slots=True)
class File:
    """A file read from one repository at one ref.

    ``content`` is already decoded text; undecodable bytes were replaced.
    """

    typename: ClassVar[str] = "File"

    path: str
    content: str


Vertex = Union[RootRepositories, Repository, File]


@dataclass(frozen=True, slots=True)
class TreeEntry:
    """A single node from the repository tree API."""

    path: str
    kind: str  # "tree", "blob" or "commit" (submodule)

    @property
    def is_blob(self) -> bool:
        return self.kind == "blob"


@dataclass(frozen=True, slots=True)
class Page(Generic[T]):
    """One page of a paginated remote listing."""

    items: list[T]
    next_page: str | None = None


def typename(vertex: Vertex) -> str:
    """Return the schema type name of *vertex*."""
    return vertex.typename



def as_repository(vertex: Vertex) -> Repository | None:
    return vertex if isinstance(vertex, Repository) else None


def as_file(vertex: Vertex) -> File | None:
    return vertex if isinstance(vertex, File) else None
