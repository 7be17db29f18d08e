"""Pydantic request / response DTOs for the CLI and API boundaries."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from repo_graph.domain.exceptions import QueryDocumentError


class QueryDocument(BaseModel):
    """A query string plus its argument bindings.

    This is both the body of ``POST /query`` and the JSON file format read by
    ``repo-graph query``.
    """

    query: str
    args: dict[str, Any] = Field(default_factory=dict)

    @field_validator("query")
    @classmethod
    def _must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            msg = "query must not be empty."
            raise ValueError(msg)
        return v

    @classmethod
    def from_file(cls, path: str | Path) -> QueryDocument:
        """Read and validate a JSON query document."""
        try:
            raw = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise QueryDocumentError(f"Cannot read query document {path}: {exc}") from exc
        try:
            return cls.model_validate_json(raw)
        except ValidationError as exc:
            raise QueryDocumentError(f"Invalid query document {path}: {exc}") from exc


class QueryResponse(BaseModel):
    """Successful response from ``POST /query``."""

    results: list[dict[str, Any]]
    count: int


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    status: str = "error"
    message: str
