"""API routes — thin controllers that delegate to the use case."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from repo_graph.interface.dependencies import get_use_case
from repo_graph.interface.schemas import ErrorResponse, QueryDocument, QueryResponse
from repo_graph.services.run_query import RunQueryUseCase

router = APIRouter()


@router.post(
    "/query",
    response_model=QueryResponse,
    responses={
        422: {"model": ErrorResponse, "description": "Invalid query document or schema mismatch"},
        403: {"model": ErrorResponse, "description": "Credential may not read a repository"},
        404: {"model": ErrorResponse, "description": "Remote resource not found"},
        429: {"model": ErrorResponse, "description": "GitLab API rate limit exceeded"},
        502: {"model": ErrorResponse, "description": "GitLab API error"},
    },
)
def run_query(
    body: QueryDocument,
    limit: int | None = Query(default=None, ge=0),
    use_case: RunQueryUseCase = Depends(get_use_case),
) -> QueryResponse:
    """Execute a query against the repository graph."""
    results = use_case.execute(body.query, body.args, limit)
    return QueryResponse(results=results, count=len(results))
