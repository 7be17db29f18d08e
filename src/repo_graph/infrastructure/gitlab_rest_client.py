"""GitLab REST API client — implements the RemoteClient port."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote

import httpx

from repo_graph.domain.entities import Page, Repository, TreeEntry
from repo_graph.domain.exceptions import (
    RemoteAccessDeniedError,
    RemoteNotFoundError,
    RemoteRateLimitError,
    RemoteServiceError,
)
from repo_graph.domain.parameters import format_timestamp
from repo_graph.domain.value_objects import RepositoryFilters

logger = logging.getLogger(__name__)

_USER_AGENT = "repo-graph/1.0"


class GitLabRestClient:
    """Concrete RemoteClient backed by the GitLab v4 REST API.

    Pagination tokens are GitLab page numbers taken from the ``X-Next-Page``
    response header.
    """

    def __init__(
        self,
        client: httpx.Client,
        base_url: str,
        token: str | None = None,
        per_page: int = 20,
    ) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._per_page = per_page
        self._headers: dict[str, str] = {
            "Accept": "application/json",
            "User-Agent": _USER_AGENT,
        }
        if token:
            self._headers["PRIVATE-TOKEN"] = token

    def list_repositories(
        self, filters: RepositoryFilters, page_token: str | None = None
    ) -> Page[Repository]:
        """GET /projects → one page of Repository."""
        params = self._page_params(page_token)
        params.update(_filter_params(filters))
        params.update({"order_by": "id", "sort": "asc"})

        resp = self._get("/projects", params=params)
        return Page(
            items=[_to_repository(item) for item in resp.json()],
            next_page=_next_page(resp),
        )

    def list_tree(
        self,
        repository_id: str,
        ref: str | None = None,
        path: str | None = None,
        page_token: str | None = None,
    ) -> Page[TreeEntry]:
        """GET /projects/{id}/repository/tree?recursive=true → one page of TreeEntry."""
        params = self._page_params(page_token)
        params["recursive"] = "true"
        if ref:
            params["ref"] = ref
        if path:
            params["path"] = path

        resp = self._get(f"/projects/{quote(repository_id, safe='')}/repository/tree", params=params)
        return Page(
            items=[
                TreeEntry(path=item["path"], kind=item.get("type", "blob"))
                for item in resp.json()
            ],
            next_page=_next_page(resp),
        )

    def fetch_blob(self, repository_id: str, path: str, ref: str | None = None) -> bytes:
        """GET /projects/{id}/repository/files/{path}/raw → raw bytes."""
        params = {"ref": ref} if ref else None
        resp = self._get(
            f"/projects/{quote(repository_id, safe='')}/repository/files/"
            f"{quote(path, safe='')}/raw",
            params=params,
        )
        return resp.content

    # ── Helpers ─────────────────────────────────────────────────────────

    def _page_params(self, page_token: str | None) -> dict[str, str]:
        params = {"per_page": str(self._per_page)}
        if page_token:
            params["page"] = page_token
        return params

    def _get(self, endpoint: str, params: dict[str, str] | None = None) -> httpx.Response:
        """Perform a GitLab API GET request with error translation."""
        url = f"{self._base_url}{endpoint}"
        logger.debug("GET %s params=%s", url, params)
        try:
            resp = self._client.get(url, headers=self._headers, params=params)
        except httpx.HTTPError as exc:
            raise RemoteServiceError(f"Network error fetching {url}: {exc}") from exc

        if resp.status_code == 200:
            return resp

        if resp.status_code == 404:
            raise RemoteNotFoundError(f"Not found: {url}")

        if resp.status_code == 429 or (
            resp.status_code == 403 and resp.headers.get("ratelimit-remaining") == "0"
        ):
            raise RemoteRateLimitError(
                f"GitLab API rate limit exceeded. Resets at {_reset_time(resp)}."
            )

        if resp.status_code in (401, 403):
            raise RemoteAccessDeniedError(
                f"Access denied to {url}. Check GITLAB_API_TOKEN and its scopes."
            )

        raise RemoteServiceError(f"GitLab API returned HTTP {resp.status_code} for {url}")


def _filter_params(filters: RepositoryFilters) -> dict[str, str]:
    params: dict[str, str] = {}
    if filters.language is not None:
        params["with_programming_language"] = filters.language
    if filters.membership is not None:
        params["membership"] = _bool(filters.membership)
    if filters.query is not None:
        params["search"] = filters.query
    if filters.search_namespaces is not None:
        params["search_namespaces"] = _bool(filters.search_namespaces)
    if filters.last_activity_after is not None:
        params["last_activity_after"] = format_timestamp(filters.last_activity_after)
    if filters.last_activity_before is not None:
        params["last_activity_before"] = format_timestamp(filters.last_activity_before)
    return params


def _bool(value: bool) -> str:
    return "true" if value else "false"


def _to_repository(item: dict[str, Any]) -> Repository:
    return Repository(
        id=str(item["id"]),
        url=item.get("http_url_to_repo") or "",
        name=item.get("name") or "",
        description=item.get("description") or "",
    )


def _next_page(resp: httpx.Response) -> str | None:
    return resp.headers.get("x-next-page", "").strip() or None


def _reset_time(resp: httpx.Response) -> str:
    reset_raw = resp.headers.get("ratelimit-reset", "")
    try:
        return datetime.fromtimestamp(int(reset_raw), tz=timezone.utc).strftime(
            "%Y-%m-%d %H:%M:%S UTC"
        )
    except (ValueError, OSError):
        return reset_raw or "unknown"
