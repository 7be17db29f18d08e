"""GitLabRestClient request shaping and error translation, over httpx.MockTransport."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

import httpx
import pytest

from repo_graph.domain.exceptions import (
    RemoteAccessDeniedError,
    RemoteNotFoundError,
    RemoteRateLimitError,
    RemoteServiceError,
)
from repo_graph.domain.value_objects import RepositoryFilters
from repo_graph.infrastructure.gitlab_rest_client import GitLabRestClient

BASE = "https://gitlab.example.com/api/v4"


def _client(
    handler: Callable[[httpx.Request], httpx.Response], requests: list[httpx.Request]
) -> GitLabRestClient:
    def _record(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    http = httpx.Client(transport=httpx.MockTransport(_record))
    return GitLabRestClient(http, BASE + "/", token="s3cret", per_page=2)


def test_list_repositories_request_and_page() -> None:
    requests: list[httpx.Request] = []
    client = _client(
        lambda _: httpx.Response(
            200,
            json=[
                {"id": 7, "http_url_to_repo": "https://g/a.git", "name": "a", "description": None},
                {"id": 9, "http_url_to_repo": "https://g/b.git", "name": "b", "description": "B"},
            ],
            headers={"X-Next-Page": "2"},
        ),
        requests,
    )
    filters = RepositoryFilters(
        language="go",
        membership=True,
        query="billing",
        search_namespaces=False,
        last_activity_after=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )

    page = client.list_repositories(filters)

    assert [r.id for r in page.items] == ["7", "9"]
    assert page.items[0].description == ""
    assert page.items[1].url == "https://g/b.git"
    assert page.next_page == "2"

    request = requests[0]
    assert request.url.path == "/api/v4/projects"
    assert request.headers["PRIVATE-TOKEN"] == "s3cret"
    params = request.url.params
    assert params["with_programming_language"] == "go"
    assert params["membership"] == "true"
    assert params["search"] == "billing"
    assert params["search_namespaces"] == "false"
    assert params["last_activity_after"] == "2024-01-01T00:00:00Z"
    assert "last_activity_before" not in params
    assert params["per_page"] == "2"
    assert "page" not in params


def test_list_repositories_last_page_and_page_token() -> None:
    requests: list[httpx.Request] = []
    client = _client(lambda _: httpx.Response(200, json=[], headers={"X-Next-Page": ""}), requests)

    page = client.list_repositories(RepositoryFilters(), page_token="3")

    assert page.items == []
    assert page.next_page is None
    assert requests[0].url.params["page"] == "3"
    assert "membership" not in requests[0].url.params


def test_list_tree_request() -> None:
    requests: list[httpx.Request] = []
    client = _client(
        lambda _: httpx.Response(
            200,
            json=[
                {"id": "a1", "name": "src", "type": "tree", "path": "src", "mode": "040000"},
                {"id": "b2", "name": "main.go", "type": "blob", "path": "src/main.go"},
            ],
        ),
        requests,
    )

    page = client.list_tree("7", ref="main", path="src")

    assert [(e.path, e.kind) for e in page.items] == [("src", "tree"), ("src/main.go", "blob")]
    assert page.next_page is None
    request = requests[0]
    assert request.url.path == "/api/v4/projects/7/repository/tree"
    assert request.url.params["recursive"] == "true"
    assert request.url.params["ref"] == "main"
    assert request.url.params["path"] == "src"


def test_list_tree_without_ref_or_path() -> None:
    requests: list[httpx.Request] = []
    client = _client(lambda _: httpx.Response(200, json=[]), requests)

    client.list_tree("7")

    assert "ref" not in requests[0].url.params
    assert "path" not in requests[0].url.params


def test_fetch_blob_encodes_path() -> None:
    requests: list[httpx.Request] = []
    client = _client(lambda _: httpx.Response(200, content=b"\x00\x01raw"), requests)

    assert client.fetch_blob("7", "src/main.go", ref="dev") == b"\x00\x01raw"
    assert b"/repository/files/src%2Fmain.go/raw" in requests[0].url.raw_path
    assert requests[0].url.params["ref"] == "dev"


@pytest.mark.parametrize(
    ("status", "headers", "error"),
    [
        (404, {}, RemoteNotFoundError),
        (401, {}, RemoteAccessDeniedError),
        (403, {}, RemoteAccessDeniedError),
        (403, {"RateLimit-Remaining": "0", "RateLimit-Reset": "1700000000"}, RemoteRateLimitError),
        (429, {}, RemoteRateLimitError),
        (500, {}, RemoteServiceError),
    ],
)
def test_error_translation(status, headers, error) -> None:
    client = _client(lambda _: httpx.Response(status, headers=headers), [])

    with pytest.raises(error):
        client.fetch_blob("7", "missing.txt")


def test_rate_limit_message_includes_reset_time() -> None:
    client = _client(
        lambda _: httpx.Response(429, headers={"RateLimit-Reset": "1700000000"}), []
    )

    with pytest.raises(RemoteRateLimitError, match="2023-11-14 22:13:20 UTC"):
        client.list_tree("7")


def test_network_error_is_wrapped() -> None:
    def _fail(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(_fail, [])

    with pytest.raises(RemoteServiceError, match="Network error"):
        client.list_repositories(RepositoryFilters())
