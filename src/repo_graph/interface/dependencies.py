"""Dependency wiring shared by the CLI and the FastAPI application."""

from __future__ import annotations

from functools import lru_cache

import httpx
from pydantic import ValidationError

from repo_graph.domain.exceptions import ConfigurationError
from repo_graph.domain.ports.query_engine import QueryEngine
from repo_graph.infrastructure.config import Settings, get_settings
from repo_graph.infrastructure.gitlab_rest_client import GitLabRestClient
from repo_graph.services.adapter import RepositoryGraphAdapter
from repo_graph.services.run_query import RunQueryUseCase

_http_client: httpx.Client | None = None


def load_settings() -> Settings:
    """Return the cached settings, translating validation errors."""
    try:
        return get_settings()
    except ValidationError as exc:
        raise ConfigurationError(
            "Invalid configuration. GITLAB_HOST and GITLAB_API_TOKEN must be set.\n"
            f"{exc}"
        ) from exc


def build_http_client(settings: Settings) -> httpx.Client:
    return httpx.Client(
        timeout=httpx.Timeout(settings.request_timeout),
        verify=not settings.gitlab_insecure,
    )


def build_use_case(
    settings: Settings,
    http_client: httpx.Client,
    engine: QueryEngine | None = None,
) -> RunQueryUseCase:
    """Wire the GitLab client, the adapter and the engine into a use case."""
    client = GitLabRestClient(
        client=http_client,
        base_url=settings.api_base_url,
        token=settings.gitlab_api_token.get_secret_value(),
        per_page=settings.per_page,
    )
    adapter = RepositoryGraphAdapter(
        client,
        repository_page_limit=settings.repository_page_limit,
        tree_page_limit=settings.tree_page_limit,
        blob_fetch_workers=settings.blob_fetch_workers,
        skip_missing_blobs=settings.skip_missing_blobs,
    )
    if engine is None:
        engine = _default_engine()
    return RunQueryUseCase(engine=engine, adapter=adapter, max_results=settings.max_results)


@lru_cache(maxsize=1)
def _default_engine() -> QueryEngine:
    # Imported here so the package stays importable without the engine extra.
    from repo_graph.infrastructure.trustfall_engine import TrustfallEngine

    return TrustfallEngine()


# ── FastAPI lifespan ────────────────────────────────────────────────────────


def startup() -> None:
    """Initialise the shared HTTP client — called from the lifespan context manager."""
    global _http_client  # noqa: PLW0603

    _http_client = build_http_client(load_settings())


def shutdown() -> None:
    """Release shared resources."""
    global _http_client  # noqa: PLW0603

    if _http_client:
        _http_client.close()
        _http_client = None


def get_use_case() -> RunQueryUseCase:
    """Build a use case bound to the process-wide HTTP client."""
    assert _http_client is not None, "startup() was not called"
    return build_use_case(load_settings(), _http_client)
