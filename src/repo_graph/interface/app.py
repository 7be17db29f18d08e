"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from repo_graph.domain.schema import SCHEMA_TEXT
from repo_graph.interface.dependencies import shutdown, startup
from repo_graph.interface.error_handlers import register_error_handlers
from repo_graph.interface.routes import router


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Hold one GitLab HTTP client open for the lifetime of the app."""
    startup()
    yield
    shutdown()


def create_app() -> FastAPI:
    """Build and wire the FastAPI application."""
    app = FastAPI(
        title="Repository Graph Query",
        version="1.0.0",
        description=(
            "Runs declarative queries over the repositories and files of a "
            "GitLab instance, fetching data from the GitLab API on demand."
        ),
        lifespan=_lifespan,
    )

    register_error_handlers(app)
    app.include_router(router)

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/schema", response_class=PlainTextResponse)
    async def graph_schema() -> str:
        """The GraphQL schema that queries are written against."""
        return SCHEMA_TEXT

    return app
