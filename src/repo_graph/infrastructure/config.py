"""Application configuration — loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    gitlab_host: str
    gitlab_api_token: SecretStr
    gitlab_insecure: bool = False
    request_timeout: float = 30.0
    per_page: int = 20
    repository_page_limit: int = 1
    tree_page_limit: int = 10
    blob_fetch_workers: int = 4
    skip_missing_blobs: bool = False
    max_results: int = 10
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    @field_validator("gitlab_host")
    @classmethod
    def _host_not_blank(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            msg = "GITLAB_HOST must not be empty."
            raise ValueError(msg)
        return stripped

    @field_validator("per_page", "repository_page_limit", "tree_page_limit", "blob_fetch_workers")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v < 1:
            msg = "must be at least 1."
            raise ValueError(msg)
        return v

    @property
    def api_base_url(self) -> str:
        """``https://<host>/api/v4``; the scheme is added when missing."""
        host = self.gitlab_host.rstrip("/")
        if "://" not in host:
            host = f"https://{host}"
        return f"{host}/api/v4"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call)."""
    return Settings()  # type: ignore[call-arg]
