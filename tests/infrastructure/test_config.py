"""Settings loading from the environment."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from repo_graph.infrastructure.config import Settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("GITLAB_HOST", "GITLAB_API_TOKEN", "PER_PAGE", "MAX_RESULTS"):
        monkeypatch.delenv(name, raising=False)


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITLAB_HOST", "gitlab.example.com/")
    monkeypatch.setenv("GITLAB_API_TOKEN", "glpat-abc")
    monkeypatch.setenv("MAX_RESULTS", "25")

    settings = Settings(_env_file=None)  # type: ignore[call-arg]

    assert settings.api_base_url == "https://gitlab.example.com/api/v4"
    assert settings.gitlab_api_token.get_secret_value() == "glpat-abc"
    assert settings.max_results == 25
    assert settings.per_page == 20
    assert settings.skip_missing_blobs is False


def test_explicit_scheme_is_kept() -> None:
    settings = Settings(gitlab_host="http://localhost:8080", gitlab_api_token="t", _env_file=None)  # type: ignore[call-arg]
    assert settings.api_base_url == "http://localhost:8080/api/v4"


def test_missing_credentials_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None)  # type: ignore[call-arg]


def test_page_sizes_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        Settings(gitlab_host="h", gitlab_api_token="t", per_page=0, _env_file=None)  # type: ignore[call-arg]
