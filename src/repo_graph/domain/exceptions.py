"""Domain exception hierarchy.

Inner layers raise these; the interface layer (CLI exit codes or HTTP
handlers) translates them.
"""

from __future__ import annotations


class RepoGraphError(Exception):
    """Base exception for the entire application."""


# ── Contract violations ─────────────────────────────────────────────────────


class SchemaMismatchError(RepoGraphError):
    """The query engine and the adapter disagree about the schema.

    Raised for unknown edge, type or property names, for parameter values of
    the wrong type and for an active vertex of an unexpected type.  Never
    retried.
    """


# ── Remote service errors ───────────────────────────────────────────────────


class RemoteServiceError(RepoGraphError):
    """Any failure talking to the remote source-control service."""


class RemoteNotFoundError(RemoteServiceError):
    """The requested project, ref, path or blob does not exist (404)."""


class RemoteAccessDeniedError(RemoteServiceError):
    """The configured credential is not allowed to read the resource (401/403)."""


class RemoteRateLimitError(RemoteServiceError):
    """The remote API rate limit is exhausted (429 / 403 with rate-limit header)."""


# ── Process-level errors ────────────────────────────────────────────────────


class QueryDocumentError(RepoGraphError):
    """A query document could not be read or is malformed."""


class ConfigurationError(RepoGraphError):
    """The process configuration is invalid."""
