"""CLI entrypoints for repo-graph commands."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Callable, Sequence

import httpx
import uvicorn

from repo_graph.domain.exceptions import QueryDocumentError, RepoGraphError
from repo_graph.infrastructure.config import Settings
from repo_graph.interface.dependencies import (
    build_http_client,
    build_use_case,
    load_settings,
)
from repo_graph.interface.schemas import QueryDocument
from repo_graph.services.run_query import RunQueryUseCase

logger = logging.getLogger(__name__)

UseCaseFactory = Callable[[Settings, httpx.Client], RunQueryUseCase]

_LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=_LOG_FORMAT)


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Log at DEBUG level.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repo-graph",
        description="Query GitLab repositories and their files as a graph.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    query_parser = subparsers.add_parser(
        "query",
        help="Run a query document and print the results.",
    )
    _add_verbose_option(query_parser, suppress_default=True)
    query_parser.add_argument(
        "path",
        help='Path to a JSON query document: {"query": "...", "args": {...}}.',
    )
    query_parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of results to print (cannot exceed MAX_RESULTS).",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP query service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default=None, help="Bind address (defaults to HOST).")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (defaults to PORT).")

    return parser


def _run_query(
    args: argparse.Namespace,
    settings: Settings,
    use_case_factory: UseCaseFactory,
) -> int:
    document = QueryDocument.from_file(args.path)
    with build_http_client(settings) as http_client:
        use_case = use_case_factory(settings, http_client)
        first = True
        for row in use_case.stream(document.query, document.args, args.limit):
            if not first:
                print()
            print(json.dumps(row, indent=2, sort_keys=True, default=str))
            first = False
    return 0


def _serve(args: argparse.Namespace, settings: Settings, log_level: str) -> int:
    uvicorn.run(
        "repo_graph.interface.app:create_app",
        factory=True,
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=log_level.lower(),
    )
    return 0


def main(
    argv: Sequence[str] | None = None,
    *,
    use_case_factory: UseCaseFactory | None = None,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
        log_level = "DEBUG" if args.verbose else settings.log_level
        configure_logging(log_level)

        if args.command == "query":
            return _run_query(args, settings, use_case_factory or build_use_case)
        if args.command == "serve":
            return _serve(args, settings, log_level)
    except QueryDocumentError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except RepoGraphError as exc:
        logger.debug("Query failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    parser.error(f"unknown command {args.command!r}")
    return 2
