"""Remote fetch functions — paginated listings built on the RemoteClient port.

``list_repositories`` materialises every page up front so that a failure on
any page fails the whole call.  ``list_files`` is a generator: no remote call
happens until the caller asks for the first file.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterator, TypeVar

from repo_graph.domain.entities import File, Page, Repository, TreeEntry
from repo_graph.domain.exceptions import RemoteServiceError
from repo_graph.domain.ports.remote_client import RemoteClient
from repo_graph.domain.value_objects import FileListingOptions, RepositoryFilters

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_REPOSITORY_PAGE_LIMIT = 1
DEFAULT_TREE_PAGE_LIMIT = 10
DEFAULT_BLOB_FETCH_WORKERS = 4


def _collect_pages(fetch_page: Callable[[str | None], Page[T]], page_limit: int) -> list[T]:
    """Follow ``next_page`` tokens, stopping after *page_limit* pages."""
    items: list[T] = []
    token: str | None = None
    for _ in range(max(page_limit, 0)):
        page = fetch_page(token)
        items.extend(page.items)
        token = page.next_page
        if not token:
            break
    else:
        if token:
            logger.info("Page limit (%d) reached, remaining results not fetched", page_limit)
    return items


def decode_content(raw: bytes) -> str:
    """Decode file bytes as UTF-8; invalid sequences become U+FFFD."""
    return raw.decode("utf-8", errors="replace")


def list_repositories(
    client: RemoteClient,
    filters: RepositoryFilters,
    *,
    page_limit: int = DEFAULT_REPOSITORY_PAGE_LIMIT,
) -> list[Repository]:
    """Return every repository matching *filters*, up to *page_limit* pages.

    Remote errors propagate; no partial list is ever returned.
    """
    logger.info("Listing repositories (filters=%s, page_limit=%d)", filters, page_limit)
    repositories = _collect_pages(
        lambda token: client.list_repositories(filters, token), page_limit
    )
    logger.info("Listed %d repositories", len(repositories))
    return repositories


def list_files(
    client: RemoteClient,
    repository_id: str,
    options: FileListingOptions = FileListingOptions(),
    *,
    page_limit: int = DEFAULT_TREE_PAGE_LIMIT,
    workers: int = DEFAULT_BLOB_FETCH_WORKERS,
    skip_missing_blobs: bool = False,
) -> Iterator[File]:
    """Yield the files of one repository at ``options.ref`` below ``options.path``.

    A failed tree listing (unknown ref or path, say) yields nothing and logs a
    warning, so one bad repository does not abort a query spanning many.
    Every blob of the listing is fetched before the first file is yielded; a
    failed blob fetch aborts the whole expansion unless *skip_missing_blobs*
    is set, in which case the file is logged and left out.
    """
    try:
        entries = _collect_pages(
            lambda token: client.list_tree(repository_id, options.ref, options.path, token),
            page_limit,
        )
    except RemoteServiceError as exc:
        logger.warning(
            "Failed to list files for repository %s (ref=%s, path=%s): %s",
            repository_id,
            options.ref,
            options.path,
            exc,
        )
        return

    blobs = _unique_blobs(entries)
    logger.debug("Repository %s: fetching %d blobs", repository_id, len(blobs))

    def _fetch_one(entry: TreeEntry) -> File | None:
        try:
            raw = client.fetch_blob(repository_id, entry.path, options.ref)
        except RemoteServiceError:
            if not skip_missing_blobs:
                raise
            logger.warning(
                "Skipping %s in repository %s: blob could not be fetched",
                entry.path,
                repository_id,
                exc_info=True,
            )
            return None
        return File(path=entry.path, content=decode_content(raw))

    if not blobs:
        return

    with ThreadPoolExecutor(max_workers=max(workers, 1)) as executor:
        futures = [executor.submit(_fetch_one, blob) for blob in blobs]
        try:
            files = [future.result() for future in futures]
        except RemoteServiceError:
            # The expansion has failed: fetches not yet started are dropped.
            executor.shutdown(wait=True, cancel_futures=True)
            raise

    for file in files:
        if file is not None:
            yield file


def _unique_blobs(entries: list[TreeEntry]) -> list[TreeEntry]:
    """Drop non-blob entries and repeated paths, keeping tree order."""
    seen: set[str] = set()
    blobs: list[TreeEntry] = []
    for entry in entries:
        if not entry.is_blob or entry.path in seen:
            continue
        seen.add(entry.path)
        blobs.append(entry)
    return blobs
