"""
DevDocs API client with httpx.

Handles communication with a DevDocs instance, including:
- Catalog retrieval (docs.json), grouped by language
- Per-slug search index retrieval (docs/<slug>/index.json)

All I/O is async via httpx. Nothing is retried: a failed fetch raises
DevDocsAPIError and the caller decides what to tell the user.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

import httpx

from .matcher import natural_key
from .models import (
    DEVDOCS_BASE_URL,
    DEVDOCS_CATALOG_PATH,
    DEVDOCS_DISPLAY_URL,
    DEVDOCS_TIMEOUT,
    DevDocsAPIError,
    DocumentLanguage,
    DocumentVersion,
    SearchHit,
    SearchHits,
)
from .values import Slug


logger = logging.getLogger("devdocs.client")

LATEST = "latest"


class DevDocsClient:
    """
    Async client for the DevDocs static JSON API.

    Holds only read-only configuration, so one instance can serve every
    request for the life of the process.
    """

    def __init__(
        self,
        base_url: str = DEVDOCS_BASE_URL,
        display_url: Optional[str] = None,
        catalog_path: str = DEVDOCS_CATALOG_PATH,
        timeout: float = DEVDOCS_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize DevDocs client.

        Args:
            base_url: DevDocs instance to fetch JSON from
            display_url: Base for links returned to the agent. Defaults to
                         DEVDOCS_DISPLAY_URL, or base_url when that is unset.
            catalog_path: Catalog location relative to base_url
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        if display_url is None:
            display_url = DEVDOCS_DISPLAY_URL if base_url == DEVDOCS_BASE_URL else base_url
        self.display_url = display_url.rstrip("/")
        self._catalog_path = "/" + catalog_path.lstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def fetch_available_languages(self) -> List[DocumentLanguage]:
        """
        Fetch the DevDocs catalog.

        Returns:
            One DocumentLanguage per slug base, in catalog order

        Raises:
            DevDocsAPIError: On a non-200 response or unreadable payload
        """
        logger.info("Fetching available languages from DevDocs")
        data = await self._get_json(f"{self.base_url}{self._catalog_path}")

        if isinstance(data, dict):
            rows = list(data.values())
        elif isinstance(data, list):
            rows = data
        else:
            raise DevDocsAPIError(200, "Catalog payload is neither a list nor an object")

        languages = self._parse_languages(rows)
        logger.info("Found %d available languages", len(languages))
        return languages

    async def fetch_index(self, slug: Slug) -> SearchHits:
        """
        Fetch every index entry for one documentation slug.

        Args:
            slug: Validated DevDocs slug (e.g. "openjdk~21")

        Returns:
            SearchHits in index order, unfiltered

        Raises:
            DevDocsAPIError: If the slug has no index or the payload is malformed
        """
        data = await self._get_json(f"{self.base_url}/docs/{slug}/index.json")

        entries = data.get("entries") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            raise DevDocsAPIError(200, f"Index for '{slug}' has no entries list")

        hits = SearchHits.create(
            self._parse_hit(entry, str(slug)) for entry in entries if isinstance(entry, dict)
        )
        logger.info("Loaded %d index entries for slug %s", len(hits), slug)
        return hits

    async def _get_json(self, url: str) -> Any:
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            response = await client.get(url)

            if response.status_code != 200:
                raise DevDocsAPIError(
                    response.status_code,
                    self._extract_error_message(response)
                )

            try:
                return response.json()
            except ValueError as e:
                raise DevDocsAPIError(response.status_code, f"Malformed JSON from {url}: {e}") from e

    def _parse_languages(self, rows: Iterable[Dict[str, Any]]) -> List[DocumentLanguage]:
        """Group catalog rows by slug base ("python~3.12" -> "python")."""
        groups: Dict[str, List[Dict[str, Any]]] = {}
        for row in rows:
            if not isinstance(row, dict) or not row.get("slug"):
                continue
            name = str(row["slug"]).split("~", 1)[0]
            groups.setdefault(name, []).append(row)

        return [self._build_language(name, group) for name, group in groups.items()]

    def _build_language(self, name: str, rows: List[Dict[str, Any]]) -> DocumentLanguage:
        versions = [
            DocumentVersion(
                version=str(row.get("version") or LATEST),
                slug=str(row["slug"]),
                download_status="available",
                path=f"{self.base_url}/docs/{row['slug']}",
                release=str(row.get("release") or ""),
            )
            for row in rows
        ]
        # "latest" (unversioned) first, then newest-looking version first
        versions.sort(key=lambda v: (v.version != LATEST, _descending(v.version)))

        default_slug = versions[0].slug
        versions = [
            DocumentVersion(
                version=v.version,
                slug=v.slug,
                is_default=v.slug == default_slug,
                download_status=v.download_status,
                path=v.path,
                release=v.release,
            )
            for v in versions
        ]

        first = rows[0]
        return DocumentLanguage(
            name=name,
            display_name=str(first.get("name") or name),
            slug=default_slug,
            type=_first_value(rows, "type"),
            alias=_first_value(rows, "alias"),
            versions=tuple(versions),
        )

    def _parse_hit(self, entry: Dict[str, Any], slug: str) -> SearchHit:
        path = str(entry.get("path") or "")
        return SearchHit(
            title=str(entry.get("name") or "Untitled"),
            url=f"{self.display_url}/{slug}/{path}",
            path=path,
            type=str(entry.get("type") or ""),
            slug=slug,
        )

    def _extract_error_message(self, response: httpx.Response) -> str:
        """Extract error message from API response."""
        try:
            data = response.json()
            return data.get("message", data.get("error", response.text))
        except (ValueError, AttributeError):
            return response.reason_phrase or response.text or f"HTTP {response.status_code}"


class _descending:
    """Sort wrapper that reverses natural order."""

    __slots__ = ("key",)

    def __init__(self, value: str):
        self.key = natural_key(value)

    def __lt__(self, other: "_descending") -> bool:
        return self.key > other.key

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _descending) and self.key == other.key


def _first_value(rows: List[Dict[str, Any]], key: str) -> str:
    for row in rows:
        if row.get(key):
            return str(row[key])
    return ""
