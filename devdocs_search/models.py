"""
Internal types for devdocs-search module.

Catalog records, search hits and the error taxonomy shared by the client,
the manager and the MCP boundary (server.py). Value objects that validate
user input live in values.py.
"""

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, List, Literal, Optional, Tuple

if TYPE_CHECKING:
    from .collection import DocumentLanguageCollection
    from .matcher import Matcher
    from .values import Limit, Query


# ============================================================================
# Configurable Constants
# ============================================================================

# DevDocs instance to read catalogs and indexes from
DEVDOCS_BASE_URL = os.getenv("DEVDOCS_BASE_URL", "https://devdocs.io").rstrip("/")

# Base used for links handed back to the agent (a local DevDocs container
# is usually fetched from one host and browsed on another)
DEVDOCS_DISPLAY_URL = os.getenv("DEVDOCS_DISPLAY_URL", DEVDOCS_BASE_URL).rstrip("/")

# Catalog location relative to the base URL
DEVDOCS_CATALOG_PATH = os.getenv("DEVDOCS_CATALOG_PATH", "/docs.json")

# HTTP timeout in seconds
DEVDOCS_TIMEOUT = float(os.getenv("DEVDOCS_TIMEOUT", "30"))

# Fuzzy fallback looseness: 0.0 = exact only, 1.0 = anything matches
FUZZY_THRESHOLD = float(os.getenv("DEVDOCS_FUZZY_THRESHOLD", "0.6"))

# Maximum candidates returned by language resolution
RESOLVE_LIMIT = int(os.getenv("DEVDOCS_RESOLVE_LIMIT", "20"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("LOG_FORMAT", "text").lower()

# Search limits
DEFAULT_LIMIT = 10
MIN_LIMIT = 1
MAX_LIMIT = 50

# Response size cap for tool output
CHARACTER_LIMIT = 25000


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class DocumentVersion:
    """
    One downloadable version of a documentation set.

    Attributes:
        version: Version label from the catalog ("3.12", "latest")
        slug: DevDocs slug of this version ("python~3.12")
        is_default: Whether this is the version used when none is requested
        download_status: Availability on the DevDocs side
        path: URL of the version's docs directory
        release: Upstream release string, if the catalog carries one
    """
    version: str
    slug: str
    is_default: bool = False
    download_status: Literal["available", "downloading", "downloaded", "error"] = "available"
    path: str = ""
    release: str = ""


@dataclass(frozen=True)
class DocumentLanguage:
    """
    A catalog entry grouping every version of one documentation set.

    Attributes:
        name: Slug base, unique per language ("python", "openjdk")
        display_name: Human-readable name ("Python", "OpenJDK")
        slug: Slug of the default version
        type: DevDocs scraper type ("python", "sphinx", "mdn")
        alias: Short alias ("py"), empty when none
        versions: Version records, newest first
    """
    name: str
    display_name: str
    slug: str
    type: str = ""
    alias: str = ""
    versions: Tuple[DocumentVersion, ...] = ()

    @property
    def default_version(self) -> Optional[DocumentVersion]:
        for version in self.versions:
            if version.is_default:
                return version
        return self.versions[0] if self.versions else None

    @property
    def version(self) -> str:
        """Default version label, so ordering rules can key on it."""
        default = self.default_version
        return default.version if default else ""

    def field_value(self, key: str) -> str:
        """Look up a rule/scoring field by name; missing values read as ''."""
        return getattr(self, key, "") or ""


@dataclass(frozen=True)
class SearchHit:
    """
    A single entry from a slug's documentation index.

    Attributes:
        title: Entry name ("Array.prototype.map()")
        url: Browsable URL of the entry
        path: Path inside the documentation set ("global_objects/array/map")
        type: Index category ("Array", "Built-in Functions")
        slug: Slug the entry belongs to
    """
    title: str
    url: str
    path: str
    type: str
    slug: str


@dataclass(frozen=True)
class SearchHits:
    """Immutable, ordered result list for one slug."""
    hits: Tuple[SearchHit, ...] = ()

    @classmethod
    def create(cls, hits) -> "SearchHits":
        return cls(tuple(hits))

    def extract(self, query: "Query", limit: "Limit") -> "SearchHits":
        """
        Filter hits to those whose title or path contains the query.

        Matching is a case-insensitive substring test over
        "title path". The result keeps the original order and holds at
        most limit entries; this instance is left untouched.
        """
        needle = str(query).lower()
        matched = [
            hit for hit in self.hits
            if needle in f"{hit.title or ''} {hit.path or ''}".lower()
        ]
        return SearchHits(tuple(matched[:int(limit)]))

    def to_list(self) -> List[SearchHit]:
        return list(self.hits)

    def __len__(self) -> int:
        return len(self.hits)

    def __iter__(self) -> Iterator[SearchHit]:
        return iter(self.hits)


@dataclass(frozen=True)
class OrderRule:
    """
    One step of the ranking cascade.

    Attributes:
        key: DocumentLanguage field to compare ("name", "type", "version")
        matcher: Comparator applied to the two field values
        direction: "desc" negates the comparison
    """
    key: str
    matcher: "Matcher"
    direction: Literal["asc", "desc"] = "asc"


@dataclass(frozen=True)
class ScoredLanguage:
    """A catalog entry with its relevance score for one input."""
    language: DocumentLanguage
    score: float


@dataclass
class LanguageResolution:
    """
    Result of resolving a language hint.

    Attributes:
        input: Language hint as received
        candidates: Ranked candidates (at most RESOLVE_LIMIT)
        language: Top-ranked language
        version: Version chosen for the top-ranked language
        tier: Which stage produced the candidates ("score", "fuzzy", "all")
        requested_version: Version parsed or passed in, if any
    """
    input: str
    candidates: "DocumentLanguageCollection"
    language: DocumentLanguage
    version: Optional[DocumentVersion]
    tier: str
    requested_version: Optional[str] = None
    scores: List[ScoredLanguage] = field(default_factory=list)

    @property
    def slug(self) -> str:
        return self.version.slug if self.version else self.language.slug


# ============================================================================
# Custom Exceptions
# ============================================================================

class ValidationError(ValueError):
    """Raised when a value object rejects its raw input."""


class AppError(Exception):
    """
    Base for errors surfaced to the MCP boundary.

    Attributes:
        code: Machine-readable category
        message: Human-readable description
    """
    code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(AppError):
    """
    Raised when the catalog is empty or no language matches.

    Attributes:
        target: The input that did not resolve (None for an empty catalog)
        available: Language names to suggest instead
    """
    code = "NOT_FOUND"

    def __init__(self, message: str, target: Optional[str] = None,
                 available: Optional[List[str]] = None):
        self.target = target
        self.available = available or []
        super().__init__(message)


class BadRequestError(AppError):
    """Raised when tool input fails value-object validation."""
    code = "BAD_REQUEST"


class InternalError(AppError):
    """Raised for unexpected failures; the original error is the __cause__."""
    code = "INTERNAL_ERROR"


class DevDocsAPIError(Exception):
    """
    Raised when DevDocs returns an error or an unreadable payload.

    Attributes:
        status_code: HTTP status code (0 when the body was malformed)
        message: Error message
    """
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"DevDocs API error ({status_code}): {message}")
