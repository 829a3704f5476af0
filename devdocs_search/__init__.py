"""
DevDocs Search - documentation lookup against a DevDocs instance.

Public API for resolving a language hint to a DevDocs slug and searching
that slug's index. Each function is a one-shot call that returns a
formatted string ready to hand back to an MCP client.
"""

from typing import Literal, Optional

from .client import DevDocsClient
from .collection import DocumentLanguageCollection
from .formatters import (
    format_api_error,
    format_bad_request,
    format_catalog_json,
    format_language_not_found,
    format_languages,
    format_search_results,
)
from .logging_config import configure_logging
from .manager import DevDocsManager
from .models import (
    RESOLVE_LIMIT,
    AppError,
    BadRequestError,
    DevDocsAPIError,
    InternalError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    'view_available_docs',
    'search_specific_docs',
    'list_languages_json',
    'get_manager',
    'configure_logging',
    'DevDocsClient',
    'DevDocsManager',
    'DocumentLanguageCollection',
    'AppError',
    'BadRequestError',
    'DevDocsAPIError',
    'InternalError',
    'NotFoundError',
    'ValidationError',
]

_manager: Optional[DevDocsManager] = None


def get_manager() -> DevDocsManager:
    """Return the process-wide manager, creating it on first use."""
    global _manager
    if _manager is None:
        _manager = DevDocsManager(DevDocsClient())
    return _manager


async def view_available_docs(
    language: Optional[str] = None,
    version: Optional[str] = None,
    response_format: Literal["markdown", "json"] = "json",
    manager: Optional[DevDocsManager] = None,
) -> str:
    """
    List DevDocs documentation sets, or resolve a language hint to a slug.

    Args:
        language: Optional language hint ("python", "Java 17", "py")
        version: Optional version; overrides one embedded in language
        response_format: "json" (slug list) or "markdown"
        manager: Manager to use; defaults to the process-wide one

    Returns:
        Formatted language list. Without a language hint the first
        RESOLVE_LIMIT catalog entries are listed.

    Example:
        >>> result = await view_available_docs("python 3.12")
        >>> result = await view_available_docs()
    """
    manager = manager or get_manager()

    try:
        if not (language or "").strip():
            catalog = await manager.get_available_list()
            return format_languages(catalog.take(RESOLVE_LIMIT), response_format=response_format)

        resolution = await manager.resolve_language(language, version)
        return format_languages(resolution.candidates, resolution, response_format)

    except BadRequestError as e:
        return format_bad_request(e.message, response_format)
    except NotFoundError as e:
        return format_language_not_found(language or "", e.available, response_format)
    except DevDocsAPIError as e:
        return format_api_error(e.status_code, e.message, response_format)


async def search_specific_docs(
    slug: str,
    query: str,
    limit: Optional[int] = None,
    response_format: Literal["markdown", "json"] = "markdown",
    manager: Optional[DevDocsManager] = None,
) -> str:
    """
    Search one DevDocs documentation set by its exact slug.

    Args:
        slug: Exact slug, e.g. "openjdk~21" or "python~3.12"
        query: Text matched against entry titles and paths
        limit: Maximum results (clamped to 1-50, default 10)
        response_format: "markdown" or "json"
        manager: Manager to use; defaults to the process-wide one

    Returns:
        Formatted hits, or a formatted error

    Example:
        >>> result = await search_specific_docs("javascript", "map", limit=5)
    """
    manager = manager or get_manager()

    try:
        hits = await manager.search_documentation_by_slug(slug, query, limit)
        return format_search_results(hits, slug.strip(), query.strip(), response_format)

    except BadRequestError as e:
        return format_bad_request(e.message, response_format)
    except DevDocsAPIError as e:
        return format_api_error(e.status_code, e.message, response_format)


async def list_languages_json(manager: Optional[DevDocsManager] = None) -> str:
    """Full catalog as JSON, for the devdocs://languages resource."""
    manager = manager or get_manager()
    catalog = await manager.get_available_list()
    return format_catalog_json(catalog)
