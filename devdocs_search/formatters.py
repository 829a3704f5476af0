"""
Response formatting for DevDocs results.

Converts resolutions, search hits and errors into markdown or JSON
for MCP client consumption.
"""

import json
from typing import List, Optional

from .collection import DocumentLanguageCollection
from .models import (
    CHARACTER_LIMIT,
    DocumentLanguage,
    LanguageResolution,
    SearchHits,
)


# Characters that break a markdown link target, in replacement order
_MARKDOWN_URL_ESCAPES = (
    (" ", "%20"),
    ("(", "%28"),
    (")", "%29"),
    ("[", "%5B"),
    ("]", "%5D"),
    ("{", "%7B"),
    ("}", "%7D"),
    ("+", "%2B"),
    ("|", "%7C"),
    ("\\", "%5C"),
    ("^", "%5E"),
    ("`", "%60"),
)


def escape_url_for_markdown(url: Optional[str]) -> str:
    """
    Percent-encode the characters that break a markdown link target.

    Empty input and "#" both become "#".
    """
    if not url or url == "#":
        return "#"
    for char, encoded in _MARKDOWN_URL_ESCAPES:
        url = url.replace(char, encoded)
    return url


def to_display_url(url: str) -> str:
    """Turn a docs-data URL (base/docs/<slug>) into a browsable page URL."""
    return url.replace("/docs/", "/", 1)


def format_search_results(
    hits: SearchHits,
    slug: str,
    query: str,
    response_format: str = "markdown"
) -> str:
    """
    Format hits from a slug search.

    Args:
        hits: Extracted hits
        slug: Slug that was searched
        query: Original query text
        response_format: "markdown" or "json"

    Returns:
        Formatted results; an empty hit list is a valid, non-error result
    """
    if response_format == "json":
        return json.dumps({
            "slug": slug,
            "query": query,
            "count": len(hits),
            "results": [
                {
                    "title": hit.title,
                    "url": hit.url,
                    "path": hit.path,
                    "type": hit.type,
                    "slug": hit.slug,
                }
                for hit in hits
            ]
        }, indent=2)

    output = []
    output.append(f"# Search Results: {slug}\n\n")
    output.append(f"**Query:** \"{query}\"\n\n")

    if not len(hits):
        output.append("No entries matched this query.\n\n")
        output.append("**Suggestions:**\n")
        output.append("- Try a shorter or more general term (e.g. \"map\" instead of \"Array.map()\")\n")
        output.append("- Check the slug with `view_available_docs`\n")
        return "".join(output)

    output.append(f"Found {len(hits)} matching entries:\n\n")
    for hit in hits:
        kind = f" ({hit.type})" if hit.type else ""
        output.append(f"- [{hit.title}]({escape_url_for_markdown(hit.url)}){kind}\n")

    return _truncate_if_needed("".join(output))


def format_languages(
    collection: DocumentLanguageCollection,
    resolution: Optional[LanguageResolution] = None,
    response_format: str = "json"
) -> str:
    """
    Format a language list, optionally with the resolved selection.

    Args:
        collection: Languages to list, already bounded
        resolution: Resolution result when a language hint was given
        response_format: "json" (default, slug list for agents) or "markdown"

    Returns:
        Formatted language list
    """
    if response_format == "json":
        data = {
            "count": collection.size(),
            "slugs": [lang.slug for lang in collection],
            "languages": [_language_json(lang) for lang in collection],
        }
        if resolution is not None:
            data = {
                "input": resolution.input,
                "requested_version": resolution.requested_version,
                "match": resolution.tier,
                "selected": {
                    "name": resolution.language.name,
                    "display_name": resolution.language.display_name,
                    "slug": resolution.slug,
                    "version": resolution.version.version if resolution.version else None,
                    "url": to_display_url(resolution.version.path) if resolution.version else None,
                },
                **data,
            }
        return json.dumps(data, indent=2)

    output = []
    if resolution is not None:
        output.append(f"# Documentation: {resolution.language.display_name}\n\n")
        output.append(f"**Input:** \"{resolution.input}\"\n")
        output.append(f"**Slug:** `{resolution.slug}`\n")
        if resolution.version:
            output.append(f"**Version:** {resolution.version.version}\n")
            output.append(f"**Browse:** {to_display_url(resolution.version.path)}\n")
        output.append(f"\nUse `search_specific_docs(slug=\"{resolution.slug}\", query=...)` to search it.\n\n")
        output.append("## Other Candidates\n\n")
    else:
        output.append("# Available Documentation\n\n")

    output.append("| Name | Slug | Type | Versions |\n")
    output.append("|------|------|------|----------|\n")
    for lang in collection:
        versions = ", ".join(v.version for v in lang.versions[:5])
        if len(lang.versions) > 5:
            versions += ", ..."
        output.append(f"| {lang.display_name} | `{lang.slug}` | {lang.type} | {versions} |\n")

    return _truncate_if_needed("".join(output))


def format_catalog_json(collection: DocumentLanguageCollection) -> str:
    """Every language with all of its versions, as a JSON array."""
    return json.dumps([_language_json(lang) for lang in collection], indent=2)


def format_language_not_found(
    target: str,
    available: List[str],
    response_format: str = "markdown"
) -> str:
    """
    Format error when no language matches, listing what is available.

    Args:
        target: Original language hint
        available: Catalog language names
        response_format: "markdown" or "json"

    Returns:
        Formatted error with the available names
    """
    if response_format == "json":
        return json.dumps({
            "error": "language_not_found",
            "target": target,
            "message": f"No documentation found matching '{target}'",
            "available": available,
        }, indent=2)

    names = ", ".join(available) if available else "(none)"
    return _truncate_if_needed(f"""# Language Not Found

**Target:** "{target}"

No documentation matched this language.

**Available languages:**
{names}

**Suggestions:**
- Use one of the names listed above
- Call `view_available_docs` without a language to browse slugs
""")


def format_bad_request(message: str, response_format: str = "markdown") -> str:
    """Format an input validation failure."""
    if response_format == "json":
        return json.dumps({"error": "bad_request", "message": message}, indent=2)
    return f"Error: input parameter error: {message}"


def format_api_error(
    status_code: int,
    message: str,
    response_format: str = "markdown"
) -> str:
    """
    Format DevDocs API error.

    Args:
        status_code: HTTP status code
        message: Error message
        response_format: "markdown" or "json"

    Returns:
        Formatted error message
    """
    if response_format == "json":
        return json.dumps({
            "error": "api_error",
            "status_code": status_code,
            "message": message
        }, indent=2)

    suggestions = []
    if status_code == 404:
        suggestions.append("The slug may not exist on this DevDocs instance")
        suggestions.append("Use `view_available_docs` to look up the exact slug")
    elif status_code == 0 or status_code == 200:
        suggestions.append("DevDocs returned data in an unexpected shape")
        suggestions.append("Check DEVDOCS_BASE_URL points at a DevDocs instance")
    elif status_code >= 500:
        suggestions.append("DevDocs is having trouble - wait a moment and try again")

    suggestion_text = "\n".join(f"- {s}" for s in suggestions) if suggestions else "- Try again later"

    return f"""# API Error

**Status:** {status_code}
**Message:** {message}

**Suggestions:**
{suggestion_text}
"""


# ============================================================================
# Private Formatting Functions
# ============================================================================

def _language_json(lang: DocumentLanguage) -> dict:
    return {
        "name": lang.name,
        "display_name": lang.display_name,
        "slug": lang.slug,
        "type": lang.type,
        "alias": lang.alias,
        "versions": [
            {
                "version": v.version,
                "slug": v.slug,
                "is_default": v.is_default,
                "release": v.release or None,
            }
            for v in lang.versions
        ],
    }


def _truncate_if_needed(content: str) -> str:
    """Truncate content if it exceeds character limit."""
    if len(content) <= CHARACTER_LIMIT:
        return content

    truncated = content[:CHARACTER_LIMIT]
    return (
        f"{truncated}\n\n"
        f"[TRUNCATED - Response exceeds {CHARACTER_LIMIT:,} characters. "
        f"Original length: {len(content):,}. "
        f"Try a more specific query or a lower limit.]"
    )
