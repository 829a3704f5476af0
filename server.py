#!/usr/bin/env python3
"""
DevDocs MCP Server

An MCP server exposing DevDocs documentation lookup as tools.
Enables AI agents to resolve a language to its DevDocs slug and search
that slug's documentation index.
"""

import logging
from typing import Literal, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import BaseModel, ConfigDict, Field

from devdocs_search import (
    configure_logging,
    list_languages_json,
    search_specific_docs as search_by_slug,
    view_available_docs as resolve_docs,
)
from devdocs_search.models import DEFAULT_LIMIT, MAX_LIMIT, MIN_LIMIT


logger = logging.getLogger("devdocs.server")

# Initialize MCP server
app = FastMCP(
    name="devdocs",
    instructions=(
        "DevDocs documentation lookup. "
        "Use `view_available_docs` to find the slug for a language, "
        "then `search_specific_docs` with that slug to search its index."
    ),
)


# ============================================================================
# Input Models (Pydantic v2)
# ============================================================================

class ViewAvailableDocsInput(BaseModel):
    """Input model for listing or resolving DevDocs documentation sets."""
    model_config = ConfigDict(extra="forbid")

    language: Optional[str] = Field(
        default=None,
        description="Language to look up. Examples: 'python', 'Java 17', 'py', 'openjdk~21'. Omit to list the first 20 documentation sets",
        max_length=200
    )
    version: Optional[str] = Field(
        default=None,
        description="Version to prefer. Examples: '3.12', '21'. Overrides a version written inside `language`",
        max_length=50
    )
    format: Literal["markdown", "json"] = Field(
        default="json",
        description="Response format: 'json' for a slug list or 'markdown' for a table"
    )


class SearchSpecificDocsInput(BaseModel):
    """Input model for searching one DevDocs documentation set by slug."""
    model_config = ConfigDict(extra="forbid")

    slug: str = Field(
        ...,
        description="Exact DevDocs slug. Examples: 'openjdk~21', 'python~3.12', 'javascript'",
        min_length=1,
        max_length=100
    )
    query: str = Field(
        ...,
        description="Text to search within the documentation index. Matched against entry titles and paths",
        min_length=1,
        max_length=200
    )
    limit: int = Field(
        default=DEFAULT_LIMIT,
        description=f"Maximum number of results ({MIN_LIMIT}-{MAX_LIMIT})"
    )
    format: Literal["markdown", "json"] = Field(
        default="markdown",
        description="Response format: 'markdown' for clickable links or 'json' for structured data"
    )


# ============================================================================
# Shared Utilities
# ============================================================================

def format_error(error: Exception, context: str) -> str:
    """
    Format an unexpected error for LLM consumption.

    Args:
        error: The exception that occurred
        context: Context about what operation failed

    Returns:
        Error message including the original error text
    """
    error_msg = f"Error during {context}: {error}"

    if "connect" in str(error).lower() or "timeout" in str(error).lower():
        error_msg += "\n\nSuggestion: Check DEVDOCS_BASE_URL is reachable and try again"

    return error_msg


# ============================================================================
# Tool Implementations
# ============================================================================

@app.tool(
    name="view_available_docs",
    description="""
    View available DevDocs documentation sets, or resolve a language to its slug.

    Without `language`, returns the first 20 documentation sets as JSON
    with their slugs. With `language`, resolves the name (aliases, display
    names and typos are accepted) and returns ranked candidates with the
    slug to pass to `search_specific_docs`.

    **Matching Algorithm:**
    Weighted name/alias/slug scoring first, fuzzy matching as a fallback,
    so "py", "Python" and "pyhton" all resolve to "python".

    **Examples:**
    - Browse: `view_available_docs()`
    - Resolve: `view_available_docs(language="python")`
    - With version: `view_available_docs(language="Java 17")`
    """,
    annotations=ToolAnnotations(
        readOnlyHint=True,
        openWorldHint=True,
        idempotentHint=True,
    ),
)
async def view_available_docs(input_data: ViewAvailableDocsInput) -> str:
    """
    List or resolve DevDocs documentation sets.

    Args:
        input_data: ViewAvailableDocsInput with language, version and format

    Returns:
        Language list, resolved slug, or a not-found message listing languages
    """
    try:
        logger.info(
            "Checking docs availability for: %s%s",
            input_data.language or "(all)",
            f" v{input_data.version}" if input_data.version else "",
        )
        return await resolve_docs(
            language=input_data.language,
            version=input_data.version,
            response_format=input_data.format,
        )

    except Exception as e:
        error_msg = format_error(e, "checking docs availability")
        logger.error(error_msg)
        return error_msg


@app.tool(
    name="search_specific_docs",
    description="""
    Search DevDocs by explicit slug (e.g. openjdk~21) and query.

    Matches the query against entry titles and paths (case-insensitive)
    and returns up to `limit` entries as clickable links.

    **Examples:**
    - `search_specific_docs(slug="javascript", query="map")`
    - `search_specific_docs(slug="python~3.12", query="asyncio", limit=5)`
    """,
    annotations=ToolAnnotations(
        readOnlyHint=True,
        openWorldHint=True,
        idempotentHint=True,
    ),
)
async def search_specific_docs(input_data: SearchSpecificDocsInput) -> str:
    """
    Search one documentation set by slug.

    Args:
        input_data: SearchSpecificDocsInput with slug, query, limit and format

    Returns:
        Matching entries or an error message
    """
    try:
        logger.info("Searching by slug: %s for query: %s", input_data.slug, input_data.query)
        return await search_by_slug(
            slug=input_data.slug,
            query=input_data.query,
            limit=input_data.limit,
            response_format=input_data.format,
        )

    except Exception as e:
        error_msg = format_error(e, "searching by slug")
        logger.error(error_msg)
        return error_msg


@app.resource(
    "devdocs://languages",
    name="Available Languages",
    description="List of languages and versions available in DevDocs",
    mime_type="application/json",
)
async def available_languages() -> str:
    """Full DevDocs catalog as JSON."""
    return await list_languages_json()


# ============================================================================
# Server Entry Point
# ============================================================================

def main() -> None:
    """Run the MCP server using stdio transport."""
    configure_logging()
    logger.info("Starting DevDocs MCP Server")
    app.run()


if __name__ == "__main__":
    main()
