"""Tests for the public API in devdocs_search and the MCP tools in server.py."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pydantic import ValidationError as PydanticValidationError

import devdocs_search
import server
from devdocs_search import search_specific_docs, view_available_docs
from devdocs_search.client import DevDocsClient
from devdocs_search.manager import DevDocsManager
from devdocs_search.models import (
    DevDocsAPIError,
    DocumentLanguage,
    DocumentVersion,
    SearchHit,
    SearchHits,
)


def language(name, alias=""):
    return DocumentLanguage(
        name=name,
        display_name=name.title(),
        slug=name,
        type=name,
        alias=alias,
        versions=(DocumentVersion("latest", name, True, path=f"https://devdocs.io/docs/{name}"),),
    )


CATALOG = [language(f"lang{i:02d}") for i in range(25)] + [language("python", "py"), language("javascript", "js")]

INDEX = SearchHits.create([
    SearchHit("Array.prototype.map", "https://devdocs.io/javascript/array/map", "array/map", "Array", "javascript"),
    SearchHit("Array.prototype.filter", "https://devdocs.io/javascript/array/filter", "array/filter", "Array", "javascript"),
])


@pytest.fixture
def client():
    mock = MagicMock(spec=DevDocsClient)
    mock.fetch_available_languages = AsyncMock(return_value=CATALOG)
    mock.fetch_index = AsyncMock(return_value=INDEX)
    return mock


@pytest.fixture
def manager(client):
    return DevDocsManager(client=client)


# -----------------------------------------------------------------------
# devdocs_search public API
# -----------------------------------------------------------------------


@pytest.mark.asyncio
async def test_view_without_language_lists_first_twenty(manager):
    data = json.loads(await view_available_docs(manager=manager))

    assert data["count"] == 20
    assert data["slugs"][0] == "lang00"


@pytest.mark.asyncio
async def test_view_with_language_resolves(manager):
    data = json.loads(await view_available_docs("js", manager=manager))

    assert data["selected"]["slug"] == "javascript"
    assert data["input"] == "js"


@pytest.mark.asyncio
async def test_view_not_found_lists_languages(manager):
    output = await view_available_docs("xyzzy", response_format="markdown", manager=manager)

    assert "# Language Not Found" in output
    assert "python" in output


@pytest.mark.asyncio
async def test_view_empty_catalog_is_not_found(client, manager):
    client.fetch_available_languages.return_value = []

    output = await view_available_docs(manager=manager)

    assert "language_not_found" in output


@pytest.mark.asyncio
async def test_view_api_error_is_formatted(client, manager):
    client.fetch_available_languages.side_effect = DevDocsAPIError(502, "Bad Gateway")

    output = await view_available_docs("python", response_format="markdown", manager=manager)

    assert "# API Error" in output
    assert "Bad Gateway" in output


@pytest.mark.asyncio
async def test_search_returns_markdown_links(manager):
    output = await search_specific_docs("javascript", "map", manager=manager)

    assert "[Array.prototype.map](https://devdocs.io/javascript/array/map)" in output
    assert "filter" not in output


@pytest.mark.asyncio
async def test_search_bad_slug_is_bad_request(client, manager):
    output = await search_specific_docs("java script", "map", manager=manager)

    assert output.startswith("Error: input parameter error:")
    client.fetch_index.assert_not_called()


@pytest.mark.asyncio
async def test_search_unknown_slug_is_api_error(client, manager):
    client.fetch_index.side_effect = DevDocsAPIError(404, "Not Found")

    output = await search_specific_docs("nope", "map", manager=manager)

    assert "**Status:** 404" in output


def test_get_manager_is_shared():
    with patch.object(devdocs_search, "_manager", None):
        first = devdocs_search.get_manager()
        assert devdocs_search.get_manager() is first


# -----------------------------------------------------------------------
# server.py tools
# -----------------------------------------------------------------------


def test_search_input_requires_slug_and_query():
    with pytest.raises(PydanticValidationError):
        server.SearchSpecificDocsInput(slug="", query="map")
    with pytest.raises(PydanticValidationError):
        server.SearchSpecificDocsInput(slug="javascript", query="map", unknown=True)


def test_search_input_defaults():
    data = server.SearchSpecificDocsInput(slug="javascript", query="map")
    assert data.limit == 10
    assert data.format == "markdown"


@pytest.mark.asyncio
async def test_view_tool_delegates():
    with patch("server.resolve_docs", new_callable=AsyncMock) as mock_resolve:
        mock_resolve.return_value = "{}"

        result = await server.view_available_docs(server.ViewAvailableDocsInput(language="Java 17"))

        assert result == "{}"
        mock_resolve.assert_awaited_once_with(language="Java 17", version=None, response_format="json")


@pytest.mark.asyncio
async def test_search_tool_delegates():
    with patch("server.search_by_slug", new_callable=AsyncMock) as mock_search:
        mock_search.return_value = "results"

        result = await server.search_specific_docs(
            server.SearchSpecificDocsInput(slug="openjdk~21", query="stream", limit=5)
        )

        assert result == "results"
        mock_search.assert_awaited_once_with(
            slug="openjdk~21", query="stream", limit=5, response_format="markdown"
        )


@pytest.mark.asyncio
async def test_tool_unexpected_error_includes_original_text():
    with patch("server.search_by_slug", new_callable=AsyncMock) as mock_search:
        mock_search.side_effect = RuntimeError("connection reset")

        result = await server.search_specific_docs(
            server.SearchSpecificDocsInput(slug="javascript", query="map")
        )

        assert result.startswith("Error during searching by slug: connection reset")
        assert "DEVDOCS_BASE_URL" in result


@pytest.mark.asyncio
async def test_languages_resource():
    with patch("server.list_languages_json", new_callable=AsyncMock) as mock_list:
        mock_list.return_value = "[]"

        assert await server.available_languages() == "[]"
