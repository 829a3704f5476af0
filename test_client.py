"""Tests for devdocs_search.client: DevDocs HTTP collaborator with mocked transport."""

import json

import httpx
import pytest

from devdocs_search.client import DevDocsClient
from devdocs_search.models import DevDocsAPIError
from devdocs_search.values import Slug


CATALOG = [
    {"name": "Python", "slug": "python~3.12", "type": "python", "version": "3.12", "release": "3.12.1", "alias": "py"},
    {"name": "Python", "slug": "python~3.9", "type": "python", "version": "3.9", "release": "3.9.18"},
    {"name": "JavaScript", "slug": "javascript", "type": "mdn", "version": "", "alias": "js"},
    {"name": "OpenJDK", "slug": "openjdk~21", "type": "openjdk", "version": "21"},
    {"name": "OpenJDK", "slug": "openjdk~17", "type": "openjdk", "version": "17"},
    {"name": "OpenJDK", "slug": "openjdk", "type": "openjdk", "version": ""},
]

INDEX = {
    "entries": [
        {"name": "Array.prototype.map()", "path": "global_objects/array/map", "type": "Array"},
        {"name": "Array.prototype.filter()", "path": "global_objects/array/filter", "type": "Array"},
        {"path": "global_objects/nameless"},
    ],
    "types": [{"name": "Array", "count": 2, "slug": "array"}],
}


def make_client(handler, **kwargs):
    return DevDocsClient(
        base_url="https://devdocs.test",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def json_handler(routes):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path in routes:
            return httpx.Response(200, json=routes[request.url.path])
        return httpx.Response(404, text="Not Found")
    return handler


# -----------------------------------------------------------------------
# fetch_available_languages
# -----------------------------------------------------------------------


@pytest.mark.asyncio
async def test_catalog_is_grouped_by_slug_base():
    client = make_client(json_handler({"/docs.json": CATALOG}))

    languages = await client.fetch_available_languages()

    assert [lang.name for lang in languages] == ["python", "javascript", "openjdk"]
    python = languages[0]
    assert python.display_name == "Python"
    assert python.type == "python"
    assert python.alias == "py"
    assert [v.version for v in python.versions] == ["3.12", "3.9"]


@pytest.mark.asyncio
async def test_newest_version_is_default_when_no_unversioned_row():
    client = make_client(json_handler({"/docs.json": CATALOG}))

    python = (await client.fetch_available_languages())[0]

    assert python.slug == "python~3.12"
    assert python.version == "3.12"
    assert [v.is_default for v in python.versions] == [True, False]
    assert python.versions[0].release == "3.12.1"
    assert python.versions[0].path == "https://devdocs.test/docs/python~3.12"


@pytest.mark.asyncio
async def test_unversioned_row_is_latest_and_default():
    client = make_client(json_handler({"/docs.json": CATALOG}))

    openjdk = (await client.fetch_available_languages())[2]

    assert [v.version for v in openjdk.versions] == ["latest", "21", "17"]
    assert openjdk.slug == "openjdk"
    assert openjdk.default_version.version == "latest"


@pytest.mark.asyncio
async def test_catalog_object_payload_is_accepted():
    payload = {str(i): row for i, row in enumerate(CATALOG)}
    client = make_client(json_handler({"/docs.json": payload}))

    languages = await client.fetch_available_languages()

    assert len(languages) == 3


@pytest.mark.asyncio
async def test_rows_without_slug_are_skipped():
    client = make_client(json_handler({"/docs.json": [{"name": "Broken"}, CATALOG[2]]}))

    languages = await client.fetch_available_languages()

    assert [lang.name for lang in languages] == ["javascript"]


@pytest.mark.asyncio
async def test_custom_catalog_path():
    client = make_client(json_handler({"/assets/docs.json": CATALOG}), catalog_path="assets/docs.json")

    languages = await client.fetch_available_languages()

    assert len(languages) == 3


@pytest.mark.asyncio
async def test_catalog_http_error_raises():
    client = make_client(lambda request: httpx.Response(503, json={"message": "maintenance"}))

    with pytest.raises(DevDocsAPIError) as excinfo:
        await client.fetch_available_languages()

    assert excinfo.value.status_code == 503
    assert excinfo.value.message == "maintenance"


@pytest.mark.asyncio
async def test_catalog_malformed_json_raises():
    client = make_client(lambda request: httpx.Response(200, text="<html>not json</html>"))

    with pytest.raises(DevDocsAPIError, match="Malformed JSON"):
        await client.fetch_available_languages()


@pytest.mark.asyncio
async def test_catalog_wrong_shape_raises():
    client = make_client(json_handler({"/docs.json": "nope"}))

    with pytest.raises(DevDocsAPIError):
        await client.fetch_available_languages()


# -----------------------------------------------------------------------
# fetch_index
# -----------------------------------------------------------------------


@pytest.mark.asyncio
async def test_index_entries_become_hits():
    requested = []

    def handler(request):
        requested.append(request.url.path)
        return httpx.Response(200, content=json.dumps(INDEX))

    client = make_client(handler, display_url="http://localhost:9292")

    hits = await client.fetch_index(Slug.create("javascript"))

    assert requested == ["/docs/javascript/index.json"]
    assert len(hits) == 3
    first = hits.hits[0]
    assert first.title == "Array.prototype.map()"
    assert first.path == "global_objects/array/map"
    assert first.type == "Array"
    assert first.slug == "javascript"
    assert first.url == "http://localhost:9292/javascript/global_objects/array/map"


@pytest.mark.asyncio
async def test_index_entry_without_name_is_untitled():
    client = make_client(json_handler({"/docs/javascript/index.json": INDEX}))

    hits = await client.fetch_index(Slug.create("javascript"))

    assert hits.hits[2].title == "Untitled"


@pytest.mark.asyncio
async def test_display_url_defaults_to_base_url():
    client = make_client(json_handler({"/docs/javascript/index.json": INDEX}))

    hits = await client.fetch_index(Slug.create("javascript"))

    assert hits.hits[0].url.startswith("https://devdocs.test/javascript/")


@pytest.mark.asyncio
async def test_unknown_slug_raises_not_found_status():
    client = make_client(json_handler({}))

    with pytest.raises(DevDocsAPIError) as excinfo:
        await client.fetch_index(Slug.create("nonexistent~1"))

    assert excinfo.value.status_code == 404
    assert "Not Found" in excinfo.value.message


@pytest.mark.asyncio
async def test_index_without_entries_raises():
    client = make_client(json_handler({"/docs/javascript/index.json": {"types": []}}))

    with pytest.raises(DevDocsAPIError, match="no entries"):
        await client.fetch_index(Slug.create("javascript"))


@pytest.mark.asyncio
async def test_non_object_index_entries_are_skipped():
    payload = {"entries": ["stray", None, {"name": "fetch()", "path": "global_objects/fetch"}, 42]}
    client = make_client(json_handler({"/docs/javascript/index.json": payload}))

    hits = await client.fetch_index(Slug.create("javascript"))

    assert [hit.title for hit in hits] == ["fetch()"]
