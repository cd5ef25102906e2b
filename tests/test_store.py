"""Tests for the Drupal JSON:API content store."""

from __future__ import annotations

import asyncio

import pytest

from decoupled_articles.core.errors import NotFoundError, UpstreamFetchError
from decoupled_articles.store import DrupalStore, QueryParams
from fake_drupal import API_BASE, FakeDrupal


def _store(drupal: FakeDrupal, locale: str = "", **kwargs) -> DrupalStore:
    return DrupalStore(API_BASE, default_locale=locale, transport=drupal.transport, **kwargs)


def test_api_root_includes_locale_only_when_scoped():
    assert DrupalStore(API_BASE + "/").api_root == f"{API_BASE}/jsonapi/"
    assert DrupalStore(API_BASE, default_locale="es").api_root == f"{API_BASE}/es/jsonapi/"


def test_query_params_build_includes_fields_and_custom():
    params = QueryParams()
    params.add_include(["field_media_image.field_media_image"])
    params.add_include(["field_media_image.field_media_image"])
    params.add_custom_param({"resourceVersion": "id:7"})

    query = params.build("node--article", ["id", "title", "path.alias"])

    assert query == {
        "include": "field_media_image.field_media_image",
        "fields[node--article]": "title,path",
        "resourceVersion": "id:7",
    }


def test_get_object_lists_collection_with_projection(drupal):
    drupal.add_article("en", "a1", "First", "/articles/first")
    drupal.add_article("en", "a2", "Second", "/articles/second")

    items = asyncio.run(_store(drupal, "en").get_object("node--article", fields=["id", "path.alias"]))

    assert items == [
        {"id": "a1", "path": {"alias": "/articles/first"}},
        {"id": "a2", "path": {"alias": "/articles/second"}},
    ]
    request = drupal.requests[0]
    assert request.url.path == "/en/jsonapi/node/article"
    assert request.url.params["fields[node--article]"] == "path"


def test_get_object_follows_next_links_when_all_pages():
    drupal = FakeDrupal(page_size=2)
    for idx in range(5):
        drupal.add_article("", f"a{idx}", f"Title {idx}", f"/articles/{idx}")
    store = _store(drupal)

    first_page = asyncio.run(store.get_object("node--article", fields=["id"]))
    everything = asyncio.run(store.get_object("node--article", fields=["id"], all_pages=True))

    assert [item["id"] for item in first_page] == ["a0", "a1"]
    assert [item["id"] for item in everything] == ["a0", "a1", "a2", "a3", "a4"]


def test_get_object_by_path_translates_then_fetches(drupal):
    drupal.add_article("en", "a1", "Hello", "/articles/hello", image_url="/files/hello.jpg")
    store = _store(drupal, "en")
    store.add_include(["field_media_image.field_media_image"])

    obj = asyncio.run(
        store.get_object_by_path(
            "node--article",
            "/en/articles/hello",
            fields=["id", "title", "field_media_image.field_media_image.uri.url"],
        )
    )

    assert obj == {
        "id": "a1",
        "title": "Hello",
        "field_media_image": {"id": "media-a1", "field_media_image": {"id": "file-a1", "uri": {"url": "/files/hello.jpg"}}},
    }
    translate = drupal.requests_to("translate-path")[0]
    assert translate.url.params["path"] == "/en/articles/hello"
    fetch = drupal.requests_to("/jsonapi/node/article/a1")[0]
    assert fetch.url.params["include"] == "field_media_image.field_media_image"


def test_get_object_by_path_unknown_path_is_not_found(drupal):
    with pytest.raises(NotFoundError) as excinfo:
        asyncio.run(_store(drupal, "en").get_object_by_path("node--article", "/en/articles/missing"))
    assert excinfo.value.target == "/en/articles/missing"


def test_get_object_by_path_entity_missing_in_locale_is_not_found(drupal):
    drupal.add_article("es", "a1", "Hola", "/articles/hola")

    with pytest.raises(NotFoundError) as excinfo:
        asyncio.run(_store(drupal, "en").get_object_by_path("node--article", "/es/articles/hola"))
    assert excinfo.value.target == "/es/articles/hola"


def test_missing_resource_by_id_is_upstream_404(drupal):
    with pytest.raises(UpstreamFetchError) as excinfo:
        asyncio.run(_store(drupal, "en").get_object("node--article", id="nope"))
    assert excinfo.value.status_code == 404
    assert excinfo.value.url.endswith("/en/jsonapi/node/article/nope")


def test_unknown_collection_is_upstream_404(drupal):
    with pytest.raises(UpstreamFetchError) as excinfo:
        asyncio.run(_store(drupal, "en").get_object("node--page"))
    assert excinfo.value.status_code == 404


def test_server_error_raises_upstream_fetch_error(drupal):
    drupal.failing.add("es")

    with pytest.raises(UpstreamFetchError) as excinfo:
        asyncio.run(_store(drupal, "es").get_object("node--article"))
    assert excinfo.value.status_code == 500


def test_credentials_add_bearer_header_once(drupal):
    drupal.add_article("", "a1", "Hello", "/articles/hello")
    store = _store(drupal, client_id="id", client_secret="secret")

    asyncio.run(store.get_object("node--article"))
    asyncio.run(store.get_object("node--article", id="a1"))

    assert len(drupal.requests_to("/oauth/token")) == 1
    for request in drupal.requests_to("/jsonapi/"):
        assert request.headers["Authorization"] == "Bearer secret-token"


def test_get_auth_header_without_credentials_raises(drupal):
    with pytest.raises(ValueError, match="Missing client credentials"):
        asyncio.run(_store(drupal).get_auth_header())
