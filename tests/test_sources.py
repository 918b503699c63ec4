import json

import pytest

from pubdatahub.api.sources import (
    DataPage,
    DataSourceItem,
    handle_get_data,
    handle_list_sources,
    paginate,
)


def decode(response):
    return json.loads(response.body)


def test_list_sources():
    response = handle_list_sources()
    assert response.status == 200
    assert "application/json" in response.headers["Content-Type"]
    assert decode(response) == [
        {
            "name": "hackernews",
            "description": "Hacker News stories, comments, and users from the official API",
        }
    ]


def test_get_data_default_page():
    response = handle_get_data("/api/sources/hackernews/data")
    assert response.status == 200
    assert response.headers["Content-Type"] == "application/json"
    payload = decode(response)
    assert set(payload) == {"data", "total_items", "total_pages", "current_page", "items_per_page"}
    assert isinstance(payload["data"], list)
    assert len(payload["data"]) == 20
    assert payload["total_items"] == 20
    assert payload["total_pages"] == 1
    assert payload["items_per_page"] == 20


def test_get_data_with_pagination():
    payload = decode(handle_get_data("/api/sources/hackernews/data", "page=1&limit=10"))
    assert payload["current_page"] == 1
    assert payload["items_per_page"] == 10
    assert [item["id"] for item in payload["data"]] == [str(n) for n in range(1, 11)]
    assert payload["total_pages"] == 2


def test_page_past_end_is_clamped():
    payload = decode(handle_get_data("/api/sources/hackernews/data", "page=5&limit=10"))
    assert payload["current_page"] == 2
    assert payload["data"][0]["id"] == "11"


@pytest.mark.parametrize("query", ["page=0", "page=abc&limit=x", "limit=-3", "page=&limit="])
def test_invalid_parameters_use_defaults(query):
    payload = decode(handle_get_data("/api/sources/hackernews/data", query))
    assert payload["current_page"] == 1
    assert payload["items_per_page"] == 20


def test_sample_item_values():
    payload = decode(handle_get_data("/api/sources/hackernews/data", "page=4&limit=1"))
    assert payload["data"] == [
        {
            "id": "4",
            "title": "Example Story Title 4",
            "author": "user101",
            "points": 67,
            "timestamp": "2025-08-12T08:20:00Z",
            "type": "story",
        }
    ]


def test_unsupported_source():
    response = handle_get_data("/api/sources/unsupported/data")
    assert response.status == 404
    assert response.body == b"Unsupported data source\n"


def test_item_to_dict_omits_empty_fields():
    assert DataSourceItem(id="7", points=0, title="T").to_dict() == {"id": "7", "title": "T"}


def test_paginate_empty():
    page = paginate([], 1, 10)
    assert page.data == []
    assert page.total_pages == 0
    assert page.total_items == 0


@pytest.mark.parametrize("page, limit", [(0, 10), (1, 0)])
def test_paginate_rejects_bad_arguments(page, limit):
    with pytest.raises(ValueError):
        paginate([DataSourceItem(id="1")], page, limit)


def test_page_to_dict():
    page = DataPage(data=[DataSourceItem(id="1", url="u")], total_items=1, total_pages=1,
                    current_page=1, items_per_page=5)
    assert page.to_dict() == {
        "data": [{"id": "1", "url": "u"}],
        "total_items": 1,
        "total_pages": 1,
        "current_page": 1,
        "items_per_page": 5,
    }