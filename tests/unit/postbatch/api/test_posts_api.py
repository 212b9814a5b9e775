from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from postbatch.main import app
from postbatch.model.post import Post, PostPage
from postbatch.model.post_errors import StorageError, UpstreamFetchError
from postbatch.service.post_service import get_post_service

client = TestClient(app)


@pytest.fixture
def post_service():
    service = SimpleNamespace(
        batch_insert=AsyncMock(return_value=0),
        fetch_records=AsyncMock(),
    )
    app.dependency_overrides[get_post_service] = lambda: service
    yield service
    app.dependency_overrides.clear()


def _page(n_items: int, page: int, size: int, total: int) -> PostPage:
    content = [
        Post(id=page * size + i + 1, user_id=1, title="T", body="B") for i in range(n_items)
    ]
    return PostPage(
        content=content,
        page=page,
        size=size,
        total_elements=total,
        total_pages=-(-total // size),
    )


def test_batch_insert_success(post_service):
    post_service.batch_insert.return_value = 10

    response = client.post("/api/batch_insert", json={"postNumber": 10})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Successfully inserted 10 posts",
        "postsInserted": 10,
    }
    post_service.batch_insert.assert_awaited_once_with(10)


def test_batch_insert_accepts_upper_limit(post_service):
    response = client.post("/api/batch_insert", json={"postNumber": 100})

    assert response.status_code == 200
    assert response.json()["postsInserted"] == 100


@pytest.mark.parametrize(
    "payload, message",
    [
        ({}, "Missing required field: postNumber"),
        ({"other": 3}, "Missing required field: postNumber"),
        ({"postNumber": None}, "postNumber must be a positive integer"),
        ({"postNumber": 0}, "postNumber must be a positive integer"),
        ({"postNumber": -5}, "postNumber must be a positive integer"),
        ({"postNumber": "ten"}, "postNumber must be a positive integer"),
        ({"postNumber": True}, "postNumber must be a positive integer"),
        ({"postNumber": 101}, "postNumber cannot exceed 100 (API limit)"),
    ],
)
def test_batch_insert_rejects_invalid_post_number(post_service, payload, message):
    response = client.post("/api/batch_insert", json=payload)

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": message}
    post_service.batch_insert.assert_not_awaited()


def test_batch_insert_without_body(post_service):
    response = client.post("/api/batch_insert")

    assert response.status_code == 400
    assert response.json()["message"] == "Missing required field: postNumber"
    post_service.batch_insert.assert_not_awaited()


def test_batch_insert_upstream_failure(post_service):
    post_service.batch_insert.side_effect = UpstreamFetchError(
        "Post source returned status 503", status_code=503
    )

    response = client.post("/api/batch_insert", json={"postNumber": 5})

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "message": "Error inserting posts: Post source returned status 503",
        "error": "UpstreamFetchError",
    }


def test_batch_insert_storage_failure(post_service):
    post_service.batch_insert.side_effect = StorageError("Error saving 5 posts: locked")

    response = client.post("/api/batch_insert", json={"postNumber": 5})

    assert response.status_code == 500
    assert response.json()["error"] == "StorageError"


def test_fetch_record_defaults(post_service):
    post_service.fetch_records.return_value = _page(0, 0, 10, 0)

    response = client.get("/api/fetch_record")

    assert response.status_code == 200
    post_service.fetch_records.assert_awaited_once_with(0, 10)
    body = response.json()
    assert body["content"] == []
    assert body["totalPages"] == 0
    assert body["isFirst"] is True
    assert body["isLast"] is True


def test_fetch_record_first_page(post_service):
    post_service.fetch_records.return_value = _page(3, 0, 3, 7)

    response = client.get("/api/fetch_record", params={"page": 0, "size": 3})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert len(body["content"]) == 3
    assert body["content"][0] == {"id": 1, "userId": 1, "title": "T", "body": "B"}
    assert body["currentPage"] == 0
    assert body["pageSize"] == 3
    assert body["totalElements"] == 7
    assert body["totalPages"] == 3
    assert body["hasPrevious"] is False
    assert body["hasNext"] is True
    assert body["isFirst"] is True
    assert body["isLast"] is False


def test_fetch_record_last_page(post_service):
    post_service.fetch_records.return_value = _page(1, 2, 3, 7)

    response = client.get("/api/fetch_record", params={"page": 2, "size": 3})

    body = response.json()
    assert len(body["content"]) == 1
    assert body["hasNext"] is False
    assert body["hasPrevious"] is True
    assert body["isLast"] is True


@pytest.mark.parametrize(
    "params, message",
    [
        ({"page": -1}, "Page number cannot be negative"),
        ({"size": 0}, "Size must be between 1 and 100"),
        ({"size": 101}, "Size must be between 1 and 100"),
        ({"page": -1, "size": 0}, "Page number cannot be negative"),
    ],
)
def test_fetch_record_rejects_invalid_paging(post_service, params, message):
    response = client.get("/api/fetch_record", params=params)

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": message}
    post_service.fetch_records.assert_not_awaited()


def test_fetch_record_rejects_non_integer_page(post_service):
    response = client.get("/api/fetch_record", params={"page": "first"})

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert "page" in response.json()["message"]


def test_fetch_record_storage_failure(post_service):
    post_service.fetch_records.side_effect = StorageError("Error counting posts: gone")

    response = client.get("/api/fetch_record")

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "message": "Error fetching records: Error counting posts: gone",
        "error": "StorageError",
    }


def test_health_is_always_up():
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "UP", "message": "Posts API is running"}
