"""Analysis API tests with TestClient and a mocked storage service."""

import uuid
from typing import Dict

import httpx
import pytest
from fastapi.testclient import TestClient

from textscanner.analysis.client import StorageClient
from textscanner.analysis.main import create_app
from textscanner.config import Settings
from textscanner.core.wordcloud import DEFAULT_BASE_URL, NO_WORDS_URL


class FakeStorage:
    """Serves GET /files/{id} and /health from a dict."""

    def __init__(self) -> None:
        self.files: Dict[str, bytes] = {}
        self.healthy = True
        self.fail_with = None
        self.requests = 0

    def add(self, body: bytes) -> str:
        file_id = str(uuid.uuid4())
        self.files[file_id] = body
        return file_id

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests += 1
        if request.url.path == "/health":
            return httpx.Response(200 if self.healthy else 503, json={"status": "ok"})
        if self.fail_with is not None:
            return httpx.Response(self.fail_with)
        file_id = request.url.path.rsplit("/", 1)[-1]
        if file_id not in self.files:
            return httpx.Response(404, json={"detail": "File not found"})
        return httpx.Response(200, content=self.files[file_id])


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def client(settings: Settings, storage: FakeStorage):
    storage_client = StorageClient("http://storage.test", transport=httpx.MockTransport(storage))
    with TestClient(create_app(settings, client=storage_client)) as c:
        yield c


def test_health_reports_storage(client: TestClient, storage: FakeStorage) -> None:
    assert client.get("/health").json() == {
        "status": "ok",
        "service": "file-analysis-service",
        "storage": "ok",
    }
    storage.healthy = False
    assert client.get("/health").json()["storage"] == "error"


def test_analyze_new_file(client: TestClient, storage: FakeStorage) -> None:
    file_id = storage.add(b"First paragraph.\n\nSecond paragraph.\n\nThird paragraph.")
    r = client.post("/analyze", json={"file_id": file_id})
    assert r.status_code == 200
    assert r.json() == {"file_id": file_id, "paragraphs": 3, "words": 6, "chars": 53}


def test_analyze_duplicate_content(client: TestClient, storage: FakeStorage) -> None:
    """A second file with the same bytes reports the first one's id."""
    first = storage.add(b"same words here")
    second = storage.add(b"same words here")
    client.post("/analyze", json={"file_id": first})
    r = client.post("/analyze", json={"file_id": second})
    assert r.status_code == 200
    assert r.json() == {"duplicate_of": first}


def test_analyze_same_file_twice(client: TestClient, storage: FakeStorage) -> None:
    file_id = storage.add(b"just once")
    first = client.post("/analyze", json={"file_id": file_id}).json()
    again = client.post("/analyze", json={"file_id": file_id}).json()
    assert again == first
    assert "duplicate_of" not in again


def test_analyze_after_cache_delete(client: TestClient, storage: FakeStorage) -> None:
    """Forgetting the canonical file lets the same content be analyzed as new."""
    first = storage.add(b"recycled text")
    second = storage.add(b"recycled text")
    client.post("/analyze", json={"file_id": first})

    r = client.delete(f"/cache/{first}")
    assert r.json() == {"message": "File removed from cache", "file_id": first}
    result = client.post("/analyze", json={"file_id": second}).json()
    assert result["file_id"] == second
    assert result["words"] == 2


def test_cache_delete_unknown(client: TestClient) -> None:
    file_id = str(uuid.uuid4())
    r = client.delete(f"/cache/{file_id}")
    assert r.status_code == 200
    assert r.json()["message"] == "File was not cached"


@pytest.mark.parametrize("payload", [{}, {"file_id": None}, {"file_id": ""}])
def test_analyze_requires_file_id(client: TestClient, payload: dict) -> None:
    r = client.post("/analyze", json=payload)
    assert r.status_code == 400
    assert r.json()["detail"] == "file_id is required"


def test_analyze_unknown_file(client: TestClient) -> None:
    r = client.post("/analyze", json={"file_id": str(uuid.uuid4())})
    assert r.status_code == 404


def test_analyze_storage_down(client: TestClient, storage: FakeStorage) -> None:
    file_id = storage.add(b"text")
    storage.fail_with = 503
    r = client.post("/analyze", json={"file_id": file_id})
    assert r.status_code == 502


def test_stats_are_cached(client: TestClient, storage: FakeStorage) -> None:
    file_id = storage.add(b"Hi there")
    first = client.get(f"/stats/{file_id}")
    assert first.status_code == 200
    assert first.json() == {
        "file_id": file_id,
        "paragraphs": 1,
        "words": 2,
        "chars": 8,
        "chars_no_spaces": 7,
    }
    calls = storage.requests
    assert client.get(f"/stats/{file_id}").json() == first.json()
    assert storage.requests == calls


def test_stats_malformed_id(client: TestClient) -> None:
    assert client.get("/stats/xyz").status_code == 400


def test_compare_identical_files(client: TestClient, storage: FakeStorage) -> None:
    a = storage.add(b"The cat sat on the mat.")
    b = storage.add(b"the mat, the cat: sat on!")
    r = client.post("/compare", json={"file_id": a, "other_file_id": b})
    assert r.status_code == 200
    assert r.json() == {"identical": True, "jaccard_similarity": 1.0}


def test_compare_partial_overlap(client: TestClient, storage: FakeStorage) -> None:
    a = storage.add(b"apple banana cherry date")
    b = storage.add(b"apple banana grape lemon")
    r = client.post("/compare", json={"file_id": a, "other_file_id": b})
    assert r.json() == {"identical": False, "jaccard_similarity": 0.333}


def test_compare_requires_both_ids(client: TestClient, storage: FakeStorage) -> None:
    a = storage.add(b"text")
    r = client.post("/compare", json={"file_id": a})
    assert r.status_code == 400
    assert r.json()["detail"] == "Both file_id and other_file_id are required"


def test_compare_missing_file(client: TestClient, storage: FakeStorage) -> None:
    a = storage.add(b"text")
    r = client.post("/compare", json={"file_id": a, "other_file_id": str(uuid.uuid4())})
    assert r.status_code == 404


def test_compare_text(client: TestClient) -> None:
    r = client.post("/compare/text", json={"text": "Hello, world!", "other_text": "hello world"})
    assert r.json() == {"identical": True, "jaccard_similarity": 1.0}
    r = client.post("/compare/text", json={"text": "x", "other_text": ""})
    assert r.json() == {"identical": False, "jaccard_similarity": 0.0}


def test_compare_text_null_is_400(client: TestClient) -> None:
    r = client.post("/compare/text", json={"text": "words", "other_text": None})
    assert r.status_code == 400


def test_text_statistics(client: TestClient) -> None:
    r = client.post("/statistics/text", json={"text": "One two.\n\nThree."})
    assert r.status_code == 200
    assert r.json() == {"paragraphs": 2, "words": 3, "chars": 16, "chars_no_spaces": 13}
    assert client.post("/statistics/text", json={}).status_code == 400


def test_word_cloud(client: TestClient, storage: FakeStorage) -> None:
    file_id = storage.add(b"python python code code code fun")
    r = client.get(f"/cloud/{file_id}")
    assert r.status_code == 200
    data = r.json()
    assert data["file_id"] == file_id
    assert data["word_cloud_url"].startswith(f"{DEFAULT_BASE_URL}?text=code%3A3%20python%3A2&")


def test_word_cloud_without_long_words(client: TestClient, storage: FakeStorage) -> None:
    file_id = storage.add(b"a b c")
    assert client.get(f"/cloud/{file_id}").json()["word_cloud_url"] == NO_WORDS_URL


def test_word_cloud_empty_file_is_400(client: TestClient, storage: FakeStorage) -> None:
    file_id = storage.add(b"")
    assert client.get(f"/cloud/{file_id}").status_code == 400
