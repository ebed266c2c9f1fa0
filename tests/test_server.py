"""Tests for the FastAPI card server."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from cardnav.exceptions import DocumentNotFoundError, FetchError
from cardnav.navigation import NavigationController
from server.main import create_app


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app(NavigationController(default_label="The beginning"), document_path=""))


@pytest.fixture
def loaded_client(client: TestClient, travel_text: str) -> TestClient:
    response = client.post("/api/load", json={"text": travel_text})
    assert response.status_code == 200
    return client


class TestCardEndpoints:
    """Tests for the JSON card API."""

    def test_initial_card_is_placeholder(self, client: TestClient) -> None:
        response = client.get("/api/card")
        assert response.status_code == 200
        body = response.json()
        assert body["label"] is None
        assert body["card"] == {"kind": "placeholder", "message": "No section to show"}

    def test_load_text_shows_default_section(self, client: TestClient, travel_text: str) -> None:
        response = client.post("/api/load", json={"text": travel_text})
        assert response.status_code == 200
        body = response.json()
        assert body["label"] == "The beginning"
        assert body["card"]["kind"] == "card"
        assert body["card"]["heading"]["text"] == "The beginning"

    def test_navigate(self, loaded_client: TestClient) -> None:
        response = loaded_client.post("/api/navigate", json={"label": "france-entry"})
        assert response.status_code == 200
        assert response.json()["label"] == "france-entry"
        assert loaded_client.get("/api/card").json()["label"] == "france-entry"

    def test_navigate_to_missing_label(self, loaded_client: TestClient) -> None:
        """A missing label is not an error; the placeholder is shown."""
        response = loaded_client.post("/api/navigate", json={"label": "nonexistent-label"})
        assert response.status_code == 200
        assert response.json()["card"]["kind"] == "placeholder"

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"text": "# A\n", "url": "https://example.com/doc.txt"},
            {"url": "ftp://example.com/doc.txt"},
        ],
    )
    def test_load_rejects_invalid_request(self, client: TestClient, payload: dict) -> None:
        assert client.post("/api/load", json=payload).status_code == 422

    def test_load_from_url(self, client: TestClient) -> None:
        with patch(
            "server.routers.cards.fetch_document",
            AsyncMock(return_value="# The beginning\nhello\n"),
        ) as mock_fetch:
            response = client.post("/api/load", json={"url": "https://example.com/doc.txt"})

        assert response.status_code == 200
        assert response.json()["label"] == "The beginning"
        mock_fetch.assert_awaited_once_with("https://example.com/doc.txt")

    @pytest.mark.parametrize(
        ("error", "status_code"),
        [
            (DocumentNotFoundError("Document not found at https://example.com/x"), 404),
            (FetchError("Failed to fetch https://example.com/x"), 502),
        ],
    )
    def test_load_errors_map_to_status(
        self, loaded_client: TestClient, error: Exception, status_code: int
    ) -> None:
        with patch("server.routers.cards.fetch_document", AsyncMock(side_effect=error)):
            response = loaded_client.post("/api/load", json={"url": "https://example.com/x"})

        assert response.status_code == status_code
        # The previous document stays loaded.
        assert loaded_client.get("/api/card").json()["label"] == "The beginning"

    def test_load_text_too_large(self, client: TestClient, recwarn: pytest.WarningsRecorder) -> None:
        with patch("server.routers.cards.CARDNAV_MAX_DOCUMENT_BYTES", 4):
            response = client.post("/api/load", json={"text": "# The beginning\n"})
        assert response.status_code == 413
        assert not [w for w in recwarn if "413" in str(w.message)]

    def test_sections(self, loaded_client: TestClient) -> None:
        body = loaded_client.get("/api/sections").json()
        assert body["labels"] == ["The beginning", "france-entry", "Phrasebook", "spain-entry"]
        assert body["broken_links"] == [["spain-entry", "portugal-entry"]]


class TestHtmlEndpoint:
    """Tests for the HTML view."""

    def test_placeholder_page(self, client: TestClient) -> None:
        response = client.get("/")
        assert response.status_code == 200
        assert "No section to show" in response.text

    def test_section_query_navigates(self, loaded_client: TestClient) -> None:
        response = loaded_client.get("/", params={"section": "france-entry"})
        assert response.status_code == 200
        assert 'data-target="The beginning"' in response.text
        assert loaded_client.get("/api/card").json()["label"] == "france-entry"


class TestStartup:
    """Tests for loading a document when the app starts."""

    def test_startup_document(self, tmp_path: Path, travel_text: str) -> None:
        path = tmp_path / "travel.txt"
        path.write_text(travel_text, encoding="utf-8")
        app = create_app(NavigationController(default_label="spain-entry"), document_path=str(path))

        with TestClient(app) as client:
            assert client.get("/api/card").json()["label"] == "spain-entry"
