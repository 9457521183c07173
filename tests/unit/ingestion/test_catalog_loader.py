"""Tests for skill catalog loading."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import requests

from mol_tracker.core.exceptions import CatalogError
from mol_tracker.ingestion import catalog_loader
from mol_tracker.ingestion.catalog_loader import (
    fetch_catalog_text,
    load_bundled_catalog,
    load_catalog,
    parse_catalog,
)


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, text: str, status_code: int = 200) -> None:
        self.text = text
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class TestParseCatalog:
    """Tests for parse_catalog."""

    def test_valid(self, catalog_data: dict[str, Any]) -> None:
        catalog = parse_catalog(json.dumps(catalog_data))
        assert set(catalog.domains) == {"shaping", "elementalism", "necromancy"}

    def test_malformed_json(self) -> None:
        with pytest.raises(CatalogError):
            parse_catalog("{nope")

    def test_wrong_shape(self) -> None:
        with pytest.raises(CatalogError) as exc_info:
            parse_catalog('{"domains": []}')

        assert exc_info.value.details["error_count"] >= 1


class TestFetchCatalogText:
    """Tests for the HTTP fetch and its retries."""

    def test_retries_connection_errors(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[str] = []

        def fake_get(url: str, **kwargs: Any) -> FakeResponse:
            calls.append(url)
            if len(calls) < 3:
                raise requests.ConnectionError("down")
            return FakeResponse('{"domains": {}}')

        monkeypatch.setattr(catalog_loader.requests, "get", fake_get)

        text = fetch_catalog_text(
            "https://example.com/c.json", max_attempts=3, retry_wait_seconds=0
        )

        assert text == '{"domains": {}}'
        assert len(calls) == 3

    def test_gives_up(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def fake_get(url: str, **kwargs: Any) -> FakeResponse:
            raise requests.Timeout("slow")

        monkeypatch.setattr(catalog_loader.requests, "get", fake_get)

        with pytest.raises(CatalogError):
            fetch_catalog_text("https://example.com/c.json", max_attempts=2, retry_wait_seconds=0)

    def test_http_error_not_retried(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[str] = []

        def fake_get(url: str, **kwargs: Any) -> FakeResponse:
            calls.append(url)
            return FakeResponse("", status_code=404)

        monkeypatch.setattr(catalog_loader.requests, "get", fake_get)

        with pytest.raises(CatalogError):
            fetch_catalog_text("https://example.com/c.json", max_attempts=3, retry_wait_seconds=0)

        assert len(calls) == 1


class TestLoadCatalog:
    """Tests for load_catalog and its fallback."""

    def test_from_file(self, tmp_path: Path, catalog_data: dict[str, Any]) -> None:
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(catalog_data), encoding="utf-8")

        catalog = load_catalog(path)

        assert catalog.find_domain_key("Shaping") == "shaping"

    def test_missing_file_falls_back_to_empty(self, tmp_path: Path) -> None:
        assert load_catalog(tmp_path / "missing.json").is_empty

    def test_unreachable_url_falls_back_to_empty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def fake_get(url: str, **kwargs: Any) -> FakeResponse:
            raise requests.ConnectionError("down")

        monkeypatch.setattr(catalog_loader.requests, "get", fake_get)

        catalog = load_catalog("https://example.com/c.json", max_attempts=1, retry_wait_seconds=0)

        assert catalog.is_empty

    def test_url_success(
        self,
        monkeypatch: pytest.MonkeyPatch,
        catalog_data: dict[str, Any],
    ) -> None:
        monkeypatch.setattr(
            catalog_loader.requests,
            "get",
            lambda url, **kwargs: FakeResponse(json.dumps(catalog_data)),
        )

        catalog = load_catalog("https://example.com/c.json", retry_wait_seconds=0)

        assert len(catalog.general_skills) == 2

    def test_configured_source(
        self,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
        catalog_data: dict[str, Any],
    ) -> None:
        path = tmp_path / "env_catalog.json"
        path.write_text(json.dumps(catalog_data), encoding="utf-8")
        monkeypatch.setenv("MOL_TRACKER_CATALOG_SOURCE", str(path))

        assert not load_catalog().is_empty

    def test_bundled(self) -> None:
        catalog = load_bundled_catalog()

        assert catalog.find_domain_key("Shaping") == "shaping"
        assert catalog.combat_techniques["secondwind"].applicable_weapons == ["all"]
