"""Tests for descriptor document loading."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
import requests

from fluentmock_gen import utils
from fluentmock_gen.utils import (
    DocumentLoaderError,
    load_document,
    load_document_from_file,
    load_document_from_stream,
    load_document_from_url,
)


class _FakeResponse:
    def __init__(self, payload=None, status_code: int = 200, error: Exception | None = None) -> None:
        self._payload = payload
        self.status_code = status_code
        self.headers = {"content-type": "application/json"}
        self._error = error

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(response=self)

    def json(self):
        if self._error is not None:
            raise self._error
        return self._payload


def test_load_from_file(tmp_path: Path) -> None:
    path = tmp_path / "types.json"
    path.write_text('{"types": []}', encoding="utf-8")

    source, data = load_document_from_file(path)

    assert source == str(path)
    assert data == {"types": []}


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_document_from_file(tmp_path / "missing.json")


def test_invalid_json_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{", encoding="utf-8")

    with pytest.raises(DocumentLoaderError, match="Invalid JSON"):
        load_document_from_file(path)


def test_load_from_url(monkeypatch) -> None:
    calls = []

    def fake_get(url, timeout):
        calls.append((url, timeout))
        return _FakeResponse({"targets": []})

    monkeypatch.setattr(utils.requests, "get", fake_get)

    source, data = load_document_from_url("https://example.com/types.json", timeout=5)

    assert source == "https://example.com/types.json"
    assert data == {"targets": []}
    assert calls == [("https://example.com/types.json", 5)]


@pytest.mark.parametrize(
    ("response", "message"),
    [
        (_FakeResponse(status_code=404), "HTTP error 404"),
        (_FakeResponse(error=requests.exceptions.JSONDecodeError("bad", "{", 0)), "Invalid JSON"),
    ],
)
def test_url_response_errors(monkeypatch, response, message) -> None:
    monkeypatch.setattr(utils.requests, "get", lambda url, timeout: response)

    with pytest.raises(DocumentLoaderError, match=message):
        load_document_from_url("https://example.com/types.json")


@pytest.mark.parametrize(
    ("error", "message"),
    [
        (requests.exceptions.Timeout(), "timeout"),
        (requests.exceptions.ConnectionError(), "Connection error"),
        (requests.exceptions.RequestException("boom"), "Request error"),
    ],
)
def test_url_request_errors(monkeypatch, error, message) -> None:
    def fake_get(url, timeout):
        raise error

    monkeypatch.setattr(utils.requests, "get", fake_get)

    with pytest.raises(DocumentLoaderError, match=message):
        load_document_from_url("https://example.com/types.json")


def test_invalid_url() -> None:
    with pytest.raises(DocumentLoaderError, match="Invalid URL"):
        load_document_from_url("types.json")


def test_load_from_stream() -> None:
    assert load_document_from_stream(io.StringIO('{"a": 1}')) == ("<stdin>", {"a": 1})

    with pytest.raises(DocumentLoaderError):
        load_document_from_stream(io.StringIO("nope"))


def test_load_document_requires_exactly_one_source(tmp_path: Path) -> None:
    with pytest.raises(DocumentLoaderError):
        load_document()
    with pytest.raises(DocumentLoaderError):
        load_document(file_path=tmp_path / "a.json", url="https://example.com/a.json")
