import pytest
import requests

from epl_pipeline import download


class _Resp:
    def __init__(self, content: bytes, status: int = 200):
        self.content = content
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


@pytest.fixture
def csv_bytes(raw_matches):
    return raw_matches.to_csv(index=False).encode("utf-8")


def test_download_and_cache(monkeypatch, tmp_path, csv_bytes):
    calls = []

    def fake_get(url, timeout):
        calls.append(url)
        return _Resp(csv_bytes)

    monkeypatch.setattr(download.requests, "get", fake_get)
    url = "https://example.org/data/epl_results.csv"

    df = download.load_matches_from_url(url, cache_dir=tmp_path)
    assert len(df) == 5
    assert (tmp_path / "epl_results.csv").read_bytes() == csv_bytes

    download.load_matches_from_url(url, cache_dir=tmp_path)
    assert len(calls) == 1

    download.load_matches_from_url(url, cache_dir=tmp_path, force_download=True)
    assert len(calls) == 2


def test_download_rejects_html(monkeypatch):
    monkeypatch.setattr(download.requests, "get", lambda url, timeout: _Resp(b"<!doctype html><p>login</p>"))
    with pytest.raises(ValueError, match="HTML"):
        download.download_bytes("https://example.org/e0.csv")


def test_download_wraps_http_errors(monkeypatch):
    monkeypatch.setattr(download.requests, "get", lambda url, timeout: _Resp(b"", status=404))
    with pytest.raises(ValueError, match="Failed to download https://example.org/e0.csv"):
        download.download_bytes("https://example.org/e0.csv")


def test_cache_name_falls_back_for_bare_urls():
    assert download._cache_name("https://example.org/") == "dataset.csv"
