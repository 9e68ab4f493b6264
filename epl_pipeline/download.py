from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import urlparse

import pandas as pd
import requests

from .io import load_matches_from_bytes, load_matches_from_zip

log = logging.getLogger(__name__)


def _cache_name(url: str) -> str:
    name = Path(urlparse(url).path).name
    return name or "dataset.csv"


def download_bytes(url: str, *, timeout: int = 90) -> bytes:
    """
    Download the dataset file.

    Raises a ValueError with a useful message on HTTP errors or when we get an
    HTML page (login wall, 404 page) instead of the file.
    """
    try:
        r = requests.get(url, timeout=timeout)
        r.raise_for_status()
    except requests.RequestException as e:
        raise ValueError(f"Failed to download {url}: {e}") from e

    content = r.content
    head = content[:200].decode("utf-8", errors="replace").lower()
    if "<html" in head or "<!doctype html" in head:
        raise ValueError(f"Got HTML instead of file bytes from {url}")
    return content


def load_matches_from_url(
    url: str,
    *,
    cache_dir: Path,
    force_download: bool = False,
    timeout: int = 90,
) -> pd.DataFrame:
    """
    Download (or load from cache) the dataset at `url` and return the typed
    match table. Cached to cache_dir so reruns don't hit the network.
    """
    cache_dir = Path(cache_dir)
    cache_dir.mkdir(parents=True, exist_ok=True)
    path = cache_dir / _cache_name(url)

    if path.exists() and not force_download:
        log.info("using cached dataset %s", path)
        raw = path.read_bytes()
    else:
        log.info("downloading %s", url)
        raw = download_bytes(url, timeout=timeout)
        path.write_bytes(raw)

    if path.suffix.lower() == ".zip":
        return load_matches_from_zip(raw)
    return load_matches_from_bytes(raw, name=path.name)
