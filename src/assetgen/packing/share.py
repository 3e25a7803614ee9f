"""Fetchers for the wakenet model share.

The share is laid out as ``<root>/<model_name>/<file_name>``. The root is
either an http(s) URL (fetched with ``requests``) or a local directory.
Each fetch yields a :class:`FetchResult`; nothing here raises for a
missing or unreachable file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

import requests

from .constants import DEFAULT_FETCH_TIMEOUT, DEFAULT_SHARE_URL

__all__ = [
    "FetchResult",
    "ShareFetcher",
    "HttpShareFetcher",
    "DirectoryShareFetcher",
    "fetcher_for",
    "default_share_root",
    "default_fetch_timeout",
]


@dataclass(frozen=True, slots=True)
class FetchResult:
    model_name: str
    file_name: str
    data: Optional[bytes] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.data is not None


class ShareFetcher(Protocol):
    def fetch(self, model_name: str, file_name: str) -> FetchResult: ...


class HttpShareFetcher:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def url_for(self, model_name: str, file_name: str) -> str:
        return f"{self.base_url}/{model_name}/{file_name}"

    def fetch(self, model_name: str, file_name: str) -> FetchResult:
        url = self.url_for(model_name, file_name)
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            return FetchResult(model_name, file_name, error=str(e))
        if not response.ok:
            return FetchResult(
                model_name, file_name, error=f"status {response.status_code}"
            )
        return FetchResult(model_name, file_name, data=response.content)


class DirectoryShareFetcher:
    def __init__(self, root: Path):
        self.root = Path(root)

    def fetch(self, model_name: str, file_name: str) -> FetchResult:
        path = self.root / model_name / file_name
        try:
            return FetchResult(model_name, file_name, data=path.read_bytes())
        except OSError as e:
            return FetchResult(
                model_name, file_name, error=e.strerror or str(e)
            )


def default_share_root() -> str:
    return os.getenv("ASSETGEN_SHARE_URL", DEFAULT_SHARE_URL)


def default_fetch_timeout() -> float:
    raw = os.getenv("ASSETGEN_FETCH_TIMEOUT")
    if not raw:
        return DEFAULT_FETCH_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        return DEFAULT_FETCH_TIMEOUT


def fetcher_for(
    root: str | Path | None = None, *, timeout: float | None = None
) -> ShareFetcher:
    """Pick a fetcher from the root's form (URL or path)."""
    root = default_share_root() if root is None else root
    text = str(root)
    if text.startswith(("http://", "https://")):
        return HttpShareFetcher(
            text,
            timeout=default_fetch_timeout() if timeout is None else timeout,
        )
    return DirectoryShareFetcher(Path(text))
