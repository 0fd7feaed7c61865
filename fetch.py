"""
Fetch raw inputs for a refresh cycle: workbook bytes and the medal table page.

Sources can be local paths or http(s) URLs. URL fetches of the workbook get a
cache-busting `v=<epoch ms>` parameter so static hosts serve the latest file.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

import requests

from tracker_common import SourceFetchError

logger = logging.getLogger(__name__)

USER_AGENT = "OlympicPicksTracker/1.0 (leaderboard refresh)"


def make_session() -> requests.Session:
    session = requests.Session()
    session.headers.update({"User-Agent": USER_AGENT})
    return session


def is_url(source: str) -> bool:
    return urlparse(str(source)).scheme in ("http", "https")


def cache_busted(url: str, now_ms: Optional[int] = None) -> str:
    stamp = int(time.time() * 1000) if now_ms is None else now_ms
    parts = urlparse(url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != "v"]
    query.append(("v", str(stamp)))
    return urlunparse(parts._replace(query=urlencode(query)))


def _get(session: requests.Session, url: str, timeout: int) -> requests.Response:
    try:
        resp = session.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise SourceFetchError(f"Could not fetch {url}: {e}") from e
    return resp


def fetch_bytes(source: str, session: Optional[requests.Session] = None, timeout: int = 20) -> bytes:
    if is_url(source):
        url = cache_busted(source)
        logger.debug("GET %s", url)
        return _get(session or make_session(), url, timeout).content

    p = Path(source)
    if not p.exists():
        raise SourceFetchError(f"Could not fetch {source} (file not found)")
    try:
        return p.read_bytes()
    except OSError as e:
        raise SourceFetchError(f"Could not read {source}: {e}") from e


def fetch_text(url: str, session: Optional[requests.Session] = None, timeout: int = 20) -> str:
    if not is_url(url):
        return fetch_bytes(url).decode("utf-8", errors="replace")
    resp = _get(session or make_session(), url, timeout)
    return resp.text
