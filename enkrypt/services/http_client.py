from __future__ import annotations

"""Minimal JSON-over-HTTP GET used by the rate providers.

stdlib urllib keeps the runtime free of an HTTP client dependency; price
lookups are single GETs with a timeout. Retries default to zero: a failed
lookup falls back to the configured constant instead.
"""
import json
import logging
import time
import urllib.error
import urllib.request
from typing import Any, Dict, Optional

logger = logging.getLogger("enkrypt.http")

_HEADERS = {"Accept": "application/json", "User-Agent": "enkrypt-rates/0.1"}


class HttpError(Exception):
    pass


def get_json(
    url: str, *, timeout: float = 5.0, retries: int = 0, backoff: float = 0.5
) -> Dict[str, Any]:
    last_err: Optional[Exception] = None
    for attempt in range(retries + 1):
        try:
            req = urllib.request.Request(url, headers=_HEADERS)
            with urllib.request.urlopen(req, timeout=timeout) as resp:  # nosec B310
                if resp.status >= 400:
                    raise HttpError(f"HTTP {resp.status} for {url}")
                payload = json.loads(resp.read().decode("utf-8"))
                if not isinstance(payload, dict):
                    raise HttpError(f"expected a JSON object from {url}")
                return payload
        except (
            urllib.error.URLError,
            TimeoutError,
            HttpError,
            ValueError,
        ) as e:  # ValueError for JSON decode
            last_err = e
            logger.debug("GET %s failed (attempt %d): %s", url, attempt + 1, e)
            if attempt == retries:
                break
            time.sleep(backoff * (2**attempt))
    raise HttpError(f"Failed to fetch JSON from {url}: {last_err}")
