from __future__ import annotations

"""Lightweight HTTP client util with retry.

Uses stdlib urllib so the rate provider needs no extra runtime dependency.
Focus: GET a JSON object with limited retries and exponential backoff.
"""
import json
import logging
import time
import urllib.error
import urllib.request
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger("nomadguide.http")


class HttpError(Exception):
    pass


def get_json(
    url: str,
    *,
    timeout: float = 5.0,
    retries: int = 2,
    backoff: float = 0.5,
    sleep: Callable[[float], None] = time.sleep,
) -> Dict[str, Any]:
    last_err: Optional[Exception] = None
    for attempt in range(retries + 1):
        try:
            with urllib.request.urlopen(url, timeout=timeout) as resp:  # nosec B310
                if resp.status >= 400:
                    raise HttpError(f"HTTP {resp.status} for {url}")
                payload = json.loads(resp.read().decode("utf-8"))
            if not isinstance(payload, dict):
                raise HttpError(f"Expected a JSON object from {url}")
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
            sleep(backoff * (2**attempt))
    raise HttpError(f"Failed to fetch JSON from {url}: {last_err}")
