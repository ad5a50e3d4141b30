import io
import json
import urllib.error

import pytest

from nomadguide.services import http_client
from nomadguide.services.http_client import HttpError, get_json


class _Response(io.BytesIO):
    status = 200


def test_get_json_retries_with_exponential_backoff(monkeypatch):
    attempts = []

    def failing_urlopen(url, timeout):
        attempts.append(url)
        raise urllib.error.URLError("down")

    monkeypatch.setattr(http_client.urllib.request, "urlopen", failing_urlopen)
    sleeps = []
    with pytest.raises(HttpError, match="Failed to fetch JSON"):
        get_json("http://rates.test/latest", retries=2, backoff=0.5, sleep=sleeps.append)
    assert len(attempts) == 3
    assert sleeps == [0.5, 1.0]


def test_get_json_recovers_after_transient_failure(monkeypatch):
    responses = [urllib.error.URLError("down"), _Response(json.dumps({"rates": {}}).encode())]

    def flaky_urlopen(url, timeout):
        item = responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    monkeypatch.setattr(http_client.urllib.request, "urlopen", flaky_urlopen)
    sleeps = []
    assert get_json("http://rates.test/latest", sleep=sleeps.append) == {"rates": {}}
    assert sleeps == [0.5]


def test_get_json_rejects_non_object(monkeypatch):
    monkeypatch.setattr(
        http_client.urllib.request,
        "urlopen",
        lambda url, timeout: _Response(b"[1, 2]"),
    )
    with pytest.raises(HttpError):
        get_json("http://rates.test/latest", retries=0)
