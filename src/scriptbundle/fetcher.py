"""
Remote source fetcher.

A fetcher is any callable taking an address and returning the file's lines.
RemoteFetcher is the HTTP implementation; tests and offline runs can pass a
plain function instead.
"""
from __future__ import annotations

import logging
import re
from typing import Callable, List, Optional

import requests

from scriptbundle.errors import FetchError

logger = logging.getLogger(__name__)

Fetch = Callable[[str], List[str]]

DEFAULT_TIMEOUT = 30.0
DEFAULT_CHARSET = "utf-8"

_CHARSET_RE = re.compile(r"charset\s*=\s*['\"]?([^'\";\s]+)", re.IGNORECASE)

HEADERS = {
    "user-agent": "scriptbundle",
    "accept": "text/plain, */*;q=0.5",
}


def split_lines(content: str) -> List[str]:
    """Split text into lines without line terminators ("\\r\\n" and "\\r" included)."""
    return content.splitlines()


def response_charset(headers) -> str:
    """
    Charset to decode a response body with.

    Only an explicit "charset=" parameter of the Content-Type header counts.
    requests falls back to ISO-8859-1 for any text/* type without one, which
    would turn UTF-8 source into mojibake, so that guess is ignored.
    """
    match = _CHARSET_RE.search(headers.get("content-type", ""))
    return match.group(1) if match else DEFAULT_CHARSET


class RemoteFetcher:
    """
    Blocking HTTP fetcher with a per-request timeout.

    Every failure (connection, timeout, non-success status, undecodable
    body) is collapsed into FetchError. No retries and no caching.

    The underlying requests.Session is safe to share between the worker
    threads of one run as long as no adapter settings change mid-run.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

    def __call__(self, address: str) -> List[str]:
        logger.debug("GET %s", address)
        try:
            response = self.session.get(address, headers=HEADERS, timeout=self.timeout)
        except requests.Timeout:
            raise FetchError(address, f"timed out after {self.timeout}s")
        except requests.RequestException as e:
            raise FetchError(address, str(e))

        if not 200 <= response.status_code < 300:
            raise FetchError(address, f"HTTP {response.status_code}")

        try:
            content = response.content.decode(response_charset(response.headers))
        except (UnicodeDecodeError, LookupError) as e:
            raise FetchError(address, f"cannot decode body: {e}")

        return split_lines(content)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> RemoteFetcher:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


__all__ = ["Fetch", "RemoteFetcher", "split_lines", "response_charset", "DEFAULT_TIMEOUT"]
