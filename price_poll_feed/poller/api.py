from __future__ import annotations

from http.client import HTTPException
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen
import json


USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0 Safari/537.36"
)


class FetchError(RuntimeError):
    """A price could not be obtained from a source."""


class NetworkError(FetchError):
    pass


class ParseError(FetchError):
    pass


def fetch_json(url: str) -> Any:
    """GET ``url`` once and decode the JSON body.

    Non-2xx responses, DNS/connection failures, malformed or truncated HTTP
    responses and socket errors raise NetworkError. A body that is not valid
    JSON raises ParseError.
    """
    req = Request(url, headers={"User-Agent": USER_AGENT, "Accept": "application/json"})
    try:
        with urlopen(req) as resp:
            body = resp.read()
    except HTTPError as e:
        raise NetworkError(f"HTTP {e.code} from {url}") from e
    except URLError as e:
        raise NetworkError(f"request to {url} failed: {e.reason}") from e
    except (HTTPException, OSError) as e:
        raise NetworkError(f"request to {url} failed: {e!r}") from e

    try:
        return json.loads(body)
    except ValueError as e:
        raise ParseError(f"invalid JSON from {url}: {e}") from e
