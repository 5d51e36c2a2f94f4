from __future__ import annotations

import json
import logging
import socket
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

logger = logging.getLogger(__name__)


def build_url(base_url: str, path: str, params: dict[str, str]) -> str:
    return f"{base_url.rstrip('/')}{path}?{urlencode(params)}"


def fetch_json(url: str, service_name: str, timeout: float = 10) -> Any | None:
    """GET ``url`` and decode the JSON body.

    Returns ``None`` on a non-2xx status, a network failure or a body that
    is not JSON. The failure is logged, never raised.
    """
    request = Request(url, headers={"Accept": "application/json"})
    try:
        with urlopen(request, timeout=timeout) as response:
            body = response.read().decode("utf-8")
        return json.loads(body)
    except HTTPError as exc:
        logger.warning("%s API error: %s - %s", service_name, exc.code, exc.reason)
        return None
    except (URLError, TimeoutError, socket.timeout) as exc:
        logger.warning("Failed to fetch from %s: %s", service_name, exc)
        return None
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("%s returned a malformed body", service_name)
        return None
