"""JSON-envelope HTTP transport built on aiohttp."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import aiohttp

from vocab_editor.exceptions import TransportError
from vocab_editor.models import Envelope

logger = logging.getLogger(__name__)

_JSON_HEADERS = {"Content-Type": "application/json"}


class Transport:
    """Issues requests against the service and unwraps ``{status, data}``.

    A decodable response whose declared status is not 200 is logged and
    returned as an empty envelope carrying that status. Failures that leave
    nothing to decode are raised as :class:`TransportError`.
    """

    def __init__(self, base_url: str, session: aiohttp.ClientSession) -> None:
        self._base_url = base_url.rstrip("/")
        self._session = session

    @property
    def base_url(self) -> str:
        return self._base_url

    def url_for(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    async def request(
        self,
        path: str,
        method: str = "GET",
        body: Any = None,
    ) -> Envelope:
        url = self.url_for(path)
        method = method.upper()
        kwargs: dict[str, Any] = {"headers": _JSON_HEADERS}
        if body is not None:
            kwargs["data"] = json.dumps(body, ensure_ascii=False).encode("utf-8")

        logger.debug("%s %s", method, url)
        try:
            async with self._session.request(method, url, **kwargs) as response:
                payload = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        status = payload.get("status") if isinstance(payload, dict) else None
        if status == 200:
            return Envelope(status=200, data=payload.get("data"))

        logger.error("Failed to load %s (status=%s)", url, status)
        return Envelope.empty(status)
