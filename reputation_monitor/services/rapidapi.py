import logging
from typing import Any

import httpx
from bs4 import BeautifulSoup

from reputation_monitor.exceptions.custom import ChannelAPIError, RateLimitError

logger = logging.getLogger(__name__)

_MAX_ERROR_TEXT = 200


def describe_non_json(resp: httpx.Response) -> str:
    """Short description of a non-JSON body, e.g. an HTML rate-limit page."""
    content_type = resp.headers.get("content-type", "")
    detail = ""
    if "html" in content_type:
        soup = BeautifulSoup(resp.text, "html.parser")
        if soup.title and soup.title.string:
            detail = soup.title.string.strip()
    elif resp.text:
        detail = resp.text.strip()[:_MAX_ERROR_TEXT]
    message = f"non-JSON response (status {resp.status_code})"
    return f"{message}: {detail}" if detail else message


class RapidAPIService:
    """Base for channels served through RapidAPI.

    Subclasses set ``host`` and ``error_cls``. ``_get_json`` raises
    ``RateLimitError`` on 429 and ``error_cls`` on any other failure,
    including a body that is not JSON.
    """

    host: str = ""
    error_cls: type[ChannelAPIError] = ChannelAPIError

    def __init__(self, client: httpx.AsyncClient, api_key: str):
        self._client = client
        self._headers = {
            "X-RapidAPI-Key": api_key,
            "X-RapidAPI-Host": self.host,
        }

    def _url(self, path: str) -> str:
        return f"https://{self.host}{path}"

    async def _get_json(self, path: str, params: dict[str, str]) -> Any:
        try:
            resp = await self._client.get(self._url(path), params=params, headers=self._headers)
        except httpx.HTTPError as exc:
            raise self.error_cls(f"request failed: {exc}") from exc

        if resp.status_code == 429:
            raise RateLimitError(self.error_cls.label)
        if resp.status_code >= 400:
            raise self.error_cls(resp.text[:_MAX_ERROR_TEXT], status_code=resp.status_code)

        content_type = resp.headers.get("content-type", "")
        if "application/json" not in content_type:
            message = describe_non_json(resp)
            logger.warning("%s %s returned %s", self.error_cls.label, path, message)
            raise self.error_cls(message, status_code=resp.status_code)

        try:
            return resp.json()
        except ValueError as exc:
            raise self.error_cls("malformed JSON response", status_code=resp.status_code) from exc
