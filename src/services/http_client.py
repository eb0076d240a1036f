from __future__ import annotations

import logging
from typing import Any, Protocol

import requests
from requests import Response
from requests.adapters import HTTPAdapter
from urllib3.util import Retry

from .errors import DecodeError, TransportError

logger = logging.getLogger(__name__)


class JsonFetcher(Protocol):
    def get_json(self, url: str, *, params: dict[str, Any] | None = None) -> Any: ...


class JsonHttpClient(JsonFetcher):
    """GET-and-decode collaborator shared by the exchange clients."""

    def __init__(
        self,
        timeout: float = 10.0,
        session: requests.Session | None = None,
        retry_attempts: int = 5,
        retry_backoff_seconds: float = 1.0,
    ) -> None:
        self.timeout = timeout
        self._session = session or requests.Session()

        retry = Retry(
            total=retry_attempts,
            backoff_factor=retry_backoff_seconds,
            status_forcelist={429, 500, 502, 503, 504},
            allowed_methods={"GET"},
        )
        adapter = HTTPAdapter(max_retries=retry)
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)

    def get_json(self, url: str, *, params: dict[str, Any] | None = None) -> Any:
        logger.debug("GET %s params=%s", url, params)
        try:
            response = self._session.request("GET", url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as exc:
            resp = exc.response
            status_code = getattr(resp, "status_code", None)
            raise TransportError(
                f"GET {url} failed", status_code=status_code, payload=self._extract_error(resp), stage="fetch"
            ) from exc
        except requests.RequestException as exc:
            status_code = getattr(getattr(exc, "response", None), "status_code", None)
            raise TransportError(f"GET {url} failed", status_code=status_code, stage="fetch") from exc

        try:
            return response.json()
        except ValueError as exc:
            raise DecodeError(f"GET {url} returned invalid JSON", payload=response.text, stage="fetch") from exc

    @staticmethod
    def _extract_error(response: Response | None) -> Any | None:
        if response is None:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text


__all__ = ["JsonFetcher", "JsonHttpClient"]
