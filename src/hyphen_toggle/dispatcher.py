"""Request dispatch across horizon URLs with ordered fallback."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import httpx

from .endpoints import EndpointResolver
from .exceptions import (
    AllEndpointsFailedError,
    EndpointFailureError,
    NoEndpointsConfiguredError,
)

logger = logging.getLogger("hyphen_toggle")

DEFAULT_TIMEOUT = 5.0  # 5 seconds
API_KEY_HEADER = "x-api-key"

HeaderTypes = Union[httpx.Headers, Sequence[Tuple[str, str]], Mapping[str, str]]


def normalize_path(path: str) -> str:
    """Return ``path`` with exactly one leading slash."""
    return "/" + path.lstrip("/")


def build_url(base_url: str, path: str) -> str:
    """Join a horizon base URL and a request path."""
    return base_url.rstrip("/") + normalize_path(path)


def normalize_headers(headers: Optional[HeaderTypes]) -> Dict[str, str]:
    """Flatten an ``httpx.Headers``, a list of pairs or a mapping into a dict."""
    if headers is None:
        return {}
    if isinstance(headers, httpx.Headers):
        return dict(headers.items())
    if isinstance(headers, Mapping):
        return dict(headers)
    return {key: value for key, value in headers}


class RequestDispatcher:
    """Sends JSON requests to the first horizon URL that answers with a 2xx.

    URLs are tried strictly in order, once each, with no delay in between.
    """

    def __init__(
        self,
        endpoints: EndpointResolver,
        api_key: Callable[[], Optional[str]],
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            endpoints: Resolver holding the candidate horizon URLs.
            api_key: Returns the current public API key, or None.
            timeout: HTTP request timeout in seconds, per attempt.
        """
        self._endpoints = endpoints
        self._api_key = api_key
        self._timeout = timeout

        # HTTP clients (lazy initialized)
        self._async_client: Optional[httpx.AsyncClient] = None
        self._sync_client: Optional[httpx.Client] = None

    def _get_async_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._async_client is None:
            self._async_client = httpx.AsyncClient(timeout=self._timeout)
        return self._async_client

    def _get_sync_client(self) -> httpx.Client:
        """Get or create the sync HTTP client."""
        if self._sync_client is None:
            self._sync_client = httpx.Client(timeout=self._timeout)
        return self._sync_client

    async def close(self) -> None:
        """Close the HTTP clients and release resources."""
        if self._async_client:
            await self._async_client.aclose()
            self._async_client = None
        self.close_sync()

    def close_sync(self) -> None:
        """Close the sync HTTP client."""
        if self._sync_client:
            self._sync_client.close()
            self._sync_client = None

    def build_headers(self, headers: Optional[HeaderTypes] = None) -> Dict[str, str]:
        """Merge the JSON content type, caller headers and the API key header.

        Caller headers are copied as given. The configured API key replaces
        any caller-supplied ``x-api-key``, whatever its case.
        """
        merged = {"Content-Type": "application/json"}
        merged.update(normalize_headers(headers))

        api_key = self._api_key()
        if api_key:
            for key in [k for k in merged if k.lower() == API_KEY_HEADER]:
                del merged[key]
            merged[API_KEY_HEADER] = api_key
        return merged

    @staticmethod
    def build_body(
        payload: Any = None, body: Optional[Union[str, bytes]] = None
    ) -> Optional[Union[str, bytes]]:
        """Serialize ``payload`` to JSON, or fall back to a raw ``body``.

        Only None counts as "no payload"; falsy values such as ``0``,
        ``False`` or ``{}`` are serialized.
        """
        if payload is not None:
            return json.dumps(payload)
        return body

    def _candidate_urls(self) -> List[str]:
        urls = list(self._endpoints.urls)
        if not urls:
            raise NoEndpointsConfiguredError(
                "No horizon URLs configured. Set horizon_urls or provide a valid public_api_key."
            )
        return urls

    @staticmethod
    def _parse_response(url: str, response: httpx.Response) -> Any:
        if not response.is_success:
            raise EndpointFailureError(
                f"HTTP {response.status_code}: {response.reason_phrase}",
                url=url,
                status_code=response.status_code,
            )
        return response.json()

    @staticmethod
    def _failure(url: str, exc: Exception) -> EndpointFailureError:
        if isinstance(exc, EndpointFailureError):
            error = exc
        elif isinstance(exc, httpx.HTTPError):
            error = EndpointFailureError(f"{type(exc).__name__}: {exc}", url=url)
        else:
            name = type(exc).__name__
            error = EndpointFailureError(f"{name}: {exc}" if str(exc) else name, url=url)
        if error is not exc:
            error.__cause__ = exc
        logger.debug(f"Horizon URL '{url}' failed: {error.message}")
        return error

    async def send(
        self,
        path: str,
        payload: Any = None,
        *,
        headers: Optional[HeaderTypes] = None,
        body: Optional[Union[str, bytes]] = None,
        method: str = "POST",
    ) -> Any:
        """Send a request to the horizon URLs in order and return the JSON body.

        Args:
            path: Request path, with or without a leading slash.
            payload: JSON-serializable body. None means no payload.
            headers: Extra request headers.
            body: Raw body used only when ``payload`` is None.
            method: HTTP method. Defaults to POST.

        Returns:
            The parsed JSON body of the first successful response.

        Raises:
            NoEndpointsConfiguredError: If there are no horizon URLs.
            AllEndpointsFailedError: If every horizon URL failed.
        """
        urls = self._candidate_urls()
        request_headers = self.build_headers(headers)
        content = self.build_body(payload, body)
        client = self._get_async_client()

        errors: List[EndpointFailureError] = []
        for base_url in urls:
            url = build_url(base_url, path)
            try:
                response = await client.request(
                    method, url, headers=request_headers, content=content
                )
                data = self._parse_response(url, response)
            except Exception as e:
                errors.append(self._failure(url, e))
                continue
            logger.debug(f"Horizon URL '{url}' answered {response.status_code}")
            return data

        raise AllEndpointsFailedError(errors)

    def send_sync(
        self,
        path: str,
        payload: Any = None,
        *,
        headers: Optional[HeaderTypes] = None,
        body: Optional[Union[str, bytes]] = None,
        method: str = "POST",
    ) -> Any:
        """Synchronous version of send()."""
        urls = self._candidate_urls()
        request_headers = self.build_headers(headers)
        content = self.build_body(payload, body)
        client = self._get_sync_client()

        errors: List[EndpointFailureError] = []
        for base_url in urls:
            url = build_url(base_url, path)
            try:
                response = client.request(
                    method, url, headers=request_headers, content=content
                )
                data = self._parse_response(url, response)
            except Exception as e:
                errors.append(self._failure(url, e))
                continue
            logger.debug(f"Horizon URL '{url}' answered {response.status_code}")
            return data

        raise AllEndpointsFailedError(errors)
