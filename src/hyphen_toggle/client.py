"""Hyphen Toggle SDK client implementation."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional, TypeVar, Union, cast

from .dispatcher import (
    API_KEY_HEADER,
    DEFAULT_TIMEOUT,
    HeaderTypes,
    RequestDispatcher,
)
from .endpoints import EndpointResolver
from .events import EventEmitter
from .exceptions import (
    MissingApplicationError,
    MissingCredentialError,
    ToggleNotFoundError,
)
from .keys import get_org_id_from_public_key, validate_public_key
from .targeting import RandomSource, TargetingKeyResolver
from .types import Evaluation, EvaluationRequest, ToggleContext

logger = logging.getLogger("hyphen_toggle")

DEFAULT_ENVIRONMENT = "development"
EVALUATE_PATH = "/toggle/evaluate"

T = TypeVar("T")


class Toggle(EventEmitter):
    """Hyphen feature toggle client.

    Evaluations never raise. On any failure the client emits an ``error``
    event with the exception and returns the caller's default value.

    Example:
        ```python
        from hyphen_toggle import Toggle, ToggleContext

        toggle = Toggle(
            public_api_key="public_...",
            application_id="my-app",
            environment="production",
        )
        toggle.on("error", lambda error: print(error))

        if await toggle.get_boolean("new-checkout", False):
            show_new_checkout()

        # Per-call context replaces the default context
        theme = await toggle.get_string(
            "theme", "light", context=ToggleContext(targeting_key="user-123")
        )
        ```
    """

    def __init__(
        self,
        public_api_key: Optional[str] = None,
        default_context: Optional[ToggleContext] = None,
        horizon_urls: Optional[List[str]] = None,
        application_id: Optional[str] = None,
        environment: Optional[str] = None,
        default_target_key: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        random_source: Optional[RandomSource] = None,
    ) -> None:
        """Initialize the Toggle client.

        Args:
            public_api_key: Public API key (``public_...``). If not provided,
                reads from HYPHEN_PUBLIC_API_KEY. Not prefix-checked here.
            default_context: Context used when a call passes none.
            horizon_urls: Horizon URLs to try in order. Defaults to the URL
                derived from the public API key, or none without a key.
            application_id: Application id. If not provided, reads from
                HYPHEN_APPLICATION_ID.
            environment: Environment name. If not provided, reads from
                HYPHEN_ENVIRONMENT, then defaults to "development".
            default_target_key: Pins the default targeting key instead of
                generating one.
            timeout: HTTP request timeout in seconds. Default 5 seconds.
            random_source: Returns the random suffix of generated targeting keys.
        """
        super().__init__()

        self._public_api_key = public_api_key or os.environ.get("HYPHEN_PUBLIC_API_KEY")
        self._organization_id: Optional[str] = None
        if self._public_api_key:
            self._organization_id = get_org_id_from_public_key(self._public_api_key)

        self._application_id = application_id or os.environ.get("HYPHEN_APPLICATION_ID") or ""
        self._environment = (
            environment
            or os.environ.get("HYPHEN_ENVIRONMENT")
            or DEFAULT_ENVIRONMENT
        )
        self._default_context = default_context or ToggleContext()

        if horizon_urls is not None:
            self._endpoints = EndpointResolver(horizon_urls)
        else:
            self._endpoints = EndpointResolver.for_public_key(self._public_api_key)

        self._targeting = TargetingKeyResolver(random_source=random_source)
        if default_target_key:
            self._targeting.default_targeting_key = default_target_key
        elif default_context is not None:
            self._targeting.default_targeting_key = self._targeting.resolve(default_context)
        else:
            self._targeting.default_targeting_key = self._targeting.generate(
                self._application_id, self._environment
            )

        self._dispatcher = RequestDispatcher(
            self._endpoints, lambda: self._public_api_key, timeout=timeout
        )

    @property
    def public_api_key(self) -> Optional[str]:
        """Return the public API key, or None if not set."""
        return self._public_api_key

    @public_api_key.setter
    def public_api_key(self, value: Optional[str]) -> None:
        self.set_public_key(value)

    def set_public_key(self, key: Optional[str]) -> None:
        """Validate and set the public API key.

        Setting a key recomputes ``organization_id``. Clearing it (None)
        leaves the previous organization id in place.

        Raises:
            InvalidKeyFormatError: If the key doesn't start with "public_".
        """
        validate_public_key(key)
        self._public_api_key = key
        if key is not None:
            self._organization_id = get_org_id_from_public_key(key)

    @property
    def organization_id(self) -> Optional[str]:
        """Return the organization id decoded from the public API key."""
        return self._organization_id

    @organization_id.setter
    def organization_id(self, value: Optional[str]) -> None:
        self._organization_id = value

    @property
    def default_context(self) -> ToggleContext:
        return self._default_context

    @default_context.setter
    def default_context(self, value: ToggleContext) -> None:
        self._default_context = value

    @property
    def horizon_urls(self) -> List[str]:
        """Return the horizon URLs, in fallback order."""
        return self._endpoints.urls

    @horizon_urls.setter
    def horizon_urls(self, value: List[str]) -> None:
        self._endpoints.urls = value

    @property
    def application_id(self) -> str:
        return self._application_id

    @application_id.setter
    def application_id(self, value: str) -> None:
        self._application_id = value

    @property
    def environment(self) -> str:
        return self._environment

    @environment.setter
    def environment(self, value: str) -> None:
        self._environment = value

    @property
    def default_target_key(self) -> str:
        """Return the targeting key used when a context identifies no one."""
        return self._targeting.default_targeting_key

    @default_target_key.setter
    def default_target_key(self, value: str) -> None:
        self._targeting.default_targeting_key = value

    def get_org_id_from_public_key(self, public_key: Optional[str]) -> Optional[str]:
        """Extract the organization id from a public API key, or None."""
        return get_org_id_from_public_key(public_key)

    def get_default_horizon_url(self, public_key: Optional[str]) -> str:
        """Return the default horizon URL for a public API key."""
        return self._endpoints.default_url(public_key)

    def generate_targeting_key(self) -> str:
        """Generate a targeting key from the application id and environment."""
        return self._targeting.generate(self._application_id, self._environment)

    async def close(self) -> None:
        """Close the HTTP clients and release resources."""
        await self._dispatcher.close()

    def close_sync(self) -> None:
        """Synchronous version of close()."""
        self._dispatcher.close_sync()

    async def __aenter__(self) -> Toggle:
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: object) -> None:
        """Async context manager exit."""
        await self.close()

    def __enter__(self) -> Toggle:
        """Sync context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Sync context manager exit."""
        self.close_sync()

    async def fetch(
        self,
        path: str,
        payload: Any = None,
        *,
        headers: Optional[HeaderTypes] = None,
        body: Optional[Union[str, bytes]] = None,
        method: str = "POST",
    ) -> Any:
        """POST ``payload`` as JSON to ``path`` on the horizon URLs.

        URLs are tried in order and the first 2xx response's JSON body is
        returned. The public API key is sent in the ``x-api-key`` header.

        Raises:
            NoEndpointsConfiguredError: If there are no horizon URLs.
            AllEndpointsFailedError: If every horizon URL failed.
        """
        return await self._dispatcher.send(
            path, payload, headers=headers, body=body, method=method
        )

    def fetch_sync(
        self,
        path: str,
        payload: Any = None,
        *,
        headers: Optional[HeaderTypes] = None,
        body: Optional[Union[str, bytes]] = None,
        method: str = "POST",
    ) -> Any:
        """Synchronous version of fetch()."""
        return self._dispatcher.send_sync(
            path, payload, headers=headers, body=body, method=method
        )

    def _build_request(self, context: Optional[ToggleContext]) -> EvaluationRequest:
        """Build the evaluation request, checking credentials first.

        A per-call context replaces the default context entirely.

        Raises:
            MissingCredentialError: If no public API key is configured.
            MissingApplicationError: If no application id is configured.
        """
        active = context if context is not None else self._default_context
        request = EvaluationRequest(
            application=self._application_id,
            environment=self._environment or DEFAULT_ENVIRONMENT,
            targeting_key=active.targeting_key,
            ip_address=active.ip_address,
            user=active.user,
            custom_attributes=active.custom_attributes,
        )
        if not request.targeting_key:
            request.targeting_key = self._targeting.resolve(active)

        if not self._public_api_key:
            raise MissingCredentialError("Public API key is required to evaluate toggles")
        if not self._application_id:
            raise MissingApplicationError("Application id is required to evaluate toggles")
        return request

    def _api_key_headers(self) -> Dict[str, str]:
        return {API_KEY_HEADER: cast(str, self._public_api_key)}

    @staticmethod
    def _extract_value(toggle_key: str, data: Any) -> Any:
        toggles = data.get("toggles") or {}
        if toggle_key not in toggles:
            raise ToggleNotFoundError(toggle_key)
        return Evaluation.from_dict(toggle_key, toggles[toggle_key]).value

    def _fallback(self, toggle_key: str, error: Exception, default_value: T) -> T:
        logger.warning(f"Error evaluating toggle '{toggle_key}': {error}")
        try:
            self.emit("error", error)
        except Exception:
            logger.exception(f"Error handler failed for toggle '{toggle_key}'")
        return default_value

    async def get(
        self,
        toggle_key: str,
        default_value: T,
        context: Optional[ToggleContext] = None,
    ) -> T:
        """Evaluate a toggle.

        Args:
            toggle_key: The toggle key (e.g., 'new-checkout').
            default_value: Value to return on any error.
            context: Evaluation context for this call. Replaces the default
                context when given; fields are not merged.

        Returns:
            The toggle's value, trusted to be of the same type as
            ``default_value``, or ``default_value`` on error.

        Note:
            This method never raises exceptions. Errors are emitted as an
            ``error`` event and logged.
        """
        try:
            request = self._build_request(context)
            data = await self._dispatcher.send(
                EVALUATE_PATH, request.to_dict(), headers=self._api_key_headers()
            )
            return cast(T, self._extract_value(toggle_key, data))
        except Exception as e:
            return self._fallback(toggle_key, e, default_value)

    def get_sync(
        self,
        toggle_key: str,
        default_value: T,
        context: Optional[ToggleContext] = None,
    ) -> T:
        """Synchronous version of get()."""
        try:
            request = self._build_request(context)
            data = self._dispatcher.send_sync(
                EVALUATE_PATH, request.to_dict(), headers=self._api_key_headers()
            )
            return cast(T, self._extract_value(toggle_key, data))
        except Exception as e:
            return self._fallback(toggle_key, e, default_value)

    async def get_boolean(
        self, toggle_key: str, default_value: bool, context: Optional[ToggleContext] = None
    ) -> bool:
        return await self.get(toggle_key, default_value, context)

    async def get_string(
        self, toggle_key: str, default_value: str, context: Optional[ToggleContext] = None
    ) -> str:
        return await self.get(toggle_key, default_value, context)

    async def get_number(
        self,
        toggle_key: str,
        default_value: Union[int, float],
        context: Optional[ToggleContext] = None,
    ) -> Union[int, float]:
        return await self.get(toggle_key, default_value, context)

    async def get_object(
        self,
        toggle_key: str,
        default_value: Dict[str, Any],
        context: Optional[ToggleContext] = None,
    ) -> Dict[str, Any]:
        return await self.get(toggle_key, default_value, context)
