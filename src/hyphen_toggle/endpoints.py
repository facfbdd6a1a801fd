"""Horizon endpoint resolution."""

from __future__ import annotations

from typing import Iterable, List, Optional

from .keys import decode_public_key

DEFAULT_HORIZON_URL = "https://toggle.hyphen.cloud"
ORG_HORIZON_URL_TEMPLATE = "https://{organization_id}.toggle.hyphen.cloud"


def default_horizon_url(public_key: Optional[str]) -> str:
    """Build the default horizon URL for a public key.

    Returns the organization-scoped URL when an organization id can be
    decoded from the key, otherwise the global fallback URL. Never raises.
    """
    if not public_key:
        return DEFAULT_HORIZON_URL
    result = decode_public_key(public_key)
    if not result.found:
        return DEFAULT_HORIZON_URL
    return ORG_HORIZON_URL_TEMPLATE.format(organization_id=result.organization_id)


class EndpointResolver:
    """Ordered list of candidate horizon URLs.

    List order is fallback order. An empty list means no endpoint is
    configured.
    """

    def __init__(self, urls: Optional[Iterable[str]] = None) -> None:
        self._urls: List[str] = list(urls) if urls is not None else []

    @classmethod
    def for_public_key(cls, public_key: Optional[str]) -> EndpointResolver:
        """Seed the list with the default URL for ``public_key``, if one is given."""
        if public_key:
            return cls([default_horizon_url(public_key)])
        return cls()

    @property
    def urls(self) -> List[str]:
        """Return the candidate horizon URLs in priority order."""
        return self._urls

    @urls.setter
    def urls(self, value: Iterable[str]) -> None:
        self._urls = list(value)

    def default_url(self, public_key: Optional[str]) -> str:
        """See ``default_horizon_url``."""
        return default_horizon_url(public_key)
