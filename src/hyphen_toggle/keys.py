"""Public API key parsing.

A public key looks like ``public_<base64>`` where the base64 payload decodes
to ``<organization_id>:<secret>``.
"""

from __future__ import annotations

import base64
import re
from dataclasses import dataclass
from typing import Optional

from .exceptions import InvalidKeyFormatError

PUBLIC_KEY_PREFIX = "public_"

_ORG_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]+")


@dataclass(frozen=True)
class OrgIdResult:
    """Outcome of decoding a public key: an organization id, or nothing."""

    organization_id: Optional[str] = None

    @property
    def found(self) -> bool:
        """Return True if an organization id was decoded."""
        return self.organization_id is not None


ABSENT = OrgIdResult()


def decode_public_key(public_key: Optional[str]) -> OrgIdResult:
    """Extract the organization id from a public API key.

    The ``public_`` prefix is optional. Only the text before the first colon
    of the decoded payload is considered, and it must consist of letters,
    digits, underscores or hyphens.

    This never raises: malformed base64, non-string input and invalid
    organization ids all yield ``ABSENT``.

    Args:
        public_key: The public API key, with or without its prefix.

    Returns:
        An ``OrgIdResult`` holding the organization id, or ``ABSENT``.
    """
    if not isinstance(public_key, str):
        return ABSENT

    payload = public_key
    if payload.startswith(PUBLIC_KEY_PREFIX):
        payload = payload[len(PUBLIC_KEY_PREFIX):]

    try:
        padded = payload + "=" * (-len(payload) % 4)
        # latin-1 maps every byte, so a binary secret never fails decoding
        decoded = base64.b64decode(padded, validate=True).decode("latin-1")
    except ValueError:
        return ABSENT

    org_id = decoded.split(":", 1)[0]
    if not _ORG_ID_PATTERN.fullmatch(org_id):
        return ABSENT
    return OrgIdResult(org_id)


def get_org_id_from_public_key(public_key: Optional[str]) -> Optional[str]:
    """Return the organization id for ``public_key``, or None."""
    return decode_public_key(public_key).organization_id


def validate_public_key(public_key: Optional[str]) -> None:
    """Check that ``public_key`` is unset or carries the ``public_`` prefix.

    Raises:
        InvalidKeyFormatError: If the key is set but lacks the prefix.
    """
    if public_key is not None and not public_key.startswith(PUBLIC_KEY_PREFIX):
        raise InvalidKeyFormatError(
            f"Public API key must start with '{PUBLIC_KEY_PREFIX}'"
        )
