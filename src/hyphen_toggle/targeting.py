"""Targeting key resolution."""

from __future__ import annotations

import uuid
from typing import Callable, Optional

from .types import ToggleContext

RandomSource = Callable[[], str]


def random_suffix() -> str:
    """Return a short random alphanumeric token."""
    return uuid.uuid4().hex[:10]


class TargetingKeyResolver:
    """Computes the targeting key sent with each evaluation.

    Holds the instance-wide default targeting key, used when a context
    carries neither a targeting key nor a user id.
    """

    def __init__(
        self,
        default_targeting_key: str = "",
        random_source: Optional[RandomSource] = None,
    ) -> None:
        self.default_targeting_key = default_targeting_key
        self._random_source = random_source or random_suffix

    def resolve(self, context: Optional[ToggleContext]) -> str:
        """Pick the targeting key for ``context``.

        Precedence: the context's targeting key, then its user id, then the
        stored default targeting key.
        """
        if context is not None:
            if context.targeting_key:
                return context.targeting_key
            if context.user is not None and context.user.id:
                return context.user.id
        return self.default_targeting_key

    def generate(self, application_id: Optional[str], environment: Optional[str]) -> str:
        """Generate ``<application_id>-<environment>-<random>``, skipping empty parts."""
        parts = [application_id, environment, self._random_source()]
        return "-".join(part for part in parts if part)
