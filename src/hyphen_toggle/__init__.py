"""Hyphen Toggle Python SDK.

Client for evaluating Hyphen feature toggles against the horizon service.

Example:
    ```python
    from hyphen_toggle import Toggle, ToggleContext, ToggleUser

    toggle = Toggle(
        public_api_key="public_...",  # or HYPHEN_PUBLIC_API_KEY
        application_id="my-app",
        default_context=ToggleContext(user=ToggleUser(id="user-123")),
    )
    toggle.on("error", handle_error)

    # Async usage
    if await toggle.get_boolean("new-checkout", False):
        show_new_checkout()

    # Sync usage
    if toggle.get_sync("new-checkout", False):
        show_new_checkout()
    ```
"""

from .client import DEFAULT_ENVIRONMENT, EVALUATE_PATH, Toggle
from .endpoints import DEFAULT_HORIZON_URL, EndpointResolver, default_horizon_url
from .exceptions import (
    AllEndpointsFailedError,
    ConfigurationError,
    EndpointFailureError,
    InvalidKeyFormatError,
    MissingApplicationError,
    MissingCredentialError,
    NoEndpointsConfiguredError,
    ToggleError,
    ToggleNotFoundError,
)
from .keys import OrgIdResult, decode_public_key, get_org_id_from_public_key
from .types import (
    Evaluation,
    EvaluationRequest,
    EvaluationResponse,
    ToggleContext,
    ToggleUser,
)

__version__ = "1.0.0"

__all__ = [
    "Toggle",
    "ToggleError",
    "InvalidKeyFormatError",
    "ConfigurationError",
    "NoEndpointsConfiguredError",
    "MissingCredentialError",
    "MissingApplicationError",
    "EndpointFailureError",
    "AllEndpointsFailedError",
    "ToggleNotFoundError",
    "ToggleContext",
    "ToggleUser",
    "Evaluation",
    "EvaluationRequest",
    "EvaluationResponse",
    "EndpointResolver",
    "OrgIdResult",
    "decode_public_key",
    "get_org_id_from_public_key",
    "default_horizon_url",
    "DEFAULT_HORIZON_URL",
    "DEFAULT_ENVIRONMENT",
    "EVALUATE_PATH",
    "__version__",
]
