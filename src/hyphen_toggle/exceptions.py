"""Hyphen Toggle SDK exceptions."""

from typing import List, Optional


class ToggleError(Exception):
    """Base exception for Hyphen Toggle SDK errors."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class InvalidKeyFormatError(ToggleError):
    """Raised when a public API key is assigned without the required prefix."""

    pass


class ConfigurationError(ToggleError):
    """Raised when the SDK is misconfigured."""

    pass


class NoEndpointsConfiguredError(ConfigurationError):
    """Raised when a request is dispatched with no horizon URLs."""

    pass


class MissingCredentialError(ConfigurationError):
    """Raised when an evaluation is attempted without a public API key."""

    pass


class MissingApplicationError(ConfigurationError):
    """Raised when an evaluation is attempted without an application id."""

    pass


class EndpointFailureError(ToggleError):
    """A single horizon URL failed, either at the transport or with a non-2xx status."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, status_code)
        self.url = url


class AllEndpointsFailedError(ToggleError):
    """Raised after every horizon URL has been tried and failed."""

    def __init__(self, errors: List[EndpointFailureError]) -> None:
        joined = ", ".join(error.message for error in errors)
        super().__init__(f"All horizon URLs failed. Last errors: {joined}")
        self.errors = errors


class ToggleNotFoundError(ToggleError):
    """Raised when the requested toggle is missing from an evaluation response."""

    def __init__(self, toggle_key: str) -> None:
        super().__init__(f"Toggle '{toggle_key}' not found in evaluation response")
        self.toggle_key = toggle_key
