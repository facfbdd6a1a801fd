"""Hyphen Toggle SDK type definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

ToggleValue = Union[bool, str, int, float, Dict[str, Any]]


@dataclass
class ToggleUser:
    """User information for an evaluation context."""
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    custom_attributes: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the wire shape, omitting unset fields."""
        data: Dict[str, Any] = {"id": self.id}
        if self.email is not None:
            data["email"] = self.email
        if self.name is not None:
            data["name"] = self.name
        if self.custom_attributes is not None:
            data["customAttributes"] = self.custom_attributes
        return data


@dataclass
class ToggleContext:
    """Evaluation context used for targeting and bucketing.

    Example:
        ```python
        context = ToggleContext(
            targeting_key="user-123",
            ip_address="203.0.113.42",
            custom_attributes={"subscriptionLevel": "premium"},
            user=ToggleUser(id="user-123", email="john.doe@example.com"),
        )
        ```
    """
    targeting_key: str = ""
    ip_address: Optional[str] = None
    custom_attributes: Optional[Dict[str, Any]] = None
    user: Optional[ToggleUser] = None


@dataclass
class EvaluationRequest:
    """Body POSTed to the evaluation endpoint."""
    application: str
    environment: str
    targeting_key: str = ""
    ip_address: Optional[str] = None
    user: Optional[ToggleUser] = None
    custom_attributes: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the wire shape, omitting unset fields."""
        data: Dict[str, Any] = {
            "application": self.application,
            "environment": self.environment,
            "targetingKey": self.targeting_key,
        }
        if self.ip_address is not None:
            data["ipAddress"] = self.ip_address
        if self.user is not None:
            data["user"] = self.user.to_dict()
        if self.custom_attributes is not None:
            data["customAttributes"] = self.custom_attributes
        return data


@dataclass
class Evaluation:
    """Result of evaluating one toggle."""
    key: str
    value: ToggleValue
    type: str
    reason: Any = None
    error_message: Optional[str] = None

    @classmethod
    def from_dict(cls, key: str, data: dict) -> Evaluation:
        """Create from API response dict."""
        return cls(
            key=data.get("key", key),
            value=data["value"],
            type=data.get("type", ""),
            reason=data.get("reason"),
            error_message=data.get("errorMessage"),
        )


@dataclass
class EvaluationResponse:
    """Response from the evaluation endpoint."""
    toggles: Dict[str, Evaluation] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> EvaluationResponse:
        """Create from API response dict."""
        return cls(
            toggles={
                key: Evaluation.from_dict(key, evaluation)
                for key, evaluation in data.get("toggles", {}).items()
            }
        )
