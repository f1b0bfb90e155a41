"""Upbound Cloud API data models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class ControlPlane(BaseModel):
    """A hosted control plane."""

    id: str = Field(..., description="Control plane ID")
    name: str = Field(..., description="Control plane name")
    description: str | None = Field(default=None, description="Description")
    account: str | None = Field(default=None, description="Owning account")
    status: str | None = Field(default=None, description="Provisioning status")
    created_at: datetime | None = Field(default=None, description="Creation timestamp")

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> ControlPlane:
        """Create from an API response.

        The API wraps the control plane in a ``controlPlane`` key alongside
        its status; unwrapped objects are accepted as well.
        """
        status = data.get("status")
        if "controlPlane" in data:
            data = data["controlPlane"]
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description") or None,
            account=data.get("account") or data.get("ownerName"),
            status=status if isinstance(status, str) else data.get("status"),
            created_at=data.get("createdAt") or data.get("created_at"),
        )


def control_planes_from_list(data: Any) -> list[ControlPlane]:
    """Parse a list response, either a bare array or ``{"controlPlanes": [...]}``."""
    items = data.get("controlPlanes", []) if isinstance(data, dict) else data
    return [ControlPlane.from_api_response(item) for item in items or []]
