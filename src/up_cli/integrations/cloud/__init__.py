"""Upbound Cloud integration."""

from up_cli.integrations.cloud.client import ControlPlaneClient
from up_cli.integrations.cloud.exceptions import (
    CloudAPIError,
    CloudAuthError,
    CloudConfigError,
    CloudConnectionError,
    CloudError,
    CloudNotFoundError,
)
from up_cli.integrations.cloud.models import ControlPlane

__all__ = [
    "CloudAPIError",
    "CloudAuthError",
    "CloudConfigError",
    "CloudConnectionError",
    "CloudError",
    "CloudNotFoundError",
    "ControlPlane",
    "ControlPlaneClient",
]
