"""Kubernetes integration: namespace management for installs."""

from up_cli.integrations.kubernetes.client import KubernetesClient
from up_cli.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConnectionError,
    KubernetesError,
)

__all__ = [
    "KubernetesAuthError",
    "KubernetesClient",
    "KubernetesConnectionError",
    "KubernetesError",
]
