"""Kubernetes API client wrapper.

Only what the installer needs from the cluster API directly: making sure the
target namespace exists. Everything release related goes through helm.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from up_cli.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConnectionError,
    KubernetesError,
)

if TYPE_CHECKING:
    from kubernetes.client import CoreV1Api

logger = structlog.get_logger()

HTTP_CONFLICT = 409


class KubernetesClient:
    """Thin wrapper over the official kubernetes client.

    Example:
        ```python
        client = KubernetesClient(context="kind-uxp")
        client.ensure_namespace("upbound-system")
        ```
    """

    def __init__(self, kubeconfig: str | None = None, context: str | None = None) -> None:
        """Load kubeconfig, falling back to in-cluster configuration.

        Raises:
            KubernetesConnectionError: If no configuration can be loaded.
        """
        self._kubeconfig = kubeconfig
        self._context = context
        self._core_v1: CoreV1Api | None = None
        self._load_config()

    def _load_config(self) -> None:
        from kubernetes import config
        from kubernetes.config import ConfigException

        try:
            config.load_kube_config(config_file=self._kubeconfig, context=self._context)
            logger.debug("loaded_kubeconfig", context=self._context, kubeconfig=self._kubeconfig)
        except ConfigException:
            try:
                config.load_incluster_config()
                logger.debug("loaded_incluster_config")
            except ConfigException as e:
                raise KubernetesConnectionError(
                    message="Cannot load Kubernetes configuration. "
                    "Ensure kubeconfig exists or running inside a cluster.",
                    original_error=e,
                ) from e

    @property
    def core_v1(self) -> CoreV1Api:
        if self._core_v1 is None:
            from kubernetes.client import CoreV1Api

            self._core_v1 = CoreV1Api()
        return self._core_v1

    def ensure_namespace(self, name: str) -> bool:
        """Create ``name`` unless it already exists.

        Returns:
            True if the namespace was created, False if it already existed.

        Raises:
            KubernetesAuthError: The caller may not create namespaces.
            KubernetesError: Any other API failure.
        """
        from kubernetes.client import ApiException, V1Namespace, V1ObjectMeta

        try:
            self.core_v1.create_namespace(V1Namespace(metadata=V1ObjectMeta(name=name)))
        except ApiException as e:
            if e.status == HTTP_CONFLICT:
                logger.debug("namespace_exists", namespace=name)
                return False
            raise self.translate_api_exception(e, namespace=name) from e
        logger.info("namespace_created", namespace=name)
        return True

    @staticmethod
    def translate_api_exception(e: Exception, namespace: str | None = None) -> KubernetesError:
        """Translate a kubernetes ApiException to a custom exception."""
        from kubernetes.client import ApiException

        if not isinstance(e, ApiException):
            return KubernetesError(message=str(e), namespace=namespace)
        if e.status in (401, 403):
            return KubernetesAuthError(
                message=e.reason or "Authentication/authorization failed",
                status_code=e.status,
            )
        return KubernetesError(
            message=e.reason or f"Kubernetes API error: {e.status}",
            status_code=e.status,
            namespace=namespace,
        )
