"""Upbound Cloud control plane API client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from up_cli.integrations.cloud.exceptions import (
    CloudAPIError,
    CloudAuthError,
    CloudConfigError,
    CloudConnectionError,
    CloudNotFoundError,
)
from up_cli.integrations.cloud.models import ControlPlane, control_planes_from_list

if TYPE_CHECKING:
    from up_cli.core.config.models import CloudConfig

logger = structlog.get_logger()


class ControlPlaneClient:
    """HTTP client for hosted control planes on Upbound Cloud.

    Example:
        ```python
        config = load_settings().cloud
        with ControlPlaneClient(config) as client:
            for cp in client.list_control_planes():
                print(cp.name)
        ```
    """

    def __init__(self, config: CloudConfig) -> None:
        """Initialize the client.

        Raises:
            CloudConfigError: No token is configured.
        """
        if config.token is None:
            raise CloudConfigError(
                "Upbound Cloud token not configured",
                details="Set UP_TOKEN or cloud.token in the config file",
            )
        self.config = config
        self._client = httpx.Client(
            base_url=config.endpoint,
            timeout=httpx.Timeout(30.0),
            headers={
                "Authorization": f"Bearer {config.token.get_secret_value()}",
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
        )
        logger.debug("cloud_client_initialized", endpoint=config.endpoint)

    def __enter__(self) -> ControlPlaneClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _account(self) -> str:
        if not self.config.account:
            raise CloudConfigError(
                "Upbound Cloud account not configured",
                details="Set UP_ACCOUNT or cloud.account in the config file",
            )
        return self.config.account

    @retry(
        retry=retry_if_exception_type(CloudConnectionError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    def _request(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        """Make an HTTP request to the Upbound Cloud API.

        Raises:
            CloudConnectionError: On connection failure or timeout.
            CloudAuthError: On 401/403.
            CloudNotFoundError: On 404.
            CloudAPIError: On any other error status.
        """
        try:
            response = self._client.request(method, endpoint, **kwargs)
        except httpx.ConnectError as e:
            logger.error("cloud_connection_error", endpoint=endpoint, error=str(e))
            raise CloudConnectionError(
                f"Failed to connect to Upbound Cloud API: {e}",
                details=str(e),
            ) from e
        except httpx.TimeoutException as e:
            logger.error("cloud_timeout", endpoint=endpoint, error=str(e))
            raise CloudConnectionError(
                "Request to Upbound Cloud API timed out",
                details=str(e),
            ) from e

        if response.status_code == 401:
            raise CloudAuthError("Invalid Upbound Cloud token", details="Check UP_TOKEN")
        if response.status_code == 403:
            raise CloudAuthError(
                "Access denied",
                details="Your token may not have sufficient permissions",
            )
        if response.status_code == 404:
            raise CloudNotFoundError("Resource not found", status_code=404)
        if response.status_code >= 400:
            try:
                message = response.json().get("message", response.text)
            except Exception:
                message = response.text
            raise CloudAPIError(
                f"Upbound Cloud API error: {message}",
                status_code=response.status_code,
                details=response.text,
            )

        if response.status_code == 204 or not response.content:
            return {}
        return response.json()

    def create_control_plane(self, name: str, description: str = "") -> ControlPlane:
        """Create a hosted control plane in the configured account."""
        payload = {"account": self._account(), "name": name, "description": description}
        logger.debug("creating_control_plane", name=name, account=payload["account"])
        data = self._request("POST", "/v1/controlPlanes", json=payload)
        cp = ControlPlane.from_api_response(data)
        logger.info("control_plane_created", id=cp.id, name=cp.name)
        return cp

    def list_control_planes(self) -> list[ControlPlane]:
        account = self._account()
        data = self._request("GET", f"/v1/accounts/{account}/controlPlanes")
        control_planes = control_planes_from_list(data)
        logger.debug("listed_control_planes", account=account, count=len(control_planes))
        return control_planes

    def get_control_plane(self, control_plane_id: str) -> ControlPlane:
        data = self._request("GET", f"/v1/controlPlanes/{control_plane_id}")
        return ControlPlane.from_api_response(data)

    def delete_control_plane(self, control_plane_id: str) -> None:
        self._request("DELETE", f"/v1/controlPlanes/{control_plane_id}")
        logger.info("control_plane_deleted", id=control_plane_id)
