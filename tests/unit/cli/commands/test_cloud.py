"""Tests for the cloud controlplane command group."""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from up_cli.cli.main import app
from up_cli.integrations.cloud.exceptions import (
    CloudAuthError,
    CloudConfigError,
    CloudNotFoundError,
)
from up_cli.integrations.cloud.models import ControlPlane

MODULE = "up_cli.cli.commands.cloud"


@pytest.fixture
def mock_client() -> Iterator[MagicMock]:
    client = MagicMock()
    client.__enter__.return_value = client
    with patch(f"{MODULE}.get_client", return_value=client):
        yield client


def _cp(name: str = "dev", cp_id: str = "cp-1") -> ControlPlane:
    return ControlPlane(id=cp_id, name=name, description="development", status="ready")


@pytest.mark.unit
@pytest.mark.cloud
class TestControlPlaneCommands:
    """Tests for `up cloud controlplane`."""

    def test_create(self, cli_runner: CliRunner, mock_client: MagicMock) -> None:
        mock_client.create_control_plane.return_value = _cp()

        result = cli_runner.invoke(
            app, ["cloud", "controlplane", "create", "dev", "-d", "development"]
        )

        assert result.exit_code == 0
        mock_client.create_control_plane.assert_called_once_with("dev", "development")
        assert "Created control plane dev" in result.stdout

    def test_create_without_description(
        self, cli_runner: CliRunner, mock_client: MagicMock
    ) -> None:
        mock_client.create_control_plane.return_value = _cp()

        cli_runner.invoke(app, ["cloud", "controlplane", "create", "dev"])

        mock_client.create_control_plane.assert_called_once_with("dev", "")

    def test_list(self, cli_runner: CliRunner, mock_client: MagicMock) -> None:
        mock_client.list_control_planes.return_value = [_cp(), _cp("prod", "cp-2")]

        result = cli_runner.invoke(app, ["cloud", "controlplane", "list"])

        assert result.exit_code == 0
        assert "dev" in result.stdout
        assert "prod" in result.stdout

    def test_list_empty(self, cli_runner: CliRunner, mock_client: MagicMock) -> None:
        mock_client.list_control_planes.return_value = []

        result = cli_runner.invoke(app, ["cloud", "controlplane", "list"])

        assert result.exit_code == 0
        assert "No control planes found" in result.stdout

    def test_get(self, cli_runner: CliRunner, mock_client: MagicMock) -> None:
        mock_client.get_control_plane.return_value = _cp()

        result = cli_runner.invoke(app, ["cloud", "controlplane", "get", "cp-1"])

        assert result.exit_code == 0
        mock_client.get_control_plane.assert_called_once_with("cp-1")
        assert "ready" in result.stdout

    def test_get_not_found(self, cli_runner: CliRunner, mock_client: MagicMock) -> None:
        mock_client.get_control_plane.side_effect = CloudNotFoundError("Resource not found")

        result = cli_runner.invoke(app, ["cloud", "controlplane", "get", "cp-9"])

        assert result.exit_code == 1
        assert "not found" in result.stdout

    def test_delete(self, cli_runner: CliRunner, mock_client: MagicMock) -> None:
        result = cli_runner.invoke(app, ["cloud", "controlplane", "delete", "cp-1"])

        assert result.exit_code == 0
        mock_client.delete_control_plane.assert_called_once_with("cp-1")

    def test_auth_error(self, cli_runner: CliRunner, mock_client: MagicMock) -> None:
        mock_client.list_control_planes.side_effect = CloudAuthError(
            "Invalid Upbound Cloud token", details="Check UP_TOKEN"
        )

        result = cli_runner.invoke(app, ["cloud", "controlplane", "list"])

        assert result.exit_code == 1
        assert "Invalid Upbound Cloud token" in result.stdout
        assert "UP_TOKEN" in result.stdout

    def test_missing_token(self, cli_runner: CliRunner) -> None:
        with patch(
            f"{MODULE}.get_client",
            side_effect=CloudConfigError("Upbound Cloud token not configured"),
        ):
            result = cli_runner.invoke(app, ["cloud", "controlplane", "list"])

        assert result.exit_code == 1
        assert "token not configured" in result.stdout
