"""Shared pytest fixtures for up_cli tests."""

from __future__ import annotations

import io
import logging
import os
import tarfile
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
import typer
import yaml
from typer.testing import CliRunner

from up_cli.cli.main import app


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def temp_dir() -> Generator[Path]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear UP_ prefixed environment variables for each test."""
    for key in list(os.environ.keys()):
        if key.startswith("UP_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def isolate_user_files(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Keep config and log files out of the home directory and drop added handlers."""
    monkeypatch.setattr("up_cli.logging.config.LOG_DIR", tmp_path / "logs")
    monkeypatch.setattr("up_cli.logging.config.LOG_FILE", tmp_path / "logs" / "up.log")
    monkeypatch.setattr("up_cli.core.config.models.CONFIG_FILE", tmp_path / "config.yaml")
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    yield
    for handler in root.handlers:
        if handler not in original_handlers:
            handler.close()
    root.handlers = original_handlers


@pytest.fixture
def make_chart_archive() -> Callable[..., Path]:
    """Return a factory writing a packaged chart ``.tgz``.

    The factory takes the destination path and the ``Chart.yaml`` content;
    pass ``chart_yaml=None`` to build an archive without one.
    """

    def _make(
        path: Path,
        chart_yaml: dict[str, object] | str | None = None,
        chart_dir: str = "universal-crossplane",
    ) -> Path:
        if isinstance(chart_yaml, dict):
            content = yaml.safe_dump(chart_yaml)
        else:
            content = chart_yaml
        with tarfile.open(path, "w:gz") as archive:
            files = {f"{chart_dir}/values.yaml": "replicas: 1\n"}
            if content is not None:
                files[f"{chart_dir}/Chart.yaml"] = content
            for name, text in files.items():
                data = text.encode()
                info = tarfile.TarInfo(name)
                info.size = len(data)
                archive.addfile(info, io.BytesIO(data))
        return path

    return _make


@pytest.fixture
def cli_app() -> typer.Typer:
    """Return the CLI app for testing."""
    return app
