"""UXP installer configuration."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

from up_cli.services.uxp.interfaces import HomeDirFn

DEFAULT_CACHE_DIR = Path(".cache") / "up" / "charts"
DEFAULT_NAMESPACE = "upbound-system"
DEFAULT_REPO_URL = "https://charts.upbound.io/stable"
DEFAULT_UNSTABLE_REPO_URL = "https://charts.upbound.io/main"

# The same logical installation may exist under either chart name.
CANONICAL_CHART_NAME = "universal-crossplane"
LEGACY_CHART_NAME = "crossplane"

DEFAULT_CHART_NAME = CANONICAL_CHART_NAME


class InstallerConfig(BaseModel):
    """Immutable settings for one installer invocation.

    Build instances with :meth:`create`, which applies the defaults and
    picks the repository URL.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    repo_url: str = DEFAULT_REPO_URL
    chart_name: str = DEFAULT_CHART_NAME
    namespace: str = DEFAULT_NAMESPACE
    cache_dir: Path
    unstable: bool = False
    rollback_on_error: bool = False
    force: bool = False

    @field_validator("repo_url")
    @classmethod
    def validate_repo_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://", "oci://", "file://")):
            raise ValueError(f"unsupported repository URL: {v}")
        return v

    @field_validator("chart_name", "namespace")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("must not be empty")
        return v

    @classmethod
    def create(
        cls,
        *,
        repo_url: str | None = None,
        chart_name: str | None = None,
        namespace: str | None = None,
        cache_dir: str | Path | None = None,
        unstable: bool = False,
        rollback_on_error: bool = False,
        force: bool = False,
        home: HomeDirFn = Path.home,
    ) -> InstallerConfig:
        """Resolve defaults into a configuration.

        The unstable repository is used only when unstable versions are
        requested and no repository URL was given. Without an explicit cache
        directory the cache lives under the user's home directory.

        Raises:
            RuntimeError: If the home directory cannot be determined.
        """
        if repo_url is None:
            repo_url = DEFAULT_UNSTABLE_REPO_URL if unstable else DEFAULT_REPO_URL

        if cache_dir is None or str(cache_dir) == "":
            cache_dir = home() / DEFAULT_CACHE_DIR

        return cls(
            repo_url=repo_url,
            chart_name=chart_name or DEFAULT_CHART_NAME,
            namespace=namespace or DEFAULT_NAMESPACE,
            cache_dir=Path(cache_dir).expanduser(),
            unstable=unstable,
            rollback_on_error=rollback_on_error,
            force=force,
        )
