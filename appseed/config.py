"""appseed configuration.

Typed configuration for a scaffolding run. ``ProjectConfig`` describes the
project being generated and is immutable for the duration of a run;
``Settings`` holds the environment-derived locations (workspace root and
template tree) the CLI needs to build one.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class BootstrapVariant(str, Enum):
    """Which flavour of the Bootstrap CSS framework to ship."""

    NONE = "none"
    REGULAR = "regular"
    FLEX = "flex"
    GRID_ONLY = "gridonly"
    REBOOT_ONLY = "rebootonly"
    GRID_REBOOT_ONLY = "gridrebootonly"


class ProjectConfig(BaseModel):
    """Pydantic model describing the project to scaffold.

    ``app_name`` must always be the final segment of ``app_path``; both are
    normally produced together by
    :func:`appseed.scaffolder.paths.resolve_app_path`.
    """

    model_config = ConfigDict(frozen=True)

    app_path: Path = Field(..., description="Destination root for the generated project")
    app_name: str = Field(..., min_length=1, description="Short name substituted into templates")
    import_path: str = Field(default="", description="Import path of the generated package")

    no_readme: bool = Field(default=False, description="Omit the README")
    no_git_ignore: bool = Field(default=False, description="Omit the .gitignore file")
    no_config: bool = Field(default=False, description="Omit the application config file")
    no_font_awesome: bool = Field(default=False, description="Omit Font Awesome assets")
    no_bootstrap_js: bool = Field(default=False, description="Omit the Bootstrap JS bundle")
    no_sessions: bool = Field(default=False, description="Omit session support")
    bootstrap: BootstrapVariant = Field(default=BootstrapVariant.REGULAR)

    tls_common_name: str = Field(default="localhost", min_length=1)
    tls_certs_only: bool = Field(
        default=False, description="Only provision TLS certificates, skip the tree"
    )
    silent: bool = Field(default=False, description="Suppress progress output")

    @model_validator(mode="after")
    def _check_app_name(self) -> "ProjectConfig":
        if not str(self.app_path) or str(self.app_path) == ".":
            raise ValueError("app_path must not be empty")
        if self.app_path.name != self.app_name:
            raise ValueError(
                f"app_name {self.app_name!r} is not the last segment of {str(self.app_path)!r}"
            )
        return self

    @classmethod
    def from_path(
        cls, path_arg: str, workspace_root: str | Path, **options: Any
    ) -> "ProjectConfig":
        """Resolve *path_arg* against *workspace_root* and build a config.

        Any remaining keyword arguments are passed through as field values
        (feature toggles, TLS settings, ...).

        Raises:
            InvalidPathError: If *path_arg* does not yield a usable app name.
        """
        from appseed.scaffolder.paths import resolve_app_path

        resolved = resolve_app_path(path_arg, workspace_root)
        return cls(
            app_path=resolved.app_path,
            app_name=resolved.app_name,
            import_path=resolved.import_path,
            **options,
        )

    def template_context(self) -> dict[str, Any]:
        """Return the substitution context exposed to template files."""
        return self.model_dump(mode="json")


class Settings(BaseModel):
    """Environment-provided locations used to build a ``ProjectConfig``."""

    workspace_root: Path = Field(default_factory=lambda: Path.home() / "workspace")
    template_dir: Path = Field(default=Path("templates"))

    @classmethod
    def from_env(cls) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            APPSEED_WORKSPACE, APPSEED_TEMPLATE_DIR.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("APPSEED_WORKSPACE"):
            kwargs["workspace_root"] = Path(os.environ["APPSEED_WORKSPACE"])
        if os.environ.get("APPSEED_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["APPSEED_TEMPLATE_DIR"])
        return cls(**kwargs)
