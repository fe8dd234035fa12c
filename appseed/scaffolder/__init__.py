"""appseed scaffolder -- turns a template tree into a new application.

Quick usage::

    from appseed.config import ProjectConfig
    from appseed.filesystem import LocalFileSystem
    from appseed.scaffolder import TreeTransformer, generate_tls_certs

    config = ProjectConfig.from_path("./me/myapp", "/home/me/workspace")
    fs = LocalFileSystem()
    TreeTransformer(config, fs).run("templates")
    generate_tls_certs(config, fs)
"""

from appseed.scaffolder.certs import CertGenerationError, CertPaths, generate_tls_certs
from appseed.scaffolder.generator import TreeTransformer
from appseed.scaffolder.paths import (
    InvalidPathError,
    ProjectedPath,
    ResolvedPath,
    project_path,
    resolve_app_path,
)
from appseed.scaffolder.skips import SKIP_RULES, SkipDecision, WalkAction, decide
from appseed.scaffolder.templates import TemplateRenderError, TemplateRenderer

__all__ = [
    "CertGenerationError",
    "CertPaths",
    "InvalidPathError",
    "ProjectedPath",
    "ResolvedPath",
    "SKIP_RULES",
    "SkipDecision",
    "TemplateRenderError",
    "TemplateRenderer",
    "TreeTransformer",
    "WalkAction",
    "decide",
    "generate_tls_certs",
    "project_path",
    "resolve_app_path",
]
