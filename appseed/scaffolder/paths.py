"""Path resolution and projection.

``resolve_app_path`` turns the single path argument given on the command line
into the destination directory, import path and short application name.
``project_path`` maps an entry of the template tree onto the generated
project, producing both the display ("clean") path and the real destination.
"""

from __future__ import annotations

import posixpath
from pathlib import Path, PurePath, PurePosixPath
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from appseed.config import ProjectConfig


TEMPLATE_SUFFIX = ".tmpl"
TEMPLATES_SEGMENT = "templates"


class InvalidPathError(ValueError):
    """Raised when a path argument cannot yield a usable application name."""

    def __init__(self, path_arg: str, reason: str) -> None:
        self.path_arg = path_arg
        super().__init__(f"invalid app path {path_arg!r}: {reason}")


class ResolvedPath(NamedTuple):
    app_path: Path
    import_path: str
    app_name: str


class ProjectedPath(NamedTuple):
    clean_path: str
    dest_path: Path


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def resolve_app_path(path_arg: str, workspace_root: str | PurePath) -> ResolvedPath:
    """Resolve a user-supplied project path against the workspace root.

    * ``/a/b`` is taken as an import path already: the app lives at
      ``<workspace_root>/src/a/b`` and the import path keeps its leading
      slash.
    * ``./a/b`` and ``a/b`` are relative import paths: the leading marker is
      dropped and the app lives at ``<workspace_root>/src/a/b``.

    Examples::

        resolve_app_path("/test", "testpath/test")
        -> (Path("testpath/test/src/test"), "/test", "test")

        resolve_app_path("./stuff/test", "testpath/test")
        -> (Path("testpath/test/src/stuff/test"), "stuff/test", "test")

    Raises:
        InvalidPathError: For ``.``, ``/``, empty input, or paths that climb
            out of the workspace with ``..``.
    """
    if not path_arg or not path_arg.strip():
        raise InvalidPathError(path_arg, "path is empty")

    cleaned = posixpath.normpath(path_arg)
    absolute = cleaned.startswith("/")
    relative = cleaned.lstrip("/")

    if relative in ("", "."):
        raise InvalidPathError(path_arg, "does not name an application directory")
    if relative.split("/")[0] == "..":
        raise InvalidPathError(path_arg, "must not point outside the workspace")

    app_name = posixpath.basename(relative)
    import_path = "/" + relative if absolute else relative
    app_path = Path(workspace_root) / "src" / relative
    return ResolvedPath(app_path=app_path, import_path=import_path, app_name=app_name)


# ---------------------------------------------------------------------------
# Projection
# ---------------------------------------------------------------------------


def is_template(path: str | PurePath) -> bool:
    """Return whether *path* names a template file."""
    return PurePosixPath(str(path)).name.endswith(TEMPLATE_SUFFIX)


def strip_template_suffix(name: str) -> str:
    if name.endswith(TEMPLATE_SUFFIX):
        return name[: -len(TEMPLATE_SUFFIX)]
    return name


def project_path(
    template_path: str | PurePath,
    tree_root: str | PurePath,
    config: ProjectConfig,
) -> ProjectedPath:
    """Map a template-tree path onto the generated project.

    The tree root is the ``templates`` segment that gets replaced by the
    application name.  When *tree_root* is not itself named ``templates``, a
    leading ``templates`` segment of the relative path plays that role.
    Deeper ``templates`` directories are kept.  ``.tmpl`` is stripped from
    the final component only.

    Example::

        project_path("/lol/templates/file.tmpl", "/lol", cfg)  # app_path=/test/myapp
        -> ProjectedPath("myapp/file", Path("/test/myapp/file"))
    """
    entry = PurePosixPath(posixpath.normpath(str(template_path)))
    root = PurePosixPath(posixpath.normpath(str(tree_root)))
    parts = list(entry.relative_to(root).parts)

    if root.name != TEMPLATES_SEGMENT and parts[:1] == [TEMPLATES_SEGMENT]:
        parts = parts[1:]
    if parts:
        parts[-1] = strip_template_suffix(parts[-1])

    clean_path = posixpath.join(config.app_name, *parts)
    dest_path = config.app_path.joinpath(*parts)
    return ProjectedPath(clean_path=clean_path, dest_path=dest_path)


def is_within(path: str | PurePath, root: str | PurePath) -> bool:
    """Return whether *path* is *root* or lies beneath it (lexically)."""
    candidate = PurePosixPath(posixpath.normpath(str(path)))
    base = PurePosixPath(posixpath.normpath(str(root)))
    return candidate == base or base in candidate.parents
