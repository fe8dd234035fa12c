"""Template tree transformation.

Walks a template tree depth-first and materialises every entry that survives
the skip rules under ``config.app_path``: directories are created, static
files copied byte for byte, and ``.tmpl`` files rendered with Jinja2 and
written without their suffix.  Permission bits of the template entries are
carried over to the output.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import PurePath

from appseed.config import ProjectConfig
from appseed.filesystem import FileSystem, FileSystemError, TreeEntry

from .paths import ProjectedPath, is_template, is_within, project_path
from .skips import SkipRule, WalkAction, decide
from .templates import TemplateRenderer


EntryCallback = Callable[[ProjectedPath, TreeEntry], None]


class TreeTransformer:
    """Turns a template tree into a project directory.

    Attributes:
        config: Configuration of the project being generated.
        fs: Filesystem the template tree is read from and the project is
            written to.
        renderer: Renders ``.tmpl`` files.
        on_entry: Optional callback invoked with the projected paths of each
            materialised entry, for progress display.
        generated: Projected paths of every entry written so far, in
            traversal order.
    """

    def __init__(
        self,
        config: ProjectConfig,
        fs: FileSystem,
        renderer: TemplateRenderer | None = None,
        on_entry: EntryCallback | None = None,
        rules: list[SkipRule] | None = None,
    ) -> None:
        self.config = config
        self.fs = fs
        self.renderer = renderer or TemplateRenderer()
        self.on_entry = on_entry
        self.rules = rules
        self.generated: list[ProjectedPath] = []
        self._context = config.template_context()

    # -- Public API --------------------------------------------------------

    def run(self, tree_root: str | PurePath) -> list[ProjectedPath]:
        """Transform the whole tree rooted at *tree_root*.

        The first failing entry aborts the run; whatever was written before
        it is left in place.

        Returns:
            Projected paths of every generated entry, in traversal order.

        Raises:
            FileSystemError: A read or write failed, or *tree_root* is not a
                directory.
            TemplateRenderError: A template file failed to render.
        """
        root_entry = self.fs.stat(tree_root)
        if not root_entry.is_dir:
            raise FileSystemError("walk", tree_root, "template root is not a directory")
        self._walk(tree_root, root_entry)
        return list(self.generated)

    def visit(self, tree_root: str | PurePath, entry: TreeEntry) -> WalkAction:
        """Process a single entry and tell the traversal how to proceed."""
        decision = decide(self.config, tree_root, entry, self.rules)
        if decision.skip:
            return decision.action

        projected = self._materialize(tree_root, entry)
        self.generated.append(projected)
        if self.on_entry is not None:
            self.on_entry(projected, entry)
        return WalkAction.CONTINUE

    # -- Traversal ---------------------------------------------------------

    def _walk(self, tree_root: str | PurePath, entry: TreeEntry) -> None:
        action = self.visit(tree_root, entry)
        if not entry.is_dir or action is WalkAction.SKIP_SUBTREE:
            return
        for child in self.fs.list_dir(entry.path):
            self._walk(tree_root, child)

    def _materialize(self, tree_root: str | PurePath, entry: TreeEntry) -> ProjectedPath:
        projected = project_path(entry.path, tree_root, self.config)
        dest = projected.dest_path
        if not is_within(dest, self.config.app_path):
            raise FileSystemError("write", dest, f"outside of {self.config.app_path}")

        if entry.is_dir:
            self.fs.make_dirs(dest, entry.mode)
            return projected

        data = self.fs.read_bytes(entry.path)
        if is_template(entry.path):
            data = self.renderer.render_bytes(data, self._context, name=str(entry.path))

        # Skipped or not-yet-visited parents still need to exist on output
        if not self.fs.exists(dest.parent):
            self.fs.make_dirs(dest.parent)
        self.fs.write_bytes(dest, data, entry.mode)
        return projected
