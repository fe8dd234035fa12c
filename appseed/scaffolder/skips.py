"""Skip rules for template-tree entries.

Every feature toggle on :class:`~appseed.config.ProjectConfig` maps to one
``SkipRule``: a predicate on the entry's path relative to the template root,
paired with a predicate on the config.  An entry is omitted by the first
rule whose two predicates both hold.  Two structural checks run before the
table: the template root itself is never copied, and directories listed in
``SKIP_DIRS`` are dropped together with everything beneath them.
"""

from __future__ import annotations

import posixpath
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath, PurePosixPath

from appseed.config import BootstrapVariant, ProjectConfig
from appseed.filesystem import TreeEntry

from .paths import strip_template_suffix


# Directories that are never part of a generated project, whatever the config.
SKIP_DIRS: frozenset[str] = frozenset({"i18n"})

_FONT_AWESOME_PREFIXES = ("font-awesome", "fontawesome")
_PARTIAL_BOOTSTRAP = frozenset({
    BootstrapVariant.GRID_ONLY,
    BootstrapVariant.REBOOT_ONLY,
    BootstrapVariant.GRID_REBOOT_ONLY,
})
_FULL_BOOTSTRAP = frozenset({BootstrapVariant.REGULAR, BootstrapVariant.FLEX})


class WalkAction(Enum):
    """What the traversal should do with an entry."""

    CONTINUE = "continue"
    SKIP_ENTRY = "skip_entry"
    SKIP_SUBTREE = "skip_subtree"


@dataclass(frozen=True)
class SkipDecision:
    skip: bool
    stop_descent: bool = False
    rule: str = ""

    @property
    def action(self) -> WalkAction:
        if self.stop_descent:
            return WalkAction.SKIP_SUBTREE
        if self.skip:
            return WalkAction.SKIP_ENTRY
        return WalkAction.CONTINUE


KEEP = SkipDecision(skip=False)


@dataclass(frozen=True)
class SkipRule:
    """Omit entries matching ``matches`` whenever ``applies`` holds for the config."""

    name: str
    matches: Callable[[PurePosixPath], bool]
    applies: Callable[[ProjectConfig], bool]


# ---------------------------------------------------------------------------
# Entry predicates
# ---------------------------------------------------------------------------


def _name(rel: PurePosixPath) -> str:
    return strip_template_suffix(rel.name)


def _is_readme(rel: PurePosixPath) -> bool:
    return _name(rel).startswith("README")


def _is_sessions(rel: PurePosixPath) -> bool:
    return (
        rel.parent.name == "app"
        and rel.name.startswith("sessions.")
        and rel.name.endswith(".tmpl")
    )


def _is_git_ignore(rel: PurePosixPath) -> bool:
    return _name(rel) == ".gitignore"


def _is_app_config(rel: PurePosixPath) -> bool:
    return _name(rel) in ("config.toml", "cnf.toml")


def _is_font_awesome(rel: PurePosixPath) -> bool:
    return any(part.startswith(_FONT_AWESOME_PREFIXES) for part in rel.parts)


def _is_bootstrap(rel: PurePosixPath) -> bool:
    return _name(rel).startswith("bootstrap")


def _is_bootstrap_js(rel: PurePosixPath) -> bool:
    name = _name(rel)
    return name.startswith("bootstrap") and name.endswith((".js", ".js.map"))


def _is_bootstrap_full_css(rel: PurePosixPath) -> bool:
    return _name(rel).startswith(("bootstrap.css", "bootstrap.min.css"))


def _is_bootstrap_grid(rel: PurePosixPath) -> bool:
    return _name(rel).startswith("bootstrap-grid")


def _is_bootstrap_reboot(rel: PurePosixPath) -> bool:
    return _name(rel).startswith("bootstrap-reboot")


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------


SKIP_RULES: list[SkipRule] = [
    SkipRule("readme", _is_readme, lambda cfg: cfg.no_readme),
    SkipRule("sessions", _is_sessions, lambda cfg: cfg.no_sessions),
    SkipRule("gitignore", _is_git_ignore, lambda cfg: cfg.no_git_ignore),
    SkipRule("config", _is_app_config, lambda cfg: cfg.no_config),
    SkipRule("font-awesome", _is_font_awesome, lambda cfg: cfg.no_font_awesome),
    SkipRule("bootstrap", _is_bootstrap, lambda cfg: cfg.bootstrap == BootstrapVariant.NONE),
    SkipRule(
        "bootstrap-js",
        _is_bootstrap_js,
        lambda cfg: cfg.no_bootstrap_js or cfg.bootstrap in _PARTIAL_BOOTSTRAP,
    ),
    SkipRule(
        "bootstrap-full-css",
        _is_bootstrap_full_css,
        lambda cfg: cfg.bootstrap in _PARTIAL_BOOTSTRAP,
    ),
    SkipRule(
        "bootstrap-grid",
        _is_bootstrap_grid,
        lambda cfg: cfg.bootstrap in _FULL_BOOTSTRAP
        or cfg.bootstrap == BootstrapVariant.REBOOT_ONLY,
    ),
    SkipRule(
        "bootstrap-reboot",
        _is_bootstrap_reboot,
        lambda cfg: cfg.bootstrap in _FULL_BOOTSTRAP
        or cfg.bootstrap == BootstrapVariant.GRID_ONLY,
    ),
]


def decide(
    config: ProjectConfig,
    tree_root: str | PurePath,
    entry: TreeEntry,
    rules: list[SkipRule] | None = None,
) -> SkipDecision:
    """Decide whether *entry* is left out of the generated project.

    Args:
        config: The run configuration.
        tree_root: Root of the template tree being walked.
        entry: The entry under consideration.
        rules: Rule table to consult; defaults to ``SKIP_RULES``.

    Returns:
        A ``SkipDecision``.  ``stop_descent`` is only ever set for
        directories in ``SKIP_DIRS``.
    """
    root = PurePosixPath(posixpath.normpath(str(tree_root)))
    path = PurePosixPath(posixpath.normpath(str(entry.path)))
    if path == root:
        return SkipDecision(skip=True, rule="root")
    if entry.is_dir and entry.name in SKIP_DIRS:
        return SkipDecision(skip=True, stop_descent=True, rule="skip-dir")

    rel = path.relative_to(root)
    for rule in SKIP_RULES if rules is None else rules:
        if rule.matches(rel) and rule.applies(config):
            return SkipDecision(skip=True, rule=rule.name)
    return KEEP
