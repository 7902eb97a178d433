"""Workspace model: projects, worktrees, sessions and the flattened tree view."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path, PurePath


@dataclass
class ProjectConfig:
    """Per-project settings for worktree creation."""

    post_create: str | None = None
    copy_includes: list[str] = field(default_factory=list)
    copy_excludes: list[str] = field(default_factory=list)


@dataclass
class CommitSummary:
    hash: str
    message: str


@dataclass
class GitInfo:
    recent_commits: list[CommitSummary] = field(default_factory=list)
    modified_files: list[str] = field(default_factory=list)
    ahead: int = 0
    behind: int = 0
    remote_branch: str | None = None


@dataclass
class SessionInfo:
    """A tmux session attached to a worktree.

    ``last_activity`` is a Unix timestamp in seconds, or None when unknown.
    """

    name: str
    display_name: str
    has_activity: bool = False
    pane_capture: str | None = None
    last_activity: float | None = None
    has_running_app: bool = False
    running_app_suppressed: bool = False
    muted: bool = False


@dataclass
class WorktreeInfo:
    name: str
    branch: str
    path: Path
    is_main: bool = False
    alias: str | None = None
    sessions: list[SessionInfo] = field(default_factory=list)
    expanded: bool = True
    git_info: GitInfo | None = None
    fetch_failed: bool = False
    last_fetched: float | None = None

    def display_name(self) -> str:
        """The alias if one is set, otherwise the worktree name."""
        return self.alias if self.alias is not None else self.name

    def session_slug(self, project_name: str) -> str:
        return canonical_session_slug(project_name, self.path)


@dataclass
class Project:
    name: str
    path: Path
    default_branch: str = "main"
    worktrees: list[WorktreeInfo] = field(default_factory=list)
    config: ProjectConfig | None = None
    expanded: bool = True


class EntryKind(enum.Enum):
    PROJECT = "project"
    WORKTREE = "worktree"
    SESSION = "session"


@dataclass(frozen=True)
class FlatEntry:
    """One visible row of the tree; also used as the current selection."""

    kind: EntryKind
    project_idx: int
    worktree_idx: int | None = None
    session_idx: int | None = None


def _get(items: list, idx: int):
    if 0 <= idx < len(items):
        return items[idx]
    return None


@dataclass
class WorkspaceState:
    projects: list[Project] = field(default_factory=list)

    def worktree(self, pi: int, wi: int) -> WorktreeInfo | None:
        project = _get(self.projects, pi)
        if project is None:
            return None
        return _get(project.worktrees, wi)

    def session(self, pi: int, wi: int, si: int) -> SessionInfo | None:
        wt = self.worktree(pi, wi)
        if wt is None:
            return None
        return _get(wt.sessions, si)

    def get_selection(self, flat_idx: int, flat: list[FlatEntry]) -> FlatEntry | None:
        """Resolve a flat index to the entry it points at, or None."""
        return _get(flat, flat_idx)


def _sanitize_slug(raw: str) -> str:
    return "".join(c if c.isalnum() or c in "-_" else "-" for c in raw)


def _legacy_branch_slug(branch: str) -> str:
    return _sanitize_slug(branch.replace("/", "-"))


def canonical_session_slug(project_name: str, worktree_path: PurePath | str) -> str:
    dir_name = PurePath(worktree_path).name
    if dir_name in ("", ".."):
        dir_name = project_name
    short_name = dir_name.removeprefix(f"{project_name}-")
    return _sanitize_slug(short_name)


def session_display_name_from_tmux(
    tmux_name: str,
    project_name: str,
    worktree_path: PurePath | str,
    branch: str,
    alias: str | None,
) -> str:
    """Recover the user-visible part of a tmux session name."""
    prefixes = [
        f"{project_name}-{canonical_session_slug(project_name, worktree_path)}-",
        # Older builds prefixed by branch or alias slug.
        f"{project_name}-{_legacy_branch_slug(branch)}-",
    ]
    if alias is not None:
        prefixes.append(f"{project_name}-{_sanitize_slug(alias)}-")
    for prefix in prefixes:
        if tmux_name.startswith(prefix):
            return tmux_name[len(prefix):]

    # Last resort: historical `{project}-{any_slug}-{display}` names.
    project_prefix = f"{project_name}-"
    if tmux_name.startswith(project_prefix):
        rest = tmux_name[len(project_prefix):]
        _, sep, display = rest.partition("-")
        if sep:
            return display

    return tmux_name


def flatten_tree(workspace: WorkspaceState) -> list[FlatEntry]:
    """Flatten the workspace into visible rows according to expand state."""
    result: list[FlatEntry] = []
    for pi, project in enumerate(workspace.projects):
        result.append(FlatEntry(EntryKind.PROJECT, pi))
        if not project.expanded:
            continue
        for wi, wt in enumerate(project.worktrees):
            result.append(FlatEntry(EntryKind.WORKTREE, pi, wi))
            if wt.expanded:
                result.extend(
                    FlatEntry(EntryKind.SESSION, pi, wi, si)
                    for si in range(len(wt.sessions))
                )
    return result