"""Rows of the left sidebar tree: projects, worktrees and sessions."""

from __future__ import annotations

import time

from wsx.ansi import Color, Line, Modifier, Span, Style
from wsx.ops import IDLE_SECS
from wsx.workspace import (
    EntryKind,
    Project,
    SessionInfo,
    WorkspaceState,
    WorktreeInfo,
    flatten_tree,
)

_WHITE = Style(fg=Color.WHITE)


def project_line(project: Project) -> Line:
    """``▼ name`` when expanded, ``▶ name [n]`` when collapsed."""
    icon = "▼" if project.expanded else "▶"
    count = "" if project.expanded else f" [{len(project.worktrees)}]"
    return Line([Span(f"{icon} {project.name}{count}",
                      Style(fg=Color.CYAN, modifiers=Modifier.BOLD))])


def worktree_line(project: Project, worktree: WorktreeInfo) -> Line:
    """A worktree row with dirty, remote-tracking, activity and session markers."""
    main_mark = "~ " if worktree.is_main else ""
    if worktree.sessions:
        expand_icon = "▾" if worktree.expanded else "▸"
    else:
        expand_icon = " "
    short_name = worktree.name.removeprefix(f"{project.name}-")
    if worktree.alias is not None:
        display = f"{worktree.alias} ({short_name})"
    elif worktree.is_main:
        display = worktree.branch
    else:
        display = short_name

    spans = [Span(f" {expand_icon} {main_mark}{display}", _WHITE)]

    info = worktree.git_info
    if info is not None:
        if info.modified_files:
            spans.append(Span("*", Style(fg=Color.YELLOW)))
        behind, ahead = info.behind, info.ahead
        if behind > 0 and ahead > 0:
            spans.append(Span(f" ↓{behind}↑{ahead}", Style(fg=Color.MAGENTA)))
        elif behind > 0:
            spans.append(Span(f" ↓{behind}", Style(fg=Color.RED)))
        elif ahead > 0:
            spans.append(Span(f" ↑{ahead}", Style(fg=Color.CYAN)))

    if any(s.has_activity for s in worktree.sessions):
        spans.append(Span(" ●", _WHITE))
    if worktree.sessions and not worktree.expanded:
        spans.append(Span(f" [{len(worktree.sessions)}]", _WHITE))
    return Line(spans)


def session_line(session: SessionInfo, now: float | None = None) -> Line:
    """A session row with its status icon and idle time."""
    if now is None:
        now = time.time()
    elapsed = None if session.last_activity is None else max(now - session.last_activity, 0.0)
    active = elapsed is not None and elapsed < IDLE_SECS

    if session.muted:
        icon, color = "⊘", Color.DARK_GRAY
    elif session.has_activity:
        icon, color = "●", Color.YELLOW
    elif active:
        icon, color = "◉", Color.GREEN
    elif session.has_running_app and not session.running_app_suppressed:
        icon, color = "●", Color.YELLOW
    else:
        icon, color = "○", Color.GRAY

    idle = f"  {fmt_idle(int(elapsed))}" if elapsed is not None and elapsed >= IDLE_SECS else ""
    return Line([
        Span("  "),
        Span(icon, Style(fg=color)),
        Span(f" {session.display_name}{idle}", Style(fg=(210, 200, 185))),
    ])


def tree_lines(workspace: WorkspaceState, now: float | None = None) -> list[Line]:
    """One line per visible tree entry, in display order."""
    if now is None:
        now = time.time()
    lines = []
    for entry in flatten_tree(workspace):
        project = workspace.projects[entry.project_idx]
        if entry.kind is EntryKind.PROJECT:
            lines.append(project_line(project))
        elif entry.kind is EntryKind.WORKTREE:
            lines.append(worktree_line(project, project.worktrees[entry.worktree_idx]))
        else:
            wt = project.worktrees[entry.worktree_idx]
            lines.append(session_line(wt.sessions[entry.session_idx], now))
    return lines


def tree_title(is_move_mode: bool) -> tuple[str, Color]:
    """Block title and highlight colour of the tree."""
    if is_move_mode:
        return " Workspaces — MOVE ", Color.GREEN
    return " Workspaces ", Color.YELLOW


def fmt_idle(seconds: int) -> str:
    """Compact idle duration: seconds, minutes or hours."""
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m"
    return f"{seconds // 3600}h"


def compute_scroll(selected: int, visible_height: int, current_offset: int) -> int:
    """Scroll offset that keeps ``selected`` comfortably visible."""
    up_pad = max(visible_height // 4, 1)
    down_pad = max(visible_height * 3 // 4, 1)
    if selected < current_offset + up_pad:
        return max(selected - (up_pad - 1), 0)
    if selected >= current_offset + down_pad:
        return max(selected - (down_pad - 1), 0)
    return current_offset