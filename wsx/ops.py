"""Workspace operations that work on explicit arguments rather than UI state."""

from __future__ import annotations

import time
from collections.abc import Mapping
from pathlib import Path

from wsx import tmux
from wsx.tmux import SessionStatus
from wsx.workspace import WorkspaceState

IDLE_SECS = 3


def is_recently_active(last_activity: float | None, now: float | None = None) -> bool:
    """True if ``last_activity`` lies less than ``IDLE_SECS`` before ``now``."""
    if last_activity is None:
        return False
    if now is None:
        now = time.time()
    return now - last_activity < IDLE_SECS


def update_activity(
    workspace: WorkspaceState,
    activity: Mapping[str, SessionStatus],
    now: float | None = None,
) -> bool:
    """Apply live tmux activity to every session; True if a visible flag changed."""
    if now is None:
        now = time.time()
    changed = False
    for project in workspace.projects:
        for wt in project.worktrees:
            for sess in wt.sessions:
                if sess.muted:
                    continue
                status = activity.get(sess.name)
                if status is None:
                    continue
                old_bell, old_running = sess.has_activity, sess.has_running_app
                sess.has_activity = status.has_bell
                sess.has_running_app = status.has_running_app
                ts = status.last_activity_ts
                sess.last_activity = float(ts) if ts > 0 else None
                if is_recently_active(sess.last_activity, now):
                    # New output clears a dismissed running-app notification.
                    sess.running_app_suppressed = False
                if (sess.has_activity, sess.has_running_app) != (old_bell, old_running):
                    changed = True
    return changed


def expand_path(s: str) -> Path:
    """Expand a leading ``~/`` to the home directory."""
    if s.startswith("~/"):
        try:
            return Path.home() / s[2:]
        except RuntimeError:
            pass
    return Path(s)


def create_session(
    proj_name: str,
    wt_slug: str,
    wt_path: Path | str,
    session_name: str | None = None,
    command: str | None = None,
) -> tuple[str, str]:
    """Create a tmux session for a worktree and optionally send a first command.

    Returns ``(tmux_name, display_name)``. The tmux name is prefixed with
    ``{proj_name}-{wt_slug}-``; the display name is what follows it.
    """
    if session_name:
        base_display = session_name
    elif command is not None:
        words = command.split()
        base_display = words[0] if words else proj_name
    else:
        base_display = proj_name

    prefix = f"{proj_name}-{wt_slug}-"
    tmux_name = tmux.unique_session_name(prefix + base_display)
    display_name = tmux_name[len(prefix):]
    tmux.create_session(tmux_name, wt_path)
    if command is not None:
        tmux.send_keys(tmux_name, command)
    return tmux_name, display_name


def delete_session(name: str) -> None:
    """Kill a tmux session by name."""
    tmux.kill_session(name)


def rename_session(old_name: str, new_name: str) -> None:
    tmux.rename_session(old_name, new_name)