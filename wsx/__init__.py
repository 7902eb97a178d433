"""Workspace model, tmux helpers and view content for git worktrees and tmux sessions."""

__version__ = "0.8.1"