from pathlib import Path

import pytest

from wsx.ansi import Color, Modifier
from wsx.ops import IDLE_SECS
from wsx.tree_view import (
    compute_scroll,
    fmt_idle,
    project_line,
    session_line,
    tree_lines,
    tree_title,
    worktree_line,
)
from wsx.workspace import GitInfo, Project, SessionInfo, WorkspaceState, WorktreeInfo, flatten_tree

NOW = 1_000_000.0


def _project(**kwargs):
    base = dict(name="wsx", path=Path("/tmp/wsx"))
    base.update(kwargs)
    return Project(**base)


def _wt(**kwargs):
    base = dict(name="wsx-feature-auth", branch="feature/auth", path=Path("/tmp/wsx-feature-auth"))
    base.update(kwargs)
    return WorktreeInfo(**base)


def test_project_line_expanded_and_collapsed():
    project = _project(worktrees=[_wt(), _wt()])
    line = project_line(project)
    assert line.text == "▼ wsx"
    assert line.spans[0].style == _bold_cyan()
    project.expanded = False
    assert project_line(project).text == f"▶ wsx [{len(project.worktrees)}]"


def _bold_cyan():
    from wsx.ansi import Style
    return Style(fg=Color.CYAN, modifiers=Modifier.BOLD)


def test_worktree_line_alias_shows_short_name():
    line = worktree_line(_project(), _wt(alias="auth"))
    assert line.text.endswith("auth (feature-auth)")
    assert "wsx-feature-auth" not in line.text


def test_worktree_line_main_shows_branch():
    wt = WorktreeInfo(name="wsx", branch="main", path=Path("/tmp/wsx"), is_main=True)
    assert worktree_line(_project(), wt).text.endswith("~ main")


def test_worktree_line_dirty_and_remote_markers():
    wt = _wt(git_info=GitInfo(modified_files=["x"], behind=2, ahead=1))
    spans = worktree_line(_project(), wt).spans
    assert spans[1].content == "*" and spans[1].style.fg == Color.YELLOW
    assert spans[2].content == " ↓2↑1" and spans[2].style.fg == Color.MAGENTA


@pytest.mark.parametrize(
    "behind, ahead, content, color",
    [(3, 0, " ↓3", Color.RED), (0, 4, " ↑4", Color.CYAN)],
)
def test_worktree_line_one_sided_remote(behind, ahead, content, color):
    wt = _wt(git_info=GitInfo(behind=behind, ahead=ahead))
    spans = worktree_line(_project(), wt).spans
    assert spans[-1].content == content
    assert spans[-1].style.fg == color


def test_worktree_line_collapsed_sessions_badge_and_activity():
    sessions = [SessionInfo("a", "a", has_activity=True), SessionInfo("b", "b")]
    wt = _wt(sessions=sessions, expanded=False)
    line = worktree_line(_project(), wt)
    assert line.text.startswith(" ▸ ")
    assert line.spans[-2].content == " ●"
    assert line.spans[-1].content == f" [{len(sessions)}]"
    wt.expanded = True
    assert worktree_line(_project(), wt).text.startswith(" ▾ ")
    assert not worktree_line(_project(), wt).text.endswith("]")


@pytest.mark.parametrize(
    "kwargs, icon, color",
    [
        (dict(muted=True, has_activity=True), "⊘", Color.DARK_GRAY),
        (dict(has_activity=True), "●", Color.YELLOW),
        (dict(last_activity=NOW - 1), "◉", Color.GREEN),
        (dict(has_running_app=True, last_activity=NOW - 100), "●", Color.YELLOW),
        (dict(has_running_app=True, running_app_suppressed=True), "○", Color.GRAY),
        (dict(), "○", Color.GRAY),
    ],
)
def test_session_line_icons(kwargs, icon, color):
    line = session_line(SessionInfo("s", "agent", **kwargs), NOW)
    assert line.spans[1].content == icon
    assert line.spans[1].style.fg == color


def test_session_line_idle_suffix():
    idle = SessionInfo("s", "agent", last_activity=NOW - 5)
    assert session_line(idle, NOW).spans[2].content == " agent  " + fmt_idle(5)
    active = SessionInfo("s", "agent", last_activity=NOW - (IDLE_SECS - 1))
    assert session_line(active, NOW).spans[2].content == " agent"


def test_fmt_idle_units():
    assert fmt_idle(5) == "5s"
    assert fmt_idle(59) == "59s"
    assert fmt_idle(60) == "1m"
    assert fmt_idle(7200) == "2h"


def test_tree_title():
    assert tree_title(True) == (" Workspaces — MOVE ", Color.GREEN)
    assert tree_title(False) == (" Workspaces ", Color.YELLOW)


def test_tree_lines_match_flattened_tree():
    wt = _wt(sessions=[SessionInfo("wsx-feature-auth-agent", "agent")])
    ws = WorkspaceState([_project(worktrees=[wt]), _project(name="other", expanded=False)])
    lines = tree_lines(ws, NOW)
    assert len(lines) == len(flatten_tree(ws))
    assert lines[0].text == "▼ wsx"
    assert lines[2].spans[2].content == " agent"
    assert lines[3].text.startswith("▶ other")


def test_compute_scroll_keeps_offset_inside_comfort_zone():
    assert compute_scroll(10, 20, 5) == 5


@pytest.mark.parametrize("visible_height", [1, 4, 10, 20])
def test_compute_scroll_keeps_selection_visible(visible_height):
    for selected in range(60):
        for offset in range(60):
            new = compute_scroll(selected, visible_height, offset)
            assert 0 <= new <= selected < new + visible_height


def test_compute_scroll_zero_height_follows_selection():
    for selected in range(10):
        assert compute_scroll(selected, 0, 3) == selected