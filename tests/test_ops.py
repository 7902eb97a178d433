import subprocess
from pathlib import Path

import pytest

from wsx import ops, tmux
from wsx.tmux import SessionStatus, TmuxError
from wsx.workspace import Project, SessionInfo, WorkspaceState, WorktreeInfo


class FakeTmux:
    """Stands in for the tmux binary and tracks which sessions exist."""

    def __init__(self, existing=(), fail=()):
        self.existing = set(existing)
        self.fail = set(fail)
        self.calls = []

    def __call__(self, args, **kwargs):
        self.calls.append(list(args))
        sub = args[1]
        rc = 0
        if sub == "has-session":
            rc = 0 if args[3] in self.existing else 1
        elif sub in self.fail:
            rc = 1
        elif sub == "kill-session":
            self.existing.discard(args[3])
        elif sub == "rename-session":
            if args[3] in self.existing:
                self.existing.discard(args[3])
                self.existing.add(args[4])
        return subprocess.CompletedProcess(args, rc)

    def sub_calls(self, sub):
        return [c for c in self.calls if c[1] == sub]


@pytest.fixture
def fake(monkeypatch):
    f = FakeTmux()
    monkeypatch.setattr(subprocess, "run", f)
    return f


def _workspace(*sessions):
    wt = WorktreeInfo(name="wsx", branch="main", path=Path("/tmp/wsx"), sessions=list(sessions))
    return WorkspaceState([Project(name="wsx", path=Path("/tmp/wsx"), worktrees=[wt])])


def test_is_recently_active():
    assert ops.is_recently_active(None, 100.0) is False
    assert ops.is_recently_active(100.0, 101.0) is True
    assert ops.is_recently_active(100.0, 100.0 + ops.IDLE_SECS) is False


def test_update_activity_sets_fields_and_reports_change():
    sess = SessionInfo(name="s", display_name="s")
    ws = _workspace(sess)
    status = {"s": SessionStatus(has_bell=True, last_activity_ts=1000, has_running_app=True)}
    assert ops.update_activity(ws, status, now=1001.0) is True
    assert sess.has_activity is True
    assert sess.has_running_app is True
    assert sess.last_activity == 1000.0
    assert ops.update_activity(ws, status, now=1001.0) is False


def test_update_activity_skips_muted():
    sess = SessionInfo(name="s", display_name="s", muted=True)
    ws = _workspace(sess)
    status = {"s": SessionStatus(has_bell=True, last_activity_ts=1000)}
    assert ops.update_activity(ws, status, now=1000.0) is False
    assert sess.has_activity is False
    assert sess.last_activity is None


def test_update_activity_resets_suppression_only_when_active():
    active = SessionInfo(name="a", display_name="a", running_app_suppressed=True)
    idle = SessionInfo(name="b", display_name="b", running_app_suppressed=True)
    ws = _workspace(active, idle)
    status = {
        "a": SessionStatus(last_activity_ts=1000),
        "b": SessionStatus(last_activity_ts=500),
    }
    ops.update_activity(ws, status, now=1001.0)
    assert active.running_app_suppressed is False
    assert idle.running_app_suppressed is True


def test_update_activity_zero_timestamp_is_unknown():
    sess = SessionInfo(name="s", display_name="s", last_activity=5.0)
    ws = _workspace(sess)
    ops.update_activity(ws, {"s": SessionStatus()}, now=10.0)
    assert sess.last_activity is None


def test_update_activity_ignores_unknown_sessions():
    sess = SessionInfo(name="s", display_name="s", has_activity=True)
    ws = _workspace(sess)
    assert ops.update_activity(ws, {"other": SessionStatus()}, now=1.0) is False
    assert sess.has_activity is True


def test_expand_path():
    assert ops.expand_path("~/code/wsx") == Path.home() / "code/wsx"
    assert ops.expand_path("/abs/path") == Path("/abs/path")
    assert ops.expand_path("~") == Path("~")


def test_create_session_with_explicit_name(fake):
    result = ops.create_session("wsx", "main", Path("/tmp/wsx"), "agent", None)
    assert result == ("wsx-main-agent", "agent")
    new = fake.sub_calls("new-session")
    assert new == [["tmux", "new-session", "-d", "-s", "wsx-main-agent", "-c", "/tmp/wsx"]]
    assert fake.sub_calls("send-keys") == []


def test_create_session_uses_command_first_word(fake):
    result = ops.create_session("wsx", "main", Path("/tmp/wsx"), None, "npm run dev")
    assert result == ("wsx-main-npm", "npm")
    assert fake.sub_calls("send-keys") == [
        ["tmux", "send-keys", "-t", "wsx-main-npm", "npm run dev", "Enter"]
    ]


def test_create_session_empty_name_falls_back_to_project(fake):
    assert ops.create_session("wsx", "main", "/tmp/wsx", "", None) == ("wsx-main-wsx", "wsx")


def test_create_session_blank_command_falls_back_to_project(fake):
    tmux_name, display = ops.create_session("wsx", "main", "/tmp/wsx", None, "   ")
    assert (tmux_name, display) == ("wsx-main-wsx", "wsx")


def test_create_session_avoids_existing_names(fake):
    fake.existing = {"wsx-main-agent", "wsx-main-agent_2"}
    result = ops.create_session("wsx", "main", "/tmp/wsx", "agent", None)
    assert result == ("wsx-main-agent_3", "agent_3")


def test_create_session_failure_raises(fake):
    fake.fail = {"new-session"}
    with pytest.raises(TmuxError):
        ops.create_session("wsx", "main", "/tmp/wsx", "agent", None)


def test_delete_session_removes_it(fake):
    fake.existing = {"wsx-main-agent", "wsx-main-keep"}
    ops.delete_session("wsx-main-agent")
    assert fake.sub_calls("kill-session") == [["tmux", "kill-session", "-t", "wsx-main-agent"]]
    assert tmux.session_exists("wsx-main-agent") is False
    assert tmux.session_exists("wsx-main-keep") is True


def test_rename_session_moves_name(fake):
    fake.existing = {"wsx-main-agent"}
    ops.rename_session("wsx-main-agent", "wsx-main-other")
    assert fake.sub_calls("rename-session") == [
        ["tmux", "rename-session", "-t", "wsx-main-agent", "wsx-main-other"]
    ]
    assert tmux.session_exists("wsx-main-agent") is False
    assert tmux.session_exists("wsx-main-other") is True


def test_rename_session_failure_raises(fake):
    fake.fail = {"rename-session"}
    with pytest.raises(TmuxError):
        ops.rename_session("a", "b")