"""tmux session management, pane capture and activity monitoring via the tmux CLI."""

from __future__ import annotations

import enum
import os
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path


class TmuxError(RuntimeError):
    """A tmux command could not be run or reported failure."""


def _run(args: list[str], *, quiet: bool = False, capture: bool = False) -> subprocess.CompletedProcess:
    if capture:
        streams = {"stdout": subprocess.PIPE, "stderr": subprocess.PIPE}
    elif quiet:
        streams = {"stdout": subprocess.DEVNULL, "stderr": subprocess.DEVNULL}
    else:
        streams = {}
    try:
        return subprocess.run(["tmux", *args], check=False, **streams)
    except OSError as exc:
        raise TmuxError(f"failed to run tmux: {exc}") from exc


def _decode(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, str):
        return data
    return data.decode("utf-8", errors="replace")


def _lines(text: str) -> list[str]:
    parts = text.split("\n")
    if parts and parts[-1] == "":
        parts.pop()
    return [p[:-1] if p.endswith("\r") else p for p in parts]


# ── Sessions ──────────────────────────────────────────────────────────────────


def is_available() -> bool:
    """True if the tmux binary runs."""
    try:
        return _run(["-V"], quiet=True).returncode == 0
    except TmuxError:
        return False


def is_inside_tmux() -> bool:
    return "TMUX" in os.environ


def parse_session_paths(output: str) -> list[tuple[str, Path]]:
    """Parse ``name:path`` lines from ``list-sessions``."""
    result = []
    for line in _lines(output):
        name, sep, path = line.partition(":")
        if not sep:
            continue
        name, path = name.strip(), path.strip()
        if name and path:
            result.append((name, Path(path)))
    return result


def list_sessions_with_paths() -> list[tuple[str, Path]]:
    try:
        proc = _run(["list-sessions", "-F", "#{session_name}:#{session_path}"], capture=True)
    except TmuxError:
        return []
    return parse_session_paths(_decode(proc.stdout))


def session_exists(name: str) -> bool:
    try:
        return _run(["has-session", "-t", name], quiet=True).returncode == 0
    except TmuxError:
        return False


def create_session(name: str, start_dir: Path | str) -> None:
    """Create a detached session starting in ``start_dir``."""
    proc = _run(["new-session", "-d", "-s", name, "-c", str(start_dir)], quiet=True)
    if proc.returncode != 0:
        raise TmuxError(f"tmux new-session failed for {name}")


def kill_session(name: str) -> None:
    _run(["kill-session", "-t", name], quiet=True)


def rename_session(old_name: str, new_name: str) -> None:
    proc = _run(["rename-session", "-t", old_name, new_name], quiet=True)
    if proc.returncode != 0:
        raise TmuxError("tmux rename-session failed")


class AttachKind(enum.Enum):
    SWITCH_CLIENT = "switch-client"
    ATTACH = "attach"


@dataclass(frozen=True)
class AttachCommand:
    kind: AttachKind
    name: str


def attach_session_cmd(name: str) -> AttachCommand:
    kind = AttachKind.SWITCH_CLIENT if is_inside_tmux() else AttachKind.ATTACH
    return AttachCommand(kind, name)


def _home() -> Path | None:
    try:
        return Path.home()
    except RuntimeError:
        return None


def user_has_tmux_config() -> bool:
    """True if ~/.tmux.conf or the XDG tmux config exists."""
    home = _home()
    xdg_env = os.environ.get("XDG_CONFIG_HOME")
    if xdg_env is not None:
        xdg = Path(xdg_env)
    else:
        xdg = (home if home is not None else Path()) / ".config"
    if home is not None and (home / ".tmux.conf").exists():
        return True
    return (xdg / "tmux" / "tmux.conf").exists()


def _best_effort(args: list[str]) -> None:
    try:
        _run(args, quiet=True)
    except TmuxError:
        pass


def apply_session_defaults(session: str) -> None:
    """Enable mouse and, without a user tmux config, use C-a as prefix."""
    _best_effort(["set-option", "-t", session, "mouse", "on"])
    if not user_has_tmux_config():
        _best_effort(["set-option", "-t", session, "prefix", "C-a"])
        _best_effort(["bind-key", "-T", "prefix", "a", "send-prefix"])


def switch_client(name: str) -> None:
    proc = _run(["switch-client", "-t", name], quiet=True)
    if proc.returncode != 0:
        raise TmuxError(f"tmux switch-client failed for {name}")


def attach_foreground(name: str) -> None:
    """Attach to a session, handing the terminal over to tmux."""
    _run(["attach-session", "-t", name])


def set_session_opt(session: str, key: str, value: str) -> None:
    _best_effort(["set-option", "-t", session, key, value])


def send_keys(session: str, keys: str) -> None:
    """Send keys followed by Enter to the session's active pane."""
    _run(["send-keys", "-t", session, keys, "Enter"], quiet=True)


def send_ctrl_c(session: str) -> None:
    _run(["send-keys", "-t", session, "C-c"], quiet=True)


def unique_session_name(base: str) -> str:
    """Return ``base`` or ``base_N`` (N from 2) that no session uses yet."""
    if not session_exists(base):
        return base
    n = 2
    while session_exists(f"{base}_{n}"):
        n += 1
    return f"{base}_{n}"


# ── Capture ───────────────────────────────────────────────────────────────────


def capture_pane(session_name: str) -> str | None:
    try:
        proc = _run(["capture-pane", "-t", session_name, "-p", "-e"], capture=True)
    except TmuxError:
        return None
    if proc.returncode != 0:
        return None
    return _decode(proc.stdout)


def trim_capture(raw: str) -> str:
    """Drop trailing blank lines from a pane capture."""
    lines = _lines(raw)
    last = max((i for i, line in enumerate(lines) if line.strip()), default=None)
    if last is None:
        return ""
    return "\n".join(lines[: last + 1])


# ── Activity ──────────────────────────────────────────────────────────────────

_SHELLS = frozenset({"bash", "zsh", "sh", "fish", "csh", "tcsh", "ksh", "dash", "elvish"})

# Long-running foreground commands that stay "active" while the window is quiet.
_WATCH_MODE = frozenset({
    "watch", "tail", "watchexec", "entr", "reflex",
    "node", "bun", "deno", "dotenvx",
    "npm", "pnpm", "yarn", "npx",
})

# Continuously running but not needing attention.
_PASSIVE = frozenset({
    "watch", "tail", "less", "more", "man", "top", "htop", "btop", "bat",
    "node", "dotenvx", "bun", "npm", "pnpm", "yarn", "npx", "deno",
    "watchexec", "entr", "reflex",
})


def is_shell(cmd: str) -> bool:
    return cmd.strip() in _SHELLS


def is_watch_mode(cmd: str) -> bool:
    return cmd.strip() in _WATCH_MODE


def is_passive(cmd: str) -> bool:
    return cmd.strip() in _PASSIVE


@dataclass
class SessionStatus:
    has_bell: bool = False
    last_activity_ts: int = 0  # Unix timestamp, 0 if unknown
    has_running_app: bool = False


def _parse_ts(text: str) -> int:
    s = text.strip().removeprefix("+")
    return int(s) if s.isascii() and s.isdigit() else 0


def parse_activity(output: str, now_ts: int) -> dict[str, SessionStatus]:
    """Aggregate ``list-windows`` lines into per-session status."""
    result: dict[str, SessionStatus] = {}
    for line in _lines(output):
        parts = line.split("\t", 3)
        if len(parts) < 3:
            continue
        name, alerts, ts_str = parts[0].strip(), parts[1].strip(), parts[2]
        cmd = parts[3].strip() if len(parts) > 3 else ""
        entry = result.setdefault(name, SessionStatus())
        entry.has_bell |= bool(alerts) and alerts != "0"
        entry.last_activity_ts = max(entry.last_activity_ts, _parse_ts(ts_str))
        if is_watch_mode(cmd) and now_ts > entry.last_activity_ts:
            entry.last_activity_ts = now_ts
        if cmd and not is_shell(cmd) and not is_passive(cmd):
            entry.has_running_app = True
    return result


def session_activity() -> dict[str, SessionStatus]:
    """Bell flag, last activity and running-app state for every session."""
    try:
        proc = _run(
            [
                "list-windows", "-a", "-F",
                "#{session_name}\t#{session_alerts}\t#{window_activity}\t#{pane_current_command}",
            ],
            capture=True,
        )
    except TmuxError:
        return {}
    return parse_activity(_decode(proc.stdout), int(time.time()))