"""Screen layout helpers: popup placement, status-bar hint wrapping and help text."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class Rect:
    """A rectangular screen area in terminal cells."""

    x: int
    y: int
    width: int
    height: int


def popup_center(area: Rect, w: int, h: int) -> Rect:
    """Center a popup of the given size within ``area``."""
    x = area.x + max(area.width - w, 0) // 2
    y = area.y + max(area.height - h, 0) // 2
    return Rect(x, y, w, h)


def popup_upper(area: Rect, w: int, h: int) -> Rect:
    """Place a horizontally centered popup in the upper third of ``area``."""
    x = area.x + max(area.width - w, 0) // 2
    y = area.y + area.height // 3
    return Rect(x, y, w, h)


HINT_SEPARATOR = "  ·  "


def wrap_hints(hints: str, available_width: int) -> list[str]:
    """Split hints at scope separators so each line fits ``available_width``."""
    lines: list[str] = []
    current = ""
    for group in hints.split(HINT_SEPARATOR):
        if not current:
            current = group
            continue
        candidate = f"{current}  {group}"
        if len(candidate) <= available_width:
            current = candidate
        else:
            lines.append(current)
            current = group
    if current:
        lines.append(current)
    return lines


# Width of the key column in the help popup; the arrow rows are one cell narrower.
_KEY_WIDTH = 14
_NARROW_KEYS = {"j/k / ↑↓", "h/l / ←→"}

_HELP_SECTIONS: tuple[tuple[str, tuple[tuple[str, str], ...]], ...] = (
    ("Navigation", (
        ("j/k / ↑↓", "Navigate tree"),
        ("h/l / ←→", "Collapse/expand"),
        ("Enter", "Project/Worktree: toggle  |  Session: attach"),
    )),
    ("Project", (
        ("p", "Add project (path: prompt)"),
        ("m", "Move project (reorder list)"),
        ("d", "Unregister project"),
        ("c", "Clean merged worktrees (batch)"),
        ("e", "View .gtrconfig"),
    )),
    ("Worktree", (
        ("w", "Add worktree (branch: prompt)"),
        ("s", "New persistent session (optional init command)"),
        ("r", "Set alias"),
        ("d", "Delete worktree + kill all sessions"),
        ("c", "Clean this worktree if merged"),
        ("e", "View .gtrconfig"),
    )),
    ("Session", (
        ("Enter", "Attach"),
        ("S", "Send command to session"),
        ("C", "Send Ctrl+C to session"),
        ("r", "Rename"),
        ("d", "Kill session"),
        ("x", "Dismiss ● (suppress running-app notification) / toggle ⊘ mute"),
    )),
    ("Inside Session (tmux)", (
        ("Ctrl+a d", "Detach (return to wsx)"),
        ("Ctrl+a ?", "tmux help"),
    )),
    ("Global", (
        ("[ / ]", "Jump to prev / next project"),
        ("a", "Jump to next active session (◉)"),
        ("n / N", "Jump to next / prev session needing attention (●)"),
        ("R", "Refresh"),
        ("?", "Help"),
        ("q", "Quit"),
    )),
)


def _help_entries() -> Iterator[str]:
    for index, (title, rows) in enumerate(_HELP_SECTIONS):
        if index:
            yield ""
        yield f" {title}"
        for key, description in rows:
            width = _KEY_WIDTH - 1 if key in _NARROW_KEYS else _KEY_WIDTH
            yield f"  {key.ljust(width)}{description}"


HELP_ENTRIES: tuple[str, ...] = tuple(_help_entries())


def split_at_word(s: str, max_chars: int) -> tuple[str, str]:
    """Split ``s`` at a word boundary within ``max_chars``; return (chunk, rest)."""
    if len(s) <= max_chars:
        return s, ""
    space = s.rfind(" ", 0, max_chars)
    if space == -1:
        return s[:max_chars], s[max_chars:]
    return s[:space], s[space:]


def _description_column(line: str) -> int | None:
    """Index where the description of a ``  key   description`` line starts."""
    if not line.startswith("  ") or line[2:].startswith(" "):
        return None
    in_spaces = False
    space_start = 0
    for i, c in enumerate(line[2:]):
        if c == " ":
            if not in_spaces:
                space_start = i
                in_spaces = True
        else:
            if in_spaces and i - space_start >= 2:
                return 2 + i
            in_spaces = False
    return None


def help_wrap_line(line: str, width: int) -> list[str]:
    """Wrap a help entry, aligning continuation lines with the description column."""
    desc_col = _description_column(line)
    if desc_col is None:
        return [line]

    key_part = line[:desc_col]
    desc_text = line[desc_col:]
    desc_width = max(width - desc_col, 0)
    if len(desc_text.encode("utf-8")) <= desc_width:
        return [line]

    indent = " " * desc_col
    result: list[str] = []
    remaining = desc_text
    prefix = key_part
    while remaining:
        chunk, rest = split_at_word(remaining, max(desc_width, 1))
        result.append(prefix + chunk)
        prefix = indent
        remaining = rest.lstrip()
    return result


def help_lines(width: int) -> list[str]:
    """All help entries wrapped to the inner ``width`` of the help popup."""
    return [wrapped for entry in HELP_ENTRIES for wrapped in help_wrap_line(entry, width)]