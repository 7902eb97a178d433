"""Content and placement of the confirm, git, config and picker overlays."""

from __future__ import annotations

from dataclasses import dataclass, field

from wsx.ansi import Color, Line, Modifier, Span, Style
from wsx.layout import Rect, popup_center, popup_upper
from wsx.workspace import ProjectConfig

_GRAY = Style(fg=Color.GRAY)


# ── Confirm ───────────────────────────────────────────────────────────────────


def confirm_popup(area: Rect) -> Rect:
    """Where the delete-confirmation dialog goes within ``area``."""
    return popup_upper(area, min(60, area.width), 6)


def confirm_action_line() -> Line:
    """The ``[y/Enter] Confirm  [n/Esc] Cancel`` action bar."""
    return Line([
        Span("[y/Enter]", Style(fg=Color.GREEN, modifiers=Modifier.BOLD)),
        Span(" Confirm  "),
        Span("[n/Esc]", Style(fg=Color.RED, modifiers=Modifier.BOLD)),
        Span(" Cancel"),
    ])


# ── Git popup ─────────────────────────────────────────────────────────────────


def git_popup(area: Rect) -> Rect:
    return popup_center(area, 36, 9)


def git_popup_lines(default_branch: str) -> list[Line]:
    """Menu lines of the git popup; long branch names are cut to 10 characters."""
    branch = default_branch[:10]
    key_style = Style(fg=Color.YELLOW, modifiers=Modifier.BOLD)
    items = [
        ("  (p)", " Pull"),
        ("  (P)", " Push"),
        ("  (r)", f" Pull Rebase origin/{branch}…"),
        ("  (m)", f" Merge {branch} here…"),
        ("  (M)", f" Merge into {branch}…"),
    ]
    return [
        Line(),
        *(Line([Span(key, key_style), Span(label)]) for key, label in items),
        Line(),
    ]


# ── Config modal ──────────────────────────────────────────────────────────────


def config_modal_popup(area: Rect) -> Rect:
    width = max(min(area.width, 60), 40)
    height = max(min(area.height, 16), 8)
    return popup_center(area, width, height)


def config_modal_lines(config: ProjectConfig) -> list[Line]:
    """Read-only view of a project's worktree settings."""
    lines = [
        Line([
            Span("postCreate: ", _GRAY),
            Span(config.post_create if config.post_create is not None else "(none)",
                 Style(fg=Color.WHITE)),
        ]),
        Line(),
        Line([Span("copy.include:", _GRAY)]),
    ]
    lines.extend(Line([Span(f"  {inc}", Style(fg=Color.GREEN))]) for inc in config.copy_includes)
    if not config.copy_includes:
        lines.append(Line([Span("  (none)", _GRAY)]))

    lines.append(Line([Span("copy.exclude:", _GRAY)]))
    lines.extend(Line([Span(f"  {exc}", Style(fg=Color.RED))]) for exc in config.copy_excludes)

    lines.append(Line())
    lines.append(Line([Span("e: edit .gtrignore  Esc: close", _GRAY)]))
    return lines


def config_modal_title(project_name: str) -> str:
    return f" Config: {project_name} "


# ── Picker ────────────────────────────────────────────────────────────────────


@dataclass
class PickerState:
    """A simple wrapping list selection."""

    title: str
    items: list[str] = field(default_factory=list)
    selected: int | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        if self.items:
            self.selected = 0

    def navigate_up(self) -> None:
        if not self.items:
            return
        i = self.selected or 0
        self.selected = len(self.items) - 1 if i == 0 else i - 1

    def navigate_down(self) -> None:
        if not self.items:
            return
        i = self.selected or 0
        self.selected = (i + 1) % len(self.items)

    def selected_item(self) -> str | None:
        if self.selected is None or not 0 <= self.selected < len(self.items):
            return None
        return self.items[self.selected]