"""Content of the right-hand preview pane for projects, worktrees and sessions."""

from __future__ import annotations

from wsx import ansi
from wsx.ansi import Color, Line, Modifier, Span, Style
from wsx.workspace import Project, SessionInfo, WorktreeInfo

_LABEL = Style(fg=(120, 120, 140))
_GRAY = Style(fg=Color.GRAY)
_DARK_GRAY = Style(fg=Color.DARK_GRAY)
_MAX_FILES_SHOWN = 5


def _text_line(text: str = "", style: Style | None = None) -> Line:
    if not text:
        return Line()
    return Line([Span(text, style if style is not None else Style())])


def remote_status(behind: int, ahead: int) -> tuple[str, Style]:
    """Describe how a worktree's branch relates to its upstream."""
    if behind == 0 and ahead == 0:
        return "in sync", Style(fg=(100, 200, 100))
    if behind > 0 and ahead > 0:
        return f"↓{behind} ↑{ahead}  diverged — pull first", Style(fg=Color.MAGENTA)
    if behind > 0:
        return f"↓{behind}  pull needed", Style(fg=Color.RED)
    return f"↑{ahead}  ready to push", Style(fg=Color.CYAN)


def worktree_preview_lines(worktree: WorktreeInfo) -> list[Line]:
    """Branch, path, remote state, local changes, commits and sessions of a worktree."""
    lines = [
        Line([
            Span("Branch:  ", _LABEL),
            Span(worktree.branch, Style(fg=(100, 200, 255), modifiers=Modifier.BOLD)),
        ]),
        Line([
            Span("Path:    ", _LABEL),
            Span(str(worktree.path), Style(fg=(200, 200, 210))),
        ]),
    ]

    info = worktree.git_info
    if info is not None:
        lines.append(Line())
        lines.append(_text_line("Remote:", _LABEL))
        if info.remote_branch is not None:
            text, style = remote_status(info.behind, info.ahead)
            suffix = "  [fetch failed]" if worktree.fetch_failed else ""
            lines.append(Line([
                Span(f"  {info.remote_branch} — ", Style(fg=(180, 180, 200))),
                Span(text + suffix, style),
            ]))
        else:
            msg = (
                "  no upstream  [fetch failed]"
                if worktree.fetch_failed
                else "  no upstream tracking branch"
            )
            lines.append(_text_line(msg, _DARK_GRAY))

        lines.append(Line())
        modified = info.modified_files
        if not modified:
            lines.append(Line([
                Span("Local:   ", _LABEL),
                Span("clean", Style(fg=(100, 200, 100))),
            ]))
        else:
            count = len(modified)
            noun = "file" if count == 1 else "files"
            lines.append(Line([
                Span("Local:   ", _LABEL),
                Span(f"{count} {noun} modified", Style(fg=Color.YELLOW)),
            ]))
            lines.extend(
                _text_line(f"  {name}", Style(fg=(255, 150, 80)))
                for name in modified[:_MAX_FILES_SHOWN]
            )
            if count > _MAX_FILES_SHOWN:
                lines.append(_text_line(f"  … {count - _MAX_FILES_SHOWN} more", _DARK_GRAY))

        if info.recent_commits:
            lines.append(Line())
            lines.append(_text_line("Commits:", _LABEL))
            lines.extend(
                Line([
                    Span(f"  {commit.hash} ", Style(fg=(255, 180, 80))),
                    Span(commit.message, Style(fg=(210, 210, 220))),
                ])
                for commit in info.recent_commits
            )

    if worktree.sessions:
        lines.append(Line())
        lines.append(_text_line("Sessions:", _LABEL))
        for sess in worktree.sessions:
            dot = " ●" if sess.has_activity else ""
            lines.append(_text_line(f"  {sess.display_name}{dot}", Style(fg=(100, 220, 130))))

    return lines


def session_preview(session: SessionInfo, title: str, height: int) -> tuple[str, list[Line], int]:
    """Block title, captured pane lines and the scroll offset that shows the bottom.

    ``height`` is the height of the pane including its borders.
    """
    activity = " ●" if session.has_activity else ""
    block_title = f" {title}{activity} "
    if session.pane_capture is not None:
        lines = ansi.parse(session.pane_capture)
    else:
        lines = [_text_line("(no capture)")]
    inner_height = max(height - 2, 0)
    scroll = max(len(lines) - inner_height, 0)
    return block_title, lines, scroll


def project_preview_lines(project: Project) -> list[Line]:
    """Path, default branch and a per-worktree session summary of a project."""
    lines = [
        Line([Span("Path:  ", _GRAY), Span(str(project.path), Style(fg=Color.WHITE))]),
        Line([Span("Branch: ", _GRAY), Span(project.default_branch, Style(fg=Color.CYAN))]),
        Line(),
        _text_line("Worktrees:", _GRAY),
    ]
    for wt in project.worktrees:
        main_mark = "* " if wt.is_main else "  "
        count = len(wt.sessions)
        noun = "session" if count == 1 else "sessions"
        activity = " ●" if any(s.has_activity for s in wt.sessions) else ""
        lines.append(Line([
            Span(f"  {main_mark}{wt.display_name()}", Style(fg=Color.CYAN)),
            Span(f"  ({count} {noun}){activity}", _GRAY),
        ]))
    if not project.worktrees:
        lines.append(_text_line("  (no worktrees)", _GRAY))
    return lines


def empty_preview_lines() -> list[Line]:
    """Placeholder shown when nothing is selected."""
    return [_text_line("Select a project, worktree, or session", _GRAY)]