"""Single-line input box state with cursor movement and directory completion."""

from __future__ import annotations

from pathlib import Path


def _home() -> Path | None:
    try:
        return Path.home()
    except RuntimeError:
        return None


def _fold(c: str) -> str:
    return c.lower() if c.isascii() else c


def fuzzy_score(query: str, target: str) -> int | None:
    """Score a case-insensitive subsequence match of ``query`` in ``target``.

    Returns None when not every query character appears in order. Higher
    scores mean better matches: consecutive runs and a match on the first
    character earn bonuses.
    """
    if not query:
        return 0
    q = [_fold(c) for c in query]
    qi = 0
    score = 0
    consecutive = 0
    for ti, tc in enumerate(_fold(c) for c in target):
        if qi < len(q) and tc == q[qi]:
            consecutive += 1
            score += 1 + consecutive
            if ti == 0:
                score += 4
            qi += 1
        else:
            consecutive = 0
    return score if qi == len(q) else None


def expand_input(text: str) -> tuple[Path, bool]:
    """Expand a leading ``~``; return the path and whether a tilde was used."""
    home = _home()
    if home is not None:
        if text.startswith("~/"):
            return home / text[2:], True
        if text == "~":
            return home, True
    return Path(text or "."), False


def display_path(path: Path, prefer_tilde: bool) -> str:
    """Render a directory path with a trailing slash, under ``~`` if asked."""
    if prefer_tilde:
        home = _home()
        if home is not None:
            if path == home:
                return "~/"
            try:
                rel = path.relative_to(home)
            except ValueError:
                pass
            else:
                return f"~/{rel}/"
    return f"{path}/"


def path_completions(text: str) -> list[str]:
    """Directories that complete ``text``, best fuzzy match first."""
    expanded, tilde = expand_input(text)
    if text.endswith("/"):
        parent, prefix = expanded, ""
    else:
        parent, prefix = expanded.parent, expanded.name

    try:
        entries = list(parent.iterdir())
    except OSError:
        return []

    scored: list[tuple[int, str]] = []
    for entry in entries:
        try:
            if not entry.is_dir():
                continue
        except OSError:
            continue
        name = entry.name
        if name.startswith(".") and not prefix.startswith("."):
            continue
        score = fuzzy_score(prefix, name)
        if score is None:
            continue
        scored.append((score, display_path(parent / name, tilde)))

    if prefix:
        scored.sort(key=lambda item: (-item[0], item[1]))
    else:
        scored.sort(key=lambda item: item[1])
    return [path for _, path in scored]


class InputState:
    """Text being edited in an input popup.

    ``cursor`` is a character index into ``buffer``. In path mode the
    ``completions`` list is kept up to date with matching directories.
    """

    def __init__(self, prompt: str, value: str = "", *, path_mode: bool = False) -> None:
        self.prompt = prompt
        self.buffer = value
        self.cursor = len(value)
        self.completions: list[str] = []
        self.completion_idx: int | None = None
        self._typed = value
        self._path_mode = path_mode
        if path_mode:
            self.completions = path_completions(value)

    @classmethod
    def new_path(cls, prompt: str, initial: str) -> InputState:
        """An input that completes directory paths."""
        return cls(prompt, initial, path_mode=True)

    @classmethod
    def with_value(cls, prompt: str, value: str) -> InputState:
        """A plain input prefilled with ``value``."""
        return cls(prompt, value)

    def _edited(self) -> None:
        self._typed = self.buffer
        self.completion_idx = None
        if self._path_mode:
            self.completions = path_completions(self.buffer)

    def insert_char(self, c: str) -> None:
        self.buffer = self.buffer[: self.cursor] + c + self.buffer[self.cursor:]
        self.cursor += len(c)
        self._edited()

    def backspace(self) -> None:
        if self.cursor == 0:
            return
        self.buffer = self.buffer[: self.cursor - 1] + self.buffer[self.cursor:]
        self.cursor -= 1
        self._edited()

    def cursor_left(self) -> None:
        self.cursor = max(self.cursor - 1, 0)

    def cursor_right(self) -> None:
        self.cursor = min(self.cursor + 1, len(self.buffer))

    def value(self) -> str:
        return self.buffer

    def _show(self, text: str) -> None:
        self.buffer = text
        self.cursor = len(text)
        self._maybe_drill_down()

    def select_next(self) -> None:
        """Select the next completion, wrapping around."""
        if not self.completions:
            return
        idx = 0 if self.completion_idx is None else (self.completion_idx + 1) % len(self.completions)
        self.completion_idx = idx
        self._show(self.completions[idx])

    def select_prev(self) -> None:
        """Select the previous completion; before the first, restore typed text."""
        if not self.completions:
            return
        if self.completion_idx is None:
            idx: int | None = len(self.completions) - 1
        elif self.completion_idx == 0:
            idx = None
        else:
            idx = self.completion_idx - 1
        self.completion_idx = idx
        self._show(self._typed if idx is None else self.completions[idx])

    def _maybe_drill_down(self) -> None:
        # A selected directory with children shows those children right away.
        if not self.buffer.endswith("/"):
            return
        children = path_completions(self.buffer)
        if children:
            self._typed = self.buffer
            self.completions = children
            self.completion_idx = None

    def display_cursor(self) -> int:
        """Column of the cursor within the buffer, in characters."""
        return self.cursor