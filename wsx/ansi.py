"""Minimal ANSI SGR parser producing styled lines.

Handles reset, bold/dim/italic/underline and 4-bit, 8-bit and 24-bit colours.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Union


class Color(enum.Enum):
    RESET = "reset"
    BLACK = "black"
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"
    MAGENTA = "magenta"
    CYAN = "cyan"
    GRAY = "gray"
    DARK_GRAY = "dark_gray"
    LIGHT_RED = "light_red"
    LIGHT_GREEN = "light_green"
    LIGHT_YELLOW = "light_yellow"
    LIGHT_BLUE = "light_blue"
    LIGHT_MAGENTA = "light_magenta"
    LIGHT_CYAN = "light_cyan"
    WHITE = "white"


# A named colour or an (r, g, b) triple.
ColorValue = Union[Color, tuple[int, int, int]]


class Modifier(enum.Flag):
    NONE = 0
    BOLD = enum.auto()
    DIM = enum.auto()
    ITALIC = enum.auto()
    UNDERLINED = enum.auto()


@dataclass(frozen=True)
class Style:
    fg: ColorValue | None = None
    bg: ColorValue | None = None
    modifiers: Modifier = Modifier.NONE


@dataclass(frozen=True)
class Span:
    content: str
    style: Style = field(default_factory=Style)


@dataclass
class Line:
    spans: list[Span] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(span.content for span in self.spans)


_NORMAL = (
    Color.BLACK, Color.RED, Color.GREEN, Color.YELLOW,
    Color.BLUE, Color.MAGENTA, Color.CYAN, Color.WHITE,
)
_BRIGHT = (
    Color.DARK_GRAY, Color.LIGHT_RED, Color.LIGHT_GREEN, Color.LIGHT_YELLOW,
    Color.LIGHT_BLUE, Color.LIGHT_MAGENTA, Color.LIGHT_CYAN, Color.GRAY,
)


def ansi_color(n: int, bright: bool) -> Color:
    """The 4-bit palette colour ``n`` (0-7); RESET when out of range."""
    if not 0 <= n <= 7:
        return Color.RESET
    return (_BRIGHT if bright else _NORMAL)[n]


def color_256(n: int) -> ColorValue:
    """Map an xterm 256-colour index to a colour."""
    if n < 8:
        return ansi_color(n, False)
    if n < 16:
        return ansi_color(n - 8, True)
    if n < 232:
        n -= 16
        return ((n // 36) * 51, ((n // 6) % 6) * 51, (n % 6) * 51)
    v = 8 + (n - 232) * 10
    return (v, v, v)


def _parse_u8(text: str) -> int | None:
    digits = text[1:] if text.startswith("+") else text
    if not digits or not (digits.isascii() and digits.isdigit()):
        return None
    value = int(digits)
    return value if value <= 255 else None


def apply_sgr(style: Style, seq: str) -> Style:
    """Apply the parameters of one SGR sequence (the part before ``m``)."""
    params = [p for p in map(_parse_u8, seq.split(";")) if p is not None] or [0]

    idx = 0
    while idx < len(params):
        p = params[idx]
        if p == 0:
            style = Style()
        elif p == 1:
            style = replace(style, modifiers=style.modifiers | Modifier.BOLD)
        elif p == 2:
            style = replace(style, modifiers=style.modifiers | Modifier.DIM)
        elif p == 3:
            style = replace(style, modifiers=style.modifiers | Modifier.ITALIC)
        elif p == 4:
            style = replace(style, modifiers=style.modifiers | Modifier.UNDERLINED)
        elif p == 22:
            style = replace(style, modifiers=style.modifiers & ~(Modifier.BOLD | Modifier.DIM))
        elif p == 23:
            style = replace(style, modifiers=style.modifiers & ~Modifier.ITALIC)
        elif p == 24:
            style = replace(style, modifiers=style.modifiers & ~Modifier.UNDERLINED)
        elif 30 <= p <= 37:
            style = replace(style, fg=ansi_color(p - 30, False))
        elif p == 39:
            style = replace(style, fg=Color.RESET)
        elif 40 <= p <= 47:
            style = replace(style, bg=ansi_color(p - 40, False))
        elif p == 49:
            style = replace(style, bg=Color.RESET)
        elif 90 <= p <= 97:
            style = replace(style, fg=ansi_color(p - 90, True))
        elif 100 <= p <= 107:
            style = replace(style, bg=ansi_color(p - 100, True))
        elif p in (38, 48):
            mode = params[idx + 1] if idx + 1 < len(params) else None
            color: ColorValue | None = None
            if mode == 5 and idx + 2 < len(params):
                color = color_256(params[idx + 2])
                idx += 2
            elif mode == 2 and idx + 4 < len(params):
                color = (params[idx + 2], params[idx + 3], params[idx + 4])
                idx += 4
            if color is not None:
                style = replace(style, fg=color) if p == 38 else replace(style, bg=color)
        idx += 1
    return style


def parse(text: str) -> list[Line]:
    """Split ANSI-coloured text into lines of styled spans."""
    lines: list[Line] = []
    spans: list[Span] = []
    style = Style()

    def push_text(chunk: str) -> None:
        nonlocal spans
        *complete, tail = chunk.split("\n")
        for part in complete:
            if part:
                spans.append(Span(part, style))
            lines.append(Line(spans))
            spans = []
        if tail:
            spans.append(Span(tail, style))

    rest = text
    while rest:
        pos = rest.find("\x1b")
        if pos == -1:
            push_text(rest)
            break
        if pos > 0:
            push_text(rest[:pos])
            rest = rest[pos:]
            continue
        if rest.startswith("\x1b["):
            after = rest[2:]
            end = next(
                (i for i, c in enumerate(after) if c.isascii() and c.isalpha()), None
            )
            if end is None:
                rest = rest[1:]
            else:
                if after[end] == "m":
                    style = apply_sgr(style, after[:end])
                rest = after[end + 1:]
        else:
            rest = rest[1:]

    if spans:
        lines.append(Line(spans))
    return lines