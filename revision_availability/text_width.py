"""
Visible-width measurement and padding for ANSI-colored text.

Width calculations ignore the color markers of the active palette, so colored
and plain cells line up in the same column.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Palette:
    """
    Set of color markers used when rendering a report.

    Attributes:
        reset: Marker that ends a colored span
        red: Marker for unavailable cells
        green: Marker for available cells and fully available revisions
        yellow: Reserved, not used by the report
    """
    reset: str = "\033[0m"
    red: str = "\033[31m"
    green: str = "\033[32m"
    yellow: str = "\033[33m"

    def markers(self) -> tuple[str, ...]:
        """Return all non-empty markers of this palette."""
        return tuple(m for m in (self.reset, self.red, self.green, self.yellow) if m)


ANSI_PALETTE = Palette()
PLAIN_PALETTE = Palette(reset="", red="", green="", yellow="")


def strip_colors(text: str, palette: Palette = ANSI_PALETTE) -> str:
    """Remove every occurrence of every palette marker from text."""
    for marker in palette.markers():
        text = text.replace(marker, "")
    return text


def visible_length(text: str, palette: Palette = ANSI_PALETTE) -> int:
    """Length of text as rendered on the terminal.

    Args:
        text: Possibly colored text
        palette: Palette whose markers are excluded from the count

    Returns:
        Number of printable characters
    """
    return len(strip_colors(text, palette))


def pad_left(text: str, width: int, palette: Palette = ANSI_PALETTE) -> str:
    """Right-align text in a field of the given visible width.

    Text that is already at least as wide as the field is returned unchanged.
    """
    visible = visible_length(text, palette)
    if visible >= width:
        return text
    return " " * (width - visible) + text


def pad_center(text: str, width: int, palette: Palette = ANSI_PALETTE) -> str:
    """Center text in a field of the given visible width.

    The extra space goes to the right when the padding is odd.

    Args:
        text: Possibly colored text
        width: Field width in visible characters
        palette: Palette whose markers are ignored when measuring

    Returns:
        Padded text, or text unchanged if it does not fit
    """
    visible = visible_length(text, palette)
    if visible >= width:
        return text
    gap = width - visible
    left = gap // 2
    right = gap - left
    return " " * left + text + " " * right


def colorize(text: str, color: str, palette: Palette = ANSI_PALETTE) -> str:
    """Wrap text in a color marker and the palette's reset marker."""
    return f"{color}{text}{palette.reset}"
