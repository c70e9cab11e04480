"""
Fixed-width table rendering.

Every cell is centered in its column by visible width; rows are written to the
output stream as soon as they are drawn.
"""

from __future__ import annotations

import sys
from typing import Sequence, TextIO

from .text_width import ANSI_PALETTE, Palette, pad_center


class ColumnCountError(AssertionError):
    """Raised when a row does not have exactly one value per column."""
    pass


class Table:
    """
    Table with fixed column widths and no separators beyond padding.

    Attributes:
        widths: Column widths in visible characters
        palette: Palette whose markers are ignored when measuring cells
    """

    def __init__(
        self,
        widths: Sequence[int],
        palette: Palette = ANSI_PALETTE,
        stream: TextIO | None = None,
    ):
        self.widths = tuple(widths)
        self.palette = palette
        self._stream = stream

    def format_row(self, values: Sequence[str]) -> str:
        """Build the line for a row without writing it.

        Raises:
            ColumnCountError: If the value count does not match the column count
        """
        if len(values) != len(self.widths):
            raise ColumnCountError(
                f"Row has {len(values)} values but table has {len(self.widths)} columns"
            )
        return "".join(
            pad_center(value, width, self.palette)
            for value, width in zip(values, self.widths)
        )

    def draw_row(self, values: Sequence[str]) -> None:
        """Write one row as a single line."""
        line = self.format_row(values)
        stream = self._stream if self._stream is not None else sys.stdout
        print(line, file=stream, flush=True)
