"""Choosing a view layout by pointing into a grid of cells."""

from __future__ import annotations

from typing import Optional, Sequence


def layout_at(
    point: tuple[int, int],
    column_positions: Sequence[int],
    row_positions: Sequence[int],
    bounds: tuple[int, int],
) -> Optional[tuple[int, int]]:
    """The (columns, rows) layout picked at point, or None outside bounds.

    column_positions and row_positions are the left and top edges of the
    cells; bounds is the bottom-right corner of the grid.
    """
    x, y = point
    right, bottom = bounds
    if x > right or y > bottom:
        return None
    columns = sum(1 for pos in column_positions if x > pos)
    rows = sum(1 for pos in row_positions if y > pos)
    return columns, rows


def highlighted_cells(
    point: tuple[int, int],
    column_positions: Sequence[int],
    row_positions: Sequence[int],
) -> set[tuple[int, int]]:
    """The (row, column) indexes of the cells lit while hovering at point."""
    x, y = point
    return {
        (row, column)
        for row, top in enumerate(row_positions)
        for column, left in enumerate(column_positions)
        if x > left and y > top
    }