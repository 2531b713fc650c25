"""
Grid line traversal for the collision engine.

Enumerates the raster cells a line segment passes through, using a
digital differential analyzer (Amanatides & Woo, 1987). Each step is a
unit move along one axis, or a diagonal move where the line passes
exactly through a cell corner, so no cell whose interior the line
crosses is skipped. The diagonal step is deliberate: the two side cells
touched only at that corner point share the corner node's elevation, so
testing them cannot change the outcome.

Cell bucketing uses the same floor arithmetic as BoundaryGrid.indices_of,
and an axis stops stepping once it reaches the end cell's index on that
axis. The walk therefore always finishes exactly in the end cell and
never leaves the rectangle spanned by the start and end cells.
"""

import math
from typing import Optional, Tuple

from collision_core.data_models import CellIndex, Segment


class GridLineTraversal:
    """Single-use walk over the cells crossed by one line segment."""

    def __init__(self, min_x: float, min_y: float, cell_size: float):
        """
        Initialize the traversal for a grid geometry.

        Args:
            min_x: X coordinate of the grid origin
            min_y: Y coordinate of the grid origin
            cell_size: Width and height of a cell
        """
        self.min_x = min_x
        self.min_y = min_y
        self.cell_size = cell_size
        self._col = self._row = 0
        self._end_col = self._end_row = 0
        self._step_x = self._step_y = 0
        self._t_max_x = self._t_max_y = math.inf
        self._t_delta_x = self._t_delta_y = math.inf

    def _cell_of(self, x: float, y: float) -> Tuple[int, int]:
        return (int(math.floor((x - self.min_x) / self.cell_size)),
                int(math.floor((y - self.min_y) / self.cell_size)))

    def set_line(self, segment: Segment) -> None:
        """
        Arm the traversal for a new line, discarding any previous state.

        Args:
            segment: Line in the grid's native coordinates
        """
        x0, y0 = segment.start.x, segment.start.y
        x1, y1 = segment.end.x, segment.end.y

        self._col, self._row = self._cell_of(x0, y0)
        self._end_col, self._end_row = self._cell_of(x1, y1)

        self._step_x = (self._end_col > self._col) - (self._end_col < self._col)
        self._step_y = (self._end_row > self._row) - (self._end_row < self._row)

        dx = x1 - x0
        dy = y1 - y0

        if self._step_x != 0:
            boundary = self.min_x + (self._col + (1 if self._step_x > 0 else 0)) * self.cell_size
            self._t_max_x = (boundary - x0) / dx
            self._t_delta_x = self.cell_size / abs(dx)
        else:
            self._t_max_x = self._t_delta_x = math.inf

        if self._step_y != 0:
            boundary = self.min_y + (self._row + (1 if self._step_y > 0 else 0)) * self.cell_size
            self._t_max_y = (boundary - y0) / dy
            self._t_delta_y = self.cell_size / abs(dy)
        else:
            self._t_max_y = self._t_delta_y = math.inf

    @property
    def current(self) -> CellIndex:
        """Cell the traversal currently occupies."""
        return CellIndex(self._row, self._col)

    @property
    def end(self) -> CellIndex:
        """Cell the traversal finishes in."""
        return CellIndex(self._end_row, self._end_col)

    @property
    def remaining(self) -> int:
        """Upper bound on the number of steps still to come."""
        return abs(self._end_col - self._col) + abs(self._end_row - self._row)

    def next_cell(self) -> Optional[Tuple[int, int]]:
        """
        Advance to the next cell along the line.

        Returns:
            The step taken as (dcol, drow), horizontal first, or None once
            the end cell has been reached
        """
        move_x = self._col != self._end_col
        move_y = self._row != self._end_row

        if not (move_x or move_y):
            return None

        if move_x and move_y:
            if self._t_max_x < self._t_max_y:
                move_y = False
            elif self._t_max_y < self._t_max_x:
                move_x = False

        dcol = self._step_x if move_x else 0
        drow = self._step_y if move_y else 0

        if move_x:
            self._col += dcol
            self._t_max_x += self._t_delta_x
        if move_y:
            self._row += drow
            self._t_max_y += self._t_delta_y

        return dcol, drow

    def __iter__(self):
        return self

    def __next__(self) -> Tuple[int, int]:
        step = self.next_cell()
        if step is None:
            raise StopIteration
        return step
