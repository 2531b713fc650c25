#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Test script for the grid line traversal of the collision engine.
"""

import os
import sys
import logging
import unittest

import numpy as np

# Add parent directory to path to import collision_core modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '.')))

from collision_core import config
from collision_core.data_models import CellIndex, Point3, Segment
from collision_core.traversal import GridLineTraversal

logging.basicConfig(level=logging.INFO, format=config.LOGGING_CONFIG['format'])


def walk(traversal, segment):
    """Collect every cell visited along a segment, starting cell included."""
    traversal.set_line(segment)
    cell = traversal.current
    cells = [cell]
    for dcol, drow in traversal:
        cell = cell.offset(drow, dcol)
        cells.append(cell)
    return cells


class TestGridLineTraversal(unittest.TestCase):
    """Test cases for GridLineTraversal."""

    def setUp(self):
        self.traversal = GridLineTraversal(min_x=0.0, min_y=0.0, cell_size=1.0)

    def test_single_cell(self):
        cells = walk(self.traversal, Segment(Point3(0.2, 0.3), Point3(0.8, 0.9)))
        self.assertEqual(cells, [CellIndex(0, 0)])
        self.assertIsNone(self.traversal.next_cell())

    def test_horizontal_three_cells(self):
        cells = walk(self.traversal, Segment(Point3(0.5, 0.5), Point3(2.5, 0.5)))
        self.assertEqual(cells, [CellIndex(0, 0), CellIndex(0, 1), CellIndex(0, 2)])

    def test_step_order_is_horizontal_first(self):
        self.traversal.set_line(Segment(Point3(0.5, 0.5), Point3(0.5, 2.5)))
        self.assertEqual(self.traversal.next_cell(), (0, 1))

    def test_negative_direction(self):
        cells = walk(self.traversal, Segment(Point3(2.5, 1.5), Point3(0.5, 1.5)))
        self.assertEqual(cells, [CellIndex(1, 2), CellIndex(1, 1), CellIndex(1, 0)])

    def test_diagonal_line(self):
        """A shallow diagonal visits each cell it crosses, one axis at a time."""
        cells = walk(self.traversal, Segment(Point3(0.5, 0.2), Point3(2.5, 1.2)))
        self.assertEqual(cells, [CellIndex(0, 0), CellIndex(0, 1), CellIndex(0, 2), CellIndex(1, 2)])

        cells = walk(self.traversal, Segment(Point3(0.5, 0.6), Point3(2.5, 1.6)))
        self.assertEqual(cells, [CellIndex(0, 0), CellIndex(0, 1), CellIndex(1, 1), CellIndex(1, 2)])

    def test_exact_corner_steps_diagonally(self):
        cells = walk(self.traversal, Segment(Point3(0.5, 0.5), Point3(1.5, 1.5)))
        self.assertEqual(cells, [CellIndex(0, 0), CellIndex(1, 1)])

    def test_offset_origin(self):
        traversal = GridLineTraversal(min_x=-80.0, min_y=-4.0, cell_size=0.25)
        cells = walk(traversal, Segment(Point3(-79.9, -3.9), Point3(-79.4, -3.9)))
        self.assertEqual(cells[0], CellIndex(0, 0))
        self.assertEqual(cells[-1], CellIndex(0, 2))

    def test_ends_in_end_cell_within_bound(self):
        """Every walk finishes in the end cell, inside the bounding rectangle."""
        rng = np.random.default_rng(42)
        for _ in range(500):
            x0, y0, x1, y1 = rng.uniform(-5.0, 5.0, 4)
            segment = Segment(Point3(x0, y0), Point3(x1, y1))
            self.traversal.set_line(segment)
            start, end = self.traversal.current, self.traversal.end
            bound = self.traversal.remaining

            cells = walk(self.traversal, segment)

            self.assertEqual(cells[-1], end)
            self.assertLessEqual(len(cells) - 1, bound)
            self.assertGreaterEqual(len(cells) - 1, start.chebyshev_distance(end))
            for cell in cells:
                self.assertTrue(min(start.row, end.row) <= cell.row <= max(start.row, end.row))
                self.assertTrue(min(start.col, end.col) <= cell.col <= max(start.col, end.col))
            for a, b in zip(cells[:-1], cells[1:]):
                self.assertEqual(a.chebyshev_distance(b), 1)

    def test_set_line_resets_state(self):
        walk(self.traversal, Segment(Point3(0.5, 0.5), Point3(3.5, 0.5)))
        cells = walk(self.traversal, Segment(Point3(5.5, 5.5), Point3(5.5, 6.5)))
        self.assertEqual(cells, [CellIndex(5, 5), CellIndex(6, 5)])


if __name__ == '__main__':
    unittest.main()
