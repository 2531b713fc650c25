"""
Raster boundary grid for the collision engine.

This module implements a read-only spatial index over a bathymetry or
coastline surface:
- Point to cell bucketing
- Cell to four-corner surface patch lookup
- Coarse (nearest node) and precise (bilinear) depth queries

Elevations are stored at grid nodes. Node (row, col) sits at
x = min_x + col * cell_size, y = min_y + row * cell_size, and cell
(row, col) spans the nodes (row, col) to (row + 1, col + 1). NaN nodes
mark missing data; any cell touching one has no patch.
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple

import numpy as np
from scipy.interpolate import RegularGridInterpolator

from collision_core.data_models import Point3, CellIndex, CellPatch
from collision_core.validation import validate_grid_geometry

logger = logging.getLogger(__name__)


class BoundaryGrid:
    """Immutable raster of boundary elevations, shared by all particles."""

    def __init__(self, depths: np.ndarray, min_x: float, min_y: float, cell_size: float):
        """
        Initialize the boundary grid.

        Args:
            depths: 2-D array of node elevations indexed [row, col]
                (negative below the sea surface, NaN for no data)
            min_x: X coordinate of the first column of nodes
            min_y: Y coordinate of the first row of nodes
            cell_size: Spacing between nodes, in native units

        Raises:
            ValueError: If the geometry is invalid
        """
        errors = validate_grid_geometry(depths, min_x, min_y, cell_size)
        if errors:
            raise ValueError("Invalid boundary grid: " + "; ".join(errors))

        self._depths = np.array(depths, dtype=float)
        self._depths.setflags(write=False)
        self._min_x = float(min_x)
        self._min_y = float(min_y)
        self._cell_size = float(cell_size)

        n_rows, n_cols = self._depths.shape
        self._ys = self._min_y + np.arange(n_rows) * self._cell_size
        self._xs = self._min_x + np.arange(n_cols) * self._cell_size

        self._interpolator = RegularGridInterpolator(
            (self._ys, self._xs), self._depths,
            method='linear', bounds_error=False, fill_value=np.nan
        )

        logger.info(f"Boundary grid initialized with {n_rows}x{n_cols} nodes, "
                    f"cell size {self._cell_size}, origin ({self._min_x}, {self._min_y})")

    @property
    def min_x(self) -> float:
        return self._min_x

    @property
    def min_y(self) -> float:
        return self._min_y

    @property
    def cell_size(self) -> float:
        return self._cell_size

    @property
    def depths(self) -> np.ndarray:
        """Read-only view of the node elevations."""
        return self._depths

    @property
    def shape(self) -> Tuple[int, int]:
        """Number of cells as (rows, cols)."""
        return self._depths.shape[0] - 1, self._depths.shape[1] - 1

    @property
    def extent(self) -> Tuple[float, float, float, float]:
        """Bounds of the node lattice as (min_x, min_y, max_x, max_y)."""
        return self._min_x, self._min_y, float(self._xs[-1]), float(self._ys[-1])

    @property
    def central_latitude(self) -> float:
        """Y coordinate halfway up the grid."""
        return (self._min_y + float(self._ys[-1])) / 2.0

    def indices_of(self, x: float, y: float) -> CellIndex:
        """
        Bucket a horizontal position into a cell index.

        Defined for every real (x, y); the result may lie outside the
        populated raster, which patch_at reports as missing.
        """
        return CellIndex(
            int(math.floor((y - self._min_y) / self._cell_size)),
            int(math.floor((x - self._min_x) / self._cell_size)),
        )

    def contains(self, index: CellIndex) -> bool:
        """Check whether a cell index lies within the raster."""
        n_rows, n_cols = self.shape
        return 0 <= index.row < n_rows and 0 <= index.col < n_cols

    def patch_at(self, index: CellIndex) -> Optional[CellPatch]:
        """
        Retrieve the four-corner surface patch of a cell.

        Args:
            index: Cell index

        Returns:
            The patch (south-west, south-east, north-east, north-west),
            or None if the cell lies outside the raster or touches a
            node without data
        """
        if not self.contains(index):
            return None

        r, c = index.row, index.col
        corners = self._depths[r:r + 2, c:c + 2]
        if np.isnan(corners).any():
            return None

        x0, x1 = float(self._xs[c]), float(self._xs[c + 1])
        y0, y1 = float(self._ys[r]), float(self._ys[r + 1])

        return CellPatch((
            Point3(x0, y0, float(corners[0, 0])),
            Point3(x1, y0, float(corners[0, 1])),
            Point3(x1, y1, float(corners[1, 1])),
            Point3(x0, y1, float(corners[1, 0])),
        ))

    def patch_containing(self, x: float, y: float) -> Optional[CellPatch]:
        """Retrieve the patch of the cell containing (x, y)."""
        return self.patch_at(self.indices_of(x, y))

    def patches_at(self, indices: Sequence[CellIndex]) -> List[Optional[CellPatch]]:
        """Retrieve the patches of several cells, in order."""
        return [self.patch_at(index) for index in indices]

    def boundary_depth(self, x: float, y: float) -> float:
        """
        Coarse boundary elevation: the value of the nearest node.

        Returns:
            Elevation, or NaN outside the raster
        """
        row = int(math.floor((y - self._min_y) / self._cell_size + 0.5))
        col = int(math.floor((x - self._min_x) / self._cell_size + 0.5))
        n_rows, n_cols = self._depths.shape
        if not (0 <= row < n_rows and 0 <= col < n_cols):
            return float('nan')
        return float(self._depths[row, col])

    def precise_depth(self, x: float, y: float) -> float:
        """
        Precise boundary elevation, bilinearly interpolated between nodes.

        Returns:
            Elevation, or NaN outside the raster or next to missing data
        """
        return float(self._interpolator([[y, x]])[0])

    def __repr__(self) -> str:
        n_rows, n_cols = self.shape
        return (f"BoundaryGrid({n_rows}x{n_cols} cells, cell_size={self._cell_size}, "
                f"origin=({self._min_x}, {self._min_y}))")
