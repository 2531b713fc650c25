"""
Module interfaces and utility functions for the collision engine.

This module defines the interfaces between the collision engine and its
collaborators and provides utility functions for common operations such as:
- Geodesic conversions between metres and degrees
- Data validation

The collision engine only depends on these protocols, so boundary grids,
projections and particles can be swapped for test doubles.
"""

from typing import Protocol, Optional, Tuple
import math

import numpy as np

from collision_core.data_models import Point3, CellIndex, CellPatch


# Earth's mean radius in metres
EARTH_RADIUS = 6371000.0


class ParticleInterface(Protocol):
    """Interface for particles handled by the collision engine."""

    id: str
    x: float
    y: float
    z: float
    px: float
    py: float
    pz: float
    lost: bool
    error: bool


class ProjectionInterface(Protocol):
    """Interface for coordinate projections."""

    def project(self, point: Point3) -> Point3:
        """
        Map a native point into the planar, metric coordinate system.

        Args:
            point: Point in the grid's native coordinate system

        Returns:
            Projected point; z is passed through unchanged
        """
        ...

    def inverse(self, point: Point3) -> Point3:
        """
        Map a projected point back into native coordinates.

        Args:
            point: Point in projected coordinates

        Returns:
            Point in the grid's native coordinate system
        """
        ...

    def project_points(self, points: np.ndarray) -> np.ndarray:
        """Vectorized project over an (N, 3) array."""
        ...

    def inverse_points(self, points: np.ndarray) -> np.ndarray:
        """Vectorized inverse over an (N, 3) array."""
        ...

    def project_xy(self, x, y) -> Tuple[float, float]:
        """Project a bare (x, y) pair, scalars or arrays."""
        ...

    def inverse_xy(self, x, y) -> Tuple[float, float]:
        """Inverse of project_xy."""
        ...


class BoundaryInterface(Protocol):
    """Interface for raster boundaries consulted during collision resolution."""

    @property
    def min_x(self) -> float:
        ...

    @property
    def min_y(self) -> float:
        ...

    @property
    def cell_size(self) -> float:
        ...

    @property
    def central_latitude(self) -> float:
        """Y coordinate the default projection is centred on."""
        ...

    def indices_of(self, x: float, y: float) -> CellIndex:
        """
        Bucket a horizontal position into a cell index.

        Args:
            x: Native x coordinate
            y: Native y coordinate

        Returns:
            Cell index, possibly outside the populated raster
        """
        ...

    def patch_at(self, index: CellIndex) -> Optional[CellPatch]:
        """
        Retrieve the surface patch of a cell.

        Args:
            index: Cell index

        Returns:
            The four-corner patch, or None if there is no data there
        """
        ...

    def boundary_depth(self, x: float, y: float) -> float:
        """Coarse boundary elevation at (x, y)."""
        ...

    def precise_depth(self, x: float, y: float) -> float:
        """Interpolated boundary elevation at (x, y)."""
        ...


class CollisionDetectorInterface(Protocol):
    """Interface for collision detection strategies."""

    def resolve(self, particle: ParticleInterface) -> None:
        """
        Resolve the particle's proposed displacement against the boundary.

        Args:
            particle: Particle whose current position is the proposed
                end point and whose previous position is the start point
        """
        ...

    def is_in_bounds(self, time: float, z: float, x: float, y: float) -> bool:
        """
        Identify whether a coordinate lies above the boundary.

        Args:
            time: Simulation time (accepted for time-varying boundaries)
            z: Elevation
            x: Native x coordinate
            y: Native y coordinate

        Returns:
            True if the coordinate is not beneath the boundary
        """
        ...

    def boundary(self) -> Optional[BoundaryInterface]:
        """Return the boundary consulted by this detector."""
        ...


# Utility functions for geodesic conversions
def meters_to_lat_lon(x: float, y: float, ref_lat: float, ref_lon: float,
                      earth_radius: float = EARTH_RADIUS) -> Tuple[float, float]:
    """
    Convert meters from a reference point to latitude and longitude.

    Args:
        x: X offset in meters from the reference point (east positive)
        y: Y offset in meters from the reference point (north positive)
        ref_lat: Reference latitude in degrees
        ref_lon: Reference longitude in degrees
        earth_radius: Radius of the spherical earth in meters

    Returns:
        Tuple of (latitude, longitude) in degrees
    """
    ref_lat_rad = math.radians(ref_lat)
    ref_lon_rad = math.radians(ref_lon)

    lat_rad = ref_lat_rad + y / earth_radius
    lon_rad = ref_lon_rad + x / (earth_radius * math.cos(ref_lat_rad))

    return math.degrees(lat_rad), math.degrees(lon_rad)


# Utility functions for data validation
def validate_in_range(value: float, min_value: float, max_value: float, name: str) -> None:
    """
    Validate that a value is within the specified range.

    Raises:
        ValueError: If the value is outside the allowed range
    """
    if not (min_value <= value <= max_value):
        raise ValueError(f"{name} must be between {min_value} and {max_value}, got {value}")


def validate_positive(value: float, name: str) -> None:
    """
    Validate that a value is positive.

    Raises:
        ValueError: If the value is not positive
    """
    if not value > 0:
        raise ValueError(f"{name} must be positive, got {value}")


def validate_non_negative(value: float, name: str) -> None:
    """
    Validate that a value is non-negative.

    Raises:
        ValueError: If the value is negative
    """
    if not value >= 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
