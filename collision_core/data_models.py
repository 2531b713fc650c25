"""
Data models for the particle-boundary collision engine.

This module contains the value types used throughout collision resolution:
- Point3: A 3D position, geographic or projected
- Segment: A particle displacement for the current timestep
- CellIndex: Integer (row, col) coordinates of a raster cell
- CellPatch: The four corner vertices of one raster cell
- Particle: A tracked particle with its position history and status flags

Point3, Segment, CellIndex and CellPatch are immutable; new values are
produced instead of modifying existing ones.
"""

from dataclasses import dataclass
from typing import Dict, Tuple, Any, Optional
import math
import uuid

import numpy as np


@dataclass(frozen=True)
class Point3:
    """
    A point in space.

    Attributes:
        x: Longitude in degrees, or easting in metres once projected
        y: Latitude in degrees, or northing in metres once projected
        z: Elevation in metres (negative below the sea surface)
    """

    x: float
    y: float
    z: float = 0.0

    def equals_2d(self, other: 'Point3') -> bool:
        """Check whether two points share the same horizontal position."""
        return self.x == other.x and self.y == other.y

    def as_array(self) -> np.ndarray:
        """Return the point as a numpy array [x, y, z]."""
        return np.array([self.x, self.y, self.z], dtype=float)

    def translate(self, dx: float, dy: float, dz: float) -> 'Point3':
        """Return a new point offset by (dx, dy, dz)."""
        return Point3(self.x + dx, self.y + dy, self.z + dz)

    @classmethod
    def from_array(cls, values) -> 'Point3':
        """Create a point from any sequence of three numbers."""
        return cls(float(values[0]), float(values[1]), float(values[2]))


@dataclass(frozen=True)
class Segment:
    """
    A straight displacement from start to end.

    Attributes:
        start: Position at the beginning of the timestep
        end: Proposed position at the end of the timestep
    """

    start: Point3
    end: Point3

    @property
    def delta(self) -> Tuple[float, float, float]:
        """Displacement vector (dx, dy, dz)."""
        return (
            self.end.x - self.start.x,
            self.end.y - self.start.y,
            self.end.z - self.start.z,
        )

    @property
    def length(self) -> float:
        """Euclidean length of the segment."""
        dx, dy, dz = self.delta
        return math.sqrt(dx * dx + dy * dy + dz * dz)

    def point_at(self, t: float) -> Point3:
        """Return the point a fraction t of the way from start to end."""
        dx, dy, dz = self.delta
        return Point3(
            self.start.x + dx * t,
            self.start.y + dy * t,
            self.start.z + dz * t,
        )


@dataclass(frozen=True)
class CellIndex:
    """
    Integer grid coordinates of a raster cell.

    Attributes:
        row: Row index, counted northward from min_y
        col: Column index, counted eastward from min_x
    """

    row: int
    col: int

    def offset(self, drow: int, dcol: int) -> 'CellIndex':
        """Return the index shifted by (drow, dcol)."""
        return CellIndex(self.row + drow, self.col + dcol)

    def chebyshev_distance(self, other: 'CellIndex') -> int:
        """Chessboard distance between two cells."""
        return max(abs(self.row - other.row), abs(self.col - other.col))

    def manhattan_distance(self, other: 'CellIndex') -> int:
        """Number of single-axis steps between two cells."""
        return abs(self.row - other.row) + abs(self.col - other.col)


@dataclass(frozen=True)
class CellPatch:
    """
    The local boundary surface beneath one raster cell.

    Attributes:
        vertices: Four corner points ordered south-west, south-east,
            north-east, north-west
    """

    vertices: Tuple[Point3, Point3, Point3, Point3]

    def __post_init__(self):
        """Validate the patch after initialization."""
        if len(self.vertices) != 4:
            raise ValueError(f"A cell patch needs exactly 4 vertices, got {len(self.vertices)}")

    @property
    def south_west(self) -> Point3:
        return self.vertices[0]

    @property
    def south_east(self) -> Point3:
        return self.vertices[1]

    @property
    def north_east(self) -> Point3:
        return self.vertices[2]

    @property
    def north_west(self) -> Point3:
        return self.vertices[3]

    def as_array(self) -> np.ndarray:
        """Return the vertices as a (4, 3) array."""
        return np.array([[v.x, v.y, v.z] for v in self.vertices], dtype=float)

    @classmethod
    def from_array(cls, values: np.ndarray) -> 'CellPatch':
        """Create a patch from a (4, 3) array of vertices."""
        return cls(tuple(Point3.from_array(row) for row in values))


@dataclass
class Particle:
    """
    A particle tracked through the simulation.

    The collision engine reads the previous and current positions and
    writes the resolved position and the status flags. The flags are
    sticky: nothing in this package ever clears them.

    Attributes:
        id: Unique identifier for the particle
        x: Current longitude (or easting)
        y: Current latitude (or northing)
        z: Current elevation in metres
        px: Longitude at the previous timestep
        py: Latitude at the previous timestep
        pz: Elevation at the previous timestep
        lost: Particle has permanently left the valid domain
        error: Collision resolution failed a consistency check
        age: Age in hours since release
    """

    id: str
    x: float
    y: float
    z: float
    px: Optional[float] = None
    py: Optional[float] = None
    pz: Optional[float] = None
    lost: bool = False
    error: bool = False
    age: float = 0.0

    def __post_init__(self):
        """Default the previous position to the current one."""
        if self.px is None:
            self.px = self.x
        if self.py is None:
            self.py = self.y
        if self.pz is None:
            self.pz = self.z

    @property
    def position(self) -> Tuple[float, float, float]:
        """Current position as (x, y, z)."""
        return (self.x, self.y, self.z)

    @property
    def previous_position(self) -> Tuple[float, float, float]:
        """Previous position as (px, py, pz)."""
        return (self.px, self.py, self.pz)

    @property
    def active(self) -> bool:
        """Whether the particle is still processed normally."""
        return not (self.lost or self.error)

    def record_previous(self) -> None:
        """Copy the current position into the previous position."""
        self.px, self.py, self.pz = self.x, self.y, self.z

    def move_to(self, x: float, y: float, z: float) -> None:
        """Set the current position."""
        self.x, self.y, self.z = x, y, z

    def to_dict(self) -> Dict[str, Any]:
        """Convert particle to dictionary representation."""
        return {
            'id': self.id,
            'x': self.x,
            'y': self.y,
            'z': self.z,
            'px': self.px,
            'py': self.py,
            'pz': self.pz,
            'lost': self.lost,
            'error': self.error,
            'age': self.age,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Particle':
        """Create a Particle from a dictionary representation."""
        return cls(
            id=data.get('id', str(uuid.uuid4())),
            x=data.get('x', 0.0),
            y=data.get('y', 0.0),
            z=data.get('z', 0.0),
            px=data.get('px'),
            py=data.get('py'),
            pz=data.get('pz'),
            lost=data.get('lost', False),
            error=data.get('error', False),
            age=data.get('age', 0.0),
        )
