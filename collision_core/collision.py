"""
Collision resolution for the collision engine.

This module resolves a particle's proposed displacement against a raster
boundary:
- Projects the displacement into a metric plane
- Bounces it off the surface of the cell beneath the particle
- Marches cell by cell along the displacement, bouncing again wherever it
  dips below the surface
- Commits the boundary-respecting end point, or flags the particle

Failures never raise: particles are flagged lost (left the domain, beached)
or errored (traversal failed a consistency check) so the outer driver can
carry on with the rest of the population.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Type

from collision_core import config
from collision_core.data_models import Point3, Segment, CellIndex, CellPatch
from collision_core.interfaces import (
    BoundaryInterface,
    CollisionDetectorInterface,
    ParticleInterface,
    ProjectionInterface,
)
from collision_core.projection import create_projection
from collision_core.reflection import reflect, nibble
from collision_core.traversal import GridLineTraversal
from collision_core.validation import validate_collision_params

logger = logging.getLogger(__name__)


class ResolutionState(Enum):
    """States of a single collision resolution."""

    INITIAL = 'initial'
    REFLECTING = 'reflecting'
    TRAVERSING = 'traversing'
    RESOLVED = 'resolved'
    LOST = 'lost'
    ERRORED = 'errored'


@dataclass
class ResolutionTrace:
    """
    Record of one collision resolution.

    Attributes:
        particle_id: Identifier of the resolved particle
        state: Final state reached
        cells: Cells visited, in order, starting with the start cell
        steps: Number of traversal steps taken
        reflections: Number of bounces off the boundary
    """

    particle_id: str
    state: ResolutionState = ResolutionState.INITIAL
    cells: List[CellIndex] = field(default_factory=list)
    steps: int = 0
    reflections: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert the trace to a dictionary representation."""
        return {
            'particle_id': self.particle_id,
            'state': self.state.value,
            'cells': [(cell.row, cell.col) for cell in self.cells],
            'steps': self.steps,
            'reflections': self.reflections,
        }


def _bounds(a: CellIndex, b: CellIndex) -> Tuple[CellIndex, CellIndex]:
    """Corners of the rectangle spanned by two cells."""
    return (CellIndex(min(a.row, b.row), min(a.col, b.col)),
            CellIndex(max(a.row, b.row), max(a.col, b.col)))


def _within(cell: CellIndex, low: CellIndex, high: CellIndex) -> bool:
    return low.row <= cell.row <= high.row and low.col <= cell.col <= high.col


class BathymetryCollisionDetector:
    """Bounces particles off a raster bathymetry / coastline surface."""

    def __init__(self, grid: BoundaryInterface,
                 projection: Optional[ProjectionInterface] = None,
                 params: Optional[Dict[str, Any]] = None,
                 traversal_class: Type[GridLineTraversal] = GridLineTraversal):
        """
        Initialize the detector.

        Args:
            grid: Boundary raster in its native coordinate system
            projection: Projection from native to metric coordinates. If
                None, one is built from params['projection'], centred on
                the grid
            params: Overrides for config.DEFAULT_COLLISION_PARAMS
            traversal_class: Grid traversal implementation

        Raises:
            ValueError: If the parameters are invalid
        """
        self.params = config.DEFAULT_COLLISION_PARAMS.copy()
        if params is not None:
            self.params.update(params)

        errors = validate_collision_params(self.params)
        if errors:
            raise ValueError("Invalid collision parameters: " + "; ".join(errors))

        self._grid = grid
        self.nibble_distance = self.params['nibble_distance']
        self.floor_margin = self.params['floor_margin']
        self.surface_level = self.params['surface_level']
        self.max_reflections = self.params['max_reflections']
        self.traversal_class = traversal_class

        if projection is None:
            if self.params['projection'] == 'ceqd':
                projection = create_projection('ceqd', standard_parallel=grid.central_latitude)
            else:
                projection = create_projection(self.params['projection'])
        self.projection = projection

    def boundary(self) -> BoundaryInterface:
        """Return the boundary grid consulted by this detector."""
        return self._grid

    def is_in_bounds(self, time: float, z: float, x: float, y: float) -> bool:
        """
        Identify whether a coordinate lies above the boundary.

        Args:
            time: Simulation time (unused; the boundary is static)
            z: Elevation
            x: Native x coordinate
            y: Native y coordinate

        Returns:
            False if z is beneath the coarse boundary depth, True otherwise
            (including where there is no boundary data)
        """
        return not z < self._grid.boundary_depth(x, y)

    def resolve(self, particle: ParticleInterface) -> None:
        """
        Resolve the particle's proposed displacement against the boundary.

        The displacement runs from the particle's previous position to its
        current one. On success the current position is replaced by the
        resolved end point; otherwise the particle is flagged lost or
        errored.

        Args:
            particle: Particle to resolve
        """
        self.trace(particle)

    def trace(self, particle: ParticleInterface) -> ResolutionTrace:
        """
        Resolve a particle and report how the resolution went.

        Args:
            particle: Particle to resolve

        Returns:
            Trace of visited cells, steps, reflections and final state
        """
        record = ResolutionTrace(particle_id=particle.id)
        start = Point3(particle.px, particle.py, particle.pz)
        end = Point3(particle.x, particle.y, particle.z)

        # Vertices of the cell beneath the particle's initial position
        cell = self._grid.indices_of(start.x, start.y)
        patch = self._projected_patch(cell)

        if patch is None:
            logger.debug(f"Particle {particle.id} has no boundary data beneath {start}, marking lost")
            particle.lost = True
            record.state = ResolutionState.LOST
            return record

        record.cells.append(cell)

        # Test for reflection at least once
        proposed = Segment(self.projection.project(start), self.projection.project(end))
        trans = reflect(proposed, patch)
        bounced = trans != proposed
        if bounced:
            record.reflections += 1

        backtrans = self._inverse(trans)
        current = self._grid.indices_of(backtrans.start.x, backtrans.start.y)
        end_cell = self._grid.indices_of(backtrans.end.x, backtrans.end.y)

        if not bounced and current == end_cell:
            return self._finish(particle, backtrans.end, record)

        traversal = self._new_traversal(backtrans)
        low, high = _bounds(current, end_cell)
        patch_cell = cell
        state = ResolutionState.REFLECTING if bounced else ResolutionState.TRAVERSING

        while True:
            if state is ResolutionState.REFLECTING:
                if record.reflections > self.max_reflections:
                    return self._abort(particle, start, end, record,
                                       f"more than {self.max_reflections} reflections")

                # Nibble to prevent re-detecting the same intersection,
                # then restart the walk from the bounce point
                trans = nibble(trans, self.nibble_distance)
                backtrans = self._inverse(trans)
                current = self._grid.indices_of(backtrans.start.x, backtrans.start.y)
                end_cell = self._grid.indices_of(backtrans.end.x, backtrans.end.y)
                low, high = _bounds(current, end_cell)
                traversal = self._new_traversal(backtrans)

                previous = trans
                trans = reflect(trans, patch)
                if trans != previous:
                    record.reflections += 1
                    continue

                state = ResolutionState.TRAVERSING

                # The bounce point sat on an edge and the walk now starts in
                # a neighbouring cell, which has not been tested yet
                if current != patch_cell:
                    patch_cell = current
                    record.cells.append(current)
                    patch = self._projected_patch(current)
                    if patch is not None:
                        previous = trans
                        trans = reflect(trans, patch)
                        if trans != previous:
                            record.reflections += 1
                            state = ResolutionState.REFLECTING
                continue

            if current == end_cell:
                break

            step = traversal.next_cell()
            if step is None:
                return self._abort(particle, start, end, record,
                                   f"traversal ended in {current}, expected {end_cell}")
            record.steps += 1

            # The traversal reports (dcol, drow); cells are indexed (row, col)
            dcol, drow = step
            current = current.offset(drow, dcol)

            if not _within(current, low, high):
                return self._abort(particle, start, end, record,
                                   f"cell {current} outside {low}..{high}")

            patch_cell = current
            record.cells.append(current)
            patch = self._projected_patch(current)

            # No data here; treat the cell as passable
            if patch is None:
                continue

            previous = trans
            trans = reflect(trans, patch)
            if trans != previous:
                record.reflections += 1
                state = ResolutionState.REFLECTING

        return self._finish(particle, self.projection.inverse(trans.end), record)

    def _projected_patch(self, cell: CellIndex) -> Optional[CellPatch]:
        patch = self._grid.patch_at(cell)
        if patch is None:
            return None
        return CellPatch.from_array(self.projection.project_points(patch.as_array()))

    def _inverse(self, segment: Segment) -> Segment:
        return Segment(self.projection.inverse(segment.start), self.projection.inverse(segment.end))

    def _new_traversal(self, segment: Segment) -> GridLineTraversal:
        traversal = self.traversal_class(self._grid.min_x, self._grid.min_y, self._grid.cell_size)
        traversal.set_line(segment)
        return traversal

    def _finish(self, particle: ParticleInterface, final: Point3,
                record: ResolutionTrace) -> ResolutionTrace:
        """Clamp the resolved end point against the floor and surface, then commit it."""
        record.state = ResolutionState.RESOLVED
        z = final.z

        # Interpolation slop can leave the point just beneath the true floor
        floor = self._grid.precise_depth(final.x, final.y)
        if z < floor:
            z = floor + self.floor_margin
            if z > self.surface_level:
                z = self.surface_level
                particle.lost = True
                record.state = ResolutionState.LOST
                logger.debug(f"Particle {particle.id} beached at ({final.x}, {final.y})")
        elif z > self.surface_level:
            z = self.surface_level

        particle.x = final.x
        particle.y = final.y
        particle.z = z
        return record

    def _abort(self, particle: ParticleInterface, start: Point3, end: Point3,
               record: ResolutionTrace, reason: str) -> ResolutionTrace:
        logger.warning(f"Collision error ({reason}). Aborting particle {particle.id}, "
                       f"track {start} {end}")
        particle.error = True
        record.state = ResolutionState.ERRORED
        return record

    def __repr__(self) -> str:
        return f"BathymetryCollisionDetector({self._grid!r}, projection={self.projection!r})"


class NullCollisionDetector:
    """Collision detector that performs no actions. Used for debugging and testing."""

    def resolve(self, particle: ParticleInterface) -> None:
        pass

    def trace(self, particle: ParticleInterface) -> ResolutionTrace:
        return ResolutionTrace(particle_id=particle.id, state=ResolutionState.RESOLVED)

    def is_in_bounds(self, time: float, z: float, x: float, y: float) -> bool:
        return True

    def boundary(self) -> None:
        return None

    def __repr__(self) -> str:
        return "NullCollisionDetector()"


def create_detector(detector_type: str, grid: Optional[BoundaryInterface] = None,
                    params: Optional[Dict[str, Any]] = None,
                    projection: Optional[ProjectionInterface] = None) -> CollisionDetectorInterface:
    """
    Create a collision detector of the specified type.

    Args:
        detector_type: 'bathymetry' or 'none'
        grid: Boundary raster, required for 'bathymetry'
        params: Overrides for config.DEFAULT_COLLISION_PARAMS
        projection: Optional projection overriding params['projection']

    Returns:
        Collision detector instance

    Raises:
        ValueError: If the type is unknown, the grid is missing or the
            parameters are invalid
    """
    if detector_type == 'none':
        return NullCollisionDetector()

    if detector_type == 'bathymetry':
        if grid is None:
            raise ValueError("A boundary grid is required for the bathymetry collision detector")
        detector = BathymetryCollisionDetector(grid, projection=projection, params=params)
        logger.info(f"Created {detector}")
        return detector

    raise ValueError(f"Unknown detector type: {detector_type}. "
                     f"Valid types are: {', '.join(config.DETECTOR_TYPES)}")
