"""
Particle-boundary collision engine.

Resolves a particle's proposed displacement against a raster boundary
surface (bathymetry, coastline), bouncing it off the surface where the
displacement would cross it.
"""

from collision_core.data_models import Point3, Segment, CellIndex, CellPatch, Particle
from collision_core.boundary import BoundaryGrid
from collision_core.projection import (
    IdentityProjection,
    EquidistantCylindricalProjection,
    create_projection,
)
from collision_core.traversal import GridLineTraversal
from collision_core.reflection import reflect, nibble
from collision_core.collision import (
    BathymetryCollisionDetector,
    NullCollisionDetector,
    ResolutionState,
    ResolutionTrace,
    create_detector,
)
from collision_core.movement import SimpleDiffusion3D
from collision_core.behavior import NoSettlement

__version__ = "0.1.0"

__all__ = [
    'Point3',
    'Segment',
    'CellIndex',
    'CellPatch',
    'Particle',
    'BoundaryGrid',
    'IdentityProjection',
    'EquidistantCylindricalProjection',
    'create_projection',
    'GridLineTraversal',
    'reflect',
    'nibble',
    'BathymetryCollisionDetector',
    'NullCollisionDetector',
    'ResolutionState',
    'ResolutionTrace',
    'create_detector',
    'SimpleDiffusion3D',
    'NoSettlement',
]
