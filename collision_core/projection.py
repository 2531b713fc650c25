"""
Coordinate projections for the collision engine.

Reflection needs a Euclidean metric, which geographic coordinates do not
provide. The projections here map grid-native coordinates into a planar,
metric system and back. Elevations (z) pass through unchanged.
"""

import logging
from typing import Tuple

import numpy as np

from collision_core import config
from collision_core.data_models import Point3
from collision_core.interfaces import validate_in_range, validate_positive
from collision_core.validation import validate_projection_params

logger = logging.getLogger(__name__)


class IdentityProjection:
    """Projection for grids that are already in metric units."""

    def project(self, point: Point3) -> Point3:
        return point

    def inverse(self, point: Point3) -> Point3:
        return point

    def project_points(self, points: np.ndarray) -> np.ndarray:
        return np.asarray(points, dtype=float)

    def inverse_points(self, points: np.ndarray) -> np.ndarray:
        return np.asarray(points, dtype=float)

    def project_xy(self, x, y) -> Tuple[float, float]:
        return x, y

    def inverse_xy(self, x, y) -> Tuple[float, float]:
        return x, y

    def __repr__(self) -> str:
        return "IdentityProjection()"


class EquidistantCylindricalProjection:
    """
    Equidistant cylindrical (plate carrée) projection of WGS84 lon/lat.

    x = R * cos(phi_ts) * (lon - lon0)
    y = R * lat

    with angles in radians. Distances are true along meridians and along
    the standard parallel phi_ts, which makes the projection locally metric
    around the latitude it is centred on.
    """

    def __init__(self, standard_parallel: float = 0.0, central_meridian: float = 0.0,
                 earth_radius: float = config.DEFAULT_PROJECTION_PARAMS['earth_radius']):
        """
        Initialize the projection.

        Args:
            standard_parallel: Latitude of true scale in degrees
            central_meridian: Longitude mapped to x = 0, in degrees
            earth_radius: Radius of the spherical earth in metres
        """
        validate_in_range(standard_parallel, -89.999999, 89.999999, "Standard parallel")
        validate_in_range(central_meridian, -180, 180, "Central meridian")
        validate_positive(earth_radius, "Earth radius")

        self.standard_parallel = float(standard_parallel)
        self.central_meridian = float(central_meridian)
        self.earth_radius = float(earth_radius)

        # Metres per degree along each axis
        self._x_scale = np.radians(1.0) * self.earth_radius * np.cos(np.radians(self.standard_parallel))
        self._y_scale = np.radians(1.0) * self.earth_radius

    def project_xy(self, x, y) -> Tuple[float, float]:
        """Project longitude/latitude (scalars or arrays) to metres."""
        return (x - self.central_meridian) * self._x_scale, y * self._y_scale

    def inverse_xy(self, x, y) -> Tuple[float, float]:
        """Convert metres (scalars or arrays) back to longitude/latitude."""
        return x / self._x_scale + self.central_meridian, y / self._y_scale

    def project(self, point: Point3) -> Point3:
        x, y = self.project_xy(point.x, point.y)
        return Point3(float(x), float(y), point.z)

    def inverse(self, point: Point3) -> Point3:
        x, y = self.inverse_xy(point.x, point.y)
        return Point3(float(x), float(y), point.z)

    def project_points(self, points: np.ndarray) -> np.ndarray:
        """Project an (N, 3) array of lon/lat/elevation rows."""
        result = np.array(points, dtype=float)
        result[:, 0], result[:, 1] = self.project_xy(result[:, 0], result[:, 1])
        return result

    def inverse_points(self, points: np.ndarray) -> np.ndarray:
        """Inverse of project_points."""
        result = np.array(points, dtype=float)
        result[:, 0], result[:, 1] = self.inverse_xy(result[:, 0], result[:, 1])
        return result

    def __repr__(self) -> str:
        return (f"EquidistantCylindricalProjection(standard_parallel={self.standard_parallel}, "
                f"central_meridian={self.central_meridian}, earth_radius={self.earth_radius})")


def create_projection(projection_type: str, **params):
    """
    Create a projection of the specified type.

    Args:
        projection_type: 'ceqd' for equidistant cylindrical, or
            'none' / 'identity' for metric grids
        **params: Overrides for config.DEFAULT_PROJECTION_PARAMS

    Returns:
        Projection instance

    Raises:
        ValueError: If the projection type is unknown or its parameters
            are invalid
    """
    if projection_type in ('none', 'identity'):
        return IdentityProjection()

    if projection_type == 'ceqd':
        settings = config.DEFAULT_PROJECTION_PARAMS.copy()
        settings.update(params)
        errors = validate_projection_params(settings)
        if errors:
            raise ValueError("Invalid projection parameters: " + "; ".join(errors))

        standard_parallel = settings['standard_parallel']
        if standard_parallel is None:
            standard_parallel = 0.0
        projection = EquidistantCylindricalProjection(
            standard_parallel=standard_parallel,
            central_meridian=settings['central_meridian'],
            earth_radius=settings['earth_radius'],
        )
        logger.debug(f"Created {projection}")
        return projection

    raise ValueError(f"Unknown projection type: {projection_type}. "
                     f"Valid types are: {', '.join(config.PROJECTION_TYPES)}")
