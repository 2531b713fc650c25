"""
Validation utilities for the collision engine.

This module provides validation functions for checking configuration
parameters, raster geometry and particles before collision resolution
runs. Each function returns a list of error messages (empty if valid)
so callers can report every problem at once.
"""

from typing import Dict, List, Any
import math

import numpy as np

from collision_core import config
from collision_core.data_models import Particle


def validate_collision_params(params: Dict[str, Any]) -> List[str]:
    """
    Validate collision resolution parameters.

    Args:
        params: Dictionary of collision parameters

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    nibble_distance = params.get('nibble_distance')
    if not isinstance(nibble_distance, (int, float)) or not nibble_distance > 0:
        errors.append(f"nibble_distance must be a positive number, got {nibble_distance}")

    floor_margin = params.get('floor_margin')
    if not isinstance(floor_margin, (int, float)) or not floor_margin >= 0:
        errors.append(f"floor_margin must be a non-negative number, got {floor_margin}")

    surface_level = params.get('surface_level')
    if not isinstance(surface_level, (int, float)) or not math.isfinite(surface_level):
        errors.append(f"surface_level must be a finite number, got {surface_level}")

    max_reflections = params.get('max_reflections')
    if isinstance(max_reflections, bool) or not isinstance(max_reflections, int) or max_reflections < 0:
        errors.append(f"max_reflections must be a non-negative integer, got {max_reflections}")

    projection = params.get('projection')
    if projection not in config.PROJECTION_TYPES:
        errors.append(f"projection must be one of {config.PROJECTION_TYPES}, got {projection}")

    return errors


def validate_projection_params(params: Dict[str, Any]) -> List[str]:
    """
    Validate coordinate projection parameters.

    Args:
        params: Dictionary of projection parameters

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    earth_radius = params.get('earth_radius')
    if not isinstance(earth_radius, (int, float)) or not earth_radius > 0:
        errors.append(f"earth_radius must be positive, got {earth_radius}")

    standard_parallel = params.get('standard_parallel')
    if standard_parallel is not None and not (-90 < standard_parallel < 90):
        errors.append(f"standard_parallel must be between -90 and 90 (exclusive), got {standard_parallel}")

    central_meridian = params.get('central_meridian')
    if not isinstance(central_meridian, (int, float)) or not (-180 <= central_meridian <= 180):
        errors.append(f"central_meridian must be between -180 and 180, got {central_meridian}")

    return errors


def validate_grid_geometry(depths: Any, min_x: float, min_y: float, cell_size: float) -> List[str]:
    """
    Validate the geometry of a raster boundary grid.

    Args:
        depths: 2-D array of node elevations
        min_x: X coordinate of the first column of nodes
        min_y: Y coordinate of the first row of nodes
        cell_size: Spacing between nodes

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    try:
        array = np.asarray(depths, dtype=float)
    except (TypeError, ValueError):
        errors.append("Depths must be convertible to a numeric array")
        array = None

    if array is not None:
        if array.ndim != 2:
            errors.append(f"Depths must be a 2-D array, got {array.ndim} dimensions")
        elif array.shape[0] < 2 or array.shape[1] < 2:
            errors.append(f"Depths must have at least 2x2 nodes, got {array.shape[0]}x{array.shape[1]}")

    for name, value in (('min_x', min_x), ('min_y', min_y)):
        if not isinstance(value, (int, float, np.floating)) or not math.isfinite(value):
            errors.append(f"{name} must be a finite number, got {value}")

    if not isinstance(cell_size, (int, float, np.floating)) or not (math.isfinite(cell_size) and cell_size > 0):
        errors.append(f"Cell size must be positive, got {cell_size}")

    return errors


def validate_particle(particle: Particle) -> List[str]:
    """
    Validate a particle before resolution.

    Args:
        particle: Particle to validate

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    for name in ('x', 'y', 'z', 'px', 'py', 'pz'):
        value = getattr(particle, name, None)
        if value is None or not math.isfinite(value):
            errors.append(f"Particle {particle.id} has invalid {name}: {value}")

    return errors
