"""
Configuration settings for the particle-boundary collision engine.

This module contains default parameters for collision resolution,
coordinate projection, diffusion and logging. Callers pass dictionaries
of overrides which are merged over copies of these defaults.
"""

# Default collision resolution parameters
DEFAULT_COLLISION_PARAMS = {
    # Distance (projected units) the start of a reflected segment is pushed
    # along the segment so the next test does not re-detect the same hit
    'nibble_distance': 1e-8,
    # Height (depth units, metres) above the true floor that a particle
    # resolved beneath the floor is lifted to
    'floor_margin': 1.0,
    # Elevation of the water surface; particles lifted above it are beached
    'surface_level': 0.0,
    # Maximum number of bounces within a single resolution
    'max_reflections': 64,
    # Projection used for the reflection math ('ceqd' or 'none')
    'projection': 'ceqd',
}

# Default projection parameters
DEFAULT_PROJECTION_PARAMS = {
    'earth_radius': 6371000.0,  # metres
    'standard_parallel': None,  # None = central latitude of the grid
    'central_meridian': 0.0,
}

# Default diffusion parameters
DEFAULT_DIFFUSION_PARAMS = {
    'timestep_seconds': 7200.0,  # minimum integration time step (2 hours)
    'u_k': 2.0,                  # east-west eddy diffusivity scale
    'v_k': 2.0,                  # north-south eddy diffusivity scale
    'w_k': 1.0e-5,               # vertical eddy diffusivity scale
    'random_seed': None,
}

# Available implementations
DETECTOR_TYPES = ['bathymetry', 'none']
PROJECTION_TYPES = ['ceqd', 'none', 'identity']

# Logging configuration
LOGGING_CONFIG = {
    'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    'level': 'INFO',
}
