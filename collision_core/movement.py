"""
Particle movement collaborators.

The collision engine only resolves displacements; something else has to
propose them. SimpleDiffusion3D is the random-walk diffuser the engine is
normally paired with.
"""

import logging
from typing import Any, Dict, List, Optional

import numpy as np

from collision_core import config
from collision_core.interfaces import ParticleInterface, meters_to_lat_lon, validate_positive, validate_non_negative

logger = logging.getLogger(__name__)


class SimpleDiffusion3D:
    """
    Anisotropic random-walk diffusion in three dimensions.

    Each call displaces the particle by

        dx = u_k * sqrt(h) * N(0, 1)
        dy = v_k * sqrt(h) * N(0, 1)
        dz = w_k * sqrt(h) * N(0, 1)

    metres, where h is the integration time step. The horizontal
    displacement is converted to degrees around the particle's current
    latitude.
    """

    def __init__(self, timestep_seconds: float = config.DEFAULT_DIFFUSION_PARAMS['timestep_seconds'],
                 u_k: float = config.DEFAULT_DIFFUSION_PARAMS['u_k'],
                 v_k: float = config.DEFAULT_DIFFUSION_PARAMS['v_k'],
                 w_k: float = config.DEFAULT_DIFFUSION_PARAMS['w_k'],
                 random_seed=None):
        """
        Initialize the diffuser.

        Args:
            timestep_seconds: Integration time step h in seconds
            u_k: East-west diffusivity scale
            v_k: North-south diffusivity scale
            w_k: Vertical diffusivity scale
            random_seed: Seed (int or numpy SeedSequence) for the generator;
                None draws fresh entropy

        Raises:
            ValueError: If any parameter is out of range
        """
        validate_positive(timestep_seconds, "Time step")
        validate_non_negative(u_k, "u_k")
        validate_non_negative(v_k, "v_k")
        validate_non_negative(w_k, "w_k")

        self.timestep_seconds = float(timestep_seconds)
        self.u_k = float(u_k)
        self.v_k = float(v_k)
        self.w_k = float(w_k)

        if isinstance(random_seed, np.random.SeedSequence):
            self._seed_sequence = random_seed
        else:
            self._seed_sequence = np.random.SeedSequence(random_seed)
        self._rng = np.random.default_rng(self._seed_sequence)

        self._sqrt_h = np.sqrt(self.timestep_seconds)

    @classmethod
    def from_params(cls, params: Optional[Dict[str, Any]] = None) -> 'SimpleDiffusion3D':
        """Create a diffuser from overrides of config.DEFAULT_DIFFUSION_PARAMS."""
        settings = config.DEFAULT_DIFFUSION_PARAMS.copy()
        if params is not None:
            settings.update(params)
        return cls(
            timestep_seconds=settings['timestep_seconds'],
            u_k=settings['u_k'],
            v_k=settings['v_k'],
            w_k=settings['w_k'],
            random_seed=settings['random_seed'],
        )

    def displacement(self):
        """Draw one displacement (dx, dy, dz) in metres."""
        dx, dy, dz = self._rng.standard_normal(3)
        return (self.u_k * self._sqrt_h * dx,
                self.v_k * self._sqrt_h * dy,
                self.w_k * self._sqrt_h * dz)

    def apply(self, particle: ParticleInterface) -> None:
        """
        Perturb the particle's current position.

        Args:
            particle: Particle with x = longitude, y = latitude, z = elevation
        """
        dx, dy, dz = self.displacement()
        lat, lon = meters_to_lat_lon(dx, dy, particle.y, particle.x)
        particle.x = lon
        particle.y = lat
        particle.z = particle.z + dz

    def spawn(self, n: int) -> List['SimpleDiffusion3D']:
        """
        Create independent diffusers for parallel workers.

        Each child has its own generator seeded from this instance's seed
        sequence, so streams never overlap.

        Args:
            n: Number of diffusers to create

        Returns:
            List of diffusers with the same parameters
        """
        children = self._seed_sequence.spawn(n)
        logger.debug(f"Spawned {n} diffusers")
        return [
            SimpleDiffusion3D(self.timestep_seconds, self.u_k, self.v_k, self.w_k, random_seed=child)
            for child in children
        ]

    def __repr__(self) -> str:
        return (f"SimpleDiffusion3D(timestep_seconds={self.timestep_seconds}, "
                f"u_k={self.u_k}, v_k={self.v_k}, w_k={self.w_k})")
