#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Test script for the movement and behaviour collaborators.
"""

import os
import sys
import math
import logging
import unittest

import numpy as np

# Add parent directory to path to import collision_core modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '.')))

from collision_core import config
from collision_core.behavior import NoSettlement
from collision_core.data_models import Particle
from collision_core.interfaces import EARTH_RADIUS
from collision_core.movement import SimpleDiffusion3D

logging.basicConfig(level=logging.INFO, format=config.LOGGING_CONFIG['format'])


def haversine_distance(lat1, lon1, lat2, lon2):
    """Great-circle distance in metres between two lat/lon points."""
    lat1_rad, lat2_rad = math.radians(lat1), math.radians(lat2)
    dlat = lat2_rad - lat1_rad
    dlon = math.radians(lon2 - lon1)
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS * math.asin(math.sqrt(a))


class TestSimpleDiffusion3D(unittest.TestCase):
    """Test cases for SimpleDiffusion3D."""

    def test_defaults(self):
        diffuser = SimpleDiffusion3D()
        self.assertEqual(diffuser.timestep_seconds, 7200.0)
        self.assertEqual(diffuser.u_k, 2.0)
        self.assertEqual(diffuser.v_k, 2.0)
        self.assertEqual(diffuser.w_k, 1e-5)

    def test_from_params(self):
        diffuser = SimpleDiffusion3D.from_params({'u_k': 3.0, 'random_seed': 1})
        self.assertEqual(diffuser.u_k, 3.0)
        self.assertEqual(diffuser.v_k, config.DEFAULT_DIFFUSION_PARAMS['v_k'])

    def test_displacement_statistics(self):
        """Displacements have zero mean and standard deviation k * sqrt(h)."""
        diffuser = SimpleDiffusion3D(random_seed=123)
        samples = np.array([diffuser.displacement() for _ in range(20000)])

        expected = np.array([2.0, 2.0, 1e-5]) * math.sqrt(7200.0)
        np.testing.assert_allclose(samples.std(axis=0), expected, rtol=0.05)
        np.testing.assert_allclose(samples.mean(axis=0), 0.0, atol=4.0 * 0.05 * expected.max())

    def test_apply_moves_in_degrees(self):
        diffuser = SimpleDiffusion3D(random_seed=5)
        expected_dx, expected_dy, expected_dz = SimpleDiffusion3D(random_seed=5).displacement()

        particle = Particle(id='p1', x=-80.0, y=-3.5, z=-10.0)
        diffuser.apply(particle)

        self.assertAlmostEqual(particle.y + 3.5, math.degrees(expected_dy / EARTH_RADIUS))
        self.assertAlmostEqual(particle.x + 80.0,
                               math.degrees(expected_dx / (EARTH_RADIUS * math.cos(math.radians(-3.5)))))
        self.assertAlmostEqual(particle.z, -10.0 + expected_dz)
        distance = haversine_distance(-3.5, -80.0, particle.y, particle.x)
        self.assertAlmostEqual(distance, math.hypot(expected_dx, expected_dy), delta=0.01)
        # The previous position is left for the collision engine
        self.assertEqual(particle.previous_position, (-80.0, -3.5, -10.0))

    def test_seed_reproducibility(self):
        a = SimpleDiffusion3D(random_seed=99)
        b = SimpleDiffusion3D(random_seed=99)
        self.assertEqual(a.displacement(), b.displacement())

    def test_spawn_independent_streams(self):
        parent = SimpleDiffusion3D(u_k=1.5, random_seed=11)
        children = parent.spawn(3)

        self.assertEqual(len(children), 3)
        for child in children:
            self.assertEqual(child.u_k, 1.5)
        draws = [child.displacement() for child in children]
        self.assertEqual(len(set(draws)), 3)

        # Spawning is deterministic for a given seed
        again = SimpleDiffusion3D(u_k=1.5, random_seed=11).spawn(3)
        self.assertEqual(draws, [child.displacement() for child in again])

    def test_invalid_parameters(self):
        with self.assertRaises(ValueError):
            SimpleDiffusion3D(timestep_seconds=0.0)
        with self.assertRaises(ValueError):
            SimpleDiffusion3D(u_k=-1.0)


class TestNoSettlement(unittest.TestCase):
    """Test cases for NoSettlement."""

    def test_no_action(self):
        particle = Particle(id='p1', x=1.0, y=2.0, z=-3.0)
        NoSettlement().apply(particle)
        self.assertEqual(particle.to_dict(), Particle(id='p1', x=1.0, y=2.0, z=-3.0).to_dict())


if __name__ == '__main__':
    unittest.main()
