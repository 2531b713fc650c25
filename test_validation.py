#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Test script for validation utilities and data models of the collision engine.
"""

import os
import sys
import logging
import unittest

import numpy as np

# Add parent directory to path to import collision_core modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '.')))

from collision_core import config
from collision_core.data_models import CellIndex, CellPatch, Particle, Point3, Segment
from collision_core.validation import (
    validate_collision_params,
    validate_projection_params,
    validate_grid_geometry,
    validate_particle,
)

logging.basicConfig(level=logging.INFO, format=config.LOGGING_CONFIG['format'])


class TestValidation(unittest.TestCase):
    """Test cases for the validation functions."""

    def test_default_params_are_valid(self):
        self.assertEqual(validate_collision_params(config.DEFAULT_COLLISION_PARAMS), [])
        self.assertEqual(validate_projection_params(config.DEFAULT_PROJECTION_PARAMS), [])

    def test_collision_params_errors(self):
        params = config.DEFAULT_COLLISION_PARAMS.copy()
        params.update({
            'nibble_distance': -1.0,
            'floor_margin': -0.5,
            'max_reflections': 2.5,
            'projection': 'utm',
        })
        errors = validate_collision_params(params)

        self.assertEqual(len(errors), 4)
        self.assertTrue(any('nibble_distance' in error for error in errors))
        self.assertTrue(any('floor_margin' in error for error in errors))
        self.assertTrue(any('max_reflections' in error for error in errors))
        self.assertTrue(any('utm' in error for error in errors))

    def test_surface_level_must_be_finite(self):
        params = config.DEFAULT_COLLISION_PARAMS.copy()
        params['surface_level'] = float('inf')
        self.assertEqual(len(validate_collision_params(params)), 1)

    def test_projection_params_errors(self):
        errors = validate_projection_params({
            'earth_radius': 0.0,
            'standard_parallel': 95.0,
            'central_meridian': 181.0,
        })
        self.assertEqual(len(errors), 3)

    def test_grid_geometry(self):
        self.assertEqual(validate_grid_geometry(np.zeros((2, 2)), 0.0, 0.0, 1.0), [])
        self.assertEqual(len(validate_grid_geometry(np.zeros((2, 1)), 0.0, 0.0, 1.0)), 1)
        self.assertEqual(len(validate_grid_geometry(np.zeros((3, 3)), 0.0, float('inf'), -1.0)), 2)

    def test_particle(self):
        self.assertEqual(validate_particle(Particle(id='ok', x=1.0, y=2.0, z=-3.0)), [])
        errors = validate_particle(Particle(id='bad', x=float('nan'), y=2.0, z=-3.0, px=1.0))
        self.assertEqual(len(errors), 1)
        self.assertIn('bad', errors[0])


class TestDataModels(unittest.TestCase):
    """Test cases for the collision data models."""

    def test_point_helpers(self):
        point = Point3(1.0, 2.0, -3.0)
        self.assertTrue(point.equals_2d(Point3(1.0, 2.0, 5.0)))
        self.assertEqual(point.translate(1.0, 1.0, 1.0), Point3(2.0, 3.0, -2.0))
        self.assertEqual(Point3.from_array(point.as_array()), point)

    def test_segment(self):
        segment = Segment(Point3(0.0, 0.0, 0.0), Point3(3.0, 4.0, 0.0))
        self.assertEqual(segment.length, 5.0)
        self.assertEqual(segment.point_at(0.5), Point3(1.5, 2.0, 0.0))

    def test_cell_index(self):
        cell = CellIndex(2, 3)
        self.assertEqual(cell.offset(-1, 2), CellIndex(1, 5))
        self.assertEqual(cell.chebyshev_distance(CellIndex(5, 4)), 3)
        self.assertEqual(cell.manhattan_distance(CellIndex(5, 4)), 4)

    def test_patch_requires_four_vertices(self):
        with self.assertRaises(ValueError):
            CellPatch((Point3(0.0, 0.0), Point3(1.0, 0.0), Point3(1.0, 1.0)))

    def test_particle_previous_position(self):
        particle = Particle(id='p1', x=1.0, y=2.0, z=-3.0)
        self.assertEqual(particle.previous_position, (1.0, 2.0, -3.0))

        particle.move_to(4.0, 5.0, -6.0)
        self.assertEqual(particle.previous_position, (1.0, 2.0, -3.0))
        particle.record_previous()
        self.assertEqual(particle.previous_position, (4.0, 5.0, -6.0))

    def test_particle_dict_round_trip(self):
        particle = Particle(id='p1', x=1.0, y=2.0, z=-3.0, px=0.5, lost=True)
        restored = Particle.from_dict(particle.to_dict())
        self.assertEqual(restored, particle)
        self.assertFalse(restored.active)


if __name__ == '__main__':
    unittest.main()
