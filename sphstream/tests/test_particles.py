"""Particle state construction and validation tests."""

import numpy as np
import pytest
from sphstream.core.particles import ParticleArrays
from sphstream.errors import ConfigurationError
from sphstream.scenarios import create_random_cube, create_lattice


class TestConstruction:
    def test_shapes_and_dtype(self, two_particles):
        assert two_particles.n_particles == 2
        for name in ('mass', 'position_x', 'velocity_y', 'force_z', 'density'):
            array = getattr(two_particles, name)
            assert array.shape == (2,)
            assert array.dtype == np.float32
        assert two_particles.get_positions().shape == (2, 3)

    def test_defaults_are_zero(self):
        particles = ParticleArrays.from_arrays([1.0, 2.0], [[0, 0, 0], [1, 1, 1]])
        assert np.all(particles.get_velocities() == 0.0)
        assert np.all(particles.get_forces() == 0.0)

    def test_inputs_are_copied(self):
        positions = np.zeros((3, 3), dtype=np.float32)
        particles = ParticleArrays.from_arrays(np.ones(3), positions)
        positions[0, 0] = 5.0
        assert particles.position_x[0] == 0.0

    def test_mass_is_read_only(self, two_particles):
        with pytest.raises(ValueError):
            two_particles.mass[0] = 3.0

    def test_set_forces(self, two_particles):
        two_particles.set_forces([[1, 2, 3], [4, 5, 6]])
        np.testing.assert_array_equal(two_particles.get_forces(), [[1, 2, 3], [4, 5, 6]])


class TestValidation:
    """Configuration errors are raised before any state exists."""

    def test_empty_system(self):
        with pytest.raises(ConfigurationError):
            ParticleArrays.from_arrays([], np.zeros((0, 3)))

    @pytest.mark.parametrize("bad_mass", [0.0, -1.0, np.nan, np.inf])
    def test_invalid_mass(self, bad_mass):
        with pytest.raises(ConfigurationError):
            ParticleArrays.from_arrays([1.0, bad_mass], np.zeros((2, 3)))

    def test_shape_mismatch(self):
        with pytest.raises(ConfigurationError):
            ParticleArrays.from_arrays([1.0, 1.0], np.zeros((3, 3)))
        with pytest.raises(ConfigurationError):
            ParticleArrays.from_arrays([1.0, 1.0], np.zeros((2, 3)), velocities=np.zeros((2, 2)))

    def test_non_finite_position(self):
        with pytest.raises(ConfigurationError):
            ParticleArrays.from_arrays([1.0], [[np.nan, 0.0, 0.0]])

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            ParticleArrays.from_arrays([-1.0], [[0.0, 0.0, 0.0]])


class TestScenarios:
    def test_random_cube_matches_base_setup(self):
        particles = create_random_cube(1000, seed=0)
        positions = particles.get_positions()

        assert particles.n_particles == 1000
        assert np.all(np.abs(positions) <= 1.0)
        assert np.all(particles.mass == 1.0)
        assert np.all(particles.get_velocities() == 0.0)
        np.testing.assert_allclose(particles.get_forces(), -0.1 * positions, rtol=1e-6)

    def test_random_cube_seeded(self):
        a = create_random_cube(50, seed=11)
        b = create_random_cube(50, seed=11)
        np.testing.assert_array_equal(a.get_positions(), b.get_positions())

    def test_lattice_centered(self):
        particles = create_lattice(n_per_side=4, spacing=0.5)
        assert particles.n_particles == 64
        np.testing.assert_allclose(particles.get_positions().mean(axis=0), 0.0, atol=1e-6)
