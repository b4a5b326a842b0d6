"""
Step function tests.

Tests physical and numerical properties of a tick:
- Integration scheme
- Density estimation
- Conservation and determinism
- Snapshot contents
"""

import numpy as np
import pytest
from sphstream import Simulation, SimulationConfig
from sphstream.core.kernels import Poly6Kernel, KernelType
from sphstream.core.integrator import kinetic_energy
from sphstream.core.particles import ParticleArrays
from sphstream.physics.forces import RestoringForceModel
from sphstream.scenarios import create_random_cube


CPU = SimulationConfig(dt=0.01, smoothing_h=1.0, backend='cpu')


class TestEndToEnd:
    """Hand-checked single-tick scenarios."""

    def test_two_resting_particles(self, two_particles):
        """No force, no velocity: nothing moves; each sees the other's weight only."""
        sim = Simulation(two_particles, CPU)
        snapshot = sim.step()

        np.testing.assert_array_equal(snapshot.positions, [[0, 0, 0], [0.5, 0, 0]])

        # Self term is 0 (Poly6 at r = 0), cross term is W(0.5)
        expected = Poly6Kernel().value((0.5, 0.0, 0.0), 1.0)
        assert sim.density[0] == pytest.approx(expected, rel=1e-6)
        assert sim.density[1] == pytest.approx(expected, rel=1e-6)
        np.testing.assert_array_equal(snapshot.density, sim.density)

    def test_single_particle_under_force(self):
        sim = Simulation.from_arrays(
            mass=[1.0],
            positions=[[1.0, 0.0, 0.0]],
            forces=[[-0.1, 0.0, 0.0]],
            config=CPU,
        )
        snapshot = sim.step()

        np.testing.assert_allclose(sim.particles.get_velocities()[0], [-0.001, 0.0, 0.0],
                                   rtol=1e-6, atol=1e-9)
        np.testing.assert_allclose(snapshot.positions[0], [0.99999, 0.0, 0.0], rtol=1e-6)
        assert sim.density[0] == 0.0

    def test_density_sees_advanced_positions(self):
        """Particles out of range before the tick but in range after it."""
        particles = ParticleArrays.from_arrays(
            mass=[1.0, 1.0],
            positions=[[0.0, 0.0, 0.0], [2.0, 0.0, 0.0]],
            velocities=[[0.75, 0.0, 0.0], [-0.75, 0.0, 0.0]],
        )
        sim = Simulation(particles, SimulationConfig(dt=1.0, smoothing_h=1.0, backend='cpu'))
        sim.step()

        expected = Poly6Kernel().value((0.5, 0.0, 0.0), 1.0)
        assert expected > 0.0
        assert sim.density[0] == pytest.approx(expected, rel=1e-6)


class TestIntegration:
    def test_semi_implicit_order(self):
        """Position update uses the velocity from this tick."""
        sim = Simulation.from_arrays([2.0], [[0.0, 0.0, 0.0]], forces=[[0.0, 4.0, 0.0]],
                                     config=SimulationConfig(dt=0.5, backend='cpu'))
        sim.step()
        # v = 0 + 0.5 / 2 * 4 = 1, x = 0 + 0.5 * 1
        np.testing.assert_allclose(sim.particles.get_velocities()[0], [0.0, 1.0, 0.0])
        np.testing.assert_allclose(sim.particles.get_positions()[0], [0.0, 0.5, 0.0])

    def test_static_force_unchanged(self, cube_particles):
        forces_before = cube_particles.get_forces()
        sim = Simulation(cube_particles, CPU)
        sim.run(5)
        np.testing.assert_array_equal(sim.particles.get_forces(), forces_before)

    def test_force_model_hook(self):
        """A force model recomputes forces from the pre-step positions."""
        sim = Simulation.from_arrays([1.0], [[1.0, 0.0, 0.0]], config=CPU,
                                     force_model=RestoringForceModel(stiffness=0.1))
        sim.step()
        np.testing.assert_allclose(sim.particles.get_forces()[0], [-0.1, 0.0, 0.0], rtol=1e-6)
        np.testing.assert_allclose(sim.particles.get_velocities()[0], [-0.001, 0.0, 0.0],
                                   rtol=1e-6)

    def test_restoring_force_pulls_inward(self, cube_particles):
        sim = Simulation(cube_particles, CPU)
        r_before = np.linalg.norm(sim.particles.get_positions(), axis=1).mean()
        sim.run(20)
        r_after = np.linalg.norm(sim.particles.get_positions(), axis=1).mean()
        assert r_after < r_before
        assert kinetic_energy(sim.particles) > 0.0


class TestConservation:
    def test_mass_conserved(self, cube_particles):
        sim = Simulation(cube_particles, CPU)
        total_before = sim.particles.total_mass()
        mass_before = sim.particles.mass.copy()
        sim.run(10)
        assert sim.particles.total_mass() == total_before
        np.testing.assert_array_equal(sim.particles.mass, mass_before)

    @pytest.mark.parametrize("kernel", [KernelType.POLY6, KernelType.SPIKY])
    def test_density_non_negative(self, kernel):
        rng = np.random.default_rng(5)
        sim = Simulation.from_arrays(
            mass=rng.uniform(0.1, 5.0, size=150),
            positions=rng.uniform(-0.5, 0.5, size=(150, 3)),
            config=SimulationConfig(density_kernel=kernel, backend='cpu'),
        )
        sim.step()
        assert np.all(sim.density >= 0.0)
        assert np.all(np.isfinite(sim.density))

    def test_deterministic(self):
        """Identical initial state gives identical trajectories."""
        runs = []
        for _ in range(2):
            sim = Simulation(create_random_cube(150, seed=3), CPU)
            snapshots = sim.run(15)
            runs.append((sim.particles.get_positions(), sim.particles.get_velocities(),
                         np.stack([s.density for s in snapshots])))

        for a, b in zip(*runs):
            np.testing.assert_array_equal(a, b)


class TestSnapshot:
    def test_one_record_per_particle(self, cube_particles):
        sim = Simulation(cube_particles, CPU)
        snapshot = sim.step()
        assert len(snapshot) == 200
        assert snapshot.tick == 1
        assert sim.step().tick == 2

    def test_default_color_map(self, cube_particles):
        sim = Simulation(cube_particles, CPU)
        snapshot = sim.step()
        scaled = snapshot.density / np.float32(150.0)
        np.testing.assert_allclose(snapshot.colors[:, 0], scaled, rtol=1e-6)
        np.testing.assert_array_equal(snapshot.colors[:, 1], 1.0)
        np.testing.assert_allclose(snapshot.colors[:, 2], scaled, rtol=1e-6)

    def test_custom_color_map(self, two_particles):
        def grey(density):
            return np.full((density.shape[0], 3), 0.5, dtype=np.float32)

        sim = Simulation(two_particles, CPU, color_map=grey)
        np.testing.assert_array_equal(sim.step().colors, 0.5)

    def test_snapshot_is_independent_copy(self):
        sim = Simulation.from_arrays([1.0], [[0.0, 0.0, 0.0]], velocities=[[1.0, 0.0, 0.0]],
                                     config=CPU)
        first = sim.step()
        position_after_first = first.positions.copy()
        sim.run(5)
        np.testing.assert_array_equal(first.positions, position_after_first)
        assert sim.particles.position_x[0] > position_after_first[0, 0]

    def test_snapshot_is_read_only(self, two_particles):
        snapshot = Simulation(two_particles, CPU).step()
        with pytest.raises(ValueError):
            snapshot.records['position'][0, 0] = 1.0
        with pytest.raises(ValueError):
            snapshot.density[0] = 1.0


class TestSpatialIndex:
    def test_matches_all_pairs(self):
        """Grid-restricted density equals the all-pairs sum."""
        config_h = dict(dt=0.01, smoothing_h=0.3, backend='cpu')
        naive = Simulation(create_random_cube(300, seed=9), SimulationConfig(**config_h))
        indexed = Simulation(create_random_cube(300, seed=9),
                             SimulationConfig(use_spatial_index=True, **config_h))
        for _ in range(3):
            naive.step()
            indexed.step()
        np.testing.assert_allclose(indexed.density, naive.density, rtol=1e-5, atol=1e-6)
