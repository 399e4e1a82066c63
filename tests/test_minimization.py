"""Tests for steepest descent minimization."""

import logging

import numpy as np
import pytest

from mmcore.forcefields import (
    CalculationType,
    ForceField,
    ForceFieldAtom,
    ForceFieldCalculation,
    ForceFieldFlags,
    MinimizationSettings,
)
from mmcore.topology import Molecule


class CliffBond(ForceFieldCalculation):
    """Harmonic bond whose energy is NaN beyond ``cutoff``."""

    def __init__(self, a, b, cutoff):
        super().__init__(CalculationType.BOND_STRETCH, (a, b), 0)
        self.cutoff = cutoff

    def setup(self, parameters):
        return True

    def energy(self):
        r = self.distance(*self.atoms)
        if r > self.cutoff:
            return float("nan")
        return 10000.0 * (r - 1.0) ** 2

    def gradient(self):
        r = self.distance(*self.atoms)
        return self.distance_gradient(*self.atoms) * 20000.0 * (r - 1.0)


class CliffForceField(ForceField):
    """Single CliffBond between the first two atoms of each molecule."""

    def __init__(self, cutoff=50.0, **kwargs):
        super().__init__("cliff", flags=ForceFieldFlags.ANALYTICAL_GRADIENT, **kwargs)
        self.cutoff = cutoff
        self.add_parameter_set("none", lambda: None)
        self.set_parameter_set("none")

    def setup(self):
        parameters = self._load_parameters()
        self._reset()
        for molecule in self.molecules:
            for atom in molecule.atoms:
                self.add_atom(ForceFieldAtom(self, atom))
            a, b = (self.atom_for(atom) for atom in molecule.atoms[:2])
            self.add_calculation(CliffBond(a, b, self.cutoff))
        return self._setup_calculations(parameters)


@pytest.fixture
def short_bond():
    mol = Molecule("short")
    mol.add_bond(mol.add_atom("H", [0.0, 0.0, 0.0]), mol.add_atom("H", [1.5, 0.0, 0.0]))
    return mol


class TestMinimizationSettings:
    """Tests for line search settings validation."""

    def test_defaults(self):
        settings = MinimizationSettings()
        assert settings.initial_step == 0.05
        assert settings.max_step == 1.0
        assert settings.max_line_search_iterations == 10

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"initial_step": 0.0},
            {"initial_step": 2.0, "max_step": 1.0},
            {"step_growth": 1.0},
            {"step_shrink": 1.0},
            {"step_shrink": 0.0},
            {"max_line_search_iterations": 0},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            MinimizationSettings(**kwargs)


class TestMinimizationStep:
    """Tests for single minimization steps."""

    def test_energy_never_increases(self, bond_force_field):
        energy = bond_force_field.energy()
        for _ in range(20):
            bond_force_field.minimization_step(1e-3)
            new_energy = bond_force_field.energy()
            assert new_energy <= energy + 1e-12
            energy = new_energy

    def test_energy_decreases(self, bond_force_field):
        initial = bond_force_field.energy()
        bond_force_field.minimization_step(1e-3)
        assert bond_force_field.energy() < initial

    def test_returns_convergence_flag(self, harmonic_force_field_class):
        # 3.1 A apart: the accepted step overshoots to 1.1 A, not onto r0
        mol = Molecule("h2")
        mol.add_bond(mol.add_atom("H"), mol.add_atom("H", [3.1, 0.0, 0.0]))
        with harmonic_force_field_class(k=100.0, r0=1.0) as ff:
            ff.add_molecule(mol)
            assert ff.setup()

            assert not ff.minimization_step(1e-6)
            assert ff.distance(ff.atom(0), ff.atom(1)) == pytest.approx(1.1)
            assert ff.root_mean_square_gradient() > 1e-6
            assert ff.minimization_step(1e6)

    def test_structure_is_untouched(self, bond_force_field, two_atom_molecule):
        bond_force_field.minimization_step(1e-3)
        np.testing.assert_array_equal(two_atom_molecule.atom(1).position, [3.0, 0.0, 0.0])

    def test_async_step(self, bond_force_field):
        initial = bond_force_field.energy()
        future = bond_force_field.minimization_step_async(1e-3)
        assert future.result(timeout=30) in (True, False)
        assert bond_force_field.energy() < initial


class TestMinimize:
    """Tests for the minimization driver."""

    def test_converges_to_bond_length(self, harmonic_force_field_class, two_atom_molecule):
        ff = harmonic_force_field_class(k=30.0, r0=1.0)
        ff.add_molecule(two_atom_molecule)
        ff.setup()
        assert ff.minimize(tolerance=1e-2, max_steps=500)
        assert ff.root_mean_square_gradient() < 1e-2
        a, b = two_atom_molecule.atoms
        assert np.linalg.norm(a.position - b.position) == pytest.approx(1.0, abs=1e-3)

    def test_without_write_back(self, bond_force_field, two_atom_molecule):
        bond_force_field.minimize(tolerance=1e-2, max_steps=5, write_back=False)
        np.testing.assert_array_equal(two_atom_molecule.atom(1).position, [3.0, 0.0, 0.0])

    def test_zero_steps(self, bond_force_field):
        assert not bond_force_field.minimize(tolerance=1e-2, max_steps=0)
        assert bond_force_field.energy() == pytest.approx(400.0)

    def test_custom_settings(self, harmonic_force_field_class, two_atom_molecule):
        settings = MinimizationSettings(initial_step=0.001, max_step=0.01)
        ff = harmonic_force_field_class(settings=settings)
        ff.add_molecule(two_atom_molecule)
        ff.setup()
        initial = ff.energy()
        ff.minimization_step(1e-3)
        assert ff.energy() < initial


class TestDivergenceRecovery:
    """Tests for recovery from NaN energies."""

    def _run(self, molecule, seed):
        ff = CliffForceField(cutoff=50.0, rng=np.random.default_rng(seed))
        ff.add_molecule(molecule)
        assert ff.setup()
        ff.minimization_step(1e-3)
        return ff

    def test_nan_energy_is_recovered(self, short_bond, caplog):
        with caplog.at_level(logging.WARNING, logger="mmcore.forcefields.forcefield"):
            ff = self._run(short_bond, seed=7)

        assert "diverged" in caplog.text
        assert np.all(np.isfinite(ff.positions))
        assert np.isfinite(ff.energy())

    def test_recovery_is_reproducible_with_seed(self, short_bond):
        first = self._run(short_bond, seed=3).positions
        second = self._run(short_bond, seed=3).positions
        np.testing.assert_array_equal(first, second)
