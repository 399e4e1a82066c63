"""Tests for the AMBER force field."""

import numpy as np
import pytest

from mmcore.constants import COULOMB_CONSTANT
from mmcore.forcefields import CalculationType
from mmcore.forcefields.amber import (
    AmberAngleCalculation,
    AmberAtomTyper,
    AmberBondCalculation,
    AmberForceField,
    AmberNonbondedCalculation,
    AmberTorsionCalculation,
    load_parm99,
)
from mmcore.topology import Molecule


def set_up(*molecules, **kwargs):
    ff = AmberForceField(**kwargs)
    for molecule in molecules:
        ff.add_molecule(molecule)
    ok = ff.setup()
    return ff, ok


def of_type(ff, cls):
    return [calculation for calculation in ff.calculations if isinstance(calculation, cls)]


class TestAmberAtomTyper:
    """Tests for AMBER atom typing."""

    def test_ethane(self, ethane):
        typer = AmberAtomTyper(ethane)
        assert [typer(atom) for atom in ethane.atoms] == ["CT", "CT"] + ["HC"] * 6

    def test_methanol(self, methanol):
        typer = AmberAtomTyper(methanol)
        assert [typer(atom) for atom in methanol.atoms] == ["CT", "OH", "HO", "H1", "H1", "H1"]

    def test_ethylene(self, ethylene):
        typer = AmberAtomTyper(ethylene)
        assert [typer(atom) for atom in ethylene.atoms] == ["CM", "CM"] + ["HA"] * 4

    def test_benzene(self, benzene):
        typer = AmberAtomTyper(benzene)
        assert {typer(atom) for atom in benzene.atoms[:6]} == {"CA"}
        assert {typer(atom) for atom in benzene.atoms[6:]} == {"HA"}

    def test_unsupported_element(self):
        mol = Molecule()
        fluorine = mol.add_atom("F")
        assert AmberAtomTyper(mol)(fluorine) == ""


class TestAmberParameters:
    """Tests for the parm99 tables."""

    def test_bond_lookup_is_symmetric(self):
        parameters = load_parm99()
        assert parameters.bond_parameters("HC", "CT") == (340.0, 1.09)

    def test_specific_torsion_preferred(self):
        parameters = load_parm99()
        assert parameters.torsion_parameters("HC", "CT", "CT", "HC")[2] == 0.15
        assert parameters.torsion_parameters("H1", "CT", "CT", "HC")[2] == 0.1556

    def test_missing_type(self):
        assert load_parm99().nonbonded_parameters("XX") is None


class TestAmberSetup:
    """Tests for building AMBER calculations."""

    def test_ethane(self, ethane):
        ff, ok = set_up(ethane)
        assert ok, ff.error_string
        assert ff.is_setup
        assert len(of_type(ff, AmberBondCalculation)) == 7
        assert len(of_type(ff, AmberAngleCalculation)) == 12
        assert len(of_type(ff, AmberTorsionCalculation)) == 9
        assert len(of_type(ff, AmberNonbondedCalculation)) == 9
        assert ff.calculation_count == 37

    def test_charges_from_structure(self, methanol):
        ff, ok = set_up(methanol)
        assert ok, ff.error_string
        assert ff.atom(1).charge == pytest.approx(-0.599)
        assert ff.atom(2).charge == pytest.approx(0.398)

    @pytest.mark.parametrize("name", ["ethane", "methanol", "ethylene", "benzene"])
    def test_all_calculations_set_up(self, name, request):
        ff, ok = set_up(request.getfixturevalue(name))
        assert ok, ff.error_string
        assert np.isfinite(ff.energy())

    def test_untyped_atom_fails_setup(self):
        mol = Molecule("fluoromethane")
        c = mol.add_atom("C")
        mol.add_bond(c, mol.add_atom("F", [1.38, 0.0, 0.0]))
        for position in ([-0.36, 1.03, 0.0], [-0.36, -0.51, 0.89], [-0.36, -0.51, -0.89]):
            mol.add_bond(c, mol.add_atom("H", position))

        ff, ok = set_up(mol)
        assert not ok
        assert not ff.is_setup
        assert ff.error_string
        assert np.isfinite(ff.energy())

    def test_custom_typer(self):
        mol = Molecule()
        mol.add_bond(mol.add_atom("C"), mol.add_atom("C", [1.626, 0.0, 0.0]))
        ff, ok = set_up(mol, atom_typer=lambda atom: "CT")
        assert ok
        # kb (r - r0)^2 = 310 * 0.1^2
        assert ff.energy() == pytest.approx(3.1)


class TestAmberEnergy:
    """Tests for AMBER energy terms."""

    def test_coulomb(self):
        mol = Molecule()
        mol.add_atom("H", [0.0, 0.0, 0.0], partial_charge=1.0)
        mol.add_atom("H", [2.0, 0.0, 0.0], partial_charge=-1.0)
        ff, ok = set_up(mol, atom_typer=lambda atom: "HO")
        assert ok
        nonbonded = of_type(ff, AmberNonbondedCalculation)
        assert len(nonbonded) == 1
        assert nonbonded[0].type & CalculationType.ELECTROSTATIC
        assert ff.energy() == pytest.approx(-COULOMB_CONSTANT / 2.0)

    def test_lennard_jones_minimum(self):
        mol = Molecule()
        mol.add_atom("C", [0.0, 0.0, 0.0])
        mol.add_atom("C", [2 * 1.908, 0.0, 0.0])
        ff, ok = set_up(mol, atom_typer=lambda atom: "CT")
        assert ok
        # at r = sigma the energy is -epsilon and the force vanishes
        assert ff.energy() == pytest.approx(-0.1094)
        np.testing.assert_allclose(ff.gradient(), 0.0, atol=1e-10)

    def test_torsion_periodicity(self, ethane):
        ff, _ = set_up(ethane)
        torsion = of_type(ff, AmberTorsionCalculation)[0]
        assert torsion.parameter_count == 8
        # gamma values are stored in radians
        assert all(torsion.parameter(i) == 0.0 for i in range(4, 8))

    def test_angles_in_radians(self, ethane):
        ff, _ = set_up(ethane)
        angle = of_type(ff, AmberAngleCalculation)[0]
        assert angle.parameter(1) == pytest.approx(np.radians(109.5))

    @pytest.mark.parametrize("name", ["ethane", "methanol", "ethylene"])
    def test_analytic_gradients(self, name, request):
        ff, ok = set_up(request.getfixturevalue(name))
        assert ok
        for calculation in ff.calculations:
            np.testing.assert_allclose(
                calculation.gradient(),
                calculation.numerical_gradient(),
                rtol=1e-4,
                atol=1e-3,
                err_msg=repr(calculation),
            )
        np.testing.assert_allclose(ff.gradient(), ff.numerical_gradient(), rtol=1e-3, atol=1e-2)

    def test_minimize_lowers_energy(self, ethane):
        ff, _ = set_up(ethane, rng=np.random.default_rng(0))
        before = ff.energy()
        original = ethane.positions
        ff.minimize(tolerance=0.5, max_steps=20)
        assert ff.energy() < before
        assert not np.allclose(ethane.positions, original)
