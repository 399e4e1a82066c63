"""Tests for ForceFieldAtom and the ForceFieldCalculation base class."""

import numpy as np
import pytest

from mmcore.forcefields import CalculationType, ForceFieldAtom, ForceFieldCalculation


@pytest.fixture
def force_field(two_atom_molecule, harmonic_force_field_class):
    ff = harmonic_force_field_class(k=100.0, r0=1.0)
    ff.add_molecule(two_atom_molecule)
    ff.setup()
    return ff


class TestCalculationType:
    """Tests for the calculation category bitmask."""

    def test_combined_flags(self):
        combined = CalculationType.VAN_DER_WAALS | CalculationType.ELECTROSTATIC
        assert combined & CalculationType.ELECTROSTATIC
        assert not combined & CalculationType.TORSION

    def test_distinct_bits(self):
        values = [member.value for member in CalculationType]
        assert len(set(values)) == len(values)


class TestForceFieldAtom:
    """Tests for ForceFieldAtom."""

    def test_position_is_copied_from_structure(self, force_field, two_atom_molecule):
        structural = two_atom_molecule.atom(1)
        ff_atom = force_field.atom_for(structural)
        ff_atom.move_by([1.0, 0.0, 0.0])
        assert structural.position[0] == 3.0
        assert ff_atom.position[0] == 4.0

    def test_type_and_charge(self, force_field):
        atom = force_field.atom(0)
        atom.set_type("HX")
        atom.set_charge(-0.25)
        assert atom.type == "HX"
        assert atom.charge == -0.25

    def test_energy_sums_member_calculations(self, force_field):
        # r = 3, r0 = 1: 100 * 2^2
        assert force_field.atom(0).energy() == pytest.approx(400.0)


class TestForceFieldCalculation:
    """Tests for the calculation base class."""

    @pytest.fixture
    def bond(self, force_field):
        return force_field.calculations[0]

    def test_cannot_instantiate_abstract(self):
        with pytest.raises(TypeError):
            ForceFieldCalculation(CalculationType.BOND_STRETCH, (), 1)

    def test_atoms_and_contains(self, bond, force_field):
        assert bond.atom_count == 2
        assert bond.contains(force_field.atom(0))
        assert bond.atom(1) is force_field.atom(1)

    def test_parameter_vector_is_fixed(self, bond):
        assert bond.parameter_count == 2
        assert bond.parameter(0) == 100.0
        bond.set_parameter(1, 1.5)
        assert bond.parameter(1) == 1.5
        with pytest.raises(IndexError):
            bond.set_parameter(2, 1.0)
        with pytest.raises(IndexError):
            bond.set_parameter(-1, 1.0)
        with pytest.raises(IndexError):
            bond.parameter(2)
        with pytest.raises(IndexError):
            bond.atom(2)

    def test_parameters_returns_copy(self, bond):
        params = bond.parameters
        params[0] = -1.0
        assert bond.parameter(0) == 100.0

    def test_setup_state(self, bond):
        assert bond.is_setup
        assert bond.type == CalculationType.BOND_STRETCH

    def test_numerical_gradient_matches_analytic(self, bond):
        np.testing.assert_allclose(
            bond.numerical_gradient(), bond.gradient(), rtol=1e-5, atol=1e-3
        )

    def test_numerical_gradient_restores_positions(self, bond):
        before = [atom.position.copy() for atom in bond.atoms]
        bond.numerical_gradient()
        for atom, position in zip(bond.atoms, before):
            np.testing.assert_array_equal(atom.position, position)

    def test_default_gradient_is_numerical(self, force_field):
        class Spring(ForceFieldCalculation):
            def __init__(self, a, b):
                super().__init__(CalculationType.BOND_STRETCH, (a, b), 0)

            def setup(self, parameters):
                return True

            def energy(self):
                return self.distance(*self.atoms) ** 2

        a, b = force_field.atoms
        spring = Spring(a, b)
        # dE/dx_b = 2 r along the bond axis, r = 3
        np.testing.assert_allclose(spring.gradient()[1], [6.0, 0.0, 0.0], atol=1e-3)

    def test_geometry_helpers(self, force_field):
        a, b = force_field.atoms
        assert ForceFieldCalculation.distance(a, b) == pytest.approx(3.0)
        np.testing.assert_allclose(
            ForceFieldCalculation.distance_gradient(a, b), [[-1, 0, 0], [1, 0, 0]]
        )

    def test_repr_lists_indices(self, bond):
        assert repr(bond) == "HarmonicBond(0, 1)"


def test_force_field_atom_starts_unindexed(force_field, two_atom_molecule):
    atom = ForceFieldAtom(force_field, two_atom_molecule.atom(0))
    assert atom.index == -1
    assert atom.type == ""
