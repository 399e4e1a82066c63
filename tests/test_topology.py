"""Tests for structural molecules and interaction enumeration."""

import numpy as np
import pytest

from mmcore.topology import ForceFieldInteractions, Molecule, element


class TestElements:
    """Tests for the element table."""

    def test_lookup(self):
        oxygen = element("O")
        assert oxygen.atomic_number == 8
        assert oxygen.period == 2
        assert oxygen.group == 16

    def test_unknown_symbol_raises(self):
        with pytest.raises(ValueError, match="Unknown element"):
            element("Xx")


class TestMolecule:
    """Tests for Molecule."""

    def test_add_atoms_and_bonds(self, ethane):
        assert ethane.n_atoms == 8
        assert ethane.n_bonds == 7
        assert ethane.positions.shape == (8, 3)

    def test_atom_index_out_of_range(self, ethane):
        with pytest.raises(IndexError):
            ethane.atom(8)

    def test_unknown_element_rejected(self):
        with pytest.raises(ValueError):
            Molecule().add_atom("Qq")

    def test_self_bond_rejected(self):
        mol = Molecule()
        a = mol.add_atom("C")
        with pytest.raises(ValueError):
            mol.add_bond(a, a)

    def test_duplicate_bond_rejected(self):
        mol = Molecule()
        a = mol.add_atom("C")
        b = mol.add_atom("C", [1.5, 0, 0])
        mol.add_bond(a, b)
        with pytest.raises(ValueError, match="already bonded"):
            mol.add_bond(b, a)

    def test_foreign_atom_rejected(self):
        other = Molecule()
        foreign = other.add_atom("C")
        mol = Molecule()
        mol.add_atom("C")
        with pytest.raises(ValueError):
            mol.add_bond(0, foreign)

    def test_bond_order_and_neighbors(self, ethylene):
        c1, c2 = ethylene.atom(0), ethylene.atom(1)
        assert ethylene.bond_order(c1, c2) == 2.0
        assert ethylene.bond_order(c1, ethylene.atom(4)) == 0.0
        assert len(ethylene.neighbors(c1)) == 3
        assert ethylene.valence(c1) == pytest.approx(4.0)

    def test_bond_distances(self, ethane):
        c1 = ethane.atom(0)
        h_far = ethane.atom(5)
        distances = ethane.bond_distances(ethane.atom(2))
        assert distances[c1] == 1
        assert distances[h_far] == 3
        limited = ethane.bond_distances(ethane.atom(2), max_bonds=2)
        assert h_far not in limited

    def test_fragments(self):
        mol = Molecule()
        a = mol.add_atom("H")
        b = mol.add_atom("H", [0.74, 0, 0])
        c = mol.add_atom("H", [5.0, 0, 0])
        d = mol.add_atom("H", [5.74, 0, 0])
        mol.add_bond(a, b)
        mol.add_bond(c, d)
        fragments = mol.fragments()
        assert len(fragments) == 2
        assert fragments[0] == [a, b]

    def test_atoms_hash_by_identity(self):
        mol = Molecule()
        a = mol.add_atom("H")
        b = mol.add_atom("H")
        assert a != b
        assert len({a, b}) == 2

    def test_set_position_copies(self):
        mol = Molecule()
        atom = mol.add_atom("C")
        position = np.array([1.0, 2.0, 3.0])
        atom.set_position(position)
        position[0] = 10.0
        assert atom.position[0] == 1.0


class TestForceFieldInteractions:
    """Tests for interaction enumeration on ethane."""

    @pytest.fixture
    def interactions(self, ethane, harmonic_force_field_class):
        ff = harmonic_force_field_class()
        ff.add_molecule(ethane)
        ff.setup()
        return ForceFieldInteractions(ethane, ff)

    def test_counts(self, interactions):
        assert len(interactions.bonded_pairs()) == 7
        assert len(interactions.angle_groups()) == 12
        assert len(interactions.torsion_groups()) == 9
        assert len(interactions.nonbonded_pairs()) == 9

    def test_angle_center_is_middle(self, interactions):
        for a, b, c in interactions.angle_groups():
            assert b.atom.symbol == "C"

    def test_torsions_are_about_carbon_bond(self, interactions):
        for a, b, c, d in interactions.torsion_groups():
            assert {b.atom.symbol, c.atom.symbol} == {"C"}
            assert a.atom.symbol == "H" and d.atom.symbol == "H"

    def test_nonbonded_pairs_are_one_four(self, interactions, ethane):
        for a, b in interactions.nonbonded_pairs():
            assert interactions.is_one_four(a.atom, b.atom)
        assert not interactions.is_one_four(ethane.atom(0), ethane.atom(1))

    def test_separate_fragments_are_nonbonded(self, harmonic_force_field_class):
        mol = Molecule()
        a = mol.add_atom("H")
        b = mol.add_atom("H", [0.74, 0, 0])
        c = mol.add_atom("H", [5.0, 0, 0])
        d = mol.add_atom("H", [5.74, 0, 0])
        mol.add_bond(a, b)
        mol.add_bond(c, d)
        ff = harmonic_force_field_class()
        ff.add_molecule(mol)
        ff.setup()
        pairs = ForceFieldInteractions(mol, ff).nonbonded_pairs()
        assert len(pairs) == 4
        assert not ForceFieldInteractions(mol, ff).is_one_four(a, c)
