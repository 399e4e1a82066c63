"""Shared fixtures: small molecules and a minimal harmonic force field."""

import numpy as np
import pytest

from mmcore.forcefields import (
    CalculationType,
    ForceField,
    ForceFieldAtom,
    ForceFieldCalculation,
    ForceFieldFlags,
)
from mmcore.topology import Molecule


def build_ethane():
    """Staggered ethane with one hydrogen pulled slightly off its ideal position."""
    mol = Molecule("ethane")
    c1 = mol.add_atom("C", [0.0, 0.0, 0.0])
    c2 = mol.add_atom("C", [1.54, 0.02, 0.0])
    for position in ([-0.36, 1.05, 0.03], [-0.37, -0.51, 0.89], [-0.36, -0.52, -0.90]):
        mol.add_bond(c1, mol.add_atom("H", position))
    for position in ([1.90, -1.03, 0.0], [1.89, 0.53, 0.88], [1.91, 0.51, -0.89]):
        mol.add_bond(c2, mol.add_atom("H", position))
    mol.add_bond(c1, c2)
    return mol


def build_methanol():
    """Methanol with AMBER-like partial charges."""
    mol = Molecule("methanol")
    c = mol.add_atom("C", [0.0, 0.0, 0.0], partial_charge=0.117)
    o = mol.add_atom("O", [1.42, 0.01, 0.0], partial_charge=-0.599)
    mol.add_bond(c, o)
    mol.add_bond(o, mol.add_atom("H", [1.74, 0.92, 0.05], partial_charge=0.398))
    for position in ([-0.37, 1.03, 0.02], [-0.36, -0.50, 0.90], [-0.38, -0.52, -0.88]):
        mol.add_bond(c, mol.add_atom("H", position, partial_charge=0.028))
    return mol


def build_ethylene():
    """Ethylene with one hydrogen lifted out of the molecular plane."""
    mol = Molecule("ethylene")
    c1 = mol.add_atom("C", [0.0, 0.0, 0.0])
    c2 = mol.add_atom("C", [1.34, 0.0, 0.0])
    mol.add_bond(c1, c2, order=2)
    mol.add_bond(c1, mol.add_atom("H", [-0.55, 0.94, 0.10]))
    mol.add_bond(c1, mol.add_atom("H", [-0.56, -0.93, 0.0]))
    mol.add_bond(c2, mol.add_atom("H", [1.90, 0.93, 0.0]))
    mol.add_bond(c2, mol.add_atom("H", [1.89, -0.95, -0.02]))
    return mol


def build_benzene():
    """Planar benzene with aromatic (order 1.5) ring bonds."""
    mol = Molecule("benzene")
    carbons = []
    for i in range(6):
        angle = np.pi / 3.0 * i
        carbons.append(mol.add_atom("C", [1.39 * np.cos(angle), 1.39 * np.sin(angle), 0.0]))
    for i in range(6):
        mol.add_bond(carbons[i], carbons[(i + 1) % 6], order=1.5)
    for i, carbon in enumerate(carbons):
        angle = np.pi / 3.0 * i
        hydrogen = mol.add_atom("H", [2.47 * np.cos(angle), 2.47 * np.sin(angle), 0.0])
        mol.add_bond(carbon, hydrogen)
    return mol


class HarmonicBond(ForceFieldCalculation):
    """E = k (r - r0)^2 between two atoms of any non-empty type."""

    def __init__(self, a, b):
        super().__init__(CalculationType.BOND_STRETCH, (a, b), 2)

    def setup(self, parameters):
        a, b = self.atoms
        if not a.type or not b.type:
            return False
        self.set_parameter(0, parameters["k"])
        self.set_parameter(1, parameters["r0"])
        return True

    def energy(self):
        a, b = self.atoms
        return self.parameter(0) * (self.distance(a, b) - self.parameter(1)) ** 2

    def gradient(self):
        a, b = self.atoms
        de_dr = 2.0 * self.parameter(0) * (self.distance(a, b) - self.parameter(1))
        return self.distance_gradient(a, b) * de_dr


class HarmonicBondForceField(ForceField):
    """
    One harmonic bond term per bond.

    Atoms whose element is in ``untyped`` get an empty type, so bonds to
    them fail setup.
    """

    def __init__(self, k=100.0, r0=1.0, untyped=(), analytical=True, **kwargs):
        flags = ForceFieldFlags.ANALYTICAL_GRADIENT if analytical else ForceFieldFlags.NONE
        super().__init__("harmonic", flags=flags, **kwargs)
        self.untyped = set(untyped)
        self.add_parameter_set("default", lambda: {"k": k, "r0": r0})
        self.set_parameter_set("default")

    def setup(self):
        parameters = self._load_parameters()
        if parameters is None:
            return False

        self._reset()
        for molecule in self.molecules:
            for atom in molecule.atoms:
                ff_atom = ForceFieldAtom(self, atom)
                ff_atom.set_type("" if atom.symbol in self.untyped else atom.symbol)
                self.add_atom(ff_atom)
            for bond in molecule.bonds:
                self.add_calculation(
                    HarmonicBond(self.atom_for(bond.first), self.atom_for(bond.second))
                )
        return self._setup_calculations(parameters)


def build_chain(n_atoms, spacing=1.2):
    """Linear chain of hydrogens bonded in sequence."""
    mol = Molecule("chain")
    previous = None
    for i in range(n_atoms):
        atom = mol.add_atom("H", [spacing * i, 0.1 * (i % 3), 0.0])
        if previous is not None:
            mol.add_bond(previous, atom)
        previous = atom
    return mol


@pytest.fixture
def ethane():
    return build_ethane()


@pytest.fixture
def methanol():
    return build_methanol()


@pytest.fixture
def ethylene():
    return build_ethylene()


@pytest.fixture
def benzene():
    return build_benzene()


@pytest.fixture
def two_atom_molecule():
    """Two bonded hydrogens 3 Angstrom apart."""
    mol = Molecule("h2")
    a = mol.add_atom("H", [0.0, 0.0, 0.0])
    b = mol.add_atom("H", [3.0, 0.0, 0.0])
    mol.add_bond(a, b)
    return mol


@pytest.fixture
def bond_force_field(two_atom_molecule):
    """Set up harmonic force field (k=100, r0=1) on the two-atom molecule."""
    ff = HarmonicBondForceField(k=100.0, r0=1.0, rng=np.random.default_rng(42))
    ff.add_molecule(two_atom_molecule)
    assert ff.setup()
    yield ff
    ff.close()


@pytest.fixture
def harmonic_force_field_class():
    return HarmonicBondForceField


@pytest.fixture
def harmonic_bond_class():
    return HarmonicBond


@pytest.fixture
def chain_builder():
    return build_chain
