#!/usr/bin/env python
"""
Minimize a distorted ethane molecule with each built-in force field.

Usage:
    python examples/minimize_ethane.py
"""

import logging

import numpy as np

from mmcore import ForceField, Molecule


def build_ethane():
    """Ethane with a stretched C-C bond and a bent hydrogen."""
    mol = Molecule("ethane")
    c1 = mol.add_atom("C", [0.0, 0.0, 0.0])
    c2 = mol.add_atom("C", [1.70, 0.0, 0.0])
    mol.add_bond(c1, c2)

    for position in ([-0.36, 1.03, 0.0], [-0.36, -0.51, 0.89], [-0.50, -0.30, -0.95]):
        mol.add_bond(c1, mol.add_atom("H", position))
    for position in ([2.06, -1.03, 0.0], [2.06, 0.51, 0.89], [2.06, 0.51, -0.89]):
        mol.add_bond(c2, mol.add_atom("H", position))

    return mol


def main():
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    print("=" * 60)
    print("Ethane minimization")
    print("=" * 60)

    for name in ForceField.force_fields():
        molecule = build_ethane()

        with ForceField.create(name, rng=np.random.default_rng(0)) as ff:
            ff.add_molecule(molecule)
            if not ff.setup():
                print(f"\n{name}: setup failed: {ff.error_string}")
                continue

            initial = ff.energy()
            converged = ff.minimize(tolerance=0.1, max_steps=500)

            c1, c2 = molecule.atom(0), molecule.atom(1)
            print(f"\n{name}:")
            print("-" * 40)
            print(f"   Calculations:   {ff.calculation_count}")
            print(f"   Initial energy: {initial:.4f} kcal/mol")
            print(f"   Final energy:   {ff.energy():.4f} kcal/mol")
            print(f"   RMS gradient:   {ff.root_mean_square_gradient():.4f}")
            print(f"   Converged:      {converged}")
            print(f"   C-C distance:   {np.linalg.norm(c1.position - c2.position):.4f} A")


if __name__ == "__main__":
    main()
