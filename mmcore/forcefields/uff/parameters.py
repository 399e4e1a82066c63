"""Built-in UFF atom parameters for H, C, N and O."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class UffAtomParameters:
    """
    Per-type UFF constants (Rappe et al., J. Am. Chem. Soc. 114, 10024).

    Attributes:
        r: Valence bond radius [A].
        theta: Natural valence angle [deg].
        x: Nonbonded distance [A].
        D: Nonbonded well depth [kcal/mol].
        zeta: Nonbonded scale.
        Z: Effective charge.
        V: sp3 torsional barrier [kcal/mol].
        U: sp2 torsional barrier [kcal/mol].
        X: GMP electronegativity.
    """

    r: float
    theta: float
    x: float
    D: float
    zeta: float
    Z: float
    V: float
    U: float
    X: float


_ATOMS = {
    "H_": UffAtomParameters(0.354, 180.00, 2.886, 0.044, 12.000, 0.712, 0.000, 0.000, 4.528),
    "C_3": UffAtomParameters(0.757, 109.47, 3.851, 0.105, 12.730, 1.912, 2.119, 2.000, 5.343),
    "C_R": UffAtomParameters(0.729, 120.00, 3.851, 0.105, 12.730, 1.912, 0.000, 2.000, 5.343),
    "C_2": UffAtomParameters(0.732, 120.00, 3.851, 0.105, 12.730, 1.912, 0.000, 2.000, 5.343),
    "C_1": UffAtomParameters(0.706, 180.00, 3.851, 0.105, 12.730, 1.912, 0.000, 2.000, 5.343),
    "N_3": UffAtomParameters(0.700, 106.70, 3.660, 0.069, 13.407, 2.544, 0.450, 2.000, 6.899),
    "N_R": UffAtomParameters(0.699, 120.00, 3.660, 0.069, 13.407, 2.544, 0.000, 2.000, 6.899),
    "N_2": UffAtomParameters(0.685, 111.20, 3.660, 0.069, 13.407, 2.544, 0.000, 2.000, 6.899),
    "N_1": UffAtomParameters(0.656, 180.00, 3.660, 0.069, 13.407, 2.544, 0.000, 2.000, 6.899),
    "O_3": UffAtomParameters(0.658, 104.51, 3.500, 0.060, 14.085, 2.300, 0.018, 2.000, 8.741),
    "O_R": UffAtomParameters(0.680, 110.00, 3.500, 0.060, 14.085, 2.300, 0.000, 2.000, 8.741),
    "O_2": UffAtomParameters(0.634, 120.00, 3.500, 0.060, 14.085, 2.300, 0.000, 2.000, 8.741),
}


@dataclass
class UffParameters:
    """UFF parameters keyed by atom type label."""

    atoms: dict[str, UffAtomParameters] = field(default_factory=dict)

    def parameters(self, type_label: str) -> UffAtomParameters | None:
        return self.atoms.get(type_label)


def load_uff() -> UffParameters:
    """Return the built-in UFF table."""
    return UffParameters(atoms=dict(_ATOMS))
