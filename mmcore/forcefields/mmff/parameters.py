"""Built-in MMFF94 parameters (subset for H, C, N and O organics)."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from ..parameters import ParameterTable

# Types whose bond angles are linear (sp carbon)
LINEAR_TYPES = frozenset({"4"})

# Bond stretch: (kb [md/A], r0 [A])
_BONDS = {
    (1, 1): (4.258, 1.508),
    (1, 2): (4.539, 1.482),
    (1, 3): (4.190, 1.492),
    (1, 4): (4.474, 1.458),
    (1, 5): (4.766, 1.093),
    (1, 6): (5.047, 1.418),
    (1, 8): (5.084, 1.451),
    (1, 10): (4.480, 1.462),
    (1, 37): (4.537, 1.486),
    (2, 2): (9.505, 1.333),
    (2, 3): (4.749, 1.467),
    (2, 5): (5.170, 1.083),
    (3, 5): (4.650, 1.101),
    (3, 6): (5.800, 1.355),
    (3, 7): (12.950, 1.222),
    (3, 10): (6.687, 1.369),
    (4, 4): (15.206, 1.200),
    (4, 5): (5.724, 1.065),
    (5, 37): (5.306, 1.084),
    (6, 21): (7.816, 0.972),
    (6, 37): (5.361, 1.369),
    (8, 23): (6.056, 1.016),
    (10, 28): (6.420, 1.010),
    (37, 37): (5.573, 1.374),
}

# Angle bend: (ka [md*A/rad^2], theta0 [deg])
_ANGLES = {
    (1, 1, 1): (0.851, 109.608),
    (1, 1, 5): (0.636, 110.549),
    (5, 1, 5): (0.516, 108.836),
    (1, 1, 2): (0.900, 111.000),
    (2, 1, 5): (0.640, 110.000),
    (1, 1, 3): (0.980, 108.400),
    (3, 1, 5): (0.620, 108.900),
    (1, 1, 4): (0.900, 111.200),
    (4, 1, 5): (0.650, 109.500),
    (1, 1, 6): (1.062, 108.133),
    (5, 1, 6): (0.829, 108.577),
    (1, 1, 8): (1.000, 110.000),
    (5, 1, 8): (0.800, 109.000),
    (1, 1, 10): (0.900, 110.000),
    (5, 1, 10): (0.700, 108.800),
    (1, 1, 37): (0.850, 111.000),
    (5, 1, 37): (0.650, 110.000),
    (1, 2, 2): (0.721, 123.500),
    (1, 2, 5): (0.500, 116.000),
    (2, 2, 5): (0.535, 121.004),
    (5, 2, 5): (0.395, 116.900),
    (1, 3, 1): (0.800, 116.000),
    (1, 3, 5): (0.500, 115.500),
    (1, 3, 7): (0.750, 124.000),
    (5, 3, 5): (0.350, 116.000),
    (5, 3, 7): (0.600, 121.200),
    (1, 3, 10): (0.900, 116.100),
    (5, 3, 10): (0.600, 113.000),
    (7, 3, 10): (1.000, 122.700),
    (1, 4, 4): (0.200, 180.000),
    (4, 4, 5): (0.200, 180.000),
    (1, 6, 1): (0.950, 106.926),
    (1, 6, 21): (0.772, 106.503),
    (21, 6, 37): (0.800, 108.000),
    (1, 8, 1): (0.950, 108.500),
    (1, 8, 23): (0.600, 108.500),
    (23, 8, 23): (0.500, 106.400),
    (1, 10, 3): (0.800, 120.600),
    (1, 10, 28): (0.450, 116.000),
    (3, 10, 28): (0.500, 118.000),
    (28, 10, 28): (0.300, 117.000),
    (1, 37, 37): (0.630, 120.000),
    (5, 37, 37): (0.516, 120.571),
    (6, 37, 37): (0.900, 120.000),
    (37, 37, 37): (0.669, 119.977),
}

# Stretch-bend: (kba_ijk, kba_kji [md/rad]); direction matters
_STRETCH_BENDS = {
    (1, 1, 1): (0.206, 0.206),
    (1, 1, 5): (0.227, 0.070),
    (5, 1, 5): (0.115, 0.115),
    (1, 1, 6): (0.497, 0.179),
    (5, 1, 6): (0.411, 0.101),
    (1, 6, 21): (0.306, 0.206),
    (2, 2, 5): (0.250, 0.150),
    (37, 37, 37): (0.396, 0.396),
    (5, 37, 37): (0.157, 0.276),
}

# Stretch-bend fallback keyed by periodic table rows (H = 0)
_STRETCH_BEND_DEFAULTS = {
    (0, 1, 0): (0.15, 0.15),
    (0, 1, 1): (0.10, 0.30),
    (0, 1, 2): (0.05, 0.35),
    (0, 2, 0): (0.00, 0.00),
    (0, 2, 1): (0.00, 0.15),
    (0, 2, 2): (0.00, 0.15),
    (1, 1, 1): (0.30, 0.30),
    (1, 1, 2): (0.30, 0.50),
    (1, 2, 1): (0.30, 0.30),
    (1, 2, 2): (0.25, 0.25),
    (2, 1, 2): (0.50, 0.50),
    (2, 2, 2): (0.25, 0.25),
}

# Out-of-plane bending: koop [md*A/rad^2] keyed (center, *sorted outer types)
_OUT_OF_PLANE = {
    (2, 1, 2, 5): 0.030,
    (2, 2, 5, 5): 0.006,
    (3, 1, 1, 7): 0.130,
    (3, 1, 5, 7): 0.100,
    (3, 5, 5, 7): 0.070,
    (3, 1, 7, 10): 0.110,
    (37, 5, 37, 37): 0.040,
}

# Per-center fallback for out-of-plane bending
_OUT_OF_PLANE_DEFAULTS = {
    (2,): 0.013,
    (3,): 0.100,
    (8,): 0.000,
    (10,): 0.015,
    (37,): 0.040,
}

# Torsion: (V1, V2, V3 [kcal/mol]); 0 matches any terminal type
_TORSIONS = {
    (1, 1, 1, 1): (0.103, 0.681, 0.332),
    (1, 1, 1, 5): (0.639, -0.630, 0.264),
    (5, 1, 1, 5): (0.284, -1.386, 0.314),
    (5, 1, 1, 6): (0.000, 0.000, 0.341),
    (1, 1, 6, 21): (-0.365, -0.138, 0.378),
    (5, 1, 6, 21): (0.000, 0.000, 0.352),
    (5, 2, 2, 5): (0.000, 12.000, 0.000),
    (0, 1, 1, 0): (0.000, 0.000, 0.300),
    (0, 1, 2, 0): (0.000, 0.000, -0.300),
    (0, 1, 3, 0): (0.000, 0.000, 0.000),
    (0, 1, 6, 0): (0.000, 0.000, 0.400),
    (0, 1, 8, 0): (0.000, 0.000, 0.300),
    (0, 1, 10, 0): (0.000, 0.000, 0.000),
    (0, 1, 37, 0): (0.000, 0.000, 0.000),
    (0, 2, 2, 0): (0.000, 12.000, 0.000),
    (0, 2, 3, 0): (0.000, 1.500, 0.000),
    (0, 3, 6, 0): (0.000, 5.000, 0.000),
    (0, 3, 10, 0): (0.000, 6.000, 0.000),
    (0, 6, 37, 0): (0.000, 1.800, 0.000),
    (0, 37, 37, 0): (0.000, 7.000, 0.000),
}


@dataclass(frozen=True)
class MmffVanDerWaalsType:
    """
    Per-type van der Waals constants.

    Attributes:
        alpha: Atomic polarizability.
        n: Slater-Kirkwood effective number of valence electrons.
        a: Scale factor for the minimum-energy radius.
        g: Scale factor for the well depth.
        donor_acceptor: "D" for hydrogen bond donors, "A" for acceptors,
            "-" otherwise.
    """

    alpha: float
    n: float
    a: float
    g: float
    donor_acceptor: str = "-"


_VAN_DER_WAALS = {
    1: MmffVanDerWaalsType(1.050, 2.490, 3.890, 1.282),
    2: MmffVanDerWaalsType(1.350, 2.490, 3.890, 1.282),
    3: MmffVanDerWaalsType(1.100, 2.490, 3.890, 1.282),
    4: MmffVanDerWaalsType(1.300, 2.490, 3.890, 1.282),
    5: MmffVanDerWaalsType(0.250, 0.800, 4.200, 1.209),
    6: MmffVanDerWaalsType(0.700, 3.150, 3.890, 1.282, "A"),
    7: MmffVanDerWaalsType(0.650, 3.150, 3.890, 1.282, "A"),
    8: MmffVanDerWaalsType(1.150, 2.820, 3.890, 1.282, "A"),
    10: MmffVanDerWaalsType(1.000, 2.820, 3.890, 1.282),
    21: MmffVanDerWaalsType(0.150, 0.800, 4.200, 1.209, "D"),
    23: MmffVanDerWaalsType(0.150, 0.800, 4.200, 1.209, "D"),
    28: MmffVanDerWaalsType(0.150, 0.800, 4.200, 1.209, "D"),
    37: MmffVanDerWaalsType(1.350, 2.490, 3.890, 1.282),
}

# Bond charge increments: charge moved from the first type to the second
_BOND_CHARGE_INCREMENTS = {
    (1, 1): (0.0000,),
    (1, 2): (0.0000,),
    (1, 5): (0.0000,),
    (1, 37): (0.0000,),
    (2, 2): (0.0000,),
    (2, 5): (0.1500,),
    (3, 5): (0.0600,),
    (6, 1): (0.2800,),
    (6, 3): (0.1300,),
    (6, 21): (0.4000,),
    (7, 3): (0.5700,),
    (8, 1): (0.2700,),
    (8, 23): (0.3600,),
    (10, 3): (0.2500,),
    (10, 1): (0.2700,),
    (10, 28): (0.3700,),
    (37, 5): (0.1500,),
    (37, 37): (0.0000,),
}

# Partial bond charge increments, used when a pair has no explicit increment
_PARTIAL_BOND_CHARGE_INCREMENTS = {
    (1,): (0.000,),
    (2,): (-0.135,),
    (3,): (-0.095,),
    (4,): (-0.200,),
    (5,): (0.000,),
    (6,): (-0.243,),
    (7,): (-0.687,),
    (8,): (-0.253,),
    (10,): (-0.244,),
    (21,): (0.157,),
    (23,): (0.165,),
    (28,): (0.194,),
    (37,): (-0.127,),
}


def _table(
    arity: int,
    width: int,
    entries: Mapping[tuple[int, ...], Sequence[float]],
    **kwargs,
) -> ParameterTable:
    return ParameterTable(
        arity,
        width,
        {tuple(str(label) for label in key): values for key, values in entries.items()},
        **kwargs,
    )


@dataclass
class MmffParameters:
    """
    MMFF94 parameter tables.

    Type labels are the MMFF symbolic type numbers as strings ("1" for
    sp3 carbon, "5" for hydrogen on carbon, ...).
    """

    bonds: ParameterTable
    angles: ParameterTable
    stretch_bends: ParameterTable
    stretch_bend_defaults: ParameterTable
    out_of_plane: ParameterTable
    out_of_plane_defaults: ParameterTable
    torsions: ParameterTable
    bond_charge_increments: ParameterTable
    partial_bond_charge_increments: ParameterTable
    van_der_waals: dict[str, MmffVanDerWaalsType] = field(default_factory=dict)

    def bond_parameters(self, a: str, b: str) -> tuple[float, ...] | None:
        return self.bonds.lookup(a, b)

    def angle_parameters(self, a: str, b: str, c: str) -> tuple[float, ...] | None:
        return self.angles.lookup(a, b, c)

    def stretch_bend_parameters(
        self, a: str, b: str, c: str, rows: tuple[int, int, int]
    ) -> tuple[float, float] | None:
        """
        Return (kba_abc, kba_cba) for the angle a-b-c.

        Falls back to the defaults for the periodic table ``rows`` of the
        three atoms when the types have no explicit entry.
        """
        values = self.stretch_bends.get(a, b, c)
        if values is not None:
            return values[0], values[1]
        values = self.stretch_bends.get(c, b, a)
        if values is not None:
            return values[1], values[0]

        row_a, row_b, row_c = (str(row) for row in rows)
        values = self.stretch_bend_defaults.get(row_a, row_b, row_c)
        if values is not None:
            return values[0], values[1]
        values = self.stretch_bend_defaults.get(row_c, row_b, row_a)
        if values is not None:
            return values[1], values[0]
        return None

    def out_of_plane_parameters(self, a: str, b: str, c: str, d: str) -> float | None:
        """Return koop for the trigonal center b with neighbors a, c and d."""
        values = self.out_of_plane.get(b, *sorted((a, c, d), key=_type_order))
        if values is None:
            values = self.out_of_plane_defaults.get(b)
        return None if values is None else values[0]

    def torsion_parameters(self, a: str, b: str, c: str, d: str) -> tuple[float, ...] | None:
        return self.torsions.lookup(a, b, c, d)

    def van_der_waals_parameters(self, a: str) -> MmffVanDerWaalsType | None:
        return self.van_der_waals.get(a)

    def bond_charge_increment(self, a: str, b: str) -> float | None:
        """Return the charge moved from atom type ``a`` to its bonded partner ``b``."""
        values = self.bond_charge_increments.get(a, b)
        if values is not None:
            return values[0]
        values = self.bond_charge_increments.get(b, a)
        if values is not None:
            return -values[0]

        pbci_a = self.partial_bond_charge_increments.get(a)
        pbci_b = self.partial_bond_charge_increments.get(b)
        if pbci_a is None or pbci_b is None:
            return None
        return pbci_b[0] - pbci_a[0]


def _type_order(label: str) -> tuple[int, str]:
    return (int(label), label) if label.isdigit() else (0, label)


def load_mmff94() -> MmffParameters:
    """Return the built-in MMFF94 subset."""
    return MmffParameters(
        bonds=_table(2, 2, _BONDS),
        angles=_table(3, 2, _ANGLES),
        stretch_bends=_table(3, 2, _STRETCH_BENDS, symmetric=False),
        stretch_bend_defaults=_table(3, 2, _STRETCH_BEND_DEFAULTS, symmetric=False),
        out_of_plane=_table(
            4, 1, {key: (value,) for key, value in _OUT_OF_PLANE.items()}, symmetric=False
        ),
        out_of_plane_defaults=_table(
            1, 1, {key: (value,) for key, value in _OUT_OF_PLANE_DEFAULTS.items()}
        ),
        torsions=_table(4, 3, _TORSIONS, wildcard="0"),
        bond_charge_increments=_table(2, 1, _BOND_CHARGE_INCREMENTS, symmetric=False),
        partial_bond_charge_increments=_table(1, 1, _PARTIAL_BOND_CHARGE_INCREMENTS),
        van_der_waals={str(key): value for key, value in _VAN_DER_WAALS.items()},
    )
