"""Built-in AMBER parameters (parm99 subset for organic molecules)."""

from __future__ import annotations

from dataclasses import dataclass

from ..parameters import ParameterTable

# Bond stretch: (kb [kcal/mol/A^2], r0 [A])
_BONDS = {
    ("CT", "CT"): (310.0, 1.526),
    ("CT", "HC"): (340.0, 1.090),
    ("CT", "H1"): (340.0, 1.090),
    ("CT", "OH"): (320.0, 1.410),
    ("OH", "HO"): (553.0, 0.960),
    ("CT", "OS"): (320.0, 1.410),
    ("C", "O"): (570.0, 1.229),
    ("C", "CT"): (317.0, 1.522),
    ("C", "HA"): (367.0, 1.080),
    ("C", "N"): (490.0, 1.335),
    ("CT", "N"): (337.0, 1.449),
    ("N", "H"): (434.0, 1.010),
    ("CT", "N3"): (367.0, 1.471),
    ("N3", "H"): (434.0, 1.010),
    ("CA", "CA"): (469.0, 1.400),
    ("CA", "HA"): (367.0, 1.080),
    ("CA", "CT"): (317.0, 1.510),
    ("CA", "OH"): (450.0, 1.364),
    ("CM", "CM"): (549.0, 1.350),
    ("CM", "HA"): (367.0, 1.080),
    ("CM", "CT"): (317.0, 1.510),
}

# Angle bend: (ka [kcal/mol/rad^2], theta0 [deg])
_ANGLES = {
    ("CT", "CT", "CT"): (40.0, 109.50),
    ("CT", "CT", "HC"): (50.0, 109.50),
    ("HC", "CT", "HC"): (35.0, 109.50),
    ("CT", "CT", "H1"): (50.0, 109.50),
    ("H1", "CT", "H1"): (35.0, 109.50),
    ("CT", "CT", "OH"): (50.0, 109.50),
    ("H1", "CT", "OH"): (50.0, 109.50),
    ("CT", "OH", "HO"): (55.0, 108.50),
    ("CT", "CT", "OS"): (50.0, 109.50),
    ("H1", "CT", "OS"): (50.0, 109.50),
    ("CT", "OS", "CT"): (60.0, 109.50),
    ("CT", "C", "O"): (80.0, 120.40),
    ("O", "C", "N"): (80.0, 122.90),
    ("CT", "C", "N"): (70.0, 116.60),
    ("O", "C", "HA"): (50.0, 120.00),
    ("CT", "C", "HA"): (50.0, 115.00),
    ("HA", "C", "HA"): (35.0, 115.00),
    ("C", "CT", "HC"): (50.0, 109.50),
    ("C", "CT", "CT"): (63.0, 111.10),
    ("C", "N", "H"): (50.0, 120.00),
    ("C", "N", "CT"): (50.0, 121.90),
    ("CT", "N", "H"): (50.0, 118.04),
    ("H", "N", "H"): (35.0, 120.00),
    ("N", "CT", "H1"): (50.0, 109.50),
    ("N", "CT", "CT"): (80.0, 109.70),
    ("CT", "N3", "H"): (50.0, 109.50),
    ("H", "N3", "H"): (35.0, 109.50),
    ("CT", "N3", "CT"): (50.0, 109.50),
    ("CT", "CT", "N3"): (80.0, 111.20),
    ("H1", "CT", "N3"): (50.0, 109.50),
    ("CA", "CA", "CA"): (63.0, 120.00),
    ("CA", "CA", "HA"): (50.0, 120.00),
    ("CA", "CA", "CT"): (70.0, 120.00),
    ("CA", "CA", "OH"): (70.0, 120.00),
    ("CA", "OH", "HO"): (50.0, 113.00),
    ("CA", "CT", "HC"): (50.0, 109.50),
    ("CM", "CM", "HA"): (50.0, 120.00),
    ("HA", "CM", "HA"): (35.0, 120.00),
    ("CM", "CM", "CT"): (70.0, 119.70),
    ("HA", "CM", "CT"): (50.0, 120.00),
    ("CM", "CT", "HC"): (50.0, 109.50),
}

# Torsion: (V1, V2, V3, V4 [kcal/mol], gamma1..gamma4 [deg]); "X" matches any type
_TORSIONS = {
    ("X", "CT", "CT", "X"): (0.0, 0.0, 0.1556, 0.0, 0.0, 0.0, 0.0, 0.0),
    ("HC", "CT", "CT", "HC"): (0.0, 0.0, 0.15, 0.0, 0.0, 0.0, 0.0, 0.0),
    ("X", "CT", "OH", "X"): (0.0, 0.0, 0.1667, 0.0, 0.0, 0.0, 0.0, 0.0),
    ("CT", "CT", "OH", "HO"): (0.25, 0.0, 0.16, 0.0, 0.0, 0.0, 0.0, 0.0),
    ("X", "CT", "OS", "X"): (0.0, 0.0, 0.3833, 0.0, 0.0, 0.0, 0.0, 0.0),
    ("X", "C", "CT", "X"): (0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0),
    ("X", "C", "N", "X"): (0.0, 2.5, 0.0, 0.0, 0.0, 180.0, 0.0, 0.0),
    ("X", "CT", "N", "X"): (0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0),
    ("X", "CT", "N3", "X"): (0.0, 0.0, 0.1556, 0.0, 0.0, 0.0, 0.0, 0.0),
    ("X", "CA", "CA", "X"): (0.0, 3.625, 0.0, 0.0, 0.0, 180.0, 0.0, 0.0),
    ("X", "CA", "CT", "X"): (0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0),
    ("X", "CA", "OH", "X"): (0.0, 0.9, 0.0, 0.0, 0.0, 180.0, 0.0, 0.0),
    ("X", "CM", "CM", "X"): (0.0, 6.65, 0.0, 0.0, 0.0, 180.0, 0.0, 0.0),
    ("X", "CM", "CT", "X"): (0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0),
}

# Nonbonded: (R* [A], epsilon [kcal/mol])
_NONBONDED = {
    ("CT",): (1.9080, 0.1094),
    ("HC",): (1.4870, 0.0157),
    ("H1",): (1.3870, 0.0157),
    ("OH",): (1.7210, 0.2104),
    ("HO",): (0.0000, 0.0000),
    ("OS",): (1.6837, 0.1700),
    ("C",): (1.9080, 0.0860),
    ("O",): (1.6612, 0.2100),
    ("N",): (1.8240, 0.1700),
    ("N3",): (1.8240, 0.1700),
    ("H",): (0.6000, 0.0157),
    ("CA",): (1.9080, 0.0860),
    ("HA",): (1.4590, 0.0150),
    ("CM",): (1.9080, 0.0860),
}


@dataclass
class AmberParameters:
    """
    AMBER parameter tables.

    Attributes:
        bonds: (kb, r0) per bonded type pair.
        angles: (ka, theta0 in degrees) per type triple.
        torsions: (V1..V4, gamma1..gamma4 in degrees) per type quadruple,
            with "X" wildcard entries.
        nonbonded: (R*, epsilon) per type.
    """

    bonds: ParameterTable
    angles: ParameterTable
    torsions: ParameterTable
    nonbonded: ParameterTable

    def bond_parameters(self, a: str, b: str) -> tuple[float, ...] | None:
        return self.bonds.lookup(a, b)

    def angle_parameters(self, a: str, b: str, c: str) -> tuple[float, ...] | None:
        return self.angles.lookup(a, b, c)

    def torsion_parameters(self, a: str, b: str, c: str, d: str) -> tuple[float, ...] | None:
        return self.torsions.lookup(a, b, c, d)

    def nonbonded_parameters(self, a: str) -> tuple[float, ...] | None:
        return self.nonbonded.lookup(a)


def load_parm99() -> AmberParameters:
    """Return the built-in parm99 subset."""
    return AmberParameters(
        bonds=ParameterTable(arity=2, width=2, entries=_BONDS),
        angles=ParameterTable(arity=3, width=2, entries=_ANGLES),
        torsions=ParameterTable(arity=4, width=8, entries=_TORSIONS, wildcard="X"),
        nonbonded=ParameterTable(arity=1, width=2, entries=_NONBONDED),
    )
