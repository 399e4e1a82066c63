"""Physical constants and unit conversions.

Energies are in kcal/mol, distances in Angstrom, charges in elementary
charge units.
"""

import math

PI = math.pi

DEGREES_TO_RADIANS = PI / 180.0
RADIANS_TO_DEGREES = 180.0 / PI

# Coulomb constant in kcal*A/(mol*e^2)
COULOMB_CONSTANT = 332.0637

# MMFF94 uses a slightly different value
MMFF_COULOMB_CONSTANT = 332.0716

# Conversion of md/A to kcal/(mol*A^2), as used by MMFF stretch terms
MDYNE_TO_KCAL = 143.9325
