"""
Finite-size (L0) coefficient table

The electrostatic finite-size correction L0 uses seven coefficients that are
polynomials in alpha*Z:

    a_i(Z) = sum_{j=0}^{5} b_ij (alpha Z)^(j+1),    i = 0..6

with separate tables b for electron and positron emission.

References:
    D.H. Wilkinson, Nucl. Instrum. Meth. A 290 (1990) 509
    L. Hayen et al., Rev. Mod. Phys. 90 (2018) 015008
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from betaforge.constants import ALPHA


B_NEG = np.array([
    [0.115, -1.8123, 8.2498, -11.223, -14.854, 32.086],
    [-0.00062, 0.007165, 0.01841, -0.53736, 1.2691, -1.5467],
    [0.02482, -0.5975, 4.84199, -15.3374, 23.9774, -12.6534],
    [-0.14038, 3.64953, -38.8143, 172.1368, -346.708, 288.7873],
    [0.008152, -1.15664, 49.9663, -273.711, 657.6292, -603.7033],
    [1.2145, -23.9931, 149.9718, -471.2985, 662.1909, -305.6804],
    [-1.5632, 33.4192, -255.1333, 938.5297, -1641.2845, 1095.358],
])

B_POS = np.array([
    [0.0701, -2.572, 27.5971, -128.658, 272.264, -214.925],
    [-0.002308, 0.066463, -0.6407, 2.63606, -5.6317, 4.0011],
    [0.07936, -2.09284, 18.45462, -80.9375, 160.8384, -124.8927],
    [-0.93832, 22.02513, -197.00221, 807.1878, -1566.6077, 1156.3287],
    [4.276181, -96.82411, 835.26505, -3355.8441, 6411.3255, -4681.573],
    [-8.2135, 179.0862, -1492.1295, 5872.5362, -11038.7299, 7963.4701],
    [5.4583, -115.8922, 940.8305, -3633.9181, 6727.6296, -4795.0481],
])


def _coefficients(b: np.ndarray, z: int) -> Tuple[float, ...]:
    powers = [(ALPHA * z) ** (j + 1) for j in range(b.shape[1])]
    result = []
    for row in b:
        total = 0.
        for bij, power in zip(row, powers):
            total += bij * power
        result.append(float(total))
    return tuple(result)


@dataclass(frozen=True)
class L0CoefficientTable:
    """
    Precomputed L0 coefficients for one proton number.

    Attributes
    ----------
    z : int
        Daughter proton number the table was evaluated for
    a_pos : tuple of float
        Seven coefficients for positron emission
    a_neg : tuple of float
        Seven coefficients for electron emission
    """
    z: int
    a_pos: Tuple[float, ...]
    a_neg: Tuple[float, ...]

    @classmethod
    def for_z(cls, z: int) -> "L0CoefficientTable":
        """Evaluate both coefficient sets for proton number ``z``."""
        return cls(z=z, a_pos=_coefficients(B_POS, z), a_neg=_coefficients(B_NEG, z))

    def for_beta_type(self, beta_type: int) -> Tuple[float, ...]:
        """Coefficient set for the given emission sign (+1 electron, -1 positron)."""
        return self.a_neg if beta_type > 0 else self.a_pos
