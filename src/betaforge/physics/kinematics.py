"""
Kinematic factors: phase space and nuclear recoil.

All functions accept scalar or array energies W (total energy in units of the
electron rest mass) and return the same shape.

References:
    L. Hayen et al., Rev. Mod. Phys. 90 (2018) 015008, Sec. VI
    B.R. Holstein, Rev. Mod. Phys. 46 (1974) 789
"""

from __future__ import annotations

import numpy as np

from betaforge.constants import ELECTRON_MASS_KEV, NUCLEON_MASS_KEV
from betaforge.core.parameters import DecayType


def as_output(x):
    """Return numpy scalars for 0-d results, arrays otherwise."""
    x = np.asarray(x, dtype=float)
    return x[()] if x.ndim == 0 else x


def momentum(W):
    """Electron momentum p = sqrt(W^2 - 1); NaN below threshold."""
    W = np.asarray(W, dtype=float)
    with np.errstate(invalid="ignore"):
        return np.sqrt(W * W - 1.)


def nuclear_mass(A: int) -> float:
    """Nuclear mass in electron masses."""
    return A * NUCLEON_MASS_KEV / ELECTRON_MASS_KEV


def _parity(spin_parity: int) -> int:
    return -1 if spin_parity < 0 else 1


def is_unique_first_forbidden(mother_spin_parity: int, daughter_spin_parity: int) -> bool:
    """
    True for a unique first-forbidden transition (|dJ| = 2, parity change).

    Spins are encoded as 2J with the sign carrying the parity; 0 counts as
    positive parity.
    """
    delta = abs(abs(mother_spin_parity) - abs(daughter_spin_parity))
    return delta == 4 and _parity(mother_spin_parity) != _parity(daughter_spin_parity)


def phase_space(W, W0: float, mother_spin_parity: int = 0, daughter_spin_parity: int = 0):
    """
    Lepton phase space p W (W0 - W)^2.

    Unique first-forbidden transitions carry the additional (p^2 + q^2)
    shape, q = W0 - W being the neutrino momentum.
    """
    W = np.asarray(W, dtype=float)
    p = momentum(W)
    q = W0 - W
    with np.errstate(invalid="ignore"):
        result = p * W * q * q
        if is_unique_first_forbidden(mother_spin_parity, daughter_spin_parity):
            result = result * (p * p + q * q)
    return as_output(result)


def _recoil_coefficients(W0: float, M: float, vector: bool):
    if vector:
        r0 = W0 * W0 / 2. / M**2 - 11. / 6. / M**2
        r1 = W0 / 3. / M**2
        r2 = 2. / M - 4. * W0 / 3. / M**2
        r3 = 16. / 3. / M**2
    else:
        r0 = -2. * W0 / 3. / M - W0 * W0 / 6. / M**2 - 77. / 18. / M**2
        r1 = -2. / 3. / M + 7. * W0 / 9. / M**2
        r2 = 10. / 3. / M - 28. * W0 / 9. / M**2
        r3 = 88. / 9. / M**2
    return r0, r1, r2, r3


def recoil_correction(W, W0: float, A: int, decay_type: DecayType, mixing_ratio: float = 0.):
    """
    Kinematic nuclear recoil correction R_N.

    Vector and axial terms to order 1/M^2; mixed transitions weight them
    with the squared mixing ratio.
    """
    W = np.asarray(W, dtype=float)
    M = nuclear_mass(A)

    def _term(vector: bool):
        r0, r1, r2, r3 = _recoil_coefficients(W0, M, vector)
        with np.errstate(divide="ignore", invalid="ignore"):
            return 1. + r0 + r1 / W + r2 * W + r3 * W * W

    if decay_type is DecayType.FERMI:
        result = _term(True)
    elif decay_type is DecayType.GAMOW_TELLER:
        result = _term(False)
    else:
        rho2 = mixing_ratio * mixing_ratio
        result = (_term(True) + rho2 * _term(False)) / (1. + rho2)
    return as_output(result)
