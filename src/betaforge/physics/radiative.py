"""
Radiative corrections

Outer (model independent) O(alpha) correction of Sirlin for the electron,
with the Born graph constant and the leading O(Z alpha^2) term, and the
corresponding correction for the neutrino energy spectrum.

References:
    A. Sirlin, Phys. Rev. 164 (1967) 1767
    W. Jaus, G. Rasche, Phys. Rev. D 35 (1987) 3420
    A. Sirlin, Phys. Rev. D 84 (2011) 014021 (neutrino spectrum)
    L. Hayen et al., Rev. Mod. Phys. 90 (2018) 015008, Sec. VIII
"""

from __future__ import annotations

import numpy as np
from scipy import special

from betaforge.constants import (
    ALPHA,
    ELECTRON_MASS_KEV,
    NUCLEON_C_BORN,
    NUCLEON_G_A,
    NUCLEON_G_M,
    PROTON_MASS_KEV,
)
from betaforge.physics.kinematics import as_output, momentum

PROTON_MASS_W = PROTON_MASS_KEV / ELECTRON_MASS_KEV


def spence_l(x):
    """
    L(x) = int_0^x ln(1 - t)/t dt = -Li2(x)

    scipy's ``spence(z)`` is Li2(1 - z).
    """
    return -special.spence(1. - np.asarray(x, dtype=float))


def sirlin_g(W, W0: float):
    """Sirlin's universal function g(W, W0)."""
    W = np.asarray(W, dtype=float)
    p = momentum(W)
    with np.errstate(divide="ignore", invalid="ignore"):
        beta = p / W
        atanh_beta = np.arctanh(beta)
        q = W0 - W
        g = (3. * np.log(PROTON_MASS_W) - 3. / 4.
             + 4. * (atanh_beta / beta - 1.) * (q / 3. / W - 3. / 2. + np.log(2. * q))
             + 4. / beta * spence_l(2. * beta / (1. + beta))
             + atanh_beta / beta * (2. * (1. + beta**2) + q**2 / 6. / W**2 - 4. * atanh_beta))
    return g


def born_constant(g_a: float, g_m: float) -> float:
    """Born graph constant C_Born scaled from the nucleon value."""
    return NUCLEON_C_BORN * g_a * g_m / (NUCLEON_G_A * NUCLEON_G_M)


def radiative_correction(W, W0: float, Z: int, R: float, beta_type: int,
                         g_a: float, g_m: float):
    """
    Electron radiative correction

        1 + alpha/(2 pi) (g(W, W0) + 2 C_Born) + beta_type delta_2

    with delta_2 = Z alpha^2 (ln(sqrt(6)/R) - 5/3 ln(2W) + 43/18).
    """
    W = np.asarray(W, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        g = sirlin_g(W, W0)
        order1 = ALPHA / 2. / np.pi * (g + 2. * born_constant(g_a, g_m))
        delta2 = Z * ALPHA**2 * (np.log(np.sqrt(6.) / R) - 5. / 3. * np.log(2. * W) + 43. / 18.)
        result = 1. + order1 + beta_type * delta2
    return as_output(result)


def neutrino_radiative_correction(Wv):
    """
    Radiative correction to the neutrino spectrum at mirrored energy Wv.

    Depends only on the energy of the accompanying electron, Wv.
    """
    W = np.asarray(Wv, dtype=float)
    p = momentum(W)
    with np.errstate(divide="ignore", invalid="ignore"):
        beta = p / W
        atanh_beta = np.arctanh(beta)
        h = (3. * np.log(PROTON_MASS_W) + 23. / 4.
             - 8. / beta * spence_l(2. * beta / (1. + beta))
             + 8. * (atanh_beta / beta - 1.) * np.log(2. * W * beta)
             + 4. * atanh_beta / beta * ((7. + 3. * beta**2) / 8. - 2. * atanh_beta))
        result = 1. + ALPHA / 2. / np.pi * h
    return as_output(result)
