"""
Atomic corrections: screening, exchange and atomic mismatch.

References:
    M.E. Rose, Phys. Rev. 49 (1936) 727 (screening)
    L. Hayen et al., Rev. Mod. Phys. 90 (2018) 015008, Sec. IX
    J.N. Bahcall, Phys. Rev. 129 (1963) 2683 (exchange)
"""

from __future__ import annotations

import numpy as np
from scipy import special

from betaforge.constants import ALPHA, ELECTRON_MASS_KEV
from betaforge.io.exchange import ExchangeParameters
from betaforge.physics.kinematics import as_output, momentum


def screening_potential(Z: int, beta_type: int) -> float:
    """Rose's screening potential V0 of the parent atom (electron masses)."""
    return 1.45 * ALPHA**2 * abs(Z - beta_type)**(4. / 3.)


def atomic_screening_correction(W, Z: int, beta_type: int):
    """
    Screening correction in Rose's shifted-energy approximation.

    The lepton is evaluated at W' = W - beta_type V0:

        S = W'/W (p'/p)^(2 gamma - 1) exp(pi (y' - y)) |Gamma(gamma + i y')|^2 / |Gamma(gamma + i y)|^2

    Energies where W' <= 1 are left unscreened.
    """
    W = np.asarray(W, dtype=float)
    V0 = screening_potential(Z, beta_type)
    aZs = beta_type * ALPHA * Z
    gamma = np.sqrt(1. - (ALPHA * Z)**2)

    W_screened = W - beta_type * V0
    p = momentum(W)
    p_screened = momentum(W_screened)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        y = aZs * W / p
        y_screened = aZs * W_screened / p_screened
        gamma_ratio = np.exp(2. * (special.loggamma(gamma + 1j * y_screened).real
                                   - special.loggamma(gamma + 1j * y).real))
        screened = (W_screened / W * (p_screened / p)**(2. * gamma - 1.)
                    * np.exp(np.pi * (y_screened - y)) * gamma_ratio)
        result = np.where(W_screened > 1., screened, 1.)
    return as_output(result)


def atomic_exchange_correction(W, ex_pars: ExchangeParameters):
    """
    Exchange correction for electron emission from a fit of the form

        X = 1 + a/E + b/E^2 + c exp(-d E) + e sin((W - g)^f + h) exp(-i E)

    with E = W - 1 the kinetic energy. All-zero parameters give X = 1.
    """
    W = np.asarray(W, dtype=float)
    if ex_pars.is_zero:
        return as_output(np.ones_like(W))
    a, b, c, d, e, f, g, h, i = ex_pars.as_tuple()
    E = W - 1.
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        result = (1. + a / E + b / E**2 + c * np.exp(-d * E)
                  + e * np.sin((W - g)**f + h) * np.exp(-i * E))
    return as_output(result)


def atomic_mismatch_correction(W, W0: float, Z: int, A: int, beta_type: int):
    """
    Correction for the atomic energy mismatch between mother and daughter.

        r = 1 - 1/(W0 - W) * 1/2 d^2B/dZ^2

    with the total electron binding energy B(Z) from a power-law fit
    evaluated at the average proton number. ``A`` does not enter.
    """
    W = np.asarray(W, dtype=float)
    z_average = np.float64(Z - beta_type / 2.)
    with np.errstate(divide="ignore", invalid="ignore"):
        # eV -> electron masses
        d2b = (44.200 * z_average**0.41 + 2.3196e-7 * z_average**4.45) / (ELECTRON_MASS_KEV * 1000.)
        result = 1. - 1. / (W0 - W) * 0.5 * d2b
    return as_output(result)
