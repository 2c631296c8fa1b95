"""
Electrostatic (Coulomb) corrections

- Fermi function F0 for a point charge evaluated at the nuclear radius
- L0: finite nuclear size in the uniformly charged sphere approximation
- U: departure of the charge distribution from the uniform sphere
- D_FS: deformed nuclear shape
- Q: recoiling Coulomb field

Sign convention: ``beta_type`` is +1 for electron and -1 for positron
emission; every odd power of alpha*Z carries it.

References:
    D.H. Wilkinson, Nucl. Instrum. Meth. A 290 (1990) 509
    L. Hayen et al., Rev. Mod. Phys. 90 (2018) 015008, Sec. IV-V
    H. Behrens, W. Buhring, Electron Radial Wave Functions and Nuclear
    Beta-decay (Clarendon, Oxford, 1982)
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from numpy.polynomial import legendre
from scipy import special

from betaforge.constants import ALPHA
from betaforge.core.l0_table import L0CoefficientTable
from betaforge.core.parameters import DecayType
from betaforge.physics.kinematics import as_output, momentum, nuclear_mass


def fermi_function(W, Z: int, R: float, beta_type: int):
    """
    Fermi function

        F0 = 2(gamma + 1) (2pR)^(2(gamma - 1)) exp(pi y) |Gamma(gamma + iy)|^2 / Gamma(2 gamma + 1)^2

    with gamma = sqrt(1 - (alpha Z)^2) and y = beta_type alpha Z W / p.
    """
    W = np.asarray(W, dtype=float)
    gamma = np.sqrt(1. - (ALPHA * Z)**2)
    p = momentum(W)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        y = beta_type * ALPHA * Z * W / p
        log_gamma = special.loggamma(gamma + 1j * y).real
        result = (2. * (gamma + 1.) * np.power(2. * p * R, 2. * (gamma - 1.))
                  * np.exp(np.pi * y + 2. * (log_gamma - special.gammaln(2. * gamma + 1.))))
    return as_output(result)


def l0_correction(W, Z: int, R: float, beta_type: int,
                  a_pos: Sequence[float], a_neg: Sequence[float]):
    """
    Finite-size correction L0 for a uniformly charged sphere.

    Wilkinson's parametrisation with seven coefficients a_{-1}, a_0 .. a_5
    (stored as ``a[0] .. a[6]``).
    """
    W = np.asarray(W, dtype=float)
    a = a_neg if beta_type > 0 else a_pos
    aZ = ALPHA * Z
    gamma = np.sqrt(1. - aZ**2)

    with np.errstate(divide="ignore", invalid="ignore"):
        total = np.zeros_like(W)
        for i in range(1, 7):
            total = total + a[i] * (W * R)**(i - 1)

        common = (1. + 13. / 60. * aZ**2
                  - beta_type * W * R * aZ * (41. - 26. * gamma) / 15. / (2. * gamma - 1.)
                  - beta_type * aZ * R * gamma * (17. - 2. * gamma) / 30. / W / (2. * gamma - 1.))
        k = 0.41 if beta_type > 0 else 0.22
        specific = a[0] * R / W + k * (R - 0.0164) * aZ**4.5
        result = (common + specific + total) * 2. / (1. + gamma)
    return as_output(result)


def fermi_u_correction(W, Z: int, beta_type: int):
    """
    U correction for a Fermi (two-parameter) charge distribution.

    Quadratic fit in p with Z dependent coefficients.
    """
    W = np.asarray(W, dtype=float)
    s = beta_type
    a0 = -5.6e-5 - s * 4.94e-5 * Z + 6.23e-8 * Z**2
    a1 = 5.17e-6 + s * 2.517e-6 * Z + 2.00e-8 * Z**2
    a2 = -9.17e-8 + s * 5.53e-9 * Z + 1.25e-10 * Z**2
    p = momentum(W)
    with np.errstate(invalid="ignore"):
        result = 1. + a0 + a1 * p + a2 * p * p
    return as_output(result)


def u_correction(W, Z: int, R: float, beta_type: int, es_shape: str = "Fermi",
                 v_old: Sequence[float] = (1.5, -0.5, 0.),
                 v_new: Sequence[float] = (1.5, -0.5, 0.)):
    """
    Charge distribution shape correction U.

    For ``es_shape == "Fermi"`` the fitted Fermi distribution form is used.
    Otherwise the potential of the actual distribution is written as

        V(r) = -alpha Z / R * sum_n v_n (r/R)^(2n)

    and U follows to first order in alpha Z from the difference between the
    new (v') and uniform sphere (v) expansion coefficients.
    """
    if es_shape == "Fermi":
        return fermi_u_correction(W, Z, beta_type)

    W = np.asarray(W, dtype=float)
    total = np.zeros_like(W)
    with np.errstate(divide="ignore", invalid="ignore"):
        for n, (v, v_prime) in enumerate(zip(v_old, v_new)):
            c_n = ((W + 1.) / (2. * n + 3.) + (W - 1.) / 3.) / (2. * n + 5.)
            total = total + (v_prime - v) * c_n
        result = 1. + 2. * beta_type * ALPHA * Z * R * total
    return as_output(result)


def _deformed_radii(R: float, beta2: float, beta4: float, n_nodes: int):
    """Orientation nodes, weights and volume conserving radii R(theta)."""
    x, w = legendre.leggauss(n_nodes)
    y20 = np.sqrt(5. / 4. / np.pi) * legendre.legval(x, [0., 0., 1.])
    y40 = np.sqrt(9. / 4. / np.pi) * legendre.legval(x, [0., 0., 0., 0., 1.])
    shape = 1. + beta2 * y20 + beta4 * y40
    scale = (0.5 * np.sum(w * shape**3))**(-1. / 3.)
    return w, scale * R * shape


def deformation_correction(W, W0: float, Z: int, R: float, beta2: float, beta_type: int,
                           a_pos: Sequence[float], a_neg: Sequence[float],
                           beta4: float = 0., n_nodes: int = 16):
    """
    Finite-size correction for a deformed nucleus, D_FS.

    Ratio of L0 averaged over the orientation of an axially deformed,
    volume conserving surface R(theta) = c R (1 + beta2 Y20 + beta4 Y40)
    to L0 of the spherical nucleus.
    """
    W = np.asarray(W, dtype=float)
    if beta2 == 0. and beta4 == 0.:
        return as_output(np.ones_like(W))
    weights, radii = _deformed_radii(R, beta2, beta4, n_nodes)
    deformed = l0_correction(W[..., np.newaxis], Z, radii, beta_type, a_pos, a_neg)
    with np.errstate(divide="ignore", invalid="ignore"):
        averaged = 0.5 * np.sum(weights * deformed, axis=-1)
        result = averaged / l0_correction(W, Z, R, beta_type, a_pos, a_neg)
    return as_output(result)


def legacy_deformation_correction(W, W0: float, Z: int, R: float, beta2: float, beta4: float):
    """
    Deformation correction from beta2 and beta4 alone.

    Builds its own coefficient table and assumes electron emission.
    """
    table = L0CoefficientTable.for_z(Z)
    return deformation_correction(W, W0, Z, R, beta2, 1, table.a_pos, table.a_neg, beta4=beta4)


def q_correction(W, W0: float, Z: int, A: int, beta_type: int,
                 decay_type: DecayType, mixing_ratio: float = 0.):
    """
    Coulomb recoil correction Q for the moving daughter field.

        Q = 1 - beta_type pi alpha Z / (M p) (1 + a (W0 - W) / (3W))

    with a = 1 (Fermi), -1/3 (Gamow-Teller) or the mixing-weighted value.
    """
    W = np.asarray(W, dtype=float)
    M = nuclear_mass(A)
    if decay_type is DecayType.FERMI:
        a = 1.
    elif decay_type is DecayType.GAMOW_TELLER:
        a = -1. / 3.
    else:
        rho2 = mixing_ratio * mixing_ratio
        a = (1. - rho2 / 3.) / (1. + rho2)
    p = momentum(W)
    with np.errstate(divide="ignore", invalid="ignore"):
        result = 1. - beta_type * np.pi * ALPHA * Z / M / p * (1. + a * (W0 - W) / 3. / W)
    return as_output(result)
