"""
Nuclear shape factor corrections

The shape factor C(W) collects the energy dependence coming from the
finite extent of the nucleus and the induced currents (weak magnetism b,
induced tensor d, induced pseudoscalar gP). Written as

    C(W) = 1 + C0 + C1 W + C_{-1} / W + C2 W^2

separately for the vector (Fermi) and axial (Gamow-Teller) parts, in the
uniformly charged sphere approximation for the nucleon density. The
isovector correction C_I rescales the pure nuclear-radius terms for the
actual transition density.

References:
    L. Hayen et al., Rev. Mod. Phys. 90 (2018) 015008, Sec. VII
    D.H. Wilkinson, Nucl. Phys. A 377 (1982) 474
    B.R. Holstein, Rev. Mod. Phys. 46 (1974) 789
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from betaforge.constants import ALPHA
from betaforge.core.charge_distributions import modified_gaussian_moments, uniform_sphere_moments
from betaforge.core.matrix_elements import SingleParticleState
from betaforge.core.parameters import DecayType
from betaforge.physics.kinematics import as_output, nuclear_mass


def _vector_shape(W, W0, Z, R, beta_type, xi=1.):
    aZ = ALPHA * Z
    aZs = beta_type * aZ
    c0 = -233. / 630. * aZ**2 - xi * (W0 * R)**2 / 5. + 2. / 35. * aZs * W0 * R
    c1 = -21. / 35. * aZs * R + xi * 4. / 35. * W0 * R**2
    c2 = -xi * 4. / 35. * R**2
    return 1. + c0 + c1 * W + c2 * W * W


def _axial_shape(W, W0, Z, A, R, beta_type, g_a, g_p, fc1, fb, fd, ratio_m121, xi=1.):
    aZ = ALPHA * Z
    aZs = beta_type * aZ
    s = beta_type
    M = nuclear_mass(A)
    lam = ratio_m121
    # numpy scalars so a vanishing form factor gives inf instead of raising
    fc1 = np.float64(fc1)
    g_a = np.float64(g_a)

    c0 = (-233. / 630. * aZ**2 - xi * (W0 * R)**2 / 5.
          - 2. / 35. * aZs * W0 * R * (1. - lam)
          + xi * 4. / 9. * R**2 * (1. - lam / 20.)
          + W0 / 3. / M / fc1 * (-s * fb + fd)
          + 2. * aZs / 5. / M / R / fc1 * (2. * s * fb + fd))
    c1 = (-21. / 35. * aZs * R
          + xi * 4. / 9. * W0 * R**2 * (1. - lam / 10.)
          + 4. * s * fb / 3. / M / fc1)
    c2 = -xi * 4. / 9. * R**2 * (1. - lam / 20.)
    c_inv = -(2. * s * fb + fd) / 3. / M / fc1 - (g_p / g_a) / (2. * M)**2
    return 1. + c0 + c1 * W + c_inv / W + c2 * W * W


def _shape_factor(W, W0, Z, A, R, beta_type, decay_type, g_a, g_p, fc1, fb, fd,
                  ratio_m121, mixing_ratio, xi):
    with np.errstate(divide="ignore", invalid="ignore"):
        if decay_type is DecayType.FERMI:
            return _vector_shape(W, W0, Z, R, beta_type, xi)
        axial = _axial_shape(W, W0, Z, A, R, beta_type, g_a, g_p, fc1, fb, fd, ratio_m121, xi)
        if decay_type is DecayType.GAMOW_TELLER:
            return axial
        rho2 = mixing_ratio * mixing_ratio
        return (_vector_shape(W, W0, Z, R, beta_type, xi) + rho2 * axial) / (1. + rho2)


def transition_density_ratio(ns_shape: str = "UCS", ho_fit: float = 0.,
                             states: Optional[Tuple[SingleParticleState, SingleParticleState]] = None
                             ) -> float:
    """
    <r^4>/<r^2>^2 of the transition density relative to the uniform sphere.

    Single-particle states, when given, take precedence over the global
    shape; their ratio is averaged over the initial and final orbital.
    A negative modified Gaussian ``ho_fit`` has no density and gives NaN.
    """
    r2_ucs, r4_ucs = uniform_sphere_moments()
    reference = r4_ucs / r2_ucs**2
    if states is not None:
        ratios = []
        for state in states:
            r2, r4 = state.moments()
            ratios.append(r4 / r2**2)
        return float(np.mean(ratios)) / reference
    if ns_shape == "Modified_Gaussian":
        if not ho_fit >= 0.:
            return np.nan
        r2, r4 = modified_gaussian_moments(ho_fit)
        return r4 / r2**2 / reference
    return 1.


def isovector_correction(W, W0: float, Z: int, A: int, R: float, beta_type: int,
                         decay_type: DecayType, g_a: float, g_p: float,
                         fc1: float, fb: float, fd: float, ratio_m121: float,
                         ns_shape: str = "UCS", ho_fit: float = 0.,
                         states: Optional[Tuple[SingleParticleState, SingleParticleState]] = None,
                         mixing_ratio: float = 0.):
    """
    Isovector correction C_I = C(xi) / C(1).

    xi is the transition density ratio from :func:`transition_density_ratio`;
    it scales the terms of C that depend on R^2 alone.
    """
    W = np.asarray(W, dtype=float)
    xi = transition_density_ratio(ns_shape, ho_fit, states)
    if xi == 1.:
        return as_output(np.ones_like(W))
    args = (W, W0, Z, A, R, beta_type, decay_type, g_a, g_p, fc1, fb, fd, ratio_m121, mixing_ratio)
    with np.errstate(divide="ignore", invalid="ignore"):
        result = _shape_factor(*args, xi) / _shape_factor(*args, 1.)
    return as_output(result)


def c_correction(W, W0: float, Z: int, A: int, R: float, beta_type: int,
                 decay_type: DecayType, g_a: float, g_p: float,
                 fc1: float, fb: float, fd: float, ratio_m121: float,
                 isovector: bool = False, ns_shape: str = "UCS", ho_fit: float = 0.,
                 states: Optional[Tuple[SingleParticleState, SingleParticleState]] = None,
                 mixing_ratio: float = 0.):
    """
    Shape factor C, optionally including the isovector correction.

    Parameters
    ----------
    W : float or ndarray
        Total lepton energy
    W0 : float
        Endpoint energy
    Z, A : int
        Daughter proton and mass number
    R : float
        Nuclear radius (hbar/(m_e c))
    beta_type : int
        +1 electron, -1 positron emission
    decay_type : DecayType
    g_a, g_p : float
        Axial and induced pseudoscalar couplings
    fc1, fb, fd : float
        Gamow-Teller, weak magnetism and induced tensor form factors
    ratio_m121 : float
        ^A M_121 / ^A M_101
    isovector : bool
        Apply C_I for the actual nuclear shape
    ns_shape : str
        "UCS" or "Modified_Gaussian"
    ho_fit : float
        Modified Gaussian parameter
    states : tuple, optional
        Initial and final single-particle states ("connect" mode)
    mixing_ratio : float
        Gamow-Teller/Fermi mixing ratio for mixed transitions

    Returns
    -------
    float or ndarray
    """
    W = np.asarray(W, dtype=float)
    result = _shape_factor(W, W0, Z, A, R, beta_type, decay_type, g_a, g_p,
                           fc1, fb, fd, ratio_m121, mixing_ratio, 1.)
    if isovector:
        result = result * isovector_correction(W, W0, Z, A, R, beta_type, decay_type, g_a, g_p,
                                               fc1, fb, fd, ratio_m121, ns_shape, ho_fit,
                                               states, mixing_ratio)
    return as_output(result)


def relativistic_correction(W, W0: float, Z: int, A: int, R: float, beta_type: int,
                            decay_type: DecayType, mixing_ratio: float = 0.):
    """
    Relativistic matrix element correction.

    Vanishes for pure Fermi transitions. For the axial part the leading
    alpha Z / (M R) term of the relativistic (sigma.p / M) matrix element
    is kept.
    """
    W = np.asarray(W, dtype=float)
    M = nuclear_mass(A)
    with np.errstate(divide="ignore", invalid="ignore"):
        axial = 1. + beta_type * 4. / 5. * ALPHA * Z / M / R * (1. - 1. / 3. / W)
        if decay_type is DecayType.FERMI:
            result = np.ones_like(W)
        elif decay_type is DecayType.GAMOW_TELLER:
            result = axial
        else:
            rho2 = mixing_ratio * mixing_ratio
            result = (1. + rho2 * axial) / (1. + rho2)
    return as_output(result)
