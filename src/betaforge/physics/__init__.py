"""Spectral correction functions of the total lepton energy W."""

from betaforge.physics.atomic import (
    atomic_exchange_correction,
    atomic_mismatch_correction,
    atomic_screening_correction,
)
from betaforge.physics.coulomb import (
    deformation_correction,
    fermi_function,
    fermi_u_correction,
    l0_correction,
    legacy_deformation_correction,
    q_correction,
    u_correction,
)
from betaforge.physics.kinematics import phase_space, recoil_correction
from betaforge.physics.radiative import neutrino_radiative_correction, radiative_correction
from betaforge.physics.shape_factor import (
    c_correction,
    isovector_correction,
    relativistic_correction,
)

__all__ = [
    "atomic_exchange_correction",
    "atomic_mismatch_correction",
    "atomic_screening_correction",
    "deformation_correction",
    "fermi_function",
    "fermi_u_correction",
    "l0_correction",
    "legacy_deformation_correction",
    "q_correction",
    "u_correction",
    "phase_space",
    "recoil_correction",
    "neutrino_radiative_correction",
    "radiative_correction",
    "c_correction",
    "isovector_correction",
    "relativistic_correction",
]
