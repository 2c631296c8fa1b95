"""
Correction pipeline

Binds the physics functions of :mod:`betaforge.physics` to the parameters of
one transition and applies the enabled corrections in a fixed order:

    phase space, Fermi function, C, relativistic, deformation, L0, U,
    Q (Coulomb recoil), radiative, recoil, screening, exchange, mismatch

The order is part of the result: floating point products are compared
against reference spectra computed in this order.

The electron and neutrino branches use the same functions except for the
radiative correction. Exchange applies to electron emission only, the
atomic mismatch only when no atomic energy deficit was given explicitly.

Two correction profiles are supported:

- STANDARD: deformation from the L0 coefficient tables, shape dependent U
  and the isovector/NS-shape aware C correction
- LEGACY: deformation from beta2/beta4 alone, Fermi-distribution U and the
  uniform sphere C correction
"""

from __future__ import annotations

import logging
from enum import Enum
from functools import partial
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from betaforge.core.config import CorrectionToggles
from betaforge.core.parameters import BetaType, NuclearParameters
from betaforge.physics import atomic, coulomb, kinematics, radiative, shape_factor

logger = logging.getLogger(__name__)

CorrectionFunction = Callable[[np.ndarray], np.ndarray]


class Correction(Enum):
    """Spectral corrections in application order; values are toggle names."""
    PHASE_SPACE = "phase_space"
    FERMI = "fermi"
    C = "c"
    RELATIVISTIC = "relativistic"
    DEFORMATION = "deformation"
    FINITE_SIZE = "finite_size"
    U = "u"
    COULOMB_RECOIL = "coulomb_recoil"
    RADIATIVE = "radiative"
    RECOIL = "recoil"
    SCREENING = "screening"
    EXCHANGE = "exchange"
    ATOMIC_MISMATCH = "atomic_mismatch"


class CorrectionProfile(Enum):
    """Which variant of the correction set is evaluated."""
    STANDARD = "standard"
    LEGACY = "legacy"

    @classmethod
    def parse(cls, name) -> "CorrectionProfile":
        if isinstance(name, cls):
            return name
        return cls(str(name).strip().lower())


class CorrectionPipeline:
    """
    Ordered, individually switchable spectral corrections of one transition.

    Parameters
    ----------
    params : NuclearParameters
        Transition constants
    toggles : CorrectionToggles
        Enabled corrections (also carries the isovector flag)
    profile : CorrectionProfile
        Correction set variant
    es_shape : str
        Electrostatic charge distribution shape for U ("Fermi",
        "Modified_Gaussian", ...)
    ns_shape : str
        Weak charge distribution shape for the isovector correction
    logger : logging.Logger, optional
    """

    def __init__(
        self,
        params: NuclearParameters,
        toggles: Optional[CorrectionToggles] = None,
        profile: CorrectionProfile = CorrectionProfile.STANDARD,
        es_shape: str = "Fermi",
        ns_shape: str = "UCS",
        logger: Optional[logging.Logger] = None,
    ):
        self.params = params
        self.toggles = toggles if toggles is not None else CorrectionToggles()
        self.profile = CorrectionProfile.parse(profile)
        self.es_shape = es_shape
        self.ns_shape = ns_shape
        self.logger = logger if logger is not None else logging.getLogger(__name__)

        self._electron: List[Tuple[Correction, CorrectionFunction]] = []
        self._neutrino: List[Tuple[Correction, CorrectionFunction]] = []
        for correction in Correction:
            if not self._is_active(correction):
                continue
            electron, neutrino = self._bind(correction)
            self._electron.append((correction, electron))
            self._neutrino.append((correction, neutrino))
        self.logger.debug(f"Enabled corrections ({self.profile.value}): "
                          f"{[c.value for c in self.enabled()]}")

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def _is_active(self, correction: Correction) -> bool:
        if not getattr(self.toggles, correction.value):
            return False
        if correction is Correction.EXCHANGE:
            return self.params.beta_type is BetaType.ELECTRON
        if correction is Correction.ATOMIC_MISMATCH:
            return self.params.atomic_energy_deficit == 0.
        return True

    def _bind(self, correction: Correction) -> Tuple[CorrectionFunction, CorrectionFunction]:
        """Electron and neutrino variants of one correction as functions of W."""
        p = self.params
        s = int(p.beta_type)
        legacy = self.profile is CorrectionProfile.LEGACY

        if correction is Correction.PHASE_SPACE:
            f = partial(kinematics.phase_space, W0=p.w0,
                        mother_spin_parity=p.mother_spin_parity,
                        daughter_spin_parity=p.daughter_spin_parity)
        elif correction is Correction.FERMI:
            f = partial(coulomb.fermi_function, Z=p.z, R=p.r, beta_type=s)
        elif correction is Correction.C:
            if legacy:
                f = partial(shape_factor.c_correction, W0=p.w0, Z=p.z, A=p.a, R=p.r,
                            beta_type=s, decay_type=p.decay_type, g_a=p.g_a, g_p=p.g_p,
                            fc1=p.fc1, fb=p.fb, fd=p.fd, ratio_m121=p.ratio_m121,
                            mixing_ratio=p.mixing_ratio)
            else:
                f = partial(shape_factor.c_correction, W0=p.w0, Z=p.z, A=p.a, R=p.r,
                            beta_type=s, decay_type=p.decay_type, g_a=p.g_a, g_p=p.g_p,
                            fc1=p.fc1, fb=p.fb, fd=p.fd, ratio_m121=p.ratio_m121,
                            isovector=self.toggles.isovector, ns_shape=self.ns_shape,
                            ho_fit=p.ho_fit, states=p.single_particle_states,
                            mixing_ratio=p.mixing_ratio)
        elif correction is Correction.RELATIVISTIC:
            f = partial(shape_factor.relativistic_correction, W0=p.w0, Z=p.z, A=p.a, R=p.r,
                        beta_type=s, decay_type=p.decay_type, mixing_ratio=p.mixing_ratio)
        elif correction is Correction.DEFORMATION:
            if legacy:
                f = partial(coulomb.legacy_deformation_correction, W0=p.w0, Z=p.z, R=p.r,
                            beta2=p.daughter_beta2, beta4=p.daughter_beta4)
            else:
                f = partial(coulomb.deformation_correction, W0=p.w0, Z=p.z, R=p.r,
                            beta2=p.daughter_beta2, beta_type=s,
                            a_pos=p.a_pos, a_neg=p.a_neg, beta4=p.daughter_beta4)
        elif correction is Correction.FINITE_SIZE:
            f = partial(coulomb.l0_correction, Z=p.z, R=p.r, beta_type=s,
                        a_pos=p.a_pos, a_neg=p.a_neg)
        elif correction is Correction.U:
            if legacy:
                f = partial(coulomb.fermi_u_correction, Z=p.z, beta_type=s)
            else:
                f = partial(coulomb.u_correction, Z=p.z, R=p.r, beta_type=s,
                            es_shape=self.es_shape, v_old=p.v_old, v_new=p.v_new)
        elif correction is Correction.COULOMB_RECOIL:
            f = partial(coulomb.q_correction, W0=p.w0, Z=p.z, A=p.a, beta_type=s,
                        decay_type=p.decay_type, mixing_ratio=p.mixing_ratio)
        elif correction is Correction.RADIATIVE:
            electron = partial(radiative.radiative_correction, W0=p.w0, Z=p.z, R=p.r,
                               beta_type=s, g_a=p.g_a, g_m=p.g_m)
            return electron, radiative.neutrino_radiative_correction
        elif correction is Correction.RECOIL:
            f = partial(kinematics.recoil_correction, W0=p.w0, A=p.a,
                        decay_type=p.decay_type, mixing_ratio=p.mixing_ratio)
        elif correction is Correction.SCREENING:
            f = partial(atomic.atomic_screening_correction, Z=p.z, beta_type=s)
        elif correction is Correction.EXCHANGE:
            f = partial(atomic.atomic_exchange_correction, ex_pars=p.ex_pars)
        elif correction is Correction.ATOMIC_MISMATCH:
            f = partial(atomic.atomic_mismatch_correction, W0=p.w0, Z=p.z, A=p.a, beta_type=s)
        else:
            raise ValueError(f"Unknown correction {correction}")
        return f, f

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    def enabled(self) -> List[Correction]:
        """Corrections that are applied, in order."""
        return [correction for correction, _ in self._electron]

    def factors(self, W) -> Dict[Correction, np.ndarray]:
        """Individual electron correction factors at W."""
        with np.errstate(all="ignore"):
            return {correction: f(W) for correction, f in self._electron}

    def neutrino_factors(self, Wv) -> Dict[Correction, np.ndarray]:
        """Individual neutrino correction factors at the mirrored energy Wv."""
        with np.errstate(all="ignore"):
            return {correction: f(Wv) for correction, f in self._neutrino}

    @staticmethod
    def _product(functions, W):
        result = 1.
        with np.errstate(all="ignore"):
            for _, f in functions:
                result = result * f(W)
        return result

    def apply(self, W):
        """Product of the enabled electron corrections at W (not floored)."""
        return self._product(self._electron, W)

    def apply_neutrino(self, Wv):
        """Product of the enabled neutrino corrections at Wv (not floored)."""
        return self._product(self._neutrino, Wv)
