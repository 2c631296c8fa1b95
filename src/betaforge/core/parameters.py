"""
Nuclear parameters of one beta transition

Everything the spectral corrections need is derived here once, from the run
configuration and the matrix element provider, and frozen into a
:class:`NuclearParameters` record:

    R   = r_rms * sqrt(5/3)               (equivalent uniform sphere radius)
    W0  = (Q - dE_atomic + E_mother - E_daughter) / m_e + betaType
    W0 -= (W0^2 - 1) / (2 M_nucleus)       (kinetic recoil of the daughter)

plus the finite-size coefficient table, the charge-distribution shape
parameters, the atomic exchange fit parameters and the matrix element ratios.

Inconsistent input (mother/daughter mismatch, NaN matrix elements) is logged
and replaced by safe defaults; only a missing required option stops the run.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from betaforge.constants import ELECTRON_MASS_KEV, NATURAL_LENGTH, NUCLEON_MASS_KEV, w_to_kev
from betaforge.core.charge_distributions import fit_ho_dist
from betaforge.core.config import GeneratorConfig, MatrixElementOverrides
from betaforge.core.l0_table import L0CoefficientTable
from betaforge.core.matrix_elements import (
    FixedMatrixElements,
    MatrixElementProvider,
    SingleParticleMatrixElements,
    SingleParticleState,
)
from betaforge.io.exchange import ExchangeParameterTable, ExchangeParameters

logger = logging.getLogger(__name__)

# Default (uniformly charged sphere) potential expansion
DEFAULT_POTENTIAL_EXPANSION = (1.5, -0.5, 0.)


class BetaType(enum.IntEnum):
    """Emitted lepton; the value is the sign used throughout the corrections."""
    ELECTRON = 1
    POSITRON = -1


class DecayType(enum.Enum):
    FERMI = "Fermi"
    GAMOW_TELLER = "Gamow-Teller"
    MIXED = "Mixed"


@dataclass(frozen=True)
class MatrixElementValues:
    """
    Matrix element scalars entering the shape factor.

    Attributes
    ----------
    m101 : float
        ^A M_101 after the degeneracy guards
    b_ac, d_ac : float
        Weak magnetism and induced tensor ratios b/Ac and d/Ac
    ratio_m121 : float
        ^A M_121 / ^A M_101
    fc1, fb, fd : float
        Form factors gA*M101, (b/Ac)*A*fc1 and (d/Ac)*A*fc1
    """
    m101: float
    b_ac: float
    d_ac: float
    ratio_m121: float
    fc1: float
    fb: float
    fd: float


@dataclass(frozen=True)
class NuclearParameters:
    """
    Immutable physical constants of one transition.

    Z and A refer to the daughter nucleus. R is in units of hbar/(m_e c),
    W0 in units of the electron rest mass.
    """
    z: int
    a: int
    r: float
    mother_z: int
    mother_spin_parity: int
    daughter_spin_parity: int
    mother_beta2: float
    mother_beta4: float
    daughter_beta2: float
    daughter_beta4: float
    beta_type: BetaType
    decay_type: DecayType
    mixing_ratio: float
    g_a: float
    g_p: float
    g_m: float
    q_value: float
    atomic_energy_deficit: float
    mother_excitation_energy: float
    daughter_excitation_energy: float
    w0: float
    matrix_elements: MatrixElementValues
    ho_fit: float
    v_old: Tuple[float, ...]
    v_new: Tuple[float, ...]
    ex_pars: ExchangeParameters
    l0: L0CoefficientTable
    single_particle_states: Optional[Tuple[SingleParticleState, SingleParticleState]] = None

    @property
    def fc1(self) -> float:
        return self.matrix_elements.fc1

    @property
    def fb(self) -> float:
        return self.matrix_elements.fb

    @property
    def fd(self) -> float:
        return self.matrix_elements.fd

    @property
    def ratio_m121(self) -> float:
        return self.matrix_elements.ratio_m121

    @property
    def a_pos(self) -> Tuple[float, ...]:
        return self.l0.a_pos

    @property
    def a_neg(self) -> Tuple[float, ...]:
        return self.l0.a_neg

    @property
    def endpoint_kev(self) -> float:
        """Effective endpoint kinetic energy in keV."""
        return w_to_kev(self.w0)

    @property
    def nuclear_mass(self) -> float:
        """Daughter mass in electron masses."""
        return self.a * NUCLEON_MASS_KEV / ELECTRON_MASS_KEV


# =============================================================================
# Derived quantities
# =============================================================================

def nuclear_radius(a: int, rms_radius_fm: float = 0.) -> float:
    """
    Nuclear radius in natural units.

    An explicit rms radius (fm) is converted to the equivalent uniform
    sphere radius; zero selects the 1.2 A^(1/3) fm systematics.
    """
    r = rms_radius_fm * 1e-15 / NATURAL_LENGTH * math.sqrt(5. / 3.)
    if r == 0.:
        r = 1.2 * a**(1. / 3.) * 1e-15 / NATURAL_LENGTH
    return r


def parse_beta_type(process: str) -> BetaType:
    if process.strip().lower() == "b+":
        return BetaType.POSITRON
    return BetaType.ELECTRON


def parse_decay_type(decay_type: str) -> DecayType:
    name = decay_type.strip().lower()
    if name == "fermi":
        return DecayType.FERMI
    if name == "gamow-teller":
        return DecayType.GAMOW_TELLER
    return DecayType.MIXED


def endpoint_energy(q_value: float, a: int, beta_type: int,
                    atomic_energy_deficit: float = 0.,
                    mother_excitation_energy: float = 0.,
                    daughter_excitation_energy: float = 0.) -> float:
    """
    Endpoint total energy W0 including the kinetic recoil correction.

    Parameters
    ----------
    q_value : float
        Atomic mass difference in keV
    a : int
        Mass number
    beta_type : int
        +1 for electron emission, -1 for positron emission
    atomic_energy_deficit, mother_excitation_energy, daughter_excitation_energy : float
        In keV

    Returns
    -------
    float
        W0 in units of the electron rest mass
    """
    w0 = (q_value - atomic_energy_deficit + mother_excitation_energy
          - daughter_excitation_energy) / ELECTRON_MASS_KEV + beta_type
    w0 = w0 - (w0 * w0 - 1) / 2. / a / (NUCLEON_MASS_KEV / ELECTRON_MASS_KEV)
    return w0


def modified_gaussian_vectors(ho_fit: float, logger: Optional[logging.Logger] = None
                              ) -> Tuple[Tuple[float, ...], Tuple[float, ...]]:
    """
    Potential expansion coefficients (v, v') for a modified Gaussian density.

    A ``ho_fit`` outside the physical range gives NaN coefficients and an
    error in the log.
    """
    log = logger if logger is not None else logging.getLogger(__name__)
    h = float(ho_fit)
    sqrt_pi = math.sqrt(math.pi)
    v_old = (3. / 2., -1. / 2., 0.)
    with np.errstate(invalid="ignore", divide="ignore"):
        ratio = np.divide(5. * (2. + 5. * h), 2. * (2. + 3. * h))
        v_new = (
            math.sqrt(5. / 2.) * 4. * (1. + h) * np.sqrt(2. + 5. * h) / sqrt_pi
            * np.power(2. + 3. * h, 1.5),
            np.divide(-4. / 3., 3. * h + 2.) / sqrt_pi * np.power(ratio, 1.5),
            np.divide(2. - 7. * h, 5. * (3. * h + 2.)) / sqrt_pi * np.power(ratio, 5. / 3.),
        )
    v_new = tuple(float(v) for v in v_new)
    if not np.all(np.isfinite(v_new)):
        log.error(f"Modified Gaussian parameter hoFit = {h} gives no valid potential expansion")
    return v_old, v_new


def _pad(vector: Sequence[float], size: int = 3) -> Tuple[float, ...]:
    values = [float(v) for v in vector]
    values.extend([0.] * (size - len(values)))
    return tuple(values)


def shape_vectors(es_shape: str, ho_fit: float,
                  v_old: Optional[Sequence[float]] = None,
                  v_new: Optional[Sequence[float]] = None,
                  logger: Optional[logging.Logger] = None
                  ) -> Tuple[Tuple[float, ...], Tuple[float, ...]]:
    """
    Select the (v, v') potential expansion used by the U correction.

    Modified_Gaussian derives both from ``ho_fit``. Otherwise explicit vectors
    are used when both are given; a single vector is an error and the default
    uniform sphere expansion is kept.
    """
    log = logger if logger is not None else logging.getLogger(__name__)
    if es_shape == "Modified_Gaussian":
        log.debug("Found Modified_Gaussian shape")
        return modified_gaussian_vectors(ho_fit, logger=log)
    if v_old is not None and v_new is not None:
        log.debug("Found v and v'")
        return _pad(v_old), _pad(v_new)
    if v_old is not None or v_new is not None:
        log.error("Both old and new potential expansions must be given.")
    return DEFAULT_POTENTIAL_EXPANSION, DEFAULT_POTENTIAL_EXPANSION


def resolve_matrix_elements(provider: MatrixElementProvider,
                            overrides: MatrixElementOverrides,
                            g_a: float, a: int,
                            logger: Optional[logging.Logger] = None) -> MatrixElementValues:
    """
    Combine provider results and explicit overrides into the shape factor scalars.

    NaN ratios are set to zero; a vanishing M101 would make every ratio
    infinite, so the ratios are zeroed and M101 is set to one.
    """
    log = logger if logger is not None else logging.getLogger(__name__)
    log.info("Calculating matrix elements")

    m101 = 1.
    if overrides.ratio_m121 is None:
        m101 = provider.reduced_matrix_element(1, 0, 1)
        m121 = provider.reduced_matrix_element(1, 2, 1)
        # m101 == 0 is handled by the guard below
        ratio_m121 = m121 / m101 if m101 != 0. else 0.
    else:
        ratio_m121 = overrides.ratio_m121

    if overrides.weak_magnetism is None:
        log.info("Calculating Weak Magnetism")
        b_ac = provider.weak_magnetism()
    else:
        b_ac = overrides.weak_magnetism
    if overrides.induced_tensor is None:
        log.info("Calculating Induced Tensor")
        d_ac = provider.induced_tensor()
    else:
        d_ac = overrides.induced_tensor

    if math.isnan(b_ac):
        b_ac = 0.
        log.error("Calculated b/Ac was NaN. Setting to 0.")
    if math.isnan(d_ac):
        d_ac = 0.
        log.error("Calculated d/Ac was NaN. Setting to 0.")
    if math.isnan(ratio_m121) and m101 != 0.:
        ratio_m121 = 0.
        m101 = 1.
        log.error("Calculated M121/M101 was NaN. Setting ratio to 0 and M101 to 1.")

    if m101 == 0.:
        b_ac = 0.
        d_ac = 0.
        ratio_m121 = 0.
        m101 = 1.
        log.error("Calculated M101 is 0, resulting in infinities. "
                  "Setting b/Ac, d/Ac and M121/M101 to 0 and M101 to 1.")

    log.info(f"Weak magnetism: {b_ac}")
    log.info(f"Induced tensor: {d_ac}")
    log.info(f"M121/M101: {ratio_m121}")

    fc1 = g_a * m101
    return MatrixElementValues(
        m101=m101,
        b_ac=b_ac,
        d_ac=d_ac,
        ratio_m121=ratio_m121,
        fc1=fc1,
        fb=b_ac * a * fc1,
        fd=d_ac * a * fc1,
    )


# =============================================================================
# Construction
# =============================================================================

def default_provider(config: GeneratorConfig,
                     logger: Optional[logging.Logger] = None) -> MatrixElementProvider:
    """Single-particle estimate, or unit matrix elements where no orbital exists."""
    log = logger if logger is not None else logging.getLogger(__name__)
    beta_type = parse_beta_type(config.transition.process)
    try:
        return SingleParticleMatrixElements(
            config.daughter.z, config.daughter.a, int(beta_type),
            g_a=config.couplings.g_a, g_m=config.couplings.g_m,
        )
    except ValueError as e:
        log.warning(f"No single-particle estimate available ({e}). Using unit matrix elements.")
        return FixedMatrixElements()


def build_nuclear_parameters(config: GeneratorConfig,
                             provider: Optional[MatrixElementProvider] = None,
                             exchange_table: Optional[ExchangeParameterTable] = None,
                             logger: Optional[logging.Logger] = None) -> NuclearParameters:
    """
    Derive the frozen transition parameters from a run configuration.

    Parameters
    ----------
    config : GeneratorConfig
        Validated or unvalidated run configuration. Consistency problems are
        logged as errors.
    provider : MatrixElementProvider, optional
        Source of matrix elements; defaults to the single-particle estimate.
    exchange_table : ExchangeParameterTable, optional
        Exchange fit parameters. When absent and the exchange correction is
        enabled, the file named by ``config.exchange_data`` is read.
    logger : logging.Logger, optional
        Run logger; the module logger is used otherwise.

    Returns
    -------
    NuclearParameters
    """
    log = logger if logger is not None else logging.getLogger(__name__)
    log.debug("Entered initialize constants")

    daughter = config.daughter
    mother = config.mother
    transition = config.transition

    z = daughter.z
    a = daughter.a
    r = nuclear_radius(a, daughter.radius)
    if daughter.radius == 0.:
        log.debug("Radius not found. Using standard formula.")

    beta_type = parse_beta_type(transition.process)
    decay_type = parse_decay_type(transition.decay_type)
    mixing_ratio = 0.
    if decay_type is DecayType.MIXED:
        mixing_ratio = transition.mixing_ratio if transition.mixing_ratio is not None else 0.

    for message in config.validate():
        log.error(message)

    w0 = endpoint_energy(
        transition.q_value, a, int(beta_type),
        atomic_energy_deficit=transition.atomic_energy_deficit,
        mother_excitation_energy=mother.excitation_energy,
        daughter_excitation_energy=daughter.excitation_energy,
    )
    if w0 <= 1.:
        log.error(f"Endpoint energy W0 = {w0} leaves no phase space for the transition")
    log.debug(f"gP: {config.couplings.g_p}")

    if config.shape.mod_gauss_fit is None:
        ho_fit = fit_ho_dist(z, r * math.sqrt(3. / 5.), logger=log)
    else:
        ho_fit = config.shape.mod_gauss_fit
    log.debug(f"hoFit: {ho_fit}")
    if not ho_fit >= 0. and "Modified_Gaussian" in (config.shape.es_shape, config.shape.ns_shape):
        log.error(f"hoFit = {ho_fit} is negative; modified Gaussian corrections are undefined")

    v_old, v_new = shape_vectors(config.shape.es_shape, ho_fit,
                                 config.shape.v_old, config.shape.v_new, logger=log)

    l0 = L0CoefficientTable.for_z(z)

    ex_pars = ExchangeParameters.zeros()
    if config.toggles.exchange:
        if exchange_table is None and config.exchange_data:
            exchange_table = ExchangeParameterTable.from_file(config.exchange_data, logger=log)
        if exchange_table is None:
            log.warning("No exchange parameters available. Exchange correction is a no-op.")
        else:
            ex_pars = exchange_table.lookup(z - int(beta_type)) or ExchangeParameters.zeros()

    if provider is None:
        provider = default_provider(config, logger=log)
    matrix_elements = resolve_matrix_elements(provider, config.overrides,
                                              config.couplings.g_a, a, logger=log)

    states = None
    if config.toggles.connect:
        states = provider.single_particle_states()
        if states is None:
            log.warning("Connect mode requested but the provider has no single-particle states.")

    return NuclearParameters(
        z=z,
        a=a,
        r=r,
        mother_z=mother.z,
        mother_spin_parity=mother.spin_parity,
        daughter_spin_parity=daughter.spin_parity,
        mother_beta2=mother.beta2,
        mother_beta4=mother.beta4,
        daughter_beta2=daughter.beta2,
        daughter_beta4=daughter.beta4,
        beta_type=beta_type,
        decay_type=decay_type,
        mixing_ratio=mixing_ratio,
        g_a=config.couplings.g_a,
        g_p=config.couplings.g_p,
        g_m=config.couplings.g_m,
        q_value=transition.q_value,
        atomic_energy_deficit=transition.atomic_energy_deficit,
        mother_excitation_energy=mother.excitation_energy,
        daughter_excitation_energy=daughter.excitation_energy,
        w0=w0,
        matrix_elements=matrix_elements,
        ho_fit=ho_fit,
        v_old=v_old,
        v_new=v_new,
        ex_pars=ex_pars,
        l0=l0,
        single_particle_states=states,
    )
