"""
Run configuration

Typed configuration for one beta spectrum calculation. A configuration is
built once from a nested mapping (as read from an INI, JSON or YAML file)
and is read-only afterwards; the hot correction loop never looks up options
by name.

Option names follow the section.key layout of the input files, matched
case-insensitively, e.g. ``Transition.QValue`` or ``Spectrum.ESShape``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from betaforge.exceptions import ConfigurationError, MissingOption

_TRUE = {"1", "true", "yes", "on", "t", "y"}
_FALSE = {"0", "false", "no", "off", "f", "n"}


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigurationError(f"Cannot interpret '{value}' as a boolean")


def _to_float_list(value: Any) -> List[float]:
    if isinstance(value, str):
        parts = value.replace(";", ",").replace(",", " ").split()
        return [float(p) for p in parts]
    return [float(v) for v in value]


class OptionSource:
    """
    Case-insensitive view of a nested option mapping.

    Accepts either nested sections ``{"Transition": {"QValue": 1.0}}`` or
    dotted keys ``{"Transition.QValue": 1.0}``.
    """

    def __init__(self, options: Mapping[str, Any]):
        self._values: Dict[str, Any] = {}
        for key, value in options.items():
            if isinstance(value, Mapping):
                for sub_key, sub_value in value.items():
                    self._values[f"{key}.{sub_key}".lower()] = sub_value
            else:
                self._values[str(key).lower()] = value

    def exists(self, key: str) -> bool:
        return key.lower() in self._values

    def get_required(self, key: str, convert: Callable[[Any], Any] = float) -> Any:
        if not self.exists(key):
            raise MissingOption(key)
        return self._convert(key, convert)

    def get(self, key: str, default: Any = None, convert: Callable[[Any], Any] = float) -> Any:
        if not self.exists(key):
            return default
        return self._convert(key, convert)

    def _convert(self, key: str, convert: Callable[[Any], Any]) -> Any:
        raw = self._values[key.lower()]
        try:
            return convert(raw)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid value for '{key}': {raw!r}") from e

    def keys(self) -> List[str]:
        return list(self._values)


@dataclass
class NucleusConfig:
    """Mother or daughter nucleus. Radius is an rms radius in fm (0 = default)."""
    z: int
    a: int
    radius: float = 0.
    beta2: float = 0.
    beta4: float = 0.
    spin_parity: int = 0
    excitation_energy: float = 0.

    @classmethod
    def from_options(cls, options: OptionSource, section: str) -> "NucleusConfig":
        return cls(
            z=options.get_required(f"{section}.Z", int),
            a=options.get_required(f"{section}.A", int),
            radius=options.get(f"{section}.Radius", 0.),
            beta2=options.get(f"{section}.Beta2", 0.),
            beta4=options.get(f"{section}.Beta4", 0.),
            spin_parity=options.get(f"{section}.SpinParity", 0, int),
            excitation_energy=options.get(f"{section}.ExcitationEnergy", 0.),
        )


@dataclass
class TransitionConfig:
    """Transition data. Energies in keV, half-life in seconds."""
    process: str
    decay_type: str
    q_value: float
    mixing_ratio: Optional[float] = None
    atomic_energy_deficit: float = 0.
    partial_halflife: Optional[float] = None
    log_ft: Optional[float] = None

    @property
    def is_mixed(self) -> bool:
        return self.decay_type.strip().lower() not in ("fermi", "gamow-teller")

    @classmethod
    def from_options(cls, options: OptionSource) -> "TransitionConfig":
        decay_type = options.get_required("Transition.Type", str)
        transition = cls(
            process=options.get_required("Transition.Process", str),
            decay_type=decay_type,
            q_value=options.get_required("Transition.QValue"),
            atomic_energy_deficit=options.get("Transition.AtomicEnergyDeficit", 0.),
            partial_halflife=options.get("Transition.PartialHalflife"),
            log_ft=options.get("Transition.LogFt"),
        )
        if transition.is_mixed:
            transition.mixing_ratio = options.get_required("Transition.MixingRatio")
        return transition


@dataclass
class CouplingConstants:
    """Weak axial, induced pseudoscalar and weak magnetism couplings."""
    g_a: float = 1.27
    g_p: float = 0.
    g_m: float = 4.706


@dataclass
class CorrectionToggles:
    """On/off switch for every spectral correction."""
    phase_space: bool = True
    fermi: bool = True
    c: bool = True
    relativistic: bool = True
    deformation: bool = True
    finite_size: bool = True
    u: bool = True
    coulomb_recoil: bool = True
    radiative: bool = True
    recoil: bool = True
    screening: bool = True
    exchange: bool = True
    atomic_mismatch: bool = True
    isovector: bool = False
    connect: bool = False

    # option key for each field
    KEYS = {
        "phase_space": "Spectrum.Phasespace",
        "fermi": "Spectrum.Fermi",
        "c": "Spectrum.C",
        "relativistic": "Spectrum.Relativistic",
        "deformation": "Spectrum.ESDeformation",
        "finite_size": "Spectrum.ESFiniteSize",
        "u": "Spectrum.U",
        "coulomb_recoil": "Spectrum.CoulombRecoil",
        "radiative": "Spectrum.Radiative",
        "recoil": "Spectrum.Recoil",
        "screening": "Spectrum.Screening",
        "exchange": "Spectrum.Exchange",
        "atomic_mismatch": "Spectrum.AtomicMismatch",
        "isovector": "Spectrum.Isovector",
        "connect": "Spectrum.Connect",
    }

    @classmethod
    def from_options(cls, options: OptionSource) -> "CorrectionToggles":
        defaults = cls()
        values = {
            name: options.get(key, getattr(defaults, name), _to_bool)
            for name, key in cls.KEYS.items()
        }
        return cls(**values)

    @classmethod
    def only(cls, *names: str) -> "CorrectionToggles":
        """Toggles with every correction off except ``names``."""
        values = {name: False for name in cls.KEYS}
        for name in names:
            if name not in values:
                raise ConfigurationError(f"Unknown correction '{name}'")
            values[name] = True
        return cls(**values)


@dataclass
class ShapeConfig:
    """Charge-distribution shapes used by the U and C corrections."""
    es_shape: str = "Fermi"
    ns_shape: str = "UCS"
    mod_gauss_fit: Optional[float] = None
    v_old: Optional[List[float]] = None
    v_new: Optional[List[float]] = None

    @classmethod
    def from_options(cls, options: OptionSource) -> "ShapeConfig":
        return cls(
            es_shape=options.get("Spectrum.ESShape", "Fermi", str),
            ns_shape=options.get("Spectrum.NSShape", "UCS", str),
            mod_gauss_fit=options.get("Spectrum.ModGaussFit"),
            v_old=options.get("Spectrum.vold", None, _to_float_list),
            v_new=options.get("Spectrum.vnew", None, _to_float_list),
        )


@dataclass
class MatrixElementOverrides:
    """Explicit values replacing the matrix element provider results."""
    weak_magnetism: Optional[float] = None
    induced_tensor: Optional[float] = None
    ratio_m121: Optional[float] = None

    @classmethod
    def from_options(cls, options: OptionSource) -> "MatrixElementOverrides":
        return cls(
            weak_magnetism=options.get("Spectrum.WeakMagnetism"),
            induced_tensor=options.get("Spectrum.InducedTensor"),
            ratio_m121=options.get("Spectrum.Lambda"),
        )


@dataclass
class SpectrumConfig:
    """Energy grid in keV. ``end == 0`` runs to the endpoint."""
    begin: float = 0.
    end: float = 0.
    step_size: float = 1.
    steps: Optional[int] = None
    neutrino: bool = False

    @classmethod
    def from_options(cls, options: OptionSource) -> "SpectrumConfig":
        return cls(
            begin=options.get("Spectrum.Begin", 0.),
            end=options.get("Spectrum.End", 0.),
            step_size=options.get("Spectrum.StepSize", 1.),
            steps=options.get("Spectrum.Steps", None, int),
            neutrino=options.get("Spectrum.Neutrino", False, _to_bool),
        )


@dataclass
class GeneratorConfig:
    """Complete configuration of one spectrum run."""
    mother: NucleusConfig
    daughter: NucleusConfig
    transition: TransitionConfig
    couplings: CouplingConstants = field(default_factory=CouplingConstants)
    toggles: CorrectionToggles = field(default_factory=CorrectionToggles)
    shape: ShapeConfig = field(default_factory=ShapeConfig)
    overrides: MatrixElementOverrides = field(default_factory=MatrixElementOverrides)
    spectrum: SpectrumConfig = field(default_factory=SpectrumConfig)
    output: str = "output"
    exchange_data: Optional[str] = None
    profile: str = "standard"
    domain_policy: str = "propagate"

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> "GeneratorConfig":
        """Build the configuration from a nested or dotted option mapping."""
        source = options if isinstance(options, OptionSource) else OptionSource(options)
        return cls(
            mother=NucleusConfig.from_options(source, "Mother"),
            daughter=NucleusConfig.from_options(source, "Daughter"),
            transition=TransitionConfig.from_options(source),
            couplings=CouplingConstants(
                g_a=source.get("Constants.gA", 1.27),
                g_p=source.get("Constants.gP", 0.),
                g_m=source.get("Constants.gM", 4.706),
            ),
            toggles=CorrectionToggles.from_options(source),
            shape=ShapeConfig.from_options(source),
            overrides=MatrixElementOverrides.from_options(source),
            spectrum=SpectrumConfig.from_options(source),
            output=source.get("output", "output", str),
            exchange_data=source.get("exchangedata", None, str),
            profile=source.get("profile", "standard", str),
            domain_policy=source.get("domain_policy", "propagate", str),
        )

    def validate(self) -> List[str]:
        """Consistency messages; an empty list means the configuration is consistent."""
        messages = []
        process = self.transition.process.strip().lower()
        beta_type = -1 if process == "b+" else 1
        if self.mother.a != self.daughter.a:
            messages.append("Mother and daughter mass numbers are not the same.")
        if self.daughter.z != self.mother.z + beta_type:
            messages.append(
                f"Mother and daughter cannot be obtained through {self.transition.process} process"
            )
        if (self.shape.v_old is None) != (self.shape.v_new is None):
            messages.append("Both old and new potential expansions must be given.")
        if self.spectrum.steps is not None and self.spectrum.steps <= 0:
            messages.append(f"Number of steps must be positive, got {self.spectrum.steps}")
        return messages
