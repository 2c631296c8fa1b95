"""Transition parameters, configuration and nuclear structure inputs."""

from betaforge.core.config import (
    CorrectionToggles,
    CouplingConstants,
    GeneratorConfig,
    MatrixElementOverrides,
    NucleusConfig,
    OptionSource,
    ShapeConfig,
    SpectrumConfig,
    TransitionConfig,
)
from betaforge.core.l0_table import L0CoefficientTable
from betaforge.core.matrix_elements import (
    FixedMatrixElements,
    MatrixElementProvider,
    SingleParticleMatrixElements,
    SingleParticleState,
)
from betaforge.core.parameters import (
    BetaType,
    DecayType,
    MatrixElementValues,
    NuclearParameters,
    build_nuclear_parameters,
)

__all__ = [
    "CorrectionToggles",
    "CouplingConstants",
    "GeneratorConfig",
    "MatrixElementOverrides",
    "NucleusConfig",
    "OptionSource",
    "ShapeConfig",
    "SpectrumConfig",
    "TransitionConfig",
    "L0CoefficientTable",
    "FixedMatrixElements",
    "MatrixElementProvider",
    "SingleParticleMatrixElements",
    "SingleParticleState",
    "BetaType",
    "DecayType",
    "MatrixElementValues",
    "NuclearParameters",
    "build_nuclear_parameters",
]
