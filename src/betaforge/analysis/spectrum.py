"""
Spectrum construction

Evaluates the decay rate on an energy grid. The grid is specified in keV of
kinetic energy and converted to total energy W = E/m_e + 1; an end energy of
zero runs to the endpoint W0. The step is either fixed (keV) or derived from
a number of steps.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, NamedTuple, Optional, Union

import numpy as np

try:
    import pandas as pd
    HAS_PANDAS = True
except ImportError:
    HAS_PANDAS = False

from betaforge.constants import ELECTRON_MASS_KEV, kev_to_w, w_to_kev
from betaforge.core.config import SpectrumConfig
from betaforge.corrections.evaluator import DecayRateEvaluator
from betaforge.exceptions import DomainError

logger = logging.getLogger(__name__)


class SpectrumSample(NamedTuple):
    """One spectrum point."""
    w: float
    rate: float
    neutrino_rate: float

    @property
    def energy_keV(self) -> float:
        return w_to_kev(self.w)


@dataclass
class Spectrum:
    """
    Ordered spectrum samples, ascending in W.

    Attributes
    ----------
    samples : list of SpectrumSample
    w0 : float
        Endpoint energy of the transition
    step_keV : float
        Grid step used to build the spectrum
    """
    samples: List[SpectrumSample] = field(default_factory=list)
    w0: float = 0.
    step_keV: float = 0.

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self) -> Iterator[SpectrumSample]:
        return iter(self.samples)

    def __getitem__(self, index):
        return self.samples[index]

    @property
    def w(self) -> np.ndarray:
        return np.array([s.w for s in self.samples], dtype=float)

    @property
    def energy_keV(self) -> np.ndarray:
        return w_to_kev(self.w)

    @property
    def rate(self) -> np.ndarray:
        return np.array([s.rate for s in self.samples], dtype=float)

    @property
    def neutrino_rate(self) -> np.ndarray:
        return np.array([s.neutrino_rate for s in self.samples], dtype=float)

    def to_dataframe(self):
        """Spectrum as a pandas DataFrame (W, E_keV, rate, neutrino_rate)."""
        if not HAS_PANDAS:
            raise ImportError("pandas required for DataFrame export")
        return pd.DataFrame({
            "W": self.w,
            "E_keV": self.energy_keV,
            "rate": self.rate,
            "neutrino_rate": self.neutrino_rate,
        })

    def to_csv(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        self.to_dataframe().to_csv(path, index=False)
        return path


class SpectrumBuilder:
    """
    Evaluate the decay rate over an energy grid.

    Parameters
    ----------
    evaluator : DecayRateEvaluator
        Rate evaluator of the transition
    begin_keV : float
        First kinetic energy
    end_keV : float
        Last kinetic energy; 0 means the endpoint
    step_keV : float
        Fixed step, ignored when ``steps`` is given
    steps : int, optional
        Number of intervals between begin and end
    logger : logging.Logger, optional
    """

    def __init__(
        self,
        evaluator: DecayRateEvaluator,
        begin_keV: float = 0.,
        end_keV: float = 0.,
        step_keV: float = 1.,
        steps: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.evaluator = evaluator
        self.begin_keV = begin_keV
        self.end_keV = end_keV
        self.step_keV = step_keV
        self.steps = steps
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    @classmethod
    def from_config(cls, evaluator: DecayRateEvaluator, config: SpectrumConfig,
                    logger: Optional[logging.Logger] = None) -> "SpectrumBuilder":
        return cls(evaluator, begin_keV=config.begin, end_keV=config.end,
                   step_keV=config.step_size, steps=config.steps, logger=logger)

    @property
    def begin_w(self) -> float:
        return kev_to_w(self.begin_keV)

    @property
    def end_w(self) -> float:
        if self.end_keV == 0.:
            return self.evaluator.w0
        return kev_to_w(self.end_keV)

    @property
    def step_w(self) -> float:
        if self.steps is not None:
            if self.steps <= 0:
                raise DomainError(f"Number of steps must be positive, got {self.steps}")
            return (self.end_w - self.begin_w) / self.steps
        return self.step_keV / ELECTRON_MASS_KEV

    def grid(self) -> np.ndarray:
        """
        Energies W at which the spectrum is evaluated.

        Accumulates the step from the first energy while W <= end.

        Raises
        ------
        DomainError
            If the step is not positive
        """
        begin_w = self.begin_w
        end_w = self.end_w
        step_w = self.step_w
        if not step_w > 0.:
            raise DomainError(f"Spectrum step must be positive, got {step_w * ELECTRON_MASS_KEV} keV")

        values = []
        current_w = begin_w
        while current_w <= end_w:
            values.append(current_w)
            current_w += step_w
        return np.array(values, dtype=float)

    def build(self) -> Spectrum:
        """Evaluate the rates on :meth:`grid`; recomputed on every call."""
        self.logger.info("Calculating spectrum")
        grid = self.grid()
        samples = []
        for w in grid:
            rate, neutrino_rate = self.evaluator.evaluate(w)
            samples.append(SpectrumSample(float(w), rate, neutrino_rate))
        self.logger.debug(f"Spectrum has {len(samples)} samples from W={self.begin_w} to W={self.end_w}")
        return Spectrum(samples=samples, w0=self.evaluator.w0,
                        step_keV=self.step_w * ELECTRON_MASS_KEV)
