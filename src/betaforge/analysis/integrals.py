"""
Spectrum integrals

Phase space integral f, log ft and mean energy from a built spectrum, using
composite Simpson integration over the (possibly unevenly terminated) W grid.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

import numpy as np
from scipy import integrate as sp_integrate

from betaforge.analysis.spectrum import SpectrumSample
from betaforge.constants import w_to_kev
from betaforge.exceptions import EmptySpectrum

logger = logging.getLogger(__name__)

Selector = Callable[[SpectrumSample], float]


def _rate(sample: SpectrumSample) -> float:
    return sample.rate


def integrate(samples: Sequence[SpectrumSample], selector: Optional[Selector] = None) -> float:
    """
    Simpson integral over W of the selected column.

    Parameters
    ----------
    samples : sequence of SpectrumSample
        Spectrum in ascending W
    selector : callable, optional
        Value to integrate for each sample; the electron rate by default

    Raises
    ------
    EmptySpectrum
        With fewer than three samples
    """
    samples = list(samples)
    if len(samples) < 3:
        raise EmptySpectrum(f"Need at least 3 samples to integrate, got {len(samples)}")
    selector = selector if selector is not None else _rate
    x = np.array([s.w for s in samples], dtype=float)
    y = np.array([selector(s) for s in samples], dtype=float)
    return float(sp_integrate.simpson(y, x=x))


class SpectrumAnalytics:
    """
    Derived quantities of a spectrum.

    Parameters
    ----------
    samples : sequence of SpectrumSample
        Built spectrum (a :class:`~betaforge.analysis.spectrum.Spectrum` works)
    logger : logging.Logger, optional
    """

    def __init__(self, samples: Sequence[SpectrumSample], logger: Optional[logging.Logger] = None):
        self.samples = list(samples)
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    def integrate(self, selector: Optional[Selector] = None) -> float:
        return integrate(self.samples, selector)

    def log_ft(self, partial_halflife: float = 1.0) -> float:
        """log10(f t); a half-life of 1 gives log f."""
        self.logger.debug(f"Calculating Ft value with partial halflife {partial_halflife}")
        f = self.integrate()
        self.logger.debug(f"f: {f}")
        with np.errstate(divide="ignore", invalid="ignore"):
            return float(np.log10(f * partial_halflife))

    def log_f(self) -> float:
        return self.log_ft(1.0)

    def ft_ratio(self, external_log_ft: float, partial_halflife: float) -> float:
        """Calculated over external ft value."""
        return 10.**(self.log_ft(partial_halflife) - external_log_ft)

    def mean_w(self) -> float:
        """Rate weighted mean total energy."""
        weighted = self.integrate(lambda s: s.w * s.rate)
        f = self.integrate()
        self.logger.debug(f"Weighted f: {weighted} Clean f: {f}")
        with np.errstate(divide="ignore", invalid="ignore"):
            return float(np.float64(weighted) / f)

    def mean_energy(self) -> float:
        """Mean kinetic energy in keV."""
        self.logger.debug("Calculating mean energy")
        return w_to_kev(self.mean_w())
