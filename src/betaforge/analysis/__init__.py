"""Spectrum construction and integrals."""

from betaforge.analysis.integrals import SpectrumAnalytics, integrate
from betaforge.analysis.spectrum import Spectrum, SpectrumBuilder, SpectrumSample

__all__ = [
    "SpectrumAnalytics",
    "integrate",
    "Spectrum",
    "SpectrumBuilder",
    "SpectrumSample",
]
