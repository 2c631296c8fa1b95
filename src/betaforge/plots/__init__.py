"""betaforge plotting helpers."""

from betaforge.plots.spectrum import HAS_MATPLOTLIB, plot_spectrum

__all__ = ["HAS_MATPLOTLIB", "plot_spectrum"]
