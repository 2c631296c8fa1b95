"""
Spectrum plotting

Electron (and optionally neutrino) spectrum versus kinetic energy.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple, Union

try:
    import matplotlib.pyplot as plt
    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False

from betaforge.analysis.spectrum import Spectrum


def plot_spectrum(
    spectrum: Spectrum,
    neutrino: bool = False,
    normalize: bool = False,
    title: str = "Beta spectrum",
    figsize: Tuple[float, float] = (8, 6),
    save_path: Optional[Union[str, Path]] = None,
):
    """
    Plot dN/dW against kinetic energy.

    Parameters
    ----------
    spectrum : Spectrum
        Built spectrum
    neutrino : bool
        Also draw the neutrino spectrum
    normalize : bool
        Scale each curve to unit maximum
    title : str
        Axes title
    figsize : tuple
        Figure size
    save_path : str or Path, optional
        Save figure to path

    Returns
    -------
    fig, ax
        Matplotlib figure and axes
    """
    if not HAS_MATPLOTLIB:
        raise ImportError("matplotlib required for plotting")
    if len(spectrum) == 0:
        raise ValueError("No spectrum samples to plot")

    energy = spectrum.energy_keV
    rate = spectrum.rate
    nu_rate = spectrum.neutrino_rate
    if normalize:
        rate = rate / rate.max() if rate.max() > 0 else rate
        nu_rate = nu_rate / nu_rate.max() if nu_rate.max() > 0 else nu_rate

    fig, ax = plt.subplots(figsize=figsize)
    ax.plot(energy, rate, label="Electron")
    if neutrino:
        ax.plot(energy, nu_rate, linestyle="--", label="Neutrino")
    ax.set_xlabel("Kinetic energy (keV)")
    ax.set_ylabel("dN/dW (arb.)")
    ax.set_title(title)
    ax.grid(True, alpha=0.3)
    ax.legend(loc="upper right")

    if save_path is not None:
        fig.savefig(save_path, bbox_inches="tight")
    return fig, ax
