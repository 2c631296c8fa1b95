"""
Result report

Human readable summary of one spectrum run: transition overview, derived
integrals, matrix elements, enabled corrections and the tabulated spectrum.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union

from betaforge import __version__
from betaforge.analysis.integrals import SpectrumAnalytics
from betaforge.analysis.spectrum import Spectrum
from betaforge.constants import element_symbol, w_to_kev
from betaforge.core.config import GeneratorConfig
from betaforge.core.parameters import NuclearParameters
from betaforge.exceptions import EmptySpectrum
from betaforge.io.sinks import format_row


def _header() -> List[str]:
    return [
        "*" * 60,
        f"{'betaforge v' + __version__:^60}",
        f"{'Allowed and first-forbidden beta spectrum shapes':^60}",
        "*" * 60,
        "",
    ]


def _transition_lines(config: GeneratorConfig, params: NuclearParameters) -> List[str]:
    transition = config.transition
    mother = f"{params.a}{element_symbol(params.mother_z)}"
    daughter = f"{params.a}{element_symbol(params.z)}"
    lines = [
        "Spectrum input overview",
        "=" * 30,
        f"Transition from {mother} [{params.mother_spin_parity}/2] "
        f"({params.mother_excitation_energy} keV) to {daughter} "
        f"[{params.daughter_spin_parity}/2] ({params.daughter_excitation_energy} keV)",
        f"Q Value: {params.q_value} keV\tEffective endpoint energy: {params.endpoint_kev}",
        f"Process: {transition.process}\tType: {transition.decay_type}",
    ]
    if params.mixing_ratio != 0:
        lines.append(f"Mixing ratio: {params.mixing_ratio}")
    return lines


def _integral_lines(config: GeneratorConfig, analytics: SpectrumAnalytics) -> List[str]:
    transition = config.transition
    lines = []
    try:
        if transition.partial_halflife is not None:
            lines.append(f"Partial halflife: {transition.partial_halflife} s")
            lines.append(f"Calculated log ft value: {analytics.log_ft(transition.partial_halflife)}")
        else:
            lines.append("Partial halflife: not given")
            lines.append(f"Calculated log f value: {analytics.log_f()}")
        if transition.log_ft is not None:
            lines.append(f"External Log ft: {transition.log_ft:.3f}")
            if transition.partial_halflife is not None:
                ratio = analytics.ft_ratio(transition.log_ft, transition.partial_halflife)
                lines.append(f"Ratio of calculated/external ft value: {ratio}")
        lines.append(f"Mean energy: {analytics.mean_energy()} keV")
    except EmptySpectrum as e:
        lines.append(f"Integrals not available: {e}")
    return lines


def _matrix_element_lines(config: GeneratorConfig, params: NuclearParameters) -> List[str]:
    me = params.matrix_elements
    overrides = config.overrides
    entries = [
        ("b/Ac (weak magnetism)", me.b_ac, overrides.weak_magnetism is not None),
        ("d/Ac (induced tensor)", me.d_ac, overrides.induced_tensor is not None),
        ("AM121/AM101", me.ratio_m121, overrides.ratio_m121 is not None),
    ]
    lines = ["", "Matrix Element Summary", "-" * 30]
    for label, value, given in entries:
        suffix = " (given)" if given else ""
        lines.append(f"{label:35}: {value}{suffix}")
    return lines


def _correction_lines(config: GeneratorConfig, params: NuclearParameters) -> List[str]:
    t = config.toggles
    shape = config.shape
    lines = [
        "",
        "Spectral corrections",
        "-" * 30,
        f"{'Phase space':25}: {t.phase_space}",
        f"{'Fermi function':25}: {t.fermi}",
        f"{'L0 correction':25}: {t.finite_size}",
        f"{'C correction':25}: {t.c}",
        f"    NS Shape: {shape.ns_shape}",
        f"{'Isovector correction':25}: {t.isovector}",
        f"    Connected: {t.connect}",
        f"{'Relativistic terms':25}: {t.relativistic}",
        f"{'Deformation':25}: {t.deformation}",
        f"{'U correction':25}: {t.u}",
        f"    ES Shape: {shape.es_shape}",
    ]
    if (shape.v_old is not None and shape.v_new is not None) or shape.es_shape == "Modified_Gaussian":
        lines.append("    v : " + ", ".join(str(v) for v in params.v_old))
        lines.append("    v': " + ", ".join(str(v) for v in params.v_new))
    else:
        lines.append("    v : not given")
        lines.append("    v': not given")
    lines.extend([
        f"{'Q correction':25}: {t.coulomb_recoil}",
        f"{'Radiative correction':25}: {t.radiative}",
        f"{'Nuclear recoil':25}: {t.recoil}",
        f"{'Atomic screening':25}: {t.screening}",
        f"{'Atomic exchange':25}: {t.exchange}",
        f"{'Atomic mismatch':25}: {t.atomic_mismatch}",
        f"{'Export neutrino':25}: {config.spectrum.neutrino}",
        f"{'Correction profile':25}: {config.profile}",
    ])
    return lines


def _spectrum_lines(config: GeneratorConfig, params: NuclearParameters,
                    spectrum: Spectrum) -> List[str]:
    grid = config.spectrum
    end = grid.end if grid.end > 0 else params.endpoint_kev
    step = spectrum.step_keV if grid.steps is not None else grid.step_size
    lines = [
        "",
        "",
        f"Spectrum calculated from {grid.begin} keV to {end} keV with step size {step} keV",
        "",
    ]
    neutrino = grid.neutrino
    if neutrino:
        lines.append(f"{'W [m_ec2]':10}\t{'E [keV]':10}\t{'dN_e/dW':10}\t{'dN_v/dW':10}")
    else:
        lines.append(f"{'W [m_ec2]':10}\t{'E [keV]':10}\t{'dN_e/dW':10}")
    for sample in spectrum:
        energy = w_to_kev(sample.w)
        if neutrino:
            lines.append(format_row(sample.w, energy, sample.rate, sample.neutrino_rate))
        else:
            lines.append(format_row(sample.w, energy, sample.rate))
    return lines


def format_report(config: GeneratorConfig, params: NuclearParameters, spectrum: Spectrum,
                  analytics: Optional[SpectrumAnalytics] = None) -> str:
    """Full text report of a run."""
    analytics = analytics if analytics is not None else SpectrumAnalytics(spectrum)
    lines = _header()
    lines.extend(_transition_lines(config, params))
    lines.extend(_integral_lines(config, analytics))
    lines.extend(_matrix_element_lines(config, params))
    lines.extend(_correction_lines(config, params))
    lines.extend(_spectrum_lines(config, params, spectrum))
    return "\n".join(lines) + "\n"


class ResultReportSink:
    """
    Writes the text report of a run.

    Parameters
    ----------
    path : str or Path
        Report file, conventionally ``<output>.txt``
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def write(self, config: GeneratorConfig, params: NuclearParameters, spectrum: Spectrum,
              analytics: Optional[SpectrumAnalytics] = None) -> Path:
        self.path.write_text(format_report(config, params, spectrum, analytics), encoding="utf-8")
        return self.path
