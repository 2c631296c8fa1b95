"""Spectrum generation workflow.

One run goes through the stages

1. Nuclear parameters from the configuration and matrix element provider
2. Correction pipeline for the selected profile
3. Spectrum on the configured energy grid (raw samples streamed to
   ``<output>.raw``)
4. Integrals (log ft or log f, mean energy)
5. Text report ``<output>.txt``
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Union

from betaforge.analysis.integrals import SpectrumAnalytics
from betaforge.analysis.spectrum import Spectrum, SpectrumBuilder
from betaforge.core.config import GeneratorConfig
from betaforge.core.matrix_elements import MatrixElementProvider
from betaforge.core.parameters import NuclearParameters, build_nuclear_parameters
from betaforge.corrections.evaluator import DecayRateEvaluator, DomainPolicy
from betaforge.corrections.pipeline import CorrectionPipeline, CorrectionProfile
from betaforge.exceptions import EmptySpectrum
from betaforge.io.exchange import ExchangeParameterTable
from betaforge.io.report import ResultReportSink
from betaforge.io.sinks import BufferedFileSink, RawSampleSink

logger = logging.getLogger(__name__)


@dataclass
class GeneratorResult:
    """Outcome of one spectrum run.

    Attributes
    ----------
    params : NuclearParameters
        Derived transition constants
    spectrum : Spectrum
        Computed spectrum
    log_ft : float, optional
        log ft (with a partial half-life) or log f; None when the spectrum
        is too short to integrate
    mean_energy_keV : float, optional
        Mean kinetic energy of the electrons
    files : dict
        Written files by kind ("raw", "report")
    """

    params: NuclearParameters
    spectrum: Spectrum
    log_ft: Optional[float] = None
    mean_energy_keV: Optional[float] = None
    files: Dict[str, Path] = field(default_factory=dict)


class SpectrumGenerator:
    """Run a complete spectrum calculation from a configuration.

    Parameters
    ----------
    config : GeneratorConfig
        Run configuration
    provider : MatrixElementProvider, optional
        Matrix elements; the single-particle estimate by default
    exchange_table : ExchangeParameterTable, optional
        Exchange parameters; read from ``config.exchange_data`` otherwise
    output_dir : str or Path, optional
        Directory for the output files (default: current directory)
    write_files : bool
        Write the raw sample file and the report
    logger : logging.Logger, optional
    """

    def __init__(
        self,
        config: GeneratorConfig,
        provider: Optional[MatrixElementProvider] = None,
        exchange_table: Optional[ExchangeParameterTable] = None,
        output_dir: Optional[Union[str, Path]] = None,
        write_files: bool = True,
        logger: Optional[logging.Logger] = None,
    ):
        self.config = config
        self.provider = provider
        self.exchange_table = exchange_table
        self.output_dir = Path(output_dir) if output_dir is not None else Path(".")
        self.write_files = write_files
        self.logger = logger if logger is not None else logging.getLogger(__name__)

        self.params = build_nuclear_parameters(config, provider, exchange_table, logger=self.logger)
        self.pipeline = CorrectionPipeline(
            self.params,
            config.toggles,
            profile=CorrectionProfile.parse(config.profile),
            es_shape=config.shape.es_shape,
            ns_shape=config.shape.ns_shape,
            logger=self.logger,
        )
        self.logger.debug("Leaving generator setup")

    def output_path(self, suffix: str) -> Path:
        return self.output_dir / f"{self.config.output}{suffix}"

    def evaluator(self, raw_sink: Optional[RawSampleSink] = None) -> DecayRateEvaluator:
        return DecayRateEvaluator(
            self.pipeline,
            raw_sink=raw_sink,
            domain_policy=DomainPolicy.parse(self.config.domain_policy),
            logger=self.logger,
        )

    def calculate_spectrum(self, raw_sink: Optional[RawSampleSink] = None) -> Spectrum:
        builder = SpectrumBuilder.from_config(self.evaluator(raw_sink), self.config.spectrum,
                                              logger=self.logger)
        return builder.build()

    def run(self) -> GeneratorResult:
        """Compute the spectrum, its integrals and (optionally) write the output files."""
        files: Dict[str, Path] = {}
        if self.write_files:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            raw_path = self.output_path(".raw")
            with BufferedFileSink(raw_path) as sink:
                spectrum = self.calculate_spectrum(sink)
            files["raw"] = raw_path
        else:
            spectrum = self.calculate_spectrum()

        analytics = SpectrumAnalytics(spectrum, logger=self.logger)
        result = GeneratorResult(params=self.params, spectrum=spectrum, files=files)
        try:
            halflife = self.config.transition.partial_halflife
            result.log_ft = analytics.log_ft(halflife if halflife is not None else 1.0)
            result.mean_energy_keV = analytics.mean_energy()
        except EmptySpectrum as e:
            self.logger.warning(f"Spectrum integrals not computed: {e}")

        if self.write_files:
            report = ResultReportSink(self.output_path(".txt"))
            files["report"] = report.write(self.config, self.params, spectrum, analytics)
            self.logger.info(f"Report written to {files['report']}")
        return result
