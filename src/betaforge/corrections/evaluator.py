"""Decay rate evaluation at a single energy."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from betaforge.constants import w_to_kev
from betaforge.corrections.pipeline import CorrectionPipeline
from betaforge.exceptions import DomainError
from betaforge.io.sinks import RawSampleSink

logger = logging.getLogger(__name__)


class DomainPolicy(Enum):
    """Handling of energies outside [1, W0]."""
    PROPAGATE = "propagate"  # evaluate anyway
    CLAMP = "clamp"          # clamp W into [1, W0]
    SKIP = "skip"            # zero rates, no raw sample
    ERROR = "error"          # raise DomainError

    @classmethod
    def parse(cls, name) -> "DomainPolicy":
        if isinstance(name, cls):
            return name
        return cls(str(name).strip().lower())


class DecayRateEvaluator:
    """
    Electron and neutrino decay rate at total energy W.

    The neutrino rate is evaluated at the mirrored energy Wv = W0 - W + 1.
    Both rates are the product of the enabled corrections, floored at zero
    after the full product (NaN counts as zero).

    Parameters
    ----------
    pipeline : CorrectionPipeline
        Bound corrections of the transition
    raw_sink : RawSampleSink, optional
        Receives (W, E [keV], rate, neutrino rate) for every evaluated point
    domain_policy : DomainPolicy
        What to do with W outside [1, W0]
    logger : logging.Logger, optional
    """

    def __init__(
        self,
        pipeline: CorrectionPipeline,
        raw_sink: Optional[RawSampleSink] = None,
        domain_policy: DomainPolicy = DomainPolicy.PROPAGATE,
        logger: Optional[logging.Logger] = None,
    ):
        self.pipeline = pipeline
        self.raw_sink = raw_sink
        self.domain_policy = DomainPolicy.parse(domain_policy)
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    @property
    def w0(self) -> float:
        return self.pipeline.params.w0

    def _in_domain(self, W: float) -> bool:
        return 1. <= W <= self.w0

    def evaluate(self, W: float) -> Tuple[float, float]:
        """
        Decay rates at W.

        Returns
        -------
        tuple of float
            (rate, neutrino_rate), both >= 0
        """
        W = float(W)
        if not self._in_domain(W):
            if self.domain_policy is DomainPolicy.ERROR:
                raise DomainError(f"W = {W} outside [1, {self.w0}]")
            if self.domain_policy is DomainPolicy.SKIP:
                self.logger.debug(f"Skipping W = {W} outside [1, {self.w0}]")
                return 0., 0.
            if self.domain_policy is DomainPolicy.CLAMP:
                W = min(max(W, 1.), self.w0)

        Wv = self.w0 - W + 1.
        rate = float(np.fmax(self.pipeline.apply(W), 0.))
        neutrino_rate = float(np.fmax(self.pipeline.apply_neutrino(Wv), 0.))

        if self.raw_sink is not None:
            self.raw_sink.emit(W, w_to_kev(W), rate, neutrino_rate)
        return rate, neutrino_rate
