"""Correction pipeline and decay rate evaluation."""

from betaforge.corrections.evaluator import DecayRateEvaluator, DomainPolicy
from betaforge.corrections.pipeline import Correction, CorrectionPipeline, CorrectionProfile

__all__ = [
    "DecayRateEvaluator",
    "DomainPolicy",
    "Correction",
    "CorrectionPipeline",
    "CorrectionProfile",
]
