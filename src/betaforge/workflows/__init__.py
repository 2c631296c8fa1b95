"""End-to-end spectrum runs."""

from betaforge.workflows.generator import GeneratorResult, SpectrumGenerator

__all__ = ["GeneratorResult", "SpectrumGenerator"]
