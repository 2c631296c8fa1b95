"""
Tests for the correction pipeline and the decay rate evaluator.
"""

import numpy as np
import pytest

from betaforge.core.config import CorrectionToggles, GeneratorConfig
from betaforge.core.matrix_elements import FixedMatrixElements
from betaforge.core.parameters import build_nuclear_parameters
from betaforge.corrections import (
    Correction,
    CorrectionPipeline,
    CorrectionProfile,
    DecayRateEvaluator,
    DomainPolicy,
)
from betaforge.exceptions import DomainError
from betaforge.io.exchange import ExchangeParameterTable
from betaforge.io.sinks import MemorySink
from betaforge.physics.coulomb import fermi_function
from betaforge.physics.kinematics import phase_space
from betaforge.physics.radiative import neutrino_radiative_correction, radiative_correction


# ============================================================================
# Pipeline
# ============================================================================

class TestCorrectionPipeline:
    """Order, gating and products of the enabled corrections."""

    def test_default_order(self, he6_params):
        pipeline = CorrectionPipeline(he6_params)
        assert pipeline.enabled() == list(Correction)

    def test_toggles_remove_corrections(self, he6_params):
        pipeline = CorrectionPipeline(he6_params, CorrectionToggles.only("phase_space", "fermi"))
        assert pipeline.enabled() == [Correction.PHASE_SPACE, Correction.FERMI]

    def test_no_corrections_gives_unity(self, he6_params):
        pipeline = CorrectionPipeline(he6_params, CorrectionToggles.only())
        assert pipeline.enabled() == []
        assert pipeline.apply(2.) == 1.

    def test_product_of_factors(self, he6_params):
        pipeline = CorrectionPipeline(he6_params)
        factors = pipeline.factors(2.)
        product = 1.
        for correction in pipeline.enabled():
            product = product * factors[correction]
        assert pipeline.apply(2.) == pytest.approx(product, rel=1e-12)

    def test_phase_space_only(self, he6_params):
        pipeline = CorrectionPipeline(he6_params, CorrectionToggles.only("phase_space"))
        for W in (1.2, 2.5, 6.):
            assert pipeline.apply(W) == phase_space(W, he6_params.w0)

    def test_phase_space_and_fermi(self, he6_params):
        pipeline = CorrectionPipeline(he6_params, CorrectionToggles.only("phase_space", "fermi"))
        W = 3.
        expected = phase_space(W, he6_params.w0) * fermi_function(W, 3, he6_params.r, 1)
        assert pipeline.apply(W) == pytest.approx(expected, rel=1e-12)

    def test_neutrino_branch_radiative(self, he6_params):
        pipeline = CorrectionPipeline(he6_params, CorrectionToggles.only("radiative"))
        Wv = 2.
        assert pipeline.apply_neutrino(Wv) == pytest.approx(neutrino_radiative_correction(Wv))
        assert pipeline.apply(Wv) == pytest.approx(
            radiative_correction(Wv, he6_params.w0, 3, he6_params.r, 1,
                                 g_a=he6_params.g_a, g_m=he6_params.g_m))

    def test_neutrino_factors(self, he6_params):
        pipeline = CorrectionPipeline(he6_params)
        Wv = 2.
        factors = pipeline.neutrino_factors(Wv)
        assert list(factors) == pipeline.enabled()
        assert factors[Correction.RADIATIVE] == pytest.approx(neutrino_radiative_correction(Wv))
        assert factors[Correction.RADIATIVE] != pipeline.factors(Wv)[Correction.RADIATIVE]
        assert factors[Correction.FERMI] == pipeline.factors(Wv)[Correction.FERMI]
        product = 1.
        for value in factors.values():
            product = product * value
        assert pipeline.apply_neutrino(Wv) == pytest.approx(product, rel=1e-12)

    def test_exchange_only_for_electron_emission(self, he6_params, na22_options):
        assert Correction.EXCHANGE in CorrectionPipeline(he6_params).enabled()

        config = GeneratorConfig.from_dict(na22_options)
        table = ExchangeParameterTable.from_rows([[z] + [0.05] * 9 for z in range(1, 20)])
        params = build_nuclear_parameters(config, provider=FixedMatrixElements(), exchange_table=table)
        pipeline = CorrectionPipeline(params, CorrectionToggles.only("phase_space", "exchange"))
        assert Correction.EXCHANGE not in pipeline.enabled()

        reference = CorrectionPipeline(params, CorrectionToggles.only("phase_space"))
        for W in (1.3, 2., 4.):
            assert pipeline.apply(W) == reference.apply(W)

    def test_mismatch_skipped_with_explicit_deficit(self, he6_options):
        he6_options["Transition"]["AtomicEnergyDeficit"] = 0.5
        config = GeneratorConfig.from_dict(he6_options)
        params = build_nuclear_parameters(config, provider=FixedMatrixElements())
        pipeline = CorrectionPipeline(params, CorrectionToggles.only("phase_space", "atomic_mismatch"))
        assert Correction.ATOMIC_MISMATCH not in pipeline.enabled()

        reference = CorrectionPipeline(params, CorrectionToggles.only("phase_space"))
        assert pipeline.apply(3.) == reference.apply(3.)

    def test_mismatch_applied_without_deficit(self, he6_params):
        pipeline = CorrectionPipeline(he6_params, CorrectionToggles.only("phase_space", "atomic_mismatch"))
        assert Correction.ATOMIC_MISMATCH in pipeline.enabled()
        reference = CorrectionPipeline(he6_params, CorrectionToggles.only("phase_space"))
        assert pipeline.apply(3.) < reference.apply(3.)

    def test_legacy_profile(self, he6_params):
        standard = CorrectionPipeline(he6_params, profile="standard")
        legacy = CorrectionPipeline(he6_params, profile=CorrectionProfile.LEGACY)
        assert legacy.profile is CorrectionProfile.LEGACY
        assert legacy.enabled() == standard.enabled()
        assert legacy.apply(3.) == pytest.approx(standard.apply(3.), rel=1e-2)

    def test_unknown_profile(self, he6_params):
        with pytest.raises(ValueError):
            CorrectionPipeline(he6_params, profile="modern")


# ============================================================================
# Evaluator
# ============================================================================

class TestDecayRateEvaluator:
    """Rates at a single energy, flooring and domain handling."""

    def test_rates_are_non_negative(self, he6_params, na22_params):
        for params in (he6_params, na22_params):
            evaluator = DecayRateEvaluator(CorrectionPipeline(params))
            for W in np.linspace(0.5, params.w0 + 1., 40):
                rate, neutrino_rate = evaluator.evaluate(W)
                assert rate >= 0.
                assert neutrino_rate >= 0.

    def test_deterministic(self, he6_params):
        evaluator = DecayRateEvaluator(CorrectionPipeline(he6_params))
        assert evaluator.evaluate(2.345) == evaluator.evaluate(2.345)

    def test_phase_space_only(self, he6_params):
        evaluator = DecayRateEvaluator(CorrectionPipeline(he6_params, CorrectionToggles.only("phase_space")))
        W = 2.5
        rate, neutrino_rate = evaluator.evaluate(W)
        assert rate == float(phase_space(W, he6_params.w0))
        assert neutrino_rate == float(phase_space(he6_params.w0 - W + 1., he6_params.w0))

    def test_mirrored_spectra(self, he6_params):
        evaluator = DecayRateEvaluator(CorrectionPipeline(he6_params, CorrectionToggles.only("phase_space")))
        W = 2.
        _, neutrino_rate = evaluator.evaluate(W)
        rate, _ = evaluator.evaluate(he6_params.w0 - W + 1.)
        assert neutrino_rate == pytest.approx(rate)

    def test_zero_at_threshold(self, he6_params):
        evaluator = DecayRateEvaluator(CorrectionPipeline(he6_params))
        rate, _ = evaluator.evaluate(1.)
        assert rate == 0.

    def test_raw_sink(self, he6_params):
        sink = MemorySink()
        evaluator = DecayRateEvaluator(CorrectionPipeline(he6_params), raw_sink=sink)
        rate, neutrino_rate = evaluator.evaluate(2.)
        assert len(sink) == 1
        W, energy, sample_rate, sample_nu = sink.samples[0]
        assert W == 2.
        assert energy == pytest.approx(510.99895, rel=1e-6)
        assert (sample_rate, sample_nu) == (rate, neutrino_rate)


class TestDomainPolicy:

    def test_parse(self):
        assert DomainPolicy.parse("Clamp") is DomainPolicy.CLAMP
        assert DomainPolicy.parse(DomainPolicy.SKIP) is DomainPolicy.SKIP
        with pytest.raises(ValueError):
            DomainPolicy.parse("ignore")

    def test_error(self, he6_params):
        evaluator = DecayRateEvaluator(CorrectionPipeline(he6_params), domain_policy="error")
        with pytest.raises(DomainError):
            evaluator.evaluate(he6_params.w0 + 0.5)
        with pytest.raises(DomainError):
            evaluator.evaluate(0.9)
        assert evaluator.evaluate(2.)[0] > 0.

    def test_skip(self, he6_params):
        sink = MemorySink()
        evaluator = DecayRateEvaluator(CorrectionPipeline(he6_params), raw_sink=sink,
                                       domain_policy=DomainPolicy.SKIP)
        assert evaluator.evaluate(he6_params.w0 + 0.5) == (0., 0.)
        assert len(sink) == 0

    def test_clamp(self, he6_params):
        pipeline = CorrectionPipeline(he6_params)
        clamped = DecayRateEvaluator(pipeline, domain_policy=DomainPolicy.CLAMP)
        plain = DecayRateEvaluator(pipeline)
        assert clamped.evaluate(0.5) == plain.evaluate(1.)
        assert clamped.evaluate(he6_params.w0 + 2.) == plain.evaluate(he6_params.w0)

    def test_propagate(self, he6_params):
        evaluator = DecayRateEvaluator(CorrectionPipeline(he6_params, CorrectionToggles.only("phase_space")))
        W = he6_params.w0 + 0.5
        rate, _ = evaluator.evaluate(W)
        assert rate == pytest.approx(float(phase_space(W, he6_params.w0)))
