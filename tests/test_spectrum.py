"""
Tests for spectrum construction and spectrum integrals.
"""

import math

import numpy as np
import pytest

from betaforge.analysis import SpectrumAnalytics, SpectrumBuilder, SpectrumSample, integrate
from betaforge.constants import ELECTRON_MASS_KEV, kev_to_w, w_to_kev
from betaforge.core.config import CorrectionToggles, GeneratorConfig, SpectrumConfig
from betaforge.core.matrix_elements import FixedMatrixElements
from betaforge.core.parameters import build_nuclear_parameters
from betaforge.corrections import CorrectionPipeline, DecayRateEvaluator
from betaforge.exceptions import DomainError, EmptySpectrum


def make_evaluator(params, toggles=None):
    return DecayRateEvaluator(CorrectionPipeline(params, toggles))


def constant_samples(value, n=11, begin=1., end=3.):
    return [SpectrumSample(w, value, value) for w in np.linspace(begin, end, n)]


@pytest.fixture
def neutron_params():
    """Free neutron decay into hydrogen, endpoint close to W0 = 3."""
    config = GeneratorConfig.from_dict({
        "Transition": {"Process": "B-", "Type": "Fermi", "QValue": 2. * ELECTRON_MASS_KEV},
        "Mother": {"Z": 0, "A": 1},
        "Daughter": {"Z": 1, "A": 1},
        "Spectrum": {"Exchange": False},
    })
    return build_nuclear_parameters(config, provider=FixedMatrixElements())


# ============================================================================
# Grid
# ============================================================================

class TestSpectrumGrid:
    """Energy grid from begin, end and step."""

    def test_fixed_step(self, he6_params):
        builder = SpectrumBuilder(make_evaluator(he6_params), begin_keV=0., end_keV=100., step_keV=10.)
        grid = builder.grid()
        assert len(grid) in (10, 11)
        assert grid[0] == 1.
        assert np.all(np.diff(grid) > 0)
        assert grid[-1] <= builder.end_w

    def test_number_of_steps(self, he6_params):
        builder = SpectrumBuilder(make_evaluator(he6_params), begin_keV=50., end_keV=150., steps=4)
        assert builder.step_w == pytest.approx(100. / ELECTRON_MASS_KEV / 4.)
        assert len(builder.grid()) in (4, 5)

    def test_energy_conversion(self, he6_params):
        builder = SpectrumBuilder(make_evaluator(he6_params), begin_keV=ELECTRON_MASS_KEV, end_keV=100.)
        assert builder.begin_w == kev_to_w(ELECTRON_MASS_KEV) == pytest.approx(2.)
        assert w_to_kev(builder.end_w) == pytest.approx(100.)
        assert SpectrumSample(3., 0., 0.).energy_keV == pytest.approx(2. * ELECTRON_MASS_KEV)

    def test_zero_end_runs_to_endpoint(self, he6_params):
        builder = SpectrumBuilder(make_evaluator(he6_params), step_keV=100.)
        assert builder.end_w == he6_params.w0
        assert builder.grid()[-1] <= he6_params.w0

    @pytest.mark.parametrize("step", [0., -5.])
    def test_non_positive_step(self, he6_params, step):
        builder = SpectrumBuilder(make_evaluator(he6_params), step_keV=step)
        with pytest.raises(DomainError):
            builder.grid()

    def test_non_positive_steps(self, he6_params):
        builder = SpectrumBuilder(make_evaluator(he6_params), end_keV=100., steps=0)
        with pytest.raises(DomainError):
            builder.build()

    def test_from_config(self, he6_params):
        config = SpectrumConfig(begin=10., end=60., step_size=5.)
        builder = SpectrumBuilder.from_config(make_evaluator(he6_params), config)
        assert builder.begin_keV == 10.
        assert builder.end_keV == 60.
        assert builder.step_keV == 5.


# ============================================================================
# Build
# ============================================================================

class TestSpectrumBuilder:

    def test_build(self, he6_params):
        builder = SpectrumBuilder(make_evaluator(he6_params), step_keV=50.)
        spectrum = builder.build()
        assert len(spectrum) == len(builder.grid())
        assert spectrum.w0 == he6_params.w0
        assert spectrum.step_keV == pytest.approx(50.)
        assert np.all(spectrum.rate >= 0.)
        assert np.all(spectrum.neutrino_rate >= 0.)
        assert np.all(np.diff(spectrum.w) > 0)
        assert spectrum[0].energy_keV == pytest.approx(0.)

    def test_rebuild_is_identical(self, he6_params):
        builder = SpectrumBuilder(make_evaluator(he6_params), step_keV=100.)
        first = builder.build()
        second = builder.build()
        assert list(first) == list(second)

    def test_neutron_decay_shape(self, neutron_params):
        assert neutron_params.z == 1
        assert neutron_params.mother_z == 0
        assert neutron_params.w0 == pytest.approx(3., abs=0.01)

        evaluator = make_evaluator(neutron_params, CorrectionToggles.only("phase_space", "fermi"))
        spectrum = SpectrumBuilder(evaluator, step_keV=10.).build()
        rate = spectrum.rate
        assert rate[0] == 0.
        peak = int(np.argmax(rate))
        assert 0 < peak < len(rate) - 1
        assert np.all(np.diff(rate[:peak + 1]) > 0)
        assert np.all(np.diff(rate[peak:]) < 0)

    def test_dataframe_export(self, he6_params, tmp_path):
        pytest.importorskip("pandas")
        spectrum = SpectrumBuilder(make_evaluator(he6_params), step_keV=200.).build()
        df = spectrum.to_dataframe()
        assert list(df.columns) == ["W", "E_keV", "rate", "neutrino_rate"]
        assert len(df) == len(spectrum)

        path = spectrum.to_csv(tmp_path / "spectrum.csv")
        assert path.exists()
        assert path.read_text().splitlines()[0] == "W,E_keV,rate,neutrino_rate"


# ============================================================================
# Integrals
# ============================================================================

class TestIntegrals:
    """Simpson integrals, log ft and mean energy."""

    def test_constant(self):
        assert integrate(constant_samples(2.5)) == pytest.approx(2.5 * 2.)

    def test_quadratic_is_exact(self):
        samples = [SpectrumSample(w, w * w, 0.) for w in np.linspace(1., 3., 11)]
        assert integrate(samples) == pytest.approx(26. / 3.)

    def test_selector(self):
        samples = [SpectrumSample(w, 1., 3.) for w in np.linspace(1., 3., 11)]
        assert integrate(samples, lambda s: s.neutrino_rate) == pytest.approx(6.)

    def test_too_few_samples(self):
        with pytest.raises(EmptySpectrum):
            integrate(constant_samples(1., n=2))
        with pytest.raises(EmptySpectrum):
            SpectrumAnalytics([]).log_ft()

    def test_log_ft(self):
        analytics = SpectrumAnalytics(constant_samples(2.5))
        f = integrate(constant_samples(2.5))
        assert analytics.log_ft(1.0) == np.log10(f)
        assert analytics.log_f() == analytics.log_ft(1.0)
        assert analytics.log_ft(100.) == pytest.approx(math.log10(f) + 2.)

    def test_ft_ratio(self):
        analytics = SpectrumAnalytics(constant_samples(2.5))
        log_ft = analytics.log_ft(10.)
        assert analytics.ft_ratio(log_ft, 10.) == pytest.approx(1.)
        assert analytics.ft_ratio(log_ft - 1., 10.) == pytest.approx(10.)

    def test_zero_spectrum(self):
        analytics = SpectrumAnalytics(constant_samples(0.))
        assert analytics.log_ft() == -np.inf

    def test_mean_energy(self):
        analytics = SpectrumAnalytics(constant_samples(1.))
        assert analytics.mean_w() == pytest.approx(2.)
        assert analytics.mean_energy() == pytest.approx(ELECTRON_MASS_KEV)

    def test_from_built_spectrum(self, he6_params):
        spectrum = SpectrumBuilder(make_evaluator(he6_params), step_keV=20.).build()
        analytics = SpectrumAnalytics(spectrum)
        assert np.isfinite(analytics.log_f())
        assert 0. < analytics.mean_energy() < he6_params.endpoint_kev
