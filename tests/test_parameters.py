"""
Tests for the derived transition parameters.
"""

import logging
import math

import pytest

from betaforge.constants import ELECTRON_MASS_KEV, NATURAL_LENGTH, NUCLEON_MASS_KEV
from betaforge.core.config import GeneratorConfig, MatrixElementOverrides
from betaforge.core.matrix_elements import FixedMatrixElements, MatrixElementProvider
from betaforge.core.parameters import (
    DEFAULT_POTENTIAL_EXPANSION,
    BetaType,
    DecayType,
    build_nuclear_parameters,
    endpoint_energy,
    modified_gaussian_vectors,
    nuclear_radius,
    parse_beta_type,
    parse_decay_type,
    resolve_matrix_elements,
    shape_vectors,
)
from betaforge.io.exchange import ExchangeParameterTable


class NaNMatrixElements(MatrixElementProvider):
    """Provider whose ratios are undefined."""

    def __init__(self, m101=1.):
        self.m101 = m101

    def reduced_matrix_element(self, k, l, s, vector=False):
        if l == 0:
            return self.m101
        return float("nan")

    def weak_magnetism(self):
        return float("nan")

    def induced_tensor(self):
        return float("nan")


class CountingProvider(FixedMatrixElements):
    """Fixed provider that records which matrix elements were requested."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.requested = []

    def reduced_matrix_element(self, k, l, s, vector=False):
        self.requested.append((k, l, s))
        return super().reduced_matrix_element(k, l, s, vector)


# ============================================================================
# Derived quantities
# ============================================================================

class TestDerivedQuantities:

    def test_default_radius(self):
        expected = 1.2 * 27**(1. / 3.) * 1e-15 / NATURAL_LENGTH
        assert nuclear_radius(27) == pytest.approx(expected)

    def test_explicit_rms_radius(self):
        expected = 3.0e-15 / NATURAL_LENGTH * math.sqrt(5. / 3.)
        assert nuclear_radius(27, 3.0) == pytest.approx(expected)

    def test_parse_beta_type(self):
        assert parse_beta_type("B-") is BetaType.ELECTRON
        assert parse_beta_type("B+") is BetaType.POSITRON
        assert parse_beta_type(" b+ ") is BetaType.POSITRON

    def test_parse_decay_type(self):
        assert parse_decay_type("Fermi") is DecayType.FERMI
        assert parse_decay_type("Gamow-Teller") is DecayType.GAMOW_TELLER
        assert parse_decay_type("Mixed") is DecayType.MIXED

    def test_endpoint_energy(self):
        q, a = 1000., 20
        w0 = q / ELECTRON_MASS_KEV + 1
        expected = w0 - (w0**2 - 1) / 2. / a / (NUCLEON_MASS_KEV / ELECTRON_MASS_KEV)
        assert endpoint_energy(q, a, 1) == pytest.approx(expected)

    def test_positron_endpoint_is_lower(self):
        assert endpoint_energy(3000., 22, -1) < endpoint_energy(3000., 22, 1)

    def test_deficit_and_excitation(self):
        shifted = endpoint_energy(1000., 20, 1, atomic_energy_deficit=100.,
                                  mother_excitation_energy=50., daughter_excitation_energy=20.)
        assert shifted == pytest.approx(endpoint_energy(930., 20, 1))


class TestShapeVectors:

    def test_default_expansion(self):
        assert shape_vectors("Fermi", 0.) == (DEFAULT_POTENTIAL_EXPANSION, DEFAULT_POTENTIAL_EXPANSION)

    def test_explicit_vectors_are_padded(self):
        v_old, v_new = shape_vectors("Fermi", 0., [1.5, -0.5], [1.6, -0.6, 0.01])
        assert v_old == (1.5, -0.5, 0.)
        assert v_new == (1.6, -0.6, 0.01)

    def test_single_vector_is_an_error(self, caplog):
        with caplog.at_level(logging.ERROR):
            result = shape_vectors("Fermi", 0., v_old=[1.5, -0.5, 0.])
        assert result == (DEFAULT_POTENTIAL_EXPANSION, DEFAULT_POTENTIAL_EXPANSION)
        assert "Both old and new" in caplog.text

    def test_modified_gaussian(self):
        v_old, v_new = shape_vectors("Modified_Gaussian", 0.5)
        assert (v_old, v_new) == modified_gaussian_vectors(0.5)
        assert v_old == (1.5, -0.5, 0.)
        assert len(v_new) == 3

    def test_modified_gaussian_outside_physical_range(self, caplog):
        with caplog.at_level(logging.ERROR):
            v_old, v_new = shape_vectors("Modified_Gaussian", -0.495)
        assert v_old == (1.5, -0.5, 0.)
        assert all(math.isnan(v) for v in v_new)
        assert "no valid potential expansion" in caplog.text


# ============================================================================
# Matrix elements
# ============================================================================

class TestResolveMatrixElements:

    def test_form_factors(self):
        provider = FixedMatrixElements(m101=2.0, m121=1.0, b_ac=4.0, d_ac=0.5)
        values = resolve_matrix_elements(provider, MatrixElementOverrides(), g_a=1.27, a=10)
        assert values.m101 == 2.0
        assert values.ratio_m121 == pytest.approx(0.5)
        assert values.fc1 == pytest.approx(2.54)
        assert values.fb == pytest.approx(4.0 * 10 * 2.54)
        assert values.fd == pytest.approx(0.5 * 10 * 2.54)

    def test_nan_ratios_are_zeroed(self, caplog):
        with caplog.at_level(logging.ERROR):
            values = resolve_matrix_elements(NaNMatrixElements(), MatrixElementOverrides(),
                                             g_a=1.27, a=10)
        assert values.b_ac == 0.
        assert values.d_ac == 0.
        assert values.ratio_m121 == 0.
        assert values.m101 == 1.
        assert "NaN" in caplog.text

    def test_vanishing_m101(self, caplog):
        provider = FixedMatrixElements(m101=0., m121=1.0, b_ac=4.0, d_ac=1.0)
        with caplog.at_level(logging.ERROR):
            values = resolve_matrix_elements(provider, MatrixElementOverrides(), g_a=1.27, a=10)
        assert values.m101 == 1.
        assert values.b_ac == 0.
        assert values.d_ac == 0.
        assert values.ratio_m121 == 0.
        assert values.fc1 == pytest.approx(1.27)
        assert "M101 is 0" in caplog.text

    def test_overrides_skip_provider(self):
        provider = CountingProvider(m101=3.0, b_ac=1.0, d_ac=1.0)
        overrides = MatrixElementOverrides(weak_magnetism=5.0, induced_tensor=2.0, ratio_m121=0.25)
        values = resolve_matrix_elements(provider, overrides, g_a=1.27, a=10)
        assert provider.requested == []
        assert values.m101 == 1.
        assert values.b_ac == 5.0
        assert values.d_ac == 2.0
        assert values.ratio_m121 == 0.25


# ============================================================================
# Construction
# ============================================================================

class TestBuildNuclearParameters:

    def test_he6(self, he6_params):
        assert he6_params.z == 3
        assert he6_params.a == 6
        assert he6_params.mother_z == 2
        assert he6_params.beta_type is BetaType.ELECTRON
        assert he6_params.decay_type is DecayType.GAMOW_TELLER
        assert he6_params.mixing_ratio == 0.
        assert he6_params.r == pytest.approx(nuclear_radius(6, 2.589))
        assert he6_params.w0 == pytest.approx(endpoint_energy(3505.21, 6, 1))
        assert he6_params.endpoint_kev == pytest.approx((he6_params.w0 - 1.) * ELECTRON_MASS_KEV)
        assert he6_params.ho_fit == pytest.approx(0.333)
        assert he6_params.ex_pars.is_zero
        assert he6_params.a_neg == he6_params.l0.a_neg
        assert he6_params.single_particle_states is None

    def test_default_provider(self, he6_config):
        params = build_nuclear_parameters(he6_config)
        assert params.matrix_elements.m101 == pytest.approx(math.sqrt(5. / 3.))
        assert params.matrix_elements.b_ac == pytest.approx(4.706 / 1.27)

    def test_inconsistent_configuration_is_logged(self, he6_options, caplog):
        he6_options["Daughter"]["Z"] = 4
        config = GeneratorConfig.from_dict(he6_options)
        with caplog.at_level(logging.ERROR):
            build_nuclear_parameters(config, provider=FixedMatrixElements())
        assert "cannot be obtained" in caplog.text

    def test_exchange_parameters_of_mother_atom(self, he6_config):
        table = ExchangeParameterTable.from_rows([
            [2] + [0.1] * 9,
            [3] + [0.2] * 9,
        ])
        params = build_nuclear_parameters(he6_config, provider=FixedMatrixElements(),
                                          exchange_table=table)
        # electron emission: Z - 1 is looked up
        assert params.ex_pars.a == pytest.approx(0.1)

    def test_exchange_disabled_ignores_table(self, he6_options):
        he6_options["Spectrum"]["Exchange"] = False
        config = GeneratorConfig.from_dict(he6_options)
        table = ExchangeParameterTable.from_rows([[2] + [0.1] * 9])
        params = build_nuclear_parameters(config, provider=FixedMatrixElements(),
                                          exchange_table=table)
        assert params.ex_pars.is_zero

    def test_connect_mode_states(self, he6_options):
        he6_options["Spectrum"]["Connect"] = True
        config = GeneratorConfig.from_dict(he6_options)
        params = build_nuclear_parameters(config)
        initial, final = params.single_particle_states
        assert initial.l == 1
        assert final.l == 1

    def test_mixed_ratio(self, he6_options):
        he6_options["Transition"].update({"Type": "Mixed", "MixingRatio": -2.5})
        config = GeneratorConfig.from_dict(he6_options)
        params = build_nuclear_parameters(config, provider=FixedMatrixElements())
        assert params.decay_type is DecayType.MIXED
        assert params.mixing_ratio == pytest.approx(-2.5)

    def test_fitted_modified_gaussian_for_medium_heavy_nucleus(self):
        # 64Cu -> 64Ni positron branch, hoFit from the HO fit
        config = GeneratorConfig.from_dict({
            "Transition": {"Process": "B+", "Type": "Gamow-Teller", "QValue": 1675.0},
            "Mother": {"Z": 29, "A": 64, "SpinParity": 2},
            "Daughter": {"Z": 28, "A": 64, "SpinParity": 0},
            "Spectrum": {"ESShape": "Modified_Gaussian", "NSShape": "Modified_Gaussian"},
        })
        params = build_nuclear_parameters(config, provider=FixedMatrixElements())
        assert params.ho_fit >= 0.
        assert all(math.isfinite(v) for v in params.v_new)
        assert params.v_old == (1.5, -0.5, 0.)

    def test_negative_mod_gauss_fit_is_logged(self, he6_options, caplog):
        he6_options["Spectrum"].update({"ModGaussFit": -0.5, "NSShape": "Modified_Gaussian"})
        config = GeneratorConfig.from_dict(he6_options)
        with caplog.at_level(logging.ERROR):
            params = build_nuclear_parameters(config, provider=FixedMatrixElements())
        assert params.ho_fit == -0.5
        assert "is negative" in caplog.text
