"""Shared fixtures for betaforge tests."""

import copy

import pytest

from betaforge.core.config import GeneratorConfig
from betaforge.core.matrix_elements import FixedMatrixElements
from betaforge.core.parameters import build_nuclear_parameters


HE6_OPTIONS = {
    "Transition": {
        "Process": "B-",
        "Type": "Gamow-Teller",
        "QValue": 3505.21,
        "PartialHalflife": 0.807,
    },
    "Mother": {"Z": 2, "A": 6, "SpinParity": 0},
    "Daughter": {"Z": 3, "A": 6, "SpinParity": 2, "Radius": 2.589},
    "Spectrum": {"ModGaussFit": 0.333, "StepSize": 10.0},
}

NA22_OPTIONS = {
    "Transition": {
        "Process": "B+",
        "Type": "Gamow-Teller",
        "QValue": 2842.0,
    },
    "Mother": {"Z": 11, "A": 22, "SpinParity": 6},
    "Daughter": {"Z": 10, "A": 22, "SpinParity": 4},
    "Spectrum": {"ModGaussFit": 1.0, "StepSize": 10.0},
}


@pytest.fixture
def he6_options():
    return copy.deepcopy(HE6_OPTIONS)


@pytest.fixture
def na22_options():
    return copy.deepcopy(NA22_OPTIONS)


@pytest.fixture
def he6_config(he6_options):
    return GeneratorConfig.from_dict(he6_options)


@pytest.fixture
def he6_params(he6_config):
    return build_nuclear_parameters(he6_config, provider=FixedMatrixElements(m101=1.0, b_ac=5.0))


@pytest.fixture
def na22_params(na22_options):
    config = GeneratorConfig.from_dict(na22_options)
    return build_nuclear_parameters(config, provider=FixedMatrixElements(m101=1.0))

HE6_INI = """\
[General]
output = he6_run

[Transition]
Process = B-
Type = Gamow-Teller
QValue = 3505.21
PartialHalflife = 0.807

[Mother]
Z = 2
A = 6

[Daughter]
Z = 3
A = 6
Radius = 2.589

[Spectrum]
ModGaussFit = 0.333
StepSize = 100
Exchange = false   # no exchange data for this run
vold = 1.5, -0.5, 0
vnew = 1.6, -0.6, 0

[Constants]
gA = 1.2754
"""


@pytest.fixture
def he6_ini(tmp_path):
    path = tmp_path / "he6.ini"
    path.write_text(HE6_INI)
    return path
