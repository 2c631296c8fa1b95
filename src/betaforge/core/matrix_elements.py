"""
Nuclear matrix element providers

The spectrum engine only needs a handful of scalars from nuclear structure:
the reduced matrix elements ^A M_101 and ^A M_121, the weak magnetism and
induced tensor ratios b/Ac and d/Ac, and, in "connect" mode, the
single-particle states of the decaying and the final nucleon.

Providers implement :class:`MatrixElementProvider`. Two concrete providers
are included:

- ``FixedMatrixElements``: scalars given explicitly (e.g. from an external
  shell model calculation)
- ``SingleParticleMatrixElements``: extreme single-particle estimate using
  the spherical shell model with spin-orbit level ordering

References:
    H. Behrens, W. Buhring, Electron Radial Wave Functions and Nuclear
    Beta-decay (Clarendon, Oxford, 1982)
    B.R. Holstein, Rev. Mod. Phys. 46 (1974) 789
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Tuple

from betaforge.core.charge_distributions import ho_state_moments


@dataclass(frozen=True)
class SingleParticleState:
    """
    Spherical single-particle orbital.

    Attributes
    ----------
    n : int
        Number of radial nodes (0 for the lowest orbital of a given l)
    l : int
        Orbital angular momentum
    two_j : int
        Twice the total angular momentum
    """
    n: int
    l: int
    two_j: int

    @property
    def j(self) -> float:
        return self.two_j / 2.

    @property
    def label(self) -> str:
        letters = "spdfghijk"
        return f"{self.n + 1}{letters[self.l]}{self.two_j}/2"

    def moments(self) -> Tuple[float, float]:
        """<r^2>, <r^4> in units of the oscillator length."""
        return ho_state_moments(self.n, self.l)


# Spin-orbit (Mayer-Jensen) level ordering
SHELL_ORDER: List[SingleParticleState] = [
    SingleParticleState(0, 0, 1),
    SingleParticleState(0, 1, 3),
    SingleParticleState(0, 1, 1),
    SingleParticleState(0, 2, 5),
    SingleParticleState(1, 0, 1),
    SingleParticleState(0, 2, 3),
    SingleParticleState(0, 3, 7),
    SingleParticleState(1, 1, 3),
    SingleParticleState(0, 3, 5),
    SingleParticleState(1, 1, 1),
    SingleParticleState(0, 4, 9),
    SingleParticleState(0, 4, 7),
    SingleParticleState(1, 2, 5),
    SingleParticleState(1, 2, 3),
    SingleParticleState(2, 0, 1),
    SingleParticleState(0, 5, 11),
    SingleParticleState(0, 5, 9),
    SingleParticleState(1, 3, 7),
    SingleParticleState(1, 3, 5),
    SingleParticleState(2, 1, 3),
    SingleParticleState(2, 1, 1),
    SingleParticleState(0, 6, 13),
    SingleParticleState(1, 4, 9),
    SingleParticleState(2, 2, 5),
    SingleParticleState(0, 6, 11),
    SingleParticleState(1, 4, 7),
    SingleParticleState(3, 0, 1),
    SingleParticleState(2, 2, 3),
    SingleParticleState(0, 7, 15),
]


def last_occupied_state(particles: int) -> SingleParticleState:
    """Orbital holding the last of ``particles`` identical nucleons."""
    if particles < 1:
        raise ValueError(f"Need at least one nucleon, got {particles}")
    filled = 0
    for state in SHELL_ORDER:
        filled += state.two_j + 1
        if filled >= particles:
            return state
    raise ValueError(f"Shell ordering only tabulated up to {filled} nucleons")


def gamow_teller_single_particle(initial: SingleParticleState,
                                 final: SingleParticleState) -> float:
    """
    Reduced spin matrix element <f||sigma||i> / sqrt(2 j_i + 1).

    Zero unless both orbitals share n and l.
    """
    if initial.l != final.l or initial.n != final.n:
        return 0.
    l = initial.l
    j = initial.j
    stretched = initial.two_j == 2 * l + 1
    if initial.two_j == final.two_j:
        if stretched:
            reduced = math.sqrt((2 * j + 1) * (j + 1) / j)
        else:
            reduced = -math.sqrt((2 * j + 1) * j / (j + 1))
    else:
        reduced = math.sqrt(8. * l * (l + 1) / (2 * l + 1))
    return reduced / math.sqrt(2 * j + 1)


class MatrixElementProvider(ABC):
    """Abstract source of nuclear matrix elements."""

    @abstractmethod
    def reduced_matrix_element(self, k: int, l: int, s: int, vector: bool = False) -> float:
        """Reduced matrix element ^{V/A}M_{KLs}."""
        pass

    @abstractmethod
    def weak_magnetism(self) -> float:
        """Weak magnetism ratio b/Ac."""
        pass

    @abstractmethod
    def induced_tensor(self) -> float:
        """Induced tensor ratio d/Ac."""
        pass

    def single_particle_states(self) -> Optional[Tuple[SingleParticleState, SingleParticleState]]:
        """Initial and final single-particle states, if the provider knows them."""
        return None


class FixedMatrixElements(MatrixElementProvider):
    """
    Provider returning fixed values.

    Parameters
    ----------
    m101, m121 : float
        Axial reduced matrix elements ^A M_101 and ^A M_121
    b_ac, d_ac : float
        Weak magnetism and induced tensor ratios
    states : tuple, optional
        (initial, final) single-particle states for connect mode
    """

    def __init__(
        self,
        m101: float = 1.,
        m121: float = 0.,
        b_ac: float = 0.,
        d_ac: float = 0.,
        states: Optional[Tuple[SingleParticleState, SingleParticleState]] = None,
    ):
        self.m101 = m101
        self.m121 = m121
        self.b_ac = b_ac
        self.d_ac = d_ac
        self.states = states

    def reduced_matrix_element(self, k: int, l: int, s: int, vector: bool = False) -> float:
        if vector or (k, s) != (1, 1):
            return 0.
        if l == 0:
            return self.m101
        if l == 2:
            return self.m121
        return 0.

    def weak_magnetism(self) -> float:
        return self.b_ac

    def induced_tensor(self) -> float:
        return self.d_ac

    def single_particle_states(self):
        return self.states


class SingleParticleMatrixElements(MatrixElementProvider):
    """
    Extreme single-particle estimate.

    The decaying nucleon sits in the last occupied orbital of the mother and
    ends in the lowest free orbital of the daughter, both taken from the
    spin-orbit level ordering. Only the L = 0 Gamow-Teller element is
    evaluated; b/Ac is the spin-only value gM/gA and d/Ac vanishes.

    Parameters
    ----------
    z, a : int
        Daughter proton and mass number
    beta_type : int
        +1 for electron emission, -1 for positron emission
    g_a, g_m : float
        Axial and weak magnetism couplings
    """

    def __init__(self, z: int, a: int, beta_type: int, g_a: float = 1.27, g_m: float = 4.706):
        self.z = z
        self.a = a
        self.beta_type = beta_type
        self.g_a = g_a
        self.g_m = g_m
        mother_z = z - beta_type
        if beta_type > 0:
            # neutron -> proton
            self.initial = last_occupied_state(a - mother_z)
            self.final = last_occupied_state(z)
        else:
            self.initial = last_occupied_state(mother_z)
            self.final = last_occupied_state(a - z)

    def reduced_matrix_element(self, k: int, l: int, s: int, vector: bool = False) -> float:
        if vector or (k, l, s) != (1, 0, 1):
            return 0.
        return gamow_teller_single_particle(self.initial, self.final)

    def weak_magnetism(self) -> float:
        return self.g_m / self.g_a

    def induced_tensor(self) -> float:
        return 0.

    def single_particle_states(self):
        return self.initial, self.final
