"""
Physical Constants

Values used throughout the spectrum calculation. Energies are in keV unless
the name says otherwise; lengths in metres.

References:
    CODATA 2018 recommended values
"""

from __future__ import annotations

# Fine structure constant
ALPHA = 7.2973525693e-3

# Rest masses (keV)
ELECTRON_MASS_KEV = 510.99895000
PROTON_MASS_KEV = 938272.08816
NEUTRON_MASS_KEV = 939565.42052
NUCLEON_MASS_KEV = (PROTON_MASS_KEV + NEUTRON_MASS_KEV) / 2.

# Reduced Compton wavelength of the electron, hbar/(m_e c), in metres.
# Nuclear radii are expressed in this unit inside the corrections.
NATURAL_LENGTH = 3.8615926796e-13

# Reference nucleon couplings used to scale the Born-graph radiative term
NUCLEON_G_A = 1.2754
NUCLEON_G_M = 4.706
NUCLEON_C_BORN = 0.881

# Element symbols indexed by Z - 1
ATOMS = [
    "H", "He", "Li", "Be", "B", "C", "N", "O", "F", "Ne",
    "Na", "Mg", "Al", "Si", "P", "S", "Cl", "Ar", "K", "Ca",
    "Sc", "Ti", "V", "Cr", "Mn", "Fe", "Co", "Ni", "Cu", "Zn",
    "Ga", "Ge", "As", "Se", "Br", "Kr", "Rb", "Sr", "Y", "Zr",
    "Nb", "Mo", "Tc", "Ru", "Rh", "Pd", "Ag", "Cd", "In", "Sn",
    "Sb", "Te", "I", "Xe", "Cs", "Ba", "La", "Ce", "Pr", "Nd",
    "Pm", "Sm", "Eu", "Gd", "Tb", "Dy", "Ho", "Er", "Tm", "Yb",
    "Lu", "Hf", "Ta", "W", "Re", "Os", "Ir", "Pt", "Au", "Hg",
    "Tl", "Pb", "Bi", "Po", "At", "Rn", "Fr", "Ra", "Ac", "Th",
    "Pa", "U", "Np", "Pu", "Am", "Cm", "Bk", "Cf", "Es", "Fm",
    "Md", "No", "Lr", "Rf", "Db", "Sg", "Bh", "Hs", "Mt", "Ds",
    "Rg", "Cn", "Nh", "Fl", "Mc", "Lv", "Ts", "Og",
]


def element_symbol(z: int) -> str:
    """Return the element symbol for proton number ``z`` ("n" for z = 0)."""
    if z == 0:
        return "n"
    if 1 <= z <= len(ATOMS):
        return ATOMS[z - 1]
    return f"Z{z}"


def kev_to_w(energy_keV):
    """Kinetic energy in keV to total energy in electron masses."""
    return energy_keV / ELECTRON_MASS_KEV + 1.


def w_to_kev(w):
    """Total energy in electron masses to kinetic energy in keV."""
    return (w - 1.) * ELECTRON_MASS_KEV
