"""Particle masses in GeV/c^2 used throughout the analysis."""

ELECTRON_MASS = 0.00051099891
PROTON_MASS = 0.938272
PROTON_MASS_SQUARE = PROTON_MASS * PROTON_MASS
NEUTRON_MASS = 0.93956536
NEUTRON_MASS_SQUARE = NEUTRON_MASS * NEUTRON_MASS
NUCLEON_MASS = (PROTON_MASS + NEUTRON_MASS) / 2
PION0_MASS = 0.1349768
DEUTERIUM_MASS = 1.87561294257
DEUTERIUM_MASS_SQUARE = DEUTERIUM_MASS * DEUTERIUM_MASS
PION_MASS = 0.1396
RHO0_MASS = 0.770
RHO0_MASS_SQUARE = RHO0_MASS * RHO0_MASS
KAON_MASS = 0.493677
KAON_MASS_SQUARE = KAON_MASS * KAON_MASS