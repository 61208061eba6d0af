"""Named physical constants and default run values.

Energies are in GeV, black-hole masses in grams, times in seconds.
"""

# ---------------------------------------------------------------------------
# Unit conversions
# ---------------------------------------------------------------------------
HBAR_GEV_S = 6.582119569e-25     # reduced Planck constant (GeV s)

# Schwarzschild temperature T = T_SCHWARZSCHILD_GEV_G / M[g]  (GeV)
T_SCHWARZSCHILD_GEV_G = 1.0573e13

# Largest E/T for which the thermal factor is evaluated; beyond it the
# occupation number underflows to zero.
MAX_BOLTZMANN_EXPONENT = 700.0

# ---------------------------------------------------------------------------
# Greybody fit limits
# ---------------------------------------------------------------------------
GEOMETRIC_OPTICS_LIMIT = 27.0    # high-x asymptote Gamma -> 27 x^2
SPIN_MAX = 0.9999                # largest Kerr parameter accepted

# ---------------------------------------------------------------------------
# Default grids and regimes
# ---------------------------------------------------------------------------
E_MIN_DEFAULT = 1.0e-6
E_MAX_DEFAULT = 1.0e6
E_NUMBER_DEFAULT = 200
OUT_E_MIN_DEFAULT = 1.0e-6
OUT_E_MAX_DEFAULT = 1.0e6
OUT_E_NUMBER_DEFAULT = 200

# Low-energy hadronization tables below 5 GeV, shower tables up to 100 TeV,
# dark-matter-style electroweak cascades above.
REGIMES_DEFAULT = ("low", "mid", "high")
REGIME_THRESHOLDS_DEFAULT = (5.0, 1.0e5)

INTEGRATION_STEPS_DEFAULT = 200
MASS_DEFAULT = 1.0e15            # grams
