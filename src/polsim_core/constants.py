# --- src/polsim_core/constants.py ---
"""
Empirically fitted constants of the polarization and dose model.

These values belong together: they were fitted to SANE running conditions at 5 T
and 1 K and are not interchangeable with the constants of other model variants.
Operational settings (time step, pacing delay, nominal dose rate, ...) live in
`polsim_core.config` instead.
"""
import logging

logger = logging.getLogger(__name__)

# --- Frequency regimes ---

#: Microwave frequency (GHz) separating negative (above) from positive (below) polarization.
CROSSOVER_FREQUENCY_GHZ: float = 140.3

#: Field (T) at which the optimal-frequency curves were fitted.
REFERENCE_FIELD_T: float = 5.0

#: Optimal frequency for positive polarization: (A + C*exp(-k*dose)) * 5 T / field.
#: Drifts from 140.145 GHz down toward 140.1 GHz as dose accumulates.
POSITIVE_CURVE_A: float = 140.1
POSITIVE_CURVE_C: float = 0.045
POSITIVE_CURVE_K: float = 0.38

#: Optimal frequency for negative polarization: (A - C*exp(-k*dose)) * 5 T / field.
#: Rises quickly from 140.47 GHz toward 140.535 GHz, then levels off.
NEGATIVE_CURVE_A: float = 140.535
NEGATIVE_CURVE_C: float = 0.065
NEGATIVE_CURVE_K: float = 3.8

# --- Rate model ---

#: Maximum rate constant (1/s); full polarization in roughly 20 minutes.
K_MAX: float = 0.0025

#: Width (GHz) of the window around the ideal frequency. Growth mode applies
#: within GROWTH_WINDOW_FRACTION of it.
FREQUENCY_TOLERANCE_GHZ: float = 0.05
GROWTH_WINDOW_FRACTION: float = 0.5

#: Lorentzian response curves: 1 / (1 + WIDTH * d^2) - OFFSET.
LORENTZIAN_WIDTH: float = 30000.0
LORENTZIAN_OFFSET: float = 0.05
#: Peak position (GHz) of the receding-branch curve.
DECREASING_PEAK_GHZ: float = 0.025

#: Steady-state target penalty for a detuned frequency:
#: target = steady_state - PENALTY * (PEAK_RESPONSE - |response|) / PEAK_RESPONSE
TARGET_PENALTY: float = 0.05
PEAK_RESPONSE: float = 0.95

# --- Dose model (dose in 10^15 electrons / cm^2) ---

#: Dose since the last anneal above which each critical dose applies.
CRITICAL_DOSE_THRESHOLDS = (0.0, 0.3, 1.2)
#: Critical doses for steady_state *= exp(-dose / critical_dose).
CRITICAL_DOSES = (1.0, 4.1, 30.0)

#: Temperature dependence of the steady state: 95% at 1 K, 72% at 1.62 K.
TEMPERATURE_COEFFICIENT: float = 0.4471
REFERENCE_TEMPERATURE_K: float = 1.0
MAX_POLARIZATION: float = 1.0

# --- Beam trips ---

#: Steady-state boost while the beam is off during a trip (capped at the ceiling).
TRIP_STEADY_STATE_BOOST: float = 1.2
#: Growth-rate multiplier while the beam is off during a trip.
TRIP_RATE_BOOST: float = 10.0

# --- Thermal fluctuations ---

#: Fluctuation draws are integers in parts per million of the polarization.
FLUCTUATION_SCALE: float = 1.0e6
