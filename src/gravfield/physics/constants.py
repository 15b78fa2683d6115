"""Global math & physics constants.

This module holds all constants that are used in various places across the
codebase, allowing for a consistent place to store them. Constants specific
to objects and classes remain in those files.

References:
    #. :cite:t:`montenbruck_2012_orbits`
"""

from __future__ import annotations

# Time constants
DAYS2SEC = 24.0 * 3600
JULIAN_YEAR_DAYS = 365.25
JULIAN_YEAR = JULIAN_YEAR_DAYS * DAYS2SEC  # Julian year, (sec)

# Reference epochs of gravity fields are given at noon of their reference day
REFERENCE_HOUR = 12

# Smallest distance to the polar axis the zonal/tesseral recursion accepts, (m)
POLAR_FLOOR = 0.1
