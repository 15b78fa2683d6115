"""Defines the :class:`.Earth` class."""

from __future__ import annotations


class Earth:
    """Defines the Earth constants shared by the gravity field dialects that do not carry them.

    Attributes:
        mu (``float``): EGM96 gravitational parameter, (m^3/sec^2).
        radius (``float``): EGM96 reference equatorial radius, (m).

    References:
        #. :cite:t:`lemoine_1998_egm96`
        #. :cite:t:`montenbruck_2012_orbits`
    """

    mu = 3.986004415e14
    radius = 6378136.3
