"""Spherical-harmonic gravity field package.

The top-level package exposes the pieces needed by a numerical propagator to add the
non-spherical attraction of a central body: gravity field readers, the coefficient providers
they build, and the acceleration models evaluating them.
"""

from __future__ import annotations

__version__ = "1.0.0"
