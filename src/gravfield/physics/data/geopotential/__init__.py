"""Gravity field files shipped with the package, in any supported dialect."""
