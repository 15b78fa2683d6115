"""Gravity field files shipped with the package."""
