"""Gravity field coefficients: storage, normalization, providers, readers and their registry."""

from __future__ import annotations
