"""Force contributions built on top of the gravity field providers."""

from __future__ import annotations
