"""Contains classes defining central bodies and their gravitational potential."""

from __future__ import annotations

# Local Imports
from .earth import Earth

__all__ = ["Earth"]
