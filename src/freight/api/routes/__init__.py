"""Route group exports."""

from . import bands, freight, health

__all__ = ["bands", "freight", "health"]
