"""Adapters for draws produced outside a sample store."""

from tidydraws.models.grid import gather_grid_samples

__all__ = [
    "gather_grid_samples",
]
