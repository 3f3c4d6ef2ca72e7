"""Draws evaluated over a reference grid.

Marginal-means tools produce a grid of covariate combinations and a matrix
of posterior draws of the model prediction at each grid row. This module
turns that pair into the same long shape as ``gather_samples``.
"""

import numpy as np
import pandas as pd


def gather_grid_samples(
    grid: pd.DataFrame,
    draws: np.ndarray,
    value_name: str = "estimate",
) -> pd.DataFrame:
    """Combine a reference grid with draws of the prediction at each row.

    Args:
        grid: Reference grid, one row per covariate combination
        draws: Array shaped (n_draws, n_rows), treated as a single chain,
            or (n_chains, n_iterations, n_rows)
        value_name: Name of the value column

    Returns:
        DataFrame with the grid columns, ``.chain``, ``.iteration`` and
        ``value_name``; grid rows vary fastest within each draw
    """
    draws = np.asarray(draws, dtype=float)
    if draws.ndim == 2:
        draws = draws[np.newaxis]
    if draws.ndim != 3:
        raise ValueError(f"draws must be 2- or 3-dimensional, got shape {draws.shape}")
    n_chains, n_iterations, n_rows = draws.shape
    if n_rows != len(grid):
        raise ValueError(f"draws have {n_rows} columns but the grid has {len(grid)} rows")
    clashes = {".chain", ".iteration", value_name} & {str(name) for name in grid.columns}
    if clashes:
        raise ValueError(f"Grid already has column(s) {sorted(clashes)}")

    n_draws = n_chains * n_iterations
    result = grid.iloc[np.tile(np.arange(n_rows), n_draws)].reset_index(drop=True)
    result[".chain"] = np.repeat(np.arange(1, n_chains + 1), n_iterations * n_rows)
    result[".iteration"] = np.tile(np.repeat(np.arange(1, n_iterations + 1), n_rows), n_chains)
    result[value_name] = draws.reshape(-1)
    return result
