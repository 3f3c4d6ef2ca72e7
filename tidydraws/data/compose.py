"""Compose data frames into a dict ready for model code."""

from typing import Any

import numpy as np
import pandas as pd

from tidydraws.data.recovery import column_levels
from tidydraws.data.store import NUMERIC

N_NAME = "n"


def _encode(values: pd.Series) -> tuple[np.ndarray, int | None]:
    """Encode a column, returning 1-based codes and level count for factors."""
    levels = column_levels(values)
    if isinstance(levels, str) and levels == NUMERIC:
        return values.to_numpy(), None
    codes = pd.Categorical(values, categories=levels).codes
    if (codes < 0).any():
        raise ValueError(f"Column {values.name!r} has missing values; cannot encode as levels")
    return codes.astype(int) + 1, len(levels)


def compose_data(*frames: pd.DataFrame | dict[str, Any], **extra: Any) -> dict[str, Any]:
    """Combine data into a dict of arrays with derived counts.

    Numeric columns pass through as numpy arrays. Categorical and string
    columns become 1-based integer codes (in the same level order that
    ``recover_types`` records) and gain an ``n_<column>`` level count.
    ``n`` holds the number of rows.

    Args:
        *frames: DataFrames (all with the same number of rows) or dicts of
            extra values
        **extra: Additional values, added last

    Returns:
        Dict of variable name -> scalar or array

    Example:
        >>> compose_data(pd.DataFrame({"group": ["a", "b", "a"], "y": [1.0, 2.0, 3.0]}))
        {'group': array([1, 2, 1]), 'n_group': 2, 'y': array([1., 2., 3.]), 'n': 3}

    """
    result: dict[str, Any] = {}
    n_rows = None
    for frame in frames:
        if not isinstance(frame, pd.DataFrame):
            result.update(frame)
            continue
        if n_rows is not None and len(frame) != n_rows:
            raise ValueError(f"Data frames have different lengths: {n_rows} and {len(frame)}")
        n_rows = len(frame)
        for name in frame.columns:
            values, n_levels = _encode(frame[name])
            result[str(name)] = values
            if n_levels is not None:
                result[f"{N_NAME}_{name}"] = n_levels

    if n_rows is not None:
        result[N_NAME] = n_rows
    result.update(extra)
    return result
