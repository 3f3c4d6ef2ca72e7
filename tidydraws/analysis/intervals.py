"""Credible intervals for a vector of samples.

Two interval types are supported:

- Quantile interval (``qi``): equal-tailed, from type 7 quantiles
  (linear interpolation between order statistics, as ``np.quantile``).
- Highest-density interval (``hdi``): the narrowest region holding the
  requested mass. A kernel density estimate is used to detect whether the
  region splits into several pieces; if it does, each piece is reported.
"""

import math
from collections.abc import Iterable
from typing import NamedTuple

import numpy as np

from tidydraws.analysis.density import DEFAULT_DENSITY, DensityConfig, density_grid, is_degenerate
from tidydraws.errors import EmptySampleSet, InvalidProbability


class IntervalResult(NamedTuple):
    """Sub-intervals as a (k, 2) array, ascending, plus an approximation flag."""

    intervals: np.ndarray
    approximate: bool


def check_probability(prob: float) -> float:
    """Validate a coverage probability."""
    if not 0 < prob < 1:
        raise InvalidProbability(f"Probability must lie in (0, 1), got {prob}")
    return float(prob)


def check_probabilities(probs: float | Iterable[float]) -> list[float]:
    """Validate, de-duplicate and sort coverage probabilities."""
    probs = [probs] if np.ndim(probs) == 0 else list(probs)
    if not probs:
        raise InvalidProbability("At least one probability is required")
    return sorted({check_probability(prob) for prob in probs})


def qi(x: Iterable[float], prob: float = 0.95) -> np.ndarray:
    """Equal-tailed quantile interval.

    Args:
        x: Samples
        prob: Coverage probability

    Returns:
        Array of shape (1, 2): [[lower, upper]]
    """
    prob = check_probability(prob)
    x = np.asarray(x, dtype=float)
    if len(x) == 0:
        raise EmptySampleSet("Cannot compute an interval from zero samples")
    tail = (1 - prob) / 2
    return np.quantile(x, [tail, 1 - tail]).reshape(1, 2)


def _narrowest_window(x_sorted: np.ndarray, prob: float) -> np.ndarray:
    """Narrowest window holding ceil(prob * n) sorted samples."""
    n = len(x_sorted)
    # round first so that e.g. 0.95 * 20 counts as 19, not 19.000000000000004
    k = min(n, max(1, math.ceil(round(prob * n, 9))))
    widths = x_sorted[k - 1 :] - x_sorted[: n - k + 1]
    start = int(np.argmin(widths))
    return np.array([[x_sorted[start], x_sorted[start + k - 1]]])


def _superlevel_components(
    grid: np.ndarray,
    density: np.ndarray,
    prob: float,
    config: DensityConfig,
) -> np.ndarray | None:
    """Connected pieces of the highest-density region, or None if bisection fails."""
    total = density.sum()
    peak = density.max()

    def mass(threshold: float) -> float:
        return density[density >= threshold].sum() / total

    # invariant: mass(lower) >= prob > mass(upper), unless the peak alone suffices
    lower, upper = 0.0, peak
    if mass(upper) >= prob:
        lower = upper
    else:
        for _ in range(config.max_bisection_steps):
            if upper - lower <= config.tolerance * peak:
                break
            middle = (lower + upper) / 2
            if mass(middle) >= prob:
                lower = middle
            else:
                upper = middle
        else:
            return None

    above = density >= lower
    steps = np.diff(above.astype(int))
    starts = np.flatnonzero(steps == 1) + 1
    ends = np.flatnonzero(steps == -1)
    if above[0]:
        starts = np.r_[0, starts]
    if above[-1]:
        ends = np.r_[ends, len(grid) - 1]
    return np.column_stack([grid[starts], grid[ends]])


def hdi(
    x: Iterable[float],
    prob: float = 0.95,
    density: DensityConfig | None = None,
    multimodal: bool = True,
) -> IntervalResult:
    """Highest-density interval, possibly made of several pieces.

    The narrowest window containing ``ceil(prob * n)`` sorted samples is the
    single-interval answer. When ``multimodal`` is set, a Gaussian KDE is
    thresholded at the level whose superlevel set holds ``prob`` of the
    density mass (found by bisection). If that set has more than one
    connected piece, the pieces are returned instead, clipped to the sample
    range. If the density cannot be estimated or bisection does not
    converge, the single window is returned flagged as approximate.

    Args:
        x: Samples
        prob: Coverage probability
        density: Kernel density settings (defaults to DensityConfig())
        multimodal: Allow several disjoint sub-intervals

    Returns:
        IntervalResult with a (k, 2) array of ascending sub-intervals
    """
    prob = check_probability(prob)
    config = density or DEFAULT_DENSITY
    x = np.asarray(x, dtype=float)
    if len(x) == 0:
        raise EmptySampleSet("Cannot compute an interval from zero samples")
    if np.isnan(x).any():
        return IntervalResult(np.array([[np.nan, np.nan]]), False)

    x_sorted = np.sort(x)
    window = _narrowest_window(x_sorted, prob)
    if not multimodal or is_degenerate(x_sorted):
        return IntervalResult(window, False)

    try:
        grid, values = density_grid(x_sorted, config)
    except (np.linalg.LinAlgError, ValueError):
        return IntervalResult(window, True)

    components = _superlevel_components(grid, values, prob, config)
    if components is None:
        return IntervalResult(window, True)
    if len(components) == 1:
        return IntervalResult(window, False)
    return IntervalResult(np.clip(components, x_sorted[0], x_sorted[-1]), False)
