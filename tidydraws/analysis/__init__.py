"""Summaries, comparisons and charts for tidy tables of draws.

Includes:
- Intervals: quantile and highest-density intervals
- Point intervals: point estimates with intervals, per group
- Terms: melting value columns into term/estimate pairs
- Comparisons: draw-by-draw differences between factor levels
- Plotting: line ribbons and point intervals
"""

from tidydraws.analysis.density import DensityConfig, mode
from tidydraws.analysis.intervals import IntervalResult, hdi, qi
from tidydraws.analysis.point_interval import (
    DEFAULT_PROBS,
    mean_hdi,
    mean_qi,
    median_hdi,
    median_qi,
    mode_hdi,
    mode_qi,
    point_interval,
    summarize_table,
    summarize_vector,
)
from tidydraws.analysis.terms import gather_terms
from tidydraws.analysis.compare import compare_levels
from tidydraws.analysis.plotting import plot_lineribbon, plot_pointinterval, stat_lineribbon

__all__ = [
    "compare_levels",
    "DEFAULT_PROBS",
    "DensityConfig",
    "gather_terms",
    "hdi",
    "IntervalResult",
    "mean_hdi",
    "mean_qi",
    "median_hdi",
    "median_qi",
    "mode",
    "mode_hdi",
    "mode_qi",
    "plot_lineribbon",
    "plot_pointinterval",
    "point_interval",
    "qi",
    "stat_lineribbon",
    "summarize_table",
    "summarize_vector",
]
