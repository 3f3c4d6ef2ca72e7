"""Tidy tables, point intervals and charts from posterior draws.

Provides:
- Sample stores and reshaping (data)
- Point intervals, level comparisons and plotting (analysis)
- Reference-grid draws (models)
"""

from tidydraws.analysis import (
    DEFAULT_PROBS,
    DensityConfig,
    IntervalResult,
    compare_levels,
    gather_terms,
    hdi,
    mean_hdi,
    mean_qi,
    median_hdi,
    median_qi,
    mode,
    mode_hdi,
    mode_qi,
    plot_lineribbon,
    plot_pointinterval,
    point_interval,
    qi,
    stat_lineribbon,
    summarize_table,
    summarize_vector,
)
from tidydraws.data import (
    NUMERIC,
    ParameterSpec,
    SampleStore,
    compose_data,
    estimate_rows,
    gather_samples,
    load_store,
    parse_spec,
    recover_types,
    save_store,
    spread_samples,
    unspread_samples,
)
from tidydraws.errors import (
    EmptySampleSet,
    IndexCardinalityMismatch,
    InvalidProbability,
    MissingValuesWarning,
    TidyDrawsError,
    UnknownParameter,
    UnmatchedDraw,
)
from tidydraws.models import gather_grid_samples

__all__ = [
    "compare_levels",
    "compose_data",
    "DEFAULT_PROBS",
    "DensityConfig",
    "EmptySampleSet",
    "estimate_rows",
    "gather_grid_samples",
    "gather_samples",
    "gather_terms",
    "hdi",
    "IndexCardinalityMismatch",
    "IntervalResult",
    "InvalidProbability",
    "load_store",
    "mean_hdi",
    "mean_qi",
    "median_hdi",
    "median_qi",
    "MissingValuesWarning",
    "mode",
    "mode_hdi",
    "mode_qi",
    "NUMERIC",
    "ParameterSpec",
    "parse_spec",
    "plot_lineribbon",
    "plot_pointinterval",
    "point_interval",
    "qi",
    "recover_types",
    "SampleStore",
    "save_store",
    "spread_samples",
    "stat_lineribbon",
    "summarize_table",
    "summarize_vector",
    "TidyDrawsError",
    "UnknownParameter",
    "UnmatchedDraw",
    "unspread_samples",
]
