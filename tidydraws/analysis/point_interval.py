"""Point estimates with credible intervals.

``summarize_vector`` works on a single vector of samples and
``summarize_table`` on columns of a DataFrame, grouped by an explicit
``by`` key. Both emit one row per probability level (more than one for a
multimodal highest-density interval). The ``mean_qi`` ... ``mode_hdi``
family fixes the point and interval choices.

Column naming for tables follows the convention downstream plotting code
matches on: a single summarized column ``x`` gives ``x``, ``conf.low`` and
``conf.high``; several columns give ``x``, ``x.low`` and ``x.high`` each.
"""

import warnings
from collections.abc import Callable, Iterable, Sequence

import numpy as np
import pandas as pd
from pandas.api.types import is_bool_dtype, is_numeric_dtype

from tidydraws.analysis.density import DEFAULT_DENSITY, DensityConfig, mode
from tidydraws.analysis.intervals import check_probabilities, hdi, qi
from tidydraws.errors import EmptySampleSet, MissingValuesWarning

DEFAULT_PROBS = (0.5, 0.8, 0.95)
POINTS = ("mean", "median", "mode")
INTERVALS = ("qi", "hdi")

PROB = ".prob"
APPROXIMATE = ".approximate"
LOWER = "conf.low"
UPPER = "conf.high"


def _check_choices(point: str, interval: str) -> None:
    if point not in POINTS:
        raise ValueError(f"point must be one of {POINTS}, got {point!r}")
    if interval not in INTERVALS:
        raise ValueError(f"interval must be one of {INTERVALS}, got {interval!r}")


def _point_estimate(x: np.ndarray, point: str, density: DensityConfig) -> float:
    if point == "mode":
        return mode(x, density)
    if point == "mean":
        return float(np.mean(x))
    return float(np.median(x))


def _intervals(
    x: np.ndarray,
    prob: float,
    interval: str,
    density: DensityConfig,
    multimodal: bool,
) -> tuple[np.ndarray, bool]:
    if interval == "qi":
        return qi(x, prob), False
    return hdi(x, prob, density=density, multimodal=multimodal)


def _drop_missing(x: np.ndarray, na_rm: bool | None, label: str) -> tuple[np.ndarray, int]:
    """Drop NaN values unless na_rm is False; return values and the count dropped."""
    if len(x) == 0:
        raise EmptySampleSet(f"No samples for {label}")
    if na_rm is False:
        return x, 0
    missing = np.isnan(x)
    x = x[~missing]
    if len(x) == 0:
        raise EmptySampleSet(f"No samples for {label} after removing missing values")
    return x, int(missing.sum())


def _warn_missing(dropped: dict[str, int], na_rm: bool | None) -> None:
    if na_rm is None and dropped:
        detail = ", ".join(f"{name} ({count})" for name, count in dropped.items())
        warnings.warn(
            f"Removed missing values before summarizing: {detail}. "
            "Pass na_rm=True to silence this or na_rm=False to keep them.",
            MissingValuesWarning,
            stacklevel=3,
        )


# --- vectors ---


def summarize_vector(
    x: Iterable[float],
    probs: float | Sequence[float] = DEFAULT_PROBS,
    point: str = "median",
    interval: str = "qi",
    na_rm: bool | None = None,
    density: DensityConfig | None = None,
    multimodal: bool = True,
) -> pd.DataFrame:
    """Summarize one vector of samples.

    Args:
        x: Samples
        probs: Coverage probabilities
        point: "mean", "median" or "mode"
        interval: "qi" (quantile) or "hdi" (highest density)
        na_rm: None drops missing values with a warning, True drops them
            quietly, False keeps them (results become NaN)
        density: Kernel density settings for "mode" and "hdi"
        multimodal: Let "hdi" return several disjoint sub-intervals

    Returns:
        DataFrame with columns y, ymin, ymax, .prob (and .approximate for hdi)
    """
    _check_choices(point, interval)
    probs = check_probabilities(probs)
    config = density or DEFAULT_DENSITY
    x, dropped = _drop_missing(np.asarray(x, dtype=float), na_rm, "vector")
    _warn_missing({"x": dropped} if dropped else {}, na_rm)

    estimate = _point_estimate(x, point, config)
    rows = []
    for prob in probs:
        bounds, approximate = _intervals(x, prob, interval, config, multimodal)
        for lower, upper in bounds:
            row = {"y": estimate, "ymin": lower, "ymax": upper, PROB: prob}
            if interval == "hdi":
                row[APPROXIMATE] = approximate
            rows.append(row)
    return pd.DataFrame(rows)


# --- tables ---


def _default_columns(df: pd.DataFrame, by: list[str]) -> list[str]:
    return [
        str(name)
        for name in df.columns
        if name not in by
        and not str(name).startswith(".")
        and is_numeric_dtype(df[name].dtype)
        and not is_bool_dtype(df[name].dtype)
    ]


def summarize_table(
    df: pd.DataFrame,
    columns: str | Sequence[str] | None = None,
    by: str | Sequence[str] | None = None,
    probs: float | Sequence[float] = DEFAULT_PROBS,
    point: str = "median",
    interval: str = "qi",
    na_rm: bool | None = None,
    density: DensityConfig | None = None,
    multimodal: bool = True,
) -> pd.DataFrame:
    """Summarize columns of a tidy table within explicit groups.

    Args:
        df: Tidy table of samples
        columns: Columns to summarize. Defaults to every numeric column not
            in ``by`` whose name does not start with "."
        by: Grouping columns; groups keep their order of first appearance
        probs: Coverage probabilities
        point: "mean", "median" or "mode"
        interval: "qi" or "hdi". With several columns each hdi is the
            single narrowest window.
        na_rm: None drops missing values with a warning, True drops them
            quietly, False keeps them
        density: Kernel density settings for "mode" and "hdi"
        multimodal: Let a single-column "hdi" return disjoint sub-intervals

    Returns:
        DataFrame ordered by group, then probability, then sub-interval

    Raises:
        EmptySampleSet: if the table, or a group after dropping missing
            values, has no samples
    """
    _check_choices(point, interval)
    probs = check_probabilities(probs)
    config = density or DEFAULT_DENSITY
    by = [by] if isinstance(by, str) else list(by or [])
    if columns is None:
        columns = _default_columns(df, by)
    else:
        columns = [columns] if isinstance(columns, str) else list(columns)
    missing = [name for name in [*by, *columns] if name not in df.columns]
    if missing:
        raise ValueError(f"Column(s) not found: {missing}")
    if not columns:
        raise ValueError("No numeric columns to summarize")
    if df.empty:
        raise EmptySampleSet("Cannot summarize a table with no rows")

    single = len(columns) == 1
    groups = df.groupby(by, sort=False, observed=True, dropna=False) if by else [((), df)]

    rows = []
    dropped: dict[str, int] = {}
    for key, group in groups:
        key = key if isinstance(key, tuple) else (key,)
        keys = dict(zip(by, key))
        label = f"group {keys}" if keys else "table"

        samples = {}
        estimates = {}
        for name in columns:
            values, count = _drop_missing(
                group[name].to_numpy(dtype=float), na_rm, f"{name!r} in {label}"
            )
            if count:
                dropped[name] = dropped.get(name, 0) + count
            samples[name] = values
            estimates[name] = _point_estimate(values, point, config)

        for prob in probs:
            if single:
                name = columns[0]
                bounds, approximate = _intervals(
                    samples[name], prob, interval, config, multimodal
                )
                for lower, upper in bounds:
                    row = {**keys, name: estimates[name], LOWER: lower, UPPER: upper, PROB: prob}
                    if interval == "hdi":
                        row[APPROXIMATE] = approximate
                    rows.append(row)
                continue

            row = dict(keys)
            flags = []
            for name in columns:
                bounds, approximate = _intervals(samples[name], prob, interval, config, False)
                row[name] = estimates[name]
                row[f"{name}.low"], row[f"{name}.high"] = bounds[0]
                flags.append(approximate)
            row[PROB] = prob
            if interval == "hdi":
                row[APPROXIMATE] = any(flags)
            rows.append(row)

    _warn_missing(dropped, na_rm)

    if single:
        names = [columns[0], LOWER, UPPER]
    else:
        names = [part for name in columns for part in (name, f"{name}.low", f"{name}.high")]
    result_columns = [*by, *names, PROB] + ([APPROXIMATE] if interval == "hdi" else [])
    result = pd.DataFrame(rows, columns=result_columns)
    for name in by:
        if isinstance(df[name].dtype, pd.CategoricalDtype):
            result[name] = pd.Categorical(
                result[name],
                categories=df[name].cat.categories,
                ordered=df[name].cat.ordered,
            )
    return result


def point_interval(
    df: pd.DataFrame,
    *columns: str,
    by: str | Sequence[str] | None = None,
    probs: float | Sequence[float] = DEFAULT_PROBS,
    point: str = "median",
    interval: str = "qi",
    na_rm: bool | None = None,
    density: DensityConfig | None = None,
) -> pd.DataFrame:
    """Summarize table columns; see ``summarize_table``."""
    return summarize_table(
        df,
        list(columns) or None,
        by=by,
        probs=probs,
        point=point,
        interval=interval,
        na_rm=na_rm,
        density=density,
    )


def _family(point: str, interval: str) -> Callable[..., pd.DataFrame]:
    def summarize(
        df: pd.DataFrame,
        *columns: str,
        by: str | Sequence[str] | None = None,
        probs: float | Sequence[float] = DEFAULT_PROBS,
        na_rm: bool | None = None,
        density: DensityConfig | None = None,
    ) -> pd.DataFrame:
        return point_interval(
            df,
            *columns,
            by=by,
            probs=probs,
            point=point,
            interval=interval,
            na_rm=na_rm,
            density=density,
        )

    summarize.__name__ = summarize.__qualname__ = f"{point}_{interval}"
    summarize.__doc__ = f"Summarize table columns with the {point} and a {interval} interval."
    return summarize


mean_qi = _family("mean", "qi")
median_qi = _family("median", "qi")
mode_qi = _family("mode", "qi")
mean_hdi = _family("mean", "hdi")
median_hdi = _family("median", "hdi")
mode_hdi = _family("mode", "hdi")
