"""Line-ribbon and point-interval charts from summary tables.

Drawing uses matplotlib directly; pass ``finalise=True`` to hand the axes
to ``mgplot.finalise_plot`` for titles, footers and saving.
All plotting functions return Axes objects for composition.
"""

from collections.abc import Sequence
from typing import Any

import matplotlib.patheffects as pe
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib.axes import Axes

from tidydraws.analysis.point_interval import (
    DEFAULT_PROBS,
    LOWER,
    PROB,
    UPPER,
    summarize_table,
)


def _bound_columns(table: pd.DataFrame, y: str) -> tuple[str, str]:
    """Find the lower/upper bound columns for ``y``."""
    if f"{y}.low" in table.columns and f"{y}.high" in table.columns:
        return f"{y}.low", f"{y}.high"
    if LOWER in table.columns and UPPER in table.columns:
        return LOWER, UPPER
    raise ValueError(f"No interval columns for {y!r}: expected {LOWER}/{UPPER} or {y}.low/{y}.high")


def _check_table(table: pd.DataFrame, columns: Sequence[str]) -> None:
    missing = [name for name in [*columns, PROB] if name not in table.columns]
    if missing:
        raise ValueError(f"Column(s) not found: {missing}")


def _shades(palette: str, n: int, light: float = 0.3, dark: float = 0.7) -> list[Any]:
    """Colours from light (widest interval) to dark (narrowest)."""
    cmap = plt.get_cmap(palette)
    return [cmap(fraction) for fraction in np.linspace(light, dark, n)]


def _finalise(ax: Axes, finalise: bool, finalise_kwargs: dict[str, Any]) -> Axes | None:
    if not finalise:
        return ax
    import mgplot as mg

    finalise_kwargs.setdefault("axisbelow", True)
    mg.finalise_plot(ax, **finalise_kwargs)
    return None


def plot_lineribbon(
    table: pd.DataFrame,
    x: str,
    y: str,
    ax: Axes | None = None,
    color: str = "blue",
    palette: str = "Blues",
    legend_stem: str = "",
    finalise: bool = False,
    **finalise_kwargs: Any,
) -> Axes | None:
    """Plot a point-estimate line with one ribbon per probability level.

    Args:
        table: Summary table with ``x``, ``y``, bounds and ``.prob``
        x: Column for the horizontal axis
        y: Point-estimate column; bounds are ``conf.low``/``conf.high``
            or ``<y>.low``/``<y>.high``
        ax: Matplotlib axes (created if None)
        color: Colour of the point-estimate line
        palette: Matplotlib colormap for the ribbons
        legend_stem: Prefix for legend labels
        finalise: If True, call mgplot's finalise_plot and return None.
            If False, return Axes for composition.
        **finalise_kwargs: Passed to mg.finalise_plot (title, lfooter, etc.)

    Returns:
        Axes if finalise=False, None if finalise=True.

    """
    _check_table(table, [x, y])
    lower, upper = _bound_columns(table, y)
    probs = sorted(table[PROB].unique(), reverse=True)
    if table.duplicated([x, PROB]).any():
        raise ValueError(
            "Ribbons need one interval per x and probability; "
            "summarize with interval='qi' or multimodal=False"
        )

    if ax is None:
        _, ax = plt.subplots()

    for prob, shade in zip(probs, _shades(palette, len(probs))):
        band = table[table[PROB] == prob].sort_values(x)
        ax.fill_between(
            band[x],
            band[lower],
            band[upper],
            color=shade,
            label=f"{legend_stem}{prob:.0%} interval".strip(),
            zorder=3,
        )

    line = table[table[PROB] == probs[-1]].sort_values(x)
    ax.plot(line[x], line[y], color=color, linewidth=1.5, label=f"{legend_stem}{y}".strip(), zorder=4)
    ax.set_xlabel(x)
    ax.set_ylabel(y)

    return _finalise(ax, finalise, finalise_kwargs)


def stat_lineribbon(
    draws: pd.DataFrame,
    x: str,
    y: str,
    probs: Sequence[float] = DEFAULT_PROBS,
    point: str = "median",
    interval: str = "qi",
    na_rm: bool | None = None,
    **kwargs: Any,
) -> Axes | None:
    """Summarize draws of ``y`` at each ``x`` and plot them as a line ribbon.

    Args:
        draws: Tidy table of samples with columns ``x`` and ``y``
        x: Column for the horizontal axis (the grouping key)
        y: Column of samples
        probs: Coverage probabilities, one ribbon each
        point: "mean", "median" or "mode"
        interval: "qi" or "hdi" (single window per x)
        na_rm: Missing-value handling, as in summarize_table
        **kwargs: Passed to plot_lineribbon

    Returns:
        Axes if not finalised, else None
    """
    summary = summarize_table(
        draws,
        [y],
        by=[x],
        probs=probs,
        point=point,
        interval=interval,
        na_rm=na_rm,
        multimodal=False,
    )
    return plot_lineribbon(summary, x, y, **kwargs)


def plot_pointinterval(
    table: pd.DataFrame,
    y: str,
    label: str,
    ax: Axes | None = None,
    palette: str = "Blues",
    reference: float | None = 0.0,
    finalise: bool = False,
    **finalise_kwargs: Any,
) -> Axes | None:
    """Plot horizontal interval bars with the point estimate marked.

    One row of bars per value of ``label``; wider intervals are drawn
    taller and lighter. Multimodal intervals appear as several bars.

    Args:
        table: Summary table with ``label``, ``y``, bounds and ``.prob``
        y: Point-estimate column
        label: Column naming each row (e.g. a parameter or group)
        ax: Matplotlib axes (created if None)
        palette: Matplotlib colormap for the bars
        reference: Draw a vertical reference line here (None for no line)
        finalise: If True, call mgplot's finalise_plot and return None

    Returns:
        Axes if finalise=False, None if finalise=True.

    """
    _check_table(table, [y, label])
    lower, upper = _bound_columns(table, y)
    if isinstance(table[label].dtype, pd.CategoricalDtype):
        labels = [name for name in table[label].cat.categories if (table[label] == name).any()]
    else:
        labels = list(dict.fromkeys(table[label]))
    probs = sorted(table[PROB].unique(), reverse=True)
    shades = _shades(palette, len(probs), light=0.4)

    if ax is None:
        _, ax = plt.subplots(figsize=(9.0, len(labels) * 0.25 + 1.0))

    bar_height = 0.7
    for i, name in enumerate(labels):
        rows = table[table[label] == name]
        for j, (prob, shade) in enumerate(zip(probs, shades)):
            height = bar_height * (1 - 0.5 * j / len(probs))
            for _, row in rows[rows[PROB] == prob].iterrows():
                ax.barh(
                    i,
                    width=row[upper] - row[lower],
                    left=row[lower],
                    height=height,
                    color=shade,
                    alpha=0.7,
                    label=f"{prob:.0%} interval" if i == 0 else "_",
                    zorder=j + 1,
                )

        estimate = rows[y].iloc[0]
        ax.vlines(
            estimate,
            i - bar_height / 2,
            i + bar_height / 2,
            color="black",
            linewidth=1,
            zorder=10,
            label=y if i == 0 else "_",
        )
        ax.text(
            estimate,
            i,
            f"{estimate:.3f}",
            ha="center",
            va="center",
            fontsize=8,
            color="black",
            zorder=20,
            path_effects=[pe.withStroke(linewidth=2, foreground="white")],
        )

    if reference is not None:
        ax.axvline(x=reference, color="darkred", linestyle="-", linewidth=1.5, zorder=15)
    ax.set_yticks(list(range(len(labels))))
    ax.set_yticklabels([str(name) for name in labels])
    ax.invert_yaxis()

    return _finalise(ax, finalise, finalise_kwargs)
