"""Draw-by-draw comparisons between levels of a factor."""

import operator
from collections.abc import Callable, Sequence
from itertools import combinations
from typing import Any

import pandas as pd

from tidydraws.errors import UnmatchedDraw

COMPARISONS = ("pairwise", "ordered", "control")


def factor_levels(values: pd.Series) -> list[Any]:
    """Categories present in a categorical column, otherwise its sorted unique values."""
    if isinstance(values.dtype, pd.CategoricalDtype):
        present = set(values.dropna().unique())
        return [level for level in values.cat.categories if level in present]
    return sorted(values.dropna().unique())


def level_pairs(
    levels: Sequence[Any],
    comparison: str | Sequence[tuple[Any, Any]] = "pairwise",
) -> list[tuple[Any, Any]]:
    """Expand a comparison type into (left, right) level pairs.

    - "pairwise": every unordered pair in level order, e.g. (A, B), (A, C), (B, C)
    - "ordered": each level against the previous one, e.g. (B, A), (C, B)
    - "control": each later level against the first, e.g. (B, A), (C, A)
    - a list of (left, right) pairs is used as given
    """
    levels = list(levels)
    if isinstance(comparison, str):
        if comparison == "pairwise":
            return list(combinations(levels, 2))
        if comparison == "ordered":
            return list(zip(levels[1:], levels[:-1]))
        if comparison == "control":
            return [(level, levels[0]) for level in levels[1:]]
        raise ValueError(f"comparison must be one of {COMPARISONS} or a list of pairs")

    pairs = [tuple(pair) for pair in comparison]
    unknown = sorted({str(level) for pair in pairs for level in pair if level not in levels})
    if any(len(pair) != 2 for pair in pairs):
        raise ValueError("Each comparison must be a (left, right) pair")
    if unknown:
        raise ValueError(f"Unknown level(s) {unknown}; levels are {levels}")
    return pairs


def _check_counts(left: pd.DataFrame, right: pd.DataFrame, group_by: list[str], pair: str) -> None:
    """Both levels must contribute the same number of draws to every group."""
    if group_by:
        left_counts = left.groupby(group_by, observed=True).size()
        right_counts = right.groupby(group_by, observed=True).size()
        left_counts, right_counts = left_counts.align(right_counts, fill_value=0)
        matched = bool((left_counts == right_counts).all())
    else:
        matched = len(left) == len(right)
    if not matched:
        raise UnmatchedDraw(f"Levels in {pair!r} have different numbers of draws per group")


def compare_levels(
    df: pd.DataFrame,
    variable: str,
    by: str,
    comparison: str | Sequence[tuple[Any, Any]] = "pairwise",
    fun: Callable[[Any, Any], Any] = operator.sub,
    draw_indices: Sequence[str] = (".chain", ".iteration"),
    group_by: str | Sequence[str] | None = None,
) -> pd.DataFrame:
    """Compare the value of ``variable`` between levels of ``by``, draw by draw.

    Args:
        df: Tidy table of samples
        variable: Column holding the values to compare
        by: Factor column whose levels are compared
        comparison: "pairwise", "ordered", "control" or explicit pairs
        fun: Applied as fun(left_values, right_values); subtraction by default
        draw_indices: Columns identifying a draw
        group_by: Other grouping columns that must match between levels

    Returns:
        DataFrame with group_by, draw_indices, ``by`` (labelled "left - right")
        and ``variable``. Pairs are in comparison order.

    Raises:
        UnmatchedDraw: if the two levels do not share the same draws
    """
    group_by = [group_by] if isinstance(group_by, str) else list(group_by or [])
    keys = [*group_by, *draw_indices]
    missing = [name for name in [variable, by, *keys] if name not in df.columns]
    if missing:
        raise ValueError(f"Column(s) not found: {missing}")

    pairs = level_pairs(factor_levels(df[by]), comparison)
    labels = [f"{left} - {right}" for left, right in pairs]

    pieces = []
    for (left_level, right_level), label in zip(pairs, labels):
        left = df.loc[df[by] == left_level, [*keys, variable]]
        right = df.loc[df[by] == right_level, [*keys, variable]]
        _check_counts(left, right, group_by, label)
        try:
            merged = left.merge(right, on=keys, suffixes=("_left", "_right"), validate="one_to_one")
        except pd.errors.MergeError as error:
            raise UnmatchedDraw(f"Draws repeat within a level in {label!r}") from error
        if len(merged) != len(left):
            raise UnmatchedDraw(f"Draw identities differ between levels in {label!r}")

        piece = merged[keys].copy()
        piece[by] = label
        piece[variable] = fun(
            merged[f"{variable}_left"].to_numpy(),
            merged[f"{variable}_right"].to_numpy(),
        )
        pieces.append(piece)

    if not pieces:
        return pd.DataFrame(columns=[*keys, by, variable])
    result = pd.concat(pieces, ignore_index=True)
    result[by] = pd.Categorical(result[by], categories=list(dict.fromkeys(labels)), ordered=True)
    return result
