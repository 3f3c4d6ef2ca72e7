"""Melt value columns into term/estimate pairs."""

import re
from collections.abc import Sequence

import pandas as pd

TERM = "term"
ESTIMATE = "estimate"


def gather_terms(
    df: pd.DataFrame,
    by: str | Sequence[str] | None = None,
    ignore: str = r"^\.",
) -> pd.DataFrame:
    """Gather every non-key column into ``term`` and ``estimate``.

    Columns in ``by`` and columns whose name matches ``ignore`` are carried
    along unchanged; every other column is melted.

    Args:
        df: Wide table
        by: Grouping columns
        ignore: Regular expression for columns to carry rather than melt

    Returns:
        Long table: by columns, ignored columns, term, estimate.
        Ordered by term (original column order), then original row order.

    Example:
        >>> df = pd.DataFrame({"group": ["a", "b"], "x": [1.0, 2.0], "y": [3.0, 4.0]})
        >>> gather_terms(df, by="group")
          group term  estimate
        0     a    x       1.0
        1     b    x       2.0
        2     a    y       3.0
        3     b    y       4.0

    """
    by = [by] if isinstance(by, str) else list(by or [])
    missing = [name for name in by if name not in df.columns]
    if missing:
        raise ValueError(f"Grouping column(s) not found: {missing}")

    pattern = re.compile(ignore)
    carried = [
        name for name in df.columns if name not in by and pattern.search(str(name))
    ]
    value_columns = [name for name in df.columns if name not in by and name not in carried]
    if not value_columns:
        raise ValueError("No columns left to gather")

    long = df.melt(
        id_vars=[*by, *carried],
        value_vars=value_columns,
        var_name=TERM,
        value_name=ESTIMATE,
    )
    long[TERM] = pd.Categorical(long[TERM], categories=value_columns)
    return long
