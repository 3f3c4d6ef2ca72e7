"""Reshape a sample store into tidy tables and back.

``spread_samples`` produces one row per (chain, iteration, index
combination) and one column per parameter. Parameters with fewer indices
than others are repeated across the indices they do not have, which is the
natural join on shared index names. ``unspread_samples`` inverts it.
"""

import math
import re

import numpy as np
import pandas as pd

from tidydraws.analysis.terms import gather_terms
from tidydraws.data.specs import ParameterSpec, as_specs
from tidydraws.data.store import NUMERIC, SampleStore
from tidydraws.errors import IndexCardinalityMismatch, UnknownParameter

CHAIN = ".chain"
ITERATION = ".iteration"
DRAW_COLUMNS = (CHAIN, ITERATION)


# --- spec resolution ---


def _match_names(spec: ParameterSpec, catalogue: list[str]) -> list[str]:
    """Resolve the parameter names a spec refers to."""
    if spec.regex:
        names = [
            name
            for name in catalogue
            if any(re.fullmatch(pattern, name) for pattern in spec.names)
        ]
        if not names:
            raise UnknownParameter(f"No parameter matches {list(spec.names)}")
        return names

    missing = [name for name in spec.names if name not in catalogue]
    if missing:
        raise UnknownParameter(f"Unknown parameter(s) {missing}; available: {catalogue}")
    return list(spec.names)


def _resolve(
    store: SampleStore,
    specs: list[ParameterSpec],
) -> tuple[list[tuple[ParameterSpec, list[str]]], dict[str, int]]:
    """Resolve specs to parameter names and collect index sizes."""
    resolved = []
    sizes: dict[str, int] = {}
    seen: set[str] = set()
    for spec in specs:
        names = _match_names(spec, list(store.names))
        for name in names:
            shape = store.shape(name)
            if len(shape) != len(spec.index_names):
                raise ValueError(
                    f"Parameter {name!r} has {len(shape)} index dimension(s) "
                    f"but spec {str(spec)!r} names {len(spec.index_names)}"
                )
            if name in seen:
                raise ValueError(f"Parameter {name!r} requested more than once")
            seen.add(name)
            for index_name, size in zip(spec.index_names, shape):
                if sizes.setdefault(index_name, size) != size:
                    raise IndexCardinalityMismatch(
                        f"Index {index_name!r} has size {sizes[index_name]} "
                        f"elsewhere but size {size} in {name!r}"
                    )
        resolved.append((spec, names))

    clashes = (seen & set(sizes)) | (seen | set(sizes)) & set(DRAW_COLUMNS)
    if clashes:
        raise ValueError(f"Column name(s) used twice: {sorted(clashes)}")
    return resolved, sizes


def estimate_rows(store: SampleStore, *specs: ParameterSpec | str) -> int:
    """Number of rows ``spread_samples`` would produce for these specs."""
    _, sizes = _resolve(store, as_specs(specs))
    return store.n_chains * store.n_iterations * math.prod(sizes.values())


# --- index labels ---


def _index_column(
    index_name: str,
    codes: np.ndarray,
    size: int,
    store: SampleStore,
) -> np.ndarray | pd.Categorical:
    """Turn 0-based codes into 1-based integers or recovered labels."""
    labels = store.levels.get(index_name)
    if labels is None or (isinstance(labels, str) and labels == NUMERIC):
        return codes + 1
    if len(labels) != size:
        raise IndexCardinalityMismatch(
            f"Index {index_name!r} has size {size} but {len(labels)} recovered levels"
        )
    return pd.Categorical.from_codes(codes, categories=list(labels), ordered=True)


# --- public API ---


def spread_samples(
    store: SampleStore,
    *specs: ParameterSpec | str,
    max_rows: int | None = None,
) -> pd.DataFrame:
    """Extract draws into a tidy table, one column per parameter.

    Args:
        store: Posterior samples
        *specs: ParameterSpec objects or bracket strings such as ``"b[i,j]"``
        max_rows: Refuse to build a table with more rows than this

    Returns:
        DataFrame with ``.chain``, ``.iteration``, one column per index name
        and one column per parameter

    Example:
        >>> draws = spread_samples(store, "mu", "b[group]")
        >>> print(draws.columns.tolist())
        >>> print(f"Rows: {len(draws)}")

    """
    resolved, sizes = _resolve(store, as_specs(specs))
    n_rows = store.n_chains * store.n_iterations * math.prod(sizes.values())
    if max_rows is not None and n_rows > max_rows:
        raise ValueError(f"Result would have {n_rows} rows, more than max_rows={max_rows}")

    index_names = list(sizes)
    grid = np.indices(
        (store.n_chains, store.n_iterations, *sizes.values()),
    ).reshape(len(index_names) + 2, -1)
    position = {name: axis + 2 for axis, name in enumerate(index_names)}

    columns: dict[str, object] = {CHAIN: grid[0] + 1, ITERATION: grid[1] + 1}
    for index_name in index_names:
        columns[index_name] = _index_column(
            index_name, grid[position[index_name]], sizes[index_name], store
        )
    for spec, names in resolved:
        axes = tuple(grid[position[index_name]] for index_name in spec.index_names)
        for name in names:
            columns[name] = store.draws[name][(grid[0], grid[1], *axes)]

    return pd.DataFrame(columns)


def gather_samples(
    store: SampleStore,
    *specs: ParameterSpec | str,
    max_rows: int | None = None,
) -> pd.DataFrame:
    """Extract draws into a long table with ``term`` and ``estimate`` columns."""
    spec_list = as_specs(specs)
    wide = spread_samples(store, *spec_list, max_rows=max_rows)
    index_names = list(dict.fromkeys(name for spec in spec_list for name in spec.index_names))
    return gather_terms(wide, by=index_names)


def unspread_samples(table: pd.DataFrame, *specs: ParameterSpec | str) -> SampleStore:
    """Rebuild a SampleStore from a table made by ``spread_samples``.

    Args:
        table: Tidy table with ``.chain``, ``.iteration``, index and value columns
        *specs: The specs used to spread the table

    Returns:
        SampleStore with one (chain, iteration, *dims) array per parameter.
        Categorical index columns are carried over as levels.

    """
    missing = [column for column in DRAW_COLUMNS if column not in table.columns]
    if missing:
        raise ValueError(f"Table is missing draw column(s) {missing}")

    chain = table[CHAIN].to_numpy(dtype=int) - 1
    iteration = table[ITERATION].to_numpy(dtype=int) - 1
    n_chains, n_iterations = chain.max() + 1, iteration.max() + 1

    spec_list = as_specs(specs)
    index_names = {name for spec in spec_list for name in spec.index_names}
    catalogue = [
        str(column)
        for column in table.columns
        if column not in index_names and not str(column).startswith(".")
    ]

    codes: dict[str, np.ndarray] = {}
    sizes: dict[str, int] = {}
    levels: dict[str, list] = {}
    for index_name in index_names:
        if index_name not in table.columns:
            raise ValueError(f"Table has no index column {index_name!r}")
        column = table[index_name]
        if isinstance(column.dtype, pd.CategoricalDtype):
            codes[index_name] = column.cat.codes.to_numpy()
            sizes[index_name] = len(column.cat.categories)
            levels[index_name] = list(column.cat.categories)
        else:
            codes[index_name] = column.to_numpy(dtype=int) - 1
            sizes[index_name] = int(codes[index_name].max()) + 1

    draws = {}
    for spec in spec_list:
        axes = tuple(codes[index_name] for index_name in spec.index_names)
        shape = (n_chains, n_iterations, *(sizes[index_name] for index_name in spec.index_names))
        for name in _match_names(spec, catalogue):
            array = np.full(shape, np.nan)
            array[(chain, iteration, *axes)] = table[name].to_numpy(dtype=float)
            draws[name] = array
    return SampleStore(draws, levels)
