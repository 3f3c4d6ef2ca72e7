import numpy as np
import pandas as pd
import pytest

from tidydraws import (
    IndexCardinalityMismatch,
    ParameterSpec,
    SampleStore,
    UnknownParameter,
    estimate_rows,
    gather_samples,
    recover_types,
    spread_samples,
    unspread_samples,
)


def test_scalar_parameter(store):
    draws = spread_samples(store, "mu")
    assert list(draws.columns) == [".chain", ".iteration", "mu"]
    assert len(draws) == 6
    assert draws[".chain"].tolist() == [1, 1, 1, 2, 2, 2]
    assert draws[".iteration"].tolist() == [1, 2, 3, 1, 2, 3]
    np.testing.assert_array_equal(draws["mu"], store.draws["mu"].reshape(-1))


def test_row_count_with_broadcast(store):
    draws = spread_samples(store, "b[i]", "c[i,j]")
    assert len(draws) == 2 * 3 * 5 * 10
    assert list(draws.columns) == [".chain", ".iteration", "i", "j", "b", "c"]

    row = draws[(draws[".chain"] == 2) & (draws[".iteration"] == 3) & (draws["i"] == 4) & (draws["j"] == 7)]
    assert len(row) == 1
    assert row["b"].item() == store.draws["b"][1, 2, 3]
    assert row["c"].item() == store.draws["c"][1, 2, 3, 6]

    # b repeats across j
    per_i = draws.groupby([".chain", ".iteration", "i"])["b"].nunique()
    assert (per_i == 1).all()


def test_rows_in_row_major_order(store):
    draws = spread_samples(store, "c[i,j]")
    first = draws.iloc[:12]
    assert first["i"].tolist() == [1] * 10 + [2] * 2
    assert first["j"].tolist() == list(range(1, 11)) + [1, 2]


def test_index_order_differs_between_specs(rng):
    swapped = SampleStore(
        {"c": rng.normal(size=(1, 2, 5, 10)), "e": rng.normal(size=(1, 2, 10, 5))}
    )
    draws = spread_samples(swapped, "c[i,j]", "e[j,i]")
    assert len(draws) == 2 * 50
    row = draws[(draws[".iteration"] == 2) & (draws["i"] == 3) & (draws["j"] == 8)]
    assert row["c"].item() == swapped.draws["c"][0, 1, 2, 7]
    assert row["e"].item() == swapped.draws["e"][0, 1, 7, 2]


def test_disjoint_indices_cross(store):
    draws = spread_samples(store, "b[i]", "d[k]")
    assert len(draws) == 2 * 3 * 5 * 4
    assert estimate_rows(store, "b[i]", "d[k]") == len(draws)


def test_recovered_levels(store):
    labelled = recover_types(store, {"i": list("ABCDE")})
    draws = spread_samples(labelled, "b[i]")
    assert isinstance(draws["i"].dtype, pd.CategoricalDtype)
    assert list(draws["i"].cat.categories) == list("ABCDE")
    row = draws[(draws[".chain"] == 1) & (draws[".iteration"] == 2) & (draws["i"] == "C")]
    assert row["b"].item() == store.draws["b"][0, 1, 2]


def test_numeric_marker_keeps_integers(store):
    draws = spread_samples(recover_types(store, {"i": "numeric"}), "b[i]")
    assert draws["i"].tolist()[:5] == [1, 2, 3, 4, 5]


def test_recovered_levels_wrong_size(store):
    with pytest.raises(IndexCardinalityMismatch):
        spread_samples(recover_types(store, {"i": ["A", "B"]}), "b[i]")


def test_shared_index_with_different_sizes(store):
    with pytest.raises(IndexCardinalityMismatch):
        spread_samples(store, "b[i]", "c[j,i]")


def test_unknown_parameter(store):
    with pytest.raises(UnknownParameter, match="nope"):
        spread_samples(store, "nope")
    with pytest.raises(KeyError):
        spread_samples(store, "nope[i]")


def test_unmatched_regex(store):
    with pytest.raises(UnknownParameter):
        spread_samples(store, ParameterSpec("zeta.*", regex=True))


def test_regex_selects_several(rng):
    regex_store = SampleStore(
        {
            "b_x": rng.normal(size=(1, 4)),
            "b_y": rng.normal(size=(1, 4)),
            "sigma": rng.normal(size=(1, 4)),
        }
    )
    draws = spread_samples(regex_store, ParameterSpec("b_.*", regex=True))
    assert list(draws.columns) == [".chain", ".iteration", "b_x", "b_y"]


def test_wrong_number_of_indices(store):
    with pytest.raises(ValueError, match="index dimension"):
        spread_samples(store, "b")


def test_max_rows(store):
    with pytest.raises(ValueError, match="max_rows"):
        spread_samples(store, "c[i,j]", max_rows=100)


def test_inputs_not_mutated(store):
    before = store.draws["b"].copy()
    draws = spread_samples(store, "b[i]")
    draws["b"] = 0.0
    np.testing.assert_array_equal(store.draws["b"], before)


def test_round_trip(store):
    specs = ["mu", "b[i]", "c[i,j]"]
    rebuilt = unspread_samples(spread_samples(store, *specs), *specs)
    assert rebuilt.equals(store.subset(["mu", "b", "c"]))


def test_round_trip_with_labels(store):
    labelled = recover_types(store, {"k": ["w", "x", "y", "z"]})
    rebuilt = unspread_samples(spread_samples(labelled, "d[k]"), "d[k]")
    assert rebuilt.equals(store.subset(["d"]))
    assert rebuilt.levels == {"k": ["w", "x", "y", "z"]}


def test_gather_samples(store):
    long = gather_samples(store, "b[i]", "d[k]")
    assert set(long.columns) == {".chain", ".iteration", "i", "k", "term", "estimate"}
    assert len(long) == 2 * (2 * 3 * 5 * 4)
    assert list(long["term"].cat.categories) == ["b", "d"]
