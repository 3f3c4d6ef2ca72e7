import numpy as np
import pandas as pd
import pytest

from tidydraws import SampleStore, compose_data, recover_types, spread_samples


@pytest.fixture
def data():
    return pd.DataFrame(
        {
            "condition": ["b", "a", "c", "a"],
            "dose": pd.Categorical(["high", "low", "low", "high"], categories=["low", "high"]),
            "response": [1.0, 2.5, 3.0, 0.5],
        }
    )


def test_compose_counts_and_codes(data):
    composed = compose_data(data)
    np.testing.assert_array_equal(composed["condition"], [2, 1, 3, 1])
    assert composed["n_condition"] == 3
    np.testing.assert_array_equal(composed["dose"], [2, 1, 1, 2])
    assert composed["n_dose"] == 2
    np.testing.assert_array_equal(composed["response"], data["response"])
    assert "n_response" not in composed
    assert composed["n"] == 4


def test_compose_extra_values(data):
    composed = compose_data(data, {"prior_scale": 2.0}, n=10, tau=0.5)
    assert composed["prior_scale"] == 2.0
    assert composed["tau"] == 0.5
    assert composed["n"] == 10


def test_compose_length_mismatch(data):
    with pytest.raises(ValueError, match="different lengths"):
        compose_data(data, data.iloc[:2])


def test_compose_rejects_missing_levels():
    with pytest.raises(ValueError, match="missing"):
        compose_data(pd.DataFrame({"g": ["a", None]}))


def test_compose_then_recover(data, rng):
    composed = compose_data(data)
    store = SampleStore({"b": rng.normal(size=(1, 2, composed["n_condition"]))})
    draws = spread_samples(recover_types(store, data), "b[condition]")
    assert list(draws["condition"].cat.categories) == ["a", "b", "c"]
    first = draws[draws[".iteration"] == 1]
    # code 1 in the composed data is label "a"
    assert first.loc[first["condition"] == "a", "b"].item() == store.draws["b"][0, 0, 0]
