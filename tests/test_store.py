import arviz as az
import numpy as np
import pytest

from tidydraws import NUMERIC, SampleStore, load_store, recover_types, save_store, spread_samples


def test_shapes_and_catalogue(store):
    assert store.names == ("mu", "b", "c", "d")
    assert store.n_chains == 2
    assert store.n_iterations == 3
    assert store.shape("mu") == ()
    assert store.shape("c") == (5, 10)
    assert store.nbytes == 8 * 2 * 3 * (1 + 5 + 50 + 4)


def test_mismatched_leading_axes():
    with pytest.raises(ValueError, match="chain, iteration"):
        SampleStore({"a": np.zeros((2, 3)), "b": np.zeros((2, 4))})


def test_subset_and_equals(store):
    subset = store.subset(["b", "mu"])
    assert subset.names == ("b", "mu")
    assert subset.equals(SampleStore({"b": store.draws["b"], "mu": store.draws["mu"]}))
    assert not subset.equals(store)


def test_from_flat_builds_arrays(rng):
    columns = {
        "sigma": rng.normal(size=(2, 4)),
        "b[1,1]": rng.normal(size=(2, 4)),
        "b[1,2]": rng.normal(size=(2, 4)),
        "b[2,1]": rng.normal(size=(2, 4)),
        "b[2,2]": rng.normal(size=(2, 4)),
    }
    flat_store = SampleStore.from_flat(columns)
    assert flat_store.names == ("sigma", "b")
    assert flat_store.shape("b") == (2, 2)
    np.testing.assert_array_equal(flat_store.draws["b"][:, :, 1, 0], columns["b[2,1]"])


def test_from_flat_missing_element(rng):
    columns = {"b[1]": rng.normal(size=(1, 2)), "b[3]": rng.normal(size=(1, 2))}
    with pytest.raises(ValueError, match=r"Missing element b\[2\]"):
        SampleStore.from_flat(columns)


def test_flat_round_trip(store):
    flat = store.to_flat()
    assert "c[5,10]" in flat
    assert len(flat) == 1 + 5 + 50 + 4
    assert SampleStore.from_flat(flat).equals(store)


def test_from_inference_data_caches_coordinates(rng):
    idata = az.from_dict(
        posterior={"b": rng.normal(size=(2, 50, 3)), "tau": rng.normal(size=(2, 50, 4))},
        coords={"group": ["x", "y", "z"]},
        dims={"b": ["group"]},
    )
    converted = SampleStore.from_inference_data(idata)
    assert converted.shape("b") == (3,)
    assert converted.levels == {"group": ["x", "y", "z"]}

    draws = spread_samples(converted, "b[group]")
    assert list(draws["group"].cat.categories) == ["x", "y", "z"]


def test_netcdf_round_trip(store, tmp_path):
    path = tmp_path / "trace.nc"
    save_store(store, path)
    assert load_store(path).equals(store)


def test_netcdf_round_trip_keeps_levels(store, tmp_path):
    labelled = recover_types(store, {"i": list("vwxyz"), "k": NUMERIC})
    path = tmp_path / "trace.nc"
    save_store(labelled, path)
    loaded = load_store(path)
    assert loaded.levels == {"i": list("vwxyz"), "k": NUMERIC}
    draws = spread_samples(loaded, "b[i]")
    assert list(draws["i"].cat.categories) == list("vwxyz")
