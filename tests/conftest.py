"""
Pytest configuration and shared fixtures for tidydraws tests.
"""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest

from tidydraws import SampleStore


@pytest.fixture
def rng():
    """Seeded random generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def store(rng):
    """Two chains, three iterations: scalar mu, vector b[5], matrix c[5, 10], vector d[4]."""
    return SampleStore(
        {
            "mu": rng.normal(size=(2, 3)),
            "b": rng.normal(size=(2, 3, 5)),
            "c": rng.normal(size=(2, 3, 5, 10)),
            "d": rng.normal(size=(2, 3, 4)),
        }
    )


@pytest.fixture
def bimodal(rng):
    """Well separated two-component mixture."""
    return np.concatenate([rng.normal(-5, 1, 2000), rng.normal(5, 1, 2000)])


@pytest.fixture
def grouped_draws(rng):
    """Tidy draws for three groups with different centres."""
    frames = [
        pd.DataFrame({"group": name, "value": rng.normal(centre, 1.0, 400)})
        for name, centre in [("b", 2.0), ("a", 0.0), ("c", -2.0)]
    ]
    return pd.concat(frames, ignore_index=True)


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")
