import pandas as pd
import pytest

from tidydraws import gather_terms


def test_gather_terms_doubles_rows():
    df = pd.DataFrame({"group": ["x", "y", "z"], "a": [1.0, 2.0, 3.0], "b": [4.0, 5.0, 6.0]})
    long = gather_terms(df, by="group")
    assert list(long.columns) == ["group", "term", "estimate"]
    assert len(long) == 2 * len(df)
    assert long["term"].tolist() == ["a", "a", "a", "b", "b", "b"]
    assert long["estimate"].tolist() == [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]


def test_gather_terms_carries_ignored_columns():
    df = pd.DataFrame({".chain": [1, 1], ".iteration": [1, 2], "a": [0.5, 0.6]})
    long = gather_terms(df)
    assert list(long.columns) == [".chain", ".iteration", "term", "estimate"]
    assert long[".iteration"].tolist() == [1, 2]


def test_gather_terms_custom_ignore():
    df = pd.DataFrame({"a": [1.0], "a_se": [0.1], "b": [2.0]})
    long = gather_terms(df, ignore=r"_se$")
    assert long["term"].tolist() == ["a", "b"]
    assert long["a_se"].tolist() == [0.1, 0.1]


def test_gather_terms_errors():
    df = pd.DataFrame({"group": ["x"], ".chain": [1]})
    with pytest.raises(ValueError, match="No columns"):
        gather_terms(df, by="group")
    with pytest.raises(ValueError, match="not found"):
        gather_terms(df, by="missing")
