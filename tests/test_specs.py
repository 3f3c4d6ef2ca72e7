import numpy as np
import pytest

from tidydraws import ParameterSpec, SampleStore, parse_spec, spread_samples


def test_parse_scalar():
    spec = parse_spec("sigma")
    assert spec.names == ("sigma",)
    assert spec.index_names == ()
    assert not spec.regex


def test_parse_indexed():
    spec = parse_spec("b[group, time]")
    assert spec == ParameterSpec(("b",), ("group", "time"))


def test_parse_combined_names():
    spec = parse_spec("c(a, b)[i]")
    assert spec.names == ("a", "b")
    assert spec.index_names == ("i",)


def test_parse_regex_keeps_pattern():
    spec = parse_spec("b_.*[i]", regex=True)
    assert spec.names == ("b_.*",)
    assert spec.index_names == ("i",)
    assert spec.regex


@pytest.mark.parametrize("text", ["b[]", "b[i,]", "b[i", "1b", "b[i,i]"])
def test_parse_rejects_malformed(text):
    with pytest.raises(ValueError):
        parse_spec(text)


def test_spec_accepts_plain_strings():
    spec = ParameterSpec("b", "i")
    assert spec.names == ("b",)
    assert spec.index_names == ("i",)


def test_spec_str_round_trips():
    for text in ["sigma", "b[i,j]", "c(a, b)[i]"]:
        assert str(parse_spec(text)) == text


def test_regex_trailing_brackets_are_indices():
    spec = parse_spec("b_[xy]", regex=True)
    assert spec.names == ("b_",)
    assert spec.index_names == ("xy",)


def test_regex_character_class_via_spec():
    store = SampleStore({name: np.zeros((1, 2)) for name in ["b_x", "b_y", "b_z"]})
    draws = spread_samples(store, ParameterSpec(("b_[xy]",), regex=True))
    assert list(draws.columns) == [".chain", ".iteration", "b_x", "b_y"]
