from tidydraws import save_store
from tidydraws.cli import build_parser, main


def test_parser_defaults():
    args = build_parser().parse_args(["trace.nc", "b[i]"])
    assert args.probs == [0.5, 0.8, 0.95]
    assert args.point == "median"
    assert args.interval == "qi"
    assert args.by is None


def test_summary_output(store, tmp_path, capsys):
    path = tmp_path / "trace.nc"
    save_store(store, path)
    assert main([str(path), "b[i]", "--probs", "0.9", "--point", "mean", "-v"]) == 0
    out = capsys.readouterr().out
    assert "SampleStore(chains=2" in out
    assert "conf.low" in out
    assert "0.9" in out


def test_unknown_parameter_exit_code(store, tmp_path, capsys):
    path = tmp_path / "trace.nc"
    save_store(store, path)
    assert main([str(path), "nope"]) == 1
    assert "Error" in capsys.readouterr().out


def test_by_subset_of_indices_summarizes_values_only(store, tmp_path, capsys):
    path = tmp_path / "trace.nc"
    save_store(store, path)
    assert main([str(path), "c[i,j]", "--by", "i", "--probs", "0.5"]) == 0
    out = capsys.readouterr().out
    assert "conf.low" in out
    assert "j.low" not in out
