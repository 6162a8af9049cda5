from run_grouping_suite.grouping import report
from run_grouping_suite.grouping.engine import get_grouped_row_render_metadata
from run_grouping_suite.grouping.schema import (
    GroupByConfig,
    RunGroupingAggregateFunction as Fn,
    RunGroupingMode as Mode,
)


def _records(runs):
    return get_grouped_row_render_metadata(runs, GroupByConfig(Mode.TAG, Fn.AVERAGE, "model"), {"tag.model": True})


def test_records_to_frame(sample_runs):
    df = report.records_to_frame(_records(sample_runs))

    assert list(df.columns[:6]) == ["row_id", "is_group", "group", "run_uuid", "runs", "expanded"]
    assert "metrics.loss" in df.columns
    assert "params.lr" in df.columns
    assert len(df) == 7

    header = df.iloc[0]
    assert header["is_group"]
    assert header["group"] == "cnn"
    assert header["runs"] == 2
    assert header["metrics.loss"] == 1.5

    remaining = df[df["row_id"] == "tag.model"].iloc[0]
    assert remaining["group"] == report.REMAINING_RUNS_LABEL
    # Run rows inherit the label of their group
    assert df[df["run_uuid"] == "r4"].iloc[0]["group"] == report.REMAINING_RUNS_LABEL


def test_runs_to_frame(sample_runs):
    df = report.runs_to_frame(sample_runs)
    assert list(df["run_uuid"]) == ["r1", "r2", "r3", "r4"]
    assert "metrics.acc" in df.columns


def test_save_reports(tmp_path, sample_runs, capsys):
    df = report.records_to_frame(_records(sample_runs))
    report.save_reports(df, out_dir=tmp_path / "out", name="groups", title="Grouped runs")

    md = (tmp_path / "out" / "groups.md").read_text()
    assert md.startswith("# Grouped runs")
    assert "tag.model.cnn" in md
    assert (tmp_path / "out" / "groups.csv").exists()
    assert "CSV report saved" in capsys.readouterr().out
