import pytest
import yaml


def _write_runs(path):
    path.write_text(yaml.safe_dump([
        {"run_uuid": "r1", "tags": {"model": "cnn"},
         "metrics": [{"key": "loss", "value": 1.0}], "datasets": [{"name": "train", "digest": "abc"}]},
        {"run_uuid": "r2", "tags": {"model": "cnn"},
         "metrics": [{"key": "loss", "value": 3.0}], "datasets": [{"name": "train", "digest": "abc"}]},
        {"run_uuid": "r3", "tags": {},
         "metrics": [{"key": "loss", "value": 5.0}]},
    ]))


@pytest.mark.integration
def test_group_command_writes_reports(tmp_path, monkeypatch, capsys):
    """Group by tag, expand the remaining runs group and write both reports."""
    from run_grouping_suite.cli import group

    monkeypatch.chdir(tmp_path)
    runs = tmp_path / "runs.yaml"
    _write_runs(runs)

    group.main([
        "--runs", str(runs),
        "--group-by", "tag.average.model",
        "--expand", "tag.model",
        "--out-dir", str(tmp_path / "reports"),
        "--name", "by_model",
    ])

    out = capsys.readouterr().out
    assert "Loaded 3 runs" in out
    assert "2 groups, 5 rows" in out
    md = (tmp_path / "reports" / "by_model.md").read_text()
    assert "tag.model.cnn.r2" in md
    assert "tag.model.r3" in md


@pytest.mark.integration
def test_group_command_uses_config_file(tmp_path, monkeypatch, capsys):
    from run_grouping_suite.cli import group

    monkeypatch.chdir(tmp_path)
    runs = tmp_path / "runs.yaml"
    _write_runs(runs)
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text(yaml.safe_dump({"group_by": "dataset.max.dataset", "groups_expanded": {"dataset.dataset.train.abc": False}}))

    group.main(["--runs", str(runs), "--config", str(cfg)])

    out = capsys.readouterr().out
    assert "Grouped by dataset" in out
    # Collapsed dataset group and collapsed remaining group: headers only
    assert "2 groups, 2 rows" in out


@pytest.mark.integration
def test_group_command_without_grouping_prints_flat_list(tmp_path, monkeypatch, capsys):
    from run_grouping_suite.cli import group

    monkeypatch.chdir(tmp_path)
    runs = tmp_path / "runs.yaml"
    _write_runs(runs)

    group.main(["--runs", str(runs), "--group-by", "bogus.min.model"])
    assert "No grouping configured" in capsys.readouterr().out


@pytest.mark.integration
def test_group_command_missing_runs(tmp_path, monkeypatch):
    from run_grouping_suite.cli import group

    monkeypatch.chdir(tmp_path)
    with pytest.raises(SystemExit) as exc:
        group.main(["--runs", str(tmp_path / "missing.yaml")])
    assert exc.value.code == 1


@pytest.mark.integration
def test_dispatcher_requires_command(monkeypatch, capsys):
    from run_grouping_suite.cli.__main__ import main

    monkeypatch.setattr("sys.argv", ["run_grouping_suite.cli"])
    with pytest.raises(SystemExit) as exc:
        main()
    assert exc.value.code == 1
    assert "group" in capsys.readouterr().out
