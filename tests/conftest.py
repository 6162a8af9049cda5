import pytest

from run_grouping_suite.grouping.constants import EXPERIMENT_PARENT_ID_TAG
from run_grouping_suite.grouping.schema import DatasetIdentity, MetricEntity, ParamEntity, RunData

TRAIN = DatasetIdentity(name="train", digest="abc")
EVAL = DatasetIdentity(name="eval", digest="def")


def make_run(run_uuid, tags=None, params=None, metrics=None, datasets=None):
    return RunData(
        run_uuid=run_uuid,
        metrics=[MetricEntity(key=k, value=v) for k, v in (metrics or {}).items()],
        params=[ParamEntity(key=k, value=v) for k, v in (params or {}).items()],
        tags=dict(tags or {}),
        datasets=list(datasets or []),
    )


@pytest.fixture
def sample_runs():
    """Four runs: two share model=cnn, one is rnn, one has no model tag."""
    return [
        make_run("r1", tags={"model": "cnn"}, params={"lr": "0.1"}, metrics={"loss": 1.0, "acc": 0.5}, datasets=[TRAIN]),
        make_run("r2", tags={"model": "rnn"}, params={"lr": "0.2"}, metrics={"loss": 3.0}, datasets=[TRAIN, EVAL]),
        make_run("r3", tags={"model": "cnn", EXPERIMENT_PARENT_ID_TAG: "r1"}, params={"lr": "0.1"},
                 metrics={"loss": 2.0, "acc": 0.7}),
        make_run("r4", tags={}, metrics={"loss": 4.0}, datasets=[EVAL, EVAL]),
    ]
