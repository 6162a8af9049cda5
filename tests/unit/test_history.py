import math

from run_grouping_suite.grouping.history import (
    collect_step_numbers,
    create_aggregated_metric_history,
    flatten_metric_histories,
)
from run_grouping_suite.grouping.schema import MetricEntity, RunGroupingAggregateFunction as Fn


def _entry(step, value, timestamp):
    return MetricEntity(key="loss", value=value, step=step, timestamp=timestamp)


def test_aggregated_history_per_step():
    history = [_entry(1, 1, 100), _entry(1, 3, 200)]
    result = create_aggregated_metric_history([1, 2], "loss", history)

    assert set(result) == {Fn.MIN, Fn.MAX, Fn.AVERAGE}
    assert result[Fn.MIN][0].value == 1
    assert result[Fn.MAX][0].value == 3
    assert result[Fn.AVERAGE][0].value == 2
    for series in result.values():
        assert [p.step for p in series] == [1, 2]
        assert all(p.key == "loss" for p in series)
        assert series[0].timestamp == 150
        # No data at step 2
        assert math.isnan(series[1].value)
        assert math.isnan(series[1].timestamp)


def test_timestamp_rounds_half_up():
    history = [_entry(5, 1.0, 100), _entry(5, 2.0, 101)]
    result = create_aggregated_metric_history([5], "loss", history)
    assert result[Fn.AVERAGE][0].timestamp == 101


def test_points_follow_requested_step_order():
    history = [_entry(1, 1.0, 10), _entry(2, 5.0, 20), _entry(3, 7.0, 30)]
    result = create_aggregated_metric_history([3, 1], "loss", history)
    assert [p.value for p in result[Fn.MAX]] == [7.0, 1.0]


def test_zero_values_count_as_data():
    history = [_entry(1, 0.0, 10), _entry(1, 4.0, 10)]
    result = create_aggregated_metric_history([1], "loss", history)
    assert result[Fn.MIN][0].value == 0.0
    assert result[Fn.AVERAGE][0].value == 2.0


def test_empty_history_gives_nan_points():
    result = create_aggregated_metric_history([0, 1], "loss", [])
    for series in result.values():
        assert len(series) == 2
        assert all(math.isnan(p.value) for p in series)


def test_flatten_and_collect_steps():
    histories = {
        "r1": {"loss": [_entry(2, 1.0, 1), _entry(0, 2.0, 1)], "acc": [_entry(9, 0.5, 1)]},
        "r2": {"loss": [_entry(1, 3.0, 1)]},
        "r3": {},
    }
    flat = flatten_metric_histories(histories, "loss")
    assert len(flat) == 3
    assert collect_step_numbers(flat) == [0, 1, 2]
