import numpy as np
import pytest

from projectsim.model import (
    Activity,
    ActivityTable,
    NegativeDurationWarning,
    NO_PREDECESSOR,
    SimulationResults,
    calculate_schedule,
    deterministic_schedule,
    find_critical_path,
)


def make_table(rows, max_predecessors=3):
    return ActivityTable(
        [Activity(id=i, average_duration=d, percent_uncertainty=p, predecessors=preds)
         for i, d, p, preds in rows],
        max_predecessors=max_predecessors,
    )


# ----------------------------------------------------------------
# 1. ACTIVITY / TABLE VALIDATION
# ----------------------------------------------------------------
def test_activity_drops_sentinel_predecessors():
    activity = Activity(id=4, average_duration=5, percent_uncertainty=10,
                        predecessors=(2, NO_PREDECESSOR, -7))
    assert activity.predecessors == (2,)
    assert activity.name == "Activity 4"


def test_activity_rejects_forward_reference():
    with pytest.raises(ValueError, match="Predecessor 3 must be between 1 and 2"):
        Activity(id=3, average_duration=5, percent_uncertainty=10, predecessors=(3,))

    with pytest.raises(ValueError, match="Predecessor 0"):
        Activity(id=3, average_duration=5, percent_uncertainty=10, predecessors=(0,))


def test_activity_rejects_fractional_predecessor():
    with pytest.raises(ValueError, match="Activity 3: Invalid predecessor 2.5"):
        Activity(id=3, average_duration=5, percent_uncertainty=10, predecessors=(2.5,))

    activity = Activity(id=3, average_duration=5, percent_uncertainty=10, predecessors=(2.0,))
    assert activity.predecessors == (2,)


def test_activity_rejects_bad_parameters():
    with pytest.raises(ValueError, match="Average duration must be positive"):
        Activity(id=1, average_duration=0, percent_uncertainty=10)
    with pytest.raises(ValueError, match="Percent uncertainty must be non-negative"):
        Activity(id=1, average_duration=3, percent_uncertainty=-1)


def test_table_requires_sequential_ids():
    activities = [
        Activity(id=1, average_duration=2, percent_uncertainty=0),
        Activity(id=3, average_duration=2, percent_uncertainty=0, predecessors=(1,)),
    ]
    with pytest.raises(ValueError, match="sequential starting from 1"):
        ActivityTable(activities)


def test_table_limits_predecessor_count():
    rows = [(1, 1, 0, ()), (2, 1, 0, ()), (3, 1, 0, ()), (4, 1, 0, (1, 2, 3))]
    with pytest.raises(ValueError, match="exceeds the maximum of 2"):
        make_table(rows, max_predecessors=2)
    assert len(make_table(rows, max_predecessors=3)) == 4


def test_table_warns_when_negative_durations_possible():
    with pytest.warns(NegativeDurationWarning, match=r"\[2\]"):
        make_table([(1, 4, 10, ()), (2, 4, 150, (1,))])


def test_table_from_records():
    table = ActivityTable.from_records([
        {"id": 1, "average_duration": 4, "percent_uncertainty": 10, "name": "Design"},
        {"id": 2, "average_duration": 6, "percent_uncertainty": 20, "predecessors": [1]},
        {"id": 3, "average_duration": 2, "percent_uncertainty": 0, "predecessors": [1, 2, -1]},
    ])

    assert len(table) == 3
    assert table[1].name == "Design"
    assert table[3].predecessors == (1, 2)
    assert np.array_equal(table.averages, [4.0, 6.0, 2.0])
    assert deterministic_schedule(table).project_duration == 12.0

    with pytest.raises(ValueError, match="exceeds the maximum of 1"):
        ActivityTable.from_records(
            [{"id": 1, "average_duration": 1, "percent_uncertainty": 0},
             {"id": 2, "average_duration": 1, "percent_uncertainty": 0},
             {"id": 3, "average_duration": 1, "percent_uncertainty": 0, "predecessors": [1, 2]}],
            max_predecessors=1,
        )


def test_table_to_dataframe_uses_sentinel(reference_table):
    df = reference_table.to_dataframe()
    assert list(df.columns[:4]) == ["Activity", "Name", "Average_Duration", "Percent_Uncertainty"]
    assert df.loc[6, "Predecessor_1"] == 5
    assert df.loc[6, "Predecessor_2"] == 6
    assert df.loc[6, "Predecessor_3"] == NO_PREDECESSOR
    assert df.loc[0, "Predecessor_1"] == NO_PREDECESSOR


# ----------------------------------------------------------------
# 2. FORWARD PASS SCHEDULING
# ----------------------------------------------------------------
def test_simple_chain():
    """
    A (5) -> B (3)
    Expected: A 0-5, B 5-8
    """
    table = make_table([(1, 5, 0, ()), (2, 3, 0, (1,))])
    schedule = calculate_schedule(table, [5, 3])

    assert schedule.start_times.tolist() == [0.0, 5.0]
    assert schedule.end_times.tolist() == [5.0, 8.0]
    assert schedule.project_duration == 8.0


def test_start_is_max_of_predecessor_ends():
    """
    A (5) -> C
    B (10) -> C
    C starts at max(5, 10) = 10
    """
    table = make_table([(1, 5, 0, ()), (2, 10, 0, ()), (3, 2, 0, (1, 2))])
    schedule = calculate_schedule(table, [5, 10, 2])

    assert schedule.start_times[2] == 10.0
    assert schedule.end_times[2] == 12.0


def test_activity_without_predecessors_starts_at_zero():
    table = make_table([(1, 5, 0, ()), (2, 3, 0, (1,)), (3, 4, 0, ())])
    schedule = calculate_schedule(table, [5, 3, 4])

    assert schedule.start_times[2] == 0.0
    # Project duration is the end of the last activity, not the latest end
    assert schedule.project_duration == 4.0


def test_reference_network_schedule(reference_table):
    schedule = deterministic_schedule(reference_table)

    assert schedule.start_times.tolist() == [0, 6, 6, 16, 20, 23, 34]
    assert schedule.end_times.tolist() == [6, 16, 20, 23, 30, 34, 39]
    assert schedule.project_duration == 39.0


def test_schedule_rejects_wrong_duration_count(reference_table):
    with pytest.raises(ValueError, match="Expected 7 durations"):
        calculate_schedule(reference_table, [1.0, 2.0])


def test_negative_durations_are_scheduled_as_given():
    with pytest.warns(NegativeDurationWarning):
        table = make_table([(1, 2, 200, ()), (2, 3, 0, (1,))])
    schedule = calculate_schedule(table, [-1.0, 3.0])

    assert schedule.start_times.tolist() == [0.0, -1.0]
    assert schedule.project_duration == 2.0


def test_critical_path_follows_latest_predecessor(reference_table):
    schedule = deterministic_schedule(reference_table)
    assert find_critical_path(reference_table, schedule) == [0, 1, 3, 5, 6]


# ----------------------------------------------------------------
# 3. RESULTS CONTAINER
# ----------------------------------------------------------------
def test_results_are_read_only():
    results = SimulationResults(project_durations=[1.0, 2.0, 3.0], deterministic_duration=2.0)
    with pytest.raises(ValueError):
        results.project_durations[0] = 10.0
    assert results.reps == 3


def test_results_summary_contains_reported_values():
    results = SimulationResults(
        project_durations=np.arange(1, 101, dtype=float),
        deterministic_duration=50.0,
        criticality=[1.0, 0.5],
    )
    summary = results.summary(threshold=90)

    assert summary["mean_project_duration"] == pytest.approx(50.5)
    assert summary["exceedance_probability"] == pytest.approx(0.10)
    assert summary["ci_lower"] < 50.5 < summary["ci_upper"]
    assert summary["task_criticality"] == [100.0, 50.0]
    assert summary["deterministic_duration"] == 50.0
