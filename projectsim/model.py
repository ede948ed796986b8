# model.py - Activity network data structures and precedence scheduling
import warnings
import numpy as np
import pandas as pd
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Dict, Any

from . import statistics

NO_PREDECESSOR = -1
DEFAULT_MAX_PREDECESSORS = 3


class NegativeDurationWarning(UserWarning):
    """Sampled or possible activity duration below zero"""


@dataclass
class Activity:
    """Individual activity in the project network"""
    id: int
    average_duration: float
    percent_uncertainty: float
    predecessors: Tuple[int, ...] = ()
    name: str = ""

    def __post_init__(self):
        self.id = int(self.id)
        self.average_duration = float(self.average_duration)
        self.percent_uncertainty = float(self.percent_uncertainty)

        if self.id < 1:
            raise ValueError(f"Activity {self.id}: ID must be a positive integer")
        if not np.isfinite(self.average_duration) or self.average_duration <= 0:
            raise ValueError(f"Activity {self.id}: Average duration must be positive")
        if not np.isfinite(self.percent_uncertainty) or self.percent_uncertainty < 0:
            raise ValueError(f"Activity {self.id}: Percent uncertainty must be non-negative")

        # Negative entries are the "no predecessor" sentinel
        preds = []
        for pred in self.predecessors:
            value = float(pred)
            if not np.isfinite(value) or value != int(value):
                raise ValueError(f"Activity {self.id}: Invalid predecessor {pred}")
            pred = int(value)
            if pred < 0 or pred in preds:
                continue
            if pred == 0 or pred >= self.id:
                raise ValueError(
                    f"Activity {self.id}: Predecessor {pred} must be between 1 and {self.id - 1}"
                )
            preds.append(pred)
        self.predecessors = tuple(preds)

        if not self.name:
            self.name = f"Activity {self.id}"

    @property
    def uncertainty_distance(self) -> float:
        return self.average_duration * self.percent_uncertainty / 100

    @property
    def can_go_negative(self) -> bool:
        return self.uncertainty_distance > self.average_duration


class ActivityTable:
    """
    Ordered, read-only collection of activities.

    Activity IDs run 1..N and every predecessor has a lower ID than its
    successor, so a single forward pass in ID order schedules the network.
    """

    def __init__(self, activities: Sequence[Activity],
                 max_predecessors: int = DEFAULT_MAX_PREDECESSORS):
        if max_predecessors < 1:
            raise ValueError("max_predecessors must be at least 1")

        self.max_predecessors = int(max_predecessors)
        self._activities: Tuple[Activity, ...] = tuple(activities)

        errors = self._validate()
        if errors:
            raise ValueError("Invalid activity table: " + "; ".join(errors))

        risky = [a.id for a in self._activities if a.can_go_negative]
        if risky:
            warnings.warn(
                f"Activities {risky} have uncertainty above 100% and may sample negative durations",
                NegativeDurationWarning,
                stacklevel=2,
            )

        self._averages = np.array([a.average_duration for a in self._activities])
        self._percents = np.array([a.percent_uncertainty for a in self._activities])
        self._predecessor_indices = tuple(
            np.array([p - 1 for p in a.predecessors], dtype=int) for a in self._activities
        )
        self._averages.setflags(write=False)
        self._percents.setflags(write=False)

    def _validate(self) -> List[str]:
        errors = []
        if not self._activities:
            errors.append("Activity table is empty")
            return errors

        for position, activity in enumerate(self._activities, start=1):
            if activity.id != position:
                errors.append(
                    f"Activity IDs must be sequential starting from 1 (found {activity.id} at position {position})"
                )
            if len(activity.predecessors) > self.max_predecessors:
                errors.append(
                    f"Activity {activity.id}: {len(activity.predecessors)} predecessors exceeds "
                    f"the maximum of {self.max_predecessors}"
                )
        return errors

    def __len__(self) -> int:
        return len(self._activities)

    def __iter__(self):
        return iter(self._activities)

    def __getitem__(self, activity_id: int) -> Activity:
        """Look up an activity by its 1-based ID"""
        if not 1 <= activity_id <= len(self._activities):
            raise KeyError(f"No activity with ID {activity_id}")
        return self._activities[activity_id - 1]

    @property
    def activities(self) -> Tuple[Activity, ...]:
        return self._activities

    @property
    def averages(self) -> np.ndarray:
        return self._averages

    @property
    def percents(self) -> np.ndarray:
        return self._percents

    @property
    def predecessor_indices(self) -> Tuple[np.ndarray, ...]:
        """0-based predecessor positions per activity"""
        return self._predecessor_indices

    @classmethod
    def from_records(cls, records: Sequence[Dict[str, Any]],
                     max_predecessors: int = DEFAULT_MAX_PREDECESSORS) -> "ActivityTable":
        activities = [
            Activity(
                id=r["id"],
                average_duration=r["average_duration"],
                percent_uncertainty=r["percent_uncertainty"],
                predecessors=tuple(r.get("predecessors", ())),
                name=r.get("name", ""),
            )
            for r in records
        ]
        return cls(activities, max_predecessors=max_predecessors)

    def to_dataframe(self) -> pd.DataFrame:
        """Table in the Activity / Average_Duration / Predecessor_k column layout"""
        data = {
            "Activity": [a.id for a in self._activities],
            "Name": [a.name for a in self._activities],
            "Average_Duration": [a.average_duration for a in self._activities],
            "Percent_Uncertainty": [a.percent_uncertainty for a in self._activities],
        }
        for slot in range(self.max_predecessors):
            data[f"Predecessor_{slot + 1}"] = [
                a.predecessors[slot] if slot < len(a.predecessors) else NO_PREDECESSOR
                for a in self._activities
            ]
        return pd.DataFrame(data)


@dataclass
class Schedule:
    """Start and end times of every activity for one replication"""
    start_times: np.ndarray
    end_times: np.ndarray
    durations: np.ndarray

    @property
    def project_duration(self) -> float:
        return float(self.end_times[-1])


def calculate_schedule(table: ActivityTable, durations: Sequence[float]) -> Schedule:
    """Forward pass in ID order: start = max end of predecessors, or 0 without any"""
    durations = np.asarray(durations, dtype=float)
    num_activities = len(table)
    if durations.shape != (num_activities,):
        raise ValueError(
            f"Expected {num_activities} durations, got array of shape {durations.shape}"
        )

    start_times = np.zeros(num_activities)
    end_times = np.zeros(num_activities)

    for j, preds in enumerate(table.predecessor_indices):
        if len(preds) > 0:
            start_times[j] = np.max(end_times[preds])
        end_times[j] = start_times[j] + durations[j]

    return Schedule(start_times=start_times, end_times=end_times, durations=durations)


def deterministic_schedule(table: ActivityTable) -> Schedule:
    """Schedule built from average durations only"""
    return calculate_schedule(table, table.averages)


def find_critical_path(table: ActivityTable, schedule: Schedule) -> List[int]:
    """
    Trace the chain of activities that drives the final activity's end time.

    Walks backwards from the last activity, each time following the
    predecessor with the latest end time. Returns 0-based indices in
    ascending order.
    """
    path = []
    j: Optional[int] = len(table) - 1
    while j is not None:
        path.append(j)
        preds = table.predecessor_indices[j]
        if len(preds) == 0:
            j = None
        else:
            j = int(preds[np.argmax(schedule.end_times[preds])])
    return sorted(path)


@dataclass
class SimulationResults:
    """Container for the project durations collected by the replication driver"""
    project_durations: np.ndarray
    deterministic_duration: float
    criticality: np.ndarray = field(default_factory=lambda: np.zeros(0))
    negative_duration_count: int = 0

    def __post_init__(self):
        self.project_durations = np.array(self.project_durations, dtype=float)
        self.criticality = np.array(self.criticality, dtype=float)
        self.project_durations.setflags(write=False)
        self.criticality.setflags(write=False)

    @property
    def reps(self) -> int:
        return int(self.project_durations.size)

    def mean(self) -> float:
        return statistics.mean(self.project_durations)

    def confidence_interval(self, level: float = 0.95) -> statistics.ConfidenceInterval:
        return statistics.confidence_interval(self.project_durations, level)

    def half_width(self, level: float = 0.95) -> float:
        return self.confidence_interval(level).half_width

    def exceedance_probability(self, threshold: float) -> float:
        return statistics.exceedance_probability(self.project_durations, threshold)

    def percentile(self, p: float) -> float:
        return statistics.percentile(self.project_durations, p)

    def percentile_cutoffs(self, lower: float = 5.0, upper: float = 5.0) -> Tuple[float, float]:
        return statistics.percentile_cutoffs(self.project_durations, lower, upper)

    def summary(self, confidence_level: float = 0.95, threshold: float = 40.0,
                lower_percentile: float = 5.0, upper_percentile: float = 5.0) -> Dict[str, Any]:
        summary = statistics.summarize(
            self.project_durations,
            confidence_level=confidence_level,
            threshold=threshold,
            lower_percentile=lower_percentile,
            upper_percentile=upper_percentile,
        )
        summary["deterministic_duration"] = self.deterministic_duration
        summary["negative_duration_count"] = self.negative_duration_count
        summary["task_criticality"] = (self.criticality * 100).tolist()
        return summary
