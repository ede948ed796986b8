# monte_carlo.py - Duration sampling and the replication driver
import logging
import warnings
import numpy as np
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Optional, Tuple, Union

from .model import (
    Activity,
    ActivityTable,
    NegativeDurationWarning,
    SimulationResults,
    calculate_schedule,
    deterministic_schedule,
    find_critical_path,
)

logger = logging.getLogger(__name__)


class DistributionType(Enum):
    """Supported probability distributions for activity durations"""
    UNIFORM = "uniform"


class DurationDistribution(ABC):
    """Draws one duration per activity from its average and percent uncertainty"""

    distribution_type: DistributionType

    @abstractmethod
    def bounds(self, averages: np.ndarray, percents: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """Lowest and highest duration each activity can take"""

    @abstractmethod
    def sample(self, averages: np.ndarray, percents: np.ndarray,
               rng: np.random.Generator) -> np.ndarray:
        """One independent draw per activity"""


class UniformDistribution(DurationDistribution):
    """Symmetric uniform on [avg - avg*p/100, avg + avg*p/100], no clamping at zero"""

    distribution_type = DistributionType.UNIFORM

    def bounds(self, averages, percents):
        averages = np.asarray(averages, dtype=float)
        uncert_distance = averages * np.asarray(percents, dtype=float) / 100
        return averages - uncert_distance, averages + uncert_distance

    def sample(self, averages, percents, rng):
        low, high = self.bounds(averages, percents)
        return rng.uniform(low, high)


_DISTRIBUTIONS: Dict[DistributionType, DurationDistribution] = {
    DistributionType.UNIFORM: UniformDistribution(),
}


def get_distribution(kind: Union[DistributionType, str, DurationDistribution] = DistributionType.UNIFORM
                     ) -> DurationDistribution:
    """Resolve a distribution instance from an enum member or its name"""
    if isinstance(kind, DurationDistribution):
        return kind
    if isinstance(kind, str):
        try:
            kind = DistributionType(kind.strip().lower())
        except ValueError:
            supported = [d.value for d in DistributionType]
            raise ValueError(f"Unknown distribution '{kind}'. Supported: {supported}") from None
    if kind not in _DISTRIBUTIONS:
        raise ValueError(f"No sampler registered for {kind}")
    return _DISTRIBUTIONS[kind]


def sample_activity_duration(activity: Activity, rng: np.random.Generator,
                             distribution=DistributionType.UNIFORM) -> float:
    """Sample duration for a single activity"""
    sampler = get_distribution(distribution)
    draw = sampler.sample(np.array([activity.average_duration]),
                          np.array([activity.percent_uncertainty]), rng)
    return float(draw[0])


def run_monte_carlo_simulation(table: ActivityTable,
                               reps: int = 1000,
                               rng: Optional[np.random.Generator] = None,
                               seed: Optional[int] = None,
                               distribution=DistributionType.UNIFORM) -> SimulationResults:
    """
    Run independent replications of sample -> schedule over the activity table.

    Args:
        table: Validated activity table
        reps: Number of replications
        rng: Random generator; built from `seed` when omitted
        seed: Seed used only when `rng` is None
        distribution: DistributionType, its name, or a DurationDistribution

    Returns:
        SimulationResults holding one project duration per replication
    """
    reps = int(reps)
    if reps < 1:
        raise ValueError(f"Replication count must be a positive integer, got {reps}")
    if rng is None:
        rng = np.random.default_rng(seed)

    sampler = get_distribution(distribution)
    num_activities = len(table)
    logger.debug("Running %d replications over %d activities with %s sampling",
                 reps, num_activities, sampler.distribution_type.value)

    project_durations = np.zeros(reps)
    critical_count = np.zeros(num_activities)
    negative_count = 0

    for rep in range(reps):
        durations = sampler.sample(table.averages, table.percents, rng)
        negative_count += int(np.sum(durations < 0))

        schedule = calculate_schedule(table, durations)
        project_durations[rep] = schedule.project_duration
        critical_count[find_critical_path(table, schedule)] += 1

    if negative_count:
        warnings.warn(
            f"{negative_count} sampled activity durations were negative across {reps} replications",
            NegativeDurationWarning,
            stacklevel=2,
        )

    return SimulationResults(
        project_durations=project_durations,
        deterministic_duration=deterministic_schedule(table).project_duration,
        criticality=critical_count / reps,
        negative_duration_count=negative_count,
    )
