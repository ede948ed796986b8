# config.py - Simulation configuration
import json
from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, Optional

from .model import DEFAULT_MAX_PREDECESSORS
from .monte_carlo import get_distribution


@dataclass
class SimulationConfig:
    """
    Parameters for one simulation run.

    Attributes:
        reps: Number of replications. Default 1000.
        confidence_level: Two-sided level for the mean's confidence interval.
        threshold: Project duration whose exceedance probability is reported.
        lower_percentile: Percentage left in the lower tail (5 -> 5th percentile).
        upper_percentile: Percentage left in the upper tail (5 -> 95th percentile).
        max_predecessors: Largest number of predecessors an activity may list.
        seed: Optional seed for reproducible results.
        distribution: Name of the duration distribution.
    """
    reps: int = 1000
    confidence_level: float = 0.95
    threshold: float = 40.0
    lower_percentile: float = 5.0
    upper_percentile: float = 5.0
    max_predecessors: int = DEFAULT_MAX_PREDECESSORS
    seed: Optional[int] = None
    distribution: str = "uniform"

    def __post_init__(self):
        if isinstance(self.reps, bool) or int(self.reps) != self.reps or self.reps < 1:
            raise ValueError("reps must be a positive integer")
        self.reps = int(self.reps)
        if not (0 < self.confidence_level < 1):
            raise ValueError("confidence_level must be strictly between 0 and 1")
        for name in ("lower_percentile", "upper_percentile"):
            value = getattr(self, name)
            if not (0 <= value <= 100):
                raise ValueError(f"{name} must be between 0 and 100")
        if self.max_predecessors < 1:
            raise ValueError("max_predecessors must be at least 1")
        self.threshold = float(self.threshold)
        # Fail early on unknown distribution names
        get_distribution(self.distribution)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimulationConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {unknown}")
        return cls(**data)

    @classmethod
    def from_json(cls, path) -> "SimulationConfig":
        with open(path, "r") as f:
            return cls.from_dict(json.load(f))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
