from .model import (
    Activity,
    ActivityTable,
    NegativeDurationWarning,
    NO_PREDECESSOR,
    Schedule,
    SimulationResults,
    calculate_schedule,
    deterministic_schedule,
    find_critical_path,
)
from .monte_carlo import (
    DistributionType,
    DurationDistribution,
    UniformDistribution,
    get_distribution,
    run_monte_carlo_simulation,
    sample_activity_duration,
)
from .statistics import ConfidenceInterval, InsufficientSamplesError
from .config import SimulationConfig

__version__ = "0.1.0"
