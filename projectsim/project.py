# project.py - Holds the activity table, configuration and latest results
import logging
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from .config import SimulationConfig
from .model import ActivityTable, SimulationResults
from .monte_carlo import run_monte_carlo_simulation
from .project_templates import ProjectTemplates
from .utils import activity_table_from_dataframe, load_activity_table, validate_activity_table

logger = logging.getLogger(__name__)


class ProjectModel:
    """Activity table plus the results of the last simulation run"""

    def __init__(self, task_df: Optional[pd.DataFrame] = None,
                 config: Optional[SimulationConfig] = None):
        self.config = config or SimulationConfig()
        self.task_df = task_df if task_df is not None else ProjectTemplates.get_template(
            "Reference Network (Default)"
        )
        self.simulation_data: Dict[str, Any] = {
            "results": None,
            "summary": None,
        }

    def load_template(self, template_name: str):
        self.task_df = ProjectTemplates.get_template(template_name)
        self.clear_results()

    def load_csv(self, filename: str):
        self.task_df = load_activity_table(filename, self.config.max_predecessors).to_dataframe()
        self.clear_results()

    def clear_results(self):
        self.simulation_data = {"results": None, "summary": None}

    def validate_tasks(self) -> Tuple[bool, List[str]]:
        return validate_activity_table(self.task_df, self.config.max_predecessors)

    def build_table(self) -> ActivityTable:
        return activity_table_from_dataframe(self.task_df, self.config.max_predecessors)

    @property
    def results(self) -> Optional[SimulationResults]:
        return self.simulation_data["results"]

    def run_monte_carlo_simulation(self, reps: Optional[int] = None,
                                   seed: Optional[int] = None) -> SimulationResults:
        """Run the replication driver with the current configuration"""
        cfg = self.config
        reps = cfg.reps if reps is None else reps
        seed = cfg.seed if seed is None else seed

        table = self.build_table()
        logger.info("Simulating %d activities, %d replications, seed=%s", len(table), reps, seed)
        results = run_monte_carlo_simulation(
            table, reps=reps, seed=seed, distribution=cfg.distribution
        )

        summary = results.summary(
            confidence_level=cfg.confidence_level,
            threshold=cfg.threshold,
            lower_percentile=cfg.lower_percentile,
            upper_percentile=cfg.upper_percentile,
        )

        # results and summary are only stored together
        self.simulation_data["results"] = results
        self.simulation_data["summary"] = summary
        return results
