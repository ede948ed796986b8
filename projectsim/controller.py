# controller.py
import logging
from abc import ABC
from typing import Any, Dict, Optional, Tuple, List

import pandas as pd

from .project import ProjectModel

logger = logging.getLogger(__name__)


# ====== BASE CONTROLLER ======
class BaseController(ABC):
    """Base controller with common functionality"""

    def __init__(self, model: ProjectModel):
        self.model = model
        self._observers = []

    def add_observer(self, observer):
        """Add observer notified after model changes"""
        self._observers.append(observer)

    def notify_observers(self, event_type: str, data: Dict[str, Any] = None):
        for observer in self._observers:
            observer.on_model_change(event_type, data or {})

    def handle_error(self, error: Exception) -> Tuple[bool, str]:
        """Standard error handling"""
        return False, f"Error: {str(error)}"


# ====== TABLE CONTROLLER ======
class TableController(BaseController):
    """Handles activity table edits"""

    def load_template(self, template_name: str) -> Tuple[bool, Optional[str]]:
        try:
            self.model.load_template(template_name)
            self.notify_observers("tasks_updated", {"template": template_name})
            return True, None
        except Exception as e:
            return self.handle_error(e)

    def load_csv(self, filename: str) -> Tuple[bool, Optional[str]]:
        try:
            self.model.load_csv(filename)
            self.notify_observers("tasks_updated", {"filename": filename})
            return True, None
        except Exception as e:
            return self.handle_error(e)

    def update_from_dataframe(self, task_df: pd.DataFrame) -> Tuple[bool, Optional[str]]:
        """Replace the table, rejecting it when validation fails"""
        try:
            valid, errors = self.validate_tasks(task_df)
            if not valid:
                return False, "; ".join(errors)
            self.model.task_df = task_df.copy()
            self.model.clear_results()
            self.notify_observers("tasks_updated", {})
            return True, None
        except Exception as e:
            return self.handle_error(e)

    def validate_tasks(self, task_df: Optional[pd.DataFrame] = None) -> Tuple[bool, List[str]]:
        if task_df is None:
            return self.model.validate_tasks()
        previous = self.model.task_df
        try:
            self.model.task_df = task_df
            return self.model.validate_tasks()
        finally:
            self.model.task_df = previous


# ====== SIMULATION CONTROLLER ======
class SimulationController(BaseController):
    """Handles simulation operations"""

    def run_monte_carlo(self, reps: Optional[int] = None,
                        seed: Optional[int] = None) -> Tuple[bool, Optional[str]]:
        """Run Monte Carlo simulation"""
        try:
            valid, errors = self.model.validate_tasks()
            if not valid:
                return False, "; ".join(errors)

            results = self.model.run_monte_carlo_simulation(reps=reps, seed=seed)

            self.notify_observers("monte_carlo_completed", {
                "reps": results.reps,
                "seed": seed if seed is not None else self.model.config.seed,
            })
            return True, None

        except Exception as e:
            return self.handle_error(e)

    def get_simulation_status(self) -> Dict[str, Any]:
        """Get current simulation status"""
        return {
            "has_results": self.model.results is not None,
            "task_count": len(self.model.task_df),
            "reps": self.model.results.reps if self.model.results is not None else 0,
        }

    def get_summary(self) -> Optional[Dict[str, Any]]:
        return self.model.simulation_data.get("summary")


# ====== MAIN CONTROLLER ======
class MainController:
    """Main controller coordinating table and simulation operations"""

    def __init__(self, model: ProjectModel):
        self.model = model
        self.task_controller = TableController(model)
        self.simulation_controller = SimulationController(model)
        self.events: List[str] = []

        self.task_controller.add_observer(self)
        self.simulation_controller.add_observer(self)

    def on_model_change(self, event_type: str, data: Dict[str, Any]):
        logger.debug("Model change: %s %s", event_type, data)
        self.events.append(event_type)

    def run_monte_carlo(self, reps: Optional[int] = None,
                        seed: Optional[int] = None) -> Tuple[bool, Optional[str]]:
        return self.simulation_controller.run_monte_carlo(reps=reps, seed=seed)
