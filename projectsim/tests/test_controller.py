import pytest

from projectsim.config import SimulationConfig
from projectsim.controller import MainController, SimulationController, TableController
from projectsim.project import ProjectModel


@pytest.fixture
def project_model():
    return ProjectModel(config=SimulationConfig(reps=200, seed=17))


@pytest.fixture
def main_controller(project_model):
    return MainController(project_model)


@pytest.fixture
def simulation_controller(project_model):
    return SimulationController(project_model)


def test_default_model_uses_reference_network(project_model):
    assert len(project_model.task_df) == 7
    valid, errors = project_model.validate_tasks()
    assert valid
    assert errors == []


def test_handle_simulation_valid(simulation_controller):
    success, error = simulation_controller.run_monte_carlo()
    assert success
    assert error is None

    status = simulation_controller.get_simulation_status()
    assert status == {"has_results": True, "task_count": 7, "reps": 200}

    summary = simulation_controller.get_summary()
    assert summary["num_simulations"] == 200
    assert summary["threshold"] == 40.0
    assert summary["deterministic_duration"] == 39.0


def test_reps_and_seed_override(simulation_controller):
    simulation_controller.run_monte_carlo(reps=50, seed=3)
    first = simulation_controller.model.results.project_durations.copy()
    simulation_controller.run_monte_carlo(reps=50, seed=3)

    assert simulation_controller.model.results.reps == 50
    assert (simulation_controller.model.results.project_durations == first).all()


def test_handle_simulation_invalid_table(simulation_controller):
    simulation_controller.model.task_df.loc[0, "Average_Duration"] = 0
    success, error = simulation_controller.run_monte_carlo()
    assert not success
    assert "Activity 1: Average duration must be positive" in error
    assert simulation_controller.model.results is None


def test_handle_simulation_error_is_reported(simulation_controller):
    success, error = simulation_controller.run_monte_carlo(reps=-5)
    assert not success
    assert error.startswith("Error:")


def test_observers_notified(main_controller):
    success, _ = main_controller.task_controller.load_template("Serial Chain")
    assert success
    success, _ = main_controller.run_monte_carlo()
    assert success
    assert main_controller.events == ["tasks_updated", "monte_carlo_completed"]
    assert main_controller.model.results.deterministic_duration == 29.0


def test_unknown_template(main_controller):
    success, error = main_controller.task_controller.load_template("Moon Landing")
    assert not success
    assert "Unknown template 'Moon Landing'" in error


def test_update_from_dataframe_rejects_invalid(project_model):
    controller = TableController(project_model)
    bad = project_model.task_df.copy()
    bad.loc[3, "Predecessor_1"] = 4

    success, error = controller.update_from_dataframe(bad)
    assert not success
    assert "Activity 4: Predecessor 4" in error
    # The current table is left untouched
    assert project_model.task_df.loc[3, "Predecessor_1"] == 2


def test_update_clears_previous_results(main_controller):
    main_controller.run_monte_carlo()
    new_df = main_controller.model.task_df.copy()
    new_df.loc[0, "Average_Duration"] = 8

    success, error = main_controller.task_controller.update_from_dataframe(new_df)
    assert success and error is None
    assert main_controller.model.results is None


def test_update_from_dataframe_reports_infinite_values(project_model):
    controller = TableController(project_model)
    bad = project_model.task_df.copy()
    bad["Predecessor_1"] = bad["Predecessor_1"].astype(float)
    bad.loc[3, "Predecessor_1"] = float("inf")

    success, error = controller.update_from_dataframe(bad)
    assert not success
    assert "Activity 4: Invalid predecessor inf" in error


def test_update_from_dataframe_handles_unexpected_input(project_model):
    controller = TableController(project_model)
    original = project_model.task_df

    success, error = controller.update_from_dataframe("not a table")
    assert not success
    assert error.startswith("Error:")
    assert project_model.task_df is original


def test_single_replication_run(simulation_controller):
    success, error = simulation_controller.run_monte_carlo(reps=1, seed=5)
    assert success
    assert error is None

    summary = simulation_controller.get_summary()
    assert summary["num_simulations"] == 1 == simulation_controller.model.results.reps
    assert summary["ci_lower"] is None
    assert summary["std_project_duration"] is None


def test_failed_run_keeps_results_and_summary_together(simulation_controller):
    simulation_controller.run_monte_carlo(reps=50, seed=3)
    previous = simulation_controller.model.results

    simulation_controller.model.config.lower_percentile = 150
    success, error = simulation_controller.run_monte_carlo(reps=20, seed=4)
    assert not success
    assert "Lower percentile must be between 0 and 100" in error

    assert simulation_controller.model.results is previous
    assert simulation_controller.get_summary()["num_simulations"] == previous.reps == 50
