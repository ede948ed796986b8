import json
import os
import re
import numpy as np
import pandas as pd

from .model import Activity, ActivityTable, SimulationResults, DEFAULT_MAX_PREDECESSORS

REQUIRED_COLUMNS = ["Activity", "Average_Duration", "Percent_Uncertainty"]
PREDECESSOR_PATTERN = re.compile(r"^Predecessor_(\d+)$")


def predecessor_columns(task_df):
    """Predecessor_k columns in slot order"""
    cols = [(int(m.group(1)), c) for c in task_df.columns
            for m in [PREDECESSOR_PATTERN.match(str(c).strip())] if m]
    return [c for _, c in sorted(cols)]


def _row_predecessors(row, pred_cols):
    """Valid predecessor IDs of a row; blanks and negative sentinels are dropped"""
    preds = []
    for col in pred_cols:
        value = pd.to_numeric(row[col], errors="coerce")
        if pd.isna(value) or value < 0:
            continue
        preds.append(value)
    return preds


def validate_activity_table(task_df, max_predecessors=DEFAULT_MAX_PREDECESSORS):
    """Validate the activity table structure and precedence ordering"""
    errors = []

    for col in REQUIRED_COLUMNS:
        if col not in task_df.columns:
            errors.append(f"Missing required column: {col}")

    if errors:
        return False, errors

    if len(task_df) == 0:
        return False, ["Activity table is empty"]

    for col in REQUIRED_COLUMNS:
        values = pd.to_numeric(task_df[col], errors="coerce")
        if values.isna().any():
            errors.append(f"Column {col} contains blank or non-numeric values")
        elif not np.isfinite(values.astype(float)).all():
            errors.append(f"Column {col} contains infinite values")

    if errors:
        return False, errors

    pred_cols = predecessor_columns(task_df)

    # Activities must be numbered 1..N in row order
    expected_ids = list(range(1, len(task_df) + 1))
    actual_ids = pd.to_numeric(task_df["Activity"]).tolist()
    if actual_ids != expected_ids:
        errors.append("Activity IDs must be sequential starting from 1")

    for position, (_, row) in enumerate(task_df.iterrows(), start=1):
        activity_id = int(float(row["Activity"]))
        if float(row["Average_Duration"]) <= 0:
            errors.append(f"Activity {activity_id}: Average duration must be positive")
        if float(row["Percent_Uncertainty"]) < 0:
            errors.append(f"Activity {activity_id}: Percent uncertainty must be non-negative")

        preds = _row_predecessors(row, pred_cols)
        if len(preds) > max_predecessors:
            errors.append(
                f"Activity {activity_id}: {len(preds)} predecessors exceeds the maximum of {max_predecessors}"
            )
        for pred in preds:
            if not np.isfinite(pred) or pred != int(pred):
                errors.append(f"Activity {activity_id}: Invalid predecessor {pred}")
            elif pred == 0 or pred >= position:
                errors.append(
                    f"Activity {activity_id}: Predecessor {int(pred)} must refer to an earlier activity"
                )

    return len(errors) == 0, errors


def activity_table_from_dataframe(task_df, max_predecessors=DEFAULT_MAX_PREDECESSORS):
    """Build a validated ActivityTable from a DataFrame"""
    df = task_df.copy()
    df.columns = [str(c).strip() for c in df.columns]

    valid, errors = validate_activity_table(df, max_predecessors)
    if not valid:
        raise ValueError("Invalid activity table: " + "; ".join(errors))

    pred_cols = predecessor_columns(df)
    activities = []
    for _, row in df.iterrows():
        name = row["Name"] if "Name" in df.columns and pd.notna(row["Name"]) else ""
        activities.append(Activity(
            id=int(row["Activity"]),
            average_duration=float(row["Average_Duration"]),
            percent_uncertainty=float(row["Percent_Uncertainty"]),
            predecessors=tuple(int(p) for p in _row_predecessors(row, pred_cols)),
            name=str(name),
        ))

    return ActivityTable(activities, max_predecessors=max_predecessors)


def load_activity_table(filename, max_predecessors=DEFAULT_MAX_PREDECESSORS):
    """Load an ActivityTable from a CSV file"""
    if not os.path.exists(filename):
        raise FileNotFoundError(f"File {filename} not found")
    df = pd.read_csv(filename)
    return activity_table_from_dataframe(df, max_predecessors)


def export_results_to_csv(results, filename="project_durations.csv"):
    """Export simulated project durations to CSV"""
    df = pd.DataFrame({
        "Replication": np.arange(1, results.reps + 1),
        "Project_Duration": results.project_durations,
    })
    df.to_csv(filename, index=False)
    return filename


def save_results_json(results, filename="simulation_results.json"):
    """Save simulation results to JSON file"""
    data = {
        "project_durations": results.project_durations.tolist(),
        "deterministic_duration": results.deterministic_duration,
        "criticality": results.criticality.tolist(),
        "negative_duration_count": results.negative_duration_count,
    }
    with open(filename, "w") as f:
        json.dump(data, f, indent=2)
    return filename


def load_results_json(filename):
    """Load simulation results from JSON file"""
    with open(filename, "r") as f:
        data = json.load(f)

    if "project_durations" not in data:
        raise ValueError("Invalid results file format")

    return SimulationResults(
        project_durations=np.array(data["project_durations"], dtype=float),
        deterministic_duration=float(data.get("deterministic_duration", np.nan)),
        criticality=np.array(data.get("criticality", []), dtype=float),
        negative_duration_count=int(data.get("negative_duration_count", 0)),
    )
