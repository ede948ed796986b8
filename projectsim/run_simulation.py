# run_simulation.py - Command line entry point for the activity network simulator
import argparse
import logging
import sys

from .config import SimulationConfig
from .controller import MainController
from .project import ProjectModel
from .project_templates import ProjectTemplates
from .utils import export_results_to_csv
from .view import format_report, plot_duration_histogram


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Monte Carlo simulation of project duration over an activity network."
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--table",
        default=None,
        help="CSV with Activity, Average_Duration, Percent_Uncertainty, Predecessor_1..3 columns",
    )
    source.add_argument(
        "--template",
        default="Reference Network (Default)",
        choices=ProjectTemplates.get_available_templates(),
        help="Built-in activity network to simulate when no --table is given",
    )
    parser.add_argument("--config", default=None, help="JSON file with simulation settings")
    parser.add_argument("--reps", type=int, default=None, help="Number of replications (default: 1000)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument("--threshold", type=float, default=None,
                        help="Report P(duration > threshold) (default: 40)")
    parser.add_argument("--confidence", type=float, default=None,
                        help="Confidence level for the mean (default: 0.95)")
    parser.add_argument("--lower", type=float, default=None,
                        help="Lower tail percentage (default: 5)")
    parser.add_argument("--upper", type=float, default=None,
                        help="Upper tail percentage (default: 5)")
    parser.add_argument("--plot", default=None, help="Save a histogram image to this path")
    parser.add_argument("--export", default=None, help="Write project durations to this CSV")
    parser.add_argument("--verbose", action="store_true", help="Log simulation progress")
    return parser.parse_args(argv)


def build_config(args) -> SimulationConfig:
    """Settings from --config, overridden by explicit command line flags"""
    base = SimulationConfig.from_json(args.config) if args.config else SimulationConfig()
    overrides = {
        "reps": args.reps,
        "seed": args.seed,
        "threshold": args.threshold,
        "confidence_level": args.confidence,
        "lower_percentile": args.lower,
        "upper_percentile": args.upper,
    }
    data = base.to_dict()
    data.update({k: v for k, v in overrides.items() if v is not None})
    return SimulationConfig.from_dict(data)


def main(argv=None) -> int:
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = build_config(args)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    model = ProjectModel(config=config)
    controller = MainController(model)

    if args.table:
        success, error = controller.task_controller.load_csv(args.table)
    else:
        success, error = controller.task_controller.load_template(args.template)
    if not success:
        print(error, file=sys.stderr)
        return 1

    success, error = controller.run_monte_carlo()
    if not success:
        print(error, file=sys.stderr)
        return 1

    names = model.task_df["Name"].tolist() if "Name" in model.task_df.columns else None
    print(format_report(model.simulation_data["summary"], task_names=names))

    if args.export:
        export_results_to_csv(model.results, args.export)
        print(f"Project durations written to {args.export}")

    if args.plot:
        plot_duration_histogram(model.results, model.simulation_data["summary"], save_path=args.plot)
        print(f"Histogram saved to {args.plot}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
