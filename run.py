"""
One-button runner for the sampling lab notebook.

Usage:
    python run.py

    # With a notebook config and bootstrap data:
    python run.py --config notebook_config.json

    # Bootstrap a CSV without writing a config:
    python run.py --bootstrap-csv pairs.csv --x-column x --y-column y

Everything else comes from the config (or the built-in defaults).
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from sampling_lab.config import NotebookConfig, load_notebook_config
from sampling_lab.diagnostics import format_diagnostics
from sampling_lab.pipeline import run_notebook, SECTIONS

# Defaults; edit these if your file layout changes
DEFAULT_NOTEBOOK_CONFIG = "notebook_config.json"
DEFAULT_OUTPUT = "notebook_results.json"
DEFAULT_SEED = 42


def main():
    parser = argparse.ArgumentParser(
        description="One-button sampling lab notebook"
    )
    parser.add_argument(
        "--config", default=None,
        help=f"Notebook config path (default: {DEFAULT_NOTEBOOK_CONFIG} if present)"
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help=f"Random seed (default: config value or {DEFAULT_SEED})"
    )
    parser.add_argument(
        "--sections", nargs="+", default=list(SECTIONS), choices=list(SECTIONS),
        help="Sections to run (default: all)"
    )
    parser.add_argument("--bootstrap-csv", default=None, help="CSV for the bootstrap section")
    parser.add_argument("--x-column", default=None, help="Bootstrap denominator column")
    parser.add_argument("--y-column", default=None, help="Bootstrap numerator column")
    parser.add_argument(
        "--output", "-o", default=DEFAULT_OUTPUT,
        help=f"Output JSON path (default: {DEFAULT_OUTPUT})"
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    config_path = args.config
    if config_path is None and Path(DEFAULT_NOTEBOOK_CONFIG).exists():
        config_path = DEFAULT_NOTEBOOK_CONFIG

    if config_path:
        config = load_notebook_config(config_path)
        print(f"Config: {config_path}")
    else:
        config = NotebookConfig(seed=DEFAULT_SEED)
        print("Config: built-in defaults")

    if args.seed is not None:
        config.seed = args.seed
    if args.bootstrap_csv:
        config.bootstrap.csv_path = args.bootstrap_csv
    if args.x_column:
        config.bootstrap.x_column = args.x_column
    if args.y_column:
        config.bootstrap.y_column = args.y_column

    if 'bootstrap' in args.sections and config.bootstrap.csv_path:
        if not Path(config.bootstrap.csv_path).exists():
            print(f"\nERROR: bootstrap CSV not found: {config.bootstrap.csv_path}")
            sys.exit(1)

    print(f"  Seed: {config.seed}")
    print(f"  Sections: {', '.join(args.sections)}")
    print(f"  Rejection: n={config.rejection.n}, proposals={config.rejection.proposals}")
    print(f"  Monte Carlo: n={config.monte_carlo.n}, runs={config.monte_carlo.n_runs}")
    print(f"  Bootstrap: {config.bootstrap.csv_path or 'no data'}")
    print()

    results = run_notebook(config, sections=args.sections)

    print("\n" + format_diagnostics(results))

    with open(args.output, 'w') as f:
        json.dump(results, f, indent=2, default=str)
    print(f"\n  Results: {args.output}")


if __name__ == '__main__':
    main()
