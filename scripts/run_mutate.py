#!/usr/bin/env python3
"""
MUTATE Study CLI

Usage:
    # Run with YAML config (recommended):
    python scripts/run_mutate.py --config config/mutate.yaml

    # Override specific settings via CLI:
    python scripts/run_mutate.py \
        --config config/mutate.yaml \
        --input data/sample/german_credit.csv \
        --iterations 200 --split-ratio 0.8

    # Let tree + LASSO pick the predictors:
    python scripts/run_mutate.py --config config/mutate.yaml --predictors
"""

import sys
import argparse
from pathlib import Path

# Add project root to path
project_root = str(Path(__file__).resolve().parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from credit_mutate.config.loader import load_config
from credit_mutate.core.exceptions import PipelineException
from credit_mutate.core.logger import setup_logging
from credit_mutate.io.output_manager import OutputManager
from credit_mutate.pipeline import MutateStudy


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description='Credit MUTATE resampling study',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        '--config', default=None,
        help='Path to YAML config file (e.g., config/mutate.yaml)',
    )

    # Data overrides
    parser.add_argument(
        '--input', default=None,
        help='Path to dataset CSV/parquet (overrides config)',
    )
    parser.add_argument(
        '--output-dir', default=None,
        help='Base directory for run outputs',
    )

    # Model overrides
    parser.add_argument(
        '--target', default=None,
        help='Target column of the OLS model',
    )
    parser.add_argument(
        '--predictors', nargs='*', default=None,
        help='Ordered predictor columns; pass the flag alone to use selection',
    )

    # Resampling overrides
    parser.add_argument(
        '--split-ratio', type=float, default=None,
        help='Fraction of rows used for training in each iteration',
    )
    parser.add_argument(
        '--iterations', type=int, default=None,
        help='Number of train/holdout splits',
    )
    parser.add_argument(
        '--seed-offset', type=int, default=None,
        help='Iteration i uses seed offset + i',
    )
    parser.add_argument(
        '--n-jobs', type=int, default=None,
        help='Parallel workers for the resampling loop',
    )
    parser.add_argument(
        '--no-selection', action='store_true',
        help='Skip the decision tree / LASSO exploration',
    )
    parser.add_argument(
        '--log-level', default=None,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
    )

    return parser.parse_args(argv)


def _build_cli_overrides(args) -> dict:
    """Build a flat dot-notation override dict from CLI args."""
    overrides = {}

    if args.input is not None:
        overrides["data.input_path"] = args.input
    if args.output_dir is not None:
        overrides["output.base_dir"] = args.output_dir
    if args.target is not None:
        overrides["model.target"] = args.target
    if args.predictors is not None:
        overrides["model.predictors"] = args.predictors
    if args.split_ratio is not None:
        overrides["resampling.split_ratio"] = args.split_ratio
    if args.iterations is not None:
        overrides["resampling.iterations"] = args.iterations
    if args.seed_offset is not None:
        overrides["resampling.seed_offset"] = args.seed_offset
    if args.n_jobs is not None:
        overrides["resampling.n_jobs"] = args.n_jobs
    if args.no_selection:
        overrides["selection.enabled"] = False
    if args.log_level is not None:
        overrides["reproducibility.log_level"] = args.log_level

    return overrides


def main(argv=None) -> int:
    args = parse_args(argv)

    config = load_config(yaml_path=args.config, cli_overrides=_build_cli_overrides(args))

    output_manager = OutputManager(config)
    setup_logging(
        log_level=config.reproducibility.log_level,
        log_file=config.reproducibility.log_file or str(output_manager.get_log_path()),
    )

    study = MutateStudy(config, output_manager=output_manager)
    try:
        results = study.run()
    except PipelineException as e:
        print(f"\nStudy failed: {e}", file=sys.stderr)
        return 1
    finally:
        if config.reproducibility.save_metadata:
            output_manager.save_run_metadata()

    summary = results['summary']
    print(f"\n{'='*60}")
    print(f"Model: {results['model_spec'].formula()}")
    print(f"Iterations: {summary.n_iterations}")
    print(f"Mean R2 train:   {summary.r2_train_mean:.4f} (sd {summary.r2_train_sd:.4f})")
    print(f"Mean R2 holdout: {summary.r2_holdout_mean:.4f} (sd {summary.r2_holdout_sd:.4f})")
    print(f"Mean R2 diff:    {summary.r2_diff_mean:+.4f}")
    print()
    print(results['comparison'].round(4).to_string())
    print(f"\nRun directory: {output_manager.run_dir}")
    print(f"{'='*60}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
