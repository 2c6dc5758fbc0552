"""
Run the exploratory analysis: summary tables, rating correlations, PCA,
and figures.

Usage (from project root):

    python -m scripts.run_eda
    # or
    python scripts/run_eda.py --no-figures
"""

from __future__ import annotations

import argparse

from beer_reviews.training.exploratory import run_exploratory_analysis
from beer_reviews.utils.training_utils import get_logger, load_train_config


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Exploratory analysis and PCA of beer review ratings."
    )
    parser.add_argument(
        "--data-config",
        type=str,
        default="config/data.yaml",
        help="Path to data config YAML (default: config/data.yaml).",
    )
    parser.add_argument(
        "--train-config",
        type=str,
        default="config/train.yaml",
        help="Path to global train config YAML (default: config/train.yaml).",
    )
    parser.add_argument(
        "--no-figures",
        action="store_true",
        help="Only write the CSV tables.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    train_cfg = load_train_config(args.train_config)
    logger = get_logger(name="run_eda", config=train_cfg, log_file_suffix="eda_run")

    tables = run_exploratory_analysis(
        data_config_path=args.data_config,
        train_config_path=args.train_config,
        make_figures=not args.no_figures,
    )

    logger.info("Numeric summary:\n%s", tables["numeric_summary"])
    logger.info("PCA explained variance:\n%s", tables["pca_variance"])


if __name__ == "__main__":
    main()
