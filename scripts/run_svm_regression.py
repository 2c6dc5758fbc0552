"""
Run the SVR experiments on beer review ratings and text.

This script is a convenience wrapper around
`beer_reviews.training.train_svm.train_and_evaluate_svm_models`, which:

- loads and cleans the configured dataset
- builds the tf-idf document-term matrix from the review text
- grid-searches an SVR per experiment with k-fold cross-validation
- evaluates each model on the held-out split
- writes metrics, predictions, and importance rankings under experiments/results/
- saves trained models under experiments/models/

Usage (from project root):

    python -m scripts.run_svm_regression
    # or
    python scripts/run_svm_regression.py --experiments text
"""

from __future__ import annotations

import argparse

from beer_reviews.training.train_svm import train_and_evaluate_svm_models
from beer_reviews.utils.training_utils import get_logger, load_train_config


def parse_args() -> argparse.Namespace:
    """
    Parse command-line arguments.
    """
    parser = argparse.ArgumentParser(
        description="Run SVR regression on beer review ratings and text."
    )
    parser.add_argument(
        "--data-config",
        type=str,
        default="config/data.yaml",
        help="Path to data config YAML (default: config/data.yaml).",
    )
    parser.add_argument(
        "--ml-config",
        type=str,
        default="config/ml.yaml",
        help="Path to ML config YAML (default: config/ml.yaml).",
    )
    parser.add_argument(
        "--train-config",
        type=str,
        default="config/train.yaml",
        help="Path to global train config YAML (default: config/train.yaml).",
    )
    parser.add_argument(
        "--experiments",
        nargs="+",
        choices=["ratings", "text"],
        default=["ratings", "text"],
        help="Experiments to run (default: both).",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    train_cfg = load_train_config(args.train_config)
    logger = get_logger(
        name="run_svm_regression",
        config=train_cfg,
        log_file_suffix="svm_regression",
    )

    logger.info("=" * 80)
    logger.info("Starting SVR experiments: %s", args.experiments)
    logger.info(
        "Configs: data=%s, ml=%s, train=%s",
        args.data_config,
        args.ml_config,
        args.train_config,
    )

    metrics_df = train_and_evaluate_svm_models(
        data_config_path=args.data_config,
        ml_config_path=args.ml_config,
        train_config_path=args.train_config,
        experiments=args.experiments,
    )

    if not metrics_df.empty:
        logger.info("Completed SVR experiments. Metrics:")
        logger.info("\n%s", metrics_df.sort_values("rmse"))
    else:
        logger.warning("SVR experiments finished, but metrics DataFrame is empty.")


if __name__ == "__main__":
    main()
