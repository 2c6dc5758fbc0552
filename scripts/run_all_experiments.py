"""
End-to-end runner for the whole beer review analysis.

1) Exploratory tables, PCA, and figures
2) SVR on the aspect ratings
3) SVR on tf-idf features of the review text

Usage (from the project root):

    python -m scripts.run_all_experiments

or:

    python scripts/run_all_experiments.py
"""

from __future__ import annotations

from beer_reviews.training.exploratory import run_exploratory_analysis
from beer_reviews.training.train_svm import train_and_evaluate_svm_models
from beer_reviews.utils.training_utils import get_logger, load_train_config


def main() -> None:
    train_cfg = load_train_config()
    logger = get_logger(
        name="run_all_experiments",
        config=train_cfg,
        log_file_suffix="all",
    )

    logger.info("=" * 80)
    logger.info("Starting full analysis (EDA + PCA + SVR).")

    run_exploratory_analysis()
    logger.info("Finished exploratory analysis.")

    metrics_df = train_and_evaluate_svm_models()
    logger.info("SVR summary:\n%s", metrics_df)

    logger.info("All experiments completed.")


if __name__ == "__main__":
    main()
