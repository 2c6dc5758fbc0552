"""
Exploratory analysis pipeline: summary tables, PCA, and figures.

Run as a script with `python -m beer_reviews.training.exploratory`, or
call ``run_exploratory_analysis`` from a notebook.
"""

from __future__ import annotations

import os
from typing import Dict

import pandas as pd

from beer_reviews.data.datasets import (
    DEFAULT_DATA_CONFIG_PATH,
    load_beer_reviews_from_config,
    load_data_config,
)
from beer_reviews.evaluation.eda import summarize_reviews
from beer_reviews.evaluation.pca import run_rating_pca
from beer_reviews.evaluation.plots import (
    plot_pca_biplot,
    plot_rating_distributions,
    plot_scree,
)
from beer_reviews.utils.training_utils import (
    DEFAULT_TRAIN_CONFIG_PATH,
    ensure_dir_exists,
    get_logger,
    load_train_config,
)


def run_exploratory_analysis(
    data_config_path: str = DEFAULT_DATA_CONFIG_PATH,
    train_config_path: str = DEFAULT_TRAIN_CONFIG_PATH,
    make_figures: bool = True,
) -> Dict[str, pd.DataFrame]:
    """
    Load the cleaned sample, build the EDA and PCA tables, and save them.

    Parameters
    ----------
    data_config_path : str
        Path to config/data.yaml.
    train_config_path : str
        Path to config/train.yaml (output paths and logging).
    make_figures : bool
        If True, also write histogram, scree, and biplot PNGs.

    Returns
    -------
    Dict[str, pd.DataFrame]
        The EDA tables from ``summarize_reviews`` plus "pca_variance" and
        "pca_loadings".
    """
    data_cfg = load_data_config(data_config_path)
    train_cfg = load_train_config(train_config_path)
    logger = get_logger(name="beer_reviews", config=train_cfg, log_file_suffix="eda")

    df = load_beer_reviews_from_config(data_cfg)
    logger.info("Loaded dataset with %d reviews.", len(df))

    tables = summarize_reviews(df)

    pca = run_rating_pca(df)
    tables["pca_variance"] = pca.explained_variance
    tables["pca_loadings"] = pca.loadings
    logger.info(
        "PC1 explains %.1f%% of the variance in the numeric columns.",
        100.0 * pca.explained_variance["explained_variance_ratio"].iloc[0],
    )

    results_dir = train_cfg["paths"]["results_dir"]
    ensure_dir_exists(results_dir)
    for name, table in tables.items():
        path = os.path.join(results_dir, f"eda_{name}.csv")
        table.to_csv(path)
        logger.info("Saved %s to %s", name, path)

    if make_figures:
        figures_dir = train_cfg["paths"].get("figures_dir", "experiments/figures")
        ensure_dir_exists(figures_dir)
        plot_rating_distributions(
            df, out_path=os.path.join(figures_dir, "rating_distributions.png")
        )
        plot_scree(
            pca.explained_variance, out_path=os.path.join(figures_dir, "pca_scree.png")
        )
        plot_pca_biplot(
            pca.scores,
            pca.loadings,
            color_by=df.loc[pca.scores.index, "abv"],
            out_path=os.path.join(figures_dir, "pca_biplot.png"),
        )
        logger.info("Saved figures to %s", figures_dir)

    return tables


def main() -> None:
    _ = run_exploratory_analysis()


if __name__ == "__main__":
    main()
