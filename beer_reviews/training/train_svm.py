"""
Training and evaluation pipeline for the SVR models.

This module runs both regression experiments of the analysis:

- "ratings": SVR predicting abv from the five aspect ratings
- "text":    SVR predicting abv from the tf-idf document-term matrix
             built from the review text

For each model it:
- splits documents into train/test by id, stratified on the target
- tunes the SVR with k-fold cross-validated grid search on the train set
- evaluates RMSE, MAE, R^2, and correlation on the test set
- ranks features by permutation importance
- saves metrics (JSON/CSV), predictions, importance, and the model

This module is designed to be callable both as a library function and
as a standalone script (via `python -m beer_reviews.training.train_svm`).
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

import joblib
import numpy as np
import pandas as pd

from beer_reviews.data.datasets import (
    DEFAULT_DATA_CONFIG_PATH,
    RATING_COLUMNS,
    build_metadata,
    load_beer_reviews_from_config,
    load_data_config,
)
from beer_reviews.data.split import split_document_term_matrix, split_from_config
from beer_reviews.evaluation.importance import rank_feature_importance
from beer_reviews.evaluation.metrics import compute_regression_metrics
from beer_reviews.evaluation.plots import plot_feature_importance, plot_predicted_vs_actual
from beer_reviews.features.text_features import build_text_features
from beer_reviews.models.svm_models import DEFAULT_ML_CONFIG_PATH, build_grid_search, load_ml_config
from beer_reviews.utils.training_utils import (
    DEFAULT_TRAIN_CONFIG_PATH,
    ensure_dir_exists,
    get_logger,
    load_train_config,
    seed_everything,
)


@dataclass(eq=False)
class RegressionRun:
    """
    Outcome of one fitted and evaluated model.

    ``predictions`` is indexed by document id with columns "actual" and
    "predicted"; ``importance`` is the permutation ranking.
    """

    name: str
    model: Any
    best_params: Dict[str, Any]
    cv_score: float
    metrics: Dict[str, float]
    predictions: pd.DataFrame
    importance: pd.DataFrame


# ---------------------------------------------------------------------------
# Core helpers
# ---------------------------------------------------------------------------


def fit_and_evaluate(
    name: str,
    X_train,
    X_test,
    y_train: pd.Series,
    y_test: pd.Series,
    feature_names: Sequence[str],
    ml_cfg: Dict[str, Any],
    logger: logging.Logger,
) -> RegressionRun:
    """
    Grid-search an SVR on the train split and evaluate it on the test split.

    Parameters
    ----------
    name : str
        Experiment name used in logs and output files.
    X_train, X_test
        Feature matrices (dense or sparse), rows aligned with the targets.
    y_train, y_test : pd.Series
        Targets indexed by document id.
    feature_names : Sequence[str]
        Column names for the importance ranking.
    ml_cfg : Dict[str, Any]
        ML configuration (config/ml.yaml).
    logger : logging.Logger
        Logger for progress messages.

    Returns
    -------
    RegressionRun
        Fitted model, metrics, predictions, and importance ranking.
    """
    search = build_grid_search(ml_cfg)
    logger.info(
        "[%s] Grid search over %s with %d-fold CV on %d training documents.",
        name,
        search.param_grid,
        search.cv.get_n_splits(),
        len(y_train),
    )
    search.fit(X_train, y_train.to_numpy())
    logger.info(
        "[%s] Best params: %s (CV score %.4f)",
        name,
        search.best_params_,
        search.best_score_,
    )

    model = search.best_estimator_
    y_pred = model.predict(X_test)

    metrics = compute_regression_metrics(y_test.to_numpy(), y_pred)
    logger.info(
        "[%s] Test metrics - rmse: %.4f, mae: %.4f, r2: %.4f, r: %.4f",
        name,
        metrics["rmse"],
        metrics["mae"],
        metrics["r2"],
        metrics["pearson_r"],
    )

    predictions = pd.DataFrame(
        {"actual": y_test.to_numpy(), "predicted": y_pred},
        index=y_test.index,
    )

    imp_cfg = ml_cfg.get("importance", {}) or {}
    general_cfg = ml_cfg.get("general", {}) or {}
    importance = rank_feature_importance(
        model,
        X_test,
        y_test.to_numpy(),
        feature_names=list(feature_names),
        n_repeats=int(imp_cfg.get("n_repeats", 5)),
        random_state=int(general_cfg.get("random_state", 42)),
        top_k=imp_cfg.get("top_k"),
    )
    logger.info(
        "[%s] Top features: %s", name, list(importance["feature"].head(10))
    )

    return RegressionRun(
        name=name,
        model=model,
        best_params=dict(search.best_params_),
        cv_score=float(search.best_score_),
        metrics=metrics,
        predictions=predictions,
        importance=importance,
    )


def train_rating_svm(
    df: pd.DataFrame,
    data_cfg: Dict[str, Any],
    ml_cfg: Dict[str, Any],
    logger: logging.Logger,
    feature_columns: Sequence[str] = RATING_COLUMNS,
) -> RegressionRun:
    """
    SVR predicting the target (abv by default) from the aspect ratings.
    """
    feat_cfg = data_cfg.get("features", {}) or {}
    target_column = feat_cfg.get("target_column", "abv")
    index_column = feat_cfg.get("index_column", "index")

    meta = build_metadata(df, target_column=target_column, index_column=index_column)
    X = meta[list(feature_columns)].astype(float)
    y = meta[target_column].astype(float)

    train_ids, test_ids = split_from_config(y, data_cfg.get("split", {}) or {})
    logger.info("[ratings] Train size: %d, Test size: %d", len(train_ids), len(test_ids))

    return fit_and_evaluate(
        name="ratings",
        X_train=X.loc[train_ids].to_numpy(),
        X_test=X.loc[test_ids].to_numpy(),
        y_train=y.loc[train_ids],
        y_test=y.loc[test_ids],
        feature_names=list(feature_columns),
        ml_cfg=ml_cfg,
        logger=logger,
    )


def train_text_svm(
    df: pd.DataFrame,
    data_cfg: Dict[str, Any],
    ml_cfg: Dict[str, Any],
    logger: logging.Logger,
) -> RegressionRun:
    """
    SVR predicting the target from tf-idf features of the review text.
    """
    features = build_text_features(df, data_cfg)
    dtm = features.dtm

    train_ids, test_ids = split_from_config(dtm.target, data_cfg.get("split", {}) or {})
    logger.info("[text] Train size: %d, Test size: %d", len(train_ids), len(test_ids))

    X_train, X_test, y_train, y_test = split_document_term_matrix(dtm, train_ids, test_ids)

    return fit_and_evaluate(
        name="text",
        X_train=X_train,
        X_test=X_test,
        y_train=y_train,
        y_test=y_test,
        feature_names=list(dtm.terms),
        ml_cfg=ml_cfg,
        logger=logger,
    )


def save_run(
    run: RegressionRun,
    results_dir: str,
    models_dir: Optional[str],
    overwrite: bool,
    logger: logging.Logger,
) -> Dict[str, Any]:
    """
    Write metrics JSON, predictions CSV, importance CSV and, if
    ``models_dir`` is given, the joblib model. Returns the metrics record.
    """
    record = {
        "model": run.name,
        **run.metrics,
        "cv_score": run.cv_score,
        "best_params": run.best_params,
    }

    metrics_json_path = os.path.join(results_dir, f"metrics_{run.name}.json")
    with open(metrics_json_path, "w", encoding="utf-8") as f:
        # NaN is not valid JSON.
        json.dump(
            {k: (None if isinstance(v, float) and np.isnan(v) else v) for k, v in record.items()},
            f,
            indent=2,
        )
    logger.info("Saved metrics JSON for %s to %s", run.name, metrics_json_path)

    run.predictions.to_csv(os.path.join(results_dir, f"predictions_{run.name}.csv"))
    run.importance.to_csv(
        os.path.join(results_dir, f"importance_{run.name}.csv"), index=False
    )

    if models_dir is not None:
        model_path = os.path.join(models_dir, f"svr_{run.name}.joblib")
        if not os.path.exists(model_path) or overwrite:
            joblib.dump(run.model, model_path)
            logger.info("Saved trained model '%s' to %s", run.name, model_path)
        else:
            logger.info(
                "Model file already exists and overwrite_existing is False: %s",
                model_path,
            )

    return record


# ---------------------------------------------------------------------------
# Training + evaluation
# ---------------------------------------------------------------------------


def train_and_evaluate_svm_models(
    data_config_path: str = DEFAULT_DATA_CONFIG_PATH,
    ml_config_path: str = DEFAULT_ML_CONFIG_PATH,
    train_config_path: str = DEFAULT_TRAIN_CONFIG_PATH,
    experiments: Sequence[str] = ("ratings", "text"),
) -> pd.DataFrame:
    """
    End-to-end pipeline to train and evaluate the SVR models.

    Parameters
    ----------
    data_config_path : str
        Path to config/data.yaml.
    ml_config_path : str
        Path to config/ml.yaml.
    train_config_path : str
        Path to config/train.yaml.
    experiments : Sequence[str]
        Which experiments to run: "ratings", "text", or both.

    Returns
    -------
    pd.DataFrame
        One row per experiment with columns ["model", "rmse", "mae",
        "r2", "pearson_r", "n", "cv_score", "best_params"].
    """
    unknown = set(experiments) - {"ratings", "text"}
    if unknown:
        raise ValueError(f"Unknown experiment(s): {sorted(unknown)}")

    data_cfg = load_data_config(data_config_path)
    ml_cfg = load_ml_config(ml_config_path)
    train_cfg = load_train_config(train_config_path)

    seed_everything(int(train_cfg["general"].get("random_state", 42)))

    # Configure the package logger so stage modules log through it too.
    logger = get_logger(name="beer_reviews", config=train_cfg, log_file_suffix="svm")

    df = load_beer_reviews_from_config(data_cfg)
    logger.info("Loaded dataset with %d reviews.", len(df))

    results_dir = train_cfg["paths"]["results_dir"]
    ensure_dir_exists(results_dir)

    save_cfg = train_cfg.get("save", {}) or {}
    models_dir = None
    if bool(save_cfg.get("save_models", True)):
        models_dir = train_cfg["paths"]["models_dir"]
        ensure_dir_exists(models_dir)
    overwrite = bool(save_cfg.get("overwrite_existing", False))

    figures_dir = None
    if bool(save_cfg.get("save_figures", True)):
        figures_dir = train_cfg["paths"].get("figures_dir", "experiments/figures")
        ensure_dir_exists(figures_dir)

    runners = {"ratings": train_rating_svm, "text": train_text_svm}

    records = []
    for name in experiments:
        logger.info("=" * 80)
        logger.info("Running experiment: %s", name)
        run = runners[name](df, data_cfg, ml_cfg, logger)
        records.append(save_run(run, results_dir, models_dir, overwrite, logger))

        if figures_dir is not None:
            plot_predicted_vs_actual(
                run.predictions["actual"],
                run.predictions["predicted"],
                title=f"SVR ({name}): predicted vs. actual {data_cfg['features'].get('target_column', 'abv')}",
                out_path=os.path.join(figures_dir, f"predicted_vs_actual_{name}.png"),
            )
            plot_feature_importance(
                run.importance,
                title=f"SVR ({name}): permutation importance",
                out_path=os.path.join(figures_dir, f"importance_{name}.png"),
            )

    metrics_df = pd.DataFrame(records)
    csv_path = os.path.join(results_dir, "svm_results.csv")
    metrics_df.to_csv(csv_path, index=False)
    logger.info("Saved aggregated SVR metrics to %s", csv_path)

    return metrics_df


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """
    Main entry point when running this module as a script.
    """
    _ = train_and_evaluate_svm_models()


if __name__ == "__main__":
    main()
