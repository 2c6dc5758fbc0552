"""
Support vector regression builders.

This module provides helper functions to construct the regressors used
in our analysis:

- SVR with an RBF kernel (optionally behind a StandardScaler)
- GridSearchCV over SVR hyperparameters with k-fold cross-validation

Hyperparameters are read from config/ml.yaml so they can be tuned
without modifying code. The training pipelines (fit/predict, metrics,
importance) live in beer_reviews.training.
"""

from __future__ import annotations

from typing import Any, Dict

from sklearn.model_selection import GridSearchCV, KFold
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler
from sklearn.svm import SVR

from beer_reviews.utils.training_utils import load_yaml_config


DEFAULT_ML_CONFIG_PATH = "config/ml.yaml"


# ---------------------------------------------------------------------------
# Config loading
# ---------------------------------------------------------------------------


def load_ml_config(config_path: str = DEFAULT_ML_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load and return the ML configuration dictionary.

    Parameters
    ----------
    config_path : str
        Path to the ML YAML configuration file.

    Returns
    -------
    Dict[str, Any]
        Parsed configuration with "general", "svm", "cross_validation",
        and "importance" sections.
    """
    return load_yaml_config(
        config_path,
        required_sections=("general", "svm"),
        kind="ML config",
    )


# ---------------------------------------------------------------------------
# Model builders
# ---------------------------------------------------------------------------


def build_svr(cfg: Dict[str, Any]) -> SVR:
    mcfg = cfg["svm"]
    return SVR(
        kernel=str(mcfg.get("kernel", "rbf")),
        C=float(mcfg.get("C", 1.0)),
        gamma=mcfg.get("gamma", "scale"),
        epsilon=float(mcfg.get("epsilon", 0.1)),
        max_iter=int(mcfg.get("max_iter", -1)),
    )


def build_regressor(cfg: Dict[str, Any]):
    """
    Build the SVR, wrapped with a StandardScaler when
    general.use_feature_scaling is set.

    The scaler uses with_mean=False so sparse tf-idf input stays sparse.
    Grid-search parameter names then need the "svr__" prefix, which
    ``build_grid_search`` adds.
    """
    model = build_svr(cfg)
    general_cfg = cfg.get("general", {}) or {}
    if not bool(general_cfg.get("use_feature_scaling", True)):
        return model

    return Pipeline(
        [
            ("scaler", StandardScaler(with_mean=False)),
            ("svr", model),
        ]
    )


def build_grid_search(cfg: Dict[str, Any]) -> GridSearchCV:
    """
    Wrap the regressor in a cross-validated grid search.

    The grid comes from cross_validation.param_grid in config/ml.yaml,
    with keys named after SVR parameters (C, gamma, epsilon).
    """
    cv_cfg = cfg.get("cross_validation", {}) or {}
    general_cfg = cfg.get("general", {}) or {}

    estimator = build_regressor(cfg)
    prefix = "svr__" if isinstance(estimator, Pipeline) else ""

    raw_grid = cv_cfg.get("param_grid") or {"C": [float(cfg["svm"].get("C", 1.0))]}
    param_grid = {f"{prefix}{name}": list(values) for name, values in raw_grid.items()}

    folds = KFold(
        n_splits=int(cv_cfg.get("n_splits", 5)),
        shuffle=True,
        random_state=int(general_cfg.get("random_state", 42)),
    )

    return GridSearchCV(
        estimator=estimator,
        param_grid=param_grid,
        scoring=str(cv_cfg.get("scoring", "neg_root_mean_squared_error")),
        cv=folds,
        n_jobs=cv_cfg.get("n_jobs", None),
        refit=True,
    )
