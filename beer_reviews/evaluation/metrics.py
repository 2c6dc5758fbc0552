"""
Evaluation metrics for the regression experiments.

This module centralizes the computation of the metrics reported for
both the rating-based and the text-based SVR models:

- RMSE
- MAE
- R^2
- Pearson correlation between predictions and targets

The helper functions here are used by beer_reviews.training.train_svm.
"""

from __future__ import annotations

from typing import Dict, Sequence, Union

import numpy as np
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score


ArrayLike = Union[Sequence[float], np.ndarray]


def compute_regression_metrics(
    y_true: ArrayLike,
    y_pred: ArrayLike,
) -> Dict[str, float]:
    """
    Compute standard regression metrics for a set of predictions.

    Parameters
    ----------
    y_true : ArrayLike
        Ground-truth targets.
    y_pred : ArrayLike
        Predictions, same shape as y_true.

    Returns
    -------
    Dict[str, float]
        Keys "rmse", "mae", "r2", "pearson_r", and "n". pearson_r is NaN
        when either side is constant.
    """
    y_true_arr = np.asarray(y_true, dtype=float)
    y_pred_arr = np.asarray(y_pred, dtype=float)

    if y_true_arr.shape != y_pred_arr.shape:
        raise ValueError(
            f"Shape mismatch: y_true {y_true_arr.shape} vs y_pred {y_pred_arr.shape}"
        )

    rmse = float(np.sqrt(mean_squared_error(y_true_arr, y_pred_arr)))
    mae = float(mean_absolute_error(y_true_arr, y_pred_arr))
    r2 = float(r2_score(y_true_arr, y_pred_arr)) if len(y_true_arr) > 1 else float("nan")

    if len(y_true_arr) > 1 and y_true_arr.std() > 0 and y_pred_arr.std() > 0:
        pearson_r = float(np.corrcoef(y_true_arr, y_pred_arr)[0, 1])
    else:
        pearson_r = float("nan")

    return {
        "rmse": rmse,
        "mae": mae,
        "r2": r2,
        "pearson_r": pearson_r,
        "n": int(len(y_true_arr)),
    }
