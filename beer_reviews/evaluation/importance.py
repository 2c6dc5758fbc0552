"""
Feature importance ranking for fitted regressors.

SVR with a non-linear kernel has no coefficients to read off, so the
ranking is model-agnostic: permutation importance on held-out data,
i.e. how much the score drops when one feature's values are shuffled.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
import pandas as pd
import scipy.sparse as sp
from sklearn.inspection import permutation_importance


def rank_feature_importance(
    model,
    X,
    y,
    feature_names: Sequence[str],
    n_repeats: int = 5,
    scoring: str = "neg_root_mean_squared_error",
    random_state: int = 42,
    top_k: Optional[int] = None,
) -> pd.DataFrame:
    """
    Rank features by permutation importance.

    Parameters
    ----------
    model
        Fitted estimator with a ``predict`` method.
    X
        Feature matrix (dense or scipy sparse).
    y
        Targets aligned with the rows of X.
    feature_names : Sequence[str]
        One name per column of X.
    n_repeats : int
        Number of shuffles per feature.
    scoring : str
        scikit-learn scorer name.
    random_state : int
        Seed for the shuffles.
    top_k : Optional[int]
        If given, return only the top_k features.

    Returns
    -------
    pd.DataFrame
        Columns ["feature", "importance", "importance_std"], sorted by
        importance, descending.
    """
    if X.shape[1] != len(feature_names):
        raise ValueError(
            f"Got {len(feature_names)} feature names for {X.shape[1]} columns."
        )

    # permutation_importance shuffles columns in place; it needs a dense array.
    X_dense = X.toarray() if sp.issparse(X) else np.asarray(X)

    result = permutation_importance(
        model,
        X_dense,
        np.asarray(y, dtype=float),
        n_repeats=n_repeats,
        scoring=scoring,
        random_state=random_state,
    )

    ranking = pd.DataFrame(
        {
            "feature": list(feature_names),
            "importance": result.importances_mean,
            "importance_std": result.importances_std,
        }
    ).sort_values("importance", ascending=False, kind="mergesort")

    if top_k is not None and top_k > 0:
        ranking = ranking.head(top_k)

    return ranking.reset_index(drop=True)
