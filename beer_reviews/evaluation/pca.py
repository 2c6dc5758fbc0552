"""
Principal component analysis of the numeric review columns.

The aspect ratings are strongly correlated with each other, and PCA
shows how much of their joint variation a single "overall quality"
direction explains. Columns are standardized first so abv (percent)
and the 1-5 ratings contribute on the same scale.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
import pandas as pd
from sklearn.decomposition import PCA
from sklearn.preprocessing import StandardScaler

from beer_reviews.data.datasets import RATING_COLUMNS
from beer_reviews.exceptions import EmptyResultError


@dataclass(eq=False)
class PCAResult:
    """
    Attributes
    ----------
    explained_variance : pd.DataFrame
        One row per component: "component", "explained_variance_ratio",
        "cumulative_ratio".
    loadings : pd.DataFrame
        Rows are input columns, columns are components (PC1, PC2, ...).
    scores : pd.DataFrame
        Projected observations, indexed like the input rows.
    model : PCA
        The fitted scikit-learn PCA.
    """

    explained_variance: pd.DataFrame
    loadings: pd.DataFrame
    scores: pd.DataFrame
    model: PCA


def run_rating_pca(
    df: pd.DataFrame,
    columns: Sequence[str] = RATING_COLUMNS + ("abv",),
    n_components: Optional[int] = None,
    scale: bool = True,
) -> PCAResult:
    """
    Fit PCA on the given numeric columns.

    Parameters
    ----------
    df : pd.DataFrame
        Cleaned review table.
    columns : Sequence[str]
        Numeric columns to include.
    n_components : Optional[int]
        Number of components to keep; all of them if None.
    scale : bool
        Standardize each column to unit variance before fitting.

    Returns
    -------
    PCAResult
        Explained variance, loadings, scores, and the fitted model.
    """
    data = df[list(columns)].apply(pd.to_numeric, errors="coerce").dropna()
    if len(data) < 2:
        raise EmptyResultError(
            "PCA needs at least two complete rows.",
            stage="pca",
            record_count=len(data),
        )

    values = data.to_numpy(dtype=float)
    if scale:
        values = StandardScaler().fit_transform(values)

    model = PCA(n_components=n_components)
    projected = model.fit_transform(values)

    names = [f"PC{i + 1}" for i in range(model.n_components_)]

    explained = pd.DataFrame(
        {
            "component": names,
            "explained_variance_ratio": model.explained_variance_ratio_,
            "cumulative_ratio": np.cumsum(model.explained_variance_ratio_),
        }
    )
    loadings = pd.DataFrame(model.components_.T, index=list(columns), columns=names)
    scores = pd.DataFrame(projected, index=data.index, columns=names)

    return PCAResult(
        explained_variance=explained,
        loadings=loadings,
        scores=scores,
        model=model,
    )
