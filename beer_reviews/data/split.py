"""
Train/test splitting utilities for the beer review dataset.

The regression target (alcohol-by-volume) is continuous, so stratification
is done on quantile bins of the target: each bin is split in the same
train/test proportion, which keeps the target distribution similar on
both sides.

We rely on scikit-learn's train_test_split and support:
- configurable test_size, number of bins, and random_state
- splitting by document id, never by row position
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split

from beer_reviews.exceptions import EmptyResultError
from beer_reviews.features.matrix import DocumentTermMatrix


logger = logging.getLogger(__name__)


def _quantile_bins(target: pd.Series, n_bins: int) -> Optional[pd.Series]:
    """
    Assign each value to a quantile bin, merging down to fewer bins until
    every bin has at least two members.

    Returns None if no binning with two or more bins satisfies that.
    """
    if target.nunique() < 2:
        return None
    for q in range(min(n_bins, len(target) // 2), 1, -1):
        bins = pd.qcut(target, q=q, labels=False, duplicates="drop")
        counts = bins.value_counts()
        if len(counts) >= 2 and counts.min() >= 2:
            return bins
    return None


def stratified_split_ids(
    target: pd.Series,
    test_size: float = 0.2,
    n_bins: int = 5,
    stratify: bool = True,
    random_state: int = 42,
) -> Tuple[pd.Index, pd.Index]:
    """
    Partition document ids into train and test sets.

    Parameters
    ----------
    target : pd.Series
        Regression target indexed by document id.
    test_size : float
        Fraction of documents placed in the test set.
    n_bins : int
        Maximum number of quantile bins used for stratification.
    stratify : bool
        If False, do a plain shuffled split.
    random_state : int
        Seed for the split.

    Returns
    -------
    Tuple[pd.Index, pd.Index]
        (train_ids, test_ids), disjoint and together covering every id.
    """
    if len(target) < 2:
        raise EmptyResultError(
            "Need at least two documents to split.",
            stage="split",
            record_count=len(target),
        )

    ids = np.asarray(target.index)

    bins = _quantile_bins(target, n_bins) if stratify else None
    if stratify and bins is None:
        logger.warning(
            "Cannot build quantile bins for %d documents; falling back to a shuffled split.",
            len(target),
        )

    n_test = min(max(int(np.ceil(round(test_size * len(ids), 6))), 1), len(ids) - 1)
    if bins is not None and n_test < bins.nunique():
        # train_test_split needs at least one test sample per stratum.
        n_test = int(bins.nunique())

    train_ids, test_ids = train_test_split(
        ids,
        test_size=n_test,
        random_state=random_state,
        stratify=None if bins is None else bins.to_numpy(),
        shuffle=True,
    )

    return pd.Index(train_ids, name=target.index.name), pd.Index(
        test_ids, name=target.index.name
    )


def split_document_term_matrix(
    dtm: DocumentTermMatrix,
    train_ids: pd.Index,
    test_ids: pd.Index,
):
    """
    Slice a document-term matrix and its target by document id.

    Returns
    -------
    (X_train, X_test, y_train, y_test)
        Sparse feature matrices and target Series, each keyed by the ids
        passed in, in that order.
    """
    train = dtm.subset(train_ids)
    test = dtm.subset(test_ids)
    return train.matrix, test.matrix, train.target, test.target


def split_from_config(
    target: pd.Series,
    split_cfg: Dict[str, Any],
) -> Tuple[pd.Index, pd.Index]:
    """
    Run ``stratified_split_ids`` with parameters from the "split" section
    of config/data.yaml.
    """
    return stratified_split_ids(
        target,
        test_size=float(split_cfg.get("test_size", 0.2)),
        n_bins=int(split_cfg.get("n_bins", 5)),
        stratify=bool(split_cfg.get("stratify", True)),
        random_state=int(split_cfg.get("random_state", 42)),
    )
