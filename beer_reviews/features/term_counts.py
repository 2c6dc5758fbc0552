"""
Per-document term counts and vocabulary selection.

Counts are kept in long form, one row per (document, token) pair:

    doc_id | token | n

which is what the tf-idf stage and the matrix builder consume. A
document whose tokens were all filtered out simply has no rows.
"""

from __future__ import annotations

import logging
from typing import FrozenSet, Iterable

import pandas as pd

from beer_reviews.exceptions import EmptyResultError
from beer_reviews.features.preprocessing import TokenPair


logger = logging.getLogger(__name__)

COUNT_COLUMNS = ["doc_id", "token", "n"]


def count_terms(tokens: Iterable[TokenPair]) -> pd.DataFrame:
    """
    Count token occurrences within each document.

    Parameters
    ----------
    tokens : Iterable[TokenPair]
        (document id, token) pairs, typically the filtered token stream.

    Returns
    -------
    pd.DataFrame
        Columns ["doc_id", "token", "n"], one row per distinct pair.
    """
    pairs = pd.DataFrame.from_records(list(tokens), columns=["doc_id", "token"])
    if pairs.empty:
        return pd.DataFrame(
            {"doc_id": pd.Series(dtype=object), "token": pd.Series(dtype=str),
             "n": pd.Series(dtype="int64")}
        )

    counts = (
        pairs.groupby(["doc_id", "token"], sort=True)
        .size()
        .rename("n")
        .reset_index()
    )
    return counts[COUNT_COLUMNS]


def document_frequency(counts: pd.DataFrame) -> pd.Series:
    """
    Number of distinct documents containing each token.
    """
    return counts.groupby("token")["doc_id"].nunique().rename("document_frequency")


def select_vocabulary(
    counts: pd.DataFrame,
    min_document_frequency: int = 100,
) -> FrozenSet[str]:
    """
    Keep tokens that occur in at least ``min_document_frequency`` documents.

    Parameters
    ----------
    counts : pd.DataFrame
        Full count table from ``count_terms``.
    min_document_frequency : int
        Minimum number of distinct documents a token must appear in.

    Returns
    -------
    FrozenSet[str]
        The vocabulary. It does not change for the rest of the run.

    Raises
    ------
    EmptyResultError
        If no token reaches the threshold.
    """
    doc_freq = document_frequency(counts)
    vocabulary = frozenset(doc_freq[doc_freq >= min_document_frequency].index)
    logger.info(
        "Vocabulary: %d of %d tokens occur in >= %d documents.",
        len(vocabulary),
        len(doc_freq),
        min_document_frequency,
    )
    if not vocabulary:
        raise EmptyResultError(
            f"No token occurs in at least {min_document_frequency} documents.",
            stage="vocabulary",
            record_count=len(counts),
        )
    return vocabulary


def restrict_to_vocabulary(
    counts: pd.DataFrame,
    vocabulary: Iterable[str],
) -> pd.DataFrame:
    """
    Drop count rows whose token is not in the vocabulary.
    """
    mask = counts["token"].isin(set(vocabulary))
    return counts[mask].reset_index(drop=True)
