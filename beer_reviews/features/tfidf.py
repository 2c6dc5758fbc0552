"""
TF-IDF weighting of long-form term counts.

Given the count table restricted to the vocabulary, each (document,
token) row gets three new columns:

- tf:      n / total count of vocabulary tokens in that document
- idf:     ln(N / number of documents containing the token), where N is
           the number of documents that have at least one vocabulary token
- tf_idf:  tf * idf

A token present in every document gets idf = 0 and therefore a zero
weight. No division by zero can occur: every row belongs to a document
with a positive total, and every token has a document frequency >= 1.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from beer_reviews.exceptions import EmptyResultError


def compute_tfidf(counts: pd.DataFrame) -> pd.DataFrame:
    """
    Add tf, idf, and tf_idf columns to a count table.

    Parameters
    ----------
    counts : pd.DataFrame
        Columns ["doc_id", "token", "n"], restricted to the vocabulary.

    Returns
    -------
    pd.DataFrame
        Copy of ``counts`` with float columns "tf", "idf", and "tf_idf".

    Raises
    ------
    EmptyResultError
        If the count table is empty.
    """
    if counts.empty:
        raise EmptyResultError(
            "No (document, token) rows left to weight.",
            stage="tfidf",
            record_count=0,
        )

    weighted = counts.copy()

    doc_totals = weighted.groupby("doc_id")["n"].transform("sum")
    weighted["tf"] = weighted["n"] / doc_totals

    n_docs = weighted["doc_id"].nunique()
    doc_freq = weighted.groupby("token")["doc_id"].transform("nunique")
    weighted["idf"] = np.log(n_docs / doc_freq.astype(float))

    weighted["tf_idf"] = weighted["tf"] * weighted["idf"]
    return weighted
