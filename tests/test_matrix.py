"""
Tests for the document-term matrix builder, focused on keeping rows
aligned with the metadata target by document id.
"""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from beer_reviews.exceptions import AlignmentError, DataFormatError
from beer_reviews.features.matrix import build_document_term_matrix
from beer_reviews.features.preprocessing import tokenize_documents
from beer_reviews.features.term_counts import (
    count_terms,
    restrict_to_vocabulary,
    select_vocabulary,
)
from beer_reviews.features.tfidf import compute_tfidf


def _weighted(docs, min_df=1):
    counts = count_terms(tokenize_documents(docs))
    restricted = restrict_to_vocabulary(counts, select_vocabulary(counts, min_df))
    return compute_tfidf(restricted)


def test_three_review_example_first_row():
    """
    The first review of the three-review example has weight on "great" and "hoppy" only.
    """
    weighted = _weighted(
        [
            (1, "great hoppy aroma aroma"),
            (2, "great taste"),
            (3, "hoppy taste taste"),
        ],
        min_df=2,
    )
    meta = pd.DataFrame({"abv": [5.0, 6.0, 7.0]}, index=[1, 2, 3])

    dtm = build_document_term_matrix(weighted, meta)
    frame = dtm.to_frame()

    assert list(frame.columns) == ["great", "hoppy", "taste"]
    assert frame.loc[1, "great"] > 0
    assert frame.loc[1, "hoppy"] > 0
    assert frame.loc[1, "taste"] == 0


def test_target_follows_document_id_not_position():
    """
    Shuffled weighted rows and reordered metadata still pair each row with its own target.
    """
    docs = [(30, "amber malt"), (10, "pale malt"), (20, "dark roast malt")]
    weighted = _weighted(docs).sample(frac=1.0, random_state=1)
    # Metadata in yet another order, with a row that has no text features.
    meta = pd.DataFrame(
        {"abv": [9.5, 4.2, 6.8, 5.0]}, index=[20, 30, 99, 10]
    )

    dtm = build_document_term_matrix(weighted, meta)

    assert list(dtm.doc_ids) == [10, 20, 30]
    assert list(dtm.target.index) == [10, 20, 30]
    for doc_id in dtm.doc_ids:
        assert dtm.target.loc[doc_id] == meta.loc[doc_id, "abv"]

    frame = dtm.to_frame()
    assert frame.loc[20, "roast"] > 0
    assert frame.loc[10, "roast"] == 0
    assert frame.loc[30, "amber"] > 0


def test_missing_metadata_raises_alignment_error():
    """
    A document with no metadata row fails in the matrix builder.
    """
    weighted = _weighted([(1, "hoppy"), (2, "malty")])
    meta = pd.DataFrame({"abv": [5.0]}, index=[1])

    with pytest.raises(AlignmentError) as excinfo:
        build_document_term_matrix(weighted, meta)

    assert excinfo.value.stage == "matrix_builder"
    assert excinfo.value.record_count == 2


def test_duplicate_metadata_rows_first_wins():
    """
    Duplicate metadata ids resolve to their first row.
    """
    weighted = _weighted([(1, "hoppy"), (2, "malty")])
    meta = pd.DataFrame({"abv": [5.0, 8.0, 6.0]}, index=[1, 1, 2])

    dtm = build_document_term_matrix(weighted, meta)

    assert dtm.target.loc[1] == 5.0
    assert dtm.target.loc[2] == 6.0


def test_subset_keeps_requested_order():
    """
    subset returns rows in the order asked for and rejects unknown ids.
    """
    weighted = _weighted([(1, "a1 b"), (2, "b c"), (3, "c a1")])
    meta = pd.DataFrame({"abv": [5.0, 6.0, 7.0]}, index=[1, 2, 3])
    dtm = build_document_term_matrix(weighted, meta)

    sub = dtm.subset([3, 1])
    full = dtm.to_frame()

    assert list(sub.doc_ids) == [3, 1]
    assert list(sub.target) == [7.0, 5.0]
    np.testing.assert_allclose(sub.matrix.toarray(), full.loc[[3, 1]].to_numpy())

    with pytest.raises(AlignmentError):
        dtm.subset([4])


def test_missing_target_column_raises_data_format_error():
    """
    Metadata without the target column is a format error from the
    matrix builder.
    """
    weighted = _weighted([(1, "hoppy"), (2, "malty")])
    meta = pd.DataFrame({"x": [1.0, 2.0]}, index=[1, 2])

    with pytest.raises(DataFormatError) as excinfo:
        build_document_term_matrix(weighted, meta)

    assert excinfo.value.stage == "matrix_builder"
    assert excinfo.value.record_count == 2
    assert "abv" in str(excinfo.value)
