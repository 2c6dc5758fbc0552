"""
Tests for term counting, vocabulary selection, and tf-idf weighting.
"""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from beer_reviews.exceptions import EmptyResultError
from beer_reviews.features.preprocessing import preprocess_documents, tokenize_documents
from beer_reviews.features.term_counts import (
    count_terms,
    document_frequency,
    restrict_to_vocabulary,
    select_vocabulary,
)
from beer_reviews.features.tfidf import compute_tfidf


DOCS = [
    (1, "great hoppy aroma aroma"),
    (2, "great taste"),
    (3, "hoppy taste taste"),
]


def _counts(docs=DOCS, stopwords=frozenset()):
    return count_terms(preprocess_documents(docs, stopword_set=set(stopwords)))


def test_count_terms_collapses_occurrences():
    """
    Repeated tokens in one document become a single row with their count.
    """
    counts = _counts()
    doc1 = counts[counts["doc_id"] == 1].set_index("token")["n"].to_dict()

    assert doc1 == {"aroma": 2, "great": 1, "hoppy": 1}
    assert list(counts.columns) == ["doc_id", "token", "n"]


def test_count_terms_skips_documents_without_tokens():
    """
    Documents without tokens contribute no rows.
    """
    counts = _counts(docs=[(1, "the a"), (2, "malty")], stopwords={"the", "a"})

    assert set(counts["doc_id"]) == {2}
    assert (counts["n"] > 0).all()


def test_count_terms_empty_stream():
    """
    An empty token stream gives an empty, correctly typed table.
    """
    counts = count_terms(iter([]))

    assert counts.empty
    assert list(counts.columns) == ["doc_id", "token", "n"]


def test_select_vocabulary_min_document_frequency():
    """
    Only tokens found in enough distinct documents are kept.
    """
    counts = _counts()
    vocabulary = select_vocabulary(counts, min_document_frequency=2)

    assert vocabulary == frozenset({"great", "hoppy", "taste"})

    doc_freq = document_frequency(counts)
    assert all(doc_freq[token] >= 2 for token in vocabulary)


def test_select_vocabulary_nothing_survives():
    """
    A threshold no token reaches raises EmptyResultError.
    """
    with pytest.raises(EmptyResultError) as excinfo:
        select_vocabulary(_counts(), min_document_frequency=10)

    assert excinfo.value.stage == "vocabulary"


def test_restriction_never_increases_document_totals():
    """
    Restricting to the vocabulary can only lower per-document totals.
    """
    counts = _counts()
    restricted = restrict_to_vocabulary(counts, select_vocabulary(counts, 2))

    before = counts.groupby("doc_id")["n"].sum()
    after = restricted.groupby("doc_id")["n"].sum()

    assert set(restricted["token"]) <= {"great", "hoppy", "taste"}
    assert (after <= before.loc[after.index]).all()


def test_compute_tfidf_values():
    """
    tf, idf and tf_idf match hand-computed values.
    """
    counts = _counts()
    restricted = restrict_to_vocabulary(counts, select_vocabulary(counts, 2))
    weighted = compute_tfidf(restricted).set_index(["doc_id", "token"])

    # doc1 after restriction: great=1, hoppy=1 -> tf 0.5 each, df=2 of 3 docs.
    assert weighted.loc[(1, "great"), "tf"] == pytest.approx(0.5)
    assert weighted.loc[(1, "great"), "idf"] == pytest.approx(np.log(3 / 2))
    assert weighted.loc[(3, "taste"), "tf"] == pytest.approx(2 / 3)
    assert (weighted["tf_idf"] > 0).all()


def test_compute_tfidf_token_in_every_document_has_zero_weight():
    """
    A token in every document gets idf 0 without error.
    """
    counts = count_terms(
        tokenize_documents([(1, "beer hoppy"), (2, "beer malty"), (3, "beer")])
    )
    weighted = compute_tfidf(counts)

    beer = weighted[weighted["token"] == "beer"]
    others = weighted[weighted["token"] != "beer"]

    assert (beer["idf"] == 0).all()
    assert (beer["tf_idf"] == 0).all()
    assert (others["tf_idf"] > 0).all()


def test_compute_tfidf_term_frequencies_sum_to_one():
    """
    Term frequencies within each document sum to one.
    """
    weighted = compute_tfidf(_counts())

    sums = weighted.groupby("doc_id")["tf"].sum()
    assert np.allclose(sums.to_numpy(), 1.0)


def test_compute_tfidf_empty_raises():
    """
    Weighting an empty table raises EmptyResultError.
    """
    with pytest.raises(EmptyResultError):
        compute_tfidf(pd.DataFrame(columns=["doc_id", "token", "n"]))
