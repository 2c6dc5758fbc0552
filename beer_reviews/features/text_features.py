"""
Review text -> document-term matrix, end to end.

This module strings together the text stages:

    tokenize -> drop stopwords -> count -> select vocabulary
             -> restrict -> tf-idf -> pivot

and reads their parameters from the "preprocessing" and "features"
sections of config/data.yaml. The stage functions themselves take plain
arguments and can be called directly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet

import pandas as pd

from beer_reviews.data.datasets import build_metadata
from beer_reviews.features.matrix import DocumentTermMatrix, build_document_term_matrix
from beer_reviews.features.preprocessing import get_stopword_set, preprocess_documents
from beer_reviews.features.term_counts import (
    count_terms,
    restrict_to_vocabulary,
    select_vocabulary,
)
from beer_reviews.features.tfidf import compute_tfidf


logger = logging.getLogger(__name__)


@dataclass(eq=False)
class TextFeatures:
    """
    Every intermediate product of the text pipeline for one run.
    """

    counts: pd.DataFrame
    vocabulary: FrozenSet[str]
    weighted: pd.DataFrame
    metadata: pd.DataFrame
    dtm: DocumentTermMatrix


def build_text_features(
    df: pd.DataFrame,
    data_cfg: Dict[str, Any],
) -> TextFeatures:
    """
    Build the tf-idf document-term matrix for a cleaned review DataFrame.

    Parameters
    ----------
    df : pd.DataFrame
        Output of ``clean_beer_reviews`` (canonical column names).
    data_cfg : Dict[str, Any]
        Full data configuration (see ``load_data_config``).

    Returns
    -------
    TextFeatures
        Count table, vocabulary, weighted table, metadata, and matrix.
    """
    pre_cfg = data_cfg.get("preprocessing", {}) or {}
    feat_cfg = data_cfg.get("features", {}) or {}

    index_column = feat_cfg.get("index_column", "index")
    text_column = feat_cfg.get("text_column", "text")
    target_column = feat_cfg.get("target_column", "abv")
    min_df = int(feat_cfg.get("min_document_frequency", 100))

    sw_cfg = pre_cfg.get("stopwords", {}) or {}
    if bool(sw_cfg.get("enabled", True)):
        stopword_set = get_stopword_set(
            source=sw_cfg.get("source", "sklearn"),
            language=sw_cfg.get("language", "english"),
            extra_words=sw_cfg.get("extra_words"),
        )
    else:
        stopword_set = set()

    stem_cfg = pre_cfg.get("stemming", {}) or {}
    stemming = stem_cfg.get("algorithm", "porter") if stem_cfg.get("enabled") else None

    documents = zip(df[index_column], df[text_column])
    tokens = preprocess_documents(
        documents,
        stopword_set=stopword_set,
        lowercase=bool(pre_cfg.get("lowercase", True)),
        remove_numbers=bool(pre_cfg.get("remove_numbers", False)),
        stemming=stemming,
    )

    counts = count_terms(tokens)
    logger.info(
        "Counted %d (document, token) pairs over %d documents.",
        len(counts),
        counts["doc_id"].nunique(),
    )

    vocabulary = select_vocabulary(counts, min_document_frequency=min_df)
    restricted = restrict_to_vocabulary(counts, vocabulary)
    weighted = compute_tfidf(restricted)

    metadata = build_metadata(df, target_column=target_column, index_column=index_column)
    dtm = build_document_term_matrix(weighted, metadata, target_column=target_column)
    logger.info("Document-term matrix shape: %s", dtm.shape)

    return TextFeatures(
        counts=counts,
        vocabulary=vocabulary,
        weighted=weighted,
        metadata=metadata,
        dtm=dtm,
    )
