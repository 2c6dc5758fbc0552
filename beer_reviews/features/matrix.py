"""
Document-term matrix construction.

The weighted long-form table is pivoted into a scipy sparse matrix with
one row per document id and one column per vocabulary token. Rows are
keyed by document id: the target vector is looked up from the metadata
table by id, so reordering rows during the pivot can never misalign
features and target.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import numpy as np
import pandas as pd
import scipy.sparse as sp

from beer_reviews.exceptions import AlignmentError, DataFormatError, EmptyResultError


@dataclass(frozen=True, eq=False)
class DocumentTermMatrix:
    """
    Sparse document-term matrix aligned with its regression target.

    Attributes
    ----------
    matrix : sp.csr_matrix
        Shape (len(doc_ids), len(terms)).
    doc_ids : pd.Index
        Row keys, sorted.
    terms : pd.Index
        Column keys, sorted.
    target : pd.Series
        Target value per document, indexed by doc id in row order.
    """

    matrix: sp.csr_matrix
    doc_ids: pd.Index
    terms: pd.Index
    target: pd.Series

    @property
    def shape(self):
        return self.matrix.shape

    def row_positions(self, doc_ids: Iterable) -> np.ndarray:
        """
        Row positions for the given document ids.

        Raises
        ------
        AlignmentError
            If any id is not a row of this matrix.
        """
        ids = pd.Index(list(doc_ids))
        positions = self.doc_ids.get_indexer(ids)
        if (positions < 0).any():
            missing = list(ids[positions < 0][:10])
            raise AlignmentError(
                f"Document ids not in matrix: {missing}",
                stage="matrix_builder",
                record_count=len(self.doc_ids),
            )
        return positions

    def subset(self, doc_ids: Iterable) -> "DocumentTermMatrix":
        """
        Rows for ``doc_ids``, in the order given.
        """
        ids = pd.Index(list(doc_ids), name=self.doc_ids.name)
        positions = self.row_positions(ids)
        return DocumentTermMatrix(
            matrix=self.matrix[positions],
            doc_ids=ids,
            terms=self.terms,
            target=self.target.loc[ids],
        )

    def to_frame(self) -> pd.DataFrame:
        """
        Dense DataFrame view: doc ids as index, terms as columns.
        """
        return pd.DataFrame(
            self.matrix.toarray(), index=self.doc_ids, columns=self.terms
        )


def build_document_term_matrix(
    weighted: pd.DataFrame,
    metadata: pd.DataFrame,
    target_column: str = "abv",
    value_column: str = "tf_idf",
) -> DocumentTermMatrix:
    """
    Pivot weighted (document, token) rows into a sparse matrix.

    Parameters
    ----------
    weighted : pd.DataFrame
        Output of ``compute_tfidf``; needs "doc_id", "token", and
        ``value_column``.
    metadata : pd.DataFrame
        Per-document metadata indexed by document id. Duplicate ids are
        collapsed to their first row.
    target_column : str
        Metadata column holding the regression target.
    value_column : str
        Column of ``weighted`` used for the cell values.

    Returns
    -------
    DocumentTermMatrix
        Matrix with unlisted (document, token) cells equal to zero.

    Raises
    ------
    EmptyResultError
        If ``weighted`` is empty.
    DataFormatError
        If ``metadata`` has no ``target_column``.
    AlignmentError
        If a document id in the matrix has no metadata row.
    """
    if weighted.empty:
        raise EmptyResultError(
            "No weighted rows to pivot.", stage="matrix_builder", record_count=0
        )
    if target_column not in metadata.columns:
        raise DataFormatError(
            f"Target column '{target_column}' not found in metadata. "
            f"Available columns: {list(metadata.columns)}",
            stage="matrix_builder",
            record_count=len(metadata),
        )

    meta = metadata[~metadata.index.duplicated(keep="first")]

    doc_ids = pd.Index(np.sort(weighted["doc_id"].unique()), name="doc_id")
    terms = pd.Index(np.sort(weighted["token"].unique()), name="token")

    missing = doc_ids.difference(meta.index)
    if len(missing) > 0:
        raise AlignmentError(
            f"{len(missing)} document id(s) have no metadata row, "
            f"e.g. {list(missing[:10])}",
            stage="matrix_builder",
            record_count=len(doc_ids),
        )

    rows = doc_ids.get_indexer(weighted["doc_id"])
    cols = terms.get_indexer(weighted["token"])
    values = weighted[value_column].to_numpy(dtype=float)

    matrix = sp.csr_matrix(
        (values, (rows, cols)), shape=(len(doc_ids), len(terms))
    )
    # Zero-idf entries are stored explicitly by the constructor.
    matrix.eliminate_zeros()

    target = pd.Series(
        meta.loc[doc_ids, target_column].to_numpy(dtype=float),
        index=doc_ids,
        name=target_column,
    )

    return DocumentTermMatrix(
        matrix=matrix, doc_ids=doc_ids, terms=terms, target=target
    )
