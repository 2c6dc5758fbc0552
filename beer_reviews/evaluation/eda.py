"""
Exploratory summaries of the cleaned review table.

These are the tables behind the exploratory section of the analysis:
distribution of the aspect ratings and abv, how the ratings correlate
with each other, and which styles and brewers dominate the sample.
"""

from __future__ import annotations

from typing import Dict, Sequence

import pandas as pd

from beer_reviews.data.datasets import RATING_COLUMNS


def describe_numeric(
    df: pd.DataFrame,
    columns: Sequence[str] = ("abv",) + RATING_COLUMNS,
) -> pd.DataFrame:
    """
    Summary statistics (count, mean, std, quartiles) for numeric columns,
    one row per column.
    """
    return df[list(columns)].apply(pd.to_numeric, errors="coerce").describe().T


def rating_correlations(
    df: pd.DataFrame,
    columns: Sequence[str] = ("abv",) + RATING_COLUMNS,
    method: str = "pearson",
) -> pd.DataFrame:
    """
    Pairwise correlation matrix between abv and the aspect ratings.
    """
    return df[list(columns)].apply(pd.to_numeric, errors="coerce").corr(method=method)


def top_categories(
    df: pd.DataFrame,
    column: str = "beer_style",
    top_k: int = 10,
) -> pd.DataFrame:
    """
    Most frequent values of a categorical column with their share.
    """
    counts = df[column].value_counts()
    out = pd.DataFrame(
        {
            column: counts.index,
            "count": counts.to_numpy(),
            "share": (counts / counts.sum()).to_numpy(),
        }
    )
    return out.head(top_k)


def mean_rating_by(
    df: pd.DataFrame,
    group_column: str = "beer_style",
    rating_column: str = "overall",
    min_reviews: int = 5,
) -> pd.DataFrame:
    """
    Mean rating and abv per group, for groups with at least
    ``min_reviews`` reviews, sorted by mean rating.
    """
    grouped = df.groupby(group_column).agg(
        n_reviews=(rating_column, "size"),
        mean_rating=(rating_column, "mean"),
        mean_abv=("abv", "mean"),
    )
    grouped = grouped[grouped["n_reviews"] >= min_reviews]
    return grouped.sort_values("mean_rating", ascending=False).reset_index()


def summarize_reviews(df: pd.DataFrame, top_k: int = 10) -> Dict[str, pd.DataFrame]:
    """
    Build every exploratory table at once.

    Returns
    -------
    Dict[str, pd.DataFrame]
        Keys "numeric_summary", "correlations", "top_styles",
        "top_brewers", "style_ratings".
    """
    return {
        "numeric_summary": describe_numeric(df),
        "correlations": rating_correlations(df),
        "top_styles": top_categories(df, "beer_style", top_k=top_k),
        "top_brewers": top_categories(df, "brewer_id", top_k=top_k),
        "style_ratings": mean_rating_by(df, "beer_style"),
    }
