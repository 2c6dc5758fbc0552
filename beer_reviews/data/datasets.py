"""
Dataset loading utilities for the beer review dataset.

This module is responsible for:
- reading the dataset configuration from config/data.yaml
- loading the raw CSV file into a pandas DataFrame
- checking the 19-column layout and renaming it to the canonical schema
- dropping incomplete rows and low-alcohol beers
- drawing a reproducible fixed-size sample
- building the metadata table keyed by review index

The resulting DataFrame feeds both the rating analysis (EDA, PCA,
tabular SVR) and the text feature pipeline under beer_reviews.features.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional, Sequence

import pandas as pd

from beer_reviews.exceptions import DataFormatError, EmptyResultError
from beer_reviews.utils.training_utils import load_yaml_config


logger = logging.getLogger(__name__)

DEFAULT_DATA_CONFIG_PATH = "config/data.yaml"

CANONICAL_COLUMNS = (
    "index",
    "abv",
    "beer_id",
    "brewer_id",
    "beer_name",
    "beer_style",
    "appearance",
    "aroma",
    "overall",
    "palate",
    "taste",
    "text",
    "time_struct",
    "time_unix",
    "age_in_seconds",
    "birthday_raw",
    "birthday_unix",
    "gender",
    "profile_name",
)

RATING_COLUMNS = ("appearance", "aroma", "overall", "palate", "taste")


def load_data_config(config_path: str = DEFAULT_DATA_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load and return the full data configuration dictionary.

    Parameters
    ----------
    config_path : str, optional
        Path to the data YAML configuration file.

    Returns
    -------
    Dict[str, Any]
        Dictionary containing the "dataset", "preprocessing", "features",
        and "split" sections.
    """
    return load_yaml_config(
        config_path,
        required_sections=("dataset", "preprocessing", "features", "split"),
        kind="Data config",
    )


def clean_beer_reviews(
    df: pd.DataFrame,
    column_names: Sequence[str] = CANONICAL_COLUMNS,
    abv_threshold: float = 3.0,
    sample_size: Optional[int] = 1000,
    random_state: int = 42,
) -> pd.DataFrame:
    """
    Clean a raw review table.

    Steps, in order:
    - check the column count against ``column_names``
    - drop every row with a missing value in any column
    - rename columns positionally to ``column_names``
    - keep only rows with ``abv > abv_threshold``
    - sample ``sample_size`` rows with a fixed seed

    Parameters
    ----------
    df : pd.DataFrame
        Raw table as read from the CSV.
    column_names : Sequence[str]
        Canonical names, one per input column, in input order.
    abv_threshold : float
        Rows with alcohol-by-volume at or below this value are dropped.
    sample_size : Optional[int]
        Number of rows to keep. If None, no sampling is done. If fewer rows
        survive filtering, all of them are kept.
    random_state : int
        Seed for the sampling step.

    Returns
    -------
    pd.DataFrame
        Cleaned DataFrame with the canonical column names.

    Raises
    ------
    DataFormatError
        If the column count does not match or abv is not numeric.
    EmptyResultError
        If no rows survive the missing-value or abv filters.
    """
    expected = len(column_names)
    if df.shape[1] != expected:
        raise DataFormatError(
            f"Expected {expected} columns, found {df.shape[1]}: {list(df.columns)}",
            stage="loader",
            record_count=len(df),
        )

    n_raw = len(df)
    df = df.dropna(how="any")
    logger.info("Dropped %d incomplete rows; %d remain.", n_raw - len(df), len(df))
    if df.empty:
        raise EmptyResultError(
            "Every row has at least one missing value.",
            stage="loader",
            record_count=n_raw,
        )

    df = df.copy()
    df.columns = list(column_names)

    abv = pd.to_numeric(df["abv"], errors="coerce")
    if abv.isna().any():
        raise DataFormatError(
            f"Column 'abv' has {int(abv.isna().sum())} non-numeric value(s).",
            stage="loader",
            record_count=len(df),
        )
    df["abv"] = abv

    n_before = len(df)
    df = df[df["abv"] > abv_threshold].copy()
    logger.info(
        "Kept %d of %d rows with abv > %.2f.", len(df), n_before, abv_threshold
    )
    if df.empty:
        raise EmptyResultError(
            f"No rows with abv > {abv_threshold}.",
            stage="abv_filter",
            record_count=n_before,
        )

    if sample_size is not None:
        if len(df) > sample_size:
            df = df.sample(n=sample_size, random_state=random_state)
        elif len(df) < sample_size:
            logger.warning(
                "Only %d rows available; requested a sample of %d. Keeping all rows.",
                len(df),
                sample_size,
            )

    df["text"] = df["text"].astype(str)
    return df


def load_beer_reviews(
    config_path: str = DEFAULT_DATA_CONFIG_PATH,
) -> pd.DataFrame:
    """
    Load and clean the beer review dataset according to the configuration.

    Parameters
    ----------
    config_path : str, optional
        Path to the data YAML configuration file.

    Returns
    -------
    pd.DataFrame
        Cleaned DataFrame, see ``clean_beer_reviews``.

    Raises
    ------
    FileNotFoundError
        If the dataset CSV file cannot be found.
    DataFormatError
        If the CSV does not have the configured layout.
    EmptyResultError
        If cleaning removes every row.
    """
    cfg = load_data_config(config_path)
    return load_beer_reviews_from_config(cfg)


def load_beer_reviews_from_config(cfg: Dict[str, Any]) -> pd.DataFrame:
    """
    Same as ``load_beer_reviews`` but takes an already-loaded config dict.
    """
    dataset_cfg = cfg["dataset"]

    csv_path = dataset_cfg.get("path", "data/raw/beer_reviews.csv")
    column_names = dataset_cfg.get("column_names") or CANONICAL_COLUMNS
    sample_size = dataset_cfg.get("sample_size", 1000)

    if not os.path.exists(csv_path):
        raise FileNotFoundError(f"Dataset CSV not found at: {csv_path}")

    df = pd.read_csv(csv_path, sep=dataset_cfg.get("delimiter", ","))
    logger.info("Read %d rows from %s", len(df), csv_path)

    return clean_beer_reviews(
        df,
        column_names=column_names,
        abv_threshold=float(dataset_cfg.get("abv_threshold", 3.0)),
        sample_size=int(sample_size) if sample_size is not None else None,
        random_state=int(dataset_cfg.get("random_state", 42)),
    )


def build_metadata(
    df: pd.DataFrame,
    target_column: str = "abv",
    index_column: str = "index",
) -> pd.DataFrame:
    """
    Build the per-document metadata table used to align features and target.

    The table is deduplicated on ``index_column`` (first occurrence wins)
    and indexed by it, so joins never depend on row position.

    Parameters
    ----------
    df : pd.DataFrame
        Cleaned review DataFrame.
    target_column : str
        Regression target column.
    index_column : str
        Document identifier column.

    Returns
    -------
    pd.DataFrame
        Metadata indexed by document id.
    """
    for col in (index_column, target_column):
        if col not in df.columns:
            raise DataFormatError(
                f"Column '{col}' not found. Available columns: {list(df.columns)}",
                stage="metadata",
                record_count=len(df),
            )

    meta = df.drop_duplicates(subset=[index_column], keep="first")
    meta = meta.set_index(index_column, drop=True)
    return meta
