"""
Tests for data loading and cleaning.

These tests validate that:

- the data configuration can be loaded and is checked for its sections
- cleaning drops incomplete rows, renames columns, and filters on abv
- sampling is exact, bounded by the input, and reproducible
- malformed input fails with the right error and stage
"""

from __future__ import annotations

import logging

import pytest
import yaml

from beer_reviews.data.datasets import (
    CANONICAL_COLUMNS,
    build_metadata,
    clean_beer_reviews,
    load_beer_reviews,
    load_data_config,
)
from beer_reviews.exceptions import DataFormatError, EmptyResultError


def test_load_data_config_has_required_sections(config_paths):
    """
    The data config loads and carries every section the pipeline reads.
    """
    cfg = load_data_config(config_paths["data"])

    for section in ("dataset", "preprocessing", "features", "split"):
        assert section in cfg


def test_load_data_config_missing_section_raises(tmp_path):
    """
    A config without the required sections is rejected with KeyError.
    """
    path = tmp_path / "bad.yaml"
    path.write_text(yaml.safe_dump({"dataset": {}}), encoding="utf-8")

    with pytest.raises(KeyError):
        load_data_config(str(path))


def test_load_data_config_missing_file_raises(tmp_path):
    """
    A missing config file raises FileNotFoundError.
    """
    with pytest.raises(FileNotFoundError):
        load_data_config(str(tmp_path / "nope.yaml"))


def test_clean_renames_and_filters(raw_reviews):
    """
    Cleaning renames to the canonical schema and drops incomplete and
    low-abv rows.
    """
    df = clean_beer_reviews(raw_reviews, sample_size=None)

    assert list(df.columns) == list(CANONICAL_COLUMNS)
    # 10 rows with a missing value, 10 more with abv 2.5.
    assert len(df) == len(raw_reviews) - 20
    assert (df["abv"] > 3.0).all()
    assert not df.isna().any().any()


def test_clean_samples_exactly_n(raw_reviews):
    """
    Sampling returns exactly the requested number of distinct reviews.
    """
    df = clean_beer_reviews(raw_reviews, sample_size=50, random_state=7)

    assert len(df) == 50
    assert df["index"].is_unique


def test_clean_sample_is_reproducible(raw_reviews):
    """
    The same seed draws the same sample.
    """
    first = clean_beer_reviews(raw_reviews, sample_size=30, random_state=3)
    second = clean_beer_reviews(raw_reviews, sample_size=30, random_state=3)

    assert list(first["index"]) == list(second["index"])


def test_clean_never_exceeds_input_rows(raw_reviews, package_caplog):
    """
    Asking for more rows than survive keeps them all and logs a warning.
    """
    df = clean_beer_reviews(raw_reviews, sample_size=10_000)

    assert len(df) <= len(raw_reviews)
    assert len(df) == len(raw_reviews) - 20
    assert any(
        r.levelno == logging.WARNING and "Keeping all rows" in r.getMessage()
        for r in package_caplog.records
    )


def test_clean_sample_size_equal_to_rows_does_not_warn(raw_reviews, package_caplog):
    """
    When exactly ``sample_size`` rows survive, nothing is missing and no
    warning is logged.
    """
    df = clean_beer_reviews(raw_reviews, sample_size=len(raw_reviews) - 20)

    assert len(df) == len(raw_reviews) - 20
    assert not any(
        "Keeping all rows" in r.getMessage() for r in package_caplog.records
    )


def test_clean_wrong_column_count_raises(raw_reviews):
    """
    A table without 19 columns fails in the loader stage.
    """
    with pytest.raises(DataFormatError) as excinfo:
        clean_beer_reviews(raw_reviews.iloc[:, :18])

    assert excinfo.value.stage == "loader"
    assert excinfo.value.record_count == len(raw_reviews)


def test_clean_non_numeric_abv_raises(raw_reviews):
    """
    An abv value that is not a number is a format error, not a silent drop.
    """
    raw = raw_reviews.copy()
    raw["beer/ABV"] = raw["beer/ABV"].astype(object)
    raw.loc[0, "beer/ABV"] = "strong"

    with pytest.raises(DataFormatError) as excinfo:
        clean_beer_reviews(raw)

    assert excinfo.value.stage == "loader"
    assert "non-numeric" in str(excinfo.value)


def test_clean_all_rows_below_threshold_raises(raw_reviews):
    """
    Filtering out every row raises EmptyResultError from the abv filter.
    """
    with pytest.raises(EmptyResultError) as excinfo:
        clean_beer_reviews(raw_reviews, abv_threshold=100.0)

    assert excinfo.value.stage == "abv_filter"
    assert "records=" in str(excinfo.value)


def test_load_beer_reviews_from_config(config_paths):
    """
    Loading through the config reads the CSV and applies the sample size.
    """
    df = load_beer_reviews(config_paths["data"])

    assert len(df) == 80
    assert "text" in df.columns
    assert df["text"].map(lambda t: isinstance(t, str)).all()


def test_build_metadata_deduplicates_on_index(raw_reviews):
    """
    Duplicate review indices collapse to their first row.
    """
    df = clean_beer_reviews(raw_reviews, sample_size=None)
    doubled = df.iloc[[0, 0, 1]].copy()
    doubled.iloc[1, doubled.columns.get_loc("abv")] = 99.0

    meta = build_metadata(doubled)

    assert meta.index.is_unique
    assert len(meta) == 2
    assert meta.loc[df.iloc[0]["index"], "abv"] == df.iloc[0]["abv"]


def test_build_metadata_missing_target_raises(raw_reviews):
    """
    A missing target column is reported as a format error.
    """
    df = clean_beer_reviews(raw_reviews, sample_size=None)

    with pytest.raises(DataFormatError):
        build_metadata(df, target_column="not_a_column")
