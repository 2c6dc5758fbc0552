"""
Shared fixtures: a small synthetic review table in the raw 19-column
layout, and config files pointing at it under tmp_path.
"""

from __future__ import annotations

import logging
import os

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest
import yaml


RAW_COLUMNS = [
    "index",
    "beer/ABV",
    "beer/beerId",
    "beer/brewerId",
    "beer/name",
    "beer/style",
    "review/appearance",
    "review/aroma",
    "review/overall",
    "review/palate",
    "review/taste",
    "review/text",
    "review/timeStruct",
    "review/timeUnix",
    "user/ageInSeconds",
    "user/birthdayRaw",
    "user/birthdayUnix",
    "user/gender",
    "user/profileName",
]

FLAVOURS = ["hoppy", "malty", "citrus", "roasty", "sweet", "bitter"]
STYLES = ["IPA", "Stout", "Lager", "Porter"]


def make_raw_reviews(n_rows: int = 120, n_missing: int = 10, n_weak: int = 10) -> pd.DataFrame:
    """
    Build a raw review table. The last ``n_missing`` rows have a missing
    gender; the ``n_weak`` rows before them have abv 2.5.
    """
    rng = np.random.RandomState(0)
    rows = []
    for i in range(n_rows):
        k = i % len(FLAVOURS)
        text = (
            f"This beer is {FLAVOURS[k]} and {FLAVOURS[(k + 1) % 6]}, "
            f"with a {FLAVOURS[(k + 2) % 6]} finish! Great."
        )
        rating = float(np.clip(1.0 + k * 0.7 + rng.uniform(-0.3, 0.3), 1.0, 5.0))
        rows.append(
            [
                i,
                4.0 + k * 0.8,
                1000 + i % 17,
                200 + i % 5,
                f"Beer {i}",
                STYLES[i % len(STYLES)],
                rating,
                rating,
                rating,
                rating,
                rating,
                text,
                "Sat Jan 1 12:00:00 2011",
                1293883200 + i,
                9.0e8 + i,
                "Jan 1, 1980",
                315532800,
                "Male" if i % 2 else "Female",
                f"user{i % 11}",
            ]
        )
    df = pd.DataFrame(rows, columns=RAW_COLUMNS)

    weak_start = n_rows - n_missing - n_weak
    df.loc[weak_start:weak_start + n_weak - 1, "beer/ABV"] = 2.5
    df.loc[n_rows - n_missing:, "user/gender"] = np.nan
    return df


@pytest.fixture
def raw_reviews() -> pd.DataFrame:
    return make_raw_reviews()


@pytest.fixture
def config_paths(tmp_path, raw_reviews):
    """
    Write the raw CSV and the three YAML configs; return their paths.
    """
    csv_path = tmp_path / "beer_reviews.csv"
    raw_reviews.to_csv(csv_path, index=False)

    data_cfg = {
        "dataset": {
            "path": str(csv_path),
            "abv_threshold": 3.0,
            "sample_size": 80,
            "random_state": 42,
        },
        "preprocessing": {
            "lowercase": True,
            "remove_numbers": False,
            "stopwords": {"enabled": True, "source": "sklearn"},
            "stemming": {"enabled": False},
        },
        "features": {
            "index_column": "index",
            "text_column": "text",
            "target_column": "abv",
            "min_document_frequency": 5,
        },
        "split": {"test_size": 0.2, "stratify": True, "n_bins": 5, "random_state": 42},
    }
    ml_cfg = {
        "general": {"random_state": 42, "use_feature_scaling": True},
        "svm": {"kernel": "rbf", "C": 1.0, "gamma": "scale", "epsilon": 0.1},
        "cross_validation": {"n_splits": 3, "param_grid": {"C": [0.5, 1.0]}},
        "importance": {"n_repeats": 2, "top_k": None},
    }
    out_dir = tmp_path / "experiments"
    train_cfg = {
        "general": {"random_state": 42},
        "paths": {
            "results_dir": str(out_dir / "results"),
            "models_dir": str(out_dir / "models"),
            "figures_dir": str(out_dir / "figures"),
            "logs_dir": str(out_dir / "logs"),
        },
        "logging": {"level": "INFO", "to_file": False},
        "save": {"save_models": True, "save_figures": True, "overwrite_existing": True},
    }

    paths = {}
    for name, cfg in (("data", data_cfg), ("ml", ml_cfg), ("train", train_cfg)):
        path = tmp_path / f"{name}.yaml"
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(cfg, f)
        paths[name] = str(path)
    paths["results_dir"] = train_cfg["paths"]["results_dir"]
    paths["models_dir"] = train_cfg["paths"]["models_dir"]
    paths["figures_dir"] = train_cfg["paths"]["figures_dir"]

    assert os.path.exists(paths["data"])
    return paths


@pytest.fixture
def package_caplog(caplog, monkeypatch):
    """
    caplog that also sees records from the "beer_reviews" logger tree,
    which stops propagating once a pipeline has configured it.
    """
    monkeypatch.setattr(logging.getLogger("beer_reviews"), "propagate", True)
    caplog.set_level(logging.INFO)
    return caplog
