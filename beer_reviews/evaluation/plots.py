"""
Plotting utilities for the beer review analysis.

This module provides helpers to visualize:

- distributions of abv and the aspect ratings
- PCA scree plot and biplot
- predicted vs. actual targets for a regression model
- feature importance rankings

Every function returns (fig, ax) or (fig, axes), optionally saves the
figure to ``out_path``, and only calls plt.show() when ``show`` is True.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from beer_reviews.data.datasets import RATING_COLUMNS


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _finish(fig, out_path: Optional[str], show: bool) -> None:
    fig.tight_layout()

    if out_path is not None:
        fig.savefig(out_path, dpi=300, bbox_inches="tight")

    if show:
        plt.show()
    else:
        plt.close(fig)


# ---------------------------------------------------------------------------
# Distributions
# ---------------------------------------------------------------------------


def plot_rating_distributions(
    df: pd.DataFrame,
    columns: Sequence[str] = ("abv",) + RATING_COLUMNS,
    bins: int = 20,
    figsize: Tuple[float, float] = (12.0, 7.0),
    out_path: Optional[str] = None,
    show: bool = False,
):
    """
    Histogram grid, one panel per numeric column.

    Parameters
    ----------
    df : pd.DataFrame
        Cleaned review table.
    columns : Sequence[str]
        Columns to plot.
    bins : int
        Number of histogram bins.
    figsize : Tuple[float, float]
        Figure size in inches.
    out_path : Optional[str]
        If provided, save the figure to this path (e.g., PNG).
    show : bool
        If True, call plt.show(). If False, just return the figure/axes.

    Returns
    -------
    (fig, axes)
        Matplotlib Figure and flat array of Axes.
    """
    if not columns:
        raise ValueError("No columns to plot.")

    n_cols = min(3, len(columns))
    n_rows = int(np.ceil(len(columns) / n_cols))
    fig, axes = plt.subplots(n_rows, n_cols, figsize=figsize, squeeze=False)
    axes = axes.ravel()

    for ax, col in zip(axes, columns):
        values = pd.to_numeric(df[col], errors="coerce").dropna()
        ax.hist(values, bins=bins, color="tab:blue", alpha=0.8)
        ax.set_title(col)
        ax.set_ylabel("Reviews")

    # Hide unused panels.
    for ax in axes[len(columns):]:
        ax.set_visible(False)

    _finish(fig, out_path, show)
    return fig, axes


# ---------------------------------------------------------------------------
# PCA
# ---------------------------------------------------------------------------


def plot_scree(
    explained_variance: pd.DataFrame,
    figsize: Tuple[float, float] = (7.0, 5.0),
    out_path: Optional[str] = None,
    show: bool = False,
):
    """
    Bar chart of explained variance per component with the cumulative
    share overlaid.

    Parameters
    ----------
    explained_variance : pd.DataFrame
        ``PCAResult.explained_variance``.
    """
    fig, ax = plt.subplots(figsize=figsize)
    components = explained_variance["component"].astype(str)

    ax.bar(components, explained_variance["explained_variance_ratio"], label="Per component")
    ax.plot(
        components,
        explained_variance["cumulative_ratio"],
        color="tab:red",
        marker="o",
        label="Cumulative",
    )
    ax.set_ylim(0.0, 1.05)
    ax.set_ylabel("Explained variance ratio")
    ax.set_xlabel("Component")
    ax.set_title("PCA scree plot")
    ax.legend()

    _finish(fig, out_path, show)
    return fig, ax


def plot_pca_biplot(
    scores: pd.DataFrame,
    loadings: pd.DataFrame,
    color_by: Optional[pd.Series] = None,
    figsize: Tuple[float, float] = (8.0, 7.0),
    out_path: Optional[str] = None,
    show: bool = False,
):
    """
    Scatter of the first two PC scores with loading arrows.

    Parameters
    ----------
    scores : pd.DataFrame
        ``PCAResult.scores``; needs PC1 and PC2.
    loadings : pd.DataFrame
        ``PCAResult.loadings``.
    color_by : Optional[pd.Series]
        Values used to color points, aligned with ``scores`` by index.
    """
    if "PC2" not in scores.columns:
        raise ValueError("Biplot needs at least two components.")

    fig, ax = plt.subplots(figsize=figsize)

    if color_by is not None:
        colors = color_by.reindex(scores.index)
        sc = ax.scatter(scores["PC1"], scores["PC2"], c=colors, cmap="viridis", s=10, alpha=0.6)
        fig.colorbar(sc, ax=ax, label=color_by.name)
    else:
        ax.scatter(scores["PC1"], scores["PC2"], s=10, alpha=0.6)

    # Stretch the arrows to the spread of the scores.
    scale = float(np.abs(scores[["PC1", "PC2"]].to_numpy()).max())
    for name, row in loadings.iterrows():
        ax.arrow(0, 0, row["PC1"] * scale, row["PC2"] * scale, color="tab:red", width=0.01)
        ax.text(row["PC1"] * scale * 1.1, row["PC2"] * scale * 1.1, str(name), color="tab:red")

    ax.axhline(0, color="grey", linewidth=0.5)
    ax.axvline(0, color="grey", linewidth=0.5)
    ax.set_xlabel("PC1")
    ax.set_ylabel("PC2")
    ax.set_title("PCA biplot")

    _finish(fig, out_path, show)
    return fig, ax


# ---------------------------------------------------------------------------
# Regression diagnostics
# ---------------------------------------------------------------------------


def plot_predicted_vs_actual(
    y_true: Sequence[float],
    y_pred: Sequence[float],
    title: Optional[str] = None,
    figsize: Tuple[float, float] = (6.0, 6.0),
    out_path: Optional[str] = None,
    show: bool = False,
):
    """
    Scatter of predictions against targets with the identity line.
    """
    y_true_arr = np.asarray(y_true, dtype=float)
    y_pred_arr = np.asarray(y_pred, dtype=float)
    if y_true_arr.shape != y_pred_arr.shape:
        raise ValueError("y_true and y_pred must have the same shape.")

    fig, ax = plt.subplots(figsize=figsize)
    ax.scatter(y_true_arr, y_pred_arr, s=12, alpha=0.6)

    lo = float(min(y_true_arr.min(), y_pred_arr.min()))
    hi = float(max(y_true_arr.max(), y_pred_arr.max()))
    ax.plot([lo, hi], [lo, hi], color="tab:red", linestyle="--")

    ax.set_xlabel("Actual")
    ax.set_ylabel("Predicted")
    ax.set_title(title or "Predicted vs. actual")

    _finish(fig, out_path, show)
    return fig, ax


def plot_feature_importance(
    ranking: pd.DataFrame,
    top_k: Optional[int] = 20,
    title: Optional[str] = None,
    figsize: Tuple[float, float] = (8.0, 7.0),
    out_path: Optional[str] = None,
    show: bool = False,
):
    """
    Horizontal bar chart of the top features, most important at the top.

    Parameters
    ----------
    ranking : pd.DataFrame
        Output of ``rank_feature_importance``.
    """
    if ranking.empty:
        raise ValueError("ranking is empty; nothing to plot.")

    df = ranking.sort_values("importance", ascending=False)
    if top_k is not None and top_k > 0:
        df = df.head(top_k)
    df = df.iloc[::-1]

    fig, ax = plt.subplots(figsize=figsize)
    xerr = df["importance_std"] if "importance_std" in df.columns else None
    ax.barh(df["feature"].astype(str), df["importance"], xerr=xerr)
    ax.set_xlabel("Permutation importance")
    ax.set_title(title or "Feature importance")

    _finish(fig, out_path, show)
    return fig, ax
