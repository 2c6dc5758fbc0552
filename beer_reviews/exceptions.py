"""
Error types raised by the review pipeline.

All of them are fatal: a stage that raises aborts the run, and there is
no partial result. Each error records the stage that failed and how many
records that stage was holding at the time, so the message alone is
enough to locate the problem.
"""

from __future__ import annotations

from typing import Optional


class PipelineError(ValueError):
    """
    Base class for pipeline failures.

    Parameters
    ----------
    message : str
        Human-readable description of the failure.
    stage : str
        Name of the stage that failed (e.g., "loader", "matrix_builder").
    record_count : Optional[int]
        Number of records held by the stage when it failed.
    """

    def __init__(
        self,
        message: str,
        stage: str,
        record_count: Optional[int] = None,
    ) -> None:
        self.stage = stage
        self.record_count = record_count
        detail = f"[stage={stage}"
        if record_count is not None:
            detail += f", records={record_count}"
        detail += "]"
        super().__init__(f"{detail} {message}")


class DataFormatError(PipelineError):
    """The input table is malformed or lacks the expected columns."""


class EmptyResultError(PipelineError):
    """A filtering step removed every row."""


class AlignmentError(PipelineError):
    """Matrix rows and metadata rows do not share the same document ids."""
