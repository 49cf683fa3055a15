"""Exceptions raised by the dashboard pipeline."""
from __future__ import annotations


class PipelineError(Exception):
    """Base class for errors that abort a pipeline stage."""


class DataLoadError(PipelineError):
    """A JSON source file is missing, unparseable or lacks its records."""

    def __init__(self, filename: str, reason: str) -> None:
        super().__init__(f"Failed to load {filename}: {reason}")
        self.filename = filename
        self.reason = reason


class WorkbookError(PipelineError):
    """An Excel workbook is missing or contains no rows."""

    def __init__(self, filename: str, reason: str) -> None:
        super().__init__(f"Failed to convert {filename}: {reason}")
        self.filename = filename
        self.reason = reason


class ValidationFailedError(PipelineError):
    """The pre-flight validation reported blocking errors."""

    def __init__(self, error_count: int) -> None:
        super().__init__(f"Validation failed with {error_count} errors")
        self.error_count = error_count
