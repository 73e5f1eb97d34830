"""Structured JSONL records for analysis runs."""

from .run_logger import AnalysisTelemetryLogger, append_jsonl

__all__ = ["AnalysisTelemetryLogger", "append_jsonl"]
