"""find-unused: detect files that no import, template, or stylesheet reference reaches."""

from __future__ import annotations

from find_unused.models import (
    AnalysisConfig,
    AnalysisResult,
    FileCategory,
    ReachabilityPolicy,
    UnresolvedReference,
)
from find_unused.pipeline import UnusedFilesError, run_analysis, run_analysis_async

__version__ = "0.1.0"

__all__ = [
    "AnalysisConfig",
    "AnalysisResult",
    "FileCategory",
    "ReachabilityPolicy",
    "UnresolvedReference",
    "UnusedFilesError",
    "run_analysis",
    "run_analysis_async",
]
