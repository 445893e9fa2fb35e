"""Report the Lighthouse impact of merging a pull request as a pull request comment."""

from __future__ import annotations

from .cancellation import CancellationContext
from .comment import GENERATED_BY_COMMENT, extract_gist_ids, render_comment_body
from .compare import compare_reports
from .formatting import format_numeric_diff
from .impact import report_lighthouse_impact
from .models import ImpactOutcome, OutcomeStatus, Report

__version__ = "1.0.0"

__all__ = [
    "CancellationContext",
    "GENERATED_BY_COMMENT",
    "ImpactOutcome",
    "OutcomeStatus",
    "Report",
    "compare_reports",
    "extract_gist_ids",
    "format_numeric_diff",
    "render_comment_body",
    "report_lighthouse_impact",
]
