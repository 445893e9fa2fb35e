from __future__ import annotations

from enum import Enum


class ExitCode(int, Enum):
    """Process exit codes."""

    SUCCESS = 0
    ERROR = 2
    SKIPPED = 10
    CANCELLED = 130


class ScoreDisplayMode(str, Enum):
    """Lighthouse audit score display modes the comparison understands."""

    MANUAL = "manual"
    INFORMATIVE = "informative"
    BINARY = "binary"
    NUMERIC = "numeric"


PASS_GLYPH = "✔"
FAIL_GLYPH = "☓"
CHANGED_GLYPH = PASS_GLYPH
PLACEHOLDER = "---"
NO_IMPACT = "none"
