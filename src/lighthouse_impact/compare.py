from __future__ import annotations

from typing import List, Optional

from .constants import CHANGED_GLYPH, FAIL_GLYPH, NO_IMPACT, PASS_GLYPH, PLACEHOLDER, ScoreDisplayMode
from .errors import ReportError
from .formatting import format_number, format_numeric_diff, two_decimals
from .models import (
    Audit,
    AuditComparison,
    CategoryComparison,
    Impact,
    Report,
    ReportComparison,
)


def _direction(base: Optional[float], head: Optional[float]) -> Impact:
    if base is None or head is None:
        return Impact.UNKNOWN
    if head > base:
        return Impact.INCREASE
    if head < base:
        return Impact.DECREASE
    return Impact.NONE


def _glyph(score: Optional[float]) -> str:
    return PASS_GLYPH if score else FAIL_GLYPH


def _compare_informative(base: Audit, head: Audit) -> Optional[AuditComparison]:
    # Informative audits only ever report "same" or "differs"; no magnitude.
    if base.numeric_value is not None:
        same = base.numeric_value == head.numeric_value
        base_cell = base.display_value if base.display_value is not None else format_number(base.numeric_value)
        head_cell = head.display_value if head.display_value is not None else format_number(head.numeric_value)
    elif base.display_value is not None:
        same = base.display_value == head.display_value
        base_cell = base.display_value
        head_cell = "null" if head.display_value is None else head.display_value
    else:
        return None

    return AuditComparison(
        audit_id=base.id,
        mode=base.score_display_mode,
        impact=Impact.NONE if same else Impact.UNKNOWN,
        impact_cell=NO_IMPACT if same else PLACEHOLDER,
        base_cell=base_cell,
        head_cell=head_cell,
    )


def _compare_binary(base: Audit, head: Audit) -> AuditComparison:
    if base.score == head.score:
        glyph = _glyph(base.score)
        return AuditComparison(
            audit_id=base.id,
            mode=base.score_display_mode,
            impact=Impact.NONE,
            impact_cell=NO_IMPACT,
            base_cell=glyph,
            head_cell=glyph,
        )
    # Any transition is rendered as fail -> pass with the "changed" glyph,
    # whichever direction the scores actually moved.
    return AuditComparison(
        audit_id=base.id,
        mode=base.score_display_mode,
        impact=_direction(base.score, head.score),
        impact_cell=CHANGED_GLYPH,
        base_cell=FAIL_GLYPH,
        head_cell=PASS_GLYPH,
    )


def _compare_numeric(base: Audit, head: Audit) -> AuditComparison:
    impact = _direction(base.score, head.score)
    if base.score == head.score:
        impact_cell = NO_IMPACT
        impact = Impact.NONE
    elif impact is Impact.UNKNOWN:
        impact_cell = PLACEHOLDER
    else:
        impact_cell = format_numeric_diff(head.score - base.score)
    return AuditComparison(
        audit_id=base.id,
        mode=base.score_display_mode,
        impact=impact,
        impact_cell=impact_cell,
        base_cell=format_number(base.score),
        head_cell=format_number(head.score),
    )


def compare_audit(base: Audit, head: Audit) -> Optional[AuditComparison]:
    """Compare one audit across both reports; ``None`` means the audit is not shown."""
    mode = base.score_display_mode
    if mode == ScoreDisplayMode.MANUAL.value:
        return None
    if mode == ScoreDisplayMode.INFORMATIVE.value:
        return _compare_informative(base, head)
    if mode == ScoreDisplayMode.BINARY.value:
        return _compare_binary(base, head)
    if mode == ScoreDisplayMode.NUMERIC.value:
        return _compare_numeric(base, head)
    return AuditComparison(
        audit_id=base.id,
        mode=mode,
        impact=Impact.UNKNOWN,
        impact_cell=PLACEHOLDER,
        base_cell=PLACEHOLDER,
        head_cell=PLACEHOLDER,
    )


def compare_category(name: str, base_report: Report, head_report: Report) -> CategoryComparison:
    base_category = base_report.categories[name]
    head_category = head_report.categories.get(name)
    if head_category is None:
        raise ReportError(f"Category '{name}' is missing from the head report")

    base_score = two_decimals(base_category.score)
    head_score = two_decimals(head_category.score)

    audits: List[AuditComparison] = []
    for audit_id in base_category.audit_refs:
        base_audit = base_report.audits.get(audit_id)
        head_audit = head_report.audits.get(audit_id)
        if base_audit is None or head_audit is None:
            continue
        comparison = compare_audit(base_audit, head_audit)
        if comparison is not None:
            audits.append(comparison)

    return CategoryComparison(
        name=name,
        base_score=base_score,
        head_score=head_score,
        delta=round(head_score - base_score, 2),
        audits=tuple(audits),
    )


def compare_reports(base_report: Report, head_report: Report) -> ReportComparison:
    """
    Align two reports category by category, in the base report's order.

    When the Lighthouse versions differ no category is compared: scores from
    different versions are not comparable.
    """
    comparison = ReportComparison(
        base_version=base_report.lighthouse_version,
        head_version=head_report.lighthouse_version,
    )
    if not comparison.versions_match:
        return comparison

    categories = tuple(
        compare_category(name, base_report, head_report) for name in base_report.category_names
    )
    return ReportComparison(
        base_version=comparison.base_version,
        head_version=comparison.head_version,
        categories=categories,
    )
