from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence

from .compare import compare_reports
from .formatting import format_number, format_numeric_diff, lighthouse_viewer_url
from .models import CategoryComparison, Gist, GistIds, Report, ReportComparison

GENERATED_BY_COMMENT = "<!-- Generated by lighthouse-merge-impact -->"
PROJECT_URL = "https://github.com/jsenv/jsenv-lighthouse-score-merge-impact"

BASE_GIST_ID_PATTERN = re.compile(r"<!-- base-gist-id=([a-zA-Z0-9_]+) -->")
HEAD_GIST_ID_PATTERN = re.compile(r"<!-- head-gist-id=([a-zA-Z0-9_]+) -->")


def base_gist_marker(gist_id: str) -> str:
    return f"<!-- base-gist-id={gist_id} -->"


def head_gist_marker(gist_id: str) -> str:
    return f"<!-- head-gist-id={gist_id} -->"


def is_impact_comment(body: Optional[str]) -> bool:
    return GENERATED_BY_COMMENT in (body or "")


def extract_gist_ids(body: Optional[str]) -> Optional[GistIds]:
    """
    Recover the gist ids embedded in a previously rendered comment.

    Returns None unless both markers are present, which callers treat as a
    comment that was edited by hand.
    """
    base_match = BASE_GIST_ID_PATTERN.search(body or "")
    if not base_match:
        return None
    head_match = HEAD_GIST_ID_PATTERN.search(body or "")
    if not head_match:
        return None
    return GistIds(base_gist_id=base_match.group(1), head_gist_id=head_match.group(1))


def version_mismatch_warning(
    base_label: str, head_label: str, base_version: str, head_version: str
) -> str:
    return (
        "**Warning:** Impact analysis skipped because lighthouse version are different on "
        f"`{base_label}` ({base_version}) and `{head_label}` ({head_version})."
    )


def _render_table(headers: Sequence[str], rows: Iterable[Sequence[str]]) -> List[str]:
    lines = ["  <table>", "    <thead>", "      <tr>"]
    lines.extend(f"        <th nowrap>{cell}</th>" for cell in headers)
    lines.extend(["      </tr>", "    </thead>", "    <tbody>"])
    for row in rows:
        lines.append("      <tr>")
        lines.extend(f"        <td nowrap>{cell}</td>" for cell in row)
        lines.append("      </tr>")
    lines.extend(["    </tbody>", "  </table>"])
    return lines


def _render_category(category: CategoryComparison, base_label: str, head_label: str) -> str:
    diff = format_numeric_diff(category.delta)
    lines = [
        "<details>",
        f"  <summary>{category.name} ({diff})</summary>",
        f"  <h3>Global impact on {category.name}</h3>",
    ]
    lines.extend(
        _render_table(
            ["Impact", base_label, head_label],
            [[diff, format_number(category.base_score), format_number(category.head_score)]],
        )
    )
    lines.append(f"  <h3>Detailed impact on {category.name}</h3>")
    lines.extend(
        _render_table(
            ["Audit", "Impact", base_label, head_label],
            (
                [audit.audit_id, audit.impact_cell, audit.base_cell, audit.head_cell]
                for audit in category.audits
            ),
        )
    )
    lines.append("</details>")
    return "\n".join(lines)


def render_header(header_messages: Sequence[str]) -> str:
    if not header_messages:
        return ""
    return "---\n\n" + "\n\n".join(header_messages) + "\n\n---"


def render_body(comparison: ReportComparison, base_label: str, head_label: str) -> str:
    return "\n\n".join(
        _render_category(category, base_label, head_label) for category in comparison.categories
    )


def render_footer(
    base_gist: Optional[Gist], head_gist: Optional[Gist], base_label: str
) -> str:
    links: List[str] = []
    if base_gist:
        links.append(f'<a href="{lighthouse_viewer_url(base_gist.id)}">{base_label} report</a>')
    if head_gist:
        links.append(f'<a href="{lighthouse_viewer_url(head_gist.id)}">report after merge</a>')

    lines: List[str] = []
    if links:
        lines.extend(
            [
                "<sub>",
                f"  Impact analyzed comparing {' and '.join(links)}",
                "</sub>",
                "<br />",
            ]
        )
    lines.extend(
        [
            "<sub>",
            f'  Generated by <a href="{PROJECT_URL}">lighthouse score merge impact</a>',
            "</sub>",
        ]
    )
    return "\n".join(lines)


def render_comment_body(
    *,
    base_report: Report,
    head_report: Report,
    base_label: str,
    head_label: str,
    base_gist: Optional[Gist] = None,
    head_gist: Optional[Gist] = None,
    header_messages: Sequence[str] = (),
    comparison: Optional[ReportComparison] = None,
) -> str:
    """
    Render the pull request comment comparing ``base_report`` and ``head_report``.

    The output depends only on its inputs so re-rendering the same reports
    produces the same comment. The first line is ``GENERATED_BY_COMMENT``,
    followed by the gist id markers read back by ``extract_gist_ids``.
    A ``comparison`` already computed from the same reports is reused as is.
    """
    messages = list(header_messages)
    if comparison is None:
        comparison = compare_reports(base_report, head_report)
    if not comparison.versions_match:
        messages.append(
            version_mismatch_warning(
                base_label, head_label, comparison.base_version, comparison.head_version
            )
        )

    sections = [
        GENERATED_BY_COMMENT,
        base_gist_marker(base_gist.id) if base_gist else "",
        head_gist_marker(head_gist.id) if head_gist else "",
        "<h3>Lighthouse merge impact</h3>",
        "",
        render_header(messages),
        render_body(comparison, base_label, head_label),
        render_footer(base_gist, head_gist, base_label),
    ]
    return "\n".join(sections)
