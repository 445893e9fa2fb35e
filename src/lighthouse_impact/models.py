from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import ReportError


class Impact(str, Enum):
    NONE = "none"
    INCREASE = "increase"
    DECREASE = "decrease"
    UNKNOWN = "unknown"


class OutcomeStatus(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"
    ABORTED = "aborted"


def _optional_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Audit:
    id: str
    score_display_mode: str
    score: Optional[float] = None
    numeric_value: Optional[float] = None
    display_value: Optional[str] = None

    @classmethod
    def from_dict(cls, audit_id: str, data: Mapping[str, Any]) -> "Audit":
        display_value = data.get("displayValue")
        return cls(
            id=str(data.get("id") or audit_id),
            score_display_mode=str(data.get("scoreDisplayMode") or ""),
            score=_optional_float(data.get("score")),
            numeric_value=_optional_float(data.get("numericValue")),
            display_value=None if display_value is None else str(display_value),
        )


@dataclass(frozen=True)
class Category:
    name: str
    score: Optional[float]
    audit_refs: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> "Category":
        refs = []
        for ref in data.get("auditRefs") or []:
            if isinstance(ref, Mapping):
                ref_id = ref.get("id")
            else:
                ref_id = ref
            if ref_id:
                refs.append(str(ref_id))
        return cls(name=name, score=_optional_float(data.get("score")), audit_refs=tuple(refs))


@dataclass(frozen=True)
class Report:
    """
    One Lighthouse run.

    ``category_names`` carries the category order explicitly; ``raw`` is the
    untouched JSON object, uploaded as-is to the report gist.
    """

    lighthouse_version: str
    category_names: Tuple[str, ...]
    categories: Mapping[str, Category]
    audits: Mapping[str, Audit]
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Report":
        if not isinstance(data, Mapping):
            raise ReportError(f"Lighthouse report must be an object, got {type(data).__name__}")

        raw_categories = data.get("categories") or {}
        raw_audits = data.get("audits") or {}
        if not isinstance(raw_categories, Mapping) or not isinstance(raw_audits, Mapping):
            raise ReportError("Lighthouse report 'categories' and 'audits' must be objects")

        categories: Dict[str, Category] = {}
        for name, category in raw_categories.items():
            if isinstance(category, Mapping):
                categories[str(name)] = Category.from_dict(str(name), category)

        audits: Dict[str, Audit] = {}
        for audit_id, audit in raw_audits.items():
            if isinstance(audit, Mapping):
                audits[str(audit_id)] = Audit.from_dict(str(audit_id), audit)

        return cls(
            lighthouse_version=str(data.get("lighthouseVersion") or ""),
            category_names=tuple(categories),
            categories=MappingProxyType(categories),
            audits=MappingProxyType(audits),
            raw=MappingProxyType(dict(data)),
        )

    @classmethod
    def from_json(cls, text: str) -> "Report":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ReportError(f"Lighthouse report is not valid JSON: {exc}") from exc
        return cls.from_dict(data)

    def to_json(self) -> str:
        return json.dumps(dict(self.raw), ensure_ascii=False)


@dataclass(frozen=True)
class AuditComparison:
    audit_id: str
    mode: str
    impact: Impact
    impact_cell: str
    base_cell: str
    head_cell: str


@dataclass(frozen=True)
class CategoryComparison:
    name: str
    base_score: float
    head_score: float
    delta: float
    audits: Tuple[AuditComparison, ...] = ()


@dataclass(frozen=True)
class ReportComparison:
    base_version: str
    head_version: str
    categories: Tuple[CategoryComparison, ...] = ()

    @property
    def versions_match(self) -> bool:
        return self.base_version == self.head_version


@dataclass(frozen=True)
class Gist:
    id: str
    html_url: str = ""

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Gist":
        return cls(id=str(data.get("id") or ""), html_url=str(data.get("html_url") or ""))


@dataclass(frozen=True)
class Comment:
    id: int
    html_url: str = ""
    body: str = ""

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Comment":
        return cls(
            id=int(data.get("id") or 0),
            html_url=str(data.get("html_url") or ""),
            body=str(data.get("body") or ""),
        )


@dataclass(frozen=True)
class GistIds:
    base_gist_id: str
    head_gist_id: str


@dataclass(frozen=True)
class PullRequest:
    number: int
    base_ref: str
    head_ref: str
    html_url: str = ""

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "PullRequest":
        return cls(
            number=int(data.get("number") or 0),
            base_ref=str((data.get("base") or {}).get("ref") or ""),
            head_ref=str((data.get("head") or {}).get("ref") or ""),
            html_url=str(data.get("html_url") or ""),
        )


@dataclass(frozen=True)
class ImpactOutcome:
    status: OutcomeStatus
    base_gist: Optional[Gist] = None
    head_gist: Optional[Gist] = None
    comment: Optional[Comment] = None
    reason: str = ""
