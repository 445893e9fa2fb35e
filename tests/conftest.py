from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from lighthouse_impact.models import Report


@pytest.fixture(params=["asyncio"])
def anyio_backend(request):
    """Restrict anyio tests to asyncio only (trio is not installed)."""
    return request.param


@pytest.fixture
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def event_pr_path(fixtures_dir: Path) -> Path:
    return fixtures_dir / "event_pr.json"


@pytest.fixture
def event_push_path(fixtures_dir: Path) -> Path:
    return fixtures_dir / "event_push.json"


@pytest.fixture
def base_report(fixtures_dir: Path) -> Report:
    return Report.from_json((fixtures_dir / "base_report.json").read_text(encoding="utf-8"))


@pytest.fixture
def head_report(fixtures_dir: Path) -> Report:
    return Report.from_json((fixtures_dir / "head_report.json").read_text(encoding="utf-8"))


def audit(
    audit_id: str,
    mode: str,
    score: Optional[float] = None,
    numeric_value: Optional[float] = None,
    display_value: Optional[str] = None,
) -> Dict[str, Any]:
    data: Dict[str, Any] = {"id": audit_id, "scoreDisplayMode": mode, "score": score}
    if numeric_value is not None:
        data["numericValue"] = numeric_value
    if display_value is not None:
        data["displayValue"] = display_value
    return data


def make_report(
    audits: Optional[Dict[str, Dict[str, Any]]] = None,
    *,
    score: float = 0.9,
    version: str = "6.0.0",
    category: str = "performance",
) -> Report:
    audits = audits or {}
    return Report.from_dict(
        {
            "lighthouseVersion": version,
            "categories": {
                category: {
                    "score": score,
                    "auditRefs": [{"id": audit_id} for audit_id in audits],
                }
            },
            "audits": audits,
        }
    )


def load_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))
