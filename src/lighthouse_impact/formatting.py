from __future__ import annotations

import math
from decimal import Decimal
from typing import Optional, Union

Number = Union[int, float]

LIGHTHOUSE_VIEWER_URL = "https://googlechrome.github.io/lighthouse/viewer/"
GIST_URL = "https://gist.github.com"


def format_number(value: Optional[Number]) -> str:
    """
    Display a number the way it has always appeared in impact comments.

    Integral floats drop their fractional part (``1.0 -> "1"``, ``-0.0 -> "0"``).
    Other floats use the shortest round-trip digits, always in positional
    notation (``3.2e-05 -> "0.000032"``). Subtraction noise beyond twelve
    decimals is dropped, unless dropping it would turn a nonzero value into 0.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and math.isfinite(value):
        cleaned = round(value, 12)
        if cleaned or not value:
            value = cleaned
        if value.is_integer():
            return str(int(value))
        return format(Decimal(repr(value)), "f")
    return repr(value)


def format_numeric_diff(delta: Number) -> str:
    if delta > 0:
        return f"+{format_number(delta)}"
    if delta < 0:
        return format_number(delta)
    return "0"


def two_decimals(score: Optional[Number]) -> float:
    # Round half up, so 0.125 becomes 0.13 rather than banking down to 0.12.
    return math.floor(float(score or 0) * 100 + 0.5) / 100


def gist_url(gist_id: str) -> str:
    return f"{GIST_URL}/{gist_id}"


def lighthouse_viewer_url(gist_id: str) -> str:
    return f"{LIGHTHOUSE_VIEWER_URL}?gist={gist_id}"


def pull_request_url(
    repository_owner: str,
    repository_name: str,
    pull_request_number: int,
    server_url: str = "https://github.com",
) -> str:
    base = (server_url or "https://github.com").rstrip("/")
    return f"{base}/{repository_owner}/{repository_name}/pull/{pull_request_number}"
