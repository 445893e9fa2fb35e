from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator

from .errors import OperationCancelled

LOG_LEVELS = {"debug": 10, "info": 20, "warning": 30, "error": 40, "off": 100}


class ImpactLogger:
    """Structured JSON logger with GitHub Actions integration."""

    def __init__(self, run_id: str, log_level: str = "info"):
        self.run_id = run_id
        self.log_level = log_level if log_level in LOG_LEVELS else "info"
        self._stage_starts: dict[str, datetime] = {}

    def enabled_for(self, level: str) -> bool:
        return LOG_LEVELS[level] >= LOG_LEVELS[self.log_level]

    def debug(self, message: str, **kwargs: Any) -> None:
        self._emit("debug", message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._emit("info", message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._emit("warning", message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._emit("error", message, **kwargs)

    @contextmanager
    def stage(self, name: str) -> Iterator[None]:
        """Context manager that tracks stage timing."""
        start = datetime.now(timezone.utc)
        self._stage_starts[name] = start
        self.debug("stage_start", stage=name)
        status = "ok"
        try:
            yield
        except OperationCancelled:
            status = "cancelled"
            raise
        except Exception as exc:
            status = "error"
            self.error("stage_error", stage=name, error=str(exc))
            raise
        finally:
            end = datetime.now(timezone.utc)
            duration_ms = int((end - start).total_seconds() * 1000)
            self.debug("stage_end", stage=name, duration_ms=duration_ms, status=status)

    def _emit(self, level: str, message: str, **kwargs: Any) -> None:
        """Emit structured JSON log + GitHub annotation for warnings and errors."""
        if not self.enabled_for(level):
            return

        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "run_id": self.run_id,
            "message": message,
        }
        payload.update(self._sanitize(kwargs))

        sys.stderr.write(json.dumps(payload, ensure_ascii=False, default=str) + "\n")
        sys.stderr.flush()

        if level == "error":
            sys.stderr.write(f"::error::{self._escape(message)}\n")
            sys.stderr.flush()
        elif level == "warning":
            sys.stderr.write(f"::warning::{self._escape(message)}\n")
            sys.stderr.flush()

    @staticmethod
    def _escape(value: str) -> str:
        # https://docs.github.com/actions/using-workflows/workflow-commands-for-github-actions
        return str(value).replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")

    @staticmethod
    def _sanitize(fields: Dict[str, Any]) -> Dict[str, Any]:
        redacted: Dict[str, Any] = {}
        for key, value in fields.items():
            if ImpactLogger._is_sensitive_key(key):
                redacted[key] = "***"
            else:
                redacted[key] = value
        return redacted

    @staticmethod
    def _is_sensitive_key(key: str) -> bool:
        lowered = key.lower()
        return any(token in lowered for token in ("token", "secret", "password", "api_key", "apikey"))
