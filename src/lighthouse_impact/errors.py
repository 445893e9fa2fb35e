from __future__ import annotations

from typing import Optional

from .constants import ExitCode


class LighthouseImpactError(Exception):
    """Base exception for all lighthouse merge impact errors."""

    exit_code: ExitCode = ExitCode.ERROR


class ConfigError(LighthouseImpactError):
    """Configuration or credential validation failed."""


class ReportError(LighthouseImpactError):
    """A Lighthouse report could not be parsed or compared."""


class CommandError(LighthouseImpactError):
    """A shell command exited with a non-zero code."""

    def __init__(self, command: str, returncode: int, stderr: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command failed with exit code {returncode}: {command}"
        if stderr.strip():
            message = f"{message}\n{stderr.strip()}"
        super().__init__(message)


class GitHubError(LighthouseImpactError):
    """A GitHub REST call failed."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class OperationCancelled(LighthouseImpactError):
    """The operation was cancelled before it completed (not an error)."""

    exit_code = ExitCode.CANCELLED
