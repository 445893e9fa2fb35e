from __future__ import annotations

import os
from typing import Literal, Optional

from pydantic import Field, SecretStr, conint, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["debug", "info", "warning", "error", "off"]


class LighthouseImpactConfig(BaseSettings):
    """Configuration loaded from GitHub Actions inputs."""

    model_config = SettingsConfigDict(
        env_prefix="INPUT_",
        frozen=True,
        extra="ignore",
    )

    github_token: SecretStr = Field(default="", description="GitHub token used for API calls")
    github_token_for_gist: SecretStr = Field(
        default="",
        description="Token used to create/update report gists (defaults to github_token)",
    )
    github_token_for_comment: SecretStr = Field(
        default="",
        description="Token used to read and write the pull request comment (defaults to github_token)",
    )

    project_directory: str = Field(
        default_factory=lambda: os.environ.get("GITHUB_WORKSPACE", "."),
        description="Directory holding the git checkout to measure",
    )
    report_command: str = Field(
        default="",
        description="Shell command producing a Lighthouse JSON report (stdout or report_path)",
    )
    report_path: str = Field(
        default="",
        description="Report file written by report_command, relative to project_directory",
    )
    install_command: str = Field(default="npm install", description="Run after each checkout")
    pull_request_number: Optional[conint(ge=1)] = Field(
        default=None,
        description="Overrides the pull request number from the event payload",
    )
    log_level: LogLevel = Field(default="info")

    @field_validator("pull_request_number", mode="before")
    @classmethod
    def _empty_as_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_lowercase(cls, value: str) -> str:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("report_command", "report_path", "install_command", mode="before")
    @classmethod
    def _strip(cls, value: str) -> str:
        if isinstance(value, str):
            return value.strip()
        return value

    @model_validator(mode="after")
    def _validate_tokens(self) -> "LighthouseImpactConfig":
        """Every API call needs a token: fail before touching the network."""
        if not self.gist_token():
            raise ValueError("github_token_for_gist is required (or set github_token)")
        if not self.comment_token():
            raise ValueError("github_token_for_comment is required (or set github_token)")
        if not self.report_command:
            raise ValueError("report_command is required")
        return self

    def gist_token(self) -> str:
        return (
            self.github_token_for_gist.get_secret_value()
            or self.github_token.get_secret_value()
        ).strip()

    def comment_token(self) -> str:
        return (
            self.github_token_for_comment.get_secret_value()
            or self.github_token.get_secret_value()
        ).strip()
