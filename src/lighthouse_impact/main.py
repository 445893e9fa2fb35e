from __future__ import annotations

import asyncio
import sys
import uuid
from pathlib import Path
from typing import Optional

from .cancellation import CancellationContext
from .config import LighthouseImpactConfig
from .constants import ExitCode
from .context import GitHubContext
from .errors import LighthouseImpactError
from .exec import run_command
from .impact import ReportGenerator, report_lighthouse_impact
from .logging import ImpactLogger
from .models import OutcomeStatus, Report
from .publish import write_github_outputs, write_step_summary

_EXIT_CODES = {
    OutcomeStatus.CREATED: ExitCode.SUCCESS,
    OutcomeStatus.UPDATED: ExitCode.SUCCESS,
    OutcomeStatus.SKIPPED: ExitCode.SKIPPED,
    OutcomeStatus.ABORTED: ExitCode.CANCELLED,
}


def command_report_generator(
    command: str,
    project_directory: Path,
    *,
    report_path: str = "",
    logger: ImpactLogger,
    cancellation: Optional[CancellationContext] = None,
) -> ReportGenerator:
    """
    Build a report generator from a shell command.

    The report is read from ``report_path`` (relative to the project
    directory) when given, otherwise from the command's stdout.
    """

    async def generate() -> Report:
        result = await run_command(
            command,
            project_directory,
            on_stderr=lambda line: logger.debug(line, stream="stderr"),
            cancellation=cancellation,
        )
        if report_path:
            text = (project_directory / report_path).read_text(encoding="utf-8")
        else:
            text = result.stdout
        report = Report.from_json(text)
        logger.info(
            "Lighthouse report generated",
            lighthouse_version=report.lighthouse_version,
            categories=list(report.category_names),
        )
        return report

    return generate


def main() -> int:
    """Main entry point."""
    return asyncio.run(async_main())


async def async_main() -> int:
    """Async main entry point."""
    run_id = str(uuid.uuid4())

    try:
        config = LighthouseImpactConfig()
    except Exception as exc:
        print(f"::error::Configuration error: {exc}")
        return int(ExitCode.ERROR)

    logger = ImpactLogger(run_id, config.log_level)

    try:
        ctx = GitHubContext.from_environment()
    except Exception as exc:
        logger.error(f"Failed to load GitHub context: {exc}")
        return int(ExitCode.ERROR)

    pr_number = config.pull_request_number or ctx.pr_number
    if not pr_number:
        logger.warning("Not a pull request event, nothing to compare", event=ctx.event_name)
        return int(ExitCode.SKIPPED)

    cancellation = CancellationContext()
    cancellation.install_signal_handlers()

    project_directory = Path(config.project_directory)
    logger.info(
        "Lighthouse merge impact starting",
        repo=ctx.repo_full_name,
        pr_number=pr_number,
        project_directory=str(project_directory),
    )

    try:
        outcome = await report_lighthouse_impact(
            command_report_generator(
                config.report_command,
                project_directory,
                report_path=config.report_path,
                logger=logger,
                cancellation=cancellation,
            ),
            project_directory=project_directory,
            repository_owner=ctx.repo_owner,
            repository_name=ctx.repo_name,
            pull_request_number=pr_number,
            github_token_for_gist=config.gist_token(),
            github_token_for_comment=config.comment_token(),
            install_command=config.install_command,
            cancellation=cancellation,
            logger=logger,
        )
    except LighthouseImpactError as exc:
        logger.error(str(exc), error_type=type(exc).__name__)
        return int(exc.exit_code)

    write_github_outputs(outcome)
    if outcome.comment is not None and outcome.status != OutcomeStatus.SKIPPED:
        write_step_summary(outcome.comment.body)

    return int(_EXIT_CODES[outcome.status])


if __name__ == "__main__":
    sys.exit(main())
