from __future__ import annotations

import asyncio
import inspect
import shlex
import uuid
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from .cancellation import CancellationContext
from .compare import compare_reports
from .comment import extract_gist_ids, is_impact_comment, render_comment_body
from .errors import ConfigError, OperationCancelled
from .exec import run_command
from .formatting import gist_url, pull_request_url
from .github import GitHubClient
from .logging import ImpactLogger
from .models import Gist, ImpactOutcome, OutcomeStatus, Report

ReportLike = Union[Report, Dict[str, Any]]
ReportGenerator = Callable[[], Union[ReportLike, Awaitable[ReportLike]]]
CommandRunner = Callable[..., Awaitable[Any]]

DEFAULT_INSTALL_COMMAND = "npm install"


def _require_token(name: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{name} must be a non-empty string but received {value!r}")
    return value


def _gist_files(filename: str, report: Report) -> Dict[str, Dict[str, str]]:
    return {filename: {"content": report.to_json()}}


async def _generate(generate_report: ReportGenerator, cancellation: CancellationContext) -> Report:
    produced = generate_report()
    if inspect.isawaitable(produced):
        produced = await cancellation.guard(produced)
    cancellation.raise_if_cancelled()
    if isinstance(produced, Report):
        return produced
    return Report.from_dict(produced)


async def _create_or_update_gist(
    client: GitHubClient,
    existing: Optional[Gist],
    files: Dict[str, Dict[str, str]],
    description: str,
    label: str,
    logger: ImpactLogger,
) -> Gist:
    if existing:
        logger.debug(f"{label} gist found, updating it", gist=gist_url(existing.id))
        return await client.update_gist(existing.id, files)
    logger.debug(f"{label} gist not found, creating it")
    return await client.create_gist(files, description=description)


async def report_lighthouse_impact(
    generate_report: ReportGenerator,
    *,
    project_directory: Union[str, Path],
    repository_owner: str,
    repository_name: str,
    pull_request_number: int,
    github_token: Optional[str] = None,
    github_token_for_gist: Optional[str] = None,
    github_token_for_comment: Optional[str] = None,
    install_command: str = DEFAULT_INSTALL_COMMAND,
    cancellation: Optional[CancellationContext] = None,
    logger: Optional[ImpactLogger] = None,
    gist_client: Optional[GitHubClient] = None,
    comment_client: Optional[GitHubClient] = None,
    run: CommandRunner = run_command,
) -> ImpactOutcome:
    """
    Measure the pull request base and the merge result, then publish the comparison.

    ``generate_report`` is called exactly twice: once on the base branch and
    once after merging the head branch into it. Both reports are stored as
    gists and summarised in a single pull request comment that is updated on
    subsequent runs.

    Cancellation is reported as an ``aborted`` outcome; gists already written
    when it fires are left in place.
    """
    cancellation = cancellation or CancellationContext()
    logger = logger or ImpactLogger(str(uuid.uuid4()))

    token_for_gist = _require_token(
        "github_token_for_gist",
        github_token_for_gist if github_token_for_gist is not None else github_token,
    )
    token_for_comment = _require_token(
        "github_token_for_comment",
        github_token_for_comment if github_token_for_comment is not None else github_token,
    )
    project_dir = Path(project_directory)
    if not project_dir.is_dir():
        raise ConfigError(f"project_directory does not exist: {project_dir}")

    repo = f"{repository_owner}/{repository_name}"
    gists = gist_client or GitHubClient(token_for_gist, repo, cancellation=cancellation)
    comments = comment_client or GitHubClient(token_for_comment, repo, cancellation=cancellation)

    async def execute(command: str) -> None:
        logger.info("Running command", command=command)
        await run(
            command,
            project_dir,
            on_stdout=lambda line: logger.debug(line, stream="stdout"),
            on_stderr=lambda line: logger.debug(line, stream="stderr"),
            cancellation=cancellation,
        )

    try:
        pull_request = await comments.get_pull_request(pull_request_number)
        pull_request_base = pull_request.base_ref
        pull_request_head = pull_request.head_ref

        with logger.stage("base"):
            await execute(f"git fetch --no-tags --prune --depth=1 origin {shlex.quote(pull_request_base)}")
            await execute(f"git checkout {shlex.quote('origin/' + pull_request_base)}")
            await execute(install_command)
            base_report = await _generate(generate_report, cancellation)

        with logger.stage("head"):
            await execute(f"git fetch --no-tags --prune origin {shlex.quote(pull_request_head)}")
            await execute("git merge FETCH_HEAD")
            await execute(install_command)
            head_report = await _generate(generate_report, cancellation)

        # Raises ReportError before anything is written to GitHub.
        comparison = compare_reports(base_report, head_report)

        pr_url = pull_request_url(repository_owner, repository_name, pull_request_number)
        logger.debug(f"searching lighthouse comment in pull request {pr_url}")
        existing_comment = await comments.find_issue_comment(pull_request_number, is_impact_comment)

        file_prefix = f"{repository_owner}-{repository_name}-pr-{pull_request_number}"
        base_files = _gist_files(f"{file_prefix}-base-lighthouse-report.json", base_report)
        head_files = _gist_files(f"{file_prefix}-merged-lighthouse-report.json", head_report)
        base_description = f"Lighthouse report for {repo}#{pull_request_number} on {pull_request_base}"
        head_description = f"Lighthouse report for {repo}#{pull_request_number} after merge"

        def render(base_gist: Gist, head_gist: Gist) -> str:
            return render_comment_body(
                base_report=base_report,
                head_report=head_report,
                base_label=pull_request_base,
                head_label=pull_request_head,
                base_gist=base_gist,
                head_gist=head_gist,
                comparison=comparison,
            )

        if existing_comment:
            logger.debug(f"comment found at {existing_comment.html_url}")
            gist_ids = extract_gist_ids(existing_comment.body)
            if not gist_ids:
                logger.error(
                    "cannot find gist id in comment body",
                    comment_url=existing_comment.html_url,
                    comment_body=existing_comment.body,
                )
                return ImpactOutcome(
                    status=OutcomeStatus.SKIPPED,
                    comment=existing_comment,
                    reason="gist ids missing from existing comment",
                )
            logger.debug(
                "gist found",
                base_gist=gist_url(gist_ids.base_gist_id),
                head_gist=gist_url(gist_ids.head_gist_id),
            )

            existing_base, existing_head = await asyncio.gather(
                gists.get_gist(gist_ids.base_gist_id),
                gists.get_gist(gist_ids.head_gist_id),
            )
            base_gist, head_gist = await asyncio.gather(
                _create_or_update_gist(gists, existing_base, base_files, base_description, "base", logger),
                _create_or_update_gist(gists, existing_head, head_files, head_description, "head", logger),
            )

            logger.debug(f"updating comment at {existing_comment.html_url}")
            comment = await comments.update_issue_comment(
                existing_comment.id, render(base_gist, head_gist)
            )
            logger.info("comment updated", comment_url=comment.html_url)
            return ImpactOutcome(
                status=OutcomeStatus.UPDATED,
                base_gist=base_gist,
                head_gist=head_gist,
                comment=comment,
            )

        logger.debug("comment not found, creating base and head gist")
        base_gist, head_gist = await asyncio.gather(
            gists.create_gist(base_files, description=base_description),
            gists.create_gist(head_files, description=head_description),
        )
        logger.debug("gist created", base_gist=base_gist.html_url, head_gist=head_gist.html_url)

        comment = await comments.create_issue_comment(
            pull_request_number, render(base_gist, head_gist)
        )
        logger.info("comment created", comment_url=comment.html_url)
        return ImpactOutcome(
            status=OutcomeStatus.CREATED,
            base_gist=base_gist,
            head_gist=head_gist,
            comment=comment,
        )
    except OperationCancelled as exc:
        logger.warning("Lighthouse impact report aborted", reason=str(exc))
        return ImpactOutcome(status=OutcomeStatus.ABORTED, reason=str(exc))
