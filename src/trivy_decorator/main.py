from __future__ import annotations

import asyncio
import os
import sys
import uuid
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .artifacts import ArtifactHandler
from .comment import render_comment
from .commenter import PRCommenter
from .config import DecoratorConfig
from .constants import ExitCode
from .context import ActionContext
from .errors import ConfigError, DecoratorError
from .github import GitHubClient
from .logging import DecoratorLogger
from .publish import write_github_outputs, write_step_summary
from .report import parse_report
from .resolver import ContextResolver

ACTION_VERSION = "1.1.0"


def _load_config() -> DecoratorConfig:
    try:
        return DecoratorConfig()
    except ValidationError as exc:
        messages = "; ".join(err.get("msg", "") for err in exc.errors())
        raise ConfigError(messages) from exc


def main() -> int:
    return asyncio.run(async_main())


async def async_main() -> int:
    run_id = str(uuid.uuid4())
    logger = DecoratorLogger(run_id, debug=os.environ.get("RUNNER_DEBUG") == "1")
    logger.info("trivy_pr_decorator_start", version=ACTION_VERSION)

    artifact_handler: Optional[ArtifactHandler] = None
    temp_dir: Optional[Path] = None

    try:
        config = _load_config()
        logger.info(
            "Configuration loaded",
            results_file=config.results_file,
            max_table_rows=config.max_table_rows,
        )

        ctx = ActionContext.from_environment()
        gh = GitHubClient(
            token=config.github_token.get_secret_value(),
            repo=ctx.repo_full_name,
            api_url=config.github_api_url,
        )

        results_file = config.results_file
        event_file = config.event_file

        artifact_handler = ArtifactHandler(gh, ctx, logger)
        if artifact_handler.is_workflow_run_context():
            with logger.stage("download_artifacts"):
                downloaded = await artifact_handler.download_artifacts(
                    config.artifact_name,
                    config.event_artifact_name,
                )
            temp_dir = downloaded.temp_dir
            if downloaded.results_file_path:
                results_file = str(downloaded.results_file_path)
                logger.info("Using downloaded results file", path=results_file)
            if downloaded.event_file_path:
                event_file = str(downloaded.event_file_path)
                logger.info("Using downloaded event file", path=event_file)

        resolver = ContextResolver(ctx, gh, logger)
        pr_context = await resolver.resolve_pr_context(
            event_file or None,
            config.event_name or None,
            config.sha or None,
        )

        with logger.stage("parse_report"):
            results = parse_report(results_file)
        counts = results.counts
        logger.info(
            "Parsed vulnerabilities",
            total=counts.total,
            critical=counts.critical,
            high=counts.high,
            medium=counts.medium,
            low=counts.low,
        )

        body = render_comment(results, config.max_table_rows)
        logger.debug("Comment body generated", length=len(body))

        commenter = PRCommenter(gh, ctx, logger)
        with logger.stage("post_comment"):
            posted = await commenter.post_or_update_comment(body, pr_context.pr_number)
        if posted:
            logger.info("Successfully posted Trivy scan results", pr_number=pr_context.pr_number)

        write_github_outputs(
            os.environ.get("GITHUB_OUTPUT"),
            counts,
            pr_context.pr_number,
            comment_posted=posted,
        )
        write_step_summary(os.environ.get("GITHUB_STEP_SUMMARY"), body)
        logger.info("Action completed successfully")
        return int(ExitCode.SUCCESS)
    except DecoratorError as exc:
        logger.error(str(exc), error_type=type(exc).__name__)
        return int(exc.exit_code)
    finally:
        if artifact_handler is not None and temp_dir is not None:
            artifact_handler.cleanup(temp_dir)


if __name__ == "__main__":
    sys.exit(main())
