"""Report orchestrator: fetch review threads per pull request, score, render.

Pull requests are processed one after another. A pull request whose threads
cannot be fetched is logged and skipped; the rest of the run continues.
"""

import logging
import os
import traceback
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from rich.console import Console

from .extractors.threads import extract_review_thread
from .github_client import GitHubClient
from .models import PullRequestTarget
from .render import print_report, write_workbook
from .report_config import ReportConfig
from .repo import get_log_file
from .scoring import PullRequestReport, build_report

logger = logging.getLogger(__name__)


def setup_logging(log_file: Path | None = None) -> logging.Logger:
    """Setup file logging for debugging."""
    log_file = log_file or get_log_file()
    os.makedirs(log_file.parent, exist_ok=True)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
        handlers=[
            logging.FileHandler(log_file, mode="a"),
        ],
    )
    return logging.getLogger(__name__)


@dataclass
class ErrorRecord:
    """Record of a pull request that could not be fetched."""
    target: str
    error_type: str
    error_message: str
    timestamp: str


@dataclass
class RunResult:
    """Outcome of a report run."""
    reports: list[PullRequestReport] = field(default_factory=list)
    errors: list[ErrorRecord] = field(default_factory=list)


class ReportRunner:
    """Fetches and scores pull requests, one unit at a time."""

    def __init__(self, client: GitHubClient, console: Console, config: ReportConfig):
        self.client = client
        self.console = console
        self.config = config

    async def fetch_threads(self, target: PullRequestTarget):
        threads_data = await self.client.get_review_threads(target)
        return [extract_review_thread(t) for t in threads_data]

    async def process_target(self, target: PullRequestTarget) -> PullRequestReport:
        threads = await self.fetch_threads(target)
        return build_report(
            threads,
            target,
            body_char_limit=self.config.body_char_limit,
            policy=self.config.unresolved_approval,
        )

    async def run(self, targets: list[PullRequestTarget]) -> RunResult:
        result = RunResult()
        logger.info("=" * 60)
        logger.info(f"Starting report run: {len(targets)} pull requests, auth {self.client.auth_type}")

        for target in targets:
            self.console.print(f"\n[bold]Processing {target.label}[/]")
            try:
                report = await self.process_target(target)
            except Exception as e:
                result.errors.append(
                    ErrorRecord(
                        target=target.label,
                        error_type=type(e).__name__,
                        error_message=str(e)[:500],
                        timestamp=datetime.now(UTC).isoformat(),
                    )
                )
                logger.error(f"{target.label} failed: {type(e).__name__}: {e}")
                logger.error(traceback.format_exc())
                self.console.print(f"[red]  Skipped: {type(e).__name__}: {str(e)[:100]}[/]")
                continue

            result.reports.append(report)
            self.console.print(
                f"[dim]  {len(report.comments)} threads, {len(report.participants)} participants[/]"
            )

        logger.info(
            f"Report run complete: {len(result.reports)} processed, {len(result.errors)} failed, "
            f"{self.client.request_count} API requests"
        )
        return result


async def main(
    config: ReportConfig,
    targets: list[PullRequestTarget] | None = None,
    format: str = "xlsx",
    output: Path | None = None,
) -> RunResult:
    """Main entry point."""
    setup_logging()
    console = Console()
    targets = targets if targets is not None else config.targets

    if not targets:
        console.print("[yellow]No pull requests to process. Add some to prconsensus.yaml or pass --pr.[/]")
        return RunResult()

    async with GitHubClient() as client:
        runner = ReportRunner(client, console, config)
        result = await runner.run(targets)

    if format == "terminal":
        for report in result.reports:
            print_report(report, console)
    else:
        path = write_workbook(result.reports, output or config.output)
        console.print(f"\n[bold green]Excel file created: {path}[/]")

    if result.errors:
        console.print(f"\n[yellow]{len(result.errors)} pull requests failed; see {get_log_file()}[/]")

    return result
