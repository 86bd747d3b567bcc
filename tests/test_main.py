"""Tests for the report orchestrator."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from rich.console import Console

from prconsensus.main import ReportRunner
from prconsensus.models import PullRequestTarget
from prconsensus.report_config import ReportConfig
from prconsensus.scoring import ResolutionStatus, UnresolvedApprovalPolicy


def thread_node(thread_id: str, author: str, resolved: bool, reactions: list[tuple[str, str]]) -> dict:
    return {
        "id": thread_id,
        "isResolved": resolved,
        "isOutdated": False,
        "path": "src/app.py",
        "comments": {"nodes": [{
            "id": f"{thread_id}-c",
            "body": "Why not reuse the existing parser?",
            "url": f"https://github.com/acme/widgets/pull/1#discussion_{thread_id}",
            "author": {"login": author},
            "reactions": {"nodes": [{"content": c, "user": {"login": u}} for c, u in reactions]},
        }]},
    }


class TestReportRunner:
    """Tests for ReportRunner."""

    @pytest.fixture
    def targets(self):
        return [
            PullRequestTarget(owner="acme", repo="widgets", pr_number=1),
            PullRequestTarget(owner="acme", repo="widgets", pr_number=2),
            PullRequestTarget(owner="acme", repo="widgets", pr_number=3),
        ]

    @pytest.fixture
    def mock_client(self):
        """Mock client: PR #2 fails, the others return one thread each."""
        client = MagicMock()
        client.auth_type = "pat"
        client.request_count = 0

        async def get_review_threads(target):
            if target.pr_number == 2:
                raise httpx.ConnectError("connection refused")
            return [thread_node(f"T{target.pr_number}", "alice", True, [("ROCKET", "bob")])]

        client.get_review_threads = AsyncMock(side_effect=get_review_threads)
        return client

    @pytest.fixture
    def runner(self, mock_client):
        return ReportRunner(mock_client, Console(quiet=True), ReportConfig.default())

    @pytest.mark.trio
    async def test_failed_unit_is_skipped(self, runner, targets):
        result = await runner.run(targets)

        assert [r.target.pr_number for r in result.reports] == [1, 3]
        assert len(result.errors) == 1
        assert result.errors[0].target == "acme/widgets#2"
        assert result.errors[0].error_type == "ConnectError"

    @pytest.mark.trio
    async def test_units_processed_in_order(self, runner, mock_client, targets):
        await runner.run(targets)
        called = [call.args[0].pr_number for call in mock_client.get_review_threads.call_args_list]
        assert called == [1, 2, 3]

    @pytest.mark.trio
    async def test_report_contents(self, runner, targets):
        result = await runner.run(targets[:1])
        report = result.reports[0]
        assert report.participants == ["alice", "bob"]
        assert report.comments[0].status is ResolutionStatus.APPROVED
        assert report.counters.approved == 1

    @pytest.mark.trio
    async def test_config_options_applied(self, mock_client, targets):
        mock_client.get_review_threads = AsyncMock(
            return_value=[thread_node("T9", "alice", False, [("ROCKET", "bob")])]
        )
        config = ReportConfig(body_char_limit=5, unresolved_approval=UnresolvedApprovalPolicy.APPROVED)
        runner = ReportRunner(mock_client, Console(quiet=True), config)

        result = await runner.run(targets[:1])
        comment = result.reports[0].comments[0]
        assert comment.body == "Why n..."
        assert comment.status is ResolutionStatus.APPROVED

    @pytest.mark.trio
    async def test_no_targets(self, runner):
        result = await runner.run([])
        assert result.reports == []
        assert result.errors == []
