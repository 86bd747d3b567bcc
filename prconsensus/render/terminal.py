"""Rich terminal tables for scored pull request comments."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..scoring import Band, PullRequestReport, ResolutionStatus
from ..scoring.emoji import APPROVAL, DISAPPROVAL

BAND_STYLES = {
    Band.GREEN: "green",
    Band.YELLOW: "yellow",
    Band.ORANGE: "dark_orange",
    Band.RED: "red",
}

STATUS_STYLES = {
    ResolutionStatus.APPROVED: "green",
    ResolutionStatus.NON_APPROVED: "red",
    ResolutionStatus.PENDING: "yellow",
}

TERMINAL_BODY_WIDTH = 60


def build_comment_table(report: PullRequestReport) -> Table:
    """One row per comment, one glyph column per participant."""
    table = Table(title=f"Review threads: {escape(report.target.label)}", expand=True, show_lines=False)
    table.add_column("Comment", style="white", max_width=TERMINAL_BODY_WIDTH, overflow="ellipsis")
    table.add_column("Author", style="cyan")
    table.add_column("Status")
    for participant in report.participants:
        table.add_column(escape(participant), justify="center")
    table.add_column(APPROVAL, justify="right")
    table.add_column(DISAPPROVAL, justify="right")

    for comment in report.comments:
        status_style = STATUS_STYLES[comment.status]
        row_style = BAND_STYLES[comment.highlight] if comment.highlight else None
        table.add_row(
            escape(comment.body.replace("\n", " ")),
            escape(comment.proposer),
            f"[{status_style}]{comment.status.value}[/]",
            *[escape(comment.glyphs.get(p, "")) for p in report.participants],
            str(comment.approval_count),
            str(comment.disapproval_count),
            style=f"on {row_style}" if row_style else None,
        )

    return table


def build_engagement_table(report: PullRequestReport) -> Table:
    """Engagement per participant plus resolution totals."""
    table = Table(title="Engagement", expand=False)
    table.add_column("Participant", style="cyan")
    table.add_column("Reacted", justify="right")
    table.add_column("Eligible", justify="right")
    table.add_column("Engagement", justify="right")

    for participant, stat in report.engagement.items():
        style = BAND_STYLES[stat.band]
        table.add_row(
            escape(participant),
            str(stat.reacted),
            str(stat.eligible),
            f"[{style}]{stat.percentage}%[/]",
        )

    return table


def print_report(report: PullRequestReport, console: Console) -> None:
    """Print both tables and the resolution counters."""
    console.print(build_comment_table(report))
    console.print(build_engagement_table(report))

    counters = report.counters
    console.print(
        f"[green]Approved: {counters.approved}[/]  "
        f"[red]NonApproved: {counters.non_approved}[/]  "
        f"[yellow]Pending: {counters.pending}[/]  "
        f"[dim]Total: {counters.total}[/]\n"
    )
