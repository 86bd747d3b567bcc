"""Excel workbook export for scored pull request comments.

Uses openpyxl. One worksheet per pull request: a row per comment with a
glyph column per participant, then engagement and resolution summaries.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from pathlib import Path

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from ..scoring import Band, PullRequestReport
from ..scoring.emoji import APPROVAL, DISAPPROVAL

logger = logging.getLogger(__name__)

EMPTY_SHEET_TITLE = "PR Comments & Reactions"
MAX_SHEET_TITLE = 31  # Excel limit
_INVALID_TITLE_CHARS = re.compile(r"[\[\]:*?/\\]")

BAND_FILLS = {
    Band.GREEN: "C6EFCE",
    Band.YELLOW: "FFEB9C",
    Band.ORANGE: "FFD8A8",
    Band.RED: "FFC7CE",
}

BODY_COLUMN_WIDTH = 60
PARTICIPANT_COLUMN_WIDTH = 14


def _fill(band: Band) -> PatternFill:
    color = BAND_FILLS[band]
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


def sheet_title(report: PullRequestReport, taken: set[str]) -> str:
    """Unique, Excel-safe sheet title for a report."""
    target = report.target
    base = _INVALID_TITLE_CHARS.sub("-", f"{target.repo} #{target.pr_number}")[:MAX_SHEET_TITLE]

    title = base
    counter = 2
    while title.lower() in taken:
        suffix = f" ({counter})"
        title = base[: MAX_SHEET_TITLE - len(suffix)] + suffix
        counter += 1

    taken.add(title.lower())
    return title


def cell_text(value: str) -> str:
    """Drop control characters that worksheets cannot store."""
    return ILLEGAL_CHARACTERS_RE.sub("", value)


def append_row(ws: Worksheet, values: list) -> None:
    """Append a row, keeping text cells as text.

    openpyxl turns strings starting with "=" into formulas; comment text and
    handles must show as typed.
    """
    ws.append(values)
    for cell in ws[ws.max_row]:
        if isinstance(cell.value, str):
            cell.data_type = "s"


def header_row(report: PullRequestReport) -> list[str]:
    return [
        "Comment",
        "Author",
        "Status",
        *[cell_text(p) for p in report.participants],
        APPROVAL,
        DISAPPROVAL,
        "Link",
    ]


def comment_rows(report: PullRequestReport) -> list[list]:
    """Cell values for each comment, in report order."""
    rows = []
    for comment in report.comments:
        rows.append([
            cell_text(comment.body),
            cell_text(comment.proposer),
            comment.status.value,
            *[cell_text(comment.glyphs.get(p, "")) for p in report.participants],
            comment.approval_count,
            comment.disapproval_count,
            cell_text(comment.url),
        ])
    return rows


def write_report_sheet(ws: Worksheet, report: PullRequestReport) -> None:
    """Fill one worksheet with a pull request's report."""
    header = header_row(report)
    append_row(ws, header)
    for cell in ws[1]:
        cell.font = Font(bold=True)
    ws.freeze_panes = "A2"

    link_column = len(header)
    for comment, values in zip(report.comments, comment_rows(report)):
        append_row(ws, values)
        row = ws.max_row

        link_cell = ws.cell(row=row, column=link_column)
        if comment.url:
            link_cell.hyperlink = comment.url
            link_cell.style = "Hyperlink"

        ws.cell(row=row, column=1).alignment = Alignment(wrap_text=True, vertical="top")

        if comment.highlight is not None:
            for column in range(1, link_column):
                ws.cell(row=row, column=column).fill = _fill(comment.highlight)

    # Engagement row lines up with the participant columns
    ws.append([])
    ws.append(["Engagement", "", ""] + [
        f"{stat.percentage}% ({stat.reacted}/{stat.eligible})"
        for stat in report.engagement.values()
    ])
    engagement_row = ws.max_row
    ws.cell(row=engagement_row, column=1).font = Font(bold=True)
    for offset, participant in enumerate(report.participants):
        stat = report.engagement[participant]
        ws.cell(row=engagement_row, column=4 + offset).fill = _fill(stat.band)

    counters = report.counters
    ws.append([])
    ws.append(["Approved", counters.approved])
    ws.append(["NonApproved", counters.non_approved])
    ws.append(["Pending", counters.pending])
    ws.append(["Total", counters.total])
    ws.cell(row=ws.max_row, column=1).font = Font(bold=True)

    ws.column_dimensions["A"].width = BODY_COLUMN_WIDTH
    for offset in range(len(report.participants)):
        ws.column_dimensions[get_column_letter(4 + offset)].width = PARTICIPANT_COLUMN_WIDTH


def write_workbook(reports: Sequence[PullRequestReport], path: Path | str) -> Path:
    """Write all reports to an .xlsx workbook and return its path."""
    path = Path(path)
    wb = Workbook()
    default_sheet = wb.active

    if not reports:
        default_sheet.title = EMPTY_SHEET_TITLE
        default_sheet.append(["No pull requests were processed."])
    else:
        wb.remove(default_sheet)
        taken: set[str] = set()
        for report in reports:
            ws = wb.create_sheet(title=sheet_title(report, taken))
            write_report_sheet(ws, report)

    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(path)
    logger.info(f"Workbook written: {path} ({len(reports)} sheets)")
    return path
