"""Renderers for scored pull request reports."""

from .terminal import build_comment_table, build_engagement_table, print_report
from .workbook import write_workbook

__all__ = [
    "build_comment_table",
    "build_engagement_table",
    "print_report",
    "write_workbook",
]
