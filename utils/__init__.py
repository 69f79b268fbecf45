"""Utilities package for the Lighthouse score tracker."""

from .scoring import CategoryScore, Report, AuditResult, ScoreDifference, UrlScoreDifferences, calculate_score_differences
from .result_store import ResultStore, Snapshot, url_to_filename
from .snapshot_selector import SnapshotSelector, BaselinePolicy
from .report import render_summary, generate_summary_report, print_score_differences
from .timestamps import make_timestamp, parse_timestamp, TIMESTAMP_FORMAT

__all__ = [
    'CategoryScore', 'Report', 'AuditResult', 'ScoreDifference', 'UrlScoreDifferences',
    'calculate_score_differences',
    'ResultStore', 'Snapshot', 'url_to_filename',
    'SnapshotSelector', 'BaselinePolicy',
    'render_summary', 'generate_summary_report', 'print_score_differences',
    'make_timestamp', 'parse_timestamp', 'TIMESTAMP_FORMAT',
]
