"""Filesystem result store.

Layout::

    results/<region>/<timestamp>/<device>/<urlAsFilename>.json   Lighthouse result
    results/<region>/<timestamp>/<device>/<urlAsFilename>.html   rendered report
    results/summary/summary-<timestamp>.html                    run summary

The tree is append-only: every invocation adds one snapshot directory per
region, named by its timestamp. Snapshots are ordered by the parsed
timestamp, never by directory mtime.
"""

import re
import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Tuple

from utils.errors import BaselineNotFound, StorageError
from utils.scoring import AuditResult, Report
from utils.timestamps import parse_timestamp

logger = logging.getLogger(__name__)

SUMMARY_DIR_NAME = "summary"
REPORT_EXTENSION = ".json"
ARTIFACT_EXTENSION = ".html"


def url_to_filename(url: str) -> str:
    """
    Map a URL to a file name: strip the http(s) scheme, replace '/' with '_'.

    http://x.com/a and https://x.com/a map to the same name.
    """
    return re.sub(r'^https?://', '', url).replace('/', '_')


@dataclass(frozen=True)
class Snapshot:
    """One invocation's results for one region."""
    region: str
    timestamp: str
    moment: datetime
    path: Path

    def report_path(self, device: str, url: str) -> Path:
        return self.path / device / f"{url_to_filename(url)}{REPORT_EXTENSION}"

    def has_report(self, device: str, url: str) -> bool:
        return self.report_path(device, url).is_file()


class ResultStore:
    """Reads and writes audit results under a root directory."""

    def __init__(self, root="results"):
        self.root = Path(root)

    def region_dir(self, region: str) -> Path:
        return self.root / region

    def report_path(self, region: str, timestamp: str, device: str, url: str) -> Path:
        return self.region_dir(region) / timestamp / device / f"{url_to_filename(url)}{REPORT_EXTENSION}"

    def save(self, region: str, timestamp: str, device: str, url: str, result: AuditResult) -> Path:
        """
        Persist one audit result.

        Args:
            region: Region code
            timestamp: Invocation timestamp (snapshot directory name)
            device: Device profile name
            url: Audited URL
            result: Lighthouse result and rendered artifact

        Returns:
            Path of the JSON report, used to look up the baseline
        """
        json_path = self.report_path(region, timestamp, device, url)
        html_path = json_path.with_suffix(ARTIFACT_EXTENSION)
        try:
            json_path.parent.mkdir(parents=True, exist_ok=True)
            json_path.write_text(json.dumps(result.lhr, indent=2), encoding='utf-8')
            html_path.write_text(result.artifact, encoding='utf-8')
        except OSError as e:
            raise StorageError(json_path, str(e))

        logger.debug("Saved %s and %s", json_path, html_path.name)
        return json_path

    def list_snapshots(self, region: str) -> List[Snapshot]:
        """Snapshots of a region, newest first."""
        return self.list_snapshots_in(self.region_dir(region))

    def list_snapshots_in(self, region_dir) -> List[Snapshot]:
        """Snapshots found directly under a region directory, newest first."""
        region_dir = Path(region_dir)
        if not region_dir.is_dir():
            return []

        snapshots = []
        try:
            entries = list(region_dir.iterdir())
        except OSError as e:
            raise StorageError(region_dir, str(e))

        for entry in entries:
            if not entry.is_dir():
                continue
            moment = parse_timestamp(entry.name)
            if moment is None:
                logger.debug("Ignoring non-snapshot directory %s", entry)
                continue
            snapshots.append(Snapshot(
                region=region_dir.name,
                timestamp=entry.name,
                moment=moment,
                path=entry,
            ))

        snapshots.sort(key=lambda s: s.moment, reverse=True)
        return snapshots

    def load_report(self, path) -> Dict[str, Any]:
        """
        Read a persisted Lighthouse result.

        Raises:
            BaselineNotFound: the file does not exist
            StorageError: any other read or decode failure
        """
        path = Path(path)
        try:
            text = path.read_text(encoding='utf-8')
        except FileNotFoundError:
            raise BaselineNotFound(path)
        except OSError as e:
            raise StorageError(path, str(e))

        try:
            lhr = json.loads(text)
        except json.JSONDecodeError as e:
            raise StorageError(path, f"invalid JSON: {e}")

        if not isinstance(lhr, dict) or not isinstance(lhr.get("categories", {}), dict):
            raise StorageError(path, "not a Lighthouse result object")
        return lhr

    def history(self, region: str, device: str, url: str) -> List[Tuple[Snapshot, Report]]:
        """Every recorded report of a URL/device in a region, newest first."""
        entries = []
        for snapshot in self.list_snapshots(region):
            path = snapshot.report_path(device, url)
            if not path.is_file():
                continue
            entries.append((snapshot, Report.from_lhr(self.load_report(path))))
        return entries

    def list_regions(self) -> List[str]:
        if not self.root.is_dir():
            return []
        return sorted(
            d.name for d in self.root.iterdir()
            if d.is_dir() and d.name != SUMMARY_DIR_NAME
        )

    @property
    def summary_dir(self) -> Path:
        return self.root / SUMMARY_DIR_NAME

    def summary_path(self, timestamp: str) -> Path:
        return self.summary_dir / f"summary-{timestamp}.html"

    def save_summary(self, timestamp: str, html: str) -> Path:
        """Write the run summary document."""
        path = self.summary_path(timestamp)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(html, encoding='utf-8')
        except OSError as e:
            raise StorageError(path, str(e))
        return path

    def list_summaries(self) -> List[Path]:
        """Saved summaries, newest first."""
        if not self.summary_dir.is_dir():
            return []
        return sorted(self.summary_dir.glob("summary-*.html"), reverse=True)
