"""Baseline lookup: find the previous report for a URL/device."""

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

from utils.errors import BaselineNotFound, ConfigError
from utils.result_store import ResultStore
from utils.scoring import Report
from utils.timestamps import parse_timestamp

logger = logging.getLogger(__name__)


class BaselinePolicy(Enum):
    """Which older snapshot serves as the baseline."""
    PREVIOUS_RUN = "previous"                # only the immediately preceding snapshot
    LATEST_AVAILABLE = "latest-available"    # newest older snapshot that has the report

    @classmethod
    def parse(cls, value: str) -> "BaselinePolicy":
        try:
            return cls(value)
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ConfigError(f"Unknown baseline policy '{value}' (choose from: {choices})")


class SnapshotSelector:
    """
    Selects the baseline report for a freshly written report.

    Snapshots are ordered by their parsed timestamp. The current snapshot
    is the one the new report was written into; candidates are the
    snapshots strictly older than it, newest first.
    """

    def __init__(
        self,
        store: ResultStore,
        policy: BaselinePolicy = BaselinePolicy.PREVIOUS_RUN,
        max_depth: int = 1
    ):
        """
        Args:
            store: Result store to read snapshots from
            policy: Baseline policy
            max_depth: How many older snapshots LATEST_AVAILABLE may inspect
        """
        if max_depth < 1:
            raise ConfigError("Baseline depth must be at least 1")
        self.store = store
        self.policy = policy
        self.max_depth = max_depth

    def find_previous(self, region: str, current_report_path, url: str, device: str) -> Optional[Report]:
        """
        Find the baseline report for ``url`` on ``device``.

        Args:
            region: Region code (for logging)
            current_report_path: Path returned by ResultStore.save for the current run
            url: Audited URL
            device: Device profile name

        Returns:
            The baseline Report, or None when there is no baseline yet
        """
        current_report_path = Path(current_report_path)
        timestamp_dir = current_report_path.parent.parent
        region_dir = timestamp_dir.parent
        current_moment = parse_timestamp(timestamp_dir.name)

        snapshots = self.store.list_snapshots_in(region_dir)
        if len(snapshots) < 2:
            logger.debug("No previous snapshot for %s in %s", url, region)
            return None

        if current_moment is None:
            older = snapshots[1:]
        else:
            older = [s for s in snapshots if s.moment < current_moment]

        depth = 1 if self.policy is BaselinePolicy.PREVIOUS_RUN else self.max_depth
        for snapshot in older[:depth]:
            try:
                lhr = self.store.load_report(snapshot.report_path(device, url))
            except BaselineNotFound as e:
                logger.debug("%s", e)
                continue
            logger.info("Baseline for %s (%s, %s): %s", url, device, region, snapshot.timestamp)
            return Report.from_lhr(lhr)

        logger.info("No baseline report for %s (%s) in %s", url, device, region)
        return None
