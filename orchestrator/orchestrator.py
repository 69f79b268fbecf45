"""Main orchestrator: one audit run across regions, URLs and devices."""

import logging
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

from .run_context import RunContext
from engines.base_engine import AuditEngine
from engines.devices import DEVICES
from utils.report import generate_summary_report, print_score_differences
from utils.result_store import ResultStore
from utils.scoring import UrlScoreDifferences, calculate_score_differences
from utils.snapshot_selector import SnapshotSelector


def resolve_regions(url_config: Dict[str, List[str]], requested: Optional[List[str]] = None) -> List[str]:
    """
    Regions to run, in order.

    Args:
        url_config: Region -> URLs mapping
        requested: Allow-list of region names; empty or None means all configured regions

    Returns:
        Requested regions that exist in the config. Unknown names are logged and skipped.
    """
    if not requested:
        return list(url_config.keys())

    regions = []
    for region in requested:
        if region not in url_config:
            logger.warning("No URLs configured for region: %s", region)
            continue
        if region not in regions:
            regions.append(region)
    return regions


class Orchestrator:
    """
    Coordinates one invocation.

    Manages:
    - Region selection from the allow-list
    - Sequential audits (one browser at a time)
    - Persisting results and looking up baselines
    - The final summary
    """

    def __init__(
        self,
        context: RunContext,
        engine: AuditEngine,
        store: ResultStore,
        selector: Optional[SnapshotSelector] = None,
        devices: Optional[List[str]] = None
    ):
        """
        Initialize the orchestrator.

        Args:
            context: Run context with the URL config and invocation timestamp
            engine: Audit engine used for every page
            store: Result store
            selector: Baseline selector (defaults to the previous-run policy)
            devices: Device profiles to audit, in order
        """
        self.context = context
        self.engine = engine
        self.store = store
        self.selector = selector or SnapshotSelector(store)
        self.devices = devices or list(DEVICES)

    async def audit_url(self, region: str, url: str, device: str) -> Optional[UrlScoreDifferences]:
        """
        Audit one page on one device, save it and compare against the baseline.

        Returns:
            The score differences, or None when there is no baseline yet
        """
        result = await self.engine.run(url, device)
        current_path = self.store.save(region, self.context.timestamp, device, url, result)
        self.context.audits_completed += 1

        previous = self.selector.find_previous(region, current_path, url, device)
        if previous is None:
            self.context.baselines_missing += 1
            return None

        return UrlScoreDifferences(
            url=url,
            device=device,
            differences=calculate_score_differences(previous, result.report),
        )

    async def run_region(self, region: str):
        """Audit every URL of a region on every device."""
        self.context.start_region(region)
        for url in self.context.url_config[region]:
            for device in self.devices:
                logger.info("Auditing %s in %s on %s", url, region, device)
                entry = await self.audit_url(region, url, device)
                if entry is not None:
                    self.context.add_differences(region, entry)

    async def run_audit(self) -> Optional[Path]:
        """
        Execute the full run.

        Returns:
            Path of the written summary, or None when nothing could be compared
        """
        regions = resolve_regions(self.context.url_config, self.context.requested_regions)
        logger.info("Run %s: regions %s", self.context.timestamp, ", ".join(regions) or "(none)")

        try:
            for region in regions:
                await self.run_region(region)
        finally:
            await self.engine.close()

        if not self.context.has_differences():
            logger.info("No score differences to report.")
            return None

        print_score_differences(self.context.score_differences)

        summary_path = generate_summary_report(
            self.context.score_differences, self.store, self.context.timestamp
        )
        logger.info("Summary HTML has been saved to %s", summary_path)
        return summary_path
