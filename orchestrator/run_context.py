"""Run-scoped state for one invocation."""

from dataclasses import dataclass, field
from typing import Dict, List

from utils.scoring import UrlScoreDifferences
from utils.timestamps import make_timestamp


@dataclass
class RunContext:
    """
    State of a single invocation.

    The timestamp is fixed when the context is created and passed to every
    store write, so all reports of one run land in the same snapshot.
    """
    url_config: Dict[str, List[str]] = field(default_factory=dict)
    requested_regions: List[str] = field(default_factory=list)
    timestamp: str = field(default_factory=make_timestamp)

    # Region -> differences per URL/device, in audit order
    score_differences: Dict[str, List[UrlScoreDifferences]] = field(default_factory=dict)

    # Metadata
    audits_completed: int = 0
    baselines_missing: int = 0

    def start_region(self, region: str):
        """Register a region so it appears in the results even without differences."""
        self.score_differences.setdefault(region, [])

    def add_differences(self, region: str, entry: UrlScoreDifferences):
        self.score_differences.setdefault(region, []).append(entry)

    def has_differences(self) -> bool:
        return any(self.score_differences.values())

    def get_summary(self) -> Dict:
        """Get a summary of the run state."""
        return {
            'timestamp': self.timestamp,
            'audits_completed': self.audits_completed,
            'comparisons': sum(len(v) for v in self.score_differences.values()),
            'baselines_missing': self.baselines_missing,
        }
