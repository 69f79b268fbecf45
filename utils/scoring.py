"""Lighthouse category scores and score differences between two runs."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class CategoryScore:
    """Score of a single Lighthouse category (performance, seo, ...)."""
    id: str
    title: str
    score: Optional[float] = None  # 0-1, None when Lighthouse could not score it

    @property
    def percentage(self) -> float:
        """Score on a 0-100 scale; a missing score counts as 0."""
        return (self.score or 0) * 100


@dataclass(frozen=True)
class Report:
    """Category scores of one audit run for one URL/device, in Lighthouse order."""
    categories: Dict[str, CategoryScore] = field(default_factory=dict)

    @classmethod
    def from_lhr(cls, lhr: Dict[str, Any]) -> "Report":
        """Build a Report from a Lighthouse result (the persisted JSON)."""
        categories = {}
        for category_id, data in (lhr.get("categories") or {}).items():
            data = data or {}
            categories[category_id] = CategoryScore(
                id=category_id,
                title=data.get("title") or category_id,
                score=data.get("score"),
            )
        return cls(categories=categories)

    def get(self, category_id: str) -> Optional[CategoryScore]:
        return self.categories.get(category_id)

    def __len__(self) -> int:
        return len(self.categories)


@dataclass
class AuditResult:
    """What an audit engine returns: the Lighthouse result and the rendered HTML artifact."""
    lhr: Dict[str, Any]
    artifact: str

    @property
    def report(self) -> Report:
        return Report.from_lhr(self.lhr)


@dataclass(frozen=True)
class ScoreDifference:
    """Score change of one category, scores on a 0-100 scale."""
    title: str
    previous_score: float
    current_score: float

    @property
    def difference(self) -> float:
        return self.current_score - self.previous_score

    def as_row(self) -> Dict[str, str]:
        """Display row with two-decimal formatting."""
        return {
            'Category': self.title,
            'Previous Score': f"{self.previous_score:.2f}",
            'Current Score': f"{self.current_score:.2f}",
            'Difference': f"{self.difference:.2f}",
        }


@dataclass
class UrlScoreDifferences:
    """All category differences for one URL on one device."""
    url: str
    device: str
    differences: List[ScoreDifference] = field(default_factory=list)


def calculate_score_differences(previous: Report, current: Report) -> List[ScoreDifference]:
    """
    Compare two reports category by category.

    One entry per category of ``current``, in its order. A category missing
    from ``previous`` and a missing score both count as 0.
    """
    differences = []
    for category_id, category in current.categories.items():
        previous_category = previous.get(category_id)
        previous_score = previous_category.percentage if previous_category else 0.0
        differences.append(ScoreDifference(
            title=category.title,
            previous_score=previous_score,
            current_score=category.percentage,
        ))
    return differences
