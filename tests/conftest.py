"""
Pytest fixtures for the score tracker. Results are written to a temporary
directory and audits are served by a fake engine, so no browser, Lighthouse
install or network is needed.
"""

from __future__ import annotations

import pytest

from engines.base_engine import AuditEngine
from utils.result_store import ResultStore
from utils.scoring import AuditResult

CATEGORY_TITLES = {
    "performance": "Performance",
    "accessibility": "Accessibility",
    "best-practices": "Best Practices",
    "seo": "SEO",
}


def make_lhr(scores: dict, url: str = "https://example.com/") -> dict:
    """Minimal Lighthouse result with the given category scores (0-1 or None)."""
    return {
        "lighthouseVersion": "12.0.0",
        "requestedUrl": url,
        "finalUrl": url,
        "fetchTime": "2024-01-01T10:00:00.000Z",
        "categories": {
            category_id: {
                "id": category_id,
                "title": CATEGORY_TITLES.get(category_id, category_id),
                "score": score,
            }
            for category_id, score in scores.items()
        },
        "audits": {},
    }


class FakeEngine(AuditEngine):
    """Returns canned scores per (url, device) and records every call."""

    engine_name = "fake"

    def __init__(self, scores=None, default=None, fail_on=None):
        self.scores = scores or {}
        self.default = default or {"performance": 0.5, "accessibility": 0.9, "best-practices": 1.0, "seo": 0.8}
        self.fail_on = fail_on
        self.calls = []
        self.closed = False

    async def run(self, url: str, device: str) -> AuditResult:
        from utils.errors import AuditEngineError

        self.calls.append((url, device))
        if self.fail_on == (url, device):
            raise AuditEngineError(url, device, "boom")
        scores = self.scores.get((url, device), self.default)
        return AuditResult(lhr=make_lhr(scores, url), artifact=f"<html><body>{url} {device}</body></html>")

    async def close(self):
        self.closed = True


@pytest.fixture
def lhr_factory():
    return make_lhr


@pytest.fixture
def fake_engine_factory():
    return FakeEngine


@pytest.fixture
def store(tmp_path):
    """Result store rooted in a temporary results directory."""
    return ResultStore(tmp_path / "results")
