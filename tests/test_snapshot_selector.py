"""
Tests for baseline selection across timestamped snapshots.
"""

from __future__ import annotations

import os

import pytest

from utils.errors import ConfigError, StorageError
from utils.scoring import AuditResult
from utils.snapshot_selector import BaselinePolicy, SnapshotSelector

URL = "https://example.com/"


def _save(store, lhr_factory, timestamp, scores, device="mobile", url=URL, region="us"):
    result = AuditResult(lhr=lhr_factory(scores, url), artifact="<html></html>")
    return store.save(region, timestamp, device, url, result)


def test_single_snapshot_has_no_baseline(store, lhr_factory):
    current = _save(store, lhr_factory, "2024-01-01_10-00-00", {"seo": 0.5})
    assert SnapshotSelector(store).find_previous("us", current, URL, "mobile") is None


def test_returns_previous_snapshot_report(store, lhr_factory):
    _save(store, lhr_factory, "2024-01-01_10-00-00", {"seo": 0.5})
    _save(store, lhr_factory, "2024-01-02_10-00-00", {"seo": 0.6})
    current = _save(store, lhr_factory, "2024-01-03_10-00-00", {"seo": 0.7})

    previous = SnapshotSelector(store).find_previous("us", current, URL, "mobile")
    assert previous.get("seo").score == 0.6


def test_previous_snapshot_without_report_is_absent(store, lhr_factory):
    """A partial previous snapshot means no baseline, not an error."""
    _save(store, lhr_factory, "2024-01-01_10-00-00", {"seo": 0.5})
    _save(store, lhr_factory, "2024-01-02_10-00-00", {"seo": 0.6}, device="desktop")
    current = _save(store, lhr_factory, "2024-01-03_10-00-00", {"seo": 0.7})

    assert SnapshotSelector(store).find_previous("us", current, URL, "mobile") is None


def test_latest_available_walks_back(store, lhr_factory):
    _save(store, lhr_factory, "2024-01-01_10-00-00", {"seo": 0.5})
    _save(store, lhr_factory, "2024-01-02_10-00-00", {"seo": 0.6}, device="desktop")
    current = _save(store, lhr_factory, "2024-01-03_10-00-00", {"seo": 0.7})

    selector = SnapshotSelector(store, policy=BaselinePolicy.LATEST_AVAILABLE, max_depth=2)
    assert selector.find_previous("us", current, URL, "mobile").get("seo").score == 0.5


def test_latest_available_respects_depth(store, lhr_factory):
    _save(store, lhr_factory, "2024-01-01_10-00-00", {"seo": 0.5})
    (store.root / "us" / "2024-01-02_10-00-00").mkdir()
    (store.root / "us" / "2024-01-03_10-00-00").mkdir()
    current = _save(store, lhr_factory, "2024-01-04_10-00-00", {"seo": 0.7})

    selector = SnapshotSelector(store, policy=BaselinePolicy.LATEST_AVAILABLE, max_depth=2)
    assert selector.find_previous("us", current, URL, "mobile") is None


def test_ordering_ignores_directory_mtime(store, lhr_factory):
    """Touching an old snapshot must not make it look like the previous run."""
    _save(store, lhr_factory, "2024-01-01_10-00-00", {"seo": 0.1})
    _save(store, lhr_factory, "2024-01-02_10-00-00", {"seo": 0.6})
    current = _save(store, lhr_factory, "2024-01-03_10-00-00", {"seo": 0.7})

    oldest = store.root / "us" / "2024-01-01_10-00-00"
    os.utime(oldest, (4_000_000_000, 4_000_000_000))

    previous = SnapshotSelector(store).find_previous("us", current, URL, "mobile")
    assert previous.get("seo").score == 0.6


def test_newer_snapshots_are_never_baselines(store, lhr_factory):
    """Only snapshots older than the current one are candidates."""
    _save(store, lhr_factory, "2024-01-01_10-00-00", {"seo": 0.5})
    current = _save(store, lhr_factory, "2024-01-02_10-00-00", {"seo": 0.6})
    _save(store, lhr_factory, "2030-01-01_00-00-00", {"seo": 0.9})

    previous = SnapshotSelector(store).find_previous("us", current, URL, "mobile")
    assert previous.get("seo").score == 0.5


def test_corrupt_previous_report_is_fatal(store, lhr_factory):
    previous_path = _save(store, lhr_factory, "2024-01-01_10-00-00", {"seo": 0.5})
    previous_path.write_text("{corrupt", encoding="utf-8")
    current = _save(store, lhr_factory, "2024-01-02_10-00-00", {"seo": 0.6})

    with pytest.raises(StorageError):
        SnapshotSelector(store).find_previous("us", current, URL, "mobile")


@pytest.mark.parametrize("content", ["[]", "null", '{"categories": []}'])
def test_previous_report_that_is_not_a_result_object_is_fatal(store, lhr_factory, content):
    """Valid JSON of the wrong shape is a storage error, like any other corrupt baseline."""
    previous_path = _save(store, lhr_factory, "2024-01-01_10-00-00", {"seo": 0.5})
    previous_path.write_text(content, encoding="utf-8")
    current = _save(store, lhr_factory, "2024-01-02_10-00-00", {"seo": 0.6})

    with pytest.raises(StorageError, match="not a Lighthouse result object"):
        SnapshotSelector(store).find_previous("us", current, URL, "mobile")


def test_policy_parse():
    assert BaselinePolicy.parse("previous") is BaselinePolicy.PREVIOUS_RUN
    assert BaselinePolicy.parse("latest-available") is BaselinePolicy.LATEST_AVAILABLE
    with pytest.raises(ConfigError, match="Unknown baseline policy"):
        BaselinePolicy.parse("oldest")


def test_depth_must_be_positive(store):
    with pytest.raises(ConfigError):
        SnapshotSelector(store, max_depth=0)
