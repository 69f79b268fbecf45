"""
Tests for the filesystem result store (layout, naming, snapshot listing).
"""

from __future__ import annotations

import json
import os

import pytest

from utils.errors import BaselineNotFound, StorageError
from utils.result_store import url_to_filename
from utils.scoring import AuditResult


def _result(lhr_factory, scores=None, url="https://example.com/"):
    return AuditResult(lhr=lhr_factory(scores or {"performance": 0.9}, url), artifact="<html>report</html>")


def test_url_to_filename_strips_scheme_and_slashes():
    assert url_to_filename("https://example.com/") == "example.com_"
    assert url_to_filename("http://example.com/a/b") == "example.com_a_b"
    assert url_to_filename("example.com/a") == "example.com_a"


def test_url_to_filename_scheme_collision():
    """http and https variants of the same URL share one file name."""
    assert url_to_filename("http://x.com/a") == url_to_filename("https://x.com/a") == "x.com_a"


def test_url_to_filename_only_strips_leading_scheme():
    assert url_to_filename("https://x.com/?next=https://y.com") == "x.com_?next=https:__y.com"


def test_save_writes_report_and_artifact(store, lhr_factory):
    result = _result(lhr_factory)
    path = store.save("us", "2024-01-01_10-00-00", "mobile", "https://example.com/", result)

    expected_dir = store.root / "us" / "2024-01-01_10-00-00" / "mobile"
    assert path == expected_dir / "example.com_.json"
    assert json.loads(path.read_text(encoding="utf-8")) == result.lhr
    assert (expected_dir / "example.com_.html").read_text(encoding="utf-8") == "<html>report</html>"


def test_save_overwrites_same_slot(store, lhr_factory):
    store.save("us", "2024-01-01_10-00-00", "mobile", "https://example.com/", _result(lhr_factory, {"seo": 0.1}))
    path = store.save("us", "2024-01-01_10-00-00", "mobile", "https://example.com/", _result(lhr_factory, {"seo": 0.2}))
    assert store.load_report(path)["categories"]["seo"]["score"] == 0.2


def test_save_unwritable_device_dir_raises_storage_error(store, lhr_factory):
    """A regular file where the device directory belongs makes the write fail."""
    blocker = store.root / "us" / "2024-01-01_10-00-00" / "mobile"
    blocker.parent.mkdir(parents=True)
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(StorageError) as excinfo:
        store.save("us", "2024-01-01_10-00-00", "mobile", "https://example.com/", _result(lhr_factory))
    assert excinfo.value.path == blocker / "example.com_.json"
    assert blocker.is_file()


def test_list_snapshots_orders_by_timestamp_not_mtime(store):
    """Directory mtimes are deliberately scrambled; order must follow the names."""
    names = ["2024-01-02_09-00-00", "2023-12-31_23-59-59", "2024-01-02_10-00-00"]
    for i, name in enumerate(names):
        path = store.root / "us" / name
        path.mkdir(parents=True)
        os.utime(path, (1_000_000 + i, 1_000_000 + (10 - i)))

    snapshots = store.list_snapshots("us")
    assert [s.timestamp for s in snapshots] == [
        "2024-01-02_10-00-00",
        "2024-01-02_09-00-00",
        "2023-12-31_23-59-59",
    ]
    assert snapshots[0].region == "us"


def test_list_snapshots_ignores_foreign_entries(store):
    (store.root / "us" / "2024-01-01_10-00-00").mkdir(parents=True)
    (store.root / "us" / "notes").mkdir()
    (store.root / "us" / "2024-01-02_10-00-00").write_text("not a directory")
    assert [s.timestamp for s in store.list_snapshots("us")] == ["2024-01-01_10-00-00"]


def test_list_snapshots_missing_region(store):
    assert store.list_snapshots("nowhere") == []


def test_load_report_missing_raises_baseline_not_found(store):
    with pytest.raises(BaselineNotFound):
        store.load_report(store.root / "us" / "missing.json")


def test_load_report_invalid_json_raises_storage_error(store):
    path = store.root / "us" / "broken.json"
    path.parent.mkdir(parents=True)
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(StorageError, match="invalid JSON"):
        store.load_report(path)


def test_save_summary_layout(store):
    path = store.save_summary("2024-01-01_10-00-00", "<html></html>")
    assert path == store.root / "summary" / "summary-2024-01-01_10-00-00.html"
    assert path.read_text(encoding="utf-8") == "<html></html>"
    assert store.list_summaries() == [path]


def test_list_regions_excludes_summary(store, lhr_factory):
    store.save("us", "2024-01-01_10-00-00", "mobile", "https://example.com/", _result(lhr_factory))
    store.save_summary("2024-01-01_10-00-00", "<html></html>")
    assert store.list_regions() == ["us"]


def test_history_newest_first_and_skips_partial_snapshots(store, lhr_factory):
    url = "https://example.com/"
    store.save("us", "2024-01-01_10-00-00", "mobile", url, _result(lhr_factory, {"seo": 0.5}))
    (store.root / "us" / "2024-01-02_10-00-00" / "mobile").mkdir(parents=True)
    store.save("us", "2024-01-03_10-00-00", "mobile", url, _result(lhr_factory, {"seo": 0.7}))

    history = store.history("us", "mobile", url)
    assert [snapshot.timestamp for snapshot, _ in history] == ["2024-01-03_10-00-00", "2024-01-01_10-00-00"]
    assert history[0][1].get("seo").score == 0.7
