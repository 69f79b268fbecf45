"""Audit engine backed by the PageSpeed Insights v5 API."""

import asyncio
import logging
from typing import Any, Dict, List

import requests

from engines.base_engine import AuditEngine
from engines.devices import get_device_profile
from utils.errors import AuditEngineError
from utils.report import render_template
from utils.scoring import AuditResult, Report

logger = logging.getLogger(__name__)

PAGESPEED_API = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"

CATEGORIES = ["performance", "accessibility", "best-practices", "seo"]

# Audits listed in the rendered report
KEY_METRICS = [
    "first-contentful-paint",
    "largest-contentful-paint",
    "total-blocking-time",
    "cumulative-layout-shift",
    "speed-index",
]


class PageSpeedEngine(AuditEngine):
    """
    Fetches Lighthouse results from Google's PageSpeed Insights.

    No local browser is needed; the Lighthouse result comes back in the
    API response under ``lighthouseResult``. Failures are not retried.
    """

    engine_name = "psi"

    def __init__(self, api_key: str = "", timeout: int = 60, session=None):
        """
        Args:
            api_key: Google API key (optional, raises the quota)
            timeout: Request timeout in seconds
            session: requests.Session to use (one is created when omitted)
        """
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def build_params(self, url: str, device: str) -> List[tuple]:
        profile = get_device_profile(device)
        params = [("url", url), ("strategy", profile.psi_strategy)]
        params += [("category", c) for c in CATEGORIES]
        if self.api_key:
            params.append(("key", self.api_key))
        return params

    async def run(self, url: str, device: str) -> AuditResult:
        logger.info("Requesting PageSpeed Insights for %s on %s", url, device)
        lhr = await asyncio.to_thread(self._fetch, url, device)
        return AuditResult(lhr=lhr, artifact=self.render_artifact(lhr, url, device))

    def _fetch(self, url: str, device: str) -> Dict[str, Any]:
        try:
            resp = self.session.get(PAGESPEED_API, params=self.build_params(url, device), timeout=self.timeout)
        except requests.RequestException as e:
            raise AuditEngineError(url, device, f"PageSpeed request failed: {e}")

        if resp.status_code != 200:
            raise AuditEngineError(url, device, f"PageSpeed HTTP {resp.status_code}: {resp.text[:500]}")

        try:
            data = resp.json()
        except ValueError as e:
            raise AuditEngineError(url, device, f"PageSpeed returned invalid JSON: {e}")

        lhr = data.get("lighthouseResult")
        if not isinstance(lhr, dict) or "categories" not in lhr:
            raise AuditEngineError(url, device, "PageSpeed response has no lighthouseResult")
        return lhr

    def render_artifact(self, lhr: Dict[str, Any], url: str, device: str) -> str:
        """Small HTML report of the category scores and key metrics."""
        audits = lhr.get("audits") or {}
        metrics = []
        for audit_id in KEY_METRICS:
            audit = audits.get(audit_id)
            if audit:
                metrics.append({
                    'title': audit.get('title', audit_id),
                    'display_value': audit.get('displayValue', ''),
                })

        return render_template(
            "psi_report.html",
            url=lhr.get("finalUrl") or url,
            strategy=get_device_profile(device).psi_strategy,
            fetch_time=lhr.get("fetchTime", ""),
            lighthouse_version=lhr.get("lighthouseVersion", ""),
            categories=list(Report.from_lhr(lhr).categories.values()),
            metrics=metrics,
        )

    async def close(self):
        self.session.close()
