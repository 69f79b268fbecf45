"""Audit engine backed by the Lighthouse CLI and a Playwright-launched Chromium."""

import json
import asyncio
import logging
import tempfile
from pathlib import Path
from typing import Callable, List, Optional

from engines.base_engine import AuditEngine
from engines.devices import get_device_profile
from utils.browser import BrowserManager
from utils.errors import AuditEngineError, BrowserLaunchError
from utils.scoring import AuditResult

logger = logging.getLogger(__name__)


class LighthouseEngine(AuditEngine):
    """
    Runs ``lighthouse`` against a fresh headless Chromium for every audit.

    The browser is launched before the audit and closed before ``run``
    returns, so no two audits ever share or overlap a browser.
    """

    engine_name = "lighthouse"

    def __init__(
        self,
        lighthouse_bin: str = "lighthouse",
        headless: bool = True,
        browser_factory: Optional[Callable[[], BrowserManager]] = None
    ):
        """
        Args:
            lighthouse_bin: Lighthouse executable (name on PATH or full path)
            headless: Run Chromium headless
            browser_factory: Creates the browser manager for one audit
        """
        self.lighthouse_bin = lighthouse_bin
        self.headless = headless
        self.browser_factory = browser_factory or (lambda: BrowserManager(headless=self.headless))

    def build_command(self, url: str, device: str, port: int, output_path: Path) -> List[str]:
        """Lighthouse CLI arguments for one audit."""
        profile = get_device_profile(device)
        return [
            self.lighthouse_bin,
            url,
            f"--port={port}",
            "--output=json",
            "--output=html",
            f"--output-path={output_path}",
            "--quiet",
            *profile.lighthouse_flags,
        ]

    async def run(self, url: str, device: str) -> AuditResult:
        logger.info("Running Lighthouse for %s on %s", url, device)
        try:
            async with self.browser_factory() as browser:
                with tempfile.TemporaryDirectory(prefix="lighthouse-") as tmp:
                    output_path = Path(tmp) / "lighthouse"
                    command = self.build_command(url, device, browser.port, output_path)
                    await self._run_command(command, url, device)
                    return self._read_outputs(Path(tmp), url, device)
        except BrowserLaunchError as e:
            if e.url:
                raise
            raise BrowserLaunchError(e.reason, url, device) from e

    async def _run_command(self, command: List[str], url: str, device: str):
        logger.debug("Executing: %s", " ".join(command))
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            raise AuditEngineError(
                url, device,
                f"'{self.lighthouse_bin}' not found. Install with: npm install -g lighthouse"
            )

        _, stderr = await process.communicate()
        if process.returncode != 0:
            detail = stderr.decode('utf-8', errors='replace').strip()[-500:]
            raise AuditEngineError(url, device, f"lighthouse exited with {process.returncode}: {detail}")

    def _read_outputs(self, output_dir: Path, url: str, device: str) -> AuditResult:
        """Lighthouse writes <path>.report.json and <path>.report.html for multiple outputs."""
        json_files = sorted(output_dir.glob("*.json"))
        html_files = sorted(output_dir.glob("*.html"))
        if not json_files or not html_files:
            raise AuditEngineError(url, device, f"lighthouse produced no report in {output_dir}")

        try:
            lhr = json.loads(json_files[0].read_text(encoding='utf-8'))
            artifact = html_files[0].read_text(encoding='utf-8')
        except (OSError, json.JSONDecodeError) as e:
            raise AuditEngineError(url, device, f"unreadable lighthouse output: {e}")

        if lhr.get("runtimeError"):
            logger.warning("Lighthouse runtime error for %s (%s): %s",
                           url, device, lhr["runtimeError"].get("message", ""))

        return AuditResult(lhr=lhr, artifact=artifact)
