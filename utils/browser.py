"""Headless Chromium lifecycle for Lighthouse audits, using Playwright."""

import socket
import logging
from typing import Optional

from utils.errors import BrowserLaunchError

logger = logging.getLogger(__name__)


def find_free_port() -> int:
    """Ask the OS for an unused local TCP port."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class BrowserManager:
    """
    Launches a Chromium instance that Lighthouse can drive over the
    DevTools protocol.

    One manager owns at most one browser at a time. Use it as an async
    context manager so the browser is closed before the next audit starts::

        async with BrowserManager() as browser:
            run_lighthouse(port=browser.port)
    """

    def __init__(self, headless: bool = True, port: Optional[int] = None):
        """
        Initialize the browser manager.

        Args:
            headless: Run browser in headless mode
            port: Remote debugging port (a free one is picked when omitted)
        """
        self.headless = headless
        self.port = port
        self._browser = None
        self._playwright = None

    async def launch(self):
        """Start Chromium with a remote debugging port."""
        if self._browser is not None:
            raise BrowserLaunchError("browser already running")

        try:
            from playwright.async_api import async_playwright
        except ImportError:
            raise BrowserLaunchError(
                "Playwright not installed. Run: pip install playwright && playwright install chromium"
            )

        if self.port is None:
            self.port = find_free_port()

        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                args=[f"--remote-debugging-port={self.port}"],
            )
        except Exception as e:
            await self.close()
            raise BrowserLaunchError(f"Chromium: {e}")

        logger.debug("Chromium listening on port %d", self.port)
        return self

    async def close(self):
        """Close browser and cleanup."""
        if self._browser:
            await self._browser.close()
            self._browser = None
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

    @property
    def is_running(self) -> bool:
        return self._browser is not None

    async def __aenter__(self):
        return await self.launch()

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
