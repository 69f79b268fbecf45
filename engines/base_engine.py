"""Base class for audit engines."""

from abc import ABC, abstractmethod

from utils.scoring import AuditResult


class AuditEngine(ABC):
    """
    Abstract base class for audit engines.

    An engine takes a URL and a device profile name and returns the
    Lighthouse result together with a rendered HTML report. Engines are
    used strictly one audit at a time.
    """

    engine_name: str = "base"

    @abstractmethod
    async def run(self, url: str, device: str) -> AuditResult:
        """
        Audit a single page.

        Args:
            url: Page to audit
            device: Device profile name ("mobile" or "desktop")

        Returns:
            AuditResult with the Lighthouse result and HTML artifact

        Raises:
            AuditEngineError: the audit could not be completed
        """
        pass

    async def close(self):
        """Release anything held between audits."""
        pass
