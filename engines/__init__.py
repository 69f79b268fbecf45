"""Audit engines: the page-quality audit behind each (URL, device) run."""

from .base_engine import AuditEngine
from .devices import DeviceProfile, DEVICES, get_device_profile
from .lighthouse_engine import LighthouseEngine
from .psi_engine import PageSpeedEngine

from utils.errors import ConfigError

ENGINES = {
    LighthouseEngine.engine_name: LighthouseEngine,
    PageSpeedEngine.engine_name: PageSpeedEngine,
}


def create_engine(name: str, settings) -> AuditEngine:
    """
    Build the configured audit engine.

    Args:
        name: Engine name ("lighthouse" or "psi")
        settings: utils.config.Settings

    Raises:
        ConfigError: unknown engine name
    """
    if name == LighthouseEngine.engine_name:
        return LighthouseEngine(lighthouse_bin=settings.lighthouse_bin, headless=settings.chrome_headless)
    if name == PageSpeedEngine.engine_name:
        return PageSpeedEngine(api_key=settings.psi_api_key, timeout=settings.psi_timeout)
    raise ConfigError(f"Unknown audit engine '{name}' (choose from: {', '.join(ENGINES)})")


__all__ = [
    'AuditEngine',
    'DeviceProfile', 'DEVICES', 'get_device_profile',
    'LighthouseEngine',
    'PageSpeedEngine',
    'ENGINES', 'create_engine',
]
