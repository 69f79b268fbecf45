"""Device profiles the audits run under."""

from dataclasses import dataclass, field
from typing import Dict, List

from utils.errors import ConfigError


@dataclass(frozen=True)
class DeviceProfile:
    """Emulation settings for one device class."""
    name: str
    # Lighthouse CLI flags: form factor, throttling, screen emulation, user agent
    lighthouse_flags: List[str] = field(default_factory=list)
    # PageSpeed Insights "strategy" parameter
    psi_strategy: str = ""


MOBILE = DeviceProfile(
    name="mobile",
    # Lighthouse defaults: mobileSlow4G throttling, mobile screen and UA
    lighthouse_flags=["--form-factor=mobile"],
    psi_strategy="mobile",
)

DESKTOP = DeviceProfile(
    name="desktop",
    # desktopDense4G throttling, desktop screen and UA
    lighthouse_flags=["--preset=desktop"],
    psi_strategy="desktop",
)

DEVICE_PROFILES: Dict[str, DeviceProfile] = {
    MOBILE.name: MOBILE,
    DESKTOP.name: DESKTOP,
}

# Audit order within one URL
DEVICES = [MOBILE.name, DESKTOP.name]


def get_device_profile(device: str) -> DeviceProfile:
    try:
        return DEVICE_PROFILES[device]
    except KeyError:
        raise ConfigError(f"Unknown device profile '{device}' (choose from: {', '.join(DEVICES)})")
