"""Configuration loading: .env, environment settings and the URL config file."""

import os
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from utils.errors import ConfigError

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent


def load_env_file() -> bool:
    """Load environment variables from .env file."""
    env_paths = [
        PROJECT_ROOT / ".env",
        Path.cwd() / ".env"
    ]
    for env_path in env_paths:
        if env_path.exists():
            with open(env_path, 'r') as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith('#') and '=' in line:
                        key, value = line.split('=', 1)
                        os.environ[key.strip()] = value.strip()
            logger.debug("Loaded environment from: %s", env_path)
            return True
    return False


def _env_flag(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    try:
        return int(val)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {val!r}")


@dataclass
class Settings:
    """Runtime settings read from the environment. CLI flags override them."""
    urls_file: str = "urls.json"
    results_dir: str = "results"
    audit_engine: str = "lighthouse"
    lighthouse_bin: str = "lighthouse"
    chrome_headless: bool = True
    psi_api_key: str = ""
    psi_timeout: int = 60
    baseline_policy: str = "previous"
    baseline_max_depth: int = 1

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            urls_file=os.getenv("URLS_FILE", cls.urls_file),
            results_dir=os.getenv("RESULTS_DIR", cls.results_dir),
            audit_engine=os.getenv("AUDIT_ENGINE", cls.audit_engine).lower(),
            lighthouse_bin=os.getenv("LIGHTHOUSE_BIN", cls.lighthouse_bin),
            chrome_headless=_env_flag("CHROME_HEADLESS", cls.chrome_headless),
            psi_api_key=os.getenv("PSI_API_KEY", cls.psi_api_key),
            psi_timeout=_env_int("PSI_TIMEOUT", cls.psi_timeout),
            baseline_policy=os.getenv("BASELINE_POLICY", cls.baseline_policy).lower(),
            baseline_max_depth=_env_int("BASELINE_MAX_DEPTH", cls.baseline_max_depth),
        )


def load_url_config(config_path) -> Dict[str, List[str]]:
    """
    Read the region -> URLs mapping.

    Args:
        config_path: Path to a JSON object mapping region code to a list of URLs

    Returns:
        Dict preserving the file's region order

    Raises:
        ConfigError: if the file is missing, not JSON, or not shaped as expected
    """
    path = Path(config_path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ConfigError(f"URL config not found: {path}")
    except json.JSONDecodeError as e:
        raise ConfigError(f"URL config {path} is not valid JSON: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"URL config {path} must be a JSON object of region -> URL list")

    url_config: Dict[str, List[str]] = {}
    for region, urls in data.items():
        if not isinstance(urls, list) or not all(isinstance(u, str) for u in urls):
            raise ConfigError(f"Region '{region}' must map to a list of URL strings")
        url_config[region] = [u.strip() for u in urls if u.strip()]

    return url_config


def get_secret(key: str, default: Optional[str] = None) -> Optional[str]:
    """Get secret from env vars or Streamlit secrets."""
    value = os.environ.get(key)
    if not value:
        try:
            import streamlit as st
            value = st.secrets.get(key)
        except Exception:
            pass
    return value or default
