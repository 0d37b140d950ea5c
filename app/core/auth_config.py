import yaml
import logging
import os
from pathlib import Path
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# <raiz do projeto>/config/auth.yaml, sobrescrito por AUTH_CONFIG_PATH
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "auth.yaml"

_config_cache: Optional[Dict[str, Any]] = None


def _config_path() -> Path:
    override = os.getenv("AUTH_CONFIG_PATH")
    return Path(override) if override else DEFAULT_CONFIG_PATH


def load_auth_config() -> Dict[str, Any]:
    """
    Load token, password and rate-limit settings from YAML.
    Read once per process; a missing or unreadable file means built-in defaults.
    """
    global _config_cache
    if _config_cache is not None:
        return _config_cache

    config_file = _config_path()
    if not config_file.exists():
        logger.warning("auth configuration not found at %s, using defaults", config_file)
        _config_cache = {}
        return _config_cache

    try:
        with open(config_file) as f:
            _config_cache = yaml.safe_load(f) or {}
        logger.info("loaded auth configuration from %s", config_file)
    except (OSError, yaml.YAMLError) as e:
        logger.error("could not read auth configuration %s: %s", config_file, e)
        _config_cache = {}
    return _config_cache


def get_auth_setting(key: str, default: Any) -> Any:
    """Read a single key from the `auth` section, falling back to `default`."""
    return load_auth_config().get("auth", {}).get(key, default)
