"""
Configuration management for tabdedup.

Supports both a user config (~/.config/tabdedup/config.toml) and a local
one (./tabdedup.toml or ./.tabdeduprc), overridden by TABDEDUP_* environment
variables and finally by command-line arguments.
"""
import logging
import math
import os
import tomli
import tomli_w
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass, field, asdict

from tabdedup.constants import DEFAULT_THRESHOLD, THRESHOLD_UI_MIN, THRESHOLD_UI_MAX

logger = logging.getLogger(__name__)

ENV_PREFIX = "TABDEDUP_"
USER_CONFIG_PATH = Path.home() / ".config" / "tabdedup" / "config.toml"


@dataclass
class TabDedupConfig:
    """
    tabdedup configuration with sensible defaults.

    Configuration hierarchy (highest to lowest priority):
    1. Command-line arguments
    2. Environment variables (TABDEDUP_*)
    3. Local config file (./tabdedup.toml or ./.tabdeduprc)
    4. User config file (~/.config/tabdedup/config.toml)
    5. Defaults
    """

    # Duplicate detection
    duplicate_threshold: float = field(default=DEFAULT_THRESHOLD)
    keep_strategy: str = field(default="first")  # first, last
    skip_internal_pages: bool = field(default=True)

    # Display settings
    output_format: str = field(default="table")  # table, json, plain, ids
    color_output: bool = field(default=True)
    show_scores: bool = field(default=True)

    # Advanced
    log_level: str = field(default="INFO")

    @classmethod
    def load(cls, config_file: Optional[Path] = None) -> "TabDedupConfig":
        """
        Load configuration from files and environment.

        Args:
            config_file: Specific config file to load (applied after the
                user and local files)

        Returns:
            Merged configuration object
        """
        config = cls()

        if USER_CONFIG_PATH.exists():
            config._merge(cls._load_toml(USER_CONFIG_PATH))

        local_paths = [
            Path.cwd() / "tabdedup.toml",
            Path.cwd() / ".tabdeduprc",
        ]
        for path in local_paths:
            if path.exists():
                config._merge(cls._load_toml(path))
                break

        if config_file and config_file.exists():
            config._merge(cls._load_toml(config_file))

        config._apply_env_vars()
        config.check_threshold()

        return config

    @staticmethod
    def _load_toml(path: Path) -> Dict[str, Any]:
        """Load TOML configuration file."""
        with open(path, "rb") as f:
            return tomli.load(f)

    def _merge(self, data: Dict[str, Any]):
        """Merge configuration data into this instance, ignoring unknown keys."""
        for key, value in data.items():
            if hasattr(self, key):
                self.set_value(key, value)
            else:
                logger.warning(f"Ignoring unknown config key: {key}")

    def _apply_env_vars(self):
        """Apply environment variables with the TABDEDUP_ prefix."""
        for key, value in os.environ.items():
            if key.startswith(ENV_PREFIX):
                config_key = key[len(ENV_PREFIX):].lower()
                if hasattr(self, config_key):
                    self.set_value(config_key, value)

    def set_value(self, key: str, value: Any):
        """
        Set a field, converting strings to the field's type.

        Raises:
            AttributeError: Unknown key
            ValueError: Value cannot be converted
        """
        if not hasattr(self, key):
            raise AttributeError(f"Unknown config key: {key}")

        current = getattr(self, key)
        if isinstance(value, str):
            if isinstance(current, bool):
                value = value.lower() in ("true", "1", "yes")
            elif isinstance(current, float):
                value = float(value)
            elif isinstance(current, int):
                value = int(value)
        elif isinstance(current, float) and isinstance(value, int) and not isinstance(value, bool):
            value = float(value)
        setattr(self, key, value)

    def check_threshold(self) -> bool:
        """
        Warn when the threshold leaves the usual range.

        Out-of-range values are still used as given.
        """
        t = self.duplicate_threshold
        if not math.isfinite(t) or not 0.0 <= t <= 1.0:
            logger.warning(f"duplicate_threshold {t} is outside [0, 1]; results will be degenerate")
            return False
        if not THRESHOLD_UI_MIN <= t <= THRESHOLD_UI_MAX:
            logger.info(f"duplicate_threshold {t} is outside the usual "
                        f"{THRESHOLD_UI_MIN}-{THRESHOLD_UI_MAX} range")
        return True

    def save(self, path: Optional[Path] = None):
        """
        Save current configuration to TOML file.

        Args:
            path: Path to save to (defaults to user config)
        """
        if path is None:
            path = USER_CONFIG_PATH

        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "wb") as f:
            tomli_w.dump(asdict(self), f)


# Global configuration instance
_config: Optional[TabDedupConfig] = None


def get_config(reload: bool = False, config_file: Optional[Path] = None) -> TabDedupConfig:
    """
    Get the global configuration instance.

    Args:
        reload: Force reload configuration from files
        config_file: Specific config file to load
    """
    global _config
    if _config is None or reload:
        _config = TabDedupConfig.load(config_file)
    return _config


def init_config(config_file: Optional[Path] = None, **kwargs) -> TabDedupConfig:
    """
    Initialize configuration with command-line overrides.

    Args:
        config_file: Config file given on the command line
        **kwargs: Other configuration overrides; None values are ignored

    Returns:
        Configured instance
    """
    config = get_config(reload=config_file is not None, config_file=config_file)

    for key, value in kwargs.items():
        if hasattr(config, key) and value is not None:
            config.set_value(key, value)

    return config
