"""Setup configuration for droidvm."""

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from droidvm.models.setup_config import SetupConfigModel
from droidvm.paths import TermuxPaths

logger = logging.getLogger(__name__)


class SetupConfig:
    """Manages configuration from ~/.config/droidvm/config.yml."""

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or TermuxPaths.config_file()
        self.model = self._load()

    def _load(self) -> SetupConfigModel:
        """Load configuration from file, falling back to defaults."""
        if not self.config_path.exists():
            return SetupConfigModel()

        try:
            with open(self.config_path) as f:
                raw_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config from {self.config_path}: {e}")
            return SetupConfigModel()

        if not isinstance(raw_config, dict):
            logger.warning(f"Config {self.config_path} must contain a mapping, using defaults")
            return SetupConfigModel()

        try:
            return SetupConfigModel.model_validate(raw_config)
        except ValidationError as e:
            logger.warning(f"Config validation errors: {e}")
            invalid = {err["loc"][0] for err in e.errors() if err["loc"]}

        # Drop the offending top-level sections and keep the rest
        cleaned = {k: v for k, v in raw_config.items() if k not in invalid}
        try:
            return SetupConfigModel.model_validate(cleaned)
        except ValidationError:
            return SetupConfigModel()

    @property
    def install_dir(self) -> Path:
        """Get the droidvm working directory.

        Priority:
        1. install_dir in config.yml
        2. DROIDVM_HOME environment variable / ~/droidvm
        """
        if self.model.install_dir:
            return Path(self.model.install_dir).expanduser()
        return TermuxPaths.install_dir()

    @property
    def state_file(self) -> Path:
        return self.install_dir / "state.json"


# Singleton instance
_config: Optional[SetupConfig] = None


def get_config() -> SetupConfig:
    """Get the global setup configuration."""
    global _config
    if _config is None:
        _config = SetupConfig()
    return _config


def reset_config() -> None:
    """Drop the cached configuration (next get_config() reloads it)."""
    global _config
    _config = None
