"""Configuration loading for the Basecamp import.

Reads ``.env`` files, the YAML configuration file and ``B2R_*``
environment variables, and produces a validated ``Settings`` object.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from b2r.schemas.settings import Settings

config_logger = logging.getLogger("config_loader")

DEFAULT_CONFIG_FILE = Path("config/config.yaml")


def is_test_environment() -> bool:
    """Detect if code is running in a test environment.

    Returns:
        bool: True when pytest is running or B2R_TEST_MODE is set

    """
    if "PYTEST_CURRENT_TEST" in os.environ:
        return True
    return os.environ.get("B2R_TEST_MODE", "").lower() in ("true", "1", "yes")


class ConfigLoader:
    """Loads settings from YAML and environment variables.

    Environment variables (``B2R_*``) take precedence over the YAML file,
    which takes precedence over the schema defaults.
    """

    def __init__(self, config_file_path: Path | None = None) -> None:
        """Initialize the configuration loader.

        Args:
            config_file_path: YAML file to read. Defaults to ``B2R_CONFIG_FILE``
                or ``config/config.yaml``; a missing default file is not an error.

        """
        self._load_environment_configuration()

        explicit = config_file_path is not None or "B2R_CONFIG_FILE" in os.environ
        if config_file_path is None:
            config_file_path = Path(os.environ.get("B2R_CONFIG_FILE", DEFAULT_CONFIG_FILE))
        self.config_file_path = config_file_path

        self.yaml_config: dict[str, Any] = {}
        if config_file_path.exists():
            self.yaml_config = self._load_yaml_config(config_file_path)
        elif explicit:
            config_logger.error("Config file not found: %s", config_file_path)
            msg = f"Config file not found: {config_file_path}"
            raise FileNotFoundError(msg)
        else:
            config_logger.debug("No config file at %s, using defaults", config_file_path)

        self.settings = self._build_settings()

    def _load_environment_configuration(self) -> None:
        """Load ``.env`` files; later files override earlier ones.

        - .env (base)
        - .env.local (local overrides)
        - .env.test (only under test)
        """
        load_dotenv(".env")

        if Path(".env.local").exists():
            load_dotenv(".env.local", override=True)
            config_logger.debug("Loaded local overrides from .env.local")

        if is_test_environment() and Path(".env.test").exists():
            load_dotenv(".env.test", override=True)
            config_logger.debug("Loaded test environment from .env.test")

    def _load_yaml_config(self, config_file_path: Path) -> dict[str, Any]:
        """Load the ``import`` section of the YAML configuration file.

        Args:
            config_file_path: Path to the YAML configuration file

        Returns:
            dict: Settings values keyed by ``Settings`` field name

        """
        with config_file_path.open("r", encoding="utf-8") as config_file:
            raw = yaml.safe_load(config_file) or {}

        if not isinstance(raw, dict):
            msg = f"Config file {config_file_path} must contain a mapping"
            raise ValueError(msg)

        section = raw.get("import", raw)
        config_logger.debug("Loaded %d settings from %s", len(section), config_file_path)
        return dict(section)

    def _build_settings(self) -> Settings:
        """Merge YAML values under environment values and validate."""
        from_env = Settings().model_dump(exclude_unset=True)
        merged = {**self.yaml_config, **from_env}
        return Settings.model_validate(merged)

    def get_settings(self) -> Settings:
        return self.settings

    def get_value(self, key: str, default: Any = None) -> Any:
        """Get a specific configuration value."""
        return getattr(self.settings, key, default)
