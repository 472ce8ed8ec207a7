"""
Configuration persistence infrastructure.
Loads and saves the per-user q-copy configuration file.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Mapping, Optional

import yaml
from platformdirs import user_config_dir
from pydantic import ValidationError

from ..domain.entities import Config
from ..domain.errors import ConfigurationError
from ..domain.validation import normalize_path

APP_NAME = "q-copy"
CONFIG_FILENAME = "config.json"
CONFIG_ENV_VAR = "QCOPY_CONFIG"
LEGACY_PATHS_ENV_VAR = "FILE_PATHS"


def default_config_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Return the configuration path, honouring the ``QCOPY_CONFIG`` override."""
    environ = os.environ if environ is None else environ
    override = environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path(user_config_dir(APP_NAME)) / CONFIG_FILENAME


class ConfigStore:
    """Reads and writes the persisted Config as a JSON document."""

    def __init__(
        self,
        config_path: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize with an optional custom config path."""
        self.environ = os.environ if environ is None else environ
        self.config_path = Path(config_path) if config_path else default_config_path(self.environ)
        self.logger = logger or logging.getLogger(__name__)

    def load(self) -> Config:
        """Load the configuration; a missing file yields an empty Config."""
        config = self._read() if self.config_path.exists() else Config()

        if not config.file_paths:
            migrated = self._paths_from_environment()
            if migrated:
                config.file_paths = migrated
                self.save(config)
                self.logger.info(
                    "Configuration migrated from %s to %s", LEGACY_PATHS_ENV_VAR, self.config_path
                )

        return config

    def save(self, config: Config) -> None:
        """Atomically write the configuration to disk."""
        payload = json.dumps(config.model_dump(mode="json"), indent=2) + "\n"
        directory = self.config_path.parent

        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".q-copy-", suffix=".tmp", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_name, self.config_path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration ({e})", str(self.config_path)) from e

        self.logger.debug("Saved configuration to %s", self.config_path)

    def _read(self) -> Config:
        """Parse the configuration file into a Config."""
        try:
            with open(self.config_path, "r", encoding="utf-8") as file:
                raw_config = yaml.safe_load(file)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid configuration syntax ({e})", str(self.config_path)) from e
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Error loading configuration ({e})", str(self.config_path)) from e

        # An empty file is an empty configuration
        if raw_config is None:
            return Config()

        if not isinstance(raw_config, dict):
            raise ConfigurationError("Configuration must be a JSON object", str(self.config_path))

        try:
            return Config.model_validate(raw_config)
        except ValidationError as e:
            issues = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in e.errors()
            )
            raise ConfigurationError(f"Invalid configuration ({issues})", str(self.config_path)) from e

    def _paths_from_environment(self) -> List[str]:
        """Read a comma-separated path list from the legacy environment variable."""
        raw = self.environ.get(LEGACY_PATHS_ENV_VAR, "")
        paths = [normalize_path(part) for part in raw.split(",") if part.strip()]
        return list(dict.fromkeys(paths))
