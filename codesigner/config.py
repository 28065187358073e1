"""Configuration file loading and validation."""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from . import actions
from .backends.base import DEFAULT_TIMESTAMP_URL
from .backends.signtool import NUPKG_MODES, NUPKG_SKIP
from .locator import DEFAULT_ARCH, DEFAULT_SIGNTOOL_ROOT
from .orchestrator import DEFAULT_MAX_ATTEMPTS

STRING_KEYS = (
    "certificate",
    "password",
    "certificatesha1",
    "certificatename",
    "description",
    "timestampUrl",
    "filename",
    "folder",
    "signtool",
    "signtool_root",
    "signtool_arch",
    "certificate_dir",
)

BOOLEAN_KEYS = ("recursive", "fallback_to_file", "require_password")

DEFAULTS: Dict[str, Any] = {
    "timestampUrl": DEFAULT_TIMESTAMP_URL,
    "recursive": False,
    "signtool_root": DEFAULT_SIGNTOOL_ROOT,
    "signtool_arch": DEFAULT_ARCH,
    "max_attempts": DEFAULT_MAX_ATTEMPTS,
    "fallback_to_file": True,
    "require_password": False,
    "nupkg": NUPKG_SKIP,
}


class ConfigError(Exception):
    """Configuration validation error."""
    pass


class SigningConfig:
    """Configuration for a signing run."""

    def __init__(self, data: Dict[str, Any]):
        """
        Initialize configuration from dictionary.

        Args:
            data: Flat configuration dictionary (YAML, action inputs, CLI)
        """
        self.data = data
        self._validate()

    def _validate(self) -> None:
        """Validate configuration schema."""
        for key in STRING_KEYS:
            value = self.data.get(key)
            if value is not None and not isinstance(value, str):
                raise ConfigError(f"{key} must be a string")

        for key in BOOLEAN_KEYS:
            value = self.data.get(key)
            if value is not None and not isinstance(value, bool):
                raise ConfigError(f"{key} must be boolean")

        max_attempts = self.data.get("max_attempts")
        if max_attempts is not None:
            if isinstance(max_attempts, bool) or not isinstance(max_attempts, int):
                raise ConfigError("max_attempts must be an integer")
            if max_attempts < 1:
                raise ConfigError("max_attempts must be at least 1")

        nupkg = self.data.get("nupkg")
        if nupkg is not None and nupkg not in NUPKG_MODES:
            raise ConfigError(f"nupkg must be one of: {', '.join(NUPKG_MODES)}")

    def get(self, key: str) -> Any:
        """
        Get a configuration value, falling back to the default.

        Empty strings count as unset.
        """
        value = self.data.get(key)
        if value is None or value == "":
            return DEFAULTS.get(key)
        return value

    def get_backend_config(self) -> Dict[str, Any]:
        """
        Get configuration for the signtool backend.

        Returns:
            Backend configuration dictionary
        """
        return {"nupkg": self.get("nupkg")}

    def merge_with_cli_args(self, **options: Any) -> "SigningConfig":
        """
        Merge configuration with CLI arguments.
        CLI arguments take precedence over config file and action inputs.

        Args:
            **options: Configuration keys from the CLI; None means not given

        Returns:
            New SigningConfig with merged values
        """
        merged = self.data.copy()
        for key, value in options.items():
            if value is not None:
                merged[key] = value
        return SigningConfig(merged)

    def apply_environment_overrides(
        self, environ: Optional[Mapping[str, str]] = None
    ) -> "SigningConfig":
        """
        Apply GitHub Actions input overrides.

        Each key is read from INPUT_<KEY> (upper-cased), e.g. INPUT_CERTIFICATE
        or INPUT_TIMESTAMPURL. Empty inputs are ignored. Boolean inputs are
        true only for exactly "true" ("True" is false); max_attempts must be an integer.

        Returns:
            New SigningConfig with environment overrides applied
        """
        environ = os.environ if environ is None else environ
        merged = self.data.copy()

        for key in STRING_KEYS + ("nupkg",):
            value = actions.get_input(key, environ)
            if value:
                merged[key] = value

        for key in BOOLEAN_KEYS:
            value = actions.get_input(key, environ)
            if value:
                merged[key] = value == "true"

        max_attempts = actions.get_input("max_attempts", environ)
        if max_attempts:
            try:
                merged["max_attempts"] = int(max_attempts)
            except ValueError:
                raise ConfigError(f"max_attempts must be an integer, got {max_attempts!r}")

        return SigningConfig(merged)


def load_config(config_path: str) -> SigningConfig:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        SigningConfig instance

    Raises:
        ConfigError: If config file is invalid
        FileNotFoundError: If config file doesn't exist
    """
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}")

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a mapping")

    return SigningConfig(data)


def find_default_config() -> Optional[Path]:
    """
    Find default configuration file.

    Searches for .signing/config.yaml in:
    1. Current directory
    2. Parent directories up to git root
    3. Home directory

    Returns:
        Path to config file, or None if not found
    """
    current = Path.cwd()
    while True:
        config_path = current / ".signing" / "config.yaml"
        if config_path.exists():
            return config_path

        if (current / ".git").exists():
            break

        parent = current.parent
        if parent == current:  # Reached filesystem root
            break
        current = parent

    home_config = Path.home() / ".signing" / "config.yaml"
    if home_config.exists():
        return home_config

    return None


def load_default_config() -> Optional[SigningConfig]:
    """
    Load configuration from default location.

    Returns:
        SigningConfig if found, None otherwise
    """
    config_path = find_default_config()
    if config_path:
        return load_config(str(config_path))
    return None
