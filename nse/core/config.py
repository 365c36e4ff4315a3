'''
Configuration management for the NSE toolkit.

The configuration is layered:
1. Defaults built into the package (the dataclasses below)
2. An optional JSON file named by the ``NSE_CONFIG_FILE`` environment variable
3. Environment variables of the form ``NSE_<SECTION>_<OPTION>``
4. Runtime modifications through ``set_config``

Estimators only read the configuration, and only to fill in tuning
parameters the caller left as ``None``. Nothing is ever written to disk.
'''

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

from .exceptions import ConfigurationError

logger = logging.getLogger("nse.core.config")

CONFIG_ENV_PREFIX = "NSE_"
CONFIG_FILE_ENV = "NSE_CONFIG_FILE"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class EstimatorConfig:
    """
    Tuning defaults for the estimators.

    Attributes:
        default_nbatch: Batch count used by ``nse_geyer`` when none is given
        default_bootstraps: Replicate count used by ``compare_estimators``
        iseq_max_lag: Cap on the autocovariance lags searched by the initial
            sequence estimator (None searches all n - 1 lags)
        ar_order_max: Largest AR order considered by the spectral estimator
            (None uses min(n - 1, floor(10 * log10(n))))
        kernel_weight_tol: Kernel weights with absolute value at or below this
            tolerance are dropped from the kernel summation
    """
    default_nbatch: int = 30
    default_bootstraps: int = 1000
    iseq_max_lag: Optional[int] = None
    ar_order_max: Optional[int] = None
    kernel_weight_tol: float = 1e-7


@dataclass
class LoggingConfig:
    """
    Logging settings.

    Attributes:
        level: Level of the ``nse`` package logger
    """
    level: str = "WARNING"


@dataclass
class NSEConfig:
    """Complete configuration of the toolkit."""
    estimator: EstimatorConfig = field(default_factory=EstimatorConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _coerce(section: str, option: str, value: Any, default: Any) -> Any:
    """Convert a raw value (possibly a string from the environment) to the option's type."""
    setting = f"{section}.{option}"
    if option in ("iseq_max_lag", "ar_order_max"):
        if value is None or (isinstance(value, str) and value.strip().lower() in ("", "none", "null")):
            return None
        try:
            converted = int(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid value for {setting}: expected an integer or None",
                setting=setting, value=value, issue=str(e)
            ) from e
        if converted < 1:
            raise ConfigurationError(
                f"Invalid value for {setting}: must be positive",
                setting=setting, value=value
            )
        return converted

    if option == "level":
        level = str(value).upper()
        if level not in _LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid log level {value!r}",
                setting=setting, value=value,
                issue="must be one of " + ", ".join(_LOG_LEVELS)
            )
        return level

    target = type(default)
    try:
        converted = target(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"Invalid value for {setting}: expected {target.__name__}",
            setting=setting, value=value, issue=str(e)
        ) from e
    if isinstance(converted, (int, float)) and converted <= 0:
        raise ConfigurationError(
            f"Invalid value for {setting}: must be positive",
            setting=setting, value=value
        )
    return converted


class ConfigManager:
    """
    Holds the active configuration and applies the configuration layers.

    Attributes:
        _config: The current configuration object
        _initialized: Whether the file and environment layers were applied
        _config_file: Path of the JSON file that was loaded, if any
    """

    def __init__(self) -> None:
        self._config = NSEConfig()
        self._initialized = False
        self._config_file: Optional[Path] = None

    def initialize(self) -> None:
        """Apply the file and environment layers once."""
        if self._initialized:
            return
        self._load_config_file()
        self._apply_env_overrides()
        self._initialized = True
        logger.debug("Configuration manager initialized")

    def _section(self, section: str) -> Any:
        if section not in {f.name for f in fields(self._config)}:
            raise ConfigurationError(
                f"Unknown configuration section: {section}",
                setting=section,
                issue="valid sections are " + ", ".join(f.name for f in fields(self._config))
            )
        return getattr(self._config, section)

    def _check_option(self, section: str, option: str) -> Any:
        section_obj = self._section(section)
        names = {f.name for f in fields(section_obj)}
        if option not in names:
            raise ConfigurationError(
                f"Unknown configuration option: {section}.{option}",
                setting=f"{section}.{option}",
                issue="valid options are " + ", ".join(sorted(names))
            )
        return section_obj

    def _load_config_file(self) -> None:
        path = os.environ.get(CONFIG_FILE_ENV)
        if not path:
            return
        config_file = Path(path)
        try:
            with open(config_file, "r") as f:
                content = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                "Failed to read configuration file",
                config_file=config_file, issue=str(e)
            ) from e
        if not isinstance(content, dict):
            raise ConfigurationError(
                "Configuration file must contain a JSON object",
                config_file=config_file
            )
        for section, options in content.items():
            if not isinstance(options, dict):
                raise ConfigurationError(
                    f"Section {section!r} must be a JSON object",
                    config_file=config_file, setting=section
                )
            for option, value in options.items():
                self.set(section, option, value)
        self._config_file = config_file
        logger.debug(f"Loaded configuration from {config_file}")

    def _apply_env_overrides(self) -> None:
        for section_field in fields(self._config):
            section_obj = getattr(self._config, section_field.name)
            for option_field in fields(section_obj):
                env_var = f"{CONFIG_ENV_PREFIX}{section_field.name.upper()}_{option_field.name.upper()}"
                if env_var in os.environ:
                    self.set(section_field.name, option_field.name, os.environ[env_var])
                    logger.debug(f"Applied environment override {env_var}")
        # Shorthand accepted for the log level
        if "NSE_LOG_LEVEL" in os.environ:
            self.set("logging", "level", os.environ["NSE_LOG_LEVEL"])

    def get(self, section: str, option: str) -> Any:
        section_obj = self._check_option(section, option)
        return getattr(section_obj, option)

    def set(self, section: str, option: str, value: Any) -> None:
        section_obj = self._check_option(section, option)
        default = getattr(type(section_obj)(), option)
        setattr(section_obj, option, _coerce(section, option, value, default))

    def reset(self, section: Optional[str] = None) -> None:
        if section is None:
            self._config = NSEConfig()
            self._initialized = False
            return
        self._section(section)
        default_section = getattr(NSEConfig(), section)
        setattr(self._config, section, default_section)

    @property
    def config(self) -> NSEConfig:
        return self._config

    @property
    def config_file(self) -> Optional[Path]:
        return self._config_file


# Singleton instance of the configuration manager
_config_manager = ConfigManager()


def get_config(section: str, option: str) -> Any:
    """
    Get a configuration value.

    Args:
        section: The configuration section ("estimator" or "logging")
        option: The configuration option

    Returns:
        The configuration value

    Raises:
        ConfigurationError: If the section or option is not found
    """
    _config_manager.initialize()
    return _config_manager.get(section, option)


def set_config(section: str, option: str, value: Any) -> None:
    """
    Set a configuration value at runtime.

    Raises:
        ConfigurationError: If the section, option or value is invalid
    """
    _config_manager.initialize()
    _config_manager.set(section, option, value)


def reset_config(section: Optional[str] = None) -> None:
    """Reset one section, or the whole configuration, to the built-in defaults.

    Resetting everything also re-applies the file and environment layers on
    next access.
    """
    _config_manager.reset(section)


def get_estimator_config() -> EstimatorConfig:
    """Return the active estimator settings."""
    _config_manager.initialize()
    return _config_manager.config.estimator
