import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from omegaconf import DictConfig, OmegaConf
from omegaconf.errors import OmegaConfBaseException

from ec2flip.constants import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_TIMEOUT_SECONDS,
    POLL_INTERVAL_SECONDS,
)
from ec2flip.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Load and merge YAML configuration with defaults."""

    def __init__(self) -> None:
        """Initialize ConfigLoader with built-in defaults."""
        self.BUILT_IN_DEFAULTS = {
            "region": None,
            "profile": None,
            "timeout": DEFAULT_TIMEOUT_SECONDS,
            "poll_interval": POLL_INTERVAL_SECONDS,
            "wait_for_ssm": False,
        }

    def load_config(self, config_path: str | None = None) -> dict[str, Any]:
        """Load the ``defaults`` and ``instances`` sections of a YAML file.

        Top-level ``vars`` entries can be referenced from either section with
        OmegaConf interpolation (``${name}``).

        Parameters
        ----------
        config_path : str | None
            Path to YAML config file. If None, checks EC2FLIP_CONFIG env var,
            then falls back to ec2flip.yaml

        Returns
        -------
        dict[str, Any]
            ``defaults`` and ``instances`` sections with interpolations resolved

        Raises
        ------
        ConfigurationError
            If the file is not valid YAML or a variable cannot be resolved
        """
        config_file = Path(
            config_path or os.environ.get("EC2FLIP_CONFIG", DEFAULT_CONFIG_FILE)
        )

        if not config_file.exists():
            logger.debug("No config file at %s, using built-in defaults", config_file)
            return {"defaults": {}, "instances": {}}

        try:
            cfg = OmegaConf.load(config_file)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Failed to read config file {config_file}: {e}") from e

        if not isinstance(cfg, DictConfig):
            raise ConfigurationError(f"{config_file} must contain a mapping")

        scope = OmegaConf.merge(cfg.get("vars") or {}, cfg)

        try:
            return {
                section: OmegaConf.to_container(
                    scope[section], resolve=True, throw_on_missing=True
                )
                if scope.get(section) is not None
                else {}
                for section in ("defaults", "instances")
            }
        except OmegaConfBaseException as e:
            raise ConfigurationError(f"Configuration variable resolution error: {e}") from e

    def get_instance_config(
        self,
        config: dict[str, Any],
        instance_id: str,
        overrides: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Get merged configuration for one instance.

        Merge order: built-in defaults, YAML ``defaults``, YAML
        ``instances[instance_id]``, then non-None ``overrides``.

        Parameters
        ----------
        config : dict[str, Any]
            Full configuration from YAML
        instance_id : str
            Instance the run acts on
        overrides : dict[str, Any] | None
            Values given on the command line; None values are skipped

        Returns
        -------
        dict[str, Any]
            Merged and validated configuration
        """
        merged = copy.deepcopy(self.BUILT_IN_DEFAULTS)

        for key, value in (config.get("defaults") or {}).items():
            merged[key] = value

        instances = config.get("instances") or {}
        for key, value in (instances.get(instance_id) or {}).items():
            merged[key] = value

        for key, value in (overrides or {}).items():
            if value is not None:
                merged[key] = value

        self.validate_config(merged)
        return merged

    def validate_config(self, config: dict[str, Any]) -> None:
        """Validate configuration keys and types.

        Parameters
        ----------
        config : dict[str, Any]
            Configuration to validate

        Raises
        ------
        ConfigurationError
            If configuration is invalid
        """
        unknown = sorted(set(config) - set(self.BUILT_IN_DEFAULTS))
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")

        for field in ("region", "profile"):
            if config[field] is not None and not isinstance(config[field], str):
                raise ConfigurationError(f"{field} must be a string")

        for field in ("timeout", "poll_interval"):
            value = config[field]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(f"{field} must be a number")
            if value <= 0:
                raise ConfigurationError(f"{field} must be positive, got {value}")

        if not isinstance(config["wait_for_ssm"], bool):
            raise ConfigurationError("wait_for_ssm must be a boolean")
