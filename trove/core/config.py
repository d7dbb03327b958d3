import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from omegaconf import DictConfig, OmegaConf
from omegaconf.errors import InterpolationResolutionError

from trove.constants import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_PATH,
    DEFAULT_LOG_LEVEL,
    FailurePolicy,
)

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigLoader:
    """Load and merge YAML trove configuration with defaults."""

    def __init__(self) -> None:
        """Initialize ConfigLoader with built-in defaults."""
        self.BUILT_IN_DEFAULTS = {
            "name": None,
            "failure_policy": FailurePolicy.PROPAGATE.value,
            "log_level": DEFAULT_LOG_LEVEL,
        }

    def load_config(self, config_path: str | None = None) -> dict[str, Any]:
        """Load configuration from YAML file.

        Parameters
        ----------
        config_path : str | None
            Path to YAML config file. If None, checks TROVE_CONFIG env var,
            then falls back to trove.yaml

        Returns
        -------
        dict[str, Any]
            Parsed configuration with trove and profiles sections,
            with all variable interpolations resolved

        Raises
        ------
        ValueError
            If the file is not valid YAML
        RuntimeError
            If the file exists but cannot be read
        omegaconf.errors.InterpolationResolutionError
            If undefined variables are referenced or circular references exist
        """
        path = Path(config_path or os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH))

        if not path.exists():
            logger.debug("No config file at %s, using built-in defaults", path)
            return {"trove": {}}

        cfg = self._read(path)
        config = self._resolve(cfg) if cfg else {}
        config.setdefault("trove", {})
        return config

    def _read(self, path: Path) -> DictConfig | None:
        try:
            return OmegaConf.load(path)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        except OSError as e:
            raise RuntimeError(f"Cannot read config file {path}: {e}") from e

    def _resolve(self, cfg: DictConfig) -> dict[str, Any]:
        """Resolve ${...} references, with ``vars`` entries visible at top level."""
        scope = OmegaConf.merge(cfg.get("vars") or {}, cfg)

        try:
            return OmegaConf.to_container(scope, resolve=True, throw_on_missing=True)
        except InterpolationResolutionError as e:
            logger.error("Unresolved variable in trove config: %s", e)
            raise

    def get_trove_config(
        self, config: dict[str, Any], profile: str | None = None
    ) -> dict[str, Any]:
        """Get merged configuration for a named profile or the trove defaults.

        Parameters
        ----------
        config : dict[str, Any]
            Full configuration from YAML
        profile : str | None
            Name of a profile under ``profiles``, or None for defaults only

        Returns
        -------
        dict[str, Any]
            Merged configuration (built-in defaults + trove section + profile)
        """
        merged = copy.deepcopy(self.BUILT_IN_DEFAULTS)

        for key, value in (config.get("trove") or {}).items():
            merged[key] = value

        if profile is not None:
            profiles = config.get("profiles") or {}

            if profile not in profiles:
                available = list(profiles.keys())

                if not available:
                    raise ValueError(
                        f"Profile '{profile}' not found in configuration. "
                        f"No profiles are defined in the config file."
                    )

                raise ValueError(
                    f"Profile '{profile}' not found in configuration. "
                    f"Available profiles: {available}"
                )

            for key, value in profiles[profile].items():
                merged[key] = value

            if merged.get("name") is None:
                merged["name"] = profile

        return merged

    def validate_config(self, config: dict[str, Any]) -> None:
        """Validate a merged trove configuration.

        Parameters
        ----------
        config : dict[str, Any]
            Configuration to validate

        Raises
        ------
        ValueError
            If configuration is invalid
        """
        self._validate_failure_policy(config)
        self._validate_log_level(config)

        name = config.get("name")
        if name is not None and not isinstance(name, str):
            raise ValueError("name must be a string")

    def _validate_failure_policy(self, config: dict[str, Any]) -> None:
        policy = config.get("failure_policy")

        if not isinstance(policy, str):
            raise ValueError("failure_policy must be a string")

        valid = [p.value for p in FailurePolicy]
        if policy not in valid:
            raise ValueError(f"failure_policy must be one of {valid}, got '{policy}'")

    def _validate_log_level(self, config: dict[str, Any]) -> None:
        level = config.get("log_level")

        if not isinstance(level, str):
            raise ValueError("log_level must be a string")

        if level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {list(VALID_LOG_LEVELS)}, got '{level}'"
            )
