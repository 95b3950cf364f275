"""Configuration loading for the CLI.

Precedence (lowest to highest): defaults, YAML config file, environment
variables, command-line options.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..errors import ConfigError
from ..prune.labels import METADATA_NAMESPACE

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".component-pruner" / "config.yaml"

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


def _parse_bool(value: str, name: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean for {name}: {value!r}")


@dataclass
class Config:
    """Pruner configuration.

    Attributes:
        namespace: Target namespace for namespaced kinds
        dry_run: Log deletions instead of issuing them
        kubeconfig: Path to kubeconfig (None for default / in-cluster)
        context: Kubeconfig context (None for current context)
        metadata_namespace: Label domain of the ownership label
        owner_labels: Extra static labels every owned resource carries
        log_level: Default log level
        audit_path: Audit log directory (None for default)
        timeout: Overall sweep deadline in seconds (None for no deadline)
        max_retries: Attempts for retryable cluster errors
    """

    namespace: str = "istio-system"
    dry_run: bool = False
    kubeconfig: Optional[str] = None
    context: Optional[str] = None
    metadata_namespace: str = METADATA_NAMESPACE
    owner_labels: Dict[str, str] = field(default_factory=dict)
    log_level: str = "INFO"
    audit_path: Optional[str] = None
    timeout: Optional[float] = None
    max_retries: int = 3

    ENV_VARS = {
        "PRUNER_NAMESPACE": "namespace",
        "PRUNER_DRY_RUN": "dry_run",
        "PRUNER_KUBECONFIG": "kubeconfig",
        "PRUNER_CONTEXT": "context",
        "PRUNER_LOG_LEVEL": "log_level",
        "PRUNER_AUDIT_PATH": "audit_path",
        "PRUNER_TIMEOUT": "timeout",
    }

    @classmethod
    def load(cls, config_path: Optional[str] = None, environ: Optional[Dict[str, str]] = None) -> "Config":
        """Load configuration from file and environment.

        Args:
            config_path: YAML config file (default: $PRUNER_CONFIG or ~/.component-pruner/config.yaml)
            environ: Environment mapping (default: os.environ)

        Returns:
            Loaded configuration

        Raises:
            ConfigError: If the file or an environment value is invalid
        """
        environ = dict(os.environ) if environ is None else environ
        config = cls()

        path = Path(config_path or environ.get("PRUNER_CONFIG") or DEFAULT_CONFIG_PATH)
        if path.exists():
            config._apply_file(path)
        elif config_path:
            raise ConfigError(f"Config file not found: {path}")

        config._apply_env(environ)
        return config

    def _apply_file(self, path: Path) -> None:
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")

        logger.debug(f"Loading configuration from {path}")
        for key, value in data.items():
            self._set(key, value)

    def _apply_env(self, environ: Dict[str, str]) -> None:
        for env_var, key in self.ENV_VARS.items():
            if env_var in environ:
                self._set(key, environ[env_var])

    def _set(self, key: str, value: Any) -> None:
        if key not in self.__dataclass_fields__:
            raise ConfigError(f"Unknown config option: {key}")

        if key == "dry_run" and isinstance(value, str):
            value = _parse_bool(value, key)
        elif key == "timeout" and value is not None:
            try:
                value = float(value)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Invalid number for {key}: {value!r}") from e
        elif key == "max_retries":
            try:
                value = int(value)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Invalid integer for {key}: {value!r}") from e
            if value < 1:
                raise ConfigError(f"{key} must be at least 1, got {value}")
        elif key == "owner_labels":
            if not isinstance(value, dict):
                raise ConfigError("owner_labels must be a mapping")
            value = {str(k): str(v) for k, v in value.items()}

        setattr(self, key, value)
