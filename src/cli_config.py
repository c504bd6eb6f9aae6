"""Runtime configuration assembled from defaults, config file, environment and CLI.

Precedence, lowest to highest: ``Constants`` defaults, the config file
(``-c`` or ``PKGBUMP_CONFIG``), ``PKGBUMP_*`` environment variables, CLI flags.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import yaml

from common.errors import ConfigError
from constants import Constants, QueryBackends

logger = logging.getLogger(__name__)


@dataclass
class RunConfig:
    """Settings for one pkgbump run."""

    backend: str = QueryBackends.NPM.value
    registry: Optional[str] = None
    timeout: Optional[float] = Constants.REQUEST_TIMEOUT
    max_concurrency: int = Constants.MAX_CONCURRENCY
    newer_only: bool = False
    npm_bin: str = Constants.NPM_BIN
    groups: List[str] = field(default_factory=lambda: list(Constants.DEPENDENCY_GROUPS))


def load_config_file(path: str) -> Dict[str, Any]:
    """Load a YAML or JSON config file into a dict.

    A top-level ``pkgbump`` section is used when present.

    Raises:
        ConfigError: unreadable file, parse error, or non-mapping content.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.lower().endswith(".json"):
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot parse config file {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    section = data.get("pkgbump", data)
    if not isinstance(section, dict):
        raise ConfigError(f"'pkgbump' section of {path} must be a mapping")
    return section


def _normalize_timeout(value: Any) -> Optional[float]:
    timeout = float(value)
    return timeout if timeout > 0 else None


def _apply(config: RunConfig, values: Mapping[str, Any], source: str) -> None:
    """Copy recognized keys from ``values`` onto ``config``."""
    try:
        if values.get("backend") is not None:
            backend = str(values["backend"]).lower()
            if backend not in Constants.SUPPORTED_BACKENDS:
                raise ConfigError(f"{source}: unsupported backend {backend!r}")
            config.backend = backend
        if values.get("registry"):
            config.registry = str(values["registry"])
        if values.get("timeout") is not None:
            config.timeout = _normalize_timeout(values["timeout"])
        if values.get("max_concurrency") is not None:
            config.max_concurrency = max(0, int(values["max_concurrency"]))
        if values.get("newer_only") is not None:
            if not isinstance(values["newer_only"], bool):
                raise ConfigError(f"{source}: 'newer_only' must be true or false")
            config.newer_only = values["newer_only"]
        if values.get("npm_bin"):
            config.npm_bin = str(values["npm_bin"])
        if values.get("groups") is not None:
            groups = values["groups"]
            if not isinstance(groups, list) or not all(isinstance(g, str) for g in groups):
                raise ConfigError(f"{source}: 'groups' must be a list of strings")
            config.groups = list(groups)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{source}: {exc}") from exc


def build_run_config(args: Any, environ: Optional[Mapping[str, str]] = None) -> RunConfig:
    """Merge every configuration source into a RunConfig."""
    environ = os.environ if environ is None else environ
    config = RunConfig()

    config_path = getattr(args, "CONFIG", None) or environ.get(Constants.ENV_CONFIG)
    if config_path:
        _apply(config, load_config_file(config_path), config_path)
        logger.info("Loaded config from: %s", config_path)

    _apply(
        config,
        {
            "backend": environ.get(Constants.ENV_BACKEND) or None,
            "registry": environ.get(Constants.ENV_REGISTRY) or None,
            "timeout": environ.get(Constants.ENV_TIMEOUT) or None,
        },
        "environment",
    )

    _apply(
        config,
        {
            "backend": getattr(args, "BACKEND", None),
            "registry": getattr(args, "REGISTRY", None),
            "timeout": getattr(args, "TIMEOUT", None),
            "max_concurrency": getattr(args, "MAX_CONCURRENCY", None),
            "newer_only": getattr(args, "NEWER_ONLY", None),
        },
        "command line",
    )
    return config
