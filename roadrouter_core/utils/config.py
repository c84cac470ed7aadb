"""Configuration utilities.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar

import yaml

from roadrouter_core.http.request import HTTP_METHODS

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="RouterConfig")

DEFAULT_METHODS = list(HTTP_METHODS)


@dataclass
class RouterConfig:
    """Router configuration."""

    # Routing
    allowed_methods: List[str] = field(default_factory=lambda: list(DEFAULT_METHODS))

    # Responses
    default_content_type: str = "application/json"
    expose_errors: bool = True

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"

    def __post_init__(self):
        if isinstance(self.allowed_methods, str):
            self.allowed_methods = self.allowed_methods.split(",")
        self.allowed_methods = [m.strip().upper() for m in self.allowed_methods if m.strip()]

    @classmethod
    def from_dict(cls: Type[T], data: Dict[str, Any]) -> T:
        """Create config from dictionary."""
        # Filter to only valid fields
        valid_fields = {f.name for f in fields(cls)}
        unknown = set(data) - valid_fields
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {sorted(unknown)}")
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**filtered)

    @classmethod
    def from_json(cls: Type[T], path: str) -> T:
        """Load config from JSON file."""
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)

    @classmethod
    def from_yaml(cls: Type[T], path: str) -> T:
        """Load config from YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_env(cls: Type[T], prefix: str = "ROADROUTER_") -> T:
        """Load config from environment variables."""
        return cls.from_dict(read_env(prefix))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def merge(self, other: Dict[str, Any]) -> "RouterConfig":
        """Merge with explicit overrides (overrides take precedence)."""
        data = self.to_dict()
        data.update(other)
        return type(self).from_dict(data)


def read_env(prefix: str = "ROADROUTER_") -> Dict[str, Any]:
    """Collect prefixed environment variables as config values."""
    data: Dict[str, Any] = {}

    for key, value in os.environ.items():
        if key.startswith(prefix):
            config_key = key[len(prefix):].lower()

            # Type conversion
            if value.lower() in ("true", "false"):
                data[config_key] = value.lower() == "true"
            else:
                data[config_key] = value

    return data


def load_config(
    path: Optional[str] = None,
    env_prefix: str = "ROADROUTER_",
) -> RouterConfig:
    """Load configuration from multiple sources.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file (if provided)
    3. Defaults
    """
    config = RouterConfig()

    # Load from file if provided
    if path:
        path_obj = Path(path)
        if path_obj.exists():
            if path.endswith(".json"):
                config = RouterConfig.from_json(path)
            elif path.endswith((".yaml", ".yml")):
                config = RouterConfig.from_yaml(path)
            else:
                logger.warning(f"Unknown config format: {path}")
        else:
            logger.warning(f"Config file not found: {path}")

    # Override with environment variables
    return config.merge(read_env(env_prefix))


__all__ = [
    "DEFAULT_METHODS",
    "RouterConfig",
    "load_config",
    "read_env",
]
