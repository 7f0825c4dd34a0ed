"""
Endpoint list loading.

The endpoint file is YAML:

    endpoints:
      - name: gateway
        address: 10.0.0.1
        location: rack-1   # optional, informational only
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from errors import ConfigError


class Endpoint(BaseModel):
    """A named probe target. Metrics identity is ``(name, address)``."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(min_length=1)
    address: str = Field(min_length=1)
    location: Optional[str] = None


class EndpointsFile(BaseModel):
    endpoints: List[Endpoint]


def load_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML file and return its contents."""
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def load_endpoints(path: str | Path) -> list[Endpoint]:
    """
    Load and validate the endpoint list.

    Args:
        path: Path to the YAML endpoint file

    Returns:
        Endpoints in file order

    Raises:
        ConfigError: file missing, unreadable, not YAML, or not matching the schema
    """
    config_path = Path(path)
    try:
        data = load_yaml(config_path)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {config_path}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {config_path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise ConfigError(f"Config file {config_path} is not valid UTF-8: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path}: expected a mapping with an 'endpoints' list")

    try:
        return list(EndpointsFile(**data).endpoints)
    except ValidationError as exc:
        raise ConfigError(f"Invalid endpoint configuration in {config_path}: {exc}") from exc
