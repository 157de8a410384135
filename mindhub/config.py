"""Settings read from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

ENV_PREFIX = "MIND"
LOCAL_ENV = "local"
CMS_MAPPING_NAME = "MIND_GRAPH_CMS_URL_MAPPING"


class ConfigError(ValueError):
    """Raised when the environment does not describe a valid configuration."""


@dataclass
class Config:
    """Runtime settings: build version, environment name and CMS URL mapping."""

    version: str = ""
    env: str = LOCAL_ENV
    cms_mapping: dict[str, str] = field(default_factory=dict)

    def is_local(self) -> bool:
        return self.env == LOCAL_ENV


def _parse_mapping(key: str, raw: str) -> dict[str, str]:
    if not raw.strip():
        return {}
    mapping = {}
    for pair in raw.split(","):
        parts = pair.split(":")
        if len(parts) != 2:
            raise ConfigError(f'assigning {key}: invalid map item: "{pair}"')
        mapping[parts[0]] = parts[1]
    return mapping


def load_config(environ: Mapping[str, str] | None = None) -> Config:
    """Build a Config from MIND_* environment variables."""
    if environ is None:
        environ = os.environ

    env = environ.get(f"{ENV_PREFIX}_ENV", LOCAL_ENV)

    key = f"{ENV_PREFIX}_{CMS_MAPPING_NAME}"
    if key in environ:
        raw = environ[key]
    elif CMS_MAPPING_NAME in environ:
        raw = environ[CMS_MAPPING_NAME]
    else:
        raise ConfigError(f"required key {key} missing value")

    return Config(env=env, cms_mapping=_parse_mapping(key, raw))