"""Client configuration for vocab-editor."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from vocab_editor.exceptions import ConfigError

DEFAULT_BASE_URL = "http://localhost:8080"

# Environment variable overriding the configured base URL
ENV_BASE_URL = "VOCAB_API_URL"

WORD_UPDATE_SCOPES = frozenset({"word", "vocabulary"})


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Settings for talking to the vocabulary service."""

    base_url: str = DEFAULT_BASE_URL
    default_difficulty: float = 0.5
    timeout: float | None = None
    max_concurrency: int | None = None
    word_update_scope: str = "word"

    def __post_init__(self) -> None:
        if self.word_update_scope not in WORD_UPDATE_SCOPES:
            raise ConfigError(
                f"word_update_scope must be one of {sorted(WORD_UPDATE_SCOPES)}, "
                f"got {self.word_update_scope!r}"
            )
        if not 0.0 <= self.default_difficulty <= 1.0:
            raise ConfigError(
                f"default_difficulty must be within [0, 1], got {self.default_difficulty!r}"
            )
        if self.max_concurrency is not None and self.max_concurrency < 1:
            raise ConfigError("max_concurrency must be a positive integer")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ClientConfig:
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        try:
            return cls(**data)
        except TypeError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    @classmethod
    def from_yaml(cls, path: str | Path) -> ClientConfig:
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read configuration {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError("Configuration root must be a mapping (dictionary)")
        return cls.from_mapping(data)


def load_config(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ClientConfig:
    """Load configuration from an optional YAML file and the environment."""
    config = ClientConfig.from_yaml(path) if path is not None else ClientConfig()
    env = os.environ if environ is None else environ
    base_url = env.get(ENV_BASE_URL, "").strip()
    if base_url:
        config = replace(config, base_url=base_url)
    return config
