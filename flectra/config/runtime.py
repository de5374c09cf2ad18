"""
Runtime Configuration

Central configuration for the Merkle engine and its command line.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from flectra.crypto.hashing import HASHERS, Hasher, get_hasher
from flectra.schemas.errors import ConfigurationError

load_dotenv()


@dataclass
class MerkleConfig:
    """Configuration for tree construction and verification."""
    hash_algorithm: str = "keccak256"

    def __post_init__(self):
        if not isinstance(self.hash_algorithm, str):
            raise ConfigurationError(
                f"Hash algorithm must be a string, got {type(self.hash_algorithm).__name__}",
                field_path="merkle.hash_algorithm",
            )
        self.hash_algorithm = self.hash_algorithm.lower()
        if self.hash_algorithm not in HASHERS:
            raise ConfigurationError(
                f"Unsupported hash algorithm: {self.hash_algorithm!r}",
                field_path="merkle.hash_algorithm",
                details={"supported": sorted(HASHERS)},
            )


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "INFO"
    log_file: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.level, str):
            raise ConfigurationError(
                f"Log level must be a string, got {type(self.level).__name__}",
                field_path="logging.level",
            )
        if self.log_file is not None and not isinstance(self.log_file, str):
            raise ConfigurationError(
                f"Log file must be a string path, got {type(self.log_file).__name__}",
                field_path="logging.log_file",
            )


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables (and a .env file)
    - YAML file
    - Programmatic construction
    """
    merkle: MerkleConfig = field(default_factory=MerkleConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def hasher(self) -> Hasher:
        """Hash function selected by merkle.hash_algorithm."""
        return get_hasher(self.merkle.hash_algorithm)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - FLECTRA_HASH_ALGORITHM: keccak256 or sha256
        - FLECTRA_LOG_LEVEL: Log level name
        - FLECTRA_LOG_FILE: Optional log file path
        """
        overrides: dict[str, Any] = {}

        if os.getenv("FLECTRA_HASH_ALGORITHM"):
            overrides.setdefault("merkle", {})["hash_algorithm"] = os.getenv("FLECTRA_HASH_ALGORITHM")

        if os.getenv("FLECTRA_LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv("FLECTRA_LOG_LEVEL")
        if os.getenv("FLECTRA_LOG_FILE"):
            overrides.setdefault("logging", {})["log_file"] = os.getenv("FLECTRA_LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in config file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {path}")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        merkle_data = data.get("merkle", {}) or {}
        logging_data = data.get("logging", {}) or {}

        try:
            merkle = MerkleConfig(**merkle_data)
            logging_config = LoggingConfig(**logging_data)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        return cls(
            merkle=merkle,
            logging=logging_config,
            extra=data.get("extra", {}) or {},
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        Lets a config file be loaded first, then overlaid with env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        data = self.to_dict()
        for section, values in overrides.items():
            data.setdefault(section, {}).update(values)
        return self.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
