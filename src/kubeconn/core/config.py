"""Configuration management for kubeconn."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from kubeconn.core.exceptions import ConfigurationError


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"
    output: str = "stdout"


class ResolverConfig(BaseModel):
    """Kubeconfig resolution configuration."""

    inline_files: bool = False  # read CA/cert/key files into the *_data fields


class ClientConfig(BaseModel):
    """Kubernetes client configuration."""

    user_agent: str = "kubeconn"
    request_timeout_seconds: float = Field(default=10.0, gt=0)


class KubeconnConfig(BaseModel):
    """Main kubeconn configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)

    @classmethod
    def from_file(cls, path: str | Path) -> "KubeconnConfig":
        """Load configuration from YAML file.

        Args:
            path: Path to configuration file

        Returns:
            KubeconnConfig instance

        Raises:
            ConfigurationError: If file cannot be loaded or parsed
        """
        config_path = Path(path).expanduser()

        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with config_path.open() as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

        try:
            return cls(**(data or {}))
        except Exception as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Dictionary representation
        """
        return self.model_dump()
