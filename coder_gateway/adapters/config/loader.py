"""
Configuration loader with priority: CLI > env > TOML > defaults
"""
import os
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Any, Optional, Mapping

from ...core.exceptions import ConfigError

TOML_SECTION = "gateway"


@dataclass
class GatewaySettings:
    """Connection settings a caller collects before managing a deployment"""
    url: Optional[str] = None
    token: Optional[str] = None
    build_version: Optional[str] = None
    binary_source: Optional[str] = None
    cache_dir: Optional[str] = None
    ssh_config: Optional[str] = None

    def validate(self) -> None:
        if not self.url:
            raise ConfigError("Deployment URL is required (--url, CODER_GATEWAY_URL or [gateway].url)")
        if not self.url.startswith(("http://", "https://")):
            raise ConfigError(f"Deployment URL must start with http:// or https://, got: {self.url}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GatewaySettings":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        return cls(**{k: (str(v) if v is not None else None) for k, v in data.items()})


class ConfigLoader:
    """Configuration loader with priority support"""

    ENV_MAPPINGS = {
        "CODER_GATEWAY_URL": "url",
        "CODER_GATEWAY_TOKEN": "token",
        "CODER_GATEWAY_BUILD_VERSION": "build_version",
        "CODER_GATEWAY_BINARY_SOURCE": "binary_source",
        "CODER_GATEWAY_CACHE_DIR": "cache_dir",
        "CODER_GATEWAY_SSH_CONFIG": "ssh_config",
    }

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = environ if environ is not None else os.environ

    def load_toml(self, path: Path) -> Dict[str, Any]:
        """Load the [gateway] table of a TOML configuration file"""
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            data = tomllib.loads(path.read_text(encoding='utf-8'))
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Failed to parse TOML configuration: {e}") from e

        section = data.get(TOML_SECTION, {})
        if not isinstance(section, dict):
            raise ConfigError(f"[{TOML_SECTION}] must be a table")
        return section

    def load_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables"""
        config = {}
        for env_key, config_key in self.ENV_MAPPINGS.items():
            value = self._environ.get(env_key)
            if value:
                config[config_key] = value
        return config

    def merge_configs(self, *configs: Dict[str, Any]) -> Dict[str, Any]:
        """Merge configurations, later ones override earlier ones; None never overrides"""
        result: Dict[str, Any] = {}
        for config in configs:
            for key, value in config.items():
                if value is not None:
                    result[key] = value
        return result

    def load(
        self,
        toml_path: Optional[Path] = None,
        cli_overrides: Optional[Dict[str, Any]] = None,
        use_env: bool = True,
    ) -> GatewaySettings:
        """
        Load settings with priority: CLI > env > TOML > defaults

        Args:
            toml_path: Path to TOML configuration file
            cli_overrides: CLI parameter overrides
            use_env: Whether to load from environment variables

        Returns:
            Merged settings (not yet validated)
        """
        configs = []

        if toml_path:
            configs.append(self.load_toml(Path(toml_path).expanduser()))

        if use_env:
            env_config = self.load_env()
            if env_config:
                configs.append(env_config)

        if cli_overrides:
            configs.append(cli_overrides)

        return GatewaySettings.from_dict(self.merge_configs(*configs))
