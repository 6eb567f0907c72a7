"""
coder_gateway - local CLI management for Coder deployments

Keeps a per-deployment copy of the `coder` binary and wires workspaces into
the SSH config:
- Deployment-scoped cache paths and platform config/data directories
- Conditional binary download keyed on the server's entity tag
- Version discovery and build compatibility checks
- A managed host block inside ~/.ssh/config
"""

__version__ = "0.1.0"

from .core.exceptions import (
    GatewayError,
    ConfigError,
    DownloadError,
    BinaryNotFound,
    NonZeroExit,
    LoginFailed,
    VersionError,
    MalformedPayload,
    InvalidVersion,
    MalformedConfig,
)

from .domain import CoderCLIManager
from .domain.binary import BinaryManager
from .domain.deployment import (
    binary_cache_dir,
    binary_path,
    config_dir,
    data_dir,
)
from .domain.ssh import SSHConfigEditor, WorkspaceAgent
from .domain.version import SemVer, parse_semver, parse_version_output, matches

__all__ = [
    "__version__",
    # Manager
    "CoderCLIManager",
    "BinaryManager",
    "SSHConfigEditor",
    # Paths
    "binary_cache_dir",
    "binary_path",
    "config_dir",
    "data_dir",
    # Models
    "WorkspaceAgent",
    "SemVer",
    # Versions
    "parse_semver",
    "parse_version_output",
    "matches",
    # Errors
    "GatewayError",
    "ConfigError",
    "DownloadError",
    "BinaryNotFound",
    "NonZeroExit",
    "LoginFailed",
    "VersionError",
    "MalformedPayload",
    "InvalidVersion",
    "MalformedConfig",
]
