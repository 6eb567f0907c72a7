"""
Core utility functions
"""
import hashlib
from pathlib import Path
from typing import Dict, Any, Optional, Union

import paramiko

from .constants import SSH_CONFIG_PATH
from .exceptions import ConfigError


# ============================================================
# SSH Config Lookup
# ============================================================

def load_ssh_config(hostname: str, config_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load configuration for specified Host from an SSH config file.
    
    Args:
        hostname: Host name in SSH configuration
        config_path: Config file (default: ~/.ssh/config)
    
    Returns:
        Dictionary containing host, user, port, proxy_command
    
    Raises:
        ConfigError: If the config file doesn't exist
    """
    path = Path(config_path or SSH_CONFIG_PATH).expanduser()
    if not path.exists():
        raise ConfigError(f"{path} does not exist")

    ssh_config = paramiko.SSHConfig.from_path(str(path))
    entry = ssh_config.lookup(hostname)

    return {
        "host": entry.get("hostname", hostname),
        "user": entry.get("user", None),
        "port": int(entry.get("port", 22)),
        "proxy_command": entry.get("proxycommand", None),
    }


def list_ssh_hosts(config_path: Optional[Union[str, Path]] = None) -> list[str]:
    """List concrete (non-wildcard) host aliases declared in an SSH config file"""
    path = Path(config_path or SSH_CONFIG_PATH).expanduser()
    if not path.exists():
        return []
    ssh_config = paramiko.SSHConfig.from_path(str(path))
    return sorted(h for h in ssh_config.get_hostnames() if "*" not in h and "?" not in h)


# ============================================================
# Files and Arguments
# ============================================================

def sha1_file(path: Path) -> str:
    """Hex SHA-1 digest of a file's contents"""
    digest = hashlib.sha1()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(64 * 1024), b""):
            digest.update(chunk)
    return digest.hexdigest()


def escape_arg(value: str) -> str:
    """Double-quote an argument containing whitespace for an SSH ProxyCommand"""
    if any(c.isspace() for c in value):
        return '"' + value.replace('"', '\\"') + '"'
    return value
