"""
Deployment-scoped cache paths

Every deployment gets its own directory under the cache root, named after its
normalized host (and port, when one is given explicitly). The binary inside is
named after the local OS and architecture so that it matches the server's
/bin/ endpoint.
"""
import platform
from functools import lru_cache
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlsplit

from ...core.constants import BINARY_PREFIX, GLOBAL_CONFIG_DIRNAME
from ...core.exceptions import ConfigError
from ...core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_PORTS = {"http": 80, "https": 443}

OS_ALIASES = {
    "linux": "linux",
    "darwin": "darwin",
    "windows": "windows",
}

ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "armv7",
    "armv7": "armv7",
}


# ============================================================
# Platform Identifiers
# ============================================================

@lru_cache(maxsize=None)
def resolve_os() -> str:
    """OS identifier used in binary names (linux, darwin, windows)"""
    system = platform.system().lower()
    if system not in OS_ALIASES:
        logger.warning(f"Unrecognized operating system '{system}', using it verbatim")
    return OS_ALIASES.get(system, system)


@lru_cache(maxsize=None)
def resolve_arch() -> str:
    """CPU architecture identifier used in binary names (amd64, arm64, armv7)"""
    machine = platform.machine().lower()
    if machine not in ARCH_ALIASES:
        logger.warning(f"Unrecognized architecture '{machine}', using it verbatim")
    return ARCH_ALIASES.get(machine, machine)


def binary_name(os_name: Optional[str] = None, arch: Optional[str] = None) -> str:
    """Binary file name, e.g. coder-linux-amd64 or coder-windows-amd64.exe"""
    os_name = os_name or resolve_os()
    arch = arch or resolve_arch()
    name = f"{BINARY_PREFIX}-{os_name}-{arch}"
    if os_name == "windows":
        name += ".exe"
    return name


# ============================================================
# Deployment Paths
# ============================================================

def deployment_name(deployment_url: str) -> str:
    """
    Normalized host[-port] string identifying a deployment.
    
    The host is lowercased and each label is IDNA (punycode) encoded, so
    Unicode labels that normalize to the same ASCII form share a name.
    
    Raises:
        ConfigError: If the URL has no host
    """
    parts = urlsplit(deployment_url if "//" in deployment_url else f"//{deployment_url}")
    host = parts.hostname
    if not host:
        raise ConfigError(f"Deployment URL has no host: {deployment_url!r}")
    
    try:
        name = host.encode("idna").decode("ascii")
    except UnicodeError as e:
        raise ConfigError(f"Deployment host cannot be IDNA encoded: {host!r}") from e
    
    try:
        port = parts.port
    except ValueError as e:
        raise ConfigError(f"Invalid port in deployment URL: {deployment_url!r}") from e
    
    scheme = (parts.scheme or "https").lower()
    if port is not None and port != DEFAULT_PORTS.get(scheme):
        name = f"{name}-{port}"
    return name


def binary_cache_dir(deployment_url: str, cache_root: Union[str, Path]) -> Path:
    """Cache directory owned by a single deployment"""
    return Path(cache_root) / deployment_name(deployment_url)


def binary_path(deployment_url: str, cache_root: Union[str, Path]) -> Path:
    """Final location of the deployment's cached binary"""
    return binary_cache_dir(deployment_url, cache_root) / binary_name()


def global_config_dir(deployment_url: str, cache_root: Union[str, Path]) -> Path:
    """Directory passed to the binary as --global-config"""
    return binary_cache_dir(deployment_url, cache_root) / GLOBAL_CONFIG_DIRNAME
