"""
Platform config and data directories

config_dir() is where the coder CLI keeps its own configuration; data_dir()
is the default cache root holding per-deployment binaries.
"""
from pathlib import Path
from typing import Optional

from ...core.constants import (
    CONFIG_DIR_NAME,
    DATA_DIR_NAME,
    ENV_APPDATA,
    ENV_CODER_CONFIG_DIR,
    ENV_HOME,
    ENV_LOCALAPPDATA,
    ENV_XDG_CONFIG_HOME,
    ENV_XDG_DATA_HOME,
)
from ...core.interfaces import Environment
from ...infrastructure.environment import OsEnvironment
from .paths import resolve_os


def _lookup(env: Environment, name: str) -> Optional[str]:
    """Variable value, with an empty string treated as unset"""
    value = env.get(name)
    return value if value else None


def _home(env: Environment) -> Path:
    home = _lookup(env, ENV_HOME)
    return Path(home) if home else Path.home()


def config_dir(env: Optional[Environment] = None, system: Optional[str] = None) -> Path:
    """
    Resolve the coder CLI configuration directory.
    
    CODER_CONFIG_DIR always wins when non-empty. Otherwise:
    - windows: APPDATA/coderv2, falling back to HOME/AppData/Roaming/coderv2
    - darwin: HOME/Library/Application Support/coderv2
    - others: XDG_CONFIG_HOME/coderv2, falling back to HOME/.config/coderv2
    
    Args:
        env: Environment source (default: process environment)
        system: Platform rules to apply (default: running platform)
    """
    env = env or OsEnvironment()
    system = system or resolve_os()
    
    override = _lookup(env, ENV_CODER_CONFIG_DIR)
    if override:
        return Path(override)
    
    if system == "windows":
        appdata = _lookup(env, ENV_APPDATA)
        base = Path(appdata) if appdata else _home(env) / "AppData" / "Roaming"
        return base / CONFIG_DIR_NAME
    if system == "darwin":
        return _home(env) / "Library" / "Application Support" / CONFIG_DIR_NAME
    
    xdg = _lookup(env, ENV_XDG_CONFIG_HOME)
    if xdg:
        return Path(xdg) / CONFIG_DIR_NAME
    return _home(env) / ".config" / CONFIG_DIR_NAME


def data_dir(env: Optional[Environment] = None, system: Optional[str] = None) -> Path:
    """
    Resolve the data directory used as the default binary cache root.
    
    - windows: LOCALAPPDATA/coder-gateway, falling back to HOME/AppData/Local/coder-gateway
    - darwin: HOME/Library/Application Support/coder-gateway
    - others: XDG_DATA_HOME/coder-gateway, falling back to HOME/.local/share/coder-gateway
    """
    env = env or OsEnvironment()
    system = system or resolve_os()
    
    if system == "windows":
        local = _lookup(env, ENV_LOCALAPPDATA)
        base = Path(local) if local else _home(env) / "AppData" / "Local"
        return base / DATA_DIR_NAME
    if system == "darwin":
        return _home(env) / "Library" / "Application Support" / DATA_DIR_NAME
    
    xdg = _lookup(env, ENV_XDG_DATA_HOME)
    if xdg:
        return Path(xdg) / DATA_DIR_NAME
    return _home(env) / ".local" / "share" / DATA_DIR_NAME
