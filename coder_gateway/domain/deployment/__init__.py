"""
Deployment path and directory resolution
"""
from .paths import (
    binary_cache_dir,
    binary_name,
    binary_path,
    deployment_name,
    global_config_dir,
    resolve_arch,
    resolve_os,
)
from .dirs import config_dir, data_dir

__all__ = [
    "binary_cache_dir",
    "binary_name",
    "binary_path",
    "deployment_name",
    "global_config_dir",
    "resolve_arch",
    "resolve_os",
    "config_dir",
    "data_dir",
]
