"""
Per-deployment CLI manager
"""
from pathlib import Path
from typing import Iterable, Optional, Union

import requests

from ..core.interfaces import ProcessRunner
from ..core.logging import get_logger
from .binary.manager import BinaryManager
from .deployment.dirs import data_dir
from .deployment.paths import binary_cache_dir, deployment_name
from .ssh.editor import SSHConfigEditor
from .ssh.models import WorkspaceAgent
from .version.semver import SemVer

logger = get_logger(__name__)


class CoderCLIManager:
    """
    Everything bound to one deployment: its cached binary and its block in
    the SSH config.

    Calls on one instance must be serialized by the caller.
    """

    def __init__(
        self,
        deployment_url: str,
        cache_root: Optional[Union[str, Path]] = None,
        binary_source: Optional[str] = None,
        ssh_config_path: Optional[Union[str, Path]] = None,
        runner: Optional[ProcessRunner] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize CLI manager.

        Args:
            deployment_url: Base URL of the deployment
            cache_root: Root for per-deployment caches (default: data_dir())
            binary_source: Optional binary source URL template
            ssh_config_path: SSH config file (default: ~/.ssh/config)
            runner: Process runner used to invoke the binary
            session: HTTP session used for downloads
        """
        self.deployment_url = deployment_url.rstrip("/")
        self.deployment_name = deployment_name(self.deployment_url)
        self.cache_root = Path(cache_root).expanduser() if cache_root else data_dir()

        self.binary = BinaryManager(
            self.deployment_url,
            self.cache_root,
            binary_source=binary_source,
            runner=runner,
            session=session,
        )
        self.ssh_config = SSHConfigEditor(
            self.deployment_name,
            self.binary.binary_path,
            self.binary.config_dir,
            ssh_config_path=ssh_config_path,
        )

    @property
    def cache_dir(self) -> Path:
        return binary_cache_dir(self.deployment_url, self.cache_root)

    @property
    def local_binary_path(self) -> Path:
        return self.binary.binary_path

    @property
    def config_dir(self) -> Path:
        return self.binary.config_dir

    def ensure_cli(self) -> bool:
        """Download the binary unless the cached copy is current"""
        return self.binary.ensure_cli()

    def version(self) -> SemVer:
        return self.binary.current_version()

    def matches_version(self, build_version: str) -> bool:
        return self.binary.is_compatible(build_version)

    def login(self, token: str) -> None:
        self.binary.login(token)

    def config_ssh(self, hosts: Iterable[WorkspaceAgent]) -> bool:
        """Rewrite this deployment's SSH block; an empty list removes it"""
        return self.ssh_config.config_ssh(hosts)
