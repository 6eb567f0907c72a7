"""
Cached CLI binary management

The binary lives at a deterministic path inside the deployment's cache
directory. Freshness is decided by the server: every download is a
conditional GET carrying the SHA-1 of the cached file as its entity tag, so
a 304 keeps the file and a 200 replaces it.
"""
import os
import tempfile
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urljoin

import requests

from ...core.constants import (
    BINARY_ENDPOINT,
    BINARY_MODE,
    BINARY_URL_PLACEHOLDER,
    DEFAULT_DOWNLOAD_TIMEOUT,
    DOWNLOAD_CHUNK_SIZE,
)
from ...core.exceptions import (
    BinaryNotFound,
    DownloadError,
    GatewayError,
    LoginFailed,
    NonZeroExit,
)
from ...core.interfaces import CommandResult, ProcessRunner
from ...core.logging import get_logger
from ...core.telemetry import get_telemetry
from ...core.utils import sha1_file
from ...infrastructure.process import SubprocessRunner
from ..deployment.paths import binary_name, binary_path, global_config_dir
from ..version.semver import SemVer, matches, parse_version_output

logger = get_logger(__name__)
telemetry = get_telemetry()


class BinaryManager:
    """
    Downloads, caches and invokes one deployment's CLI binary.

    Not safe for concurrent use on the same instance; managers for different
    deployments own disjoint directories and may run side by side.
    """

    def __init__(
        self,
        deployment_url: str,
        cache_root: Union[str, Path],
        binary_source: Optional[str] = None,
        runner: Optional[ProcessRunner] = None,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_DOWNLOAD_TIMEOUT,
    ):
        """
        Initialize binary manager.

        Args:
            deployment_url: Base URL of the deployment
            cache_root: Root directory holding every deployment's cache
            binary_source: Optional source URL template, may contain {{url}}
            runner: Process runner used to invoke the binary
            session: HTTP session used for downloads
            timeout: Download timeout in seconds
        """
        self.deployment_url = deployment_url.rstrip("/")
        self.cache_root = Path(cache_root)
        self.binary_source = binary_source
        self.runner = runner or SubprocessRunner()
        self.session = session or requests.Session()
        self.timeout = timeout

        self.binary_path = binary_path(self.deployment_url, self.cache_root)
        self.config_dir = global_config_dir(self.deployment_url, self.cache_root)

    # ============================================================
    # Download
    # ============================================================

    def resolve_source_url(self) -> str:
        """
        URL the binary is downloaded from.

        An override template has {{url}} replaced by the deployment URL and is
        then resolved against the deployment root, so absolute URLs, paths and
        bare query strings all work. Without one the deployment's own
        /bin/coder-<os>-<arch> endpoint is used.
        """
        if not self.binary_source:
            return f"{self.deployment_url}{BINARY_ENDPOINT}/{binary_name()}"

        source = self.binary_source.replace(BINARY_URL_PLACEHOLDER, self.deployment_url)
        return urljoin(self.deployment_url + "/", source)

    def current_etag(self) -> Optional[str]:
        """Quoted SHA-1 of the cached binary, or None when nothing is cached"""
        if not self.binary_path.is_file():
            return None
        return f'"{sha1_file(self.binary_path)}"'

    def ensure_cli(self) -> bool:
        """
        Make sure the cached binary matches the server's.

        Returns:
            True if a new binary was downloaded, False if the cached one is current

        Raises:
            DownloadError: If the server answers anything but 200 or 304
        """
        url = self.resolve_source_url()
        headers = {}
        etag = self.current_etag()
        if etag:
            headers["If-None-Match"] = etag

        logger.info(f"Checking CLI at {url}")
        tags = {"deployment": self.deployment_url}
        with telemetry.timed("cli.download.seconds", tags):
            response = self.session.get(url, headers=headers, stream=True, timeout=self.timeout)
            with response:
                if response.status_code == 304:
                    logger.info(f"CLI at {self.binary_path} is up to date")
                    telemetry.record_event("cli.download.skipped", {"url": url})
                    return False

                if response.status_code != 200:
                    raise DownloadError(response.status_code, url)

                size = self._write_binary(response)

        logger.info(f"Downloaded CLI to {self.binary_path} ({size} bytes)")
        telemetry.record_event("cli.download", {"url": url, "path": str(self.binary_path)})
        telemetry.record_metric("cli.download.bytes", size, tags)
        return True

    def _write_binary(self, response: requests.Response) -> int:
        """Stream the body to a temp file beside the target, then swap it in"""
        target = self.binary_path
        target.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
        size = 0
        try:
            with os.fdopen(fd, "wb") as f:
                for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    f.write(chunk)
                    size += len(chunk)
            os.chmod(tmp_name, BINARY_MODE)
            os.replace(tmp_name, target)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        return size

    # ============================================================
    # Invocation
    # ============================================================

    def _exec(self, *args: str) -> CommandResult:
        path = self.binary_path
        if not path.is_file() or not os.access(path, os.X_OK):
            raise BinaryNotFound(path)
        return self.runner.run([str(path), "--global-config", str(self.config_dir), *args])

    def current_version(self) -> SemVer:
        """
        Ask the cached binary for its version.

        Raises:
            BinaryNotFound: If the binary is missing or not executable
            NonZeroExit: If the binary exits with a non-zero code
            MalformedPayload, InvalidVersion: If the output cannot be understood
        """
        result = self._exec("version", "--output", "json")
        if not result.success:
            raise NonZeroExit(result.exit_code, result.stderr)
        return parse_version_output(result.stdout)

    def login(self, token: str) -> None:
        """
        Log the cached binary in to the deployment.

        Raises:
            BinaryNotFound: If the binary is missing or not executable
            LoginFailed: If the login subcommand exits with a non-zero code
        """
        logger.info(f"Logging in to {self.deployment_url}")
        result = self._exec("login", self.deployment_url, "--token", token)
        if not result.success:
            raise LoginFailed(result.exit_code, result.stderr)

    def is_compatible(self, target_build: str) -> bool:
        """
        Whether the cached binary's version matches a server build.

        Any failure to determine the local version counts as incompatible.
        """
        try:
            version = self.current_version()
        except (GatewayError, OSError) as e:
            logger.info(f"Cannot determine CLI version, treating as incompatible: {e}")
            return False

        compatible = matches(version, target_build)
        logger.debug(f"CLI version {version} vs build {target_build!r}: compatible={compatible}")
        return compatible
