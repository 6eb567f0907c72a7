"""
Unified exception definitions
"""
from typing import Optional


class GatewayError(Exception):
    """Base exception class"""
    pass


class ConfigError(GatewayError):
    """Configuration error"""
    pass


class DownloadError(GatewayError):
    """Binary download answered with an unexpected status code"""

    def __init__(self, status_code: int, url: str = ""):
        self.status_code = status_code
        self.url = url
        super().__init__(f"Unable to download {url or 'CLI'}: server responded with {status_code}")


class BinaryNotFound(GatewayError):
    """Cached binary is missing or not executable"""

    def __init__(self, path):
        self.path = path
        super().__init__(f"CLI binary not found or not executable: {path}")


class NonZeroExit(GatewayError):
    """Wrapped binary exited abnormally"""

    def __init__(self, exit_code: int, stderr: Optional[str] = None):
        self.exit_code = exit_code
        self.stderr = stderr or ""
        message = f"CLI exited with code {exit_code}"
        if self.stderr.strip():
            message += f": {self.stderr.strip()}"
        super().__init__(message)


class LoginFailed(NonZeroExit):
    """Login subcommand failed"""
    pass


class VersionError(GatewayError):
    """Version output could not be understood"""
    pass


class MalformedPayload(VersionError):
    """Version output is not valid JSON"""
    pass


class InvalidVersion(VersionError):
    """Version field missing or not a semantic version"""
    pass


class MalformedConfig(GatewayError):
    """Managed block markers in the SSH config are inconsistent"""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Malformed SSH config: {reason}")
