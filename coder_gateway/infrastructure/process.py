"""
Local process execution
"""
import subprocess
from typing import Optional, Sequence

from ..core.constants import DEFAULT_PROCESS_TIMEOUT
from ..core.exceptions import BinaryNotFound
from ..core.interfaces import CommandResult, ProcessRunner
from ..core.logging import get_logger

logger = get_logger(__name__)


class SubprocessRunner(ProcessRunner):
    """ProcessRunner backed by subprocess.run"""
    
    def __init__(self, timeout: Optional[float] = DEFAULT_PROCESS_TIMEOUT):
        self.timeout = timeout
    
    def run(self, args: Sequence[str], timeout: Optional[float] = None) -> CommandResult:
        cmd = [str(a) for a in args]
        timeout = timeout if timeout is not None else self.timeout
        # Arguments may carry a session token, only the executable is logged
        logger.debug(f"Running {cmd[0]}")
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=timeout,
            )
        except OSError as e:
            # Missing, not executable, or not a program for this platform
            raise BinaryNotFound(cmd[0]) from e
        except subprocess.TimeoutExpired:
            return CommandResult(
                exit_code=124,
                stdout="",
                stderr=f"Command timed out after {timeout} seconds",
            )
        
        return CommandResult(
            exit_code=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )
