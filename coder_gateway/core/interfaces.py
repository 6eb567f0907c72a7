"""
Core interfaces for dependency injection
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence


@dataclass
class CommandResult:
    """Captured result of a finished process"""
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.exit_code == 0


class ProcessRunner(ABC):
    """Runs a local executable and captures its output"""
    
    @abstractmethod
    def run(self, args: Sequence[str], timeout: Optional[float] = None) -> CommandResult:
        """
        Run args[0] with the remaining arguments.
        
        Raises:
            BinaryNotFound: If the executable is missing or cannot be executed
        """
        pass


class Environment(ABC):
    """Environment variable lookup"""
    
    @abstractmethod
    def get(self, name: str) -> Optional[str]:
        """Return the variable value or None when it is not set"""
        pass


class PromptProvider(ABC):
    """Interactive input the CLI needs from the user"""
    
    @abstractmethod
    def session_token(self, deployment_url: str) -> str:
        """Ask for a session token for the deployment, without echoing it"""
        pass
