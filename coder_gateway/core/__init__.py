"""
Core infrastructure layer
"""
from .constants import *
from .exceptions import *
from .logging import setup_logging, get_logger, get_stdout_console, get_stderr_console
from .interfaces import CommandResult, ProcessRunner, Environment, PromptProvider
from .telemetry import Telemetry, get_telemetry
from .utils import load_ssh_config, list_ssh_hosts, sha1_file, escape_arg

__all__ = [
    "setup_logging",
    "get_logger",
    "get_stdout_console",
    "get_stderr_console",
    "CommandResult",
    "ProcessRunner",
    "Environment",
    "PromptProvider",
    "Telemetry",
    "get_telemetry",
    "load_ssh_config",
    "list_ssh_hosts",
    "sha1_file",
    "escape_arg",
]
