"""
Logging setup and shared rich consoles

Library modules only call get_logger(__name__). The CLI calls setup_logging
once, which routes records to stderr through rich and optionally to a file.
"""
import logging
import re
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler
from rich.traceback import install as install_traceback

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Chatty at DEBUG, and never useful below WARNING for this tool
NOISY_LOGGERS = ("urllib3", "paramiko")

_TOKEN_PATTERN = re.compile(r"(--token[ =])\S+")

# Consoles resolve sys.stdout/sys.stderr at print time
_stdout_console = Console()
_stderr_console = Console(stderr=True)

# Locals stay hidden: tracebacks may pass through login with a token in scope
install_traceback(show_locals=False, width=120)


class TokenFilter(logging.Filter):
    """Masks the value following --token in a formatted message"""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = _TOKEN_PATTERN.sub(r"\1****", message)
        if masked != message:
            record.msg, record.args = masked, None
        return True


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    rich_tracebacks: bool = True,
) -> None:
    """
    Route log records to stderr (and optionally a file).

    Args:
        level: Logging level name; unknown names fall back to INFO
        log_file: Optional log file, parent directories are created
        rich_tracebacks: Render exception tracebacks with rich
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    token_filter = TokenFilter()

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()

    console_handler = RichHandler(
        console=_stderr_console,
        show_path=log_level <= logging.DEBUG,
        rich_tracebacks=rich_tracebacks,
        markup=False,
    )
    console_handler.addFilter(token_filter)
    root.addHandler(console_handler)

    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        file_handler.addFilter(token_filter)
        root.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def get_stdout_console() -> Console:
    """Console for command output"""
    return _stdout_console


def get_stderr_console() -> Console:
    """Console for errors and log records"""
    return _stderr_console
