"""
Managed block editing for the user's SSH config

The file belongs to the user. This module owns exactly one region of it,
delimited by a start and an end marker line tagged with the deployment name,
and treats everything else as opaque text that is written back unchanged.
"""
import os
import re
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ...core.constants import (
    BLOCK_END_MARKER,
    BLOCK_START_MARKER,
    HOST_ALIAS,
    SSH_CONFIG_MODE,
    SSH_CONFIG_PATH,
    SSH_DIR_MODE,
    SSH_SESSION_TYPE,
)
from ...core.exceptions import MalformedConfig
from ...core.logging import get_logger
from ...core.utils import escape_arg
from .models import SSHConfigDocument, WorkspaceAgent

logger = get_logger(__name__)

# A line including its terminator; the last line may lack one
LINE_PATTERN = re.compile(r"[^\n]*\n|[^\n]+$")


def detect_newline(text: str, default: str = os.linesep) -> str:
    """Line ending used by text, or default when it has no line break"""
    if "\r\n" in text:
        return "\r\n"
    if "\n" in text:
        return "\n"
    return default


class SSHConfigEditor:
    """Reconciles one deployment's managed block in an SSH config file"""

    def __init__(
        self,
        deployment_name: str,
        binary_path: Union[str, Path],
        config_dir: Union[str, Path],
        ssh_config_path: Optional[Union[str, Path]] = None,
    ):
        """
        Initialize SSH config editor.

        Args:
            deployment_name: Normalized deployment name, tags markers and host aliases
            binary_path: CLI binary invoked by ProxyCommand
            config_dir: Directory passed to the CLI as --global-config
            ssh_config_path: SSH config file (default: ~/.ssh/config)
        """
        self.deployment_name = deployment_name
        self.binary_path = Path(binary_path)
        self.config_dir = Path(config_dir)
        self.ssh_config_path = Path(ssh_config_path or SSH_CONFIG_PATH).expanduser()

        self.start_marker = BLOCK_START_MARKER.format(name=deployment_name)
        self.end_marker = BLOCK_END_MARKER.format(name=deployment_name)

    # ============================================================
    # Parsing
    # ============================================================

    def parse(self, text: str) -> SSHConfigDocument:
        """
        Split text into prologue, managed block and epilogue.

        The block spans from the start of the start marker line to the end of
        the end marker line, terminator included.

        Raises:
            MalformedConfig: If the markers are duplicated, unpaired or out of order
        """
        starts: List[re.Match] = []
        ends: List[re.Match] = []
        for m in LINE_PATTERN.finditer(text):
            line = m.group().rstrip("\r\n")
            if line == self.start_marker:
                starts.append(m)
            elif line == self.end_marker:
                ends.append(m)

        newline = detect_newline(text)

        if len(starts) > 1:
            raise MalformedConfig(f"found {len(starts)} start markers for {self.deployment_name}")
        if len(ends) > 1:
            raise MalformedConfig(f"found {len(ends)} end markers for {self.deployment_name}")
        if starts and not ends:
            raise MalformedConfig("start marker exists but no end marker")
        if ends and not starts:
            raise MalformedConfig("end marker exists but no start marker")
        if not starts:
            return SSHConfigDocument(prologue=text, block=None, epilogue="", newline=newline)

        start, end = starts[0], ends[0]
        if end.start() < start.start():
            raise MalformedConfig("end marker appears before start marker")

        return SSHConfigDocument(
            prologue=text[:start.start()],
            block=text[start.start():end.end()],
            epilogue=text[end.end():],
            newline=newline,
        )

    # ============================================================
    # Rendering
    # ============================================================

    def host_alias(self, host: WorkspaceAgent) -> str:
        return HOST_ALIAS.format(target=host.target, name=self.deployment_name)

    def render_stanza(self, host: WorkspaceAgent, newline: str = "\n") -> str:
        """Host entry for one workspace agent"""
        proxy_command = " ".join([
            escape_arg(str(self.binary_path)),
            "--global-config",
            escape_arg(str(self.config_dir)),
            "ssh",
            "--stdio",
            escape_arg(host.target),
        ])
        lines = [
            f"Host {self.host_alias(host)}",
            f"  HostName coder.{host.target}",
            f"  ProxyCommand {proxy_command}",
            "  ConnectTimeout 0",
            "  StrictHostKeyChecking no",
            "  UserKnownHostsFile /dev/null",
            "  LogLevel ERROR",
            f"  SetEnv CODER_SSH_SESSION_TYPE={SSH_SESSION_TYPE}",
        ]
        return newline.join(lines)

    def render_block(self, hosts: Iterable[WorkspaceAgent], newline: str = "\n") -> str:
        """Managed block from start marker to end marker, without a final newline"""
        parts = [self.start_marker]
        parts.extend(self.render_stanza(host, newline) for host in hosts)
        parts.append(self.end_marker)
        return newline.join(parts)

    # ============================================================
    # Splicing
    # ============================================================

    @staticmethod
    def _append(text: str, block: str, newline: str) -> str:
        """Add block at the end, separated from existing content by a blank line"""
        if not text:
            return block + newline
        if not text.endswith("\n"):
            text += newline
        body = text[:-1].rstrip("\r")
        if body and not body.endswith("\n"):
            text += newline
        return text + block + newline

    @staticmethod
    def _remove(doc: SSHConfigDocument) -> str:
        """Drop the block and the blank lines that separated it"""
        head = doc.prologue.rstrip("\r\n")
        tail = doc.epilogue.lstrip("\r\n")
        if head and tail:
            return head + doc.newline + doc.newline + tail
        if head:
            return head + doc.newline
        return tail

    def apply(self, text: str, hosts: Iterable[WorkspaceAgent]) -> str:
        """
        Compute the new file text for the given hosts.

        An empty host list removes the block; otherwise the block is replaced
        in place or appended.

        Raises:
            MalformedConfig: If the existing markers are inconsistent
        """
        hosts = list(hosts)
        doc = self.parse(text)

        if not hosts:
            if not doc.has_block:
                return text
            return self._remove(doc)

        block = self.render_block(hosts, doc.newline)
        if doc.has_block:
            return doc.prologue + block + doc.newline + doc.epilogue
        return self._append(text, block, doc.newline)

    # ============================================================
    # File I/O
    # ============================================================

    def read(self) -> Optional[str]:
        """
        Current file text with line endings untouched, None if absent.

        Bytes that are not UTF-8 survive a read and write unchanged.
        """
        if not self.ssh_config_path.exists():
            return None
        with open(self.ssh_config_path, "r", encoding="utf-8", errors="surrogateescape", newline="") as f:
            return f.read()

    def write(self, text: str) -> None:
        path = self.ssh_config_path
        path.parent.mkdir(mode=SSH_DIR_MODE, parents=True, exist_ok=True)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, SSH_CONFIG_MODE)
        with os.fdopen(fd, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
            f.write(text)

    def config_ssh(self, hosts: Iterable[WorkspaceAgent]) -> bool:
        """
        Reconcile the managed block with a list of workspace agents.

        Hosts are written in the given order without deduplication. The file
        is not touched when the markers are malformed or nothing changes.

        Returns:
            True if the file was written

        Raises:
            MalformedConfig: If the existing markers are inconsistent
        """
        hosts = list(hosts)
        original = self.read()

        if original is None and not hosts:
            logger.debug(f"{self.ssh_config_path} does not exist, nothing to remove")
            return False

        # Text without line breaks, including a missing file, gets os.linesep
        updated = self.apply(original or "", hosts)
        if updated == original:
            logger.debug(f"{self.ssh_config_path} already up to date")
            return False

        self.write(updated)
        logger.info(
            f"Wrote {len(hosts)} host(s) for {self.deployment_name} to {self.ssh_config_path}"
            if hosts else f"Removed {self.deployment_name} hosts from {self.ssh_config_path}"
        )
        return True
