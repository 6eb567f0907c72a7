"""
SSH domain models
"""
from dataclasses import dataclass
from typing import Optional, Dict, Any


@dataclass
class WorkspaceAgent:
    """
    A workspace agent that should be reachable over SSH.

    Only the names feed the generated host entry; the rest is carried for
    callers that list or filter agents.
    """
    workspace_name: str
    agent_name: Optional[str] = None
    workspace_id: Optional[str] = None
    template_id: Optional[str] = None
    template_name: Optional[str] = None
    status: Optional[str] = None
    agent_status: Optional[str] = None
    last_build_transition: Optional[str] = None
    agent_os: Optional[str] = None
    agent_arch: Optional[str] = None
    home_directory: Optional[str] = None

    @property
    def target(self) -> str:
        """Name passed to `coder ssh`: workspace or workspace.agent"""
        if self.agent_name:
            return f"{self.workspace_name}.{self.agent_name}"
        return self.workspace_name

    @classmethod
    def parse(cls, text: str) -> "WorkspaceAgent":
        """Build from a `workspace` or `workspace.agent` string"""
        workspace, _, agent = text.partition(".")
        if not workspace:
            raise ValueError(f"Invalid workspace name: {text!r}")
        return cls(workspace_name=workspace, agent_name=agent or None)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkspaceAgent":
        """Create from a workspace agent record"""
        return cls(
            workspace_name=data["workspace_name"],
            agent_name=data.get("agent_name"),
            workspace_id=data.get("workspace_id"),
            template_id=data.get("template_id"),
            template_name=data.get("template_name"),
            status=data.get("status"),
            agent_status=data.get("agent_status"),
            last_build_transition=data.get("last_build_transition"),
            agent_os=data.get("agent_os"),
            agent_arch=data.get("agent_arch"),
            home_directory=data.get("home_directory"),
        )


@dataclass
class SSHConfigDocument:
    """
    SSH config split around the managed block.

    block is None when the file has no managed block; prologue then holds the
    whole text and epilogue is empty.
    """
    prologue: str
    block: Optional[str]
    epilogue: str
    newline: str

    @property
    def has_block(self) -> bool:
        return self.block is not None

    def render(self) -> str:
        return self.prologue + (self.block or "") + self.epilogue
