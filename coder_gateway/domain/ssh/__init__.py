"""
SSH config domain module
"""
from .models import WorkspaceAgent, SSHConfigDocument
from .editor import SSHConfigEditor, detect_newline

__all__ = ["WorkspaceAgent", "SSHConfigDocument", "SSHConfigEditor", "detect_newline"]
