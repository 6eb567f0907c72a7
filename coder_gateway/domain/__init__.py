"""
Domain layer: deployment paths, versions, binary cache and SSH config
"""
from .manager import CoderCLIManager

__all__ = ["CoderCLIManager"]
