"""
Infrastructure implementations of core interfaces
"""
from .environment import OsEnvironment, MappingEnvironment
from .process import SubprocessRunner

__all__ = ["OsEnvironment", "MappingEnvironment", "SubprocessRunner"]
