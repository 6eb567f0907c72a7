"""
Environment variable sources
"""
import os
from typing import Mapping, Optional

from ..core.interfaces import Environment


class OsEnvironment(Environment):
    """Reads the real process environment"""
    
    def get(self, name: str) -> Optional[str]:
        return os.environ.get(name)


class MappingEnvironment(Environment):
    """
    Environment backed by a plain mapping.
    
    Lets directory resolution be exercised without touching os.environ.
    """
    
    def __init__(self, values: Optional[Mapping[str, str]] = None):
        self._values = dict(values or {})
    
    def get(self, name: str) -> Optional[str]:
        return self._values.get(name)
