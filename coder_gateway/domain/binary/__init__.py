"""
Binary domain module
"""
from .manager import BinaryManager

__all__ = ["BinaryManager"]
