"""
Configuration adapters
"""
from .loader import ConfigLoader, GatewaySettings

__all__ = ["ConfigLoader", "GatewaySettings"]
