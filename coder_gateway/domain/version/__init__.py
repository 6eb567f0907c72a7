"""
Version domain module
"""
from .semver import SemVer, parse_semver, parse_version_output, matches

__all__ = ["SemVer", "parse_semver", "parse_version_output", "matches"]
