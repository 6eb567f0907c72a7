"""
Semantic version parsing and build compatibility
"""
import json
import re
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from ...core.exceptions import InvalidVersion, MalformedPayload

# semver.org grammar, with the leading "v" that coder builds carry
SEMVER_PATTERN = re.compile(
    r"^v?(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<prerelease>(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+(?P<build>[0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)


@dataclass(frozen=True)
class SemVer:
    """Parsed semantic version"""
    major: int
    minor: int
    patch: int
    prerelease: Optional[str] = None
    build: Optional[str] = None

    @property
    def triple(self) -> Tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.build:
            text += f"+{self.build}"
        return text


def parse_semver(text: str) -> SemVer:
    """
    Parse a version string such as "v1.2.3-devel+abc123".
    
    Raises:
        InvalidVersion: If text is empty or not a semantic version
    """
    if not isinstance(text, str) or not text.strip():
        raise InvalidVersion("Version is empty")
    
    m = SEMVER_PATTERN.match(text.strip())
    if not m:
        raise InvalidVersion(f"Not a semantic version: {text!r}")
    
    return SemVer(
        major=int(m.group("major")),
        minor=int(m.group("minor")),
        patch=int(m.group("patch")),
        prerelease=m.group("prerelease"),
        build=m.group("build"),
    )


def parse_version_output(output: str) -> SemVer:
    """
    Decode the JSON printed by `coder version --output json`.
    
    Extra fields are ignored. Empty output reports no version at all.
    
    Raises:
        MalformedPayload: If output is not valid JSON
        InvalidVersion: If the version field is missing, empty or unparsable
    """
    if not output or not output.strip():
        raise InvalidVersion("CLI did not report a version")
    
    try:
        payload = json.loads(output)
    except json.JSONDecodeError as e:
        raise MalformedPayload(f"Version output is not valid JSON: {e}") from e
    
    if not isinstance(payload, dict):
        raise InvalidVersion("Version output is not a JSON object")
    
    version = payload.get("version")
    if not isinstance(version, str) or not version:
        raise InvalidVersion("Version output has no version field")
    
    return parse_semver(version)


def matches(cached: Union[SemVer, str, None], target: Union[SemVer, str, None]) -> bool:
    """
    Compare two versions by major.minor.patch only.
    
    Pre-release labels and build metadata are ignored, so a devel build and a
    tagged release of the same base version match. Never raises; anything
    unparsable does not match.
    """
    try:
        left = cached if isinstance(cached, SemVer) else parse_semver(cached)
        right = target if isinstance(target, SemVer) else parse_semver(target)
    except InvalidVersion:
        return False
    return left.triple == right.triple
