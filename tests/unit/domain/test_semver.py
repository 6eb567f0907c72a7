"""Unit tests for version parsing and build compatibility."""

import pytest

from coder_gateway.core.exceptions import InvalidVersion, MalformedPayload, VersionError
from coder_gateway.domain.version import SemVer, matches, parse_semver, parse_version_output


class TestParseSemver:
    """Tests for parse_semver."""

    def test_parses_plain_version(self) -> None:
        assert parse_semver("1.2.3") == SemVer(1, 2, 3)

    def test_parses_prefixed_version_with_metadata(self) -> None:
        version = parse_semver("v0.17.4-devel+ab3f42c")

        assert version.triple == (0, 17, 4)
        assert version.prerelease == "devel"
        assert version.build == "ab3f42c"
        assert str(version) == "0.17.4-devel+ab3f42c"

    @pytest.mark.parametrize("text", ["", "   ", "1.0", "1.0.0.0", "01.0.0", "v", "latest", "1.0.0-"])
    def test_rejects_invalid_versions(self, text: str) -> None:
        with pytest.raises(InvalidVersion):
            parse_semver(text)


class TestParseVersionOutput:
    """Tests for decoding `coder version --output json`."""

    @pytest.mark.parametrize(
        "output",
        ['{"version": "1.0.0"}', '{"version": "1.0.0", "foo": true, "baz": 1}\n'],
    )
    def test_parses_version_field(self, output: str) -> None:
        assert parse_version_output(output) == parse_semver("1.0.0")

    @pytest.mark.parametrize(
        ("output", "expected"),
        [
            ('{"foo": true, "baz": 1}', InvalidVersion),
            ('{"version": ""}', InvalidVersion),
            ('{"version": 1}', InvalidVersion),
            ('{"version": "banana"}', InvalidVersion),
            ('["1.0.0"]', InvalidVersion),
            ("", InvalidVersion),
            ('{"version: ', MalformedPayload),
            ("not json", MalformedPayload),
        ],
    )
    def test_rejects_bad_output(self, output: str, expected: type[VersionError]) -> None:
        with pytest.raises(expected):
            parse_version_output(output)


class TestMatches:
    """Tests for major.minor.patch compatibility."""

    @pytest.mark.parametrize(
        ("cached", "build", "expected"),
        [
            ("v1.0.0", "v1.0.0", True),
            ("v1.0.0", "v1.0.0-devel+b5b5b5b5", True),
            ("v1.0.0-devel+b5b5b5b5", "v1.0.0-devel+b5b5b5b5", True),
            ("v1.0.0-devel+b5b5b5b5", "v1.0.0", True),
            ("v1.0.0-devel+b5b5b5b5", "v1.0.0-devel+c6c6c6c6", True),
            ("v1.0.0-prod+b5b5b5b5", "v1.0.0-devel+b5b5b5b5", True),
            ("v1.0.0-prod+aaa", "v1.0.0-devel+bbb", True),
            ("v1.0.0", "v1.0.1", False),
            ("v1.0.0", "v1.1.0", False),
            ("v1.0.0", "v2.0.0", False),
            ("v1.0.0", "v0.0.0", False),
            ("", "v1.0.0", False),
            ("v1.0.0", "", False),
            (None, "v1.0.0", False),
        ],
    )
    def test_compares_triples(self, cached: str | None, build: str, expected: bool) -> None:
        assert matches(cached, build) is expected

    def test_accepts_parsed_versions(self) -> None:
        assert matches(SemVer(1, 0, 0, "rc.1"), "1.0.0")
