"""Unit tests for deployment-scoped path resolution."""

from pathlib import Path

import pytest

from coder_gateway.core.exceptions import ConfigError
from coder_gateway.domain.deployment import paths
from coder_gateway.domain.deployment.paths import (
    binary_cache_dir,
    binary_name,
    binary_path,
    deployment_name,
    global_config_dir,
)


class TestBinaryCacheDir:
    """Tests for the per-deployment cache directory."""

    def test_uses_a_sub_directory(self, tmp_path: Path) -> None:
        assert binary_cache_dir("https://test.coder.invalid", tmp_path) == tmp_path / "test.coder.invalid"

    def test_includes_port_if_given(self, tmp_path: Path) -> None:
        result = binary_cache_dir("https://test.coder.invalid:3000", tmp_path)

        assert result == tmp_path / "test.coder.invalid-3000"

    @pytest.mark.parametrize(
        "url",
        ["https://test.coder.invalid:443", "http://test.coder.invalid:80", "https://test.coder.invalid/"],
    )
    def test_omits_default_port(self, url: str, tmp_path: Path) -> None:
        assert binary_cache_dir(url, tmp_path) == tmp_path / "test.coder.invalid"

    def test_lowercases_host(self, tmp_path: Path) -> None:
        assert binary_cache_dir("https://TEST.Coder.INVALID", tmp_path) == tmp_path / "test.coder.invalid"

    def test_encodes_idn_with_punycode(self, tmp_path: Path) -> None:
        result = binary_cache_dir("https://test.\U0001F609.invalid", tmp_path)

        assert result == tmp_path / "test.xn--n28h.invalid"

    def test_equivalent_unicode_hosts_share_a_directory(self, tmp_path: Path) -> None:
        """Fullwidth letters normalize to ASCII, so both URLs name the same deployment."""
        fullwidth = binary_cache_dir("https://ｔest.coder.invalid", tmp_path)
        ascii_host = binary_cache_dir("https://test.coder.invalid", tmp_path)

        assert fullwidth == ascii_host

    def test_distinct_deployments_never_share_a_directory(self, tmp_path: Path) -> None:
        urls = [
            "https://test.coder.invalid",
            "https://test.coder.invalid:3000",
            "https://test.coder.invalid:3001",
            "https://other.coder.invalid",
            "https://test.\U0001F609.invalid",
        ]

        dirs = {binary_cache_dir(url, tmp_path) for url in urls}

        assert len(dirs) == len(urls)

    def test_host_is_required(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="no host"):
            binary_cache_dir("https://", tmp_path)

    def test_invalid_port_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Invalid port"):
            binary_cache_dir("https://test.coder.invalid:99999", tmp_path)


class TestBinaryName:
    """Tests for platform-specific binary names."""

    def test_linux_has_no_extension(self) -> None:
        assert binary_name("linux", "amd64") == "coder-linux-amd64"

    def test_windows_has_exe_extension(self) -> None:
        assert binary_name("windows", "arm64") == "coder-windows-arm64.exe"

    def test_defaults_to_running_platform(self) -> None:
        assert binary_name() == binary_name(paths.resolve_os(), paths.resolve_arch())

    @pytest.mark.parametrize(
        ("machine", "expected"),
        [("x86_64", "amd64"), ("AMD64", "amd64"), ("aarch64", "arm64"), ("armv7l", "armv7"), ("riscv64", "riscv64")],
    )
    def test_resolves_arch(self, machine: str, expected: str, monkeypatch: pytest.MonkeyPatch) -> None:
        paths.resolve_arch.cache_clear()
        monkeypatch.setattr(paths.platform, "machine", lambda: machine)
        try:
            assert paths.resolve_arch() == expected
        finally:
            paths.resolve_arch.cache_clear()

    @pytest.mark.parametrize(("system", "expected"), [("Linux", "linux"), ("Darwin", "darwin"), ("Windows", "windows")])
    def test_resolves_os(self, system: str, expected: str, monkeypatch: pytest.MonkeyPatch) -> None:
        paths.resolve_os.cache_clear()
        monkeypatch.setattr(paths.platform, "system", lambda: system)
        try:
            assert paths.resolve_os() == expected
        finally:
            paths.resolve_os.cache_clear()


class TestDeploymentPaths:
    """Tests for the binary and global config locations."""

    def test_binary_lives_in_cache_dir(self, tmp_path: Path) -> None:
        result = binary_path("https://test.coder.invalid", tmp_path)

        assert result.parent == tmp_path / "test.coder.invalid"
        assert result.name == binary_name()

    def test_global_config_dir(self, tmp_path: Path) -> None:
        result = global_config_dir("https://test.coder.invalid:8080", tmp_path)

        assert result == tmp_path / "test.coder.invalid-8080" / "config"

    def test_deployment_name_accepts_bare_host(self) -> None:
        assert deployment_name("test.coder.invalid") == "test.coder.invalid"
