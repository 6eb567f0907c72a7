"""Unit tests for the per-deployment manager facade."""

from pathlib import Path

import pytest
from conftest import FakeRunner, make_executable

from coder_gateway.domain import CoderCLIManager
from coder_gateway.domain import manager as manager_module
from coder_gateway.domain.deployment.paths import binary_name
from coder_gateway.domain.ssh import WorkspaceAgent


class TestCoderCLIManager:
    """Tests wiring the binary manager and SSH editor together."""

    def test_uses_a_sub_directory(self, tmp_path: Path) -> None:
        ccm = CoderCLIManager("https://test.coder.invalid", tmp_path)

        assert ccm.local_binary_path.parent == tmp_path / "test.coder.invalid"
        assert ccm.local_binary_path.name == binary_name()
        assert ccm.cache_dir == tmp_path / "test.coder.invalid"
        assert ccm.config_dir == tmp_path / "test.coder.invalid" / "config"

    def test_defaults_cache_root_to_data_dir(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(manager_module, "data_dir", lambda: tmp_path / "data")

        ccm = CoderCLIManager("https://test.coder.invalid")

        assert ccm.cache_dir == tmp_path / "data" / "test.coder.invalid"

    def test_config_ssh_points_at_local_binary(self, tmp_path: Path) -> None:
        ssh_config = tmp_path / "ssh_config"
        ccm = CoderCLIManager("https://test.coder.invalid:3000", tmp_path / "cache", ssh_config_path=ssh_config)

        ccm.config_ssh([WorkspaceAgent("foo"), WorkspaceAgent("bar")])

        text = ssh_config.read_text()
        assert text.startswith("# --- START CODER JETBRAINS test.coder.invalid-3000")
        assert f"ProxyCommand {ccm.local_binary_path} --global-config {ccm.config_dir} ssh --stdio foo" in text
        assert text.index("--foo--") < text.index("--bar--")

    def test_deployments_have_separate_blocks(self, tmp_path: Path) -> None:
        ssh_config = tmp_path / "ssh_config"
        first = CoderCLIManager("https://one.coder.invalid", tmp_path, ssh_config_path=ssh_config)
        second = CoderCLIManager("https://two.coder.invalid", tmp_path, ssh_config_path=ssh_config)

        first.config_ssh([WorkspaceAgent("foo")])
        second.config_ssh([WorkspaceAgent("bar")])
        first.config_ssh([])

        text = ssh_config.read_text()
        assert "one.coder.invalid" not in text
        assert "Host coder-jetbrains--bar--two.coder.invalid" in text

    def test_download_and_version(self, deployment_server, http_session, tmp_path: Path) -> None:
        srv = deployment_server()
        runner = FakeRunner(stdout='{"version": "v1.2.3"}')
        ccm = CoderCLIManager(srv.url, tmp_path, runner=runner, session=http_session)

        assert ccm.ensure_cli()
        assert not ccm.ensure_cli()
        assert str(ccm.version()) == "1.2.3"
        assert ccm.matches_version("v1.2.3-devel+abcdef")
        assert not ccm.matches_version("v1.2.4")

    def test_login(self, tmp_path: Path) -> None:
        runner = FakeRunner()
        ccm = CoderCLIManager("https://test.coder.invalid", tmp_path, runner=runner)
        make_executable(ccm.local_binary_path)

        ccm.login("token")

        assert "login" in runner.calls[0]
