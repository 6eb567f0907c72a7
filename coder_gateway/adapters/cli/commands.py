"""
Deployment CLI commands
"""
from contextlib import contextmanager
from pathlib import Path
from typing import List, Optional

import requests
import typer
from rich.markup import escape
from rich.table import Table

from ...core.exceptions import GatewayError
from ...core.logging import get_logger, get_stdout_console, get_stderr_console
from ...core.utils import list_ssh_hosts, load_ssh_config
from ...domain import CoderCLIManager
from ...domain.deployment import config_dir, data_dir
from ...domain.ssh import WorkspaceAgent
from ..config.loader import GatewaySettings
from .prompts import RichPromptProvider

logger = get_logger(__name__)
stdout_console = get_stdout_console()
stderr_console = get_stderr_console()
prompt_provider = RichPromptProvider()


def register_commands(app: typer.Typer) -> None:
    """Register deployment commands on the main app"""
    app.command(name="dirs")(show_dirs)
    app.command(name="download")(download)
    app.command(name="version")(show_version)
    app.command(name="check")(check)
    app.command(name="login")(login)
    app.command(name="config-ssh")(config_ssh)
    app.command(name="hosts")(hosts)


@contextmanager
def report_errors(action: str):
    """Turn domain and network failures into an error message and exit code 1"""
    try:
        yield
    except GatewayError as e:
        stderr_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except requests.RequestException as e:
        logger.debug(f"{action} failed", exc_info=True)
        stderr_console.print(f"[red]Error:[/red] {action} failed: {escape(str(e))}")
        raise typer.Exit(1)


def _settings(ctx: typer.Context) -> GatewaySettings:
    settings = ctx.obj
    if settings is None:
        settings = GatewaySettings()
    return settings


def _manager(ctx: typer.Context) -> CoderCLIManager:
    settings = _settings(ctx)
    settings.validate()
    return CoderCLIManager(
        settings.url,
        cache_root=settings.cache_dir,
        binary_source=settings.binary_source,
        ssh_config_path=settings.ssh_config,
    )


def show_dirs(ctx: typer.Context):
    """Show the CLI config directory and the binary cache directories"""
    settings = _settings(ctx)
    table = Table(show_header=False, box=None)
    table.add_row("Config dir", str(config_dir()))
    table.add_row("Data dir", str(data_dir()))
    if settings.url:
        with report_errors("Resolving paths"):
            manager = _manager(ctx)
            table.add_row("Cache dir", str(manager.cache_dir))
            table.add_row("Binary", str(manager.local_binary_path))
    stdout_console.print(table)


def download(ctx: typer.Context):
    """
    Download the deployment's CLI unless the cached copy is current

    Examples:
        coder-gateway --url https://coder.example.com download
    """
    with report_errors("Download"):
        manager = _manager(ctx)
        if manager.ensure_cli():
            prompt_provider.success(f"Downloaded CLI to {escape(str(manager.local_binary_path))}")
        else:
            prompt_provider.success(f"CLI at {escape(str(manager.local_binary_path))} is up to date")


def show_version(ctx: typer.Context):
    """Print the version reported by the cached CLI"""
    with report_errors("Version check"):
        version = _manager(ctx).version()
    stdout_console.print(str(version))


def check(
    ctx: typer.Context,
    build: Optional[str] = typer.Argument(None, help="Server build version (default: configured build_version)"),
):
    """
    Check whether the cached CLI is compatible with a server build

    Exits with code 0 when compatible and 1 otherwise.
    """
    settings = _settings(ctx)
    build = build or settings.build_version
    if not build:
        stderr_console.print("[red]Error:[/red] No build version given")
        raise typer.Exit(2)

    with report_errors("Compatibility check"):
        compatible = _manager(ctx).matches_version(build)

    if compatible:
        prompt_provider.success(f"CLI is compatible with {escape(build)}")
        return
    prompt_provider.warning(f"CLI is not compatible with {escape(build)}, run download to update it")
    raise typer.Exit(1)


def login(
    ctx: typer.Context,
    token: Optional[str] = typer.Option(None, "--token", "-t", help="Session token (prompted when omitted)"),
):
    """Log the cached CLI in to the deployment"""
    settings = _settings(ctx)
    token = token or settings.token
    with report_errors("Login"):
        manager = _manager(ctx)
        if not token:
            token = prompt_provider.session_token(manager.deployment_url)
        manager.login(token)
    prompt_provider.success(f"Logged in to {escape(manager.deployment_url)}")


def config_ssh(
    ctx: typer.Context,
    workspaces: Optional[List[str]] = typer.Argument(
        None, help="Workspaces as NAME or NAME.AGENT, in the order they should appear"
    ),
    remove: bool = typer.Option(False, "--remove", help="Remove this deployment's hosts"),
):
    """
    Write SSH host entries for workspaces

    Examples:
        coder-gateway --url https://coder.example.com config-ssh dev dev2.main
        coder-gateway --url https://coder.example.com config-ssh --remove
    """
    workspaces = workspaces or []
    if not workspaces and not remove:
        stderr_console.print("[red]Error:[/red] Give at least one workspace or --remove")
        raise typer.Exit(2)

    with report_errors("SSH config"):
        manager = _manager(ctx)
        try:
            agents = [] if remove else [WorkspaceAgent.parse(w) for w in workspaces]
        except ValueError as e:
            stderr_console.print(f"[red]Error:[/red] {escape(str(e))}")
            raise typer.Exit(2)
        changed = manager.config_ssh(agents)

    path = escape(str(manager.ssh_config.ssh_config_path))
    if not changed:
        prompt_provider.success(f"{path} already up to date")
    elif agents:
        prompt_provider.success(f"Configured {len(agents)} host(s) in {path}")
    else:
        prompt_provider.success(f"Removed hosts from {path}")


def hosts(ctx: typer.Context):
    """List this deployment's SSH hosts as an SSH client would resolve them"""
    with report_errors("Host lookup"):
        manager = _manager(ctx)
        path: Path = manager.ssh_config.ssh_config_path
        suffix = f"--{manager.deployment_name}"
        table = Table(title=str(path))
        table.add_column("Host", style="cyan")
        table.add_column("ProxyCommand")
        for alias in list_ssh_hosts(path):
            if alias.endswith(suffix):
                entry = load_ssh_config(alias, path)
                table.add_row(alias, entry["proxy_command"] or "")
    stdout_console.print(table)
