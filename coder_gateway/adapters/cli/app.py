"""
Main CLI application
"""
import typer
from pathlib import Path
from typing import Optional

from rich.markup import escape

from ...core.exceptions import ConfigError
from ...core.logging import setup_logging, get_logger, get_stderr_console
from ..config.loader import ConfigLoader
from .commands import register_commands

logger = get_logger(__name__)
stderr_console = get_stderr_console()

app = typer.Typer(
    name="coder-gateway",
    add_completion=False,
    help="Manage the Coder CLI and SSH config for Coder deployments",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

register_commands(app)


@app.callback()
def main(
    ctx: typer.Context,
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Deployment URL"),
    cache_dir: Optional[Path] = typer.Option(None, "--cache-dir", help="Binary cache root (default: data dir)"),
    binary_source: Optional[str] = typer.Option(
        None, "--binary-source", help="Binary download URL, may contain {{url}}"
    ),
    ssh_config: Optional[Path] = typer.Option(None, "--ssh-config", help="SSH config file (default: ~/.ssh/config)"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file path (TOML)"),
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        "-l",
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    ),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Log file path"),
):
    """
    Coder Gateway - keep the Coder CLI and SSH hosts in sync with a deployment

    Settings come from --config, CODER_GATEWAY_* environment variables and
    options, the latter taking precedence.
    """
    setup_logging(level=log_level, log_file=log_file)

    cli_overrides = {
        "url": url,
        "cache_dir": str(cache_dir) if cache_dir else None,
        "binary_source": binary_source,
        "ssh_config": str(ssh_config) if ssh_config else None,
    }
    try:
        ctx.obj = ConfigLoader().load(toml_path=config_file, cli_overrides=cli_overrides)
    except ConfigError as e:
        stderr_console.print(f"[red]Config Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def run():
    """CLI entry point"""
    app()


if __name__ == "__main__":
    run()
