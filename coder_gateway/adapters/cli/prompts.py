"""
Rich-based user prompts
"""
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from ...core.interfaces import PromptProvider
from ...core.logging import get_stdout_console

# Page on a deployment that shows the signed-in user's session token
CLI_AUTH_PATH = "/cli-auth"


class RichPromptProvider(PromptProvider):
    """Prompts and status lines on a rich console"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or get_stdout_console()

    def session_token(self, deployment_url: str) -> str:
        url = deployment_url.rstrip("/") + CLI_AUTH_PATH
        self.console.print(f"Get a session token from [link={url}]{escape(url)}[/link]")
        while True:
            token = Prompt.ask("Session token", password=True, console=self.console).strip()
            if token:
                return token
            self.console.print("[red]A session token is required[/red]")

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠[/yellow] {message}")
