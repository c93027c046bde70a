"""Bot token verification against the Telegram Bot API."""

import json

import httpx
from rich.console import Console

from core.config import Config, load_config
from core.exceptions import ConfigurationError
from ui.log_utils import redact_url

console = Console()


def fetch_bot_identity(config: Config, *, timeout: float = 10.0) -> dict | None:
    """Call getMe and return the bot description, or None if the token is rejected."""
    url = f"{config.telegram.api_url}/getMe"
    try:
        response = httpx.get(url, timeout=timeout)
        data = response.json()
    except (httpx.RequestError, json.JSONDecodeError) as e:
        console.print(f"[red]getMe failed:[/red] {redact_url(str(e))}")
        return None
    if response.status_code != 200 or not data.get("ok"):
        console.print(f"[red]getMe failed:[/red] {response.status_code} - {data.get('description', '')}")
        return None
    return data.get("result", {})


def check_bot(config: Config) -> bool:
    """Print whether the configured token belongs to a live bot."""
    bot = fetch_bot_identity(config)
    if bot:
        console.print(f"[green]Authenticated[/green] as @{bot.get('username', '?')} (id {bot.get('id', '?')})")
        return True
    console.print("[yellow]Bot token rejected[/yellow]")
    console.print("\n[dim]Check TELEGRAM_TOKEN (as issued by @BotFather).[/dim]")
    return False


def print_auth_status() -> bool:
    """Load configuration from the environment and check the bot token."""
    try:
        config = load_config()
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        return False
    return check_bot(config)


def main():
    """CLI entry point for the bot check."""
    print_auth_status()


if __name__ == "__main__":
    main()
