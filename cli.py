"""CLI entry point for telegram-gateway."""

import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from auth import print_auth_status
from core.config import ENV_VARS, Config, load_config
from core.exceptions import ConfigurationError
from ui.dashboard import Dashboard
from ui.log_utils import CLI_LOG_FILE, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    args = sys.argv[1:]

    if args:
        arg = args[0]

        if arg == "--check":
            sys.exit(0 if print_auth_status() else 1)

        if arg in ("--help", "-h"):
            _print_help()
            return

    # Required settings are checked before anything is served
    try:
        config = load_config()
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        console.print(f"[dim]Set {', '.join(ENV_VARS[:2])} in the environment[/dim]")
        sys.exit(1)

    if "--config" in args:
        _print_config(config)
        return

    dashboard = Dashboard(config, live="--headless" not in args)

    import uvicorn

    app = create_app(config, dashboard)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level="warning",
    )
    server = uvicorn.Server(uvicorn_config)

    dashboard.start()
    start_time = datetime.now()
    write_cli_log("STARTUP", "Gateway listening", host=config.server.host, port=config.server.port)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Gateway stopped", duration=str(duration))
        dashboard.stop()


def _print_config(config: Config) -> None:
    """Print effective settings with the token masked."""
    token = config.telegram.token
    masked = token.split(":", 1)[0] + ":***" if ":" in token else "***"
    console.print(f"[bold]Telegram API:[/bold] {config.telegram.api_base} (token {masked})")
    console.print(f"[bold]Webhook:[/bold] {config.webhook.url}")
    console.print(f"[bold]Listen:[/bold] {config.server.host}:{config.server.port}")
    console.print(f"[bold]Upstream timeout:[/bold] {config.upstream.timeout}s")
    console.print(f"[bold]Debug dumps:[/bold] {'on' if config.server.debug else 'off'}")
    console.print(f"[bold]Log file:[/bold] {CLI_LOG_FILE}")


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]Telegram Gateway[/bold cyan]

Forwards Telegram updates to an n8n webhook and relays n8n calls back to Telegram.

[bold]Usage:[/bold]
    telegram-gateway               Start with live dashboard
    telegram-gateway --headless    Start with plain log lines
    telegram-gateway --check       Verify the bot token (getMe)
    telegram-gateway --config      Show effective settings
    telegram-gateway --help        Show this help

[bold]Environment:[/bold]
    TELEGRAM_TOKEN, N8N_WEBHOOK    required
    PORT (3000), HOST (0.0.0.0), PROXY_TIMEOUT (30), TELEGRAM_API_BASE, GATEWAY_DEBUG
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
