"""Real-time CLI dashboard for gateway monitoring."""

from datetime import datetime
from threading import Lock
from typing import Any

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import describe_update, format_log_line, write_cli_log

console = Console()


class TrafficEntry:
    """Info about a single relayed request."""

    def __init__(self, route: str, detail: str, status: int | None, timestamp: datetime):
        self.route = route
        self.detail = detail[:60] + "..." if len(detail) > 60 else detail
        self.status = status
        self.timestamp = timestamp


class Dashboard:
    """Dashboard showing traffic in both directions.

    With ``live=False`` nothing is drawn; each event is printed as a log line instead.
    """

    def __init__(self, config: Config, *, live: bool = True):
        self.config = config
        self._live_enabled = live
        self._lock = Lock()
        self._recent: list[TrafficEntry] = []
        self._max_recent = 8
        self._counts = {"updates": 0, "messages": 0, "files": 0, "proxied": 0}
        self._errors: list[str] = []
        self._live: Live | None = None

    @property
    def counts(self) -> dict[str, int]:
        with self._lock:
            return dict(self._counts)

    @property
    def errors(self) -> list[str]:
        with self._lock:
            return list(self._errors)

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
        if not self._live_enabled:
            return self
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        """Stop the live dashboard."""
        if self._live:
            self._live.stop()

    def log_update(self, update: Any, status: int | None) -> None:
        """Log a Telegram update forwarded to the webhook."""
        detail = describe_update(update)
        with self._lock:
            self._counts["updates"] += 1
            self._record("telegram", detail, status)
        self._emit("UPDATE", detail, status=status)

    def log_outbound(self, method: str, chat_id: Any, status: int) -> None:
        """Log a message or file sent through the Bot API."""
        with self._lock:
            self._counts["messages" if method == "sendMessage" else "files"] += 1
            self._record(method, f"chat={chat_id}", status)
        self._emit("SEND", method, chat_id=chat_id, status=status)

    def log_relay(self, method: str, url: str, status: int, *, route: str = "proxy") -> None:
        """Log a relayed stream once upstream headers arrived."""
        with self._lock:
            self._counts["proxied"] += 1
            self._record(route, f"{method} {url}", status)
        self._emit("RELAY", f"{method} {url}", route=route, status=status)

    def log_error(self, route: str, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            truncated = message[:50] + "..." if len(message) > 50 else message
            self._errors.insert(0, f"{route} {status}: {truncated}")
            self._errors = self._errors[:3]
            self._refresh()
        self._emit("ERROR", message[:200], route=route, status=status)

    def _record(self, route: str, detail: str, status: int | None) -> None:
        self._recent.insert(0, TrafficEntry(route, detail, status, datetime.now()))
        self._recent = self._recent[: self._max_recent]
        self._refresh()

    def _emit(self, level: str, message: str, **extra: Any) -> None:
        write_cli_log(level, message, **extra)
        if not self._live_enabled:
            timestamp = datetime.now().strftime("%H:%M:%S")
            style = "red" if level == "ERROR" else None
            console.print(format_log_line(timestamp, level, message, **extra), style=style, markup=False)

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=5),
        )

        layout["header"].update(self._build_header())
        layout["body"].update(self._build_traffic_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("Telegram Gateway", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Updates: {self._counts['updates']}", style="blue")
        stats.append("  |  ")
        stats.append(f"Messages: {self._counts['messages']}", style="green")
        stats.append("  |  ")
        stats.append(f"Files: {self._counts['files']}", style="green")
        stats.append("  |  ")
        stats.append(f"Proxied: {self._counts['proxied']}", style="magenta")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.server.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_traffic_panel(self) -> Panel:
        """Build recent traffic panel."""
        if self._recent:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Route", width=14)
            table.add_column("Detail", ratio=3)
            table.add_column("Status", width=6)

            for entry in self._recent:
                status = "-" if entry.status is None else str(entry.status)
                style = "red" if entry.status is None or entry.status >= 400 else "green"
                table.add_row(
                    entry.timestamp.strftime("%H:%M:%S"),
                    entry.route,
                    entry.detail,
                    Text(status, style=style),
                )

            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[magenta]Recent traffic[/magenta]", border_style="magenta")

    def _build_footer(self) -> Panel:
        """Build footer with errors and help."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            content = Text(
                f"Point the bot webhook at http://<host>:{self.config.server.port}/telegram",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")
