"""Real-time CLI dashboard for proxy monitoring."""

from datetime import datetime
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import write_cli_log, write_forward_log

console = Console()


class RequestInfo:
    """Info about a single completed request."""

    def __init__(self, method: str, path: str, status: int, timestamp: datetime):
        self.method = method
        self.path = path[:60] + "..." if len(path) > 60 else path
        self.status = status
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing recent forwarded requests."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._recent: list[RequestInfo] = []
        self._max_recent = 10
        self._counts = {"forwarded": 0, "preflight": 0, "errors": 0}
        self._errors: list[str] = []
        self._live: Live | None = None

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
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

    def log_forward(
        self,
        method: str,
        target_url: str,
        headers: list[tuple[str, str]],
        body: bytes | None,
    ) -> None:
        """Log a request about to be sent upstream."""
        with self._lock:
            self._counts["forwarded"] += 1
            if self.config.proxy.debug:
                write_forward_log(method, target_url, headers, body)
            write_cli_log("FORWARD", f"Forwarding request to: {target_url}", method=method)
            self._refresh()

    def log_response(self, method: str, path: str, status: int) -> None:
        """Log the upstream status for a forwarded request."""
        with self._lock:
            self._recent.insert(0, RequestInfo(method, path, status, datetime.now()))
            self._recent = self._recent[: self._max_recent]
            write_cli_log("RESPONSE", f"Response from upstream: {status}", path=path)
            self._refresh()

    def log_preflight(self, path: str) -> None:
        """Log an answered CORS preflight."""
        with self._lock:
            self._counts["preflight"] += 1
            self._recent.insert(0, RequestInfo("OPTIONS", path, 204, datetime.now()))
            self._recent = self._recent[: self._max_recent]
            self._refresh()

    def log_error(self, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            self._counts["errors"] += 1
            truncated = message[:80] + "..." if len(message) > 80 else message
            self._errors.insert(0, f"{status}: {truncated}")
            self._errors = self._errors[:3]
            write_cli_log("ERROR", f"Proxy error: {message[:200]}", status=status)
            self._refresh()

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
        layout["body"].update(self._build_requests_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("Ollama HTTPS Proxy", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Forwarded: {self._counts['forwarded']}", style="blue")
        stats.append("  |  ")
        stats.append(f"Preflight: {self._counts['preflight']}", style="magenta")
        stats.append("  |  ")
        stats.append(f"Errors: {self._counts['errors']}", style="red")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_requests_panel(self) -> Panel:
        """Build recent requests panel."""
        if self._recent:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Method", width=8)
            table.add_column("Path", ratio=3)
            table.add_column("Status", width=6)

            for req in self._recent:
                style = "red" if req.status >= 400 else "green"
                table.add_row(
                    req.timestamp.strftime("%H:%M:%S"),
                    req.method,
                    req.path,
                    Text(str(req.status), style=style),
                )
            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(
            content,
            title=f"[blue]Upstream: {self.config.upstream.base_url}[/blue]",
            border_style="blue",
        )

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
                f"HTTPS proxy running at https://localhost:{self.config.proxy.port}",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")
