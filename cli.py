"""CLI entry point for ollama-https-proxy."""

import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from rich.console import Console

from app import create_app
from core.config import CONFIG_FILE, apply_overrides, check_tls_files, load_config
from core.exceptions import ConfigurationError
from ui.dashboard import Dashboard
from ui.log_utils import write_cli_log

console = Console()

VALUE_FLAGS = {
    "-p": "port",
    "--port": "port",
    "-u": "url",
    "--url": "url",
    "-c": "cert",
    "--cert": "cert",
    "-k": "key",
    "--key": "key",
    "--config-file": "config_file",
}


@dataclass(frozen=True)
class CliOptions:
    """Parsed command-line options; None means "use the configured value"."""

    show_help: bool = False
    show_config: bool = False
    port: int | None = None
    url: str | None = None
    cert: Path | None = None
    key: Path | None = None
    config_file: Path | None = None


def parse_args(argv: list[str]) -> CliOptions:
    """Parse flags; a flag given without a value keeps its default."""
    values: dict[str, str] = {}
    show_help = False
    show_config = False

    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg in ("-h", "--help"):
            show_help = True
        elif arg == "--config":
            show_config = True
        elif arg in VALUE_FLAGS:
            if i + 1 < len(argv) and not argv[i + 1].startswith("-"):
                values[VALUE_FLAGS[arg]] = argv[i + 1]
                i += 1
        else:
            raise ConfigurationError(f"Unknown option: {arg}")
        i += 1

    port = None
    if "port" in values:
        try:
            port = int(values["port"])
        except ValueError:
            raise ConfigurationError(f"Invalid port number specified: {values['port']}") from None
        if not 1 <= port <= 65535:
            raise ConfigurationError(f"Invalid port number specified: {port}")

    return CliOptions(
        show_help=show_help,
        show_config=show_config,
        port=port,
        url=values.get("url"),
        cert=Path(values["cert"]) if "cert" in values else None,
        key=Path(values["key"]) if "key" in values else None,
        config_file=Path(values["config_file"]) if "config_file" in values else None,
    )


def main(argv: list[str] | None = None):
    """Main CLI entry point."""
    if argv is None:
        argv = sys.argv[1:]

    try:
        options = parse_args(argv)
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        sys.exit(1)

    if options.show_help:
        _print_help()
        return

    config_file = options.config_file or CONFIG_FILE
    if options.show_config:
        console.print(f"[bold]Config:[/bold] {config_file}")
        return

    try:
        config = apply_overrides(
            load_config(config_file),
            port=options.port,
            url=options.url,
            cert=options.cert,
            key=options.key,
        )
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        sys.exit(1)

    console.print(f"Using Ollama URL: {config.upstream.base_url}")
    console.print(f"Proxy will run on port: {config.proxy.port}")
    console.print(f"Certificate path: {config.tls.cert_path}")
    console.print(f"Key path: {config.tls.key_path}")

    try:
        check_tls_files(config.tls)
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        sys.exit(1)

    dashboard = Dashboard(config)

    import uvicorn

    app = create_app(config, dashboard)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.proxy.host,
        port=config.proxy.port,
        log_level="warning",
        timeout_keep_alive=config.proxy.keep_alive_timeout,
        ssl_certfile=str(config.tls.cert_path),
        ssl_keyfile=str(config.tls.key_path),
    )
    server = uvicorn.Server(uvicorn_config)

    dashboard.start()
    start_time = datetime.now()
    write_cli_log(
        "STARTUP",
        "Proxy started",
        port=config.proxy.port,
        upstream=config.upstream.base_url,
    )
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Proxy stopped", duration=str(duration))
        dashboard.stop()


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]Ollama HTTPS Proxy[/bold cyan]

Serves the Ollama API over HTTPS with permissive CORS headers.

[bold]Usage:[/bold]
    ollama-https-proxy <options>

[bold]Options:[/bold]
    -p, --port PORT        Port to run the proxy on (default: 3000)
    -u, --url URL          Ollama API URL (default: http://localhost:11434)
    -c, --cert PATH        Path to certificate file (default: ./cert.pem)
    -k, --key PATH         Path to key file (default: ./key.pem)
    --config-file PATH     Read settings from a JSON config file
    --config               Show config file location
    -h, --help             Show this help message

[bold]Examples:[/bold]
    ollama-https-proxy --port 8443
    ollama-https-proxy --url http://192.168.1.100:11434
    ollama-https-proxy --cert /path/to/cert.pem --key /path/to/key.pem
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
