"""Configuration models and loading."""

import json
import ssl
from pathlib import Path

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.exceptions import ConfigurationError
from core.target import build_target_url

CONFIG_DIR = Path.home() / ".config" / "ollama-https-proxy"
CONFIG_FILE = CONFIG_DIR / "config.json"

DEFAULT_PORT = 3000
DEFAULT_UPSTREAM_URL = "http://localhost:11434"
DEFAULT_CERT_PATH = Path("./cert.pem")
DEFAULT_KEY_PATH = Path("./key.pem")


class ProxySettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = "0.0.0.0"
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    debug: bool = False
    keep_alive_timeout: int = 5


class UpstreamSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_url: str = DEFAULT_UPSTREAM_URL
    timeout: float = 300.0

    @field_validator("base_url")
    @classmethod
    def _absolute_http_url(cls, value: str) -> str:
        try:
            url = httpx.URL(value)
            # Every request target is derived from this origin.
            build_target_url(value, "/")
        except httpx.InvalidURL as e:
            raise ValueError(f"invalid upstream URL {value!r}: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError(f"upstream URL must be an absolute http(s) URL: {value!r}")
        return value


class TlsSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    cert_path: Path = DEFAULT_CERT_PATH
    key_path: Path = DEFAULT_KEY_PATH


class CorsSettings(BaseModel):
    """CORS policy applied to every response."""

    model_config = ConfigDict(frozen=True)

    allow_origin: str = "*"
    allow_methods: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "OPTIONS")
    allow_headers: tuple[str, ...] = ("Content-Type", "Authorization")
    allow_credentials: bool = True
    max_age: int = 86400


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    proxy: ProxySettings = Field(default_factory=ProxySettings)
    upstream: UpstreamSettings = Field(default_factory=UpstreamSettings)
    tls: TlsSettings = Field(default_factory=TlsSettings)
    cors: CorsSettings = Field(default_factory=CorsSettings)


def load_config(path: Path = CONFIG_FILE) -> Config:
    """Load configuration from JSON file, falling back to defaults if absent."""
    if not path.exists():
        return Config()

    try:
        data = json.loads(path.read_text())
        return Config.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        raise ConfigurationError(f"Invalid config file {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e


def apply_overrides(
    config: Config,
    *,
    port: int | None = None,
    url: str | None = None,
    cert: Path | None = None,
    key: Path | None = None,
) -> Config:
    """Return a copy of config with command-line values applied."""
    data = config.model_dump()
    if port is not None:
        data["proxy"]["port"] = port
    if url is not None:
        data["upstream"]["base_url"] = url
    if cert is not None:
        data["tls"]["cert_path"] = cert
    if key is not None:
        data["tls"]["key_path"] = key
    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e


def check_tls_files(tls: TlsSettings) -> ssl.SSLContext:
    """Load the certificate chain once so a bad pair fails before binding.

    Any failure (missing file, unparsable PEM, key not matching the
    certificate) names both paths.
    """
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    try:
        context.load_cert_chain(tls.cert_path, tls.key_path)
    except (OSError, ssl.SSLError) as e:
        raise ConfigurationError(
            f"Failed to read SSL certificates: {e}\n"
            f"Make sure certificate files exist at:\n- {tls.cert_path}\n- {tls.key_path}"
        ) from e
    return context
