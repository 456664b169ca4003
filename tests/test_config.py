import json
import ssl
from pathlib import Path

import pytest
from pydantic import ValidationError

from core.config import (
    Config,
    TlsSettings,
    UpstreamSettings,
    apply_overrides,
    check_tls_files,
    load_config,
)
from core.exceptions import ConfigurationError

DATA_DIR = Path(__file__).parent / "data"


def test_defaults():
    config = Config()

    assert config.proxy.port == 3000
    assert config.upstream.base_url == "http://localhost:11434"
    assert config.tls.cert_path == Path("./cert.pem")
    assert config.tls.key_path == Path("./key.pem")
    assert config.cors.max_age == 86400


def test_config_is_immutable():
    config = Config()

    with pytest.raises(ValidationError):
        config.proxy.port = 8443


def test_missing_config_file_gives_defaults(tmp_path):
    path = tmp_path / "config.json"

    assert load_config(path) == Config()
    assert not path.exists()


def test_config_file_values(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "proxy": {"port": 8443},
                "upstream": {"base_url": "http://gpu-box:11434", "timeout": 30},
            }
        )
    )

    config = load_config(path)

    assert config.proxy.port == 8443
    assert config.upstream.base_url == "http://gpu-box:11434"
    assert config.upstream.timeout == 30.0
    assert config.tls == TlsSettings()


@pytest.mark.parametrize("content", ["{not json", '{"proxy": {"port": "abc"}}', '{"proxy": {"port": 70000}}'])
def test_invalid_config_file(tmp_path, content):
    path = tmp_path / "config.json"
    path.write_text(content)

    with pytest.raises(ConfigurationError):
        load_config(path)


@pytest.mark.parametrize(
    "url",
    ["localhost:11434", "ftp://host", "http://", "http://[::1", "http://localhost:notaport"],
)
def test_upstream_url_must_be_absolute_http(url):
    with pytest.raises(ValidationError):
        UpstreamSettings(base_url=url)


def test_apply_overrides():
    config = apply_overrides(
        Config(),
        port=8443,
        url="http://192.168.1.100:11434",
        cert=Path("/etc/proxy/cert.pem"),
    )

    assert config.proxy.port == 8443
    assert config.upstream.base_url == "http://192.168.1.100:11434"
    assert config.tls.cert_path == Path("/etc/proxy/cert.pem")
    assert config.tls.key_path == Path("./key.pem")


def test_apply_overrides_keeps_unset_values():
    base = Config(upstream=UpstreamSettings(base_url="http://gpu-box:11434"))

    assert apply_overrides(base) == base


def test_apply_overrides_rejects_bad_url():
    with pytest.raises(ConfigurationError):
        apply_overrides(Config(), url="not a url")


def test_check_tls_files(tls_files):
    cert, key = tls_files

    context = check_tls_files(TlsSettings(cert_path=cert, key_path=key))

    assert isinstance(context, ssl.SSLContext)


def test_missing_tls_file_names_both_paths(tmp_path, tls_files):
    _, key = tls_files
    tls = TlsSettings(cert_path=tmp_path / "missing.pem", key_path=key)

    with pytest.raises(ConfigurationError) as exc_info:
        check_tls_files(tls)

    message = str(exc_info.value)
    assert str(tmp_path / "missing.pem") in message
    assert str(key) in message


def test_non_pem_material_rejected(tmp_path, tls_files):
    _, key = tls_files
    (tmp_path / "cert.pem").write_text("not a certificate")

    with pytest.raises(ConfigurationError):
        check_tls_files(TlsSettings(cert_path=tmp_path / "cert.pem", key_path=key))


def test_mismatched_key_names_both_paths():
    cert = DATA_DIR / "cert.pem"
    key = DATA_DIR / "other-key.pem"

    with pytest.raises(ConfigurationError) as exc_info:
        check_tls_files(TlsSettings(cert_path=cert, key_path=key))

    message = str(exc_info.value)
    assert str(cert) in message
    assert str(key) in message


def test_malformed_upstream_host_is_configuration_error():
    with pytest.raises(ConfigurationError, match="invalid upstream URL"):
        apply_overrides(Config(), url="http://[::1")
