"""Pytest configuration and shared fixtures."""

import base64
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import yaml

from kubeconn.core.models import ConnectionParameters

FIXTURES_DIR = Path(__file__).parent / "fixtures"
CA_PATH = str(FIXTURES_DIR / "ca.crt")
CERT_PATH = str(FIXTURES_DIR / "client.crt")
KEY_PATH = str(FIXTURES_DIR / "client.key")
TOKEN_PATH = str(FIXTURES_DIR / "tokenfile")


def b64(text: str) -> str:
    """Base64 encode text the way kubeconfig *-data fields store it."""
    return base64.b64encode(text.encode()).decode()


@pytest.fixture
def ca_path() -> str:
    """Path to the CA certificate fixture."""
    return CA_PATH


@pytest.fixture
def cert_path() -> str:
    """Path to the client certificate fixture."""
    return CERT_PATH


@pytest.fixture
def key_path() -> str:
    """Path to the client key fixture."""
    return KEY_PATH


@pytest.fixture
def token_path() -> str:
    """Path to the bearer token fixture."""
    return TOKEN_PATH


@pytest.fixture
def ca_pem() -> str:
    """CA certificate PEM text."""
    return Path(CA_PATH).read_text()


@pytest.fixture
def cert_pem() -> str:
    """Client certificate PEM text."""
    return Path(CERT_PATH).read_text()


@pytest.fixture
def key_pem() -> str:
    """Client private key PEM text."""
    return Path(KEY_PATH).read_text()


@pytest.fixture
def token_text() -> str:
    """Bearer token file content (including trailing newline)."""
    return Path(TOKEN_PATH).read_text()


@pytest.fixture
def kubeconfig_nodata_tree() -> dict[str, Any]:
    """Kubeconfig tree referencing credential files by path."""
    return {
        "apiVersion": "v1",
        "kind": "Config",
        "clusters": [
            {
                "name": "default",
                "cluster": {
                    "server": "https://api.test-cluster.example.com:6443",
                    "certificate-authority": CA_PATH,
                },
            }
        ],
        "contexts": [
            {
                "name": "default",
                "context": {"cluster": "default", "user": "default", "namespace": "default"},
            }
        ],
        "users": [
            {
                "name": "default",
                "user": {
                    "username": "admin",
                    "password": "s3cret",
                    "token": "abc.def.ghi",
                    "client-certificate": CERT_PATH,
                    "client-key": KEY_PATH,
                },
            }
        ],
        "current-context": "default",
        "preferences": {},
    }


@pytest.fixture
def kubeconfig_data_tree(ca_pem: str, cert_pem: str, key_pem: str) -> dict[str, Any]:
    """Kubeconfig tree embedding base64 credential data."""
    return {
        "apiVersion": "v1",
        "kind": "Config",
        "clusters": [
            {
                "name": "default",
                "cluster": {
                    "server": "https://api.test-cluster.example.com:6443",
                    "certificate-authority-data": b64(ca_pem),
                },
            }
        ],
        "contexts": [
            {
                "name": "default",
                "context": {"cluster": "default", "user": "default", "namespace": "default"},
            }
        ],
        "users": [
            {
                "name": "default",
                "user": {
                    "username": "admin",
                    "password": "s3cret",
                    "token": "abc.def.ghi",
                    "client-certificate-data": b64(cert_pem),
                    "client-key-data": b64(key_pem),
                },
            }
        ],
        "current-context": "default",
        "preferences": {},
    }


@pytest.fixture
def write_yaml(tmp_path: Path) -> Callable[[str, Any], Path]:
    """Write a tree as YAML into the test's temporary directory."""

    def _write(name: str, tree: Any) -> Path:
        path = tmp_path / name
        path.write_text(yaml.safe_dump(tree, sort_keys=False))
        return path

    return _write


@pytest.fixture
def sample_connection() -> ConnectionParameters:
    """Connection parameters using path-form credentials."""
    return ConnectionParameters(
        host="api.test-cluster.example.com:6443",
        username="admin",
        password="s3cret",
        bearer_token="abc.def.ghi",
        ca_file=CA_PATH,
        cert_file=CERT_PATH,
        key_file=KEY_PATH,
        bearer_token_file="",
    )


@pytest.fixture
def make_connection() -> Callable[..., ConnectionParameters]:
    """Build connection parameters without the in-cluster CA and token file defaults."""

    def _make(**fields: Any) -> ConnectionParameters:
        return ConnectionParameters(**{"ca_file": "", "bearer_token_file": "", **fields})

    return _make


# ==============================================================================
# Pytest Markers
# ==============================================================================


def pytest_configure(config: Any) -> None:
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
