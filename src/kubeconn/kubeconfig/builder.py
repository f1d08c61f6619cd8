"""Build a single-context kubeconfig from connection parameters."""

import base64

from kubeconn.core.exceptions import EmptyHostError
from kubeconn.core.models import (
    ConnectionParameters,
    KubeConfig,
    KubeConfigCluster,
    KubeConfigClusterParams,
    KubeConfigContext,
    KubeConfigContextParams,
    KubeConfigUser,
    KubeConfigUserParams,
)
from kubeconn.utils.files import read_text_file
from kubeconn.utils.logging import get_logger, log_operation

logger = get_logger(__name__)

DEFAULT_ENTRY_NAME = "default"


def encode_base64(text: str) -> str:
    """Encode text as standard base64."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def _data_or_none(text: str) -> str | None:
    return encode_base64(text) if text else None


def _or_none(text: str) -> str | None:
    return text or None


def build(connection: ConnectionParameters) -> KubeConfig:
    """Synthesize a kubeconfig whose cluster, context and user are all named ``default``.

    The server is always written as ``https://<host>``, whatever scheme the host was
    originally resolved from. Username and password are always set, possibly empty. A
    bearer token file is read and embedded as the token when no inline token is given.

    Args:
        connection: Connection parameters

    Returns:
        KubeConfig with ``current-context: default``

    Raises:
        EmptyHostError: If the connection has no host
        FileReadError: If the bearer token file cannot be read
    """
    if not connection.host:
        raise EmptyHostError("No cluster host found in connection")

    cluster_params = KubeConfigClusterParams(
        server=f"https://{connection.host}",
        certificate_authority=_or_none(connection.ca_file),
        certificate_authority_data=_data_or_none(connection.ca_data),
        insecure_skip_tls_verify=connection.insecure,
    )

    token = _or_none(connection.bearer_token)
    if token is None and connection.bearer_token_file:
        token = read_text_file(connection.bearer_token_file)

    user_params = KubeConfigUserParams(
        username=connection.username,
        password=connection.password,
        token=token,
        client_certificate=_or_none(connection.cert_file),
        client_certificate_data=_data_or_none(connection.cert_data),
        client_key=_or_none(connection.key_file),
        client_key_data=_data_or_none(connection.key_data),
    )

    kubeconfig = KubeConfig(
        kind="Config",
        api_version="v1",
        clusters=[KubeConfigCluster(name=DEFAULT_ENTRY_NAME, cluster=cluster_params)],
        contexts=[
            KubeConfigContext(
                name=DEFAULT_ENTRY_NAME,
                context=KubeConfigContextParams(
                    cluster=DEFAULT_ENTRY_NAME,
                    user=DEFAULT_ENTRY_NAME,
                    namespace=DEFAULT_ENTRY_NAME,
                ),
            )
        ],
        users=[KubeConfigUser(name=DEFAULT_ENTRY_NAME, user=user_params)],
        current_context=DEFAULT_ENTRY_NAME,
        preferences={},
    )

    log_operation(
        logger,
        "build",
        host=connection.host,
        token_from_file=bool(token) and not connection.bearer_token,
    )
    return kubeconfig
