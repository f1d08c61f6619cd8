"""Resolve the current context of a kubeconfig into connection parameters."""

import base64
import binascii
from typing import Any

from kubeconn.core.exceptions import (
    ClusterNotFoundError,
    ContextNotFoundError,
    EmptyHostError,
    MissingCurrentContextError,
    SchemaViolation,
    UserNotFoundError,
)
from kubeconn.core.models import ConnectionParameters, KubeConfig
from kubeconn.kubeconfig.serialization import connection_from_tree
from kubeconn.utils.files import read_text_file
from kubeconn.utils.logging import get_logger, log_operation

logger = get_logger(__name__)

SCHEMES = ("https://", "http://")


def strip_scheme(server: str) -> str:
    """Remove one leading ``https://`` or ``http://`` from a server URL.

    Nothing else about the URL is interpreted; ports and paths are kept as they are.
    """
    for scheme in SCHEMES:
        if server.startswith(scheme):
            return server[len(scheme) :]
    return server


def decode_base64(field: str, value: str) -> str:
    """Decode base64 kubeconfig data into text. Line breaks in the encoded value are ignored.

    Raises:
        SchemaViolation: If the value is not base64 encoded UTF-8 text
    """
    encoded = value.replace("\r", "").replace("\n", "")
    try:
        return base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, ValueError) as e:
        raise SchemaViolation(field, "base64", str(e)) from e


def _credential(
    data: str | None,
    path: str | None,
    data_field: str,
    inline_files: bool,
) -> tuple[str, str]:
    """Pick inline data or a path for one credential.

    Returns:
        Tuple of (data, file); at most one is non-empty
    """
    if data is not None:
        return decode_base64(data_field, data), ""
    if path is not None:
        if inline_files:
            return read_text_file(path), ""
        return "", path
    return "", ""


def resolve(kubeconfig: KubeConfig, inline_files: bool = False) -> ConnectionParameters:
    """Flatten the current context of a kubeconfig into connection parameters.

    Data fields take precedence over their path counterparts. With ``inline_files`` the
    CA, client certificate and client key files are read into the data fields instead of
    being passed on as paths.

    Args:
        kubeconfig: Parsed kubeconfig
        inline_files: Read referenced credential files into the connection

    Returns:
        Validated connection parameters

    Raises:
        MissingCurrentContextError: If no current context is set
        ContextNotFoundError: If the current context does not exist
        ClusterNotFoundError: If the context's cluster does not exist
        UserNotFoundError: If the context's user does not exist
        EmptyHostError: If the cluster has no server or the server is only a scheme
        FileReadError: If a credential file cannot be read
        SchemaViolation: If the resulting connection breaks a field rule
    """
    if kubeconfig.current_context is None:
        raise MissingCurrentContextError("Unusable kubeconfig: no current context is set")

    context = kubeconfig.get_context(kubeconfig.current_context)
    if context is None:
        raise ContextNotFoundError(kubeconfig.current_context)

    cluster = kubeconfig.get_cluster(context.context.cluster)
    if cluster is None:
        raise ClusterNotFoundError(context.context.cluster)

    # A context without a user is a legal document but cannot be connected with
    user = kubeconfig.get_user(context.context.user)
    if user is None:
        raise UserNotFoundError(context.context.user)

    cluster_params = cluster.cluster
    user_params = user.user

    host = strip_scheme(cluster_params.server)
    if not host:
        raise EmptyHostError("No cluster host found in connection")

    ca_data, ca_file = _credential(
        cluster_params.certificate_authority_data,
        cluster_params.certificate_authority,
        "certificate-authority-data",
        inline_files,
    )
    cert_data, cert_file = _credential(
        user_params.client_certificate_data,
        user_params.client_certificate,
        "client-certificate-data",
        inline_files,
    )
    key_data, key_file = _credential(
        user_params.client_key_data,
        user_params.client_key,
        "client-key-data",
        inline_files,
    )

    # Keyed by wire name so that violations name the document field
    tree: dict[str, Any] = {
        "host": host,
        "cacert": ca_data,
        "cacertFile": ca_file,
        "cert": cert_data,
        "certFile": cert_file,
        "key": key_data,
        "keyFile": key_file,
        "bearerTokenFile": "",
        "insecure": cluster_params.insecure_skip_tls_verify,
    }
    if user_params.username is not None:
        tree["username"] = user_params.username
    if user_params.password is not None:
        tree["password"] = user_params.password
    if user_params.token is not None:
        tree["bearerToken"] = user_params.token

    connection = connection_from_tree(tree)

    log_operation(
        logger,
        "resolve",
        context=context.name,
        cluster=cluster.name,
        user=user.name,
        host=connection.host,
        inline_files=inline_files,
    )
    return connection
