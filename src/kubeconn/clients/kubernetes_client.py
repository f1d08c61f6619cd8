"""Kubernetes client construction from connection parameters."""

from typing import Any

from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException

from kubeconn.core.config import ClientConfig
from kubeconn.core.exceptions import EmptyHostError, KubernetesError
from kubeconn.core.models import ConnectionParameters
from kubeconn.kubeconfig.builder import DEFAULT_ENTRY_NAME, build
from kubeconn.kubeconfig.serialization import kubeconfig_to_tree
from kubeconn.utils.logging import get_logger
from kubeconn.validation.rules import DEFAULT_API_PATH

logger = get_logger(__name__)

DEFAULT_USER_AGENT = "kubeconn"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 10.0


def _loader_tree(connection: ConnectionParameters) -> dict[str, Any]:
    """Kubeconfig tree for the official loader.

    Empty basic-auth fields are dropped: the loader treats their mere presence as
    credentials.
    """
    tree = kubeconfig_to_tree(build(connection))
    for entry in tree["users"]:
        user = entry["user"]
        for key in ("username", "password"):
            if not user.get(key):
                user.pop(key, None)
    return tree


def _with_api_prefix(server: str, api_path: str) -> str:
    """Append the part of the API path in front of ``/api`` to the server URL.

    The generated API classes request absolute paths such as ``/api/v1/namespaces``, so
    a path like ``/k8s/clusters/c-1/api`` only works as a prefix on the host.

    Raises:
        KubernetesError: If the API path does not end in ``/api``
    """
    path = api_path.rstrip("/")
    if not path.endswith(DEFAULT_API_PATH):
        raise KubernetesError(
            f"Unsupported API path {api_path!r}: expected a path ending in {DEFAULT_API_PATH}"
        )
    return server.rstrip("/") + path[: -len(DEFAULT_API_PATH)]


def build_client_configuration(connection: ConnectionParameters) -> client.Configuration:
    """Create a Kubernetes client configuration for a connection.

    No request is sent; inline certificate data is handed to the loader which stores it
    in temporary files as the official client requires.

    Args:
        connection: Validated connection parameters

    Returns:
        Configured ``kubernetes.client.Configuration``

    Raises:
        EmptyHostError: If the connection has no host
        FileReadError: If the bearer token file cannot be read
        KubernetesError: If the Kubernetes loader rejects the configuration or the API
            path cannot be used as a host prefix
    """
    if not connection.host:
        raise EmptyHostError("No cluster host found in connection")

    configuration = client.Configuration()
    try:
        config.load_kube_config_from_dict(
            config_dict=_loader_tree(connection),
            context=DEFAULT_ENTRY_NAME,
            client_configuration=configuration,
            persist_config=False,
        )
    except ConfigException as e:
        logger.error("k8s_client_configuration_failed", host=connection.host, error=str(e))
        raise KubernetesError(f"Failed to configure Kubernetes client: {e}") from e

    if connection.api_path != DEFAULT_API_PATH:
        configuration.host = _with_api_prefix(configuration.host, connection.api_path)

    if connection.server_name:
        configuration.tls_server_name = connection.server_name

    logger.debug(
        "k8s_client_configuration_built",
        host=configuration.host,
        verify_ssl=configuration.verify_ssl,
    )
    return configuration


class TimeoutApiClient(client.ApiClient):
    """``ApiClient`` that sends every request with a default timeout.

    A ``_request_timeout`` given on the individual call still takes precedence.
    """

    def __init__(self, configuration: client.Configuration, request_timeout: float):
        super().__init__(configuration=configuration)
        self.request_timeout = request_timeout

    def call_api(self, *args: Any, **kwargs: Any) -> Any:
        if kwargs.get("_request_timeout") is None:
            kwargs["_request_timeout"] = self.request_timeout
        return super().call_api(*args, **kwargs)


class KubernetesClient:
    """Kubernetes API client bound to one set of connection parameters."""

    def __init__(
        self,
        connection: ConnectionParameters,
        user_agent: str = DEFAULT_USER_AGENT,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ):
        """Initialize Kubernetes client.

        Args:
            connection: Validated connection parameters
            user_agent: User agent sent with every request
            request_timeout: Timeout in seconds applied to every API call
        """
        self.connection = connection
        self.request_timeout = request_timeout
        self.configuration = build_client_configuration(connection)

        self.api_client = TimeoutApiClient(self.configuration, request_timeout)
        self.api_client.user_agent = user_agent
        self.core_v1 = client.CoreV1Api(api_client=self.api_client)

        logger.debug(
            "k8s_client_initialized",
            host=connection.host,
            user_agent=user_agent,
            request_timeout=request_timeout,
        )

    @classmethod
    def from_config(
        cls, connection: ConnectionParameters, client_config: ClientConfig
    ) -> "KubernetesClient":
        """Create a client using the user agent and timeout of a ``ClientConfig``."""
        return cls(
            connection,
            user_agent=client_config.user_agent,
            request_timeout=client_config.request_timeout_seconds,
        )

    def close(self) -> None:
        """Release the underlying connection pool."""
        self.api_client.close()
