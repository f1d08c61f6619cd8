"""Core data models for kubeconn.

Field aliases are the wire keys used in YAML/JSON documents; attribute names are snake_case.
Every field declares its validation rules through ``kubeconn.validation.rules.wire_field``,
so constructing or validating a model applies defaults and checks in one step.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_core import PydanticCustomError

from kubeconn.validation.rules import (
    CERTIFICATE_PATTERN,
    DEFAULT_API_PATH,
    DEFAULT_BEARER_TOKEN_FILE,
    DEFAULT_CA_FILE,
    DEFAULT_HOST,
    DEPENDS_ON,
    EXAMPLE_CERTIFICATE,
    EXAMPLE_PRIVATE_KEY,
    PRIVATE_KEY_PATTERN,
    TREAT_EMPTY_AS_DEFAULT,
    field_rule,
    optional_pattern,
    wire_field,
)


class WireModel(BaseModel):
    """Base for documents read from and written to YAML/JSON.

    Unknown keys are rejected. A ``None`` value counts as an absent key, and so does an
    empty string for fields declared with ``treat_empty_as_default``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    @model_validator(mode="before")
    @classmethod
    def _drop_absent_values(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        empty_as_default = {
            key
            for name, field in cls.model_fields.items()
            if field_rule(field, TREAT_EMPTY_AS_DEFAULT, False)
            for key in (name, field.alias)
            if key
        }
        return {
            key: value
            for key, value in data.items()
            if value is not None and not (value == "" and key in empty_as_default)
        }

    @model_validator(mode="after")
    def _check_dependencies(self) -> "WireModel":
        fields = type(self).model_fields
        for name, field in fields.items():
            if not getattr(self, name):
                continue
            for dependency in field_rule(field, DEPENDS_ON, ()):
                if not getattr(self, dependency):
                    raise PydanticCustomError(
                        "dependency",
                        "'{field}' requires '{dependency}' to be set",
                        {
                            "field": field.alias or name,
                            "dependency": fields[dependency].alias or dependency,
                        },
                    )
        return self


class ConnectionParameters(WireModel):
    """Flat description of how to reach a Kubernetes API server."""

    model_config = ConfigDict(frozen=True)

    host: str = wire_field(
        DEFAULT_HOST,
        display_name="Host",
        description="Host name and port of the Kubernetes server",
        treat_empty_as_default=True,
        min_length=1,
    )
    api_path: str = wire_field(
        DEFAULT_API_PATH,
        display_name="Path",
        description="Path to the API server.",
        treat_empty_as_default=True,
        alias="path",
    )

    username: str = wire_field(
        "",
        display_name="Username",
        description="Username for basic authentication.",
        depends_on=("password",),
    )
    password: str = wire_field(
        "",
        display_name="Password",
        description="Password for basic authentication.",
        depends_on=("username",),
    )

    server_name: str = wire_field(
        "",
        display_name="TLS server name",
        description="Expected TLS server name to verify in the certificate.",
        alias="serverName",
    )

    ca_data: str = wire_field(
        "",
        display_name="CA certificate",
        description="CA certificate in PEM format to verify Kubernetes server certificate "
        "against.",
        alias="cacert",
        pattern=optional_pattern(CERTIFICATE_PATTERN),
        examples=[EXAMPLE_CERTIFICATE],
    )
    ca_file: str = wire_field(
        DEFAULT_CA_FILE,
        display_name="CA certificate file",
        description="File holding the CA certificate in PEM format to verify Kubernetes "
        "server certificate against.",
        alias="cacertFile",
    )
    cert_data: str = wire_field(
        "",
        display_name="Client certificate",
        description="Client certificate in PEM format to authenticate against Kubernetes "
        "with.",
        alias="cert",
        pattern=optional_pattern(CERTIFICATE_PATTERN),
        examples=[EXAMPLE_CERTIFICATE],
    )
    cert_file: str = wire_field(
        "",
        display_name="Client certificate file",
        description="File holding the client certificate in PEM format to authenticate "
        "against Kubernetes with.",
        alias="certFile",
    )
    key_data: str = wire_field(
        "",
        display_name="Client key",
        description="Client private key in PEM format to authenticate against Kubernetes "
        "with.",
        alias="key",
        pattern=optional_pattern(PRIVATE_KEY_PATTERN),
        examples=[EXAMPLE_PRIVATE_KEY],
    )
    key_file: str = wire_field(
        "",
        display_name="Client key file",
        description="File holding the client private key in PEM format to authenticate "
        "against Kubernetes with.",
        alias="keyFile",
    )

    bearer_token: str = wire_field(
        "",
        display_name="Bearer token",
        description="Bearer token to authenticate against the Kubernetes API with.",
        alias="bearerToken",
    )
    bearer_token_file: str = wire_field(
        DEFAULT_BEARER_TOKEN_FILE,
        display_name="Bearer token file",
        description="File holding the bearer token to authenticate against the Kubernetes "
        "API with.",
        alias="bearerTokenFile",
    )
    insecure: bool = wire_field(
        False,
        display_name="Insecure connection",
        description="Skip TLS verification",
        strict=True,
    )


def _kube_string(display_name: str, description: str, **kwargs: Any) -> Any:
    """Optional kubeconfig string where an empty value counts as absent."""
    return wire_field(
        None,
        display_name=display_name,
        description=description,
        treat_empty_as_default=True,
        **kwargs,
    )


def _entry_name(description: str) -> Any:
    return wire_field(
        "", display_name="Name", description=description, treat_empty_as_default=True
    )


def _extensions() -> Any:
    return wire_field(
        None,
        display_name="Extensions",
        description="Vendor specific section (e.g. minikube metadata), carried through "
        "verbatim",
    )


class KubeConfigClusterParams(WireModel):
    """Connection details of a kubeconfig cluster entry."""

    # Presence of a server is checked by the resolver, not here
    server: str = wire_field(
        "",
        display_name="Server",
        description="host name and port of the kubernetes server",
        treat_empty_as_default=True,
    )
    certificate_authority: str | None = _kube_string(
        "CertificateAuthority", "cluster CA certificate path", alias="certificate-authority"
    )
    certificate_authority_data: str | None = _kube_string(
        "CertificateAuthorityData",
        "cluster CA certificate base64 encoded",
        alias="certificate-authority-data",
    )
    insecure_skip_tls_verify: bool = wire_field(
        False,
        display_name="InsecureSkipTLSVerify",
        description="toggles TLS verification",
        alias="insecure-skip-tls-verify",
        strict=True,
    )
    extensions: Any = _extensions()


class KubeConfigCluster(WireModel):
    """Named cluster entry."""

    name: str = _entry_name("cluster name")
    cluster: KubeConfigClusterParams = Field(
        default_factory=KubeConfigClusterParams, title="Cluster"
    )


class KubeConfigContextParams(WireModel):
    """Cluster/user/namespace triple of a context entry."""

    cluster: str = wire_field(
        "",
        display_name="Cluster",
        description="cluster name of the context",
        treat_empty_as_default=True,
    )
    user: str = wire_field(
        "",
        display_name="User",
        description="user name of the context",
        treat_empty_as_default=True,
    )
    namespace: str = wire_field(
        "",
        display_name="Namespace",
        description="default namespace of the context",
        treat_empty_as_default=True,
    )
    extensions: Any = _extensions()


class KubeConfigContext(WireModel):
    """Named context entry."""

    name: str = _entry_name("context name")
    context: KubeConfigContextParams = Field(
        default_factory=KubeConfigContextParams, title="Context"
    )


class KubeConfigUserParams(WireModel):
    """Credentials of a user entry. ``*_data`` fields hold base64 text.

    Username and password keep an explicit empty string so that a built kubeconfig
    always carries both keys.
    """

    username: str | None = wire_field(
        None, display_name="Username", description="user username for basic authentication"
    )
    password: str | None = wire_field(
        None, display_name="Password", description="user password for basic authentication"
    )
    token: str | None = _kube_string("Token", "user bearer token")
    client_certificate: str | None = _kube_string(
        "ClientCertificate", "client certificate path", alias="client-certificate"
    )
    client_certificate_data: str | None = _kube_string(
        "ClientCertificateData",
        "client certificate data base64 encoded",
        alias="client-certificate-data",
    )
    client_key: str | None = _kube_string(
        "ClientKey", "client private key path", alias="client-key"
    )
    client_key_data: str | None = _kube_string(
        "ClientKeyData", "client private key data base64 encoded", alias="client-key-data"
    )


class KubeConfigUser(WireModel):
    """Named user entry."""

    name: str = _entry_name("user name")
    user: KubeConfigUserParams = Field(default_factory=KubeConfigUserParams, title="User")


class KubeConfig(WireModel):
    """Multi-cluster kubeconfig document."""

    kind: str = wire_field(
        "Config",
        display_name="Kind",
        description="kubernetes Resource Kind",
        treat_empty_as_default=True,
        min_length=1,
    )
    api_version: str = wire_field(
        "v1",
        display_name="APIVersion",
        description="API Version",
        treat_empty_as_default=True,
        alias="apiVersion",
        min_length=1,
    )
    clusters: list[KubeConfigCluster] = Field(default_factory=list, title="Clusters")
    contexts: list[KubeConfigContext] = Field(default_factory=list, title="Contexts")
    users: list[KubeConfigUser] = Field(default_factory=list, title="Users")
    current_context: str | None = _kube_string(
        "CurrentContext", "active context", alias="current-context"
    )
    preferences: Any = wire_field(
        None, display_name="Preferences", description="Kubeconfig preferences"
    )

    def get_context(self, name: str) -> KubeConfigContext | None:
        """Get a context entry by name (last match wins on duplicates)."""
        return _find_named(self.contexts, name)

    def get_cluster(self, name: str) -> KubeConfigCluster | None:
        """Get a cluster entry by name (last match wins on duplicates)."""
        return _find_named(self.clusters, name)

    def get_user(self, name: str) -> KubeConfigUser | None:
        """Get a user entry by name (last match wins on duplicates)."""
        return _find_named(self.users, name)


def _find_named(entries: list[Any], name: str) -> Any:
    found = None
    for entry in entries:
        if entry.name == name:
            found = entry
    return found
