"""Unit tests for core data models and the field rules declared on them."""

import pytest
from pydantic import ValidationError

from kubeconn.core.models import (
    ConnectionParameters,
    KubeConfig,
    KubeConfigCluster,
    KubeConfigContext,
    KubeConfigContextParams,
    KubeConfigUser,
    KubeConfigUserParams,
)
from kubeconn.validation.rules import (
    DEFAULT_BEARER_TOKEN_FILE,
    DEFAULT_CA_FILE,
    DEFAULT_HOST,
    EXAMPLE_CERTIFICATE,
    EXAMPLE_PRIVATE_KEY,
)


class TestConnectionParameters:
    """Tests for ConnectionParameters model."""

    def test_defaults(self) -> None:
        """Test the in-cluster defaults of an empty connection."""
        connection = ConnectionParameters()

        assert connection.host == DEFAULT_HOST
        assert connection.api_path == "/api"
        assert connection.ca_file == DEFAULT_CA_FILE
        assert connection.bearer_token_file == DEFAULT_BEARER_TOKEN_FILE
        assert connection.username == ""
        assert connection.insecure is False

    @pytest.mark.parametrize(("field", "default"), [("host", DEFAULT_HOST), ("api_path", "/api")])
    def test_empty_value_takes_default(self, field: str, default: str) -> None:
        """Test that host and path treat an empty string as unset."""
        connection = ConnectionParameters(**{field: ""})

        assert getattr(connection, field) == default

    def test_empty_file_paths_kept(self) -> None:
        """Test that explicitly empty file paths do not fall back to the defaults."""
        connection = ConnectionParameters(ca_file="", bearer_token_file="")

        assert connection.ca_file == ""
        assert connection.bearer_token_file == ""

    def test_accepts_wire_names(self) -> None:
        """Test construction from wire keys."""
        connection = ConnectionParameters.model_validate(
            {"host": "h", "path": "/custom", "cacertFile": "/ca", "bearerTokenFile": "/t"}
        )

        assert connection.api_path == "/custom"
        assert connection.ca_file == "/ca"
        assert connection.bearer_token_file == "/t"

    def test_dump_uses_wire_names(self) -> None:
        """Test that dumping by alias gives the wire keys."""
        dumped = ConnectionParameters(host="h", server_name="api").model_dump(by_alias=True)

        assert set(dumped) == {
            "host",
            "path",
            "username",
            "password",
            "serverName",
            "cert",
            "certFile",
            "key",
            "keyFile",
            "cacert",
            "cacertFile",
            "bearerToken",
            "bearerTokenFile",
            "insecure",
        }
        assert dumped["serverName"] == "api"

    def test_immutable(self) -> None:
        """Test that connection parameters cannot be changed after creation."""
        connection = ConnectionParameters(host="h")

        with pytest.raises(ValidationError):
            connection.host = "other"  # type: ignore[misc]

    def test_model_copy_for_variants(self) -> None:
        """Test deriving a modified copy."""
        connection = ConnectionParameters(host="h", bearer_token="t")
        variant = connection.model_copy(update={"bearer_token": ""})

        assert variant.bearer_token == ""
        assert connection.bearer_token == "t"


class TestConnectionRules:
    """Field rules are enforced whenever connection parameters are constructed."""

    def test_invalid_certificate_and_lone_username_rejected(self) -> None:
        """Test that validating a bad document raises instead of constructing."""
        with pytest.raises(ValidationError):
            ConnectionParameters.model_validate({"cacert": "not a pem", "username": "only"})

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("ca_data", "not a certificate"),
            ("cert_data", "not a certificate"),
            ("cert_data", EXAMPLE_PRIVATE_KEY),
            ("key_data", EXAMPLE_CERTIFICATE),
        ],
    )
    def test_pem_pattern(self, field: str, value: str) -> None:
        """Test that PEM fields need the matching envelope."""
        with pytest.raises(ValidationError) as exc_info:
            ConnectionParameters(**{field: value})

        assert exc_info.value.errors()[0]["type"] == "string_pattern_mismatch"

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("ca_data", EXAMPLE_CERTIFICATE),
            ("cert_data", EXAMPLE_CERTIFICATE),
            ("key_data", EXAMPLE_PRIVATE_KEY),
        ],
    )
    def test_pem_fields_accept_examples(self, field: str, value: str) -> None:
        """Test that the example PEM values pass."""
        assert getattr(ConnectionParameters(**{field: value}), field) == value

    def test_empty_pem_fields_allowed(self) -> None:
        """Test that an empty PEM field means no value."""
        connection = ConnectionParameters(ca_data="", cert_data="", key_data="")

        assert connection.ca_data == ""

    @pytest.mark.parametrize(
        ("values", "field"),
        [({"username": "admin"}, "username"), ({"password": "s3cret"}, "password")],
    )
    def test_basic_auth_needs_both_fields(self, values: dict, field: str) -> None:
        """Test the symmetric username/password dependency."""
        with pytest.raises(ValidationError) as exc_info:
            ConnectionParameters(**values)

        error = exc_info.value.errors()[0]
        assert error["type"] == "dependency"
        assert error["ctx"]["field"] == field

    def test_basic_auth_with_both_fields(self) -> None:
        """Test that a complete username/password pair passes."""
        connection = ConnectionParameters(username="admin", password="s3cret")

        assert connection.username == "admin"

    def test_pattern_checked_before_dependency(self) -> None:
        """Test that a field error is reported before the dependency error."""
        with pytest.raises(ValidationError) as exc_info:
            ConnectionParameters.model_validate({"cacert": "not a pem", "username": "only"})

        assert exc_info.value.errors()[0]["type"] == "string_pattern_mismatch"

    def test_insecure_must_be_bool(self) -> None:
        """Test that the insecure flag is not coerced from text."""
        with pytest.raises(ValidationError) as exc_info:
            ConnectionParameters.model_validate({"insecure": "yes"})

        assert exc_info.value.errors()[0]["type"] == "bool_type"

    def test_unknown_key_rejected(self) -> None:
        """Test that undeclared keys are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            ConnectionParameters.model_validate({"host": "h", "port": 6443})

        assert exc_info.value.errors()[0]["type"] == "extra_forbidden"

    def test_none_counts_as_absent(self) -> None:
        """Test that a null value takes the default."""
        connection = ConnectionParameters.model_validate({"host": None, "cacertFile": None})

        assert connection.host == DEFAULT_HOST
        assert connection.ca_file == DEFAULT_CA_FILE


class TestKubeConfigUserParams:
    """Tests for KubeConfigUserParams."""

    def test_empty_basic_auth_kept(self) -> None:
        """Test that empty username and password stay set."""
        params = KubeConfigUserParams.model_validate({"username": "", "password": ""})

        assert params.username == ""
        assert params.password == ""

    def test_empty_token_is_unset(self) -> None:
        """Test that an empty token counts as absent."""
        assert KubeConfigUserParams(token="").token is None


class TestKubeConfig:
    """Tests for KubeConfig model."""

    def test_defaults(self) -> None:
        """Test the empty document defaults."""
        kubeconfig = KubeConfig()

        assert kubeconfig.kind == "Config"
        assert kubeconfig.api_version == "v1"
        assert kubeconfig.clusters == []
        assert kubeconfig.current_context is None
        assert kubeconfig.preferences is None

    def test_lookup_by_name(self) -> None:
        """Test entry lookup helpers."""
        kubeconfig = KubeConfig(
            clusters=[KubeConfigCluster(name="a"), KubeConfigCluster(name="b")],
            contexts=[KubeConfigContext(name="ctx")],
            users=[KubeConfigUser(name="u")],
        )

        assert kubeconfig.get_cluster("b") is kubeconfig.clusters[1]
        assert kubeconfig.get_context("ctx") is kubeconfig.contexts[0]
        assert kubeconfig.get_user("u") is kubeconfig.users[0]
        assert kubeconfig.get_cluster("missing") is None

    def test_lookup_last_duplicate_wins(self) -> None:
        """Test that duplicate names resolve to the last entry."""
        kubeconfig = KubeConfig(
            contexts=[
                KubeConfigContext(name="dup", context=KubeConfigContextParams(cluster="first")),
                KubeConfigContext(name="dup", context=KubeConfigContextParams(cluster="last")),
            ]
        )

        context = kubeconfig.get_context("dup")
        assert context is not None
        assert context.context.cluster == "last"
