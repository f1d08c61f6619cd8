"""Conversions between typed objects, generic key-value trees and text.

Text is parsed into a tree and the tree is validated into a model, which applies the
defaults and field rules declared on the model. The reverse direction dumps the model by
wire key and validates the tree again before it is rendered. Pydantic validation errors
are reported as ``SchemaViolation`` naming the wire path of the first failing field.
"""

import json
from pathlib import Path
from typing import Any, Literal, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from kubeconn.core.exceptions import ParseError, SchemaViolation
from kubeconn.core.models import ConnectionParameters, KubeConfig
from kubeconn.utils.files import read_text_file
from kubeconn.utils.logging import get_logger

logger = get_logger(__name__)

OutputFormat = Literal["yaml", "json"]

ModelT = TypeVar("ModelT", bound=BaseModel)

# Pydantic error types reported under a different rule name; any "*_type" error is "type"
RULES_BY_ERROR_TYPE = {
    "extra_forbidden": "unknown_field",
    "missing": "required",
    "string_too_short": "min_length",
    "string_pattern_mismatch": "pattern",
}


def _wire_path(loc: tuple[int | str, ...]) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = f"{path}.{part}" if path else str(part)
    return path


def schema_violation(model: type[BaseModel], error: ValidationError) -> SchemaViolation:
    """Describe the first error of a pydantic validation failure as a ``SchemaViolation``."""
    detail = error.errors(include_url=False)[0]
    error_type = detail["type"]
    context = detail.get("ctx") or {}

    loc = tuple(detail["loc"])
    if "field" in context:
        loc += (context["field"],)

    rule = RULES_BY_ERROR_TYPE.get(error_type)
    if rule is None:
        rule = "type" if error_type.endswith("_type") else error_type

    # Pattern messages would repeat the whole regular expression
    message = None if rule == "pattern" else detail["msg"]
    return SchemaViolation(_wire_path(loc) or model.__name__, rule, message)


def _validated(model: type[ModelT], tree: Any) -> ModelT:
    try:
        return model.model_validate(tree)
    except ValidationError as e:
        raise schema_violation(model, e) from e


def connection_from_tree(tree: Any) -> ConnectionParameters:
    """Build validated connection parameters from a generic tree.

    Raises:
        SchemaViolation: If the tree breaks a connection field rule
    """
    return _validated(ConnectionParameters, tree)


def connection_to_tree(connection: ConnectionParameters) -> dict[str, Any]:
    """Dump connection parameters to a validated tree keyed by wire name.

    Raises:
        SchemaViolation: If the connection breaks a field rule
    """
    tree = connection.model_dump(by_alias=True)
    _validated(ConnectionParameters, tree)
    return tree


def validate_connection(connection: ConnectionParameters) -> None:
    """Check connection parameters against the connection rules.

    Useful for objects built with ``model_construct``, which skips validation. The
    object is not modified.

    Raises:
        SchemaViolation: On the first violated rule
    """
    _validated(ConnectionParameters, connection.model_dump(by_alias=True))


def kubeconfig_from_tree(tree: Any) -> KubeConfig:
    """Build a validated kubeconfig from a generic tree.

    Raises:
        SchemaViolation: If the tree breaks a kubeconfig field rule
    """
    return _validated(KubeConfig, tree)


def kubeconfig_to_tree(kubeconfig: KubeConfig) -> dict[str, Any]:
    """Dump a kubeconfig to a validated tree using the standard kubeconfig keys.

    Unset optional values are left out of the tree.

    Raises:
        SchemaViolation: If the kubeconfig breaks a field rule
    """
    tree = kubeconfig.model_dump(by_alias=True, exclude_none=True)
    _validated(KubeConfig, tree)
    return tree


def parse_tree(text: str) -> dict[str, Any]:
    """Parse YAML or JSON text into a generic tree.

    Raises:
        ParseError: If the text is malformed or is not a mapping
    """
    try:
        tree = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ParseError(f"Failed to parse document: {e}") from e

    if not isinstance(tree, dict):
        raise ParseError(f"Expected a mapping at document root, got {type(tree).__name__}")
    return tree


def render_tree(tree: dict[str, Any], output: OutputFormat = "yaml") -> str:
    """Render a generic tree as YAML or JSON text."""
    if output == "json":
        return json.dumps(tree, indent=2) + "\n"
    if output == "yaml":
        return yaml.safe_dump(tree, default_flow_style=False, sort_keys=False)
    raise ValueError(f"Unsupported output format: {output}")


def parse_connection(text: str) -> ConnectionParameters:
    """Parse connection parameters from YAML or JSON text."""
    return connection_from_tree(parse_tree(text))


def render_connection(connection: ConnectionParameters, output: OutputFormat = "yaml") -> str:
    """Render connection parameters as YAML or JSON text."""
    return render_tree(connection_to_tree(connection), output)


def parse_kubeconfig(text: str) -> KubeConfig:
    """Parse a kubeconfig document from YAML or JSON text."""
    kubeconfig = kubeconfig_from_tree(parse_tree(text))
    logger.debug(
        "kubeconfig_parsed",
        clusters=len(kubeconfig.clusters),
        contexts=len(kubeconfig.contexts),
        users=len(kubeconfig.users),
        current_context=kubeconfig.current_context,
    )
    return kubeconfig


def render_kubeconfig(kubeconfig: KubeConfig, output: OutputFormat = "yaml") -> str:
    """Render a kubeconfig as YAML or JSON text."""
    return render_tree(kubeconfig_to_tree(kubeconfig), output)


def load_kubeconfig(path: str | Path) -> KubeConfig:
    """Read and parse a kubeconfig file.

    Raises:
        FileReadError: If the file cannot be read
        ParseError: If the content is not a document
        SchemaViolation: If the document breaks a field rule
    """
    return parse_kubeconfig(read_text_file(str(Path(path).expanduser())))


def load_connection(path: str | Path) -> ConnectionParameters:
    """Read and parse a connection parameters file."""
    return parse_connection(read_text_file(str(Path(path).expanduser())))
