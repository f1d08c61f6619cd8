"""Custom exceptions for kubeconn."""


class KubeconnError(Exception):
    """Base exception for all kubeconn errors."""


class ConfigurationError(KubeconnError):
    """Configuration-related errors."""


class ParseError(KubeconnError):
    """Input text could not be parsed into a document."""


class SchemaViolation(KubeconnError):
    """A field failed one of its declared rules.

    Attributes:
        field: Dotted path of the offending field (wire names)
        rule: Name of the violated rule (required, type, pattern, ...)
    """

    def __init__(self, field: str, rule: str, message: str | None = None):
        """Initialize schema violation.

        Args:
            field: Dotted path of the offending field
            rule: Name of the violated rule
            message: Optional human readable detail
        """
        detail = f": {message}" if message else ""
        super().__init__(f"Invalid value for '{field}' ({rule}){detail}")
        self.field = field
        self.rule = rule


class MissingCurrentContextError(KubeconnError):
    """Kubeconfig has no current context set."""


class ResolutionError(KubeconnError):
    """A named kubeconfig entry could not be found.

    Attributes:
        name: The entry name that was looked up
    """

    kind = "entry"

    def __init__(self, name: str):
        super().__init__(f"Current {self.kind} '{name}' not found in kubeconfig")
        self.name = name


class ContextNotFoundError(ResolutionError):
    """Current context not found in kubeconfig."""

    kind = "context"


class ClusterNotFoundError(ResolutionError):
    """Cluster referenced by the current context not found."""

    kind = "cluster"


class UserNotFoundError(ResolutionError):
    """User referenced by the current context not found."""

    kind = "user"


class EmptyHostError(KubeconnError):
    """No cluster host found in connection."""


class FileReadError(KubeconnError):
    """A credential file could not be read.

    The underlying I/O error is chained as ``__cause__``.
    """

    def __init__(self, path: str, cause: Exception):
        super().__init__(f"Failed to read file {path}: {cause}")
        self.path = path
        self.cause = cause


class KubernetesError(KubeconnError):
    """Kubernetes client construction failed."""
