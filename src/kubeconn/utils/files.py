"""Read-only access to credential files."""

from pathlib import Path

from kubeconn.core.exceptions import FileReadError
from kubeconn.utils.logging import get_logger, log_error

logger = get_logger(__name__)


def read_text_file(path: str) -> str:
    """Read a credential file to completion.

    The content is returned exactly as stored: no newline translation, no trimming.

    Args:
        path: File path

    Returns:
        File content decoded as UTF-8

    Raises:
        FileReadError: If the file cannot be read or is not valid UTF-8
    """
    try:
        data = Path(path).read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        log_error(logger, e, operation="read_file", path=path)
        raise FileReadError(path, e) from e

    logger.debug("credential_file_read", path=path, size=len(data))
    return data
