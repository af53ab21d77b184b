"""
Utility for resolving secrets that may be given inline or as a file path.
"""
import logging
from pathlib import Path

from ..errors import ConfigError


logger = logging.getLogger(__name__)


def read_secret(value: str) -> str:
    """
    Resolve a secret from a literal value or a path to a file holding it.

    If ``value`` names an existing path, the file is read and surrounding
    whitespace is stripped. Anything else is taken to be the secret itself.

    Args:
        value: Literal secret or path to a secret file

    Returns:
        The resolved secret

    Raises:
        ConfigError: If the value is empty, the file is unreadable, or the
            resolved secret is empty or not printable ASCII
    """
    if not value:
        raise ConfigError("API key is empty")

    path = Path(value)
    try:
        path = path.expanduser()
        is_file_path = path.exists()
    except (OSError, RuntimeError):
        # Too long or otherwise not usable as a path, so it is the key itself
        is_file_path = False

    if not is_file_path:
        return _checked(value)

    logger.debug(f"Reading API key from {path}")
    try:
        secret = path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read API key file {path}: {e}") from e

    if not secret:
        raise ConfigError(f"API key file {path} is empty")
    return _checked(secret)


def _checked(secret: str) -> str:
    """The key travels in an HTTP header, so only printable ASCII is accepted."""
    if not (secret.isascii() and secret.isprintable()):
        raise ConfigError("API key must contain only printable ASCII characters")
    return secret
