"""Syntax checks for base credentials.

Pure functions: no I/O, no mutation.
"""

import re

from ..errors import CredentialValidationError
from .models import CredentialRecord

# UUID version 4, lowercase canonical form
UUID4_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")

# Three non-empty dot-separated URL-safe segments (JWT shape, not decoded)
ACCESS_TOKEN_RE = re.compile(r"^[\w-]+\.[\w-]+\.[\w-]+$", re.ASCII)

# DNS hostname: alphanumeric/hyphen labels, no hyphen at either end of a label
HOSTNAME_RE = re.compile(
    r"^(([a-zA-Z0-9]|[a-zA-Z0-9][a-zA-Z0-9\-]*[a-zA-Z0-9])\.)*"
    r"([A-Za-z0-9]|[A-Za-z0-9][A-Za-z0-9\-]*[A-Za-z0-9])$"
)

# Checked in this order; the first failure wins
CHECKS = (
    ("sessionToken", "session_token", UUID4_RE, "XSRF token is invalid."),
    ("accessToken", "access_token", ACCESS_TOKEN_RE, "Access token is invalid."),
    ("domain", "domain", HOSTNAME_RE, "Domain is invalid."),
)


def validate_credentials(record: CredentialRecord) -> None:
    """Validate the base credential fields of ``record``.

    Args:
        record: Credential record to check

    Raises:
        CredentialValidationError: Naming the first malformed field, checked
            in the order sessionToken, accessToken, domain
    """
    for field_name, attr, pattern, message in CHECKS:
        value = getattr(record, attr)
        if not isinstance(value, str) or not pattern.fullmatch(value):
            raise CredentialValidationError(message, field=field_name)


def is_valid(record: CredentialRecord) -> bool:
    """Return True if ``record`` passes validate_credentials."""
    try:
        validate_credentials(record)
    except CredentialValidationError:
        return False
    return True
