"""Credential lifecycle: record model, validation, persistence, resolution."""

from .models import CredentialRecord
from .resolver import RETOOL_DB_DISPLAY_NAME, resolve_db_credentials
from .store import CredentialStore
from .validator import is_valid, validate_credentials

__all__ = [
    "CredentialRecord",
    "CredentialStore",
    "RETOOL_DB_DISPLAY_NAME",
    "is_valid",
    "resolve_db_credentials",
    "validate_credentials",
]
