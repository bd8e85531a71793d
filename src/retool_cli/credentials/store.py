"""Credential record persistence.

A single JSON file holds at most one credential record. Writes replace the
whole file; callers that update a field read, merge and write back.
"""

import json
from pathlib import Path

from ..errors import CredentialsIOError
from ..shared.logging import get_logger
from ..shared.paths import get_credentials_path
from .models import CredentialRecord
from .validator import validate_credentials

logger = get_logger(__name__)


class CredentialStore:
    """Loads, persists and erases the credential record."""

    def __init__(self, path: Path | None = None):
        """Initialize store.

        Args:
            path: Credential file (default: ~/.retool-cli/credentials.json)
        """
        self.path = path or get_credentials_path()

    def exists(self) -> bool:
        """Check if a credential record exists on disk."""
        return self.path.exists()

    def load(self) -> CredentialRecord | None:
        """Load the credential record.

        Returns:
            The record, or None when logged out

        Raises:
            CredentialsIOError: If the file cannot be read or is not a record
        """
        if not self.path.exists():
            return None

        try:
            data = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise CredentialsIOError(f"Error reading credentials from {self.path}: {e}")

        if not isinstance(data, dict):
            raise CredentialsIOError(f"Credential file {self.path} is not a JSON object")
        return CredentialRecord.from_dict(data)

    def persist(self, record: CredentialRecord) -> None:
        """Write ``record`` to disk, replacing any existing one.

        Raises:
            CredentialValidationError: If a base field is malformed
            CredentialsIOError: If the write fails
        """
        validate_credentials(record)

        try:
            self.path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
            self.path.write_text(json.dumps(record.to_dict()))
            # Owner-only (600)
            self.path.chmod(0o600)
        except OSError as e:
            raise CredentialsIOError(f"Error saving credentials to disk: {e}")

        logger.debug("credentials_persisted", path=str(self.path))

    def erase(self) -> bool:
        """Delete the credential record.

        Returns:
            True if a record was deleted, False if none existed
        """
        if not self.path.exists():
            return False

        try:
            self.path.unlink()
        except OSError as e:
            raise CredentialsIOError(f"Error deleting credentials: {e}")

        logger.debug("credentials_erased", path=str(self.path))
        return True
