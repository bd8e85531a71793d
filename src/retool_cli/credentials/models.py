"""Credential record data model."""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any

from ..errors import CredentialsIOError

BASE_FIELDS = ("domain", "session_token", "access_token")

# Attribute name -> key used in the JSON credential file
JSON_KEYS = {
    "domain": "domain",
    "session_token": "sessionToken",
    "access_token": "accessToken",
    "grid_id": "gridId",
    "retool_db_uuid": "retoolDBUuid",
    "has_connection_string": "hasConnectionString",
    "first_name": "firstName",
    "last_name": "lastName",
    "email": "email",
}

# Older credential files stored the session token under its cookie name
LEGACY_KEYS = {"xsrf": "session_token"}


@dataclass(frozen=True)
class CredentialRecord:
    """Credentials for one Retool account.

    The three base fields come from login. The derived fields are discovered
    the first time the user interacts with Retool DB; the profile fields are
    sometimes returned by login.
    """

    domain: str
    session_token: str
    access_token: str
    grid_id: str | None = None
    retool_db_uuid: str | None = None
    has_connection_string: bool | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None

    @property
    def origin(self) -> str:
        """Base URL of the Retool instance."""
        return f"https://{self.domain}"

    @property
    def has_db_credentials(self) -> bool:
        """Whether the Retool DB identifiers have been resolved."""
        return bool(self.grid_id and self.retool_db_uuid)

    def merge(self, **changes: Any) -> CredentialRecord:
        """Return a copy with ``changes`` applied and every other field kept."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the on-disk JSON shape, omitting unset optional fields."""
        data: dict[str, Any] = {}
        for attr, value in asdict(self).items():
            if value is None:
                continue
            data[JSON_KEYS[attr]] = value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CredentialRecord:
        """Build a record from the on-disk JSON shape.

        Raises:
            CredentialsIOError: If a base field is missing
        """
        by_key = {key: attr for attr, key in JSON_KEYS.items()}
        values: dict[str, Any] = {}
        for key, value in data.items():
            attr = by_key.get(key) or LEGACY_KEYS.get(key)
            if attr and attr not in values:
                values[attr] = value

        missing = [JSON_KEYS[attr] for attr in BASE_FIELDS if not values.get(attr)]
        if missing:
            raise CredentialsIOError(
                f"Credential record is missing {', '.join(missing)}. Run: retool login"
            )
        return cls(**values)
