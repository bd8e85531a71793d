"""Error taxonomy for retool-cli.

Every error a command can surface derives from RetoolCLIError and carries the
process exit code it maps to. Commands catch RetoolCLIError at the click
boundary, print the message and exit with ``exit_code``.
"""

from dataclasses import dataclass

EXIT_OK = 0
EXIT_FAILURE = 1


@dataclass
class RetoolCLIError(Exception):
    """Base error class for retool-cli errors."""

    message: str
    exit_code: int = EXIT_FAILURE

    def __str__(self) -> str:
        return self.message


@dataclass
class ValidationError(RetoolCLIError):
    """Malformed user input (credential field, table or column name)."""


@dataclass
class CredentialValidationError(ValidationError):
    """A base credential field failed its syntax check."""

    field: str = ""


@dataclass
class ConflictError(RetoolCLIError):
    """The resource being created already exists."""


@dataclass
class NotFoundError(RetoolCLIError):
    """Zero resources matched a name that must match exactly one."""

    message: str = ""
    kind: str = "resource"
    name: str = ""
    count: int = 0

    def __post_init__(self) -> None:
        if not self.message:
            self.message = (
                f"Found {self.count} {self.kind}s named '{self.name}', expected exactly 1."
            )


@dataclass
class AmbiguousMatchError(NotFoundError):
    """More than one resource matched a name that must match exactly one."""


@dataclass
class RetoolDBNotFoundError(NotFoundError):
    """The account has no resource named ``retool_db``."""

    kind: str = "resource"
    name: str = "retool_db"
    domain: str = ""

    def __post_init__(self) -> None:
        if not self.message:
            self.message = "Retool DB not found."
            if self.domain:
                self.message += f" Create one at https://{self.domain}/resources"


@dataclass
class RemoteError(RetoolCLIError):
    """A Retool service returned a non-success response."""

    status_code: int | None = None


@dataclass
class UserCancelledError(RetoolCLIError):
    """The user declined a confirmation prompt. Not a failure."""

    message: str = "Cancelled."
    exit_code: int = EXIT_OK


@dataclass
class CredentialsIOError(RetoolCLIError):
    """The credential record could not be read or written."""


@dataclass
class NotLoggedInError(RetoolCLIError):
    """No credential record exists."""

    message: str = "No credentials found! To log in, run: retool login"
