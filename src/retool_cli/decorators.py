"""Command decorators.

This module provides decorators shared by the click commands: turning
RetoolCLIError into an exit code, and loading the credential record.
"""

from functools import wraps
from typing import Callable

import click

from .credentials.store import CredentialStore
from .errors import NotLoggedInError, RetoolCLIError, UserCancelledError
from .formatters import print_error


def handle_cli_errors(func: Callable):
    """Decorator that maps RetoolCLIError to a message and exit code.

    A declined confirmation prints its message and exits 0; every other
    RetoolCLIError prints "Error: ..." to stderr and exits with its code.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except UserCancelledError as e:
            click.echo(e.message)
            raise SystemExit(e.exit_code)
        except RetoolCLIError as e:
            print_error(e.message)
            raise SystemExit(e.exit_code)

    return wrapper


def requires_credentials(func: Callable):
    """Decorator that loads the credential record and passes it as ``credentials``.

    Raises:
        NotLoggedInError: If no record exists
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        ctx = click.get_current_context()
        store: CredentialStore = ctx.obj["store"]

        record = store.load()
        if record is None:
            raise NotLoggedInError()

        return func(*args, credentials=record, **kwargs)

    return wrapper
