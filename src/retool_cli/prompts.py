"""Interactive prompts.

Uses questionary for input with validation. A cancelled prompt (Ctrl+C)
raises UserCancelledError.
"""

from __future__ import annotations

import questionary

from .credentials.models import CredentialRecord
from .errors import UserCancelledError
from .scaffold.plan import WHITESPACE_RE, split_column_args

XSRF_HELP = (
    "What is your XSRF token? (e.g., 26725f72-8129-47f7-835a-cba0e5dbcfe6)\n"
    "  Log into Retool, open cookies inspector.\n"
    "  In Chrome, hit ⌘+⌥+I (Mac) or Ctrl+Shift+I (Windows, Linux) to open dev tools.\n"
    "  Application tab > your-org.retool.com in Cookies menu > double click cookie value and copy it."
)


def _answer(value: str | None) -> str:
    if value is None:
        raise UserCancelledError()
    return value


def ask_for_cookies(
    domain: str | None = None,
    xsrf: str | None = None,
    access_token: str | None = None,
) -> CredentialRecord:
    """Ask for the domain, XSRF token and access token copied from the browser.

    Only values not passed in are prompted for. The answers are not validated
    here; the store validates before persisting.
    """
    if not domain:
        domain = _answer(
            questionary.text(
                "What is your Retool domain? (e.g., my-org.retool.com). "
                "Don't include https:// or http://"
            ).ask()
        )
    if not xsrf:
        xsrf = _answer(questionary.text(XSRF_HELP).ask())
    if not access_token:
        access_token = _answer(
            questionary.password(
                "What is your access token? It's also found in the cookies inspector."
            ).ask()
        )
    return CredentialRecord(
        domain=domain.strip(),
        session_token=xsrf.strip(),
        access_token=access_token.strip(),
    )


def collect_table_name() -> str:
    """Ask for a table name."""
    return _answer(
        questionary.text(
            "Table name?",
            validate=lambda text: bool(text.strip()) or "Table name cannot be blank.",
        ).ask()
    )


def collect_column_names() -> list[str]:
    """Ask for column names separated by commas or spaces."""
    answer = _answer(
        questionary.text(
            "Column names? (separate with commas or spaces; an 'id' primary key is always added)",
            validate=lambda text: bool(split_column_args([text])) or "Enter at least one column.",
        ).ask()
    )
    return split_column_args([answer])


def collect_app_name() -> str:
    """Ask for an app name; whitespace becomes underscores."""
    answer = _answer(
        questionary.text(
            "App name?",
            validate=lambda text: bool(text.strip()) or "App name cannot be blank.",
        ).ask()
    )
    return WHITESPACE_RE.sub("_", answer.strip())


async def confirm_async(message: str) -> bool:
    """Yes/no prompt usable from inside the event loop.

    Returns:
        True only on an explicit yes; Ctrl+C counts as no
    """
    answer = await questionary.confirm(message, default=False).ask_async()
    return bool(answer)
