"""Selecting apps and folders for ``retool apps --list``.

The pages API returns every app and folder in one flat listing. These
helpers pick the part the user asked for and order it oldest first.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

ROOT_FOLDER = "root"

_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


@dataclass
class AppListing:
    """Folders and apps to print, in order."""

    folders: list[dict[str, Any]] = field(default_factory=list)
    apps: list[dict[str, Any]] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.folders and not self.apps


def parse_updated_at(item: dict[str, Any]) -> datetime:
    """``updatedAt`` of an app or folder; the epoch when missing or malformed."""
    value = item.get("updatedAt")
    if not isinstance(value, str):
        return _EPOCH
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return _EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _oldest_first(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return sorted(items, key=parse_updated_at)


def select_root(
    apps: list[dict[str, Any]],
    folders: list[dict[str, Any]],
    recursive: bool = False,
) -> AppListing:
    """User folders, then the apps at root level (or every app if ``recursive``).

    Args:
        apps: Apps outside the trash
        folders: All folders, system folders included
        recursive: List apps from every folder
    """
    root_id = next(
        (
            folder.get("id")
            for folder in folders
            if folder.get("name") == ROOT_FOLDER and folder.get("systemFolder") is True
        ),
        None,
    )
    user_folders = [folder for folder in folders if folder.get("systemFolder") is False]
    if not recursive:
        apps = [app for app in apps if app.get("folderId") == root_id]
    return AppListing(folders=_oldest_first(user_folders), apps=_oldest_first(apps))


def select_folder(
    apps: list[dict[str, Any]],
    folders: list[dict[str, Any]],
    folder_name: str,
) -> AppListing | None:
    """Apps in the folder named ``folder_name``.

    Returns:
        The listing (possibly empty), or None if there is no such folder
    """
    folder = next((f for f in folders if f.get("name") == folder_name), None)
    if folder is None:
        return None
    return AppListing(apps=[app for app in apps if app.get("folderId") == folder.get("id")])
