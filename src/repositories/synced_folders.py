from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

from src.domain.value_objects.enums import UploadAction

# Returned by ``store`` when the row could not be written.
INSERT_FAILED = -1


@dataclass
class SyncedFolder:
    id: int | None
    local_path: str
    remote_path: str
    wifi_only: bool = False
    charging_only: bool = False
    subfolder_by_date: bool = False
    account: str = ""
    upload_action: int = UploadAction.COPY
    enabled: bool = True

    def same_settings(self, other: SyncedFolder) -> bool:
        """Compare every persisted field except the identifier."""
        return (
            self.local_path == other.local_path
            and self.remote_path == other.remote_path
            and self.wifi_only == other.wifi_only
            and self.charging_only == other.charging_only
            and self.subfolder_by_date == other.subfolder_by_date
            and self.account == other.account
            and int(self.upload_action) == int(other.upload_action)
            and self.enabled == other.enabled
        )


FolderListener = Callable[[SyncedFolder], None]


class SyncedFoldersRepo(ABC):
    """Repository interface for synced folders.

    Implementations never raise on storage failures; they log and return a
    degraded result instead.
    """

    @abstractmethod
    def store(self, folder: SyncedFolder) -> int:
        """Persist a new folder and return its id, or ``INSERT_FAILED``."""

    @abstractmethod
    def list_all(self) -> list[SyncedFolder]:
        """Return every stored folder in storage order."""

    @abstractmethod
    def get_by_id(self, folder_id: int) -> Optional[SyncedFolder]:
        """Retrieve a folder by identifier."""

    @abstractmethod
    def find_by_local_path(self, local_path: str) -> Optional[SyncedFolder]:
        """Return the single folder for ``local_path`` or ``None``."""

    @abstractmethod
    def update_enabled(self, folder_id: int, enabled: bool) -> int:
        """Toggle the enabled flag and return the number of rows updated."""

    @abstractmethod
    def update(self, folder: SyncedFolder) -> int:
        """Write all fields of an existing folder; return rows updated."""
