from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"


@dataclass(frozen=True)
class DriveItem:
    id: str
    name: str
    mime_type: str
    parent_ids: Tuple[str, ...] = ()

    @property
    def is_folder(self) -> bool:
        return self.mime_type == FOLDER_MIME_TYPE


@dataclass
class Page:
    items: List[DriveItem] = field(default_factory=list)
    next_page_token: Optional[str] = None


class TransportError(Exception):
    """A storage API call failed at the network/API layer."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class IDriveClient(ABC):
    """
    Abstract Base Class for Drive clients.
    Exposes the id-based capabilities the cleaner needs, one page at a time.
    """

    @abstractmethod
    def list_folder_children(self, parent_id: str, page_token: Optional[str] = None) -> Page:
        """List one page of the direct children of a folder."""
        pass

    @abstractmethod
    def list_all_folders(self, page_token: Optional[str] = None) -> Page:
        """List one page of every folder visible to the client."""
        pass

    @abstractmethod
    def get_root_id(self) -> str:
        """Get the id of the root folder."""
        pass

    @abstractmethod
    def delete_by_id(self, item_id: str) -> None:
        """Permanently delete an object. Raises on failure."""
        pass
