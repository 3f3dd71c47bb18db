import logging
import mimetypes
import os
from typing import Optional, List

import fsspec

from .interface import IDriveClient, DriveItem, Page, TransportError, FOLDER_MIME_TYPE

logger = logging.getLogger("local_provider")

ROOT_ID = "/"


class LocalDriveClient(IDriveClient):
    """
    Presents a local directory through the Drive capability interface.
    Ids are root-relative posix paths; the root folder's id is "/".
    """

    def __init__(self, root_path: str, page_size: int = 50):
        self.root_path = os.path.abspath(root_path)
        self.page_size = page_size
        self.fs = fsspec.filesystem("file")

    def _get_abs_path(self, item_id: str) -> str:
        # Treat all ids as relative to root_path
        relative_path = item_id.lstrip("/")
        return os.path.join(self.root_path, relative_path)

    def _to_id(self, abs_path: str) -> str:
        rel = os.path.relpath(abs_path, self.root_path).replace(os.sep, "/")
        if rel == ".":
            return ROOT_ID
        return "/" + rel

    def _to_item(self, info: dict) -> DriveItem:
        item_id = self._to_id(info['name'])
        parent = item_id.rsplit("/", 1)[0] or ROOT_ID
        if info['type'] == 'directory':
            mime_type = FOLDER_MIME_TYPE
        else:
            mime_type = mimetypes.guess_type(info['name'])[0] or "application/octet-stream"
        return DriveItem(
            id=item_id,
            name=os.path.basename(info['name']),
            mime_type=mime_type,
            parent_ids=(parent,)
        )

    def _paginate(self, infos: List[dict], page_token: Optional[str]) -> Page:
        # Page tokens are plain offsets into the sorted listing
        start = int(page_token) if page_token else 0
        end = start + self.page_size
        items = [self._to_item(i) for i in infos[start:end]]
        return Page(items=items, next_page_token=str(end) if end < len(infos) else None)

    def list_folder_children(self, parent_id: str, page_token: Optional[str] = None) -> Page:
        abs_path = self._get_abs_path(parent_id)
        if self.fs.isfile(abs_path):
            # a file has no children, same as Drive's "in parents" query
            return Page()
        try:
            infos = self.fs.ls(abs_path, detail=True)
        except (FileNotFoundError, NotADirectoryError) as e:
            raise TransportError(f"Folder not found: {parent_id}", status=404) from e
        except OSError as e:
            raise TransportError(str(e)) from e
        infos = sorted(infos, key=lambda i: i['name'])
        return self._paginate(infos, page_token)

    def list_all_folders(self, page_token: Optional[str] = None) -> Page:
        try:
            found = self.fs.find(self.root_path, withdirs=True, detail=True)
        except OSError as e:
            raise TransportError(str(e)) from e
        infos = [
            info for name, info in sorted(found.items())
            if info['type'] == 'directory' and self._to_id(name) != ROOT_ID
        ]
        return self._paginate(infos, page_token)

    def get_root_id(self) -> str:
        if not self.fs.isdir(self.root_path):
            raise TransportError(f"Root folder not found: {self.root_path}", status=404)
        return ROOT_ID

    def delete_by_id(self, item_id: str) -> None:
        if item_id == ROOT_ID:
            raise TransportError("Refusing to delete the root folder", status=403)
        abs_path = self._get_abs_path(item_id)
        if not self.fs.exists(abs_path):
            raise TransportError(f"File not found: {item_id}", status=404)
        try:
            if self.fs.isdir(abs_path):
                self.fs.rm(abs_path, recursive=True)
            else:
                self.fs.rm(abs_path)
        except OSError as e:
            raise TransportError(str(e)) from e
        logger.debug(f"Removed {abs_path}")
