import logging
from typing import Optional

from googleapiclient.errors import HttpError

from .interface import IDriveClient, DriveItem, Page, TransportError, FOLDER_MIME_TYPE

logger = logging.getLogger("google_provider")

LIST_FIELDS = "nextPageToken, files(id, name, mimeType, parents)"


class GoogleDriveClient(IDriveClient):
    def __init__(self, service, page_size: int = 50):
        self.service = service
        self.page_size = page_size

    def _list(self, query: str, page_token: Optional[str]) -> Page:
        try:
            results = self.service.files().list(
                q=query,
                pageSize=self.page_size,
                fields=LIST_FIELDS,
                pageToken=page_token
            ).execute()
        except HttpError as e:
            raise self._to_transport_error(e) from e

        items = [self._to_item(f) for f in results.get('files', [])]
        return Page(items=items, next_page_token=results.get('nextPageToken'))

    def list_folder_children(self, parent_id: str, page_token: Optional[str] = None) -> Page:
        return self._list(f"'{parent_id}' in parents", page_token)

    def list_all_folders(self, page_token: Optional[str] = None) -> Page:
        return self._list(f"mimeType='{FOLDER_MIME_TYPE}'", page_token)

    def get_root_id(self) -> str:
        try:
            root = self.service.files().get(fileId='root', fields='id').execute()
        except HttpError as e:
            logger.error(f"Unable to retrieve root folder id: {e}")
            raise self._to_transport_error(e) from e
        return root['id']

    def delete_by_id(self, item_id: str) -> None:
        # Permanent delete, bypasses the trash
        try:
            self.service.files().delete(fileId=item_id).execute()
        except HttpError as e:
            raise self._to_transport_error(e) from e

    def _to_item(self, item: dict) -> DriveItem:
        return DriveItem(
            id=item['id'],
            name=item['name'],
            mime_type=item.get('mimeType', ''),
            parent_ids=tuple(item.get('parents') or ())
        )

    @staticmethod
    def _to_transport_error(e: HttpError) -> TransportError:
        status = getattr(e, 'status_code', None)
        if status is None and getattr(e, 'resp', None) is not None:
            status = getattr(e.resp, 'status', None)
        reason = e.reason if hasattr(e, 'reason') and e.reason else str(e)
        return TransportError(reason, status=int(status) if status is not None else None)
