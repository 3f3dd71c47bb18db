import logging
from typing import Dict, Optional

from providers.interface import IDriveClient
from .paths import PathResolver
from .types import FolderNode, FolderListing, ResolvedFolder

logger = logging.getLogger("folder_indexer")

MAX_FOLDERS = 500    # a limit to avoid having too many folders


class FolderIndexer:
    def __init__(self, client: IDriveClient, max_folders: int = MAX_FOLDERS):
        self.client = client
        self.max_folders = max_folders

    def list_folders(self, search_name: Optional[str] = None,
                     search_id: Optional[str] = None) -> FolderListing:
        """
        Index every folder, resolve display paths and apply the search filters.

        Name search is a case-sensitive substring match, id search is exact.
        Paging stops early once ``max_folders`` folders are indexed and the
        listing is flagged as truncated. Any transport error is fatal.
        """
        index, truncated = self._build_index()
        if truncated:
            logger.warning(f"Folder index truncated at {self.max_folders} folders")

        root_id = self.client.get_root_id()
        resolver = PathResolver(index, root_id, strict=False)

        entries = []
        for node in index.values():
            paths = resolver.resolve(node)

            if search_name is not None and search_name not in node.name:
                continue
            if search_id is not None and search_id != node.id:
                continue
            entries.append(ResolvedFolder(node=node, paths=paths))

        # sorted() is stable, equal names keep index order
        entries = sorted(entries, key=lambda e: e.name)
        logger.info(f"Indexed {len(index)} folders, {len(entries)} match the search")
        return FolderListing(entries=entries, truncated=truncated)

    def _build_index(self):
        index: Dict[str, FolderNode] = {}
        page_token = None
        while True:
            page = self.client.list_all_folders(page_token)
            for item in page.items:
                if len(index) >= self.max_folders and item.id not in index:
                    # do not continue if the max_folders limit has been reached
                    return index, True
                index[item.id] = FolderNode(id=item.id, name=item.name, parent_ids=item.parent_ids)

            page_token = page.next_page_token
            if not page_token:
                return index, False
            if len(index) >= self.max_folders:
                return index, True
