import unittest
from unittest.mock import MagicMock

from core.indexer import FolderIndexer, MAX_FOLDERS
from providers.interface import IDriveClient, DriveItem, Page, TransportError, FOLDER_MIME_TYPE


def folder(item_id, name, *parents):
    return DriveItem(id=item_id, name=name, mime_type=FOLDER_MIME_TYPE, parent_ids=tuple(parents))


def paged(items, page_size):
    """side_effect serving items page by page, tokens are offsets."""
    def list_all_folders(page_token=None):
        start = int(page_token) if page_token else 0
        end = start + page_size
        return Page(items=items[start:end], next_page_token=str(end) if end < len(items) else None)
    return list_all_folders


class TestFolderIndexer(unittest.TestCase):
    def setUp(self):
        self.client = MagicMock(spec=IDriveClient)
        self.client.get_root_id.return_value = "ROOT"
        self.folders = [
            folder("1", "banana", "ROOT"),
            folder("2", "Apple", "ROOT"),
            folder("3", "abc-archive", "1"),
            folder("4", "xabcx", "2", "1"),
            folder("5", "ABC", "ROOT"),
        ]
        self.client.list_all_folders.side_effect = paged(self.folders, 2)
        self.indexer = FolderIndexer(self.client)

    def test_pages_until_exhausted(self):
        listing = self.indexer.list_folders()
        self.assertFalse(listing.truncated)
        self.assertEqual(len(listing.entries), 5)
        self.assertEqual(self.client.list_all_folders.call_count, 3)

    def test_sorted_by_name_lexicographic(self):
        """Uppercase sorts before lowercase, no locale folding."""
        listing = self.indexer.list_folders()
        names = [e.name for e in listing.entries]
        self.assertEqual(names, ["ABC", "Apple", "abc-archive", "banana", "xabcx"])

    def test_paths_resolved(self):
        listing = self.indexer.list_folders()
        by_id = {e.id: e for e in listing.entries}
        self.assertEqual(by_id["1"].paths, {"banana"})
        self.assertEqual(by_id["3"].paths, {"banana/abc-archive"})
        self.assertEqual(by_id["4"].paths, {"Apple/xabcx", "banana/xabcx"})

    def test_search_name_case_sensitive_substring(self):
        listing = self.indexer.list_folders(search_name="abc")
        self.assertEqual([e.name for e in listing.entries], ["abc-archive", "xabcx"])

    def test_search_id_exact(self):
        listing = self.indexer.list_folders(search_id="4")
        self.assertEqual([e.id for e in listing.entries], ["4"])
        listing = self.indexer.list_folders(search_id="")
        self.assertEqual(listing.entries, [])

    def test_search_name_and_id(self):
        listing = self.indexer.list_folders(search_name="abc", search_id="3")
        self.assertEqual([e.id for e in listing.entries], ["3"])
        listing = self.indexer.list_folders(search_name="Apple", search_id="3")
        self.assertEqual(listing.entries, [])

    def test_equal_names_keep_index_order(self):
        self.client.list_all_folders.side_effect = paged([
            folder("z", "Same", "ROOT"),
            folder("y", "Same", "ROOT"),
            folder("x", "Same", "ROOT"),
        ], 50)
        listing = self.indexer.list_folders()
        self.assertEqual([e.id for e in listing.entries], ["z", "y", "x"])

    def test_truncated_at_cap(self):
        """501 folders -> truncated, at most 500 entries."""
        many = [folder(str(i), f"f{i:03d}", "ROOT") for i in range(501)]
        self.client.list_all_folders.side_effect = paged(many, 50)
        listing = FolderIndexer(self.client).list_folders()
        self.assertTrue(listing.truncated)
        self.assertLessEqual(len(listing.entries), MAX_FOLDERS)
        self.assertEqual(len(listing.entries), 500)
        # paging stopped before the 11th page
        self.assertEqual(self.client.list_all_folders.call_count, 10)

    def test_cap_within_a_page(self):
        many = [folder(str(i), f"f{i}", "ROOT") for i in range(7)]
        self.client.list_all_folders.side_effect = paged(many, 4)
        listing = FolderIndexer(self.client, max_folders=5).list_folders()
        self.assertTrue(listing.truncated)
        self.assertEqual(len(listing.entries), 5)

    def test_exactly_at_cap_not_truncated(self):
        many = [folder(str(i), f"f{i}", "ROOT") for i in range(4)]
        self.client.list_all_folders.side_effect = paged(many, 4)
        listing = FolderIndexer(self.client, max_folders=4).list_folders()
        self.assertFalse(listing.truncated)
        self.assertEqual(len(listing.entries), 4)

    def test_dangling_parent_in_listing(self):
        many = [folder("p", "parent", "ROOT"), folder("c", "child", "q")]
        self.client.list_all_folders.side_effect = paged(many, 1)
        with self.assertLogs("path_resolver", level="WARNING"):
            listing = FolderIndexer(self.client, max_folders=2).list_folders()
        by_id = {e.id: e for e in listing.entries}
        self.assertEqual(by_id["c"].paths, {"child"})

    def test_cycle_degrades_to_name(self):
        self.client.list_all_folders.side_effect = paged([
            folder("x", "X", "y"),
            folder("y", "Y", "x"),
            folder("ok", "Fine", "ROOT"),
        ], 50)
        with self.assertLogs("path_resolver", level="WARNING"):
            listing = self.indexer.list_folders()
        by_id = {e.id: e for e in listing.entries}
        self.assertEqual(by_id["ok"].paths, {"Fine"})
        self.assertEqual(len(listing.entries), 3)
        self.assertTrue(all(e.paths for e in listing.entries))

    def test_cycle_keeps_valid_lineages(self):
        """A looping parent does not hide the folder's other parents."""
        self.client.list_all_folders.side_effect = paged([
            folder("x", "X", "ROOT", "y"),
            folder("y", "Y", "x"),
        ], 50)
        with self.assertLogs("path_resolver", level="WARNING"):
            listing = self.indexer.list_folders()
        by_id = {e.id: e for e in listing.entries}
        self.assertIn("X", by_id["x"].paths)
        self.assertIn("X/Y", by_id["y"].paths)

    def test_page_error_is_fatal(self):
        self.client.list_all_folders.side_effect = TransportError("boom", status=500)
        with self.assertRaises(TransportError):
            self.indexer.list_folders()
        self.client.get_root_id.assert_not_called()

    def test_root_error_is_fatal(self):
        self.client.get_root_id.side_effect = TransportError("no root", status=404)
        with self.assertRaises(TransportError):
            self.indexer.list_folders()


if __name__ == '__main__':
    unittest.main()
