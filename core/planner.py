import logging
from typing import Callable, List, Optional

from providers.interface import IDriveClient
from .types import PlanEntry, PlanDecision, OperationCancelled

logger = logging.getLogger("plan_builder")


class PlanBuilder:
    def __init__(self, client: IDriveClient):
        self.client = client

    def build_plan(self, folder_name: str, folder_id: str,
                   progress: Optional[Callable[[str], None]] = None,
                   should_cancel: Optional[Callable[[], bool]] = None) -> List[PlanEntry]:
        """
        Walk a folder depth-first and return its delete plan.

        The plan is pre-order: the folder's informational entry, its own
        files in arrival order, then each subfolder's plan in sorted name
        order. Subfolders are walked one at a time. Any listing failure
        aborts the whole build.
        """
        try:
            return self._build(folder_name, folder_id, progress, should_cancel)
        except OperationCancelled:
            logger.info(f"Plan build for {folder_name} cancelled")
            raise
        except Exception as e:
            logger.error(f"Plan build for {folder_name} failed: {e}")
            raise

    def _build(self, folder_name, folder_id, progress, should_cancel) -> List[PlanEntry]:
        if progress:
            progress(f"Processing folder {folder_name}")

        # informational entry, folders are never deleted themselves
        plan = [PlanEntry(PlanDecision.INFORMATIONAL, folder_name, folder_id)]
        subfolders = []

        page_token = None
        while True:
            if should_cancel and should_cancel():
                raise OperationCancelled(folder_name)
            page = self.client.list_folder_children(folder_id, page_token)
            for item in page.items:
                child_name = f"{folder_name}/{item.name}"
                if item.is_folder:
                    subfolders.append((child_name, item.id))
                else:
                    plan.append(PlanEntry(PlanDecision.TO_DELETE, child_name, item.id))
            page_token = page.next_page_token
            if not page_token:
                break

        logger.debug(f"{folder_name}: {len(plan) - 1} files, {len(subfolders)} subfolders")

        # in series, not in parallel
        for child_name, child_id in sorted(subfolders, key=lambda s: s[0]):
            plan.extend(self._build(child_name, child_id, progress, should_cancel))

        return plan
