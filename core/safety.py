import logging
from typing import Iterable, List, Sequence

from .types import PlanEntry

logger = logging.getLogger("safety_monitor")


class SafetyMonitor:
    def __init__(self,
                 max_deletions: int = 0,
                 protected_names: Iterable[str] = None):
        self.max_deletions = max_deletions
        self.protected_names = set(protected_names or [])

    def analyze_plan(self, plan: Sequence[PlanEntry]) -> bool:
        """
        Analyze a delete plan before it is executed.
        Returns True if safe, raises NothingToDeleteError if the plan has no
        files to remove and SafetyException if it breaks a configured limit.
        """
        if not plan:
            raise NothingToDeleteError("Invalid folder: the selection resolved to nothing")

        delete_entries: List[PlanEntry] = [e for e in plan if e.is_deletable]
        if not delete_entries:
            raise NothingToDeleteError("There are no file(s) to remove")

        # 1. Protected names check
        for entry in delete_entries:
            name = entry.display_name.rsplit("/", 1)[-1]
            if name in self.protected_names:
                raise SafetyException(f"CRITICAL: Plan removes protected file! {entry.display_name}")

        # 2. Threshold check
        if self.max_deletions and len(delete_entries) > self.max_deletions:
            msg = (f"Safety Limit Exceeded: Planning to delete {len(delete_entries)} files. "
                   f"Limit is {self.max_deletions}.")
            logger.critical(msg)
            raise SafetyException(msg)

        logger.info(f"Safety Check Passed: {len(delete_entries)} deletions planned.")
        return True


class SafetyException(Exception):
    pass


class NothingToDeleteError(Exception):
    pass
