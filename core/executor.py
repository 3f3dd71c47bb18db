import logging
from typing import Callable, List, Optional, Sequence

from providers.interface import IDriveClient
from logger_setup import log_exception
from .types import PlanEntry, LogEntry, LogOutcome, OperationCancelled

logger = logging.getLogger("plan_executor")


class PlanExecutor:
    def __init__(self, client: IDriveClient):
        self.client = client

    def execute(self, plan: Sequence[PlanEntry], simulate: bool = False,
                progress: Optional[Callable[[str], None]] = None,
                should_cancel: Optional[Callable[[], bool]] = None) -> List[LogEntry]:
        """
        Delete the plan's files one by one, in plan order.

        Informational entries are skipped. A failed deletion is recorded in
        its log entry and the run moves on to the next file. With
        ``simulate`` nothing is deleted and every file is logged as deleted.
        """
        log = []
        deletable = [e for e in plan if e.is_deletable]
        logger.info(f"{'Simulating' if simulate else 'Executing'} plan: {len(deletable)} files")

        # remove the files one by one in series (not in parallel)
        for entry in deletable:
            if should_cancel and should_cancel():
                logger.info(f"Execution cancelled after {len(log)} of {len(deletable)} files")
                raise OperationCancelled(entry.display_name, log)

            if simulate:
                log.append(LogEntry(LogOutcome.DELETED, entry.display_name, entry.id))
                continue

            if progress:
                progress(f"Removing {entry.display_name}")
            try:
                self.client.delete_by_id(entry.id)
            except Exception as e:
                log_exception(logger, f"Failed to delete {entry.display_name} ({entry.id})", e)
                log.append(LogEntry(LogOutcome.FAILED, entry.display_name, entry.id, reason=str(e)))
            else:
                logger.debug(f"Deleted {entry.display_name} ({entry.id})")
                log.append(LogEntry(LogOutcome.DELETED, entry.display_name, entry.id))

        return log
