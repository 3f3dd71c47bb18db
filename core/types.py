from dataclasses import dataclass, field
from enum import Enum, auto
from typing import FrozenSet, List, Optional, Tuple


@dataclass(frozen=True)
class FolderNode:
    id: str
    name: str
    parent_ids: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ResolvedFolder:
    node: FolderNode
    paths: FrozenSet[str]

    @property
    def id(self) -> str:
        return self.node.id

    @property
    def name(self) -> str:
        return self.node.name


@dataclass
class FolderListing:
    entries: List[ResolvedFolder] = field(default_factory=list)
    truncated: bool = False


class PlanDecision(Enum):
    INFORMATIONAL = auto()
    TO_DELETE = auto()


@dataclass(frozen=True)
class PlanEntry:
    decision: PlanDecision
    display_name: str
    id: str

    @property
    def is_deletable(self) -> bool:
        return self.decision is PlanDecision.TO_DELETE


class LogOutcome(Enum):
    DELETED = auto()
    FAILED = auto()


@dataclass(frozen=True)
class LogEntry:
    outcome: LogOutcome
    display_name: str
    id: str
    reason: Optional[str] = None

    @property
    def action_text(self) -> str:
        if self.outcome is LogOutcome.DELETED:
            return "Removed"
        return f"Error: {self.reason}"


class OperationCancelled(Exception):
    """Raised when a cancellation is requested; carries the log written so far."""

    def __init__(self, at: str, completed: Optional[List[LogEntry]] = None):
        super().__init__(f"Cancelled at {at}")
        self.at = at
        self.completed = completed or []
