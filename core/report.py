import os
from dataclasses import dataclass
from datetime import datetime
from typing import List, Sequence

from .types import PlanEntry, LogEntry, LogOutcome, ResolvedFolder


@dataclass
class PlanSummary:
    files_to_delete: int
    folders_examined: int


@dataclass
class LogSummary:
    deleted: int
    failed: int


def summarize_plan(plan: Sequence[PlanEntry]) -> PlanSummary:
    files = sum(1 for e in plan if e.is_deletable)
    return PlanSummary(files_to_delete=files, folders_examined=len(plan) - files)


def summarize_log(log: Sequence[LogEntry]) -> LogSummary:
    failed = sum(1 for e in log if e.outcome is LogOutcome.FAILED)
    return LogSummary(deleted=len(log) - failed, failed=failed)


def _table(header: List[str], rows: List[List[str]]) -> List[str]:
    widths = [max(len(str(c)) for c in col) for col in zip(header, *rows)]
    lines = ["  ".join(str(c).ljust(w) for c, w in zip(header, widths)).rstrip()]
    lines.append("  ".join("-" * w for w in widths))
    for row in rows:
        lines.append("  ".join(str(c).ljust(w) for c, w in zip(row, widths)).rstrip())
    return lines


def format_folders(entries: Sequence[ResolvedFolder]) -> List[str]:
    rows = []
    for entry in entries:
        paths = sorted(entry.paths) or [""]
        rows.append([entry.name, entry.id, paths[0]])
        # extra lineages on their own rows
        for path in paths[1:]:
            rows.append(["", "", path])
    return _table(["Name", "Id", "Folder Paths"], rows)


def format_plan(plan: Sequence[PlanEntry]) -> List[str]:
    rows = [["Y" if e.is_deletable else "N", e.display_name, e.id] for e in plan]
    return _table(["Delete?", "Name", "Id"], rows)


def format_log(log: Sequence[LogEntry]) -> List[str]:
    rows = [[e.display_name, e.id, e.action_text] for e in log]
    return _table(["Name", "Id", "Action taken"], rows)


def save_report(kind: str, folder_name: str, lines: Sequence[str], directory: str = ".") -> str:
    """Save a report file and return its path."""
    os.makedirs(directory, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    filename = os.path.join(directory, f"drive_{kind}_{timestamp}.txt")

    with open(filename, 'w', encoding='utf-8') as f:
        f.write(f"GOOGLE DRIVE {kind.upper()} REPORT\n")
        f.write("=" * 60 + "\n")
        f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
        f.write(f"Folder: {folder_name}\n")
        f.write("=" * 60 + "\n\n")
        for line in lines:
            f.write(f"{line}\n")

    return filename
