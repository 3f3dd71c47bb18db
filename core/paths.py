import logging
from typing import Dict, FrozenSet, Mapping, Set

from .types import FolderNode

logger = logging.getLogger("path_resolver")


class CycleDetectedError(Exception):
    def __init__(self, node_id: str):
        super().__init__(f"Cycle detected in folder parents at id {node_id}")
        self.node_id = node_id


class PathResolver:
    """
    Builds display paths for folders from their parent ids.

    A folder with several parents gets one path per parent lineage. Paths
    are memoized per folder id in ``memo``; nodes themselves are never
    modified. A parent id missing from the index degrades to the bare
    folder name for that lineage.

    With ``strict`` a parent chain that loops back raises
    CycleDetectedError. Otherwise only the looping parent is dropped; the
    folder keeps its other lineages, or its bare name if none is left.
    """

    def __init__(self, index: Mapping[str, FolderNode], root_id: str, strict: bool = True):
        self.index = index
        self.root_id = root_id
        self.strict = strict
        self.memo: Dict[str, FrozenSet[str]] = {}
        self._visiting: Set[str] = set()
        self._cuts = 0

    def resolve(self, node: FolderNode) -> FrozenSet[str]:
        cached = self.memo.get(node.id)
        if cached is not None:
            return cached

        if node.id in self._visiting:
            raise CycleDetectedError(node.id)

        cuts_before = self._cuts
        self._visiting.add(node.id)
        try:
            paths = set()
            if not node.parent_ids:
                paths.add(node.name)
            for parent_id in node.parent_ids:
                if parent_id == self.root_id:
                    paths.add(node.name)
                elif parent_id not in self.index:
                    logger.warning(f"Parent folder id {parent_id} of {node.name} ({node.id}) is missing")
                    paths.add(node.name)
                elif parent_id in self._visiting and not self.strict:
                    logger.warning(f"Cycle detected in folder parents at id {parent_id}, "
                                   f"dropping it from the lineage of {node.name} ({node.id})")
                    self._cuts += 1
                else:
                    for parent_path in self.resolve(self.index[parent_id]):
                        paths.add(f"{parent_path}/{node.name}")
        finally:
            self._visiting.discard(node.id)

        if self._cuts > cuts_before and self._visiting:
            # partial result inside a loop still being resolved, not memoized
            return frozenset(paths)
        if not paths:
            paths.add(node.name)

        resolved = frozenset(paths)
        self.memo[node.id] = resolved
        return resolved


def resolve_paths(index: Mapping[str, FolderNode], root_id: str, node: FolderNode) -> FrozenSet[str]:
    """One-off resolution without a shared memo table."""
    return PathResolver(index, root_id).resolve(node)
