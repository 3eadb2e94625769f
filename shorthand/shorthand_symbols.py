"""
The symbol table: an append-only history of committed SourceMaps plus a
label -> index mapping that always points at the latest binding.
"""
import logging
from typing import Dict, List

from shorthand.shorthand_datatypes import SourceMap, NOT_FOUND

logger = logging.getLogger(__name__)


class SymbolTable:
    """Holds the assignments made during a run.

    Reassigning a label appends a new entry and rebinds the label; older
    entries stay in `entries` but are no longer reachable by lookup.
    """
    def __init__(self):
        self.entries: List[SourceMap] = []
        self.labels: Dict[str, int] = {}

    def get(self, label: str) -> SourceMap:
        i = self.labels.get(label)
        if i is None:
            return NOT_FOUND
        return self.entries[i]

    def get_all(self) -> List[SourceMap]:
        # One record per label. Callers must not depend on the order.
        return [self.entries[i] for i in self.labels.values()]

    def set(self, sm: SourceMap) -> int:
        self.entries.append(sm)
        pos = len(self.entries) - 1
        self.labels[sm.label] = pos
        logger.debug("bound %r at entry %d (line %d)", sm.label, pos, sm.line_no)
        return pos

    def __contains__(self, label: str) -> bool:
        return label in self.labels

    def __len__(self) -> int:
        return len(self.labels)
