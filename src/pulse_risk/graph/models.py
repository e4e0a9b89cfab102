"""Import graph model.

Edges are directed: an edge (A, B) means A imports B. Both endpoints are
always members of the scanned file set.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..models import FileEdge


@dataclass
class ImportGraph:
    """Deduplicated import edges plus per-file degree counts.

    ``fan_in`` and ``fan_out`` hold an entry for every scanned file, including
    files with no relations (explicit 0).
    """

    edges: list[FileEdge] = field(default_factory=list)
    fan_in: dict[str, int] = field(default_factory=dict)
    fan_out: dict[str, int] = field(default_factory=dict)

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    def dependencies(self, file_path: str) -> list[str]:
        return [e.target for e in self.edges if e.source == file_path]

    def dependents(self, file_path: str) -> list[str]:
        return [e.source for e in self.edges if e.target == file_path]
