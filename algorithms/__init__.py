"""
algorithms/__init__.py — Algorithm Registry
=============================================
Single source of truth for every selectable algorithm.

    from algorithms import REGISTRY, get_algorithm

REGISTRY is a dict:
    {
        "bubble": AlgoInfo(key, label, kind, fn, tags, complexity…),
        …
    }

Two kinds of entry:
  • kind="sorting"      fn(array)                 → generator of SortStep
  • kind="pathfinding"  fn(grid, source, target)  → visited nodes, in order

The Sudoku solver has a single strategy and is not registered here; see
algorithms.sudoku_solver.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Dict, Optional

# ---------------------------------------------------------------------------
# Import all algorithm modules
# ---------------------------------------------------------------------------
from algorithms.bubble_sort import bubble_sort as _bubble
from algorithms.merge_sort  import merge_sort  as _merge
from algorithms.quick_sort  import quick_sort  as _quick
from algorithms.heap_sort   import heap_sort   as _heap
from algorithms.dijkstra    import dijkstra    as _dijkstra
from algorithms.astar       import astar       as _astar
from algorithms.bfs         import bfs         as _bfs


SORTING     = "sorting"
PATHFINDING = "pathfinding"


# ---------------------------------------------------------------------------
# AlgoInfo: metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:              str                    # registry key, e.g. "bubble"
    label:            str                    # human label, e.g. "Bubble Sort"
    kind:             str                    # SORTING or PATHFINDING
    fn:               Callable               # the algorithm entry point
    tags:             List[str] = field(default_factory=list)
    complexity_time:  str       = ""         # e.g. "O(n²)"
    complexity_space: str       = ""
    description:      str       = ""         # one-liner for the UI card

    def to_dict(self) -> dict:
        return {
            "key":              self.key,
            "label":            self.label,
            "kind":             self.kind,
            "tags":             list(self.tags),
            "complexity_time":  self.complexity_time,
            "complexity_space": self.complexity_space,
            "description":      self.description,
        }


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, AlgoInfo] = {

    "bubble": AlgoInfo(
        key="bubble", label="Bubble Sort", kind=SORTING, fn=_bubble,
        tags=["stable", "in-place"],
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Repeatedly swaps adjacent out-of-order pairs.",
    ),

    "merge": AlgoInfo(
        key="merge", label="Merge Sort", kind=SORTING, fn=_merge,
        tags=["stable", "divide-and-conquer"],
        complexity_time="O(n log n)", complexity_space="O(n)",
        description="Splits in halves, then merges the sorted halves back.",
    ),

    "quick": AlgoInfo(
        key="quick", label="Quick Sort", kind=SORTING, fn=_quick,
        tags=["in-place", "divide-and-conquer"],
        complexity_time="O(n log n) avg, O(n²) worst", complexity_space="O(log n)",
        description="Partitions around the last element (Lomuto), then recurses.",
    ),

    "heap": AlgoInfo(
        key="heap", label="Heap Sort", kind=SORTING, fn=_heap,
        tags=["in-place"],
        complexity_time="O(n log n)", complexity_space="O(1)",
        description="Builds a max-heap, then repeatedly moves the root to the end.",
    ),

    "dijkstra": AlgoInfo(
        key="dijkstra", label="Dijkstra's Algorithm", kind=PATHFINDING, fn=_dijkstra,
        tags=["weighted", "shortest-path"],
        complexity_time="O(V² log V) here (re-sorted list)", complexity_space="O(V)",
        description="Greedily settles the closest node. Optimal for non-negative weights.",
    ),

    "astar": AlgoInfo(
        key="astar", label="A* Search", kind=PATHFINDING, fn=_astar,
        tags=["weighted", "shortest-path", "heuristic"],
        complexity_time="O(V² log V) here (re-sorted list)", complexity_space="O(V)",
        description="Dijkstra guided by Manhattan distance to the target.",
    ),

    "bfs": AlgoInfo(
        key="bfs", label="Breadth-First Search", kind=PATHFINDING, fn=_bfs,
        tags=["unweighted", "shortest-path", "traversal"],
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="Explores layer by layer. Shortest by hop count.",
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    return REGISTRY.get(key)


def list_algorithms(kind: Optional[str] = None) -> List[AlgoInfo]:
    """Registered algorithms in insertion order, optionally of one kind."""
    return [a for a in REGISTRY.values() if kind is None or a.kind == kind]


__all__ = [
    "AlgoInfo",
    "REGISTRY",
    "SORTING",
    "PATHFINDING",
    "get_algorithm",
    "list_algorithms",
]
