from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


# ---------------------------------------------------------------------------
# Node Type Enum: UI-facing classification of a cell
# ---------------------------------------------------------------------------
class NodeType(Enum):
    EMPTY   = "empty"     # default
    WALL    = "wall"      # user-placed or maze obstacle
    SOURCE  = "source"    # start node
    TARGET  = "target"    # goal node
    VISITED = "visited"   # drawn while replaying the visit order
    PATH    = "path"      # on the reconstructed shortest path


INF = float("inf")


# ---------------------------------------------------------------------------
# GridNode
# ---------------------------------------------------------------------------
@dataclass(eq=False)
class GridNode:
    """
    Fixed identity (row, col), mutable classification and search state.

    Attributes:
        row, col   : Position in the owning grid.
        type       : NodeType for rendering.
        is_visited : Search flag, set when the algorithm settles / enqueues the node.
        is_path    : Set when the path animation reaches the node.
        distance   : Best known cost from source (g-score for A*), +inf initially.
        previous   : (row, col) of the predecessor, or None.  A key into the
                     owning grid rather than an object reference, so grids can
                     be copied or reset without dangling links.
        h_score    : Manhattan estimate to target (A* only).
        f_score    : distance + h_score (A* only).
    """

    row:        int
    col:        int
    type:       NodeType                  = NodeType.EMPTY
    is_visited: bool                      = False
    is_path:    bool                      = False
    distance:   float                     = INF
    previous:   Optional[Tuple[int, int]] = None
    h_score:    float                     = INF
    f_score:    float                     = INF

    @property
    def position(self) -> Tuple[int, int]:
        return (self.row, self.col)

    @property
    def is_wall(self) -> bool:
        return self.type is NodeType.WALL

    def reset_search_state(self) -> None:
        """Wipe search metadata; visited / path cells go back to empty."""
        self.is_visited = False
        self.is_path    = False
        self.distance   = INF
        self.previous   = None
        self.h_score    = INF
        self.f_score    = INF
        if self.type in (NodeType.VISITED, NodeType.PATH):
            self.type = NodeType.EMPTY

    def manhattan(self, other: "GridNode") -> int:
        return abs(self.row - other.row) + abs(self.col - other.col)

    def to_dict(self) -> dict:
        return {"row": self.row, "col": self.col, "type": self.type.value}

    def __repr__(self) -> str:
        return f"GridNode({self.row},{self.col}, {self.type.value}, d={self.distance})"
