"""
grid.py — Pathfinding Grid
===========================
Single source of truth for the pathfinding board.  Algorithms, the
playback session and the renderer all talk to this object.

Responsibilities:
  1. Cell access and 4-connected neighbour queries
  2. Editing: source / target placement, wall toggling, click semantics
  3. Random maze generation
  4. Reset helpers (wipe search state, keep walls / endpoints)

Design decisions:
  - Dimensions are fixed at construction; "reset" and "regenerate"
    replace the whole Grid rather than resizing it.
  - At most one SOURCE and one TARGET exist at any time; the grid keeps
    their positions so lookups never scan.
  - `neighbours()` is the only expansion routine the search algorithms
    use, and it never returns walls.  That keeps the wall rule identical
    for BFS, Dijkstra and A*.
"""

import random
from typing import Iterator, List, Optional, Tuple

from grid.node import GridNode, NodeType

Position = Tuple[int, int]

DEFAULT_ROWS = 20
DEFAULT_COLS = 50
WALL_PROBABILITY = 0.3

# up, down, left, right
_DIRECTIONS = ((-1, 0), (1, 0), (0, -1), (0, 1))


class Grid:
    """
    Attributes:
        rows, cols : Fixed dimensions.
        nodes      : rows × cols matrix of GridNode.
        source     : (row, col) of the source node, or None.
        target     : (row, col) of the target node, or None.
    """

    def __init__(self, rows: int = DEFAULT_ROWS, cols: int = DEFAULT_COLS):
        if rows <= 0 or cols <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {rows}x{cols}")
        self.rows: int = rows
        self.cols: int = cols
        self.nodes: List[List[GridNode]] = [
            [GridNode(row=r, col=c) for c in range(cols)] for r in range(rows)
        ]
        self.source: Optional[Position] = None
        self.target: Optional[Position] = None

    # ==================================================================
    # ACCESS
    # ==================================================================
    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def node(self, row: int, col: int) -> GridNode:
        if not self.in_bounds(row, col):
            raise IndexError(f"({row}, {col}) is outside a {self.rows}x{self.cols} grid")
        return self.nodes[row][col]

    def at(self, pos: Position) -> GridNode:
        return self.node(pos[0], pos[1])

    @property
    def source_node(self) -> Optional[GridNode]:
        return self.at(self.source) if self.source else None

    @property
    def target_node(self) -> Optional[GridNode]:
        return self.at(self.target) if self.target else None

    def all_nodes(self) -> Iterator[GridNode]:
        for row in self.nodes:
            yield from row

    def neighbours(self, node: GridNode) -> List[GridNode]:
        """Unvisited, non-wall 4-neighbours in up / down / left / right order."""
        result = []
        for dr, dc in _DIRECTIONS:
            r, c = node.row + dr, node.col + dc
            if not self.in_bounds(r, c):
                continue
            nbr = self.nodes[r][c]
            if nbr.is_visited or nbr.is_wall:
                continue
            result.append(nbr)
        return result

    # ==================================================================
    # EDITING
    # ==================================================================
    def set_source(self, row: int, col: int) -> None:
        node = self.node(row, col)
        if self.source:
            self.at(self.source).type = NodeType.EMPTY
        if self.target == node.position:
            self.target = None
        node.type = NodeType.SOURCE
        self.source = node.position

    def set_target(self, row: int, col: int) -> None:
        node = self.node(row, col)
        if self.target:
            self.at(self.target).type = NodeType.EMPTY
        if self.source == node.position:
            self.source = None
        node.type = NodeType.TARGET
        self.target = node.position

    def toggle_wall(self, row: int, col: int) -> bool:
        """Flip EMPTY ↔ WALL.  Returns False when the cell is not togglable."""
        node = self.node(row, col)
        if node.type is NodeType.WALL:
            node.type = NodeType.EMPTY
        elif node.type is NodeType.EMPTY:
            node.type = NodeType.WALL
        else:
            return False
        return True

    def click(self, row: int, col: int) -> None:
        """
        Board click semantics:
          • clicking the source or target removes it
          • otherwise a missing source is placed first, then a missing target
          • with both endpoints set, the click toggles a wall
        """
        node = self.node(row, col)
        pos  = node.position

        if pos == self.source:
            node.type   = NodeType.EMPTY
            self.source = None
            return
        if pos == self.target:
            node.type   = NodeType.EMPTY
            self.target = None
            return
        if self.source is None:
            self.set_source(row, col)
            return
        if self.target is None:
            self.set_target(row, col)
            return
        self.toggle_wall(row, col)

    # ==================================================================
    # GENERATION / RESET
    # ==================================================================
    def generate_maze(
        self,
        probability: float = WALL_PROBABILITY,
        rng: Optional[random.Random] = None,
    ) -> "Grid":
        """
        Each cell other than source / target independently becomes a wall
        with `probability`; every other cell is emptied.  Solvability is
        not guaranteed.
        """
        rng = rng or random.Random()
        for node in self.all_nodes():
            if node.type in (NodeType.SOURCE, NodeType.TARGET):
                continue
            node.reset_search_state()
            node.type = NodeType.WALL if rng.random() < probability else NodeType.EMPTY
        return self

    def reset_search_state(self) -> None:
        """Keep walls and endpoints, clear everything a search wrote."""
        for node in self.all_nodes():
            node.reset_search_state()

    # ==================================================================
    # UTILITY
    # ==================================================================
    def wall_count(self) -> int:
        return sum(1 for n in self.all_nodes() if n.is_wall)

    def node_count(self) -> int:
        return self.rows * self.cols

    def to_dict(self) -> dict:
        return {
            "rows":   self.rows,
            "cols":   self.cols,
            "source": list(self.source) if self.source else None,
            "target": list(self.target) if self.target else None,
            "cells":  [[n.type.value for n in row] for row in self.nodes],
        }

    def __repr__(self) -> str:
        return f"Grid({self.rows}x{self.cols}, source={self.source}, target={self.target})"
