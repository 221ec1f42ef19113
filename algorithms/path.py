"""
path.py — Path Reconstruction & Path Step Sequence
===================================================
Shared by every pathfinding algorithm:

  • shortest_path()  walks `previous` keys from target back to source
  • run_search()     resets the grid, runs one algorithm, returns both lists
  • path_steps()     turns (visited, path) into the lazy PathStep sequence
                     the playback driver replays:
                         visit × len(visited)  →  clear  →  path × len(path)  →  done
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Generator, List

from grid import Grid, GridNode, NodeType
from algorithms.step import PathStep, PATH_VISIT, PATH_CLEAR, PATH_DRAW, PATH_DONE
from algorithms.dijkstra import dijkstra
from algorithms.astar import astar
from algorithms.bfs import bfs


SearchFn = Callable[[Grid, GridNode, GridNode], List[GridNode]]

SEARCHES: Dict[str, SearchFn] = {
    "dijkstra": dijkstra,
    "astar":    astar,
    "bfs":      bfs,
}


@dataclass
class SearchResult:
    visited: List[GridNode] = field(default_factory=list)
    path:    List[GridNode] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return bool(self.path)


def shortest_path(grid: Grid, target: GridNode) -> List[GridNode]:
    """Source → target node list, or [] when the target was never reached."""
    if target is None or not target.is_visited:
        return []
    path: List[GridNode] = []
    current = target
    # a chain longer than the grid would mean a cycle
    for _ in range(grid.node_count()):
        path.append(current)
        if current.previous is None:
            break
        current = grid.at(current.previous)
    else:
        raise RuntimeError("previous-node chain does not terminate")
    path.reverse()
    return path


def run_search(grid: Grid, algorithm: str) -> SearchResult:
    search = SEARCHES.get(algorithm)
    if search is None:
        raise ValueError(f"Unknown pathfinding algorithm: {algorithm}")
    source, target = grid.source_node, grid.target_node
    if source is None or target is None:
        raise ValueError("Place a source and a target first")

    grid.reset_search_state()
    visited = search(grid, source, target)
    return SearchResult(visited=visited, path=shortest_path(grid, target))


def path_steps(result: SearchResult) -> Generator[PathStep, None, bool]:
    for node in result.visited:
        yield PathStep(
            kind=PATH_VISIT,
            position=node.position,
            description=f"Visiting node ({node.row}, {node.col})",
        )

    yield PathStep(kind=PATH_CLEAR, description="Clearing explored nodes")

    for node in result.path:
        yield PathStep(
            kind=PATH_DRAW,
            position=node.position,
            description=f"Path through ({node.row}, {node.col})",
        )

    if result.found:
        done = f"Shortest path found: {len(result.path)} nodes"
    else:
        done = "No path found: the target is unreachable"
    yield PathStep(kind=PATH_DONE, description=done, found=result.found)
    return result.found


def apply_path_step(grid: Grid, step: PathStep) -> None:
    """Mutate the grid's UI classification for one replayed step."""
    if step.kind == PATH_VISIT:
        node = grid.at(step.position)
        if node.type not in (NodeType.SOURCE, NodeType.TARGET):
            node.type = NodeType.VISITED
    elif step.kind == PATH_CLEAR:
        for node in grid.all_nodes():
            if node.type is NodeType.VISITED:
                node.type = NodeType.EMPTY
    elif step.kind == PATH_DRAW:
        node = grid.at(step.position)
        node.is_path = True
        if node.type not in (NodeType.SOURCE, NodeType.TARGET):
            node.type = NodeType.PATH
