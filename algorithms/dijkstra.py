"""
dijkstra.py — Dijkstra's Shortest Path on a Grid
=================================================
Classic relaxation over every node of the grid with an explicit
unvisited list that is re-sorted by distance each iteration.  Edge
weight is 1 (4-connected, no diagonals).

Terminates when:
  • the target is settled, or
  • the closest remaining node has distance ∞ (the rest is unreachable).

Returns the settled nodes in visitation order; the path itself is read
back from the `previous` keys by algorithms.path.shortest_path().
"""

import logging
from typing import List

from grid import Grid, GridNode, INF

logger = logging.getLogger(__name__)


def dijkstra(grid: Grid, source: GridNode, target: GridNode) -> List[GridNode]:
    visited: List[GridNode] = []
    source.distance = 0
    unvisited = list(grid.all_nodes())

    while unvisited:
        unvisited.sort(key=lambda n: n.distance)
        closest = unvisited.pop(0)

        if closest.distance == INF:
            break

        closest.is_visited = True
        visited.append(closest)

        if closest is target:
            break

        for nbr in grid.neighbours(closest):
            tentative = closest.distance + 1
            if tentative < nbr.distance:
                nbr.distance = tentative
                nbr.previous = closest.position

    logger.debug("dijkstra settled %d nodes", len(visited))
    return visited
