"""
astar.py — A* Search on a Grid
===============================
Same loop as Dijkstra, but the unvisited list is ordered by

    f(n) = g(n) + manhattan(n, target)

where g(n) (stored in `distance`) is the cost so far.  Manhattan distance
is admissible and consistent on a 4-connected unit grid, so the first
time the target is settled its g-score is optimal.

Ties on f are broken by the smaller h, which pulls the search toward the
target along equally good fronts.
"""

import logging
from typing import List

from grid import Grid, GridNode, INF

logger = logging.getLogger(__name__)


def astar(grid: Grid, source: GridNode, target: GridNode) -> List[GridNode]:
    visited: List[GridNode] = []
    source.distance = 0
    source.h_score  = source.manhattan(target)
    source.f_score  = source.h_score
    unvisited = list(grid.all_nodes())

    while unvisited:
        unvisited.sort(key=lambda n: (n.f_score, n.h_score))
        closest = unvisited.pop(0)

        if closest.f_score == INF:
            break

        closest.is_visited = True
        visited.append(closest)

        if closest is target:
            break

        for nbr in grid.neighbours(closest):
            tentative_g = closest.distance + 1
            if tentative_g < nbr.distance:
                nbr.distance = tentative_g
                nbr.h_score  = nbr.manhattan(target)
                nbr.f_score  = tentative_g + nbr.h_score
                nbr.previous = closest.position

    logger.debug("a* settled %d nodes", len(visited))
    return visited
