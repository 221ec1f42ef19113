"""
bfs.py — Breadth-First Search on a Grid
========================================
Unweighted FIFO traversal.  A node is marked visited when it is
enqueued, not when it is dequeued, so it can never enter the queue
twice.  Nodes are reported in dequeue order.

With unit edge weights the first path to reach a node is a shortest one.
"""

import logging
from collections import deque
from typing import List

from grid import Grid, GridNode

logger = logging.getLogger(__name__)


def bfs(grid: Grid, source: GridNode, target: GridNode) -> List[GridNode]:
    visited: List[GridNode] = []
    source.is_visited = True
    source.distance   = 0
    queue = deque([source])

    while queue:
        current = queue.popleft()
        visited.append(current)

        if current is target:
            break

        for nbr in grid.neighbours(current):
            nbr.is_visited = True
            nbr.distance   = current.distance + 1
            nbr.previous   = current.position
            queue.append(nbr)

    logger.debug("bfs dequeued %d nodes", len(visited))
    return visited
