from __future__ import annotations

from collections import deque
from typing import Dict, Iterator, List, Set, Tuple

import networkx as nx

from .schema import CycleDetectionResult


def has_cycle(g: nx.DiGraph) -> bool:
    """DFS with an explicit stack; a successor still on the active path is a back edge."""
    visited: Set[str] = set()
    on_path: Set[str] = set()

    for root in g.nodes():
        if root in visited:
            continue
        visited.add(root)
        on_path.add(root)
        stack: List[Tuple[str, Iterator[str]]] = [(root, iter(g.successors(root)))]

        while stack:
            cur, successors = stack[-1]
            advanced = False
            for nb in successors:
                if nb in on_path:
                    return True
                if nb not in visited:
                    visited.add(nb)
                    on_path.add(nb)
                    stack.append((nb, iter(g.successors(nb))))
                    advanced = True
                    break
            if not advanced:
                stack.pop()
                on_path.discard(cur)

    return False


def kahn_toposort(g: nx.DiGraph) -> CycleDetectionResult:
    """Kahn ordering; nodes never released from the queue sit on or behind a cycle."""
    remaining: Dict[str, int] = dict(g.in_degree())

    entry_nodes = [n for n, d in remaining.items() if d == 0 and g.out_degree(n) > 0]
    terminal_nodes = [n for n, d in g.out_degree() if d == 0 and g.in_degree(n) > 0]

    q: deque[str] = deque(n for n, d in remaining.items() if d == 0)
    order: List[str] = []
    while q:
        cur = q.popleft()
        order.append(cur)
        for nb in g.successors(cur):
            remaining[nb] -= 1
            if remaining[nb] == 0:
                q.append(nb)

    success = len(order) == g.number_of_nodes()
    return CycleDetectionResult(
        success=success,
        order=order,
        cyclic_nodes=[] if success else [n for n, d in remaining.items() if d > 0],
        entry_nodes=entry_nodes,
        terminal_nodes=terminal_nodes,
    )
