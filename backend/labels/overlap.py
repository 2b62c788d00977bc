from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

from shapely.geometry import box as shapely_box
from shapely.strtree import STRtree

from markers.types import LabelCandidate, MarkerId, ScreenRect

logger = logging.getLogger(__name__)


class _Color(Enum):
    RED = 0
    BLUE = 1

    @property
    def opposite(self) -> "_Color":
        return _Color.BLUE if self is _Color.RED else _Color.RED


@dataclass(frozen=True)
class OverlapGraph:
    """
    Undirected graph of label candidates; an edge means the two label rects overlap.

    `nodes` keeps the host's insertion order (first occurrence of each id) and every
    adjacency list is ordered the same way.
    """

    nodes: list[MarkerId]
    rects: dict[MarkerId, ScreenRect]
    adjacency: dict[MarkerId, list[MarkerId]] = field(default_factory=dict)

    def neighbors(self, node: MarkerId) -> list[MarkerId]:
        return self.adjacency.get(node, [])

    @property
    def edge_count(self) -> int:
        return sum(len(v) for v in self.adjacency.values()) // 2


def build_overlap_graph(candidates: Iterable[LabelCandidate]) -> OverlapGraph:
    """
    Find every pair of overlapping label rects.

    An STRtree narrows the pairs down by envelope; the strict rect test then drops
    pairs that merely touch along an edge.
    """
    nodes: list[MarkerId] = []
    rects: dict[MarkerId, ScreenRect] = {}
    for c in candidates:
        if c.id in rects:
            continue
        nodes.append(c.id)
        rects[c.id] = c.rect.normalized()

    adjacency: dict[MarkerId, list[MarkerId]] = {n: [] for n in nodes}
    if len(nodes) < 2:
        return OverlapGraph(nodes=nodes, rects=rects, adjacency=adjacency)

    ordered_rects = [rects[n] for n in nodes]
    boxes = [shapely_box(*r.as_tuple()) for r in ordered_rects]
    tree = STRtree(boxes)

    for i, rect in enumerate(ordered_rects):
        for j in sorted(_to_int_list(tree.query(boxes[i]))):
            if j <= i:
                continue
            if rect.intersects(ordered_rects[j]):
                adjacency[nodes[i]].append(nodes[j])
                adjacency[nodes[j]].append(nodes[i])

    return OverlapGraph(nodes=nodes, rects=rects, adjacency=adjacency)


def resolve_visible_labels(
    candidates: Iterable[LabelCandidate],
    priority_id: MarkerId | None = None,
) -> set[MarkerId]:
    """
    Pick which labels to show so that no two shown labels overlap.

    Approximates a maximum independent set by 2-coloring each connected component
    of the overlap graph (BFS) and keeping the larger color class. Nodes on an odd
    cycle (an edge between two same-colored nodes) are evicted from both classes.

    The priority label (explicit `priority_id`, else the first candidate flagged
    `is_priority`) is always shown and all labels overlapping it are hidden.
    Ties between the two classes go to the class holding the component's first
    candidate in insertion order.
    """
    candidates = list(candidates)
    if not candidates:
        return set()

    graph = build_overlap_graph(candidates)

    priority = priority_id
    if priority is None:
        priority = next((c.id for c in candidates if c.is_priority), None)
    if priority is not None and priority not in graph.rects:
        priority = None

    visible: set[MarkerId] = set()
    colors: dict[MarkerId, _Color] = {}

    for root in graph.nodes:
        if root in colors:
            continue

        component, evicted = _color_component(graph, root, colors)
        blue = [n for n in component if colors[n] is _Color.BLUE and n not in evicted]
        red = [n for n in component if colors[n] is _Color.RED and n not in evicted]
        if evicted:
            logger.debug(
                "overlap graph not bipartite: evicted %d of %d labels",
                len(evicted),
                len(component),
            )

        if priority is not None and priority in component:
            blocked = set(graph.neighbors(priority))
            blue = _force_priority(blue, priority, blocked)
            red = _force_priority(red, priority, blocked)

        chosen = red if len(red) > len(blue) else blue
        visible.update(chosen)

    return visible


def _color_component(
    graph: OverlapGraph, root: MarkerId, colors: dict[MarkerId, _Color]
) -> tuple[list[MarkerId], set[MarkerId]]:
    colors[root] = _Color.BLUE
    component: list[MarkerId] = [root]
    evicted: set[MarkerId] = set()

    queue: deque[MarkerId] = deque([root])
    while queue:
        current = queue.popleft()
        for neighbor in graph.neighbors(current):
            seen = colors.get(neighbor)
            if seen is None:
                colors[neighbor] = colors[current].opposite
                component.append(neighbor)
                queue.append(neighbor)
            elif seen is colors[current]:
                # Odd cycle: neither endpoint can stay in its class.
                evicted.add(current)
                evicted.add(neighbor)

    return component, evicted


def _force_priority(
    members: list[MarkerId], priority: MarkerId, blocked: set[MarkerId]
) -> list[MarkerId]:
    out = [n for n in members if n not in blocked and n != priority]
    out.append(priority)
    return out


def _to_int_list(idxs: Any) -> list[int]:
    # Shapely STRtree returns numpy.ndarray of indices.
    if idxs is None:
        return []
    try:
        return [int(i) for i in idxs.tolist()]
    except AttributeError:
        return [int(i) for i in idxs]
