"""Layered execution plan over blocking dependencies.

Layers come from Kahn's algorithm run one frontier at a time: every open
issue whose open blockers all sit in earlier layers joins the next layer.
Closed issues are already done and never appear in a plan; blocking edges to
them, and dangling references, count as satisfied.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Collection, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .issues import Issue
from .merge import MergedUniverse
from .services.errors import CycleError


@dataclass(frozen=True)
class Track:
    """Issues of one layer that can be worked in parallel."""

    layer: int
    issue_ids: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.issue_ids)


@dataclass(frozen=True)
class Plan:
    """Ordered tracks, layer 0 first.

    ``layers`` holds the layer of every open issue in the full graph, also
    those hidden by a repo filter.
    """

    tracks: tuple[Track, ...]
    layers: Mapping[str, int]

    @property
    def issue_count(self) -> int:
        return sum(len(track) for track in self.tracks)

    def layer_of(self, issue_id: str) -> int | None:
        return self.layers.get(issue_id)


def track_sort_key(issue: Issue) -> tuple[int, str]:
    """Priority first (lower is more urgent), then final ID."""
    return (issue.priority, issue.id)


def find_cycle(residual: Collection[str], dependencies: Mapping[str, tuple[str, ...]]) -> list[str]:
    """Return one concrete cycle among ``residual`` issues.

    Every residual issue still waits on another residual issue, so walking
    dependencies inside the residual set must revisit a node. The walk starts
    at the smallest ID and always takes the smallest dependency, which keeps
    the reported cycle stable across runs.

    Example:
        >>> find_cycle({"a", "b", "c"}, {"a": ("b",), "b": ("c",), "c": ("b",)})
        ['b', 'c']
    """
    remaining = set(residual)
    if not remaining:
        return []
    node = min(remaining)
    path: list[str] = []
    position: dict[str, int] = {}
    while node not in position:
        position[node] = len(path)
        path.append(node)
        candidates = [dep for dep in dependencies.get(node, ()) if dep in remaining]
        if not candidates:
            raise ValueError(f"issue {node!r} is unresolved but has no unresolved dependency")
        node = min(candidates)
    return path[position[node] :]


def compute_layers(universe: MergedUniverse) -> dict[str, int]:
    """Assign a layer to every open issue of the universe.

    Raises:
        CycleError: Blocking dependencies among open issues form a cycle.
    """
    open_ids = [issue_id for issue_id, issue in universe.issues.items() if not issue.is_closed]
    dependencies = {issue_id: universe.open_blockers(issue_id) for issue_id in open_ids}
    in_degree = {issue_id: len(deps) for issue_id, deps in dependencies.items()}
    dependents: dict[str, list[str]] = defaultdict(list)
    for issue_id, deps in dependencies.items():
        for dep in deps:
            dependents[dep].append(issue_id)

    layers: dict[str, int] = {}
    frontier = sorted(issue_id for issue_id, degree in in_degree.items() if degree == 0)
    layer = 0
    while frontier:
        next_frontier: list[str] = []
        for issue_id in frontier:
            layers[issue_id] = layer
            for dependent in dependents[issue_id]:
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    next_frontier.append(dependent)
        frontier = sorted(next_frontier)
        layer += 1

    residual = [issue_id for issue_id in open_ids if issue_id not in layers]
    if residual:
        raise CycleError(find_cycle(residual, dependencies), unresolved=residual)
    return layers


def compute_plan(universe: MergedUniverse) -> Plan:
    """Compute the execution plan for the visible part of ``universe``.

    Layers are computed over the full graph so that filtered issues keep
    their true position; tracks only list visible issues and empty tracks
    are dropped.

    Raises:
        CycleError: Blocking dependencies among open issues form a cycle.
    """
    layers = compute_layers(universe)
    grouped: dict[int, list[Issue]] = defaultdict(list)
    for issue in universe.visible_issues():
        layer = layers.get(issue.id)
        if layer is None:
            continue
        grouped[layer].append(issue)
    tracks = tuple(
        Track(
            layer=layer,
            issue_ids=tuple(issue.id for issue in sorted(grouped[layer], key=track_sort_key)),
        )
        for layer in sorted(grouped)
    )
    return Plan(tracks=tracks, layers=MappingProxyType(layers))
