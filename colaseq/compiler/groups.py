"""Group deduplication and subgroup containment for solver group definitions."""

from __future__ import annotations

import logging
from itertools import combinations
from typing import Dict, FrozenSet, List, Mapping, Optional, Sequence

import networkx as nx

from ..layout import LayoutGroup, NodeId
from ..logging_utils import apply_debug_logging
from .model import (
    CompilerConfig,
    DanglingNodeReference,
    GroupDefinition,
    UnsupportedGroupOverlap,
)

logger = logging.getLogger(__name__)


class _MergedGroup:
    """A group after identical member sets have been folded together."""

    def __init__(self, source: LayoutGroup):
        self.names: List[str] = [source.name]
        self.node_ids: List[NodeId] = list(dict.fromkeys(source.node_ids))
        self.members: FrozenSet[NodeId] = frozenset(self.node_ids)
        self.key_node_id = source.key_node_id
        self.show_label = bool(source.show_label)

    def absorb(self, other: LayoutGroup) -> None:
        self.names.append(other.name)
        self.show_label = self.show_label or bool(other.show_label)

    def to_group(self, separator: str) -> LayoutGroup:
        return LayoutGroup(
            name=separator.join(self.names),
            node_ids=list(self.node_ids),
            key_node_id=self.key_node_id,
            show_label=self.show_label,
        )


def _merge_identical(groups: Sequence[LayoutGroup]) -> List[_MergedGroup]:
    merged: Dict[FrozenSet[NodeId], _MergedGroup] = {}
    for group in groups:
        key = frozenset(group.node_ids)
        existing = merged.get(key)
        if existing is None:
            merged[key] = _MergedGroup(group)
        else:
            existing.absorb(group)
    if len(merged) != len(groups):
        logger.info("Deduplicated %d groups into %d", len(groups), len(merged))
    return list(merged.values())


def dedupe_groups(groups: Sequence[LayoutGroup], separator: str = " | ") -> List[LayoutGroup]:
    """Collapse groups with identical member sets, keeping first-seen order.

    The merged name joins the source names with ``separator``; the label is
    shown if any source shows it; key node and member order come from the
    first source.
    """

    return [entry.to_group(separator) for entry in _merge_identical(groups)]


def check_group_overlaps(groups: Sequence[LayoutGroup]) -> None:
    """Raise :class:`UnsupportedGroupOverlap` for intersecting, non-nested groups."""

    for first, second in combinations(groups, 2):
        a = set(first.node_ids)
        b = set(second.node_ids)
        shared = a & b
        if not shared or a <= b or b <= a:
            continue
        raise UnsupportedGroupOverlap(first.name, second.name, sorted(shared))


def containment_graph(groups: Sequence[LayoutGroup]) -> nx.DiGraph:
    """Return the direct-subgroup graph over group positions (edge parent -> child).

    Nodes are indices into ``groups``, so merged groups that end up sharing a
    name stay distinct.

    A strict subset relation is registered only between a group and its
    nearest enclosing group; a group already reachable through another
    subgroup of the parent is not registered again.
    """

    graph = nx.DiGraph()
    member_sets = [frozenset(group.node_ids) for group in groups]
    graph.add_nodes_from(range(len(member_sets)))
    for parent, parent_members in enumerate(member_sets):
        for child, child_members in enumerate(member_sets):
            if parent != child and child_members and child_members < parent_members:
                graph.add_edge(parent, child)

    return nx.transitive_reduction(graph) if graph.number_of_edges() else graph


def group_padding(name: str, config: CompilerConfig) -> float:
    if name.startswith(config.disconnected_prefix):
        return config.disconnected_padding
    return config.default_padding


def _index_of(node_id: NodeId, node_index: Mapping[NodeId, int], group: str) -> int:
    try:
        return node_index[node_id]
    except KeyError:
        raise DanglingNodeReference(node_id, f"group '{group}'") from None


def resolve_groups(
    groups: Sequence[LayoutGroup],
    node_index: Mapping[NodeId, int],
    config: Optional[CompilerConfig] = None,
) -> List[GroupDefinition]:
    """Build solver group definitions with resolved nesting.

    Groups are deduplicated first; overlapping groups that do not nest are
    rejected. Each definition lists only its own leaves: nodes held by a
    direct subgroup belong to that subgroup.
    """

    config = config or CompilerConfig()
    if not groups:
        return []

    merged = _merge_identical(groups)
    deduped = [entry.to_group(config.group_name_separator) for entry in merged]
    check_group_overlaps(deduped)

    graph = containment_graph(deduped)

    definitions: List[GroupDefinition] = []
    for position, (group, entry) in enumerate(zip(deduped, merged)):
        member_indices = [_index_of(node_id, node_index, group.name) for node_id in group.node_ids]
        children = sorted(graph.successors(position))

        claimed = set()
        for child in children:
            claimed.update(deduped[child].node_ids)
        leaves = [
            idx for node_id, idx in zip(group.node_ids, member_indices) if node_id not in claimed
        ]

        key_node = None
        if group.key_node_id is not None:
            key_node = _index_of(group.key_node_id, node_index, group.name)

        definitions.append(
            GroupDefinition(
                name=group.name,
                leaves=leaves,
                padding=group_padding(group.name, config),
                groups=list(children),
                key_node=key_node,
                show_label=group.show_label,
                source_names=list(entry.names),
            )
        )
        logger.debug(
            "group=%s leaves=%d subgroups=%s key=%s",
            group.name,
            len(leaves),
            [deduped[child].name for child in children],
            key_node,
        )

    logger.info(
        "Resolved %d groups (%d nested)", len(definitions), graph.number_of_edges()
    )
    return definitions


apply_debug_logging(globals(), logger=logger, skip={"group_padding"})
