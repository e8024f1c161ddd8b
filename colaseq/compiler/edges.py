"""Collapsing of symmetric edge pairs into single bidirectional edges."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, FrozenSet, List, Sequence, Set

from ..layout import LayoutEdge

logger = logging.getLogger(__name__)


def collapse_symmetric_edges(edges: Sequence[LayoutEdge]) -> List[LayoutEdge]:
    """Merge exact reverse pairs with identical labels into one bidirectional edge.

    A node pair is collapsed only when it carries exactly one edge in each
    direction and both edges share a label. The merged edge takes the place,
    id and orientation of the first edge of the pair. Every other
    configuration is returned untouched.
    """

    by_pair: Dict[FrozenSet[str], List[int]] = {}
    for idx, edge in enumerate(edges):
        if edge.source == edge.target:
            continue
        by_pair.setdefault(frozenset((edge.source, edge.target)), []).append(idx)

    merged_into: Dict[int, LayoutEdge] = {}
    dropped: Set[int] = set()
    for indices in by_pair.values():
        if len(indices) != 2:
            continue
        first, second = (edges[i] for i in indices)
        if first.source != second.target or first.target != second.source:
            continue
        if first.label != second.label:
            continue
        merged_into[indices[0]] = replace(first, bidirectional=True)
        dropped.add(indices[1])

    result: List[LayoutEdge] = []
    for idx, edge in enumerate(edges):
        if idx in dropped:
            continue
        result.append(merged_into.get(idx, edge))

    if merged_into:
        logger.info("Collapsed %d symmetric edge pairs", len(merged_into))
    return result
