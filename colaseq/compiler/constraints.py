"""Translation of abstract spatial constraints into separation constraints."""

from __future__ import annotations

import logging
from typing import List, Mapping, Optional, Sequence

from ..layout import Above, Aligned, Constraint, LeftOf, NodeId, constraint_node_ids
from ..seeding import seeded_unit
from .model import (
    ColaNode,
    CompilerConfig,
    DanglingNodeReference,
    SeparationConstraint,
    UnrecognizedConstraintKind,
)

logger = logging.getLogger(__name__)


def _width(node: ColaNode, config: CompilerConfig) -> float:
    return float(node.width or config.default_node_width)


def _height(node: ColaNode, config: CompilerConfig) -> float:
    return float(node.height or config.default_node_height)


def _resolve_indices(
    constraint: Constraint, node_index: Mapping[NodeId, int]
) -> List[int]:
    indices = []
    for node_id in constraint_node_ids(constraint):
        idx = node_index.get(node_id)
        if idx is None:
            raise DanglingNodeReference(node_id, f"constraint {constraint!r}")
        indices.append(idx)
    return indices


def _check_kind(constraint: Constraint) -> None:
    if not isinstance(constraint, (LeftOf, Above, Aligned)):
        raise UnrecognizedConstraintKind(constraint)
    if isinstance(constraint, Aligned) and constraint.axis not in ("x", "y"):
        raise UnrecognizedConstraintKind(constraint)


def alignment_gap(node_a: NodeId, node_b: NodeId, jitter: float) -> float:
    """Return the equality gap for an alignment between ``node_a`` and ``node_b``.

    With ``jitter`` > 0 the gap is a reproducible offset in ``[0, jitter)``
    derived from the ordered id pair; otherwise it is exactly zero.
    """

    if jitter <= 0.0:
        return 0.0
    return jitter * seeded_unit(f"align|{node_a}|{node_b}")


def compile_constraint(
    constraint: Constraint,
    node_index: Mapping[NodeId, int],
    nodes: Sequence[ColaNode],
    config: Optional[CompilerConfig] = None,
) -> SeparationConstraint:
    """Compile one abstract constraint into a solver separation constraint.

    Both referenced nodes are unpinned: a constraint governs them from now
    on. Unknown ids raise :class:`DanglingNodeReference` before any geometry
    is read.
    """

    config = config or CompilerConfig()
    _check_kind(constraint)

    first, second = _resolve_indices(constraint, node_index)
    node1 = nodes[first]
    node2 = nodes[second]
    node1.fixed = False
    node2.fixed = False

    if isinstance(constraint, LeftOf):
        gap = float(constraint.min_distance) + _width(node1, config) / 2 + _width(node2, config) / 2
        compiled = SeparationConstraint(axis="x", left=first, right=second, gap=gap)
    elif isinstance(constraint, Above):
        gap = float(constraint.min_distance) + _height(node1, config) / 2 + _height(node2, config) / 2
        compiled = SeparationConstraint(axis="y", left=first, right=second, gap=gap)
    else:
        compiled = SeparationConstraint(
            axis=constraint.axis,
            left=first,
            right=second,
            gap=alignment_gap(constraint.node_a, constraint.node_b, config.alignment_jitter),
            equality=True,
        )

    logger.debug(
        "constraint %s -> separation axis=%s %d->%d gap=%.3f equality=%s",
        type(constraint).__name__,
        compiled.axis,
        compiled.left,
        compiled.right,
        compiled.gap,
        compiled.equality,
    )
    return compiled


def compile_constraints(
    constraints: Sequence[Constraint],
    node_index: Mapping[NodeId, int],
    nodes: Sequence[ColaNode],
    config: Optional[CompilerConfig] = None,
) -> List[SeparationConstraint]:
    """Compile every constraint, or none.

    Kinds and node references of the whole batch are checked before any
    node is unpinned.
    """

    for constraint in constraints:
        _check_kind(constraint)
        _resolve_indices(constraint, node_index)
    compiled = [compile_constraint(c, node_index, nodes, config) for c in constraints]
    logger.info("Compiled %d constraints into separation constraints", len(compiled))
    return compiled
