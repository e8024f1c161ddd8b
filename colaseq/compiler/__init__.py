"""Compiler façade turning abstract layouts into solver primitives."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..layout import InstanceLayout, LayoutEdge, NodeId, describe
from ..validate import validate_layout
from .config import effective_config, get_compiler_config, set_compiler_config
from .constraints import alignment_gap, compile_constraint, compile_constraints
from .edges import collapse_symmetric_edges
from .groups import check_group_overlaps, containment_graph, dedupe_groups, resolve_groups
from .model import (
    ColaEdge,
    ColaLayout,
    ColaNode,
    CompilationError,
    CompileOptions,
    CompilerConfig,
    DanglingNodeReference,
    GroupDefinition,
    SeparationConstraint,
    UnrecognizedConstraintKind,
    UnsupportedGroupOverlap,
)
from .seed import layered_positions

logger = logging.getLogger(__name__)


def _compile_nodes(
    layout: InstanceLayout, options: CompileOptions, config: CompilerConfig
) -> List[ColaNode]:
    seeds = None
    if options.layered_seed:
        seeds = layered_positions(
            layout.nodes, layout.edges, node_sep=config.node_sep, rank_sep=config.rank_sep
        )

    default_x = options.fig_width / 2.0
    default_y = options.fig_height / 2.0
    # Pre-positioned nodes stay put until a constraint governs them.
    pin_all = bool(seeds) and not layout.constraints

    nodes: List[ColaNode] = []
    for idx, node in enumerate(layout.nodes):
        x, y = (seeds or {}).get(node.id, (default_x, default_y))
        nodes.append(
            ColaNode(
                id=node.id,
                index=idx,
                width=float(node.width or config.default_node_width),
                height=float(node.height or config.default_node_height),
                x=float(x),
                y=float(y),
                fixed=pin_all or node.pinned,
                label=node.label,
                color=node.color,
                most_specific_type=node.most_specific_type,
                attributes=dict(node.attributes),
                icon=node.icon,
                show_labels=node.show_labels,
            )
        )
    return nodes


def _compile_edges(edges: List[LayoutEdge], node_index: Dict[NodeId, int]) -> List[ColaEdge]:
    return [
        ColaEdge(
            source=node_index[edge.source],
            target=node_index[edge.target],
            relation_name=edge.relation_name,
            id=edge.id,
            label=edge.label,
            color=edge.color,
            bidirectional=edge.bidirectional,
        )
        for edge in edges
    ]


def compile_layout(layout: InstanceLayout, options: Optional[CompileOptions] = None) -> ColaLayout:
    """Compile ``layout`` into nodes, edges, separation constraints and groups.

    Raises :class:`~colaseq.validate.ValidationError` for structurally broken
    input and :class:`CompilationError` subclasses when the layout cannot be
    expressed to the solver. Callers should treat either as an invalid
    layout rather than render a partial result.
    """

    options = options or CompileOptions()
    config = effective_config(options)
    logger.info("Compiling %s", describe(layout))

    validate_layout(layout)
    nodes = _compile_nodes(layout, options, config)
    node_index = {node.id: node.index for node in nodes}

    collapsed = collapse_symmetric_edges(layout.edges)
    edges = _compile_edges(collapsed, node_index)
    groups = resolve_groups(layout.groups, node_index, config)
    constraints = compile_constraints(layout.constraints, node_index, nodes, config)

    compiled = ColaLayout(
        nodes=nodes,
        edges=edges,
        constraints=constraints,
        groups=groups,
        node_index=node_index,
        metadata={"pinned": sum(1 for node in nodes if node.fixed)},
    )
    logger.info(
        "Compiled layout: %d nodes, %d edges, %d separation constraints, %d groups",
        len(nodes),
        len(edges),
        len(constraints),
        len(groups),
    )
    return compiled


__all__ = [
    "ColaEdge",
    "ColaLayout",
    "ColaNode",
    "CompilationError",
    "CompileOptions",
    "CompilerConfig",
    "DanglingNodeReference",
    "GroupDefinition",
    "SeparationConstraint",
    "UnrecognizedConstraintKind",
    "UnsupportedGroupOverlap",
    "alignment_gap",
    "check_group_overlaps",
    "collapse_symmetric_edges",
    "compile_constraint",
    "compile_constraints",
    "compile_layout",
    "containment_graph",
    "dedupe_groups",
    "get_compiler_config",
    "layered_positions",
    "resolve_groups",
    "set_compiler_config",
]
