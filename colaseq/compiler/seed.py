"""Layered pre-positioning used as the solver's default start positions."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import networkx as nx

from ..layout import LayoutEdge, LayoutNode, NodeId

logger = logging.getLogger(__name__)

Coord = Tuple[float, float]


def build_edge_graph(nodes: Sequence[LayoutNode], edges: Sequence[LayoutEdge]) -> nx.DiGraph:
    graph = nx.DiGraph()
    for node in nodes:
        graph.add_node(node.id)
    for edge in edges:
        if edge.source in graph and edge.target in graph and edge.source != edge.target:
            graph.add_edge(edge.source, edge.target)
    return graph


def assign_layers(graph: nx.DiGraph) -> Dict[NodeId, int]:
    """Longest-path layer for every node; members of a cycle share a layer."""

    condensed = nx.condensation(graph)
    layer_of_component: Dict[int, int] = {}
    for component in nx.topological_sort(condensed):
        preds = list(condensed.predecessors(component))
        if not preds:
            layer_of_component[component] = 0
        else:
            layer_of_component[component] = max(layer_of_component[p] for p in preds) + 1

    mapping = condensed.graph["mapping"]
    return {node: layer_of_component[mapping[node]] for node in graph.nodes}


def layered_positions(
    nodes: Sequence[LayoutNode],
    edges: Sequence[LayoutEdge],
    *,
    node_sep: float = 50.0,
    rank_sep: float = 100.0,
) -> Optional[Dict[NodeId, Coord]]:
    """Return top-to-bottom layered centre positions, or ``None`` when empty."""

    if not nodes:
        return None

    graph = build_edge_graph(nodes, edges)
    layer_of = assign_layers(graph)

    layers: List[List[LayoutNode]] = [[] for _ in range(max(layer_of.values()) + 1)]
    for node in nodes:
        layers[layer_of[node.id]].append(node)

    positions: Dict[NodeId, Coord] = {}
    y_cursor = 0.0
    widest = max(
        sum(float(n.width or 0.0) for n in layer) + node_sep * max(len(layer) - 1, 0) for layer in layers
    )
    for layer in layers:
        if not layer:
            continue
        row_height = max(float(n.height or 0.0) for n in layer)
        row_width = sum(float(n.width or 0.0) for n in layer) + node_sep * (len(layer) - 1)
        x_cursor = (widest - row_width) / 2.0
        for node in layer:
            positions[node.id] = (x_cursor + float(node.width or 0.0) / 2.0, y_cursor + row_height / 2.0)
            x_cursor += float(node.width or 0.0) + node_sep
        y_cursor += row_height + rank_sep

    logger.info(
        "Layered seed placed %d nodes in %d layers", len(positions), len(layers)
    )
    return positions
