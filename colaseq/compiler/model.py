"""Core data structures for the constraint compiler."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..layout import Axis, NodeId


class CompilationError(ValueError):
    """Raised when an abstract layout cannot be expressed to the solver."""


class UnrecognizedConstraintKind(CompilationError):
    """Raised when a constraint is not one of the supported variants."""

    def __init__(self, constraint: object):
        super().__init__(f"Constraint type not recognized: {type(constraint).__name__}")
        self.constraint = constraint


class DanglingNodeReference(CompilationError):
    """Raised when a constraint or group names a node absent from the layout."""

    def __init__(self, node_id: str, context: str):
        super().__init__(f"Unknown node '{node_id}' referenced by {context}")
        self.node_id = node_id
        self.context = context


class UnsupportedGroupOverlap(CompilationError):
    """Raised when two groups intersect without one containing the other."""

    def __init__(self, first: str, second: str, shared: List[str]):
        super().__init__(
            f"Groups '{first}' and '{second}' overlap without nesting "
            f"(shared nodes: {', '.join(shared)}); the solver cannot express this"
        )
        self.first = first
        self.second = second
        self.shared = shared


@dataclass
class SeparationConstraint:
    """Minimum (or exact, when ``equality``) distance between two nodes on one axis."""

    axis: Axis
    left: int
    right: int
    gap: float
    equality: bool = False
    type: str = "separation"


@dataclass
class GroupDefinition:
    name: str
    leaves: List[int]
    padding: float
    groups: List[int] = field(default_factory=list)
    key_node: Optional[int] = None
    show_label: bool = True
    source_names: List[str] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.name


@dataclass
class ColaNode:
    id: NodeId
    index: int
    width: float
    height: float
    x: float
    y: float
    fixed: bool = False
    label: str = ""
    color: str = "black"
    most_specific_type: str = ""
    attributes: Dict[str, List[str]] = field(default_factory=dict)
    icon: str = ""
    show_labels: bool = True


@dataclass
class ColaEdge:
    source: int
    target: int
    relation_name: str
    id: str
    label: str
    color: str = "black"
    bidirectional: bool = False


@dataclass
class ColaLayout:
    """Solver-ready compilation of one abstract layout."""

    nodes: List[ColaNode]
    edges: List[ColaEdge]
    constraints: List[SeparationConstraint]
    groups: List[GroupDefinition]
    node_index: Dict[NodeId, int] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def node(self, node_id: NodeId) -> ColaNode:
        try:
            return self.nodes[self.node_index[node_id]]
        except KeyError as exc:
            raise KeyError(f"Unknown node '{node_id}' in compiled layout") from exc

    def default_seeds(self) -> Dict[NodeId, tuple]:
        """Return the compiled start position of every node."""

        return {node.id: (node.x, node.y) for node in self.nodes}


@dataclass
class CompileOptions:
    """Per-call compiler options."""

    fig_width: float = 800.0
    fig_height: float = 800.0
    layered_seed: bool = True
    config: Optional["CompilerConfig"] = None


@dataclass
class CompilerConfig:
    default_padding: float = 10.0
    disconnected_padding: float = 30.0
    disconnected_prefix: str = "_d_"
    group_name_separator: str = " | "
    default_node_width: float = 100.0
    default_node_height: float = 60.0
    alignment_jitter: float = 0.0
    node_sep: float = 50.0
    rank_sep: float = 100.0


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
]
