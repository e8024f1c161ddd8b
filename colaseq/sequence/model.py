"""Data structures shared by the temporal continuity components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol, Set, Tuple

from typing import Literal

from ..layout import DataInstance, NodeId

Coord = Tuple[float, float]
ChangeStatus = Literal["new", "removed", "changed", "stable"]
IterationMode = Literal["default", "reduced"]


@dataclass(frozen=True)
class Transform:
    """Pan/zoom of the rendered view; carried through untouched."""

    k: float = 1.0
    x: float = 0.0
    y: float = 0.0


@dataclass
class LayoutState:
    """Node positions produced by one solve, keyed by node id."""

    positions: Dict[NodeId, Coord] = field(default_factory=dict)
    transform: Transform = field(default_factory=Transform)

    @classmethod
    def empty(cls) -> "LayoutState":
        return cls()

    def is_empty(self) -> bool:
        return not self.positions


@dataclass(frozen=True)
class ViewportBounds:
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Coord:
        return ((self.min_x + self.max_x) / 2.0, (self.min_y + self.max_y) / 2.0)

    def contains(self, point: Coord) -> bool:
        x, y = point
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y


@dataclass
class SequencePolicyContext:
    prior_state: LayoutState
    prev_instance: DataInstance
    curr_instance: DataInstance
    spec: Any = None
    viewport_bounds: Optional[ViewportBounds] = None


@dataclass
class SequencePolicyResult:
    """Effective seed state for the next solve (``None`` means a fresh solve)."""

    effective_prior_state: Optional[LayoutState]
    use_reduced_iterations: bool

    @property
    def iteration_mode(self) -> IterationMode:
        return "reduced" if self.use_reduced_iterations else "default"


class SequencePolicy(Protocol):
    """Strategy turning the previous frame plus an instance diff into seeds."""

    name: str

    def apply(self, context: SequencePolicyContext) -> SequencePolicyResult:
        ...


@dataclass(frozen=True)
class NodeChange:
    id: NodeId
    status: ChangeStatus
    intensity: int
    signature: str


@dataclass
class ChangeAnalysis:
    nodes: Dict[NodeId, NodeChange] = field(default_factory=dict)

    @property
    def changed_ids(self) -> Set[NodeId]:
        """Ids that are new, removed or changed."""

        return {node_id for node_id, change in self.nodes.items() if change.status != "stable"}

    def status(self, node_id: NodeId) -> Optional[ChangeStatus]:
        change = self.nodes.get(node_id)
        return change.status if change else None

    def is_changed(self, node_id: NodeId) -> bool:
        change = self.nodes.get(node_id)
        return change is not None and change.status != "stable"

    def intensity(self, node_id: NodeId) -> int:
        change = self.nodes.get(node_id)
        return change.intensity if change else 0

    def signature(self, node_id: NodeId) -> str:
        change = self.nodes.get(node_id)
        return change.signature if change else node_id


@dataclass(frozen=True)
class NodePositionHint:
    id: NodeId
    x: float
    y: float


__all__ = [
    "ChangeAnalysis",
    "ChangeStatus",
    "Coord",
    "IterationMode",
    "LayoutState",
    "NodeChange",
    "NodePositionHint",
    "SequencePolicy",
    "SequencePolicyContext",
    "SequencePolicyResult",
    "Transform",
    "ViewportBounds",
]
