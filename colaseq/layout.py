"""Abstract layout and data-instance types consumed by the compiler."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence, Union

from typing import Literal

NodeId = str
Axis = Literal["x", "y"]


@dataclass
class LayoutNode:
    id: NodeId
    width: float = 100.0
    height: float = 60.0
    label: str = ""
    color: str = "black"
    most_specific_type: str = ""
    types: List[str] = field(default_factory=list)
    attributes: Dict[str, List[str]] = field(default_factory=dict)
    icon: str = ""
    show_labels: bool = True
    pinned: bool = False


@dataclass
class LayoutEdge:
    source: NodeId
    target: NodeId
    relation_name: str
    label: str
    id: str
    color: str = "black"
    bidirectional: bool = False


@dataclass
class LayoutGroup:
    name: str
    node_ids: List[NodeId]
    key_node_id: Optional[NodeId] = None
    show_label: bool = True


@dataclass(frozen=True)
class LeftOf:
    left: NodeId
    right: NodeId
    min_distance: float = 0.0


@dataclass(frozen=True)
class Above:
    top: NodeId
    bottom: NodeId
    min_distance: float = 0.0


@dataclass(frozen=True)
class Aligned:
    axis: Axis
    node_a: NodeId
    node_b: NodeId


Constraint = Union[LeftOf, Above, Aligned]


def constraint_node_ids(constraint: Constraint) -> tuple:
    """Return the node ids referenced by ``constraint`` in declaration order."""

    if isinstance(constraint, LeftOf):
        return (constraint.left, constraint.right)
    if isinstance(constraint, Above):
        return (constraint.top, constraint.bottom)
    if isinstance(constraint, Aligned):
        return (constraint.node_a, constraint.node_b)
    return ()


@dataclass
class InstanceLayout:
    """Abstract layout produced by the evaluator for one data snapshot."""

    nodes: List[LayoutNode] = field(default_factory=list)
    edges: List[LayoutEdge] = field(default_factory=list)
    groups: List[LayoutGroup] = field(default_factory=list)
    constraints: List[Constraint] = field(default_factory=list)

    @property
    def node_ids(self) -> List[NodeId]:
        return [node.id for node in self.nodes]


# ----------------------------------------------------------------------
# Data instances (relational snapshots)


class AtomLike(Protocol):
    id: str


class TupleLike(Protocol):
    atoms: Sequence[str]


class RelationLike(Protocol):
    name: str
    tuples: Sequence[TupleLike]


class DataInstance(Protocol):
    """Relational snapshot the sequence policies diff against."""

    def get_atoms(self) -> Sequence[AtomLike]:
        ...

    def get_relations(self) -> Sequence[RelationLike]:
        ...


@dataclass(frozen=True)
class Atom:
    id: str
    type: str = ""


@dataclass(frozen=True)
class RelationTuple:
    atoms: tuple


@dataclass
class Relation:
    name: str
    tuples: List[RelationTuple] = field(default_factory=list)


@dataclass
class Instance:
    """Plain in-memory :class:`DataInstance`."""

    atoms: List[Atom] = field(default_factory=list)
    relations: List[Relation] = field(default_factory=list)

    def get_atoms(self) -> List[Atom]:
        return self.atoms

    def get_relations(self) -> List[Relation]:
        return self.relations

    @classmethod
    def build(
        cls,
        atom_ids: Iterable[str],
        relations: Optional[Dict[str, Iterable[Sequence[str]]]] = None,
        atom_type: str = "",
    ) -> "Instance":
        """Build an instance from atom ids and ``{relation: [tuple, ...]}``."""

        atoms = [Atom(id=str(atom_id), type=atom_type) for atom_id in atom_ids]
        rels: List[Relation] = []
        for name, tuples in (relations or {}).items():
            rels.append(
                Relation(
                    name=name,
                    tuples=[RelationTuple(atoms=tuple(str(a) for a in tup)) for tup in tuples],
                )
            )
        return cls(atoms=atoms, relations=rels)


def describe(value: Any) -> str:
    """Short human-readable summary used in log messages."""

    if isinstance(value, InstanceLayout):
        return (
            f"InstanceLayout(nodes={len(value.nodes)}, edges={len(value.edges)}, "
            f"groups={len(value.groups)}, constraints={len(value.constraints)})"
        )
    return repr(value)


__all__ = [
    "Above",
    "Aligned",
    "Atom",
    "Axis",
    "Constraint",
    "DataInstance",
    "Instance",
    "InstanceLayout",
    "LayoutEdge",
    "LayoutGroup",
    "LayoutNode",
    "LeftOf",
    "NodeId",
    "Relation",
    "RelationTuple",
    "constraint_node_ids",
    "describe",
]
