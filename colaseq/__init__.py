from .layout import (
    Above,
    Aligned,
    Atom,
    Constraint,
    Instance,
    InstanceLayout,
    LayoutEdge,
    LayoutGroup,
    LayoutNode,
    LeftOf,
    Relation,
    RelationTuple,
)
from .validate import validate_layout, ValidationError
from .compiler import (
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
    collapse_symmetric_edges,
    compile_constraint,
    compile_layout,
    get_compiler_config,
    resolve_groups,
    set_compiler_config,
)
from .sequence import (
    ChangeAnalysis,
    ChangeEmphasisPolicy,
    IgnoreHistoryPolicy,
    LayoutState,
    RandomPositioningPolicy,
    SequencePolicyContext,
    SequencePolicyResult,
    StabilityMemory,
    StabilityPolicy,
    Transform,
    ViewportBounds,
    analyze_node_changes,
    get_sequence_policy,
    realize_hints,
    register_sequence_policy,
    run_sequence,
)

__all__ = [
    'Above',
    'Aligned',
    'Atom',
    'Constraint',
    'Instance',
    'InstanceLayout',
    'LayoutEdge',
    'LayoutGroup',
    'LayoutNode',
    'LeftOf',
    'Relation',
    'RelationTuple',
    'validate_layout',
    'ValidationError',
    'ColaEdge',
    'ColaLayout',
    'ColaNode',
    'CompilationError',
    'CompileOptions',
    'CompilerConfig',
    'DanglingNodeReference',
    'GroupDefinition',
    'SeparationConstraint',
    'UnrecognizedConstraintKind',
    'UnsupportedGroupOverlap',
    'collapse_symmetric_edges',
    'compile_constraint',
    'compile_layout',
    'get_compiler_config',
    'resolve_groups',
    'set_compiler_config',
    'ChangeAnalysis',
    'ChangeEmphasisPolicy',
    'IgnoreHistoryPolicy',
    'LayoutState',
    'RandomPositioningPolicy',
    'SequencePolicyContext',
    'SequencePolicyResult',
    'StabilityMemory',
    'StabilityPolicy',
    'Transform',
    'ViewportBounds',
    'analyze_node_changes',
    'get_sequence_policy',
    'realize_hints',
    'register_sequence_policy',
    'run_sequence',
]
