"""Temporal continuity: change analysis and solver seeding across snapshots."""

from .changes import analyze_node_changes, build_fingerprints, removed_neighbor_loss
from .hints import (
    CHANGE_EMPHASIS_JITTER_RADIUS,
    HINT_REALIZATIONS,
    HintRealization,
    HintSet,
    baseline_hints,
    change_emphasis_hints,
    deterministic_jitter,
    realize_hints,
    transport_pan_zoom_hints,
)
from .model import (
    ChangeAnalysis,
    LayoutState,
    NodeChange,
    NodePositionHint,
    SequencePolicy,
    SequencePolicyContext,
    SequencePolicyResult,
    Transform,
    ViewportBounds,
)
from .policies import (
    ChangeEmphasisPolicy,
    IgnoreHistoryPolicy,
    RandomPositioningPolicy,
    StabilityConfig,
    StabilityMemory,
    StabilityPolicy,
    jitter_changed_position,
)
from .registry import (
    SequencePolicyRegistry,
    default_registry,
    get_sequence_policy,
    normalize_policy_name,
    register_sequence_policy,
)
from .runner import SequenceFrame, SequenceStep, run_sequence
from .utils import resolve_viewport_bounds

__all__ = [
    "CHANGE_EMPHASIS_JITTER_RADIUS",
    "ChangeAnalysis",
    "HINT_REALIZATIONS",
    "HintRealization",
    "ChangeEmphasisPolicy",
    "HintSet",
    "IgnoreHistoryPolicy",
    "LayoutState",
    "NodeChange",
    "NodePositionHint",
    "RandomPositioningPolicy",
    "SequenceFrame",
    "SequencePolicy",
    "SequencePolicyContext",
    "SequencePolicyRegistry",
    "SequencePolicyResult",
    "SequenceStep",
    "StabilityConfig",
    "StabilityMemory",
    "StabilityPolicy",
    "Transform",
    "ViewportBounds",
    "analyze_node_changes",
    "baseline_hints",
    "build_fingerprints",
    "change_emphasis_hints",
    "default_registry",
    "deterministic_jitter",
    "get_sequence_policy",
    "jitter_changed_position",
    "normalize_policy_name",
    "realize_hints",
    "register_sequence_policy",
    "removed_neighbor_loss",
    "resolve_viewport_bounds",
    "run_sequence",
    "transport_pan_zoom_hints",
]
