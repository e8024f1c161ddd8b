"""Built-in sequence policies.

A sequence policy receives the layout state rendered for the previous
snapshot together with the previous and current data instances, and
returns the state the solver should be seeded with for the current
snapshot. Every built-in except :class:`StabilityPolicy` is a pure function
of its inputs; the stability policy carries a bounded recall memory held in
an explicit :class:`StabilityMemory` object, one per rendering sequence.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from ..seeding import seeded_unit
from .changes import analyze_node_changes
from .model import (
    Coord,
    LayoutState,
    SequencePolicyContext,
    SequencePolicyResult,
    ViewportBounds,
)
from .utils import clamp, resolve_viewport_bounds

logger = logging.getLogger(__name__)

JITTER_BASE_RADIUS = 36.0
JITTER_EXTRA_RADIUS = 30.0
JITTER_FULL_INTENSITY = 4.0
JITTER_RADIUS_SCALE_MIN = 0.85
JITTER_RADIUS_SCALE_SPAN = 0.30
CLAMP_NUDGE = 24.0


class IgnoreHistoryPolicy:
    """Fresh layout every step; prior state is never used."""

    name = "ignore_history"

    def apply(self, context: SequencePolicyContext) -> SequencePolicyResult:
        return SequencePolicyResult(effective_prior_state=None, use_reduced_iterations=False)


@dataclass
class StabilityConfig:
    max_reappearance_gap_steps: int = 2
    max_cache_size: int = 5000


@dataclass
class RememberedPosition:
    x: float
    y: float
    step: int


@dataclass
class StabilityMemory:
    """Recall cache of a single rendering sequence.

    Two diagrams rendered independently must never share a memory object.
    """

    positions: Dict[str, RememberedPosition] = field(default_factory=dict)
    step: int = 0

    def reset(self) -> None:
        self.positions.clear()
        self.step = 0

    def __len__(self) -> int:
        return len(self.positions)


class StabilityPolicy:
    """Keep prior positions and recall nodes that were briefly absent.

    Behaviour callers should know about:

    * An empty prior state wipes the memory and restarts the step counter.
      This marks a fresh sequence start; it is not an error and not a leak
      fix. A single blank frame therefore forgets all recall built so far.
    * A recalled node has its memory entry refreshed to the current step,
      so a node that keeps flickering in and out never ages out through the
      gap rule; only capacity eviction removes it.
    * When the memory exceeds ``max_cache_size``, entries past the
      reappearance window go first, then the oldest entries (ties broken by
      id) until the cap is met.
    """

    name = "stability"

    def __init__(
        self,
        config: Optional[StabilityConfig] = None,
        memory: Optional[StabilityMemory] = None,
    ) -> None:
        self.config = config or StabilityConfig()
        self.memory = memory if memory is not None else StabilityMemory()

    def _expired(self, remembered: RememberedPosition) -> bool:
        return (self.memory.step - remembered.step) > self.config.max_reappearance_gap_steps

    def _evict(self) -> None:
        cache = self.memory.positions
        if len(cache) <= self.config.max_cache_size:
            return

        before = len(cache)
        for node_id in [k for k, v in cache.items() if self._expired(v)]:
            del cache[node_id]

        overflow = len(cache) - self.config.max_cache_size
        if overflow > 0:
            victims = sorted(cache.items(), key=lambda item: (item[1].step, item[0]))[:overflow]
            for node_id, _ in victims:
                del cache[node_id]
        logger.debug("stability: evicted %d cache entries", before - len(cache))

    def apply(self, context: SequencePolicyContext) -> SequencePolicyResult:
        prior = context.prior_state
        memory = self.memory
        if prior.is_empty():
            if memory.positions or memory.step:
                logger.info("stability: empty prior state, starting a fresh sequence")
            memory.reset()
        memory.step += 1
        step = memory.step

        for node_id, (x, y) in prior.positions.items():
            memory.positions[node_id] = RememberedPosition(x=x, y=y, step=step)

        stable: Dict[str, Coord] = {}
        recalled = 0
        for atom in context.curr_instance.get_atoms():
            direct = prior.positions.get(atom.id)
            if direct is not None:
                stable[atom.id] = direct
                continue
            remembered = memory.positions.get(atom.id)
            if remembered is None or self._expired(remembered):
                continue
            stable[atom.id] = (remembered.x, remembered.y)
            recalled += 1

        for node_id, (x, y) in stable.items():
            memory.positions[node_id] = RememberedPosition(x=x, y=y, step=step)

        self._evict()
        logger.debug(
            "stability: step=%d hints=%d recalled=%d cache=%d",
            step,
            len(stable),
            recalled,
            len(memory),
        )
        return SequencePolicyResult(
            effective_prior_state=LayoutState(positions=stable, transform=prior.transform),
            use_reduced_iterations=True,
        )


def jitter_changed_position(
    node_id: str,
    x: float,
    y: float,
    intensity: float,
    signature: str,
    bounds: ViewportBounds,
) -> Coord:
    """Move a changed node by a reproducible, clearly visible offset.

    The pre-clamp radius lies in roughly ``[30.6, 75.9]`` px and grows with
    ``intensity`` up to 4 diff units. If clamping to ``bounds`` cancels the
    move, the node is nudged toward the viewport centre instead.
    """

    theta = 2.0 * math.pi * seeded_unit(f"theta|{node_id}|{signature}")
    intensity_factor = min(1.0, float(intensity) / JITTER_FULL_INTENSITY)
    base_radius = JITTER_BASE_RADIUS + JITTER_EXTRA_RADIUS * intensity_factor
    radius_scale = JITTER_RADIUS_SCALE_MIN + JITTER_RADIUS_SCALE_SPAN * seeded_unit(
        f"radius|{node_id}|{signature}"
    )
    radius = base_radius * radius_scale

    next_x = clamp(x + math.cos(theta) * radius, bounds.min_x, bounds.max_x)
    next_y = clamp(y + math.sin(theta) * radius, bounds.min_y, bounds.max_y)

    if next_x == x and next_y == y:
        cx, cy = bounds.center
        next_x = clamp(x + (CLAMP_NUDGE if cx >= x else -CLAMP_NUDGE), bounds.min_x, bounds.max_x)
        next_y = clamp(y + (CLAMP_NUDGE if cy >= y else -CLAMP_NUDGE), bounds.min_y, bounds.max_y)

    return next_x, next_y


class ChangeEmphasisPolicy:
    """Pin stable nodes and jitter changed ones so the change is visible.

    New atoms receive no hint (the solver places them freely) and removed
    atoms are dropped. There is no recall across steps: a node absent for one
    step comes back as new.
    """

    name = "change_emphasis"

    def apply(self, context: SequencePolicyContext) -> SequencePolicyResult:
        prior = context.prior_state
        analysis = analyze_node_changes(context.prev_instance, context.curr_instance)
        if not analysis.changed_ids:
            return SequencePolicyResult(effective_prior_state=prior, use_reduced_iterations=True)

        bounds = resolve_viewport_bounds(prior, context.viewport_bounds)
        curr_ids = {atom.id for atom in context.curr_instance.get_atoms()}

        emphasized: Dict[str, Coord] = {}
        jittered = 0
        for node_id, (x, y) in prior.positions.items():
            if node_id not in curr_ids:
                continue
            if not analysis.is_changed(node_id):
                emphasized[node_id] = (x, y)
                continue
            emphasized[node_id] = jitter_changed_position(
                node_id,
                x,
                y,
                analysis.intensity(node_id) or 1,
                analysis.signature(node_id),
                bounds,
            )
            jittered += 1

        logger.debug("change-emphasis: hints=%d jittered=%d", len(emphasized), jittered)
        return SequencePolicyResult(
            effective_prior_state=LayoutState(positions=emphasized, transform=prior.transform),
            use_reduced_iterations=True,
        )


class RandomPositioningPolicy:
    """Scatter every current node uniformly inside the viewport.

    Non-deterministic unless ``seed`` is given; meant as a solver stress
    baseline.
    """

    name = "random_positioning"

    def __init__(self, seed: Optional[int] = None) -> None:
        self.rng = np.random.default_rng(seed)

    def apply(self, context: SequencePolicyContext) -> SequencePolicyResult:
        prior = context.prior_state
        bounds = resolve_viewport_bounds(prior, context.viewport_bounds)
        width = max(1.0, bounds.width)
        height = max(1.0, bounds.height)

        atom_ids: List[str] = [atom.id for atom in context.curr_instance.get_atoms()]
        samples = self.rng.random((len(atom_ids), 2))
        positions = {
            atom_id: (bounds.min_x + float(u) * width, bounds.min_y + float(v) * height)
            for atom_id, (u, v) in zip(atom_ids, samples)
        }
        return SequencePolicyResult(
            effective_prior_state=LayoutState(positions=positions, transform=prior.transform),
            use_reduced_iterations=True,
        )


__all__ = [
    "ChangeEmphasisPolicy",
    "IgnoreHistoryPolicy",
    "RandomPositioningPolicy",
    "RememberedPosition",
    "StabilityConfig",
    "StabilityMemory",
    "StabilityPolicy",
    "jitter_changed_position",
]
