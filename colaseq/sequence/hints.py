"""Realization of prior positions into per-node solver hints.

These policies only choose start positions and the iteration budget; they
never change which constraints hold.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Literal, Mapping, Optional, Sequence, Set, Tuple

import numpy as np

from ..seeding import seeded_unit
from .model import (
    Coord,
    IterationMode,
    NodePositionHint,
    SequencePolicyResult,
    ViewportBounds,
)

logger = logging.getLogger(__name__)

EPSILON = 1e-6
CHANGE_EMPHASIS_JITTER_RADIUS = 18.0

HintRealization = Literal["baseline", "transport_pan_zoom", "change_emphasis"]
HINT_REALIZATIONS = ("baseline", "transport_pan_zoom", "change_emphasis")


@dataclass
class HintSet:
    hints: List[NodePositionHint] = field(default_factory=list)
    iteration_mode: IterationMode = "default"

    def as_dict(self) -> Dict[str, Coord]:
        return {hint.id: (hint.x, hint.y) for hint in self.hints}


def _bounds(points: Sequence[Coord]) -> Optional[ViewportBounds]:
    if not points:
        return None
    arr = np.asarray(points, dtype=float)
    min_x, min_y = arr.min(axis=0)
    max_x, max_y = arr.max(axis=0)
    return ViewportBounds(float(min_x), float(max_x), float(min_y), float(max_y))


def _degenerate(bounds: ViewportBounds) -> bool:
    return bounds.width <= EPSILON or bounds.height <= EPSILON


def baseline_hints(
    prev_positions: Optional[Mapping[str, Coord]],
    node_ids: Iterable[str],
    default_seeds: Mapping[str, Coord],
) -> HintSet:
    """Prior position when known, else the default seed, else no hint."""

    hints: List[NodePositionHint] = []
    for node_id in node_ids:
        point = (prev_positions or {}).get(node_id) or default_seeds.get(node_id)
        if point is not None:
            hints.append(NodePositionHint(id=node_id, x=float(point[0]), y=float(point[1])))
    return HintSet(hints=hints, iteration_mode="reduced" if prev_positions is not None else "default")


def transport_pan_zoom_hints(
    prev_positions: Optional[Mapping[str, Coord]],
    node_ids: Sequence[str],
    default_seeds: Mapping[str, Coord],
    viewport: Optional[Tuple[float, float]] = None,
) -> HintSet:
    """Carry matched prior positions onto the default-seed frame.

    Matched nodes go through one uniform scale plus translation that maps the
    bounding box of their prior positions into the box of their default seeds
    (or of ``viewport`` = ``(width, height)`` when no seed matches). Any
    degenerate box falls back to :func:`baseline_hints`.
    """

    fallback = baseline_hints(prev_positions, node_ids, default_seeds)
    if not prev_positions:
        return fallback

    persistent = [node_id for node_id in node_ids if node_id in prev_positions]
    if not persistent:
        return fallback

    source = _bounds([prev_positions[node_id] for node_id in persistent])
    if source is None or _degenerate(source):
        return fallback

    target = _bounds([default_seeds[node_id] for node_id in persistent if node_id in default_seeds])
    if target is None and viewport is not None:
        target = ViewportBounds(0.0, float(viewport[0]), 0.0, float(viewport[1]))
    if target is None or _degenerate(target):
        return fallback

    scale = min(target.width / source.width, target.height / source.height)
    (scx, scy), (tcx, tcy) = source.center, target.center

    hints: List[NodePositionHint] = []
    for node_id in node_ids:
        previous = prev_positions.get(node_id)
        if previous is not None:
            hints.append(
                NodePositionHint(
                    id=node_id,
                    x=(previous[0] - scx) * scale + tcx,
                    y=(previous[1] - scy) * scale + tcy,
                )
            )
            continue
        seed = default_seeds.get(node_id)
        if seed is not None:
            hints.append(NodePositionHint(id=node_id, x=float(seed[0]), y=float(seed[1])))

    logger.debug("transport-pan-zoom: scale=%.4f matched=%d", scale, len(persistent))
    return HintSet(hints=hints, iteration_mode="reduced")


def deterministic_jitter(node_id: str, radius: float) -> Coord:
    angle = 2.0 * math.pi * seeded_unit(f"angle|{node_id}")
    magnitude = radius * seeded_unit(f"magnitude|{node_id}")
    return math.cos(angle) * magnitude, math.sin(angle) * magnitude


def change_emphasis_hints(
    prev_positions: Optional[Mapping[str, Coord]],
    node_ids: Sequence[str],
    default_seeds: Mapping[str, Coord],
    changed_ids: Optional[Iterable[str]] = None,
    viewport: Optional[Tuple[float, float]] = None,
) -> HintSet:
    """Transport unchanged nodes; re-seed changed ones near their default seed.

    Without ``changed_ids`` every node lacking a prior position counts as
    changed. Changed nodes without a default seed start at the centroid of
    the transported nodes. The full iteration budget is requested.
    """

    transported = transport_pan_zoom_hints(prev_positions, node_ids, default_seeds, viewport).as_dict()
    prev = prev_positions or {}
    changed: Set[str] = (
        set(changed_ids) if changed_ids is not None else {n for n in node_ids if n not in prev}
    )

    matched = [transported[n] for n in node_ids if n in prev and n in transported]
    defaults = [default_seeds[n] for n in node_ids if n in default_seeds]
    anchor: Coord = (0.0, 0.0)
    for points in (matched, defaults):
        if points:
            anchor = tuple(np.asarray(points, dtype=float).mean(axis=0).tolist())
            break

    hints: List[NodePositionHint] = []
    for node_id in node_ids:
        if node_id not in changed:
            stable = transported.get(node_id)
            if stable is not None:
                hints.append(NodePositionHint(id=node_id, x=stable[0], y=stable[1]))
            continue
        base = default_seeds.get(node_id) or anchor
        dx, dy = deterministic_jitter(node_id, CHANGE_EMPHASIS_JITTER_RADIUS)
        hints.append(NodePositionHint(id=node_id, x=float(base[0]) + dx, y=float(base[1]) + dy))

    return HintSet(hints=hints, iteration_mode="default")


def realize_hints(
    result: SequencePolicyResult,
    node_ids: Sequence[str],
    default_seeds: Mapping[str, Coord],
    realization: HintRealization = "baseline",
    *,
    changed_ids: Optional[Iterable[str]] = None,
    viewport: Optional[Tuple[float, float]] = None,
) -> HintSet:
    """Turn a policy result into solver hints for the current node list.

    ``realization`` picks how the effective prior positions are carried
    over: as-is (``baseline``), through a pan/zoom transport onto the
    default-seed frame, or transported with ``changed_ids`` re-seeded
    (``change_emphasis``, which always requests the full iteration budget).
    A result without prior positions yields the default seeds whatever the
    realization; a fresh solve (no effective state) also gets the full
    iteration budget.
    """

    if realization not in HINT_REALIZATIONS:
        raise ValueError(f"Unknown hint realization '{realization}'")

    state = result.effective_prior_state
    if state is None or state.is_empty():
        hint_set = baseline_hints(None, node_ids, default_seeds)
        hint_set.iteration_mode = result.iteration_mode
        return hint_set

    if realization == "change_emphasis":
        return change_emphasis_hints(
            state.positions, node_ids, default_seeds, changed_ids=changed_ids, viewport=viewport
        )

    if realization == "transport_pan_zoom":
        hint_set = transport_pan_zoom_hints(state.positions, node_ids, default_seeds, viewport)
    else:
        hint_set = baseline_hints(state.positions, node_ids, default_seeds)
    hint_set.iteration_mode = result.iteration_mode
    return hint_set


__all__ = [
    "CHANGE_EMPHASIS_JITTER_RADIUS",
    "HINT_REALIZATIONS",
    "HintRealization",
    "HintSet",
    "baseline_hints",
    "change_emphasis_hints",
    "deterministic_jitter",
    "realize_hints",
    "transport_pan_zoom_hints",
]
