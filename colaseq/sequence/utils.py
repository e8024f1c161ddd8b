"""Geometry helpers shared by the sequence policies."""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

from .model import LayoutState, ViewportBounds

DEFAULT_BOUNDS = ViewportBounds(min_x=0.0, max_x=800.0, min_y=0.0, max_y=600.0)
MIN_FALLBACK_WIDTH = 320.0
MIN_FALLBACK_HEIGHT = 240.0
MIN_FALLBACK_PADDING = 60.0
FALLBACK_PADDING_RATIO = 0.15


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def fallback_bounds(prior_state: LayoutState) -> ViewportBounds:
    """Bounds derived from the prior positions, padded so jitter fits around them."""

    if prior_state.is_empty():
        return DEFAULT_BOUNDS

    pts = np.asarray(list(prior_state.positions.values()), dtype=float)
    min_x, min_y = pts.min(axis=0)
    max_x, max_y = pts.max(axis=0)

    width = max(MIN_FALLBACK_WIDTH, float(max_x - min_x))
    height = max(MIN_FALLBACK_HEIGHT, float(max_y - min_y))
    cx = float(min_x + max_x) / 2.0
    cy = float(min_y + max_y) / 2.0
    padding = max(MIN_FALLBACK_PADDING, max(width, height) * FALLBACK_PADDING_RATIO)

    return ViewportBounds(
        min_x=cx - width / 2.0 - padding,
        max_x=cx + width / 2.0 + padding,
        min_y=cy - height / 2.0 - padding,
        max_y=cy + height / 2.0 + padding,
    )


def resolve_viewport_bounds(
    prior_state: LayoutState, viewport_bounds: Optional[ViewportBounds] = None
) -> ViewportBounds:
    """Use explicit finite bounds (normalized) or fall back to the prior layout's box."""

    if viewport_bounds is None:
        return fallback_bounds(prior_state)

    values = (viewport_bounds.min_x, viewport_bounds.max_x, viewport_bounds.min_y, viewport_bounds.max_y)
    if not all(math.isfinite(v) for v in values):
        return fallback_bounds(prior_state)

    return ViewportBounds(
        min_x=min(viewport_bounds.min_x, viewport_bounds.max_x),
        max_x=max(viewport_bounds.min_x, viewport_bounds.max_x),
        min_y=min(viewport_bounds.min_y, viewport_bounds.max_y),
        max_y=max(viewport_bounds.min_y, viewport_bounds.max_y),
    )
