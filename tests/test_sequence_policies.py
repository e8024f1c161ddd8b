import math

import pytest

from colaseq.layout import Instance
from colaseq.sequence import (
    ChangeEmphasisPolicy,
    IgnoreHistoryPolicy,
    LayoutState,
    RandomPositioningPolicy,
    SequencePolicyContext,
    StabilityConfig,
    StabilityMemory,
    StabilityPolicy,
    Transform,
    ViewportBounds,
    jitter_changed_position,
    resolve_viewport_bounds,
)


def state(*entries, transform=None):
    return LayoutState(
        positions={node_id: (x, y) for node_id, x, y in entries},
        transform=transform or Transform(k=1.0, x=0.0, y=0.0),
    )


def inst(*ids, relations=None):
    return Instance.build(ids, relations or {})


def ctx(prior, prev, curr, bounds=None):
    return SequencePolicyContext(
        prior_state=prior, prev_instance=prev, curr_instance=curr, viewport_bounds=bounds
    )


# ----------------------------------------------------------------------
# ignore_history


def test_ignore_history_returns_fresh_solve():
    result = IgnoreHistoryPolicy().apply(ctx(state(('A', 10, 20)), inst('A'), inst('A')))

    assert result.effective_prior_state is None
    assert result.use_reduced_iterations is False
    assert result.iteration_mode == 'default'


# ----------------------------------------------------------------------
# stability


def test_stability_keeps_exact_prior_positions():
    prior = state(('A', 10, 20), ('B', 30, 40), transform=Transform(k=2.0, x=5.0, y=6.0))
    policy = StabilityPolicy()

    result = policy.apply(ctx(prior, inst('A', 'B'), inst('A', 'B')))

    assert result.effective_prior_state == prior
    assert result.use_reduced_iterations is True


def test_stability_drops_nodes_no_longer_present():
    policy = StabilityPolicy()

    result = policy.apply(ctx(state(('A', 1, 1), ('B', 2, 2)), inst('A', 'B'), inst('B')))

    assert list(result.effective_prior_state.positions) == ['B']


def test_stability_recalls_node_absent_for_one_step():
    policy = StabilityPolicy()
    policy.apply(ctx(state(('N1', 100, 120), ('N2', 200, 220)), inst('N1', 'N2'), inst('N2')))

    result = policy.apply(ctx(state(('N2', 205, 225)), inst('N2'), inst('N1', 'N2')))

    positions = result.effective_prior_state.positions
    assert positions['N1'] == (100, 120)
    assert positions['N2'] == (205, 225)


def _absent_for(steps):
    policy = StabilityPolicy()
    policy.apply(ctx(state(('A', 1, 2), ('B', 5, 5)), inst('A', 'B'), inst('B')))
    for _ in range(steps - 1):
        policy.apply(ctx(state(('B', 5, 5)), inst('B'), inst('B')))
    return policy.apply(ctx(state(('B', 5, 5)), inst('B'), inst('A', 'B')))


def test_stability_recalls_node_absent_for_two_steps():
    result = _absent_for(2)

    assert result.effective_prior_state.positions['A'] == (1, 2)


def test_stability_forgets_node_absent_for_more_than_two_steps():
    result = _absent_for(3)

    assert 'A' not in result.effective_prior_state.positions


def test_stability_recall_refreshes_step_so_flicker_never_expires():
    policy = StabilityPolicy()
    policy.apply(ctx(state(('A', 1, 2), ('B', 5, 5)), inst('A', 'B'), inst('B')))
    for _ in range(10):
        policy.apply(ctx(state(('B', 5, 5)), inst('B'), inst('B')))
        result = policy.apply(ctx(state(('B', 5, 5)), inst('B'), inst('A', 'B')))
        assert result.effective_prior_state.positions['A'] == (1, 2)


def test_stability_empty_prior_resets_memory():
    memory = StabilityMemory()
    policy = StabilityPolicy(memory=memory)
    policy.apply(ctx(state(('A', 1, 2), ('B', 5, 5)), inst('A', 'B'), inst('B')))
    assert memory.step == 1

    result = policy.apply(ctx(LayoutState.empty(), inst('B'), inst('A', 'B')))

    assert result.effective_prior_state.positions == {}
    assert memory.step == 1
    assert len(memory) == 0


def test_stability_instances_do_not_share_memory():
    first = StabilityPolicy()
    second = StabilityPolicy()
    first.apply(ctx(state(('A', 1, 2), ('B', 5, 5)), inst('A', 'B'), inst('B')))
    second.apply(ctx(state(('B', 9, 9)), inst('B'), inst('B')))

    result = second.apply(ctx(state(('B', 9, 9)), inst('B'), inst('A', 'B')))

    assert 'A' not in result.effective_prior_state.positions
    assert 'A' in first.memory.positions


def test_stability_cache_overflow_evicts_oldest_outside_window():
    policy = StabilityPolicy()
    ids = [f'n{i:04d}' for i in range(5000)]
    big = state(*[(node_id, 0.0, 0.0) for node_id in ids])
    policy.apply(ctx(big, inst(*ids), inst(*ids)))

    policy.apply(ctx(state(('extra', 1.0, 1.0)), inst('extra'), inst('extra')))

    cache = policy.memory.positions
    assert len(cache) == 5000
    assert 'extra' in cache
    assert 'n0000' not in cache
    assert 'n0001' in cache


def test_stability_eviction_prefers_expired_entries():
    policy = StabilityPolicy(StabilityConfig(max_reappearance_gap_steps=2, max_cache_size=3))
    policy.apply(ctx(state(('old', 0, 0)), inst('old'), inst()))
    for _ in range(3):
        policy.apply(ctx(state(('keep', 1, 1)), inst('keep'), inst('keep')))

    policy.apply(ctx(state(('a', 1, 1), ('b', 2, 2)), inst('a', 'b'), inst('a', 'b', 'keep')))

    cache = policy.memory.positions
    assert len(cache) <= 3
    assert 'old' not in cache
    assert {'a', 'b', 'keep'} <= set(cache)


def test_stability_overflow_within_window_evicts_by_step_then_id():
    policy = StabilityPolicy(StabilityConfig(max_reappearance_gap_steps=2, max_cache_size=2))
    policy.apply(ctx(state(('b', 0, 0), ('a', 0, 0)), inst('a', 'b'), inst('a', 'b')))

    policy.apply(ctx(state(('c', 0, 0)), inst('c'), inst('c')))

    assert set(policy.memory.positions) == {'b', 'c'}


# ----------------------------------------------------------------------
# change_emphasis


def test_change_emphasis_identical_instances_return_prior():
    prior = state(('A', 10, 10), ('B', 20, 20))
    curr = inst('A', 'B', relations={'r': [('A', 'B')]})

    result = ChangeEmphasisPolicy().apply(ctx(prior, curr, curr))

    assert result.effective_prior_state is prior
    assert result.use_reduced_iterations is True


def test_change_emphasis_pins_stable_and_jitters_changed():
    prior = state(('A', 400, 300), ('B', 450, 300), ('C', 500, 300))
    prev = inst('A', 'B', 'C', relations={'r': [('A', 'B')]})
    curr = inst('A', 'B', 'C', relations={'r': [('A', 'B'), ('B', 'C')]})
    bounds = ViewportBounds(0, 1000, 0, 800)

    result = ChangeEmphasisPolicy().apply(ctx(prior, prev, curr, bounds))
    positions = result.effective_prior_state.positions

    assert positions['A'] == (400, 300)
    for node_id in ('B', 'C'):
        moved = math.dist(positions[node_id], prior.positions[node_id])
        assert 30.0 <= moved <= 76.0


def test_change_emphasis_is_reproducible():
    prior = state(('A', 400, 300), ('B', 450, 300))
    prev = inst('A', 'B')
    curr = inst('A', 'B', relations={'r': [('A', 'B')]})

    first = ChangeEmphasisPolicy().apply(ctx(prior, prev, curr))
    second = ChangeEmphasisPolicy().apply(ctx(prior, prev, curr))

    assert first.effective_prior_state.positions == second.effective_prior_state.positions


def test_change_emphasis_new_atoms_get_no_hint_and_removed_are_dropped():
    prior = state(('A', 10, 10), ('Gone', 20, 20))
    prev = inst('A', 'Gone')
    curr = inst('A', 'New')

    result = ChangeEmphasisPolicy().apply(ctx(prior, prev, curr))

    assert set(result.effective_prior_state.positions) == {'A'}


def test_change_emphasis_lost_neighbor_scales_radius():
    bounds = ViewportBounds(-1000, 1000, -1000, 1000)
    low = jitter_changed_position('A', 0, 0, 1, 'sig', bounds)
    high = jitter_changed_position('A', 0, 0, 4, 'sig', bounds)

    assert math.hypot(*high) > math.hypot(*low)
    assert math.atan2(high[1], high[0]) == pytest.approx(math.atan2(low[1], low[0]))


def test_change_emphasis_keeps_jitter_inside_tight_viewport():
    prior = state(('A', 10, 10), ('B', 12, 12))
    prev = inst('A', 'B')
    curr = inst('A', 'B', relations={'r': [('A', 'B')]})
    bounds = ViewportBounds(0, 20, 0, 20)

    result = ChangeEmphasisPolicy().apply(ctx(prior, prev, curr, bounds))

    for point in result.effective_prior_state.positions.values():
        assert bounds.contains(point)


def test_jitter_nudges_toward_centre_when_clamp_cancels_movement():
    bounds = ViewportBounds(0, 0, 0, 0)
    assert jitter_changed_position('A', 0, 0, 1, 's', bounds) == (0, 0)

    corner = ViewportBounds(0, 100, 0, 100)
    x, y = jitter_changed_position('A', 0, 0, 1, 's', corner)
    assert (x, y) != (0, 0)
    assert corner.contains((x, y))


# ----------------------------------------------------------------------
# random_positioning


def test_random_positioning_places_every_atom_inside_bounds():
    bounds = ViewportBounds(100, 200, -50, 50)
    curr = inst('A', 'B', 'C')

    result = RandomPositioningPolicy().apply(ctx(state(('A', 0, 0)), curr, curr, bounds))

    positions = result.effective_prior_state.positions
    assert set(positions) == {'A', 'B', 'C'}
    assert all(bounds.contains(point) for point in positions.values())
    assert result.use_reduced_iterations is True


def test_random_positioning_seed_makes_it_repeatable():
    curr = inst('A', 'B')
    prior = LayoutState.empty()

    first = RandomPositioningPolicy(seed=7).apply(ctx(prior, curr, curr))
    second = RandomPositioningPolicy(seed=7).apply(ctx(prior, curr, curr))

    assert first.effective_prior_state.positions == second.effective_prior_state.positions


# ----------------------------------------------------------------------
# viewport bounds


def test_explicit_bounds_are_normalized():
    bounds = resolve_viewport_bounds(LayoutState.empty(), ViewportBounds(10, -10, 5, -5))

    assert bounds == ViewportBounds(-10, 10, -5, 5)


def test_non_finite_bounds_fall_back_to_default_box():
    bounds = resolve_viewport_bounds(LayoutState.empty(), ViewportBounds(0, math.inf, 0, 10))

    assert bounds == ViewportBounds(0, 800, 0, 600)


def test_fallback_bounds_pad_prior_positions():
    prior = state(('A', 0, 0), ('B', 1000, 400))

    bounds = resolve_viewport_bounds(prior)

    # padding = max(60, 0.15 * 1000)
    assert bounds == ViewportBounds(-150, 1150, -150, 550)
