"""Multi-step orchestration: compile, seed, solve, thread state forward."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence, Union

from ..compiler import ColaLayout, CompileOptions, compile_layout
from ..layout import DataInstance, InstanceLayout
from .changes import analyze_node_changes
from .hints import HINT_REALIZATIONS, HintRealization, HintSet, realize_hints
from .model import (
    IterationMode,
    LayoutState,
    SequencePolicy,
    SequencePolicyContext,
    SequencePolicyResult,
    ViewportBounds,
)
from .policies import IgnoreHistoryPolicy
from .registry import get_sequence_policy

logger = logging.getLogger(__name__)

SolveFn = Callable[[ColaLayout, HintSet], LayoutState]


@dataclass
class SequenceStep:
    instance: DataInstance
    layout: InstanceLayout


@dataclass
class SequenceFrame:
    index: int
    compiled: ColaLayout
    policy_result: SequencePolicyResult
    hints: HintSet
    state: LayoutState

    @property
    def iteration_mode(self) -> IterationMode:
        return self.hints.iteration_mode


def run_sequence(
    steps: Sequence[SequenceStep],
    solve: SolveFn,
    policy: Union[str, SequencePolicy] = "ignore_history",
    *,
    spec: Any = None,
    viewport_bounds: Optional[ViewportBounds] = None,
    options: Optional[CompileOptions] = None,
    realization: HintRealization = "baseline",
    changed_ids_by_step: Optional[Sequence[Optional[Iterable[str]]]] = None,
) -> List[SequenceFrame]:
    """Lay out ``steps`` in order, seeding each solve from the previous frame.

    ``solve`` stands in for the external force-directed solver: it receives
    the compiled layout and the hint set and returns the rendered state.
    A single policy object serves the whole run, so a stateful policy keeps
    its memory across steps and never leaks it into another run. Compilation
    errors propagate and abort the run.

    ``realization`` selects how the policy result becomes hints (see
    :func:`~colaseq.sequence.hints.realize_hints`). Under ``change_emphasis``
    the changed ids of step ``i`` come from ``changed_ids_by_step[i]`` when
    given, otherwise from diffing the step against the previous instance.
    Transport falls back to the figure size of ``options`` as its target box.
    """

    if realization not in HINT_REALIZATIONS:
        raise ValueError(f"Unknown hint realization '{realization}'")
    if isinstance(policy, str):
        policy = get_sequence_policy(policy)
    viewport = None
    if options is not None:
        viewport = (options.fig_width, options.fig_height)
    logger.info(
        "Running sequence of %d steps with policy '%s' and %s hints",
        len(steps),
        policy.name,
        realization,
    )

    frames: List[SequenceFrame] = []
    prior_state: Optional[LayoutState] = None
    prev_instance: Optional[DataInstance] = None

    for index, step in enumerate(steps):
        compiled = compile_layout(step.layout, options)

        context = SequencePolicyContext(
            prior_state=prior_state if prior_state is not None else LayoutState.empty(),
            prev_instance=prev_instance if prev_instance is not None else step.instance,
            curr_instance=step.instance,
            spec=spec,
            viewport_bounds=viewport_bounds,
        )
        result = policy.apply(context)
        changed_ids = None
        if realization == "change_emphasis":
            if changed_ids_by_step is not None and index < len(changed_ids_by_step):
                changed_ids = changed_ids_by_step[index]
            if changed_ids is None and prev_instance is not None:
                changed_ids = analyze_node_changes(prev_instance, step.instance).changed_ids
        hints = realize_hints(
            result,
            [node.id for node in compiled.nodes],
            compiled.default_seeds(),
            realization,
            changed_ids=changed_ids,
            viewport=viewport,
        )

        state = solve(compiled, hints)
        frames.append(
            SequenceFrame(
                index=index,
                compiled=compiled,
                policy_result=result,
                hints=hints,
                state=state,
            )
        )
        logger.debug(
            "step %d: hints=%d iteration_mode=%s", index, len(hints.hints), hints.iteration_mode
        )

        prior_state = None if isinstance(policy, IgnoreHistoryPolicy) else state
        prev_instance = step.instance

    return frames


__all__ = ["SequenceFrame", "SequenceStep", "SolveFn", "run_sequence"]
