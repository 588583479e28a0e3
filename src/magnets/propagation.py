"""Forward checking and maintaining arc consistency over a queue of arcs."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Callable, Deque, Dict, Iterable, Optional, Tuple

from .arcs import Arc, generate_arcs, revise
from .model import Assignment, Domains, InferenceMode
from src.utils.trace import Tracer, get_tracer

if TYPE_CHECKING:
    from .puzzle import MagnetsPuzzle

Propagator = Callable[..., Tuple[bool, Domains]]


def forward_check(
    puzzle: MagnetsPuzzle,
    arcs: Iterable[Arc],
    domains: Domains,
    assignment: Assignment,
    tracer: Optional[Tracer] = None,
) -> Tuple[bool, Domains]:
    """Revise each arc once; neighbours of neighbours are never revisited."""
    tracer = tracer or get_tracer()
    queue: Deque[Arc] = deque(arcs)
    pruned = 0
    origin = queue[0].source if queue else None
    while queue:
        arc = queue.popleft()
        before = len(domains[arc.dependent])
        feasible, changed = revise(puzzle, arc, domains, assignment)
        if not feasible:
            tracer.log_domain_reduction(
                puzzle.dominoes[arc.dependent].name, 0, reason=f"{arc.kind.value} wipe-out"
            )
            return False, domains
        if changed:
            pruned += before - len(domains[arc.dependent])
    if pruned and origin is not None:
        tracer.log_forward_check(variable=puzzle.dominoes[origin].name, domains_pruned=pruned)
    return True, domains


def maintain_arc_consistency(
    puzzle: MagnetsPuzzle,
    arcs: Iterable[Arc],
    domains: Domains,
    assignment: Assignment,
    tracer: Optional[Tracer] = None,
) -> Tuple[bool, Domains]:
    """AC-3 style fixpoint: a narrowed domain re-enqueues the arcs leaving it."""
    tracer = tracer or get_tracer()
    queue: Deque[Arc] = deque(arcs)
    arcs_processed = 0
    variables_affected = 0
    while queue:
        arc = queue.popleft()
        arcs_processed += 1
        feasible, changed = revise(puzzle, arc, domains, assignment)
        if not feasible:
            tracer.log_domain_reduction(
                puzzle.dominoes[arc.dependent].name, 0, reason=f"{arc.kind.value} wipe-out"
            )
            return False, domains
        if changed:
            variables_affected += 1
            queue.extend(generate_arcs(puzzle, arc.dependent, assignment, exempt=arc.source))
    if arcs_processed:
        tracer.log_arc_consistency_run(
            variables_affected=variables_affected, arcs_processed=arcs_processed
        )
    return True, domains


PROPAGATORS: Dict[InferenceMode, Propagator] = {
    InferenceMode.FORWARD_CHECKING: forward_check,
    InferenceMode.ARC_CONSISTENCY: maintain_arc_consistency,
}


def propagate(
    mode: InferenceMode,
    puzzle: MagnetsPuzzle,
    arcs: Iterable[Arc],
    domains: Domains,
    assignment: Assignment,
    tracer: Optional[Tracer] = None,
) -> Tuple[bool, Domains]:
    """Run the propagator selected by `mode` on `domains` (mutated in place)."""
    return PROPAGATORS[mode](puzzle, arcs, domains, assignment, tracer)
