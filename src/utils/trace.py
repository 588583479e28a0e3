"""Tracing module: records Magnets search steps and writes them to CSV."""

import csv
from dataclasses import dataclass, asdict, fields
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class TraceStep:
    """A single step of the search."""

    timestamp: float
    step_number: int
    action_type: str  # 'assign', 'backtrack', 'inconsistent', 'domain_reduced', 'forward_check', 'mac', ...
    variable: Optional[str] = None  # domino name, e.g. "D3"
    value: Optional[str] = None  # orientation value
    domain_size: Optional[int] = None
    assignment_size: Optional[int] = None  # dominoes resolved when the step was taken
    constraint_checked: Optional[str] = None
    is_valid: Optional[bool] = None
    reason: Optional[str] = None


class Tracer:
    """Records solver steps for logging and analysis."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.steps: List[TraceStep] = []
        self.start_time = datetime.now().timestamp()
        self.step_counter = 0

    def _get_timestamp(self) -> float:
        """Seconds elapsed since the tracer was created."""
        return datetime.now().timestamp() - self.start_time

    def _record(self, action_type: str, **details: Any) -> None:
        if not self.enabled:
            return
        self.step_counter += 1
        self.steps.append(TraceStep(
            timestamp=self._get_timestamp(),
            step_number=self.step_counter,
            action_type=action_type,
            **details,
        ))

    def log_assign(self, variable: str, value: Any, domain_size: int, assignment_size: int):
        """Log a tentative orientation placed on a domino."""
        self._record(
            'assign',
            variable=variable,
            value=str(value),
            domain_size=domain_size,
            assignment_size=assignment_size,
        )

    def log_backtrack(self, variable: str, reason: str = "No orientation left"):
        self._record('backtrack', variable=variable, reason=reason)

    def log_constraint_check(self, constraint_desc: str, is_valid: bool, variable: Optional[str] = None):
        """Log the outcome of the local consistency check."""
        self._record(
            'constraint_check' if is_valid else 'inconsistent',
            constraint_checked=constraint_desc,
            is_valid=is_valid,
            variable=variable,
        )

    def log_domain_reduction(self, variable: str, new_domain_size: int, reason: str = ""):
        self._record('domain_reduced', variable=variable, domain_size=new_domain_size, reason=reason)

    def log_forward_check(self, variable: str, domains_pruned: int):
        self._record(
            'forward_check',
            variable=variable,
            reason=f"Pruned {domains_pruned} orientations from neighbouring dominoes",
        )

    def log_arc_consistency_run(self, variables_affected: int, arcs_processed: int):
        """Log one maintaining-arc-consistency fixpoint."""
        self._record(
            'mac',
            reason=f"Narrowed {variables_affected} domains, processed {arcs_processed} arcs",
        )

    def log_budget_exhausted(self):
        self._record('budget_exhausted', reason="Node budget reached zero")

    def log_solution_found(self, assignment_size: int):
        self._record('solution_found', assignment_size=assignment_size)

    def to_csv(self, filepath: Path) -> None:
        """Write trace to CSV file."""
        if not self.steps:
            print("No trace steps to write")
            return

        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        fieldnames = [f.name for f in fields(TraceStep)]

        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            for step in self.steps:
                writer.writerow(asdict(step))

        print(f"Trace written to {filepath} ({len(self.steps)} steps)")

    def summary(self) -> Dict[str, Any]:
        """Get a summary of the trace."""
        action_counts: Dict[str, int] = {}
        for step in self.steps:
            action_counts[step.action_type] = action_counts.get(step.action_type, 0) + 1

        return {
            'total_steps': len(self.steps),
            'elapsed_time_seconds': self._get_timestamp(),
            'action_counts': action_counts,
            'num_assignments': action_counts.get('assign', 0),
            'num_backtracks': action_counts.get('backtrack', 0),
            'budget_exhausted': action_counts.get('budget_exhausted', 0) > 0,
        }


# Global tracer instance
_global_tracer: Optional[Tracer] = None


def get_tracer() -> Tracer:
    """Get or create the global tracer."""
    global _global_tracer
    if _global_tracer is None:
        _global_tracer = Tracer(enabled=True)
    return _global_tracer


def reset_tracer() -> None:
    """Reset the global tracer."""
    global _global_tracer
    _global_tracer = None


def enable_tracing(enabled: bool = True) -> None:
    """Enable or disable tracing."""
    get_tracer().enabled = enabled
