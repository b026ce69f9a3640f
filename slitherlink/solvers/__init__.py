"""
Solvers for Slitherlink boards.
"""

from .base_solver import BaseSolver, SolverConfig, SolverResult, DeductiveSolver
from .backtracking_solver import BacktrackingSolver
from .rules import DeductionEngine, PassOutcome, apply_one_time_pass, run_to_fixpoint

__all__ = [
    # Base classes
    'BaseSolver',
    'SolverConfig',
    'SolverResult',

    # Solvers
    'DeductiveSolver',
    'BacktrackingSolver',

    # Deduction rules
    'DeductionEngine',
    'PassOutcome',
    'apply_one_time_pass',
    'run_to_fixpoint',
]


# Solver registry for easy access
SOLVER_REGISTRY = {
    'deduction': DeductiveSolver,
    'backtracking': BacktrackingSolver,
}


def get_solver(name: str, config: SolverConfig = None) -> BaseSolver:
    """
    Get a solver by name.

    Args:
        name: Solver name (deduction, backtracking)
        config: Optional solver configuration

    Returns:
        Solver instance

    Raises:
        ValueError: If solver name is not recognized
    """
    solver_class = SOLVER_REGISTRY.get(name.lower())
    if not solver_class:
        raise ValueError(f"Unknown solver: {name}. Available: {list(SOLVER_REGISTRY.keys())}")

    return solver_class(config or SolverConfig())
