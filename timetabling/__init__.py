from .solver import BACKTRACKING_HEURISTICS, FORWARD_CHECKING, SOLVED, UNSATISFIABLE, solve

__all__ = [
    "BACKTRACKING_HEURISTICS",
    "FORWARD_CHECKING",
    "SOLVED",
    "UNSATISFIABLE",
    "solve",
]
