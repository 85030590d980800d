"""
Result taxonomy for reachability queries.
"""

from enum import Enum


class CheckResult(Enum):
    """Outcome of one CHC reachability query."""
    SATISFIABLE = "sat"        # goal is derivable (a counterexample exists)
    UNSATISFIABLE = "unsat"    # goal is unreachable (the property holds)
    UNKNOWN = "unknown"        # resource limit or incompleteness
    ERROR = "error"            # the engine raised during the query

    def __str__(self) -> str:
        return self.value
