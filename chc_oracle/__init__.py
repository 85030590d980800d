"""
chc_oracle: Constrained Horn Clause reachability with counterexample graphs.

Declare variables and relations, add Horn rules, and ask whether a goal is
derivable. A reachable goal comes back with a ``CexGraph``: the facts of one
derivation and, for each derived fact, the premises it was resolved from.
"""

from .cex import CexGraph, Fact, ProofStep, Z3ProofStep, cex_graph, cex_graph_from_z3
from .config import SolverConfig
from .engine import CHCSolver
from .errors import ContractViolation
from .results import CheckResult
from .rules import Rule, RuleStore
from .symbols import SymbolTable

__version__ = "0.1.0"

__all__ = [
    "CHCSolver",
    "CheckResult",
    "CexGraph",
    "ContractViolation",
    "Fact",
    "ProofStep",
    "Rule",
    "RuleStore",
    "SolverConfig",
    "SymbolTable",
    "Z3ProofStep",
    "cex_graph",
    "cex_graph_from_z3",
]
