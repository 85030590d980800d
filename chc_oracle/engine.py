"""
CHC reachability oracle on top of Z3's fixedpoint engine (Spacer).

Usage:

    solver = CHCSolver()
    x = solver.declare_variable("x", z3.IntSort())
    p = solver.declare_function("P", z3.IntSort(), z3.BoolSort())
    solver.register_relation(p)
    solver.add_rule(p(0), "base")
    solver.add_rule(z3.Implies(p(x), p(x + 1)), "step")
    result, cex = solver.query(p(2))   # SATISFIABLE, P(0) <- P(1) <- P(2)

``query`` never raises for engine failures: they come back as
``CheckResult.ERROR`` with an empty counterexample graph, except running
out of the resource budget, which is ``CheckResult.UNKNOWN``.
"""

from __future__ import annotations

import logging
import time
from typing import Optional, Tuple

import z3

from .cex import CexGraph, cex_graph_from_z3
from .config import SolverConfig
from .results import CheckResult
from .rules import RelationRef, Rule, RuleStore
from .symbols import SymbolTable

logger = logging.getLogger(__name__)

# Engine messages for running out of budget or being interrupted.
RESOURCE_EXHAUSTION_MESSAGES = (
    "max. resource limit exceeded",
    "canceled",
)


def _message(e: z3.Z3Exception) -> str:
    value = e.value
    if isinstance(value, bytes):
        return value.decode(errors="replace")
    return str(value)


def is_resource_exhaustion(e: z3.Z3Exception) -> bool:
    """True when ``e`` reports a budget or cancellation, not an engine failure."""
    message = _message(e)
    return any(m in message for m in RESOURCE_EXHAUSTION_MESSAGES)


def apply_global_params(config: SolverConfig) -> None:
    """Set the process-wide z3 parameters (shared by all instances)."""
    for key, value in config.global_params():
        z3.set_param(key, value)


class CHCSolver:
    """
    One CHC solving session: symbol table, accumulated rules, engine handle.

    Instances are independent of each other apart from the global resource
    limit. They are not thread-safe.
    """

    def __init__(self, config: Optional[SolverConfig] = None,
                 ctx: Optional[z3.Context] = None):
        self.config = config or SolverConfig()

        apply_global_params(self.config)

        self.fp = z3.Fixedpoint(ctx=ctx)
        for key, value in self.config.fixedpoint_params():
            self.fp.set(key, value)
        logger.debug("Fixedpoint configured: %s", self.config.fixedpoint_params())

        self.symbols = SymbolTable()
        self.rule_store = RuleStore(self.symbols, self.fp)

    # -------------------------------------------------------------------------
    # Declarations and rules
    # -------------------------------------------------------------------------

    def declare_variable(self, name: str, sort: Optional[z3.SortRef]) -> z3.ExprRef:
        return self.symbols.declare_variable(name, sort)

    def declare_function(self, name: str, *sorts: z3.SortRef) -> z3.FuncDeclRef:
        return self.symbols.declare_function(name, *sorts)

    def register_relation(self, ref: RelationRef) -> None:
        self.rule_store.register_relation(ref)

    def add_rule(self, expr: z3.BoolRef, label: str) -> Rule:
        return self.rule_store.add_rule(expr, label)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def query(self, goal: z3.BoolRef) -> Tuple[CheckResult, CexGraph]:
        """
        Is ``goal`` derivable from the accumulated rules?

        Returns SATISFIABLE with the counterexample graph when it is,
        UNSATISFIABLE or UNKNOWN with an empty graph otherwise. Running out
        of the resource budget is UNKNOWN; any other engine exception is
        ERROR with an empty graph.
        """
        start = time.time()
        try:
            answer = self.fp.query(goal)
            if answer == z3.sat:
                result = CheckResult.SATISFIABLE
                cex = cex_graph_from_z3(self.fp.get_answer())
            elif answer == z3.unsat:
                # Invariants of the safe case are not retrieved.
                result = CheckResult.UNSATISFIABLE
                cex = CexGraph()
            else:
                result = CheckResult.UNKNOWN
                cex = CexGraph()
        except z3.Z3Exception as e:
            if is_resource_exhaustion(e):
                logger.info("CHC query gave up: %s", _message(e))
                result = CheckResult.UNKNOWN
            else:
                logger.warning("CHC query failed: %s", _message(e))
                result = CheckResult.ERROR
            cex = CexGraph()

        elapsed_ms = (time.time() - start) * 1000
        logger.debug("Query %s -> %s in %.1fms (%d facts)", goal, result, elapsed_ms, len(cex.nodes))
        return result, cex

    # -------------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------------

    @property
    def rules(self) -> Tuple[Rule, ...]:
        return self.rule_store.rules

    def to_smtlib(self) -> str:
        """The accumulated rule set in the engine's SMT-LIB2 form."""
        return self.fp.sexpr()
