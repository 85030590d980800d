"""
Counterexample graphs from ground refutation proofs.

When Spacer finds the queried goal reachable, its answer is a ground
refutation: a proof of ``false`` built from hyper-resolution steps. Each
hyper-resolution step combines one rule instance with proofs of the rule's
body literals (the premises) to derive the rule's head (the conclusion).

The proof is a DAG whose steps are shared by reference, so the extractor
walks it with an explicit stack and a visited set keyed by node id. The
result is a ``CexGraph`` of the form ``premises => conclusion``:

    nodes[id] = Fact(name, args)     conclusion proved at step ``id``
    edges[id] = [premise ids...]     in operand order, duplicates kept

Steps that are not hyper-resolutions (asserted facts, axioms) are leaves.
The rule instance of each step is not represented in the graph.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import z3

from .errors import require

logger = logging.getLogger(__name__)


# =============================================================================
# PROOF ACCESS
# =============================================================================

class ProofStep(ABC):
    """
    Engine-independent view of one node of a refutation proof.

    A node is an application of an operator to an ordered list of operands
    (sub-proofs or terms) and has a stable identity within one proof.
    """

    @property
    @abstractmethod
    def step_id(self) -> int:
        ...

    @abstractmethod
    def is_app(self) -> bool:
        ...

    @abstractmethod
    def is_hyper_resolution(self) -> bool:
        ...

    @abstractmethod
    def is_false(self) -> bool:
        ...

    @abstractmethod
    def operands(self) -> Sequence["ProofStep"]:
        ...

    @abstractmethod
    def symbol(self) -> str:
        """Name of the operator (the predicate symbol for facts)."""

    @abstractmethod
    def text(self) -> str:
        """Textual rendering of this node as a value."""


class Z3ProofStep(ProofStep):
    """``ProofStep`` over a z3 proof term."""

    __slots__ = ("expr",)

    def __init__(self, expr: z3.ExprRef):
        self.expr = expr

    @property
    def step_id(self) -> int:
        return self.expr.get_id()

    def is_app(self) -> bool:
        return z3.is_app(self.expr)

    def is_hyper_resolution(self) -> bool:
        return self.is_app() and self.expr.decl().kind() == z3.Z3_OP_PR_HYPER_RESOLVE

    def is_false(self) -> bool:
        return self.is_app() and self.expr.decl().kind() == z3.Z3_OP_FALSE

    def operands(self) -> List["Z3ProofStep"]:
        return [Z3ProofStep(self.expr.arg(i)) for i in range(self.expr.num_args())]

    def symbol(self) -> str:
        return self.expr.decl().name()

    def text(self) -> str:
        # SMT-LIB2 rendering, e.g. "(- 1)" rather than "-1".
        return self.expr.sexpr()

    def __repr__(self) -> str:
        return f"Z3ProofStep(id={self.step_id})"


def fact(step: ProofStep) -> ProofStep:
    """The conclusion proved by ``step``: itself if it has no operands, else its last operand."""
    require(step.is_app(), f"proof step {step.step_id} is not an application")
    operands = step.operands()
    if not operands:
        return step
    return operands[-1]


def predicate_name(predicate: ProofStep) -> str:
    require(predicate.is_app(), f"fact {predicate.step_id} is not an application")
    return predicate.symbol()


def arguments(predicate: ProofStep) -> List[str]:
    require(predicate.is_app(), f"fact {predicate.step_id} is not an application")
    return [arg.text() for arg in predicate.operands()]


# =============================================================================
# COUNTEREXAMPLE GRAPH
# =============================================================================

@dataclass(frozen=True)
class Fact:
    """A ground predicate application: predicate name plus rendered arguments."""
    name: str
    args: Tuple[str, ...]

    def __str__(self) -> str:
        return f"{self.name}({', '.join(self.args)})"


@dataclass
class CexGraph:
    """
    Portable counterexample: facts and the premises each was derived from.

    Every id listed in ``edges`` is a key of ``nodes``. Nodes without an
    ``edges`` entry, or with an empty one, are leaves.
    """
    nodes: Dict[int, Fact] = field(default_factory=dict)
    edges: Dict[int, List[int]] = field(default_factory=dict)

    @property
    def root(self) -> Optional[int]:
        """Id of the query step, the first node seeded during extraction."""
        return next(iter(self.nodes), None)

    def premises(self, node_id: int) -> List[int]:
        return list(self.edges.get(node_id, []))

    def leaves(self) -> List[int]:
        return [n for n in self.nodes if not self.edges.get(n)]

    def is_empty(self) -> bool:
        return not self.nodes

    def __bool__(self) -> bool:
        return not self.is_empty()

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly form with string keys."""
        return {
            "nodes": {
                str(n): {"name": f.name, "args": list(f.args)}
                for n, f in self.nodes.items()
            },
            "edges": {str(n): [str(c) for c in cs] for n, cs in self.edges.items()},
        }


def _fact_of(step: ProofStep) -> Fact:
    conclusion = fact(step)
    return Fact(predicate_name(conclusion), tuple(arguments(conclusion)))


def cex_graph(proof: ProofStep) -> CexGraph:
    """
    Convert a ground refutation into a linear or nonlinear counterexample.

    ``proof`` must prove ``false``. That node is not itself a
    hyper-resolution; its first operand is the query step, which becomes
    the root of the graph.
    """
    graph = CexGraph()

    require(proof.is_app(), "refutation proof root is not an application")
    require(fact(proof).is_false(), "refutation proof does not conclude false")

    root = proof.operands()[0]
    graph.nodes[root.step_id] = _fact_of(root)

    stack: List[ProofStep] = [root]
    visited = {root.step_id}

    while stack:
        step = stack.pop()
        require(step.step_id in graph.nodes, f"proof step {step.step_id} popped before being recorded")

        if not step.is_hyper_resolution():
            continue

        operands = step.operands()
        require(len(operands) > 0, f"hyper-resolution step {step.step_id} has no operands")
        # [rule instance, premise_1, ..., premise_k, conclusion]
        for child in operands[1:-1]:
            child_id = child.step_id
            if child_id not in visited:
                visited.add(child_id)
                stack.append(child)

            if child_id not in graph.nodes:
                graph.nodes[child_id] = _fact_of(child)
                graph.edges[child_id] = []

            graph.edges.setdefault(step.step_id, []).append(child_id)

    logger.debug("Extracted counterexample graph: %d facts, %d derivations",
                 len(graph.nodes), sum(1 for cs in graph.edges.values() if cs))
    return graph


def cex_graph_from_z3(answer: z3.ExprRef) -> CexGraph:
    """``cex_graph`` over a z3 fixedpoint answer."""
    return cex_graph(Z3ProofStep(answer))
