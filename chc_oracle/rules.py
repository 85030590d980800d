"""
Rule store: relation registration and closed Horn rules.

Spacer only accepts closed rules. Rather than computing the free variables
of each rule, every rule is quantified over all currently declared
variables; unused bound variables do not change satisfiability.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple, Union

import z3

from .errors import require
from .symbols import SymbolTable

logger = logging.getLogger(__name__)


RelationRef = Union[str, z3.FuncDeclRef, z3.ExprRef]


@dataclass(frozen=True)
class Rule:
    """A rule as handed to the engine."""
    label: str
    expr: z3.BoolRef          # the closed form, as added to the engine
    bound: Tuple[str, ...]    # names of the universally quantified variables


def relation_name(ref: RelationRef) -> str:
    """Name of the function symbol denoted by ``ref``."""
    if isinstance(ref, str):
        return ref
    if isinstance(ref, z3.FuncDeclRef):
        return ref.name()
    require(z3.is_app(ref), f"relation reference {ref} is not an application")
    return ref.decl().name()


class RuleStore:
    """Accumulates Horn rules on a ``z3.Fixedpoint``."""

    def __init__(self, symbols: SymbolTable, fixedpoint: z3.Fixedpoint):
        self.symbols = symbols
        self.fp = fixedpoint
        self._rules: List[Rule] = []
        self._relations: List[str] = []

    @property
    def rules(self) -> Tuple[Rule, ...]:
        return tuple(self._rules)

    @property
    def relations(self) -> Tuple[str, ...]:
        return tuple(self._relations)

    def register_relation(self, ref: RelationRef) -> None:
        """Mark a declared function symbol as a CHC relation."""
        name = relation_name(ref)
        require(
            self.symbols.has_function(name),
            f"relation '{name}' has no declared function symbol",
        )
        func = self.symbols.function(name)
        require(
            func.range() == z3.BoolSort(func.ctx),
            f"relation '{name}' must have a Bool range, not {func.range()}",
        )
        self.fp.register_relation(func)
        if name not in self._relations:
            self._relations.append(name)
        logger.debug("Registered relation %s", name)

    def add_rule(self, expr: z3.BoolRef, label: str) -> Rule:
        """
        Add ``expr`` (typically ``Implies(body, head)``) under ``label``.

        The rule is closed under ``ForAll`` over every declared variable
        when any are declared.
        """
        variables = self.symbols.variables()
        if variables:
            rule_expr = z3.ForAll(list(variables.values()), expr)
        else:
            rule_expr = expr

        self.fp.add_rule(rule_expr, name=label)

        rule = Rule(label=label, expr=rule_expr, bound=tuple(variables))
        self._rules.append(rule)
        logger.debug("Added rule %s (%d bound variables)", label, len(rule.bound))
        return rule

    def __len__(self) -> int:
        return len(self._rules)
