"""
Symbol table for CHC solving: declared variables and function symbols.

Variables are the free, sorted unknowns that rules get closed over.
Function symbols are what relations are made of; a function with a Bool
range becomes a CHC relation once the rule store registers it.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

import z3

from .errors import require

logger = logging.getLogger(__name__)


class SymbolTable:
    """
    Name-indexed store of declared constants and function symbols.

    Both maps keep declaration order, which is also the order of the
    quantifier prefix of closed rules.
    """

    def __init__(self):
        self._variables: Dict[str, z3.ExprRef] = {}
        self._functions: Dict[str, z3.FuncDeclRef] = {}

    def declare_variable(self, name: str, sort: Optional[z3.SortRef]) -> z3.ExprRef:
        """Declare a sorted variable and return its z3 constant."""
        require(sort is not None, f"variable '{name}' declared without a sort")
        var = z3.Const(name, sort)
        if name in self._variables:
            logger.debug("Redeclaring variable %s", name)
        self._variables[name] = var
        return var

    def declare_function(self, name: str, *sorts: z3.SortRef) -> z3.FuncDeclRef:
        """
        Declare a function symbol; the last sort is the range.

        ``declare_function("P", z3.IntSort(), z3.BoolSort())`` yields the
        relation ``P/1``.
        """
        require(len(sorts) > 0, f"function '{name}' declared without a range sort")
        func = z3.Function(name, *sorts)
        self._functions[name] = func
        return func

    def variables(self) -> Dict[str, z3.ExprRef]:
        return dict(self._variables)

    def variable(self, name: str) -> z3.ExprRef:
        return self._variables[name]

    def has_function(self, name: str) -> bool:
        return name in self._functions

    def function(self, name: str) -> z3.FuncDeclRef:
        return self._functions[name]

    def __len__(self) -> int:
        return len(self._variables) + len(self._functions)
