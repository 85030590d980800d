"""
Configuration for CHC solver instances, optionally loaded from ``.chc.yml``.

The defaults are the fixed engine tuning the counterexample extractor relies
on: slicing and linear-clause inlining stay off because they reshape the
refutation proof and break the hyper-resolution operand layout.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml


DEFAULT_RESOURCE_LIMIT = 1000000


def _as_bool(key: str, value: Any) -> bool:
    """Strict boolean from YAML: real booleans or "true"/"false" strings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ValueError(f"solver.{key} must be true or false, got {value!r}")


@dataclass
class SolverConfig:
    """Engine tuning applied once per ``CHCSolver``."""
    engine: str = "spacer"
    # Quantified lemma generalizer, useful for arrays and loops.
    use_qgen: bool = True
    mbqi: bool = False
    # Ground proof obligations using values from a model.
    ground_pobs: bool = False
    slice: bool = False
    inline_linear: bool = False
    inline_eager: bool = False
    # Process-wide, shared by every solver instance.
    resource_limit: int = DEFAULT_RESOURCE_LIMIT
    pull_cheap_ite: bool = True

    def fixedpoint_params(self) -> list[tuple[str, Any]]:
        """Parameters set on each ``z3.Fixedpoint``, in application order."""
        return [
            ("engine", self.engine),
            ("fp.spacer.q3.use_qgen", self.use_qgen),
            ("fp.spacer.mbqi", self.mbqi),
            ("fp.spacer.ground_pobs", self.ground_pobs),
            ("fp.xform.slice", self.slice),
            ("fp.xform.inline_linear", self.inline_linear),
            ("fp.xform.inline_eager", self.inline_eager),
        ]

    def global_params(self) -> list[tuple[str, Any]]:
        """Parameters that z3 only accepts globally."""
        return [
            ("rewriter.pull_cheap_ite", self.pull_cheap_ite),
            ("rlimit", self.resource_limit),
        ]

    @classmethod
    def load(cls, repo_root: Path) -> "SolverConfig":
        """Load config from .chc.yml, falling back to defaults."""
        config_path = repo_root / ".chc.yml"
        if not config_path.exists():
            config_path = repo_root / ".chc.yaml"
        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}

        return cls._from_dict(raw)

    @classmethod
    def _from_dict(cls, raw: dict[str, Any]) -> "SolverConfig":
        solver_raw = raw.get("solver", {}) or {}

        def get(key: str, default: Any) -> Any:
            return solver_raw.get(key.replace("_", "-"), solver_raw.get(key, default))

        def flag(key: str, default: bool) -> bool:
            return _as_bool(key, get(key, default))

        return cls(
            engine=str(get("engine", "spacer")),
            use_qgen=flag("use_qgen", True),
            mbqi=flag("mbqi", False),
            ground_pobs=flag("ground_pobs", False),
            slice=flag("slice", False),
            inline_linear=flag("inline_linear", False),
            inline_eager=flag("inline_eager", False),
            resource_limit=int(get("resource_limit", DEFAULT_RESOURCE_LIMIT)),
            pull_cheap_ite=flag("pull_cheap_ite", True),
        )

    def to_yaml(self) -> str:
        """Serialise to YAML string."""
        lines = [
            "# .chc.yml - CHC oracle configuration",
            "",
            "solver:",
            f"  engine: {self.engine}",
            f"  use-qgen: {str(self.use_qgen).lower()}",
            f"  mbqi: {str(self.mbqi).lower()}",
            f"  ground-pobs: {str(self.ground_pobs).lower()}",
            f"  slice: {str(self.slice).lower()}",
            f"  inline-linear: {str(self.inline_linear).lower()}",
            f"  inline-eager: {str(self.inline_eager).lower()}",
            f"  resource-limit: {self.resource_limit}",
            f"  pull-cheap-ite: {str(self.pull_cheap_ite).lower()}",
            "",
        ]
        return "\n".join(lines)
