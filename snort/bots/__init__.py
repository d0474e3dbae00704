"""
Bots module - CPU opponents.

Provides:
- BotPolicy: Interface for bot decision-making
- SymmetryPolicy: Middle opening, mirrored replies, random fallback
- RandomPolicy: Uniform choice over valid cells
"""

from __future__ import annotations

from .policy import BotPolicy, BotDecision, RandomPolicy
from .symmetry import SymmetryPolicy

POLICIES: dict[str, type[BotPolicy]] = {
    "symmetry": SymmetryPolicy,
    "random": RandomPolicy,
}


def create_policy(name: str = "symmetry", seed: int | None = None) -> BotPolicy:
    """Build a policy by name."""
    try:
        policy_cls = POLICIES[name]
    except KeyError:
        raise ValueError(f"Unknown bot policy: {name}") from None
    return policy_cls(seed=seed)


__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "SymmetryPolicy",
    "POLICIES",
    "create_policy",
]
