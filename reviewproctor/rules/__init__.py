"""Review proctoring rule engine."""

from .engine import DecisionEngine
from .policies import (
    DEFAULT_POLICIES,
    REFUSAL_COOLDOWN_DAYS,
    CheckName,
    Decision,
    EvaluationContext,
    Policy,
    elapsed_days,
)

__all__ = [
    "DEFAULT_POLICIES",
    "REFUSAL_COOLDOWN_DAYS",
    "CheckName",
    "Decision",
    "DecisionEngine",
    "EvaluationContext",
    "Policy",
    "elapsed_days",
]
