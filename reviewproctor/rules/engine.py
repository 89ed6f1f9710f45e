"""Proctoring decision engine."""
from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from reviewproctor.rules.policies import DEFAULT_POLICIES, Decision, EvaluationContext, Policy

logger = logging.getLogger(__name__)


class DecisionEngine:
    """Run policies in order and report the first one that fails.

    The engine keeps no state of its own; the decision is a function of the
    context it is handed.  Order matters, since it decides which single reason
    is reported when several policies would fail.
    """

    def __init__(self, policies: Optional[Iterable[Policy]] = None) -> None:
        self._policies: Sequence[Policy] = tuple(policies) if policies is not None else DEFAULT_POLICIES
        names = [policy.name for policy in self._policies]
        if len(set(names)) != len(names):
            raise ValueError("policy names must be unique")

    @property
    def policies(self) -> Sequence[Policy]:
        return self._policies

    def evaluate(self, context: EvaluationContext) -> Decision:
        """Return :meth:`Decision.allow` or a denial naming the first failed policy."""

        for policy in self._policies:
            if not policy.passes(context):
                logger.debug(f"{policy.name.value} -> fail")
                return Decision.deny(policy.name)
            logger.debug(f"{policy.name.value} -> pass")
        return Decision.allow()
