from __future__ import annotations

import logging

from rmp.application.errors import error_for
from rmp.application.metrics.access_control import record_access_decision
from rmp.domain.access.policy import Decision
from rmp.domain.user.entities import Actor

logger = logging.getLogger("rmp.access")


def enforce(decision: Decision, *, actor: Actor, resource: str, operation: str) -> Decision:
    record_access_decision(resource=resource, operation=operation, decision=decision)
    if decision.allowed:
        return decision

    logger.info(
        "access_denied",
        extra={
            "actor_id": str(actor.actor_id),
            "resource": resource,
            "operation": operation,
            "reason": decision.reason,
        },
    )
    raise error_for(decision)
