from __future__ import annotations

from prometheus_client import Counter

from rmp.domain.access.policy import Decision

ACCESS_DECISIONS_TOTAL = Counter(
    "rmp_access_decisions_total",
    "Total number of access decisions by resource, operation and outcome.",
    ["resource", "operation", "outcome"],
)

MEAL_WRITES_TOTAL = Counter(
    "rmp_meal_writes_total",
    "Total number of meal writes by outcome.",
    ["outcome"],
)

RESTAURANT_WRITES_TOTAL = Counter(
    "rmp_restaurant_writes_total",
    "Total number of restaurant writes by action.",
    ["action"],
)

SIGNUPS_TOTAL = Counter(
    "rmp_signups_total",
    "Total number of user signups by role.",
    ["role"],
)

LOGIN_ATTEMPTS_TOTAL = Counter(
    "rmp_login_attempts_total",
    "Total number of login attempts by outcome.",
    ["outcome"],
)


def record_access_decision(resource: str, operation: str, decision: Decision) -> None:
    outcome = "allow" if decision.allowed else (decision.kind.value if decision.kind else "deny")
    ACCESS_DECISIONS_TOTAL.labels(resource=resource, operation=operation, outcome=outcome).inc()


def record_meal_write(outcome: str) -> None:
    MEAL_WRITES_TOTAL.labels(outcome=outcome).inc()


def record_restaurant_write(action: str) -> None:
    RESTAURANT_WRITES_TOTAL.labels(action=action).inc()


def record_signup(role: str) -> None:
    SIGNUPS_TOTAL.labels(role=role).inc()


def record_login_attempt(outcome: str) -> None:
    LOGIN_ATTEMPTS_TOTAL.labels(outcome=outcome).inc()
