from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Dict

BILLING_PERIOD_DAYS = 30


@dataclass(frozen=True)
class PlanConfig:
    name: str
    monthly_analyses: int
    max_feedback_storage: int
    price_monthly: int


PLANS: Dict[str, PlanConfig] = {
    "free": PlanConfig(
        name="Free", monthly_analyses=50, max_feedback_storage=500, price_monthly=0
    ),
    "pro": PlanConfig(
        name="Pro",
        monthly_analyses=2000,
        max_feedback_storage=10000,
        price_monthly=29,
    ),
    "business": PlanConfig(
        name="Business",
        monthly_analyses=10000,
        max_feedback_storage=100000,
        price_monthly=99,
    ),
}


def plan_limit(plan: str) -> int:
    return PLANS.get(plan, PLANS["free"]).monthly_analyses


@dataclass(frozen=True)
class QuotaResult:
    allowed: bool
    remaining: int
    used: int
    limit: int
    plan: str
    status: str  # active|cancelled|past_due|trialing|none
    resets_at: datetime

    @classmethod
    def from_usage(
        cls, *, plan: str, status: str, used: int, resets_at: datetime
    ) -> "QuotaResult":
        limit = plan_limit(plan)
        remaining = max(0, limit - used)
        return cls(
            allowed=remaining > 0 and status == "active",
            remaining=remaining,
            used=used,
            limit=limit,
            plan=plan,
            status=status,
            resets_at=resets_at,
        )

    @classmethod
    def denied(cls, now: datetime) -> "QuotaResult":
        return cls(
            allowed=False,
            remaining=0,
            used=0,
            limit=0,
            plan="free",
            status="none",
            resets_at=now,
        )
