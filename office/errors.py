"""Exceptions raised by the office core.

Missing lectionary entries are never errors; they resolve to empty readings.
"""


class UnknownPlanError(ValueError):
    def __init__(self, plan_id: str):
        super().__init__(f"Unknown reading plan: {plan_id}")
        self.plan_id = plan_id


class LectionaryLoadError(RuntimeError):
    def __init__(self, plan_id: str, reason: str):
        super().__init__(f"Could not load lectionary table for {plan_id}: {reason}")
        self.plan_id = plan_id
        self.reason = reason
