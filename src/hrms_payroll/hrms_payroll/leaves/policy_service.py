from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.cache import EntityCache
from ..core.constants import DEFAULT_LEAVE_POLICIES
from ..core.enums import LeaveType
from ..core.exceptions import ValidationError
from .model import LeavePolicy
from .repository import LeavePolicyRepository

logger = logging.getLogger(__name__)

CACHE_NAMESPACE = "leave_policy"


def default_policies() -> list[LeavePolicy]:
    return [
        LeavePolicy(
            leave_type=LeaveType(leave_type),
            allowed_days_per_year=allowed,
            carry_forward_days=carry_forward,
            requires_approval=True,
        )
        for leave_type, (allowed, carry_forward) in DEFAULT_LEAVE_POLICIES.items()
    ]


class LeavePolicyService:
    def __init__(self, policies: LeavePolicyRepository, *, cache: EntityCache | None = None):
        self._policies = policies
        self._cache = cache or EntityCache()

    def list_policies(self) -> Sequence[LeavePolicy]:
        return self._policies.list_all()

    def get_policy(self, leave_type: LeaveType) -> Optional[LeavePolicy]:
        return self._cache.get_or_load(CACHE_NAMESPACE, leave_type, lambda: self._policies.get(leave_type))

    def set_policy(self, policy: LeavePolicy) -> LeavePolicy:
        if policy.allowed_days_per_year < 0 or policy.carry_forward_days < 0:
            raise ValidationError("Leave policy days cannot be negative")
        self._policies.upsert(policy)
        self._cache.invalidate(CACHE_NAMESPACE, policy.leave_type)
        return policy

    def initialize_default_policies(self) -> list[LeavePolicy]:
        """Create the default policy set, only when no policy exists yet."""
        if self._policies.list_all():
            return []

        created = []
        for policy in default_policies():
            created.append(self.set_policy(policy))
        logger.info("Initialized %d default leave policies", len(created))
        return created
