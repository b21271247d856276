# utils/studio_performance/targets.py
"""
Target Resolution

Resolves the monthly sales target of a staff member:
1. no branch or no position  -> 0
2. branch manager (지점장)    -> 0, branch managers carry no individual target
3. branch/position override  -> override value
4. position default          -> DEFAULT_TARGETS value
5. anything else             -> 0

Lookup misses are never errors.
"""

import logging
from typing import Dict

from .constants import BRANCH_MANAGER_POSITION, DEFAULT_TARGETS, SALES_POSITIONS
from .exceptions import BranchNotFoundError, DataValidationError
from .models import StaffMember

logger = logging.getLogger(__name__)


class TargetResolver:
    """
    Target lookup over the store's override map.

    Usage:
        resolver = TargetResolver(store)
        resolver.resolve_target(staff)              # 9_000_000
        resolver.set_target_override('야음점', '트레이너', 5_000_000)
        resolver.effective_targets('야음점')        # {'팀장': 11_000_000, ...}
    """

    def __init__(self, store, default_targets=DEFAULT_TARGETS):
        self.store = store
        self.default_targets = default_targets

    # =========================================================================
    # RESOLUTION
    # =========================================================================

    def resolve_target(self, staff: StaffMember) -> int:
        """Effective monthly target for a staff member."""
        if not staff.branch_name or not staff.position:
            return 0

        if staff.position == BRANCH_MANAGER_POSITION:
            return 0

        branch_overrides = self.store.target_overrides.get(staff.branch_name, {})
        if staff.position in branch_overrides:
            return int(branch_overrides[staff.position])

        default = self.default_targets.get(staff.position)
        if default is None:
            logger.debug(f"No target for position '{staff.position}' ({staff.id})")
            return 0
        return int(default)

    def total_target(self, staff_list) -> int:
        """Sum of resolved targets."""
        return sum(self.resolve_target(s) for s in staff_list)

    def effective_targets(self, branch_name: str) -> Dict[str, int]:
        """Target per sales position for a branch, overrides applied."""
        branch_overrides = self.store.target_overrides.get(branch_name, {})
        return {
            position: int(branch_overrides.get(position, self.default_targets.get(position, 0)))
            for position in SALES_POSITIONS
        }

    # =========================================================================
    # OVERRIDES
    # =========================================================================

    def set_target_override(self, branch_name: str, position: str, amount: int) -> None:
        """Set the target for one position in one branch."""
        if not self.store.has_branch(branch_name):
            raise BranchNotFoundError(branch_name)
        if position == BRANCH_MANAGER_POSITION:
            raise DataValidationError("Branch managers have no individual sales target")
        if position not in SALES_POSITIONS:
            raise DataValidationError(f"Unknown position '{position}'")
        if amount is None or int(amount) < 0:
            raise DataValidationError(f"Target must be zero or positive, got {amount}")

        self.store.target_overrides.setdefault(branch_name, {})[position] = int(amount)
        logger.info(f"Target override set: {branch_name}/{position} = {int(amount):,}")

    def clear_target_override(self, branch_name: str, position: str) -> bool:
        """Remove one override so the position falls back to its default."""
        branch_overrides = self.store.target_overrides.get(branch_name)
        if not branch_overrides or position not in branch_overrides:
            return False

        del branch_overrides[position]
        if not branch_overrides:
            del self.store.target_overrides[branch_name]

        logger.info(f"Target override cleared: {branch_name}/{position}")
        return True
