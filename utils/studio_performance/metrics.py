# utils/studio_performance/metrics.py
"""
Achievement & Rollup for Studio Performance

Handles all achievement calculations:
- Per-staff achievement (target vs revenue)
- Per-branch achievement with an ESTIMATED branch revenue
- Organization-wide achievement on exact monthly revenue
- Illustrative per-trainer revenue within a branch
- Satisfaction averages
- Stable ranking for display

Transactions carry no branch, so branch and trainer revenue are an
illustrative apportionment of organization revenue. Those values are always
exposed as `estimated_revenue`; only `org_achievement` uses exact revenue.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Dict, Iterable, List, Sequence

import pandas as pd

from .constants import (
    EMPTY_BRANCH_WEIGHT,
    ROLE_MANAGER,
    ROLE_TRAINER,
    TRAINER_SHARE_BASE,
    TRAINER_SHARE_STEP,
)
from .models import StaffMember, SurveyResult, Transaction
from .revenue import RevenueAggregator, current_month_key
from .store import round_rating
from .targets import TargetResolver

logger = logging.getLogger(__name__)


def achievement_rate(revenue: float, target: float) -> float:
    """revenue / target * 100, or 0 when there is no positive target."""
    if not target or target <= 0:
        return 0.0
    return revenue / target * 100


@dataclass
class Achievement:
    target: int
    revenue: float
    rate_percent: float

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class BranchAchievement:
    branch_name: str
    staff_count: int
    target: int
    estimated_revenue: float
    rate_percent: float
    satisfaction: float = 0.0

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class TrainerPerformance:
    staff_id: str
    display_name: str
    position: str
    target: int
    estimated_revenue: float
    rate_percent: float
    revenue_share_percent: float
    satisfaction: float = 0.0

    def to_dict(self) -> Dict:
        return asdict(self)


class StudioMetrics:
    """
    KPI calculations for the studio.

    Usage:
        metrics = StudioMetrics(store)

        org = metrics.org_achievement()                      # exact monthly revenue
        branches = metrics.branch_summary()                  # estimated branch revenue
        ranked = metrics.rank_by_achievement(branches)
        trainers = metrics.trainer_performance('야음점', branches[0].estimated_revenue)
    """

    def __init__(self, store, resolver: TargetResolver = None):
        self.store = store
        self.resolver = resolver or TargetResolver(store)

    # =========================================================================
    # STAFF
    # =========================================================================

    def staff_achievement(self, staff: StaffMember, staff_revenue: float) -> Achievement:
        target = self.resolver.resolve_target(staff)
        return Achievement(
            target=target,
            revenue=staff_revenue,
            rate_percent=achievement_rate(staff_revenue, target),
        )

    # =========================================================================
    # BRANCH
    # =========================================================================

    def branch_achievement(
        self,
        branch_name: str,
        staff_list: Sequence[StaffMember] = None,
        org_revenue: float = 0
    ) -> BranchAchievement:
        """
        Branch target and estimated revenue.

        The estimate weights org revenue by the branch's share of staff
        (a branch without staff weighs EMPTY_BRANCH_WEIGHT).
        """
        staff_list = self.store.staff if staff_list is None else staff_list
        branch_staff = [s for s in staff_list if s.branch_name == branch_name]

        target = self.resolver.total_target(branch_staff)

        weight = len(branch_staff) if branch_staff else EMPTY_BRANCH_WEIGHT
        total_weight = len(staff_list) or 1
        estimated_revenue = (org_revenue or 0) * (weight / total_weight)

        return BranchAchievement(
            branch_name=branch_name,
            staff_count=len(branch_staff),
            target=target,
            estimated_revenue=estimated_revenue,
            rate_percent=achievement_rate(estimated_revenue, target),
            satisfaction=self.staff_satisfaction(branch_staff),
        )

    def branch_summary(
        self,
        org_revenue: float = None,
        month_key: str = None
    ) -> List[BranchAchievement]:
        """One row per branch, in branch-list order."""
        if org_revenue is None:
            org_revenue = RevenueAggregator(self.store.transactions).monthly_revenue(month_key)

        return [
            self.branch_achievement(branch, self.store.staff, org_revenue)
            for branch in self.store.branches
        ]

    def branch_summary_frame(
        self,
        org_revenue: float = None,
        month_key: str = None
    ) -> pd.DataFrame:
        """Branch summary as a display DataFrame, ranked by achievement."""
        rows = self.rank_by_achievement(self.branch_summary(org_revenue, month_key))

        columns = [
            'branch_name', 'staff_count', 'target',
            'estimated_revenue', 'rate_percent', 'satisfaction'
        ]
        df = pd.DataFrame([r.to_dict() for r in rows], columns=columns)
        if not df.empty:
            df['estimated_revenue'] = df['estimated_revenue'].round(0)
            df['rate_percent'] = df['rate_percent'].round(1)
        return df

    # =========================================================================
    # ORGANIZATION
    # =========================================================================

    def org_achievement(
        self,
        all_staff: Sequence[StaffMember] = None,
        all_transactions: Iterable[Transaction] = None,
        month_key: str = None
    ) -> Achievement:
        """Organization target vs exact revenue of the month."""
        all_staff = self.store.staff if all_staff is None else all_staff
        all_transactions = self.store.transactions if all_transactions is None else all_transactions

        target = self.resolver.total_target(all_staff)
        revenue = RevenueAggregator(all_transactions).monthly_revenue(month_key or current_month_key())

        logger.debug(f"Org achievement: revenue={revenue:,}, target={target:,}")

        return Achievement(
            target=target,
            revenue=revenue,
            rate_percent=achievement_rate(revenue, target),
        )

    # =========================================================================
    # TRAINERS
    # =========================================================================

    def trainer_performance(
        self,
        branch_name: str,
        branch_revenue: float
    ) -> List[TrainerPerformance]:
        """
        Illustrative revenue of each trainer in a branch.

        The i-th trainer (staff-list order) is shown
        branch_revenue * (TRAINER_SHARE_BASE + i * TRAINER_SHARE_STEP).
        """
        trainers = [
            s for s in self.store.staff_in_branch(branch_name)
            if s.role == ROLE_TRAINER
        ]

        estimates = [
            (branch_revenue or 0) * (TRAINER_SHARE_BASE + index * TRAINER_SHARE_STEP)
            for index in range(len(trainers))
        ]
        total_estimated = sum(estimates)

        rows = []
        for trainer, estimated in zip(trainers, estimates):
            target = self.resolver.resolve_target(trainer)
            rows.append(TrainerPerformance(
                staff_id=trainer.id,
                display_name=trainer.display_name,
                position=trainer.position,
                target=target,
                estimated_revenue=estimated,
                rate_percent=achievement_rate(estimated, target),
                revenue_share_percent=(estimated / total_estimated * 100) if total_estimated > 0 else 0.0,
                satisfaction=self.trainer_satisfaction(trainer.id),
            ))
        return rows

    def trainer_self_achievement(self, staff: StaffMember, month_key: str = None) -> Achievement:
        """Achievement a trainer sees on their own dashboard."""
        org_revenue = RevenueAggregator(self.store.transactions).monthly_revenue(month_key)
        branch = self.branch_achievement(staff.branch_name, self.store.staff, org_revenue)

        row = next(
            (r for r in self.trainer_performance(staff.branch_name, branch.estimated_revenue)
             if r.staff_id == staff.id),
            None
        )
        revenue = row.estimated_revenue if row else 0.0
        return self.staff_achievement(staff, revenue)

    # =========================================================================
    # RANKING
    # =========================================================================

    @staticmethod
    def rank_by_achievement(rows: Sequence) -> List:
        """Highest rate first; ties keep their input order."""
        return sorted(rows, key=lambda r: r.rate_percent, reverse=True)

    # =========================================================================
    # SATISFACTION
    # =========================================================================

    @staticmethod
    def satisfaction_average(results: Iterable[SurveyResult]) -> float:
        ratings = [r.rating for r in results]
        if not ratings:
            return 0.0
        return round_rating(sum(ratings) / len(ratings))

    def trainer_satisfaction(self, trainer_id: str) -> float:
        return self.satisfaction_average(
            r for r in self.store.survey_results if r.trainer_id == trainer_id
        )

    def staff_satisfaction(self, staff_list: Sequence[StaffMember]) -> float:
        ids = {s.id for s in staff_list}
        return self.satisfaction_average(
            r for r in self.store.survey_results if r.trainer_id in ids
        )

    def global_satisfaction(self) -> float:
        return self.satisfaction_average(self.store.survey_results)

    # =========================================================================
    # OVERVIEW
    # =========================================================================

    def overview(self, month_key: str = None) -> Dict:
        """Numbers for the admin metric cards."""
        month_key = month_key or current_month_key()
        org = self.org_achievement(month_key=month_key)
        revenue = RevenueAggregator(self.store.transactions)

        return {
            'month_key': month_key,
            'revenue': org.revenue,
            'target': org.target,
            'rate_percent': round(org.rate_percent, 1),
            'revenue_by_type': revenue.revenue_by_type(month_key),
            'total_branches': len(self.store.branches),
            'total_managers': sum(1 for s in self.store.staff if s.role == ROLE_MANAGER),
            'total_trainers': sum(1 for s in self.store.staff if s.role == ROLE_TRAINER),
            'total_members': len(self.store.members),
            'satisfaction': self.global_satisfaction(),
        }
