# utils/studio_performance/access_control.py
"""
Role-based Access Control for Studio Performance

Handles data visibility based on the signed-in identity:
- admin/manager: Full access to every member record
- trainer: Own members + unassigned members
- member: Own member record only

Survey results are projected per viewer: the private comment is only
visible to admin and manager.
"""

import logging
from dataclasses import replace
from typing import List, Set

import pandas as pd

from .constants import (
    ASSIGNED_ACCESS_ROLES,
    FULL_ACCESS_ROLES,
    PRIVATE_COMMENT_ROLES,
    ROLE_ADMIN,
    ROLE_MANAGER,
    ROLE_TRAINER,
)
from .exceptions import MemberNotFoundError
from .models import Identity, Member, StaffMember, SurveyResult

logger = logging.getLogger(__name__)


def project_survey_result(result: SurveyResult, viewer_role: str) -> SurveyResult:
    """Survey result as seen by a role (private comment blanked unless allowed)."""
    if (viewer_role or '').lower() in PRIVATE_COMMENT_ROLES:
        return result
    return replace(result, private_comment='')


class AccessControl:
    """
    Filter store records by what the signed-in identity may see.

    Usage:
        access = AccessControl(identity, store)

        level = access.get_access_level()       # 'full', 'assigned', or 'self'
        members = access.visible_members()
        surveys = access.visible_survey_results()
        filtered_df = access.filter_dataframe(df, 'member_id')
    """

    def __init__(self, identity: Identity, store):
        self.identity = identity
        self.store = store
        self.role = identity.role.lower() if identity.role else ''

        logger.info(f"AccessControl initialized: role={self.role}, id={identity.id}")

    # =========================================================================
    # ACCESS LEVEL DETERMINATION
    # =========================================================================

    def get_access_level(self) -> str:
        """
        Returns:
            'full'     - every member
            'assigned' - own + unassigned members
            'self'     - own member record only
        """
        if self.role in FULL_ACCESS_ROLES:
            return 'full'
        elif self.role in ASSIGNED_ACCESS_ROLES:
            return 'assigned'
        else:
            return 'self'

    def can_view_all(self) -> bool:
        return self.get_access_level() == 'full'

    # =========================================================================
    # MEMBERS
    # =========================================================================

    def visible_members(self) -> List[Member]:
        """
        Members the identity may see.

        Raises:
            MemberNotFoundError: a member identity without a member record
        """
        level = self.get_access_level()

        if level == 'full':
            return list(self.store.members)

        if level == 'assigned':
            return [
                m for m in self.store.members
                if m.trainer_id == self.identity.id or m.trainer_id == ''
            ]

        member = self.store.find_member(self.identity.member_id)
        if member is None:
            logger.warning(f"Member identity {self.identity.id} has no member record")
            raise MemberNotFoundError(self.identity.member_id)
        return [member]

    def visible_member_ids(self) -> Set[str]:
        return {m.id for m in self.visible_members()}

    # =========================================================================
    # PER-MEMBER RECORDS
    # =========================================================================

    def visible_schedules(self):
        ids = self.visible_member_ids()
        return [s for s in self.store.schedules if s.member_id in ids]

    def visible_diet_entries(self):
        ids = self.visible_member_ids()
        return [e for e in self.store.diet_entries if e.member_id in ids]

    def visible_workout_entries(self):
        ids = self.visible_member_ids()
        return [e for e in self.store.workout_entries if e.member_id in ids]

    def visible_inbody_entries(self):
        ids = self.visible_member_ids()
        return [e for e in self.store.inbody_entries if e.member_id in ids]

    # =========================================================================
    # STAFF & SURVEYS
    # =========================================================================

    def own_branch(self) -> str:
        staff = self.store.find_staff(self.identity.id)
        if staff is not None:
            return staff.branch_name
        return self.identity.branch_name

    def visible_staff(self) -> List[StaffMember]:
        """admin: all, manager: own branch, trainer: self, member: none."""
        if self.role == ROLE_ADMIN:
            return list(self.store.staff)
        if self.role == ROLE_MANAGER:
            return self.store.staff_in_branch(self.own_branch())
        if self.role == ROLE_TRAINER:
            return [s for s in self.store.staff if s.id == self.identity.id]
        return []

    def visible_survey_results(self) -> List[SurveyResult]:
        if self.role in FULL_ACCESS_ROLES:
            results = self.store.survey_results
        elif self.role == ROLE_TRAINER:
            results = [r for r in self.store.survey_results if r.trainer_id == self.identity.id]
        else:
            results = [r for r in self.store.survey_results if r.member_id == self.identity.member_id]

        return [project_survey_result(r, self.role) for r in results]

    # =========================================================================
    # DATA FILTERING
    # =========================================================================

    def filter_dataframe(
        self,
        df: pd.DataFrame,
        member_id_col: str = 'member_id'
    ) -> pd.DataFrame:
        """
        Filter DataFrame to only include visible members.

        Args:
            df: DataFrame to filter
            member_id_col: Column name containing member IDs

        Returns:
            Filtered DataFrame
        """
        if df.empty:
            return df

        if member_id_col not in df.columns:
            logger.warning(f"Column '{member_id_col}' not found in DataFrame")
            return df

        if self.can_view_all():
            return df

        ids = self.visible_member_ids()
        filtered = df[df[member_id_col].isin(ids)]
        logger.debug(f"Filtered DataFrame: {len(df)} -> {len(filtered)} rows")

        return filtered

    def __repr__(self) -> str:
        return f"AccessControl(role={self.role}, level={self.get_access_level()})"
