# utils/studio_performance/store.py
"""
Entity Store for the studio

Single source of truth for members, staff, branches, the target override map,
transactions and the per-member logs. One StudioStore is created per signed-in
session and passed explicitly to the computation classes:

    store = build_demo_store()
    resolver = TargetResolver(store)
    metrics = StudioMetrics(store)
    branches = BranchManager(store)

Transactions are append-only; everything else is mutated only through the
methods below.
"""

import logging
import uuid
from dataclasses import replace
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional, Tuple

from .constants import (
    BRANCH_MANAGER_POSITION,
    POSITIONS,
    ROLE_ADMIN,
    ROLE_MANAGER,
    ROLE_TRAINER,
    SURVEY_METRICS,
    SURVEY_SCORE_MAX,
    SURVEY_SCORE_MIN,
    TRANSACTION_NEW,
    TRANSACTION_RENEWAL,
    EQUIPMENT_CATEGORIES,
    DEFAULT_PENDING_CATEGORY,
)
from .exceptions import (
    BranchNotFoundError,
    DataValidationError,
    MemberNotFoundError,
    StaffNotFoundError,
)
from .models import (
    DietEntry,
    Equipment,
    InBodyEntry,
    Member,
    Schedule,
    StaffMember,
    SurveyResult,
    Transaction,
    WorkoutEntry,
)

logger = logging.getLogger(__name__)


def new_id(prefix: str) -> str:
    """Generate a short unique id such as 't_3f9c1a2b7d4e'."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def derive_role(current_role: str, position: str) -> str:
    """
    Role implied by a position on the staff-edit path.

    지점장 -> manager, every other position -> trainer, except that admin
    accounts keep their role for positions other than 지점장.
    """
    if position == BRANCH_MANAGER_POSITION:
        return ROLE_MANAGER
    if current_role == ROLE_ADMIN:
        return ROLE_ADMIN
    return ROLE_TRAINER


def round_rating(value: float) -> float:
    """Round half-up to one decimal (4.25 -> 4.3)."""
    return float(Decimal(str(value)).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP))


class StudioStore:
    """
    In-memory entity store.

    Usage:
        store = StudioStore(members=[...], staff=[...], branches=['야음점'])
        store.register_member(member)
        store.renew_member('1', 600_000, 10, '2025-03-02')
        store.update_staff('u3', position='팀장', branch_name='야음점')
    """

    def __init__(
        self,
        members: Iterable[Member] = None,
        staff: Iterable[StaffMember] = None,
        branches: Iterable[str] = None,
        target_overrides: Dict[str, Dict[str, int]] = None,
        transactions: Iterable[Transaction] = None,
        schedules: Iterable[Schedule] = None,
        diet_entries: Iterable[DietEntry] = None,
        workout_entries: Iterable[WorkoutEntry] = None,
        inbody_entries: Iterable[InBodyEntry] = None,
        survey_results: Iterable[SurveyResult] = None,
        equipment: Iterable[Equipment] = None,
        pending_equipment: Iterable[str] = None,
    ):
        self.members: List[Member] = list(members or [])
        self.staff: List[StaffMember] = list(staff or [])

        self.branches: List[str] = []
        for name in branches or []:
            if name not in self.branches:
                self.branches.append(name)

        self.target_overrides: Dict[str, Dict[str, int]] = {
            branch: dict(positions)
            for branch, positions in (target_overrides or {}).items()
        }

        self._transactions: List[Transaction] = list(transactions or [])
        self.schedules: List[Schedule] = list(schedules or [])
        self.diet_entries: List[DietEntry] = list(diet_entries or [])
        self.workout_entries: List[WorkoutEntry] = list(workout_entries or [])
        self.inbody_entries: List[InBodyEntry] = list(inbody_entries or [])
        self.survey_results: List[SurveyResult] = list(survey_results or [])
        self.equipment: List[Equipment] = list(equipment or [])
        self.pending_equipment: List[str] = list(pending_equipment or [])

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        """Read-only view of the transaction log."""
        return tuple(self._transactions)

    def find_member(self, member_id: str) -> Optional[Member]:
        return next((m for m in self.members if m.id == member_id), None)

    def find_staff(self, staff_id: str) -> Optional[StaffMember]:
        return next((s for s in self.staff if s.id == staff_id), None)

    def staff_in_branch(self, branch_name: str) -> List[StaffMember]:
        """Staff assigned to a branch, in staff-list order."""
        if not branch_name:
            return []
        return [s for s in self.staff if s.branch_name == branch_name]

    def has_branch(self, branch_name: str) -> bool:
        return branch_name in self.branches

    def _member_index(self, member_id: str) -> int:
        for i, member in enumerate(self.members):
            if member.id == member_id:
                return i
        raise MemberNotFoundError(member_id)

    def _staff_index(self, staff_id: str) -> int:
        for i, staff in enumerate(self.staff):
            if staff.id == staff_id:
                return i
        raise StaffNotFoundError(staff_id)

    # =========================================================================
    # MEMBERS & TRANSACTIONS
    # =========================================================================

    def register_member(self, member: Member) -> Optional[Transaction]:
        """
        Register a new member.

        Adds the member at the top of the list, records a 'New' transaction
        when a payment was taken and seeds the body-composition history with
        the initial weight when one was given.

        Returns:
            The 'New' transaction, or None when no payment was recorded
        """
        if self.find_member(member.id) is not None:
            raise DataValidationError(f"Member id '{member.id}' already exists")

        self.members.insert(0, member)
        logger.info(f"Member registered: {member.name} ({member.id})")

        transaction = None
        if member.payment_amount and member.payment_amount > 0:
            transaction = Transaction(
                id=new_id(f"t_{member.id}"),
                member_id=member.id,
                member_name=member.name,
                date=member.join_date,
                amount=int(member.payment_amount),
                session_count=member.total_sessions,
                type=TRANSACTION_NEW,
                source=member.source,
            )
            self._transactions.append(transaction)

        if member.initial_weight:
            self.inbody_entries.append(InBodyEntry(
                id=f"i_{member.id}_init",
                member_id=member.id,
                date=member.join_date,
                weight=member.initial_weight,
            ))

        return transaction

    def renew_member(
        self,
        member_id: str,
        amount: int,
        sessions: int,
        on_date: str,
    ) -> Transaction:
        """
        Record a renewal: one 'Renewal' transaction plus the matching increase
        of total_sessions and payment_amount on the member.
        """
        if amount <= 0:
            raise DataValidationError(f"Renewal amount must be positive, got {amount}")
        if sessions <= 0:
            raise DataValidationError(f"Renewal sessions must be positive, got {sessions}")

        index = self._member_index(member_id)
        member = self.members[index]

        transaction = Transaction(
            id=new_id('t'),
            member_id=member_id,
            member_name=member.name,
            date=on_date,
            amount=int(amount),
            session_count=int(sessions),
            type=TRANSACTION_RENEWAL,
        )
        renewed = replace(
            member,
            total_sessions=member.total_sessions + sessions,
            payment_amount=(member.payment_amount or 0) + amount,
        )

        self._transactions.append(transaction)
        self.members[index] = renewed

        logger.info(
            f"Renewal recorded: {member.name} +{sessions} sessions, "
            f"{amount:,} KRW on {on_date}"
        )
        return transaction

    def update_member(self, member: Member) -> Member:
        index = self._member_index(member.id)
        self.members[index] = member
        return member

    def update_member_goal(self, member_id: str, goal: str) -> Member:
        index = self._member_index(member_id)
        self.members[index] = replace(self.members[index], goal=goal)
        return self.members[index]

    # =========================================================================
    # STAFF
    # =========================================================================

    def add_staff(self, staff: StaffMember) -> StaffMember:
        if self.find_staff(staff.id) is not None:
            raise DataValidationError(f"Staff id '{staff.id}' already exists")
        self.staff.append(staff)
        return staff

    def update_staff(self, staff_id: str, position: str, branch_name: str) -> StaffMember:
        """
        Admin edit of a staff record.

        The role follows the position (see derive_role) so the two never
        contradict after an edit.
        """
        if position not in POSITIONS:
            raise DataValidationError(f"Unknown position '{position}'")
        if branch_name and branch_name not in self.branches:
            raise BranchNotFoundError(branch_name)

        index = self._staff_index(staff_id)
        current = self.staff[index]
        updated = replace(
            current,
            position=position,
            branch_name=branch_name,
            role=derive_role(current.role, position),
        )
        self.staff[index] = updated

        logger.info(
            f"Staff updated: {updated.display_name} -> "
            f"{updated.position or '-'} @ {updated.branch_name or '-'} ({updated.role})"
        )
        return updated

    # =========================================================================
    # SCHEDULES & LOGS
    # =========================================================================

    def add_schedule(self, schedule: Schedule) -> Schedule:
        self.schedules.append(schedule)
        return schedule

    def add_diet_entry(self, entry: DietEntry) -> DietEntry:
        self.diet_entries.insert(0, entry)
        return entry

    def add_diet_feedback(self, entry_id: str, feedback: str) -> bool:
        for i, entry in enumerate(self.diet_entries):
            if entry.id == entry_id:
                self.diet_entries[i] = replace(entry, trainer_feedback=feedback)
                return True
        logger.warning(f"Diet entry not found for feedback: {entry_id}")
        return False

    def add_workout_entry(self, entry: WorkoutEntry) -> WorkoutEntry:
        self.workout_entries.insert(0, entry)
        return entry

    def add_inbody_entry(self, entry: InBodyEntry) -> InBodyEntry:
        self.inbody_entries.append(entry)
        return entry

    # =========================================================================
    # SURVEYS
    # =========================================================================

    def submit_survey(
        self,
        trainer_id: str,
        member: Member,
        metrics: Dict[str, int],
        public_comment: str = '',
        private_comment: str = '',
        on_date: str = None,
    ) -> SurveyResult:
        """
        Store a satisfaction survey.

        The overall rating is the mean of the eight metric scores, rounded to
        one decimal, and is fixed at creation.
        """
        missing = [k for k in SURVEY_METRICS if k not in metrics]
        unknown = [k for k in metrics if k not in SURVEY_METRICS]
        if missing or unknown:
            raise DataValidationError(
                f"Survey metrics mismatch: missing={missing}, unknown={unknown}"
            )

        scores = {}
        for key in SURVEY_METRICS:
            try:
                score = int(metrics[key])
            except (TypeError, ValueError) as e:
                raise DataValidationError(
                    f"Survey score for '{key}' is not a number: {metrics[key]!r}"
                ) from e
            if not SURVEY_SCORE_MIN <= score <= SURVEY_SCORE_MAX:
                raise DataValidationError(
                    f"Survey score for '{key}' must be "
                    f"{SURVEY_SCORE_MIN}-{SURVEY_SCORE_MAX}, got {score}"
                )
            scores[key] = score

        result = SurveyResult(
            id=new_id('s'),
            trainer_id=trainer_id,
            member_id=member.id,
            member_name=member.name,
            date=on_date or date.today().isoformat(),
            rating=round_rating(sum(scores.values()) / len(scores)),
            metrics=scores,
            public_comment=public_comment,
            private_comment=private_comment,
        )
        self.survey_results.insert(0, result)

        logger.info(f"Survey submitted for trainer {trainer_id}: rating={result.rating}")
        return result

    # =========================================================================
    # EQUIPMENT
    # =========================================================================

    def add_equipment(self, name: str, category: str = '기타') -> bool:
        """Add a machine to the catalog. Names are unique."""
        name = (name or '').strip()
        if not name:
            return False
        if category not in EQUIPMENT_CATEGORIES:
            raise DataValidationError(f"Unknown equipment category '{category}'")
        if any(e.name == name for e in self.equipment):
            logger.debug(f"Equipment already listed: {name}")
            return False
        self.equipment.append(Equipment(id=new_id('e'), name=name, category=category))
        return True

    def report_equipment(self, name: str) -> bool:
        """
        Queue a machine a trainer logged that is not in the catalog yet.

        Returns:
            True when the name was queued, False when it is empty, already
            listed or already waiting for approval
        """
        name = (name or '').strip()
        if not name:
            return False
        if any(e.name == name for e in self.equipment) or name in self.pending_equipment:
            return False
        self.pending_equipment.append(name)
        logger.info(f"Unregistered equipment reported: {name}")
        return True

    def approve_equipment(self, name: str, category: str = DEFAULT_PENDING_CATEGORY) -> bool:
        """Move a pending machine into the catalog under a category."""
        if name not in self.pending_equipment:
            logger.warning(f"Equipment not pending approval: {name}")
            return False
        if category not in EQUIPMENT_CATEGORIES:
            raise DataValidationError(f"Unknown equipment category '{category}'")

        self.pending_equipment.remove(name)
        self.add_equipment(name, category)
        logger.info(f"Equipment approved: {name} ({category})")
        return True

    def reject_equipment(self, name: str) -> bool:
        if name not in self.pending_equipment:
            return False
        self.pending_equipment.remove(name)
        logger.info(f"Equipment rejected: {name}")
        return True

    def __repr__(self) -> str:
        return (
            f"StudioStore(members={len(self.members)}, staff={len(self.staff)}, "
            f"branches={len(self.branches)}, transactions={len(self._transactions)})"
        )
