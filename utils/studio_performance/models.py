# utils/studio_performance/models.py
"""
Entity data models for the studio.

Transactions and survey results are frozen: they are snapshots taken at
creation time (member_name is not re-synced when a member is renamed).
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, Optional, Any

from .constants import (
    ROLE_TRAINER,
    TRANSACTION_NEW,
    UNKNOWN_MACRO,
)


@dataclass
class Identity:
    """Signed-in user as supplied by the identity collaborator"""
    id: str
    role: str
    display_name: str = ''
    position: str = ''
    branch_name: str = ''
    member_id: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class StaffMember:
    """Staff record (admin / manager / trainer)"""
    id: str
    display_name: str
    role: str = ROLE_TRAINER
    position: str = ''
    branch_name: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Member:
    """Gym customer. trainer_id is a weak reference ('' = unassigned)."""
    id: str
    name: str
    trainer_id: str = ''
    total_sessions: int = 0
    used_sessions: int = 0
    monthly_session_count: int = 0
    payment_amount: int = 0
    join_date: str = ''
    status: str = 'active'
    phone_number: str = ''
    age: int = 0
    gender: str = ''
    goal: str = ''
    height: Optional[float] = None
    initial_weight: Optional[float] = None
    source: str = ''
    behavioral_stage: str = ''

    @property
    def remaining_sessions(self) -> int:
        return self.total_sessions - self.used_sessions

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Transaction:
    """Append-only payment record"""
    id: str
    member_id: str
    member_name: str
    date: str
    amount: int
    session_count: int
    type: str = TRANSACTION_NEW
    source: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SurveyResult:
    """Member satisfaction survey for a trainer"""
    id: str
    trainer_id: str
    member_id: str
    member_name: str
    date: str
    rating: float
    metrics: Dict[str, int] = field(default_factory=dict)
    public_comment: str = ''
    private_comment: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Schedule:
    id: str
    member_id: str
    member_name: str
    start_time: str
    duration_minutes: int = 50
    type: str = 'PT'

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Macros:
    protein: str = UNKNOWN_MACRO
    carbs: str = UNKNOWN_MACRO
    fat: str = UNKNOWN_MACRO


@dataclass
class DietEntry:
    id: str
    member_id: str
    date: str
    description: str
    calories: int = 0
    macros: Macros = field(default_factory=Macros)
    image_url: str = ''
    trainer_feedback: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CheckIn:
    condition_score: int = 3    # 1-5
    sleep_hours: float = 0
    pain_level: str = ''


@dataclass
class WorkoutEntry:
    id: str
    member_id: str
    date: str
    title: str
    duration_minutes: int
    content: str = ''
    check_in: Optional[CheckIn] = None
    feedback: str = ''
    next_goal: str = ''
    burned_calories: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class InBodyEntry:
    id: str
    member_id: str
    date: str
    weight: float
    muscle_mass: float = 0.0
    body_fat: float = 0.0
    score: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Equipment:
    id: str
    name: str
    category: str = '기타'

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# =====================================================================
# AI ESTIMATES
# =====================================================================

@dataclass
class NutritionEstimate:
    calories: int
    macros: Macros
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class BodyCompositionEstimate:
    weight: float = 0.0
    muscle_mass: float = 0.0
    body_fat: float = 0.0
    score: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
