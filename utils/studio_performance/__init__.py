# utils/studio_performance/__init__.py
"""
Studio Performance Module

Target & revenue attribution for the PT studio dashboards.
Pure Python + pandas; no Streamlit imports inside this package.

Components:
- store: Entity store (members, staff, branches, overrides, logs)
- targets: Target resolution with branch/position overrides
- revenue: Monthly revenue, source and trailing aggregations
- metrics: Achievement rollup staff -> branch -> organization
- branches: Branch create / rename / delete propagation
- access_control: Role-scoped visibility
- ai_estimation: Gemini-backed estimates with fallbacks
- seed: Demo data

Usage:
    from utils.studio_performance import (
        build_demo_store,
        TargetResolver,
        RevenueAggregator,
        StudioMetrics,
        BranchManager,
        AccessControl,
    )
"""

from .store import StudioStore, derive_role, new_id, round_rating
from .targets import TargetResolver
from .revenue import (
    RevenueAggregator,
    current_month_key,
    local_today,
    monthly_revenue,
    month_label,
    shift_month_key,
    transactions_to_frame,
)
from .metrics import (
    Achievement,
    BranchAchievement,
    StudioMetrics,
    TrainerPerformance,
    achievement_rate,
)
from .branches import BranchManager
from .access_control import AccessControl, project_survey_result
from .ai_estimation import AIEstimator
from .seed import DEMO_BRANCHES, DEMO_IDENTITIES, build_demo_store

# Models
from .models import (
    BodyCompositionEstimate,
    CheckIn,
    DietEntry,
    Equipment,
    Identity,
    InBodyEntry,
    Macros,
    Member,
    NutritionEstimate,
    Schedule,
    StaffMember,
    SurveyResult,
    Transaction,
    WorkoutEntry,
)

# Exceptions
from .exceptions import (
    AIEstimationError,
    BranchNotFoundError,
    DataValidationError,
    MemberNotFoundError,
    StaffNotFoundError,
    StudioError,
)

# Constants
from .constants import (
    BRANCH_MANAGER_POSITION,
    DEFAULT_TARGETS,
    POSITIONS,
    ROLES,
    SALES_POSITIONS,
    SALES_SOURCES,
    SURVEY_METRICS,
)

__all__ = [
    # Classes
    'StudioStore',
    'TargetResolver',
    'RevenueAggregator',
    'StudioMetrics',
    'BranchManager',
    'AccessControl',
    'AIEstimator',

    # Functions
    'build_demo_store',
    'derive_role',
    'new_id',
    'round_rating',
    'current_month_key',
    'local_today',
    'monthly_revenue',
    'month_label',
    'shift_month_key',
    'transactions_to_frame',
    'achievement_rate',
    'project_survey_result',

    # Results
    'Achievement',
    'BranchAchievement',
    'TrainerPerformance',

    # Models
    'BodyCompositionEstimate',
    'CheckIn',
    'DietEntry',
    'Equipment',
    'Identity',
    'InBodyEntry',
    'Macros',
    'Member',
    'NutritionEstimate',
    'Schedule',
    'StaffMember',
    'SurveyResult',
    'Transaction',
    'WorkoutEntry',

    # Exceptions
    'StudioError',
    'DataValidationError',
    'MemberNotFoundError',
    'StaffNotFoundError',
    'BranchNotFoundError',
    'AIEstimationError',

    # Constants
    'BRANCH_MANAGER_POSITION',
    'DEFAULT_TARGETS',
    'POSITIONS',
    'ROLES',
    'SALES_POSITIONS',
    'SALES_SOURCES',
    'SURVEY_METRICS',
    'DEMO_BRANCHES',
    'DEMO_IDENTITIES',
]

__version__ = '1.0.0'
