# utils/studio_performance/constants.py
"""
Constants for Studio Performance Module

Centralized configuration for:
- Role definitions
- Staff positions and default monthly targets
- Sales sources
- Survey metrics
- Illustrative revenue distribution factors
"""

from types import MappingProxyType

# =====================================================================
# ROLE DEFINITIONS
# =====================================================================

ROLE_ADMIN = 'admin'
ROLE_MANAGER = 'manager'
ROLE_TRAINER = 'trainer'
ROLE_MEMBER = 'member'

ROLES = [ROLE_ADMIN, ROLE_MANAGER, ROLE_TRAINER, ROLE_MEMBER]

# Full access: can view every member / schedule / entry
FULL_ACCESS_ROLES = [ROLE_ADMIN, ROLE_MANAGER]

# Assigned access: own members + unassigned members
ASSIGNED_ACCESS_ROLES = [ROLE_TRAINER]

# Roles allowed to read the private comment of a satisfaction survey
PRIVATE_COMMENT_ROLES = [ROLE_ADMIN, ROLE_MANAGER]

# =====================================================================
# POSITIONS & TARGETS
# =====================================================================

BRANCH_MANAGER_POSITION = '지점장'

POSITIONS = [
    BRANCH_MANAGER_POSITION,
    '팀장',
    '부팀장',
    'LV3 트레이너',
    '트레이너',
    '수습1',
    '수습2',
    '수습3',
]

# Positions that carry an individual monthly sales target
SALES_POSITIONS = [p for p in POSITIONS if p != BRANCH_MANAGER_POSITION]

# Monthly sales target (KRW) by position, used when no branch override exists
DEFAULT_TARGETS = MappingProxyType({
    '팀장': 11_000_000,
    '부팀장': 11_000_000,
    'LV3 트레이너': 10_000_000,
    '트레이너': 9_000_000,
    '수습1': 3_500_000,
    '수습2': 5_500_000,
    '수습3': 9_000_000,
})

# =====================================================================
# TRANSACTIONS
# =====================================================================

TRANSACTION_NEW = 'New'
TRANSACTION_RENEWAL = 'Renewal'
TRANSACTION_TYPES = [TRANSACTION_NEW, TRANSACTION_RENEWAL]

SALES_SOURCES = ['OT', 'Referral', 'FreeTrial', 'WalkIn', 'Other']

SALES_SOURCE_LABELS = {
    'OT': 'OT (오리엔테이션)',
    'Referral': '지인 소개',
    'FreeTrial': 'PT 무료 체험',
    'WalkIn': '워크인',
    'Other': '기타',
}

TRANSACTION_COLUMNS = [
    'id', 'member_id', 'member_name', 'date',
    'amount', 'session_count', 'type', 'source',
]

MONTH_KEY_LENGTH = 7   # "YYYY-MM"

DEFAULT_TRAILING_MONTHS = 6

# =====================================================================
# ILLUSTRATIVE DISTRIBUTION
# =====================================================================

# Weight given to a branch without staff when apportioning org revenue
EMPTY_BRANCH_WEIGHT = 0.5

# Trainer i of a branch is shown (BASE + i * STEP) of the branch revenue
TRAINER_SHARE_BASE = 0.15
TRAINER_SHARE_STEP = 0.05

# =====================================================================
# SURVEY
# =====================================================================

SURVEY_METRICS = {
    'punctuality': '시간 약속',
    'goal_achievement': '목표 달성정도',
    'kindness': '친절함',
    'professionalism': 'PT 수업 전문성',
    'appearance': '용모 단정',
    'duration_compliance': '수업시간 50분 준수 여부',
    'feedback_reflection': '회원 건의사항 반영',
    'focus': '수업집중도',
}

SURVEY_SCORE_MIN = 1
SURVEY_SCORE_MAX = 5

# =====================================================================
# MEMBERS / SCHEDULES / EQUIPMENT
# =====================================================================

SCHEDULE_TYPES = ['PT', 'Consultation']

EQUIPMENT_CATEGORIES = ['유산소', '가슴', '등', '하체', '어깨', '팔', '복근/코어', '기타']

# Category preselected when a manager approves a reported machine
DEFAULT_PENDING_CATEGORY = '유산소'

HOMEWORK_BODY_PARTS = ['하체', '가슴', '등', '어깨', '팔', '코어/복근', '유산소', '전신']

# Characters of workout history sent as homework context
HOMEWORK_HISTORY_LIMIT = 1000

# =====================================================================
# AI ESTIMATION FALLBACKS
# =====================================================================

NUTRITION_FAILURE_DESCRIPTION = 'AI 분석에 실패했습니다.'
UNKNOWN_MACRO = '?'
FALLBACK_KCAL_PER_MINUTE = 5
DEFAULT_BODY_WEIGHT_KG = 70

WORKOUT_PLAN_EMPTY_TEXT = '분석 결과를 생성하지 못했습니다.'
WORKOUT_PLAN_FAILURE_TEXT = 'AI 분석 중 오류가 발생했습니다. 잠시 후 다시 시도해주세요.'

HOMEWORK_EMPTY_TEXT = '운동 추천 생성에 실패했습니다.'
HOMEWORK_FAILURE_TEXT = '[운동 추천]\nAI 연결 상태를 확인해주세요. 기본 스쿼트/푸쉬업을 추천합니다.'

ENCOURAGEMENT_EMPTY_TEXT = '식단 기록 감사합니다! 오늘도 화이팅하세요.'
ENCOURAGEMENT_FAILURE_TEXT = '식단 기록이 완료되었습니다.'
