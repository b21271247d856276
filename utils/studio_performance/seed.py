# utils/studio_performance/seed.py
"""
Demo data for the studio dashboards.

build_demo_store() returns a fresh StudioStore on every call so sessions
never share mutable state.
"""

from datetime import datetime, timedelta
from typing import Dict

from .constants import (
    ROLE_ADMIN,
    ROLE_MANAGER,
    ROLE_MEMBER,
    ROLE_TRAINER,
    TRANSACTION_NEW,
)
from .models import (
    CheckIn,
    DietEntry,
    Equipment,
    Identity,
    InBodyEntry,
    Macros,
    Member,
    Schedule,
    StaffMember,
    SurveyResult,
    Transaction,
    WorkoutEntry,
)
from .store import StudioStore

DEMO_BRANCHES = ["야음점", "병영점", "구영점", "언양점", "천곡점", "상인점", "덕신점", "평산점", "매곡점"]

DEMO_IDENTITIES: Dict[str, Identity] = {
    'admin': Identity(id='admin', role=ROLE_ADMIN, display_name='본사 관리자'),
    'manager': Identity(id='u1', role=ROLE_MANAGER, display_name='김지점',
                        position='지점장', branch_name='야음점'),
    'trainer': Identity(id='u2', role=ROLE_TRAINER, display_name='강철우',
                        position='팀장', branch_name='야음점'),
    'member': Identity(id='m1', role=ROLE_MEMBER, display_name='김민수', member_id='1'),
}


def _demo_staff():
    return [
        StaffMember('u1', '김지점', ROLE_MANAGER, '지점장', '야음점'),
        StaffMember('u2', '강철우', ROLE_TRAINER, '팀장', '야음점'),
        StaffMember('u3', '이소라', ROLE_TRAINER, 'LV3 트레이너', '야음점'),
        StaffMember('u4', '박병영', ROLE_MANAGER, '지점장', '병영점'),
        StaffMember('u5', '최구영', ROLE_TRAINER, '트레이너', '구영점'),
    ]


def _demo_members():
    return [
        Member(id='1', name='김민수', trainer_id='u2', age=28, gender='male',
               phone_number='010-1234-5678', join_date='2025-01-15',
               goal='바디프로필 촬영 및 체지방 10% 달성', status='active',
               total_sessions=30, used_sessions=22, monthly_session_count=12,
               behavioral_stage='Action', payment_amount=1_500_000, source='WalkIn'),
        Member(id='2', name='이지은', trainer_id='u2', age=34, gender='female',
               phone_number='010-9876-5432', join_date='2025-02-20',
               goal='체력 증진 및 라운드 숄더 교정', status='active',
               total_sessions=20, used_sessions=5, monthly_session_count=4,
               behavioral_stage='Preparation', payment_amount=1_100_000, source='Referral'),
        Member(id='3', name='박준형', trainer_id='u3', age=41, gender='male',
               phone_number='010-5555-7777', join_date='2024-12-10',
               goal='골프 비거리 향상을 위한 코어 운동', status='inactive',
               total_sessions=50, used_sessions=48, monthly_session_count=2,
               behavioral_stage='Maintenance', payment_amount=2_200_000, source='OT'),
        Member(id='4', name='최서연', trainer_id='u2', age=25, gender='female',
               phone_number='010-1111-2222', join_date='2024-11-05',
               goal='다이어트 -5kg 감량', status='active',
               total_sessions=10, used_sessions=2, monthly_session_count=8,
               behavioral_stage='Contemplation', payment_amount=600_000, source='FreeTrial'),
    ]


def _demo_surveys():
    all_fives = {k: 5 for k in (
        'punctuality', 'goal_achievement', 'kindness', 'professionalism',
        'appearance', 'duration_compliance', 'feedback_reflection', 'focus',
    )}
    return [
        SurveyResult('s1', 'u2', '1', '김민수', '2025-01-20', 5.0, dict(all_fives),
                     '수업이 너무 체계적이고 좋아요!',
                     '가끔 수업 시간에 핸드폰을 보시는 것 같아 아쉽습니다.'),
        SurveyResult('s2', 'u2', '2', '이지은', '2025-01-22', 4.3, {
            'punctuality': 4, 'goal_achievement': 4, 'kindness': 5, 'professionalism': 4,
            'appearance': 5, 'duration_compliance': 5, 'feedback_reflection': 3, 'focus': 4,
        }, '친절하게 잘 가르쳐주십니다.', '시설 샤워실 청소 상태가 조금 미흡해요.'),
        SurveyResult('s3', 'u3', '3', '박준형', '2025-01-25', 5.0, dict(all_fives),
                     '최고의 트레이너 선생님!', ''),
    ]


def build_demo_store(now: datetime = None) -> StudioStore:
    """Fresh store with the demo studio (9 branches, 5 staff, 4 members)."""
    now = now or datetime.now()
    members = _demo_members()

    transactions = [
        Transaction(
            id=f"t_{m.id}",
            member_id=m.id,
            member_name=m.name,
            date=m.join_date,
            amount=m.payment_amount,
            session_count=m.total_sessions,
            type=TRANSACTION_NEW,
            source=m.source,
        )
        for m in members
    ]

    schedules = [
        Schedule('s1', '1', '김민수', now.isoformat(timespec='minutes')),
        Schedule('s2', '2', '이지은', (now + timedelta(days=1)).isoformat(timespec='minutes')),
    ]

    diet_entries = [
        DietEntry('d1', '1', (now - timedelta(days=1)).isoformat(timespec='minutes'),
                  '닭가슴살 샐러드', 350, Macros('30g', '15g', '8g'),
                  trainer_feedback='아주 훌륭한 식단입니다! 드레싱만 조금 주의해주세요.'),
    ]

    inbody_entries = [
        InBodyEntry('i1', '1', '2023-01-15', 80.5, 35.2, 22.0, 72),
        InBodyEntry('i2', '1', '2023-02-15', 78.2, 35.8, 19.5, 76),
        InBodyEntry('i3', '1', '2023-03-15', 76.0, 36.5, 17.0, 82),
    ]

    workout_entries = [
        WorkoutEntry('w1', '1', now.isoformat(timespec='minutes'), '하체 루틴', 60,
                     '스쿼트 5세트\n레그 프레스 4세트\n런지 3세트',
                     CheckIn(condition_score=4, sleep_hours=7, pain_level='없음'),
                     '자세가 매우 좋아졌습니다. 다음주 증량 가능할 듯.',
                     '스쿼트 100kg 도전'),
    ]

    equipment = [
        Equipment('e1', '러닝머신 (Treadmill)', '유산소'),
        Equipment('e2', '천국의 계단 (Stair Climber)', '유산소'),
        Equipment('e3', '벤치 프레스', '가슴'),
        Equipment('e4', '펙 덱 플라이', '가슴'),
        Equipment('e5', '랫 풀 다운', '등'),
        Equipment('e6', '시티드 로우', '등'),
        Equipment('e7', '레그 프레스', '하체'),
        Equipment('e8', '레그 익스텐션', '하체'),
        Equipment('e9', '숄더 프레스 머신', '어깨'),
        Equipment('e10', '케이블 크로스 오버', '기타'),
    ]

    return StudioStore(
        members=members,
        staff=_demo_staff(),
        branches=DEMO_BRANCHES,
        transactions=transactions,
        schedules=schedules,
        diet_entries=diet_entries,
        workout_entries=workout_entries,
        inbody_entries=inbody_entries,
        survey_results=_demo_surveys(),
        equipment=equipment,
    )
