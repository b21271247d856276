import pytest

from utils.studio_performance import (
    BranchNotFoundError,
    DataValidationError,
    Member,
    MemberNotFoundError,
    StaffMember,
    StaffNotFoundError,
    StudioStore,
    derive_role,
    round_rating,
)

ALL_FOURS = {
    'punctuality': 4, 'goal_achievement': 4, 'kindness': 4, 'professionalism': 4,
    'appearance': 4, 'duration_compliance': 4, 'feedback_reflection': 4, 'focus': 4,
}


def test_register_member_records_new_transaction_and_inbody(empty_store):
    member = Member('9', '신규', trainer_id='u2', total_sessions=10,
                    payment_amount=700_000, join_date='2025-03-02',
                    source='Referral', initial_weight=72.5)

    transaction = empty_store.register_member(member)

    assert empty_store.members[0].id == '9'
    assert transaction.type == 'New'
    assert transaction.amount == 700_000
    assert transaction.source == 'Referral'
    assert transaction.member_name == '신규'
    assert empty_store.transactions == (transaction,)
    assert empty_store.inbody_entries[0].weight == 72.5


def test_register_member_without_payment(empty_store):
    assert empty_store.register_member(Member('9', '무료')) is None
    assert empty_store.transactions == ()
    assert empty_store.inbody_entries == []


def test_register_duplicate_member_rejected(demo_store):
    with pytest.raises(DataValidationError):
        demo_store.register_member(Member('1', '중복'))


def test_renew_member_updates_sessions_and_payment(demo_store):
    before = demo_store.find_member('1')

    transaction = demo_store.renew_member('1', 600_000, 10, '2025-03-02')

    after = demo_store.find_member('1')
    assert transaction.type == 'Renewal'
    assert transaction.session_count == 10
    assert after.total_sessions == before.total_sessions + 10
    assert after.payment_amount == before.payment_amount + 600_000
    assert demo_store.transactions[-1] == transaction


def test_renew_member_validation(demo_store):
    with pytest.raises(MemberNotFoundError):
        demo_store.renew_member('404', 1, 1, '2025-03-02')
    with pytest.raises(DataValidationError):
        demo_store.renew_member('1', 0, 1, '2025-03-02')
    with pytest.raises(DataValidationError):
        demo_store.renew_member('1', 1, 0, '2025-03-02')


def test_transaction_name_is_a_snapshot(demo_store):
    member = demo_store.find_member('1')
    demo_store.update_member(Member(**{**member.to_dict(), 'name': '개명'}))

    assert demo_store.transactions[0].member_name == '김민수'


def test_transactions_view_is_read_only(demo_store):
    assert isinstance(demo_store.transactions, tuple)


def test_update_member_goal(demo_store):
    demo_store.update_member_goal('2', '마라톤 완주')
    assert demo_store.find_member('2').goal == '마라톤 완주'


def test_derive_role():
    assert derive_role('trainer', '지점장') == 'manager'
    assert derive_role('manager', '트레이너') == 'trainer'
    assert derive_role('admin', '지점장') == 'manager'
    assert derive_role('admin', '팀장') == 'admin'


def test_update_staff_keeps_role_consistent(demo_store):
    updated = demo_store.update_staff('u3', '지점장', '병영점')
    assert updated.role == 'manager'
    assert demo_store.find_staff('u3').branch_name == '병영점'

    updated = demo_store.update_staff('u1', '팀장', '')
    assert updated.role == 'trainer'
    assert updated.branch_name == ''


def test_update_staff_validation(demo_store):
    with pytest.raises(DataValidationError):
        demo_store.update_staff('u2', '인턴', '야음점')
    with pytest.raises(BranchNotFoundError):
        demo_store.update_staff('u2', '팀장', '없는점')
    with pytest.raises(StaffNotFoundError):
        demo_store.update_staff('nobody', '팀장', '야음점')


def test_add_staff_rejects_duplicate_id(demo_store):
    with pytest.raises(DataValidationError):
        demo_store.add_staff(StaffMember('u1', '중복'))


def test_submit_survey_computes_rating(demo_store):
    member = demo_store.find_member('1')
    scores = dict(ALL_FOURS, focus=5, kindness=5)

    result = demo_store.submit_survey('u2', member, scores, '좋아요', '비밀', on_date='2025-03-01')

    assert result.rating == 4.3
    assert demo_store.survey_results[0] == result
    assert result.private_comment == '비밀'


def test_submit_survey_validation(demo_store):
    member = demo_store.find_member('1')
    with pytest.raises(DataValidationError):
        demo_store.submit_survey('u2', member, dict(ALL_FOURS, focus=6))
    missing = dict(ALL_FOURS)
    del missing['focus']
    with pytest.raises(DataValidationError):
        demo_store.submit_survey('u2', member, missing)


def test_round_rating_half_up():
    assert round_rating(4.25) == 4.3
    assert round_rating(4.0) == 4.0


def test_diet_feedback(demo_store):
    assert demo_store.add_diet_feedback('d1', '좋아요') is True
    assert demo_store.diet_entries[0].trainer_feedback == '좋아요'
    assert demo_store.add_diet_feedback('nope', 'x') is False


def test_equipment_names_are_unique(demo_store):
    count = len(demo_store.equipment)

    assert demo_store.add_equipment('벤치 프레스', '가슴') is False
    assert demo_store.add_equipment('  스미스 머신  ', '하체') is True
    assert demo_store.add_equipment('', '기타') is False
    assert len(demo_store.equipment) == count + 1
    with pytest.raises(DataValidationError):
        demo_store.add_equipment('새 기구', '없는분류')


def test_demo_store_is_fresh_per_call(demo_store):
    from utils.studio_performance import build_demo_store

    demo_store.branches.append('신규점')
    assert '신규점' not in build_demo_store().branches
    assert len(demo_store.members) == 4
    assert len(demo_store.staff) == 5
    assert len(demo_store.transactions) == 4


def test_constructor_dedupes_branches():
    assert StudioStore(branches=['A', 'A', 'B']).branches == ['A', 'B']


def test_log_entries_keep_their_order(empty_store):
    from utils.studio_performance import InBodyEntry, Schedule, WorkoutEntry

    empty_store.add_schedule(Schedule('s1', '1', '하나', '2025-03-01T10:00'))
    empty_store.add_schedule(Schedule('s2', '1', '하나', '2025-03-02T10:00'))
    empty_store.add_workout_entry(WorkoutEntry('w1', '1', '2025-03-01', '상체', 50))
    empty_store.add_workout_entry(WorkoutEntry('w2', '1', '2025-03-02', '하체', 50))
    empty_store.add_inbody_entry(InBodyEntry('i1', '1', '2025-03-01', 70.0))
    empty_store.add_inbody_entry(InBodyEntry('i2', '1', '2025-04-01', 69.0))

    assert [s.id for s in empty_store.schedules] == ['s1', 's2']
    assert [w.id for w in empty_store.workout_entries] == ['w2', 'w1']
    assert [i.id for i in empty_store.inbody_entries] == ['i1', 'i2']


def test_update_staff_admin_to_branch_manager_becomes_manager(demo_store):
    demo_store.add_staff(StaffMember('a1', '본사', 'admin'))

    updated = demo_store.update_staff('a1', '지점장', '야음점')

    assert updated.role == 'manager'
    assert updated.position == '지점장'


def test_submit_survey_rejects_non_numeric_score(demo_store):
    member = demo_store.find_member('1')
    count = len(demo_store.survey_results)

    with pytest.raises(DataValidationError):
        demo_store.submit_survey('u2', member, dict(ALL_FOURS, kindness='five'))
    with pytest.raises(DataValidationError):
        demo_store.submit_survey('u2', member, dict(ALL_FOURS, focus=None))

    assert len(demo_store.survey_results) == count


# =============================================================================
# PENDING EQUIPMENT
# =============================================================================

def test_report_equipment_queues_unknown_names_once(demo_store):
    assert demo_store.report_equipment('스미스 머신') is True
    assert demo_store.report_equipment(' 스미스 머신 ') is False
    assert demo_store.report_equipment('벤치 프레스') is False
    assert demo_store.report_equipment('') is False
    assert demo_store.pending_equipment == ['스미스 머신']


def test_approve_equipment_moves_it_to_catalog(demo_store):
    demo_store.report_equipment('힙 쓰러스트 머신')

    assert demo_store.approve_equipment('힙 쓰러스트 머신', '하체') is True

    assert demo_store.pending_equipment == []
    added = demo_store.equipment[-1]
    assert (added.name, added.category) == ('힙 쓰러스트 머신', '하체')
    assert demo_store.approve_equipment('힙 쓰러스트 머신', '하체') is False


def test_approve_equipment_validates_category(demo_store):
    demo_store.report_equipment('로잉 머신')

    with pytest.raises(DataValidationError):
        demo_store.approve_equipment('로잉 머신', '없는분류')

    assert demo_store.pending_equipment == ['로잉 머신']


def test_reject_equipment(demo_store):
    demo_store.report_equipment('로잉 머신')

    assert demo_store.reject_equipment('로잉 머신') is True
    assert demo_store.reject_equipment('로잉 머신') is False
    assert demo_store.pending_equipment == []
    assert all(e.name != '로잉 머신' for e in demo_store.equipment)
