import math

import pytest

from utils.studio_performance import (
    BranchAchievement,
    StaffMember,
    StudioMetrics,
    StudioStore,
    SurveyResult,
    Transaction,
    achievement_rate,
)


def _tx(tid, on_date, amount):
    return Transaction(tid, '1', '회원', on_date, amount, 10)


@pytest.fixture
def store():
    return StudioStore(
        branches=['A', 'B', 'Empty'],
        staff=[
            StaffMember('m1', '지점장', 'manager', '지점장', 'A'),
            StaffMember('t1', '트레이너1', 'trainer', '트레이너', 'A'),
            StaffMember('t2', '트레이너2', 'trainer', 'LV3 트레이너', 'A'),
            StaffMember('t3', '트레이너3', 'trainer', '트레이너', 'B'),
        ],
        transactions=[
            _tx('x1', '2025-01-10', 8_000_000),
            _tx('x2', '2025-01-20', 4_000_000),
        ],
        survey_results=[
            SurveyResult('s1', 't1', '1', '회원', '2025-01-20', 5.0),
            SurveyResult('s2', 't1', '2', '회원', '2025-01-21', 4.0),
            SurveyResult('s3', 't3', '3', '회원', '2025-01-22', 3.0),
        ],
    )


def test_rate_is_zero_when_target_is_zero():
    assert achievement_rate(1_000_000, 0) == 0.0
    assert achievement_rate(0, 0) == 0.0
    assert not math.isnan(achievement_rate(5, 0))


def test_staff_achievement(store):
    metrics = StudioMetrics(store)
    result = metrics.staff_achievement(store.find_staff('t1'), 4_500_000)

    assert result.target == 9_000_000
    assert result.rate_percent == pytest.approx(50.0)


def test_branch_manager_achievement_is_zero_rate(store):
    metrics = StudioMetrics(store)
    result = metrics.staff_achievement(store.find_staff('m1'), 1_000_000)
    assert result.target == 0
    assert result.rate_percent == 0.0


def test_org_achievement_uses_exact_revenue(store):
    metrics = StudioMetrics(store)
    org = metrics.org_achievement(month_key='2025-01')

    assert org.revenue == 12_000_000
    assert org.target == 28_000_000
    assert org.rate_percent == pytest.approx(12_000_000 / 28_000_000 * 100)


def test_branch_estimate_is_weighted_by_staff_count(store):
    metrics = StudioMetrics(store)
    branch = metrics.branch_achievement('A', store.staff, 12_000_000)

    assert branch.staff_count == 3
    assert branch.target == 19_000_000
    assert branch.estimated_revenue == pytest.approx(9_000_000)


def test_empty_branch_gets_half_weight_and_zero_rate(store):
    metrics = StudioMetrics(store)
    branch = metrics.branch_achievement('Empty', store.staff, 12_000_000)

    assert branch.staff_count == 0
    assert branch.target == 0
    assert branch.estimated_revenue == pytest.approx(12_000_000 * 0.5 / 4)
    assert branch.rate_percent == 0.0


def test_branch_achievement_without_any_staff():
    metrics = StudioMetrics(StudioStore(branches=['A']))
    branch = metrics.branch_achievement('A', [], 1_000)
    assert branch.estimated_revenue == pytest.approx(500)
    assert branch.rate_percent == 0.0


def test_branch_summary_follows_branch_order(store):
    rows = StudioMetrics(store).branch_summary(org_revenue=12_000_000)
    assert [r.branch_name for r in rows] == ['A', 'B', 'Empty']


def test_branch_summary_frame_is_ranked(store):
    df = StudioMetrics(store).branch_summary_frame(org_revenue=12_000_000)
    assert list(df['rate_percent']) == sorted(df['rate_percent'], reverse=True)
    assert 'estimated_revenue' in df.columns


def test_trainer_ladder_and_share(store):
    rows = StudioMetrics(store).trainer_performance('A', 1_000_000)

    assert [r.staff_id for r in rows] == ['t1', 't2']
    assert rows[0].estimated_revenue == pytest.approx(150_000)
    assert rows[1].estimated_revenue == pytest.approx(200_000)
    assert rows[0].revenue_share_percent == pytest.approx(150 / 350 * 100)
    assert sum(r.revenue_share_percent for r in rows) == pytest.approx(100)
    assert rows[0].satisfaction == 4.5


def test_trainer_share_is_zero_without_branch_revenue(store):
    rows = StudioMetrics(store).trainer_performance('A', 0)
    assert all(r.revenue_share_percent == 0.0 for r in rows)


def test_trainer_self_achievement(store):
    metrics = StudioMetrics(store)
    result = metrics.trainer_self_achievement(store.find_staff('t1'), '2025-01')

    # branch A estimate 9,000,000, first trainer 15%
    assert result.revenue == pytest.approx(1_350_000)
    assert result.target == 9_000_000


def test_rank_is_stable_for_ties():
    rows = [
        BranchAchievement('first', 1, 10, 5, 50.0),
        BranchAchievement('top', 1, 10, 9, 90.0),
        BranchAchievement('second', 1, 10, 5, 50.0),
    ]
    ranked = StudioMetrics.rank_by_achievement(rows)
    assert [r.branch_name for r in ranked] == ['top', 'first', 'second']


def test_satisfaction_averages(store):
    metrics = StudioMetrics(store)

    assert metrics.satisfaction_average([]) == 0.0
    assert metrics.trainer_satisfaction('t1') == 4.5
    assert metrics.trainer_satisfaction('t2') == 0.0
    assert metrics.global_satisfaction() == 4.0


def test_overview_counts(store):
    overview = StudioMetrics(store).overview('2025-01')

    assert overview['revenue'] == 12_000_000
    assert overview['total_branches'] == 3
    assert overview['total_managers'] == 1
    assert overview['total_trainers'] == 3
