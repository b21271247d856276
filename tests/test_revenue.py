from datetime import date, datetime, timezone

import utils.studio_performance.revenue as revenue_module

from utils.studio_performance import (
    RevenueAggregator,
    current_month_key,
    local_today,
    month_label,
    monthly_revenue,
    shift_month_key,
)


def test_monthly_revenue_sums_by_month_prefix(make_transaction):
    transactions = [
        make_transaction('t1', '2025-01-10', 100),
        make_transaction('t2', '2025-01-20', 50),
        make_transaction('t3', '2025-02-01', 999),
    ]
    assert monthly_revenue(transactions, '2025-01') == 150


def test_monthly_revenue_is_order_independent(make_transaction):
    transactions = [
        make_transaction('t1', '2025-01-10', 100),
        make_transaction('t2', '2025-01-20', 50),
        make_transaction('t3', '2025-01-31T23:59:00', 7),
    ]
    forward = monthly_revenue(transactions, '2025-01')
    backward = monthly_revenue(list(reversed(transactions)), '2025-01')
    assert forward == backward == 157


def test_empty_log_has_zero_revenue():
    revenue = RevenueAggregator([])
    assert revenue.monthly_revenue('2025-01') == 0
    assert revenue.revenue_by_type('2025-01') == {'New': 0, 'Renewal': 0}
    assert all(v == {'count': 0, 'amount': 0} for v in revenue.revenue_by_source('2025-01').values())


def test_revenue_by_type(make_transaction):
    revenue = RevenueAggregator([
        make_transaction('t1', '2025-01-10', 100),
        make_transaction('t2', '2025-01-11', 40, type_='Renewal', source=''),
    ])
    assert revenue.revenue_by_type('2025-01') == {'New': 100, 'Renewal': 40}


def test_revenue_by_source_counts_new_only(make_transaction):
    revenue = RevenueAggregator([
        make_transaction('t1', '2025-01-10', 100, source='OT'),
        make_transaction('t2', '2025-01-11', 200, source='OT'),
        make_transaction('t3', '2025-01-12', 300, source='Referral'),
        make_transaction('t4', '2025-01-13', 400, type_='Renewal', source='OT'),
    ])
    by_source = revenue.revenue_by_source('2025-01')

    assert by_source['OT'] == {'count': 2, 'amount': 300}
    assert by_source['Referral'] == {'count': 1, 'amount': 300}
    assert by_source['WalkIn'] == {'count': 0, 'amount': 0}
    assert set(by_source) == {'OT', 'Referral', 'FreeTrial', 'WalkIn', 'Other'}


def test_trailing_series_has_n_buckets_oldest_first(make_transaction):
    revenue = RevenueAggregator([
        make_transaction('t1', '2024-11-05', 100),
        make_transaction('t2', '2025-01-15', 50),
        make_transaction('t3', '2024-01-15', 9999),
    ])
    series = revenue.trailing_monthly_series(3, as_of=date(2025, 1, 20))

    assert [b['month_key'] for b in series] == ['2024-11', '2024-12', '2025-01']
    assert [b['amount'] for b in series] == [100, 0, 50]
    assert [b['month_label'] for b in series] == ['11월', '12월', '1월']


def test_trailing_series_non_positive_n_is_empty():
    assert RevenueAggregator([]).trailing_monthly_series(0) == []


def test_month_key_helpers():
    assert current_month_key(date(2025, 3, 9)) == '2025-03'
    assert shift_month_key('2025-01', -1) == '2024-12'
    assert shift_month_key('2024-12', 1) == '2025-01'
    assert month_label('2025-03') == '3월'


def test_default_month_is_current(make_transaction):
    today = date.today().isoformat()
    revenue = RevenueAggregator([make_transaction('t1', today, 70)])
    assert revenue.monthly_revenue() == 70


def test_month_key_in_timezone(monkeypatch):
    class FixedDatetime(datetime):
        @classmethod
        def now(cls, tz=None):
            # 2025-03-31 20:00 UTC is already April in Seoul
            return datetime(2025, 3, 31, 20, 0, tzinfo=timezone.utc).astimezone(tz)

    monkeypatch.setattr(revenue_module, 'datetime', FixedDatetime)

    assert local_today('Asia/Seoul') == date(2025, 4, 1)
    assert current_month_key(timezone='Asia/Seoul') == '2025-04'
    assert current_month_key(timezone='UTC') == '2025-03'


def test_unknown_timezone_uses_host_date():
    assert local_today('Mars/Olympus_Mons') == date.today()
    assert local_today(None) == date.today()
