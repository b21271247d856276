# utils/studio_performance/revenue.py
"""
Revenue Aggregation

Exact aggregations over the transaction log:
- Monthly revenue (month matched by the "YYYY-MM" prefix of the date string)
- New-transaction revenue by sales source
- New vs Renewal breakdown
- Trailing monthly series for the revenue chart

No timezone normalization is done: a transaction belongs to the month given
by the first 7 characters of its date. Every call recomputes from the log, so
results do not depend on insertion order.
"""

import logging
from datetime import date, datetime
from typing import Dict, Iterable, List
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pandas as pd

from .constants import (
    DEFAULT_TRAILING_MONTHS,
    MONTH_KEY_LENGTH,
    SALES_SOURCES,
    TRANSACTION_COLUMNS,
    TRANSACTION_NEW,
    TRANSACTION_TYPES,
)
from .models import Transaction

logger = logging.getLogger(__name__)


def local_today(timezone: str = None) -> date:
    """Today's date in an IANA timezone; the host date when unset or unknown."""
    if not timezone:
        return date.today()
    try:
        return datetime.now(ZoneInfo(timezone)).date()
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown timezone '{timezone}', using host date")
        return date.today()


def current_month_key(today: date = None, timezone: str = None) -> str:
    """'YYYY-MM' of the given date, or of today in the given timezone."""
    today = today or local_today(timezone)
    return today.strftime('%Y-%m')


def month_label(month_key: str) -> str:
    """'2025-03' -> '3월'"""
    return f"{int(month_key[5:7])}월"


def shift_month_key(month_key: str, months: int) -> str:
    """Move a 'YYYY-MM' key by a number of months (negative = back)."""
    year, month = int(month_key[:4]), int(month_key[5:7])
    index = year * 12 + (month - 1) + months
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


def transactions_to_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Transaction log as a DataFrame with a derived month_key column."""
    df = pd.DataFrame([t.to_dict() for t in transactions], columns=TRANSACTION_COLUMNS)

    df['date'] = df['date'].fillna('').astype(str)
    df['source'] = df['source'].fillna('').astype(str)
    df['type'] = df['type'].fillna('').astype(str)
    df['amount'] = pd.to_numeric(df['amount'], errors='coerce').fillna(0).astype('int64')
    df['month_key'] = df['date'].str[:MONTH_KEY_LENGTH]

    return df


def monthly_revenue(transactions: Iterable[Transaction], month_key: str = None) -> int:
    """Exact revenue of a month for a plain list of transactions."""
    return RevenueAggregator(transactions).monthly_revenue(month_key)


class RevenueAggregator:
    """
    Revenue calculations over a snapshot of the transaction log.

    Usage:
        revenue = RevenueAggregator(store.transactions)

        revenue.monthly_revenue('2025-01')          # 150
        revenue.revenue_by_source('2025-01')        # {'OT': {'count': 1, 'amount': 100}, ...}
        revenue.revenue_by_type('2025-01')          # {'New': 100, 'Renewal': 50}
        revenue.trailing_monthly_series(6)          # [{'month_key': ..., 'month_label': ..., 'amount': ...}]
    """

    def __init__(self, transactions: Iterable[Transaction]):
        self.df = transactions_to_frame(transactions)

    def _month(self, month_key: str = None) -> pd.DataFrame:
        key = month_key or current_month_key()
        return self.df[self.df['month_key'] == key]

    # =========================================================================
    # MONTHLY TOTALS
    # =========================================================================

    def monthly_revenue(self, month_key: str = None) -> int:
        """Sum of amounts for the month (default: current month)."""
        return int(self._month(month_key)['amount'].sum())

    def revenue_by_type(self, month_key: str = None) -> Dict[str, int]:
        """New vs Renewal revenue for the month."""
        month_df = self._month(month_key)
        totals = month_df.groupby('type')['amount'].sum()
        return {t: int(totals.get(t, 0)) for t in TRANSACTION_TYPES}

    def revenue_by_source(self, month_key: str = None) -> Dict[str, Dict[str, int]]:
        """
        Count and amount of New transactions per sales source.

        Renewals carry no source and are excluded. Every known source is
        present in the result, zero-filled.
        """
        month_df = self._month(month_key)
        new_df = month_df[
            (month_df['type'] == TRANSACTION_NEW) &
            (month_df['source'].isin(SALES_SOURCES))
        ]

        result = {source: {'count': 0, 'amount': 0} for source in SALES_SOURCES}

        if new_df.empty:
            return result

        grouped = new_df.groupby('source')['amount'].agg(['count', 'sum'])
        for source, row in grouped.iterrows():
            result[source] = {'count': int(row['count']), 'amount': int(row['sum'])}

        return result

    # =========================================================================
    # TRAILING SERIES
    # =========================================================================

    def trailing_monthly_series(
        self,
        n: int = DEFAULT_TRAILING_MONTHS,
        as_of: date = None
    ) -> List[Dict]:
        """
        Exactly n monthly buckets ending at the month of as_of (default today),
        oldest first, months without transactions at 0.
        """
        if n <= 0:
            return []

        last_key = current_month_key(as_of)
        keys = [shift_month_key(last_key, -offset) for offset in range(n - 1, -1, -1)]

        totals = self.df[self.df['month_key'].isin(keys)].groupby('month_key')['amount'].sum()

        return [
            {
                'month_key': key,
                'month_label': month_label(key),
                'amount': int(totals.get(key, 0)),
            }
            for key in keys
        ]

    def trailing_monthly_frame(
        self,
        n: int = DEFAULT_TRAILING_MONTHS,
        as_of: date = None
    ) -> pd.DataFrame:
        """Trailing series as a DataFrame for charts."""
        return pd.DataFrame(
            self.trailing_monthly_series(n, as_of),
            columns=['month_key', 'month_label', 'amount']
        )
