import pytest

from utils.studio_performance import (
    DEMO_IDENTITIES,
    Identity,
    StaffMember,
    StudioStore,
    Transaction,
    build_demo_store,
)


@pytest.fixture
def demo_store():
    """Fresh demo studio (9 branches, 5 staff, 4 members)."""
    return build_demo_store()


@pytest.fixture
def empty_store():
    return StudioStore()


@pytest.fixture
def branch_store():
    """Two branches with one trainer each, no overrides."""
    return StudioStore(
        branches=['A', 'C'],
        staff=[
            StaffMember('t1', '트레이너A', 'trainer', '트레이너', 'A'),
            StaffMember('t2', '트레이너C', 'trainer', '트레이너', 'C'),
        ],
    )


@pytest.fixture
def identities():
    return dict(DEMO_IDENTITIES)


@pytest.fixture
def make_transaction():
    def _mk(tid, on_date, amount, type_='New', source='OT', member_id='1'):
        return Transaction(
            id=tid,
            member_id=member_id,
            member_name='회원',
            date=on_date,
            amount=amount,
            session_count=10,
            type=type_,
            source=source,
        )
    return _mk


@pytest.fixture
def member_identity():
    return Identity(id='m9', role='member', display_name='없는 회원', member_id='999')
