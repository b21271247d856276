import pandas as pd
import pytest

from utils.studio_performance import (
    AccessControl,
    Identity,
    Member,
    MemberNotFoundError,
    StudioStore,
    project_survey_result,
)


@pytest.fixture
def store():
    return StudioStore(members=[
        Member('1', '하나', trainer_id='u2'),
        Member('2', '둘', trainer_id=''),
        Member('3', '셋', trainer_id='u3'),
    ])


def test_access_levels(identities, demo_store):
    assert AccessControl(identities['admin'], demo_store).get_access_level() == 'full'
    assert AccessControl(identities['manager'], demo_store).get_access_level() == 'full'
    assert AccessControl(identities['trainer'], demo_store).get_access_level() == 'assigned'
    assert AccessControl(identities['member'], demo_store).get_access_level() == 'self'


def test_trainer_sees_own_and_unassigned(store):
    access = AccessControl(Identity('u2', 'trainer'), store)
    assert [m.id for m in access.visible_members()] == ['1', '2']


def test_manager_sees_everyone(store):
    access = AccessControl(Identity('u1', 'manager'), store)
    assert len(access.visible_members()) == 3


def test_member_sees_only_self(store):
    access = AccessControl(Identity('m3', 'member', member_id='3'), store)
    assert [m.id for m in access.visible_members()] == ['3']


def test_member_without_record_is_an_error(store, member_identity):
    access = AccessControl(member_identity, store)
    with pytest.raises(MemberNotFoundError):
        access.visible_members()


def test_member_records_are_scoped(identities, demo_store):
    access = AccessControl(identities['member'], demo_store)

    assert {e.member_id for e in access.visible_inbody_entries()} == {'1'}
    assert {e.member_id for e in access.visible_diet_entries()} == {'1'}
    assert {s.member_id for s in access.visible_schedules()} == {'1'}
    assert {w.member_id for w in access.visible_workout_entries()} == {'1'}


def test_visible_staff_per_role(identities, demo_store):
    assert len(AccessControl(identities['admin'], demo_store).visible_staff()) == 5
    assert [s.id for s in AccessControl(identities['manager'], demo_store).visible_staff()] == ['u1', 'u2', 'u3']
    assert [s.id for s in AccessControl(identities['trainer'], demo_store).visible_staff()] == ['u2']
    assert AccessControl(identities['member'], demo_store).visible_staff() == []


def test_private_comment_hidden_from_trainer(identities, demo_store):
    results = AccessControl(identities['trainer'], demo_store).visible_survey_results()

    assert {r.trainer_id for r in results} == {'u2'}
    assert all(r.private_comment == '' for r in results)
    assert all(r.public_comment for r in results)


def test_private_comment_visible_to_manager(identities, demo_store):
    results = AccessControl(identities['manager'], demo_store).visible_survey_results()
    assert any(r.private_comment for r in results)


def test_projection_does_not_mutate_store(identities, demo_store):
    AccessControl(identities['member'], demo_store).visible_survey_results()
    assert demo_store.survey_results[0].private_comment


def test_project_survey_result_roles(demo_store):
    result = demo_store.survey_results[0]
    assert project_survey_result(result, 'admin').private_comment == result.private_comment
    assert project_survey_result(result, 'member').private_comment == ''


def test_filter_dataframe(store):
    df = pd.DataFrame({'member_id': ['1', '2', '3'], 'amount': [1, 2, 3]})

    trainer = AccessControl(Identity('u2', 'trainer'), store)
    assert list(trainer.filter_dataframe(df)['member_id']) == ['1', '2']

    admin = AccessControl(Identity('a', 'admin'), store)
    assert len(admin.filter_dataframe(df)) == 3

    assert trainer.filter_dataframe(df, 'missing').equals(df)
