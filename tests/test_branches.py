import pytest

from utils.studio_performance import BranchManager, TargetResolver


def test_create_branch(branch_store):
    branches = BranchManager(branch_store)

    assert branches.create('  B  ') is True
    assert branch_store.branches == ['A', 'C', 'B']
    assert branches.create('B') is False
    assert branches.create('   ') is False
    assert branch_store.branches == ['A', 'C', 'B']


def test_rename_moves_staff_and_override(branch_store):
    resolver = TargetResolver(branch_store)
    resolver.set_target_override('A', '트레이너', 5_000_000)

    assert BranchManager(branch_store).rename('A', 'B') is True

    assert branch_store.branches == ['B', 'C']
    assert branch_store.find_staff('t1').branch_name == 'B'
    assert branch_store.target_overrides == {'B': {'트레이너': 5_000_000}}
    assert resolver.resolve_target(branch_store.find_staff('t1')) == 5_000_000
    assert not any(s.branch_name == 'A' for s in branch_store.staff)


def test_rename_strips_and_ignores_noop(branch_store):
    branches = BranchManager(branch_store)

    assert branches.rename('A', 'A') is False
    assert branches.rename('A', '   ') is False
    assert branches.rename('Z', 'Y') is False
    assert branches.rename('A', ' B ') is True
    assert 'B' in branch_store.branches


def test_rename_onto_existing_name_overwrites_override(branch_store):
    resolver = TargetResolver(branch_store)
    resolver.set_target_override('A', '트레이너', 5_000_000)
    resolver.set_target_override('C', '트레이너', 7_000_000)

    BranchManager(branch_store).rename('A', 'C')

    assert branch_store.branches == ['C']
    assert branch_store.target_overrides == {'C': {'트레이너': 5_000_000}}
    assert [s.branch_name for s in branch_store.staff] == ['C', 'C']


def test_delete_unassigns_staff_and_purges_overrides(branch_store):
    resolver = TargetResolver(branch_store)
    resolver.set_target_override('A', '트레이너', 5_000_000)

    assert BranchManager(branch_store).delete('A') is True

    assert branch_store.branches == ['C']
    assert branch_store.find_staff('t1').branch_name == ''
    assert 'A' not in branch_store.target_overrides
    assert resolver.resolve_target(branch_store.find_staff('t1')) == 0


def test_recreated_branch_gets_defaults_after_delete(branch_store):
    resolver = TargetResolver(branch_store)
    branches = BranchManager(branch_store)
    resolver.set_target_override('A', '트레이너', 5_000_000)

    branches.delete('A')
    branches.create('A')
    branch_store.update_staff('t1', '트레이너', 'A')

    assert resolver.resolve_target(branch_store.find_staff('t1')) == 9_000_000


def test_delete_unknown_branch_is_noop(branch_store):
    assert BranchManager(branch_store).delete('Z') is False
    assert branch_store.branches == ['A', 'C']


def test_failed_rename_leaves_store_untouched(branch_store, monkeypatch):
    import utils.studio_performance.branches as branches_module

    def boom(*args, **kwargs):
        raise RuntimeError("copy failed")

    branch_store.target_overrides = {'A': {'트레이너': 1}}
    monkeypatch.setattr(branches_module, 'replace', boom)

    with pytest.raises(RuntimeError):
        BranchManager(branch_store).rename('A', 'B')

    assert branch_store.branches == ['A', 'C']
    assert branch_store.find_staff('t1').branch_name == 'A'
    assert branch_store.target_overrides == {'A': {'트레이너': 1}}
