# utils/studio_performance/branches.py
"""
Branch Lifecycle for Studio Performance

A branch is identified by its name. Create / rename / delete keep three
collections consistent:
- the branch list
- staff.branch_name of every staff member
- the branch key of the target override map

Each operation builds all new collections first and assigns them together,
so a failure part-way leaves the store as it was.
"""

import logging
from dataclasses import replace

logger = logging.getLogger(__name__)


class BranchManager:
    """
    Branch create / rename / delete over a StudioStore.

    Usage:
        branches = BranchManager(store)
        branches.create('신정점')
        branches.rename('신정점', '신정2호점')   # staff and overrides follow
        branches.delete('신정2호점')             # staff unassigned, overrides dropped
    """

    def __init__(self, store):
        self.store = store

    def create(self, name: str) -> bool:
        """Append a branch. Blank or already listed names are ignored."""
        name = (name or '').strip()
        if not name:
            return False
        if name in self.store.branches:
            logger.debug(f"Branch already exists: {name}")
            return False

        self.store.branches = self.store.branches + [name]
        logger.info(f"Branch created: {name}")
        return True

    def rename(self, old_name: str, new_name: str) -> bool:
        """
        Rename a branch.

        Staff of the branch move with it and its override map entry is moved
        (not merged) to the new name. An existing entry under the new name is
        overwritten. Renaming onto a name already in the list drops the old
        list entry.
        """
        new_name = (new_name or '').strip()
        if not new_name or old_name == new_name:
            return False
        if old_name not in self.store.branches:
            logger.warning(f"Rename of unknown branch ignored: {old_name}")
            return False

        if new_name in self.store.branches:
            branches = [b for b in self.store.branches if b != old_name]
        else:
            branches = [new_name if b == old_name else b for b in self.store.branches]

        moved = 0
        staff = []
        for s in self.store.staff:
            if s.branch_name == old_name:
                staff.append(replace(s, branch_name=new_name))
                moved += 1
            else:
                staff.append(s)

        overrides = {
            branch: dict(positions)
            for branch, positions in self.store.target_overrides.items()
            if branch != old_name
        }
        has_overrides = old_name in self.store.target_overrides
        if has_overrides:
            overrides[new_name] = dict(self.store.target_overrides[old_name])

        self.store.branches = branches
        self.store.staff = staff
        self.store.target_overrides = overrides

        logger.info(
            f"Branch renamed: {old_name} -> {new_name} "
            f"({moved} staff{', overrides moved' if has_overrides else ''})"
        )
        return True

    def delete(self, name: str) -> bool:
        """Remove a branch; its staff become unassigned and its overrides are dropped."""
        if name not in self.store.branches:
            logger.debug(f"Delete of unknown branch ignored: {name}")
            return False

        branches = [b for b in self.store.branches if b != name]

        unassigned = 0
        staff = []
        for s in self.store.staff:
            if s.branch_name == name:
                staff.append(replace(s, branch_name=''))
                unassigned += 1
            else:
                staff.append(s)

        overrides = {
            branch: dict(positions)
            for branch, positions in self.store.target_overrides.items()
            if branch != name
        }

        self.store.branches = branches
        self.store.staff = staff
        self.store.target_overrides = overrides

        logger.info(f"Branch deleted: {name} ({unassigned} staff unassigned)")
        return True
