# utils/studio_performance/exceptions.py
"""
Exception types for the studio performance module.
"""


class StudioError(Exception):
    """Base class for studio domain errors"""
    pass


class DataValidationError(StudioError, ValueError):
    """Input rejected by a store or target operation"""
    pass


class MemberNotFoundError(StudioError, LookupError):
    """A member id (or a member identity) has no matching Member record"""

    def __init__(self, member_id):
        self.member_id = member_id
        super().__init__(f"No member record for id '{member_id}'")


class StaffNotFoundError(StudioError, LookupError):
    """A staff id has no matching StaffMember record"""

    def __init__(self, staff_id):
        self.staff_id = staff_id
        super().__init__(f"No staff record for id '{staff_id}'")


class BranchNotFoundError(StudioError, LookupError):
    """A branch name is not in the active branch list"""

    def __init__(self, branch_name):
        self.branch_name = branch_name
        super().__init__(f"Unknown branch '{branch_name}'")


class AIEstimationError(StudioError):
    """The AI estimation service failed or replied with unusable content"""
    pass
