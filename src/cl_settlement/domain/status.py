"""Account status derivation.

Status is recomputed from facts every time it is shown or an entry is
written; the only thing persisted is the manual inactive override.
"""

from src.cl_common.enums import AccountStatus


def derive_account_status(
    entry_count: int,
    inactive_override: bool,
    has_assigned_player: bool = False,
) -> AccountStatus:
    """inactive override > (assigned player or any entry) > unused."""
    if inactive_override:
        return AccountStatus.INACTIVE
    if has_assigned_player or entry_count > 0:
        return AccountStatus.ACTIVE
    return AccountStatus.UNUSED
