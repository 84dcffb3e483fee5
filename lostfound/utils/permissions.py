"""Who may do what to users and lost & found items.

Pure decisions, no I/O: callers load the records and act on the answer.
"""

from lostfound.models.user import UserRole


def is_admin(actor_role) -> bool:
    return actor_role == UserRole.admin


def can_create_item(actor_role) -> bool:
    # any authenticated user
    return actor_role in (UserRole.student, UserRole.admin)


def can_mark_claimed(actor_id, actor_role, reported_by) -> bool:
    if is_admin(actor_role):
        return True
    return reported_by is not None and str(actor_id) == str(reported_by)


def can_unmark_claimed(actor_role) -> bool:
    return is_admin(actor_role)


def can_delete_item(actor_role) -> bool:
    return is_admin(actor_role)


def can_list_users(actor_role) -> bool:
    return is_admin(actor_role)


def can_delete_user(actor_id, actor_role, target_id) -> bool:
    return is_admin(actor_role) and str(actor_id) != str(target_id)
