"""Role hierarchy: explicit rank table over UserRole and the comparisons moderation relies on.

Rank 0 is the highest role. Every UserRole member must have an entry; a missing
entry is a programming error and surfaces as KeyError.
"""

from app.models.user import UserRole

ROLE_RANKS: dict[UserRole, int] = {
    UserRole.SYSADMIN: 0,
    UserRole.ADMIN: 1,
    UserRole.MODERATOR: 2,
    UserRole.VETERAN: 3,
    UserRole.USER: 4,
}

# Roles allowed to act on other users' accounts (delete, ban).
MODERATION_ROLES: frozenset[UserRole] = frozenset(
    {UserRole.SYSADMIN, UserRole.ADMIN, UserRole.MODERATOR}
)


def rank_of(role: UserRole | str) -> int:
    """Rank index for a role or its string value. Unknown values raise ValueError."""
    return ROLE_RANKS[UserRole(role)]


def is_higher_than(actor_role: UserRole | str, target_role: UserRole | str) -> bool:
    """True iff actor_role strictly outranks target_role. Equal roles are not higher."""
    return rank_of(actor_role) < rank_of(target_role)


def can_moderate(role: UserRole | str) -> bool:
    return UserRole(role) in MODERATION_ROLES


def outranks(actor_role: UserRole | str, target_role: UserRole | str) -> bool:
    """Moderation rule: actor holds a moderation role and strictly outranks the target."""
    return can_moderate(actor_role) and is_higher_than(actor_role, target_role)
